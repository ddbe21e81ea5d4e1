"""Batch tax calculation over a CSV table.

Input layout (header required, exact names and order):

    totalIncome,wht,donation
    500000.0,0.0,0.0
    600000.0,40000.0,20000.0

Each data row is one income record with a single donation allowance. The
first structural or value error aborts the whole batch. K-receipt
allowances cannot be expressed in this layout, so only the personal
deduction is read from the store.
"""

import logging
import math
from typing import TYPE_CHECKING, List, TextIO, Tuple

from ..tabular import TabularReader
from .allowances import clamp_donation
from .engine import calculate_bracket_tax, calculate_net_income, settle
from .schemas import Allowance, AllowanceType, BatchResult, BatchRowResult, IncomeRecord
from .validation import CSV_HEADER, TaxValidationError, validate_csv_header, validate_income_record

if TYPE_CHECKING:
    from ..deductions import DeductionStore

logger = logging.getLogger(__name__)


def parse_row(row: List[str], row_number: int) -> Tuple[float, float, float]:
    """Parse one data row into (total_income, wht, donation).

    Raises:
        TaxValidationError: wrong column count or a non-numeric or non-finite column
    """
    if len(row) != len(CSV_HEADER):
        raise TaxValidationError(
            f"row {row_number}: expected {len(CSV_HEADER)} columns, got {len(row)}"
        )

    values = []
    for name, raw in zip(CSV_HEADER, row):
        try:
            values.append(float(raw))
        except ValueError:
            raise TaxValidationError(f"row {row_number}: {name} is not a number: {raw!r}")
        if not math.isfinite(values[-1]):
            raise TaxValidationError(f"row {row_number}: {name} must be a finite number: {raw!r}")
    return values[0], values[1], values[2]


def calculate_row(total_income: float, wht: float, donation: float, personal_deduction: float) -> BatchRowResult:
    """Calculate one batch row with the single-record arithmetic."""
    record = IncomeRecord(
        total_income=total_income,
        wht=wht,
        allowances=[Allowance(allowance_type=AllowanceType.DONATION.value, amount=donation)],
    )
    validate_income_record(record)

    net_income = calculate_net_income(total_income, personal_deduction, clamp_donation(donation))
    total_tax, _ = calculate_bracket_tax(net_income)
    net_tax, refund = settle(total_tax, wht)
    return BatchRowResult(total_income=total_income, net_tax=net_tax, refund=refund)


def calculate_batch(reader: TabularReader, store: "DeductionStore") -> BatchResult:
    """Calculate tax for every data row of a table.

    Args:
        reader: Reader positioned before the header row
        store: Deduction store (only the personal deduction is read)

    Returns:
        BatchResult with one entry per data row, in input order

    Raises:
        TaxValidationError: bad header, row shape, or row values
        DeductionStoreError: personal deduction could not be read
    """
    if not reader.read_row():
        if reader.error is not None:
            raise TaxValidationError(f"cannot read header: {reader.error}")
        raise TaxValidationError(f"header must be '{','.join(CSV_HEADER)}'")
    validate_csv_header(reader.current_row())

    personal_deduction = store.personal_deduction()

    results = []
    row_number = 0
    while reader.read_row():
        row_number += 1
        total_income, wht, donation = parse_row(reader.current_row(), row_number)
        try:
            results.append(calculate_row(total_income, wht, donation, personal_deduction))
        except TaxValidationError as e:
            raise TaxValidationError(f"row {row_number}: {e.message}") from e
    if reader.error is not None:
        raise TaxValidationError(f"row {row_number + 1}: {reader.error}")

    logger.debug(f"batch calculated {len(results)} row(s)")
    return BatchResult(taxes=results)


def calculate_batch_csv(stream: TextIO, store: "DeductionStore") -> BatchResult:
    """Calculate a batch from a text stream of CSV data."""
    return calculate_batch(TabularReader(stream), store)

