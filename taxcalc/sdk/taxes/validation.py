"""Input validation for tax calculations.

Checks run in a fixed order and stop at the first violation so callers
always get one deterministic message.
"""

import math
from typing import List, Sequence

from .schemas import Allowance, AllowanceType, IncomeRecord


CSV_HEADER = ("totalIncome", "wht", "donation")

_ALLOWANCE_TYPES = {t.value for t in AllowanceType}


class TaxValidationError(ValueError):
    """Raised when calculation input is malformed or out of range."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


def validate_allowances(allowances: Sequence[Allowance]) -> None:
    """Reject negative amounts and unknown allowance types."""
    for allowance in allowances:
        if not math.isfinite(allowance.amount):
            raise TaxValidationError("allowance amount must be a finite number.")
        if allowance.amount < 0:
            raise TaxValidationError("allowance amount must be non-negative.")
        if allowance.allowance_type not in _ALLOWANCE_TYPES:
            raise TaxValidationError("allowance type must be donation or k-receipt.")


def validate_income(total_income: float) -> None:
    if not math.isfinite(total_income):
        raise TaxValidationError("total income must be a finite number.")
    if total_income < 0:
        raise TaxValidationError("total income must be ≥ 0.")


def validate_wht(total_income: float, wht: float) -> None:
    if not math.isfinite(wht):
        raise TaxValidationError("withholding tax must be a finite number.")
    if wht < 0 or wht > total_income:
        raise TaxValidationError("withholding tax must be between 0 and total income.")


def validate_income_record(record: IncomeRecord) -> None:
    """Validate a record, raising TaxValidationError on the first violation.

    Order: allowances, total income, withholding tax.
    """
    validate_allowances(record.allowances)
    validate_income(record.total_income)
    validate_wht(record.total_income, record.wht)


def validate_csv_header(header: List[str]) -> None:
    """Require the header to be exactly ``totalIncome,wht,donation``."""
    if tuple(header) != CSV_HEADER:
        raise TaxValidationError(f"header must be '{','.join(CSV_HEADER)}'")
