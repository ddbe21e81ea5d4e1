"""Single-record progressive tax calculation.

Net income is total income minus the personal deduction and the capped
allowances. It is split across the bracket table, each slice taxed at its
bracket's rate, and the sum is settled against the withholding tax already
paid to give either tax due or a refund.

No rounding is applied; amounts are plain floats end to end.
"""

import logging
import os
from typing import TYPE_CHECKING, List, Optional, Sequence, Tuple

from .allowances import normalize_allowances
from .brackets import get_brackets, tax_in_bracket
from .schemas import Bracket, DeductionConfig, IncomeRecord, TaxLevel, TaxResult
from .validation import validate_income_record

if TYPE_CHECKING:
    from ..deductions import DeductionStore

# Configure logging based on LOG_LEVEL environment variable
_log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, _log_level, logging.INFO),
    format="%(asctime)s.%(msecs)03d %(levelname)s: %(message)s",
    datefmt="%H:%M:%S"
)
logger = logging.getLogger(__name__)


def calculate_net_income(total_income: float, personal_deduction: float, total_allowance: float) -> float:
    """Income subject to bracket taxation. May be negative."""
    return total_income - personal_deduction - total_allowance


def calculate_bracket_tax(
    net_income: float,
    brackets: Optional[Sequence[Bracket]] = None,
) -> Tuple[float, List[TaxLevel]]:
    """Split net income across brackets.

    Args:
        net_income: Income after deductions and allowances
        brackets: Bracket table (defaults to the standard table)

    Returns:
        Tuple of (total_tax, per-bracket TaxLevel list in bracket order).
        total_tax is accumulated from the same values as the breakdown.
    """
    if brackets is None:
        brackets = get_brackets()

    total_tax = 0.0
    levels = []
    for bracket in brackets:
        tax = tax_in_bracket(net_income, bracket)
        total_tax += tax
        levels.append(TaxLevel(level=bracket.label, tax=tax))
    return total_tax, levels


def settle(total_tax: float, wht: float) -> Tuple[float, float]:
    """Settle computed tax against withholding.

    Returns:
        Tuple of (net_tax, refund); at most one is nonzero
    """
    if total_tax >= wht:
        return total_tax - wht, 0.0
    return 0.0, wht - total_tax


def calculate_tax(record: IncomeRecord, config: DeductionConfig) -> TaxResult:
    """Calculate tax for one validated record.

    Args:
        record: Income record (validate with validate_income_record first)
        config: Deduction snapshot

    Returns:
        TaxResult with net tax or refund and the per-bracket breakdown
    """
    allowances = normalize_allowances(record.allowances, config.max_k_receipt)
    net_income = calculate_net_income(record.total_income, config.personal, allowances.total)
    total_tax, levels = calculate_bracket_tax(net_income)
    net_tax, refund = settle(total_tax, record.wht)

    logger.debug(
        f"income={record.total_income} allowances={allowances.total} "
        f"net_income={net_income} total_tax={total_tax} wht={record.wht}"
    )

    return TaxResult(
        net_tax=net_tax,
        refund=refund,
        tax_levels=levels,
        total_tax=total_tax,
        net_income=net_income,
    )


def calculate_tax_from_store(record: IncomeRecord, store: "DeductionStore") -> TaxResult:
    """Validate a record, read one deduction snapshot, and calculate.

    Raises:
        TaxValidationError: invalid record (store is not read)
        DeductionStoreError: deductions could not be read
    """
    validate_income_record(record)
    config = store.snapshot()
    return calculate_tax(record, config)
