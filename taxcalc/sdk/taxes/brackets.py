"""Progressive tax bracket table.

Brackets are contiguous from 0 to infinity, ascending, with non-decreasing
rates. The table is built once at import and never mutated.
"""

import math
from typing import Tuple

from .schemas import Bracket


TAX_BRACKETS: Tuple[Bracket, ...] = (
    Bracket(lower=0, upper=150000, rate=0, label="0-150,000"),
    Bracket(lower=150000, upper=500000, rate=10, label="150,001-500,000"),
    Bracket(lower=500000, upper=1000000, rate=15, label="500,001-1,000,000"),
    Bracket(lower=1000000, upper=2000000, rate=20, label="1,000,001-2,000,000"),
    Bracket(lower=2000000, upper=math.inf, rate=35, label="2,000,001 ขึ้นไป"),
)


def get_brackets() -> Tuple[Bracket, ...]:
    """Return the bracket table in ascending order."""
    return TAX_BRACKETS


def tax_in_bracket(net_income: float, bracket: Bracket) -> float:
    """Tax owed on the slice of net_income that falls inside bracket.

    Returns 0 when net_income does not reach past the bracket's lower bound,
    which also covers negative net income.
    """
    if net_income <= bracket.lower:
        return 0.0
    taxable = min(net_income, bracket.upper) - bracket.lower
    return taxable * bracket.rate / 100
