"""Allowance normalization: reduce claimed allowances to capped totals."""

from dataclasses import dataclass
from typing import Iterable, Optional

from .schemas import Allowance, AllowanceType


MAX_DONATION = 100000.0
DEFAULT_MAX_K_RECEIPT = 50000.0


@dataclass(frozen=True)
class AllowanceTotals:
    """Donation and k-receipt sums after their caps were applied."""

    donation: float = 0.0
    k_receipt: float = 0.0

    @property
    def total(self) -> float:
        return self.donation + self.k_receipt


def clamp_donation(amount: float) -> float:
    """Cap a donation sum at MAX_DONATION."""
    return min(amount, MAX_DONATION)


def k_receipt_ceiling(max_k_receipt: Optional[float]) -> float:
    """Resolve the configured k-receipt ceiling.

    An unset or zero value falls back to DEFAULT_MAX_K_RECEIPT.
    """
    if not max_k_receipt:
        return DEFAULT_MAX_K_RECEIPT
    return max_k_receipt


def sum_allowances(allowances: Iterable[Allowance], allowance_type: AllowanceType) -> float:
    """Sum the amounts of every allowance of one type."""
    return sum(
        (a.amount for a in allowances if a.allowance_type == allowance_type.value),
        0.0,
    )


def normalize_allowances(
    allowances: Iterable[Allowance],
    max_k_receipt: Optional[float] = None,
) -> AllowanceTotals:
    """Sum and cap donation and k-receipt allowances.

    Args:
        allowances: Already validated allowances (known types, non-negative)
        max_k_receipt: Configured k-receipt ceiling (None/0 means default)

    Returns:
        AllowanceTotals with each category clamped to its ceiling
    """
    allowances = list(allowances)
    donation = clamp_donation(sum_allowances(allowances, AllowanceType.DONATION))
    k_receipt = min(
        sum_allowances(allowances, AllowanceType.K_RECEIPT),
        k_receipt_ceiling(max_k_receipt),
    )
    return AllowanceTotals(donation=donation, k_receipt=k_receipt)
