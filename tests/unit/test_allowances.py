"""Unit tests for the bracket table and allowance normalization."""

import math

import pytest

from taxcalc.sdk.taxes import (
    Allowance,
    Bracket,
    DEFAULT_MAX_K_RECEIPT,
    MAX_DONATION,
    get_brackets,
    k_receipt_ceiling,
    normalize_allowances,
    tax_in_bracket,
)


def allowances(*pairs):
    return [Allowance(allowance_type=t, amount=a) for t, a in pairs]


class TestBracketTable:

    def test_five_brackets(self):
        assert [(b.lower, b.upper, b.rate) for b in get_brackets()] == [
            (0, 150000, 0),
            (150000, 500000, 10),
            (500000, 1000000, 15),
            (1000000, 2000000, 20),
            (2000000, math.inf, 35),
        ]

    def test_contiguous_and_ordered(self):
        brackets = get_brackets()
        assert brackets[0].lower == 0
        assert math.isinf(brackets[-1].upper)
        for low, high in zip(brackets, brackets[1:]):
            assert high.lower == low.upper
            assert high.rate >= low.rate

    def test_labels(self):
        assert [b.label for b in get_brackets()] == [
            "0-150,000",
            "150,001-500,000",
            "500,001-1,000,000",
            "1,000,001-2,000,000",
            "2,000,001 ขึ้นไป",
        ]

    def test_table_is_immutable(self):
        brackets = get_brackets()
        assert isinstance(brackets, tuple)
        with pytest.raises(ValueError):
            brackets[0].rate = 50
        assert get_brackets() is brackets

    @pytest.mark.parametrize("net_income,expected", [
        (100000, 0.0),
        (150000, 0.0),
        (300000, 15000.0),
        (900000, 35000.0),
    ])
    def test_tax_in_second_bracket(self, net_income, expected):
        assert tax_in_bracket(net_income, get_brackets()[1]) == expected

    def test_custom_bracket(self):
        bracket = Bracket(lower=100, upper=200, rate=50, label="100-200")
        assert tax_in_bracket(150, bracket) == 25


class TestNormalizeAllowances:

    def test_empty(self):
        totals = normalize_allowances([], 50000)
        assert totals.donation == 0
        assert totals.k_receipt == 0
        assert totals.total == 0

    def test_donation_sum_capped(self):
        totals = normalize_allowances(allowances(("donation", 80000), ("donation", 80000)), 50000)
        assert totals.donation == MAX_DONATION == 100000

    def test_donation_cap_ignores_config(self):
        totals = normalize_allowances(allowances(("donation", 150000)), 100000)
        assert totals.donation == 100000

    def test_k_receipt_capped(self):
        totals = normalize_allowances(allowances(("k-receipt", 30000), ("k-receipt", 30000)), 50000)
        assert totals.k_receipt == 50000

    def test_k_receipt_under_cap(self):
        totals = normalize_allowances(allowances(("k-receipt", 12000.5)), 50000)
        assert totals.k_receipt == 12000.5

    def test_combined_total(self):
        totals = normalize_allowances(
            allowances(("donation", 120000), ("k-receipt", 10000), ("donation", 5000)),
            50000,
        )
        assert totals.total == 110000

    @pytest.mark.parametrize("configured", [None, 0, 0.0])
    def test_unset_k_receipt_ceiling_uses_default(self, configured):
        assert k_receipt_ceiling(configured) == DEFAULT_MAX_K_RECEIPT == 50000
        totals = normalize_allowances(allowances(("k-receipt", 80000)), configured)
        assert totals.k_receipt == 50000

    def test_configured_ceiling(self):
        assert k_receipt_ceiling(25000) == 25000
