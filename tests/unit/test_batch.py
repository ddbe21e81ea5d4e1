"""Unit tests for CSV batch calculation."""

import io

import pytest

from taxcalc.sdk import DeductionStoreError, InMemoryDeductionStore, TabularReader
from taxcalc.sdk.taxes import (
    DeductionConfig,
    IncomeRecord,
    Allowance,
    TaxValidationError,
    calculate_batch,
    calculate_batch_csv,
    calculate_tax,
)


HEADER = "totalIncome,wht,donation\n"


@pytest.fixture
def store():
    return InMemoryDeductionStore(personal=60000, k_receipt=50000)


def run(csv_text, store):
    return calculate_batch_csv(io.StringIO(csv_text), store)


class KReceiptTrackingStore(InMemoryDeductionStore):
    """Fails loudly if the k-receipt ceiling is read."""

    def snapshot(self):
        raise AssertionError("batch must not read a full snapshot")

    def k_receipt_deduction(self):
        raise AssertionError("batch must not read the k-receipt ceiling")

    def personal_deduction(self):
        return 60000.0


class TestBatchResults:

    def test_rows_in_input_order(self, store):
        result = run(HEADER + "500000.0,0.0,0.0\n600000.0,40000.0,20000.0\n750000.0,50000.0,15000.0\n", store)
        assert [row.total_income for row in result.taxes] == [500000, 600000, 750000]
        assert result.taxes[0].net_tax == 29000
        assert result.taxes[0].refund == 0
        # 600000 - 60000 - 20000 = 520000 -> 35000 + 3000, minus 40000 wht
        assert result.taxes[1].net_tax == 0
        assert result.taxes[1].refund == 2000

    def test_matches_single_record_engine(self, store):
        rows = [(500000, 0, 0), (600000, 0, 0), (750000, 0, 0)]
        csv_text = HEADER + "".join(f"{i},{w},{d}\n" for i, w, d in rows)
        result = run(csv_text, store)

        config = DeductionConfig(personal=60000, max_k_receipt=50000)
        for (income, wht, donation), batch_row in zip(rows, result.taxes):
            single = calculate_tax(
                IncomeRecord(
                    total_income=income,
                    wht=wht,
                    allowances=[Allowance(allowance_type="donation", amount=donation)],
                ),
                config,
            )
            assert batch_row.net_tax == single.net_tax
            assert batch_row.refund == single.refund
        assert [row.net_tax for row in result.taxes] == [29000, 41000, 63500]

    def test_donation_capped(self, store):
        result = run(HEADER + "500000,0,200000\n", store)
        assert result.taxes[0].net_tax == 19000

    def test_header_only(self, store):
        assert run(HEADER, store).taxes == []

    def test_blank_lines_skipped(self, store):
        result = run(HEADER + "\n500000,0,0\n\n", store)
        assert len(result.taxes) == 1

    def test_wire_layout(self, store):
        dumped = run(HEADER + "560000,40000,0\n", store).model_dump(by_alias=True)
        assert dumped == {"taxes": [{"totalIncome": 560000.0, "tax": 0.0, "taxRefund": 5000.0}]}

    def test_only_personal_deduction_read(self):
        result = run(HEADER + "560000,0,0\n", KReceiptTrackingStore())
        assert result.taxes[0].net_tax == 35000

    def test_reader_interface(self, store):
        reader = TabularReader(io.StringIO(HEADER + "210000,0,0\n"))
        result = calculate_batch(reader, store)
        assert result.taxes[0].net_tax == 0


class TestBatchErrors:

    @pytest.mark.parametrize("header", [
        "",
        "totalIncome,wht\n",
        "totalIncome,wht,donation,extra\n",
        "wht,totalIncome,donation\n",
        "TotalIncome,wht,donation\n",
    ])
    def test_bad_header(self, store, header):
        with pytest.raises(TaxValidationError, match="header must be 'totalIncome,wht,donation'"):
            run(header + "500000,0,0\n" if header else header, store)

    @pytest.mark.parametrize("row", ["500000,0\n", "500000,0,0,0\n"])
    def test_wrong_column_count_aborts(self, store, row):
        with pytest.raises(TaxValidationError, match="row 2: expected 3 columns"):
            run(HEADER + "500000,0,0\n" + row + "600000,0,0\n", store)

    @pytest.mark.parametrize("row,column", [
        ("abc,0,0\n", "totalIncome"),
        ("500000,x,0\n", "wht"),
        ("500000,0,1O0\n", "donation"),
    ])
    def test_parse_failure_names_column(self, store, row, column):
        with pytest.raises(TaxValidationError, match=f"row 1: {column} is not a number"):
            run(HEADER + row, store)

    @pytest.mark.parametrize("row,column", [
        ("nan,0,0\n", "totalIncome"),
        ("inf,inf,0\n", "totalIncome"),
        ("500000,NaN,0\n", "wht"),
        ("500000,0,-inf\n", "donation"),
    ])
    def test_non_finite_column(self, store, row, column):
        with pytest.raises(TaxValidationError, match=f"row 1: {column} must be a finite number"):
            run(HEADER + row, store)

    def test_row_value_validation(self, store):
        with pytest.raises(TaxValidationError, match="row 1: withholding tax"):
            run(HEADER + "100000,200000,0\n", store)

    def test_negative_donation(self, store):
        with pytest.raises(TaxValidationError, match="allowance amount must be non-negative"):
            run(HEADER + "100000,0,-1\n", store)

    def test_malformed_csv(self, store):
        with pytest.raises(TaxValidationError, match="row 1"):
            run(HEADER + '500000,0,"0\n', store)

    def test_bad_header_does_not_read_store(self):
        class NoReadStore(InMemoryDeductionStore):
            def personal_deduction(self):
                raise AssertionError("store read before header check")

        with pytest.raises(TaxValidationError):
            run("a,b,c\n", NoReadStore())

    def test_store_error_propagates(self):
        class FailingStore(InMemoryDeductionStore):
            def personal_deduction(self):
                raise DeductionStoreError("connection refused")

        with pytest.raises(DeductionStoreError, match="connection refused"):
            run(HEADER + "500000,0,0\n", FailingStore())
