"""Tests for the MCP server tools (skipped when the mcp extra is absent)."""

import asyncio

import pytest

pytest.importorskip("mcp")

from taxcalc.mcp import server  # noqa: E402


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    monkeypatch.setenv("TAX_CALC_CONFIG_PATH", str(tmp_path))
    return tmp_path


def test_calculate_tax():
    result = asyncio.run(server.calculate_tax(
        total_income=500000,
        wht=0,
        allowances=[{"allowanceType": "donation", "amount": 200000}],
    ))
    assert result["tax"] == 19000
    assert len(result["taxLevel"]) == 5


def test_calculate_tax_validation_error():
    result = asyncio.run(server.calculate_tax(total_income=-1, wht=0, allowances=[]))
    assert result == {"error": "total income must be ≥ 0."}


def test_calculate_tax_csv():
    result = asyncio.run(server.calculate_tax_csv(csv_text="totalIncome,wht,donation\n560000,40000,0\n"))
    assert result == {"taxes": [{"totalIncome": 560000.0, "tax": 0.0, "taxRefund": 5000.0}]}


def test_set_and_get_deductions():
    assert asyncio.run(server.set_personal_deduction(amount=70000)) == {"personalDeduction": 70000}
    assert "error" in asyncio.run(server.set_k_receipt_deduction(amount=200000))
    assert asyncio.run(server.get_deductions()) == {"personalDeduction": 70000, "kReceipt": 50000}
