"""Tax Calc MCP Server - FastMCP implementation for tax calculation tools."""

import io
import json
import logging
import math
from typing import Any

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from taxcalc.sdk import (
    DeductionStoreError,
    YamlDeductionStore,
    update_k_receipt_deduction,
    update_personal_deduction,
)
from taxcalc.sdk.taxes import (
    Allowance,
    IncomeRecord,
    TaxValidationError,
    calculate_batch_csv,
    calculate_tax_from_store,
    get_brackets,
)

logger = logging.getLogger(__name__)

# Initialize FastMCP server
mcp = FastMCP("tax-calc")


# --- Tools ---

@mcp.tool()
async def calculate_tax(
    total_income: float = Field(description="Total income for the year"),
    wht: float = Field(default=0.0, description="Withholding tax already paid"),
    allowances: list[dict[str, Any]] = Field(
        default_factory=list,
        description="Allowances as [{'allowanceType': 'donation'|'k-receipt', 'amount': number}]",
    ),
) -> dict[str, Any]:
    """Calculate income tax for one person. Returns tax due (or refund) and tax per bracket."""
    try:
        record = IncomeRecord(
            total_income=total_income,
            wht=wht,
            allowances=[Allowance.model_validate(a) for a in allowances],
        )
        result = calculate_tax_from_store(record, YamlDeductionStore())
        return result.model_dump(by_alias=True)

    except TaxValidationError as e:
        return {"error": e.message}
    except (DeductionStoreError, ValueError) as e:
        logger.error(f"Error calculating tax: {e}")
        return {"error": str(e)}


@mcp.tool()
async def calculate_tax_csv(
    csv_text: str = Field(description="CSV content with header 'totalIncome,wht,donation'"),
) -> dict[str, Any]:
    """Calculate income tax for every row of a CSV table. Returns one {totalIncome, tax, taxRefund} per row."""
    try:
        result = calculate_batch_csv(io.StringIO(csv_text, newline=""), YamlDeductionStore())
        return result.model_dump(by_alias=True)

    except TaxValidationError as e:
        return {"error": e.message, "taxes": []}
    except DeductionStoreError as e:
        logger.error(f"Error calculating CSV batch: {e}")
        return {"error": str(e), "taxes": []}


@mcp.tool()
async def get_deductions() -> dict[str, Any]:
    """Get the active personal deduction and k-receipt ceiling."""
    store = YamlDeductionStore()
    try:
        config = store.snapshot()
        return {"personalDeduction": config.personal, "kReceipt": config.max_k_receipt}
    except DeductionStoreError as e:
        logger.error(f"Error reading deductions: {e}")
        return {"error": str(e)}


@mcp.tool()
async def set_personal_deduction(
    amount: float = Field(description="Personal deduction, 10,000 to 100,000"),
) -> dict[str, Any]:
    """Set the personal deduction used by every calculation."""
    try:
        return {"personalDeduction": update_personal_deduction(YamlDeductionStore(), amount)}
    except TaxValidationError as e:
        return {"error": e.message}
    except DeductionStoreError as e:
        logger.error(f"Error saving personal deduction: {e}")
        return {"error": str(e)}


@mcp.tool()
async def set_k_receipt_deduction(
    amount: float = Field(description="K-receipt ceiling, 0 to 100,000"),
) -> dict[str, Any]:
    """Set the ceiling applied to k-receipt allowances."""
    try:
        return {"kReceipt": update_k_receipt_deduction(YamlDeductionStore(), amount)}
    except TaxValidationError as e:
        return {"error": e.message}
    except DeductionStoreError as e:
        logger.error(f"Error saving k-receipt deduction: {e}")
        return {"error": str(e)}


# --- Resources ---

@mcp.resource("taxcalc://brackets")
async def brackets_resource() -> str:
    """List the progressive tax brackets."""
    rows = [
        {
            "level": b.label,
            "lower": b.lower,
            "upper": None if math.isinf(b.upper) else b.upper,
            "rate": b.rate,
        }
        for b in get_brackets()
    ]
    return json.dumps({"brackets": rows}, indent=2, ensure_ascii=False)


# --- Server Entry Point ---

def run_server():
    """Run the MCP server in stdio mode."""
    mcp.run(transport="stdio")


if __name__ == "__main__":
    run_server()
