"""Pydantic schemas for tax calculation input and output.

Field names are snake_case in Python; aliases carry the camelCase names used
in JSON requests and responses (``totalIncome``, ``taxRefund``...). Dump with
``model_dump(by_alias=True)`` to get the wire layout.
"""

import math
from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field


class AllowanceType(str, Enum):
    """Allowance categories accepted by the engine."""

    DONATION = "donation"
    K_RECEIPT = "k-receipt"


class Bracket(BaseModel):
    """Single progressive tax bracket."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    lower: float = Field(..., ge=0, description="Lower bound (exclusive for taxation)")
    upper: float = Field(default=math.inf, description="Upper bound, inf for the top bracket")
    rate: int = Field(..., ge=0, le=100, description="Tax rate as integer percent")
    label: str = Field(..., description="Human-readable income range")


class Allowance(BaseModel):
    """A claimed allowance.

    ``allowance_type`` is a plain string so unknown kinds reach the engine
    validator and fail with its message rather than a pydantic error.
    """

    model_config = ConfigDict(populate_by_name=True)

    allowance_type: str = Field(..., alias="allowanceType")
    amount: float = Field(...)


class IncomeRecord(BaseModel):
    """Income and expenses for one calculation."""

    model_config = ConfigDict(populate_by_name=True)

    total_income: float = Field(..., alias="totalIncome")
    wht: float = Field(default=0.0, description="Withholding tax already paid")
    allowances: List[Allowance] = Field(default_factory=list)


class DeductionConfig(BaseModel):
    """Snapshot of the administrator-configured deductions."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    personal: float = Field(..., description="Personal deduction")
    max_k_receipt: float = Field(..., description="Ceiling for k-receipt allowances")


class PersonalDeductionUpdate(BaseModel):
    """Admin request to change the personal deduction."""

    model_config = ConfigDict(extra="forbid")

    amount: float = Field(..., ge=10000, le=100000)


class KReceiptDeductionUpdate(BaseModel):
    """Admin request to change the k-receipt ceiling."""

    model_config = ConfigDict(extra="forbid")

    amount: float = Field(..., ge=0, le=100000)


class TaxLevel(BaseModel):
    """Tax owed within one bracket."""

    level: str
    tax: float = 0.0


class TaxResult(BaseModel):
    """Result of a single-record calculation.

    Exactly one of ``net_tax``/``refund`` is nonzero unless the computed tax
    equals the withholding exactly, in which case both are zero.
    """

    model_config = ConfigDict(populate_by_name=True)

    net_tax: float = Field(..., ge=0, alias="tax")
    refund: float = Field(default=0.0, ge=0, alias="taxRefund")
    tax_levels: List[TaxLevel] = Field(default_factory=list, alias="taxLevel")
    total_tax: float = Field(default=0.0, ge=0, alias="totalTax")
    net_income: float = Field(default=0.0, alias="netIncome")


class BatchRowResult(BaseModel):
    """Per-row result of a batch calculation (no bracket breakdown)."""

    model_config = ConfigDict(populate_by_name=True)

    total_income: float = Field(..., alias="totalIncome")
    net_tax: float = Field(..., ge=0, alias="tax")
    refund: float = Field(default=0.0, ge=0, alias="taxRefund")


class BatchResult(BaseModel):
    """Ordered results for every data row of a batch."""

    taxes: List[BatchRowResult] = Field(default_factory=list)
