"""taxes - Progressive personal income tax calculation.

Scope:
- Bracket table (brackets)
- Allowance caps: donation and k-receipt (allowances)
- Single-record calculation with per-bracket breakdown (engine)
- CSV batch calculation (batch)

Constraints:
- Pure calculation - deductions come in as a DeductionConfig snapshot or
  are read once from a DeductionStore
- No rounding; floats end to end

Usage:
    from taxcalc.sdk.taxes import IncomeRecord, DeductionConfig, calculate_tax

    record = IncomeRecord(total_income=500000, wht=0, allowances=[])
    result = calculate_tax(record, DeductionConfig(personal=60000, max_k_receipt=50000))
"""

from .schemas import (
    Allowance,
    AllowanceType,
    BatchResult,
    BatchRowResult,
    Bracket,
    DeductionConfig,
    IncomeRecord,
    KReceiptDeductionUpdate,
    PersonalDeductionUpdate,
    TaxLevel,
    TaxResult,
)

from .brackets import TAX_BRACKETS, get_brackets, tax_in_bracket

from .allowances import (
    AllowanceTotals,
    DEFAULT_MAX_K_RECEIPT,
    MAX_DONATION,
    clamp_donation,
    k_receipt_ceiling,
    normalize_allowances,
)

from .validation import (
    CSV_HEADER,
    TaxValidationError,
    validate_csv_header,
    validate_income_record,
)

from .engine import (
    calculate_bracket_tax,
    calculate_net_income,
    calculate_tax,
    calculate_tax_from_store,
    settle,
)

from .batch import calculate_batch, calculate_batch_csv

__all__ = [
    # Schemas
    "Allowance",
    "AllowanceType",
    "BatchResult",
    "BatchRowResult",
    "Bracket",
    "DeductionConfig",
    "IncomeRecord",
    "KReceiptDeductionUpdate",
    "PersonalDeductionUpdate",
    "TaxLevel",
    "TaxResult",
    # Brackets
    "TAX_BRACKETS",
    "get_brackets",
    "tax_in_bracket",
    # Allowances
    "AllowanceTotals",
    "DEFAULT_MAX_K_RECEIPT",
    "MAX_DONATION",
    "clamp_donation",
    "k_receipt_ceiling",
    "normalize_allowances",
    # Validation
    "CSV_HEADER",
    "TaxValidationError",
    "validate_csv_header",
    "validate_income_record",
    # Engine
    "calculate_bracket_tax",
    "calculate_net_income",
    "calculate_tax",
    "calculate_tax_from_store",
    "settle",
    # Batch
    "calculate_batch",
    "calculate_batch_csv",
]
