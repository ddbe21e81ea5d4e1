"""Tax Calc SDK - Core functionality for income tax calculation."""

from .config import (
    get_config_dir,
    get_settings_path,
    load_settings,
    save_settings,
    get_setting,
    set_setting,
    get_deductions_path,
)

from .deductions import (
    DEFAULT_PERSONAL_DEDUCTION,
    DeductionStore,
    DeductionStoreError,
    InMemoryDeductionStore,
    YamlDeductionStore,
    update_k_receipt_deduction,
    update_personal_deduction,
)

from .tabular import TabularFormatError, TabularReader

from . import taxes

__all__ = [
    # Config
    "get_config_dir",
    "get_settings_path",
    "load_settings",
    "save_settings",
    "get_setting",
    "set_setting",
    "get_deductions_path",
    # Deductions
    "DEFAULT_PERSONAL_DEDUCTION",
    "DeductionStore",
    "DeductionStoreError",
    "InMemoryDeductionStore",
    "YamlDeductionStore",
    "update_k_receipt_deduction",
    "update_personal_deduction",
    # Tabular input
    "TabularFormatError",
    "TabularReader",
    # Tax module
    "taxes",
]
