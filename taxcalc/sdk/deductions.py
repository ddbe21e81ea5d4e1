"""Deduction store: persistence of the two administrator-set deductions.

The engine only talks to the DeductionStore interface. Two implementations:

- InMemoryDeductionStore: process-local, used by tests and embedding callers
- YamlDeductionStore: deductions.yaml in the config directory

Both hand out a consistent (personal, k_receipt) pair through snapshot(), so
a calculation never mixes values from before and after a concurrent update.
Setters store what they are given; range checks belong to the admin helpers
update_personal_deduction() / update_k_receipt_deduction().
"""

import logging
import os
import tempfile
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

import yaml
from pydantic import ValidationError

from .config import get_deductions_path
from .taxes.allowances import DEFAULT_MAX_K_RECEIPT
from .taxes.schemas import DeductionConfig, KReceiptDeductionUpdate, PersonalDeductionUpdate
from .taxes.validation import TaxValidationError

logger = logging.getLogger(__name__)

DEFAULT_PERSONAL_DEDUCTION = 60000.0


class DeductionStoreError(Exception):
    """Raised when deductions cannot be read or written."""
    pass


class DeductionStore(ABC):
    """Capability interface for the deduction configuration."""

    @abstractmethod
    def snapshot(self) -> DeductionConfig:
        """Return both deductions as read together."""

    @abstractmethod
    def set_personal_deduction(self, amount: float) -> None:
        ...

    @abstractmethod
    def set_k_receipt_deduction(self, amount: float) -> None:
        ...

    def personal_deduction(self) -> float:
        return self.snapshot().personal

    def k_receipt_deduction(self) -> float:
        return self.snapshot().max_k_receipt


class InMemoryDeductionStore(DeductionStore):
    """Deductions held in process memory behind a lock."""

    def __init__(
        self,
        personal: float = DEFAULT_PERSONAL_DEDUCTION,
        k_receipt: float = DEFAULT_MAX_K_RECEIPT,
    ):
        self._lock = threading.Lock()
        self._personal = personal
        self._k_receipt = k_receipt

    def snapshot(self) -> DeductionConfig:
        with self._lock:
            return DeductionConfig(personal=self._personal, max_k_receipt=self._k_receipt)

    def set_personal_deduction(self, amount: float) -> None:
        with self._lock:
            self._personal = amount

    def set_k_receipt_deduction(self, amount: float) -> None:
        with self._lock:
            self._k_receipt = amount


class YamlDeductionStore(DeductionStore):
    """Deductions persisted as a small YAML document.

    File layout:

        personal: 60000.0
        k_receipt: 50000.0

    Missing keys (or a missing file) fall back to the defaults. Writes go to
    a temp file that is renamed over the original, so readers see either the
    old or the new document, never a partial one.
    """

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path else get_deductions_path()
        self._lock = threading.Lock()

    def _read(self) -> dict:
        if not self.path.exists():
            logger.debug(f"{self.path} not found, using default deductions")
            return {}
        try:
            with open(self.path, "r") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise DeductionStoreError(f"Cannot read deductions from {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise DeductionStoreError(f"Invalid deductions file {self.path}: expected a mapping")
        return data

    def _write(self, data: dict) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
        except OSError as e:
            raise DeductionStoreError(f"Cannot write deductions to {self.path}: {e}") from e
        try:
            with os.fdopen(fd, "w") as f:
                yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)
            os.replace(tmp_name, self.path)
        except (OSError, yaml.YAMLError) as e:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            raise DeductionStoreError(f"Cannot write deductions to {self.path}: {e}") from e

    @staticmethod
    def _number(data: dict, key: str, default: float) -> float:
        value = data.get(key)
        if value is None:
            return default
        try:
            return float(value)
        except (TypeError, ValueError) as e:
            raise DeductionStoreError(f"Deduction '{key}' is not a number: {value!r}") from e

    def snapshot(self) -> DeductionConfig:
        with self._lock:
            data = self._read()
        return DeductionConfig(
            personal=self._number(data, "personal", DEFAULT_PERSONAL_DEDUCTION),
            max_k_receipt=self._number(data, "k_receipt", DEFAULT_MAX_K_RECEIPT),
        )

    def personal_deduction(self) -> float:
        with self._lock:
            data = self._read()
        return self._number(data, "personal", DEFAULT_PERSONAL_DEDUCTION)

    def k_receipt_deduction(self) -> float:
        with self._lock:
            data = self._read()
        return self._number(data, "k_receipt", DEFAULT_MAX_K_RECEIPT)

    def _set(self, key: str, amount: float) -> None:
        with self._lock:
            data = self._read()
            data[key] = float(amount)
            self._write(data)
        logger.info(f"Set {key} deduction to {amount} in {self.path}")

    def set_personal_deduction(self, amount: float) -> None:
        self._set("personal", amount)

    def set_k_receipt_deduction(self, amount: float) -> None:
        self._set("k_receipt", amount)


def _amount_error(e: ValidationError, low: str, high: str) -> TaxValidationError:
    return TaxValidationError(f"amount must be between {low} and {high}: {e.errors()[0]['msg']}")


def update_personal_deduction(store: DeductionStore, amount: float) -> float:
    """Validate and store a new personal deduction (10,000 - 100,000).

    Raises:
        TaxValidationError: amount out of range
        DeductionStoreError: store write failed
    """
    try:
        update = PersonalDeductionUpdate(amount=amount)
    except ValidationError as e:
        raise _amount_error(e, "10,000.0", "100,000.0") from e
    store.set_personal_deduction(update.amount)
    return update.amount


def update_k_receipt_deduction(store: DeductionStore, amount: float) -> float:
    """Validate and store a new k-receipt ceiling (0 - 100,000).

    Raises:
        TaxValidationError: amount out of range
        DeductionStoreError: store write failed
    """
    try:
        update = KReceiptDeductionUpdate(amount=amount)
    except ValidationError as e:
        raise _amount_error(e, "0.0", "100,000.0") from e
    store.set_k_receipt_deduction(update.amount)
    return update.amount
