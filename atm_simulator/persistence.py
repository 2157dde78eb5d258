"""
Persistence Gateway Module

Serializes the whole account directory to a single JSON document and reads
it back. Saves overwrite previous content via write-temp-then-rename; loads
treat a missing, unreadable or undecodable file as "no prior state".

Neither operation raises for I/O or format problems: save reports a
PERSISTENCE_FAILURE result and logs it, load logs a warning and returns an
empty directory.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Union
from datetime import datetime, timezone
from pathlib import Path
import json
import os
import tempfile
import threading

from .currency import Currency
from .directory import AccountDirectory
from .ledger import AccountLedger
from .results import Result, ErrorKind
from .logging_config import get_logger, log_action


SCHEMA_VERSION = 1


def encode_directory(directory: AccountDirectory) -> Dict[str, Any]:
    """Convert a directory into a JSON-ready document"""
    return {
        "schema_version": SCHEMA_VERSION,
        "saved_at": datetime.now(timezone.utc).isoformat(),
        "accounts": {
            str(pin): ledger.to_dict()
            for pin, ledger in sorted(directory.accounts().items())
        },
    }


def decode_directory(data: Dict[str, Any], currency: Currency = Currency.INR) -> AccountDirectory:
    """
    Rebuild a directory from a stored document.

    Raises:
        ValueError: If the document is not a supported schema or a record is malformed
    """
    if not isinstance(data, dict):
        raise ValueError("Stored document must be a JSON object")
    version = data.get("schema_version")
    if version != SCHEMA_VERSION:
        raise ValueError(f"Unsupported schema version: {version!r}")

    records = data.get("accounts", {})
    if not isinstance(records, dict):
        raise ValueError("Stored accounts must be a JSON object")

    accounts: Dict[int, AccountLedger] = {}
    for key, record in records.items():
        try:
            pin = int(key)
            ledger = AccountLedger.from_dict(record)
        except (KeyError, TypeError, ValueError, AttributeError, ArithmeticError) as e:
            raise ValueError(f"Malformed account record {key!r}: {e}") from e
        if ledger.pin != pin:
            raise ValueError(f"Account record {key!r} belongs to PIN {ledger.pin}")
        accounts[pin] = ledger

    return AccountDirectory(accounts, currency=currency)


class PersistenceGateway(ABC):
    """Abstract interface for directory persistence backends"""

    def __init__(self, currency: Currency = Currency.INR):
        self.currency = currency
        self.logger = get_logger("atm.persistence")
        self._lock = threading.RLock()

    @abstractmethod
    def _write(self, document: Dict[str, Any]) -> None:
        """Store a serialized document, replacing any previous one"""
        pass

    @abstractmethod
    def _read(self) -> Optional[Dict[str, Any]]:
        """Return the stored document, or None when nothing was stored yet"""
        pass

    def save(self, directory: AccountDirectory) -> Result[None]:
        """Serialize the entire directory, overwriting previous content"""
        with self._lock:
            try:
                self._write(encode_directory(directory))
            except (OSError, TypeError, ValueError) as e:
                self.logger.error(f"Error saving data: {e}", exc_info=True)
                return Result.failure(ErrorKind.PERSISTENCE_FAILURE, f"Error saving data: {e}")

        log_action(self.logger, "debug", "Directory saved",
                   operation="save", target=self.describe(),
                   details={"accounts": len(directory)})
        return Result.success()

    def load(self) -> AccountDirectory:
        """Deserialize the directory, or return an empty one when there is no usable state"""
        with self._lock:
            try:
                document = self._read()
            except (OSError, ValueError) as e:
                self.logger.warning(f"Could not read saved data, starting empty: {e}")
                return self._empty()

            if document is None:
                self.logger.info(f"No saved data at {self.describe()}, starting empty")
                return self._empty()

            try:
                directory = decode_directory(document, self.currency)
            except ValueError as e:
                self.logger.warning(f"Saved data is corrupt, starting empty: {e}")
                return self._empty()

        directory.attach(self)
        log_action(self.logger, "info", "Directory loaded",
                   operation="load", target=self.describe(),
                   details={"accounts": len(directory)})
        return directory

    def _empty(self) -> AccountDirectory:
        return AccountDirectory(persistence=self, currency=self.currency)

    def describe(self) -> str:
        return type(self).__name__


class JSONFilePersistence(PersistenceGateway):
    """Single JSON file backend with atomic replacement on save"""

    def __init__(self, path: Union[str, Path] = "users.json", currency: Currency = Currency.INR):
        super().__init__(currency)
        self.path = Path(path)

    def _write(self, document: Dict[str, Any]) -> None:
        payload = json.dumps(document, indent=2, ensure_ascii=False)
        directory = self.path.parent
        directory.mkdir(parents=True, exist_ok=True)

        fd, temp_path = tempfile.mkstemp(prefix=f".{self.path.name}.", suffix=".tmp", dir=directory)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(temp_path, self.path)
        except BaseException:
            if os.path.exists(temp_path):
                os.unlink(temp_path)
            raise

    def _read(self) -> Optional[Dict[str, Any]]:
        if not self.path.exists():
            return None
        with open(self.path, "r", encoding="utf-8") as handle:
            text = handle.read()
        if not text.strip():
            return None
        return json.loads(text)

    def describe(self) -> str:
        return str(self.path)


class InMemoryPersistence(PersistenceGateway):
    """In-memory backend for testing; keeps a JSON copy of the last save"""

    def __init__(self, currency: Currency = Currency.INR):
        super().__init__(currency)
        self._document: Optional[str] = None
        self.save_count = 0

    def _write(self, document: Dict[str, Any]) -> None:
        # Serialize to decouple the stored state from live objects
        self._document = json.dumps(document)
        self.save_count += 1

    def _read(self) -> Optional[Dict[str, Any]]:
        if self._document is None:
            return None
        return json.loads(self._document)

    def describe(self) -> str:
        return "memory"
