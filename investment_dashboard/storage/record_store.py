"""Whole-document JSON store for investment records."""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Literal

from investment_dashboard.portfolio.models import Investment, generate_investment_id, utc_now_iso
from investment_dashboard.storage.crypto import DocumentCipher
from investment_dashboard.storage.errors import DecryptionError, NotFound, StorageError

LOGGER = logging.getLogger(__name__)
LoadStatus = Literal["ok", "empty", "error"]


@dataclass
class LoadResult:
    status: LoadStatus
    investments: list[Investment] = field(default_factory=list)
    error: str | None = None

    @property
    def failed(self) -> bool:
        return self.status == "error"


class RecordStore:
    """Persists ``{"investments": [...]}`` as one document.

    Every mutation re-reads and rewrites the full collection under a
    process-local lock. A store that fails to load is never overwritten.
    """

    def __init__(self, path: str | os.PathLike[str], cipher: DocumentCipher | None = None) -> None:
        self.path = Path(path)
        self.cipher = cipher
        self._lock = threading.RLock()

    @property
    def encrypted(self) -> bool:
        return self.cipher is not None

    def initialize(self) -> None:
        with self._lock:
            if not self.path.exists():
                self._write([])
                LOGGER.info("record store initialized: path=%s encrypted=%s", self.path, self.encrypted)

    def _decode(self, raw: str) -> object:
        text = raw.strip()
        if self.cipher is None:
            return json.loads(text)
        if text.startswith("{"):
            # Plain document from before encryption was enabled; the next write encrypts it.
            LOGGER.info("record store holds plaintext while encryption is enabled: path=%s", self.path)
            return json.loads(text)
        return json.loads(self.cipher.decrypt(text).decode("utf-8"))

    def load(self) -> LoadResult:
        if not self.path.exists():
            return LoadResult(status="empty")
        try:
            raw = self.path.read_text(encoding="utf-8")
            if not raw.strip():
                return LoadResult(status="empty")
            document = self._decode(raw)
        except DecryptionError as error:
            return LoadResult(status="error", error=str(error))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as error:
            return LoadResult(status="error", error=f"Store could not be read: {error}")

        items = document.get("investments") if isinstance(document, dict) else None
        if not isinstance(items, list):
            return LoadResult(status="error", error="Store document has no 'investments' list.")
        non_records = sum(1 for item in items if not isinstance(item, dict))
        if non_records:
            return LoadResult(status="error", error=f"Store holds {non_records} entries that are not records.")
        try:
            records = [Investment.from_stored(item) for item in items]
        except (TypeError, ValueError, OverflowError) as error:
            return LoadResult(status="error", error=f"Store holds a malformed record: {error}")
        return LoadResult(status="ok" if records else "empty", investments=records)

    def list(self) -> list[Investment]:
        result = self.load()
        if result.failed:
            LOGGER.warning("record store unreadable, serving empty list: path=%s error=%s", self.path, result.error)
        return result.investments

    def _load_for_write(self) -> list[Investment]:
        result = self.load()
        if result.failed:
            raise StorageError(f"Refusing to modify an unreadable store: {result.error}")
        return result.investments

    def _write(self, records: Iterable[Investment]) -> None:
        document = {"investments": [record.to_dict() for record in records]}
        text = json.dumps(document, indent=2, ensure_ascii=False)
        if self.cipher is not None:
            text = self.cipher.encrypt(text.encode("utf-8"))
        directory = self.path.parent
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", dir=directory)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(text)
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as error:
            LOGGER.error("record store write failed: path=%s error=%s", self.path, error)
            raise StorageError(f"Store could not be written: {error}") from error

    def replace_all(self, records: Iterable[Investment]) -> None:
        with self._lock:
            self._write(list(records))

    def create(self, record: Investment) -> Investment:
        with self._lock:
            records = self._load_for_write()
            taken = {existing.id for existing in records}
            stored = record
            if not stored.id or stored.id in taken:
                candidate = generate_investment_id()
                suffix = 1
                while candidate in taken:
                    candidate = f"{generate_investment_id()}-{suffix}"
                    suffix += 1
                stored = stored.with_id(candidate, stored.date_added or utc_now_iso())
            elif not stored.date_added:
                stored = stored.with_id(stored.id, utc_now_iso())
            records.append(stored)
            self._write(records)
            return stored

    def update(self, investment_id: str, record: Investment) -> Investment:
        with self._lock:
            records = self._load_for_write()
            for index, existing in enumerate(records):
                if existing.id == investment_id:
                    stored = record.with_id(investment_id, existing.date_added or record.date_added)
                    records[index] = stored
                    self._write(records)
                    return stored
            raise NotFound(investment_id)

    def delete(self, investment_id: str) -> int:
        with self._lock:
            records = self._load_for_write()
            remaining = [record for record in records if record.id != investment_id]
            self._write(remaining)
            return len(records) - len(remaining)
