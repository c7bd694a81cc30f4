"""Record store error taxonomy."""

from __future__ import annotations


class StorageError(Exception):
    """The store file could not be read or written."""


class DecryptionError(StorageError):
    """Encrypted store content is malformed, tampered with, or keyed differently."""


class NotFound(LookupError):
    def __init__(self, investment_id: str) -> None:
        self.investment_id = investment_id
        super().__init__(f"Investment not found: {investment_id}")
