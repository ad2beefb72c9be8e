from __future__ import annotations


class LedgerError(Exception):
    """Base class for every error raised by the ledger core."""


class RecordValidationError(LedgerError, ValueError):
    def __init__(self, message: str, errors: list[dict] | None = None):
        super().__init__(message)
        self.errors = errors or []


class NotAuthenticatedError(LedgerError):
    def __init__(self, message: str = "User not authenticated"):
        super().__init__(message)


class StoreError(LedgerError):
    """A record store request failed (connection, permission, quota...)."""


class RecordNotFoundError(StoreError):
    def __init__(self, collection: str, record_id: str):
        super().__init__("Record {} not found in {}".format(record_id, collection))
        self.collection = collection
        self.record_id = record_id


__all__ = [
    "LedgerError",
    "NotAuthenticatedError",
    "RecordNotFoundError",
    "RecordValidationError",
    "StoreError",
]
