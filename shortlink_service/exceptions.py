"""
Storage error hierarchy for the short-link service.

Every backend raises these instead of driver-specific exceptions, so the
manager and the HTTP layer never need to know which store is active.

Uniqueness conflicts are deliberately NOT part of this hierarchy: `put`
reports them as a `Conflict` result (see `shortlink_service.models`).
"""

from typing import Optional


class StorageError(Exception):
    """Base class for all storage failures."""


class NotFoundError(StorageError):
    """The requested short code is not stored."""

    def __init__(self, code: str):
        super().__init__(f"original URL not found for {code!r}")
        self.code = code


class BackendUnavailableError(StorageError):
    """Connection or file-system failure while talking to a backend."""


class JournalCorruptError(StorageError):
    """A journal line could not be decoded into a ShortLink record."""

    def __init__(self, path: str, line_no: int, reason: Optional[str] = None):
        msg = f"{path}:{line_no}: malformed journal record"
        if reason:
            msg = f"{msg} ({reason})"
        super().__init__(msg)
        self.path = path
        self.line_no = line_no
