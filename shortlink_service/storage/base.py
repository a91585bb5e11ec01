"""
Base storage interface for the short-link service.

Purpose:
    Define the one contract that the in-memory, journal and PostgreSQL
    backends all satisfy, so request handlers can use any of them without
    knowing which one was selected at startup.

Contract summary:
    load()                      prepare the backend (replay journal, create schema)
    put(link)                   -> Created(code) | Conflict(existing_code)
    get(code)                   -> original URL, or NotFoundError
    batch_insert(links)         store many links; silently skip taken codes
    find_code_by_original(url)  -> code or None
    ping()                      liveness probe; raises on failure
    close()                     release files / connections

Testing & Coverage:
    These are abstract methods and are not executed directly in tests.
    We annotate them with `# pragma: no cover` so coverage tools don't
    penalize the project for un-runnable abstract declarations.
"""

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from ..models import PutResult, ShortLink


class BaseStorage(ABC):
    """Abstract base class for storage backends."""

    @abstractmethod  # pragma: no cover
    def load(self) -> None:
        """
        Prepare the backend for use. Called once, right after construction.

        Raises:
            StorageError: If the backend cannot be brought into a usable state.
        """
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def put(self, link: ShortLink) -> PutResult:
        """
        Store a new record unless its code or original URL is already taken.

        Returns:
            Created(link.short_url) when the record was written, or
            Conflict(existing_code) when a record for the same original URL
            (or the same code) already exists. A conflict never raises.

        Raises:
            BackendUnavailableError: On I/O or connection failure. Nothing is
                stored in that case.
        """
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def get(self, code: str) -> str:
        """
        Return the original URL stored under `code`.

        Raises:
            NotFoundError: If the code is not stored.
        """
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def batch_insert(self, links: Sequence[ShortLink]) -> None:
        """
        Store many records, skipping those whose code is already taken.

        Atomicity is backend specific: PostgreSQL commits all or nothing,
        the journal keeps whatever prefix was written before a failure.
        """
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def find_code_by_original(self, original: str) -> Optional[str]:
        """Return the code already assigned to `original`, or None."""
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def ping(self) -> None:
        """Raise BackendUnavailableError if the backend is not reachable."""
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def close(self) -> None:
        """Release backend resources. Safe to call more than once."""
        raise NotImplementedError
