"""
ShortLinkManager module for the short-link service.

Responsibilities:
    - Validate submitted URLs (non-empty after trimming)
    - Derive the deterministic code and build the ShortLink record
    - Run the put / conflict flow and hand the outcome to the HTTP layer
    - Build batch records and responses in request order
    - Turn codes into fully-qualified short URLs

Design notes:
    - Storage is an injected dependency; the manager never knows which
      backend is active.
    - There is no pre-lookup before `put`. The write itself is the atomic
      uniqueness check, and the backend reports a resubmission as Conflict.
    - Empty batches are rejected before any backend call.

LLM Prompt Example:
    "Explain how a deterministic code plus an insert-or-conflict storage
    contract makes URL submission idempotent without a read-before-write race."
"""

import logging
from typing import Callable, List, Optional, Sequence

from ..models import BatchItem, BatchResult, PutResult, ShortLink
from ..storage.base import BaseStorage
from .strategies import generate_code

CodeStrategy = Callable[[str], str]  # original -> code

log = logging.getLogger("shortlink.manager")


class ShortLinkManager:
    """
    Coordinates creation and lookup of short links.

    Args:
        storage (BaseStorage): Backend selected at startup.
        base_url (str): Prefix for short URLs; must end with "/".
        code_strategy (Optional[CodeStrategy]): Code derivation, defaults to
            SHA-1 -> URL-safe Base64 -> 8 chars.
    """

    def __init__(self, storage: BaseStorage, base_url: str, code_strategy: Optional[CodeStrategy] = None):
        self.storage = storage
        self.base_url = base_url
        self.code_strategy = code_strategy or generate_code

    def short_url(self, code: str) -> str:
        return f"{self.base_url}{code}"

    def shorten(self, original: str) -> PutResult:
        """
        Store `original` and return Created(code) or Conflict(existing_code).

        Raises:
            ValueError: If the URL is empty after trimming whitespace.
            StorageError: If the backend fails.
        """
        original = original.strip()
        if not original:
            raise ValueError("URL must not be empty")

        link = ShortLink.new(self.code_strategy(original), original)
        result = self.storage.put(link)
        log.debug("put %s -> %r", original, result)
        return result

    def resolve(self, code: str) -> str:
        """Return the original URL for `code`; raises NotFoundError when absent."""
        return self.storage.get(code)

    def shorten_batch(self, items: Sequence[BatchItem]) -> List[BatchResult]:
        """
        Store every item in one backend call and answer in request order.

        Items whose URL is already stored keep their existing code, which is
        the same deterministic code returned here.

        Raises:
            ValueError: On an empty batch or an item with an empty URL.
            StorageError: If the backend fails (journal: a prefix may be stored).
        """
        if not items:
            raise ValueError("Empty batch")

        records: List[ShortLink] = []
        results: List[BatchResult] = []
        for item in items:
            original = item.original_url.strip()
            if not original:
                raise ValueError(f"Empty URL for correlation_id {item.correlation_id!r}")
            code = self.code_strategy(original)
            records.append(ShortLink.new(code, original))
            results.append(BatchResult(correlation_id=item.correlation_id, short_url=self.short_url(code)))

        self.storage.batch_insert(records)
        return results
