"""
Storage module for the short-link service (in-memory implementation).

Responsibilities:
    - Keep code -> original URL mappings for the lifetime of the process
    - Report resubmissions (same original URL) as a Conflict, not an error
    - Resolve codes and original URLs

Design:
    - This is the last-resort backend: selected when neither a database nor
      a journal file is configured. Nothing survives a restart.
    - All state lives in a MemoryTable; the check-and-insert happens under a
      single write lock, so concurrent puts of the same URL yield exactly one
      Created and the rest Conflict.

LLM Prompt Example:
    "Explain how this in-memory storage can be swapped for a durable backend
     without changing the manager or API code, by adhering to the narrow
     BaseStorage interface."
"""

from typing import Optional, Sequence

from ..exceptions import NotFoundError
from ..models import Conflict, Created, PutResult, ShortLink
from .base import BaseStorage
from .memory_table import MemoryTable


class MemoryStorage(BaseStorage):
    def __init__(self, table: Optional[MemoryTable] = None):
        self.table = table if table is not None else MemoryTable()

    def load(self) -> None:
        """Nothing to replay for a purely in-memory store."""

    def put(self, link: ShortLink) -> PutResult:
        existing = self.table.put_if_absent(link.short_url, link.original_url)
        if existing is not None:
            return Conflict(existing)
        return Created(link.short_url)

    def get(self, code: str) -> str:
        original = self.table.get(code)
        if original is None:
            raise NotFoundError(code)
        return original

    def batch_insert(self, links: Sequence[ShortLink]) -> None:
        for link in links:
            self.table.put_if_absent(link.short_url, link.original_url)

    def find_code_by_original(self, original: str) -> Optional[str]:
        return self.table.find_code(original)

    def ping(self) -> None:
        return None

    def close(self) -> None:
        return None
