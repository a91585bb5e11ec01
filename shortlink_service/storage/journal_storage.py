"""
JournalStorage – append-only JSON-lines file backend
====================================================

Durable backend for single-process deployments without a database. Every
accepted link is appended to a UTF-8 text file as one JSON object per line:

    {"uuid": "...", "short_url": "-8eOIgoJ", "original_url": "https://..."}

Line order is insertion order and is also replay order.

Key Design Points
-----------------
- **Journal first**: `put` appends and flushes the line before touching the
  in-memory table. If the write fails, the table is left alone. The file is
  the ground truth and the table is a replayable cache of it.
- **Fail fast on corruption**: `load` stops at the first malformed line and
  raises JournalCorruptError rather than silently dropping records.
- **Serialized writers**: one lock per instance orders file appends the same
  way as logical inserts. Lookups only take the table's read lock.
- **No batch atomicity**: `batch_insert` is a loop over `put`. A failure
  partway leaves the already-written prefix in the journal.
- Sharing one journal file between processes is unsupported.
"""

import logging
import os
import threading
from typing import Optional, Sequence

from ..exceptions import BackendUnavailableError, JournalCorruptError, NotFoundError
from ..models import Conflict, Created, PutResult, ShortLink
from .base import BaseStorage
from .memory_table import MemoryTable

log = logging.getLogger("shortlink.storage")


class JournalStorage(BaseStorage):
    """File-journal implementation of the storage contract.

    Parameters
    ----------
    path : str
        Journal file location. The file is created on first write.
    table : MemoryTable, optional
        Table to populate; a fresh one is created when omitted.
    """

    def __init__(self, path: str, table: Optional[MemoryTable] = None) -> None:
        self.path = path
        self.table = table if table is not None else MemoryTable()
        self._lock = threading.Lock()

    def load(self) -> None:
        """Replay the journal into the table. A missing file is an empty store."""
        with self._lock:
            try:
                fh = open(self.path, "r", encoding="utf-8")
            except FileNotFoundError:
                log.info("Journal %s does not exist yet; starting empty", self.path)
                return
            except OSError as exc:
                raise BackendUnavailableError(f"cannot open journal {self.path}: {exc}") from exc

            replayed = 0
            line_no = 0
            with fh:
                try:
                    for line_no, line in enumerate(fh, start=1):
                        if not line.strip():
                            continue
                        try:
                            link = ShortLink.from_json(line)
                        except ValueError as exc:
                            raise JournalCorruptError(self.path, line_no, str(exc)) from exc
                        self.table.put(link.short_url, link.original_url)
                        replayed += 1
                except UnicodeDecodeError as exc:
                    raise JournalCorruptError(self.path, line_no + 1, "invalid UTF-8") from exc
                except OSError as exc:
                    raise BackendUnavailableError(f"cannot read journal {self.path}: {exc}") from exc
            log.info("Replayed %d records from %s", replayed, self.path)

    def put(self, link: ShortLink) -> PutResult:
        with self._lock:
            existing = self.table.conflicting_code(link.short_url, link.original_url)
            if existing is not None:
                return Conflict(existing)
            self._append(link)
            self.table.put(link.short_url, link.original_url)
            return Created(link.short_url)

    def get(self, code: str) -> str:
        original = self.table.get(code)
        if original is None:
            raise NotFoundError(code)
        return original

    def batch_insert(self, links: Sequence[ShortLink]) -> None:
        for link in links:
            self.put(link)

    def find_code_by_original(self, original: str) -> Optional[str]:
        return self.table.find_code(original)

    def ping(self) -> None:
        """Check that the journal's directory is still writable."""
        directory = os.path.dirname(os.path.abspath(self.path))
        if not os.access(directory, os.W_OK):
            raise BackendUnavailableError(f"journal directory {directory} is not writable")

    def close(self) -> None:
        """Every append opens and closes the file, so there is nothing to release."""

    # ---- Internal helpers -------------------------------------------------

    def _append(self, link: ShortLink) -> None:
        line = link.to_json() + "\n"
        try:
            with open(self.path, "a", encoding="utf-8") as fh:
                fh.write(line)
                fh.flush()
                os.fsync(fh.fileno())
        except OSError as exc:
            raise BackendUnavailableError(f"cannot append to journal {self.path}: {exc}") from exc
