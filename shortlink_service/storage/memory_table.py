"""
Concurrency-safe code -> original URL table.

The table is the in-process cache shared by the in-memory and journal
backends. It keeps a reverse index (original -> code) so that conflict
checks and `find_code` are O(1) instead of a scan.

Locking:
    A single readers-writer lock guards both dicts. Readers run concurrently;
    a writer excludes everyone. Waiting writers block new readers so a steady
    stream of lookups cannot starve inserts. No I/O happens while it is held.
"""

import contextlib
import threading
from typing import Dict, Iterator, Optional


class ReadWriteLock:
    """Writer-preferring readers-writer lock built on a Condition."""

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextlib.contextmanager
    def read_locked(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if not self._readers:
                    self._cond.notify_all()

    @contextlib.contextmanager
    def write_locked(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class MemoryTable:
    def __init__(self):
        self._by_code: Dict[str, str] = {}
        self._by_original: Dict[str, str] = {}
        self._lock = ReadWriteLock()

    def put(self, code: str, original: str) -> None:
        """Unconditionally map `code` to `original`, replacing any previous entry."""
        with self._lock.write_locked():
            self._set(code, original)

    def put_if_absent(self, code: str, original: str) -> Optional[str]:
        """
        Insert the mapping unless `original` or `code` is already present.

        Returns:
            None if inserted, otherwise the code that is already stored
            (the code mapped to `original` if any, else `code` itself).
        """
        with self._lock.write_locked():
            existing = self._conflict(code, original)
            if existing is None:
                self._set(code, original)
            return existing

    def conflicting_code(self, code: str, original: str) -> Optional[str]:
        """Read-only version of the check done by `put_if_absent`."""
        with self._lock.read_locked():
            return self._conflict(code, original)

    def get(self, code: str) -> Optional[str]:
        with self._lock.read_locked():
            return self._by_code.get(code)

    def find_code(self, original: str) -> Optional[str]:
        with self._lock.read_locked():
            return self._by_original.get(original)

    def __len__(self) -> int:
        with self._lock.read_locked():
            return len(self._by_code)

    # ---- Internal helpers (caller holds the lock) -------------------------

    def _conflict(self, code: str, original: str) -> Optional[str]:
        existing = self._by_original.get(original)
        if existing is not None:
            return existing
        if code in self._by_code:
            return code
        return None

    def _set(self, code: str, original: str) -> None:
        previous = self._by_code.get(code)
        if previous is not None and self._by_original.get(previous) == code:
            del self._by_original[previous]
        self._by_code[code] = original
        self._by_original[original] = code
