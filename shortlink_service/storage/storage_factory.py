"""
Storage factory – pick the storage backend once, at startup
===========================================================

Selection order (first one that works wins):

1. PostgreSQL, when `database_dsn` is set and the database answers.
   A connection or schema failure is logged as a WARNING and the next
   tier is tried; the service stays up in a degraded mode.
2. File journal, when `file_storage_path` is set. The journal is replayed
   immediately. A corrupt journal is fatal: the error is logged and raised.
3. In-memory.

The returned handle is passed explicitly to the app factory; nothing here
keeps a module-level reference to it.

LLM Prompt
----------
You are extending storage backends. Keep the fallback order and keep the
database import lazy so the in-memory and journal tiers work without a driver.
"""

import logging
from typing import Optional

from ..config import Settings, load_settings
from ..exceptions import StorageError
from .base import BaseStorage
from .journal_storage import JournalStorage
from .storage import MemoryStorage


def get_storage(settings: Optional[Settings] = None, logger: Optional[logging.Logger] = None) -> BaseStorage:
    """
    Return a loaded BaseStorage for the given settings.

    Parameters
    ----------
    settings : Settings, optional
        Startup configuration. Read from the environment when omitted.
    logger : logging.Logger, optional
        Sink for selection and fallback messages.

    Raises
    ------
    StorageError
        Only when the journal tier is selected and cannot be loaded.
    """
    cfg = settings if settings is not None else load_settings([])
    log = logger or logging.getLogger("shortlink.storage")

    if cfg.database_dsn:
        # Local import to avoid a hard dependency on the driver for other tiers
        from .db_storage import DBStorage

        db = DBStorage(cfg.database_dsn, timeout=cfg.db_timeout)
        try:
            db.load()
        except StorageError as exc:
            log.warning("PostgreSQL storage unavailable (%s); falling back", exc)
            db.close()
        else:
            log.info("Selected storage backend: postgres")
            return db

    if cfg.file_storage_path:
        journal = JournalStorage(cfg.file_storage_path)
        try:
            journal.load()
        except StorageError as exc:
            log.error("Failed to load journal %s: %s", cfg.file_storage_path, exc)
            raise
        log.info("Selected storage backend: file journal %s", cfg.file_storage_path)
        return journal

    log.info("Selected storage backend: memory")
    return MemoryStorage()
