# backend/storage/__init__.py
import logging
import threading
from typing import Optional

from config import settings
from storage.base import COLLECTIONS, RecordStore
from storage.json_store import JsonFileStore

logger = logging.getLogger(__name__)

_store: Optional[RecordStore] = None
_store_lock = threading.Lock()


def build_store(cfg=settings) -> RecordStore:
    backend = (cfg.STORAGE_BACKEND or "json").lower()
    if backend == "json":
        logger.info("Using JSON file storage in %s", cfg.DATA_DIR)
        return JsonFileStore(cfg.DATA_DIR)
    if backend == "sql":
        from database import SessionLocal, init_db
        from storage.sql_store import SqlRecordStore

        init_db()
        logger.info("Using SQL storage")
        return SqlRecordStore(SessionLocal)
    raise ValueError(f"Unsupported STORAGE_BACKEND: {cfg.STORAGE_BACKEND}")


# FastAPI dependency, overridden in tests
def get_store() -> RecordStore:
    global _store
    if _store is None:
        with _store_lock:
            if _store is None:
                _store = build_store()
    return _store


__all__ = ["COLLECTIONS", "RecordStore", "JsonFileStore", "build_store", "get_store"]
