# utils/kv_store.py
import logging
from sqlalchemy import func
from database import get_db_session
from models import KeyValueEntry
from utils.errors import StorageQuotaExceeded

logger = logging.getLogger(__name__)


class KeyValueStore:
    """Durable string -> string map backed by the kv_store table.

    Values count against quota_bytes (total characters across all values);
    a write that would exceed it raises StorageQuotaExceeded and changes nothing.
    """

    def __init__(self, quota_bytes=None):
        self.quota_bytes = quota_bytes

    def get(self, key, default=None):
        with get_db_session() as db:
            entry = db.query(KeyValueEntry).filter_by(key=key).first()
            return entry.value if entry is not None else default

    def set(self, key, value, make_room=None):
        """Write value under key.

        If the write would exceed the quota and make_room is given, it is
        called to free space and the write is tried again, for as long as it
        frees something.
        """
        if not isinstance(value, str):
            raise TypeError(f"Values must be strings, got {type(value).__name__}")

        while True:
            needed = self._write(key, value)
            if needed is None:
                return
            freed = make_room() if make_room is not None else 0
            if not freed:
                break
            logger.info(f"Freed {freed} entries to fit {key}")

        logger.warning(f"Store quota exceeded writing {key} ({needed}/{self.quota_bytes})")
        raise StorageQuotaExceeded(key, needed, self.quota_bytes)

    def _write(self, key, value):
        """Insert or update key. Returns the size the store would need if that is over quota."""
        with get_db_session() as db:
            entry = db.query(KeyValueEntry).filter_by(key=key).first()

            if self.quota_bytes is not None:
                used = db.query(func.coalesce(func.sum(func.length(KeyValueEntry.value)), 0)).scalar()
                if entry is not None:
                    used -= len(entry.value)
                needed = used + len(value)
                if needed > self.quota_bytes:
                    return needed

            if entry is None:
                db.add(KeyValueEntry(key=key, value=value))
            else:
                entry.value = value
        return None

    def delete(self, key):
        with get_db_session() as db:
            deleted = db.query(KeyValueEntry).filter_by(key=key).delete()
        return deleted > 0

    def keys(self, prefix=None):
        """Keys in enumeration (insertion) order, optionally limited to a prefix."""
        with get_db_session() as db:
            query = db.query(KeyValueEntry.key)
            if prefix:
                query = query.filter(KeyValueEntry.key.startswith(prefix, autoescape=True))
            return [row.key for row in query.order_by(KeyValueEntry.id)]

    def __contains__(self, key):
        with get_db_session() as db:
            return db.query(KeyValueEntry.id).filter_by(key=key).first() is not None

    def usage(self):
        with get_db_session() as db:
            return db.query(func.coalesce(func.sum(func.length(KeyValueEntry.value)), 0)).scalar()

    def ping(self):
        """Cheap query used by the health check."""
        with get_db_session() as db:
            db.query(KeyValueEntry.id).limit(1).all()
        return True
