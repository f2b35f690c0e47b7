import json
import logging
import time
from typing import Any, Optional

from sqlmodel import Session, select

from app.models.kv import KVEntry


class KeyValueStore:
    """Redis-style get/set/delete with per-key expiry, kept in one table."""

    def __init__(self, engine, clock=time.time):
        self.engine = engine
        self.clock = clock

    def get(self, key: str) -> Optional[Any]:
        with Session(self.engine) as s:
            entry = s.get(KVEntry, key)
            if entry is None:
                return None
            if entry.expires_at is not None and entry.expires_at <= self.clock():
                logging.debug("expired %s", key)
                s.delete(entry)
                s.commit()
                return None
            return json.loads(entry.value)

    def set(self, key: str, value: Any, ex: Optional[int] = None) -> None:
        now = self.clock()
        expires_at = now + ex if ex is not None else None
        with Session(self.engine) as s:
            entry = s.get(KVEntry, key)
            if entry is None:
                entry = KVEntry(key=key, value="", updated_at=now)
            entry.value = json.dumps(value)
            entry.expires_at = expires_at
            entry.updated_at = now
            s.add(entry)
            s.commit()

    def delete(self, key: str) -> bool:
        with Session(self.engine) as s:
            entry = s.get(KVEntry, key)
            if entry is None:
                return False
            s.delete(entry)
            s.commit()
            return True

    def purge_expired(self) -> int:
        with Session(self.engine) as s:
            expired = s.exec(select(KVEntry).where(KVEntry.expires_at <= self.clock())).all()
            for entry in expired:
                s.delete(entry)
            s.commit()
            return len(expired)
