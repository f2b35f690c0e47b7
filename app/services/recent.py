# app/services/recent.py
from typing import Iterator, List, MutableMapping

SESSION_KEY = "split-recent"


class RecentSessions:
    """Most-recent-first ids of sessions this browser has opened.

    Kept in the signed cookie session and capped at ``limit`` entries; the
    oldest id is evicted first.
    """

    def __init__(self, store: MutableMapping, limit: int = 10):
        self.store = store
        self.limit = limit

    def ids(self) -> List[str]:
        value = self.store.get(SESSION_KEY) or []
        return [v for v in value if isinstance(v, str)]

    def touch(self, session_id: str) -> None:
        ids = [session_id] + [i for i in self.ids() if i != session_id]
        self.store[SESSION_KEY] = ids[: self.limit]

    def remove(self, session_id: str) -> bool:
        ids = self.ids()
        if session_id not in ids:
            return False
        ids.remove(session_id)
        self.store[SESSION_KEY] = ids
        return True

    def __iter__(self) -> Iterator[str]:
        return iter(self.ids())

    def __len__(self) -> int:
        return len(self.ids())

    def __contains__(self, session_id) -> bool:
        return session_id in self.ids()
