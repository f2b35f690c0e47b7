# app/services/write_behind.py
import logging
import threading
from typing import Callable, Dict, Optional


class _Pending:
    __slots__ = ("fields", "generation", "timer", "inflight")

    def __init__(self):
        self.fields = {}
        self.generation = 0
        self.timer = None
        self.inflight = None


class WriteBehindQueue:
    """Debounced, fire-and-forget persistence of session edits.

    Each session has at most one timer. A new edit cancels it and starts
    another, so a burst of edits ends in a single write of the merged
    fields ``delay`` seconds after the last one. Writes are attempted once:
    failures are logged and the snapshot is dropped.
    """

    def __init__(self, writer: Callable[[str, dict], object], delay: float = 1.0):
        self.writer = writer
        self.delay = delay
        self._lock = threading.Lock()
        self._pending: Dict[str, _Pending] = {}

    def schedule(self, key: str, fields: dict) -> None:
        with self._lock:
            entry = self._pending.get(key)
            if entry is None:
                entry = self._pending[key] = _Pending()
            if entry.timer is not None:
                entry.timer.cancel()
            entry.fields = {**entry.fields, **fields}
            entry.generation += 1
            entry.timer = threading.Timer(self.delay, self._fire, args=(key, entry.generation))
            entry.timer.daemon = True
            entry.timer.start()

    def pending(self, key: str) -> Optional[dict]:
        with self._lock:
            entry = self._pending.get(key)
            return dict(entry.fields) if entry is not None else None

    def flush_all(self) -> int:
        with self._lock:
            batch = [(key, entry.generation) for key, entry in self._pending.items()]
            for key, _ in batch:
                timer = self._pending[key].timer
                if timer is not None:
                    timer.cancel()
        for key, generation in batch:
            self._fire(key, generation)
        return len(batch)

    def _fire(self, key: str, generation: int) -> None:
        with self._lock:
            entry = self._pending.get(key)
            if entry is None or entry.generation != generation or entry.inflight == generation:
                return
            entry.inflight = generation
            fields = dict(entry.fields)
        try:
            self.writer(key, fields)
        except Exception:
            logging.exception("write-behind for %s failed; dropping snapshot", key)
        with self._lock:
            entry = self._pending.get(key)
            # a newer edit keeps its own timer running
            if entry is not None and entry.generation == generation:
                del self._pending[key]
