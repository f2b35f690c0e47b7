# app/services/persistence.py
"""Working copy of sessions edited through the UI.

Reads overlay not-yet-written edits on the stored session; edits are
handed to the write-behind queue.
"""
from typing import Optional

from fastapi import Request

from app.config import config
from app.models.split import SplitSession
from app.services import split_store
from app.services.recent import RecentSessions
from app.services.split_service import snapshot
from app.services.write_behind import WriteBehindQueue

writer = WriteBehindQueue(split_store.update_session, delay=config.PERSIST_DEBOUNCE_SECONDS)


def load_working_copy(session_id: str) -> Optional[SplitSession]:
    stored = split_store.get_session(session_id)
    if stored is None:
        return None
    pending = writer.pending(session_id)
    if pending:
        data = stored.to_wire()
        data.update(pending)
        return SplitSession.model_validate(data)
    return stored


def save_working_copy(session: SplitSession) -> None:
    writer.schedule(session.id, snapshot(session))


def recent_sessions(request: Request) -> RecentSessions:
    return RecentSessions(request.session, limit=config.RECENT_SESSIONS_LIMIT)
