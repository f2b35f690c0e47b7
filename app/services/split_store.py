# app/services/split_store.py
import logging
import secrets
import string
import time
import uuid
from typing import Iterable, Optional, Union

from app.config import config
from app.db import engine
from app.kv import KeyValueStore
from app.models.split import NewParticipant, SplitSession

ID_ALPHABET = string.ascii_letters + string.digits + "_-"
ID_LENGTH = 8
MERGE_FIELDS = ("title", "participants", "payments", "doneSettlements", "cleared")

kv = KeyValueStore(engine)


def _key(session_id: str) -> str:
    return f"split:{session_id}"


def new_session_id() -> str:
    # collisions are not checked
    return "".join(secrets.choice(ID_ALPHABET) for _ in range(ID_LENGTH))


def create_session(participants: Iterable[Union[NewParticipant, dict]], title: Optional[str] = None) -> str:
    session_id = new_session_id()
    people = [p if isinstance(p, NewParticipant) else NewParticipant.model_validate(p) for p in participants]
    session = SplitSession(
        id=session_id,
        title=title,
        created_at=int(time.time() * 1000),
        participants=[{"id": str(uuid.uuid4()), "name": p.name.strip()} for p in people],
        payments=[],
    )
    kv.set(_key(session_id), session.to_wire(), ex=config.SESSION_TTL_SECONDS)
    logging.debug("split-session created %s participants %d", session_id, len(session.participants))
    return session_id


def get_session(session_id: str) -> Optional[SplitSession]:
    logging.debug("split-session fetch %s", session_id)
    data = kv.get(_key(session_id))
    logging.debug("split-session result %s", "hit" if data else "miss")
    if data is None:
        return None
    return SplitSession.model_validate(data)


def update_session(session_id: str, fields: dict) -> bool:
    """Shallow-merge wire-format fields onto the stored session.

    Last write wins. Returns False, without writing, when the session
    does not exist.
    """
    logging.debug("split-session update %s", session_id)
    key = _key(session_id)
    current = kv.get(key)
    if current is None:
        return False
    changes = {k: v for k, v in fields.items() if k in MERGE_FIELDS}
    updated = SplitSession.model_validate({**current, **changes, "id": current["id"]})
    kv.set(key, updated.to_wire(), ex=config.SESSION_TTL_SECONDS)
    return True
