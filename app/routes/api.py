import logging
from fastapi import APIRouter, Request, HTTPException
from sqlalchemy.exc import SQLAlchemyError

from app.models.split import CreateSessionIn, SessionPatch
from app.services import split_store
from app.services.persistence import recent_sessions
from app.services.settlement_service import summarize

router = APIRouter(prefix="/sessions", tags=["sessions"])


def _load_or_404(session_id: str):
    try:
        session = split_store.get_session(session_id)
    except SQLAlchemyError:
        logging.exception("fetching session %s failed", session_id)
        raise HTTPException(status_code=500, detail="Error")
    if session is None:
        raise HTTPException(status_code=404, detail="Not found")
    return session


@router.post("")
def create_session(payload: CreateSessionIn):
    try:
        session_id = split_store.create_session(payload.participants, payload.title)
    except SQLAlchemyError:
        logging.exception("creating session failed")
        raise HTTPException(status_code=500, detail="Error creating session")
    return {"id": session_id}


@router.get("/{session_id}")
def get_session(session_id: str):
    return _load_or_404(session_id).to_wire()


@router.patch("/{session_id}")
def update_session(session_id: str, payload: SessionPatch):
    try:
        split_store.update_session(session_id, payload.changes())
    except SQLAlchemyError:
        logging.exception("updating session %s failed", session_id)
        raise HTTPException(status_code=500, detail="Error updating session")
    return {"ok": True}


@router.delete("/{session_id}")
def forget_session(request: Request, session_id: str):
    recent_sessions(request).remove(session_id)
    return {"ok": True}


@router.get("/{session_id}/summary")
def session_summary(session_id: str):
    return summarize(_load_or_404(session_id)).to_wire()
