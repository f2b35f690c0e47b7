# app/services/split_service.py
"""Edits applied to a session working copy by the UI.

Every function returns an updated copy and leaves its argument untouched.
Unknown ids are ignored.
"""
import re
import time
import uuid
from typing import Iterable, List, Optional

from app.models.split import Participant, Payment, SplitSession


def new_id() -> str:
    return str(uuid.uuid4())


def now_ms() -> int:
    return int(time.time() * 1000)


def parse_names(text: Optional[str]) -> List[str]:
    """Participant names typed one per line or comma separated."""
    if not text:
        return []
    return [n.strip() for n in re.split(r"[\n,]", text) if n.strip()]


def set_title(session: SplitSession, title: Optional[str]) -> SplitSession:
    title = (title or "").strip() or None
    return session.model_copy(update={"title": title})


def add_participant(session: SplitSession, name: str = "") -> SplitSession:
    participants = session.participants + [Participant(id=new_id(), name=(name or "").strip())]
    return session.model_copy(update={"participants": participants})


def rename_participant(session: SplitSession, participant_id: str, name: str) -> SplitSession:
    participants = [
        p.model_copy(update={"name": name or ""}) if p.id == participant_id else p
        for p in session.participants
    ]
    return session.model_copy(update={"participants": participants})


def remove_participant(session: SplitSession, participant_id: str) -> SplitSession:
    if len(session.participants) <= 1:
        return session
    if not any(p.id == participant_id for p in session.participants):
        return session
    participants = [p for p in session.participants if p.id != participant_id]
    # drop every payment the participant paid for or shares in
    payments = [
        pay for pay in session.payments
        if pay.payer_id != participant_id and participant_id not in pay.participant_ids
    ]
    return session.model_copy(update={"participants": participants, "payments": payments})


def add_payment(
    session: SplitSession,
    payer_id: str,
    amount: str,
    description: str = "",
    participant_ids: Optional[Iterable[str]] = None,
) -> SplitSession:
    payment = Payment(
        id=new_id(),
        payer_id=payer_id,
        amount=amount,
        description=description or "",
        participant_ids=_unique(participant_ids or []),
        created_at=now_ms(),
    )
    return session.model_copy(update={"payments": session.payments + [payment]})


def update_payment(session: SplitSession, payment_id: str, **fields) -> SplitSession:
    if "participant_ids" in fields:
        fields["participant_ids"] = _unique(fields["participant_ids"] or [])
    payments = []
    for pay in session.payments:
        if pay.id == payment_id:
            # validate so amounts get the same coercion as on create
            pay = Payment.model_validate({**pay.model_dump(), **fields})
        payments.append(pay)
    return session.model_copy(update={"payments": payments})


def remove_payment(session: SplitSession, payment_id: str) -> SplitSession:
    payments = [pay for pay in session.payments if pay.id != payment_id]
    return session.model_copy(update={"payments": payments})


def toggle_settlement(session: SplitSession, key: str) -> SplitSession:
    done = list(session.done_settlements)
    if key in done:
        done.remove(key)
    else:
        done.append(key)
    return session.model_copy(update={"done_settlements": done})


def set_cleared(session: SplitSession, cleared: bool) -> SplitSession:
    return session.model_copy(update={"cleared": bool(cleared)})


def snapshot(session: SplitSession) -> dict:
    """Full mutable state of a session, as pushed to the store."""
    return session.model_dump(
        by_alias=True, mode="json",
        include={"title", "participants", "payments", "done_settlements", "cleared"},
    )


def _unique(ids: Iterable[str]) -> List[str]:
    seen = []
    for i in ids:
        if i not in seen:
            seen.append(i)
    return seen
