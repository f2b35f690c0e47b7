from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Request, Form, HTTPException
from fastapi.responses import RedirectResponse, HTMLResponse

from app.services import split_service, split_store
from app.services.balance_service import display_names
from app.services.persistence import load_working_copy, save_working_copy, recent_sessions
from app.services.settlement_service import summarize, settlement_key

router = APIRouter()


def _back(session_id: str):
    return RedirectResponse(f"/split/{session_id}", status_code=303)


def _working_copy(session_id: str):
    session = load_working_copy(session_id)
    if session is None:
        raise HTTPException(404, "Session not found")
    return session


def _edit(session_id: str, change, *args, **kwargs):
    session = _working_copy(session_id)
    save_working_copy(change(session, *args, **kwargs))
    return _back(session_id)


def _fmt_time(ms: Optional[int]) -> str:
    return datetime.fromtimestamp(ms / 1000).strftime("%Y-%m-%d %H:%M") if ms else ""


@router.get("/", response_class=HTMLResponse)
def index(request: Request):
    recent = []
    for sid in recent_sessions(request):
        s = split_store.get_session(sid)
        if s:
            recent.append({"id": s.id, "title": s.title or "Split", "created": _fmt_time(s.created_at)})
    return request.app.templates.TemplateResponse(request, "index.html", {"recent": recent, "current_user": request.session.get("user")})


@router.post("/split/start")
def start_split(title: str = Form(""), names: str = Form("")):
    people = [{"name": n} for n in split_service.parse_names(names)]
    if not people:
        return RedirectResponse("/", status_code=303)
    session_id = split_store.create_session(people, title.strip() or None)
    return _back(session_id)


@router.get("/split/{session_id}", response_class=HTMLResponse)
def view_split(request: Request, session_id: str):
    session = load_working_copy(session_id)
    if session is None:
        return request.app.templates.TemplateResponse(
            request, "not_found.html", {"session_id": session_id}, status_code=404
        )
    recent_sessions(request).touch(session_id)

    names = display_names(session.participants)
    summary = summarize(session)
    pay_rows = []
    for pay in session.payments:
        targets = pay.participant_ids or [p.id for p in session.participants]
        pay_rows.append({
            "id": pay.id, "payer_id": pay.payer_id, "amount": pay.amount, "desc": pay.description,
            "payer_name": names.get(pay.payer_id, "?"),
            "participant_ids": pay.participant_ids,
            "targets": [names[t] for t in targets if t in names],
            "date": _fmt_time(pay.created_at),
        })
    settlements = [
        {"debtor": s.from_, "creditor": s.to, "amount": s.amount, "key": settlement_key(s),
         "done": settlement_key(s) in session.done_settlements}
        for s in (summary.settlements or [])
    ]
    return request.app.templates.TemplateResponse(request, "split.html", {
        "split": session,
        "names": names,
        "payments": pay_rows,
        "balances": summary.balances,
        "settlements": settlements,
        "current_user": request.session.get("user"),
    })


@router.post("/split/{session_id}/title")
def set_title(session_id: str, title: str = Form("")):
    return _edit(session_id, split_service.set_title, title)


@router.post("/split/{session_id}/participants/add")
def add_participant(session_id: str, name: str = Form("")):
    return _edit(session_id, split_service.add_participant, name)


@router.post("/split/{session_id}/participants/{participant_id}/rename")
def rename_participant(session_id: str, participant_id: str, name: str = Form("")):
    return _edit(session_id, split_service.rename_participant, participant_id, name)


@router.post("/split/{session_id}/participants/{participant_id}/delete")
def remove_participant(session_id: str, participant_id: str):
    return _edit(session_id, split_service.remove_participant, participant_id)


@router.post("/split/{session_id}/payments/add")
def add_payment(
    session_id: str,
    payer_id: str = Form(""),
    amount: str = Form(""),
    description: str = Form(""),
    participant_ids: Optional[List[str]] = Form(None),
):
    if not payer_id or not amount.strip():
        return _back(session_id)
    return _edit(session_id, split_service.add_payment, payer_id, amount.strip(), description, participant_ids)


@router.post("/split/{session_id}/payments/{payment_id}/update")
def update_payment(
    session_id: str,
    payment_id: str,
    payer_id: str = Form(...),
    amount: str = Form(""),
    description: str = Form(""),
    participant_ids: Optional[List[str]] = Form(None),
):
    return _edit(
        session_id, split_service.update_payment, payment_id,
        payer_id=payer_id, amount=amount.strip(), description=description,
        participant_ids=participant_ids or [],
    )


@router.post("/split/{session_id}/payments/{payment_id}/delete")
def remove_payment(session_id: str, payment_id: str):
    return _edit(session_id, split_service.remove_payment, payment_id)


@router.post("/split/{session_id}/settlements/toggle")
def toggle_settlement(session_id: str, key: str = Form(...)):
    return _edit(session_id, split_service.toggle_settlement, key)


@router.post("/split/{session_id}/clear")
def set_cleared(session_id: str, cleared: bool = Form(False)):
    return _edit(session_id, split_service.set_cleared, cleared)


@router.post("/split/{session_id}/forget")
def forget_split(request: Request, session_id: str):
    recent_sessions(request).remove(session_id)
    return RedirectResponse("/", status_code=303)
