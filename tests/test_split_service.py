from app.models.split import SplitSession
from app.services import split_service
from app.services.balance_service import compute_balances
from tests.factories import people, payment


def session_with(*names, payments=()):
    return SplitSession(id="s1", participants=people(*names), payments=list(payments))


def test_parse_names():
    assert split_service.parse_names("Ann, Bob\n  Cy \n,,") == ["Ann", "Bob", "Cy"]
    assert split_service.parse_names("") == []
    assert split_service.parse_names(None) == []


def test_removing_participant_cascades_to_payments():
    s = session_with("A", "B", "C", payments=[
        payment("B", "30", ["A", "C"], pid="p1"),   # B paid
        payment("A", "60", ["A", "B"], pid="p2"),   # B shares
        payment("A", "90", ["A", "C"], pid="p3"),
    ])
    updated = split_service.remove_participant(s, "B")

    assert [p.id for p in updated.participants] == ["A", "C"]
    assert [pay.id for pay in updated.payments] == ["p3"]
    balances = compute_balances(updated.participants, updated.payments)
    assert {b.id: b.net for b in balances} == {"A": 45, "C": -45}
    # the original is untouched
    assert len(s.payments) == 3


def test_last_participant_is_kept():
    s = session_with("A")
    assert split_service.remove_participant(s, "A").participants == s.participants


def test_remove_unknown_participant_is_noop():
    s = session_with("A", "B", payments=[payment("A", "10")])
    assert split_service.remove_participant(s, "Z") == s


def test_add_and_rename_participant():
    s = split_service.add_participant(session_with("A"), "  Dee ")
    assert s.participants[-1].name == "Dee"
    assert s.participants[-1].id not in ("A",)
    s = split_service.rename_participant(s, "A", "Ann")
    assert s.participants[0].name == "Ann"


def test_add_payment():
    s = split_service.add_payment(session_with("A", "B"), "A", "42.5", "Lunch", ["B", "B", "A"])
    pay = s.payments[0]
    assert pay.payer_id == "A"
    assert pay.amount == "42.5"
    assert pay.description == "Lunch"
    assert pay.participant_ids == ["B", "A"]
    assert pay.created_at > 0
    assert pay.id


def test_update_and_remove_payment():
    s = session_with("A", "B", payments=[payment("A", "10", pid="p1")])
    s = split_service.update_payment(s, "p1", amount="25", participant_ids=["B"])
    assert s.payments[0].amount == "25"
    assert s.payments[0].participant_ids == ["B"]
    assert s.payments[0].payer_id == "A"
    s = split_service.remove_payment(s, "p1")
    assert s.payments == []


def test_toggle_settlement_and_clear():
    s = session_with("A")
    s = split_service.toggle_settlement(s, "B-A-30")
    assert s.done_settlements == ["B-A-30"]
    s = split_service.toggle_settlement(s, "B-A-30")
    assert s.done_settlements == []
    assert split_service.set_cleared(s, True).cleared is True


def test_title_blank_becomes_none():
    s = split_service.set_title(session_with("A"), "  Trip ")
    assert s.title == "Trip"
    assert split_service.set_title(s, "   ").title is None


def test_snapshot_is_wire_format():
    s = session_with("A", payments=[payment("A", "5", pid="p1")])
    snap = split_service.snapshot(s)
    assert set(snap) == {"title", "participants", "payments", "doneSettlements", "cleared"}
    assert snap["payments"][0]["payerId"] == "A"
    assert snap["payments"][0]["participantIds"] == []
