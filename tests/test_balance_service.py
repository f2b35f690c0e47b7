import random

from app.services.balance_service import compute_balances, display_names, parse_amount, round_cents
from tests.factories import people, payment


def nets(balances):
    return {b.id: b.net for b in balances}


def test_one_payment_split_three_ways():
    balances = compute_balances(people("A", "B", "C"), [payment("A", "90", ["A", "B", "C"])])
    assert nets(balances) == {"A": 60, "B": -30, "C": -30}


def test_empty_beneficiaries_means_everyone():
    balances = compute_balances(people("P1", "P2"), [payment("P1", "100")])
    assert nets(balances) == {"P1": 50, "P2": -50}


def test_empty_beneficiaries_follow_current_participants():
    pay = [payment("A", "90")]
    assert nets(compute_balances(people("A", "B"), pay)) == {"A": 45, "B": -45}
    assert nets(compute_balances(people("A", "B", "C"), pay)) == {"A": 60, "B": -30, "C": -30}


def test_non_numeric_amount_counts_as_zero():
    balances = compute_balances(people("A", "B"), [payment("A", "abc")])
    assert nets(balances) == {"A": 0, "B": 0}


def test_nothing_to_show_without_participants_or_payments():
    assert compute_balances([], [payment("A", "10")]) is None
    assert compute_balances(people("A"), []) is None


def test_negative_amounts_are_accepted():
    balances = compute_balances(people("A", "B"), [payment("A", "-20", ["B"])])
    assert nets(balances) == {"A": -20, "B": 20}


def test_unknown_ids_are_ignored():
    balances = compute_balances(people("A", "B"), [payment("ghost", "30", ["A", "ghost"])])
    assert nets(balances) == {"A": -15, "B": 0}


def test_blank_names_fall_back_to_position():
    ps = people("A", "B")
    ps[1] = ps[1].model_copy(update={"name": "  "})
    assert display_names(ps) == {"A": "A", "B": "Person 2"}
    balances = compute_balances(ps, [payment("A", "10")])
    assert [b.name for b in balances] == ["A", "Person 2"]


def test_parse_amount():
    assert parse_amount("12.50") == 12.5
    assert parse_amount(" 7 ") == 7
    assert parse_amount("") == 0
    assert parse_amount(None) == 0
    assert parse_amount("nan") == 0
    assert parse_amount("inf") == 0
    assert parse_amount("100yen") == 100
    assert parse_amount("1,500") == 1
    assert parse_amount("1_000") == 1
    assert parse_amount(".5") == 0.5
    assert parse_amount("-2.5e1x") == -25
    assert parse_amount("1e999") == 0


def test_amount_with_trailing_text_still_counts():
    balances = compute_balances(people("A", "B"), [payment("A", "100yen")])
    assert nets(balances) == {"A": 50, "B": -50}


def test_round_cents_is_half_up():
    assert round_cents(0.125) == 0.13
    assert round_cents(2.5 / 100) == 0.03
    assert round_cents(-0.004) == 0


def test_money_is_conserved():
    rng = random.Random(7)
    ids = ["A", "B", "C", "D", "E"]
    for _ in range(200):
        pays = []
        for n in range(rng.randint(1, 8)):
            targets = rng.sample(ids, rng.randint(0, len(ids)))
            pays.append(payment(rng.choice(ids), f"{rng.uniform(0, 500):.2f}", targets, pid=str(n)))
        balances = compute_balances(people(*ids), pays)
        # each net is rounded on its own, so allow half a cent per participant
        assert abs(sum(b.net for b in balances)) <= 0.005 * len(ids) + 1e-9
