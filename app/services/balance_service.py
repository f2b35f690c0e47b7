# app/services/balance_service.py
import math
import re
from typing import Dict, List, Optional, Sequence

from app.models.split import Balance, Participant, Payment


LEADING_NUMBER = re.compile(r"\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


def parse_amount(text) -> float:
    """Leading decimal of the typed amount; no leading number counts as 0.

    "100yen" reads as 100 and "1,500" as 1.
    """
    match = LEADING_NUMBER.match("" if text is None else str(text))
    if match is None:
        return 0.0
    value = float(match.group(0))
    if math.isnan(value) or math.isinf(value):
        return 0.0
    return value


def round_cents(value: float) -> float:
    # half-up, not banker's rounding
    return math.floor(value * 100 + 0.5) / 100


def display_names(participants: Sequence[Participant]) -> Dict[str, str]:
    return {p.id: (p.name.strip() or f"Person {i + 1}") for i, p in enumerate(participants)}


def compute_balances(participants: Sequence[Participant], payments: Sequence[Payment]) -> Optional[List[Balance]]:
    if not participants or not payments:
        return None

    names = display_names(participants)
    paid = {p.id: 0.0 for p in participants}
    owed = {p.id: 0.0 for p in participants}
    everyone = [p.id for p in participants]

    for pay in payments:
        amount = parse_amount(pay.amount)
        if pay.payer_id in paid:
            paid[pay.payer_id] += amount

        # empty beneficiary list means everyone present right now
        targets = pay.participant_ids or everyone
        share = amount / len(targets) if targets else 0.0
        for pid in targets:
            if pid in owed:
                owed[pid] += share

    return [
        Balance(id=p.id, name=names[p.id], net=round_cents(paid[p.id] - owed[p.id]))
        for p in participants
    ]
