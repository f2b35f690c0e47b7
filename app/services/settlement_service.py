# app/services/settlement_service.py
from typing import List, Optional, Sequence

from app.models.split import Balance, Settlement, SplitSession, Summary
from app.services.balance_service import compute_balances


def suggest_settlements(balances: Optional[Sequence[Balance]]) -> Optional[List[Settlement]]:
    """Greedy largest-debtor to largest-creditor matching.

    Works in whole cents so every party drains to exactly zero. Ties keep
    participant order since ``list.sort`` is stable.
    """
    if balances is None:
        return None

    names = {b.id: b.name for b in balances}
    creditors = []
    debtors = []
    for b in balances:
        cents = int(round(b.net * 100))
        if cents > 0:
            creditors.append([b.id, cents])
        elif cents < 0:
            debtors.append([b.id, -cents])
    creditors.sort(key=lambda x: x[1], reverse=True)
    debtors.sort(key=lambda x: x[1], reverse=True)

    settlements = []
    i = j = 0
    while i < len(debtors) and j < len(creditors):
        debtor_id, debt = debtors[i]
        creditor_id, credit = creditors[j]
        pay = min(debt, credit)
        settlements.append(Settlement(
            from_=names[debtor_id], to=names[creditor_id], amount=pay / 100,
            from_id=debtor_id, to_id=creditor_id,
        ))
        debtors[i][1] -= pay
        creditors[j][1] -= pay
        if debtors[i][1] == 0:
            i += 1
        if creditors[j][1] == 0:
            j += 1
    return settlements


def format_amount(amount: float) -> str:
    return f"{amount:.2f}".rstrip("0").rstrip(".")


def settlement_key(s: Settlement) -> str:
    return f"{s.from_}-{s.to}-{format_amount(s.amount)}"


def summarize(session: SplitSession) -> Summary:
    balances = compute_balances(session.participants, session.payments)
    return Summary(balances=balances, settlements=suggest_settlements(balances))
