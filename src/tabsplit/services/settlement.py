from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List

from tabsplit.errors import SettlementImbalanceError
from tabsplit.logging import get_logger
from tabsplit.models import NetBalance

log = get_logger(__name__)


@dataclass(slots=True, frozen=True)
class Transfer:
    from_participant_id: str
    to_participant_id: str
    amount_cents: int


def settle(nets: Iterable[NetBalance]) -> List[Transfer]:
    creditors: list[tuple[str, int]] = []
    debtors: list[tuple[str, int]] = []

    for net in nets:
        if net.net_cents > 0:
            creditors.append((net.participant_id, net.net_cents))
        elif net.net_cents < 0:
            debtors.append((net.participant_id, -net.net_cents))

    leftover = sum(amount for _, amount in creditors) - sum(amount for _, amount in debtors)
    if leftover != 0:
        log.warning("settlement.imbalance", leftover_cents=leftover)
        raise SettlementImbalanceError(leftover)

    creditors.sort(key=lambda x: (-x[1], x[0]))
    debtors.sort(key=lambda x: (-x[1], x[0]))

    transfers: list[Transfer] = []
    i, j = 0, 0

    while i < len(creditors) and j < len(debtors):
        cred_id, cred_amount = creditors[i]
        debt_id, debt_amount = debtors[j]

        transfer_amount = min(cred_amount, debt_amount)
        transfers.append(
            Transfer(from_participant_id=debt_id, to_participant_id=cred_id, amount_cents=transfer_amount)
        )

        cred_amount -= transfer_amount
        debt_amount -= transfer_amount

        if cred_amount == 0:
            i += 1
        else:
            creditors[i] = (cred_id, cred_amount)

        if debt_amount == 0:
            j += 1
        else:
            debtors[j] = (debt_id, debt_amount)

    log.info("settlement.planned", transfers=len(transfers))
    return transfers
