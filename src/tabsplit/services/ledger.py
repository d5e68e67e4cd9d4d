from __future__ import annotations

from typing import Iterable, Sequence

from tabsplit.errors import SplitMismatchError
from tabsplit.models import BalanceStatus, Expense, NetBalance, Participant


def validate_expense(expense: Expense) -> None:
    split_sum = sum(split.amount_cents for split in expense.splits)
    if split_sum != expense.total_cents:
        raise SplitMismatchError(expense.total_cents, split_sum)


def compute_nets(participants: Sequence[Participant], expenses: Iterable[Expense]) -> list[NetBalance]:
    """net = paid as payer - owed across splits; sums to zero when every expense validates."""
    nets: dict[str, int] = {participant.id: 0 for participant in participants}

    for expense in expenses:
        payer_id = expense.payer_participant_id
        nets[payer_id] = nets.get(payer_id, 0) + expense.total_cents
        for split in expense.splits:
            nets[split.participant_id] = nets.get(split.participant_id, 0) - split.amount_cents

    return [NetBalance(participant_id, net_cents) for participant_id, net_cents in nets.items()]


def balance_map(nets: Iterable[NetBalance]) -> dict[str, int]:
    return {net.participant_id: net.net_cents for net in nets}


def creditors(nets: Iterable[NetBalance]) -> list[NetBalance]:
    return [net for net in nets if net.status is BalanceStatus.CREDITOR]


def debtors(nets: Iterable[NetBalance]) -> list[NetBalance]:
    return [net for net in nets if net.status is BalanceStatus.DEBTOR]
