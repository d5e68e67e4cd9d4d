import pytest

from tabsplit.errors import SplitMismatchError
from tabsplit.models import BalanceStatus, CustomSplit, Expense, NetBalance, Participant, Split
from tabsplit.services.ledger import balance_map, compute_nets, creditors, debtors, validate_expense
from tabsplit.services.split import distribute_custom_extras, distribute_even_split

PARTICIPANTS = [Participant("p1", "Anna"), Participant("p2", "Boris"), Participant("p3", "Vera")]


def _expenses():
    return [
        Expense("e1", "p1", 3000, distribute_even_split(3000, ["p1", "p2", "p3"])),
        Expense("e2", "p2", 1500, [Split("p1", 350), Split("p2", 750), Split("p3", 400)]),
    ]


def test_compute_nets_mixed():
    nets = compute_nets(PARTICIPANTS, _expenses())

    assert balance_map(nets) == {"p1": 1650, "p2": -250, "p3": -1400}
    assert sum(net.net_cents for net in nets) == 0


def test_compute_nets_is_idempotent():
    expenses = _expenses()
    assert compute_nets(PARTICIPANTS, expenses) == compute_nets(PARTICIPANTS, expenses)


def test_compute_nets_keeps_idle_and_unknown_participants():
    participants = PARTICIPANTS + [Participant("p4", "Gleb")]
    expenses = [Expense("e1", "p1", 100, [Split("p1", 50), Split("guest", 50)])]

    nets = compute_nets(participants, expenses)

    assert [net.participant_id for net in nets] == ["p1", "p2", "p3", "p4", "guest"]
    assert balance_map(nets)["p4"] == 0
    assert balance_map(nets)["guest"] == -50


def test_ledger_closure_with_extras():
    base = [CustomSplit("p1", 4500), CustomSplit("p2", 3000), CustomSplit("p3", 2501)]
    splits = distribute_custom_extras(base, 777, 1303)
    expenses = [Expense("e1", "p3", 10001 + 777 + 1303, splits)] + _expenses()
    for expense in expenses:
        validate_expense(expense)

    assert sum(net.net_cents for net in compute_nets(PARTICIPANTS, expenses)) == 0


def test_statuses():
    nets = [NetBalance("a", 10), NetBalance("b", -10), NetBalance("c", 0)]

    assert [n.status for n in nets] == [BalanceStatus.CREDITOR, BalanceStatus.DEBTOR, BalanceStatus.SETTLED]
    assert creditors(nets) == [NetBalance("a", 10)]
    assert debtors(nets) == [NetBalance("b", -10)]


def test_validate_expense_mismatch():
    expense = Expense("e1", "p1", 1000, [Split("p1", 500), Split("p2", 499)])
    with pytest.raises(SplitMismatchError) as excinfo:
        validate_expense(expense)
    assert excinfo.value.expected_cents == 1000
    assert excinfo.value.actual_cents == 999
