from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Sequence


class SplitMode(str, Enum):
    SPLIT = "split"
    CUSTOM = "custom"
    CLAIM = "claim"


class BalanceStatus(str, Enum):
    CREDITOR = "creditor"
    DEBTOR = "debtor"
    SETTLED = "settled"


@dataclass(slots=True, frozen=True)
class Participant:
    id: str
    display_name: str


@dataclass(slots=True, frozen=True)
class Split:
    participant_id: str
    amount_cents: int


@dataclass(slots=True, frozen=True)
class CustomSplit:
    participant_id: str
    base_cents: int


@dataclass(slots=True)
class Expense:
    id: str
    payer_participant_id: str
    total_cents: int
    splits: Sequence[Split] = field(default_factory=list)


@dataclass(slots=True, frozen=True)
class NetBalance:
    participant_id: str
    net_cents: int

    @property
    def status(self) -> BalanceStatus:
        if self.net_cents > 0:
            return BalanceStatus.CREDITOR
        if self.net_cents < 0:
            return BalanceStatus.DEBTOR
        return BalanceStatus.SETTLED
