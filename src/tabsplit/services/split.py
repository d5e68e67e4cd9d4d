from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Mapping, Sequence

from tabsplit.errors import EmptyParticipantSetError
from tabsplit.models import CustomSplit, Split
from tabsplit.services.allocation import WeightedBucket, allocate_proportionally


@dataclass(slots=True, frozen=True)
class ClaimedItem:
    id: str
    price_cents: int
    claimant_ids: Sequence[str]


@dataclass(slots=True, frozen=True)
class ClaimAllocation:
    participant_id: str
    subtotal_cents: int
    tax_cents: int
    fees_cents: int
    tip_cents: int

    @property
    def total_cents(self) -> int:
        return self.subtotal_cents + self.tax_cents + self.fees_cents + self.tip_cents


@dataclass(slots=True)
class ClaimResult:
    allocations: list[ClaimAllocation] = field(default_factory=list)
    # Per-item floor-division remainders that nobody was charged for.
    leaked_cents: int = 0
    # Prices of items with no claimants.
    unclaimed_cents: int = 0

    @property
    def splits(self) -> list[Split]:
        return [Split(a.participant_id, a.total_cents) for a in self.allocations]

    @property
    def total_cents(self) -> int:
        return sum(a.total_cents for a in self.allocations)


def distribute_even_split(total_cents: int, participant_ids: Sequence[str]) -> list[Split]:
    """
    Split a total evenly. Ids are sorted; the extra cents go to the LAST ones.

    This differs from allocate_proportionally's zero-weight fallback, which hands
    the extra cents to the first buckets. Both rules are relied upon.
    """
    if not participant_ids:
        raise EmptyParticipantSetError("No participants to split")

    ordered = sorted(participant_ids)
    base, remainder = divmod(total_cents, len(ordered))
    remainder_start = len(ordered) - remainder
    return [
        Split(participant_id, base + (1 if index >= remainder_start else 0))
        for index, participant_id in enumerate(ordered)
    ]


def distribute_custom_extras(splits: Sequence[CustomSplit], tax_cents: int, tip_cents: int) -> list[Split]:
    if not splits:
        return []

    buckets = [WeightedBucket(s.participant_id, s.base_cents) for s in splits]
    tax = allocate_proportionally(buckets, tax_cents)
    tip = allocate_proportionally(buckets, tip_cents)

    return [Split(s.participant_id, s.base_cents + tax[s.participant_id] + tip[s.participant_id]) for s in splits]


BASIS_POINTS = 10_000


def tip_from_percent(subtotal_cents: int, percent_basis_points: int) -> int:
    """Tip on a subtotal, rounded half up to the cent: 18% of $10.25 is 185 cents."""
    return (subtotal_cents * percent_basis_points + BASIS_POINTS // 2) // BASIS_POINTS


def merge_shares(shares: Iterable[Mapping[str, int]]) -> dict[str, int]:
    result: dict[str, int] = {}
    for share in shares:
        for participant_id, amount in share.items():
            result[participant_id] = result.get(participant_id, 0) + amount
    return result


def claimed_subtotals(items: Sequence[ClaimedItem]) -> tuple[dict[str, int], int, int]:
    """Return (subtotal per participant, leaked cents, unclaimed cents)."""
    per_item: list[dict[str, int]] = []
    leaked = 0
    unclaimed = 0
    for item in items:
        if not item.claimant_ids:
            unclaimed += item.price_cents
            continue
        share, rest = divmod(item.price_cents, len(item.claimant_ids))
        leaked += rest
        per_item.append({claimant: share for claimant in item.claimant_ids})
    return merge_shares(per_item), leaked, unclaimed


def distribute_item_claims(
    items: Sequence[ClaimedItem],
    tax_cents: int,
    fees_cents: int,
    tip_cents: int,
) -> ClaimResult:
    """
    Item-claim split with cascaded extras.

    Tax is apportioned over claimed subtotals, fees over subtotal + tax, and tip
    over subtotal + tax + fees. The order changes rounding and must stay fixed.
    """
    subtotals, leaked, unclaimed = claimed_subtotals(items)
    ids = sorted(subtotals)

    tax = allocate_proportionally([WeightedBucket(pid, subtotals[pid]) for pid in ids], tax_cents)
    fees = allocate_proportionally(
        [WeightedBucket(pid, subtotals[pid] + tax[pid]) for pid in ids],
        fees_cents,
    )
    tip = allocate_proportionally(
        [WeightedBucket(pid, subtotals[pid] + tax[pid] + fees[pid]) for pid in ids],
        tip_cents,
    )

    allocations = [
        ClaimAllocation(
            participant_id=pid,
            subtotal_cents=subtotals[pid],
            tax_cents=tax[pid],
            fees_cents=fees[pid],
            tip_cents=tip[pid],
        )
        for pid in ids
    ]
    return ClaimResult(allocations=allocations, leaked_cents=leaked, unclaimed_cents=unclaimed)
