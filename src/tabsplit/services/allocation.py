from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence


@dataclass(slots=True, frozen=True)
class WeightedBucket:
    id: str
    weight: int


@dataclass(slots=True, frozen=True)
class ItemAllocation:
    item_id: str
    tax_cents: int
    tip_cents: int
    fees_cents: int
    total_cents: int


def allocate_proportionally(buckets: Sequence[WeightedBucket], total: int) -> dict[str, int]:
    """
    Largest Remainder (Hamilton) apportionment of an integer total over weighted buckets.

    Fractional parts stay integer numerators over the weight sum, so ties are
    compared exactly and resolved by ascending bucket id.
    """
    if not buckets or total == 0:
        return {bucket.id: 0 for bucket in buckets}

    weight_sum = sum(bucket.weight for bucket in buckets)

    if weight_sum == 0:
        base, remainder = divmod(total, len(buckets))
        return {bucket.id: base + (1 if index < remainder else 0) for index, bucket in enumerate(buckets)}

    result: dict[str, int] = {}
    remainders: list[tuple[int, str]] = []
    for bucket in buckets:
        floor, numerator = divmod(bucket.weight * total, weight_sum)
        result[bucket.id] = floor
        remainders.append((numerator, bucket.id))

    leftover = total - sum(result.values())
    remainders.sort(key=lambda x: (-x[0], x[1]))
    for _, bucket_id in remainders[:leftover]:
        result[bucket_id] += 1

    return result


def allocate_receipt_proportionally(
    buckets: Sequence[WeightedBucket],
    tax_cents: int,
    tip_cents: int,
    fees_cents: int,
) -> list[ItemAllocation]:
    """Spread tax, tip and fees independently over item subtotals."""
    tax = allocate_proportionally(buckets, tax_cents)
    tip = allocate_proportionally(buckets, tip_cents)
    fees = allocate_proportionally(buckets, fees_cents)

    return [
        ItemAllocation(
            item_id=bucket.id,
            tax_cents=tax[bucket.id],
            tip_cents=tip[bucket.id],
            fees_cents=fees[bucket.id],
            total_cents=bucket.weight + tax[bucket.id] + tip[bucket.id] + fees[bucket.id],
        )
        for bucket in buckets
    ]
