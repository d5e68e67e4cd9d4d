from __future__ import annotations

from typing import Optional, Sequence

from tabsplit.errors import InvalidSplitError, SplitMismatchError
from tabsplit.logging import get_logger
from tabsplit.models import CustomSplit, Expense, Split, SplitMode
from tabsplit.services.ledger import validate_expense
from tabsplit.services.split import (
    ClaimedItem,
    distribute_custom_extras,
    distribute_even_split,
    distribute_item_claims,
    tip_from_percent,
)

log = get_logger(__name__)


def _parse_mode(mode: SplitMode | str) -> SplitMode:
    try:
        return SplitMode(mode)
    except ValueError as exc:
        raise InvalidSplitError(f"Unknown split mode: {mode}") from exc


def _check_members(participant_ids: Sequence[str], tab_participant_ids: Sequence[str]) -> None:
    allowed = set(tab_participant_ids)
    seen: set[str] = set()
    for participant_id in participant_ids:
        if participant_id not in allowed:
            raise InvalidSplitError("Split participant must be in tab")
        if participant_id in seen:
            raise InvalidSplitError("Split participants must be unique")
        seen.add(participant_id)


def _even_splits(
    total_cents: int,
    tab_participant_ids: Sequence[str],
    split_participant_ids: Optional[Sequence[str]],
) -> list[Split]:
    targets = split_participant_ids or tab_participant_ids
    _check_members(targets, tab_participant_ids)
    return distribute_even_split(total_cents, targets)


def _check_non_negative(**amounts: int) -> None:
    for name, value in amounts.items():
        if value < 0:
            raise InvalidSplitError(f"{name} must not be negative")


def _resolve_tip(tip_cents: int, tip_percent_bp: Optional[int], subtotal_cents: int) -> int:
    if tip_percent_bp is None:
        return tip_cents
    if tip_cents:
        raise InvalidSplitError("Tip must be given as an amount or a percent, not both")
    _check_non_negative(tip_percent=tip_percent_bp)
    return tip_from_percent(subtotal_cents, tip_percent_bp)


def _custom_splits(
    total_cents: int,
    tab_participant_ids: Sequence[str],
    custom_splits: Optional[Sequence[CustomSplit]],
    tax_cents: int,
    tip_cents: int,
) -> list[Split]:
    if not custom_splits:
        raise InvalidSplitError("Splits are required")

    _check_members([s.participant_id for s in custom_splits], tab_participant_ids)
    for split in custom_splits:
        if not isinstance(split.base_cents, int) or isinstance(split.base_cents, bool) or split.base_cents <= 0:
            raise InvalidSplitError("Split amount must be greater than zero")

    base_sum = sum(s.base_cents for s in custom_splits)
    if base_sum != total_cents:
        raise SplitMismatchError(total_cents, base_sum)

    return distribute_custom_extras(custom_splits, tax_cents, tip_cents)


def _claim_splits(
    tab_participant_ids: Sequence[str],
    items: Optional[Sequence[ClaimedItem]],
    tax_cents: int,
    fees_cents: int,
    tip_cents: int,
    tip_percent_bp: Optional[int],
) -> list[Split]:
    if not items:
        raise InvalidSplitError("Receipt items are required")

    for item in items:
        if item.price_cents < 0:
            raise InvalidSplitError("Item price must not be negative")
        _check_members(item.claimant_ids, tab_participant_ids)

    # Percent tips apply to the whole receipt subtotal, claimed or not.
    tip_cents = _resolve_tip(tip_cents, tip_percent_bp, sum(item.price_cents for item in items))

    result = distribute_item_claims(items, tax_cents, fees_cents, tip_cents)
    if not result.allocations:
        raise InvalidSplitError("At least one item must be claimed")
    if result.leaked_cents:
        log.warning("claim.rounding_leak", leaked_cents=result.leaked_cents)
    if result.unclaimed_cents:
        log.info("claim.unclaimed_items", unclaimed_cents=result.unclaimed_cents)
    return result.splits


def _dispatch(
    mode: SplitMode,
    total_cents: int,
    tab_participant_ids: Sequence[str],
    split_participant_ids: Optional[Sequence[str]],
    custom_splits: Optional[Sequence[CustomSplit]],
    tax_cents: int,
    tip_cents: int,
    tip_percent_bp: Optional[int],
    fees_cents: int,
    items: Optional[Sequence[ClaimedItem]],
) -> list[Split]:
    _check_non_negative(total=total_cents, tax=tax_cents, tip=tip_cents, fees=fees_cents)

    if mode is SplitMode.SPLIT:
        splits = _even_splits(total_cents, tab_participant_ids, split_participant_ids)
    elif mode is SplitMode.CUSTOM:
        tip_cents = _resolve_tip(tip_cents, tip_percent_bp, total_cents)
        splits = _custom_splits(total_cents, tab_participant_ids, custom_splits, tax_cents, tip_cents)
    else:
        splits = _claim_splits(tab_participant_ids, items, tax_cents, fees_cents, tip_cents, tip_percent_bp)

    log.info("splits.built", mode=mode.value, participants=len(splits))
    return splits


def build_splits(
    mode: SplitMode | str,
    total_cents: int,
    tab_participant_ids: Sequence[str],
    *,
    split_participant_ids: Optional[Sequence[str]] = None,
    custom_splits: Optional[Sequence[CustomSplit]] = None,
    tax_cents: int = 0,
    tip_cents: int = 0,
    tip_percent_bp: Optional[int] = None,
    fees_cents: int = 0,
    items: Optional[Sequence[ClaimedItem]] = None,
) -> list[Split]:
    """
    Compute an expense's splits for the client-selected mode.

    split:  total_cents is shared evenly among split_participant_ids (or the whole tab).
    custom: custom_splits must sum to total_cents; tax and tip go on top proportionally.
    claim:  total_cents is ignored; shares come from claimed items plus cascaded extras.

    tip_percent_bp replaces tip_cents with a percentage (in basis points) of the
    custom total or of the receipt's item subtotal.
    """
    return _dispatch(
        _parse_mode(mode),
        total_cents,
        tab_participant_ids,
        split_participant_ids,
        custom_splits,
        tax_cents,
        tip_cents,
        tip_percent_bp,
        fees_cents,
        items,
    )


def build_expense(
    expense_id: str,
    payer_participant_id: str,
    mode: SplitMode | str,
    total_cents: int,
    tab_participant_ids: Sequence[str],
    *,
    split_participant_ids: Optional[Sequence[str]] = None,
    custom_splits: Optional[Sequence[CustomSplit]] = None,
    tax_cents: int = 0,
    tip_cents: int = 0,
    tip_percent_bp: Optional[int] = None,
    fees_cents: int = 0,
    items: Optional[Sequence[ClaimedItem]] = None,
) -> Expense:
    """
    Build an expense with its splits.

    The stored total includes custom-mode tax and tip; in claim mode it is the
    sum of the claimed shares.
    """
    if payer_participant_id not in tab_participant_ids:
        raise InvalidSplitError("Payer must be in tab")

    parsed = _parse_mode(mode)
    splits = _dispatch(
        parsed,
        total_cents,
        tab_participant_ids,
        split_participant_ids,
        custom_splits,
        tax_cents,
        tip_cents,
        tip_percent_bp,
        fees_cents,
        items,
    )

    if parsed is SplitMode.CLAIM:
        expense_total = sum(split.amount_cents for split in splits)
    elif parsed is SplitMode.CUSTOM:
        expense_total = total_cents + tax_cents + _resolve_tip(tip_cents, tip_percent_bp, total_cents)
    else:
        expense_total = total_cents

    expense = Expense(
        id=expense_id,
        payer_participant_id=payer_participant_id,
        total_cents=expense_total,
        splits=splits,
    )
    validate_expense(expense)
    return expense
