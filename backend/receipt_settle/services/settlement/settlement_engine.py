"""
Settlement Engine: Split a round's items between participants.

Assumes a single payer paid the whole bill. Each item is split equally
between its assignees (all participants when it names none), shares are
rounded to whole won per person, and the rounding remainder is charged to
the payer so that the owed amounts add up to the total exactly.
"""
from dataclasses import replace
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union
import logging
from ...config import settings
from ...processors.core.structures import (
    Item, SettlementRow, SettlementResult, coerce_amount, round_half_up,
)

logger = logging.getLogger(__name__)

ItemLike = Union[Item, Mapping[str, Any]]


def to_item(item: ItemLike) -> Item:
    """Accept either an Item or a plain dict (API/JSON payloads)."""
    if isinstance(item, Item):
        return item
    if isinstance(item, Mapping):
        return Item.from_dict(item)
    return Item()


def item_amount(item: Item) -> int:
    """Whole-won amount of an item; invalid or negative amounts count as 0."""
    return max(0, round_half_up(coerce_amount(item.amount)))


def compute_settlement(
    items: Optional[Iterable[ItemLike]],
    participants: Optional[Iterable[str]],
    payer: Optional[str] = "",
) -> SettlementResult:
    """
    Compute what each participant owes for one round.

    Args:
        items: Cost items; ``assignees`` empty means split among everyone
        participants: Participant ids in display order
        payer: Participant who paid; receives the rounding remainder

    Returns:
        SettlementResult with one row per participant, in participant order.
        When the payer is a participant, sum(row.owed) == total.
    """
    people = [p for p in (participants or []) if isinstance(p, str) and p]
    known = set(people)
    owed: Dict[str, float] = {p: 0.0 for p in people}

    total = 0
    for raw in items or []:
        item = to_item(raw)
        amount = item_amount(item)
        if not amount:
            continue
        total += amount

        named = item.assignees if isinstance(item.assignees, (list, tuple)) else []
        assignees = [a for a in named if isinstance(a, str) and a in known]
        if not assignees:
            assignees = people
        if not assignees:
            logger.debug(f"Item '{item.name}' ({amount}) has nobody to charge")
            continue

        share = amount / len(assignees)
        for person in assignees:
            owed[person] += share

    rounded = {p: round_half_up(owed[p]) for p in people}
    diff = total - sum(rounded.values())
    if isinstance(payer, str) and payer in rounded:
        rounded[payer] += diff
        if diff:
            logger.debug(f"Rounding remainder {diff:+d} charged to payer '{payer}'")

    rows = [
        SettlementRow(
            person=p,
            owed=rounded[p],
            pay_to_payer=0 if p == payer else max(0, rounded[p]),
        )
        for p in people
    ]
    return SettlementResult(total=total, rows=rows)


def recalc_total_row(items: Iterable[ItemLike]) -> List[Item]:
    """
    Recompute the total row as the remainder of the receipt total.

    The first item flagged ``is_total`` gets
    ``initial_amount - sum(other item amounts)``. Returns a new list; the
    input items are not modified.
    """
    next_items = [to_item(it) for it in items]
    total_idx = next((i for i, it in enumerate(next_items) if it.is_total), -1)
    if total_idx < 0:
        return next_items

    other_sum = sum(coerce_amount(it.amount) for it in next_items if not it.is_total)
    total_item = next_items[total_idx]
    remainder = coerce_amount(total_item.initial_amount) - other_sum
    if remainder.is_integer():
        remainder = int(remainder)
    next_items[total_idx] = replace(total_item, amount=remainder)
    return next_items


def add_item(items: Iterable[ItemLike], name: Optional[str] = None) -> List[Item]:
    """Append an empty item and recompute the total row."""
    new_item = Item(name=name or settings.default_item_name, amount=0)
    return recalc_total_row([*items, new_item])


def remove_item(items: Iterable[ItemLike], item_id: str) -> List[Item]:
    """Drop the item with the given id and recompute the total row."""
    return recalc_total_row([it for it in map(to_item, items) if it.id != item_id])
