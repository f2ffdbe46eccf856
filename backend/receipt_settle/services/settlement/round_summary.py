"""
Round Summary: Net every person's position across all settlement rounds.

Each round is settled on its own; the round's payer is credited with the
round total and everyone is debited with what they owe. A positive ``net``
means the person should receive money, a negative one that they should send.
"""
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union
import logging
from ...processors.core.structures import Round, PersonSummary
from .settlement_engine import compute_settlement

logger = logging.getLogger(__name__)

RoundLike = Union[Round, Mapping[str, Any]]


def _round_parts(round_: RoundLike):
    if isinstance(round_, Round):
        return round_.items, round_.payer
    if isinstance(round_, Mapping):
        return round_.get("items") or [], round_.get("payer") or ""
    return [], ""


def summarize_rounds(
    rounds: Optional[Iterable[RoundLike]],
    participants: Optional[Iterable[str]],
) -> List[PersonSummary]:
    """
    Aggregate paid/owed/net per person over all rounds.

    Args:
        rounds: Round objects or dicts with ``items`` and ``payer``
        participants: Participant ids in display order

    Returns:
        One PersonSummary per participant (given order), followed by any
        payer who is not a participant
    """
    people = [p for p in (participants or []) if p]
    summary: Dict[str, Dict[str, int]] = {p: {"paid": 0, "owed": 0} for p in people}

    for round_ in rounds or []:
        items, payer = _round_parts(round_)
        result = compute_settlement(items, people, payer)

        for row in result.rows:
            summary.setdefault(row.person, {"paid": 0, "owed": 0})["owed"] += row.owed

        if payer:
            summary.setdefault(payer, {"paid": 0, "owed": 0})["paid"] += result.total

    logger.info(f"Summarized {len(summary)} people")
    return [
        PersonSummary(person=p, paid=v["paid"], owed=v["owed"], net=v["paid"] - v["owed"])
        for p, v in summary.items()
    ]
