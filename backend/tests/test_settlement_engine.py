"""Test per-round settlement and total-row bookkeeping."""
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from receipt_settle.processors.core.structures import Item
from receipt_settle.services.settlement import (
    add_item,
    compute_settlement,
    recalc_total_row,
    remove_item,
)


def _owed(result):
    return {r.person: r.owed for r in result.rows}


def _pay(result):
    return {r.person: r.pay_to_payer for r in result.rows}


def test_equal_split():
    result = compute_settlement([{"amount": 30000}], ["A", "B", "C"], "A")
    assert result.total == 30000
    assert _owed(result) == {"A": 10000, "B": 10000, "C": 10000}
    assert _pay(result) == {"A": 0, "B": 10000, "C": 10000}
    assert sum(r.owed for r in result.rows) == result.total


def test_rounding_remainder_goes_to_payer():
    result = compute_settlement([{"amount": 100}], ["A", "B", "C"], "A")
    assert result.total == 100
    assert _owed(result) == {"A": 34, "B": 33, "C": 33}
    assert sum(r.owed for r in result.rows) == 100


def test_no_payer_means_no_reconciliation():
    result = compute_settlement([{"amount": 100}], ["A", "B", "C"], "")
    assert result.total == 100
    assert _owed(result) == {"A": 33, "B": 33, "C": 33}
    assert sum(r.owed for r in result.rows) == 99

    # a payer who is not a participant does not absorb the remainder either
    result = compute_settlement([{"amount": 100}], ["A", "B", "C"], "Z")
    assert sum(r.owed for r in result.rows) == 99


def test_explicit_assignees():
    result = compute_settlement([{"amount": 10000, "assignees": ["B"]}], ["A", "B"], "A")
    assert result.total == 10000
    assert _owed(result) == {"A": 0, "B": 10000}
    assert _pay(result) == {"A": 0, "B": 10000}


def test_mixed_items_and_item_objects():
    items = [
        Item(name="합계", amount=30000, is_total=True, initial_amount=40000),
        Item(name="와인", amount=10000, assignees=["B"]),
    ]
    result = compute_settlement(items, ["A", "B", "C"], "A")
    assert result.total == 40000
    assert _owed(result) == {"A": 10000, "B": 20000, "C": 10000}


def test_unknown_assignees_fall_back_to_everyone():
    result = compute_settlement([{"amount": 3000, "assignees": ["Z"]}], ["A", "B", "C"], "A")
    assert _owed(result) == {"A": 1000, "B": 1000, "C": 1000}


def test_invalid_amounts_are_skipped():
    items = [
        {"amount": None},
        {"amount": "abc"},
        {"amount": float("nan")},
        {"amount": -5000},
        {},
        {"amount": "6000"},
    ]
    result = compute_settlement(items, ["A", "B"], "A")
    assert result.total == 6000
    assert _owed(result) == {"A": 3000, "B": 3000}


def test_half_shares_round_up_and_payer_absorbs():
    result = compute_settlement([{"amount": 1}], ["A", "B"], "")
    assert _owed(result) == {"A": 1, "B": 1}

    result = compute_settlement([{"amount": 1}], ["A", "B"], "A")
    assert _owed(result) == {"A": 0, "B": 1}
    assert _pay(result) == {"A": 0, "B": 1}


def test_item_amount_is_rounded_before_splitting():
    result = compute_settlement([{"amount": 99.6}], ["A"], "A")
    assert result.total == 100
    assert _owed(result) == {"A": 100}


def test_no_participants():
    result = compute_settlement([{"amount": 5000}], [], "")
    assert result.rows == []
    assert result.total == 5000


def test_empty_participant_ids_are_ignored_and_order_kept():
    result = compute_settlement([{"amount": 2000}], ["B", "", "A"], "A")
    assert [r.person for r in result.rows] == ["B", "A"]


def test_reconciliation_can_lower_payer_share():
    # thirds round up for everyone; the payer gives the extra won back
    result = compute_settlement([{"amount": 1}, {"amount": 1}], ["A", "B", "C"], "A")
    assert result.total == 2
    assert sum(r.owed for r in result.rows) == 2
    assert all(r.pay_to_payer >= 0 for r in result.rows)


def test_recalc_total_row_uses_remainder():
    items = [
        Item(name="합계", amount=30000, initial_amount=30000, is_total=True),
        Item(name="와인", amount=10000, assignees=["B"]),
    ]
    updated = recalc_total_row(items)
    assert updated[0].amount == 20000
    assert updated[1].amount == 10000
    # inputs untouched
    assert items[0].amount == 30000


def test_recalc_without_total_row_is_a_copy():
    items = [{"name": "a", "amount": 100}]
    updated = recalc_total_row(items)
    assert [it.amount for it in updated] == [100]


def test_recalc_accepts_camel_case_dicts():
    items = [
        {"name": "합계", "amount": 0, "initialAmount": 5000, "isTotal": True},
        {"name": "x", "amount": "abc"},
        {"name": "y", "amount": 1500},
    ]
    assert recalc_total_row(items)[0].amount == 3500


def test_add_and_remove_item_recompute_total():
    items = [Item(name="합계", amount=30000, initial_amount=30000, is_total=True)]
    items = add_item(items)
    assert len(items) == 2
    assert items[1].amount == 0
    assert items[1].assignees == []
    assert items[0].amount == 30000

    items[1].amount = 12000
    items = recalc_total_row(items)
    assert items[0].amount == 18000

    items = remove_item(items, items[1].id)
    assert len(items) == 1
    assert items[0].amount == 30000


def test_malformed_assignees_are_dropped():
    result = compute_settlement([{"amount": 3000, "assignees": [["B"], "B"]}], ["A", "B"], "A")
    assert _owed(result) == {"A": 0, "B": 3000}

    result = compute_settlement([Item(amount=3000, assignees=None)], ["A", "B"], "A")
    assert _owed(result) == {"A": 1500, "B": 1500}

    result = compute_settlement([{"amount": 3000, "assignees": "B"}], ["A", "B", ["C"]], ["A"])
    assert _owed(result) == {"A": 1500, "B": 1500}
    assert result.total == 3000


def test_underscore_grouped_amount_is_invalid():
    result = compute_settlement([{"amount": "1_000"}, {"amount": " 2000 "}], ["A"], "A")
    assert result.total == 2000
