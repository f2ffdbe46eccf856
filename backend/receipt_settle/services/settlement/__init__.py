"""
Settlement services: per-round splitting and cross-round netting.
"""
from .settlement_engine import (
    compute_settlement,
    recalc_total_row,
    add_item,
    remove_item,
)
from .round_summary import summarize_rounds

__all__ = [
    "compute_settlement",
    "recalc_total_row",
    "add_item",
    "remove_item",
    "summarize_rounds",
]
