"""
Processors Core: Shared data structures.

Used by the OCR line pipeline and the settlement services.
"""
from .structures import (
    Word, Line, MoneyToken, TotalAmountResult, ParsedItemLine,
    Item, SettlementRow, SettlementResult, Round, PersonSummary,
    ReceiptAnalysis, coerce_amount, round_half_up,
)

__all__ = [
    "Word", "Line", "MoneyToken", "TotalAmountResult", "ParsedItemLine",
    "Item", "SettlementRow", "SettlementResult", "Round", "PersonSummary",
    "ReceiptAnalysis", "coerce_amount", "round_half_up",
]
