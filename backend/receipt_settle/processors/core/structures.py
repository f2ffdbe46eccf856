"""
Receipt Settlement Data Structures.

This module defines the data structures shared by the OCR line pipeline
and the settlement engine.
"""
from dataclasses import dataclass, field
from typing import List, Dict, Any
import math
import uuid


def coerce_amount(value: Any) -> float:
    """
    Coerce an arbitrary amount value to a finite float.

    None, empty strings, booleans, unparsable strings and non-finite numbers
    all become 0. Digit-grouping underscores ("1_000") are not accepted.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip()
        if "_" in text:
            return 0.0
        try:
            number = float(text or 0)
        except (ValueError, TypeError):
            return 0.0
    if not math.isfinite(number):
        return 0.0
    return number


def round_half_up(value: float) -> int:
    """Round to the nearest integer, .5 going up (towards +inf)."""
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class Word:
    """A single OCR word with its pixel bounding box."""
    text: str
    min_x: float
    max_x: float
    min_y: float
    max_y: float
    h: float
    cy: float

    @classmethod
    def from_extents(cls, text: str, min_x: float, max_x: float, min_y: float, max_y: float) -> "Word":
        """Create a Word, deriving height and vertical center from the extents."""
        return cls(
            text=text,
            min_x=min_x,
            max_x=max_x,
            min_y=min_y,
            max_y=max_y,
            h=max(1.0, max_y - min_y),
            cy=(min_y + max_y) / 2,
        )


@dataclass
class Line:
    """Working structure for a text line while words are being clustered."""
    words: List[Word]
    min_x: float
    max_x: float
    min_y: float
    max_y: float
    h: float
    cy: float
    n: int = 1

    @classmethod
    def start(cls, word: Word) -> "Line":
        return cls(
            words=[word],
            min_x=word.min_x,
            max_x=word.max_x,
            min_y=word.min_y,
            max_y=word.max_y,
            h=word.h,
            cy=word.cy,
        )

    def add(self, word: Word) -> None:
        """Attach a word, widening the extents and moving the running center."""
        self.words.append(word)
        self.min_y = min(self.min_y, word.min_y)
        self.max_y = max(self.max_y, word.max_y)
        self.min_x = min(self.min_x, word.min_x)
        self.max_x = max(self.max_x, word.max_x)

        height = self.max_y - self.min_y
        if height > 0:
            self.h = height

        self.n += 1
        self.cy = self.cy + (word.cy - self.cy) / self.n


@dataclass(frozen=True)
class MoneyToken:
    """A numeric value found in a normalized receipt line."""
    value: int
    has_separator: bool
    has_currency: bool


@dataclass(frozen=True)
class TotalAmountResult:
    """Best-guess grand total and the line that justifies it."""
    amount: int
    evidence: str


@dataclass(frozen=True)
class ParsedItemLine:
    """An item name and price read off a single receipt line."""
    name: str
    amount: int


@dataclass
class Item:
    """A cost item to be split between participants."""
    name: str = ""
    amount: Any = 0
    assignees: List[str] = field(default_factory=list)
    is_total: bool = False
    initial_amount: Any = 0
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    @classmethod
    def from_dict(cls, item_dict: Dict[str, Any]) -> "Item":
        """Create an Item from a loosely-typed dictionary (camelCase keys accepted)."""
        assignees = item_dict.get("assignees")
        initial = item_dict.get("initial_amount", item_dict.get("initialAmount", 0))
        return cls(
            name=str(item_dict.get("name") or ""),
            amount=item_dict.get("amount", 0),
            assignees=list(assignees) if isinstance(assignees, (list, tuple)) else [],
            is_total=bool(item_dict.get("is_total", item_dict.get("isTotal", False))),
            initial_amount=initial,
            id=str(item_dict.get("id") or uuid.uuid4()),
        )


@dataclass(frozen=True)
class SettlementRow:
    """What one participant owes for a round."""
    person: str
    owed: int
    pay_to_payer: int


@dataclass(frozen=True)
class SettlementResult:
    """Total and per-participant rows, in participant order."""
    total: int
    rows: List[SettlementRow]


@dataclass
class Round:
    """One settlement round (1차, 2차, ...) with its own items and payer."""
    name: str = ""
    items: List[Item] = field(default_factory=list)
    payer: str = ""
    evidence: str = ""
    raw_text: str = ""
    id: str = field(default_factory=lambda: str(uuid.uuid4()))


@dataclass(frozen=True)
class PersonSummary:
    """Net position of a person across all rounds (positive = receives)."""
    person: str
    paid: int
    owed: int
    net: int


@dataclass
class ReceiptAnalysis:
    """Result of running a receipt OCR response through the line pipeline."""
    lines: List[str]
    raw_text: str
    amount: int
    evidence: str
    items: List[Item] = field(default_factory=list)
