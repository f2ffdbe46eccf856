"""
Total Amount Extractor: Pick the grand total of a Korean receipt.

Lines are normalized (OCR-mangled thousands separators repaired), money
tokens are pulled out with quantity/date/phone-number exclusion filters, and
every line matching a total keyword is scored. The best-scoring candidate
wins; if no keyword line yields an amount, the largest money token in the
document is returned instead.

This is a heuristic, not an exact parser.
"""
from typing import List, Optional, Tuple, Union
import logging
import math
import re
from ..core.structures import MoneyToken, TotalAmountResult

logger = logging.getLogger(__name__)

MAX_MONEY_VALUE = 200_000_000
MIN_MONEY_VALUE = 1
# Bare digit runs this short read as quantities
MAX_QUANTITY_DIGITS = 3
# Bare digit runs this long read as approval/merchant/phone numbers
MIN_ID_DIGITS = 8
YEAR_RANGE = (1900, 2099)

# Later lines are more likely to hold the grand total
SAME_LINE_POSITION_BONUS = 25
NEIGHBOR_POSITION_BONUS = 20
SAME_LINE_BAD_CONTEXT_PENALTY = 60
NEIGHBOR_BAD_CONTEXT_PENALTY = 40
NEIGHBOR_DISTANCE_PENALTY = 5
# Where to look for an amount when the keyword line has none
NEIGHBOR_OFFSETS = (1, 2, -1, -2)

CURRENCY_SUFFIX = "원"

_WHITESPACE_RE = re.compile(r"\s+")
# 136.00021 -> 136.000 (trailing noise after a grouped number)
_DOT_TAIL_NOISE_RE = re.compile(r"\b(\d{1,3})\.(\d{3})(\d{1,2})\b", re.ASCII)
_COMMA_TAIL_NOISE_RE = re.compile(r"\b(\d{1,3}),(\d{3})(\d{1,2})\b", re.ASCII)
# 48.000 -> 48,000
_DOT_THOUSANDS_RE = re.compile(r"(\d)\.(\d{3})(?!\d)", re.ASCII)

_MONEY_RE = re.compile(r"(?:₩\s*)?([0-9]{1,3}(?:[,.][0-9]{3})+|[0-9]+)\s*원?")
_HYPHEN_RUN_RE = re.compile(r"[0-9]+(?:-[0-9]+)+")

# First match wins, so order is priority
KEYWORD_PATTERNS: Tuple[Tuple[re.Pattern, int], ...] = (
    (re.compile(r"(합\s*계\s*금\s*액|합계\s*금액|합\s*계|합계)", re.IGNORECASE), 260),
    (re.compile(r"(승인\s*금액|승인금액)", re.IGNORECASE), 250),
    (re.compile(r"(거래\s*금액|거래금액|결제\s*금액|결제금액|금액\s*결제|금액결제)", re.IGNORECASE), 240),
    # card payment lines often carry the total too
    (re.compile(r"(신용\s*카드|체크\s*카드|카드\s*결제|카드결제)", re.IGNORECASE), 150),
    (re.compile(r"(총\s*액|총액|총\s*계|총계)", re.IGNORECASE), 200),
)

BAD_CONTEXT_RE = re.compile(r"(부가세|세액|공급가액|과세물품가액|가액|면세|할인|포인트|잔액)", re.IGNORECASE)


def normalize_line(line: Optional[str]) -> str:
    """
    Collapse whitespace and repair OCR-mangled thousands separators.

    Examples:
        "합계   136.00021" -> "합계 136,000"
        "합계 48.000원"    -> "합계 48,000원"
    """
    x = _WHITESPACE_RE.sub(" ", str(line or "")).strip()
    x = _DOT_TAIL_NOISE_RE.sub(r"\1.\2", x)
    x = _COMMA_TAIL_NOISE_RE.sub(r"\1,\2", x)
    while _DOT_THOUSANDS_RE.search(x):
        x = _DOT_THOUSANDS_RE.sub(r"\1,\2", x)
    return x


def _mask_id_runs(line: str) -> str:
    """Blank out hyphenated number chains long enough to be phone/registration numbers."""
    def _mask(m: re.Match) -> str:
        digits = m.group(0).replace("-", "")
        return " " * len(m.group(0)) if len(digits) >= MIN_ID_DIGITS else m.group(0)
    return _HYPHEN_RUN_RE.sub(_mask, line)


def extract_money_tokens(line: str) -> List[MoneyToken]:
    """
    Extract money tokens from a line, left to right.

    Rejects bare (ungrouped, no currency mark) numbers that look like
    quantities (<= 3 digits), years or YYYYMMDD dates, and long ID-like runs,
    plus any value outside [1, 200,000,000].
    """
    s = _mask_id_runs(normalize_line(line))
    tokens: List[MoneyToken] = []
    for m in _MONEY_RE.finditer(s):
        token = m.group(0)
        raw = m.group(1)
        digits = raw.replace(",", "").replace(".", "")
        if not digits.isdigit():
            continue

        has_sep = "," in raw or "." in raw
        has_currency = "₩" in token or CURRENCY_SUFFIX in token
        bare = not has_sep and not has_currency

        if bare and len(digits) <= MAX_QUANTITY_DIGITS:
            continue

        value = int(digits)
        if bare and YEAR_RANGE[0] <= value <= YEAR_RANGE[1]:
            continue
        if bare and len(digits) == 8 and digits.startswith(("19", "20")):
            continue
        if bare and len(digits) >= MIN_ID_DIGITS:
            continue
        if not math.isfinite(value) or value < MIN_MONEY_VALUE or value > MAX_MONEY_VALUE:
            continue

        tokens.append(MoneyToken(value=value, has_separator=has_sep, has_currency=has_currency))
    return tokens


def money_values(line: str) -> List[int]:
    return [t.value for t in extract_money_tokens(line)]


def keyword_weight(line: str) -> int:
    """Weight of the first total keyword the line matches, or -1."""
    for pattern, weight in KEYWORD_PATTERNS:
        if pattern.search(line):
            return weight
    return -1


def _split_lines(source: Union[str, List[str], None]) -> List[str]:
    if isinstance(source, (list, tuple)):
        lines = [str(s if s is not None else "").strip() for s in source]
    else:
        lines = [s.strip() for s in str(source or "").split("\n")]
    return [s for s in lines if s]


def _format_won(amount: int) -> str:
    return f"{amount:,}{CURRENCY_SUFFIX}"


def extract_total_amount(source: Union[str, List[str], None]) -> TotalAmountResult:
    """
    Pick the receipt's grand total.

    Args:
        source: Receipt lines (top to bottom) or newline-separated text

    Returns:
        TotalAmountResult(amount, evidence); amount 0 and empty evidence when
        no money token exists anywhere
    """
    lines = _split_lines(source)
    last_index = max(1, len(lines) - 1)

    best_score = -1.0
    best_total = 0
    best_evidence = ""

    for i, raw_line in enumerate(lines):
        line = normalize_line(raw_line)
        if not line:
            continue

        weight = keyword_weight(line)
        if weight < 0:
            continue

        values = money_values(line)
        if values:
            total = values[-1]
            penalty = SAME_LINE_BAD_CONTEXT_PENALTY if BAD_CONTEXT_RE.search(line) else 0
            score = weight + (i / last_index) * SAME_LINE_POSITION_BONUS - penalty
            logger.debug(f"[Total] line {i} '{line}': candidate {total} score={score:.2f}")
            if score > best_score:
                best_score, best_total, best_evidence = score, total, line
            continue

        # Amount printed on a neighbouring line (e.g. "승인 금액:" then "20,000")
        for offset in NEIGHBOR_OFFSETS:
            j = i + offset
            if j < 0 or j >= len(lines):
                continue
            near = normalize_line(lines[j])
            near_values = money_values(near)
            if not near_values:
                continue

            total = near_values[-1]
            penalty = NEIGHBOR_BAD_CONTEXT_PENALTY if BAD_CONTEXT_RE.search(near) else 0
            score = (
                weight
                + (i / last_index) * NEIGHBOR_POSITION_BONUS
                - penalty
                - abs(offset) * NEIGHBOR_DISTANCE_PENALTY
            )
            logger.debug(f"[Total] line {i} '{line}': neighbour {offset:+d} candidate {total} score={score:.2f}")
            if score > best_score:
                best_score, best_total = score, total
                best_evidence = f"{line} {_format_won(total)}"
            break

    if best_score < 0:
        amount, evidence = _largest_money_token(lines)
        logger.info(f"No keyword total found; fallback to largest amount {amount}")
        return TotalAmountResult(amount=amount, evidence=evidence)

    logger.info(f"Selected total {best_total} (score={best_score:.2f}) from '{best_evidence}'")
    return TotalAmountResult(amount=best_total, evidence=best_evidence)


def _largest_money_token(lines: List[str]) -> Tuple[int, str]:
    largest = 0
    evidence = ""
    for raw_line in lines:
        line = normalize_line(raw_line)
        for value in money_values(line):
            if value > largest:
                largest, evidence = value, line
    return largest, evidence
