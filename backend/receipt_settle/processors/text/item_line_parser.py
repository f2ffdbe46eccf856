"""
Item Line Parser: Read "name ... price" item rows from plain receipt text.

Very simple on purpose: header, payment and totals lines are skipped by
keyword, and only a price at the end of a line is recognised.
"""
from typing import List, Optional
import logging
import re
from ..core.structures import ParsedItemLine

logger = logging.getLogger(__name__)

MIN_NAME_LENGTH = 2

_PRICE_RE = re.compile(r"(\d{1,3}(?:,\d{3})*|\d+)\s*원?$", re.ASCII)
_IGNORE_RE = re.compile(
    r"(사업자|대표|전화|TEL|주소|카드|승인|부가세|VAT|매장|포인트|영수증|거래일|주문|No\.?|단말|가맹|합계|총액|과세|면세)",
    re.IGNORECASE,
)


def parse_receipt_lines(text: Optional[str]) -> List[ParsedItemLine]:
    """
    Parse item rows out of receipt text.

    Args:
        text: Newline-separated receipt text

    Returns:
        ParsedItemLine list in document order
    """
    lines = [s.strip() for s in (text or "").split("\n")]
    items: List[ParsedItemLine] = []

    for line in lines:
        if not line or _IGNORE_RE.search(line):
            continue

        m = _PRICE_RE.search(line)
        if not m:
            continue

        amount = int(m.group(1).replace(",", ""))
        if amount <= 0:
            continue

        name = _PRICE_RE.sub("", line).strip()
        if len(name) < MIN_NAME_LENGTH:
            continue

        items.append(ParsedItemLine(name=name, amount=amount))

    logger.debug(f"Parsed {len(items)} item lines")
    return items
