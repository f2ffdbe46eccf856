"""
Receipt Line Pipeline: OCR response -> text lines -> total -> seeded total row.

Steps:
1. Unwrap ``responses[0].fullTextAnnotation`` when a raw provider response is given
2. Flatten words and rebuild lines from geometry
3. Line order normalization (identity stage)
4. Total amount extraction
5. Seed the round with a single total row carrying the extracted amount
"""
from typing import Any, Dict, List, Mapping, Optional
import logging
from .core.structures import Item, ReceiptAnalysis
from .geometry.line_clusterer import extract_lines_by_geometry
from .text.line_order import normalize_receipt_line_order
from .totals.total_amount_extractor import extract_total_amount
from ..config import settings

logger = logging.getLogger(__name__)


def get_full_text_annotation(response: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Pull ``fullTextAnnotation`` out of a document-text-detection response."""
    if not isinstance(response, Mapping):
        return {}
    responses = response.get("responses")
    if not isinstance(responses, list) or not responses or not isinstance(responses[0], Mapping):
        return {}
    annotation = responses[0].get("fullTextAnnotation")
    return annotation if isinstance(annotation, Mapping) else {}


def seed_total_items(amount: int, name: Optional[str] = None) -> List[Item]:
    """Start a round's items with one total row (remainder row) for the scanned amount."""
    return [
        Item(
            name=name or settings.total_item_name,
            amount=amount,
            initial_amount=amount,
            is_total=True,
            assignees=[],
        )
    ]


def analyze_receipt(
    annotation: Optional[Dict[str, Any]] = None,
    image_size: Optional[Dict[str, Any]] = None,
    response: Optional[Dict[str, Any]] = None,
) -> ReceiptAnalysis:
    """
    Run an OCR result through line reconstruction and total extraction.

    Args:
        annotation: ``fullTextAnnotation`` dict
        image_size: ``{"width", "height"}`` of the image sent to OCR
        response: Raw provider response; used when ``annotation`` is not given

    Returns:
        ReceiptAnalysis with lines, raw text, total, evidence and seeded items
    """
    if annotation is None and response is not None:
        annotation = get_full_text_annotation(response)

    raw_lines = extract_lines_by_geometry(annotation, image_size)
    lines = normalize_receipt_line_order(raw_lines)
    result = extract_total_amount(lines)

    logger.info(f"Receipt analyzed: {len(lines)} lines, total={result.amount}")
    return ReceiptAnalysis(
        lines=lines,
        raw_text="\n".join(lines),
        amount=result.amount,
        evidence=result.evidence,
        items=seed_total_items(result.amount),
    )
