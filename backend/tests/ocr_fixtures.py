"""Helpers for building document-text-detection annotations in tests."""
from typing import Any, Dict, List, Tuple

Box = Tuple[float, float, float, float]  # min_x, min_y, max_x, max_y


def make_word(text: str, box: Box, split_symbols: bool = True) -> Dict[str, Any]:
    min_x, min_y, max_x, max_y = box
    symbols = [{"text": ch} for ch in text] if split_symbols else [{"text": text}]
    return {
        "symbols": symbols,
        "boundingBox": {
            "vertices": [
                {"x": min_x, "y": min_y},
                {"x": max_x, "y": min_y},
                {"x": max_x, "y": max_y},
                {"x": min_x, "y": max_y},
            ]
        },
    }


def make_annotation(words: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {"pages": [{"blocks": [{"paragraphs": [{"words": words}]}]}]}


def make_response(words: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {"responses": [{"fullTextAnnotation": make_annotation(words)}]}


def starbucks_receipt_words() -> List[Dict[str, Any]]:
    """A three-line receipt; the store name is split into two OCR words with no gap."""
    return [
        make_word("합계", (10, 100, 40, 120)),
        make_word("12,000", (200, 101, 260, 121)),
        make_word("스타", (10, 50, 30, 70)),
        make_word("벅스", (31, 50, 50, 70)),
        make_word("아메리카노", (10, 75, 90, 95)),
        make_word("4,500", (200, 75, 250, 95)),
    ]
