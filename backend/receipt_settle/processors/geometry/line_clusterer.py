"""
Line Clustering: Build readable text lines from OCR word boxes.

Words are grouped by vertical center into lines, then each line is joined
left to right, inserting a space only where the horizontal gap is wide
enough to be a real word break.

The clustering is a greedy nearest-line pass over words sorted by
(center_y, min_x): each word joins the closest existing line within the
vertical tolerance, first one scanned on ties. It is order-dependent and
O(words x lines); it is not a globally optimal clustering.
"""
from typing import Any, Dict, List, Optional
import math
import logging
from ..core.structures import Word, Line
from .word_normalizer import flatten_words

logger = logging.getLogger(__name__)

# Heights above this percentile are treated as oversized boxes (logos, stamps)
HEIGHT_PERCENTILE = 0.9
# Representative height used when no word heights are available
FALLBACK_HEIGHT = 12.0
# Same-line tolerance as a fraction of the median glyph height; 0.30~0.35 keeps
# adjacent receipt rows apart
Y_TOLERANCE_RATIO = 0.33
MIN_Y_TOLERANCE = 2.0
# Gap (fraction of median height) above which two words get a space between them
SPACE_GAP_RATIO = 0.22


def compute_median_height(words: List[Word]) -> float:
    """
    Representative glyph height: median of the heights at or below the 90th percentile.
    """
    heights = sorted(w.h for w in words if w.h > 0)
    if not heights:
        return FALLBACK_HEIGHT

    idx = min(int(math.floor(len(heights) * HEIGHT_PERCENTILE)), len(heights) - 1)
    p90 = heights[idx]

    trimmed = [h for h in heights if h <= p90]
    if not trimmed:
        return FALLBACK_HEIGHT
    return trimmed[len(trimmed) // 2]


def find_nearest_line(lines: List[Line], word: Word, y_tol: float) -> int:
    """Index of the line whose center is closest to the word within y_tol, or -1."""
    best_idx = -1
    best_diff = math.inf

    for i, line in enumerate(lines):
        diff = abs(word.cy - line.cy)
        # strict: the first line scanned keeps an exact tie
        if diff <= y_tol and diff < best_diff:
            best_diff = diff
            best_idx = i
    return best_idx


def cluster_words(words: List[Word], median_h: float) -> List[Line]:
    """
    Group words into lines by vertical center, sorted top to bottom.

    Args:
        words: Word records (not modified)
        median_h: Representative glyph height

    Returns:
        List of Line objects ordered by min_y
    """
    y_tol = max(MIN_Y_TOLERANCE, Y_TOLERANCE_RATIO * median_h)
    lines: List[Line] = []

    for word in sorted(words, key=lambda w: (w.cy, w.min_x)):
        best_idx = find_nearest_line(lines, word, y_tol)
        if best_idx == -1:
            lines.append(Line.start(word))
        else:
            lines[best_idx].add(word)

    lines.sort(key=lambda line: line.min_y)
    logger.debug(f"Clustered {len(words)} words into {len(lines)} lines (y_tol={y_tol:.2f})")
    return lines


def serialize_line(line: Line, median_h: float) -> str:
    """Join a line's words left to right; narrow gaps are glued without a space."""
    space_threshold = SPACE_GAP_RATIO * median_h
    words = sorted(line.words, key=lambda w: w.min_x)

    parts: List[str] = []
    prev: Optional[Word] = None
    for word in words:
        if prev is not None and word.min_x - prev.max_x > space_threshold:
            parts.append(" ")
        parts.append(word.text)
        prev = word
    return "".join(parts).strip()


def build_lines(words: List[Word]) -> List[str]:
    """
    Cluster words into lines and serialize them.

    Returns:
        Non-empty line strings, top to bottom
    """
    if not words:
        return []

    median_h = compute_median_height(words)
    lines = cluster_words(words, median_h)
    out = [text for text in (serialize_line(line, median_h) for line in lines) if text]

    logger.info(f"Built {len(out)} lines from {len(words)} words (median_h={median_h:.1f})")
    return out


def extract_lines_by_geometry(
    full_text_annotation: Optional[Dict[str, Any]],
    image_size: Optional[Dict[str, Any]] = None
) -> List[str]:
    """Flatten an OCR annotation and rebuild its text lines from word geometry."""
    return build_lines(flatten_words(full_text_annotation, image_size))
