"""
Word Geometry Normalizer: Flatten a document-text-detection result into words.

The OCR provider returns pages -> blocks -> paragraphs -> words -> symbols,
each word carrying a bounding polygon either in pixels (``vertices``) or in
0..1 image space (``normalizedVertices``). This module turns that tree into a
flat list of Word records in pixel space.
"""
from typing import Any, Dict, List, Mapping, Optional, Tuple
import logging
from ..core.structures import Word

logger = logging.getLogger(__name__)


def _as_list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def _get(obj: Any, key: str) -> Any:
    return obj.get(key) if isinstance(obj, Mapping) else None


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _coord(vertex: Any, key: str) -> float:
    value = _get(vertex, key)
    return float(value) if _is_number(value) else 0.0


def get_box_extents(
    bounding_box: Optional[Dict[str, Any]],
    image_size: Optional[Dict[str, Any]] = None
) -> Tuple[float, float, float, float]:
    """
    Compute (min_x, max_x, min_y, max_y) of a bounding polygon in pixels.

    Pixel vertices win; normalized vertices are scaled by the image size only
    when pixel coordinates are missing. Coordinates the provider omitted are
    ignored. Without any usable vertex every extent is 0.
    """
    xs: List[float] = []
    ys: List[float] = []
    for v in _as_list(_get(bounding_box, "vertices")):
        if _is_number(_get(v, "x")):
            xs.append(float(v["x"]))
        if _is_number(_get(v, "y")):
            ys.append(float(v["y"]))

    if not xs or not ys:
        normalized = _as_list(_get(bounding_box, "normalizedVertices"))
        width = _get(image_size, "width")
        height = _get(image_size, "height")
        if normalized and _is_number(width) and width and _is_number(height) and height:
            xs = [_coord(v, "x") * width for v in normalized]
            ys = [_coord(v, "y") * height for v in normalized]

    min_x = min(xs) if xs else 0.0
    max_x = max(xs) if xs else 0.0
    min_y = min(ys) if ys else 0.0
    max_y = max(ys) if ys else 0.0
    return min_x, max_x, min_y, max_y


def flatten_words(
    full_text_annotation: Optional[Dict[str, Any]],
    image_size: Optional[Dict[str, Any]] = None
) -> List[Word]:
    """
    Flatten a full text annotation into Word records.

    Args:
        full_text_annotation: ``fullTextAnnotation`` dict from the OCR response
        image_size: ``{"width": ..., "height": ...}`` of the source image,
            needed only to rescale normalized vertices

    Returns:
        List of Word objects in provider order; words with no text are dropped
    """
    words: List[Word] = []
    for page in _as_list(_get(full_text_annotation, "pages")):
        for block in _as_list(_get(page, "blocks")):
            for paragraph in _as_list(_get(block, "paragraphs")):
                for word in _as_list(_get(paragraph, "words")):
                    text = "".join(
                        str(_get(s, "text") or "") for s in _as_list(_get(word, "symbols"))
                    )
                    if not text:
                        continue
                    min_x, max_x, min_y, max_y = get_box_extents(_get(word, "boundingBox"), image_size)
                    words.append(Word.from_extents(text, min_x, max_x, min_y, max_y))

    logger.debug(f"Flattened {len(words)} words from OCR annotation")
    return words
