"""
Line order normalization stage.

Runs between line reconstruction and total extraction. Lines currently pass
through unchanged; reordering rules belong here when needed.
"""
from typing import List


def normalize_receipt_line_order(lines: List[str]) -> List[str]:
    """Return the lines in reading order (identity for now)."""
    return lines
