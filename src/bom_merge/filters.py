"""
Row-level noise detection.

Build documents interleave component tables with page furniture (copyright
lines, page numbers, section headings). These helpers decide which rows carry no
component data so the parsers can drop them silently.
"""

from collections.abc import Sequence

import src.bom_merge.constants as C


def is_noise_row(row: Sequence[str] | None) -> bool:
    """
    Checks whether a row is page furniture rather than component data.

    A row is noise if it is the literal Parts List column header, if every
    non-empty cell is a bare number (page or sequence numbers), or if any cell
    matches one of the known noise patterns (copyright, pagination, headings).

    Args:
        row: The row cells.

    Returns:
        True if the row should be discarded without a diagnostic.
    """
    if not row:
        return True

    if tuple(cell.strip() for cell in row) == C.PARTS_LIST_HEADER:
        return True

    filled = [cell.strip() for cell in row if cell.strip()]
    if filled and all(C.DIGITS_ONLY.match(cell) for cell in filled):
        return True

    return any(pattern.search(cell) for cell in row for pattern in C.NOISE_PATTERNS)


def is_garbled_row(row: Sequence[str]) -> bool:
    """True if every cell is 2 characters or less (typical OCR debris)."""
    return all(len(cell.strip()) <= C.GARBLED_CELL_MAX_LEN for cell in row)


def is_header_row(row: Sequence[str]) -> bool:
    """True if every cell is purely alphabetic text, like a column header."""
    return all(
        C.HEADER_CELL.match(cell) and len(cell.strip()) > C.GARBLED_CELL_MAX_LEN
        for cell in row
    )
