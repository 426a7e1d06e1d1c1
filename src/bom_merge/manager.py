"""
High-level BOM aggregation logic.

This module acts as the "Controller" for the merged Bill of Materials. It handles:
- Grouping identical parts (same type, same value modulo casing/unit glyphs).
- Counting quantities.
- Sorting the result deterministically for display and export.
"""

import locale
from collections import defaultdict
from collections.abc import Iterable

from src.bom_merge.types import BomEntry, Part, PartType

# Folded before upper-casing: "µ".upper() is the Greek capital Mu, not "U".
_GLYPHS = str.maketrans({"µ": "u", "μ": "u", "Ω": "R", "\u2126": "R"})


def grouping_key(part: Part) -> tuple[PartType, str]:
    """
    Builds the deduplication key of a part.

    Values are compared case-insensitively and with the micro and ohm glyphs
    folded to ASCII, so '100n' and '100N' (or '10µ' and '10u') are one line.

    Args:
        part: The part to key.

    Returns:
        A (type, grouping value) tuple.
    """
    value = part.value.translate(_GLYPHS).upper().strip()
    return part.type, value


def _collation_key(text: str) -> str:
    """Case-insensitive, locale-aware sort key ("blue" before "Red")."""
    # strxfrm rejects embedded NUL characters (seen in broken PDF text layers)
    return locale.strxfrm(text.casefold().replace("\0", ""))


def bom_sort_key(entry: BomEntry) -> tuple[str, str, str, str]:
    """Locale-aware (type, value) ordering, with raw strings as tie-break."""
    type_name = entry["type"].value
    return (
        _collation_key(type_name),
        _collation_key(entry["value"]),
        type_name,
        entry["value"],
    )


def sort_bom(entries: Iterable[BomEntry]) -> list[BomEntry]:
    """
    Sorts BOM entries by type name, then value.

    Args:
        entries: The unsorted entries.

    Returns:
        A new, sorted list.
    """
    return sorted(entries, key=bom_sort_key)


def aggregate_parts(parts: Iterable[Part]) -> list[BomEntry]:
    """
    Deduplicates parts into a quantified Bill of Materials.

    Every part contributes exactly one to the quantity of its group. When a
    group holds several spellings of the same value, the smallest one is shown,
    so the output does not depend on the order the documents were read in.

    Args:
        parts: Parts from one or more documents.

    Returns:
        A list of BomEntry dicts sorted by (type, value).
    """
    groups: dict[tuple[PartType, str], list[str]] = defaultdict(list)
    for part in parts:
        groups[grouping_key(part)].append(part.value)

    entries: list[BomEntry] = [
        {"type": part_type, "value": min(values), "quantity": len(values)}
        for (part_type, _), values in groups.items()
    ]
    return sort_bom(entries)


def total_quantity(entries: Iterable[BomEntry]) -> int:
    """Total number of parts represented by a BOM."""
    return sum(entry["quantity"] for entry in entries)


def serialize_bom(entries: Iterable[BomEntry]) -> str:
    """
    Converts a BOM into a plain-text checklist.
    e.g. [{'type': Resistor, 'value': '4.7K', 'quantity': 2}] -> "Resistor | 4.7K | 2"

    Args:
        entries: The aggregated BOM.

    Returns:
        A newline-separated string, one line per entry.
    """
    return "\n".join(
        f"{entry['type']} | {entry['value']} | {entry['quantity']}"
        for entry in entries
    )
