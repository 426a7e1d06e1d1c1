"""
Component classification and heuristic categorization logic.

This module determines what a component *is* (Resistor, Film Capacitor, IC...)
either from a free-text type hint ("Metal film resistor, 1/4W") or from a
location code (R1, C4, VR2) paired with its value.
"""

from collections.abc import Sequence

import src.bom_merge.constants as C
from src.bom_merge.config import PipelineConfig
from src.bom_merge.normalizer import normalize_value
from src.bom_merge.types import Part, PartType


def normalize_type(hint: str | None) -> PartType | None:
    """
    Maps a free-text type description to a canonical PartType.

    Keywords are searched case-insensitively in a fixed priority order (see
    C.TYPE_KEYWORDS); the first hit wins, so "Film capacitor" is a Film
    Capacitor and not a generic Capacitor.

    Args:
        hint: The description text (e.g., "Electrolytic capacitor", "SPDT").

    Returns:
        The PartType, or None if the hint does not name a known component.
    """
    if not hint:
        return None

    text = hint.strip()
    lowered = text.lower()
    for keywords, pattern, part_type in C.TYPE_KEYWORDS:
        if any(k in lowered for k in keywords):
            return part_type
        if pattern is not None and pattern.match(text):
            return part_type

    return None


def classify_capacitor(value: str) -> PartType:
    """Picks the capacitor sub-type from unit or dielectric hints in the value."""
    lowered = value.lower()
    for pattern, part_type in C.CAPACITOR_HINTS:
        if pattern.search(lowered):
            return part_type
    return PartType.CAPACITOR


def classify_location(location: str, value: str = "") -> PartType | None:
    """
    Infers a PartType from a location code.

    Args:
        location: The designator (e.g., "R12", "C3", "VR1", "SW2").
        value: The component value; used only to split capacitors by dielectric.

    Returns:
        The PartType, or None if the code is not recognised.
    """
    location = location.strip()

    if C.CAPACITOR_LOCATION.match(location):
        return classify_capacitor(value)

    for pattern, part_type in C.LOCATION_RULES:
        if pattern.match(location):
            return part_type

    return None


def classify_generic_pair(
    location: str,
    value: str,
    row: Sequence[str],
    config: PipelineConfig | None = None,
) -> Part | None:
    """
    Classifies one (location, value) pair from a Generic layout row.

    After the location-based guess, three overrides run in order:
    1. Pole designations ("3PDT", "SPDT (ON-ON)") or a "*PDT*" location -> Switch.
    2. A DIP location -> Switch, with " DIP" appended to the value.
    3. A taper code in the value ("B100K") -> Potentiometer, value kept verbatim.

    Args:
        location: The location cell (e.g., "R1").
        value: The value cell (e.g., "4k7").
        row: The full source row (context for the value normalizer).
        config: Pipeline config for diagnostics.

    Returns:
        A Part, or None if the pair could not be classified.
    """
    location = location.strip()
    value = value.strip()

    part_type = classify_location(location, value)
    clean_val: str | None = value if part_type is PartType.LED else None

    if C.POLE_VALUE.match(value) or "PDT" in location.upper():
        part_type = PartType.SWITCH
        clean_val = normalize_value(value, PartType.SWITCH, row, config)
    elif C.DIP_LOCATION.match(location):
        part_type = PartType.SWITCH
        clean_val = f"{value} DIP"
    elif C.POT_CODE.search(value):
        part_type = PartType.POTENTIOMETER
        clean_val = value

    if part_type is None:
        return None

    if clean_val is None:
        clean_val = normalize_value(value, part_type, row, config)

    return Part(part_type, clean_val)
