"""
Component value canonicalization.

Every part type has exactly one notation in the merged BOM: resistors use
'R'/'K'/'M' suffixes ('4.7K', '470R'), capacitors use lower-case SI prefixes
('100n', '22p', '10u'), transistors and ICs use their canonical part number.
All rules are idempotent: feeding a normalized value back in returns it
unchanged.
"""

import re
from collections.abc import Callable, Sequence

import src.bom_merge.constants as C
from src.bom_merge.config import DEFAULT_CONFIG, PipelineConfig
from src.bom_merge.types import DiagnosticKind, PartType

_OHM = "(?:Ω|\u2126|OHMS?)"
_MICRO = "[µμ]"


def row_text(row: Sequence[str]) -> str:
    """Joins the non-empty cells of a row with single spaces."""
    return " ".join(cell.strip() for cell in row if cell and cell.strip())


def _with_bare_suffix(value: str, suffix: str) -> str:
    """A bare integer gets the default unit of its type ('10' -> '10R')."""
    if C.DIGITS_ONLY.match(value):
        return value + suffix
    return value


def _normalize_resistor(value: str) -> str:
    normalized = value.upper()
    normalized = re.sub(rf"\s*([KM])\s*{_OHM}", r"\1", normalized)
    normalized = re.sub(rf"\s*{_OHM}", "R", normalized)
    return _with_bare_suffix(normalized, "R")


def _normalize_ceramic(value: str) -> str:
    normalized = re.sub(r"pf+", "p", value.lower())
    return _with_bare_suffix(normalized, "p")


def _normalize_film(value: str) -> str:
    normalized = re.sub(_MICRO, "u", value)
    normalized = re.sub(r"[um]f+", "u", normalized, flags=re.IGNORECASE)
    normalized = re.sub(r"nf+", "n", normalized, flags=re.IGNORECASE)
    return _with_bare_suffix(normalized, "n")


def _normalize_electrolytic(value: str) -> str:
    normalized = re.sub(r"uf+", "u", re.sub(_MICRO, "u", value.lower()))
    return _with_bare_suffix(normalized, "u")


def _normalize_capacitor(value: str) -> str:
    # No bare-digit rule: without a sub-type the unit is ambiguous.
    normalized = re.sub(f"{_MICRO}{{2}}", "u", value.lower())
    normalized = re.sub(_MICRO, "u", normalized)
    return re.sub(r"[mu]f+", "u", normalized)


def _normalize_inductor(value: str) -> str:
    normalized = value.lower().replace("mh", "mH")
    return re.sub(r"[uµμ]h", "uH", normalized)


def _normalize_trimpot(value: str) -> str:
    upper = value.upper()
    match = re.search(r"(?<!\d)\d{1,3}K", upper)
    return match.group(0) if match else upper


def _normalize_ic(value: str) -> str:
    for pattern, canonical in C.IC_PARTS:
        if pattern.search(value):
            return canonical
    return value


def _known_transistor(text: str) -> str | None:
    for pattern, canonical in C.TRANSISTOR_PARTS:
        if pattern.match(text):
            return canonical
    return None


def _normalize_transistor(
    value: str, full_row: Sequence[str], config: PipelineConfig
) -> str:
    """
    Resolves a transistor value to a canonical part number.

    Strategy, first hit wins:
    1. Known part number at the start of the value ('bc549' -> 'BC549C').
    2. Generic description in the row ('NPN Germanium').
    3. A value that already looks like a part code is kept as-is.
    4. A '2N...' token anywhere in the row text.
    5. The whole row, upper-cased (reported as low confidence).

    Steps 4 and 5 go through the part number table again, so feeding the
    result back in returns it unchanged.
    """
    known = _known_transistor(value)
    if known:
        return known

    combined = row_text(full_row).upper()
    for words, canonical in C.TRANSISTOR_PHRASES:
        if all(word in combined for word in words):
            return canonical

    if C.CLEAN_PART_CODE.match(value):
        return value

    match = C.TWO_N_PART.search(combined)
    if match:
        return _known_transistor(match.group(1)) or match.group(1)

    known = _known_transistor(combined)
    if known:
        return known

    config.report(
        DiagnosticKind.LOW_CONFIDENCE,
        "Could not extract transistor value from row",
        full_row,
    )
    return combined


_SIMPLE_RULES: dict[PartType, Callable[[str], str]] = {
    PartType.RESISTOR: _normalize_resistor,
    PartType.CERAMIC: _normalize_ceramic,
    PartType.FILM: _normalize_film,
    PartType.ELECTROLYTIC: _normalize_electrolytic,
    PartType.CAPACITOR: _normalize_capacitor,
    PartType.INDUCTOR: _normalize_inductor,
    PartType.TRIMPOT: _normalize_trimpot,
    PartType.IC: _normalize_ic,
}


def expand_shorthand(value: str) -> str:
    """
    Rewrites BS 1852 style values to decimal notation.

    '4K7' -> '4.7K', '10M5' -> '10.5M', '2u2' -> '2.2u'. Anything that is not
    exactly <digits><unit letter><digits> is returned unchanged.
    """
    return C.SHORTHAND_VALUE.sub(r"\1.\3\2", value)


def normalize_value(
    value: str | None,
    part_type: PartType | None,
    full_row: Sequence[str] = (),
    config: PipelineConfig | None = None,
) -> str:
    """
    Standardizes a raw component value for its type.

    Args:
        value: The raw value cell (e.g., '4k7', '100nF', 'bc549').
        part_type: The already determined PartType.
        full_row: All cells of the source row; transistor rules look at it for
            context when the value itself is ambiguous.
        config: Pipeline config used to report low-confidence results.

    Returns:
        The canonical value string ('' for an empty value).
    """
    if not value:
        return ""

    config = config or DEFAULT_CONFIG
    normalized = value.strip()

    if part_type is PartType.TRANSISTOR:
        normalized = _normalize_transistor(normalized, full_row, config)
    elif part_type in _SIMPLE_RULES:
        normalized = _SIMPLE_RULES[part_type](normalized)

    # Must run after the per-type rules: it relies on the unit letter being final.
    if part_type in C.STRICT_NOTATION_TYPES:
        normalized = expand_shorthand(normalized)

    return normalized
