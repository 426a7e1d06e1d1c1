"""
Type definitions and shared data structures for the BOM merge library.

This module contains the enums, NamedTuples and TypedDicts passed between the
layout detector, the row parsers, the normalizers and the aggregator.
"""

from enum import Enum
from typing import NamedTuple, TypedDict

# A single table row as produced by the document reader (ordered cells).
Row = tuple[str, ...]


class PartType(str, Enum):
    """
    Closed set of canonical component categories.

    The enum value doubles as the display name, which is also what the
    aggregated BOM is sorted by. There is no "Unknown" member:
    an unclassified row is represented as ``None`` and never leaves the parser.
    """

    RESISTOR = "Resistor"
    CERAMIC = "Ceramic Capacitor"
    FILM = "Film Capacitor"
    ELECTROLYTIC = "Electrolytic Capacitor"
    CAPACITOR = "Capacitor"
    INDUCTOR = "Inductor"
    DIODE = "Diode"
    TRANSISTOR = "Transistor"
    IC = "IC"
    LED = "LED"
    SWITCH = "Switch"
    TRIMPOT = "Trim Pot"
    POTENTIOMETER = "Potentiometer"
    JACK = "Jack"
    CONNECTOR = "Connector"
    REGULATOR = "Regulator"

    def __str__(self) -> str:
        return self.value


class BomLayout(str, Enum):
    """Document layouts recognised by the layout detector."""

    SHOPPING_LIST = "Shopping List"
    PARTS_LIST = "Parts List"
    GENERIC = "Generic"

    def __str__(self) -> str:
        return self.value


class Part(NamedTuple):
    """
    One physical component found in a document.

    Attributes:
        type: The canonical category.
        value: The canonical value for that category (e.g. '4.7K', '2N3904').
    """

    type: PartType
    value: str


class BomEntry(TypedDict):
    """
    A deduplicated line of the merged Bill of Materials.

    Attributes:
        type: The canonical category.
        value: Display value (Value Normalizer casing is preserved).
        quantity: Number of parts folded into this line (always >= 1).
    """

    type: PartType
    value: str
    quantity: int


class StatsDict(TypedDict):
    """
    Tracking metrics and errors for a single document.

    Attributes:
        rows_read: Total rows handed to the layout parser.
        parts_found: Number of parts emitted (quantities expanded).
        layout: Name of the detected layout.
        residuals: Rows dropped because they could not be classified.
        errors: Fatal problems reading the document itself.
    """

    rows_read: int
    parts_found: int
    layout: str
    residuals: list[str]
    errors: list[str]


class DiagnosticKind(str, Enum):
    """Categories of advisory events emitted by the pipeline."""

    SOURCE_FAILURE = "source_failure"
    CLASSIFICATION_MISS = "classification_miss"
    LOW_CONFIDENCE = "low_confidence"

    def __str__(self) -> str:
        return self.value


class Diagnostic(TypedDict):
    """
    A non-fatal event raised while processing a document.

    Attributes:
        kind: What went wrong (see DiagnosticKind).
        source: Name of the document being processed ('' if unknown).
        row: The offending row cells.
        reason: Human readable explanation.
    """

    kind: DiagnosticKind
    source: str
    row: Row
    reason: str


def create_empty_stats(layout: str = "") -> StatsDict:
    """Factory function to return a fresh per-document stats dict."""
    return {
        "rows_read": 0,
        "parts_found": 0,
        "layout": layout,
        "residuals": [],
        "errors": [],
    }
