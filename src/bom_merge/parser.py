"""
Layout detection and per-layout row parsing.

Build documents come in three flavours:
1. Shopping List: "<value> | <type description...> | <qty>" rows after a
   "SHOPPING LIST" banner.
2. Parts List: "<location> | <value> | <type> | <notes>" rows after a
   LOCATION/VALUE/TYPE/NOTES header.
3. Generic: no header at all, location/value pairs packed side by side
   ("R1 | 10k | R2 | 4k7 | ...").

Each parser turns rows into a flat list of Parts. Quantities are expressed as
repeated Parts; counting happens later in the aggregator.
"""

import logging
from collections.abc import Callable, Sequence
from dataclasses import replace

import src.bom_merge.constants as C
from src.bom_merge.classifier import classify_generic_pair, normalize_type
from src.bom_merge.config import DEFAULT_CONFIG, PipelineConfig
from src.bom_merge.filters import is_garbled_row, is_header_row, is_noise_row
from src.bom_merge.normalizer import normalize_value, row_text
from src.bom_merge.types import (
    BomLayout,
    Diagnostic,
    DiagnosticKind,
    Part,
    PartType,
    Row,
    StatsDict,
    create_empty_stats,
)

logger = logging.getLogger(__name__)

RowParser = Callable[[Sequence[Row], PipelineConfig], list[Part]]

# Semiconductors whose full row text is kept on wide shopping list rows.
_WIDE_ROW_TYPES = (PartType.DIODE, PartType.IC, PartType.TRANSISTOR)


def _miss(config: PipelineConfig, reason: str, row: Row) -> None:
    config.report(DiagnosticKind.CLASSIFICATION_MISS, reason, row)


def parse_shopping_list(
    rows: Sequence[Row], config: PipelineConfig = DEFAULT_CONFIG
) -> list[Part]:
    """
    Parses Shopping List rows: value first, quantity last, type in between.

    Indicator LEDs (first cell exactly "LED") are excluded from the BOM.

    Args:
        rows: Rows following the shopping list banner.
        config: Pipeline config for tracing and diagnostics.

    Returns:
        A list of Parts, one per unit of quantity.
    """
    parts: list[Part] = []

    for row in rows:
        if not row:
            continue
        if row[0].strip() == "LED":
            config.trace("Skipping indicator LED row", row=row)
            continue
        if is_noise_row(row):
            config.trace("Skipping noise row", row=row)
            continue

        hint = " ".join(cell.strip() for cell in row[1:-1]).strip()
        part_type = normalize_type(hint)
        if part_type is None:
            _miss(config, "Could not determine type, skipping row", row)
            continue

        try:
            quantity = int(row[-1].strip())
        except ValueError:
            _miss(config, "Unreadable quantity, skipping row", row)
            continue
        if quantity < 1:
            _miss(config, "Non-positive quantity, skipping row", row)
            continue

        if part_type is PartType.LED or (
            len(row) > C.WIDE_ROW_CELLS and part_type in _WIDE_ROW_TYPES
        ):
            config.trace("Preserving LED or overly complex row", row=row)
            value = row_text(row[:-1])
        else:
            value = normalize_value(row[0], part_type, row, config)

        parts.extend([Part(part_type, value)] * quantity)

    return parts


def parse_parts_list(
    rows: Sequence[Row], config: PipelineConfig = DEFAULT_CONFIG
) -> list[Part]:
    """
    Parses Parts List rows: "<location> | <value> | <details...>".

    The type is inferred from the text of the whole row. Rows whose details
    carry a pole designation (SPDT, DPDT...) are switches, and their value is
    rebuilt from the pole and throw tokens, e.g. "SPDT (ON-OFF-ON)".

    Args:
        rows: Rows following the LOCATION/VALUE header.
        config: Pipeline config for tracing and diagnostics.

    Returns:
        A list of Parts, one per row.
    """
    parts: list[Part] = []

    for row in rows:
        if len(row) < 2:
            continue
        if is_noise_row(row):
            config.trace("Skipping noise row", row=row)
            continue

        _, raw_value, *details = row
        details = [d.strip() for d in details if d.strip()]

        poles = [d for d in details if C.POLE_PATTERN.search(d)]
        if poles:
            qualifiers = [
                d for d in details if C.QUALIFIER.search(d) and d not in poles
            ]
            value = f"{' '.join(poles)} {' '.join(qualifiers)}".strip()
            parts.append(Part(PartType.SWITCH, value))
            continue

        part_type = normalize_type(row_text(row))
        if part_type is None:
            _miss(config, "Could not determine type, skipping row", row)
            continue

        value = normalize_value(raw_value, part_type, row, config)
        parts.append(Part(part_type, value))

    return parts


def parse_generic_bom(
    rows: Sequence[Row], config: PipelineConfig = DEFAULT_CONFIG
) -> list[Part]:
    """
    Parses headerless documents made of location/value pairs.

    Rows are walked in non-overlapping pairs, so "R1 | 10k | R2 | 4k7" yields two
    parts. Garbled rows (only tiny cells), header-like rows (only words) and
    noise rows are skipped as a whole before pairing; a garbled pair inside an
    otherwise valid row is not filtered out separately.

    Args:
        rows: Every row of the document.
        config: Pipeline config for tracing and diagnostics.

    Returns:
        A list of Parts, one per classified pair.
    """
    parts: list[Part] = []

    for row in rows:
        if not row:
            continue
        if is_garbled_row(row) or is_header_row(row) or is_noise_row(row):
            config.trace("Skipping garbled, header or noise row", row=row)
            continue

        for i in range(0, len(row), 2):
            location = row[i].strip()
            value = row[i + 1].strip() if i + 1 < len(row) else ""
            if not location or not value:
                continue
            if is_noise_row((location, value)):
                config.trace("Skipping noise pair", location=location, value=value)
                continue

            part = classify_generic_pair(location, value, row, config)
            if part is None:
                _miss(config, f"Could not classify part {location}={value}", row)
                continue
            parts.append(part)

    return parts


# Checked in order; only the first layout whose marker appears anywhere is used.
LAYOUTS: list[tuple[BomLayout, str, RowParser]] = [
    (BomLayout.SHOPPING_LIST, C.SHOPPING_LIST_MARKER, parse_shopping_list),
    (BomLayout.PARTS_LIST, C.PARTS_LIST_MARKER, parse_parts_list),
]

PARSERS: dict[BomLayout, RowParser] = {layout: p for layout, _, p in LAYOUTS}
PARSERS[BomLayout.GENERIC] = parse_generic_bom


def detect_layout(rows: Sequence[Row]) -> tuple[BomLayout, int]:
    """
    Finds the document layout by scanning for a known header marker.

    Args:
        rows: Every row of the document.

    Returns:
        A tuple of (layout, index of the first row to parse). Generic documents
        are parsed from the first row.
    """
    for layout, marker, _ in LAYOUTS:
        for index, row in enumerate(rows):
            if marker in "".join(row).upper():
                return layout, index + 1

    return BomLayout.GENERIC, 0


def coerce_rows(rows: object) -> list[Row]:
    """
    Validates raw rows and converts them to tuples of strings.

    Missing cells (None) become empty strings.

    Raises:
        ValueError: If the input is not a sequence of rows.
    """
    if isinstance(rows, (str, bytes)) or not isinstance(rows, Sequence):
        raise ValueError("Document rows must be a sequence of cell lists.")

    clean: list[Row] = []
    for row in rows:
        if not isinstance(row, (list, tuple)):
            raise ValueError(f"Malformed row (expected a list of cells): {row!r}")
        clean.append(tuple("" if cell is None else str(cell) for cell in row))
    return clean


def parse_rows(
    rows: object,
    source_name: str = "Document",
    config: PipelineConfig = DEFAULT_CONFIG,
) -> tuple[list[Part], StatsDict]:
    """
    Runs layout detection and the matching row parser over one document.

    Args:
        rows: The document rows (a sequence of cell sequences).
        source_name: Label used in diagnostics.
        config: Pipeline config for tracing and diagnostics.

    Returns:
        A tuple of (Parts, Parsing Statistics).

    Raises:
        ValueError: If `rows` is not a sequence of rows.
    """
    clean_rows = coerce_rows(rows)

    layout, start = detect_layout(clean_rows)
    logger.debug(f"{source_name}: detected {layout} layout, body starts at row {start}")
    body = clean_rows[start:]

    stats = create_empty_stats(layout.value)
    stats["rows_read"] = len(body)

    def collect(diagnostic: Diagnostic) -> None:
        if diagnostic["kind"] is DiagnosticKind.CLASSIFICATION_MISS:
            stats["residuals"].append(" | ".join(diagnostic["row"]))
        if config.on_diagnostic is not None:
            config.on_diagnostic(diagnostic)

    doc_config = replace(config.for_source(source_name), on_diagnostic=collect)

    parts = PARSERS[layout](body, doc_config)
    stats["parts_found"] = len(parts)

    return parts, stats
