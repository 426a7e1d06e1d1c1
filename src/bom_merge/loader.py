"""
Document reading and pipeline orchestration.

This module abstracts the source of the rows (PDF, CSV, uploaded file, URL)
from the logic used to parse them. It turns documents into rows of cell
strings, runs the parsing pipeline per document and collects the results.
A document that cannot be read contributes no parts; it never stops the run.
"""

import csv
import logging
import os
import tempfile
from typing import Any

import requests

from src.bom_merge.config import DEFAULT_CONFIG, PipelineConfig
from src.bom_merge.manager import aggregate_parts
from src.bom_merge.parser import parse_rows
from src.bom_merge.types import (
    DiagnosticKind,
    Part,
    Row,
    StatsDict,
    create_empty_stats,
)

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = (".pdf", ".csv")

# Words on the same visual line are at most this far apart vertically (pt).
LINE_TOLERANCE = 3.0
# A horizontal gap wider than this (pt) starts a new cell.
CELL_GAP = 8.0


def _words_to_rows(words: list[dict[str, Any]]) -> list[Row]:
    """
    Rebuilds table rows from positioned words.

    Words are grouped into lines by their 'top' coordinate, then split into
    cells wherever the horizontal gap to the previous word exceeds CELL_GAP.
    """
    lines: list[list[dict[str, Any]]] = []
    for word in sorted(words, key=lambda w: (round(w["top"]), w["x0"])):
        if lines and abs(lines[-1][0]["top"] - word["top"]) <= LINE_TOLERANCE:
            lines[-1].append(word)
        else:
            lines.append([word])

    rows: list[Row] = []
    for line in lines:
        cells: list[str] = []
        prev_x1: float | None = None
        for word in sorted(line, key=lambda w: w["x0"]):
            if prev_x1 is not None and word["x0"] - prev_x1 <= CELL_GAP:
                cells[-1] = f"{cells[-1]} {word['text']}"
            else:
                cells.append(word["text"])
            prev_x1 = word["x1"]
        rows.append(tuple(cells))
    return rows


def extract_pdf_rows(filepath: str) -> list[Row]:
    """
    Extracts visual table rows from every page of a PDF.

    Args:
        filepath: Path to the PDF file.

    Returns:
        The rows of all pages, in reading order.
    """
    # Lazy import to avoid loading heavy PDF libraries unless needed
    import pdfplumber

    rows: list[Row] = []
    with pdfplumber.open(filepath) as pdf:
        for page in pdf.pages:
            rows.extend(_words_to_rows(page.extract_words()))
    return rows


def extract_csv_rows(filepath: str) -> list[Row]:
    """Reads a CSV file as raw rows (no header handling)."""
    with open(filepath, encoding="utf-8-sig", newline="") as f:
        return [tuple(row) for row in csv.reader(f) if row]


def read_rows(filepath: str) -> list[Row]:
    """
    Dispatches to the right row extractor for a file.

    Raises:
        ValueError: If the file extension is not supported.
    """
    ext = os.path.splitext(filepath)[1].lower()
    if ext == ".pdf":
        return extract_pdf_rows(filepath)
    if ext == ".csv":
        return extract_csv_rows(filepath)
    raise ValueError(f"Unsupported document type: {ext or filepath}")


def _source_failure(
    source_name: str, error: Exception, config: PipelineConfig
) -> tuple[list[Part], StatsDict]:
    """Reports an unreadable document and returns its (empty) contribution."""
    config.for_source(source_name).report(
        DiagnosticKind.SOURCE_FAILURE, f"Error parsing {source_name}: {error}"
    )
    stats = create_empty_stats()
    stats["errors"].append(str(error))
    return [], stats


def extract_file_bom(
    filepath: str, config: PipelineConfig = DEFAULT_CONFIG
) -> tuple[list[Part], StatsDict]:
    """
    Runs the full pipeline over a single document.

    Args:
        filepath: Path to a PDF or CSV document.
        config: Pipeline config for tracing and diagnostics.

    Returns:
        A tuple of (Parts, Parsing Statistics). Parts are not aggregated so
        they can be merged with other documents first.
    """
    source_name = os.path.basename(filepath)

    try:
        rows = read_rows(filepath)
    except Exception as e:
        return _source_failure(source_name, e, config)

    parts, stats = parse_rows(rows, source_name=source_name, config=config)
    logger.info(
        f"Processed file {source_name} - Detected BOM Type: {stats['layout']}, "
        f"Parts Found: {len(parts)}, Unique Items: {len(aggregate_parts(parts))}"
    )
    return parts, stats


def extract_folder_bom(
    folder: str, config: PipelineConfig = DEFAULT_CONFIG
) -> tuple[list[Part], dict[str, StatsDict]]:
    """
    Runs the pipeline over every supported document in a folder.

    Files are processed in name order so repeated runs log identically.

    Args:
        folder: Directory containing PDF/CSV documents.
        config: Pipeline config for tracing and diagnostics.

    Returns:
        A tuple of (all Parts concatenated, stats per file name).
    """
    files = sorted(
        f
        for f in os.listdir(folder)
        if f.lower().endswith(SUPPORTED_EXTENSIONS)
        and os.path.isfile(os.path.join(folder, f))
    )

    accumulated: list[Part] = []
    all_stats: dict[str, StatsDict] = {}
    for filename in files:
        parts, stats = extract_file_bom(os.path.join(folder, filename), config)
        accumulated.extend(parts)
        all_stats[filename] = stats

    return accumulated, all_stats


def _process_content(
    content: bytes, ext: str, source_name: str, config: PipelineConfig
) -> tuple[list[Part], StatsDict]:
    """Helper to handle binary document content via temp file."""
    with tempfile.NamedTemporaryFile(delete=False, suffix=ext) as tmp:
        tmp.write(content)
        tmp_path = tmp.name

    try:
        try:
            rows = read_rows(tmp_path)
        except Exception as e:
            return _source_failure(source_name, e, config)
        return parse_rows(rows, source_name=source_name, config=config)
    finally:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)


def process_input_data(
    method: str,
    data: Any,
    source_name: str,
    config: PipelineConfig = DEFAULT_CONFIG,
) -> tuple[list[Part], StatsDict, bytes | None]:
    """
    Unified handler for processing uploaded files and URLs.

    Args:
        method: The input method ("Upload File", "From URL").
        data: The raw data associated with the method (UploadedFile, URL string).
        source_name: A display name for logging and diagnostics.
        config: Pipeline config for tracing and diagnostics.

    Returns:
        A tuple containing:
            - list[Part]: The parsed parts (not yet aggregated).
            - StatsDict: Parsing statistics.
            - bytes | None: The raw binary content (if a document was read).
    """
    if not data:
        return [], create_empty_stats(), None

    try:
        if method == "From URL":
            url = str(data).strip()
            response = requests.get(url, timeout=10)
            response.raise_for_status()

            is_pdf = url.lower().endswith(".pdf") or response.content.startswith(
                b"%PDF"
            )
            ext = ".pdf" if is_pdf else ".csv"
            parts, stats = _process_content(response.content, ext, source_name, config)
            return parts, stats, response.content

        elif method == "Upload File":
            # data is expected to be a file-like object (Streamlit UploadedFile)
            if not hasattr(data, "name"):
                raise ValueError("Invalid file object provided.")

            content = data.getvalue()
            ext = os.path.splitext(data.name)[1].lower()
            parts, stats = _process_content(content, ext, source_name, config)
            return parts, stats, content

    except Exception as e:
        parts, stats = _source_failure(source_name, e, config)
        return parts, stats, None

    parts, stats = _source_failure(
        source_name, ValueError(f"Unknown method: {method}"), config
    )
    return parts, stats, None
