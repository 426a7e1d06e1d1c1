"""
BOM Merge Library (Package Entry Point).

Exposes the core logic and data structures for reading pedal build documents,
classifying and normalizing their components, and merging them into a single
quantified Bill of Materials.
"""

from .classifier import (
    classify_capacitor,
    classify_generic_pair,
    classify_location,
    normalize_type,
)
from .config import DEFAULT_CONFIG, PipelineConfig
from .filters import is_garbled_row, is_header_row, is_noise_row
from .loader import (
    SUPPORTED_EXTENSIONS,
    extract_csv_rows,
    extract_file_bom,
    extract_folder_bom,
    extract_pdf_rows,
    process_input_data,
    read_rows,
)
from .manager import (
    aggregate_parts,
    grouping_key,
    serialize_bom,
    sort_bom,
    total_quantity,
)
from .normalizer import expand_shorthand, normalize_value
from .parser import (
    detect_layout,
    parse_generic_bom,
    parse_parts_list,
    parse_rows,
    parse_shopping_list,
)
from .types import (
    BomEntry,
    BomLayout,
    Diagnostic,
    DiagnosticKind,
    Part,
    PartType,
    Row,
    StatsDict,
    create_empty_stats,
)

__all__ = [
    # types
    "BomEntry",
    "BomLayout",
    "Diagnostic",
    "DiagnosticKind",
    "Part",
    "PartType",
    "Row",
    "StatsDict",
    "create_empty_stats",
    # config
    "DEFAULT_CONFIG",
    "PipelineConfig",
    # filters
    "is_garbled_row",
    "is_header_row",
    "is_noise_row",
    # classifier
    "classify_capacitor",
    "classify_generic_pair",
    "classify_location",
    "normalize_type",
    # normalizer
    "expand_shorthand",
    "normalize_value",
    # parser
    "detect_layout",
    "parse_generic_bom",
    "parse_parts_list",
    "parse_rows",
    "parse_shopping_list",
    # manager
    "aggregate_parts",
    "grouping_key",
    "serialize_bom",
    "sort_bom",
    "total_quantity",
    # loader
    "SUPPORTED_EXTENSIONS",
    "extract_csv_rows",
    "extract_file_bom",
    "extract_folder_bom",
    "extract_pdf_rows",
    "process_input_data",
    "read_rows",
]
