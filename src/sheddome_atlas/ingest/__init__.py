"""Upload ingestion: JSON/CSV text -> partial protein record.

Provides header sniffing for peptide CSVs, explicit default-aware numeric
coercion, and the JSON/CSV parsers with their bundled demo files.
"""

from sheddome_atlas.ingest.columns import ColumnMap, classify_columns, COLUMN_KEYWORDS
from sheddome_atlas.ingest.values import ParsedValue, parse_float, parse_int
from sheddome_atlas.ingest.parser import (
    CSV_TEMPLATE,
    DEMO_CSV,
    DEMO_JSON,
    ParseResult,
    format_from_filename,
    parse_csv,
    parse_json,
    parse_upload,
)

__all__ = [
    "ColumnMap",
    "classify_columns",
    "COLUMN_KEYWORDS",
    "ParsedValue",
    "parse_float",
    "parse_int",
    "CSV_TEMPLATE",
    "DEMO_CSV",
    "DEMO_JSON",
    "ParseResult",
    "format_from_filename",
    "parse_csv",
    "parse_json",
    "parse_upload",
]
