"""Parse uploaded JSON or CSV text into a partial protein record.

JSON uploads are taken as-is (with default provenance) and need annotation
only when they carry no domains. CSV uploads hold one protein's peptides and
always need annotation: peptide locations are placeholders until the
annotation merger maps them onto curated domains.
"""

import csv
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

import structlog
from pydantic import ValidationError

from sheddome_atlas.errors import ParseError, ParseErrorKind
from sheddome_atlas.ingest.columns import ColumnMap, classify_columns
from sheddome_atlas.ingest.values import parse_float, parse_int
from sheddome_atlas.metrics import log2_fold_change
from sheddome_atlas.records.models import (
    DataSources,
    DEFAULT_LOCATION,
    PartialProteinRecord,
    Peptide,
)

logger = structlog.get_logger()

UploadFormat = Literal["json", "csv"]

JSON_DATA_SOURCES = DataSources(fluid="User JSON", tissue="User JSON", method="Uploaded")
CSV_DATA_SOURCES = DataSources(
    fluid="Experimental Upload",
    tissue="Experimental Upload",
    method="CSV Import",
)

# Placeholders for CSV uploads; replaced by curated or measured values later
PLACEHOLDER_PVALUE = 0.05
PLACEHOLDER_SHEDDING_SCORE = 5.0
PLACEHOLDER_ECTO_CTO_RATIO = 1.0
UNKNOWN_PROTEIN_NAME = "Unknown Protein"
UNKNOWN_GENE_SYMBOL = "Unknown"

CSV_HEADER = "ProteinId,PeptideSequence,Start,End,Intensity_Fluid,Intensity_Tissue"

CSV_TEMPLATE = f"""{CSV_HEADER}
ACE2,SAMPLE_PEPTIDE_SEQ,20,35,50000,1000
"""

DEMO_CSV = f"""{CSV_HEADER}
ACE2,STIEEQAKTFLDKFNHEAEDLFYQSS,19,45,850000,20000
ACE2,GLTTEPHKSNAT,100,112,720000,15000
ACE2,MYPGIQVSNNKY,250,262,900000,18000
ACE2,AWDLGKGDFRI,400,411,680000,14000
ACE2,VVEKLNQLGT,600,610,750000,16000
ACE2,LGANQGFEA,720,729,500000,12000
ACE2,IVSLCTCVFAA,745,755,20000,80000
ACE2,KKKNKARSGEN,765,775,1000,95000
ACE2,PYNASRIRK,780,788,500,98000
"""

DEMO_JSON = json.dumps({
    "name": "Angiotensin-converting enzyme 2",
    "geneSymbol": "ACE2",
    "length": 805,
    "description": "Curated Demo: Essential counter-regulatory carboxypeptidase.",
    "role": "Substrate",
    "sheddingScore": 9.2,
    "fluidEctoAbundance": 12500000,
    "tissueAbundance": 4500000,
    "ectoCtoRatio": 18.5,
    "domains": [
        {"name": "Signal Peptide", "start": 1, "end": 17, "type": "Extracellular"},
        {"name": "Ectodomain", "start": 18, "end": 740, "type": "Extracellular"},
        {"name": "Transmembrane", "start": 741, "end": 761, "type": "Transmembrane"},
        {"name": "Cytoplasmic Tail", "start": 762, "end": 805, "type": "Intracellular"},
    ],
    "peptides": [
        {"sequence": "STIEEQAKTFLDKFNHEAEDLFYQSS", "start": 19, "end": 45,
         "log2FoldChange": 4.2, "intensity": 850000, "location": "Extracellular"},
        {"sequence": "KKKNKARSGEN", "start": 765, "end": 775,
         "log2FoldChange": -1.5, "intensity": 1000, "location": "Intracellular"},
    ],
    "cleavageSites": [
        {"position": 740, "protease": "ADAM17", "evidence": "Verified"},
    ],
}, indent=2)


@dataclass
class ParseResult:
    """Outcome of parsing an upload.

    Attributes:
        partial: Partial record built from the upload
        needs_annotation: True if the record lacks structural metadata
        rows_skipped: CSV rows dropped (short rows or a different protein)
        defaults_applied: Per-column count of cells that took a default
    """
    partial: PartialProteinRecord
    needs_annotation: bool
    rows_skipped: int = 0
    defaults_applied: dict[str, int] = field(default_factory=dict)


def format_from_filename(filename: str | Path) -> UploadFormat:
    """Map a .json/.csv filename to its upload format.

    Raises:
        ParseError: UnsupportedFormat for any other suffix
    """
    suffix = Path(filename).suffix.lower()
    if suffix == ".json":
        return "json"
    if suffix == ".csv":
        return "csv"
    raise ParseError(ParseErrorKind.UNSUPPORTED_FORMAT, detail=str(filename))


def parse_upload(raw_text: str, declared_format: UploadFormat) -> ParseResult:
    """Parse uploaded text in the declared format.

    Raises:
        ParseError: On malformed input (see parse_json / parse_csv)
    """
    if declared_format == "json":
        return parse_json(raw_text)
    if declared_format == "csv":
        return parse_csv(raw_text)
    raise ParseError(ParseErrorKind.UNSUPPORTED_FORMAT, detail=str(declared_format))


def parse_json(raw_text: str) -> ParseResult:
    """Parse a JSON upload.

    Requires a non-empty string 'name' and a 'peptides' list. The record
    needs annotation iff 'domains' is absent or empty.

    Raises:
        ParseError: MalformedJson on syntax errors, InvalidSchema on shape errors
    """
    try:
        data = json.loads(raw_text)
    except json.JSONDecodeError as e:
        raise ParseError(ParseErrorKind.MALFORMED_JSON, detail=e.msg) from e

    if not isinstance(data, dict):
        raise ParseError(ParseErrorKind.INVALID_SCHEMA, detail="top level is not an object")

    name = data.get("name")
    if not isinstance(name, str) or not name:
        raise ParseError(ParseErrorKind.INVALID_SCHEMA, detail="missing 'name'")
    if not isinstance(data.get("peptides"), list):
        raise ParseError(ParseErrorKind.INVALID_SCHEMA, detail="'peptides' must be a list")

    try:
        partial = PartialProteinRecord.model_validate(data)
    except ValidationError as e:
        raise ParseError(
            ParseErrorKind.INVALID_SCHEMA,
            detail=f"{e.error_count()} invalid field(s)",
        ) from e

    if partial.data_sources is None:
        partial.data_sources = JSON_DATA_SOURCES.model_copy()

    needs_annotation = not partial.domains

    logger.info(
        "json_parse_complete",
        name=partial.name,
        peptide_count=len(partial.peptides),
        needs_annotation=needs_annotation,
    )

    return ParseResult(partial=partial, needs_annotation=needs_annotation)


def _cell(cells: list[str], index: int | None) -> str | None:
    if index is None:
        return None
    return cells[index]


def parse_csv(raw_text: str) -> ParseResult:
    """Parse a single-protein peptide CSV.

    The first line is the header (see columns.classify_columns). Rows with
    fewer cells than the header are skipped. The protein identifier comes
    from the first accepted row; rows naming another protein are skipped.

    Per row: start/end default to 0, fluid/tissue intensities default to 1,
    log2_fold_change = log2(fluid / tissue) with inf/NaN kept as-is.

    Raises:
        ParseError: EmptyOrHeaderOnly or MissingRequiredColumns
    """
    lines = raw_text.strip().splitlines()
    if len(lines) < 2:
        raise ParseError(ParseErrorKind.EMPTY_OR_HEADER_ONLY)

    rows = csv.reader(lines)
    headers = [h.strip().lower() for h in next(rows)]
    columns: ColumnMap = classify_columns(headers)

    missing = columns.missing_required()
    if missing:
        raise ParseError(
            ParseErrorKind.MISSING_REQUIRED_COLUMNS,
            detail=f"no column for {', '.join(missing)}",
        )

    peptides: list[Peptide] = []
    protein_id: str | None = None
    total_fluid = 0.0
    total_tissue = 0.0
    rows_skipped = 0
    defaults_applied = {"start": 0, "end": 0, "fluid": 0, "tissue": 0}

    for row in rows:
        cells = [c.strip() for c in row]
        if len(cells) < len(headers):
            rows_skipped += 1
            continue

        if columns.name is not None:
            if protein_id is None:
                protein_id = cells[columns.name]
            elif cells[columns.name] != protein_id:
                rows_skipped += 1
                continue

        start = parse_int(_cell(cells, columns.start), default=0)
        end = parse_int(_cell(cells, columns.end), default=0)
        fluid = parse_float(_cell(cells, columns.fluid), default=1.0)
        tissue = parse_float(_cell(cells, columns.tissue), default=1.0)

        for key, parsed in (("start", start), ("end", end), ("fluid", fluid), ("tissue", tissue)):
            if parsed.defaulted:
                defaults_applied[key] += 1

        total_fluid += fluid.value
        total_tissue += tissue.value

        peptides.append(Peptide(
            sequence=cells[columns.sequence],
            start=start.value,
            end=end.value,
            log2_fold_change=log2_fold_change(fluid.value, tissue.value),
            pvalue=PLACEHOLDER_PVALUE,
            intensity=fluid.value,
            location=DEFAULT_LOCATION,
        ))

    partial = PartialProteinRecord(
        name=protein_id if protein_id is not None else UNKNOWN_PROTEIN_NAME,
        gene_symbol=protein_id if protein_id is not None else UNKNOWN_GENE_SYMBOL,
        peptides=peptides,
        fluid_ecto_abundance=total_fluid,
        tissue_abundance=total_tissue,
        shedding_score=PLACEHOLDER_SHEDDING_SCORE,
        ecto_cto_ratio=PLACEHOLDER_ECTO_CTO_RATIO,
        domains=[],
        data_sources=CSV_DATA_SOURCES.model_copy(),
    )

    logger.info(
        "csv_parse_complete",
        protein=partial.name,
        columns=columns.as_dict(),
        peptide_count=len(peptides),
        rows_skipped=rows_skipped,
        defaults_applied=defaults_applied,
    )

    return ParseResult(
        partial=partial,
        needs_annotation=True,
        rows_skipped=rows_skipped,
        defaults_applied=defaults_applied,
    )
