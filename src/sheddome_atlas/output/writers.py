"""Record and atlas writers with YAML provenance sidecars."""

import re
from datetime import datetime, timezone
from pathlib import Path

import polars as pl
import yaml

from sheddome_atlas import __version__
from sheddome_atlas.output.atlas import peptides_to_frame
from sheddome_atlas.records.models import ProteinRecord


# Characters allowed in export file names; everything else becomes "_"
_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]")


def safe_filename_base(name: str | None, fallback: str = "record") -> str:
    """Reduce a gene symbol to a file name that stays inside the output dir.

    "HLA-A/B" becomes "HLA-A_B" and "../escaped" becomes "_escaped".
    """
    cleaned = _UNSAFE_FILENAME_CHARS.sub("_", name or "").lstrip(".")
    return cleaned or fallback


def _write_provenance(path: Path, provenance: dict) -> None:
    with open(path, "w") as f:
        yaml.dump(provenance, f, default_flow_style=False, sort_keys=False)


def write_record_output(
    record: ProteinRecord,
    output_dir: Path,
    interpretation: str = "",
    source: str = "curated",
    config_hash: str | None = None,
) -> dict:
    """
    Write one record as JSON plus a peptide TSV and provenance sidecar.

    Args:
        record: Record to export
        output_dir: Directory to write to (created if it doesn't exist)
        interpretation: Interpretation text shown with the record
        source: Where the record came from (curated, upload, ai_service, generated)
        config_hash: Optional configuration hash for the sidecar

    Returns:
        Dictionary with output file paths:
        {
            "json": Path to record JSON (camelCase keys, inf/NaN kept),
            "tsv": Path to peptide TSV,
            "provenance": Path to YAML provenance sidecar
        }
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    filename_base = safe_filename_base(record.gene_symbol)
    json_path = output_dir / f"{filename_base}.json"
    tsv_path = output_dir / f"{filename_base}.peptides.tsv"
    provenance_path = output_dir / f"{filename_base}.provenance.yaml"

    json_path.write_text(record.model_dump_json(by_alias=True, indent=2))
    peptides_to_frame(record).write_csv(tsv_path, separator="\t", include_header=True)

    provenance = {
        "generated_at": datetime.now(timezone.utc).isoformat(),
        "sheddome_atlas_version": __version__,
        "source": source,
        "config_hash": config_hash,
        "data_sources": record.data_sources.model_dump(),
        "interpretation": interpretation,
        "output_files": [json_path.name, tsv_path.name],
        "statistics": {
            "peptide_count": len(record.peptides),
            "domain_count": len(record.domains),
            "cleavage_site_count": len(record.cleavage_sites),
        },
    }
    _write_provenance(provenance_path, provenance)

    return {
        "json": json_path,
        "tsv": tsv_path,
        "provenance": provenance_path,
    }


def write_atlas_output(
    df: pl.DataFrame,
    output_dir: Path,
    filename_base: str = "atlas",
) -> dict:
    """
    Write the atlas table to TSV and Parquet with a provenance sidecar.

    Args:
        df: Frame from records_to_frame
        output_dir: Directory to write to (created if it doesn't exist)
        filename_base: Base filename without extension (default: "atlas")

    Returns:
        Dictionary with "tsv", "parquet" and "provenance" paths
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    tsv_path = output_dir / f"{filename_base}.tsv"
    parquet_path = output_dir / f"{filename_base}.parquet"
    provenance_path = output_dir / f"{filename_base}.provenance.yaml"

    df.write_csv(tsv_path, separator="\t", include_header=True)
    df.write_parquet(parquet_path, compression="snappy")

    role_counts = {}
    if "role" in df.columns and df.height > 0:
        role_dist = df.group_by("role").agg(pl.len()).sort("role")
        role_counts = {row["role"]: row["len"] for row in role_dist.to_dicts()}

    provenance = {
        "generated_at": datetime.now(timezone.utc).isoformat(),
        "sheddome_atlas_version": __version__,
        "output_files": [tsv_path.name, parquet_path.name],
        "statistics": {
            "total_records": df.height,
            "role_counts": role_counts,
        },
        "column_count": len(df.columns),
        "column_names": df.columns,
    }
    _write_provenance(provenance_path, provenance)

    return {
        "tsv": tsv_path,
        "parquet": parquet_path,
        "provenance": provenance_path,
    }
