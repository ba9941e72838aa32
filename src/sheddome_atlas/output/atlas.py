"""Tabular views over records: the global atlas and per-record peptide tables."""

from typing import Iterable

import polars as pl
import structlog

from sheddome_atlas.metrics import ecto_cyto_ratio, ratio
from sheddome_atlas.records.models import ProteinRecord

logger = structlog.get_logger()

ATLAS_SCHEMA = {
    "gene_symbol": pl.String,
    "name": pl.String,
    "uniprot_id": pl.String,
    "role": pl.String,
    "length": pl.Int64,
    "shedding_score": pl.Float64,
    "fluid_ecto_abundance": pl.Float64,
    "tissue_abundance": pl.Float64,
    "ecto_cto_ratio": pl.Float64,
    "fluid_tissue_ratio": pl.Float64,
    "peptide_ecto_cyto_ratio": pl.Float64,
    "domain_count": pl.Int64,
    "peptide_count": pl.Int64,
    "cleavage_site_count": pl.Int64,
}

PEPTIDE_SCHEMA = {
    "gene_symbol": pl.String,
    "sequence": pl.String,
    "start": pl.Int64,
    "end": pl.Int64,
    "location": pl.String,
    "intensity": pl.Float64,
    "log2_fold_change": pl.Float64,
    "pvalue": pl.Float64,
}


def records_to_frame(records: Iterable[ProteinRecord]) -> pl.DataFrame:
    """Build the global atlas table, one row per record.

    Adds log10 abundance columns for plotting fluid vs tissue abundance.
    Ratios keep inf/NaN where abundances are zero.

    Args:
        records: Records to tabulate

    Returns:
        DataFrame with ATLAS_SCHEMA columns plus log10_fluid and log10_tissue,
        sorted by shedding_score descending then gene_symbol
    """
    rows = []
    for record in records:
        rows.append({
            "gene_symbol": record.gene_symbol,
            "name": record.name,
            "uniprot_id": record.uniprot_id,
            "role": record.role.value,
            "length": record.length,
            "shedding_score": record.shedding_score,
            "fluid_ecto_abundance": record.fluid_ecto_abundance,
            "tissue_abundance": record.tissue_abundance,
            "ecto_cto_ratio": record.ecto_cto_ratio,
            "fluid_tissue_ratio": ratio(record.fluid_ecto_abundance, record.tissue_abundance),
            "peptide_ecto_cyto_ratio": ecto_cyto_ratio(record.peptides),
            "domain_count": len(record.domains),
            "peptide_count": len(record.peptides),
            "cleavage_site_count": len(record.cleavage_sites),
        })

    df = pl.DataFrame(rows, schema=ATLAS_SCHEMA)

    # Abundances are non-negative; zero maps to -inf like the plot axis would
    df = df.with_columns([
        pl.col("fluid_ecto_abundance").log10().alias("log10_fluid"),
        pl.col("tissue_abundance").log10().alias("log10_tissue"),
    ])

    df = df.sort(["shedding_score", "gene_symbol"], descending=[True, False])

    logger.info("atlas_frame_built", record_count=df.height)
    return df


def peptides_to_frame(record: ProteinRecord) -> pl.DataFrame:
    """One row per peptide of record, in record order."""
    rows = [
        {
            "gene_symbol": record.gene_symbol,
            "sequence": p.sequence,
            "start": p.start,
            "end": p.end,
            "location": p.location.value,
            "intensity": p.intensity,
            "log2_fold_change": p.log2_fold_change,
            "pvalue": p.pvalue,
        }
        for p in record.peptides
    ]
    return pl.DataFrame(rows, schema=PEPTIDE_SCHEMA)
