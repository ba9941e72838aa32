"""Tests for atlas/peptide tables and output writers."""

import json
import math

import polars as pl
import pytest
import yaml

from sheddome_atlas.output import (
    ATLAS_SCHEMA,
    peptides_to_frame,
    records_to_frame,
    safe_filename_base,
    write_atlas_output,
    write_record_output,
)
from sheddome_atlas.records import DataSources, Peptide, ProteinRecord


def _record(symbol: str, score: float, fluid: float = 100.0, tissue: float = 10.0) -> ProteinRecord:
    return ProteinRecord(
        name=f"{symbol} protein",
        gene_symbol=symbol,
        length=100,
        shedding_score=score,
        fluid_ecto_abundance=fluid,
        tissue_abundance=tissue,
        data_sources=DataSources(fluid="f", tissue="t", method="m"),
    )


def test_records_to_frame_columns(store):
    df = records_to_frame(store)

    assert df.height == 2
    assert df.columns == list(ATLAS_SCHEMA) + ["log10_fluid", "log10_tissue"]
    # Equal scores sort by gene symbol
    assert df["gene_symbol"].to_list() == ["ACE2", "CDCP1"]


def test_records_to_frame_sorted_by_score():
    df = records_to_frame([_record("LOW", 1.0), _record("HIGH", 9.0), _record("MID", 5.0)])

    assert df["gene_symbol"].to_list() == ["HIGH", "MID", "LOW"]


def test_records_to_frame_log10_and_ratio():
    df = records_to_frame([_record("A", 5.0, fluid=1000.0, tissue=0.0)])
    row = df.row(0, named=True)

    assert row["log10_fluid"] == pytest.approx(3.0)
    assert row["log10_tissue"] == -math.inf
    assert row["fluid_tissue_ratio"] == math.inf
    # No peptides at all: 0 / 0
    assert math.isnan(row["peptide_ecto_cyto_ratio"])


def test_records_to_frame_empty():
    df = records_to_frame([])

    assert df.height == 0
    assert "log10_fluid" in df.columns


def test_peptides_to_frame(resolver):
    df = peptides_to_frame(resolver.resolve("ACE2"))

    assert df.height == 3
    assert df["location"].to_list() == ["Extracellular", "Transmembrane", "Intracellular"]
    assert df["gene_symbol"].unique().to_list() == ["ACE2"]


def test_write_record_output(tmp_path, resolver):
    record = resolver.resolve("ACE2")

    paths = write_record_output(
        record,
        tmp_path / "out",
        interpretation="Curated.",
        source="curated",
        config_hash="abc123",
    )

    for path in paths.values():
        assert path.exists()

    data = json.loads(paths["json"].read_text())
    assert data["geneSymbol"] == "ACE2"
    assert data["peptides"][0]["log2FoldChange"] == 4.5
    assert data["cleavageSites"][0]["position"] == 740

    tsv = pl.read_csv(paths["tsv"], separator="\t")
    assert tsv.height == 3

    provenance = yaml.safe_load(paths["provenance"].read_text())
    assert provenance["source"] == "curated"
    assert provenance["config_hash"] == "abc123"
    assert provenance["statistics"]["peptide_count"] == 3
    assert provenance["output_files"] == ["ACE2.json", "ACE2.peptides.tsv"]


def test_write_record_output_keeps_infinity(tmp_path):
    """Test that non-finite fold changes survive JSON export."""
    record = _record("INF1", 5.0)
    record.peptides = [
        Peptide(sequence="AAA", start=1, end=3, log2_fold_change=math.inf),
        Peptide(sequence="BBB", start=4, end=6, log2_fold_change=math.nan),
    ]

    paths = write_record_output(record, tmp_path)
    text = paths["json"].read_text()

    assert "Infinity" in text
    assert "NaN" in text
    # Python's json module accepts these constants
    data = json.loads(text)
    assert data["peptides"][0]["log2FoldChange"] == math.inf


def test_write_atlas_output(tmp_path, store):
    df = records_to_frame(store)

    paths = write_atlas_output(df, tmp_path)

    assert paths["tsv"].name == "atlas.tsv"
    assert pl.read_parquet(paths["parquet"]).height == 2

    provenance = yaml.safe_load(paths["provenance"].read_text())
    assert provenance["statistics"]["total_records"] == 2
    assert provenance["statistics"]["role_counts"] == {"Substrate": 2}
    assert provenance["column_names"] == df.columns


@pytest.mark.parametrize("symbol,expected", [
    ("ACE2", "ACE2"),
    ("HLA-A/B", "HLA-A_B"),
    ("../escaped", "_escaped"),
    ("..", "record"),
    ("", "record"),
])
def test_safe_filename_base(symbol, expected):
    assert safe_filename_base(symbol) == expected


def test_write_record_output_slash_in_gene_symbol(tmp_path):
    """Test that user-supplied symbols cannot create or leave directories."""
    out_dir = tmp_path / "out"
    record = _record("HLA-A/B", 5.0)

    paths = write_record_output(record, out_dir)

    assert paths["json"] == out_dir / "HLA-A_B.json"
    assert paths["json"].exists()


def test_write_record_output_stays_in_output_dir(tmp_path):
    out_dir = tmp_path / "out"

    paths = write_record_output(_record("../escaped", 5.0), out_dir)

    for path in paths.values():
        assert path.resolve().parent == out_dir.resolve()
    assert not (tmp_path / "escaped.json").exists()
