"""Tests for derived shedding metrics."""

import math

import pytest

from sheddome_atlas.metrics import (
    ecto_cyto_ratio,
    location_intensities,
    log2,
    log2_fold_change,
    ratio,
    summarize,
)
from sheddome_atlas.records import Location, Peptide


def test_ratio_finite():
    assert ratio(50000.0, 1000.0) == 50.0


def test_ratio_division_by_zero():
    """Test IEEE-like semantics instead of ZeroDivisionError."""
    assert ratio(5.0, 0.0) == math.inf
    assert ratio(-5.0, 0.0) == -math.inf
    assert ratio(5.0, -0.0) == -math.inf
    assert math.isnan(ratio(0.0, 0.0))
    assert math.isnan(ratio(math.nan, 0.0))


def test_log2_edge_cases():
    assert log2(8.0) == pytest.approx(3.0)
    assert log2(0.0) == -math.inf
    assert log2(math.inf) == math.inf
    assert math.isnan(log2(-1.0))
    assert math.isnan(log2(math.nan))


def test_log2_fold_change():
    assert log2_fold_change(50000, 1000) == pytest.approx(5.643856, abs=1e-6)
    assert log2_fold_change(100, 0) == math.inf
    assert log2_fold_change(0, 100) == -math.inf
    assert math.isnan(log2_fold_change(0, 0))


def test_location_intensities_covers_every_location():
    peptides = [
        Peptide(sequence="A", start=1, end=2, intensity=10, location=Location.EXTRACELLULAR),
        Peptide(sequence="B", start=3, end=4, intensity=5, location=Location.EXTRACELLULAR),
        Peptide(sequence="C", start=5, end=6, intensity=2, location=Location.INTRACELLULAR),
    ]

    totals = location_intensities(peptides)

    assert totals[Location.EXTRACELLULAR] == 15
    assert totals[Location.INTRACELLULAR] == 2
    assert totals[Location.TRANSMEMBRANE] == 0


def test_ecto_cyto_ratio_without_intracellular_peptides():
    peptides = [Peptide(sequence="A", start=1, end=2, intensity=10)]

    assert ecto_cyto_ratio(peptides) == math.inf
    assert math.isnan(ecto_cyto_ratio([]))


def test_summarize_curated_ace2(resolver):
    """Test summary metrics over the curated ACE2 record."""
    metrics = summarize(resolver.resolve("ACE2"))

    assert metrics.fluid_tissue_ratio == pytest.approx(3.0)
    assert metrics.fluid_tissue_log2 == pytest.approx(math.log2(3.0))
    assert metrics.peptide_ecto_cyto_ratio == pytest.approx(900000 / 500)
    assert metrics.peptide_counts == {
        "Extracellular": 1,
        "Transmembrane": 1,
        "Intracellular": 1,
    }
    # pvalues 0.0001 and 0.01 are significant, 0.5 is not
    assert metrics.significant_peptides == 2
