"""Shared fixtures for SheddomeAtlas tests."""

import pytest

from sheddome_atlas.annotation import AnnotationMerger
from sheddome_atlas.records import (
    DataSources,
    Domain,
    InMemoryRecordStore,
    Location,
    LookupResolver,
    PartialProteinRecord,
    Peptide,
    load_curated_store,
)


@pytest.fixture
def store() -> InMemoryRecordStore:
    """Bundled curated store (ACE2, CDCP1)."""
    return load_curated_store()


@pytest.fixture
def resolver(store) -> LookupResolver:
    return LookupResolver(store)


@pytest.fixture
def merger(resolver) -> AnnotationMerger:
    """Curated-only merger (no external annotation service)."""
    return AnnotationMerger(resolver)


@pytest.fixture
def ace2_domains() -> list[Domain]:
    """ACE2 domain table as curated."""
    return [
        Domain(name="Signal Peptide", start=1, end=17, type=Location.EXTRACELLULAR),
        Domain(name="Ectodomain", start=18, end=740, type=Location.EXTRACELLULAR),
        Domain(name="Transmembrane", start=741, end=761, type=Location.TRANSMEMBRANE),
        Domain(name="Cytoplasmic Tail", start=762, end=805, type=Location.INTRACELLULAR),
    ]


def _make_peptide(start: int, end: int | None = None, intensity: float = 1000.0) -> Peptide:
    return Peptide(
        sequence="PEPTIDE",
        start=start,
        end=end if end is not None else start + 10,
        log2_fold_change=1.0,
        intensity=intensity,
    )


@pytest.fixture
def make_peptide():
    """Factory for peptides at a given start with placeholder quantification."""
    return _make_peptide


@pytest.fixture
def ace2_partial() -> PartialProteinRecord:
    """Partial record as produced by a CSV upload for ACE2."""
    return PartialProteinRecord(
        name="ACE2",
        gene_symbol="ACE2",
        peptides=[_make_peptide(30), _make_peptide(750)],
        fluid_ecto_abundance=2000.0,
        tissue_abundance=500.0,
        shedding_score=5.0,
        ecto_cto_ratio=1.0,
        domains=[],
        data_sources=DataSources(
            fluid="Experimental Upload",
            tissue="Experimental Upload",
            method="CSV Import",
        ),
    )
