"""Tests for merging uploaded records with curated or external structure."""

import pytest

from sheddome_atlas.annotation import (
    AnnotationMerger,
    AnnotationRequest,
    AnnotationResponse,
    SAMPLE_PEPTIDE_COUNT,
    merge_with_curated,
    relocate_peptides,
)
from sheddome_atlas.errors import AnnotationError, AnnotationErrorKind, CollaboratorError
from sheddome_atlas.ingest import DEMO_CSV, parse_csv
from sheddome_atlas.records import Domain, Location, PartialProteinRecord, Role


class FakeCollaborator:
    """Annotation collaborator returning a canned response."""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.requests = []

    def annotate(self, request):
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return self.response


def test_relocate_peptides_by_start(ace2_domains, make_peptide):
    """Test that each peptide takes the type of the domain containing its start."""
    peptides = [make_peptide(30), make_peptide(750), make_peptide(780), make_peptide(900)]

    relocated = relocate_peptides(peptides, ace2_domains)

    assert [p.location for p in relocated] == [
        Location.EXTRACELLULAR,
        Location.TRANSMEMBRANE,
        Location.INTRACELLULAR,
        Location.EXTRACELLULAR,
    ]


def test_relocate_peptides_does_not_mutate_input(ace2_domains, make_peptide):
    peptide = make_peptide(750)

    relocate_peptides([peptide], ace2_domains)

    assert peptide.location == Location.EXTRACELLULAR


def test_relocate_first_matching_domain_wins(make_peptide):
    domains = [
        Domain(name="A", start=1, end=100, type=Location.INTRACELLULAR),
        Domain(name="B", start=50, end=150, type=Location.TRANSMEMBRANE),
    ]

    relocated = relocate_peptides([make_peptide(75)], domains)

    assert relocated[0].location == Location.INTRACELLULAR


def test_merge_ace2_partial(merger, ace2_partial):
    """Test the curated merge: structure from curated, measurements from upload."""
    result = merger.merge(ace2_partial)
    record = result.record

    assert result.source == "curated"
    assert "Successfully mapped" in result.interpretation
    assert [p.location for p in record.peptides] == [
        Location.EXTRACELLULAR,
        Location.TRANSMEMBRANE,
    ]
    assert record.fluid_ecto_abundance == 2000.0
    assert record.tissue_abundance == 500.0
    assert record.shedding_score == 5.0
    assert record.data_sources.method == "CSV Import"
    assert record.uniprot_id == "Q9BYF1"
    assert record.role == Role.SUBSTRATE
    assert record.length == 805


def test_merge_keeps_curated_structure(merger, resolver, ace2_partial):
    """Test that supplied domains and cleavage sites never override curated ones."""
    ace2_partial.domains = [Domain(name="Bogus", start=1, end=805, type=Location.INTRACELLULAR)]
    ace2_partial.cleavage_sites = []
    curated = resolver.resolve("ACE2")

    record = merger.merge(ace2_partial).record

    assert record.domains == curated.domains
    assert record.cleavage_sites == curated.cleavage_sites
    assert record.peptides[0].location == Location.EXTRACELLULAR


def test_merge_demo_csv_round_trip(merger, resolver):
    """Test parsing the demo CSV and merging it with curated ACE2."""
    parsed = parse_csv(DEMO_CSV)
    curated = resolver.resolve("ACE2")

    record = merger.merge(parsed.partial).record

    assert len(record.peptides) == 9
    assert record.domains == curated.domains
    assert record.cleavage_sites == curated.cleavage_sites
    assert [p.location for p in record.peptides].count(Location.INTRACELLULAR) == 2
    assert [p.location for p in record.peptides].count(Location.TRANSMEMBRANE) == 1


def test_merge_without_peptides_keeps_curated_peptides(resolver):
    partial = PartialProteinRecord(name="ACE2", peptides=[])
    curated = resolver.resolve("ACE2")

    record = merge_with_curated(partial, curated)

    assert record.peptides == curated.peptides


def test_merge_result_is_independent_of_store(merger, resolver, ace2_partial):
    record = merger.merge(ace2_partial).record
    record.domains.clear()

    assert len(resolver.resolve("ACE2").domains) == 4


def test_merge_unknown_identifier(merger):
    partial = PartialProteinRecord(name="NOTAPROTEIN", gene_symbol="NOTAPROTEIN", peptides=[])

    with pytest.raises(AnnotationError) as exc_info:
        merger.merge(partial)

    assert exc_info.value.kind == AnnotationErrorKind.NOT_IN_KNOWLEDGE_BASE
    assert exc_info.value.identifier == "NOTAPROTEIN"
    assert "not found in the curated knowledge base" in str(exc_info.value)


def test_merge_resolves_by_uniprot_id(merger):
    partial = PartialProteinRecord(gene_symbol="q9byf1", peptides=[])

    result = merger.merge(partial)

    assert result.record.domains[0].name == "Signal Peptide"
    assert result.record.gene_symbol == "q9byf1"


def test_curated_match_skips_collaborator(resolver, ace2_partial):
    collaborator = FakeCollaborator(error=CollaboratorError("should not be called"))
    merger = AnnotationMerger(resolver, collaborator=collaborator)

    result = merger.merge(ace2_partial)

    assert result.source == "curated"
    assert collaborator.requests == []


def test_external_annotation_on_curated_miss(resolver, make_peptide):
    """Test that a curated miss consults the collaborator and relocates peptides."""
    response = AnnotationResponse(
        domains=[
            Domain(name="Ectodomain", start=1, end=100, type=Location.EXTRACELLULAR),
            Domain(name="Tail", start=101, end=200, type=Location.INTRACELLULAR),
        ],
        length=200,
        role=Role.SUBSTRATE,
        interpretation="Looks shed.",
    )
    collaborator = FakeCollaborator(response=response)
    merger = AnnotationMerger(resolver, collaborator=collaborator)
    partial = PartialProteinRecord(
        name="NEW1",
        peptides=[make_peptide(10), make_peptide(150)],
    )

    result = merger.merge(partial)

    assert result.source == "ai_service"
    assert result.interpretation == "Looks shed."
    assert result.record.gene_symbol == "NEW1"
    assert result.record.length == 200
    assert result.record.data_sources.method == "AI Annotation"
    assert [p.location for p in result.record.peptides] == [
        Location.EXTRACELLULAR,
        Location.INTRACELLULAR,
    ]
    assert collaborator.requests[0].identifier == "NEW1"


def test_external_annotation_failure(resolver, make_peptide):
    collaborator = FakeCollaborator(error=CollaboratorError("timeout"))
    merger = AnnotationMerger(resolver, collaborator=collaborator)
    partial = PartialProteinRecord(name="NEW1", peptides=[make_peptide(10)])

    with pytest.raises(AnnotationError) as exc_info:
        merger.merge(partial)

    assert exc_info.value.identifier == "NEW1"
    assert isinstance(exc_info.value.__cause__, CollaboratorError)


def test_external_annotation_infers_length(resolver, make_peptide):
    collaborator = FakeCollaborator(response=AnnotationResponse())
    merger = AnnotationMerger(resolver, collaborator=collaborator)
    partial = PartialProteinRecord(name="NEW1", peptides=[make_peptide(10, 60)])

    record = merger.merge(partial).record

    assert record.length == 60
    assert record.domains == []


def test_annotation_request_samples_peptides(make_peptide):
    peptides = [make_peptide(i * 10) for i in range(1, 9)]

    request = AnnotationRequest.for_peptides("NEW1", peptides)

    assert len(request.sample_peptides) == SAMPLE_PEPTIDE_COUNT
    assert request.sample_peptides[0].start == 10
