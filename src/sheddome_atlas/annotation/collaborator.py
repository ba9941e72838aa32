"""Contracts for the optional external annotation and generation services.

Both services are best-effort: a single attempt that either returns a full,
validated response or raises CollaboratorError. Nothing returned here is
verified; generated records must be labelled as such.
"""

from typing import Protocol

from pydantic import BaseModel, Field

from sheddome_atlas.records.models import (
    AtlasModel,
    CleavageSite,
    Domain,
    Peptide,
    ProteinRecord,
    Role,
)

# Number of uploaded peptides sent with an annotation request
SAMPLE_PEPTIDE_COUNT = 5


class PeptideSpan(AtlasModel):
    start: int
    end: int


class AnnotationRequest(AtlasModel):
    """Identifier plus a few peptide positions to annotate."""

    identifier: str
    sample_peptides: list[PeptideSpan] = Field(default_factory=list)

    @classmethod
    def for_peptides(cls, identifier: str, peptides: list[Peptide] | None) -> "AnnotationRequest":
        sample = (peptides or [])[:SAMPLE_PEPTIDE_COUNT]
        return cls(
            identifier=identifier,
            sample_peptides=[PeptideSpan(start=p.start, end=p.end) for p in sample],
        )


class AnnotationResponse(AtlasModel):
    """Structural metadata returned for an identifier.

    Fields left as None were not supplied and keep the uploaded value.
    """

    domains: list[Domain] = Field(default_factory=list)
    length: int | None = Field(default=None, gt=0)
    cleavage_sites: list[CleavageSite] = Field(default_factory=list)
    description: str | None = None
    role: Role | None = None
    known_substrates: list[str] | None = None
    uniprot_id: str | None = None
    interpretation: str = ""


class GeneratedRecord(BaseModel):
    """Full record generated (not verified) for an identifier."""

    record: ProteinRecord
    interpretation: str = ""


class AnnotationCollaborator(Protocol):
    def annotate(self, request: AnnotationRequest) -> AnnotationResponse:
        """Return structural metadata for request.identifier.

        Raises:
            CollaboratorError: On any transport or response failure
        """
        ...


class GenerationCollaborator(Protocol):
    def generate(self, identifier: str) -> GeneratedRecord:
        """Generate a full record for identifier.

        Raises:
            CollaboratorError: On any transport or response failure
        """
        ...
