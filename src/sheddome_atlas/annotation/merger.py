"""Merge partial (uploaded) records with structural annotations.

Field precedence for a curated match:
- domains, cleavage_sites: curated record wins (structure is authoritative)
- every other field: uploaded value wins when supplied (measurements are
  authoritative), otherwise the curated value is kept

The merge is shallow: a supplied list replaces the curated list, it is never
combined element-wise. Uploaded peptides are relocated onto the final domain
table; an upload without peptides keeps the curated peptides unchanged.
"""

from dataclasses import dataclass
from typing import Literal

import structlog
from pydantic import ValidationError

from sheddome_atlas.annotation.collaborator import (
    AnnotationCollaborator,
    AnnotationRequest,
    AnnotationResponse,
)
from sheddome_atlas.errors import AnnotationError, CollaboratorError, NotFoundError
from sheddome_atlas.records.models import (
    DataSources,
    DEFAULT_LOCATION,
    Domain,
    PartialProteinRecord,
    Peptide,
    ProteinRecord,
)
from sheddome_atlas.records.resolver import LookupResolver

logger = structlog.get_logger()

CURATED_AUTHORITATIVE_FIELDS = frozenset({"domains", "cleavage_sites"})

# Fields taken from an external annotation response when it supplies them
ANNOTATION_RESPONSE_FIELDS = (
    "length",
    "cleavage_sites",
    "description",
    "role",
    "known_substrates",
    "uniprot_id",
)

ANNOTATED_DATA_SOURCES = DataSources(
    fluid="Experimental Upload",
    tissue="Experimental Upload",
    method="AI Annotation",
)

MergeSource = Literal["curated", "ai_service"]


@dataclass
class MergeResult:
    """Merged record plus a provenance note for display.

    Attributes:
        record: Fully populated record
        interpretation: Short provenance text
        source: Where the structural metadata came from
    """
    record: ProteinRecord
    interpretation: str
    source: MergeSource


def relocate_peptides(peptides: list[Peptide], domains: list[Domain]) -> list[Peptide]:
    """Copy peptides, setting location to the type of the first domain
    containing each peptide's start (DEFAULT_LOCATION when none does)."""
    relocated = []
    for peptide in peptides:
        domain = next((d for d in domains if d.contains(peptide.start)), None)
        location = domain.type if domain is not None else DEFAULT_LOCATION
        relocated.append(peptide.model_copy(update={"location": location}))
    return relocated


def merge_with_curated(partial: PartialProteinRecord, curated: ProteinRecord) -> ProteinRecord:
    """Field-by-field merge of an upload with its curated record."""
    values = {}
    for name in ProteinRecord.model_fields:
        supplied = getattr(partial, name)
        if name in CURATED_AUTHORITATIVE_FIELDS or supplied is None:
            values[name] = getattr(curated, name)
        else:
            values[name] = supplied

    if partial.peptides:
        values["peptides"] = relocate_peptides(partial.peptides, curated.domains)
    else:
        values["peptides"] = curated.peptides

    return ProteinRecord(**values).model_copy(deep=True)


def merge_with_annotation(
    partial: PartialProteinRecord,
    identifier: str,
    response: AnnotationResponse,
) -> ProteinRecord:
    """Overlay external structural metadata on an upload.

    Raises:
        pydantic.ValidationError: If the combination is not a valid record
    """
    values = partial.supplied_fields()
    values["domains"] = response.domains
    for name in ANNOTATION_RESPONSE_FIELDS:
        value = getattr(response, name)
        if value is not None:
            values[name] = value

    values["peptides"] = relocate_peptides(partial.peptides or [], response.domains)
    values.setdefault("name", identifier)
    values.setdefault("gene_symbol", identifier)
    values.setdefault("length", partial.inferred_length())
    values.setdefault("data_sources", ANNOTATED_DATA_SOURCES.model_copy())

    return ProteinRecord(**values).model_copy(deep=True)


class AnnotationMerger:
    """Turn partial records into complete ones.

    Curated records are always tried first. The external annotation service,
    when given, is only consulted on a curated miss; its failure is reported
    as NotInKnowledgeBase rather than degraded silently.
    """

    def __init__(
        self,
        resolver: LookupResolver,
        collaborator: AnnotationCollaborator | None = None,
    ):
        self.resolver = resolver
        self.collaborator = collaborator

    def merge(self, partial: PartialProteinRecord) -> MergeResult:
        """Merge partial with curated (or externally supplied) structure.

        Raises:
            AnnotationError: NotInKnowledgeBase, carrying the identifier tried
        """
        identifier = partial.identifier()

        try:
            curated = self.resolver.resolve(identifier)
        except NotFoundError:
            if self.collaborator is None:
                logger.warning("merge_not_in_knowledge_base", identifier=identifier)
                raise AnnotationError(identifier) from None
            return self._merge_external(partial, identifier)

        record = merge_with_curated(partial, curated)

        logger.info(
            "merge_complete",
            identifier=identifier,
            source="curated",
            peptide_count=len(record.peptides),
            domain_count=len(record.domains),
        )

        return MergeResult(
            record=record,
            interpretation=(
                f"Successfully mapped experimental data to the curated structure "
                f"for {identifier}."
            ),
            source="curated",
        )

    def _merge_external(self, partial: PartialProteinRecord, identifier: str) -> MergeResult:
        request = AnnotationRequest.for_peptides(identifier, partial.peptides)
        logger.info(
            "external_annotation_start",
            identifier=identifier,
            sample_size=len(request.sample_peptides),
        )

        try:
            response = self.collaborator.annotate(request)
            record = merge_with_annotation(partial, identifier, response)
        except (CollaboratorError, ValidationError) as e:
            logger.warning(
                "external_annotation_failed",
                identifier=identifier,
                error=str(e),
            )
            raise AnnotationError(identifier) from e

        logger.info(
            "merge_complete",
            identifier=identifier,
            source="ai_service",
            peptide_count=len(record.peptides),
            domain_count=len(record.domains),
        )

        interpretation = response.interpretation or (
            f"Structural annotation for {identifier} was generated by an external "
            "service and is unverified."
        )
        return MergeResult(record=record, interpretation=interpretation, source="ai_service")
