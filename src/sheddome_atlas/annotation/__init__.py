"""Structural annotation of uploaded peptide data.

Maps uploaded peptides onto curated domain tables, with an optional external
service contract for identifiers outside the curated store.
"""

from sheddome_atlas.annotation.collaborator import (
    AnnotationCollaborator,
    AnnotationRequest,
    AnnotationResponse,
    GeneratedRecord,
    GenerationCollaborator,
    PeptideSpan,
    SAMPLE_PEPTIDE_COUNT,
)
from sheddome_atlas.annotation.merger import (
    AnnotationMerger,
    CURATED_AUTHORITATIVE_FIELDS,
    MergeResult,
    merge_with_annotation,
    merge_with_curated,
    relocate_peptides,
)

__all__ = [
    "AnnotationCollaborator",
    "AnnotationRequest",
    "AnnotationResponse",
    "GeneratedRecord",
    "GenerationCollaborator",
    "PeptideSpan",
    "SAMPLE_PEPTIDE_COUNT",
    "AnnotationMerger",
    "CURATED_AUTHORITATIVE_FIELDS",
    "MergeResult",
    "merge_with_annotation",
    "merge_with_curated",
    "relocate_peptides",
]
