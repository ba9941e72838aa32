"""Error taxonomy for lookup, upload parsing and annotation.

All errors carry a human-readable message suitable for direct display.
None of them are retried; callers surface them verbatim.
"""

from enum import Enum


class SheddomeError(Exception):
    """Base class for all SheddomeAtlas errors."""


class NotFoundError(SheddomeError):
    """Query matched no curated record (and generation, if enabled, failed).

    Attributes:
        query: Original query string as typed by the user (not normalized)
    """

    def __init__(self, query: str):
        self.query = query
        super().__init__(f"Protein '{query}' not found in the curated database.")


class ParseErrorKind(str, Enum):
    """Reasons an uploaded file could not be turned into a partial record."""

    MALFORMED_JSON = "MalformedJson"
    INVALID_SCHEMA = "InvalidSchema"
    EMPTY_OR_HEADER_ONLY = "EmptyOrHeaderOnly"
    MISSING_REQUIRED_COLUMNS = "MissingRequiredColumns"
    UNSUPPORTED_FORMAT = "UnsupportedFormat"


_PARSE_GUIDANCE = {
    ParseErrorKind.MALFORMED_JSON: "Error parsing JSON.",
    ParseErrorKind.INVALID_SCHEMA: (
        "Invalid JSON format: a non-empty 'name' and a 'peptides' list are required."
    ),
    ParseErrorKind.EMPTY_OR_HEADER_ONLY: "CSV is empty or missing header.",
    ParseErrorKind.MISSING_REQUIRED_COLUMNS: (
        "CSV must contain columns for: Sequence, Start, End, "
        "FluidIntensity, TissueIntensity"
    ),
    ParseErrorKind.UNSUPPORTED_FORMAT: "Unsupported file format. Please use .json or .csv",
}


class ParseError(SheddomeError):
    """Uploaded data could not be parsed.

    Attributes:
        kind: ParseErrorKind describing the failure
        detail: Optional extra context (e.g. the decoder message)
    """

    def __init__(self, kind: ParseErrorKind, detail: str | None = None):
        self.kind = kind
        self.detail = detail
        message = _PARSE_GUIDANCE[kind]
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class AnnotationErrorKind(str, Enum):
    """Reasons a partial record could not be structurally annotated."""

    NOT_IN_KNOWLEDGE_BASE = "NotInKnowledgeBase"


class AnnotationError(SheddomeError):
    """Partial record has no curated structural match.

    Attributes:
        kind: AnnotationErrorKind
        identifier: Identifier the merger attempted to resolve
    """

    def __init__(
        self,
        identifier: str,
        kind: AnnotationErrorKind = AnnotationErrorKind.NOT_IN_KNOWLEDGE_BASE,
    ):
        self.kind = kind
        self.identifier = identifier
        super().__init__(
            f"Protein '{identifier}' not found in the curated knowledge base. "
            "Add a curated record with domain annotations before uploading its peptides."
        )


class CollaboratorError(SheddomeError):
    """External annotation/generation service failed or returned unusable data."""
