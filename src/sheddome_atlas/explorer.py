"""Search and upload entry points used by the CLI.

Each call is one synchronous lookup or parse/merge cycle. Results are
returned, never cached: a new call simply supersedes the previous result.
"""

from dataclasses import dataclass

import structlog
from pydantic import ValidationError

from sheddome_atlas.annotation.collaborator import GenerationCollaborator
from sheddome_atlas.annotation.merger import AnnotationMerger
from sheddome_atlas.api_clients.gemini import GeminiClient
from sheddome_atlas.config.schema import AtlasConfig
from sheddome_atlas.errors import (
    CollaboratorError,
    NotFoundError,
    ParseError,
    ParseErrorKind,
)
from sheddome_atlas.ingest.parser import UploadFormat, parse_upload
from sheddome_atlas.records.models import ProteinRecord
from sheddome_atlas.records.resolver import LookupResolver
from sheddome_atlas.records.store import InMemoryRecordStore, load_curated_store

logger = structlog.get_logger()

UNVERIFIED_NOTICE = "AI-generated record, not verified against curated data."
USER_UPLOAD_INTERPRETATION = (
    "Data uploaded by user. Interpretation requires external analysis."
)


@dataclass
class ExplorerResult:
    """Record ready for display.

    Attributes:
        record: Fully populated record
        interpretation: Provenance / interpretation text
        generated: True when the record came from the generation service
        source: "curated", "upload", "ai_service" or "generated"
    """
    record: ProteinRecord
    interpretation: str
    generated: bool = False
    source: str = "curated"


class Explorer:
    """Ties the curated store, parser, merger and optional services together."""

    def __init__(
        self,
        store: InMemoryRecordStore,
        merger: AnnotationMerger | None = None,
        generator: GenerationCollaborator | None = None,
    ):
        self.store = store
        self.resolver = LookupResolver(store)
        self.merger = merger if merger is not None else AnnotationMerger(self.resolver)
        self.generator = generator

    @classmethod
    def from_config(cls, config: AtlasConfig) -> "Explorer":
        """
        Build an Explorer from configuration.

        Raises:
            CollaboratorError: If an AI feature is enabled without an API key
        """
        store = load_curated_store(config.store.curated_path)
        resolver = LookupResolver(store)

        client = None
        if config.ai_service.enabled:
            client = GeminiClient.from_config(config.ai_service)

        merger = AnnotationMerger(
            resolver,
            collaborator=client if config.ai_service.annotate_uploads else None,
        )
        generator = client if config.ai_service.generate_on_miss else None
        return cls(store, merger=merger, generator=generator)

    def search(self, query: str) -> ExplorerResult:
        """Look up query in the curated store, generating on a miss if enabled.

        Raises:
            NotFoundError: If nothing matched and generation is off or failed
        """
        try:
            record = self.resolver.resolve(query)
        except NotFoundError:
            if self.generator is None:
                raise
            return self._generate(query)

        return ExplorerResult(
            record=record,
            interpretation=f"Curated record for {record.gene_symbol}: {record.description}",
            source="curated",
        )

    def _generate(self, query: str) -> ExplorerResult:
        logger.info("generation_fallback", query=query)
        try:
            generated = self.generator.generate(query.strip())
        except CollaboratorError as e:
            logger.warning("generation_failed", query=query, error=str(e))
            raise NotFoundError(query) from e

        interpretation = UNVERIFIED_NOTICE
        if generated.interpretation:
            interpretation = f"{UNVERIFIED_NOTICE} {generated.interpretation}"

        return ExplorerResult(
            record=generated.record,
            interpretation=interpretation,
            generated=True,
            source="generated",
        )

    def upload(self, raw_text: str, declared_format: UploadFormat) -> ExplorerResult:
        """Parse an upload and complete it.

        Raises:
            ParseError: If the upload is malformed, or InvalidSchema if the
                uploaded fields cannot form a complete record
            AnnotationError: If annotation is needed but impossible
        """
        result = parse_upload(raw_text, declared_format)

        if not result.needs_annotation:
            try:
                record = result.partial.to_record()
            except ValidationError as e:
                raise _invalid_schema(e) from e
            return ExplorerResult(
                record=record,
                interpretation=USER_UPLOAD_INTERPRETATION,
                source="upload",
            )

        try:
            merged = self.merger.merge(result.partial)
        except ValidationError as e:
            logger.warning("upload_merge_invalid", identifier=result.partial.identifier())
            raise _invalid_schema(e) from e

        return ExplorerResult(
            record=merged.record,
            interpretation=merged.interpretation,
            generated=merged.source == "ai_service",
            source=merged.source,
        )


def _invalid_schema(error: ValidationError) -> ParseError:
    return ParseError(
        ParseErrorKind.INVALID_SCHEMA,
        detail=f"{error.error_count()} invalid field(s)",
    )
