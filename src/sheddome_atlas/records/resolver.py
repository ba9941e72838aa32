"""Case-insensitive lookup of curated records by name, gene symbol or UniProt ID."""

import structlog

from sheddome_atlas.errors import NotFoundError
from sheddome_atlas.records.models import ProteinRecord
from sheddome_atlas.records.store import RecordRepository

logger = structlog.get_logger()


def normalize_query(query: str) -> str:
    return query.strip().lower()


class LookupResolver:
    """Resolve free-text queries against a record repository.

    Exact matching only: no fuzzy or partial matches.
    """

    def __init__(self, repository: RecordRepository):
        self.repository = repository

    def resolve(self, query: str) -> ProteinRecord:
        """Return the curated record matching query.

        Args:
            query: User query; surrounding whitespace and case are ignored

        Returns:
            Matching ProteinRecord

        Raises:
            NotFoundError: If no record matches (carries the original query)
        """
        record = self.repository.find(normalize_query(query))
        if record is None:
            logger.info("lookup_miss", query=query)
            raise NotFoundError(query)

        logger.debug("lookup_hit", query=query, gene_symbol=record.gene_symbol)
        return record
