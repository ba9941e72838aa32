"""Read-only curated record store.

The store is loaded once from an ordered YAML list of ProteinRecord literals
(bundled as curated_proteins.yaml, or a file named in config) and never
mutated afterwards. Callers depend on the RecordRepository protocol so a
real datastore can replace it later.
"""

from importlib import resources
from pathlib import Path
from typing import Iterator, Protocol, Sequence

import pydantic_yaml
import structlog
from pydantic import RootModel

from sheddome_atlas.records.models import ProteinRecord

logger = structlog.get_logger()

CURATED_RESOURCE = "curated_proteins.yaml"


class CuratedRecordList(RootModel[list[ProteinRecord]]):
    """YAML document shape: an ordered list of records."""


class RecordRepository(Protocol):
    """Single find-by-key capability used by the lookup resolver."""

    def find(self, key: str) -> ProteinRecord | None:
        """Return the record whose name, gene symbol or UniProt ID equals key.

        Args:
            key: Trimmed, lower-cased lookup key
        """
        ...


class InMemoryRecordStore:
    """Ordered, immutable in-memory store of curated records."""

    def __init__(self, records: Sequence[ProteinRecord]):
        self._records = tuple(records)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[ProteinRecord]:
        for record in self._records:
            yield record.model_copy(deep=True)

    def find(self, key: str) -> ProteinRecord | None:
        """Exact, case-insensitive match against name, gene symbol, UniProt ID.

        Records are scanned in store order; within a record the keys are
        checked in that precedence. Returns a deep copy so callers own it.
        """
        for record in self._records:
            for candidate in (record.name, record.gene_symbol, record.uniprot_id):
                if candidate is not None and candidate.lower() == key:
                    return record.model_copy(deep=True)
        return None


def parse_records(yaml_text: str) -> list[ProteinRecord]:
    """Validate a YAML list of records.

    Raises:
        pydantic.ValidationError: If any record is malformed
    """
    return pydantic_yaml.parse_yaml_raw_as(CuratedRecordList, yaml_text).root


def load_curated_store(path: Path | str | None = None) -> InMemoryRecordStore:
    """Load the curated store from path, or the bundled YAML when path is None.

    Raises:
        FileNotFoundError: If an explicit path doesn't exist
        pydantic.ValidationError: If the file content is invalid
    """
    if path is None:
        yaml_text = (
            resources.files("sheddome_atlas.records")
            .joinpath(CURATED_RESOURCE)
            .read_text(encoding="utf-8")
        )
        source = CURATED_RESOURCE
    else:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Curated store not found: {path}")
        yaml_text = path.read_text(encoding="utf-8")
        source = str(path)

    records = parse_records(yaml_text)
    logger.info("curated_store_loaded", source=source, record_count=len(records))
    return InMemoryRecordStore(records)
