"""Curated shedding records: data models, read-only store and lookup."""

from sheddome_atlas.records.models import (
    CleavageSite,
    DataSources,
    DEFAULT_LOCATION,
    Domain,
    Location,
    PartialProteinRecord,
    Peptide,
    ProteinRecord,
    Role,
)
from sheddome_atlas.records.store import (
    InMemoryRecordStore,
    RecordRepository,
    load_curated_store,
    parse_records,
)
from sheddome_atlas.records.resolver import LookupResolver, normalize_query

__all__ = [
    "CleavageSite",
    "DataSources",
    "DEFAULT_LOCATION",
    "Domain",
    "Location",
    "PartialProteinRecord",
    "Peptide",
    "ProteinRecord",
    "Role",
    "InMemoryRecordStore",
    "RecordRepository",
    "load_curated_store",
    "parse_records",
    "LookupResolver",
    "normalize_query",
]
