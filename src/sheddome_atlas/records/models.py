"""Data models for curated and uploaded shedding records."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Location(str, Enum):
    """Topological location of a domain, or of a peptide mapped onto one."""

    EXTRACELLULAR = "Extracellular"
    TRANSMEMBRANE = "Transmembrane"
    INTRACELLULAR = "Intracellular"


class Role(str, Enum):
    """Role of a protein in shedding."""

    SHEDDASE = "Sheddase"
    SUBSTRATE = "Substrate"
    BOTH = "Both"
    UNKNOWN = "Unknown"


# Location given to peptides whose start falls outside every domain
DEFAULT_LOCATION = Location.EXTRACELLULAR


class AtlasModel(BaseModel):
    """Shared config: snake_case attributes, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        ser_json_inf_nan="constants",
    )


class Domain(AtlasModel):
    """Structural region, 1-based inclusive residue range.

    Ordering and non-overlap within a record are expected but not enforced.
    """

    name: str
    start: int
    end: int
    type: Location

    def contains(self, position: int) -> bool:
        return self.start <= position <= self.end


class Peptide(AtlasModel):
    """Detected peptide with its quantification.

    Attributes:
        log2_fold_change: Fluid vs tissue (may be None, NaN or +/-inf)
        pvalue: Defaults to 0.05 when absent
        location: Assigned by the annotation merger
    """

    sequence: str
    start: int
    end: int
    log2_fold_change: float | None = Field(default=None, alias="log2FoldChange")
    pvalue: float = 0.05
    intensity: float = 0.0
    location: Location = DEFAULT_LOCATION


class CleavageSite(AtlasModel):
    position: int
    protease: str
    evidence: str
    sequence_context: str | None = None


class DataSources(AtlasModel):
    """Provenance triple for a record."""

    fluid: str
    tissue: str
    method: str


class ProteinRecord(AtlasModel):
    """Fully populated shedding record, ready for presentation.

    domains, peptides and cleavage_sites are always lists (possibly empty).
    shedding_score is conventionally 0-10 but not clamped.
    """

    name: str
    gene_symbol: str
    uniprot_id: str | None = None
    role: Role = Role.UNKNOWN
    known_substrates: list[str] | None = None
    length: int = Field(..., gt=0)
    description: str = ""
    shedding_score: float = 5.0
    fluid_ecto_abundance: float = 0.0
    tissue_abundance: float = 0.0
    ecto_cto_ratio: float = 1.0
    domains: list[Domain] = Field(default_factory=list)
    peptides: list[Peptide] = Field(default_factory=list)
    cleavage_sites: list[CleavageSite] = Field(default_factory=list)
    data_sources: DataSources


class PartialProteinRecord(AtlasModel):
    """Any subset of ProteinRecord fields.

    Produced by the ingestion parser and consumed by the annotation merger;
    never persisted. None means "not supplied".
    """

    name: str | None = None
    gene_symbol: str | None = None
    uniprot_id: str | None = None
    role: Role | None = None
    known_substrates: list[str] | None = None
    length: int | None = Field(default=None, gt=0)
    description: str | None = None
    shedding_score: float | None = None
    fluid_ecto_abundance: float | None = None
    tissue_abundance: float | None = None
    ecto_cto_ratio: float | None = None
    domains: list[Domain] | None = None
    peptides: list[Peptide] | None = None
    cleavage_sites: list[CleavageSite] | None = None
    data_sources: DataSources | None = None

    def supplied_fields(self) -> dict:
        """Return {field_name: value} for every field that is not None."""
        return {
            name: getattr(self, name)
            for name in type(self).model_fields
            if getattr(self, name) is not None
        }

    def identifier(self) -> str:
        """Identifier used for curated lookup: gene symbol, then name."""
        return self.gene_symbol or self.name or ""

    def inferred_length(self) -> int:
        """Furthest residue covered by a domain or peptide (at least 1)."""
        ends = [d.end for d in self.domains or []]
        ends += [p.end for p in self.peptides or []]
        return max(ends + [1])

    def to_record(self) -> ProteinRecord:
        """Complete a partial record that already carries structural data.

        Unsupplied fields take ProteinRecord defaults; gene_symbol falls back
        to name and length to inferred_length().
        """
        data = self.supplied_fields()
        data.setdefault("gene_symbol", self.name or "")
        data.setdefault("length", self.inferred_length())
        data.setdefault(
            "data_sources",
            DataSources(fluid="Unknown", tissue="Unknown", method="Unknown"),
        )
        return ProteinRecord(**data)
