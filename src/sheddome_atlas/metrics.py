"""Derived shedding metrics.

Pure helpers with IEEE float semantics: division by zero and log of
non-positive values yield inf/NaN instead of raising. Non-finite results are
valid values and are never clamped.
"""

import math
from dataclasses import dataclass, field
from typing import Iterable

from sheddome_atlas.records.models import Location, Peptide, ProteinRecord

# Peptide significance cutoff used for summary counts
SIGNIFICANCE_THRESHOLD = 0.05


def ratio(a: float, b: float) -> float:
    """a / b, returning +/-inf for x/0 and NaN for 0/0."""
    if b == 0:
        if a == 0 or math.isnan(a):
            return math.nan
        # Sign of the zero divisor matters, as in IEEE division
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b


def log2(x: float) -> float:
    """Base-2 logarithm: -inf for 0, NaN for negative or NaN input."""
    if math.isnan(x) or x < 0:
        return math.nan
    if x == 0:
        return -math.inf
    if math.isinf(x):
        return math.inf
    return math.log2(x)


def log2_fold_change(fluid: float, tissue: float) -> float:
    """log2(fluid / tissue)."""
    return log2(ratio(fluid, tissue))


def location_intensities(peptides: Iterable[Peptide]) -> dict[Location, float]:
    """Summed peptide intensity per location (every location present)."""
    totals = {location: 0.0 for location in Location}
    for peptide in peptides:
        totals[peptide.location] += peptide.intensity
    return totals


def ecto_cyto_ratio(peptides: Iterable[Peptide]) -> float:
    """Extracellular over intracellular summed peptide intensity.

    High values (>5) indicate specific shedding, values near 1 suggest
    cell lysis.
    """
    totals = location_intensities(peptides)
    return ratio(totals[Location.EXTRACELLULAR], totals[Location.INTRACELLULAR])


@dataclass
class RecordMetrics:
    """Summary metrics for a single record.

    Attributes:
        fluid_tissue_ratio: fluid_ecto_abundance / tissue_abundance
        fluid_tissue_log2: log2 of the above
        peptide_ecto_cyto_ratio: ecto/cyto ratio recomputed from peptides
        peptide_counts: Number of peptides per location value
        significant_peptides: Peptides with pvalue < SIGNIFICANCE_THRESHOLD
    """
    fluid_tissue_ratio: float
    fluid_tissue_log2: float
    peptide_ecto_cyto_ratio: float
    peptide_counts: dict[str, int] = field(default_factory=dict)
    significant_peptides: int = 0


def summarize(record: ProteinRecord) -> RecordMetrics:
    """Compute RecordMetrics for a record."""
    counts = {location.value: 0 for location in Location}
    for peptide in record.peptides:
        counts[peptide.location.value] += 1

    return RecordMetrics(
        fluid_tissue_ratio=ratio(record.fluid_ecto_abundance, record.tissue_abundance),
        fluid_tissue_log2=log2_fold_change(
            record.fluid_ecto_abundance, record.tissue_abundance
        ),
        peptide_ecto_cyto_ratio=ecto_cyto_ratio(record.peptides),
        peptide_counts=counts,
        significant_peptides=sum(
            1 for p in record.peptides if p.pvalue < SIGNIFICANCE_THRESHOLD
        ),
    )
