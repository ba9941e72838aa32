"""Output generation: atlas/peptide tables and file writers."""

from sheddome_atlas.output.atlas import (
    ATLAS_SCHEMA,
    PEPTIDE_SCHEMA,
    peptides_to_frame,
    records_to_frame,
)
from sheddome_atlas.output.writers import (
    safe_filename_base,
    write_atlas_output,
    write_record_output,
)

__all__ = [
    "ATLAS_SCHEMA",
    "PEPTIDE_SCHEMA",
    "peptides_to_frame",
    "records_to_frame",
    "safe_filename_base",
    "write_atlas_output",
    "write_record_output",
]
