"""Header sniffing for peptide CSV uploads.

Headers are matched by case-insensitive substring, independently per role;
the first header that matches a role wins.
"""

from dataclasses import dataclass, fields
from typing import Sequence

# Substrings identifying each semantic column role
COLUMN_KEYWORDS: dict[str, tuple[str, ...]] = {
    "name": ("protein", "gene"),
    "sequence": ("sequence", "peptide"),
    "start": ("start",),
    "end": ("end",),
    "fluid": ("fluid", "cond"),
    "tissue": ("tissue", "control"),
}

REQUIRED_ROLES = ("sequence", "fluid")


@dataclass(frozen=True)
class ColumnMap:
    """Column index per semantic role (None when no header matched)."""
    name: int | None = None
    sequence: int | None = None
    start: int | None = None
    end: int | None = None
    fluid: int | None = None
    tissue: int | None = None

    def missing_required(self) -> list[str]:
        """Names of required roles without a matching column."""
        return [role for role in REQUIRED_ROLES if getattr(self, role) is None]

    def as_dict(self) -> dict[str, int | None]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def find_column(headers: Sequence[str], keywords: Sequence[str]) -> int | None:
    """Index of the first header containing any keyword, or None."""
    for index, header in enumerate(headers):
        normalized = header.strip().lower()
        if any(keyword in normalized for keyword in keywords):
            return index
    return None


def classify_columns(headers: Sequence[str]) -> ColumnMap:
    """Assign a column index to every role in COLUMN_KEYWORDS.

    Args:
        headers: Raw header cells (trimmed and lower-cased here)

    Returns:
        ColumnMap; check missing_required() before using it
    """
    return ColumnMap(
        **{role: find_column(headers, keywords) for role, keywords in COLUMN_KEYWORDS.items()}
    )
