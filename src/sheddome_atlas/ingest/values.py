"""Best-effort numeric coercion for uploaded cells.

Every parser returns a ParsedValue so callers (and tests) can tell a parsed
value apart from an applied default, e.g. a literal "0" from a blank cell.
"""

import math
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class ParsedValue(Generic[T]):
    """Coerced cell value.

    Attributes:
        value: Parsed value, or the default when parsing failed
        defaulted: True if the default was applied
    """
    value: T
    defaulted: bool = False


def parse_int(raw: str | None, default: int = 0) -> ParsedValue[int]:
    """Parse an integer cell; decimals are truncated ("20.7" -> 20)."""
    if raw is None or not raw.strip():
        return ParsedValue(default, defaulted=True)

    text = raw.strip()
    try:
        return ParsedValue(int(text))
    except ValueError:
        pass

    try:
        number = float(text)
    except ValueError:
        return ParsedValue(default, defaulted=True)

    if not math.isfinite(number):
        return ParsedValue(default, defaulted=True)
    return ParsedValue(int(number))


def parse_float(raw: str | None, default: float = 1.0) -> ParsedValue[float]:
    """Parse a float cell. Blank, unparseable and NaN cells take the default."""
    if raw is None or not raw.strip():
        return ParsedValue(default, defaulted=True)

    try:
        number = float(raw.strip())
    except ValueError:
        return ParsedValue(default, defaulted=True)

    if math.isnan(number):
        return ParsedValue(default, defaulted=True)
    return ParsedValue(number)
