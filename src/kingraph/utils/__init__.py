"""KinGraph utilities: text normalization, date and name parsing."""

from .dates import (
    ParsedDateFragment,
    normalize_year,
    parse_approx,
    parse_date_fragment,
    parse_range,
)
from .names import ParsedName, parse_name
from .normalize import (
    collapse_whitespace,
    jaccard,
    name_tokens,
    normalize_for_comparison,
    strip_diacritics,
)

__all__ = [
    # Normalize utilities
    "collapse_whitespace",
    "jaccard",
    "name_tokens",
    "normalize_for_comparison",
    "strip_diacritics",
    # Dates
    "ParsedDateFragment",
    "normalize_year",
    "parse_approx",
    "parse_date_fragment",
    "parse_range",
    # Names
    "ParsedName",
    "parse_name",
]
