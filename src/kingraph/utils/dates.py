"""Date fragment parsing with approximation semantics.

Turns free-text date phrases found on genealogy pages ("17 Mar 1901",
"abt 1902", "Q1 1887", "before 1899") into partially-known dates. General
phrases are resolved with dateparser; only components the resolver reports
as stated are kept.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

from dateparser.date import DateData, DateDataParser
from dateparser.search import search_dates

from kingraph.logging import get_logger

log = get_logger(__name__)

APPROX_KEYWORDS = re.compile(
    r"\b(?:abt|about|approx(?:\.|imately)?|around|circa|ca\.?)(?!\w)|~",
    re.IGNORECASE,
)
C_PREFIX = re.compile(r"\bc[.\s]*(?=\d)", re.IGNORECASE)
BOUND_WORDS = re.compile(r"\b(?:before|after)\b", re.IGNORECASE)
QUARTER = re.compile(r"\bQ([1-4])\s+(\d{4})\b", re.IGNORECASE)
BOUND_YEAR = re.compile(r"\b(before|after)\s+(\d{4})\b", re.IGNORECASE)
YEAR_RUN = re.compile(r"(\d{4})")
DIGIT_RUN = re.compile(r"\d+")
RANGE = re.compile(r"(\d{3,4})\s*[–\-]\s*(\d{3,4})")
SHORT_YEAR = re.compile(r"\b(\d{3,4})\b")
BARE_YEAR = re.compile(r"^\d{3,4}$")

DATE_LANGUAGES: tuple[str, ...] = ("en", "fr", "de")
DATE_SETTINGS: dict[str, Any] = {
    "PREFER_DATES_FROM": "past",
    "PREFER_DAY_OF_MONTH": "first",
    "RETURN_TIME_AS_PERIOD": False,
}
# Tried in order; dateparser rejects a phrase missing a required part
REQUIRED_PARTS: tuple[tuple[str, ...], ...] = (
    ("day", "month", "year"),
    ("month", "year"),
    ("year",),
)


@dataclass
class ParsedDateFragment:
    """Partially-known date with approximation tracking."""

    raw: str = ""
    year: int | None = None
    month: int | None = None
    day: int | None = None
    approx: bool = False

    @property
    def has_components(self) -> bool:
        return self.year is not None or self.month is not None or self.day is not None

    @property
    def precision(self) -> str:
        """Return date precision level."""
        if self.day is not None:
            return "day"
        if self.month is not None:
            return "month"
        if self.year is not None:
            return "year"
        return "unknown"


def parse_approx(text: str) -> bool:
    """Whether a phrase carries an approximation or bound qualifier."""
    if not text or not text.strip():
        return False
    return bool(
        APPROX_KEYWORDS.search(text) or C_PREFIX.search(text) or BOUND_WORDS.search(text)
    )


def normalize_year(text: str) -> int | None:
    """First three- or four-digit run as a year."""
    if not text:
        return None
    match = SHORT_YEAR.search(text)
    if not match:
        return None
    return int(match.group(1))


def parse_range(text: str) -> dict[str, int] | None:
    """Parse a lifespan or bound ("1901–1975", "before 1899", "after 1850").

    Returns:
        ``{"start": ..., "end": ...}`` with the known bounds, or None
    """
    if not text or not text.strip():
        return None

    match = RANGE.search(text)
    if match:
        return {"start": int(match.group(1)), "end": int(match.group(2))}

    match = re.search(r"\bbefore\s+(\d{3,4})\b", text, re.IGNORECASE)
    if match:
        return {"end": int(match.group(1))}

    match = re.search(r"\bafter\s+(\d{3,4})\b", text, re.IGNORECASE)
    if match:
        return {"start": int(match.group(1))}

    return None


def _strip_qualifiers(text: str) -> str:
    cleaned = APPROX_KEYWORDS.sub("", text)
    cleaned = C_PREFIX.sub("", cleaned)
    return " ".join(cleaned.replace("~", "").split())


def _settings(required: tuple[str, ...]) -> dict[str, Any]:
    return {**DATE_SETTINGS, "REQUIRE_PARTS": list(required)}


def _date_parser(required: tuple[str, ...]) -> DateDataParser:
    return DateDataParser(languages=list(DATE_LANGUAGES), settings=_settings(required))


def _lookup(cleaned: str, required: tuple[str, ...]) -> tuple[str, DateData] | None:
    """Date data for the phrase, or the first date found inside it."""
    parser = _date_parser(required)
    data = parser.get_date_data(cleaned)
    if data.date_obj is not None:
        return cleaned, data
    found = search_dates(cleaned, languages=list(DATE_LANGUAGES), settings=_settings(required))
    if not found:
        return None
    candidate = found[0][0]
    data = parser.get_date_data(candidate)
    if data.date_obj is None:
        return None
    return candidate, data


def _resolve(cleaned: str) -> tuple[int | None, int | None, int | None]:
    """Resolve a cleaned phrase into stated (year, month, day) components.

    dateparser fills missing parts from today's date, so each level of
    ``REQUIRED_PARTS`` is tried in turn and only the parts that level
    requires are kept.
    """
    for required in REQUIRED_PARTS:
        found = _lookup(cleaned, required)
        if found is None:
            continue
        candidate, data = found
        numbers = {int(run) for run in DIGIT_RUN.findall(candidate)}
        date_obj = data.date_obj
        # A year that is not written out was inferred from "today"
        if date_obj.year not in numbers:
            continue
        month = date_obj.month if "month" in required else None
        day = date_obj.day if "day" in required and date_obj.day in numbers else None
        return date_obj.year, month, day
    return None, None, None


def parse_date_fragment(text: str) -> ParsedDateFragment:
    """Parse a free-text date phrase into a ParsedDateFragment.

    Handles, in priority order:
    - Quarter notation: Q1 1887 (month is the quarter's first month)
    - Bounds: before 1899, after 1850 (year only)
    - Bare years: 1902, abt 1902
    - General phrases: 17 Mar 1901, March 1901, 1901-03-17, abt May 1902
    - Fallback: the first four-digit run

    Qualifiers (abt, about, approx, around, circa, ca., c1900, ~, before,
    after) mark the result as approximate. A bare year is not approximate.

    Args:
        text: Date phrase, possibly with surrounding words

    Returns:
        ParsedDateFragment; never raises
    """
    raw = (text or "").strip()
    if not raw:
        return ParsedDateFragment(raw="", approx=False)

    approx = parse_approx(raw)

    quarter = QUARTER.search(raw)
    if quarter:
        return ParsedDateFragment(
            raw=raw,
            year=int(quarter.group(2)),
            month=(int(quarter.group(1)) - 1) * 3 + 1,
            approx=True,
        )

    bound = BOUND_YEAR.search(raw)
    if bound:
        return ParsedDateFragment(raw=raw, year=int(bound.group(2)), approx=True)

    cleaned = _strip_qualifiers(raw)
    if BARE_YEAR.match(cleaned):
        return ParsedDateFragment(raw=raw, year=int(cleaned), approx=approx)

    if cleaned:
        try:
            year, month, day = _resolve(cleaned)
        except Exception as e:  # dateparser raises on some malformed input
            log.debug("date_resolver_failed", text=cleaned, error=str(e))
            year = month = day = None
        if year is not None:
            return ParsedDateFragment(raw=raw, year=year, month=month, day=day, approx=approx)

    year_match = YEAR_RUN.search(raw)
    if year_match:
        return ParsedDateFragment(raw=raw, year=int(year_match.group(1)), approx=parse_approx(raw))

    return ParsedDateFragment(raw=raw, approx=False)
