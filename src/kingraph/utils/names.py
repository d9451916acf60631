"""Personal name parsing.

Splits a full-name phrase into given names, surname, maiden name and
aliases. Quoted nicknames and parenthesized alternates become aliases,
"née X" becomes the maiden name, and generational suffixes are dropped.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

QUOTED_NICKNAME = re.compile(r"[\"“”]([^\"“”\n]+)[\"“”]")
PARENTHETICAL = re.compile(r"\(([^)]*)\)")
MAIDEN_PREFIX = re.compile(r"^(?:née|nee)\b", re.IGNORECASE)
MAIDEN = re.compile(
    r"\b(?:née|nee)\s+([A-Za-zÀ-ÖØ-öø-ÿ][A-Za-zÀ-ÖØ-öø-ÿ'’\-]*"
    r"(?:\s+[A-Za-zÀ-ÖØ-öø-ÿ][A-Za-zÀ-ÖØ-öø-ÿ'’\-]*)*)",
    re.IGNORECASE,
)
SUFFIX = re.compile(r"(,\s*)?\b(Jr|Sr|II|III|IV)\.?$", re.IGNORECASE)


@dataclass
class ParsedName:
    """Structured components of a personal name."""

    given_names: list[str] = field(default_factory=list)
    surname: str | None = None
    maiden_name: str | None = None
    aliases: list[str] = field(default_factory=list)

    @property
    def full_name(self) -> str:
        parts = [*self.given_names]
        if self.surname:
            parts.append(self.surname)
        return " ".join(parts)


def _push_unique(target: list[str], value: str) -> None:
    if value and value not in target:
        target.append(value)


def parse_name(full: str) -> ParsedName:
    """Parse a full-name phrase.

    Steps, each consuming text from a working copy:
    1. Quoted nicknames ("Jack") become aliases
    2. Parentheticals: (née Brown) is the maiden name, others are aliases
    3. An unparenthesized "née Brown" is the maiden name
    4. Generational suffixes (Jr., Sr., II, III, IV) are stripped
    5. Last remaining token is the surname, the rest are given names

    Args:
        full: Name as written in the source

    Returns:
        ParsedName; a single token yields one given name and no surname
    """
    result = ParsedName()
    if not full or not full.strip():
        return result

    working = full.strip()

    def _alias(match: re.Match[str]) -> str:
        _push_unique(result.aliases, match.group(1).strip())
        return " "

    working = QUOTED_NICKNAME.sub(_alias, working)

    def _parenthetical(match: re.Match[str]) -> str:
        content = match.group(1).strip()
        if not content:
            return " "
        if MAIDEN_PREFIX.match(content):
            extracted = MAIDEN_PREFIX.sub("", content).strip()
            if extracted:
                result.maiden_name = extracted
        else:
            _push_unique(result.aliases, content)
        return " "

    working = PARENTHETICAL.sub(_parenthetical, working)

    maiden = MAIDEN.search(working)
    if maiden:
        result.maiden_name = maiden.group(1).strip()
        working = MAIDEN.sub("", working, count=1)

    working = " ".join(working.split())
    while SUFFIX.search(working):
        working = SUFFIX.sub("", working).strip()

    parts = working.split()
    if len(parts) > 1:
        result.surname = parts[-1]
        result.given_names = parts[:-1]
    elif parts:
        result.given_names = parts

    return result
