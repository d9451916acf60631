"""Field extractors for genealogical HTML.

Three strategies run in a fixed order against a shared ``ExtractionContext``:

- ProfileTemplateExtractor: the person-page template of large family-tree
  sites (title block, life-events list, parents, spouses and children)
- HeadingExtractor: "Name (YYYY–YYYY)" in headings or the first paragraph
- LabelValueExtractor: "Label: value" text, inline bold labels, table rows
  and definition lists

Scalar fields are written once (first writer wins); list fields accumulate
without exact duplicates. Every written value is cited back to the source.
"""
from __future__ import annotations

import re
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any

from bs4 import Tag

from kingraph.config import ExtractionConfig
from kingraph.logging import get_logger
from kingraph.models.provenance import ProvenanceEntry
from kingraph.models.record import IndividualRecord, Residence
from kingraph.utils.dates import YEAR_RUN, parse_date_fragment
from kingraph.utils.names import parse_name
from kingraph.utils.normalize import normalize_for_comparison

from .document import SourceDocument, Span, TextRun, is_text
from .labels import LabelTable
from .provenance import ProvenanceResolver
from .vocabulary import TEMPLATE_PLACES, TEMPLATE_PROFESSIONS, Vocabulary

log = get_logger(__name__)

# Birth/death values: "3 Mar 1902 in Boston", "July 24, 1813 - Saint-Longis"
DATE_PLACE_SEPARATOR = re.compile(r"\s+(?:in|at|à)\s+|\s+[-–]\s+|,\s+(?=\D)", re.IGNORECASE)
ENTRY_SEPARATORS = re.compile(r"[,;\n]+")
SOURCE_SEPARATORS = re.compile(r"[;\n]+")
LINE_BREAK = re.compile(r"\r?\n")
GIVEN_SEPARATORS = re.compile(r"[,;]+|\s+")
HEADING_NAME = re.compile(r"([A-Z][^()\n]+?)\s*\((\d{4})\s*[–\-]\s*(\d{4})\)")
HEADING_MAIDEN = re.compile(r"\bn[eé]e\s+([A-Za-z'’\-]+)", re.IGNORECASE)
LIFE_EVENT = re.compile(
    r"^(born|baptized|baptised|christened|deceased|died)\b[\s:,]*(?:on\s+)?", re.IGNORECASE
)
NAME_BEFORE_DATES = re.compile(r"^[^\d,]+")
RESIDENCE_FILLER = re.compile(r"^[\s,;:()\-–]*(?:in|at|from|since)?\s+|[\s,;:()\-–]+$", re.IGNORECASE)

INLINE_LABEL_TAGS = ("b", "strong", "em", "i", "span", "label")

FEMALE = re.compile(r"female|\bf\b|woman")
MALE = re.compile(r"male|\bm\b|man")
UNKNOWN_SEX = re.compile(r"unknown|undetermined|not\s+stated")
TEMPLATE_SEX = {"h": "M", "m": "M", "male": "M", "homme": "M", "f": "F", "female": "F", "femme": "F"}


class ExtractorType(str, Enum):
    """Extraction strategy."""

    TEMPLATE = "template"
    HEADING = "heading"
    LABEL_VALUE = "label_value"


def map_sex(value: str) -> str | None:
    """Map a free-text sex value to M, F or U."""
    normalized = value.strip().lower()
    if not normalized:
        return None
    if FEMALE.search(normalized):
        return "F"
    if MALE.search(normalized):
        return "M"
    if UNKNOWN_SEX.search(normalized):
        return "U"
    return None


# =============================================================================
# Extraction Context
# =============================================================================


class ExtractionContext:
    """Record-so-far plus the write operations extractors are allowed.

    Extractors read ``record`` freely but mutate it only through
    ``set_field``/``add_unique`` and cite values with ``cite``.
    """

    def __init__(
        self,
        document: SourceDocument,
        record: IndividualRecord,
        config: ExtractionConfig | None = None,
    ) -> None:
        config = config or ExtractionConfig()
        self.document = document
        self.record = record
        self.provenance = ProvenanceResolver(document.html, record.provenance)
        self.labels = LabelTable(config.label_synonyms)
        self.professions = Vocabulary.with_overrides(TEMPLATE_PROFESSIONS, config.professions)
        self.places = Vocabulary.with_overrides(TEMPLATE_PLACES, config.places)

    def _resolve(self, path: str) -> tuple[Any, str]:
        *parents, attr = path.split(".")
        target: Any = self.record
        for part in parents:
            target = getattr(target, part)
        return target, attr

    def set_field(self, path: str, value: Any) -> bool:
        """Write ``value`` at a dotted attribute path if the field is unset.

        Returns:
            True when written; False when the field already holds a value or
            ``value`` is empty
        """
        if value is None or value == "" or value == []:
            return False
        target, attr = self._resolve(path)
        current = getattr(target, attr)
        if current is not None and current != []:
            return False
        setattr(target, attr, value)
        return True

    def add_unique(self, path: str, value: Any) -> bool:
        """Append to a list field unless an equal value is already present."""
        if value is None or value == "":
            return False
        target, attr = self._resolve(path)
        items = getattr(target, attr)
        if value in items:
            return False
        items.append(value)
        return True

    def cite(
        self,
        field: str,
        run: TextRun,
        fragment: str | None = None,
        context: Span | None = None,
    ) -> ProvenanceEntry | None:
        """Record provenance for ``fragment`` within ``run`` (whole run by default)."""
        if fragment is not None:
            index = run.text.find(fragment)
            if index == -1:
                return self.provenance.add_text(field, fragment, context)
            run = run[index : index + len(fragment)]
        return self.provenance.add_run(field, run, context)

    def apply_life_event(
        self,
        event: str,
        value: TextRun,
        cite_as: TextRun | None = None,
        context: Span | None = None,
    ) -> None:
        """Fill ``birth``/``death`` from a value such as "3 Mar 1902 in Boston"."""
        raw = value.collapse_whitespace().strip()
        if not raw:
            return

        date_part, place_part = raw, None
        separator = DATE_PLACE_SEPARATOR.search(raw.text)
        if separator:
            date_part = raw[: separator.start()].strip()
            place_part = raw[separator.end() :].strip()

        parsed = parse_date_fragment(date_part.text)
        if not parsed.has_components and place_part is not None:
            parsed = parse_date_fragment(raw.text)
            place_part = None

        if self.set_field(f"{event}.raw", raw.text):
            self.cite(f"{event}.raw", cite_as or raw, context=context)
        if parsed.has_components:
            self.set_field(f"{event}.year", parsed.year)
            self.set_field(f"{event}.month", parsed.month)
            self.set_field(f"{event}.day", parsed.day)
            self.set_field(f"{event}.approx", parsed.approx)
        if place_part and self.set_field(f"{event}.place", place_part.text):
            self.cite(f"{event}.place", place_part, context=context)


# =============================================================================
# Base Extractor
# =============================================================================


class StructuredExtractor(ABC):
    """Abstract base for extraction strategies.

    Subclasses inspect ``context.document`` and write through the context.
    They may raise; the pipeline logs the failure and moves on.
    """

    extractor_type: ExtractorType

    @abstractmethod
    def extract(self, context: ExtractionContext) -> None:
        """Contribute fields to ``context.record``."""
        ...


# =============================================================================
# Profile Template Extractor
# =============================================================================


class ProfileTemplateExtractor(StructuredExtractor):
    """Reads the person-page template used by large family-tree sites.

    Recognized blocks:
    - ``#person-title`` with the name heading and a sex icon (alt/title H/F)
    - life-events list items starting with Born/Baptized/Christened or
      Deceased/Died, e.g. "Born July 24, 1813 - Saint-Longis, Sarthe"
    - a "Parents" heading followed by a two-item list (father, mother)
    - a "Spouses and children" heading followed by a list of unions

    Pages without the title block are left untouched.
    """

    extractor_type = ExtractorType.TEMPLATE

    def extract(self, context: ExtractionContext) -> None:
        soup = context.document.soup
        title = soup.find(id="person-title")
        if not isinstance(title, Tag):
            return

        self._extract_title(context, title)
        self._extract_life_events(context, title)
        self._extract_parents(context)
        self._extract_unions(context)

    def _extract_title(self, context: ExtractionContext, title: Tag) -> None:
        doc = context.document
        heading = title.find(["h1", "h2"]) or title
        run = doc.text_run(heading).collapse_whitespace().strip()
        if run:
            parsed = parse_name(run.text)
            if context.set_field("given_names", parsed.given_names):
                context.cite("givenNames", run, " ".join(parsed.given_names))
            if context.set_field("surname", parsed.surname):
                context.cite("surname", run, parsed.surname)
            if parsed.maiden_name and context.set_field("maiden_name", parsed.maiden_name):
                context.cite("maidenName", run, parsed.maiden_name)
            for alias in parsed.aliases:
                if context.add_unique("aliases", alias):
                    context.cite("aliases", run, alias)

        for icon in title.find_all("img"):
            for attr in ("alt", "title"):
                sex = TEMPLATE_SEX.get(str(icon.get(attr) or "").strip().lower())
                if sex:
                    context.set_field("sex", sex)
                    return

    def _extract_life_events(self, context: ExtractionContext, title: Tag) -> None:
        doc = context.document
        events_list: Tag | None = None
        for item in doc.soup.find_all("li"):
            if title in item.parents:
                continue
            run = doc.text_run(item).collapse_whitespace().strip()
            prefix = LIFE_EVENT.match(run.text)
            if not prefix:
                continue
            keyword = prefix.group(1).lower()
            event = "death" if keyword in ("deceased", "died") else "birth"
            context.apply_life_event(event, run[prefix.end() :], context=doc.bounds(item))
            if events_list is None and isinstance(item.parent, Tag):
                events_list = item.parent

        if events_list is None:
            return

        # Bare items in the events list that name a known profession
        for item in events_list.find_all("li", recursive=False):
            run = doc.text_run(item).collapse_whitespace().strip()
            if not run or LIFE_EVENT.match(run.text):
                continue
            if context.professions.lookup(run.text) and context.set_field("occupation", run.text):
                context.cite("occupation", run)

    def _section_list(self, context: ExtractionContext, pattern: str) -> Tag | None:
        heading_pattern = re.compile(pattern)
        for heading in context.document.soup.find_all(["h2", "h3"]):
            if heading_pattern.fullmatch(normalize_for_comparison(heading.get_text())):
                found = heading.find_next(["ul", "ol"])
                return found if isinstance(found, Tag) else None
        return None

    def _person_name(self, context: ExtractionContext, item: Tag) -> TextRun:
        doc = context.document
        link = item.find("a")
        if isinstance(link, Tag):
            return doc.text_run(link).collapse_whitespace().strip()
        run = doc.text_run(item).collapse_whitespace().strip()
        match = NAME_BEFORE_DATES.match(run.text)
        return run[: match.end()].strip() if match else TextRun.empty()

    def _extract_parents(self, context: ExtractionContext) -> None:
        parents = self._section_list(context, r"parents")
        if parents is None:
            return
        items = parents.find_all("li", recursive=False)
        if len(items) != 2:
            log.debug("template_parents_skipped", items=len(items))
            return
        for role, item in zip(("father", "mother"), items):
            name = self._person_name(context, item)
            if context.set_field(f"parents.{role}", name.text):
                context.cite(f"parents.{role}", name, context=context.document.bounds(item))

    def _extract_unions(self, context: ExtractionContext) -> None:
        unions = self._section_list(context, r"spouses? and children")
        if unions is None:
            return
        doc = context.document
        for union in unions.find_all("li", recursive=False):
            nested = union.find(["ul", "ol"])
            for link in union.find_all("a"):
                if nested is not None and nested in link.parents:
                    continue
                spouse = doc.text_run(link).collapse_whitespace().strip()
                if context.add_unique("spouses", spouse.text):
                    context.cite("spouses", spouse)
                break
            if not isinstance(nested, Tag):
                continue
            for item in nested.find_all("li", recursive=False):
                child = self._person_name(context, item)
                if context.add_unique("children", child.text):
                    context.cite("children", child)


# =============================================================================
# Heading Extractor
# =============================================================================


class HeadingExtractor(StructuredExtractor):
    """Finds "Given Surname (1901–1975)" in h1–h3 or the first paragraph."""

    extractor_type = ExtractorType.HEADING

    def extract(self, context: ExtractionContext) -> None:
        doc = context.document
        seen_paragraph = False
        for element in doc.soup.find_all(["h1", "h2", "h3", "p"]):
            if element.name == "p":
                if seen_paragraph:
                    continue
                seen_paragraph = True
            run = doc.text_run(element)
            match = HEADING_NAME.search(run.text)
            if match:
                self._apply(context, run, match)
                return

    def _apply(self, context: ExtractionContext, run: TextRun, match: re.Match[str]) -> None:
        name = run[match.start(1) : match.end(1)].strip()

        maiden = HEADING_MAIDEN.search(name.text)
        if maiden:
            maiden_run = name[maiden.start(1) : maiden.end(1)]
            if context.set_field("maiden_name", maiden_run.text):
                context.cite("maidenName", maiden_run)

        # Tokens outside the "née X" sub-match, with their positions in the run
        tokens = [
            token
            for token in re.finditer(r"\S+", name.text)
            if not (maiden and maiden.start() <= token.start() < maiden.end())
        ]
        if tokens:
            last = tokens[-1]
            surname = name[last.start() : last.end()]
            if context.set_field("surname", surname.text):
                context.cite("surname", surname)
            given = tokens[:-1]
            if given and context.set_field("given_names", [token.group(0) for token in given]):
                context.cite("givenNames", name[given[0].start() : given[-1].end()])

        for group, event in ((2, "birth"), (3, "death")):
            year = run[match.start(group) : match.end(group)]
            if context.set_field(f"{event}.year", int(year.text)):
                context.cite(f"{event}.year", year)

        context.cite("name.heading", run[match.start() : match.end()])


# =============================================================================
# Label-Value Extractor
# =============================================================================


class LabelValueExtractor(StructuredExtractor):
    """Reads "Label: value" pairs from text, inline labels, tables and lists.

    Each distinct (label, value) pair is handled once, even when several
    scans see it.
    """

    extractor_type = ExtractorType.LABEL_VALUE

    def extract(self, context: ExtractionContext) -> None:
        processed: set[str] = set()

        def _process(label: TextRun, value: TextRun, cite_as: TextRun, element: Tag) -> None:
            label_text = label.text.strip().rstrip(":").strip()
            value_text = " ".join(value.text.split())
            if not label_text or not value_text:
                return
            key = f"{label_text.lower()}::{value_text}"
            if key in processed:
                return
            processed.add(key)
            self._handle(context, label_text, value.strip(), cite_as, element)

        doc = context.document
        for element in doc.soup.find_all(True):
            for label, value, segment in self._direct_pairs(doc, element):
                _process(label, value, segment, element)
        for element in doc.soup.find_all(INLINE_LABEL_TAGS):
            pair = self._inline_pair(doc, element)
            if pair:
                _process(pair[0], pair[1], TextRun.join(pair, " "), element)
        for row in doc.soup.find_all("tr"):
            cells = row.find_all(["th", "td"], recursive=False)
            if len(cells) < 2:
                continue
            label = doc.text_run(cells[0]).strip()
            values = [doc.text_run(cell).strip() for cell in cells[1:]]
            value = TextRun.join([run for run in values if run], " ")
            _process(label, value, value, row)
        for term in doc.soup.find_all("dt"):
            definition = term.find_next_sibling()
            if not isinstance(definition, Tag) or definition.name != "dd":
                continue
            value = doc.text_run(definition).strip()
            _process(doc.text_run(term).strip(), value, value, definition)

    @staticmethod
    def _direct_pairs(doc: SourceDocument, element: Tag):
        """Yield (label, value, segment) from the element's own text nodes.

        Text nodes are joined with spaces; a ``<br>`` between them starts a
        new line, and each line holds at most one pair.
        """
        runs: list[TextRun] = []
        for child in element.children:
            if isinstance(child, Tag) and child.name == "br":
                runs.append(TextRun.unlocated("\n"))
            elif is_text(child):
                runs.append(doc.string_run(child).strip())
        text = TextRun.join(runs, " ").strip()
        if ":" not in text.text:
            return
        for line in text.split(LINE_BREAK):
            segment = line.strip()
            if ":" not in segment.text:
                continue
            segment = segment.collapse_whitespace()
            parts = segment.partition(":")
            if parts is None:
                continue
            yield parts[0].strip(), parts[1].strip(), segment

    @staticmethod
    def _inline_pair(doc: SourceDocument, element: Tag) -> tuple[TextRun, TextRun] | None:
        """``<b>Born:</b> 3 Mar 1902`` → (label, value up to the next break)."""
        label = doc.text_run(element).strip()
        if len(label) < 2 or not label.text.endswith(":"):
            return None
        parts: list[TextRun] = []
        for sibling in element.next_siblings:
            if isinstance(sibling, Tag):
                if sibling.name == "br":
                    break
                if sibling.name in INLINE_LABEL_TAGS and doc.text_run(sibling).strip().text.endswith(":"):
                    break
                parts.append(doc.text_run(sibling))
            elif is_text(sibling):
                parts.append(doc.string_run(sibling))
        value = TextRun.join(parts).strip()
        if not value:
            return None
        first_line = value.split(LINE_BREAK)[0].collapse_whitespace().strip()
        return label[: len(label) - 1].strip(), first_line

    def _handle(
        self,
        context: ExtractionContext,
        label: str,
        value: TextRun,
        segment: TextRun,
        element: Tag,
    ) -> None:
        category = context.labels.classify(label)
        if category is None:
            return
        bounds = context.document.bounds(element)
        scalar = value.collapse_whitespace().strip()

        if category == "maiden":
            if context.set_field("maiden_name", scalar.text):
                context.cite("maidenName", scalar, context=bounds)
        elif category == "surname":
            if context.set_field("surname", scalar.text):
                context.cite("surname", scalar, context=bounds)
        elif category == "given":
            parts = [part for part in GIVEN_SEPARATORS.split(scalar.text) if part]
            if context.set_field("given_names", parts):
                context.cite("givenNames", scalar, context=bounds)
        elif category == "name":
            self._handle_full_name(context, scalar, bounds)
        elif category == "sex":
            if context.set_field("sex", map_sex(scalar.text)):
                context.cite("sex", scalar, context=bounds)
        elif category in ("birth", "death"):
            context.apply_life_event(category, scalar, cite_as=segment, context=bounds)
        elif category == "residence":
            self._handle_residences(context, value, bounds)
        elif category in ("father", "mother"):
            if context.set_field(f"parents.{category}", scalar.text):
                context.cite(f"parents.{category}", scalar, context=bounds)
        elif category in ("sibling", "spouse", "child"):
            field = {"sibling": "siblings", "spouse": "spouses", "child": "children"}[category]
            for entry in value.split(ENTRY_SEPARATORS):
                entry = entry.collapse_whitespace().strip()
                if context.add_unique(field, entry.text):
                    context.cite(field, entry, context=bounds)
        elif category in ("occupation", "religion"):
            if context.set_field(category, scalar.text):
                context.cite(category, scalar, context=bounds)
        elif category == "source":
            for entry in value.split(SOURCE_SEPARATORS):
                entry = entry.collapse_whitespace().strip()
                if context.add_unique("sources", entry.text):
                    context.cite("sources", entry, context=bounds)
        elif category == "notes":
            if context.set_field("notes", scalar.text):
                context.cite("notes", segment, context=bounds)

    @staticmethod
    def _handle_full_name(context: ExtractionContext, value: TextRun, bounds: Span) -> None:
        parsed = parse_name(value.text)
        if parsed.maiden_name and context.set_field("maiden_name", parsed.maiden_name):
            context.cite("maidenName", value, parsed.maiden_name, context=bounds)
        for alias in parsed.aliases:
            if context.add_unique("aliases", alias):
                context.cite("aliases", value, alias, context=bounds)
        if context.set_field("surname", parsed.surname):
            context.cite("surname", value, parsed.surname, context=bounds)
        if context.set_field("given_names", parsed.given_names):
            context.cite("givenNames", value, " ".join(parsed.given_names), context=bounds)

    @staticmethod
    def _handle_residences(context: ExtractionContext, value: TextRun, bounds: Span) -> None:
        for entry in value.split(ENTRY_SEPARATORS):
            entry = entry.collapse_whitespace().strip()
            if not entry:
                continue
            parsed = parse_date_fragment(entry.text)
            place: str | None = None
            year_match = YEAR_RUN.search(entry.text)
            if parsed.year is not None and year_match:
                remainder = entry.text[: year_match.start()] + " " + entry.text[year_match.end() :]
                place = RESIDENCE_FILLER.sub("", " ".join(remainder.split())) or None
            elif context.places.lookup(entry.text):
                place = entry.text
            residence = Residence(raw=entry.text, year=parsed.year, place=place)
            if context.add_unique("residences", residence):
                index = len(context.record.residences) - 1
                context.cite(f"residences[{index}].raw", entry, context=bounds)


DEFAULT_EXTRACTORS: tuple[StructuredExtractor, ...] = (
    ProfileTemplateExtractor(),
    HeadingExtractor(),
    LabelValueExtractor(),
)
