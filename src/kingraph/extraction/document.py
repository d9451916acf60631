"""Source-located view of an HTML document.

BeautifulSoup's ``html.parser`` builder records the line and column of every
tag's ``<``, but text nodes carry no position and their content is already
entity-decoded. ``SourceDocument`` recovers exact raw offsets for text by
walking the tree once in document order and matching each string against the
raw markup through a decoded-to-raw character map, so ``&amp;`` or ``&#233;``
map back to their full source range.

Offsets are ``str`` indices into the original HTML.
"""
from __future__ import annotations

import html as html_lib
import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from bs4 import BeautifulSoup, Comment, NavigableString, Tag

from kingraph.logging import get_logger

log = get_logger(__name__)

Span = tuple[int, int]

ENTITY = re.compile(r"&(?:#[0-9]+;?|#[xX][0-9a-fA-F]+;?|[A-Za-z][A-Za-z0-9]*;?)")


# =============================================================================
# Text runs
# =============================================================================


@dataclass(frozen=True)
class TextRun:
    """Text with one raw source span per character (``None`` when unknown)."""

    text: str
    spans: tuple[Span | None, ...]

    @classmethod
    def empty(cls) -> TextRun:
        return cls("", ())

    @classmethod
    def unlocated(cls, text: str) -> TextRun:
        return cls(text, (None,) * len(text))

    @classmethod
    def join(cls, runs: Iterable[TextRun], separator: str = "") -> TextRun:
        """Concatenate runs; separator characters have no source span."""
        text: list[str] = []
        spans: list[Span | None] = []
        for index, run in enumerate(runs):
            if index and separator:
                text.append(separator)
                spans.extend((None,) * len(separator))
            text.append(run.text)
            spans.extend(run.spans)
        return cls("".join(text), tuple(spans))

    def __len__(self) -> int:
        return len(self.text)

    def __bool__(self) -> bool:
        return bool(self.text)

    def __str__(self) -> str:
        return self.text

    def __getitem__(self, key: slice) -> TextRun:
        if not isinstance(key, slice):
            raise TypeError("TextRun supports slicing only")
        return TextRun(self.text[key], self.spans[key])

    def strip(self) -> TextRun:
        stripped = self.text.lstrip()
        start = len(self.text) - len(stripped)
        end = start + len(stripped.rstrip())
        return self[start:end]

    def collapse_whitespace(self) -> TextRun:
        """Collapse whitespace runs to a single space, keeping the first span."""
        text: list[str] = []
        spans: list[Span | None] = []
        previous_space = False
        for char, span in zip(self.text, self.spans):
            if char.isspace():
                if previous_space:
                    continue
                text.append(" ")
                spans.append(span)
                previous_space = True
            else:
                text.append(char)
                spans.append(span)
                previous_space = False
        return TextRun("".join(text), tuple(spans))

    def split(self, pattern: str | re.Pattern[str]) -> list[TextRun]:
        """Split on a regex, like ``re.split`` without capture groups."""
        regex = re.compile(pattern) if isinstance(pattern, str) else pattern
        pieces: list[TextRun] = []
        position = 0
        for match in regex.finditer(self.text):
            if match.end() == match.start():
                continue
            pieces.append(self[position : match.start()])
            position = match.end()
        pieces.append(self[position:])
        return pieces

    def partition(self, separator: str) -> tuple[TextRun, TextRun] | None:
        """Split at the first ``separator``; None when absent."""
        index = self.text.find(separator)
        if index == -1:
            return None
        return self[:index], self[index + len(separator) :]

    @property
    def source_range(self) -> Span | None:
        """``(first.start, last.end)`` when both end characters are located."""
        if not self.spans:
            return None
        first, last = self.spans[0], self.spans[-1]
        if first is None or last is None or last[1] <= first[0]:
            return None
        return first[0], last[1]


def _decode_region(html: str, start: int, end: int) -> tuple[str, list[Span]]:
    """Entity-decode ``html[start:end]`` keeping the raw span of every character."""
    decoded: list[str] = []
    spans: list[Span] = []
    position = start
    for match in ENTITY.finditer(html, start, end):
        for index in range(position, match.start()):
            decoded.append(html[index])
            spans.append((index, index + 1))
        entity = match.group(0)
        value = html_lib.unescape(entity)
        if value == entity:
            for index in range(match.start(), match.end()):
                decoded.append(html[index])
                spans.append((index, index + 1))
        else:
            for char in value:
                decoded.append(char)
                spans.append((match.start(), match.end()))
        position = match.end()
    for index in range(position, end):
        decoded.append(html[index])
        spans.append((index, index + 1))
    return "".join(decoded), spans


def is_text(node: object) -> bool:
    """Plain document text; excludes comments, doctype, script and style bodies."""
    return type(node) is NavigableString


# =============================================================================
# Document
# =============================================================================


class SourceDocument:
    """Parsed HTML whose tags and text nodes map back to raw offsets.

    Example:
        >>> doc = SourceDocument("<p>Born: 3 Mar 1902</p>")
        >>> p = doc.soup.find("p")
        >>> doc.tag_offset(p)
        0
        >>> doc.text_run(p).source_range
        (3, 19)
    """

    def __init__(self, html: str) -> None:
        self.html = html
        self.soup = BeautifulSoup(html, "html.parser")
        self._line_starts = [0]
        self._line_starts.extend(i + 1 for i, char in enumerate(html) if char == "\n")
        self._string_spans: dict[int, tuple[Span | None, ...]] = {}
        self._locate_strings()

    # --- tags ---------------------------------------------------------------

    def tag_offset(self, tag: Tag) -> int | None:
        """Absolute offset of the tag's ``<``."""
        line, column = getattr(tag, "sourceline", None), getattr(tag, "sourcepos", None)
        if line is None or column is None or line < 1 or line > len(self._line_starts):
            return None
        offset = self._line_starts[line - 1] + column
        return offset if offset <= len(self.html) else None

    def bounds(self, tag: Tag) -> Span:
        """Raw window from the tag's start to the next element outside its subtree."""
        start = self.tag_offset(tag) or 0
        node: Tag | None = tag
        while node is not None:
            sibling = node.find_next_sibling()
            if sibling is not None:
                offset = self.tag_offset(sibling)
                if offset is not None and offset >= start:
                    return start, offset
            node = node.parent
        return start, len(self.html)

    # --- text ---------------------------------------------------------------

    def _locate_strings(self) -> None:
        nodes = list(self.soup.descendants)

        # Offset of the next located tag after each node
        limits = [len(self.html)] * len(nodes)
        next_offset = len(self.html)
        for index in range(len(nodes) - 1, -1, -1):
            limits[index] = next_offset
            node = nodes[index]
            if isinstance(node, Tag):
                offset = self.tag_offset(node)
                if offset is not None:
                    next_offset = offset

        cursor = 0
        for index, node in enumerate(nodes):
            if isinstance(node, Tag):
                offset = self.tag_offset(node)
                if offset is not None:
                    close = self.html.find(">", offset)
                    cursor = close + 1 if close != -1 else offset
                continue

            limit = max(limits[index], cursor)
            text = str(node)
            if not text:
                continue

            if not is_text(node):
                # Skip over raw bodies (comments, scripts) so later text cannot match inside them
                if isinstance(node, Comment):
                    found = self.html.find(text, cursor)
                else:
                    found = self.html.find(text, cursor, max(limit, cursor + len(text)))
                if found != -1:
                    cursor = found + len(text)
                continue

            decoded, spans = _decode_region(self.html, cursor, limit)
            found = decoded.find(text)
            if found == -1:
                log.debug("text_node_unlocated", text=text[:40], cursor=cursor)
                continue
            char_spans = tuple(spans[found : found + len(text)])
            self._string_spans[id(node)] = char_spans
            cursor = char_spans[-1][1]

    def string_run(self, node: NavigableString) -> TextRun:
        """Text of a single string node with its character spans."""
        text = str(node)
        spans = self._string_spans.get(id(node))
        if spans is None or len(spans) != len(text):
            return TextRun.unlocated(text)
        return TextRun(text, spans)

    def string_span(self, node: NavigableString) -> Span | None:
        """Exact raw range of a text node."""
        spans = self._string_spans.get(id(node))
        if not spans:
            return None
        return spans[0][0], spans[-1][1]

    def strings(self, tag: Tag | NavigableString) -> Iterator[NavigableString]:
        """Plain text descendants in document order."""
        if isinstance(tag, NavigableString):
            if is_text(tag):
                yield tag
            return
        for node in tag.descendants:
            if is_text(node):
                yield node

    def text_run(self, tag: Tag | NavigableString) -> TextRun:
        """The node's text, as ``get_text()`` would give it, with spans."""
        return TextRun.join(self.string_run(node) for node in self.strings(tag))

    def first_text_descendant(self, tag: Tag) -> NavigableString | None:
        for node in self.strings(tag):
            if node.strip():
                return node
        return None

    def last_text_descendant(self, tag: Tag) -> NavigableString | None:
        last = None
        for node in self.strings(tag):
            if node.strip():
                last = node
        return last

    def text_span(self, tag: Tag) -> Span | None:
        """Span from the first to the last non-blank character of the node's text."""
        first = self.first_text_descendant(tag)
        last = self.last_text_descendant(tag)
        if first is None or last is None:
            return None
        head = self.string_run(first).strip().source_range
        tail = self.string_run(last).strip().source_range
        if head is None or tail is None or tail[1] <= head[0]:
            return None
        return head[0], tail[1]
