"""
Cross-reference highlighter.

Takes source markup that has already been syntax-highlighted (HTML with
<span> tags and entities) and wraps every usage of an imported symbol in
a marker span pointing at the file it was imported from.

The markup is handled as a token stream of text / markup spans, so tags,
entities and existing markers are copied through untouched.
"""

import html
import re
from dataclasses import dataclass
from typing import List, Optional, Sequence, Set, Tuple

from depmap.models.graph import ResolvedDependency
from depmap.services.import_scanner import statement_lines
from depmap.services.usage_locator import canonical_names, is_import_line, word_pattern

MARKER_CLASS = "dep-usage"

# Cycled per dependency, in detailed-index order.
PALETTE = [
    "#f472b6",
    "#60a5fa",
    "#34d399",
    "#fbbf24",
    "#a78bfa",
    "#f87171",
    "#22d3ee",
    "#a3e635",
]

_TOKEN_RE = re.compile(r"(<[^<>]*>|&#?\w+;)")
_TAG_RE = re.compile(r"^<\s*(/)?\s*([A-Za-z][\w-]*)")
_MARKER_RE = re.compile(rf"\bclass\s*=\s*['\"][^'\"]*\b{MARKER_CLASS}\b")
_VOID_TAGS = {"br", "hr", "img", "input", "meta", "link", "wbr", "col", "area", "source"}
_IDENT_CHAR = re.compile(r"[\w$]")


@dataclass(frozen=True)
class Span:
    text: str
    is_markup: bool


@dataclass(frozen=True)
class SymbolLink:
    symbol: str
    dependency: int          # position in the file's dependency list
    target_index: int
    color: str


@dataclass(frozen=True)
class HighlightResult:
    markup: str
    links: List[SymbolLink]
    marked: int


def tokenize_markup(markup: str) -> List[Span]:
    """Split markup into alternating text / markup (tag or entity) spans."""
    spans = []
    for i, part in enumerate(_TOKEN_RE.split(markup)):
        if part:
            spans.append(Span(part, is_markup=bool(i % 2)))
    return spans


def color_for_dependency(position: int) -> str:
    return PALETTE[position % len(PALETTE)]


def symbol_links(dependencies: Sequence[ResolvedDependency]) -> List[SymbolLink]:
    """
    One link per canonical symbol name. The first dependency to import a
    name owns it; longer names sort first so they win over substrings.
    """
    links: List[SymbolLink] = []
    seen: Set[str] = set()
    for position, dep in enumerate(dependencies):
        for name in canonical_names(dep.names):
            if name in seen:
                continue
            seen.add(name)
            links.append(SymbolLink(
                symbol=name,
                dependency=position,
                target_index=dep.target_index,
                color=color_for_dependency(position),
            ))
    links.sort(key=lambda link: -len(link.symbol))
    return links


def _plain_text(span: Span) -> str:
    if not span.is_markup:
        return span.text
    if span.text.startswith("&"):
        return html.unescape(span.text)
    return ""


def _marker(link: SymbolLink, text: str) -> str:
    return (
        f'<span class="{MARKER_CLASS}" data-dep="{link.dependency}" '
        f'data-target="{link.target_index}" data-symbol="{link.symbol}" '
        f'style="color: {link.color}">{text}</span>'
    )


class _TagStack:
    """Tracks open elements so we know when we're inside an existing marker."""

    def __init__(self) -> None:
        self._open: List[Tuple[str, bool]] = []

    @property
    def in_marker(self) -> bool:
        return any(is_marker for _, is_marker in self._open)

    def feed(self, tag: str) -> None:
        m = _TAG_RE.match(tag)
        if not m:
            return  # comment, doctype, stray '<'
        closing, name = m.group(1), m.group(2).lower()
        if closing:
            for i in range(len(self._open) - 1, -1, -1):
                if self._open[i][0] == name:
                    del self._open[i:]
                    break
        elif name not in _VOID_TAGS and not tag.rstrip(">").rstrip().endswith("/"):
            self._open.append((name, bool(_MARKER_RE.search(tag))))


def highlight_markup(
    markup: str,
    dependencies: Sequence[ResolvedDependency],
    file_path: Optional[str] = None,
) -> HighlightResult:
    """
    Wrap symbol usages in `markup` with dependency markers.

    Untouched: markup itself, text already inside a marker, import lines,
    and every line of a dependency's import statement. With `file_path`,
    multi-line imports that resolved to nothing are skipped as well.
    Re-running on the output changes nothing.
    """
    links = symbol_links(dependencies)
    if not links or not markup:
        return HighlightResult(markup=markup, links=links, marked=0)

    by_name = {link.symbol: link for link in links}
    pattern = word_pattern(link.symbol for link in links)

    spans = tokenize_markup(markup)
    plain_parts = [_plain_text(s) for s in spans]
    plain = "".join(plain_parts)

    skip_lines = {number for dep in dependencies for number in dep.line_span()}
    if file_path:
        skip_lines |= statement_lines(plain, file_path)
    for number, text in enumerate(plain.split("\n"), start=1):
        if is_import_line(text):
            skip_lines.add(number)

    out: List[str] = []
    marked = 0
    line = 1
    offset = 0          # position in `plain`
    tags = _TagStack()

    for span, part in zip(spans, plain_parts):
        if span.is_markup:
            out.append(span.text)
            if not span.text.startswith("&"):
                tags.feed(span.text)
            line += part.count("\n")
            offset += len(part)
            continue

        segments = span.text.split("\n")
        for i, segment in enumerate(segments):
            if i:
                out.append("\n")
                line += 1
                offset += 1
            if segment and line not in skip_lines and not tags.in_marker:
                segment, count = _mark_segment(segment, offset, plain, pattern, by_name)
                marked += count
            out.append(segment)
            offset += len(segments[i])

    return HighlightResult(markup="".join(out), links=links, marked=marked)


def _mark_segment(
    segment: str,
    offset: int,
    plain: str,
    pattern: re.Pattern,
    by_name: dict,
) -> Tuple[str, int]:
    """Mark whole-word matches in one text segment starting at `offset` in `plain`."""
    prev_char: Optional[str] = plain[offset - 1] if offset > 0 else None
    end = offset + len(segment)
    next_char: Optional[str] = plain[end] if end < len(plain) else None

    pieces: List[str] = []
    cursor = 0
    count = 0
    for m in pattern.finditer(segment):
        # identifier continues across a tag boundary
        if m.start() == 0 and prev_char and _IDENT_CHAR.match(prev_char):
            continue
        if m.end() == len(segment) and next_char and _IDENT_CHAR.match(next_char):
            continue
        pieces.append(segment[cursor:m.start()])
        pieces.append(_marker(by_name[m.group(0)], m.group(0)))
        cursor = m.end()
        count += 1
    pieces.append(segment[cursor:])
    return "".join(pieces), count
