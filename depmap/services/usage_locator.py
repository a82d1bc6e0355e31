"""
Usage locator: where in a file is an imported symbol used after import?

Matching is purely textual (whole-word, line by line). Import statements
themselves are never reported as usages.
"""

import logging
import re
from typing import Iterable, List, Optional

from depmap.models.graph import UsageOccurrence
from depmap.services.import_scanner import local_name, statement_lines

logger = logging.getLogger("graph.usage_locator")

_IMPORT_LINE_PATTERNS = [
    re.compile(r"^\s*(?:import|from)\b"),
    re.compile(r"^\s*export\b.*\bfrom\s*['\"]"),
    re.compile(r"^\s*#\s*include\b"),
    re.compile(r"^\s*using\s+[\w.]+\s*;"),
    re.compile(r"=\s*require\s*\("),
]


def canonical_name(raw: str) -> Optional[str]:
    """
    The identifier a raw import token binds, or None if there is none.

        "{ Button }"    → "Button"
        "a, b"          → "a"
        "x as y"        → "y"
        "* as ns"       → "ns"
        "*"             → None
    """
    if raw is None:
        return None
    first = raw.replace("{", "").replace("}", "").split(",")[0]
    return local_name(first)


def canonical_names(raw_names: Iterable[str]) -> List[str]:
    """Canonical names in first-seen order, duplicates and blanks dropped."""
    seen: List[str] = []
    for raw in raw_names:
        name = canonical_name(raw)
        if name and name not in seen:
            seen.append(name)
    return seen


def is_import_line(line: str) -> bool:
    return any(p.search(line) for p in _IMPORT_LINE_PATTERNS)


def word_pattern(names: Iterable[str]) -> re.Pattern:
    """Whole-word alternation; identifiers may contain `$`."""
    alternation = "|".join(re.escape(n) for n in names)
    return re.compile(rf"(?<![\w$])(?:{alternation})(?![\w$])")


def locate_usages(
    content: str,
    imported_names: Iterable[str],
    file_path: str,
    import_line: int,
    end_line: Optional[int] = None,
) -> List[UsageOccurrence]:
    """
    Every later textual use of `imported_names` in `content`.

    Skips the import itself (`import_line` through `end_line`, 1-based),
    every line of any other import statement, and import-looking lines.
    Results are grouped by name (in import order), then by position.
    """
    names = canonical_names(imported_names)
    if not names or not content:
        return []

    skip = set(range(import_line, max(import_line, end_line or 0) + 1))
    skip |= statement_lines(content, file_path)

    lines = content.split("\n")
    usable = [
        (number, text)
        for number, text in enumerate(lines, start=1)
        if number not in skip and not is_import_line(text)
    ]

    occurrences: List[UsageOccurrence] = []
    for name in names:
        pattern = word_pattern([name])
        for number, text in usable:
            for m in pattern.finditer(text):
                occurrences.append(UsageOccurrence(
                    line=number,
                    column=m.start() + 1,
                    symbol=name,
                    line_text=text.strip(),
                ))

    logger.debug(f"{file_path}: {len(occurrences)} usage(s) of {names}")
    return occurrences
