"""
Lexical import scanner.

Extracts import / require statements from raw source text with a small
per-language table of regex rules. Nothing here parses the language:
statements that don't fully match a rule are skipped silently.

Public interface:
    scan_imports(content, file_path)     → List[RawImport]
    statement_lines(content, file_path)  → line numbers covered by import statements
    local_name(token)                    → locally bound name of one binding token
"""

import logging
import re
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Set, Tuple

from depmap.models.graph import RawImport
from depmap.services.languages import language_for

logger = logging.getLogger("graph.import_scanner")

_IDENT_RE = re.compile(r"^[\w$]+$")
_ALIAS_RE = re.compile(r"^(?:\*|[\w$]+)\s+as\s+([\w$]+)$")
_RENAME_RE = re.compile(r"^[\w$]+\s*:\s*([\w$]+)$")      # { a: b } = require(...)


def local_name(token: str) -> Optional[str]:
    """
    Reduce one binding token to the name it binds locally.

        "{ Button"      → "Button"
        "Foo as Bar"    → "Bar"
        "* as utils"    → "utils"
        "*"             → None
    """
    token = token.strip()
    if token.startswith("type "):
        token = token[5:]
    token = token.strip().strip("{}()").strip()
    if token.startswith("type "):
        token = token[5:].strip()

    m = _ALIAS_RE.match(token) or _RENAME_RE.match(token)
    if m:
        token = m.group(1)

    if not token or token == "*" or not _IDENT_RE.match(token):
        return None
    return token


def _split_bindings(clause: Optional[str]) -> List[str]:
    if not clause:
        return []
    names = []
    for token in clause.split(","):
        name = local_name(token)
        if name:
            names.append(name)
    return names


# ─── Rule table ─────────────────────────────────────────

@dataclass(frozen=True)
class ImportRule:
    name: str
    pattern: re.Pattern
    accept: Callable[[str], bool]             # tested against the raw `path` group
    names: Callable[[re.Match], List[str]]
    target: Callable[[re.Match], str] = lambda m: m.group("path")


def _not_package_or_url(path: str) -> bool:
    return not path.startswith("@") and not path.startswith("http")


def _relative_js(path: str) -> bool:
    return _not_package_or_url(path) and path.startswith(".")


def _relative_py(module: str) -> bool:
    return module.startswith(".")


def _py_module_to_path(module: str, first_name: Optional[str] = None) -> str:
    """
    ".utils" → "./utils", "..pkg.mod" → "../pkg/mod".
    A bare "." / ".." takes the first imported name as the module.
    """
    stripped = module.lstrip(".")
    depth = len(module) - len(stripped)
    prefix = "./" if depth == 1 else "../" * (depth - 1)
    if not stripped and first_name:
        stripped = first_name
    return prefix + stripped.replace(".", "/")


def _py_from_target(m: re.Match) -> str:
    names = _split_bindings(m.group("names"))
    return _py_module_to_path(m.group("path"), names[0] if names else None)


def _py_import_names(m: re.Match) -> List[str]:
    alias = m.group("alias")
    if alias:
        return [alias]
    name = m.group("path").lstrip(".").split(".")[0]
    return [name] if name else []


_JS_RULES = [
    ImportRule(
        name="es-import",
        pattern=re.compile(
            # only a { ... } binding block may run over several lines
            r"\bimport[ \t]+(?P<bindings>[^'\";{}\n]*\{[^{}'\";]*\}[^'\";{}\n]*?|[^'\";{}\n]+?)"
            r"\s+from\s+['\"](?P<path>[^'\"\n]+)['\"]"
        ),
        accept=_relative_js,
        names=lambda m: _split_bindings(m.group("bindings")),
    ),
    ImportRule(
        name="require",
        pattern=re.compile(
            r"(?:\b(?:const|let|var)\s+(?P<bindings>[\w$]+|\{[^}]*\})\s*=\s*)?"
            r"\brequire\s*\(\s*['\"](?P<path>[^'\"\n]+)['\"]\s*\)"
        ),
        accept=_not_package_or_url,
        names=lambda m: _split_bindings(m.group("bindings")),
    ),
]

_PY_RULES = [
    ImportRule(
        name="from-import",
        pattern=re.compile(
            r"^[ \t]*from[ \t]+(?P<path>[\w.]+)[ \t]+import[ \t]+(?P<names>\([^)]*\)|[^\n#;]+)",
            re.MULTILINE,
        ),
        accept=_relative_py,
        names=lambda m: _split_bindings(m.group("names")),
        target=_py_from_target,
    ),
    ImportRule(
        name="import",
        pattern=re.compile(
            r"^[ \t]*import[ \t]+(?P<path>[\w.]+)(?:[ \t]+as[ \t]+(?P<alias>\w+))?",
            re.MULTILINE,
        ),
        accept=_relative_py,
        names=_py_import_names,
        target=lambda m: _py_module_to_path(m.group("path")),
    ),
]

_JAVA_RULES = [
    ImportRule(
        name="java-import",
        pattern=re.compile(r"^[ \t]*import[ \t]+(?!static\b)(?P<path>[\w.]+)[ \t]*;", re.MULTILINE),
        accept=lambda path: bool(path.split(".")[-1]),
        names=lambda m: [m.group("path").split(".")[-1]],
        target=lambda m: m.group("path").split(".")[-1],
    ),
]

IMPORT_RULES: Dict[str, List[ImportRule]] = {
    "javascript": _JS_RULES,
    "typescript": _JS_RULES,
    "python": _PY_RULES,
    "java": _JAVA_RULES,
}


# ─── Public API ─────────────────────────────────────────

def _line_range(content: str, m: re.Match) -> Tuple[int, int]:
    first = content.count("\n", 0, m.start()) + 1
    return first, first + content.count("\n", m.start(), m.end())


def scan_imports(content: str, file_path: str) -> List[RawImport]:
    """
    Return the import statements of `content` in textual order.
    Unsupported languages yield an empty list.
    """
    rules = IMPORT_RULES.get(language_for(file_path))
    if not rules or not content:
        return []

    found: List[Tuple[int, RawImport]] = []
    for rule in rules:
        for m in rule.pattern.finditer(content):
            if not rule.accept(m.group("path")):
                continue
            target = rule.target(m)
            if not target:
                continue
            first, last = _line_range(content, m)
            found.append((m.start(), RawImport(
                statement=m.group(0).strip(),
                names=rule.names(m),
                target_path=target,
                line=first,
                end_line=last,
            )))

    found.sort(key=lambda item: item[0])
    logger.debug(f"{file_path}: {len(found)} import statement(s)")
    return [imp for _, imp in found]


def statement_lines(content: str, file_path: str) -> Set[int]:
    """
    Every line covered by an import statement, including the ones
    `scan_imports` drops (packages, URLs).
    """
    rules = IMPORT_RULES.get(language_for(file_path)) or []
    lines: Set[int] = set()
    for rule in rules:
        for m in rule.pattern.finditer(content or ""):
            first, last = _line_range(content, m)
            lines.update(range(first, last + 1))
    return lines
