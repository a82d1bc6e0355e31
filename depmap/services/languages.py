"""
Extension classifier: filename → language tag, display color, node radius.
"""

import math
import re
from typing import Dict

# Extensions we scan at all; anything else never becomes a node.
LANGUAGE_MAP: Dict[str, str] = {
    ".js":   "javascript",
    ".jsx":  "javascript",
    ".ts":   "typescript",
    ".tsx":  "typescript",
    ".py":   "python",
    ".java": "java",
    ".cpp":  "cpp",
    ".c":    "c",
    ".cs":   "csharp",
    ".go":   "go",
    ".rb":   "ruby",
    ".php":  "php",
    ".html": "html",
    ".css":  "css",
    ".json": "json",
    ".md":   "markdown",
}

SUPPORTED_EXTENSIONS = frozenset(LANGUAGE_MAP)

FILE_COLORS: Dict[str, str] = {
    ".js":   "#f1e05a",
    ".jsx":  "#f1e05a",
    ".ts":   "#2b7489",
    ".tsx":  "#2b7489",
    ".py":   "#3572a5",
    ".java": "#b07219",
    ".cpp":  "#f34b7d",
    ".c":    "#555555",
    ".cs":   "#178600",
    ".go":   "#00add8",
    ".rb":   "#701516",
    ".php":  "#4f5d95",
    ".html": "#e34c26",
    ".css":  "#563d7c",
    ".json": "#292929",
    ".md":   "#083fa1",
}
DEFAULT_COLOR = "#8b8b8b"

_EXT_RE = re.compile(r"\.[^./]+$")


def extension_of(filename: str) -> str:
    """Last `.suffix` of the name, dot included; "" when there is none."""
    match = _EXT_RE.search(filename)
    return match.group(0) if match else ""


def language_for(filename: str) -> str:
    return LANGUAGE_MAP.get(extension_of(filename), "unknown")


def color_for(filename: str) -> str:
    return FILE_COLORS.get(extension_of(filename), DEFAULT_COLOR)


def is_supported(filename: str) -> bool:
    return extension_of(filename) in SUPPORTED_EXTENSIONS


def node_radius(size: int) -> float:
    """Circle radius for a file of `size` bytes, clamped to [8, 20]."""
    return max(8.0, min(20.0, math.sqrt(max(size, 0) / 100)))
