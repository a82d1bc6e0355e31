"""
In-memory records for the file dependency graph.

Everything here is rebuilt from scratch on each repository scan;
nothing is persisted.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass(frozen=True)
class RawImport:
    statement: str               # matched statement text
    names: List[str]             # raw binding tokens, e.g. ["{ Button }"] or ["helper"]
    target_path: str             # "./components/Button" or ".utils"
    line: int                    # 1-based
    end_line: Optional[int] = None   # last line, for statements spanning several


@dataclass(frozen=True)
class ResolvedDependency:
    source_index: int
    target_index: int
    statement: str
    names: List[str]
    line: int
    target_path: str
    end_line: Optional[int] = None

    def line_span(self) -> range:
        """Every source line the import statement occupies."""
        return range(self.line, max(self.line, self.end_line or 0) + 1)


@dataclass(frozen=True)
class GraphNode:
    index: int
    name: str
    path: str
    size: int
    language: str
    color: str
    radius: float


@dataclass(frozen=True)
class GraphLink:
    source: int
    target: int


@dataclass
class DependencyGraph:
    """Nodes, edges and the per-source detailed index, built together."""
    nodes: List[GraphNode] = field(default_factory=list)
    links: List[GraphLink] = field(default_factory=list)
    details: Dict[int, List[ResolvedDependency]] = field(default_factory=dict)
    analyzed_files: int = 0

    def dependencies_of(self, index: int) -> List[ResolvedDependency]:
        return list(self.details.get(index, []))


@dataclass(frozen=True)
class UsageOccurrence:
    line: int                    # 1-based
    column: int                  # 1-based
    symbol: str
    line_text: str               # stripped source line, for display
