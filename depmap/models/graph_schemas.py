"""
Pydantic response schemas for the graph API.
"""

from typing import List, Optional
from pydantic import BaseModel

from depmap.models.graph import DependencyGraph, ResolvedDependency, UsageOccurrence


class FileNode(BaseModel):
    id: int              # index in scan order
    name: str
    path: str
    size: int
    language: str
    color: str
    radius: float


class GraphLink(BaseModel):
    source: int
    target: int


class Dependency(BaseModel):
    source: int
    target: int
    target_path: str     # as written in the import, e.g. "./components/Button"
    statement: str
    names: List[str]
    line: int
    end_line: int        # same as `line` unless the statement spans several lines

    @classmethod
    def from_record(cls, dep: ResolvedDependency) -> "Dependency":
        return cls(
            source=dep.source_index,
            target=dep.target_index,
            target_path=dep.target_path,
            statement=dep.statement,
            names=list(dep.names),
            line=dep.line,
            end_line=dep.line_span()[-1],
        )


class GraphResponse(BaseModel):
    session_id: str
    repo: Optional[str] = None
    total_files: int
    analyzed_files: int
    total_dependencies: int
    nodes: List[FileNode]
    links: List[GraphLink]

    @classmethod
    def from_graph(cls, session_id: str, repo: Optional[str], graph: DependencyGraph) -> "GraphResponse":
        return cls(
            session_id=session_id,
            repo=repo,
            total_files=len(graph.nodes),
            analyzed_files=graph.analyzed_files,
            total_dependencies=len(graph.links),
            nodes=[
                FileNode(
                    id=n.index, name=n.name, path=n.path, size=n.size,
                    language=n.language, color=n.color, radius=n.radius,
                )
                for n in graph.nodes
            ],
            links=[GraphLink(source=l.source, target=l.target) for l in graph.links],
        )


class FileResponse(BaseModel):
    index: int
    path: str
    text: str
    line_count: int
    byte_size: int
    dependencies: List[Dependency]


class Usage(BaseModel):
    line: int
    column: int
    symbol: str
    line_text: str

    @classmethod
    def from_record(cls, occ: UsageOccurrence) -> "Usage":
        return cls(line=occ.line, column=occ.column, symbol=occ.symbol, line_text=occ.line_text)


class DependencyUsages(BaseModel):
    dependency: Dependency
    usages: List[Usage]


class SymbolLinkSchema(BaseModel):
    symbol: str
    dependency: int
    target: int
    color: str


class HighlightResponse(BaseModel):
    markup: str
    marked: int
    links: List[SymbolLinkSchema]


class SessionState(BaseModel):
    session_id: str
    repo: Optional[str] = None
    state: str
    file_index: Optional[int] = None
