"""
Graph Service — turns scanned files + fetched contents into a dependency graph.

Public interface:
    GraphService.build_graph(files, contents)   → DependencyGraph
    GraphService.build_nodes(files)             → List[GraphNode]
"""

import logging
from typing import Dict, List, Optional, Sequence

from depmap.models.graph import (
    DependencyGraph, GraphLink, GraphNode, ResolvedDependency,
)
from depmap.models.repo import FileRecord
from depmap.services.import_scanner import scan_imports
from depmap.services.languages import color_for, node_radius
from depmap.services.resolver import resolve_import

logger = logging.getLogger("graph.service")


class GraphService:
    """Stateless; callers pass files and contents in."""

    # ── Public ───────────────────────────────────────

    @staticmethod
    def build_graph(
        files: Sequence[FileRecord],
        contents: Sequence[Optional[str]],
    ) -> DependencyGraph:
        """
        Full pipeline: scan → resolve → aggregate.

        `contents[i]` is the text of `files[i]`, or None when it couldn't be
        fetched. `contents` may cover only a prefix of `files`; the rest are
        nodes without outgoing edges. Parallel edges are kept: every import
        statement that resolves is its own edge.
        """
        links: List[GraphLink] = []
        details: Dict[int, List[ResolvedDependency]] = {}
        analyzed = 0

        for index, content in enumerate(contents[:len(files)]):
            if content is None:
                continue
            analyzed += 1

            source = files[index]
            for raw in scan_imports(content, source.path):
                target_index = resolve_import(raw, files)
                if target_index is None:
                    logger.debug(f"{source.path}:{raw.line} unresolved '{raw.target_path}'")
                    continue

                dep = ResolvedDependency(
                    source_index=index,
                    target_index=target_index,
                    statement=raw.statement,
                    names=list(raw.names),
                    line=raw.line,
                    target_path=raw.target_path,
                    end_line=raw.end_line,
                )
                links.append(GraphLink(source=index, target=target_index))
                details.setdefault(index, []).append(dep)

        logger.info(
            f"Graph built: {len(files)} files, {analyzed} analyzed, {len(links)} dependencies"
        )
        return DependencyGraph(
            nodes=GraphService.build_nodes(files),
            links=links,
            details=details,
            analyzed_files=analyzed,
        )

    @staticmethod
    def build_nodes(files: Sequence[FileRecord]) -> List[GraphNode]:
        return [
            GraphNode(
                index=i,
                name=f.name,
                path=f.path,
                size=f.size,
                language=f.language,
                color=color_for(f.name),
                radius=node_radius(f.size),
            )
            for i, f in enumerate(files)
        ]
