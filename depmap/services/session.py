"""
Repository session: the one piece of mutable state per user.

Holds the current repo, its scanned files, the dependency graph, and the
file-inspection state machine:

    closed ──inspect──▶ loading ──▶ ready
                           │
                           └──────▶ failed ──retry──▶ loading

`navigate` from ready closes and immediately loads the target file.
Scans and inspections are never cancelled; a result that finishes after
it was superseded is returned to its caller but not committed.
"""

import asyncio
import logging
import uuid
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from depmap.adapters.base import BaseRepoAdapter
from depmap.config import Settings, get_settings
from depmap.errors import ContentUnavailable, InvalidTransition, NoSupportedFiles
from depmap.models.graph import DependencyGraph, ResolvedDependency, UsageOccurrence
from depmap.models.repo import FileRecord, InspectState, RepoRef
from depmap.services.graph_service import GraphService
from depmap.services.highlighter import HighlightResult, highlight_markup
from depmap.services.scanner import ScannerService, parse_repo_url
from depmap.services.usage_locator import locate_usages

logger = logging.getLogger("session")


@dataclass
class FileInspection:
    index: int
    path: str
    text: str
    line_count: int
    byte_size: int
    dependencies: List[ResolvedDependency] = field(default_factory=list)


class RepoSession:
    def __init__(self, adapter: BaseRepoAdapter, settings: Optional[Settings] = None):
        self.id = str(uuid.uuid4())
        self.adapter = adapter
        self.settings = settings or get_settings()
        self._scan_generation = 0
        self._inspect_generation = 0
        self.reset()

    # ── Lifecycle ────────────────────────────────────

    def reset(self) -> None:
        """Back to the input stage: forget the repo, graph and inspection."""
        self.repo: Optional[RepoRef] = None
        self.files: List[FileRecord] = []
        self.graph: Optional[DependencyGraph] = None
        self.state = InspectState.closed
        self.inspect_index: Optional[int] = None
        self.inspection: Optional[FileInspection] = None
        # in-flight work started before the reset is now stale
        self._scan_generation += 1
        self._inspect_generation += 1

    async def scan_url(self, url: str) -> DependencyGraph:
        ref = parse_repo_url(url)
        return await self.scan_and_build_graph(ref.owner, ref.repo)

    async def scan_and_build_graph(self, owner: str, repo: str) -> DependencyGraph:
        """
        Walk the repo, fetch a bounded prefix of files, build the graph.

        The session is only updated once everything succeeded; on
        RemoteError / NoSupportedFiles the previous graph stays as it was.
        """
        self._scan_generation += 1
        generation = self._scan_generation
        ref = RepoRef(owner=owner, repo=repo)

        files = await ScannerService.scan_repository(
            self.adapter, ref, max_files=self.settings.MAX_FILES
        )
        if not files:
            raise NoSupportedFiles(ref.full_name)

        to_analyze = files[:self.settings.MAX_ANALYZED_FILES]
        contents = await asyncio.gather(*(
            self.adapter.read_file(ref.owner, ref.repo, f.path) for f in to_analyze
        ))
        missing = sum(1 for c in contents if c is None)
        if missing:
            logger.warning(f"[{ref.full_name}] {missing} file(s) had no content; kept as plain nodes")

        graph = GraphService.build_graph(files, list(contents))

        if generation != self._scan_generation:
            logger.info(f"[{ref.full_name}] Scan superseded, result discarded")
            return graph

        self.repo = ref
        self.files = files
        self.graph = graph
        self.state = InspectState.closed
        self.inspect_index = None
        self.inspection = None
        self._inspect_generation += 1
        return graph

    # ── Inspection state machine ─────────────────────

    def _file(self, index: int) -> FileRecord:
        if self.graph is None or not 0 <= index < len(self.files):
            raise IndexError(f"No file with index {index}")
        return self.files[index]

    def _require(self, action: str, *allowed: InspectState) -> None:
        if self.state not in allowed:
            raise InvalidTransition(self.state.value, action)

    async def inspect_file(self, index: int) -> FileInspection:
        """
        Load one file's text and dependencies. Allowed while closed, or while
        another load is in flight (that one is superseded).
        """
        self._require("inspect", InspectState.closed, InspectState.loading)
        record = self._file(index)
        repo = self.repo
        dependencies = self.graph.dependencies_of(index)

        self._inspect_generation += 1
        generation = self._inspect_generation
        self.state = InspectState.loading
        self.inspect_index = index
        self.inspection = None

        text = await self.adapter.read_file(repo.owner, repo.repo, record.path)
        stale = generation != self._inspect_generation

        if text is None:
            if not stale:
                self.state = InspectState.failed
            raise ContentUnavailable(record.path)

        inspection = FileInspection(
            index=index,
            path=record.path,
            text=text,
            line_count=len(text.split("\n")),
            byte_size=len(text.encode("utf-8")),
            dependencies=dependencies,
        )
        if stale:
            logger.info(f"Inspection of {record.path} superseded, result discarded")
            return inspection

        self.inspection = inspection
        self.state = InspectState.ready
        return inspection

    async def retry(self) -> FileInspection:
        self._require("retry", InspectState.failed)
        self.state = InspectState.closed
        return await self.inspect_file(self.inspect_index)

    def close(self) -> None:
        self._require("close", InspectState.ready, InspectState.failed, InspectState.loading)
        self._inspect_generation += 1
        self.state = InspectState.closed
        self.inspection = None

    async def navigate(self, dependency: ResolvedDependency) -> FileInspection:
        """Jump from the inspected file to the file one of its imports points at."""
        self._require("navigate", InspectState.ready)
        if dependency.source_index != self.inspect_index:
            raise InvalidTransition(self.state.value, f"navigate from file {dependency.source_index}")
        target = self.resolve_navigation_target(dependency)
        self.close()
        return await self.inspect_file(target)

    # ── Lookups ──────────────────────────────────────

    def resolve_navigation_target(self, dependency: ResolvedDependency) -> int:
        """Target file index of a dependency record from the current graph."""
        if self.graph is None or dependency not in self.graph.details.get(dependency.source_index, []):
            raise KeyError("Dependency does not belong to the current graph")
        return dependency.target_index

    def dependency_at(self, source_index: int, position: int) -> ResolvedDependency:
        self._file(source_index)
        deps = self.graph.details.get(source_index, [])
        if not 0 <= position < len(deps):
            raise IndexError(f"File {source_index} has no dependency #{position}")
        return deps[position]

    def locate_and_highlight(self, index: int, markup: str) -> HighlightResult:
        record = self._file(index)
        return highlight_markup(markup, self.graph.dependencies_of(index), record.path)

    def usages_for(self, index: int) -> List[Tuple[ResolvedDependency, List[UsageOccurrence]]]:
        """Usage occurrences per dependency of the currently inspected file."""
        if self.state != InspectState.ready or self.inspect_index != index:
            raise InvalidTransition(self.state.value, f"list usages of file {index}")
        inspection = self.inspection
        return [
            (
                dep,
                locate_usages(inspection.text, dep.names, inspection.path, dep.line, dep.end_line),
            )
            for dep in inspection.dependencies
        ]

    async def raw_content(self, index: int) -> Tuple[FileRecord, str]:
        """Plain text of one file, for copy / download."""
        record = self._file(index)
        if self.inspection is not None and self.inspection.index == index:
            return record, self.inspection.text
        text = await self.adapter.read_file(self.repo.owner, self.repo.repo, record.path)
        if text is None:
            raise ContentUnavailable(record.path)
        return record, text


# In-memory session storage, least recently used first
SESSIONS: Dict[str, RepoSession] = OrderedDict()


def create_session(adapter: BaseRepoAdapter, settings: Optional[Settings] = None) -> RepoSession:
    session = RepoSession(adapter, settings)
    SESSIONS[session.id] = session
    while len(SESSIONS) > session.settings.MAX_SESSIONS:
        evicted, _ = SESSIONS.popitem(last=False)
        logger.info(f"Session {evicted} evicted (limit {session.settings.MAX_SESSIONS})")
    return session


def get_session(session_id: str) -> RepoSession:
    if session_id not in SESSIONS:
        raise KeyError("Session not found")
    SESSIONS.move_to_end(session_id)
    return SESSIONS[session_id]


def drop_session(session_id: str) -> None:
    SESSIONS.pop(session_id, None)
