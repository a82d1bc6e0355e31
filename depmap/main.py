import logging
from typing import List

from fastapi import FastAPI, Depends, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from depmap.adapters.base import BaseRepoAdapter
from depmap.adapters.github import GitHubAdapter
from depmap.config import get_settings
from depmap.errors import (
    ContentUnavailable, DepMapError, InvalidRepoUrl, InvalidTransition, NoSupportedFiles,
    RemoteError,
)
from depmap.models.api import HighlightRequest, NavigateRequest, RepoScanRequest
from depmap.models.graph_schemas import (
    Dependency, DependencyUsages, FileResponse, GraphResponse, HighlightResponse,
    SessionState, SymbolLinkSchema, Usage,
)
from depmap.services.session import (
    FileInspection, RepoSession, create_session, drop_session, get_session,
)

settings = get_settings()

# Setup Logging
logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger("depmap")

app = FastAPI(
    title="Repository Dependency Map",
    description="Scans a GitHub repository and maps which files import which.",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_adapter() -> BaseRepoAdapter:
    return GitHubAdapter()


def _session(session_id: str) -> RepoSession:
    try:
        return get_session(session_id)
    except KeyError:
        raise HTTPException(status_code=404, detail="Session not found")


def _file_response(inspection: FileInspection) -> FileResponse:
    return FileResponse(
        index=inspection.index,
        path=inspection.path,
        text=inspection.text,
        line_count=inspection.line_count,
        byte_size=inspection.byte_size,
        dependencies=[Dependency.from_record(d) for d in inspection.dependencies],
    )


@app.get("/health")
async def health_check():
    return {"status": "ok"}


# Repository Scan Routes
@app.post("/repo/scan", response_model=GraphResponse)
async def scan_repo(request: RepoScanRequest, adapter: BaseRepoAdapter = Depends(get_adapter)):
    created = not request.session_id
    session = create_session(adapter) if created else _session(request.session_id)

    try:
        graph = await session.scan_url(request.url)
    except DepMapError as e:
        # a first scan that fails leaves nothing behind
        if created:
            drop_session(session.id)
        if isinstance(e, InvalidRepoUrl):
            raise HTTPException(status_code=400, detail=str(e))
        if isinstance(e, NoSupportedFiles):
            raise HTTPException(status_code=404, detail=str(e))
        if isinstance(e, RemoteError):
            logger.error(f"Scan failed for {request.url}: {e}")
            raise HTTPException(
                status_code=502,
                detail="Failed to visualize repository. Please check the URL and try again.",
            )
        raise

    repo = session.repo.full_name if session.repo else None
    return GraphResponse.from_graph(session.id, repo, graph)


@app.get("/repo/{session_id}/graph", response_model=GraphResponse)
async def get_graph(session_id: str):
    session = _session(session_id)
    if session.graph is None:
        raise HTTPException(status_code=404, detail="No repository scanned yet")
    return GraphResponse.from_graph(session.id, session.repo.full_name, session.graph)


@app.get("/repo/{session_id}/state", response_model=SessionState)
async def get_state(session_id: str):
    session = _session(session_id)
    return SessionState(
        session_id=session.id,
        repo=session.repo.full_name if session.repo else None,
        state=session.state.value,
        file_index=session.inspect_index,
    )


@app.delete("/repo/{session_id}")
async def reset_session(session_id: str):
    """Return to the input stage and forget the session."""
    session = _session(session_id)
    session.reset()
    drop_session(session_id)
    return {"status": "reset"}


# File Inspection Routes
@app.get("/repo/{session_id}/files/{index}", response_model=FileResponse)
async def inspect_file(session_id: str, index: int):
    session = _session(session_id)
    try:
        # opening a file closes whatever the modal showed before
        if session.state.value in ("ready", "failed"):
            session.close()
        inspection = await session.inspect_file(index)
    except IndexError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ContentUnavailable as e:
        raise HTTPException(status_code=404, detail=f"Failed to load file content: {e.path}")
    return _file_response(inspection)


@app.post("/repo/{session_id}/files/{index}/retry", response_model=FileResponse)
async def retry_file(session_id: str, index: int):
    session = _session(session_id)
    if session.inspect_index != index:
        raise HTTPException(status_code=409, detail=f"File {index} is not being inspected")
    try:
        inspection = await session.retry()
    except InvalidTransition as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ContentUnavailable as e:
        raise HTTPException(status_code=404, detail=f"Failed to load file content: {e.path}")
    return _file_response(inspection)


@app.get("/repo/{session_id}/files/{index}/usages", response_model=List[DependencyUsages])
async def file_usages(session_id: str, index: int):
    session = _session(session_id)
    try:
        per_dependency = session.usages_for(index)
    except InvalidTransition as e:
        raise HTTPException(status_code=409, detail=str(e))
    return [
        DependencyUsages(
            dependency=Dependency.from_record(dep),
            usages=[Usage.from_record(o) for o in occurrences],
        )
        for dep, occurrences in per_dependency
    ]


@app.post("/repo/{session_id}/files/{index}/highlight", response_model=HighlightResponse)
async def highlight_file(session_id: str, index: int, body: HighlightRequest):
    session = _session(session_id)
    try:
        result = session.locate_and_highlight(index, body.markup)
    except IndexError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return HighlightResponse(
        markup=result.markup,
        marked=result.marked,
        links=[
            SymbolLinkSchema(
                symbol=l.symbol, dependency=l.dependency, target=l.target_index, color=l.color,
            )
            for l in result.links
        ],
    )


@app.get("/repo/{session_id}/files/{index}/raw", response_class=PlainTextResponse)
async def raw_file(session_id: str, index: int):
    """Plain file text, served as an attachment (copy / download)."""
    session = _session(session_id)
    try:
        record, text = await session.raw_content(index)
    except IndexError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ContentUnavailable as e:
        raise HTTPException(status_code=404, detail=f"Failed to load file content: {e.path}")
    return PlainTextResponse(
        text,
        headers={"Content-Disposition": f'attachment; filename="{record.name}"'},
    )


@app.post("/repo/{session_id}/navigate", response_model=FileResponse)
async def navigate(session_id: str, body: NavigateRequest):
    """Jump to the file a dependency points at (click on a marked usage)."""
    session = _session(session_id)
    try:
        dependency = session.dependency_at(body.source_index, body.dependency)
        inspection = await session.navigate(dependency)
    except IndexError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidTransition as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ContentUnavailable as e:
        raise HTTPException(status_code=404, detail=f"Failed to load file content: {e.path}")
    return _file_response(inspection)
