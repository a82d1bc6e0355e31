"""Pytest configuration and fixtures for depmap tests."""

from typing import Callable, Dict, List, Optional

import pytest

from depmap.adapters.base import BaseRepoAdapter
from depmap.config import Settings
from depmap.errors import RemoteError
from depmap.models.graph import ResolvedDependency
from depmap.models.repo import RemoteEntry
from depmap.services.session import SESSIONS, RepoSession


class FakeRepoAdapter(BaseRepoAdapter):
    """In-memory repository: `files` maps repo paths to content (None = unreadable)."""

    def __init__(self, files: Dict[str, Optional[str]], owner: str = "acme", repo: str = "webapp"):
        self.files = dict(files)
        self.owner = owner
        self.repo = repo
        self.listed: List[str] = []
        self.reads: List[str] = []
        self.on_read: Optional[Callable[[str], None]] = None

    async def list_directory(self, owner: str, repo: str, path: str = "") -> List[RemoteEntry]:
        if (owner, repo) != (self.owner, self.repo):
            raise RemoteError(404)
        self.listed.append(path)

        prefix = f"{path}/" if path else ""
        entries: List[RemoteEntry] = []
        seen_dirs = set()
        for full, content in self.files.items():
            if not full.startswith(prefix):
                continue
            head, sep, _ = full[len(prefix):].partition("/")
            if sep:
                if head not in seen_dirs:
                    seen_dirs.add(head)
                    entries.append(RemoteEntry(name=head, path=prefix + head, type="dir"))
            else:
                size = len((content or "").encode("utf-8"))
                entries.append(RemoteEntry(name=head, path=full, type="file", size=size))

        if path and not entries:
            raise RemoteError(404)
        return entries

    async def read_file(self, owner: str, repo: str, path: str) -> Optional[str]:
        self.reads.append(path)
        if self.on_read:
            self.on_read(path)
        return self.files.get(path)


WEBAPP_FILES = {
    "src/App.js": (
        "import React from 'react';\n"
        "import { Button } from './components/Button';\n"
        "import * as api from '../lib/api';\n"
        "\n"
        "export function App() {\n"
        "  api.load();\n"
        "  return Button({ label: 'Go' });\n"
        "}\n"
    ),
    "src/components/Button.js": "export function Button(props) {\n  return props.label;\n}\n",
    "lib/api.js": "const http = require('./http');\nmodule.exports = { load: () => http.get('/') };\n",
    "lib/http.js": "module.exports = { get: (url) => url };\n",
    "README.md": "# webapp\n",
    "logo.png": None,
}


@pytest.fixture
def webapp_files() -> Dict[str, Optional[str]]:
    return dict(WEBAPP_FILES)


@pytest.fixture
def fake_adapter(webapp_files) -> FakeRepoAdapter:
    return FakeRepoAdapter(webapp_files)


@pytest.fixture
def settings() -> Settings:
    return Settings(MAX_FILES=200, MAX_ANALYZED_FILES=50)


@pytest.fixture
def session(fake_adapter, settings) -> RepoSession:
    return RepoSession(fake_adapter, settings)


@pytest.fixture(autouse=True)
def _clear_sessions():
    SESSIONS.clear()
    yield
    SESSIONS.clear()


def make_dep(
    target: int,
    names: List[str],
    line: int = 1,
    source: int = 0,
    target_path: str = "./dep",
    end_line: Optional[int] = None,
) -> ResolvedDependency:
    return ResolvedDependency(
        source_index=source,
        target_index=target,
        statement=f"import {{ {', '.join(names)} }} from '{target_path}'",
        names=names,
        line=line,
        target_path=target_path,
        end_line=end_line,
    )
