from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict

class EntryType(str, Enum):
    file = "file"
    dir = "dir"

class InspectState(str, Enum):
    closed = "closed"
    loading = "loading"
    ready = "ready"
    failed = "failed"

class RepoRef(BaseModel):
    owner: str
    repo: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

class RemoteEntry(BaseModel):
    """One item of a remote directory listing."""
    name: str
    path: str
    type: str
    size: int = 0
    download_url: Optional[str] = None

class FileRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    path: str            # unique within the repo
    size: int
    language: str
    download_url: Optional[str] = None
