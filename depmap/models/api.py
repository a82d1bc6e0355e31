from pydantic import BaseModel, Field
from typing import Optional

class RepoScanRequest(BaseModel):
    url: str = Field(..., description="Repository URL, e.g. https://github.com/owner/repo")
    session_id: Optional[str] = Field(None, description="Rescan inside an existing session")

class HighlightRequest(BaseModel):
    markup: str = Field(..., description="Syntax-highlighted HTML of the file")

class NavigateRequest(BaseModel):
    source_index: int = Field(..., description="File the dependency belongs to")
    dependency: int = Field(..., description="Position in that file's dependency list")
