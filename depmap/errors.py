"""
Exception taxonomy for repository scanning and file inspection.

Listing failures (RemoteError) are fatal to a scan; ContentUnavailable is
always local to a single file.
"""

from typing import Optional


class DepMapError(Exception):
    """Base class for all domain errors."""


class InvalidRepoUrl(DepMapError):
    def __init__(self, value: str):
        self.value = value
        super().__init__(f"Not a GitHub repository URL: {value!r}")


class RemoteError(DepMapError):
    """The content provider answered a directory listing with a non-success status."""

    def __init__(self, status: int, url: Optional[str] = None):
        self.status = status
        self.url = url
        super().__init__(f"GitHub API error: {status}" + (f" ({url})" if url else ""))


class ContentUnavailable(DepMapError):
    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Content unavailable: {path}")


class NoSupportedFiles(DepMapError):
    def __init__(self, repo: str):
        self.repo = repo
        super().__init__(f"No supported files found in {repo}")


class InvalidTransition(DepMapError):
    def __init__(self, state: str, action: str):
        self.state = state
        self.action = action
        super().__init__(f"Cannot {action} while inspection is {state}")
