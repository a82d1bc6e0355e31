from abc import ABC, abstractmethod
from typing import List, Optional

from depmap.models.repo import RemoteEntry

class BaseRepoAdapter(ABC):
    """
    Abstract base class for remote repository content providers.
    Enforces a common interface for directory listing and file reads.
    """

    @abstractmethod
    async def list_directory(self, owner: str, repo: str, path: str = "") -> List[RemoteEntry]:
        """
        Lists one directory of the repository.

        Raises:
            RemoteError: the provider answered with a non-success status
                (unknown owner/repo/path, access denied, rate limited).
        """
        pass

    @abstractmethod
    async def read_file(self, owner: str, repo: str, path: str) -> Optional[str]:
        """
        Returns the decoded text of one file, or None if it can't be fetched.
        Never raises for per-file failures.
        """
        pass
