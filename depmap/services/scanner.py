import re
import logging
from typing import List, Optional

from depmap.adapters.base import BaseRepoAdapter
from depmap.errors import InvalidRepoUrl
from depmap.models.repo import EntryType, FileRecord, RepoRef
from depmap.services.languages import is_supported, language_for

logger = logging.getLogger("scanner")

_REPO_URL_RE = re.compile(r"github\.com/([^/\s]+)/([^/\s?#]+)")

# Pruned from the walk besides any dot-directory
SKIP_DIRS = {"node_modules"}


def parse_repo_url(url: str) -> RepoRef:
    """
    Accepts anything containing `github.com/<owner>/<repo>`; a trailing
    `.git` is dropped from the repo name.
    """
    match = _REPO_URL_RE.search((url or "").strip())
    if not match:
        raise InvalidRepoUrl(url)

    owner, repo = match.group(1), match.group(2)
    if repo.endswith(".git"):
        repo = repo[:-4]
    if not owner or not repo:
        raise InvalidRepoUrl(url)
    return RepoRef(owner=owner, repo=repo)


class ScannerService:
    @staticmethod
    async def scan_repository(
        adapter: BaseRepoAdapter,
        ref: RepoRef,
        max_files: int,
        path: str = "",
        files: Optional[List[FileRecord]] = None,
    ) -> List[FileRecord]:
        """
        Depth-first walk collecting supported files, at most `max_files`.
        Listing errors (RemoteError) propagate and abort the whole walk.
        """
        if files is None:
            files = []

        entries = await adapter.list_directory(ref.owner, ref.repo, path)

        for item in entries:
            if len(files) >= max_files:
                break

            if item.type == EntryType.file.value:
                if is_supported(item.name):
                    files.append(FileRecord(
                        name=item.name,
                        path=item.path,
                        size=item.size,
                        language=language_for(item.name),
                        download_url=item.download_url,
                    ))
            elif item.type == EntryType.dir.value:
                if item.name.startswith(".") or item.name in SKIP_DIRS:
                    continue
                await ScannerService.scan_repository(adapter, ref, max_files, item.path, files)

        if not path:
            logger.info(f"[{ref.full_name}] Found {len(files)} supported files")
        return files
