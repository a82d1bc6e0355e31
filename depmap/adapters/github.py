import base64
import binascii
import logging
from typing import Any, List, Optional

import httpx

from depmap.adapters.base import BaseRepoAdapter
from depmap.config import get_settings
from depmap.errors import RemoteError
from depmap.models.repo import RemoteEntry

logger = logging.getLogger("github.adapter")


class GitHubAdapter(BaseRepoAdapter):
    def __init__(self, client: Optional[httpx.AsyncClient] = None):
        settings = get_settings()
        self.base_url = settings.GITHUB_API_URL.rstrip("/")
        self.token = settings.GITHUB_TOKEN
        self.timeout = settings.REQUEST_TIMEOUT
        self._client = client

    def _headers(self) -> dict:
        headers = {"Accept": "application/vnd.github.v3+json"}
        if self.token:
            headers["Authorization"] = f"token {self.token}"
        return headers

    def _contents_url(self, owner: str, repo: str, path: str) -> str:
        return f"{self.base_url}/repos/{owner}/{repo}/contents/{path.lstrip('/')}"

    async def _get(self, url: str) -> httpx.Response:
        if self._client is not None:
            return await self._client.get(url, headers=self._headers(), timeout=self.timeout)
        async with httpx.AsyncClient() as client:
            return await client.get(url, headers=self._headers(), timeout=self.timeout)

    async def _get_json(self, url: str) -> Any:
        try:
            resp = await self._get(url)
        except httpx.HTTPError as e:
            logger.error(f"GitHub request failed: {url}: {e}")
            raise RemoteError(503, url) from e

        if not resp.is_success:
            raise RemoteError(resp.status_code, url)
        try:
            return resp.json()
        except ValueError as e:
            raise RemoteError(502, url) from e

    async def list_directory(self, owner: str, repo: str, path: str = "") -> List[RemoteEntry]:
        url = self._contents_url(owner, repo, path)
        data = await self._get_json(url)

        # The contents API returns a single object when `path` is a file
        if isinstance(data, dict):
            data = [data]

        return [
            RemoteEntry(
                name=item["name"],
                path=item["path"],
                type=item.get("type", "file"),
                size=item.get("size") or 0,
                download_url=item.get("download_url"),
            )
            for item in data
        ]

    async def read_file(self, owner: str, repo: str, path: str) -> Optional[str]:
        url = self._contents_url(owner, repo, path)
        try:
            data = await self._get_json(url)
        except RemoteError as e:
            logger.warning(f"Error fetching file content: {path}: {e}")
            return None

        content = data.get("content") if isinstance(data, dict) else None
        if not content:
            return None

        try:
            raw = base64.b64decode(content)
        except (binascii.Error, ValueError) as e:
            logger.warning(f"Undecodable content for {path}: {e}")
            return None
        return raw.decode("utf-8", errors="replace")
