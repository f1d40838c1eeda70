"""GitHub REST client — the hosting-API lookups used by the rules.

Implements ``autoapprove.checks.gather.PRInfoSource`` on top of
``httpx.AsyncClient``. No retries happen here; timeouts come from the
underlying client.
"""

from __future__ import annotations

import base64
import logging
from typing import Any, Dict, List, Optional

import httpx

from autoapprove import __version__
from autoapprove.github.models import PullRequest
from autoapprove.github.parser import pull_request_from_api

logger = logging.getLogger(__name__)

PER_PAGE = 100


class GitHubAPIError(Exception):
    """GitHub API related errors."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class NotFoundError(GitHubAPIError):
    """The requested resource (file, PR, repo) does not exist."""


class GitHubClient:
    """Async GitHub client.

    Usage::

        async with GitHubClient(token) as client:
            pr = await client.get_pull_request("googleapis", "repo", 42)
    """

    def __init__(
        self,
        token: Optional[str] = None,
        base_url: str = "https://api.github.com",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": f"autoapprove/{__version__}",
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "GitHubClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # ---- transport ----

    async def _request(self, method: str, endpoint: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._client.request(method, endpoint, **kwargs)
        except httpx.HTTPError as exc:
            logger.error("Request to %s failed: %s", endpoint, exc)
            raise GitHubAPIError(f"Request failed: {exc}") from exc

        logger.debug("%s %s -> %s", method, endpoint, response.status_code)
        if response.status_code == 404:
            raise NotFoundError(f"Not found: {endpoint}", status_code=404)
        if response.is_error:
            message = _error_message(response)
            raise GitHubAPIError(
                f"GitHub API error: {response.status_code} - {message}",
                status_code=response.status_code,
            )
        return response

    async def _paginate(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> List[Any]:
        items: List[Any] = []
        page = 1
        while True:
            query = {**(params or {}), "per_page": PER_PAGE, "page": page}
            response = await self._request("GET", endpoint, params=query)
            page_items = response.json()
            if not page_items:
                break
            items.extend(page_items)
            if len(page_items) < PER_PAGE:
                break
            page += 1
        return items

    # ---- PR snapshot ----

    async def get_pull_request(self, owner: str, repo: str, pr_number: int) -> PullRequest:
        logger.info("Fetching PR %s/%s#%s", owner, repo, pr_number)
        pr_data = (await self._request("GET", f"/repos/{owner}/{repo}/pulls/{pr_number}")).json()
        files = await self._paginate(f"/repos/{owner}/{repo}/pulls/{pr_number}/files")
        return pull_request_from_api(pr_data, files)

    # ---- lookups ----

    async def get_file_content(self, owner: str, repo: str, path: str) -> str:
        """Return the decoded content of *path* on the default branch."""
        data = (await self._request("GET", f"/repos/{owner}/{repo}/contents/{path}")).json()
        if not isinstance(data, dict) or data.get("type") != "file":
            raise GitHubAPIError(f"{path} in {owner}/{repo} is not a file")
        if data.get("encoding") != "base64":
            raise GitHubAPIError(f"Unsupported encoding for {path}: {data.get('encoding')}")
        return base64.b64decode(data["content"]).decode("utf-8")

    async def list_commits_on_pr(self, owner: str, repo: str, pr_number: int) -> List[Optional[str]]:
        """Author logins of every commit on the PR; None for unlinked authors."""
        commits = await self._paginate(f"/repos/{owner}/{repo}/pulls/{pr_number}/commits")
        return [(c.get("author") or {}).get("login") for c in commits]

    async def count_open_prs_from_author(self, owner: str, repo: str, author: str) -> int:
        pulls = await self._paginate(f"/repos/{owner}/{repo}/pulls", {"state": "open"})
        return sum(1 for p in pulls if (p.get("user") or {}).get("login") == author)


def _error_message(response: httpx.Response) -> str:
    try:
        return response.json().get("message", "Unknown error")
    except (ValueError, AttributeError):
        return response.text or "Unknown error"
