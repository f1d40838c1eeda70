"""Asynchronous data gathering — the only part of a check that does I/O.

Lookups are awaited one after another. Results are memoised per PR so that a
batch of rules evaluated against the same PR fetches each fact once.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Iterable, Mapping, Optional, Protocol, Sequence, Tuple

from autoapprove.checks.models import PRFacts
from autoapprove.github.models import PullRequest
from autoapprove.rules.models import Lookup

logger = logging.getLogger(__name__)

REPO_METADATA_PATH = ".repo-metadata.json"


class LookupFailed(Exception):
    """Raised when remote content was fetched but could not be interpreted."""


class PRInfoSource(Protocol):
    """Hosting-API operations the rules depend on."""

    async def get_file_content(self, owner: str, repo: str, path: str) -> str: ...

    async def list_commits_on_pr(
        self, owner: str, repo: str, pr_number: int
    ) -> Sequence[Optional[str]]: ...

    async def count_open_prs_from_author(self, owner: str, repo: str, author: str) -> int: ...


class FactGatherer:
    """Fetch (and cache) the remote facts needed to check rules against *pr*."""

    def __init__(self, source: PRInfoSource, pr: PullRequest) -> None:
        self.source = source
        self.pr = pr
        self._repo_metadata: Optional[Mapping[str, Any]] = None
        self._open_prs: Optional[int] = None
        self._commit_authors: Optional[Tuple[Optional[str], ...]] = None

    async def repo_metadata(self) -> Mapping[str, Any]:
        if self._repo_metadata is None:
            content = await self.source.get_file_content(
                self.pr.repo_owner, self.pr.repo_name, REPO_METADATA_PATH
            )
            try:
                data = json.loads(content)
            except json.JSONDecodeError as exc:
                raise LookupFailed(
                    f"{REPO_METADATA_PATH} in {self.pr.repo_owner}/{self.pr.repo_name} "
                    f"is not valid JSON: {exc}"
                ) from exc
            if not isinstance(data, dict):
                raise LookupFailed(f"{REPO_METADATA_PATH} must contain a JSON object")
            self._repo_metadata = data
        return self._repo_metadata

    async def open_prs_from_author(self) -> int:
        if self._open_prs is None:
            self._open_prs = await self.source.count_open_prs_from_author(
                self.pr.repo_owner, self.pr.repo_name, self.pr.author
            )
        return self._open_prs

    async def commit_authors(self) -> Tuple[Optional[str], ...]:
        if self._commit_authors is None:
            authors = await self.source.list_commits_on_pr(
                self.pr.repo_owner, self.pr.repo_name, self.pr.pr_number
            )
            self._commit_authors = tuple(authors)
        return self._commit_authors

    async def gather(self, lookups: Iterable[Lookup]) -> PRFacts:
        """Return a PRFacts with exactly the requested lookups populated."""
        wanted = set(lookups)
        fetched: Dict[str, Any] = {}
        # Fixed order keeps the remote call sequence deterministic.
        for lookup in Lookup:
            if lookup not in wanted:
                continue
            logger.debug("Fetching %s for %s", lookup.value, self.pr.slug)
            if lookup is Lookup.REPO_METADATA:
                fetched["repo_metadata"] = await self.repo_metadata()
            elif lookup is Lookup.OPEN_PRS_FROM_AUTHOR:
                fetched["open_prs_from_author"] = await self.open_prs_from_author()
            elif lookup is Lookup.COMMIT_AUTHORS:
                fetched["commit_authors"] = await self.commit_authors()
        return PRFacts(**fetched)
