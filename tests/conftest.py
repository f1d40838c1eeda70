"""Shared test fixtures — sample PRs and an in-memory hosting-API source."""

from __future__ import annotations

import json
import textwrap
from typing import Dict, List, Optional

import pytest

from autoapprove.github.client import NotFoundError
from autoapprove.github.models import ChangedFile, PullRequest


class FakeSource:
    """In-memory PRInfoSource that records every call."""

    def __init__(
        self,
        files: Optional[Dict[str, str]] = None,
        commit_authors: Optional[List[Optional[str]]] = None,
        open_prs: int = 1,
        pr: Optional[PullRequest] = None,
    ) -> None:
        self.files = files or {}
        self.commit_authors = commit_authors if commit_authors is not None else []
        self.open_prs = open_prs
        self.pr = pr
        self.calls: List[str] = []
        self.closed = False

    async def get_file_content(self, owner: str, repo: str, path: str) -> str:
        self.calls.append(f"file:{path}")
        if path not in self.files:
            raise NotFoundError(f"Not found: {path}", status_code=404)
        return self.files[path]

    async def list_commits_on_pr(self, owner: str, repo: str, pr_number: int):
        self.calls.append("commits")
        return list(self.commit_authors)

    async def count_open_prs_from_author(self, owner: str, repo: str, author: str) -> int:
        self.calls.append("open_prs")
        return self.open_prs

    async def get_pull_request(self, owner: str, repo: str, pr_number: int) -> PullRequest:
        self.calls.append("pull_request")
        assert self.pr is not None
        return self.pr

    async def aclose(self) -> None:
        self.closed = True


class ExplodingSource(FakeSource):
    """Fails the test if any lookup is attempted."""

    async def get_file_content(self, owner, repo, path):
        raise AssertionError("unexpected file lookup")

    async def list_commits_on_pr(self, owner, repo, pr_number):
        raise AssertionError("unexpected commit lookup")

    async def count_open_prs_from_author(self, owner, repo, author):
        raise AssertionError("unexpected open-PR lookup")


@pytest.fixture
def make_source():
    """Factory for FakeSource instances."""
    return FakeSource


@pytest.fixture
def no_lookups() -> ExplodingSource:
    return ExplodingSource()


@pytest.fixture
def gapic_metadata() -> str:
    return json.dumps({"name": "speech", "library_type": "GAPIC_AUTO"})


@pytest.fixture
def owlbot_pr() -> PullRequest:
    """An OwlBot regeneration PR that matches OWLBOT_API_CHANGES."""
    return PullRequest(
        author="gcf-owl-bot[bot]",
        title="feat: add new fields to RecognitionConfig",
        body=textwrap.dedent("""\
            feat: add new fields to RecognitionConfig

            PiperOrigin-RevId: 512345678
            Source-Link: https://github.com/googleapis/googleapis/commit/abc123
        """),
        repo_owner="googleapis",
        repo_name="python-speech",
        pr_number=101,
        changed_files=(
            ChangedFile("google/cloud/speech_v1/types/cloud_speech.py", "a1b2"),
        ),
        file_count=1,
    )


@pytest.fixture
def discovery_pr() -> PullRequest:
    """A yoshi-code-bot discovery document refresh."""
    return PullRequest(
        author="yoshi-code-bot",
        title="chore: Update discovery artifacts",
        body="## Discovery Artifact Change Summary:",
        repo_owner="googleapis",
        repo_name="google-api-python-client",
        pr_number=2001,
        changed_files=(
            ChangedFile("docs/dyn/index.md", "1111"),
            ChangedFile("docs/dyn/compute_v1.instances.html", "2222"),
            ChangedFile("googleapiclient/discovery_cache/documents/compute.v1.json", "3333"),
        ),
        file_count=3,
    )


@pytest.fixture
def python_dependency_pr() -> PullRequest:
    """A renovate-bot minor bump of one pinned requirement."""
    return PullRequest(
        author="renovate-bot",
        title="chore(deps): update dependency google-cloud-storage to v2.10.0",
        body="This PR contains the following updates",
        repo_owner="googleapis",
        repo_name="python-docs-samples",
        pr_number=9001,
        changed_files=(
            ChangedFile(
                "storage/samples/requirements.txt",
                "9999",
                patch=textwrap.dedent("""\
                    @@ -1,2 +1,2 @@
                    -google-cloud-storage==2.9.0
                    +google-cloud-storage==2.10.0
                     requests==2.31.0
                """),
            ),
        ),
        file_count=1,
    )


@pytest.fixture
def node_dependency_pr() -> PullRequest:
    """A renovate-bot patch bump in package.json."""
    return PullRequest(
        author="renovate-bot",
        title="fix(deps): update dependency @google-cloud/storage to v7.1.1",
        repo_owner="googleapis",
        repo_name="nodejs-storage",
        pr_number=42,
        changed_files=(
            ChangedFile(
                "samples/package.json",
                "8888",
                patch=textwrap.dedent("""\
                    @@ -14,7 +14,7 @@
                       "dependencies": {
                    -    "@google-cloud/storage": "^7.1.0",
                    +    "@google-cloud/storage": "^7.1.1",
                         "yargs": "^17.0.0"
                """),
            ),
        ),
        file_count=1,
    )
