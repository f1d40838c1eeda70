"""Convert GitHub REST payloads into PullRequest snapshots."""

from __future__ import annotations

from typing import Any, Dict, List

from autoapprove.github.models import ChangedFile, PullRequest


def changed_file_from_api(data: Dict[str, Any]) -> ChangedFile:
    return ChangedFile(
        filename=data["filename"],
        sha=data.get("sha", ""),
        patch=data.get("patch"),
    )


def pull_request_from_api(pr_data: Dict[str, Any], files_data: List[Dict[str, Any]]) -> PullRequest:
    """Build a snapshot from ``GET /pulls/{n}`` and ``GET /pulls/{n}/files``.

    ``file_count`` comes from the PR's own ``changed_files`` total, which stays
    accurate when the files listing is truncated by the API.
    """
    base_repo = pr_data["base"]["repo"]
    files = tuple(changed_file_from_api(f) for f in files_data)
    return PullRequest(
        author=pr_data["user"]["login"],
        title=pr_data["title"],
        body=pr_data.get("body"),
        repo_owner=base_repo["owner"]["login"],
        repo_name=base_repo["name"],
        pr_number=pr_data["number"],
        changed_files=files,
        file_count=pr_data.get("changed_files", len(files)),
    )
