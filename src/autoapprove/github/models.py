"""Pull request snapshot models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple


@dataclass(frozen=True)
class ChangedFile:
    """One file touched by a pull request."""

    filename: str
    sha: str
    patch: Optional[str] = None  # unified-diff hunks, absent for binary/huge files


@dataclass(frozen=True)
class PullRequest:
    """Immutable snapshot of a pull request handed to every rule."""

    author: str
    title: str
    repo_owner: str
    repo_name: str
    pr_number: int
    body: Optional[str] = None
    changed_files: Tuple[ChangedFile, ...] = field(default_factory=tuple)
    file_count: int = 0

    @property
    def filenames(self) -> Tuple[str, ...]:
        return tuple(f.filename for f in self.changed_files)

    @property
    def slug(self) -> str:
        """``owner/repo#number`` for log lines."""
        return f"{self.repo_owner}/{self.repo_name}#{self.pr_number}"
