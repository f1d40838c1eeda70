"""Rule data model — a rule variant is a configuration literal, not a subclass.

Every optional constraint is one of the sum types below. Each carries its own
``matches`` so that "no constraint configured" is always satisfied by the
matching function itself rather than by ``None`` checks at call sites.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Callable, FrozenSet, Optional, Tuple, Union

if TYPE_CHECKING:
    from autoapprove.checks.models import PRFacts
    from autoapprove.github.models import PullRequest


class Unconstrained:
    """No constraint configured: every input matches."""

    _instance: Optional["Unconstrained"] = None

    def __new__(cls) -> "Unconstrained":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def matches(self, text: Optional[str]) -> bool:
        return True

    def __repr__(self) -> str:
        return "UNCONSTRAINED"


UNCONSTRAINED = Unconstrained()


@dataclass(frozen=True)
class Exact:
    """Exact string equality (author handles)."""

    value: str

    def matches(self, text: Optional[str]) -> bool:
        return text == self.value


@dataclass(frozen=True)
class Pattern:
    """Regular expression that must be found somewhere in the text."""

    regex: str
    compiled: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "compiled", re.compile(self.regex))

    def matches(self, text: Optional[str]) -> bool:
        return text is not None and self.compiled.search(text) is not None


@dataclass(frozen=True)
class NotPattern:
    """Regular expression that must NOT be found in the text."""

    regex: str
    compiled: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "compiled", re.compile(self.regex))

    def matches(self, text: Optional[str]) -> bool:
        return text is None or self.compiled.search(text) is None


AuthorConstraint = Union[Unconstrained, Exact]
TextConstraint = Union[Unconstrained, Pattern, NotPattern]


@dataclass(frozen=True)
class FileRule:
    """Structural sub-rule for one kind of file (dependency version bumps).

    ``dependency_title``, ``old_version`` and ``new_version`` use the named
    groups ``dependency`` and ``version``.
    """

    target_file: Pattern
    dependency_title: Optional[Pattern] = None
    old_version: Optional[Pattern] = None
    new_version: Optional[Pattern] = None


class Lookup(str, Enum):
    """Remote facts a rule may need before it can be checked."""

    REPO_METADATA = "repo_metadata"
    OPEN_PRS_FROM_AUTHOR = "open_prs_from_author"
    COMMIT_AUTHORS = "commit_authors"


ExtraPredicate = Callable[["PullRequest", "PRFacts", "Rule"], bool]


@dataclass(frozen=True)
class ExtraCheck:
    """Variant-specific criterion computed from gathered remote facts.

    Non-gating checks are reported alongside the others but do not take part
    in the verdict.
    """

    name: str
    lookups: FrozenSet[Lookup]
    predicate: ExtraPredicate = field(compare=False)
    gating: bool = True


@dataclass(frozen=True)
class Rule:
    """A single rule variant recognising one category of automated PR."""

    id: str
    name: str
    description: str
    author: AuthorConstraint = UNCONSTRAINED
    title: TextConstraint = UNCONSTRAINED
    body: TextConstraint = UNCONSTRAINED
    file_patterns: Tuple[Pattern, ...] = ()
    max_files: Optional[int] = None
    file_rules: Tuple[FileRule, ...] = ()
    extra_checks: Tuple[ExtraCheck, ...] = ()

    @property
    def lookups(self) -> FrozenSet[Lookup]:
        """Every remote lookup the extra checks depend on."""
        needed: set[Lookup] = set()
        for check in self.extra_checks:
            needed |= check.lookups
        return frozenset(needed)

    @property
    def expected_author(self) -> Optional[str]:
        return self.author.value if isinstance(self.author, Exact) else None
