"""Check result data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from autoapprove.github.models import PullRequest


@dataclass(frozen=True)
class PRFacts:
    """Remote data gathered for a PR. Fields stay ``None`` when not fetched."""

    repo_metadata: Optional[Mapping[str, Any]] = None
    open_prs_from_author: Optional[int] = None
    commit_authors: Optional[Tuple[Optional[str], ...]] = None


@dataclass(frozen=True)
class CriterionResult:
    """Outcome of one named sub-predicate."""

    name: str
    passed: bool
    gating: bool = True


@dataclass
class CheckResult:
    """All criteria computed for one rule against one PR."""

    rule_id: str
    criteria: List[CriterionResult] = field(default_factory=list)

    @property
    def matched(self) -> bool:
        return all(c.passed for c in self.criteria if c.gating)

    @property
    def names(self) -> List[str]:
        return [c.name for c in self.criteria]

    @property
    def outcomes(self) -> List[bool]:
        return [c.passed for c in self.criteria]

    def as_mapping(self) -> Dict[str, bool]:
        return {c.name: c.passed for c in self.criteria}


@dataclass
class RuleOutcome:
    """Per-rule entry of a batch evaluation.

    ``matched`` is ``None`` when the rule could not be classified because a
    remote lookup failed.
    """

    rule_id: str
    matched: Optional[bool]
    criteria: List[CriterionResult] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def errored(self) -> bool:
        return self.error is not None


@dataclass
class BatchResult:
    """Result of evaluating every enabled rule against one PR."""

    pr: PullRequest
    outcomes: List[RuleOutcome] = field(default_factory=list)

    @property
    def matched_rules(self) -> List[str]:
        return [o.rule_id for o in self.outcomes if o.matched]

    @property
    def errored_rules(self) -> List[str]:
        return [o.rule_id for o in self.outcomes if o.errored]

    @property
    def approved(self) -> bool:
        """True if at least one rule positively matched."""
        return bool(self.matched_rules)
