"""Extra checks that depend on remote lookups.

Each predicate receives ``(pr, facts, rule)``; the facts it reads are
guaranteed to be populated because the check declares them in ``lookups``.
"""

from __future__ import annotations

from typing import Dict

from autoapprove.checks.models import PRFacts
from autoapprove.github.models import PullRequest
from autoapprove.rules.models import ExtraCheck, Lookup, Rule

GAPIC_LIBRARY_TYPE = "GAPIC_AUTO"


def _is_gapic(pr: PullRequest, facts: PRFacts, rule: Rule) -> bool:
    assert facts.repo_metadata is not None
    return facts.repo_metadata.get("library_type") == GAPIC_LIBRARY_TYPE


def _other_prs_from_author(pr: PullRequest, facts: PRFacts, rule: Rule) -> bool:
    # The count includes the PR under evaluation.
    assert facts.open_prs_from_author is not None
    return facts.open_prs_from_author > 1


def _no_other_commit_authors(pr: PullRequest, facts: PRFacts, rule: Rule) -> bool:
    assert facts.commit_authors is not None
    expected = rule.expected_author or pr.author
    return all(author == expected for author in facts.commit_authors)


IS_GAPIC = ExtraCheck(
    name="is_gapic",
    lookups=frozenset({Lookup.REPO_METADATA}),
    predicate=_is_gapic,
)

NO_OTHER_PRS_FROM_AUTHOR = ExtraCheck(
    name="no_other_prs_from_author",
    lookups=frozenset({Lookup.OPEN_PRS_FROM_AUTHOR}),
    predicate=lambda pr, facts, rule: not _other_prs_from_author(pr, facts, rule),
)

ARE_THERE_OTHER_PRS_FROM_AUTHOR = ExtraCheck(
    name="are_there_other_prs_from_author",
    lookups=frozenset({Lookup.OPEN_PRS_FROM_AUTHOR}),
    predicate=_other_prs_from_author,
    gating=False,
)

NO_OTHER_COMMIT_AUTHORS = ExtraCheck(
    name="no_other_commit_authors",
    lookups=frozenset({Lookup.COMMIT_AUTHORS}),
    predicate=_no_other_commit_authors,
)

EXTRA_CHECKS: Dict[str, ExtraCheck] = {
    check.name: check
    for check in (
        IS_GAPIC,
        NO_OTHER_PRS_FROM_AUTHOR,
        ARE_THERE_OTHER_PRS_FROM_AUTHOR,
        NO_OTHER_COMMIT_AUTHORS,
    )
}
