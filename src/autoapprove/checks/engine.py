"""Rule evaluation — one generic function for every rule variant.

``check_rule`` is pure and works on facts that were already gathered;
``run_rule`` / ``evaluate`` add the remote lookups and the diagnostics report.
A failed lookup propagates out of ``evaluate``: it means "could not classify",
never "does not match".
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, List, Optional, Sequence

from autoapprove.checks.aggregator import report_individual_checks
from autoapprove.checks.gather import FactGatherer, PRInfoSource
from autoapprove.checks.models import (
    BatchResult,
    CheckResult,
    CriterionResult,
    PRFacts,
    RuleOutcome,
)
from autoapprove.checks.predicates import (
    check_author,
    check_body,
    check_file_count,
    check_file_paths_match,
    check_file_rules,
    check_title_or_body,
)
from autoapprove.github.models import PullRequest
from autoapprove.rules.models import Rule

logger = logging.getLogger(__name__)

Reporter = Callable[[Sequence[str], Sequence[bool], str, str, int], None]


def check_rule(rule: Rule, pr: PullRequest, facts: Optional[PRFacts] = None) -> CheckResult:
    """Compute every criterion of *rule* for *pr*."""
    facts = facts or PRFacts()
    result = CheckResult(rule_id=rule.id)
    add = result.criteria.append

    add(CriterionResult("authorship_matches", check_author(rule.author, pr.author)))
    add(CriterionResult("title_matches", check_title_or_body(pr.title, rule.title)))
    add(CriterionResult("body_matches", check_body(pr.body, rule.body)))
    add(CriterionResult("file_count_matches", check_file_count(pr.file_count, rule.max_files)))
    add(
        CriterionResult(
            "file_patterns_match",
            check_file_paths_match(pr.filenames, rule.file_patterns),
        )
    )
    if rule.file_rules:
        add(CriterionResult("file_rules_match", check_file_rules(pr, rule.file_rules)))

    for extra in rule.extra_checks:
        add(CriterionResult(extra.name, bool(extra.predicate(pr, facts, rule)), extra.gating))

    return result


async def run_rule(
    rule: Rule,
    pr: PullRequest,
    gatherer: FactGatherer,
    reporter: Reporter = report_individual_checks,
) -> CheckResult:
    """Gather facts, check, and report every criterion before returning."""
    facts = await gatherer.gather(rule.lookups)
    result = check_rule(rule, pr, facts)
    reporter(result.names, result.outcomes, pr.repo_owner, pr.repo_name, pr.pr_number)
    return result


async def evaluate(
    rule: Rule,
    pr: PullRequest,
    source: PRInfoSource,
    reporter: Reporter = report_individual_checks,
) -> bool:
    """Return True if *pr* matches *rule*. Lookup failures propagate."""
    result = await run_rule(rule, pr, FactGatherer(source, pr), reporter)
    return result.matched


async def evaluate_all(
    rules: Iterable[Rule],
    pr: PullRequest,
    source: PRInfoSource,
    *,
    abort_on_error: bool = False,
    reporter: Reporter = report_individual_checks,
) -> BatchResult:
    """Evaluate *rules* in order against *pr*, sharing fetched facts.

    A rule whose lookups fail is recorded with ``matched=None`` unless
    *abort_on_error* is set, in which case the error propagates.
    """
    gatherer = FactGatherer(source, pr)
    outcomes: List[RuleOutcome] = []

    for rule in rules:
        try:
            result = await run_rule(rule, pr, gatherer, reporter)
        except Exception as exc:
            if abort_on_error:
                raise
            logger.error("Rule %s could not classify %s: %s", rule.id, pr.slug, exc)
            outcomes.append(RuleOutcome(rule_id=rule.id, matched=None, error=str(exc)))
            continue

        logger.info(
            "Rule %s %s %s", rule.id, "matched" if result.matched else "did not match", pr.slug
        )
        outcomes.append(
            RuleOutcome(rule_id=rule.id, matched=result.matched, criteria=result.criteria)
        )

    return BatchResult(pr=pr, outcomes=outcomes)
