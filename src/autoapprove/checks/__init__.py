"""Rule evaluation — predicates, data gathering, engine, diagnostics."""

from autoapprove.checks.aggregator import check_record, report_individual_checks
from autoapprove.checks.engine import check_rule, evaluate, evaluate_all, run_rule
from autoapprove.checks.gather import FactGatherer, LookupFailed, PRInfoSource
from autoapprove.checks.models import (
    BatchResult,
    CheckResult,
    CriterionResult,
    PRFacts,
    RuleOutcome,
)

__all__ = [
    "BatchResult",
    "CheckResult",
    "CriterionResult",
    "FactGatherer",
    "LookupFailed",
    "PRFacts",
    "PRInfoSource",
    "RuleOutcome",
    "check_record",
    "check_rule",
    "evaluate",
    "evaluate_all",
    "report_individual_checks",
    "run_rule",
]
