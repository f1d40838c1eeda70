"""JSON reporter for bots and CI pipelines."""

from __future__ import annotations

import json
from typing import Any, Dict, List

from autoapprove.checks.models import BatchResult


def to_dict(result: BatchResult) -> Dict[str, Any]:
    """Convert a BatchResult to a JSON-serialisable dict."""
    rules: List[Dict[str, Any]] = []
    for outcome in result.outcomes:
        rules.append({
            "rule": outcome.rule_id,
            "matched": outcome.matched,
            "criteria": [
                {"name": c.name, "passed": c.passed, "gating": c.gating}
                for c in outcome.criteria
            ],
            **({"error": outcome.error} if outcome.error else {}),
        })

    pr = result.pr
    return {
        "version": "1.0",
        "repo_owner": pr.repo_owner,
        "repo_name": pr.repo_name,
        "pr_number": pr.pr_number,
        "author": pr.author,
        "approved": result.approved,
        "matched_rules": result.matched_rules,
        "errored_rules": result.errored_rules,
        "rules": rules,
    }


def render(result: BatchResult) -> str:
    """Return formatted JSON string."""
    return json.dumps(to_dict(result), indent=2)
