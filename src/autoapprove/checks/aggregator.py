"""Per-criterion diagnostics — one structured log record per rule evaluation."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Sequence

logger = logging.getLogger(__name__)


def check_record(
    names: Sequence[str],
    outcomes: Sequence[bool],
    repo_owner: str,
    repo_name: str,
    pr_number: int,
) -> Dict[str, Any]:
    """Pair every criterion name with its outcome, in order.

    Raises:
        ValueError: if *names* and *outcomes* differ in length.
    """
    if len(names) != len(outcomes):
        raise ValueError(
            f"{len(names)} criterion names but {len(outcomes)} outcomes "
            f"for {repo_owner}/{repo_name}#{pr_number}"
        )
    return {
        "repo_owner": repo_owner,
        "repo_name": repo_name,
        "pr_number": pr_number,
        "checks": [
            {"name": name, "passed": bool(passed)}
            for name, passed in zip(names, outcomes)
        ],
    }


def report_individual_checks(
    names: Sequence[str],
    outcomes: Sequence[bool],
    repo_owner: str,
    repo_name: str,
    pr_number: int,
) -> None:
    """Emit the criterion record on the ``autoapprove.checks.aggregator`` logger.

    The dict is also attached to the log record as ``check_record`` for
    handlers that ship structured data.
    """
    record = check_record(names, outcomes, repo_owner, repo_name, pr_number)
    logger.info(json.dumps(record, sort_keys=False), extra={"check_record": record})
