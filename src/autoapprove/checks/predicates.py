"""Pure sub-predicates over an already-fetched PR snapshot.

Nothing in here touches the network, so every function is directly
unit-testable.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, List, Optional, Sequence, Tuple

from autoapprove.github.models import ChangedFile, PullRequest
from autoapprove.rules.models import (
    AuthorConstraint,
    FileRule,
    Pattern,
    TextConstraint,
)

logger = logging.getLogger(__name__)

_HUNK_HEADER_RE = re.compile(r"^@@ -\d+(?:,\d+)? \+\d+(?:,\d+)? @@")
_NO_NEWLINE_RE = re.compile(r"^\\ No newline at end of file$")
_VERSION_RE = re.compile(r"^v?(\d+)(?:\.(\d+))?(?:\.(\d+))?")


def check_author(constraint: AuthorConstraint, author: str) -> bool:
    return constraint.matches(author)


def check_title_or_body(text: str, constraint: TextConstraint) -> bool:
    return constraint.matches(text)


def check_body(body: Optional[str], constraint: TextConstraint) -> bool:
    """A missing or empty body never fails the body criterion."""
    if not body:
        return True
    return constraint.matches(body)


def check_file_paths_match(filenames: Iterable[str], patterns: Sequence[Pattern]) -> bool:
    """Every filename must match at least one pattern. No patterns → True."""
    if not patterns:
        return True
    return all(any(p.matches(name) for p in patterns) for name in filenames)


def check_file_count(file_count: int, max_files: Optional[int]) -> bool:
    if max_files is None:
        return True
    return file_count <= max_files


# ---- version-bump file rules ----


def parse_patch(patch: str) -> Tuple[List[str], List[str]]:
    """Split a unified-diff patch into (removed, added) line contents."""
    removed: List[str] = []
    added: List[str] = []
    for raw_line in patch.splitlines():
        line = raw_line.rstrip("\r")
        if _HUNK_HEADER_RE.match(line) or _NO_NEWLINE_RE.match(line):
            continue
        if line.startswith("+"):
            added.append(line[1:].lstrip("\ufeff"))
        elif line.startswith("-"):
            removed.append(line[1:].lstrip("\ufeff"))
    return removed, added


def parse_version(text: str) -> Optional[Tuple[int, int, int]]:
    """Parse ``1``, ``1.2``, ``v1.2.3`` (and ``1.2.3-rc1``) into a triple."""
    m = _VERSION_RE.match(text.strip())
    if m is None:
        return None
    return tuple(int(g) if g is not None else 0 for g in m.groups())  # type: ignore[return-value]


def _all_matches(lines: Iterable[str], pattern: Pattern) -> List[re.Match[str]]:
    matches = (pattern.compiled.search(line) for line in lines)
    return [m for m in matches if m is not None]


def _group(m: re.Match[str], name: str) -> Optional[str]:
    return m.groupdict().get(name)


def _is_minor_or_patch_upgrade(old: str, new: str) -> bool:
    old_v = parse_version(old)
    new_v = parse_version(new)
    if old_v is None or new_v is None:
        return False
    return new_v[0] == old_v[0] and new_v > old_v


def _check_file_version_bump(title: str, changed: ChangedFile, rule: FileRule) -> bool:
    if changed.patch is None:
        logger.debug("No patch available for %s", changed.filename)
        return False
    if rule.old_version is None or rule.new_version is None:
        return True

    removed, added = parse_patch(changed.patch)
    # Exactly one pin may change per file.
    old_pins = _all_matches(removed, rule.old_version)
    new_pins = _all_matches(added, rule.new_version)
    if len(old_pins) != 1 or len(new_pins) != 1:
        return False
    old_m, new_m = old_pins[0], new_pins[0]

    old_dep, old_ver = _group(old_m, "dependency"), _group(old_m, "version")
    new_dep, new_ver = _group(new_m, "dependency"), _group(new_m, "version")
    if old_ver is None or new_ver is None or old_dep != new_dep:
        return False

    if rule.dependency_title is not None:
        title_m = rule.dependency_title.compiled.search(title)
        if title_m is None:
            return False
        if _group(title_m, "dependency") != new_dep:
            return False
        title_ver = _group(title_m, "version")
        if title_ver is not None and parse_version(title_ver) != parse_version(new_ver):
            return False

    return _is_minor_or_patch_upgrade(old_ver, new_ver)


def check_version_bump(pr: PullRequest, rule: FileRule) -> bool:
    """At least one changed file is targeted, and each targeted file is a
    non-major upgrade of the dependency named in the title."""
    targets = [f for f in pr.changed_files if rule.target_file.matches(f.filename)]
    if not targets:
        return False
    return all(_check_file_version_bump(pr.title, f, rule) for f in targets)


def check_file_rules(pr: PullRequest, file_rules: Sequence[FileRule]) -> bool:
    return all(check_version_bump(pr, rule) for rule in file_rules)
