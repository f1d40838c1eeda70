"""Dependency bump rules — Renovate PRs that move one dependency forward."""

from autoapprove.rules.models import Exact, FileRule, Pattern, Rule

RENOVATE_AUTHOR = "renovate-bot"

_PYTHON_TITLE = (
    r"^(fix|chore)\(deps\): update dependency "
    r"(?P<dependency>[A-Za-z0-9_.\-\[\]]+) to v?(?P<version>\d[\w.\-]*)$"
)
_PYTHON_PIN = r"^(?P<dependency>[A-Za-z0-9_.\-\[\]]+)==(?P<version>\d[\w.\-]*)"

_NODE_TITLE = (
    r"^(fix|chore)\(deps\): update dependency "
    r"(?P<dependency>@?[\w.\-/]+) to v?(?P<version>\d[\w.\-]*)$"
)
_NODE_PIN = r'^\s*"(?P<dependency>@?[\w.\-/]+)": "[\^~]?(?P<version>\d[\w.\-]*)",?$'

PYTHON_DEPENDENCY = Rule(
    id="PYTHON_DEPENDENCY",
    name="Python Dependency",
    description="Non-major bump of one pinned dependency in requirements files.",
    author=Exact(RENOVATE_AUTHOR),
    title=Pattern(_PYTHON_TITLE),
    file_patterns=(Pattern(r"(^|/)requirements(-[\w]+)?\.txt$"),),
    max_files=3,
    file_rules=(
        FileRule(
            target_file=Pattern(r"(^|/)requirements(-[\w]+)?\.txt$"),
            dependency_title=Pattern(_PYTHON_TITLE),
            old_version=Pattern(_PYTHON_PIN),
            new_version=Pattern(_PYTHON_PIN),
        ),
    ),
)

NODE_DEPENDENCY = Rule(
    id="NODE_DEPENDENCY",
    name="Node Dependency",
    description="Non-major bump of one dependency in package.json.",
    author=Exact(RENOVATE_AUTHOR),
    title=Pattern(_NODE_TITLE),
    file_patterns=(Pattern(r"(^|/)package\.json$"),),
    max_files=3,
    file_rules=(
        FileRule(
            target_file=Pattern(r"(^|/)package\.json$"),
            dependency_title=Pattern(_NODE_TITLE),
            old_version=Pattern(_NODE_PIN),
            new_version=Pattern(_NODE_PIN),
        ),
    ),
)

ALL_DEPENDENCY_RULES = [PYTHON_DEPENDENCY, NODE_DEPENDENCY]
