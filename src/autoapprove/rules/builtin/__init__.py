"""Built-in rules — aggregate all categories."""

from autoapprove.rules.builtin.codegen import ALL_CODEGEN_RULES
from autoapprove.rules.builtin.dependencies import ALL_DEPENDENCY_RULES
from autoapprove.rules.builtin.owlbot import ALL_OWLBOT_RULES
from autoapprove.rules.models import Rule

ALL_BUILTIN_RULES: list[Rule] = [
    *ALL_OWLBOT_RULES,
    *ALL_CODEGEN_RULES,
    *ALL_DEPENDENCY_RULES,
]

__all__ = ["ALL_BUILTIN_RULES"]
