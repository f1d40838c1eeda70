"""Rule engine — models, registry, built-in rules."""

from autoapprove.rules.models import Rule
from autoapprove.rules.registry import RuleError, RuleRegistry, build_registry

__all__ = ["Rule", "RuleError", "RuleRegistry", "build_registry"]
