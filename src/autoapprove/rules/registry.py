"""Rule registry — loads built-in and custom rules, applies config filters."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Set

import yaml

from autoapprove.config.schema import AutoApproveConfig
from autoapprove.rules.models import (
    UNCONSTRAINED,
    Exact,
    FileRule,
    NotPattern,
    Pattern,
    Rule,
    TextConstraint,
)

logger = logging.getLogger(__name__)


class RuleError(Exception):
    """Raised when a custom rule file is malformed."""


class RuleRegistry:
    """Central store for all approval rules."""

    def __init__(self) -> None:
        self._rules: Dict[str, Rule] = {}
        self._disabled: Set[str] = set()

    # ---- registration ----

    def register(self, rule: Rule) -> None:
        self._rules[rule.id] = rule

    def register_many(self, rules: list[Rule]) -> None:
        for r in rules:
            self.register(r)

    # ---- queries ----

    @property
    def all_rules(self) -> List[Rule]:
        return list(self._rules.values())

    def get(self, rule_id: str) -> Optional[Rule]:
        return self._rules.get(rule_id)

    def is_enabled(self, rule_id: str) -> bool:
        return rule_id in self._rules and rule_id not in self._disabled

    def enabled_rules(self) -> List[Rule]:
        return [r for r in self._rules.values() if r.id not in self._disabled]

    # ---- config filtering ----

    def apply_config(self, config: AutoApproveConfig) -> None:
        """Enable / disable rules based on config.rules."""
        enable_list = config.rules.enable
        disable_list = config.rules.disable

        for rule_id in self._rules:
            # If an explicit enable-list exists, only those are enabled
            if enable_list and rule_id not in enable_list:
                self._disabled.add(rule_id)
            # Disable list always takes precedence
            if rule_id in disable_list:
                self._disabled.add(rule_id)

        for unknown in set(enable_list) | set(disable_list):
            if unknown not in self._rules:
                logger.warning("Config names unknown rule %s", unknown)

    # ---- custom rule loading ----

    def load_custom_rules(self, directory: Path) -> int:
        """Load YAML rule files from *directory*. Returns count loaded."""
        count = 0
        if not directory.is_dir():
            return 0
        for path in sorted(directory.iterdir()):
            if path.suffix in (".yaml", ".yml"):
                count += self._load_yaml_rules(path)
        return count

    def _load_yaml_rules(self, path: Path) -> int:
        try:
            with open(path) as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise RuleError(f"Failed to parse {path}: {exc}") from exc
        if data is None:
            return 0
        if not isinstance(data, list):
            data = [data]
        count = 0
        for entry in data:
            try:
                rule = rule_from_dict(entry)
            except (KeyError, TypeError, re.error) as exc:
                raise RuleError(f"Invalid rule in {path}: {exc!r}") from exc
            self.register(rule)
            logger.debug("Loaded custom rule %s from %s", rule.id, path)
            count += 1
        return count


def _text_constraint(entry: Dict[str, Any], key: str) -> TextConstraint:
    include = entry.get(key)
    exclude = entry.get(f"{key}_excludes")
    if include is not None and exclude is not None:
        raise RuleError(f"Rule {entry['id']}: set only one of '{key}' and '{key}_excludes'")
    if include is not None:
        return Pattern(include)
    if exclude is not None:
        return NotPattern(exclude)
    return UNCONSTRAINED


def _optional_pattern(value: Optional[str]) -> Optional[Pattern]:
    return Pattern(value) if value is not None else None


def _list_field(entry: Dict[str, Any], key: str) -> List[Any]:
    value = entry.get(key, [])
    if not isinstance(value, list):
        raise RuleError(
            f"Rule {entry['id']}: '{key}' must be a list, got {type(value).__name__}"
        )
    return value


def _max_files(entry: Dict[str, Any]) -> Optional[int]:
    value = entry.get("max_files")
    if value is None:
        return None
    # bool is an int subclass
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise RuleError(
            f"Rule {entry['id']}: 'max_files' must be a non-negative integer, got {value!r}"
        )
    return value


def rule_from_dict(entry: Dict[str, Any]) -> Rule:
    """Build a Rule from one YAML mapping."""
    from autoapprove.rules.extras import EXTRA_CHECKS

    if not isinstance(entry, dict):
        raise TypeError(f"rule entry must be a mapping, got {type(entry).__name__}")

    checks = []
    for name in _list_field(entry, "checks"):
        if name not in EXTRA_CHECKS:
            raise RuleError(
                f"Rule {entry['id']}: unknown check '{name}' "
                f"(known: {', '.join(sorted(EXTRA_CHECKS))})"
            )
        checks.append(EXTRA_CHECKS[name])

    file_rules = tuple(
        FileRule(
            target_file=Pattern(fr["target_file"]),
            dependency_title=_optional_pattern(fr.get("dependency_title")),
            old_version=_optional_pattern(fr.get("old_version")),
            new_version=_optional_pattern(fr.get("new_version")),
        )
        for fr in _list_field(entry, "file_rules")
    )

    author = entry.get("author")
    return Rule(
        id=entry["id"],
        name=entry.get("name", entry["id"]),
        description=entry.get("description", ""),
        author=Exact(author) if author is not None else UNCONSTRAINED,
        title=_text_constraint(entry, "title"),
        body=_text_constraint(entry, "body"),
        file_patterns=tuple(Pattern(p) for p in _list_field(entry, "file_patterns")),
        max_files=_max_files(entry),
        file_rules=file_rules,
        extra_checks=tuple(checks),
    )


def build_registry(config: AutoApproveConfig, repo_root: Path) -> RuleRegistry:
    """Create a fully populated, config-filtered rule registry."""
    from autoapprove.rules.builtin import ALL_BUILTIN_RULES

    registry = RuleRegistry()
    registry.register_many(ALL_BUILTIN_RULES)

    custom_dir = repo_root / config.rules.custom_dir
    loaded = registry.load_custom_rules(custom_dir)
    if loaded:
        logger.info("Loaded %d custom rule(s) from %s", loaded, custom_dir)

    registry.apply_config(config)
    return registry
