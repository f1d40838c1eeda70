"""Load and merge configuration from .autoapprove.toml and env vars."""

from __future__ import annotations

import dataclasses
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from autoapprove.config.schema import (
    LOG_LEVELS,
    AutoApproveConfig,
    ChecksConfig,
    GitHubConfig,
    LoggingConfig,
    OutputConfig,
    RulesConfig,
)

CONFIG_FILENAME = ".autoapprove.toml"


class ConfigError(Exception):
    """Raised when config is malformed or unreadable."""


def find_config_file(root: Path, override: Optional[str] = None) -> Optional[Path]:
    """Locate the config file. *override* takes precedence."""
    if override:
        p = Path(override)
        if not p.is_file():
            raise ConfigError(f"Config file not found: {override}")
        return p
    candidate = root / CONFIG_FILENAME
    return candidate if candidate.is_file() else None


def _parse_toml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc


def _merge_env_overrides(cfg: AutoApproveConfig) -> None:
    """Apply AUTOAPPROVE_* environment variable overrides."""
    if val := os.environ.get("AUTOAPPROVE_FORMAT"):
        if val in ("terminal", "json"):
            cfg.output.format = val  # type: ignore[assignment]
    if val := os.environ.get("AUTOAPPROVE_DISABLE_RULES"):
        cfg.rules.disable.extend(r.strip() for r in val.split(",") if r.strip())
    if val := os.environ.get("AUTOAPPROVE_LOG_LEVEL"):
        if val.upper() in LOG_LEVELS:
            cfg.logging.level = val.upper()
    if val := os.environ.get("AUTOAPPROVE_API_URL"):
        cfg.github.api_url = val


def _build_section(data: Dict[str, Any], cls: type, section: str):
    """Build a dataclass from a TOML section dict, ignoring unknown keys."""
    section_data = data.get(section, {})
    if not isinstance(section_data, dict):
        raise ConfigError(f"[{section}] must be a table")
    valid_fields = {f.name for f in dataclasses.fields(cls)}
    filtered = {k: v for k, v in section_data.items() if k in valid_fields}
    return cls(**filtered)


def load_config(
    root: Path,
    config_override: Optional[str] = None,
) -> AutoApproveConfig:
    """Load, validate, and return an AutoApproveConfig."""
    config_path = find_config_file(root, config_override)

    if config_path is None:
        cfg = AutoApproveConfig()
    else:
        raw = _parse_toml(config_path)
        cfg = AutoApproveConfig(
            version=raw.get("version", "1.0"),
            github=_build_section(raw, GitHubConfig, "github"),
            rules=_build_section(raw, RulesConfig, "rules"),
            checks=_build_section(raw, ChecksConfig, "checks"),
            output=_build_section(raw, OutputConfig, "output"),
            logging=_build_section(raw, LoggingConfig, "logging"),
        )
        if cfg.output.format not in ("terminal", "json"):
            raise ConfigError(f"Invalid output format: {cfg.output.format}")
        if cfg.logging.level.upper() not in LOG_LEVELS:
            raise ConfigError(f"Invalid log level: {cfg.logging.level}")

    _merge_env_overrides(cfg)
    return cfg
