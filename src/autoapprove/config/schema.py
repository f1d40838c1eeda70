"""Configuration schema — dataclasses for every config section."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Literal

OutputFormat = Literal["terminal", "json"]

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class GitHubConfig:
    api_url: str = "https://api.github.com"
    token_env: str = "GITHUB_TOKEN"  # name of the env var holding the token
    timeout_seconds: float = 30.0


@dataclass
class RulesConfig:
    enable: List[str] = field(default_factory=list)  # empty = all enabled
    disable: List[str] = field(default_factory=list)
    custom_dir: str = ".autoapprove-rules"


@dataclass
class ChecksConfig:
    abort_on_lookup_error: bool = False  # False: a failed lookup only fails its own rule


@dataclass
class OutputConfig:
    format: OutputFormat = "terminal"


@dataclass
class LoggingConfig:
    level: str = "WARNING"


@dataclass
class AutoApproveConfig:
    version: str = "1.0"
    github: GitHubConfig = field(default_factory=GitHubConfig)
    rules: RulesConfig = field(default_factory=RulesConfig)
    checks: ChecksConfig = field(default_factory=ChecksConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
