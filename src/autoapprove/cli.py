"""autoapprove CLI — Typer application with check, rules, and init commands."""

from __future__ import annotations

import asyncio
import os
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from autoapprove import __version__
from autoapprove.config.schema import AutoApproveConfig

app = typer.Typer(
    name="autoapprove",
    help="Recognise auto-generated pull requests that are safe to approve.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console(stderr=True)


def _load_config_or_exit(config: Optional[str]) -> AutoApproveConfig:
    from autoapprove.config.loader import ConfigError, load_config

    try:
        return load_config(Path.cwd(), config)
    except ConfigError as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc


def _build_client(cfg: AutoApproveConfig):
    """Create the hosting-API client from config (token read from the env)."""
    from autoapprove.github.client import GitHubClient

    token = os.environ.get(cfg.github.token_env)
    return GitHubClient(
        token=token,
        base_url=cfg.github.api_url,
        timeout=cfg.github.timeout_seconds,
    )


def _parse_repo(repo: str) -> tuple[str, str]:
    owner, sep, name = repo.partition("/")
    if not sep or not owner or not name or "/" in name:
        console.print(f"[bold red]Invalid repository:[/bold red] {repo} (expected OWNER/REPO)")
        raise typer.Exit(code=2)
    return owner, name


# ── check ─────────────────────────────────────────────────────────────────────


@app.command()
def check(
    repo: str = typer.Argument(..., help="Repository as OWNER/REPO"),
    number: int = typer.Argument(..., help="Pull request number"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .autoapprove.toml"),
    format: Optional[str] = typer.Option(None, "--format", "-f", help="Output format: terminal | json"),
    rule: Optional[List[str]] = typer.Option(None, "--rule", "-r", help="Only evaluate these rule ids"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show every rule, not only matches"),
) -> None:
    """Evaluate a pull request against every enabled rule.

    Exit code 0 when a rule matched (approve), 1 when none did, 2 on errors.
    """
    from autoapprove.checks.engine import evaluate_all
    from autoapprove.checks.gather import LookupFailed
    from autoapprove.github.client import GitHubAPIError
    from autoapprove.log import setup_logging
    from autoapprove.output import json_report, terminal
    from autoapprove.rules.registry import RuleError, build_registry

    owner, name = _parse_repo(repo)
    cfg = _load_config_or_exit(config)

    if format:
        if format not in ("terminal", "json"):
            console.print(f"[bold red]Invalid format:[/bold red] {format}")
            raise typer.Exit(code=2)
        cfg.output.format = format  # type: ignore[assignment]

    setup_logging("INFO" if verbose and cfg.logging.level == "WARNING" else cfg.logging.level)

    try:
        registry = build_registry(cfg, Path.cwd())
    except RuleError as exc:
        console.print(f"[bold red]Rule error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc

    rules = registry.enabled_rules()
    if rule:
        unknown = [r for r in rule if registry.get(r) is None]
        if unknown:
            console.print(f"[bold red]Unknown rule(s):[/bold red] {', '.join(unknown)}")
            raise typer.Exit(code=2)
        rules = [r for r in registry.all_rules if r.id in rule]

    async def _run():
        client = _build_client(cfg)
        try:
            pr = await client.get_pull_request(owner, name, number)
            return await evaluate_all(
                rules,
                pr,
                client,
                abort_on_error=cfg.checks.abort_on_lookup_error,
            )
        finally:
            await client.aclose()

    try:
        result = asyncio.run(_run())
    except (GitHubAPIError, LookupFailed) as exc:
        console.print(f"[bold red]Lookup error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc

    if cfg.output.format == "json":
        print(json_report.render(result))
    else:
        terminal.render(result, verbose=verbose, console=console)

    raise typer.Exit(code=0 if result.approved else 1)


# ── rules ─────────────────────────────────────────────────────────────────────


@app.command("rules")
def list_rules(
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .autoapprove.toml"),
    all_rules: bool = typer.Option(False, "--all", help="Include disabled rules"),
) -> None:
    """List the rules that would be evaluated."""
    from autoapprove.rules.registry import RuleError, build_registry

    cfg = _load_config_or_exit(config)
    try:
        registry = build_registry(cfg, Path.cwd())
    except RuleError as exc:
        console.print(f"[bold red]Rule error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc

    table = Table(title="autoapprove rules", title_style="bold", border_style="dim")
    table.add_column("Rule", style="cyan", no_wrap=True)
    table.add_column("Author", style="magenta")
    table.add_column("Description")
    if all_rules:
        table.add_column("Enabled", justify="center")

    shown = registry.all_rules if all_rules else registry.enabled_rules()
    for r in shown:
        row = [r.id, r.expected_author or "-", r.description]
        if all_rules:
            row.append("yes" if registry.is_enabled(r.id) else "no")
        table.add_row(*row)

    Console().print(table)


# ── init ──────────────────────────────────────────────────────────────────────


@app.command()
def init() -> None:
    """Generate a starter .autoapprove.toml in the current directory."""
    from autoapprove.config.defaults import DEFAULT_TOML
    from autoapprove.config.loader import CONFIG_FILENAME

    config_path = Path.cwd() / CONFIG_FILENAME

    if config_path.exists():
        console.print(f"[yellow]⚠[/yellow]  {CONFIG_FILENAME} already exists at {config_path}")
        raise typer.Exit(code=1)

    config_path.write_text(DEFAULT_TOML, encoding="utf-8")
    console.print(f"[green]✓[/green] Created {config_path}")


# ── version ───────────────────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        print(f"autoapprove {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-V", callback=_version_callback,
        is_eager=True, help="Show version and exit",
    ),
) -> None:
    """autoapprove — recognise auto-generated pull requests that are safe to approve."""
