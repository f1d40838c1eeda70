"""Rich terminal reporter — one row per rule, criteria as ticks and crosses."""

from __future__ import annotations

from typing import Optional

from rich.console import Console
from rich.table import Table
from rich.text import Text

from autoapprove.checks.models import BatchResult, RuleOutcome

_VERDICT_STYLE = {
    "match": "bold white on green",
    "no match": "bold black on bright_white",
    "error": "bold white on red",
}


def _verdict_pill(outcome: RuleOutcome) -> Text:
    if outcome.errored:
        label = "error"
    elif outcome.matched:
        label = "match"
    else:
        label = "no match"
    return Text(f" {label.upper()} ", style=_VERDICT_STYLE[label])


def _criteria_text(outcome: RuleOutcome) -> Text:
    if outcome.errored:
        return Text(outcome.error or "", style="red")
    text = Text()
    for i, c in enumerate(outcome.criteria):
        if i:
            text.append("  ")
        mark, style = ("✓", "green") if c.passed else ("✗", "red")
        if not c.gating:
            style = "dim"
        text.append(f"{mark} {c.name}", style=style)
    return text


def render(result: BatchResult, *, verbose: bool = False, console: Optional[Console] = None) -> None:
    """Print batch results to the terminal using Rich.

    Without *verbose* only matching and errored rules are listed.
    """
    console = console or Console(stderr=True)
    pr = result.pr

    rows = [o for o in result.outcomes if verbose or o.matched or o.errored]
    if rows:
        console.print()
        table = Table(
            title=f"autoapprove — {pr.slug} by {pr.author}",
            show_lines=True,
            title_style="bold",
            border_style="dim",
        )
        table.add_column("Verdict", justify="center", width=12)
        table.add_column("Rule", style="cyan", min_width=20)
        table.add_column("Criteria")
        for outcome in rows:
            table.add_row(_verdict_pill(outcome), outcome.rule_id, _criteria_text(outcome))
        console.print(table)

    console.print()
    if result.approved:
        console.print(
            f"[bold green]✅ APPROVE — matched {', '.join(result.matched_rules)}.[/bold green]"
        )
    elif result.errored_rules:
        console.print(
            "[bold red]❌ NOT APPROVED — no rule matched and "
            f"{len(result.errored_rules)} rule(s) could not be evaluated.[/bold red]"
        )
    else:
        console.print("[bold yellow]⚠️  NOT APPROVED — no rule matched.[/bold yellow]")
