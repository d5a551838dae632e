"""Rich-based terminal view and report renderer with JSON/CSV support."""

from __future__ import annotations

import csv
import io
import json
from dataclasses import asdict

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import ContributorsReport, LoadingState, LoadingStatus, User


def _format_number(n: int) -> str:
    return f"{n:,}"


def _write_to_file(content: str, output_file: str) -> None:
    """Write content to a file and print confirmation."""
    with open(output_file, "w", encoding="utf-8") as f:
        f.write(content)
    Console().print(f"Saved to {output_file}")


def format_status(state: LoadingState) -> str:
    if state.status is LoadingStatus.COMPLETED:
        detail = f"completed in {state.elapsed_time}"
    elif state.status is LoadingStatus.IN_PROGRESS:
        detail = f"in progress {state.elapsed_time}".rstrip()
    else:
        detail = state.status.value
    return f"Loading status: {detail}"


def _contributors_table(users: list[User], top_n: int) -> Table:
    table = Table(show_header=True, header_style="bold")
    table.add_column("#", justify="right")
    table.add_column("Login")
    table.add_column("Contributions \u25bc", justify="right")
    for i, user in enumerate(users[:top_n], 1):
        table.add_row(str(i), user.login, _format_number(user.contributions))
    return table


class ConsoleView:
    """Terminal stand-in for the contributors window.

    Status changes are printed as they happen, intermediate results as a
    one-line summary. The final table is left to :func:`render_report`.
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console(stderr=True)
        self.contributors: list[User] = []
        self.state = LoadingState()
        self.loading_enabled = True
        self.cancellation_enabled = False

    def update_contributors(self, users: list[User]) -> None:
        self.contributors = users

    def update_loading_status(self, state: LoadingState) -> None:
        self.state = state
        if state.status is LoadingStatus.IN_PROGRESS and self.contributors:
            self.console.print(
                f"[dim]{format_status(state)} - {len(self.contributors)} contributors so far[/dim]"
            )
            return
        style = {
            LoadingStatus.COMPLETED: "bold green",
            LoadingStatus.CANCELED: "bold yellow",
        }.get(state.status, "dim")
        self.console.print(f"[{style}]{format_status(state)}[/{style}]")

    def set_actions_status(self, new_loading_enabled: bool, cancellation_enabled: bool = False) -> None:
        self.loading_enabled = new_loading_enabled
        self.cancellation_enabled = cancellation_enabled


def render_report(
    report: ContributorsReport,
    top_n: int = 10,
    output_file: str | None = None,
) -> None:
    """Render a ContributorsReport to the terminal using rich."""
    if output_file:
        string_io = io.StringIO()
        console = Console(file=string_io, force_terminal=False, width=120)
    else:
        console = Console()

    console.print(Panel(
        Text(f"contrib-stats: {report.org}\nVariant: {report.variant}", justify="center"),
        style="bold cyan",
    ))
    console.print()

    console.print("[bold]Summary[/bold]")
    summary = Table(show_header=False, box=None, padding=(0, 2))
    summary.add_column("label", style="dim")
    summary.add_column("value", style="bold")
    summary.add_row("Status", report.status)
    summary.add_row("Elapsed", report.elapsed_time or "-")
    summary.add_row("Contributors", _format_number(len(report.contributors)))
    summary.add_row(
        "Contributions", _format_number(sum(c.contributions for c in report.contributors))
    )
    console.print(summary)
    console.print()

    if report.contributors:
        console.print(f"[bold]Top Contributors (top {top_n})[/bold]")
        console.print(_contributors_table(report.contributors, top_n))
        console.print()

    if output_file:
        _write_to_file(string_io.getvalue(), output_file)


def render_json(report: ContributorsReport, output_file: str | None = None) -> None:
    """Render a ContributorsReport as JSON."""
    content = json.dumps(asdict(report), indent=2, ensure_ascii=False)
    if output_file:
        _write_to_file(content, output_file)
    else:
        print(content)


def render_csv(report: ContributorsReport, output_file: str | None = None) -> None:
    """Render contributor data as CSV."""
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(["login", "contributions"])
    for c in report.contributors:
        writer.writerow([c.login, c.contributions])
    content = output.getvalue()
    if output_file:
        _write_to_file(content, output_file)
    else:
        print(content, end="")
