"""Rich display helpers for chain results."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from actionchain.models.chain import ChainResult, ChainState

console = Console()

_STATE_STYLE: dict[ChainState, str] = {
    ChainState.DONE: "green",
    ChainState.FAULTED: "red",
    ChainState.ABORTED: "yellow",
}


def print_result(result: ChainResult) -> None:
    style = _STATE_STYLE.get(result.state, "white")
    title = f"Chain [{style}]{result.state.value.upper()}[/]"
    if result.dry_run:
        title += " (dry run)"

    table = Table(title=title, expand=True)
    table.add_column("#", style="bold", width=3)
    table.add_column("Phase", style="cyan")
    table.add_column("Action")
    table.add_column("Status", justify="center")
    for entry in result.trace:
        status = "[green]OK[/]" if entry.ok else "[red]FAIL[/]"
        table.add_row(str(entry.index), entry.phase.value, escape(entry.action), status)
    console.print(table)

    if result.cause is not None:
        print_error(
            f"{result.failed_action} failed during "
            f"{result.failed_phase.value if result.failed_phase else '?'}: "
            f"{type(result.cause).__name__}: {result.cause}"
        )

    if result.secondary_faults:
        ftable = Table(title="Secondary Faults", expand=True)
        ftable.add_column("Phase", style="cyan")
        ftable.add_column("Action")
        ftable.add_column("Error", style="red")
        for fault in result.secondary_faults:
            ftable.add_row(
                fault.phase.value,
                escape(fault.action),
                f"{type(fault.exception).__name__}: {escape(fault.message)}",
            )
        console.print(ftable)


def print_error(message: str) -> None:
    console.print(Panel(f"[red]{escape(message)}[/]", title="Error", border_style="red"))
