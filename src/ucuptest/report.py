"""
Console report of accumulated test results.
"""

from rich.console import Console
from rich.markup import escape

from ucuptest.models import ClientState, RecordStatus, RunSummary

STATUS_STYLES = {
    RecordStatus.PASS: "green",
    RecordStatus.FAIL: "red",
}


def format_duration(duration_ms: float) -> str:
    return f"{duration_ms:.0f}ms"


def print_report(state: ClientState, console: Console) -> RunSummary:
    """Print one line per record followed by the totals."""
    for record in state.results:
        style = STATUS_STYLES[record.status]
        console.print(
            f'Test "{escape(record.description)}": [{style}]{record.status.value}[/{style}]',
            highlight=False,
        )

    console.print(f"Duration: {format_duration(state.total_duration_ms)}", highlight=False)
    console.print(f"[green]{state.passed_count} PASS[/green]", highlight=False)
    console.print(f"[red]{state.failed_count} FAIL[/red]", highlight=False)

    return RunSummary(
        total_duration_ms=state.total_duration_ms,
        passed=state.passed_count,
        failed=state.failed_count,
        records=list(state.results),
    )
