"""
Rich-based terminal dashboard for speedtest results.

All formatting helpers live in ``client.stats`` -- this module only does
presentation via the ``rich`` library.  The console writes to stderr so
the JSON report on stdout stays machine-readable.
"""
from __future__ import annotations

from typing import Any, Dict

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from client.stats import format_latency, format_speed

console = Console(stderr=True)


# ---------------------------------------------------------------------------
# Print helpers
# ---------------------------------------------------------------------------

def print_header(server_url: str) -> None:
    console.print()
    console.print(
        Panel.fit(
            "[bold cyan]Network Speed Test[/bold cyan]\n"
            f"[dim]Server: {server_url}[/dim]",
            border_style="cyan",
        )
    )
    console.print()


def print_latency_details(result: Dict[str, Any]) -> None:
    """Print latency statistics from the report's ``latency`` entry."""
    table = Table(title="Latency", box=box.ROUNDED)
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")

    table.add_row("Average", format_latency(result["average"]))
    table.add_row("Min", format_latency(result["min"]))
    table.add_row("Max", format_latency(result["max"]))
    table.add_row("Samples", str(result["n_samples"]))
    console.print(table)


def print_transfer_result(result: Dict[str, Any], title: str, color: str = "green") -> None:
    """Print a download or upload result panel from its report dict."""
    table = Table(title=title, box=box.ROUNDED)
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")

    table.add_row("Speed", f"[bold {color}]{format_speed(result['speedMbps'])}[/bold {color}]")
    table.add_row("Rate", f"{result['speedKbps']} Kbps")
    table.add_row("Size", f"{result.get('actualSizeKB', result['sizeKB'])} KB")
    table.add_row("Transfer Time", format_latency(result["transferTime"]))
    if result.get("serverProcessingTime") is not None:
        table.add_row("Server-Side Time", f"{result['serverProcessingTime']} ms")
    console.print(table)


def print_network_info(info: Dict[str, Any]) -> None:
    table = Table(show_header=False, box=None, padding=(0, 1))
    table.add_column(style="dim")
    table.add_column(style="bold")
    table.add_row("Client IP:", str(info.get("clientIP")))
    for name, value in (info.get("headers") or {}).items():
        table.add_row(f"{name}:", value or "-")
    console.print(Panel(table, title="[bold]Network Info[/bold]", border_style="blue"))


def print_final_results(report: Dict[str, Any]) -> None:
    tests = report.get("tests", {})
    lines = [f"[bold cyan]Server:[/bold cyan] {report.get('serverUrl', '?')}\n"]

    if "latency" in tests:
        lines.append(
            f"[bold white]   Ping:[/bold white]  "
            f"[bold yellow]{tests['latency']['average']} ms[/bold yellow]"
        )
    if "download" in tests:
        lines.append(
            f"[bold white]   Download:[/bold white]  "
            f"[bold green]{format_speed(tests['download']['speedMbps'])}[/bold green]"
        )
    if "upload" in tests:
        lines.append(
            f"[bold white]   Upload:[/bold white]  "
            f"[bold blue]{format_speed(tests['upload']['speedMbps'])}[/bold blue]"
        )
    if report.get("error"):
        lines.append(f"\n[bold red]Error:[/bold red] {report['error']}")

    console.print()
    console.print(
        Panel.fit(
            "\n".join(lines),
            title="[bold]Results[/bold]",
            border_style="red" if report.get("error") else "cyan",
        )
    )
    console.print()
