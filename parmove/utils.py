"""
Utility functions for parmove.

Includes:
- Console output helpers
- A leveled log sink for the walker and dispatcher
- JSON save/load helpers
"""

import json
from pathlib import Path
from typing import Any
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.text import Text

# Global console instance
console = Console()

def print_header(title: str, subtitle: str = ""):
    """Print a styled header."""
    console.print(Panel(f"[bold blue]{title}[/bold blue]\n[italic]{subtitle}[/italic]", expand=False))

def print_summary_table(report: dict):
    """Print a summary table of a finished run."""
    table = Table(title="Summary")
    table.add_column("Metric", style="cyan")
    table.add_column("Count", style="magenta")

    table.add_row("Files processed", str(report["processed"]))
    if report["skipped"] > 0:
        table.add_row("Files skipped (blacklisted)", str(report["skipped"]))
    if report["failed"] > 0:
        table.add_row("Files failed", str(report["failed"]))
    table.add_row("Total files found", str(report["total"]))

    console.print(table)

def print_error(msg: str):
    console.print(f"[bold red]ERROR:[/bold red] {msg}")

def print_warning(msg: str):
    console.print(f"[bold yellow]WARNING:[/bold yellow] {msg}")

def print_success(msg: str):
    console.print(f"[bold green]SUCCESS:[/bold green] {msg}")


class ConsoleLog:
    """
    Leveled text sink used by the walker, the category loader and the CLI.

    Writes go through a rich Console, which serializes output, so one
    instance can be shared by every worker thread.
    """

    def __init__(self, out: Console | None = None):
        self.out = out or console

    def info(self, msg: str) -> None:
        self.out.print(msg, markup=False, highlight=False)

    def warning(self, msg: str) -> None:
        self.out.print(Text.assemble(("WARNING: ", "bold yellow"), msg))


def save_json(data: Any, path: Path) -> None:
    """
    Save data to a JSON file with pretty formatting.

    Args:
        data: The data to serialize.
        path: The output file path.
    """
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
    console.print(f"[INFO] Saved: {path}", markup=False, highlight=False)


def load_json(path: Path) -> Any:
    """
    Load data from a JSON file.

    Args:
        path: The input file path.

    Returns:
        The deserialized data.
    """
    with open(path, 'r', encoding='utf-8') as f:
        return json.load(f)
