"""Output formatting utilities for agent-friendly CLI output."""

from __future__ import annotations

import csv
import io
import json
import sys
from enum import Enum
from typing import Any, Callable

from rich.console import Console
from rich.table import Table

from xero_cli.utils.dates import format_xero_date

console = Console(stderr=True)

# Longest value shown in a table cell before truncation
MAX_CELL_WIDTH = 40


class OutputFormat(str, Enum):
    TABLE = "table"
    JSON = "json"
    CSV = "csv"


Formatter = Callable[[Any], str]


class Column:
    """A table column: header label, source key and optional formatter."""

    def __init__(self, key: str, label: str | None = None, fmt: Formatter | None = None) -> None:
        self.key = key
        self.label = label or key
        self.fmt = fmt

    def render(self, row: dict[str, Any]) -> str:
        value = row.get(self.key)
        if self.fmt is not None:
            return self.fmt(value)
        return "" if value is None else str(value)


# ── column formatters ─────────────────────────────────────────────────

def short_id(value: Any) -> str:
    return f"{value[:8]}..." if value else ""


def money(value: Any) -> str:
    if value is None or value == "":
        return "0.00"
    return f"{float(value):.2f}"


def nested_name(value: Any) -> str:
    if isinstance(value, dict):
        return value.get("Name") or "N/A"
    return "N/A"


def yes_no(value: Any) -> str:
    return "Yes" if value else "No"


def xero_date(value: Any) -> str:
    return format_xero_date(value)


def flatten_rows(rows: list[dict[str, Any]], columns: list[Column]) -> list[dict[str, str]]:
    """Render rows into label -> display string dicts for table/csv output."""
    return [{col.label: col.render(row) for col in columns} for row in rows]


# ── printers ──────────────────────────────────────────────────────────

def print_output(
    data: list[dict[str, Any]] | dict[str, Any],
    fmt: OutputFormat = OutputFormat.TABLE,
    columns: list[Column] | None = None,
    title: str | None = None,
) -> None:
    """Print data in the requested format.

    Args:
        data: The data to display (list of dicts or single dict).
        fmt: Output format (table, json, csv). JSON always prints raw data.
        columns: Which columns to show in table/csv mode. None = all.
        title: Optional title for table output.
    """
    if fmt == OutputFormat.JSON:
        print_json(data)
        return

    rows = [data] if isinstance(data, dict) else data
    if columns is not None:
        rows = flatten_rows(rows, columns)

    if fmt == OutputFormat.CSV:
        print_csv(rows)
    else:
        print_table(rows, title=title)


def print_json(data: Any) -> None:
    """Print data as formatted JSON to stdout."""
    json.dump(data, sys.stdout, indent=2, default=str)
    sys.stdout.write("\n")


def print_table(
    data: list[dict[str, Any]] | dict[str, Any],
    columns: list[str] | None = None,
    title: str | None = None,
) -> None:
    """Print data as a Rich table."""
    if isinstance(data, dict):
        data = [data]

    if not data:
        console.print("[yellow]No results found.[/yellow]")
        return

    if columns is None:
        columns = list(data[0].keys())

    table = Table(title=title, show_lines=False, header_style="bold cyan")
    for col in columns:
        table.add_column(col, overflow="ellipsis", max_width=MAX_CELL_WIDTH)

    for row in data:
        table.add_row(*[str(row.get(col, "")) for col in columns])

    console.print(table)
    console.print(f"[dim]{len(data)} result(s)[/dim]")


def print_csv(
    data: list[dict[str, Any]] | dict[str, Any],
    columns: list[str] | None = None,
) -> None:
    """Print data as CSV to stdout."""
    if isinstance(data, dict):
        data = [data]

    if not data:
        return

    if columns is None:
        columns = list(data[0].keys())

    buf = io.StringIO()
    writer = csv.DictWriter(buf, fieldnames=columns, extrasaction="ignore")
    writer.writeheader()
    for row in data:
        writer.writerow({k: row.get(k, "") for k in columns})
    sys.stdout.write(buf.getvalue())


def print_detail(title: str, fields: list[tuple[str, Any]]) -> None:
    """Print a label/value block for a single record."""
    console.print(f"\n[bold]{title}[/bold]\n")
    width = max((len(label) for label, _ in fields), default=0) + 2
    for label, value in fields:
        text = "N/A" if value is None or value == "" else str(value)
        console.print(f"{label + ':':<{width}} {text}", highlight=False)
    console.print("")


def print_success(message: str) -> None:
    console.print(f"[green]✓[/green] {message}")
