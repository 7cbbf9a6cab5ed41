"""Render a record file's schema and first rows in the terminal."""

from __future__ import annotations
from typing import Optional

from rich.console import Console
from rich.table import Table
from rich import box

from ..writers.registry import read_records


def inspect_records(path: str, rows: int = 5, console: Optional[Console] = None) -> None:
    console = console or Console()
    table = read_records(path)
    meta = {k.decode(): v.decode() for k, v in (table.schema.metadata or {}).items()}

    header = Table(title=path, box=box.SIMPLE, show_header=False)
    header.add_row("rows", f"{table.num_rows:,}")
    header.add_row("columns", str(table.num_columns))
    for k, v in meta.items():
        header.add_row(k, v)
    console.print(header)

    head = table.slice(0, rows).to_pylist()
    preview = Table(box=box.MINIMAL_HEAVY_HEAD)
    preview.add_column("#", justify="right", style="dim")
    for field in table.schema:
        preview.add_column(f"{field.name}\n[dim]{field.type}[/dim]", justify="right")
    for i, row in enumerate(head):
        preview.add_row(str(i), *(str(row[f.name]) for f in table.schema))
    console.print(preview)
