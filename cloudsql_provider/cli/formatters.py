"""
CLI formatting functions.

JSON is the format the orchestrator consumes; yaml, table and list are for people
running the provider by hand.
"""

import json
from typing import Any, Dict, List

import yaml
from rich.console import Console
from rich.table import Table

DATABASE_COLUMNS = ["name", "charset", "collation", "instance", "project"]


def format_output(data: Any, format_type: str) -> str:
    """Format data according to the specified format type."""
    if format_type == "yaml":
        return yaml.safe_dump(data, default_flow_style=False, sort_keys=False)
    elif format_type == "table":
        return format_table_output(data)
    elif format_type == "list":
        return format_list_output(data)
    return json.dumps(data, indent=2, default=str)


def _database_rows(data: Any) -> List[Dict[str, Any]]:
    if isinstance(data, dict) and isinstance(data.get("databases"), list):
        return data["databases"]
    if isinstance(data, dict) and "name" in data and "instance" in data:
        return [data]
    return []


def format_table_output(data: Any) -> str:
    """Format databases as a table; other data falls back to JSON."""
    rows = _database_rows(data)
    if not rows:
        if isinstance(data, dict) and "databases" in data:
            return "No databases found."
        return json.dumps(data, indent=2, default=str)

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Name", style="cyan")
    table.add_column("Charset", style="green")
    table.add_column("Collation", style="green")
    table.add_column("Instance", style="blue")
    table.add_column("Project", style="blue")
    for row in rows:
        table.add_row(*(str(row.get(column) or "") for column in DATABASE_COLUMNS))

    # Capture Rich output as string
    console = Console(width=120, legacy_windows=False, force_terminal=False)
    with console.capture() as capture:
        console.print(table)
    return capture.get()


def format_list_output(data: Any) -> str:
    """Format databases as a detailed list; other data falls back to JSON."""
    rows = _database_rows(data)
    if not rows:
        if isinstance(data, dict) and "databases" in data:
            return "No databases found."
        return json.dumps(data, indent=2, default=str)

    blocks = []
    for row in rows:
        lines = [f"Database: {row.get('name', '')}"]
        for key, value in row.items():
            if key != "name":
                lines.append(f"  {key}: {value}")
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)
