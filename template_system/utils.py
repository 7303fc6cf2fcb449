"""Shared utility functions for the template system.

Provides JSON I/O, content hashing, dotted-path lookups, text position
helpers and Rich-based console reporting. Everything here is side-effect
free apart from the explicit file and console helpers.
"""

from __future__ import annotations

import asyncio
import hashlib
import json
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.table import Table

console = Console()

_MISSING = object()

# ---------------------------------------------------------------------------
# JSON I/O
# ---------------------------------------------------------------------------


def load_json(path: str | Path) -> dict[str, Any]:
    """Load and parse a JSON file.

    Args:
        path: Path to the JSON file.

    Returns:
        Parsed dictionary.

    Raises:
        FileNotFoundError: If the file does not exist.
        json.JSONDecodeError: If the file is not valid JSON.
    """
    file_path = Path(path)
    raw = file_path.read_text(encoding="utf-8")
    data = json.loads(raw)
    if not isinstance(data, dict):
        return {"_root": data}
    return data


async def save_json(data: dict[str, Any] | list[Any], path: str | Path) -> None:
    """Save data as pretty-printed JSON.

    Parent directories are created automatically. The write itself runs in a
    thread-pool executor so large results do not block the event loop.
    """
    file_path = Path(path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    content = json.dumps(data, indent=2, ensure_ascii=False, default=str)

    loop = asyncio.get_running_loop()
    await loop.run_in_executor(None, file_path.write_text, content, "utf-8")


# ---------------------------------------------------------------------------
# Content helpers
# ---------------------------------------------------------------------------


def compute_checksum(content: str) -> str:
    """Return the SHA-256 hex digest of *content* encoded as UTF-8."""
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


def byte_size(content: str) -> int:
    """Return the UTF-8 encoded length of *content* in bytes."""
    return len(content.encode("utf-8"))


def find_line(content: str, offset: int) -> int:
    """Return the 1-based line number of *offset* within *content*."""
    return content.count("\n", 0, max(0, offset)) + 1


def get_nested_value(data: Any, path: str, default: Any = None) -> Any:
    """Look up a dot-delimited *path* inside nested dicts and lists.

    List segments are addressed by integer index (``"items.0.name"``).
    Returns *default* as soon as any segment is missing.
    """
    current = data
    for segment in path.split("."):
        segment = segment.strip()
        if not segment:
            return default
        if isinstance(current, dict):
            current = current.get(segment, _MISSING)
        elif isinstance(current, list) and segment.isdigit():
            index = int(segment)
            current = current[index] if index < len(current) else _MISSING
        else:
            return default
        if current is _MISSING:
            return default
    return current


def has_nested_value(data: Any, path: str) -> bool:
    """Return ``True`` if *path* resolves to a value (``None`` counts as absent)."""
    return get_nested_value(data, path, _MISSING) not in (_MISSING, None)


def stringify_value(value: Any) -> str:
    """Render a resolved data value as text for insertion into a source file.

    Strings pass through, booleans become ``true``/``false`` and containers
    are emitted as compact JSON.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    if value is None:
        return ""
    return str(value)


def format_duration(seconds: float) -> str:
    """Format a duration in seconds to a human-readable string.

    Examples::

        format_duration(0.0421) -> "42ms"
        format_duration(3.7)    -> "3.7s"
        format_duration(65.2)   -> "1m 5s"
    """
    if seconds < 0:
        return "0ms"
    if seconds < 1:
        return f"{int(round(seconds * 1000))}ms"

    minutes = int(seconds // 60)
    secs = seconds % 60
    if minutes > 0:
        return f"{minutes}m {int(secs)}s"
    return f"{secs:.1f}s"


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_summary_table(data: dict[str, str], title: str = "Summary") -> None:
    """Print a two-column key/value summary table."""
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(key, str(value))

    console.print(table)
    console.print()


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{message}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{message}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{message}[/bold yellow]")
