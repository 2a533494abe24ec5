"""Shared utility functions for archgen.

Provides name helpers for generated identifiers, structured-file loading
(JSON / YAML), async file-system helpers and Rich-based console output.
"""

from __future__ import annotations

import asyncio
import json
import re
from pathlib import Path
from typing import Any

import yaml
from rich.console import Console
from rich.table import Table

console = Console()

# ---------------------------------------------------------------------------
# Name helpers
# ---------------------------------------------------------------------------

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def is_identifier(name: str) -> bool:
    """Return ``True`` if *name* is usable as a C# / Python identifier."""
    return bool(_IDENTIFIER_RE.match(name))


def to_pascal(name: str) -> str:
    """Convert ``some-thing`` or ``some_thing`` to ``SomeThing``.

    Words that already contain capitals keep their inner casing, so
    ``orderItem`` becomes ``OrderItem`` rather than ``Orderitem``.
    """
    parts = re.split(r"[^A-Za-z0-9]+", name)
    return "".join(word[:1].upper() + word[1:] for word in parts if word)


def to_camel(name: str) -> str:
    """Convert ``SomeThing`` or ``some-thing`` to ``someThing``."""
    pascal = to_pascal(name)
    if pascal:
        return pascal[0].lower() + pascal[1:]
    return ""


def pluralize(name: str) -> str:
    """Return the English plural of a PascalCase entity name.

    E.g. ``'Order'`` -> ``'Orders'``, ``'Category'`` -> ``'Categories'``,
    ``'Box'`` -> ``'Boxes'``.
    """
    if not name:
        return name
    lower = name.lower()
    if lower.endswith("y") and len(name) > 1 and lower[-2] not in "aeiou":
        return name[:-1] + "ies"
    if lower.endswith(("s", "sh", "ch", "x", "z")):
        return name + "es"
    return name + "s"


# ---------------------------------------------------------------------------
# Structured file loading
# ---------------------------------------------------------------------------


def load_mapping(path: str | Path) -> dict[str, Any]:
    """Load a JSON or YAML file that contains a top-level mapping.

    The format is chosen by suffix: ``.yaml`` / ``.yml`` are parsed with
    PyYAML, everything else as JSON.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the document is not a mapping.
    """
    file_path = Path(path)
    raw = file_path.read_text(encoding="utf-8")
    if file_path.suffix.lower() in (".yaml", ".yml"):
        data = yaml.safe_load(raw)
    else:
        data = json.loads(raw)
    if not isinstance(data, dict):
        raise ValueError(f"Expected a mapping at the top level of {file_path}")
    return data


# ---------------------------------------------------------------------------
# File-system helpers
# ---------------------------------------------------------------------------


def ensure_dir(path: str | Path) -> Path:
    """Create a directory (and parents) if it does not exist."""
    dir_path = Path(path)
    dir_path.mkdir(parents=True, exist_ok=True)
    return dir_path


async def read_text(path: str | Path) -> str:
    """Read a UTF-8 text file without blocking the event loop."""
    return await asyncio.to_thread(Path(path).read_text, encoding="utf-8")


async def write_text(path: str | Path, content: str) -> Path:
    """Write *content* to *path*, creating parent directories first."""
    out = Path(path)
    await asyncio.to_thread(_write_file, out, content)
    return out


def _write_file(path: Path, content: str) -> None:
    """Synchronous helper: create parent dirs and write content."""
    ensure_dir(path.parent)
    path.write_text(content, encoding="utf-8")


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_summary_table(data: dict[str, Any], title: str = "Summary") -> None:
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
