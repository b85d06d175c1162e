"""Terminal rendering for CLI output - tables, JSON and status lines."""

from __future__ import annotations

import json
import os
import sys
from collections.abc import Sequence
from typing import Any, TextIO

from .models import Issue, LookupItem, NamedRef, SearchResult, User


class Colors:
    """ANSI color codes for terminal output."""

    RESET = "\033[0m"
    BOLD = "\033[1m"
    RED = "\033[31m"
    YELLOW = "\033[33m"


def _supports_color(stream: TextIO | None = None) -> bool:
    stream = stream or sys.stdout
    if os.environ.get("NO_COLOR"):
        return False
    if not hasattr(stream, "isatty") or not stream.isatty():
        return False
    return os.environ.get("TERM") != "dumb"


def colorize(text: str, color: str, bold: bool = False, stream: TextIO | None = None) -> str:
    """Apply color to text if terminal supports it."""
    if not _supports_color(stream):
        return text
    prefix = (Colors.BOLD if bold else "") + color
    return f"{prefix}{text}{Colors.RESET}"


def print_error(message: str, stream: TextIO | None = None) -> None:
    """Print error message in red."""
    stream = stream or sys.stderr
    print(colorize("error:", Colors.RED, bold=True, stream=stream) + " " + message, file=stream)

def render_table(
    headers: Sequence[str], rows: Sequence[Sequence[Any]], stream: TextIO | None = None
) -> None:
    """Left-aligned columns separated by two spaces (tabwriter style)."""
    stream = stream or sys.stdout
    cells = [[str(h) for h in headers]] + [[str(c) for c in row] for row in rows]
    widths = [max(len(row[i]) for row in cells) for i in range(len(headers))]
    for row in cells:
        line = "  ".join(cell.ljust(widths[i]) for i, cell in enumerate(row))
        print(line.rstrip(), file=stream)


def _name(ref: NamedRef | None) -> str:
    return ref.name if ref is not None else ""


def render_issues(issues: Sequence[Issue], stream: TextIO | None = None) -> None:
    rows = [
        (i.id, i.subject, _name(i.status), _name(i.assigned_to), i.updated_on) for i in issues
    ]
    render_table(("ID", "Subject", "Status", "Assignee", "Updated"), rows, stream)


def render_search(results: Sequence[SearchResult], stream: TextIO | None = None) -> None:
    rows = [(r.id, r.type, r.title, r.url) for r in results]
    render_table(("ID", "Type", "Title", "URL"), rows, stream)


def render_lookups(items: Sequence[LookupItem | User], stream: TextIO | None = None) -> None:
    if items and all(isinstance(i, User) for i in items):
        users = [i for i in items if isinstance(i, User)]
        render_table(("ID", "Login", "Name"), [(u.id, u.login, u.full_name) for u in users], stream)
        return
    render_table(("ID", "Name"), [(i.id, i.name) for i in items], stream)


def render_json(value: Any, stream: TextIO | None = None) -> None:
    stream = stream or sys.stdout
    if hasattr(value, "to_dict"):
        value = value.to_dict()
    elif isinstance(value, list):
        value = [v.to_dict() if hasattr(v, "to_dict") else v for v in value]
    stream.write(json.dumps(value, indent=2) + "\n")


__all__ = [
    "colorize",
    "print_error",
    "render_table",
    "render_issues",
    "render_search",
    "render_lookups",
    "render_json",
]
