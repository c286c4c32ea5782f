"""Status-based row coloring for pod listings."""

from __future__ import annotations

from typing import List, Optional

from .commands import POD_TYPES
from .listing import ColumnTable

RESET = "\033[0m"
GREEN = "\033[32m"
GREY = "\033[90m"
YELLOW = "\033[33m"
RED = "\033[31m"

STATUS_COLORS = {
    "Running": GREEN,
    "Completed": GREY,
    "Succeeded": GREY,
    "Pending": YELLOW,
}


def status_color(status: Optional[str]) -> str:
    return STATUS_COLORS.get(status or "", RED)


def colorize(resource_type: str, text: str, enabled: bool = True) -> str:
    """Recolor pod rows by their STATUS column; other listings pass through.

    Line count and order are always preserved.
    """
    if not enabled or resource_type.lower() not in POD_TYPES or not text:
        return text

    lines = text.splitlines()
    table = ColumnTable.from_header(lines[0])
    if table.index("STATUS") is None:
        return text

    out: List[str] = [RESET + lines[0]]
    for line in lines[1:]:
        if not line.strip():
            out.append(line)
            continue
        color = status_color(table.value(line, "STATUS"))
        out.append(f"{color}{line}{RESET}")
    trailing = "\n" if text.endswith("\n") else ""
    return "\n".join(out) + trailing
