"""Error types surfaced at the CLI boundary."""

from __future__ import annotations

from typing import Optional


class FuzzctlError(RuntimeError):
    """Base error; ``exit_code`` becomes the process exit status."""

    exit_code: int = 1


class UsageError(FuzzctlError):
    """Bad input, unknown resource type, or an empty required selection."""


class ToolError(FuzzctlError):
    """An external tool exited non-zero while its output was being captured."""

    def __init__(self, tool: str, returncode: int, stderr: Optional[str] = None):
        detail = (stderr or "").strip()
        message = f"{tool} exited with status {returncode}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.tool = tool
        self.exit_code = returncode or 1
        self.stderr = detail
