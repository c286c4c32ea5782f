"""Subprocess wrappers for the external tools fuzzctl drives."""

from __future__ import annotations

import logging
import shlex
import subprocess
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .errors import ToolError, UsageError

log = logging.getLogger(__name__)


def format_command(args: Sequence[str]) -> str:
    return shlex.join(list(args))


def format_pipeline(stages: Sequence[Sequence[str]]) -> str:
    return " | ".join(format_command(stage) for stage in stages)


@dataclass
class ToolCommands:
    """Thin wrapper around one tool binary to allow mocking in tests."""

    binary: str
    cwd: Optional[str] = None

    def argv(self, args: Sequence[str]) -> List[str]:
        return [self.binary, *args]

    def run(self, args: Sequence[str]) -> subprocess.CompletedProcess:
        """Run with captured stdout/stderr; never raises on exit status."""
        cmd = self.argv(args)
        log.debug("$ %s", format_command(cmd))
        try:
            return subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                check=False,
                cwd=self.cwd,
            )
        except FileNotFoundError as exc:
            raise UsageError(f"{self.binary} not found on PATH") from exc

    def output(self, args: Sequence[str]) -> str:
        """Run with captured output and raise ``ToolError`` on failure."""
        result = self.run(args)
        if result.returncode != 0:
            raise ToolError(self.binary, result.returncode, result.stderr)
        return result.stdout

    def stream(self, args: Sequence[str]) -> int:
        """Run attached to the user's terminal and return the exit status."""
        cmd = self.argv(args)
        log.debug("$ %s", format_command(cmd))
        try:
            return subprocess.run(cmd, check=False, cwd=self.cwd).returncode
        except FileNotFoundError as exc:
            raise UsageError(f"{self.binary} not found on PATH") from exc


def run_pipeline(stages: Sequence[Sequence[str]], cwd: Optional[str] = None) -> int:
    """Run ``stages`` connected stdout-to-stdin, like a shell pipeline.

    The first stage reads the user's stdin and the last stage writes to the
    user's stdout. Returns the rightmost non-zero exit status (``pipefail``),
    or 0 when every stage succeeds.
    """
    if not stages:
        raise ValueError("pipeline needs at least one stage")

    procs: List[subprocess.Popen] = []
    upstream = None
    try:
        for index, stage in enumerate(stages):
            last = index == len(stages) - 1
            try:
                proc = subprocess.Popen(
                    list(stage),
                    stdin=upstream,
                    stdout=None if last else subprocess.PIPE,
                    cwd=cwd,
                )
            except FileNotFoundError as exc:
                raise UsageError(f"{stage[0]} not found on PATH") from exc
            # Parent drops its copy so the upstream stage sees SIGPIPE.
            if upstream is not None:
                upstream.close()
            upstream = proc.stdout
            procs.append(proc)
    finally:
        if upstream is not None:
            upstream.close()
        codes = [proc.wait() for proc in procs]

    status = 0
    for code in codes:
        if code != 0:
            status = code
    return status
