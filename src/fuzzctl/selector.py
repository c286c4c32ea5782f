"""fzf-backed interactive line picker."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass, field
from typing import List, Sequence

from .errors import ToolError, UsageError
from .process import format_command
from .text import strip_ansi

log = logging.getLogger(__name__)

# fzf exit codes: 1 = no match, 130 = interrupted with CTRL-C or ESC
FZF_NO_MATCH = 1
FZF_ABORTED = 130


@dataclass
class FzfSelector:
    binary: str = "fzf"
    options: List[str] = field(default_factory=list)

    def command(self, prompt: str, multi: bool, header_lines: int) -> List[str]:
        cmd = [self.binary, "--ansi", *self.options, "--header", prompt]
        cmd.append("--multi" if multi else "--no-multi")
        if header_lines:
            cmd.extend(["--header-lines", str(header_lines)])
        return cmd

    def select(
        self,
        candidates: Sequence[str],
        prompt: str,
        multi: bool = False,
        header_lines: int = 0,
    ) -> List[str]:
        """Return the chosen lines, or an empty list if the user aborted."""
        if len(candidates) <= header_lines:
            return []

        cmd = self.command(prompt, multi, header_lines)
        log.debug("$ %s", format_command(cmd))
        try:
            # stderr stays attached: fzf draws its UI on the terminal there
            proc = subprocess.run(
                cmd,
                input="\n".join(candidates) + "\n",
                stdout=subprocess.PIPE,
                text=True,
                check=False,
            )
        except FileNotFoundError as exc:
            raise UsageError(f"{self.binary} not found on PATH") from exc

        if proc.returncode in (FZF_NO_MATCH, FZF_ABORTED):
            return []
        if proc.returncode != 0:
            raise ToolError(self.binary, proc.returncode)
        chosen = [strip_ansi(line) for line in proc.stdout.splitlines()]
        return [line for line in chosen if line.strip()]


def require_selection(chosen: List[str], what: str) -> List[str]:
    if not chosen:
        raise UsageError(f"No {what} selected")
    return chosen
