"""terraform plan / apply / destroy / workspace delete on a chosen workspace."""

from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from .commands import WORKSPACE_ACTIONS, CustomCommand
from .errors import UsageError
from .process import ToolCommands, format_command
from .request import SEPARATOR
from .runtime import Tools
from .selector import require_selection

log = logging.getLogger(__name__)

DEFAULT_WORKSPACE = "default"
CURRENT_MARKER = "*"


def parse_workspace_names(output: str) -> List[str]:
    """Names from ``terraform workspace list``, without the ``*`` marker."""
    names = []
    for line in output.splitlines():
        name = line.strip().lstrip(CURRENT_MARKER).strip()
        if name:
            names.append(name)
    return names


def parse_workspace_args(args: Sequence[str]) -> Tuple[Optional[str], List[str]]:
    """``[dir] [-- extra...]`` -> (working directory, extra args)."""
    args = list(args)
    extra: List[str] = []
    if SEPARATOR in args:
        cut = args.index(SEPARATOR)
        args, extra = args[:cut], args[cut + 1:]
    if len(args) > 1:
        raise UsageError(f"Expected at most one terraform directory, got: {' '.join(args)}")
    if args and not Path(args[0]).is_dir():
        raise UsageError(f"Terraform directory {args[0]} does not exist")
    return (args[0] if args else None), extra


def _step(terraform: ToolCommands, args: List[str]) -> int:
    log.info("%s", format_command(terraform.argv(args)))
    return terraform.stream(args)


def run_workspace_command(tools: Tools, command: CustomCommand, args: Sequence[str]) -> int:
    workdir, extra = parse_workspace_args(args)
    terraform = replace(tools.terraform, cwd=workdir) if workdir else tools.terraform

    workspaces = parse_workspace_names(terraform.output(["workspace", "list"]))
    if not workspaces:
        raise UsageError("No terraform workspace found")

    chosen = tools.selector.select(workspaces, prompt=f"{command.value}: terraform workspace")
    workspace = require_selection(chosen, "workspace")[0].strip().lstrip(CURRENT_MARKER).strip()

    action = WORKSPACE_ACTIONS[command]
    if action is None:
        if workspace == DEFAULT_WORKSPACE:
            raise UsageError("The default workspace cannot be deleted")
        # terraform refuses to delete the active workspace
        status = _step(terraform, ["workspace", "select", DEFAULT_WORKSPACE])
        if status != 0:
            return status
        return _step(terraform, ["workspace", "delete", *extra, workspace])

    status = _step(terraform, ["workspace", "select", workspace])
    if status != 0:
        return status
    return _step(terraform, [action, *extra])
