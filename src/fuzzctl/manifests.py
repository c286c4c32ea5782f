"""kustomize build / apply / delete over an interactively chosen overlay."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Sequence, Tuple

from .commands import MANIFEST_ACTIONS, CustomCommand
from .errors import UsageError
from .process import format_pipeline, run_pipeline
from .request import SEPARATOR
from .runtime import Tools
from .selector import require_selection

log = logging.getLogger(__name__)


def find_kustomizations(root: Path, markers: Sequence[str]) -> List[Path]:
    """Every directory under ``root`` (inclusive) holding a kustomization file."""
    if not root.is_dir():
        raise UsageError(f"Manifest root {root} is not a directory")
    found = set()
    for marker in markers:
        for path in root.rglob(marker):
            if path.is_file():
                found.add(path.parent)
    return sorted(found)


def build_stages(
    tools: Tools,
    command: CustomCommand,
    folder: str,
    extra_args: Sequence[str] = (),
) -> List[List[str]]:
    action = MANIFEST_ACTIONS[command]
    stages = [tools.kustomize.argv(["build", folder])]
    if action.inject_secrets:
        stages.append(list(tools.settings.secrets_filter))
    if action.kubectl_verb:
        stages.append(tools.kubectl.argv([action.kubectl_verb, "-f", "-", *extra_args]))
    else:
        stages[0].extend(extra_args)
    return stages


def parse_manifest_args(args: Sequence[str]) -> Tuple[Path, List[str]]:
    """``[root] [-- extra...]`` -> (root, extra args)."""
    args = list(args)
    extra: List[str] = []
    if SEPARATOR in args:
        cut = args.index(SEPARATOR)
        args, extra = args[:cut], args[cut + 1:]
    if len(args) > 1:
        raise UsageError(f"Expected at most one manifest root, got: {' '.join(args)}")
    return Path(args[0] if args else "."), extra


def run_manifest_command(tools: Tools, command: CustomCommand, args: Sequence[str]) -> int:
    root, extra = parse_manifest_args(args)
    folders = find_kustomizations(root, tools.settings.kustomization_markers)
    if not folders:
        raise UsageError(f"No kustomization found under {root}")

    chosen = tools.selector.select(
        [str(folder) for folder in folders],
        prompt=f"{command.value}: kustomization folder",
        multi=True,
    )
    folder = require_selection(chosen, "kustomization folder")[0].strip()
    if len(chosen) > 1:
        log.warning("Several folders selected; using %s", folder)

    stages = build_stages(tools, command, folder, extra)
    log.info("%s", format_pipeline(stages))
    return run_pipeline(stages)
