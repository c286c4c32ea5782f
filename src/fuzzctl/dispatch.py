"""Route the first CLI token to a resource command, a composite command or kubectl."""

from __future__ import annotations

import logging
from typing import Sequence

from .commands import (
    MANIFEST_ACTIONS,
    RESOURCE_CATEGORIES,
    CustomCommand,
    NativeCommand,
    parse_command,
)
from .errors import UsageError
from .manifests import run_manifest_command
from .request import parse_resource_tokens
from .resources import run_resource_command
from .runtime import Tools
from .workspaces import run_workspace_command

log = logging.getLogger(__name__)


def validate_resource_type(tools: Tools, resource_type: str) -> None:
    """Fail unless kubectl knows every comma-separated part of ``resource_type``."""
    known = tools.kubectl.resource_type_names() | RESOURCE_CATEGORIES
    unknown = [part for part in resource_type.split(",") if part not in known]
    if unknown:
        raise UsageError(
            f"Unknown resource type '{', '.join(unknown)}' "
            f"(see '{tools.kubectl.binary} api-resources')"
        )


def dispatch(tools: Tools, tokens: Sequence[str]) -> int:
    tokens = list(tokens)
    if not tokens:
        raise UsageError("Missing command")

    command = parse_command(tokens[0])

    if isinstance(command, NativeCommand):
        if len(tokens) < 2 or tokens[1].startswith("-"):
            raise UsageError(f"'{command.value}' requires a resource type")
        resource_type = tokens[1]
        validate_resource_type(tools, resource_type)
        request = parse_resource_tokens(resource_type, tokens[2:])
        return run_resource_command(tools, command, request)

    if isinstance(command, CustomCommand):
        if command in MANIFEST_ACTIONS:
            return run_manifest_command(tools, command, tokens[1:])
        return run_workspace_command(tools, command, tokens[1:])

    log.warning("'%s' is not a fuzzctl command; passing through to %s", tokens[0], tools.kubectl.binary)
    return tools.kubectl.stream(tokens)
