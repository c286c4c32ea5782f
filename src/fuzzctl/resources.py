"""Resource commands: list, pick, then run kubectl once per picked row."""

from __future__ import annotations

import base64
import binascii
import logging
from typing import List, Optional, Tuple

from .colorize import colorize
from .commands import POD_TYPES, SECRET_TYPES, NativeCommand, traits_for
from .errors import UsageError
from .listing import ColumnTable, Listing, Selection
from .request import ResourceRequest, Scope
from .runtime import Tools
from .selector import require_selection

log = logging.getLogger(__name__)

OUTPUT_FLAGS = ("-o", "--output")
CONTAINER_FLAGS = ("-c", "--container")


def split_action(command: NativeCommand, options: List[str]) -> Tuple[List[str], List[str]]:
    """Pull the sub-action (``rollout restart``) out of the option tokens."""
    if not traits_for(command).takes_action:
        return [], list(options)
    for index, token in enumerate(options):
        if not token.startswith("-"):
            rest = options[:index] + options[index + 1:]
            return [token], rest
    raise UsageError(f"'{command.value}' requires an action, e.g. '{command.value} <type> restart'")


def _word_at(words: List[str], table: ColumnTable, column: str) -> Optional[str]:
    index = table.index(column)
    if index is None or index >= len(words):
        return None
    return words[index]


def resolve_selection(
    row: str, table: Optional[ColumnTable], request: ResourceRequest
) -> Selection:
    """Name and namespace of a picked row.

    Namespace comes from the NAMESPACE column for ``-A`` listings, from the
    ``-n`` flag otherwise, and is None (shown as n/a) when neither applies.
    """
    words = row.split()
    if not words:
        raise UsageError("Selected row is empty")

    if request.scope == Scope.ALL and table is not None:
        # NAMESPACE and NAME are never blank, so word positions hold even in
        # the differently aligned tables of a multi-type listing
        name = _word_at(words, table, "NAME") or words[0]
        namespace = _word_at(words, table, "NAMESPACE")
        if namespace is None:
            log.debug("No NAMESPACE column in listing; namespace n/a for %s", name)
        return Selection(name=name, namespace=namespace)

    namespace = request.namespace if request.scope == Scope.NAMESPACE else None
    return Selection(name=words[0], namespace=namespace)


def resource_ref(resource_type: str, name: str) -> str:
    # multi-type listings (``all``, ``pods,services``) print names as type/name
    return name if "/" in name else f"{resource_type}/{name}"


def build_invocation(
    command: NativeCommand,
    request: ResourceRequest,
    selection: Selection,
    container: Optional[str] = None,
) -> List[str]:
    traits = traits_for(command)
    action, options = split_action(command, request.options)
    args = [traits.kubectl_verb, *action, resource_ref(request.resource_type, selection.name)]
    if selection.namespace:
        args.extend(["-n", selection.namespace])
    args.extend(options)
    if command is NativeCommand.VIEW and not any(
        opt in OUTPUT_FLAGS or opt.startswith("--output=") or opt.startswith("-o")
        for opt in options
    ):
        args.extend(["-o", "yaml"])
    if container:
        args.extend(["-c", container])
    args = [arg for arg in args if arg.strip()]
    if request.extra_args:
        if traits.separator_tail:
            args.append("--")
        args.extend(request.extra_args)
    return args


def select_container(tools: Tools, selection: Selection) -> str:
    names = tools.kubectl.container_names(selection.name, selection.namespace)
    if not names:
        raise UsageError(f"No containers found in pod {selection.name}")
    chosen = tools.selector.select(names, prompt=f"Container in {selection.name}")
    return require_selection(chosen, "container")[0].strip()


def view_secret(tools: Tools, selection: Selection) -> int:
    """Let the user pick keys of a secret and print their decoded values."""
    data = tools.kubectl.secret_data(selection.name, selection.namespace)
    if not data:
        log.warning("Secret %s has no data keys", selection.describe())
        return 0

    chosen = tools.selector.select(
        sorted(data), prompt=f"Keys of secret {selection.name}", multi=True
    )
    for key in require_selection(chosen, "secret key"):
        if key not in data:
            raise UsageError(f"Key {key!r} not found in secret {selection.name}")
        try:
            value = base64.b64decode(data[key], validate=True)
        except binascii.Error as exc:
            raise UsageError(f"Key {key!r} in secret {selection.name} is not base64: {exc}") from exc
        print(value.decode("utf-8", errors="replace"))
        print()
    return 0


def run_for_selection(
    tools: Tools, command: NativeCommand, request: ResourceRequest, selection: Selection
) -> int:
    resource_type = request.resource_type.lower()
    if command is NativeCommand.VIEW and resource_type in SECRET_TYPES:
        return view_secret(tools, selection)

    container = None
    chosen_by_user = any(
        opt in CONTAINER_FLAGS or opt.startswith("--container=") for opt in request.options
    )
    if traits_for(command).container_select and resource_type in POD_TYPES and not chosen_by_user:
        container = select_container(tools, selection)

    return tools.kubectl.stream(build_invocation(command, request, selection, container))


def run_resource_command(
    tools: Tools, command: NativeCommand, request: ResourceRequest
) -> int:
    """List, select, and run ``command`` for each selected resource.

    Every selection is processed even after a failure; the result is the
    first non-zero exit status, or 0.
    """
    traits = traits_for(command)
    # fail on a missing rollout action before opening any selector
    split_action(command, request.options)

    listing = Listing.parse(tools.kubectl.list_resources(request))
    if listing.empty:
        log.warning("No resource found for type %s", request.resource_type)
        return 0

    table = listing.columns() if request.scope == Scope.ALL else None
    text = "\n".join([listing.header or "", *listing.rows])
    candidates = colorize(request.resource_type, text, enabled=tools.color).splitlines()

    chosen = tools.selector.select(
        candidates,
        prompt=f"{command.value} {request.resource_type}",
        multi=traits.multi_select,
        header_lines=1,
    )
    selections = [
        resolve_selection(row, table, request)
        for row in require_selection(chosen, request.resource_type)
    ]

    status = 0
    for selection in selections:
        log.info("%s %s", command.value, selection.describe())
        code = run_for_selection(tools, command, request, selection)
        if code != 0:
            log.error("%s %s failed with status %d", command.value, selection.describe(), code)
            if status == 0:
                status = code
    return status
