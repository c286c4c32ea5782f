"""Command vocabulary and the static behaviour table for each command."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Union


class NativeCommand(str, Enum):
    """Commands named like their kubectl counterpart; they act on a resource."""

    EXEC = "exec"
    LOGS = "logs"
    DESCRIBE = "describe"
    DELETE = "delete"
    ROLLOUT = "rollout"
    SCALE = "scale"
    AUTOSCALE = "autoscale"
    LABEL = "label"
    ANNOTATE = "annotate"
    VIEW = "view"


class CustomCommand(str, Enum):
    """Composite commands: kustomize pipelines and terraform workspace actions."""

    KUSTOMIZE_BUILD = "kb"
    KUSTOMIZE_APPLY = "ka"
    KUSTOMIZE_DELETE = "kd"
    KUSTOMIZE_BUILD_SECRETS = "kbv"
    KUSTOMIZE_APPLY_SECRETS = "kav"
    KUSTOMIZE_DELETE_SECRETS = "kdv"
    TERRAFORM_PLAN = "tp"
    TERRAFORM_APPLY = "ta"
    TERRAFORM_DESTROY = "td"
    TERRAFORM_WORKSPACE_DELETE = "twd"


@dataclass(frozen=True)
class CommandTraits:
    kubectl_verb: str
    multi_select: bool = False
    container_select: bool = False
    # re-insert "--" before the trailing tail (exec runs a command in the pod)
    separator_tail: bool = False
    # first positional option is a sub-action placed before the resource
    takes_action: bool = False


COMMAND_TRAITS: Dict[NativeCommand, CommandTraits] = {
    NativeCommand.EXEC: CommandTraits(
        "exec", container_select=True, separator_tail=True
    ),
    NativeCommand.LOGS: CommandTraits("logs", container_select=True),
    NativeCommand.DESCRIBE: CommandTraits("describe"),
    NativeCommand.DELETE: CommandTraits("delete", multi_select=True),
    NativeCommand.ROLLOUT: CommandTraits("rollout", takes_action=True),
    NativeCommand.SCALE: CommandTraits("scale"),
    NativeCommand.AUTOSCALE: CommandTraits("autoscale"),
    NativeCommand.LABEL: CommandTraits("label"),
    NativeCommand.ANNOTATE: CommandTraits("annotate"),
    NativeCommand.VIEW: CommandTraits("get"),
}


@dataclass(frozen=True)
class ManifestAction:
    inject_secrets: bool
    kubectl_verb: Optional[str]  # None: print the rendered manifests


MANIFEST_ACTIONS: Dict[CustomCommand, ManifestAction] = {
    CustomCommand.KUSTOMIZE_BUILD: ManifestAction(False, None),
    CustomCommand.KUSTOMIZE_APPLY: ManifestAction(False, "apply"),
    CustomCommand.KUSTOMIZE_DELETE: ManifestAction(False, "delete"),
    CustomCommand.KUSTOMIZE_BUILD_SECRETS: ManifestAction(True, None),
    CustomCommand.KUSTOMIZE_APPLY_SECRETS: ManifestAction(True, "apply"),
    CustomCommand.KUSTOMIZE_DELETE_SECRETS: ManifestAction(True, "delete"),
}

# None: delete the workspace instead of running a terraform action in it
WORKSPACE_ACTIONS: Dict[CustomCommand, Optional[str]] = {
    CustomCommand.TERRAFORM_PLAN: "plan",
    CustomCommand.TERRAFORM_APPLY: "apply",
    CustomCommand.TERRAFORM_DESTROY: "destroy",
    CustomCommand.TERRAFORM_WORKSPACE_DELETE: None,
}

SECRET_TYPES = frozenset({"secret", "secrets"})
POD_TYPES = frozenset({"pod", "pods", "po"})
# categories kubectl expands to several types; api-resources does not list them
RESOURCE_CATEGORIES = frozenset({"all"})


def parse_command(token: str) -> Optional[Union[NativeCommand, CustomCommand]]:
    """Return the command named by ``token``, or None for passthrough."""
    for enum_cls in (NativeCommand, CustomCommand):
        try:
            return enum_cls(token)
        except ValueError:
            continue
    return None


def traits_for(command: NativeCommand) -> CommandTraits:
    return COMMAND_TRAITS[command]
