"""Typed description of a resource command parsed from raw CLI tokens."""

from __future__ import annotations

from enum import Enum
from typing import List, Optional, Sequence

from pydantic import BaseModel, Field, model_validator

from .errors import UsageError

SEPARATOR = "--"

NAMESPACE_FLAGS = ("-n", "--namespace")
ALL_NAMESPACES_FLAGS = ("-A", "--all-namespaces")
LIST_OPTION_FLAGS = ("-l", "--selector", "--field-selector")


class Scope(str, Enum):
    NONE = "none"
    NAMESPACE = "namespace"
    ALL = "all"


class ResourceRequest(BaseModel):
    """A resource type plus the options that travel with it."""

    resource_type: str
    scope: Scope = Scope.NONE
    namespace: Optional[str] = None
    options: List[str] = Field(default_factory=list)
    list_options: List[str] = Field(default_factory=list)
    extra_args: List[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _scope_matches_namespace(self) -> "ResourceRequest":
        if self.scope == Scope.NAMESPACE and not self.namespace:
            raise ValueError("namespace scope requires a namespace")
        if self.scope != Scope.NAMESPACE and self.namespace:
            raise ValueError("namespace given without namespace scope")
        return self

    def namespace_args(self) -> List[str]:
        if self.scope == Scope.ALL:
            return ["-A"]
        if self.scope == Scope.NAMESPACE:
            return ["-n", self.namespace]
        return []


def _flag_value(token: str, flags: Sequence[str]) -> Optional[str]:
    """Value attached to a flag token (``--flag=v`` or ``-fv``), if any."""
    for flag in flags:
        if flag.startswith("--") and token.startswith(flag + "="):
            return token[len(flag) + 1:]
        if not flag.startswith("--") and token.startswith(flag) and token != flag:
            value = token[len(flag):]
            return value[1:] if value.startswith("=") else value
    return None


def parse_resource_tokens(resource_type: str, tokens: Sequence[str]) -> ResourceRequest:
    """Split the tokens following a resource type into a ``ResourceRequest``.

    Namespace flags set the scope, selector flags go to the listing, a literal
    ``--`` starts a tail forwarded verbatim, and anything else is an option
    for the final sub-invocation.
    """
    scope = Scope.NONE
    namespace: Optional[str] = None
    options: List[str] = []
    list_options: List[str] = []
    extra_args: List[str] = []

    remaining = list(tokens)
    i = 0
    while i < len(remaining):
        token = remaining[i]
        if token == SEPARATOR:
            extra_args = remaining[i + 1:]
            break
        if token in ALL_NAMESPACES_FLAGS:
            scope, namespace = Scope.ALL, None
        elif token in NAMESPACE_FLAGS:
            if i + 1 >= len(remaining) or remaining[i + 1] == SEPARATOR:
                raise UsageError(f"{token} requires a namespace argument")
            i += 1
            scope, namespace = Scope.NAMESPACE, remaining[i]
        elif _flag_value(token, NAMESPACE_FLAGS) is not None:
            value = _flag_value(token, NAMESPACE_FLAGS)
            if not value:
                raise UsageError(f"{token} requires a namespace argument")
            scope, namespace = Scope.NAMESPACE, value
        elif token in LIST_OPTION_FLAGS:
            if i + 1 >= len(remaining):
                raise UsageError(f"{token} requires a value")
            i += 1
            list_options.extend([token, remaining[i]])
        elif _flag_value(token, LIST_OPTION_FLAGS) is not None:
            list_options.append(token)
        elif token:
            options.append(token)
        i += 1

    return ResourceRequest(
        resource_type=resource_type,
        scope=scope,
        namespace=namespace,
        options=options,
        list_options=list_options,
        extra_args=extra_args,
    )
