"""kubectl operations used by the resource commands."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Set

from .errors import ToolError, UsageError
from .listing import Listing
from .process import ToolCommands
from .request import ResourceRequest
from .text import split

log = logging.getLogger(__name__)


def _namespace_args(namespace: Optional[str]) -> List[str]:
    return ["-n", namespace] if namespace else []


@dataclass
class Kubectl(ToolCommands):
    binary: str = "kubectl"

    def list_resources(self, request: ResourceRequest) -> str:
        """Raw ``kubectl get`` table for the request's type and scope."""
        return self.output(
            ["get", request.resource_type, *request.namespace_args(), *request.list_options]
        )

    def resource_type_names(self) -> Set[str]:
        """Every name kubectl accepts for a resource type on this cluster.

        Includes plural names, short names, lower-cased kinds and the
        fully-qualified ``name.group`` form. kubectl exits 1 when one API
        group fails discovery but still prints every other group, so a
        non-empty table is used as is.
        """
        result = self.run(["api-resources"])
        listing = Listing.parse(result.stdout or "")
        if result.returncode != 0:
            if listing.empty:
                raise ToolError(self.binary, result.returncode, result.stderr)
            log.warning(
                "%s api-resources exited with status %d; using the partial list: %s",
                self.binary,
                result.returncode,
                (result.stderr or "").strip(),
            )
        table = listing.columns()
        names: Set[str] = set()
        for row in listing.rows:
            name = table.value(row, "NAME")
            if not name:
                continue
            names.add(name)
            shortnames = table.value(row, "SHORTNAMES")
            if shortnames:
                names.update(s for s in split(",", shortnames) if s)
            kind = table.value(row, "KIND")
            if kind:
                names.add(kind.lower())
            api_version = table.value(row, "APIVERSION")
            if api_version and "/" in api_version:
                names.add(f"{name}.{api_version.split('/', 1)[0]}")
        return names

    def jsonpath(
        self, ref: str, namespace: Optional[str], path: str
    ) -> str:
        return self.output(
            ["get", ref, *_namespace_args(namespace), "-o", f"jsonpath={path}"]
        )

    def container_names(self, pod: str, namespace: Optional[str]) -> List[str]:
        """Regular containers first, then init containers."""
        ref = f"pods/{pod}"
        names: List[str] = []
        for path in ("{.spec.containers[*].name}", "{.spec.initContainers[*].name}"):
            names.extend(self.jsonpath(ref, namespace, path).split())
        return names

    def secret_data(self, name: str, namespace: Optional[str]) -> Dict[str, str]:
        """The secret's ``data`` map: key -> base64 value.

        The map is parsed as JSON, so keys holding quote characters or other
        punctuation come back intact.
        """
        raw = self.jsonpath(f"secrets/{name}", namespace, "{.data}").strip()
        if not raw:
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise UsageError(f"Unexpected data in secret {name}: {exc}") from exc
        if not isinstance(data, dict):
            raise UsageError(f"Unexpected data in secret {name}: not a mapping")
        return {str(k): str(v) for k, v in data.items()}

