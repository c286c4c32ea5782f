"""Runtime settings: tool binaries, selector options and output toggles.

Settings are resolved from model defaults, then an optional YAML file, then
``FUZZCTL_*`` environment variables (highest precedence).
"""

from __future__ import annotations

import os
import shlex
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .errors import UsageError

DEFAULT_CONFIG_PATH = Path("~/.config/fuzzctl/config.yaml")

ENV_OVERRIDES = {
    "FUZZCTL_KUBECTL": "kubectl",
    "FUZZCTL_KUSTOMIZE": "kustomize",
    "FUZZCTL_TERRAFORM": "terraform",
    "FUZZCTL_FZF": "fzf",
    "FUZZCTL_FZF_OPTS": "fzf_options",
    "FUZZCTL_SECRETS_FILTER": "secrets_filter",
}

_TRUTHY = {"1", "true", "yes", "on"}


class Settings(BaseModel):
    """Resolved configuration for one invocation."""

    kubectl: str = "kubectl"
    kustomize: str = "kustomize"
    terraform: str = "terraform"
    fzf: str = "fzf"
    fzf_options: List[str] = Field(
        default_factory=lambda: ["--height", "60%", "--layout", "reverse", "--border"]
    )
    secrets_filter: List[str] = Field(
        default_factory=lambda: ["vals", "eval", "-f", "-"],
        description="Filter stage injecting secrets into rendered manifests",
    )
    kustomization_markers: List[str] = Field(
        default_factory=lambda: [
            "kustomization.yaml",
            "kustomization.yml",
            "Kustomization",
        ]
    )
    color: bool = True
    verbose: bool = False

    @field_validator("kubectl", "kustomize", "terraform", "fzf")
    @classmethod
    def _non_empty_binary(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("tool binary cannot be empty")
        return value.strip()

    @field_validator("fzf_options", "secrets_filter", mode="before")
    @classmethod
    def _split_argv(cls, value: Any) -> Any:
        if isinstance(value, str):
            return shlex.split(value)
        return value

    @field_validator("secrets_filter")
    @classmethod
    def _filter_has_command(cls, value: List[str]) -> List[str]:
        if not value:
            raise ValueError("secrets_filter must name a command")
        return value

    @field_validator("kustomization_markers")
    @classmethod
    def _markers_present(cls, value: List[str]) -> List[str]:
        if not value:
            raise ValueError("at least one kustomization marker is required")
        return value


def _read_config_file(path: Path) -> Dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise UsageError(f"Failed to parse config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise UsageError(f"Config at {path} must be a mapping")
    return data


def _env_overrides(environ: Mapping[str, str]) -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    for var, field in ENV_OVERRIDES.items():
        value = environ.get(var)
        if value:
            overrides[field] = value
    if environ.get("FUZZCTL_VERBOSE", "").strip().lower() in _TRUTHY:
        overrides["verbose"] = True
    # https://no-color.org: presence disables color regardless of value
    if environ.get("NO_COLOR"):
        overrides["color"] = False
    return overrides


def resolve_config_path(
    explicit: Optional[str], environ: Mapping[str, str]
) -> Optional[Path]:
    if explicit:
        path = Path(explicit).expanduser()
        if not path.exists():
            raise UsageError(f"Config file not found: {path}")
        return path
    if environ.get("FUZZCTL_CONFIG"):
        path = Path(environ["FUZZCTL_CONFIG"]).expanduser()
        if not path.exists():
            raise UsageError(f"Config file not found: {path}")
        return path
    default = DEFAULT_CONFIG_PATH.expanduser()
    return default if default.exists() else None


def load_settings(
    config_path: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Settings:
    environ = os.environ if environ is None else environ
    data: Dict[str, Any] = {}
    path = resolve_config_path(config_path, environ)
    if path is not None:
        data.update(_read_config_file(path))
    data.update(_env_overrides(environ))
    try:
        return Settings.model_validate(data)
    except ValidationError as exc:
        raise UsageError(f"Invalid configuration: {exc}") from exc
