"""Tool handles shared by every command of one invocation."""

from __future__ import annotations

from dataclasses import dataclass, field

from .config import Settings
from .kubectl import Kubectl
from .process import ToolCommands
from .selector import FzfSelector


@dataclass
class Tools:
    settings: Settings
    kubectl: Kubectl
    kustomize: ToolCommands
    terraform: ToolCommands
    selector: FzfSelector = field(default_factory=FzfSelector)

    @property
    def color(self) -> bool:
        return self.settings.color


def build_tools(settings: Settings) -> Tools:
    return Tools(
        settings=settings,
        kubectl=Kubectl(binary=settings.kubectl),
        kustomize=ToolCommands(binary=settings.kustomize),
        terraform=ToolCommands(binary=settings.terraform),
        selector=FzfSelector(binary=settings.fzf, options=list(settings.fzf_options)),
    )
