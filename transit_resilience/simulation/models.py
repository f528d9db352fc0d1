from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Tuple, Any, Sequence, Union

from transit_resilience.core.models import FailureKind

from .graph import TransportGraph

#: Edge targets are "from_to" keys or (from, to) tuples
FailureTarget = Union[str, Tuple[str, str]]


@dataclass
class FailureScenario:
    """What to remove from the network."""
    kind: FailureKind = FailureKind.NONE
    targets: Sequence[FailureTarget] = field(default_factory=list)
    description: str = ""

    def __post_init__(self):
        self.kind = FailureKind.from_string(self.kind)
        self.targets = list(self.targets or [])
        if not self.description:
            if self.kind is FailureKind.NONE or not self.targets:
                self.description = "No failure"
            else:
                shown = ", ".join(_target_label(t) for t in self.targets)
                self.description = f"{self.kind.value} failure: {shown}"


@dataclass
class FailureResult:
    """Outcome of applying a FailureScenario to a graph."""
    scenario: FailureScenario
    graph: TransportGraph
    removed_nodes: List[str] = field(default_factory=list)
    removed_links: List[Tuple[str, str]] = field(default_factory=list)
    ignored_targets: List[Any] = field(default_factory=list)

    @property
    def is_noop(self) -> bool:
        return not self.removed_nodes and not self.removed_links


def _target_label(target: FailureTarget) -> str:
    if isinstance(target, (tuple, list)):
        return "_".join(str(t) for t in target)
    return str(target)
