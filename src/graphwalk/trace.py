"""Step trace model for depth-first traversals."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Visit:
    """A node is visited for the first time."""

    node: str


@dataclass(frozen=True)
class Backtrack:
    """Traversal returns from the finished subtree at source to its caller target."""

    source: str
    target: str


@dataclass(frozen=True)
class Jump:
    """Traversal starts a new component at target; no edge leads there."""

    target: str


TraceStep = Visit | Backtrack | Jump


def visit_order(trace: Iterable[TraceStep]) -> list[str]:
    """Project a trace onto its visited nodes, in order."""
    return [step.node for step in trace if isinstance(step, Visit)]


def as_trace(steps: Sequence[TraceStep] | Sequence[str]) -> list[TraceStep]:
    """Normalize a trace or a bare sequence of ids into a trace.

    A sequence of ids is the legacy format: each id becomes a Visit step.
    """
    result: list[TraceStep] = []
    for step in steps:
        if isinstance(step, str):
            result.append(Visit(step))
        elif isinstance(step, (Visit, Backtrack, Jump)):
            result.append(step)
        else:
            raise TypeError(f"Not a trace step: {step!r}")
    return result


def step_to_dict(step: TraceStep) -> dict[str, Any]:
    """Convert a step to a JSON-friendly dict."""
    if isinstance(step, Visit):
        return {"type": "visit", "node": step.node}
    if isinstance(step, Backtrack):
        return {"type": "backtrack", "from": step.source, "to": step.target}
    return {"type": "jump", "to": step.target}


@dataclass
class TraversalResult:
    """Outcome of one traversal.

    Attributes:
        order: Nodes in first-visit sequence.
        trace: Every step of the traversal.
    """

    order: list[str] = field(default_factory=list)
    trace: list[TraceStep] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "order": list(self.order),
            "trace": [step_to_dict(step) for step in self.trace],
        }
