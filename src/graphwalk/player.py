"""Trace playback for the traversal visualizer.

A Playback turns a recorded trace into frames, one per tick of an external
timer. The TracePlayer keeps the last trace for repeat requests and makes
sure only one playback is active: starting a new one cancels the previous
one first.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass

from graphwalk.store import GraphError
from graphwalk.trace import Backtrack, Jump, TraceStep, Visit, as_trace, visit_order

logger = logging.getLogger(__name__)


class NoTraversalToRepeat(GraphError):
    """Raised when a repeat is requested before any traversal ran."""


def describe_step(step: TraceStep) -> tuple[str, str]:
    """Compute the highlighted node and log line for a step.

    Returns:
        Tuple of (highlighted_node, log_line).
    """
    if isinstance(step, Visit):
        return step.node, f"visiting {step.node}"
    if isinstance(step, Backtrack):
        return step.target, f"backtrack from {step.source} to {step.target}"
    if isinstance(step, Jump):
        return step.target, f"no neighbors remain in this component; jumping to {step.target}"
    raise TypeError(f"Not a trace step: {step!r}")


@dataclass(frozen=True)
class Frame:
    """Display state for one playback tick.

    Attributes:
        index: Position of the step in the trace.
        step: The trace step.
        highlighted: Node to highlight.
        log_line: Human-readable description of the step.
    """

    index: int
    step: TraceStep
    highlighted: str
    log_line: str


class CancelToken:
    """Cancellation flag shared between a playback and its owner."""

    def __init__(self) -> None:
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class Playback:
    """One replay of a trace.

    Example usage:
        >>> playback = Playback([Visit("A"), Visit("B")])
        >>> playback.tick().log_line
        'visiting A'

    Attributes:
        trace: The steps being replayed.
        token: Cancellation token for this playback.
    """

    def __init__(self, trace: Sequence[TraceStep] | Sequence[str], token: CancelToken | None = None) -> None:
        self.trace: list[TraceStep] = as_trace(trace)
        self.token = token or CancelToken()
        self._index = 0
        self._log: list[str] = []

    @property
    def index(self) -> int:
        """Index of the next step to play."""
        return self._index

    @property
    def cancelled(self) -> bool:
        return self.token.cancelled

    @property
    def finished(self) -> bool:
        return self._index >= len(self.trace)

    @property
    def active(self) -> bool:
        return not self.cancelled and not self.finished

    @property
    def log(self) -> list[str]:
        """Log lines emitted so far."""
        return list(self._log)

    @property
    def sequence(self) -> list[str]:
        """Final visit order of the trace."""
        return visit_order(self.trace)

    def frame_at(self, index: int) -> Frame:
        """Compute the frame for a trace index without advancing.

        Raises:
            IndexError: If index is outside the trace.
        """
        if not 0 <= index < len(self.trace):
            raise IndexError(f"Frame index out of range: {index}")
        step = self.trace[index]
        highlighted, log_line = describe_step(step)
        return Frame(index=index, step=step, highlighted=highlighted, log_line=log_line)

    def tick(self) -> Frame | None:
        """Advance one step.

        Returns:
            The frame for the step, or None when the playback is finished
            or has been cancelled.
        """
        if not self.active:
            return None
        frame = self.frame_at(self._index)
        self._index += 1
        self._log.append(frame.log_line)
        return frame

    def frames(self) -> Iterator[Frame]:
        """Yield the remaining frames, stopping early if cancelled."""
        while True:
            frame = self.tick()
            if frame is None:
                return
            yield frame

    def cancel(self) -> None:
        self.token.cancel()


class TracePlayer:
    """Owns the last recorded trace and the active playback."""

    def __init__(self) -> None:
        self._last_trace: list[TraceStep] | None = None
        self._active: Playback | None = None

    @property
    def last_trace(self) -> list[TraceStep] | None:
        return list(self._last_trace) if self._last_trace is not None else None

    @property
    def active(self) -> Playback | None:
        """The current playback, if it is still running."""
        if self._active is not None and self._active.active:
            return self._active
        return None

    def play(self, trace: Sequence[TraceStep] | Sequence[str]) -> Playback:
        """Start a new playback, superseding any running one.

        Args:
            trace: Steps to replay, or a bare sequence of ids (legacy format).

        Returns:
            The new playback.
        """
        self.cancel()
        playback = Playback(trace)
        self._last_trace = list(playback.trace)
        self._active = playback
        logger.debug("Started playback of %d steps", len(playback.trace))
        return playback

    def repeat(self) -> Playback:
        """Replay the last trace verbatim.

        Raises:
            NoTraversalToRepeat: If there is no recorded trace.
        """
        if not self._last_trace:
            raise NoTraversalToRepeat("No traversal to repeat")
        return self.play(self._last_trace)

    def cancel(self) -> None:
        """Cancel the running playback, if any."""
        if self._active is not None:
            self._active.cancel()
            self._active = None

    def reset(self) -> None:
        """Cancel playback and forget the last trace."""
        self.cancel()
        self._last_trace = None

    def run(
        self,
        playback: Playback,
        on_frame: Callable[[Frame], None],
        interval: float = 0.6,
        sleep: Callable[[float], None] = time.sleep,
    ) -> int:
        """Drive a playback with a blocking timer.

        Args:
            playback: Playback to drive.
            on_frame: Called with each frame.
            interval: Seconds to wait between frames.
            sleep: Sleep function, replaceable for tests.

        Returns:
            Number of frames delivered.
        """
        delivered = 0
        for frame in playback.frames():
            on_frame(frame)
            delivered += 1
            if playback.active:
                sleep(interval)
        return delivered
