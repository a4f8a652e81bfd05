"""Swipe gesture tracking and decision logic.

`decide_swipe` is the pure decision: given start/end X and a threshold it
returns abort / commit-next / commit-previous. `SwipeGesture` carries the
ephemeral per-gesture state the view renders from (live offset, direction,
incoming neighbour) and is reset at the end of every gesture.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from core.services.carousel import next_index, previous_index

DEFAULT_SWIPE_THRESHOLD_PX = 50


class SwipeDecision(Enum):
    ABORT = "abort"
    COMMIT_NEXT = "next"  # dragged left
    COMMIT_PREVIOUS = "previous"  # dragged right


class SlideDirection(Enum):
    NONE = "none"
    LEFT = "left"
    RIGHT = "right"


def decide_swipe(start_x: float, end_x: float, threshold: float) -> SwipeDecision:
    """Decide the outcome of a horizontal drag from `start_x` to `end_x`."""
    delta = end_x - start_x
    if delta == 0 or abs(delta) < threshold:
        return SwipeDecision.ABORT
    return SwipeDecision.COMMIT_NEXT if delta < 0 else SwipeDecision.COMMIT_PREVIOUS


@dataclass(frozen=True)
class SwipeOutcome:
    """Result of a finished gesture.

    Attributes:
        decision: Whether and where to navigate.
        snap_offset: Offset to animate to before committing (0 for abort).
        target_index: Index to commit to, or None for abort.
    """

    decision: SwipeDecision
    snap_offset: float
    target_index: int | None

    @property
    def committed(self) -> bool:
        return self.decision is not SwipeDecision.ABORT


class SwipeGesture:
    """Ephemeral touch/drag state for one gesture at a time."""

    def __init__(self, threshold: float = DEFAULT_SWIPE_THRESHOLD_PX) -> None:
        self.threshold = float(threshold)
        self.reset()

    def reset(self) -> None:
        self.touch_start_x: float | None = None
        self.touch_end_x: float | None = None
        self.offset_px: float = 0.0
        self.direction = SlideDirection.NONE
        self.preview_index: int | None = None

    @property
    def active(self) -> bool:
        return self.touch_start_x is not None

    def begin(self, x: float) -> None:
        self.reset()
        self.touch_start_x = float(x)

    def move(self, x: float, current_index: int, length: int) -> None:
        """Track the pointer; recompute direction and incoming neighbour."""
        if self.touch_start_x is None:
            return
        self.touch_end_x = float(x)
        self.offset_px = self.touch_end_x - self.touch_start_x
        if length <= 0 or self.offset_px == 0:
            self.direction = SlideDirection.NONE
            self.preview_index = None
        elif self.offset_px < 0:
            self.direction = SlideDirection.LEFT
            self.preview_index = next_index(current_index, length)
        else:
            self.direction = SlideDirection.RIGHT
            self.preview_index = previous_index(current_index, length)

    def finish(self, viewport_width: float, current_index: int, length: int) -> SwipeOutcome:
        """End the gesture and reset; the caller animates then commits."""
        if self.touch_start_x is None or self.touch_end_x is None or length <= 0:
            outcome = SwipeOutcome(SwipeDecision.ABORT, 0.0, None)
        else:
            decision = decide_swipe(self.touch_start_x, self.touch_end_x, self.threshold)
            if decision is SwipeDecision.COMMIT_NEXT:
                outcome = SwipeOutcome(
                    decision, -float(viewport_width), next_index(current_index, length)
                )
            elif decision is SwipeDecision.COMMIT_PREVIOUS:
                outcome = SwipeOutcome(
                    decision, float(viewport_width), previous_index(current_index, length)
                )
            else:
                outcome = SwipeOutcome(decision, 0.0, None)
        self.reset()
        return outcome
