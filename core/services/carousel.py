"""Carousel navigation state machine decoupled from any UI toolkit.

The carousel is either Closed or Open(group, index). Group and index always
change together, and the index is kept within the bounds of the open group.
While Open, the carousel holds a key subscription on the shared
`KeyEventBus`; every exit path releases it.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from loguru import logger

from core.models import ActivityImage, GroupedImages
from core.services.key_events import KeyEventBus, KeySubscription

KEY_PREVIOUS = frozenset({"ArrowLeft", "Left"})
KEY_NEXT = frozenset({"ArrowRight", "Right"})
KEY_CLOSE = frozenset({"Escape", "Esc"})


class AfterDeletePolicy(str, Enum):
    """What the carousel shows after the open image was deleted."""

    CLOSE = "close"
    STAY = "stay"

    @classmethod
    def parse(cls, raw: object) -> AfterDeletePolicy:
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            logger.warning("Unknown after-delete policy {!r}; using 'close'", raw)
            return cls.CLOSE


def next_index(index: int, length: int) -> int:
    """Index after `index`, wrapping from the last to the first."""
    if length <= 0:
        raise ValueError("cannot navigate an empty group")
    return 0 if index >= length - 1 else index + 1


def previous_index(index: int, length: int) -> int:
    """Index before `index`, wrapping from the first to the last."""
    if length <= 0:
        raise ValueError("cannot navigate an empty group")
    return length - 1 if index <= 0 else index - 1


@dataclass(frozen=True)
class Selection:
    group: str
    index: int


class CarouselState:
    """Closed / Open(group, index) navigation over a grouped image mapping."""

    def __init__(self, key_bus: KeyEventBus | None = None) -> None:
        self._key_bus = key_bus
        self._subscription: KeySubscription | None = None
        self._grouped: GroupedImages = {}
        self._selection: Selection | None = None
        self._listeners: list[Callable[[CarouselState], None]] = []

    # Queries
    @property
    def is_open(self) -> bool:
        return self._selection is not None

    @property
    def selected_group(self) -> str | None:
        return self._selection.group if self._selection else None

    @property
    def selected_index(self) -> int | None:
        return self._selection.index if self._selection else None

    @property
    def images(self) -> list[ActivityImage]:
        """Images of the open group (empty when Closed)."""
        if self._selection is None:
            return []
        return self._grouped.get(self._selection.group, [])

    @property
    def current_image(self) -> ActivityImage | None:
        if self._selection is None:
            return None
        return self.images[self._selection.index]

    @property
    def is_listening(self) -> bool:
        """True while the key subscription is held."""
        return self._subscription is not None and self._subscription.active

    def on_change(self, callback: Callable[[CarouselState], None]) -> None:
        """Register `callback` to run after every transition."""
        self._listeners.append(callback)

    # Transitions
    def open_group(self, grouped: GroupedImages, label: str) -> None:
        """Closed -> Open(label, 0)."""
        items = grouped.get(label)
        if not items:
            raise ValueError(f"no images in group {label!r}")
        self._grouped = grouped
        self._set(Selection(label, 0))
        logger.info("Carousel opened: group={!r} size={}", label, len(items))

    def next(self) -> None:
        if self._selection is None:
            return
        self._move_to(next_index(self._selection.index, len(self.images)))

    def previous(self) -> None:
        if self._selection is None:
            return
        self._move_to(previous_index(self._selection.index, len(self.images)))

    def select(self, index: int) -> None:
        """Jump directly to `index` in the open group (thumbnail rail)."""
        if self._selection is None:
            return
        if not 0 <= index < len(self.images):
            raise IndexError(f"image index {index} out of range for {self._selection.group!r}")
        self._move_to(index)

    def close(self) -> None:
        if self._selection is None:
            return
        logger.info("Carousel closed: group={!r}", self._selection.group)
        self._set(None)

    def sync(self, grouped: GroupedImages) -> None:
        """Re-validate the selection against a new grouping.

        Keeps the same image open if it still exists, otherwise clamps the
        index to the group's last image. Closes when the group is gone.
        """
        current = self.current_image
        self._grouped = grouped
        if self._selection is None:
            return
        items = grouped.get(self._selection.group) or []
        if not items:
            logger.info("Carousel group {!r} no longer exists; closing", self._selection.group)
            self._set(None)
            return
        new_index = min(self._selection.index, len(items) - 1)
        if current is not None:
            for idx, it in enumerate(items):
                if it.id == current.id:
                    new_index = idx
                    break
        self._set(Selection(self._selection.group, new_index))

    def handle_key(self, key: str) -> bool:
        """Apply the keyboard contract; return True if `key` was consumed."""
        if self._selection is None:
            return False
        if key in KEY_PREVIOUS:
            self.previous()
        elif key in KEY_NEXT:
            self.next()
        elif key in KEY_CLOSE:
            self.close()
        else:
            return False
        return True

    def dispose(self) -> None:
        """Close and release the key subscription (view teardown)."""
        self.close()
        self._release_keys()

    # Internal helpers
    def _move_to(self, index: int) -> None:
        assert self._selection is not None
        self._set(Selection(self._selection.group, index))

    def _set(self, selection: Selection | None) -> None:
        self._selection = selection
        if selection is None:
            self._release_keys()
        else:
            self._acquire_keys()
        for cb in list(self._listeners):
            cb(self)

    def _acquire_keys(self) -> None:
        if self._key_bus is None or self.is_listening:
            return
        self._subscription = self._key_bus.subscribe(self.handle_key)

    def _release_keys(self) -> None:
        if self._subscription is not None:
            self._subscription.release()
            self._subscription = None
