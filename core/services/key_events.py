"""Toolkit-neutral key event bus.

Views forward raw key presses into the bus; interested parties subscribe for
as long as they need keyboard input and release the subscription afterwards.
"""

from __future__ import annotations

from collections.abc import Callable
from itertools import count

from loguru import logger

KeyHandler = Callable[[str], bool]


class KeySubscription:
    """Handle returned by `KeyEventBus.subscribe`; release exactly once."""

    def __init__(self, bus: KeyEventBus, token: int) -> None:
        self._bus = bus
        self._token = token
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def release(self) -> None:
        """Unregister the handler. Safe to call more than once."""
        if not self._active:
            return
        self._active = False
        self._bus._remove(self._token)


class KeyEventBus:
    """Dispatch key names to subscribed handlers, newest first."""

    def __init__(self) -> None:
        self._handlers: dict[int, KeyHandler] = {}
        self._ids = count(1)

    def subscribe(self, handler: KeyHandler) -> KeySubscription:
        token = next(self._ids)
        self._handlers[token] = handler
        logger.debug("Key handler subscribed: token={} total={}", token, len(self._handlers))
        return KeySubscription(self, token)

    def dispatch(self, key: str) -> bool:
        """Offer `key` to handlers; return True once one consumes it."""
        for token in sorted(self._handlers, reverse=True):
            handler = self._handlers.get(token)
            if handler is not None and handler(key):
                return True
        return False

    @property
    def subscriber_count(self) -> int:
        return len(self._handlers)

    def _remove(self, token: int) -> None:
        self._handlers.pop(token, None)
        logger.debug("Key handler released: token={} total={}", token, len(self._handlers))
