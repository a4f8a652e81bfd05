"""Two-step delete confirmation state."""

from __future__ import annotations

from loguru import logger

from core.models import ActivityImage
from core.services.carousel import CarouselState


class DeletionFlow:
    """Tracks the image pending deletion until confirmed or cancelled.

    A delete can only be requested for the image currently open in the
    carousel.
    """

    def __init__(self, carousel: CarouselState) -> None:
        self._carousel = carousel
        self._pending: ActivityImage | None = None

    @property
    def pending(self) -> ActivityImage | None:
        return self._pending

    def request(self) -> ActivityImage | None:
        """Mark the open image as pending delete; None if nothing is open."""
        image = self._carousel.current_image
        if image is None:
            logger.warning("Delete requested with no open image")
            return None
        self._pending = image
        logger.info("Delete pending: id={} group={!r}", image.id, image.name)
        return image

    def cancel(self) -> None:
        if self._pending is not None:
            logger.info("Delete cancelled: id={}", self._pending.id)
        self._pending = None

    def confirm(self) -> ActivityImage | None:
        """Hand back the pending image and clear it."""
        image, self._pending = self._pending, None
        return image
