"""ViewModel orchestrating image fetches, folder grouping, carousel and deletes."""

from __future__ import annotations

from collections.abc import Callable
from datetime import date

import httpx
from loguru import logger

from app.viewmodels.group_vm import FolderVM
from app.viewmodels.image_vm import ImageVM
from core.errors import GalleryError
from core.models import ActivityImage, GroupedImages
from core.services.carousel import AfterDeletePolicy, CarouselState
from core.services.deletion import DeletionFlow
from core.services.grouping import group_images, image_count, remove_image
from core.services.interfaces import DeleteResult, FetchTicket, IImageRepository, Notifier
from core.services.key_events import KeyEventBus

MSG_DELETE_OK = "Image deleted successfully"
MSG_DELETE_FAILED = "Failed to delete the image. Please try again."
MSG_FETCH_FAILED = "Failed to load images for this date"


class LogNotifier:
    """Notifier that only writes to the log (headless use and tests)."""

    def success(self, message: str) -> None:
        logger.info("Notify success: {}", message)

    def error(self, message: str) -> None:
        logger.warning("Notify error: {}", message)


class GalleryVM:
    """Gallery view-model for one child.

    Fetches are tagged with a generation number so that a slow response for
    an older date can never overwrite the grouping of a newer request.
    """

    def __init__(
        self,
        repo: IImageRepository,
        child_id: str,
        notifier: Notifier | None = None,
        key_bus: KeyEventBus | None = None,
        after_delete: AfterDeletePolicy = AfterDeletePolicy.CLOSE,
        today: date | None = None,
    ) -> None:
        """Create a GalleryVM.

        Args:
            repo: Image backend (`fetch_images`, `delete_image`, ...).
            child_id: Child whose images are shown.
            notifier: Toast sink; defaults to logging only.
            key_bus: Key source the carousel subscribes to while open.
            after_delete: What the carousel does after its image is deleted.
            today: Initial date (defaults to the current date).
        """
        self._repo = repo
        self.child_id = child_id
        self.notifier: Notifier = notifier or LogNotifier()
        self.key_bus = key_bus or KeyEventBus()
        self.after_delete = after_delete
        self._selected_date = today or date.today()
        self._grouped: GroupedImages = {}
        self._generation = 0
        self.carousel = CarouselState(self.key_bus)
        self.deletion = DeletionFlow(self.carousel)
        self._listeners: list[Callable[[], None]] = []
        # When set, fetches are handed off (e.g. to a worker pool) instead of run inline
        self.fetch_scheduler: Callable[[FetchTicket], None] | None = None

    # Queries
    @property
    def selected_date(self) -> date:
        return self._selected_date

    @property
    def grouped(self) -> GroupedImages:
        return self._grouped

    @property
    def repository(self) -> IImageRepository:
        return self._repo

    @property
    def is_empty(self) -> bool:
        return not self._grouped

    def folders(self) -> list[FolderVM]:
        """One tile per activity label with its image count."""
        return [FolderVM(label=k, count=len(v)) for k, v in self._grouped.items()]

    def current_image_vm(self) -> ImageVM | None:
        image = self.carousel.current_image
        if image is None:
            return None
        return ImageVM(image, self.carousel.selected_index or 0, len(self.carousel.images))

    def on_change(self, callback: Callable[[], None]) -> None:
        """Register `callback` to run whenever the grouping is replaced."""
        self._listeners.append(callback)

    # Fetching
    def set_date(self, day: date) -> bool:
        """Select `day` and fetch its images; False if unchanged."""
        if day == self._selected_date:
            return False
        self._selected_date = day
        logger.info("Selected date changed: {}", day)
        self.request_fetch()
        return True

    def on_upload_success(self) -> None:
        """Upload collaborator callback: refetch the selected date."""
        logger.info("Upload finished; refreshing {}", self._selected_date)
        self.request_fetch()

    def request_fetch(self) -> FetchTicket:
        ticket = self.start_fetch()
        if self.fetch_scheduler is not None:
            self.fetch_scheduler(ticket)
        else:
            self.complete_fetch(ticket, self.run_fetch(ticket))
        return ticket

    def refresh(self) -> bool:
        """Fetch the selected date synchronously; True if applied."""
        ticket = self.start_fetch()
        return self.complete_fetch(ticket, self.run_fetch(ticket))

    def start_fetch(self) -> FetchTicket:
        self._generation += 1
        return FetchTicket(self._generation, self.child_id, self._selected_date)

    def run_fetch(self, ticket: FetchTicket) -> list[ActivityImage] | None:
        """Perform the network fetch only; safe to call off the UI thread."""
        try:
            return self._repo.fetch_images(ticket.child_id, ticket.day)
        except (GalleryError, httpx.HTTPError) as ex:
            logger.error("Error fetching images for {}: {}", ticket.day, ex)
            return None

    def complete_fetch(self, ticket: FetchTicket, images: list[ActivityImage] | None) -> bool:
        """Apply a fetch result atomically unless it has been superseded."""
        if ticket.generation != self._generation:
            logger.info(
                "Discarding stale fetch for {} (generation {} < {})",
                ticket.day,
                ticket.generation,
                self._generation,
            )
            return False
        if images is None:
            # Previous grouping stays visible
            self.notifier.error(MSG_FETCH_FAILED)
            return False
        self._grouped = group_images(images)
        self.carousel.sync(self._grouped)
        logger.info(
            "Grouped {} images into {} folders for {}",
            image_count(self._grouped),
            len(self._grouped),
            ticket.day,
        )
        self._emit_changed()
        return True

    # Carousel
    def open_folder(self, label: str) -> None:
        self.carousel.open_group(self._grouped, label)

    # Deletion
    def request_delete(self) -> ActivityImage | None:
        return self.deletion.request()

    def cancel_delete(self) -> None:
        self.deletion.cancel()

    def confirm_delete(self) -> DeleteResult | None:
        """Issue the delete for the pending image and update local state."""
        image = self.deletion.confirm()
        if image is None:
            return None
        try:
            result = self._repo.delete_image(image.id)
        except (GalleryError, httpx.HTTPError) as ex:
            logger.exception("Error deleting image {}: {}", image.id, ex)
            result = DeleteResult(image_id=image.id, success=False, reason=str(ex))

        if not result.success:
            self.notifier.error(MSG_DELETE_FAILED)
            return result

        current = self.carousel.current_image
        was_open = current is not None and current.id == image.id
        self._grouped = remove_image(self._grouped, image.id)
        if was_open and self.after_delete is AfterDeletePolicy.CLOSE:
            self.carousel.close()
        self.carousel.sync(self._grouped)
        self.notifier.success(MSG_DELETE_OK)
        self._emit_changed()
        return result

    def dispose(self) -> None:
        """Release the carousel's key subscription (view teardown)."""
        self.carousel.dispose()

    def _emit_changed(self) -> None:
        for cb in list(self._listeners):
            cb()
