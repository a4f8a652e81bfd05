"""Core service interfaces and shared data structures.

This module defines the outcome dataclasses and the repository/notifier
protocols used across the infrastructure, view-model and UI layers.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Protocol

from core.models import ActivityImage, DailyActivity, UploadRequest


@dataclass
class DeleteResult:
    """Outcome of a delete operation.

    Attributes:
        image_id: Image the delete was issued for.
        success: Whether the backend accepted the delete.
        reason: Failure description when `success` is False.
    """

    image_id: int
    success: bool
    reason: str | None = None


@dataclass(frozen=True)
class FetchTicket:
    """Identifies one fetch; only the newest ticket may apply its result.

    Attributes:
        generation: Monotonic counter assigned by the view-model.
        child_id: Child the images belong to.
        day: Calendar date requested.
    """

    generation: int
    child_id: str
    day: date


class IImageRepository(Protocol):
    """Backend access for activity images."""

    def fetch_images(self, child_id: str, day: date) -> list[ActivityImage]:
        """Return all images for `child_id` on `day`; raises on failure."""
        ...

    def delete_image(self, image_id: int) -> DeleteResult:
        """Delete one image by id."""
        ...

    def fetch_activities(self, child_id: str, day: date) -> list[DailyActivity]:
        """Return the activities available for tagging uploads."""
        ...

    def upload_images(self, request: UploadRequest) -> bool:
        """Upload files for a child; True on success."""
        ...


class Notifier(Protocol):
    """Toast-style user notification sink."""

    def success(self, message: str) -> None:
        ...

    def error(self, message: str) -> None:
        ...
