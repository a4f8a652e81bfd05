from __future__ import annotations

from datetime import date
import os

from PySide6.QtWidgets import QApplication
import pytest

from core.models import ActivityImage, DailyActivity, UploadRequest
from core.services.interfaces import DeleteResult

# Widgets are created without a display
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

DAY = date(2024, 5, 1)


def make_image(image_id: int, name: str, day: date = DAY) -> ActivityImage:
    return ActivityImage(
        id=image_id, name=name, date=day, image_url=f"https://cdn.example/{image_id}.jpg"
    )


class FakeRepository:
    """In-memory image backend recording calls."""

    def __init__(self, images: dict[date, list[ActivityImage]] | None = None) -> None:
        self.images = images or {}
        self.fetch_calls: list[tuple[str, date]] = []
        self.delete_calls: list[int] = []
        self.fail_fetch = False
        self.fail_delete = False

    def fetch_images(self, child_id: str, day: date) -> list[ActivityImage]:
        self.fetch_calls.append((child_id, day))
        if self.fail_fetch:
            from core.errors import ApiError

            raise ApiError(500, "boom")
        return list(self.images.get(day, []))

    def delete_image(self, image_id: int) -> DeleteResult:
        self.delete_calls.append(image_id)
        if self.fail_delete:
            return DeleteResult(image_id=image_id, success=False, reason="HTTP 500")
        for day, items in self.images.items():
            self.images[day] = [it for it in items if it.id != image_id]
        return DeleteResult(image_id=image_id, success=True)

    def fetch_activities(self, child_id: str, day: date) -> list[DailyActivity]:
        return []

    def upload_images(self, request: UploadRequest) -> bool:
        return True


class RecordingNotifier:
    def __init__(self) -> None:
        self.successes: list[str] = []
        self.errors: list[str] = []

    def success(self, message: str) -> None:
        self.successes.append(message)

    def error(self, message: str) -> None:
        self.errors.append(message)


@pytest.fixture
def art_class() -> list[ActivityImage]:
    return [make_image(1, "Art Class"), make_image(2, "Art Class"), make_image(3, "Art Class")]


@pytest.fixture
def mixed_images() -> list[ActivityImage]:
    return [
        make_image(10, "Art Class"),
        make_image(11, "Outdoor Play"),
        make_image(12, "Art Class"),
        make_image(13, "Lunch"),
        make_image(14, "Outdoor Play"),
    ]


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture(scope="session")
def qapp() -> QApplication:
    return QApplication.instance() or QApplication([])
