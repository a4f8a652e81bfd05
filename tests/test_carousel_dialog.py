"""Offscreen tests for the carousel dialog and its swipe stage."""

from PySide6.QtCore import QEvent, QPointF, Qt
from PySide6.QtGui import QColor, QImage, QMouseEvent
from PySide6.QtTest import QTest
from PySide6.QtWidgets import QApplication
import pytest

from conftest import DAY, FakeRepository
from app.viewmodels.gallery_vm import GalleryVM
from app.views.carousel_dialog import CarouselDialog
from app.views.constants import PREVIEW_MAX_SIDE, RAIL_THUMB_PX
from app.views.widgets.swipe_stage import SwipeStage
from core.services.carousel import CarouselState
from core.services.grouping import group_images
from core.services.swipe import SwipeGesture


class RecordingRunner:
    """Stands in for the thread pool runner; records image requests."""

    def __init__(self) -> None:
        self.requests: list[tuple[str, str]] = []

    def request_image(self, kind: str, url: str, side: int) -> str:
        self.requests.append((kind, url))
        return f"{kind}|{url}|{side}"

    def count(self, kind: str, url: str) -> int:
        return self.requests.count((kind, url))


@pytest.fixture
def dialog(qapp, art_class, notifier):
    vm = GalleryVM(FakeRepository({DAY: art_class}), "c1", notifier=notifier, today=DAY)
    vm.refresh()
    dlg = CarouselDialog(vm, image_service=None)
    runner = RecordingRunner()
    dlg._runner = runner
    vm.open_folder("Art Class")
    yield dlg, vm, runner
    vm.dispose()
    dlg.deleteLater()


class TestStageImages:
    def test_failed_load_is_requested_again(self, dialog):
        dlg, vm, runner = dialog
        url = vm.carousel.current_image.image_url
        dlg._pixmap_for(0)
        dlg.imageLoaded.emit(f"stage|{url}|{PREVIEW_MAX_SIDE}", url, None)
        before = runner.count("stage", url)

        assert dlg._pixmap_for(0) is None
        assert runner.count("stage", url) == before + 1

    def test_loaded_image_is_served_without_new_request(self, dialog):
        dlg, vm, runner = dialog
        url = vm.carousel.current_image.image_url
        dlg._pixmap_for(0)
        img = QImage(40, 30, QImage.Format_RGB32)
        img.fill(QColor(200, 0, 0))
        dlg.imageLoaded.emit(f"stage|{url}|{PREVIEW_MAX_SIDE}", url, img)
        before = runner.count("stage", url)

        pm = dlg._pixmap_for(0)
        assert pm is not None
        assert pm.width() == 40
        assert runner.count("stage", url) == before


class TestRailImages:
    def test_failed_thumbnail_retried_on_next_render(self, dialog):
        dlg, vm, runner = dialog
        url = vm.carousel.images[1].image_url
        dlg.imageLoaded.emit(f"rail|{url}|{RAIL_THUMB_PX}", url, None)
        before = runner.count("rail", url)

        vm.carousel.next()
        assert runner.count("rail", url) == before + 1

        # Only retried once per failure
        vm.carousel.next()
        assert runner.count("rail", url) == before + 1


def _drag(stage: SwipeStage, start_x: float, end_x: float) -> None:
    y = stage.height() / 2
    steps = (
        (QEvent.MouseButtonPress, start_x, Qt.LeftButton, Qt.LeftButton),
        (QEvent.MouseMove, end_x, Qt.NoButton, Qt.LeftButton),
        (QEvent.MouseButtonRelease, end_x, Qt.LeftButton, Qt.NoButton),
    )
    for etype, x, button, buttons in steps:
        pos = QPointF(x, y)
        event = QMouseEvent(etype, pos, stage.mapToGlobal(pos), button, buttons, Qt.NoModifier)
        QApplication.sendEvent(stage, event)
    # Let the deferred settle step run
    QTest.qWait(50)


@pytest.fixture
def swiping(qapp, art_class):
    carousel = CarouselState()
    carousel.open_group(group_images(art_class), "Art Class")
    stage = SwipeStage(SwipeGesture(50), lambda _index: None, settle_delay_ms=0)
    stage.resize(400, 300)
    stage.set_position(carousel.selected_index, len(carousel.images))
    stage.navigateRequested.connect(
        lambda forward: carousel.next() if forward else carousel.previous()
    )
    yield carousel, stage
    stage.deleteLater()


class TestSwipeStage:
    def test_long_drag_left_moves_to_next(self, swiping):
        carousel, stage = swiping
        _drag(stage, 200, 120)
        assert carousel.selected_index == 1

    def test_long_drag_right_wraps_to_last(self, swiping):
        carousel, stage = swiping
        _drag(stage, 120, 200)
        assert carousel.selected_index == 2

    def test_short_drag_keeps_position(self, swiping):
        carousel, stage = swiping
        _drag(stage, 200, 170)
        assert carousel.selected_index == 0

    def test_click_without_movement_keeps_position(self, swiping):
        carousel, stage = swiping
        _drag(stage, 200, 200)
        assert carousel.selected_index == 0
