"""Full-window carousel for browsing one activity group."""

from __future__ import annotations

from typing import Any

from PySide6.QtCore import QSize, Qt, Signal
from PySide6.QtGui import QIcon, QPixmap
from PySide6.QtWidgets import (
    QDialog,
    QHBoxLayout,
    QLabel,
    QListView,
    QListWidget,
    QListWidgetItem,
    QPushButton,
    QVBoxLayout,
    QWidget,
)
from loguru import logger

from app.viewmodels.gallery_vm import GalleryVM
from app.views.constants import (
    CAROUSEL_BACKGROUND,
    DEFAULT_SETTLE_DELAY_MS,
    DEFAULT_SWIPE_THRESHOLD_PX,
    INDEX_ROLE,
    NAV_BUTTON_PX,
    PREVIEW_MAX_SIDE,
    RAIL_THUMB_PX,
    RAIL_WIDTH_PX,
)
from app.views.dialogs.delete_confirm_dialog import DeleteConfirmDialog
from app.views.image_tasks import ImageTaskRunner
from app.views.key_bridge import KeyBridge
from app.views.widgets.swipe_stage import SwipeStage
from core.services.carousel import CarouselState
from core.services.swipe import SwipeGesture


class CarouselDialog(QDialog):
    """Shows the carousel while `vm.carousel` is Open and hides when Closed.

    Keyboard input reaches the carousel through a `KeyBridge` that is
    installed only while this dialog is visible.
    """

    imageLoaded = Signal(str, str, object)  # token, url, QImage

    def __init__(
        self,
        vm: GalleryVM,
        image_service: Any | None,
        swipe_threshold_px: float = DEFAULT_SWIPE_THRESHOLD_PX,
        settle_delay_ms: int = DEFAULT_SETTLE_DELAY_MS,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self._vm = vm
        self._runner = ImageTaskRunner(service=image_service, receiver=self)
        self._bridge = KeyBridge(vm.key_bus, self)
        self._stage_pixmaps: dict[str, QPixmap] = {}
        self._requested: set[str] = set()
        self._rail_failed: set[str] = set()
        self._rail_ids: tuple[int, ...] = ()

        self.setWindowTitle("Activity Images")
        self.setStyleSheet(f"background: {CAROUSEL_BACKGROUND}; color: white;")
        self._setup_ui(SwipeGesture(swipe_threshold_px), settle_delay_ms)

        self.imageLoaded.connect(self._on_image_loaded)
        vm.carousel.on_change(self._on_carousel_changed)

    def _setup_ui(self, gesture: SwipeGesture, settle_delay_ms: int) -> None:
        root = QVBoxLayout(self)
        root.setContentsMargins(0, 0, 0, 0)

        # Header: title, delete, close
        header = QHBoxLayout()
        header.setContentsMargins(8, 4, 8, 4)
        self._title = QLabel()
        self._title.setStyleSheet("font-weight: bold;")
        self.btn_delete = QPushButton("Delete")
        self.btn_delete.setToolTip("Delete this image")
        self.btn_close = QPushButton("✕")
        self.btn_close.setFixedSize(32, 32)
        header.addWidget(self._title)
        header.addStretch(1)
        header.addWidget(self.btn_delete)
        header.addWidget(self.btn_close)
        root.addLayout(header)

        body = QHBoxLayout()
        body.setContentsMargins(0, 0, 0, 0)

        # Thumbnail rail
        self._rail = QListWidget()
        self._rail.setViewMode(QListView.IconMode)
        self._rail.setFlow(QListView.TopToBottom)
        self._rail.setWrapping(False)
        self._rail.setMovement(QListView.Static)
        self._rail.setIconSize(QSize(RAIL_THUMB_PX, RAIL_THUMB_PX))
        self._rail.setFixedWidth(RAIL_WIDTH_PX)
        body.addWidget(self._rail)

        # Stage with previous/next controls
        stage_col = QVBoxLayout()
        stage_row = QHBoxLayout()
        self.btn_prev = QPushButton("‹")
        self.btn_next = QPushButton("›")
        for btn in (self.btn_prev, self.btn_next):
            btn.setFixedSize(NAV_BUTTON_PX, NAV_BUTTON_PX)
            btn.setFocusPolicy(Qt.NoFocus)
        self._stage = SwipeStage(gesture, self._pixmap_for, settle_delay_ms)
        stage_row.addWidget(self.btn_prev)
        stage_row.addWidget(self._stage, 1)
        stage_row.addWidget(self.btn_next)
        stage_col.addLayout(stage_row, 1)

        # Caption and counter
        self._caption = QLabel()
        self._caption.setAlignment(Qt.AlignCenter)
        self._date = QLabel()
        self._date.setAlignment(Qt.AlignCenter)
        self._date.setStyleSheet("color: rgba(255, 255, 255, 0.8);")
        self._counter = QLabel()
        self._counter.setAlignment(Qt.AlignCenter)
        stage_col.addWidget(self._caption)
        stage_col.addWidget(self._date)
        stage_col.addWidget(self._counter)
        body.addLayout(stage_col, 1)
        root.addLayout(body, 1)

        self.btn_prev.clicked.connect(self._vm.carousel.previous)
        self.btn_next.clicked.connect(self._vm.carousel.next)
        self.btn_close.clicked.connect(self.reject)
        self.btn_delete.clicked.connect(self._on_delete_clicked)
        self._rail.itemClicked.connect(self._on_rail_clicked)
        self._stage.navigateRequested.connect(self._on_swipe_navigate)

    # Carousel state -> view
    def _on_carousel_changed(self, carousel: CarouselState) -> None:
        if not carousel.is_open:
            if self.isVisible():
                super().reject()
            return
        if not self.isVisible():
            self.showMaximized()
        self._render(carousel)

    def _render(self, carousel: CarouselState) -> None:
        images = carousel.images
        index = carousel.selected_index
        self._title.setText(f"{carousel.selected_group} Images")
        self._sync_rail(carousel)
        self._stage.set_position(index, len(images))
        current = self._vm.current_image_vm()
        self.btn_delete.setEnabled(current is not None)
        if current is None:
            self._caption.clear()
            self._date.clear()
            self._counter.clear()
            return
        self._caption.setText(current.title)
        self._date.setText(current.display_date)
        self._counter.setText(current.counter)

    def _sync_rail(self, carousel: CarouselState) -> None:
        images = carousel.images
        ids = tuple(img.id for img in images)
        if ids != self._rail_ids:
            self._rail.clear()
            for idx, img in enumerate(images):
                item = QListWidgetItem()
                item.setData(INDEX_ROLE, idx)
                item.setToolTip(img.name)
                item.setSizeHint(QSize(RAIL_THUMB_PX + 8, RAIL_THUMB_PX + 8))
                self._rail.addItem(item)
                self._runner.request_image("rail", img.image_url, RAIL_THUMB_PX)
            self._rail_ids = ids
            self._rail_failed.clear()
        elif self._rail_failed:
            # Retry thumbnails whose last download failed
            for img in images:
                if img.image_url in self._rail_failed:
                    self._runner.request_image("rail", img.image_url, RAIL_THUMB_PX)
            self._rail_failed.clear()
        if carousel.selected_index is not None:
            self._rail.blockSignals(True)
            self._rail.setCurrentRow(carousel.selected_index)
            self._rail.blockSignals(False)

    # User input
    def _on_rail_clicked(self, item: QListWidgetItem) -> None:
        idx = item.data(INDEX_ROLE)
        if isinstance(idx, int):
            self._vm.carousel.select(idx)

    def _on_swipe_navigate(self, forward: bool) -> None:
        if forward:
            self._vm.carousel.next()
        else:
            self._vm.carousel.previous()

    def _on_delete_clicked(self) -> None:
        image = self._vm.request_delete()
        if image is None:
            return
        # No carousel navigation while the confirmation is up
        self._bridge.uninstall()
        try:
            dlg = DeleteConfirmDialog(image, self)
            if dlg.exec() == QDialog.Accepted:
                self._vm.confirm_delete()
            else:
                self._vm.cancel_delete()
        finally:
            if self.isVisible():
                self._bridge.install()

    # Images
    def _pixmap_for(self, index: int) -> QPixmap | None:
        images = self._vm.carousel.images
        if not 0 <= index < len(images):
            return None
        url = images[index].image_url
        pm = self._stage_pixmaps.get(url)
        if pm is None and url not in self._requested:
            self._requested.add(url)
            self._runner.request_image("stage", url, PREVIEW_MAX_SIDE)
        return pm

    def _on_image_loaded(self, token: str, url: str, image: Any) -> None:
        kind = token.split("|", 1)[0]
        if image is None or image.isNull():
            # Nothing cached for a failed load; the next render requests it again
            if kind == "stage":
                self._requested.discard(url)
            else:
                self._rail_failed.add(url)
            return
        pm = QPixmap.fromImage(image)
        if kind == "stage":
            self._stage_pixmaps[url] = pm
            self._stage.update()
            return
        icon = QIcon(pm)
        for idx, img in enumerate(self._vm.carousel.images):
            if img.image_url == url and idx < self._rail.count():
                self._rail.item(idx).setIcon(icon)

    def clear_image_cache(self) -> None:
        """Forget decoded pixmaps (e.g. after the date changes)."""
        self._stage_pixmaps.clear()
        self._requested.clear()
        self._rail_failed.clear()

    # Lifecycle
    def showEvent(self, event) -> None:  # noqa: N802
        self._bridge.install()
        super().showEvent(event)

    def hideEvent(self, event) -> None:  # noqa: N802
        self._bridge.uninstall()
        self._stage.reset_offset()
        super().hideEvent(event)

    def reject(self) -> None:
        logger.debug("Carousel dialog dismissed")
        self._vm.carousel.close()
        super().reject()
