"""Main gallery window: date picker, folder grid and carousel wiring."""

from __future__ import annotations

from datetime import date
from typing import Any

from PySide6.QtCore import QDate, Qt, Signal
from PySide6.QtWidgets import (
    QDateEdit,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)
from loguru import logger

from app.viewmodels.gallery_vm import GalleryVM
from app.views.carousel_dialog import CarouselDialog
from app.views.components.menu_controller import MenuController
from app.views.constants import DEFAULT_SETTLE_DELAY_MS, DEFAULT_SWIPE_THRESHOLD_PX, TOAST_MS
from app.views.dialogs.upload_dialog import UploadDialog
from app.views.image_tasks import ImageTaskRunner
from app.views.widgets.folder_picker import FolderPicker
from core.services.interfaces import FetchTicket
from infrastructure.logging import open_latest_log, open_log_directory


class StatusBarNotifier:
    """Toasts in the status bar; errors additionally pop a message box."""

    def __init__(self, main_window: QMainWindow) -> None:
        self._window = main_window

    def success(self, message: str) -> None:
        logger.info("Toast: {}", message)
        self._window.statusBar().showMessage(message, TOAST_MS)

    def error(self, message: str) -> None:
        logger.warning("Toast error: {}", message)
        self._window.statusBar().showMessage(message, TOAST_MS * 2)
        QMessageBox.warning(self._window, "Activity Gallery", message)


class GalleryWindow(QMainWindow):
    """Main window for one child's activity photos."""

    fetchFinished = Signal(object, object)  # FetchTicket, list[ActivityImage] | None

    def __init__(
        self,
        vm: GalleryVM,
        image_service: Any | None = None,
        settings: Any | None = None,
        log_dir: str | None = None,
    ) -> None:
        super().__init__()
        self._vm = vm
        self._img = image_service
        self._settings = settings
        self._log_dir = log_dir
        self._runner = ImageTaskRunner(service=image_service, receiver=self)

        threshold = float(DEFAULT_SWIPE_THRESHOLD_PX)
        settle_ms = DEFAULT_SETTLE_DELAY_MS
        if settings is not None:
            threshold = settings.get_float("carousel.swipe_threshold_px", threshold)
            settle_ms = settings.get_int("carousel.settle_delay_ms", settle_ms)

        self._setup_ui()
        self.carousel = CarouselDialog(vm, image_service, threshold, settle_ms, parent=self)
        self.menu_controller = MenuController(self)
        self.menu_controller.setup_menus()
        self.menu_controller.connect_actions(
            {
                "upload": self.on_upload,
                "refresh": self.on_refresh,
                "open_latest_log": lambda: open_latest_log(self._log_dir),
                "open_log_directory": lambda: open_log_directory(self._log_dir),
            }
        )

        # Fetches run on the thread pool; results come back through a signal
        self.fetchFinished.connect(self._on_fetch_finished)
        vm.fetch_scheduler = lambda ticket: self._runner.request_fetch(vm, ticket)
        vm.on_change(self.refresh_folders)

        self.setWindowTitle("Activity Gallery")
        self.resize(1024, 720)

    def _setup_ui(self) -> None:
        central = QWidget(self)
        root = QVBoxLayout(central)

        toolbar = QHBoxLayout()
        d = self._vm.selected_date
        self.date_edit = QDateEdit(QDate(d.year, d.month, d.day))
        self.date_edit.setCalendarPopup(True)
        self.date_edit.setDisplayFormat("yyyy-MM-dd")
        self.date_edit.dateChanged.connect(self._on_date_changed)
        self.btn_upload = QPushButton("Upload Photos")
        self.btn_upload.clicked.connect(self.on_upload)
        toolbar.addWidget(self.date_edit)
        toolbar.addStretch(1)
        toolbar.addWidget(self.btn_upload)
        root.addLayout(toolbar)

        self._stack = QStackedWidget()
        self._empty = QLabel("No images found for this date")
        self._empty.setAlignment(Qt.AlignCenter)
        self._empty.setStyleSheet("color: #888;")
        self.folders = FolderPicker()
        self.folders.folderSelected.connect(self._on_folder_selected)
        self._stack.addWidget(self._empty)
        self._stack.addWidget(self.folders)
        root.addWidget(self._stack, 1)

        self.setCentralWidget(central)

    # Public API
    def refresh_folders(self) -> None:
        folders = self._vm.folders()
        self.folders.set_folders(folders)
        self._stack.setCurrentWidget(self.folders if folders else self._empty)
        self.statusBar().showMessage(
            f"{self._vm.selected_date.isoformat()}: {len(folders)} activities", TOAST_MS
        )

    def start(self) -> None:
        """Initial fetch for the default date."""
        self._vm.request_fetch()

    # Handlers
    def _on_date_changed(self, qd: QDate) -> None:
        day = date(qd.year(), qd.month(), qd.day())
        if self._vm.set_date(day):
            self.carousel.clear_image_cache()
            if self._img is not None:
                self._img.clear_cache()

    def _on_fetch_finished(self, ticket: FetchTicket, images: Any) -> None:
        self._vm.complete_fetch(ticket, images)

    def _on_folder_selected(self, label: str) -> None:
        try:
            self._vm.open_folder(label)
        except ValueError as ex:
            logger.warning("Cannot open folder {!r}: {}", label, ex)

    def on_refresh(self) -> None:
        self._vm.request_fetch()

    def on_upload(self) -> None:
        def _uploaded() -> None:
            self.statusBar().showMessage("Images uploaded successfully", TOAST_MS)
            self._vm.on_upload_success()

        dlg = UploadDialog(
            repo=self._vm.repository,
            image_service=self._img,
            child_id=self._vm.child_id,
            initial_date=self._vm.selected_date,
            on_success=_uploaded,
            parent=self,
        )
        dlg.exec()

    def closeEvent(self, event) -> None:  # noqa: N802
        logger.info("Gallery window closing")
        self._vm.dispose()
        super().closeEvent(event)
