"""Dialog for uploading activity photos for one child."""

from __future__ import annotations

from collections.abc import Callable
from datetime import date
from pathlib import Path

import httpx
from PySide6.QtCore import QDate
from PySide6.QtWidgets import (
    QComboBox,
    QDateEdit,
    QDialog,
    QFileDialog,
    QFormLayout,
    QHBoxLayout,
    QListWidget,
    QMessageBox,
    QProgressBar,
    QPushButton,
    QVBoxLayout,
    QWidget,
)
from loguru import logger

from core.errors import GalleryError
from core.models import DailyActivity, UploadRequest
from core.services.interfaces import IImageRepository


class UploadDialog(QDialog):
    """Pick a date, an activity of that date and JPG/PNG files, then upload.

    `on_success` runs after the backend accepts the upload.
    """

    def __init__(
        self,
        repo: IImageRepository,
        image_service,
        child_id: str,
        initial_date: date,
        on_success: Callable[[], None] | None = None,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self._repo = repo
        self._images = image_service
        self._child_id = child_id
        self._on_success = on_success
        self._activities: list[DailyActivity] = []
        self._files: list[Path] = []

        self.setWindowTitle("Upload Photos")
        root = QVBoxLayout(self)
        form = QFormLayout()

        self._date = QDateEdit(QDate(initial_date.year, initial_date.month, initial_date.day))
        self._date.setCalendarPopup(True)
        self._date.setDisplayFormat("yyyy-MM-dd")
        form.addRow("Date", self._date)

        self._activity = QComboBox()
        self._activity.setPlaceholderText("Select an activity")
        form.addRow("Activity", self._activity)
        root.addLayout(form)

        self._file_list = QListWidget()
        root.addWidget(self._file_list)

        self._progress = QProgressBar()
        self._progress.setRange(0, 100)
        self._progress.setVisible(False)
        root.addWidget(self._progress)

        btns = QHBoxLayout()
        self.btn_add = QPushButton("Add Photos…")
        self.btn_upload = QPushButton("Upload")
        self.btn_cancel = QPushButton("Cancel")
        btns.addWidget(self.btn_add)
        btns.addStretch(1)
        btns.addWidget(self.btn_cancel)
        btns.addWidget(self.btn_upload)
        root.addLayout(btns)

        self.btn_add.clicked.connect(self._on_add_files)
        self.btn_upload.clicked.connect(self._on_upload)
        self.btn_cancel.clicked.connect(self.reject)
        self._date.dateChanged.connect(lambda _d: self._load_activities())

        self._load_activities()

    def _selected_date(self) -> date:
        qd = self._date.date()
        return date(qd.year(), qd.month(), qd.day())

    def _load_activities(self) -> None:
        self._activity.clear()
        try:
            self._activities = self._repo.fetch_activities(self._child_id, self._selected_date())
        except (GalleryError, httpx.HTTPError) as ex:
            logger.error("Error fetching activities: {}", ex)
            self._activities = []
            QMessageBox.warning(self, "Upload", "Failed to fetch activities")
        for act in self._activities:
            self._activity.addItem(act.display_name, act.id)

    def _on_add_files(self) -> None:
        paths, _ = QFileDialog.getOpenFileNames(
            self, "Select Photos", "", "Images (*.jpg *.jpeg *.png)"
        )
        for p in paths:
            path = Path(p)
            if path.suffix.lower() not in (".jpg", ".jpeg", ".png"):
                QMessageBox.warning(self, "Upload", "Please upload a JPG or PNG image")
                continue
            if path not in self._files:
                self._files.append(path)
                self._file_list.addItem(path.name)

    def _on_upload(self) -> None:
        idx = self._activity.currentIndex()
        if idx < 0 or idx >= len(self._activities):
            QMessageBox.information(self, "Upload", "Please select an activity")
            return
        if not self._files:
            QMessageBox.information(self, "Upload", "Please add at least one photo")
            return

        activity = self._activities[idx]
        self._progress.setVisible(True)
        self._progress.setValue(0)
        self.btn_upload.setEnabled(False)
        try:
            encoded = []
            for n, path in enumerate(self._files, start=1):
                encoded.append(self._images.compress(path))
                self._progress.setValue(int(n * 80 / len(self._files)))
            request = UploadRequest(
                child_id=self._child_id,
                date=self._selected_date(),
                activity_name=activity.title,
                files=encoded,
            )
            ok = self._repo.upload_images(request)
            self._progress.setValue(100)
        except (GalleryError, httpx.HTTPError, OSError, ValueError) as ex:
            logger.exception("Error uploading images: {}", ex)
            QMessageBox.critical(self, "Upload", "Failed to upload images. Please try again later.")
            return
        finally:
            self.btn_upload.setEnabled(True)

        if not ok:
            QMessageBox.critical(self, "Upload", "Failed to upload images. Please try again later.")
            return
        logger.info("Images uploaded successfully: {} files", len(self._files))
        if self._on_success is not None:
            self._on_success()
        self.accept()
