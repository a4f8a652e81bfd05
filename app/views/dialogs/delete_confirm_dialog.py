from __future__ import annotations

from PySide6.QtWidgets import (
    QDialog,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QVBoxLayout,
)

from core.models import ActivityImage


class DeleteConfirmDialog(QDialog):
    def __init__(self, image: ActivityImage, parent=None) -> None:
        super().__init__(parent)
        self.setWindowTitle("Delete Image")

        root = QVBoxLayout(self)

        title = QLabel(
            "Are you sure you want to delete this image? This action cannot be undone."
        )
        title.setWordWrap(True)
        root.addWidget(title)

        info = QLabel(f"{image.name} ({image.date.isoformat()})")
        info.setStyleSheet("color: #666;")
        root.addWidget(info)

        btns = QHBoxLayout()
        self.btn_cancel = QPushButton("Cancel")
        self.btn_ok = QPushButton("Delete")
        self.btn_ok.setStyleSheet("background: #b00020; color: white;")
        btns.addWidget(self.btn_cancel)
        btns.addStretch(1)
        btns.addWidget(self.btn_ok)
        root.addLayout(btns)

        self.btn_ok.clicked.connect(self.accept)
        self.btn_cancel.clicked.connect(self.reject)
        self.btn_cancel.setDefault(True)
