"""Folder-style tiles, one per activity group, with an image-count badge."""

from __future__ import annotations

from PySide6.QtCore import QRect, QSize, Qt, Signal
from PySide6.QtGui import QColor, QFont, QIcon, QPainter, QPixmap
from PySide6.QtWidgets import QListView, QListWidget, QListWidgetItem, QStyle, QWidget

from app.viewmodels.group_vm import FolderVM
from app.views.constants import FOLDER_GRID_SPACING_PX, FOLDER_ICON_PX, FOLDER_TILE_PX, LABEL_ROLE


def _folder_icon_with_badge(base: QIcon, badge: str) -> QIcon:
    """Render the folder icon with the count badge in its bottom-right corner."""
    pm = base.pixmap(FOLDER_ICON_PX, FOLDER_ICON_PX)
    canvas = QPixmap(FOLDER_ICON_PX, FOLDER_ICON_PX)
    canvas.fill(Qt.transparent)
    painter = QPainter(canvas)
    painter.drawPixmap(0, 0, pm)
    font = QFont()
    font.setPointSize(9)
    font.setBold(True)
    painter.setFont(font)
    width = max(20, painter.fontMetrics().horizontalAdvance(badge) + 10)
    rect = QRect(FOLDER_ICON_PX - width - 2, FOLDER_ICON_PX - 20, width, 18)
    painter.setBrush(QColor(30, 90, 200, 40))
    painter.setPen(Qt.NoPen)
    painter.drawRoundedRect(rect, 5, 5)
    painter.setPen(QColor(30, 90, 200))
    painter.drawText(rect, Qt.AlignCenter, badge)
    painter.end()
    return QIcon(canvas)


class FolderPicker(QListWidget):
    """Grid of activity folders; clicking a tile emits `folderSelected(label)`."""

    folderSelected = Signal(str)

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setViewMode(QListView.IconMode)
        self.setResizeMode(QListView.Adjust)
        self.setMovement(QListView.Static)
        self.setWordWrap(True)
        self.setSpacing(FOLDER_GRID_SPACING_PX)
        self.setIconSize(QSize(FOLDER_ICON_PX, FOLDER_ICON_PX))
        self.setGridSize(QSize(FOLDER_TILE_PX, FOLDER_TILE_PX))
        self.setSelectionMode(QListWidget.NoSelection)
        self._base_icon = self.style().standardIcon(QStyle.SP_DirIcon)
        self.itemClicked.connect(self._on_item_clicked)

    def set_folders(self, folders: list[FolderVM]) -> None:
        self.clear()
        for folder in folders:
            item = QListWidgetItem(_folder_icon_with_badge(self._base_icon, folder.badge), folder.label)
            item.setData(LABEL_ROLE, folder.label)
            item.setToolTip(f"{folder.label} ({folder.count})")
            item.setTextAlignment(Qt.AlignHCenter | Qt.AlignTop)
            self.addItem(item)

    def _on_item_clicked(self, item: QListWidgetItem) -> None:
        label = item.data(LABEL_ROLE)
        if isinstance(label, str):
            self.folderSelected.emit(label)
