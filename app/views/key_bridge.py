"""Application-wide key filter feeding the toolkit-neutral `KeyEventBus`."""

from __future__ import annotations

from PySide6.QtCore import QEvent, QObject, Qt
from PySide6.QtWidgets import QApplication

from core.services.key_events import KeyEventBus

QT_KEY_NAMES: dict[int, str] = {
    Qt.Key_Left: "ArrowLeft",
    Qt.Key_Right: "ArrowRight",
    Qt.Key_Escape: "Escape",
}


class KeyBridge(QObject):
    """Forwards arrow/Escape key presses to `bus` while installed."""

    def __init__(self, bus: KeyEventBus, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._bus = bus
        self._installed = False

    @property
    def installed(self) -> bool:
        return self._installed

    def install(self) -> None:
        app = QApplication.instance()
        if app is None or self._installed:
            return
        app.installEventFilter(self)
        self._installed = True

    def uninstall(self) -> None:
        app = QApplication.instance()
        if app is None or not self._installed:
            return
        app.removeEventFilter(self)
        self._installed = False

    def eventFilter(self, watched: QObject, event: QEvent) -> bool:  # noqa: N802
        if event.type() == QEvent.KeyPress:
            name = QT_KEY_NAMES.get(event.key())
            if name is not None and self._bus.dispatch(name):
                return True
        return super().eventFilter(watched, event)
