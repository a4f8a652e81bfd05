"""Carousel image stage with drag/touch swipe and slide animation."""

from __future__ import annotations

from collections.abc import Callable

from PySide6.QtCore import QEasingCurve, QEvent, QRectF, Qt, QTimer, QVariantAnimation, Signal
from PySide6.QtGui import QColor, QMouseEvent, QPainter, QPixmap
from PySide6.QtWidgets import QSizePolicy, QWidget
from loguru import logger

from app.views.constants import DEFAULT_SETTLE_DELAY_MS, SNAP_BACK_MS
from core.services.swipe import SlideDirection, SwipeDecision, SwipeGesture

PixmapProvider = Callable[[int], "QPixmap | None"]


class SwipeStage(QWidget):
    """Paints the current image at the live swipe offset.

    While dragging, the incoming neighbour is painted adjacent to the current
    image so it slides into view with the drag. On release the gesture is
    decided by `SwipeGesture`; a committed swipe snaps to the edge and emits
    `navigateRequested(forward)` once, after the settle delay.
    """

    navigateRequested = Signal(bool)  # True = next, False = previous

    def __init__(
        self,
        gesture: SwipeGesture,
        pixmap_for: PixmapProvider,
        settle_delay_ms: int = DEFAULT_SETTLE_DELAY_MS,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self._gesture = gesture
        self._pixmap_for = pixmap_for
        self._settle_delay_ms = max(0, int(settle_delay_ms))
        self._index: int | None = None
        self._length = 0
        self._render_offset = 0.0
        self._render_direction = SlideDirection.NONE
        self._render_preview: int | None = None
        self._pending_commit = False

        self._anim = QVariantAnimation(self)
        self._anim.valueChanged.connect(self._on_anim_value)
        self._anim.finished.connect(self._on_anim_finished)

        self.setAttribute(Qt.WA_AcceptTouchEvents, True)
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)
        self.setMinimumSize(200, 200)

    # Public API
    def set_position(self, index: int | None, length: int) -> None:
        """Show image `index` of a group with `length` images."""
        self._index = index
        self._length = length
        self.update()

    def reset_offset(self) -> None:
        self._anim.stop()
        self._render_offset = 0.0
        self._render_direction = SlideDirection.NONE
        self._render_preview = None
        self.update()

    # Gesture input
    def mousePressEvent(self, event: QMouseEvent) -> None:  # noqa: N802
        if event.button() == Qt.LeftButton:
            self._begin(event.position().x())
        super().mousePressEvent(event)

    def mouseMoveEvent(self, event: QMouseEvent) -> None:  # noqa: N802
        if event.buttons() & Qt.LeftButton:
            self._move(event.position().x())
        super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event: QMouseEvent) -> None:  # noqa: N802
        if event.button() == Qt.LeftButton:
            self._finish()
        super().mouseReleaseEvent(event)

    def event(self, event: QEvent) -> bool:  # noqa: A003
        etype = event.type()
        if etype in (QEvent.TouchBegin, QEvent.TouchUpdate, QEvent.TouchEnd, QEvent.TouchCancel):
            points = event.points()
            if etype == QEvent.TouchBegin and points:
                self._begin(points[0].position().x())
            elif etype == QEvent.TouchUpdate and points:
                self._move(points[0].position().x())
            elif etype == QEvent.TouchEnd:
                self._finish()
            else:
                self._gesture.reset()
                self._animate_to(0.0, SNAP_BACK_MS, QEasingCurve.OutCubic)
            event.accept()
            return True
        return super().event(event)

    def _begin(self, x: float) -> None:
        if self._pending_commit or self._index is None:
            return
        self._anim.stop()
        self._gesture.begin(x)

    def _move(self, x: float) -> None:
        if self._index is None or not self._gesture.active:
            return
        self._gesture.move(x, self._index, self._length)
        self._render_offset = self._gesture.offset_px
        self._render_direction = self._gesture.direction
        self._render_preview = self._gesture.preview_index
        self.update()

    def _finish(self) -> None:
        if self._index is None or not self._gesture.active:
            self._gesture.reset()
            return
        outcome = self._gesture.finish(self.width(), self._index, self._length)
        if not outcome.committed:
            self._render_preview = None
            self._animate_to(0.0, SNAP_BACK_MS, QEasingCurve.OutCubic)
            return
        forward = outcome.decision is SwipeDecision.COMMIT_NEXT
        logger.debug("Swipe committed: {} -> {}", self._index, outcome.target_index)
        self._pending_commit = True
        self._animate_to(outcome.snap_offset, 100, QEasingCurve.Linear)
        QTimer.singleShot(self._settle_delay_ms, lambda: self._commit(forward))

    def _commit(self, forward: bool) -> None:
        self._pending_commit = False
        self.reset_offset()
        self.navigateRequested.emit(forward)

    # Rendering
    def _animate_to(self, target: float, duration_ms: int, curve: QEasingCurve.Type) -> None:
        self._anim.stop()
        self._anim.setStartValue(float(self._render_offset))
        self._anim.setEndValue(float(target))
        self._anim.setDuration(duration_ms)
        self._anim.setEasingCurve(curve)
        self._anim.start()

    def _on_anim_finished(self) -> None:
        # Snap-back done: drop the incoming preview
        if self._render_offset == 0.0:
            self._render_direction = SlideDirection.NONE
            self._render_preview = None
            self.update()

    def _on_anim_value(self, value: float) -> None:
        self._render_offset = float(value)
        self.update()

    def paintEvent(self, _event) -> None:  # noqa: N802
        painter = QPainter(self)
        painter.setRenderHint(QPainter.SmoothPixmapTransform, True)
        if self._index is None:
            painter.end()
            return
        width = self.width()
        self._paint_image(painter, self._index, self._render_offset)
        if self._render_preview is not None and self._render_direction is not SlideDirection.NONE:
            base = width if self._render_direction is SlideDirection.LEFT else -width
            self._paint_image(painter, self._render_preview, base + self._render_offset)
        painter.end()

    def _paint_image(self, painter: QPainter, index: int, dx: float) -> None:
        area = QRectF(self.rect()).adjusted(8, 8, -8, -8).translated(dx, 0)
        pm = self._pixmap_for(index)
        if pm is None or pm.isNull():
            painter.setPen(QColor(200, 200, 200))
            painter.drawText(area, Qt.AlignCenter, "Loading…")
            return
        scaled = pm.size().scaled(area.size().toSize(), Qt.KeepAspectRatio)
        target = QRectF(
            area.x() + (area.width() - scaled.width()) / 2,
            area.y() + (area.height() - scaled.height()) / 2,
            scaled.width(),
            scaled.height(),
        )
        painter.drawPixmap(target, pm, QRectF(pm.rect()))
