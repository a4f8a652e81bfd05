from __future__ import annotations

from typing import Any

from PySide6.QtCore import QObject, QRunnable, QThreadPool
from loguru import logger

from core.services.interfaces import FetchTicket


class _ImageTask(QRunnable):
    """QRunnable for background image downloads.

    Emits `receiver.imageLoaded(token, url, image)` upon completion, with
    `image` None when the load failed. The receiver is expected to own a Qt
    `Signal(str, str, object)` named `imageLoaded`.
    """

    def __init__(self, *, url: str, side: int, service: Any, receiver: QObject, token: str) -> None:
        super().__init__()
        self._url = url
        self._side = side
        self._service = service
        self._receiver = receiver
        self._token = token

    def run(self) -> None:  # type: ignore[override]
        try:
            img = self._service.get_image(self._url, self._side)
        except Exception as ex:  # pragma: no cover - GUI background task
            logger.error("Image task failed for {}: {}", self._url, ex)
            img = None
        try:
            self._receiver.imageLoaded.emit(self._token, self._url, img)  # type: ignore[attr-defined]
        except RuntimeError as ex:  # pragma: no cover - receiver destroyed
            logger.debug("Image receiver gone for {}: {}", self._url, ex)


class _FetchTask(QRunnable):
    """QRunnable performing `vm.run_fetch(ticket)` off the UI thread.

    Emits `receiver.fetchFinished(ticket, images)`; the receiver applies the
    result on the UI thread via `vm.complete_fetch`.
    """

    def __init__(self, *, vm: Any, ticket: FetchTicket, receiver: QObject) -> None:
        super().__init__()
        self._vm = vm
        self._ticket = ticket
        self._receiver = receiver

    def run(self) -> None:  # type: ignore[override]
        images = self._vm.run_fetch(self._ticket)
        try:
            self._receiver.fetchFinished.emit(self._ticket, images)  # type: ignore[attr-defined]
        except RuntimeError as ex:  # pragma: no cover - receiver destroyed
            logger.debug("Fetch receiver gone: {}", ex)


class ImageTaskRunner:
    """Dispatches image and fetch tasks to the global thread pool.

    Image tokens have the format "{kind}|{url}|{side}" where kind is
    "rail", "stage" or "folder".
    """

    def __init__(self, *, service: Any, receiver: QObject) -> None:
        self._service = service
        self._receiver = receiver
        self._pool = QThreadPool.globalInstance()

    def request_image(self, kind: str, url: str, side: int) -> str:
        """Request `url` bounded by `side`. Returns the token string."""
        token = f"{kind}|{url}|{side}"
        if self._service is None:
            return token
        self._pool.start(
            _ImageTask(url=url, side=side, service=self._service, receiver=self._receiver, token=token)
        )
        return token

    def request_fetch(self, vm: Any, ticket: FetchTicket) -> None:
        self._pool.start(_FetchTask(vm=vm, ticket=ticket, receiver=self._receiver))
