from __future__ import annotations

import sys
from pathlib import Path

from PySide6.QtWidgets import QApplication, QMessageBox
from loguru import logger

from app.viewmodels.gallery_vm import GalleryVM
from app.views.main_window import GalleryWindow, StatusBarNotifier
from core.services.carousel import AfterDeletePolicy
from infrastructure.api_client import DEFAULT_BASE_URL, DEFAULT_TIMEOUT_S, AuthenticatedClient
from infrastructure.image_repository import HttpImageRepository
from infrastructure.image_service import ImageService
from infrastructure.logging import init_logging
from infrastructure.settings import JsonSettings


BASE_DIR = Path(__file__).parent


def main() -> int:
    settings = JsonSettings(BASE_DIR / "settings.json")
    log_dir = settings.get("logging.dir")
    init_logging(log_dir)

    app = QApplication(sys.argv)

    child_id = settings.get("child_id")
    if not child_id:
        logger.error("No child_id configured (settings.json or GALLERY_CHILD_ID)")
        QMessageBox.critical(None, "Activity Gallery", "No child configured.")
        return 2

    client = AuthenticatedClient(
        base_url=str(settings.get("api.base_url", DEFAULT_BASE_URL)),
        token=settings.get("api.token"),
        timeout=settings.get_float("api.timeout_s", DEFAULT_TIMEOUT_S),
    )
    repo = HttpImageRepository(client, daycare_id=str(settings.get("api.daycare_id", "1")))
    img = ImageService(client, settings)

    vm = GalleryVM(
        repo,
        child_id=str(child_id),
        after_delete=AfterDeletePolicy.parse(settings.get("carousel.after_delete", "close")),
    )
    win = GalleryWindow(vm=vm, image_service=img, settings=settings, log_dir=log_dir)
    vm.notifier = StatusBarNotifier(win)
    logger.info("Starting gallery: api={} child={}", client.base_url, child_id)
    win.show()
    win.start()

    try:
        return app.exec()
    finally:
        client.close()


if __name__ == "__main__":
    raise SystemExit(main())
