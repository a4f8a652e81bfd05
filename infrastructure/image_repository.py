"""HTTP-backed repository for activity images and upload choices."""

from __future__ import annotations

from datetime import date

from loguru import logger

from core.errors import GalleryError
from core.models import ActivityImage, DailyActivity, UploadRequest
from core.services.interfaces import DeleteResult
from infrastructure.api_client import AuthenticatedClient
from infrastructure.payloads import (
    activity_list_from_payload,
    image_list_from_payload,
    is_delete_success,
)


class HttpImageRepository:
    """Image store collaborator over the daycare REST API."""

    def __init__(self, client: AuthenticatedClient, daycare_id: str = "1") -> None:
        self._client = client
        self._daycare_id = daycare_id

    def fetch_images(self, child_id: str, day: date) -> list[ActivityImage]:
        """Return images for `child_id` on `day` in server order."""
        payload = self._client.request(
            "GET", f"/images/child/{child_id}", params={"date": day.isoformat()}
        )
        images = image_list_from_payload(payload)
        logger.info("Fetched {} images for child={} date={}", len(images), child_id, day)
        return images

    def delete_image(self, image_id: int) -> DeleteResult:
        try:
            result = self._client.request_raw("DELETE", f"/images/{image_id}")
        except GalleryError as ex:
            logger.error("Delete image {} failed: {}", image_id, ex)
            return DeleteResult(image_id=image_id, success=False, reason=str(ex))
        if not is_delete_success(result):
            return DeleteResult(image_id=image_id, success=False, reason="Failed to delete image")
        logger.info("Deleted image {}", image_id)
        return DeleteResult(image_id=image_id, success=True)

    def fetch_activities(self, child_id: str, day: date) -> list[DailyActivity]:
        payload = self._client.request(
            "GET", "/activities", params={"date": day.isoformat(), "childId": child_id}
        )
        return activity_list_from_payload(payload)

    def upload_images(self, request: UploadRequest) -> bool:
        """Multipart upload of `request.files`; True when the server accepts it."""
        if not request.files:
            return False
        data = {
            "date": request.date.isoformat(),
            "daycareId": self._daycare_id,
            "name": request.activity_name,
        }
        files = [("images", (f.filename, f.content, f.mime_type)) for f in request.files]
        response = self._client.request_raw(
            "POST", f"/images/upload/{request.child_id}", data=data, files=files
        )
        logger.info(
            "Uploaded {} files for child={} activity={!r} -> {}",
            len(request.files),
            request.child_id,
            request.activity_name,
            response.status_code,
        )
        return response.is_success
