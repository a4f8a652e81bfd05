"""Normalise backend responses into plain data before business logic runs.

Backend calls may hand back either an already parsed JSON value or a raw
`httpx.Response`. Everything past this module only sees plain data.
"""

from __future__ import annotations

from typing import Any

import httpx
from loguru import logger

from core.models import ActivityImage, DailyActivity


def normalize_payload(response: Any) -> list | dict | None:
    """Return the JSON value carried by `response`, or None if unusable."""
    if isinstance(response, httpx.Response):
        try:
            response = response.json()
        except ValueError as ex:
            logger.warning("Response body is not JSON: {}", ex)
            return None
    if isinstance(response, (list, dict)):
        return response
    return None


def image_list_from_payload(payload: Any) -> list[ActivityImage]:
    """Parse an image list; malformed shapes degrade to an empty list."""
    data = normalize_payload(payload)
    if not isinstance(data, list):
        if payload is not None:
            logger.warning("Unexpected image payload shape: {}", type(payload).__name__)
        return []
    images: list[ActivityImage] = []
    for raw in data:
        try:
            images.append(ActivityImage.from_payload(raw))
        except ValueError as ex:
            logger.warning("Skipping malformed image entry: {}", ex)
    return images


def activity_list_from_payload(payload: Any) -> list[DailyActivity]:
    """Parse `{"activities": [...]}` (or a bare list) into activities."""
    data = normalize_payload(payload)
    if isinstance(data, dict):
        data = data.get("activities")
    if not isinstance(data, list):
        return []
    result: list[DailyActivity] = []
    for raw in data:
        try:
            result.append(DailyActivity.from_payload(raw))
        except ValueError as ex:
            logger.warning("Skipping malformed activity entry: {}", ex)
    return result


def is_delete_success(result: Any) -> bool:
    """A parsed body (or empty body) is success; a Response must be 2xx."""
    if isinstance(result, httpx.Response):
        return result.is_success
    return True
