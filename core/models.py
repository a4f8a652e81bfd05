"""Core domain models for activity images and upload choices."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import Any


def parse_calendar_date(raw: Any) -> date:
    """Parse `YYYY-MM-DD` or a full ISO timestamp into a calendar date."""
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    if not isinstance(raw, str) or not raw.strip():
        raise ValueError(f"invalid date: {raw!r}")
    text = raw.strip()
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        # Fall back to full timestamp parsing (e.g. "2024-05-01T08:00:00Z")
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()


@dataclass(frozen=True)
class ActivityImage:
    """A single activity photo as returned by the backend."""

    id: int
    name: str
    date: date
    image_url: str

    @classmethod
    def from_payload(cls, raw: Any) -> ActivityImage:
        """Build from a `{id, name, date, imageUrl}` JSON object."""
        if not isinstance(raw, dict):
            raise ValueError(f"image entry is not an object: {raw!r}")
        try:
            image_id = int(raw["id"])
            name = str(raw["name"])
            url = str(raw["imageUrl"])
        except (KeyError, TypeError, ValueError) as ex:
            raise ValueError(f"image entry missing field: {ex}") from ex
        return cls(id=image_id, name=name, date=parse_calendar_date(raw.get("date")), image_url=url)


# Activity label -> images in server response order
GroupedImages = dict[str, list[ActivityImage]]


@dataclass(frozen=True)
class DailyActivity:
    """An activity scheduled for a day; its title tags uploaded photos."""

    id: int
    title: str
    type: str = ""
    start_time: str = ""
    end_time: str = ""

    @classmethod
    def from_payload(cls, raw: Any) -> DailyActivity:
        if not isinstance(raw, dict):
            raise ValueError(f"activity entry is not an object: {raw!r}")
        try:
            return cls(
                id=int(raw["id"]),
                title=str(raw["title"]),
                type=str(raw.get("type") or ""),
                start_time=str(raw.get("startTime") or ""),
                end_time=str(raw.get("endTime") or ""),
            )
        except (KeyError, TypeError, ValueError) as ex:
            raise ValueError(f"activity entry missing field: {ex}") from ex

    @property
    def display_name(self) -> str:
        return f"{self.title} ({self.type})" if self.type else self.title


@dataclass(frozen=True)
class UploadFile:
    """An encoded image ready for multipart upload."""

    filename: str
    content: bytes
    mime_type: str = "image/jpeg"

    @classmethod
    def from_path(cls, path: Path) -> UploadFile:
        mime = "image/png" if path.suffix.lower() == ".png" else "image/jpeg"
        return cls(filename=path.name, content=path.read_bytes(), mime_type=mime)


@dataclass
class UploadRequest:
    """Files to upload for one child, tagged with an activity name."""

    child_id: str
    date: date
    activity_name: str
    files: list[UploadFile] = field(default_factory=list)
