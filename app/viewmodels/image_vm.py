"""Lightweight view model wrapper around `ActivityImage`."""

from __future__ import annotations

from dataclasses import dataclass

from core.models import ActivityImage


@dataclass
class ImageVM:
    """Expose convenient properties for the carousel caption."""

    image: ActivityImage
    index: int
    total: int

    @property
    def title(self) -> str:
        return self.image.name

    @property
    def display_date(self) -> str:
        """Date in the user's locale format (e.g. 05/01/2024)."""
        return self.image.date.strftime("%x")

    @property
    def counter(self) -> str:
        """One-based position, e.g. "2 / 5"."""
        return f"{self.index + 1} / {self.total}"
