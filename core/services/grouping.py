"""Grouping of activity images into per-label folders."""

from __future__ import annotations

from collections.abc import Iterable

from core.models import ActivityImage, GroupedImages


def group_images(images: Iterable[ActivityImage]) -> GroupedImages:
    """Partition `images` by activity label.

    Labels keep the order of their first appearance and each group keeps the
    order the backend returned.
    """
    grouped: GroupedImages = {}
    for img in images:
        grouped.setdefault(img.name, []).append(img)
    return grouped


def remove_image(grouped: GroupedImages, image_id: int) -> GroupedImages:
    """Return a copy of `grouped` without `image_id`, dropping emptied groups."""
    result: GroupedImages = {}
    for label, items in grouped.items():
        kept = [it for it in items if it.id != image_id]
        if kept:
            result[label] = kept
    return result


def image_count(grouped: GroupedImages) -> int:
    return sum(len(items) for items in grouped.values())
