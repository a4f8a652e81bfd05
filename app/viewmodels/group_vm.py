from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class FolderVM:
    label: str
    count: int

    @property
    def badge(self) -> str:
        return str(self.count)
