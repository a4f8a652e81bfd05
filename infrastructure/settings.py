"""Settings access helpers for JSON-based configuration."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from loguru import logger

# Environment variables that override dotted settings keys
ENV_OVERRIDES: dict[str, str] = {
    "GALLERY_API_BASE_URL": "api.base_url",
    "GALLERY_API_TOKEN": "api.token",
    "GALLERY_CHILD_ID": "child_id",
}


class JsonSettings:
    """Lightweight JSON settings reader with dotted-key access.

    A missing file is an error only when `required` is True; otherwise every
    lookup falls back to its default. Environment variables listed in
    `ENV_OVERRIDES` take precedence over the file.
    """

    def __init__(
        self,
        settings_path: str | Path | None = None,
        required: bool = False,
        environ: dict[str, str] | None = None,
    ) -> None:
        self._data: dict[str, Any] = {}
        self._path = Path(settings_path) if settings_path is not None else None
        if self._path is not None:
            if self._path.exists():
                with self._path.open("r", encoding="utf-8") as f:
                    loaded = json.load(f)
                if isinstance(loaded, dict):
                    self._data = loaded
                else:
                    logger.warning("Ignoring non-object settings file: {}", self._path)
            elif required:
                raise FileNotFoundError(f"settings.json not found: {self._path}")
            else:
                logger.info("No settings file at {}; using defaults", self._path)
        env = os.environ if environ is None else environ
        self._overrides = {key: env[var] for var, key in ENV_OVERRIDES.items() if env.get(var)}

    def get(self, key: str, default: Any | None = None) -> Any:
        """Return value for dotted `key`, or `default` if not present."""
        if key in self._overrides:
            return self._overrides[key]
        node: Any = self._data
        for part in key.split("."):
            if isinstance(node, dict) and part in node:
                node = node[part]
            else:
                return default
        return node

    def get_int(self, key: str, default: int) -> int:
        try:
            return int(self.get(key, default))
        except (TypeError, ValueError):
            logger.warning("Setting {} is not an integer; using {}", key, default)
            return default

    def get_float(self, key: str, default: float) -> float:
        try:
            return float(self.get(key, default))
        except (TypeError, ValueError):
            logger.warning("Setting {} is not a number; using {}", key, default)
            return default
