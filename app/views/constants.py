"""
UI/view constants centralized for reuse across view modules.
"""

from __future__ import annotations

from PySide6.QtCore import Qt

# Data roles
LABEL_ROLE: int = Qt.UserRole  # activity label on folder tiles
INDEX_ROLE: int = Qt.UserRole + 1  # image index on rail thumbnails

# Folder grid
FOLDER_TILE_PX: int = 120
FOLDER_ICON_PX: int = 80
FOLDER_GRID_SPACING_PX: int = 12

# Carousel
RAIL_WIDTH_PX: int = 96
RAIL_THUMB_PX: int = 80
PREVIEW_MAX_SIDE: int = 2048
NAV_BUTTON_PX: int = 48
CAROUSEL_BACKGROUND: str = "#0d0d0d"

# Swipe defaults (overridable by settings.json)
DEFAULT_SWIPE_THRESHOLD_PX: int = 50
DEFAULT_SETTLE_DELAY_MS: int = 50
SNAP_BACK_MS: int = 300

# Status bar toast durations
TOAST_MS: int = 3000
