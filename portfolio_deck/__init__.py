"""Package init: shared constants for the live portfolio deck."""
from __future__ import annotations

APP_NAME = "portfolio-deck"
APP_ICON = "📈"
VERSION = "0.1.0"
