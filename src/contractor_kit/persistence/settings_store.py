"""Persistence for route start/end preferences."""

from __future__ import annotations

import logging
from dataclasses import asdict

from ..models.domain import RouteSettings
from .filesystem import FileStorage

logger = logging.getLogger(__name__)

ROUTE_SETTINGS_NAME = "route_settings"


def _clean(value: object) -> str | None:
    if not isinstance(value, str):
        return None
    return value.strip() or None


class RouteSettingsStore:
    """Loads route preferences once and writes them back only on explicit save."""

    def __init__(self, storage: FileStorage | None = None) -> None:
        self.storage = storage or FileStorage()
        self.path = self.storage.preference_path(ROUTE_SETTINGS_NAME)

    def load(self) -> RouteSettings:
        try:
            data = self.storage.read_json(self.path)
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable route settings at {self.path}: {e}")
            return RouteSettings()
        if not isinstance(data, dict):
            return RouteSettings()
        return RouteSettings(
            start_address=_clean(data.get("start_address")),
            end_address=_clean(data.get("end_address")),
        )

    def save(self, route_settings: RouteSettings) -> RouteSettings:
        cleaned = RouteSettings(
            start_address=_clean(route_settings.start_address),
            end_address=_clean(route_settings.end_address),
        )
        self.storage.write_json(self.path, asdict(cleaned))
        logger.info("Saved route settings")
        return cleaned
