from __future__ import annotations

from glitch_city.storage.repos.settings_repo import SettingsRepo

__all__ = [
    "SettingsRepo",
]
