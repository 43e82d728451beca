from __future__ import annotations

from datetime import datetime, timezone

from glitch_city.storage.database import Database

TUTORIAL_COMPLETED_KEY = "tutorial_completed"


class SettingsRepo:
    """Key/value flags persisted across sessions."""

    def __init__(self, db: Database) -> None:
        self.db = db

    def get(self, key: str) -> str | None:
        with self.db.get_connection() as conn:
            row = conn.execute("SELECT value FROM settings WHERE key = ?", (key,)).fetchone()
        return row["value"] if row else None

    def set(self, key: str, value: str) -> None:
        now = datetime.now(timezone.utc).isoformat()
        with self.db.get_connection() as conn:
            conn.execute(
                "INSERT INTO settings (key, value, updated_at) VALUES (?, ?, ?) "
                "ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at",
                (key, value, now),
            )

    def delete(self, key: str) -> None:
        with self.db.get_connection() as conn:
            conn.execute("DELETE FROM settings WHERE key = ?", (key,))

    # -- Onboarding --

    def has_completed_tutorial(self) -> bool:
        return self.get(TUTORIAL_COMPLETED_KEY) == "true"

    def mark_tutorial_completed(self) -> None:
        self.set(TUTORIAL_COMPLETED_KEY, "true")

    def clear_tutorial_completed(self) -> None:
        self.delete(TUTORIAL_COMPLETED_KEY)
