import json
import sqlite3
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError, to_jsonable_python

from venturevoyage.models.idea import BusinessIdea
from venturevoyage.models.profile import UserProfile
from venturevoyage.utils.constants import SettingsKeys
from venturevoyage.utils.logger import logger


class SettingsStore:
    """Flat key/value store for user settings, backed by SQLite. Values are JSON text."""

    def __init__(self, db_path):
        if db_path != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.RLock()
        self.conn = sqlite3.connect(db_path, check_same_thread=False)
        self.cursor = self.conn.cursor()
        self.cursor.execute("""
            CREATE TABLE IF NOT EXISTS settings (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            );
        """)
        self.conn.commit()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    # Raw access

    def _write(self, key: str, raw: str):
        with self._lock:
            self.cursor.execute(
                "INSERT OR REPLACE INTO settings (key, value, updated_at) VALUES (?, ?, CURRENT_TIMESTAMP)",
                (key, raw),
            )
            self.conn.commit()

    def _read(self, key: str) -> Any:
        with self._lock:
            self.cursor.execute("SELECT value FROM settings WHERE key = ?", (key,))
            row = self.cursor.fetchone()
        if row is None:
            return None
        try:
            return json.loads(row[0])
        except ValueError as e:
            logger.error(f"Settings: corrupt value for '{key}' - {e}")
            return None

    # Generic storage

    def save(self, key: str, value: Any):
        """Save any JSON-serializable value or pydantic model. Encoding failures are logged and skipped."""
        try:
            raw = json.dumps(to_jsonable_python(value))
        except (TypeError, ValueError, PydanticSerializationError) as e:
            logger.error(f"Settings: failed to save '{key}' - {e}")
            return
        self._write(key, raw)
        logger.debug(f"Settings: saved '{key}'")

    def get(self, key: str, expected_type=None) -> Any:
        value = self._read(key)
        if value is None or expected_type is None:
            return value
        try:
            return TypeAdapter(expected_type).validate_python(value)
        except ValidationError as e:
            logger.error(f"Settings: failed to decode '{key}' - {e.error_count()} errors")
            return None

    def remove(self, key: str):
        with self._lock:
            self.cursor.execute("DELETE FROM settings WHERE key = ?", (key,))
            self.conn.commit()
        logger.debug(f"Settings: removed '{key}'")

    def exists(self, key: str) -> bool:
        with self._lock:
            self.cursor.execute("SELECT 1 FROM settings WHERE key = ?", (key,))
            return self.cursor.fetchone() is not None

    # Primitive types

    def save_string(self, key: str, value: str):
        self.save(key, value)

    def get_string(self, key: str) -> Optional[str]:
        value = self._read(key)
        return value if isinstance(value, str) else None

    def save_bool(self, key: str, value: bool):
        self.save(key, bool(value))

    def get_bool(self, key: str) -> bool:
        value = self._read(key)
        return value if isinstance(value, bool) else False

    def save_int(self, key: str, value: int):
        self.save(key, int(value))

    def get_int(self, key: str) -> int:
        value = self._read(key)
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        return 0

    def save_float(self, key: str, value: float):
        self.save(key, float(value))

    def get_float(self, key: str) -> float:
        value = self._read(key)
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return float(value)
        return 0.0

    def _save_optional_string(self, key: str, value: Optional[str]):
        if value is None:
            self.remove(key)
        else:
            self.save_string(key, value)

    # App-specific settings

    @property
    def has_completed_onboarding(self) -> bool:
        return self.get_bool(SettingsKeys.HAS_COMPLETED_ONBOARDING)

    @has_completed_onboarding.setter
    def has_completed_onboarding(self, value: bool):
        self.save_bool(SettingsKeys.HAS_COMPLETED_ONBOARDING, value)

    @property
    def business_ideas(self) -> List[BusinessIdea]:
        return self.get(SettingsKeys.BUSINESS_IDEAS_DATA, List[BusinessIdea]) or []

    @business_ideas.setter
    def business_ideas(self, ideas: List[BusinessIdea]):
        self.save(SettingsKeys.BUSINESS_IDEAS_DATA, list(ideas))

    @property
    def selected_business_idea_id(self) -> Optional[str]:
        return self.get_string(SettingsKeys.SELECTED_BUSINESS_IDEA_ID)

    @selected_business_idea_id.setter
    def selected_business_idea_id(self, idea_id: Optional[str]):
        self._save_optional_string(SettingsKeys.SELECTED_BUSINESS_IDEA_ID, idea_id)

    @property
    def user_profile(self) -> Optional[UserProfile]:
        return self.get(SettingsKeys.USER_PROFILE_DATA, UserProfile)

    @user_profile.setter
    def user_profile(self, profile: Optional[UserProfile]):
        if profile is None:
            self.remove(SettingsKeys.USER_PROFILE_DATA)
        else:
            self.save(SettingsKeys.USER_PROFILE_DATA, profile)

    @property
    def google_ai_api_key(self) -> Optional[str]:
        return self.get_string(SettingsKeys.GOOGLE_AI_API_KEY)

    @google_ai_api_key.setter
    def google_ai_api_key(self, value: Optional[str]):
        self._save_optional_string(SettingsKeys.GOOGLE_AI_API_KEY, value)

    @property
    def google_ai_model(self) -> Optional[str]:
        return self.get_string(SettingsKeys.GOOGLE_AI_MODEL)

    @google_ai_model.setter
    def google_ai_model(self, value: Optional[str]):
        self._save_optional_string(SettingsKeys.GOOGLE_AI_MODEL, value)

    # Utility methods

    def clear_all(self):
        """Remove all app data (onboarding, ideas, profile, progress). API overrides are kept."""
        for key in SettingsKeys.APP_DATA:
            self.remove(key)
        logger.info("Settings: cleared all app data")

    def export_all(self) -> Dict[str, Any]:
        with self._lock:
            self.cursor.execute("SELECT key FROM settings ORDER BY key")
            keys = [row[0] for row in self.cursor.fetchall()]
        return {key: self._read(key) for key in keys}

    def close(self):
        with self._lock:
            self.cursor.close()
            self.conn.close()
