import json
import os
from typing import Any, Dict, Optional


def _load_config_file(path: Optional[str]) -> Dict[str, Any]:
    """Read optional JSON overrides; a missing or unreadable file yields no overrides."""
    if not path or not os.path.exists(path):
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).lower() in ("1", "true", "yes")


class Settings:
    """Layered settings: class defaults -> JSON config file -> environment."""

    # Content store
    CONTENT_FILE: str = "data/content.json"
    CONTENT_FILE_MODE: int = 0o640

    # Timestamps shown to admins are rendered in one fixed zone
    TIMEZONE: str = "America/New_York"
    TIMESTAMP_FORMAT: str = "%Y-%m-%d %H:%M:%S"

    # Admin session / CSRF
    ADMIN_USERNAME: str = "admin"
    ADMIN_PASSWORD: str = ""
    SESSION_TIMEOUT: int = 1800
    CSRF_TOKEN_TTL: int = 3600
    SESSION_COOKIE_NAME: str = "admin_session"

    # Write legacy `quantity` back as a one-entry `quantities` list on save
    UPGRADE_LEGACY_QUANTITY: bool = False

    LOG_LEVEL: str = "INFO"

    _INT_KEYS = ("CONTENT_FILE_MODE", "SESSION_TIMEOUT", "CSRF_TOKEN_TTL")
    _BOOL_KEYS = ("UPGRADE_LEGACY_QUANTITY",)

    def __init__(self, config_file: Optional[str] = None):
        config_file = config_file or os.getenv("SITE_CONFIG_FILE")
        layers = [_load_config_file(config_file), os.environ]
        for layer in layers:
            for key, value in layer.items():
                if key.isupper() and hasattr(Settings, key) and not key.startswith("_"):
                    setattr(self, key, self._coerce(key, value))

    def _coerce(self, key: str, value: Any) -> Any:
        if key in self._BOOL_KEYS:
            return _as_bool(value)
        if key in self._INT_KEYS:
            # modes are usually written in octal ("0640")
            if key == "CONTENT_FILE_MODE" and isinstance(value, str):
                return int(value, 8)
            return int(value)
        return str(value)


settings = Settings()


def get_settings() -> Settings:
    return settings
