from __future__ import annotations

import json
import os
from typing import Any, Dict, Mapping, Optional

_TRUTHY = {"1", "true", "t", "yes", "y", "on"}


class Settings:
    """Lightweight accessor for settings resolved from overrides, then the environment."""

    def __init__(
        self,
        overrides: Optional[Mapping[str, Any]] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> None:
        self._overrides: Dict[str, Any] = dict(overrides or {})
        self._environ = environ if environ is not None else os.environ

    # ------------------------------------------------------------------
    def set(self, key: str, value: Any) -> None:
        self._overrides[key] = value

    # ------------------------------------------------------------------
    def get(self, key: str, default: Any = None) -> Any:
        if key in self._overrides and self._overrides[key] is not None:
            return self._overrides[key]
        env_val = self._environ.get(key)
        if env_val is not None:
            return env_val
        return default

    # ------------------------------------------------------------------
    def get_string(self, key: str, default: Optional[str] = None) -> Optional[str]:
        value = self.get(key, default=default)
        if value is None or isinstance(value, str):
            return value
        if isinstance(value, (dict, list)):
            return json.dumps(value)
        return str(value)

    # ------------------------------------------------------------------
    def get_bool(self, key: str, default: Optional[bool] = None) -> Optional[bool]:
        value = self.get(key, default=default)
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return value.strip().lower() in _TRUTHY
        if value is None:
            return default
        return bool(value)

    # ------------------------------------------------------------------
    def get_int(self, key: str, default: Optional[int] = None) -> Optional[int]:
        value = self.get(key, default=default)
        if value is None:
            return default
        if isinstance(value, bool):
            return int(value)
        if isinstance(value, int):
            return value
        try:
            return int(str(value).strip())
        except ValueError:
            return default

    # ------------------------------------------------------------------
    def get_json(self, key: str, default: Any = None) -> Any:
        value = self.get(key, default=None)
        if value is None:
            return default
        if isinstance(value, (dict, list)):
            return value
        if isinstance(value, str):
            try:
                return json.loads(value)
            except json.JSONDecodeError:
                return default
        return value

    # ------------------------------------------------------------------
    def get_app_db_url(self) -> Optional[str]:
        return self.get_string("APP_DB_URL") or self.get_string("DATABASE_URL")

    # ------------------------------------------------------------------
    def get_db_schema(self) -> str:
        return self.get_string("DB_SCHEMA") or "public"

    # ------------------------------------------------------------------
    def get_schema_cache_ttl(self) -> int:
        ttl = self.get_int("SCHEMA_CACHE_TTL", 300)
        return ttl if ttl is not None and ttl >= 0 else 300
