from __future__ import annotations

import os
import threading
import tomllib
from pathlib import Path
from typing import Any


class SettingsLoader:
    """Singleton settings provider.

    Reads pyproject.toml [tool.sherlock_currency] if present.
    Provides defaults otherwise.
    """

    _instance: "SettingsLoader | None" = None
    _lock = threading.Lock()

    def __new__(cls, *args, **kwargs):  # noqa: D401 - singleton boilerplate
        with cls._lock:
            if cls._instance is None:
                cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self) -> None:
        if getattr(self, "_initialized", False):
            return
        self._initialized = True
        self._root = Path(__file__).resolve().parents[2]
        self._config: dict[str, Any] = {}
        self.reload()

    def _defaults(self) -> dict[str, Any]:
        # Launcher tools run from arbitrary cwd: keep state under the user cache
        xdg = os.getenv("XDG_CACHE_HOME") or str(Path.home() / ".cache")
        cache_dir = Path(xdg) / "sherlock-currency"
        return {
            "cache_dir": str(cache_dir),
            "cache_file": str(cache_dir / "rates.json"),
            "cache_enabled": True,
            "log_file": str(cache_dir / "logs" / "actions.log"),
            "log_level": "INFO",
            "log_console": False,
            "log_rotation_bytes": 1_048_576,  # 1MB
            "log_backup_count": 5,
            "rates_ttl_seconds": 300,
            "request_timeout": 10.0,
            "api_url": "https://api.frankfurter.dev/v1",
            "strict_currencies": False,
        }

    def reload(self) -> None:
        cfg = self._defaults()
        pyproject = self._root / "pyproject.toml"
        if pyproject.exists():
            try:
                data = tomllib.loads(pyproject.read_text(encoding="utf-8"))
            except (OSError, tomllib.TOMLDecodeError):
                # Ignore malformed config; stick to defaults
                data = {}
            section = data.get("tool", {}).get("sherlock_currency", {})
            if isinstance(section, dict):
                for k, v in section.items():
                    cfg[k] = v
        self._config = cfg

    def get(self, key: str, default: Any | None = None) -> Any:
        return self._config.get(key, default)
