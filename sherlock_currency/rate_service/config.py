from __future__ import annotations

import logging
import math
import os
from dataclasses import dataclass
from typing import Any, Callable, Final, TypeVar

from dotenv import find_dotenv, load_dotenv

from ..infra.settings import SettingsLoader

logger = logging.getLogger("sherlock_currency")

T = TypeVar("T", int, float)

ENV_PREFIX: Final[str] = "SHERLOCK_CURRENCY_"
_TRUE_VALUES: Final[frozenset[str]] = frozenset({"1", "true", "yes", "on"})


@dataclass(frozen=True)
class ServiceConfig:
    # Провайдер курсов (Frankfurter)
    API_URL: str
    REQUEST_TIMEOUT: float

    # Кеш курсов
    CACHE_ENABLED: bool
    CACHE_FILE_PATH: str
    RATES_TTL_SECONDS: int

    # Логи
    LOG_FILE_PATH: str
    LOG_LEVEL: str
    LOG_CONSOLE: bool

    # Валидация валют
    STRICT_CURRENCIES: bool


def _env(name: str) -> str | None:
    value = os.getenv(ENV_PREFIX + name)
    if value is None or not value.strip():
        return None
    return value.strip()


def _flag(value: object) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUE_VALUES


def _number(
    name: str,
    setting: object,
    default: T,
    cast: Callable[[Any], T],
    minimum: float = 0,
) -> T:
    """Read a numeric option from env, then settings, then the hard default.

    Unparsable, non-finite or below-minimum values are logged and skipped.
    """
    candidates = [(ENV_PREFIX + name, _env(name)), ("settings", setting)]
    for origin, raw in candidates:
        if raw is None:
            continue
        try:
            value = cast(raw)
        except (TypeError, ValueError, OverflowError):
            logger.warning("Ignoring invalid %s=%r", origin, raw)
            continue
        if not math.isfinite(value) or value < minimum:
            logger.warning("Ignoring out-of-range %s=%r", origin, raw)
            continue
        return value
    return default


def load_service_config() -> ServiceConfig:
    """Load service configuration from env/.env and project settings.

    Returns a frozen ServiceConfig with the provider URL, network timeout,
    cache location and freshness window, and logging options. Environment
    variables override .env; SettingsLoader provides the defaults.
    """
    # Load .env once per process (non-overriding), if present
    path = find_dotenv(usecwd=True)
    if path:
        load_dotenv(dotenv_path=path, override=False)

    settings = SettingsLoader()
    timeout = _number(
        "TIMEOUT", settings.get("request_timeout"), 10.0, float, minimum=0.001
    )
    ttl = _number("CACHE_TTL", settings.get("rates_ttl_seconds"), 300, int)
    cache_enabled = _env("CACHE_ENABLED")
    strict = _env("STRICT")
    return ServiceConfig(
        API_URL=(_env("API_URL") or str(settings.get("api_url"))).rstrip("/"),
        REQUEST_TIMEOUT=timeout,
        CACHE_ENABLED=_flag(
            cache_enabled
            if cache_enabled is not None
            else settings.get("cache_enabled", True)
        ),
        CACHE_FILE_PATH=os.fspath(_env("CACHE_FILE") or settings.get("cache_file")),
        RATES_TTL_SECONDS=ttl,
        LOG_FILE_PATH=os.fspath(_env("LOG_FILE") or settings.get("log_file")),
        LOG_LEVEL=str(_env("LOG_LEVEL") or settings.get("log_level", "INFO")).upper(),
        LOG_CONSOLE=_flag(settings.get("log_console", False)),
        STRICT_CURRENCIES=_flag(
            strict if strict is not None else settings.get("strict_currencies", False)
        ),
    )


def build_latest_url(cfg: ServiceConfig) -> str:
    """Собрать URL эндпоинта последних курсов."""
    return f"{cfg.API_URL}/latest"
