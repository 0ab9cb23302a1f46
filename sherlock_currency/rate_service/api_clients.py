from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod

import requests

from ..core.currencies import is_known
from ..core.exceptions import (
    CurrencyNotOfferedError,
    RateFetchError,
    ServiceUnavailableError,
)
from .config import ServiceConfig, build_latest_url

logger = logging.getLogger("sherlock_currency")


class BaseApiClient(ABC):
    SOURCE = "Unknown"

    def __init__(self, cfg: ServiceConfig) -> None:
        self.cfg = cfg

    @abstractmethod
    def fetch_entry(self, source: str, target: str) -> tuple[float, str | None]:
        """Возвращает курс source→target и дату публикации провайдера."""

    def fetch_rate(self, source: str, target: str) -> float:
        rate, _ = self.fetch_entry(source, target)
        return rate


class FrankfurterClient(BaseApiClient):
    """Client for the Frankfurter API (ECB reference rates, no key)."""

    SOURCE = "Frankfurter"

    def fetch_entry(self, source: str, target: str) -> tuple[float, str | None]:
        url = build_latest_url(self.cfg)
        params = {"base": source, "symbols": target}
        t0 = time.perf_counter()
        try:
            resp = requests.get(url, params=params, timeout=self.cfg.REQUEST_TIMEOUT)
        except requests.exceptions.Timeout as exc:
            raise ServiceUnavailableError(
                f"timed out after {self.cfg.REQUEST_TIMEOUT:g}s"
            ) from exc
        except requests.exceptions.RequestException as exc:
            raise ServiceUnavailableError(f"network error ({self.SOURCE}): {exc}") from exc
        elapsed_ms = int((time.perf_counter() - t0) * 1000)
        status = resp.status_code
        logger.info(
            "GET %s base=%s symbols=%s -> HTTP %s in %d ms",
            url,
            source,
            target,
            status,
            elapsed_ms,
        )

        if status in (404, 422):
            # Provider rejects codes it does not publish; base is checked first
            raise CurrencyNotOfferedError(self._rejected_code(resp, source, target))
        if status != 200:
            raise RateFetchError(f"{self.SOURCE} HTTP {status}")

        try:
            data = resp.json()
            rates = data["rates"]
            if not isinstance(rates, dict):
                raise TypeError("'rates' is not an object")
        except (ValueError, KeyError, TypeError) as exc:
            raise RateFetchError(f"malformed {self.SOURCE} response: {exc}") from exc

        # Response may carry more currencies than asked for
        if target not in rates:
            raise CurrencyNotOfferedError(target)
        try:
            rate = float(rates[target])
        except (TypeError, ValueError) as exc:
            raise RateFetchError(
                f"malformed {self.SOURCE} rate for {target}: {rates[target]!r}"
            ) from exc
        if not rate > 0 or rate == float("inf"):
            raise RateFetchError(f"{self.SOURCE} returned invalid rate {rate!r}")

        date = data.get("date")
        return rate, str(date) if date else None

    @staticmethod
    def _rejected_code(resp: requests.Response, source: str, target: str) -> str:
        """Pick the code the provider refused, from its message or the registry."""
        try:
            message = str(resp.json().get("message", "")).upper()
        except (ValueError, AttributeError):
            message = ""
        if target in message and source not in message:
            return target
        if source in message and target not in message:
            return source
        # Message names neither code (or both): blame the one we do not list
        if is_known(source) and not is_known(target):
            return target
        return source
