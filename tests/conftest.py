"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any
from unittest.mock import Mock

import pytest
import requests

from sherlock_currency.core.exceptions import CurrencyNotOfferedError
from sherlock_currency.rate_service.api_clients import BaseApiClient
from sherlock_currency.rate_service.config import load_service_config


class FakeClient(BaseApiClient):
    """Rate client serving fixed rates and counting calls."""

    SOURCE = "Fake"

    def __init__(self, rates: dict[tuple[str, str], float], date: str = "2026-10-16"):
        self.rates = dict(rates)
        self.date = date
        self.calls: list[tuple[str, str]] = []

    def fetch_entry(self, source: str, target: str) -> tuple[float, str | None]:
        self.calls.append((source, target))
        if (source, target) not in self.rates:
            raise CurrencyNotOfferedError(target)
        return self.rates[(source, target)], self.date


class FakeClock:
    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


def make_response(status: int = 200, payload: Any = None, *, bad_json: bool = False) -> Mock:
    resp = Mock(spec=requests.Response)
    resp.status_code = status
    if bad_json:
        resp.json.side_effect = ValueError("Expecting value: line 1 column 1 (char 0)")
    else:
        resp.json.return_value = payload
    return resp


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Point cache and log files into a temp dir; no real .env is read."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("SHERLOCK_CURRENCY_CACHE_FILE", str(tmp_path / "rates.json"))
    monkeypatch.setenv("SHERLOCK_CURRENCY_LOG_FILE", str(tmp_path / "logs" / "actions.log"))
    monkeypatch.setenv("SHERLOCK_CURRENCY_API_URL", "https://rates.test/v1/")
    monkeypatch.setenv("SHERLOCK_CURRENCY_CACHE_TTL", "300")
    monkeypatch.setenv("SHERLOCK_CURRENCY_TIMEOUT", "5")
    monkeypatch.setenv("SHERLOCK_CURRENCY_CACHE_ENABLED", "1")
    monkeypatch.setenv("SHERLOCK_CURRENCY_STRICT", "0")
    return tmp_path


@pytest.fixture
def service_config():
    return load_service_config()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def fake_client() -> FakeClient:
    return FakeClient(
        {
            ("USD", "CHF"): 0.91,
            ("CAD", "AUD"): 1.10,
            ("EUR", "GBP"): 0.87,
        }
    )
