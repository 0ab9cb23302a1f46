"""Tests for the rate cache: freshness, persistence and corruption handling."""

import json
from datetime import timedelta

import pytest

from sherlock_currency.rate_service.storage import RateCache


class TestInMemoryCache:
    def test_miss_then_hit(self, clock):
        cache = RateCache(ttl_seconds=300, clock=clock)
        assert cache.get("USD", "CHF") is None
        stored = cache.put("USD", "CHF", 0.91, rate_date="2026-10-16")
        entry = cache.get("USD", "CHF")
        assert entry == stored
        assert entry.rate == 0.91
        assert entry.fetched_at == clock.now
        assert entry.pair == ("USD", "CHF")

    def test_pairs_are_ordered(self, clock):
        cache = RateCache(clock=clock)
        cache.put("USD", "CHF", 0.91)
        assert cache.get("CHF", "USD") is None

    def test_entry_expires_at_threshold(self, clock):
        cache = RateCache(ttl_seconds=300, clock=clock)
        cache.put("USD", "CHF", 0.91)
        clock.advance(299)
        assert cache.get("USD", "CHF") is not None
        clock.advance(1)
        assert cache.get("USD", "CHF") is None

    def test_entry_from_the_future_is_not_fresh(self, clock):
        cache = RateCache(ttl_seconds=300, clock=clock)
        cache.put("USD", "CHF", 0.91)
        clock.now -= timedelta(seconds=10)
        assert cache.get("USD", "CHF") is None

    def test_put_supersedes_entry(self, clock):
        cache = RateCache(clock=clock)
        first = cache.put("USD", "CHF", 0.91)
        clock.advance(600)
        second = cache.put("USD", "CHF", 0.92)
        assert cache.get("USD", "CHF") == second
        assert first.rate == 0.91
        assert len(cache) == 1

    def test_memory_cache_never_touches_disk(self, clock, tmp_path):
        RateCache(clock=clock).put("USD", "CHF", 0.91)
        assert list(tmp_path.iterdir()) == []


class TestPersistentCache:
    def test_entry_survives_new_instance(self, clock, tmp_path):
        path = tmp_path / "cache" / "rates.json"
        RateCache(path, ttl_seconds=300, clock=clock).put(
            "USD", "CHF", 0.91, rate_date="2026-10-16"
        )
        entry = RateCache(path, ttl_seconds=300, clock=clock).get("USD", "CHF")
        assert entry is not None
        assert entry.rate == 0.91
        assert entry.rate_date == "2026-10-16"
        assert entry.fetched_at == clock.now

    def test_snapshot_layout(self, clock, tmp_path):
        path = tmp_path / "rates.json"
        RateCache(path, clock=clock).put("USD", "CHF", 0.91, provider="Frankfurter")
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["last_refresh"] == "2026-10-19T12:00:00Z"
        assert data["pairs"]["USD_CHF"] == {
            "rate": 0.91,
            "fetched_at": "2026-10-19T12:00:00Z",
            "rate_date": None,
            "provider": "Frankfurter",
        }
        assert not list(tmp_path.glob("*.tmp"))

    def test_writers_merge_entries(self, clock, tmp_path):
        path = tmp_path / "rates.json"
        a = RateCache(path, clock=clock)
        b = RateCache(path, clock=clock)
        a.get("USD", "CHF")
        b.get("EUR", "GBP")
        a.put("USD", "CHF", 0.91)
        b.put("EUR", "GBP", 0.87)
        fresh = RateCache(path, clock=clock)
        assert fresh.get("USD", "CHF").rate == 0.91
        assert fresh.get("EUR", "GBP").rate == 0.87

    @pytest.mark.parametrize(
        "content",
        [
            "{not json",
            "[]",
            '{"pairs": []}',
            "",
        ],
    )
    def test_corrupted_file_is_cold_start(self, clock, tmp_path, content):
        path = tmp_path / "rates.json"
        path.write_text(content, encoding="utf-8")
        cache = RateCache(path, clock=clock)
        assert cache.get("USD", "CHF") is None
        cache.put("USD", "CHF", 0.91)
        assert RateCache(path, clock=clock).get("USD", "CHF").rate == 0.91

    def test_bad_entries_are_skipped(self, clock, tmp_path):
        path = tmp_path / "rates.json"
        path.write_text(
            json.dumps(
                {
                    "pairs": {
                        "USD_CHF": {"rate": "oops", "fetched_at": "2026-10-19T12:00:00Z"},
                        "USD_EUR": {"rate": -1, "fetched_at": "2026-10-19T12:00:00Z"},
                        "USD_GBP": {"rate": 0.75, "fetched_at": "yesterday"},
                        "USD_JPY": {"rate": 150.1, "fetched_at": "2026-10-19T11:59:00Z"},
                        "garbage": {"rate": 1, "fetched_at": "2026-10-19T12:00:00Z"},
                        "USD_CAD": {"rate": float("inf"), "fetched_at": "2026-10-19T12:00:00Z"},
                        "USD_AUD": {"rate": float("nan"), "fetched_at": "2026-10-19T12:00:00Z"},
                    }
                }
            ),
            encoding="utf-8",
        )
        cache = RateCache(path, clock=clock)
        assert cache.get("USD", "CHF") is None
        assert cache.get("USD", "EUR") is None
        assert cache.get("USD", "GBP") is None
        assert cache.get("USD", "CAD") is None
        assert cache.get("USD", "AUD") is None
        assert cache.get("USD", "JPY").rate == 150.1
        assert len(cache) == 1

    def test_clear(self, clock, tmp_path):
        path = tmp_path / "rates.json"
        cache = RateCache(path, clock=clock)
        cache.put("USD", "CHF", 0.91)
        cache.put("EUR", "GBP", 0.87)
        assert cache.clear() == 2
        assert RateCache(path, clock=clock).get("USD", "CHF") is None
        assert json.loads(path.read_text(encoding="utf-8"))["pairs"] == {}

    def test_unwritable_location_is_not_fatal(self, clock, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("", encoding="utf-8")
        cache = RateCache(blocker / "rates.json", clock=clock)
        entry = cache.put("USD", "CHF", 0.91)
        assert cache.get("USD", "CHF") == entry
