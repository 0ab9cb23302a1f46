from __future__ import annotations

import json
import logging
import math
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable

from ..core.models import RateEntry, pair_key

logger = logging.getLogger("sherlock_currency")

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _iso(dt: datetime) -> str:
    return dt.replace(microsecond=0).isoformat().replace("+00:00", "Z")


def _parse_ts(ts: Any) -> datetime | None:
    if not isinstance(ts, str) or not ts:
        return None
    try:
        dt = datetime.fromisoformat(ts.replace("Z", "+00:00"))
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def _atomic_write_json(path: Path, obj: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    # Unique temp name per writer; os.replace is atomic within a directory
    fd, tmp = tempfile.mkstemp(
        prefix=path.name + ".", suffix=".tmp", dir=os.fspath(path.parent)
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            json.dump(obj, fh, ensure_ascii=False, indent=2)
        os.replace(tmp, path)
    except BaseException:
        Path(tmp).unlink(missing_ok=True)
        raise


def _entry_from_json(key: str, obj: Any) -> RateEntry | None:
    if not isinstance(obj, dict) or "_" not in key:
        return None
    frm, to = key.split("_", 1)
    fetched_at = _parse_ts(obj.get("fetched_at"))
    try:
        rate = float(obj.get("rate"))
    except (TypeError, ValueError):
        return None
    if fetched_at is None or not math.isfinite(rate) or not rate > 0:
        return None
    rate_date = obj.get("rate_date")
    return RateEntry(
        pair=(frm, to),
        rate=rate,
        fetched_at=fetched_at,
        rate_date=str(rate_date) if rate_date else None,
        provider=str(obj.get("provider") or "Unknown"),
    )


class RateCache:
    """Short-lived store of exchange rates keyed by ordered currency pair.

    - ``path=None`` keeps entries in memory only (cold on every run)
    - with a path, entries live in a JSON snapshot shared between processes;
      unreadable or corrupted snapshots count as empty
    - ``get`` only returns entries younger than ``ttl_seconds``
    """

    def __init__(
        self,
        path: str | os.PathLike[str] | None = None,
        ttl_seconds: float = 300,
        clock: Clock = utc_now,
    ) -> None:
        self.path = Path(path) if path is not None else None
        self.ttl_seconds = float(ttl_seconds)
        self._clock = clock
        self._entries: dict[str, RateEntry] | None = None

    def _read_snapshot(self) -> dict[str, RateEntry]:
        if self.path is None or not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            logger.warning("Rate cache %s unreadable, starting cold: %s", self.path, exc)
            return {}
        pairs = data.get("pairs") if isinstance(data, dict) else None
        if not isinstance(pairs, dict):
            logger.warning("Rate cache %s has unexpected layout, ignoring", self.path)
            return {}
        entries: dict[str, RateEntry] = {}
        for key, obj in pairs.items():
            entry = _entry_from_json(str(key), obj)
            if entry is not None:
                entries[entry.key] = entry
        return entries

    def _load(self) -> dict[str, RateEntry]:
        if self._entries is None:
            self._entries = self._read_snapshot()
        return self._entries

    def is_fresh(self, entry: RateEntry) -> bool:
        age = entry.age_seconds(self._clock())
        return 0 <= age < self.ttl_seconds

    def get(self, source: str, target: str) -> RateEntry | None:
        """Return a fresh entry for source -> target or None."""
        key = pair_key(source, target)
        entry = self._load().get(key)
        if entry is None:
            logger.debug("Rate cache miss for %s", key)
            return None
        if not self.is_fresh(entry):
            logger.debug("Rate cache entry for %s expired (fetched %s)", key, _iso(entry.fetched_at))
            return None
        logger.debug("Rate cache hit for %s", key)
        return entry

    def put(
        self,
        source: str,
        target: str,
        rate: float,
        *,
        rate_date: str | None = None,
        provider: str = "Frankfurter",
    ) -> RateEntry:
        """Store a new entry stamped with the current time and return it."""
        entry = RateEntry(
            pair=(source, target),
            rate=float(rate),
            fetched_at=self._clock(),
            rate_date=rate_date,
            provider=provider,
        )
        self._load()[entry.key] = entry
        if self.path is not None:
            self._persist(entry)
        return entry

    def _persist(self, entry: RateEntry) -> None:
        # Merge into what other processes may have written meanwhile
        current = self._read_snapshot()
        current[entry.key] = entry
        out = {
            "pairs": {key: e.to_json() for key, e in sorted(current.items())},
            "last_refresh": _iso(entry.fetched_at),
        }
        try:
            _atomic_write_json(self.path, out)
        except OSError as exc:
            logger.warning("Could not write rate cache %s: %s", self.path, exc)

    def clear(self) -> int:
        """Drop all entries. Returns number of removed entries."""
        removed = len(self._read_snapshot()) if self.path is not None else len(self._load())
        self._entries = {}
        if self.path is not None and self.path.exists():
            _atomic_write_json(self.path, {"pairs": {}, "last_refresh": None})
        return removed

    def __len__(self) -> int:
        return len(self._load())
