"""Domain models for sherlock-currency.

Immutable value objects passed along the conversion pipeline:
ConversionRequest -> RateEntry -> ConversionResult.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


@dataclass(frozen=True)
class ConversionRequest:
    """Parsed user query: how much of what to convert into what."""

    amount: Decimal
    source_currency: str
    target_currency: str

    @property
    def pair(self) -> tuple[str, str]:
        return (self.source_currency, self.target_currency)

    @property
    def is_identity(self) -> bool:
        return self.source_currency == self.target_currency


@dataclass(frozen=True)
class RateEntry:
    """A rate for an ordered currency pair, stamped with fetch time.

    ``fetched_at`` is an aware UTC datetime. ``rate_date`` is the provider's
    own publication date (may be absent for entries not from the network).
    """

    pair: tuple[str, str]
    rate: float
    fetched_at: datetime
    rate_date: str | None = None
    provider: str = "Frankfurter"

    @property
    def key(self) -> str:
        return pair_key(*self.pair)

    def age_seconds(self, now: datetime) -> float:
        return (now - self.fetched_at).total_seconds()

    def to_json(self) -> dict[str, object]:
        return {
            "rate": self.rate,
            "fetched_at": self.fetched_at.replace(microsecond=0)
            .isoformat()
            .replace("+00:00", "Z"),
            "rate_date": self.rate_date,
            "provider": self.provider,
        }


@dataclass(frozen=True)
class ConversionResult:
    original_amount: Decimal
    source_currency: str
    target_currency: str
    converted_amount: Decimal
    rate: float
    rate_date: str | None = None


def pair_key(source: str, target: str) -> str:
    """Cache key for the ordered pair source -> target."""
    return f"{source}_{target}"
