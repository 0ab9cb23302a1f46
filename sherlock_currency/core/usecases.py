"""Business use-cases for sherlock-currency.

Конвейер конвертации: разбор запроса → курс (кеш или провайдер) →
пересчёт. CLI должен только вызывать эти функции и форматировать вывод.
"""

from __future__ import annotations

import logging

from ..decorators import log_action
from ..rate_service.api_clients import BaseApiClient, FrankfurterClient
from ..rate_service.config import ServiceConfig, load_service_config
from ..rate_service.storage import RateCache, utc_now
from .currencies import is_known
from .exceptions import UnknownCurrencyError
from .models import ConversionRequest, ConversionResult, RateEntry
from .query_parser import parse_query
from .utils import convert_amount, round_display

logger = logging.getLogger("sherlock_currency")

IDENTITY_PROVIDER = "Identity"


def build_cache(cfg: ServiceConfig, *, enabled: bool | None = None) -> RateCache:
    """Create the rate cache described by config.

    Args:
        cfg: Service configuration.
        enabled: Overrides cfg.CACHE_ENABLED; a disabled cache is in-memory.
    """
    use_disk = cfg.CACHE_ENABLED if enabled is None else enabled
    return RateCache(
        path=cfg.CACHE_FILE_PATH if use_disk else None,
        ttl_seconds=cfg.RATES_TTL_SECONDS,
    )


def get_rate(
    source: str, target: str, *, cache: RateCache, client: BaseApiClient
) -> RateEntry:
    """Get rate source→target from cache or provider.

    Same-currency pairs resolve to exactly 1 without touching cache or
    network, provided the code is in the registry. A failed fetch
    propagates: expired entries are never reused.

    Raises:
        UnknownCurrencyError: same-currency pair of an unlisted code.
        RateFetchError: when the provider cannot supply the rate.
    """
    if source == target:
        if not is_known(source):
            raise UnknownCurrencyError(source)
        return RateEntry(
            pair=(source, target),
            rate=1.0,
            fetched_at=utc_now(),
            provider=IDENTITY_PROVIDER,
        )
    entry = cache.get(source, target)
    if entry is not None:
        logger.info("Using cached rate %s_%s=%s", source, target, entry.rate)
        return entry
    logger.info("Fetching rate %s_%s from %s...", source, target, client.SOURCE)
    rate, rate_date = client.fetch_entry(source, target)
    return cache.put(source, target, rate, rate_date=rate_date, provider=client.SOURCE)


def convert_request(
    request: ConversionRequest, *, cache: RateCache, client: BaseApiClient
) -> ConversionResult:
    entry = get_rate(
        request.source_currency,
        request.target_currency,
        cache=cache,
        client=client,
    )
    return ConversionResult(
        original_amount=round_display(request.amount),
        source_currency=request.source_currency,
        target_currency=request.target_currency,
        converted_amount=convert_amount(request.amount, entry.rate),
        rate=entry.rate,
        rate_date=entry.rate_date,
    )


@log_action("CONVERT")
def convert_query(
    query: str,
    *,
    cache: RateCache | None = None,
    client: BaseApiClient | None = None,
    cfg: ServiceConfig | None = None,
) -> ConversionResult:
    """Run the whole pipeline for one launcher query.

    Args:
        query: Raw query text, e.g. ``"100 usd in chf"``.
        cache: Rate cache; built from config when omitted.
        client: Rate provider client; Frankfurter when omitted.
        cfg: Service configuration; loaded from settings/env when omitted.
    Returns:
        ConversionResult ready for formatting.
    Raises:
        ConversionError: any parse, validation or fetch failure.
    """
    cfg = cfg or load_service_config()
    request = parse_query(query, strict=cfg.STRICT_CURRENCIES)
    if cache is None:
        cache = build_cache(cfg)
    if client is None:
        client = FrankfurterClient(cfg)
    return convert_request(request, cache=cache, client=client)
