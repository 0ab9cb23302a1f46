from __future__ import annotations

import logging
from datetime import datetime, timezone
from functools import wraps
from typing import Any, Callable

_logger = logging.getLogger("sherlock_currency")


def _ts() -> str:
    # Uniform ISO timestamp without microseconds, UTC 'Z' suffix
    return (
        datetime.now(timezone.utc)
        .replace(microsecond=0)
        .isoformat()
        .replace("+00:00", "Z")
    )


def log_action(action: str) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Decorator to log domain actions at INFO level.

    Logs timestamp ISO, action, the raw query (first positional or ``query``
    kwarg), amount/currencies/rate when the result carries them, and result
    (OK/ERROR). Does not swallow exceptions.
    """

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            ts = _ts()
            query = kwargs.get("query", args[0] if args else None)
            try:
                result = func(*args, **kwargs)
            except Exception as exc:
                _logger.info(
                    "%s %s query='%s' result=ERROR error_type=%s error_message='%s'",
                    ts,
                    action,
                    query,
                    type(exc).__name__,
                    str(exc).replace("'", "\\'"),
                )
                raise
            _logger.info(
                "%s %s query='%s' amount=%s from='%s' to='%s' rate=%s "
                "converted=%s result=OK",
                ts,
                action,
                query,
                getattr(result, "original_amount", None),
                getattr(result, "source_currency", None),
                getattr(result, "target_currency", None),
                getattr(result, "rate", None),
                getattr(result, "converted_amount", None),
            )
            return result

        return wrapper

    return decorator
