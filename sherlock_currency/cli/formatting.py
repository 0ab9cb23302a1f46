"""Output rendering for the launcher.

Plain mode prints one line per result; pipe mode prints one JSON object in
the launcher's pipe format (title/content/next_content/actions).
"""

from __future__ import annotations

import json
from typing import Any

from ..core.exceptions import (
    CurrencyNotOfferedError,
    InvalidAmountError,
    MalformedInputError,
    ParseError,
    RateFetchError,
    ServiceUnavailableError,
    UnknownCurrencyError,
)
from ..core.models import ConversionResult
from ..core.query_parser import USAGE_EXAMPLES
from ..core.utils import format_money, format_rate

USAGE_LINE = (
    "Invalid format. Use: cc [amount] [from_currency] [to_currency] "
    "or cc [amount] [from_currency] in [to_currency]"
)
NO_QUERY_LINE = (
    "No conversion query provided. Usage: sherlock-currency [amount] "
    "[from_currency] [to_currency]"
)
UNEXPECTED_LINE = "Conversion failed: unexpected error"

_PIPE_ICON = "preferences-system"


def format_result(result: ConversionResult) -> str:
    """Render ``100.00 USD = 91.00 CHF``."""
    return (
        f"{format_money(result.original_amount)} {result.source_currency} = "
        f"{format_money(result.converted_amount)} {result.target_currency}"
    )


def format_rate_line(result: ConversionResult) -> str:
    return (
        f"Exchange Rate: 1 {result.source_currency} = "
        f"{format_rate(result.rate)} {result.target_currency}"
    )


def format_error(exc: BaseException) -> str:
    """Return a single user-facing line describing the failure."""
    if isinstance(exc, MalformedInputError):
        return USAGE_LINE
    if isinstance(exc, InvalidAmountError):
        return f"Invalid amount: {exc.token}"
    if isinstance(exc, UnknownCurrencyError):
        return str(exc)
    if isinstance(exc, CurrencyNotOfferedError):
        return f"Unknown currency: {exc.code}"
    if isinstance(exc, ServiceUnavailableError):
        return "Could not reach exchange rate service"
    if isinstance(exc, RateFetchError):
        return "Exchange rate service returned an unexpected response"
    return UNEXPECTED_LINE


def _panel(title: str, lines: list[str]) -> str:
    body = "\n".join(lines)
    return (
        '<span font_desc="monospace">\n'
        f"─── <b><i>{title}</i></b> ───\n\n"
        f"{body}\n"
        "────────────\n"
        "</span>"
    )


def pipe_result(result: ConversionResult) -> dict[str, Any]:
    """Build the launcher pipe object for a successful conversion."""
    src, dst = result.source_currency, result.target_currency
    amount = format_money(result.original_amount)
    converted = format_money(result.converted_amount)
    lines = [
        f"<b>{amount} {src}</b> = <b>{converted} {dst}</b>",
        "",
        format_rate_line(result),
    ]
    if result.rate:
        lines.append(f"Inverse Rate: 1 {dst} = {format_rate(1 / result.rate)} {src}")
    lines += ["", f"Date: {result.rate_date or 'Today'}"]
    content = _panel("Currency Conversion", lines)
    return {
        "title": f"{amount} {src} → {converted} {dst}",
        "content": content,
        "next_content": content,
        "actions": [
            {
                "name": f"{converted} {dst}",
                "exec": f"{format_result(result)}\n{format_rate_line(result)}",
                "icon": _PIPE_ICON,
                "method": "copy",
                "exit": True,
            }
        ],
    }


def pipe_error(exc: BaseException) -> dict[str, Any]:
    """Build the launcher pipe object for a failure."""
    if isinstance(exc, ParseError):
        title = "Invalid Input Format"
        lines = [format_error(exc), "", *(f"• {ex}" for ex in USAGE_EXAMPLES)]
        lines += ["", "Note: Cryptocurrencies are not supported"]
        content = _panel("Usage Examples", lines)
    else:
        title = "Conversion Failed"
        content = _panel(title, [format_error(exc)])
    return {"title": title, "content": content, "next_content": "", "actions": []}


def dump_pipe(obj: dict[str, Any]) -> str:
    return json.dumps(obj, ensure_ascii=False)
