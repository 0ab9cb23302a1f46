"""Utility helpers for sherlock-currency.

Разбор суммы, конвертация и форматирование денежных значений.
"""

from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext

from .exceptions import InvalidAmountError

DISPLAY_DECIMALS = 2
_QUANT = Decimal(1).scaleb(-DISPLAY_DECIMALS)
# ASCII digits with an optional '.' fraction; no sign, exponent or grouping
_AMOUNT_RE = re.compile(r"^[0-9]+(?:\.[0-9]+)?$")


def _precision_for(*values: Decimal) -> int:
    """Digits needed to hold the exact product of values plus display places."""
    digits = 0
    for v in values:
        t = v.as_tuple()
        exponent = t.exponent if isinstance(t.exponent, int) else 0
        digits += len(t.digits) + max(exponent, 0)
    return max(digits + DISPLAY_DECIMALS + 2, 28)


def parse_amount(token: str) -> Decimal:
    """Parse amount token to a non-negative finite Decimal.

    Raises:
        InvalidAmountError: when parsing fails or the value is negative/non-finite
    """
    text = (token or "").strip()
    if not _AMOUNT_RE.match(text):
        raise InvalidAmountError(text)
    try:
        amt = Decimal(text)
    except InvalidOperation as exc:
        raise InvalidAmountError(text) from exc
    if not amt.is_finite() or amt < 0:
        raise InvalidAmountError(text)
    return amt


def round_display(value: Decimal) -> Decimal:
    """Round half away from zero to display precision."""
    value = Decimal(value)
    with localcontext() as ctx:
        ctx.prec = _precision_for(value)
        return value.quantize(_QUANT, rounding=ROUND_HALF_UP)


def convert_amount(amount: Decimal, rate: float | Decimal) -> Decimal:
    """Return amount * rate rounded to display precision.

    The product is computed exactly whatever the size of the amount.
    """
    a = Decimal(amount)
    r = rate if isinstance(rate, Decimal) else Decimal(str(rate))
    with localcontext() as ctx:
        ctx.prec = _precision_for(a, r)
        return round_display(a * r)


def format_money(value: Decimal, decimals: int = DISPLAY_DECIMALS) -> str:
    """Format monetary value with fixed decimals and no thousands separator."""
    value = Decimal(value)
    q = Decimal(1).scaleb(-decimals)
    with localcontext() as ctx:
        ctx.prec = _precision_for(value) + decimals
        return f"{value.quantize(q, rounding=ROUND_HALF_UP):f}"


def format_rate(rate: float | Decimal, decimals: int = 6) -> str:
    return f"{float(rate):.{decimals}f}"
