"""Query parsing for the launcher keyword.

Accepted forms (case-insensitive, any amount of whitespace)::

    <amount> <from> <to>
    <amount> <from> in <to>
"""

from __future__ import annotations

import logging

from .currencies import validate_code
from .exceptions import MalformedInputError
from .models import ConversionRequest
from .utils import parse_amount

logger = logging.getLogger("sherlock_currency")

CONNECTOR = "in"
USAGE_EXAMPLES: tuple[str, ...] = (
    "cc 100 usd chf",
    "cc 50 eur in gbp",
    "cc 1000 jpy usd",
    "cc 25.5 cad aud",
)


def tokenize(text: str) -> list[str]:
    """Split query into tokens, dropping the optional 'in' connector."""
    tokens = (text or "").split()
    if len(tokens) == 4 and tokens[2].lower() == CONNECTOR:
        del tokens[2]
    return tokens


def parse_query(text: str, *, strict: bool = False) -> ConversionRequest:
    """Parse a raw launcher query into a ConversionRequest.

    Args:
        text: Query as typed by the user, e.g. ``"100 usd in chf"``.
        strict: Reject well-formed codes missing from the currency table.
    Returns:
        ConversionRequest with normalized codes.
    Raises:
        MalformedInputError: wrong number of tokens.
        InvalidAmountError: amount is not a non-negative number.
        UnknownCurrencyError: a code is not three letters (or is unsupported).
    """
    tokens = tokenize(text)
    if len(tokens) != 3 or tokens[-1].lower() == CONNECTOR:
        logger.debug("Query %r has %d tokens, expected 3", text, len(tokens))
        raise MalformedInputError(text)
    amount_token, source_token, target_token = tokens
    amount = parse_amount(amount_token)
    source = validate_code(source_token, strict=strict)
    target = validate_code(target_token, strict=strict)
    return ConversionRequest(
        amount=amount, source_currency=source, target_currency=target
    )
