from __future__ import annotations

import re
from abc import ABC, abstractmethod

from .exceptions import UnknownCurrencyError, UnsupportedCurrencyError

_CODE_RE = re.compile(r"^[A-Za-z]{3}$")


def normalize_code(code: str) -> str:
    """Normalize currency code to uppercase trimmed string."""
    return (code or "").strip().upper()


def is_well_formed(code: str) -> bool:
    """Return True if code is exactly three ASCII letters."""
    return bool(_CODE_RE.match(code or ""))


class Currency(ABC):
    """Abstract base currency type.

    Public attributes:
      - name: str
      - code: str (3 uppercase letters)
    """

    name: str
    code: str

    def __init__(self, name: str, code: str) -> None:
        c = (code or "").strip().upper()
        n = (name or "").strip()
        if not n:
            raise ValueError("name must be non-empty")
        if not is_well_formed(c):
            raise ValueError("code must be exactly 3 letters")
        self.name = n
        self.code = c

    @property
    @abstractmethod
    def kind(self) -> str:  # pragma: no cover - label only
        ...

    @abstractmethod
    def get_display_info(self) -> str:  # pragma: no cover - formatting only
        ...


class FiatCurrency(Currency):
    issuing_country: str

    def __init__(self, name: str, code: str, issuing_country: str) -> None:
        super().__init__(name, code)
        self.issuing_country = (issuing_country or "").strip()
        if not self.issuing_country:
            raise ValueError("issuing_country must be non-empty")

    @property
    def kind(self) -> str:
        return "FIAT"

    def get_display_info(self) -> str:
        return f"{self.name} (Issuing: {self.issuing_country})"


class CryptoCurrency(Currency):
    algorithm: str

    def __init__(self, name: str, code: str, algorithm: str) -> None:
        super().__init__(name, code)
        self.algorithm = (algorithm or "").strip()
        if not self.algorithm:
            raise ValueError("algorithm must be non-empty")

    @property
    def kind(self) -> str:
        return "CRYPTO"

    def get_display_info(self) -> str:
        return f"{self.name} (Algo: {self.algorithm}), not supported"


# Currencies published by the rate provider (ECB reference set).
_FIAT_TABLE: tuple[tuple[str, str, str], ...] = (
    ("AUD", "Australian Dollar", "Australia"),
    ("BGN", "Bulgarian Lev", "Bulgaria"),
    ("BRL", "Brazilian Real", "Brazil"),
    ("CAD", "Canadian Dollar", "Canada"),
    ("CHF", "Swiss Franc", "Switzerland"),
    ("CNY", "Chinese Renminbi Yuan", "China"),
    ("CZK", "Czech Koruna", "Czechia"),
    ("DKK", "Danish Krone", "Denmark"),
    ("EUR", "Euro", "Eurozone"),
    ("GBP", "British Pound", "United Kingdom"),
    ("HKD", "Hong Kong Dollar", "Hong Kong"),
    ("HUF", "Hungarian Forint", "Hungary"),
    ("IDR", "Indonesian Rupiah", "Indonesia"),
    ("ILS", "Israeli New Sheqel", "Israel"),
    ("INR", "Indian Rupee", "India"),
    ("ISK", "Icelandic Króna", "Iceland"),
    ("JPY", "Japanese Yen", "Japan"),
    ("KRW", "South Korean Won", "South Korea"),
    ("MXN", "Mexican Peso", "Mexico"),
    ("MYR", "Malaysian Ringgit", "Malaysia"),
    ("NOK", "Norwegian Krone", "Norway"),
    ("NZD", "New Zealand Dollar", "New Zealand"),
    ("PHP", "Philippine Peso", "Philippines"),
    ("PLN", "Polish Złoty", "Poland"),
    ("RON", "Romanian Leu", "Romania"),
    ("SEK", "Swedish Krona", "Sweden"),
    ("SGD", "Singapore Dollar", "Singapore"),
    ("THB", "Thai Baht", "Thailand"),
    ("TRY", "Turkish Lira", "Turkey"),
    ("USD", "US Dollar", "United States"),
    ("ZAR", "South African Rand", "South Africa"),
)

# Assets the provider does not quote; rejected before any network call.
_CRYPTO_TABLE: tuple[tuple[str, str, str], ...] = (
    ("BTC", "Bitcoin", "SHA-256"),
    ("ETH", "Ethereum", "Ethash"),
    ("SOL", "Solana", "Proof of History"),
    ("LTC", "Litecoin", "Scrypt"),
    ("XRP", "XRP", "XRP Ledger Consensus"),
    ("ADA", "Cardano", "Ouroboros"),
    ("BNB", "BNB", "Proof of Staked Authority"),
    ("DOT", "Polkadot", "Nominated Proof of Stake"),
    ("XMR", "Monero", "RandomX"),
    ("TRX", "TRON", "Delegated Proof of Stake"),
    ("XLM", "Stellar", "Stellar Consensus"),
    ("BCH", "Bitcoin Cash", "SHA-256"),
    ("ETC", "Ethereum Classic", "Etchash"),
)

_REGISTRY: dict[str, FiatCurrency] = {
    code: FiatCurrency(name, code, country) for code, name, country in _FIAT_TABLE
}
_BLACKLIST: dict[str, CryptoCurrency] = {
    code: CryptoCurrency(name, code, algo) for code, name, algo in _CRYPTO_TABLE
}


def is_known(code: str) -> bool:
    """Return True if code is in the supported fiat table."""
    return normalize_code(code) in _REGISTRY


def is_blacklisted(code: str) -> bool:
    return normalize_code(code) in _BLACKLIST


def validate_code(code: str, *, strict: bool = False) -> str:
    """Validate and return normalized currency code or raise error.

    Codes that are well formed but absent from the table are accepted
    unless ``strict`` is set; the rate provider has the final word on them.

    Raises:
        UnsupportedCurrencyError: for blacklisted assets (cryptocurrencies)
        UnknownCurrencyError: for malformed codes, or unknown ones in strict mode
    """
    c = (code or "").strip()
    if not is_well_formed(c):
        raise UnknownCurrencyError(c)
    c = c.upper()
    if c in _BLACKLIST:
        raise UnsupportedCurrencyError(c)
    if strict and c not in _REGISTRY:
        raise UnknownCurrencyError(c)
    return c


def get_currency(code: str) -> FiatCurrency:
    c = normalize_code(code)
    cur = _REGISTRY.get(c)
    if not cur:
        raise UnknownCurrencyError(c)
    return cur


def list_supported() -> list[Currency]:
    """Return list of supported currencies (registry snapshot)."""
    return list(_REGISTRY.values())


def list_unsupported() -> list[Currency]:
    return list(_BLACKLIST.values())
