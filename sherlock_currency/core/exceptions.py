class ConversionError(Exception):
    """Базовая ошибка конвертации (всё, что видит пользователь)."""


class ParseError(ConversionError):
    """Запрос не удалось разобрать."""


class MalformedInputError(ParseError):
    """Запрос не соответствует ни одной из грамматик."""

    def __init__(self, query: str) -> None:
        self.query = query or ""
        super().__init__(f"Invalid format: '{self.query.strip()}'")


class InvalidAmountError(ParseError):
    """Сумма не является неотрицательным конечным числом."""

    def __init__(self, token: str) -> None:
        self.token = token
        super().__init__(f"Invalid amount '{token}'")


class UnknownCurrencyError(ConversionError):
    """Неизвестная (или некорректная) валюта."""

    def __init__(self, code: str, message: str | None = None) -> None:
        self.code = (code or "").strip().upper()
        super().__init__(message or f"Unknown currency: {self.code}")


class UnsupportedCurrencyError(UnknownCurrencyError):
    """Валюта известна, но не поддерживается (криптовалюты)."""

    def __init__(self, code: str, kind: str = "Cryptocurrency") -> None:
        self.kind = kind
        code = (code or "").strip().upper()
        super().__init__(code, f"{kind} not supported: {code}")


class RateFetchError(ConversionError):
    """Ошибка при обращении к провайдеру курсов."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Exchange rate request failed: {reason}")


class ServiceUnavailableError(RateFetchError):
    """Сеть недоступна или провайдер не ответил за отведённое время."""


class CurrencyNotOfferedError(RateFetchError):
    """Провайдер не знает запрошенную валюту."""

    def __init__(self, code: str) -> None:
        self.code = (code or "").strip().upper()
        super().__init__(f"currency '{self.code}' not supported by provider")
