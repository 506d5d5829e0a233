"""Иерархия исключений Decker Eligibility.

Транзиентные ошибки апстрима и сбои кеша гасятся как можно ниже по стеку,
наружу (в HTTP-ответ) доходят только ClientError.
"""

from __future__ import annotations


class DeckerError(RuntimeError):
    """Базовое исключение сервиса."""


class ConfigurationError(DeckerError):
    """Неустранимая ошибка конфигурации при старте."""


class UpstreamError(DeckerError):
    """Ошибка провайдера истории транзакций."""


class UpstreamTransient(UpstreamError):
    """Страница не получена в этой попытке (сеть, HTTP, неожиданный формат)."""


class UpstreamExhausted(UpstreamError):
    """Бюджет повторов для страницы исчерпан."""

    def __init__(self, page: int, attempts: int) -> None:
        super().__init__(f"страница {page} не получена за {attempts} попыток")
        self.page = page
        self.attempts = attempts


class CacheUnavailable(DeckerError):
    """Хранилище кеша недоступно на чтение или запись."""


class StoreConflict(DeckerError):
    """Нарушено ограничение уникальности в хранилище."""


class ClientError(DeckerError):
    """Ошибка во входных данных клиента, отдаётся как 4xx."""

    status_code: int = 400
    default_message: str = "Bad request"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class MissingWallet(ClientError):
    default_message = "Missing wallet address"


class MissingParameters(ClientError):
    default_message = "Missing parameters"


class InvalidProof(ClientError):
    default_message = "Transaction signature is not finalized"


class NothingToClaim(ClientError):
    status_code = 404
    default_message = "No pending referral bonus to claim"


__all__ = [
    "CacheUnavailable",
    "ClientError",
    "ConfigurationError",
    "DeckerError",
    "InvalidProof",
    "MissingParameters",
    "MissingWallet",
    "NothingToClaim",
    "StoreConflict",
    "UpstreamError",
    "UpstreamExhausted",
    "UpstreamTransient",
]
