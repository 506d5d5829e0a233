"""Нормализация адресов кошельков."""

from __future__ import annotations

from decker.exceptions import MissingWallet


def normalize_wallet(raw: str | None) -> str:
    """trim + lower; пустой адрес считается ошибкой клиента."""

    wallet = (raw or "").strip().lower()
    if not wallet:
        raise MissingWallet()
    return wallet


def normalize_optional(raw: str | None) -> str | None:
    wallet = (raw or "").strip().lower()
    return wallet or None


__all__ = ["normalize_optional", "normalize_wallet"]
