"""Клиент Helius Enhanced Transactions API.

Отдаёт одну страницу истории адреса. Повторы и пагинация живут уровнем выше,
в HistoryFetcher, здесь любая проблема превращается в UpstreamTransient.
"""

from __future__ import annotations

from typing import Any, Protocol

import aiohttp
from loguru import logger

from decker.exceptions import UpstreamTransient

from .types import Transaction, parse_transactions


class PageSource(Protocol):
    """Провайдер истории: пустой список означает конец истории."""

    async def get_page(self, wallet: str, before: str | None = None) -> list[Transaction]:
        ...


class HeliusClient:
    """Лёгкий aiohttp-клиент поверх /v0/addresses/{wallet}/transactions."""

    def __init__(
        self,
        *,
        api_key: str,
        base_url: str = "https://api.helius.xyz/v0",
        page_limit: int = 100,
        request_timeout: float = 15.0,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._page_limit = page_limit
        self._timeout = aiohttp.ClientTimeout(total=request_timeout)
        self._session: aiohttp.ClientSession | None = None

    async def start(self) -> None:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self._timeout)

    async def close(self) -> None:
        if self._session and not self._session.closed:
            await self._session.close()

    async def get_page(self, wallet: str, before: str | None = None) -> list[Transaction]:
        await self.start()
        assert self._session is not None
        params: dict[str, Any] = {"api-key": self._api_key, "limit": self._page_limit}
        if before:
            params["before"] = before
        url = f"{self._base_url}/addresses/{wallet}/transactions"
        try:
            async with self._session.get(url, params=params) as resp:
                if resp.status >= 400:
                    text = await resp.text()
                    raise UpstreamTransient(f"Helius HTTP {resp.status}: {text[:200]}")
                data = await resp.json(content_type=None)
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise UpstreamTransient(f"Helius запрос упал: {exc}") from exc
        except ValueError as exc:
            raise UpstreamTransient(f"Helius вернул не JSON: {exc}") from exc
        if not isinstance(data, list):
            logger.debug("Helius вернул {kind} вместо списка", kind=type(data).__name__)
            raise UpstreamTransient("неожиданный формат ответа Helius")
        try:
            return parse_transactions(data)
        except (TypeError, AttributeError, ValueError) as exc:
            raise UpstreamTransient(f"не удалось разобрать страницу Helius: {exc}") from exc


__all__ = ["HeliusClient", "PageSource"]
