"""Постраничная выгрузка истории кошелька с ограниченными повторами.

Fetcher ничего не знает о кеше: он же используется для принудительного
обновления. Ошибки апстрима никогда не выходят наружу, вместо этого
возвращается всё, что удалось накопить.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable

from loguru import logger

from decker.exceptions import UpstreamExhausted, UpstreamTransient

from .helius_client import PageSource
from .types import Transaction

Sleeper = Callable[[float], Awaitable[None]]


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    """Политика повторов одной страницы: линейный backoff base * attempt."""

    max_attempts: int = 5
    backoff_base_sec: float = 0.5

    def delay(self, attempt: int) -> float:
        return self.backoff_base_sec * attempt


@dataclass(slots=True)
class FetchResult:
    transactions: list[Transaction]
    pages: int
    complete: bool


class HistoryFetcher:
    """Собирает историю адреса из страниц PageSource."""

    def __init__(
        self,
        source: PageSource,
        *,
        max_pages: int = 10,
        retry_policy: RetryPolicy | None = None,
        sleep: Sleeper = asyncio.sleep,
    ) -> None:
        self._source = source
        self._max_pages = max_pages
        self._policy = retry_policy or RetryPolicy()
        self._sleep = sleep

    async def fetch(self, wallet: str) -> FetchResult:
        collected: list[Transaction] = []
        before: str | None = None
        pages = 0
        complete = False
        for page in range(1, self._max_pages + 1):
            try:
                txs = await self._fetch_page(wallet, before, page)
            except UpstreamExhausted as exc:
                logger.warning(
                    "История {wallet} неполная: {error}, используем что есть",
                    wallet=wallet,
                    error=str(exc),
                )
                break
            if not txs:
                complete = True
                break
            pages += 1
            collected.extend(txs)
            before = txs[-1].signature
            if not before:
                # Без подписи курсор не построить, дальше идти некуда.
                break
        logger.info(
            "Получено {count} транзакций для {wallet} ({pages} стр.)",
            count=len(collected),
            wallet=wallet,
            pages=pages,
        )
        return FetchResult(transactions=collected, pages=pages, complete=complete)

    async def fetch_transactions(self, wallet: str) -> list[Transaction]:
        return (await self.fetch(wallet)).transactions

    async def _fetch_page(self, wallet: str, before: str | None, page: int) -> list[Transaction]:
        attempts = self._policy.max_attempts
        for attempt in range(1, attempts + 1):
            logger.debug(
                "Запрос истории {wallet}: страница {page}, попытка {attempt}",
                wallet=wallet,
                page=page,
                attempt=attempt,
            )
            try:
                return await self._source.get_page(wallet, before)
            except UpstreamTransient as exc:
                logger.warning(
                    "Helius не ответил (попытка {attempt}/{total}): {error}",
                    attempt=attempt,
                    total=attempts,
                    error=str(exc),
                )
            if attempt < attempts:
                await self._sleep(self._policy.delay(attempt))
        raise UpstreamExhausted(page, attempts)


__all__ = ["FetchResult", "HistoryFetcher", "RetryPolicy"]
