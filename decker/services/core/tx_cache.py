"""Cache-aside для истории транзакций кошелька.

TransactionCache отвечает на get/put поверх таблицы tx_cache и явно сообщает
исход поиска (hit / miss / stale / empty). load_transactions: единственная
точка, где решается, читать кеш или идти в Helius.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Callable

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from decker.exceptions import CacheUnavailable
from decker.models.base import as_utc, utcnow
from decker.repositories import delete_expired, get_cache_entry, upsert_transactions
from decker.services.solana.history_fetcher import HistoryFetcher
from decker.services.solana.types import Transaction, dump_transactions, parse_transactions

Clock = Callable[[], datetime]


class CacheStatus(str, Enum):
    HIT = "hit"
    MISS = "miss"
    STALE = "stale"
    EMPTY = "empty"
    UNAVAILABLE = "unavailable"
    BYPASSED = "bypassed"


@dataclass(slots=True)
class CacheLookup:
    status: CacheStatus
    transactions: list[Transaction] = field(default_factory=list)
    updated_at: datetime | None = None

    @property
    def is_hit(self) -> bool:
        return self.status is CacheStatus.HIT


@dataclass(slots=True)
class LoadResult:
    transactions: list[Transaction]
    cache_status: CacheStatus
    fetched: bool


class TransactionCache:
    """Долговременный кеш истории: одна запись на нормализованный кошелёк."""

    def __init__(
        self,
        session_maker: async_sessionmaker[AsyncSession],
        *,
        ttl: timedelta = timedelta(hours=24),
        clock: Clock = utcnow,
    ) -> None:
        self._session_maker = session_maker
        self._ttl = ttl
        self._clock = clock

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    async def get(self, wallet: str) -> CacheLookup:
        try:
            async with self._session_maker() as session:
                entry = await get_cache_entry(session, wallet)
        except SQLAlchemyError as exc:
            raise CacheUnavailable(f"чтение кеша {wallet}: {exc}") from exc
        if entry is None:
            return CacheLookup(CacheStatus.MISS)
        updated_at = as_utc(entry.updated_at)
        if self._clock() - updated_at >= self._ttl:
            return CacheLookup(CacheStatus.STALE, updated_at=updated_at)
        transactions = parse_transactions(entry.transactions or [])
        if not transactions:
            # Пустой результат мог быть следствием сбоя апстрима, всегда перепроверяем.
            return CacheLookup(CacheStatus.EMPTY, updated_at=updated_at)
        return CacheLookup(CacheStatus.HIT, transactions, updated_at)

    async def put(self, wallet: str, transactions: list[Transaction]) -> None:
        try:
            async with self._session_maker() as session:
                await upsert_transactions(session, wallet, dump_transactions(transactions))
        except SQLAlchemyError as exc:
            raise CacheUnavailable(f"запись кеша {wallet}: {exc}") from exc

    async def purge_expired(self) -> int:
        cutoff = self._clock() - self._ttl
        async with self._session_maker() as session:
            return await delete_expired(session, cutoff)


async def load_transactions(
    wallet: str,
    *,
    cache: TransactionCache,
    fetcher: HistoryFetcher,
    force_refresh: bool = False,
) -> LoadResult:
    """Кеш или свежая выгрузка; сбой кеша не ломает расчёт."""

    if force_refresh:
        lookup = CacheLookup(CacheStatus.BYPASSED)
    else:
        try:
            lookup = await cache.get(wallet)
        except CacheUnavailable as exc:
            logger.warning("Кеш недоступен: {error}", error=str(exc))
            lookup = CacheLookup(CacheStatus.UNAVAILABLE)

    if lookup.is_hit:
        logger.debug(
            "Используем кеш транзакций {wallet} ({count} шт.)",
            wallet=wallet,
            count=len(lookup.transactions),
        )
        return LoadResult(lookup.transactions, lookup.status, fetched=False)

    logger.debug("Кеш {wallet}: {status}, идём в Helius", wallet=wallet, status=lookup.status.value)
    transactions = await fetcher.fetch_transactions(wallet)
    try:
        await cache.put(wallet, transactions)
    except CacheUnavailable as exc:
        logger.warning("Не удалось сохранить кеш: {error}", error=str(exc))
    return LoadResult(transactions, lookup.status, fetched=True)


class CacheJanitor:
    """Фоновое удаление просроченных записей (аналог TTL-индекса)."""

    def __init__(self, cache: TransactionCache, *, interval_sec: float = 600) -> None:
        self._cache = cache
        self._interval = interval_sec
        self._task: asyncio.Task[None] | None = None
        self._stop = asyncio.Event()

    async def start(self) -> None:
        if self._task and not self._task.done():
            return
        self._stop.clear()
        self._task = asyncio.create_task(self._run_loop(), name="tx-cache-janitor")
        logger.info("CacheJanitor запущен (интервал {interval}s)", interval=self._interval)

    async def stop(self) -> None:
        self._stop.set()
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass

    async def run_once(self) -> int:
        try:
            removed = await self._cache.purge_expired()
        except SQLAlchemyError as exc:
            logger.warning("Очистка кеша упала: {error}", error=exc)
            return 0
        if removed:
            logger.info("Удалено {count} просроченных записей кеша", count=removed)
        return removed

    async def _run_loop(self) -> None:
        while not self._stop.is_set():
            await self.run_once()
            try:
                await asyncio.wait_for(self._stop.wait(), timeout=self._interval)
            except asyncio.TimeoutError:
                continue


__all__ = [
    "CacheJanitor",
    "CacheLookup",
    "CacheStatus",
    "LoadResult",
    "TransactionCache",
    "load_transactions",
]
