"""Работа с таблицей TxCache."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from decker.models import TxCache


async def get_cache_entry(session: AsyncSession, wallet: str) -> Optional[TxCache]:
    stmt = select(TxCache).where(TxCache.wallet == wallet)
    return (await session.exec(stmt)).one_or_none()


async def upsert_transactions(
    session: AsyncSession,
    wallet: str,
    transactions: list[dict[str, Any]],
) -> TxCache:
    """Заменяет (не сливает) набор транзакций кошелька, last-write-wins."""

    entry = await get_cache_entry(session, wallet)
    if entry is None:
        entry = TxCache(wallet=wallet, transactions=transactions)
        session.add(entry)
        try:
            await session.commit()
        except IntegrityError:
            # Параллельный запрос успел вставить запись, перезаписываем её.
            await session.rollback()
            entry = await get_cache_entry(session, wallet)
            if entry is None:
                raise
            _replace(entry, transactions)
            session.add(entry)
            await session.commit()
    else:
        _replace(entry, transactions)
        session.add(entry)
        await session.commit()
    await session.refresh(entry)
    return entry


async def delete_expired(session: AsyncSession, older_than: datetime) -> int:
    stmt = delete(TxCache).where(TxCache.updated_at < older_than)
    result = await session.execute(stmt)
    await session.commit()
    return int(result.rowcount or 0)


def _replace(entry: TxCache, transactions: list[dict[str, Any]]) -> None:
    entry.transactions = transactions
    entry.touch()


__all__ = ["delete_expired", "get_cache_entry", "upsert_transactions"]
