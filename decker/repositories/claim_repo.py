"""Функции для работы с таблицей выплат."""

from __future__ import annotations

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from decker.models import Claim
from decker.models.base import utcnow


async def get_claim(session: AsyncSession, wallet: str) -> Optional[Claim]:
    stmt = select(Claim).where(Claim.wallet == wallet)
    return (await session.exec(stmt)).one_or_none()


async def get_claimed_amount(session: AsyncSession, wallet: str) -> int:
    claim = await get_claim(session, wallet)
    return claim.claimed_amount if claim else 0


async def add_claim(
    session: AsyncSession,
    *,
    wallet: str,
    amount: int,
    tx_sig: str,
) -> Claim:
    """Создаёт запись выплаты или прибавляет сумму к существующей."""

    claim = await get_claim(session, wallet)
    if claim is None:
        claim = Claim(wallet=wallet, claimed_amount=amount, tx_sig=tx_sig)
    else:
        claim.claimed_amount += amount
        claim.tx_sig = tx_sig
        claim.claimed_at = utcnow()
    session.add(claim)
    await session.commit()
    await session.refresh(claim)
    return claim


__all__ = ["add_claim", "get_claim", "get_claimed_amount"]
