"""Реферальные записи: создание, выборки, атомарный перевод в claimed."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import func, select

from decker.exceptions import StoreConflict
from decker.models import Referral, ReferralStatus
from decker.models.base import utcnow


async def get_referral_by_referred(session: AsyncSession, wallet: str) -> Optional[Referral]:
    stmt = select(Referral).where(Referral.referred_wallet == wallet)
    return (await session.exec(stmt)).one_or_none()


async def create_referral(
    session: AsyncSession,
    *,
    referrer_wallet: str,
    referred_wallet: str,
    bonus_amount: int,
) -> Referral:
    """Вставляет pending-запись; уникальность referred_wallet держит БД."""

    referral = Referral(
        referrer_wallet=referrer_wallet,
        referred_wallet=referred_wallet,
        bonus_amount=bonus_amount,
    )
    session.add(referral)
    try:
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        raise StoreConflict(f"кошелёк {referred_wallet} уже приглашён") from exc
    await session.refresh(referral)
    return referral


async def sum_pending_bonus(session: AsyncSession, referrer_wallet: str) -> int:
    stmt = select(func.coalesce(func.sum(Referral.bonus_amount), 0)).where(
        Referral.referrer_wallet == referrer_wallet,
        Referral.status == ReferralStatus.PENDING.value,
    )
    total = (await session.exec(stmt)).one()
    return int(total or 0)


async def claim_pending_for_referrer(
    session: AsyncSession,
    *,
    referrer_wallet: str,
    tx_sig: str,
) -> list[int]:
    """Одним UPDATE переводит все pending-записи реферера в claimed.

    Возвращает бонусы переведённых записей (пустой список, если нечего клеймить).
    """

    stmt = (
        update(Referral)
        .where(
            Referral.referrer_wallet == referrer_wallet,
            Referral.status == ReferralStatus.PENDING.value,
        )
        .values(status=ReferralStatus.CLAIMED.value, tx_sig=tx_sig, updated_at=utcnow())
        .returning(Referral.bonus_amount)
    )
    result = await session.execute(stmt)
    amounts = [int(amount) for amount in result.scalars().all()]
    await session.commit()
    return amounts


__all__ = [
    "claim_pending_for_referrer",
    "create_referral",
    "get_referral_by_referred",
    "sum_pending_bonus",
]
