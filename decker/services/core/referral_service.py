"""Реферальная программа Decker: pending-бонусы и их клейм по подписи."""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from decker.exceptions import InvalidProof, MissingParameters, NothingToClaim, StoreConflict
from decker.models import Referral
from decker.repositories import (
    claim_pending_for_referrer,
    create_referral,
    get_referral_by_referred,
    sum_pending_bonus,
)
from decker.services.solana.proof_verifier import ProofVerifier
from decker.utils.wallet import normalize_optional


@dataclass(slots=True)
class ReferralClaim:
    """Итог успешного клейма."""

    referrer_wallet: str
    claimed_amount: int
    referrals: int
    tx_sig: str


class ReferralService:
    """Реферальная система, работающая через БД.

    Первый реферер побеждает навсегда: повторная попытка пригласить тот же
    кошелёк (в том числе параллельная) упирается в уникальный индекс.
    """

    def __init__(self, verifier: ProofVerifier, *, bonus_amount: int = 300) -> None:
        self._verifier = verifier
        self._bonus_amount = bonus_amount

    @property
    def bonus_amount(self) -> int:
        return self._bonus_amount

    async def register(
        self,
        session: AsyncSession,
        *,
        referred_wallet: str,
        referrer_wallet: str | None,
    ) -> Referral | None:
        """Создаёт pending-запись, если кошелёк ещё никем не приглашён."""

        if not referrer_wallet or referrer_wallet == referred_wallet:
            return None
        if await get_referral_by_referred(session, referred_wallet) is not None:
            return None
        try:
            referral = await create_referral(
                session,
                referrer_wallet=referrer_wallet,
                referred_wallet=referred_wallet,
                bonus_amount=self._bonus_amount,
            )
        except StoreConflict:
            logger.debug("Рефералка для {wallet} уже существует", wallet=referred_wallet)
            return None
        logger.info("Новая рефералка: {ref} -> {inv}", ref=referrer_wallet, inv=referred_wallet)
        return referral

    async def pending_bonus(self, session: AsyncSession, referrer_wallet: str) -> int:
        return await sum_pending_bonus(session, referrer_wallet)

    async def claim(
        self,
        session: AsyncSession,
        *,
        referrer_wallet: str | None,
        tx_sig: str | None,
    ) -> ReferralClaim:
        referrer = normalize_optional(referrer_wallet)
        signature = (tx_sig or "").strip()
        if not referrer or not signature:
            raise MissingParameters()

        if not await self._verifier.verify(signature):
            logger.info("Подпись {sig} не подтверждена, клейм отклонён", sig=signature)
            raise InvalidProof()

        amounts = await claim_pending_for_referrer(
            session,
            referrer_wallet=referrer,
            tx_sig=signature,
        )
        if not amounts:
            raise NothingToClaim()
        total = sum(amounts)
        logger.info(
            "Реферер {ref} заклеймил {total} за {count} рефералов (tx {sig})",
            ref=referrer,
            total=total,
            count=len(amounts),
            sig=signature,
        )
        return ReferralClaim(
            referrer_wallet=referrer,
            claimed_amount=total,
            referrals=len(amounts),
            tx_sig=signature,
        )


__all__ = ["ReferralClaim", "ReferralService"]
