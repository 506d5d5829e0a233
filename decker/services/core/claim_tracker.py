"""Учёт уже выплаченных наград, чтобы не платить дважды."""

from __future__ import annotations

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from decker.exceptions import MissingParameters
from decker.models import Claim
from decker.repositories import add_claim, get_claimed_amount
from decker.utils.wallet import normalize_wallet


class ClaimTracker:
    async def already_claimed(self, session: AsyncSession, wallet: str) -> int:
        return await get_claimed_amount(session, wallet)

    async def record_claim(
        self,
        session: AsyncSession,
        *,
        wallet: str,
        amount: int,
        tx_sig: str,
    ) -> Claim:
        """Фиксирует выплату; сумма накапливается в единственной записи кошелька."""

        normalized = normalize_wallet(wallet)
        if amount <= 0 or not tx_sig.strip():
            raise MissingParameters("amount must be positive and tx_sig non-empty")
        claim = await add_claim(session, wallet=normalized, amount=amount, tx_sig=tx_sig.strip())
        logger.info(
            "Выплата {amount} для {wallet}, всего {total}",
            amount=amount,
            wallet=normalized,
            total=claim.claimed_amount,
        )
        return claim


__all__ = ["ClaimTracker"]
