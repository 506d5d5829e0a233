"""Единый сценарий GetEligibility.

Кошелёк нормализуется → история берётся из кеша или из Helius → считается
объём → тир и бонусы вайтлистов → вычитаются прошлые выплаты. Рефералка и
degen-бонус подключаются флагами, а не отдельными хендлерами.
"""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from decker.services.solana.history_fetcher import HistoryFetcher
from decker.utils.wallet import normalize_optional, normalize_wallet

from .allowlist import AllowlistStore
from .claim_tracker import ClaimTracker
from .referral_service import ReferralService
from .scoring import Entitlement, score_wallet
from .tx_cache import CacheStatus, TransactionCache, load_transactions
from .volume import LAMPORTS_PER_SOL, SOL_TO_USD, aggregate_volume


@dataclass(frozen=True, slots=True)
class EligibilityOptions:
    referrals_enabled: bool = True
    degen_bonus_enabled: bool = True
    native_to_usd: float = SOL_TO_USD
    lamports_per_native: int = LAMPORTS_PER_SOL


@dataclass(frozen=True, slots=True)
class EligibilityResult:
    wallet: str
    volume_usd: float
    relevant_tx_count: int
    entitlement: Entitlement
    referral_pending_bonus: int
    cache_status: CacheStatus

    @property
    def eligible(self) -> bool:
        return self.entitlement.eligible


class EligibilityService:
    def __init__(
        self,
        *,
        session_maker: async_sessionmaker[AsyncSession],
        tx_cache: TransactionCache,
        fetcher: HistoryFetcher,
        allowlists: AllowlistStore,
        referrals: ReferralService,
        claims: ClaimTracker,
        options: EligibilityOptions | None = None,
    ) -> None:
        self._session_maker = session_maker
        self._tx_cache = tx_cache
        self._fetcher = fetcher
        self._allowlists = allowlists
        self._referrals = referrals
        self._claims = claims
        self._options = options or EligibilityOptions()

    async def get_eligibility(
        self,
        wallet: str | None,
        referrer: str | None = None,
        *,
        force_refresh: bool = False,
    ) -> EligibilityResult:
        normalized = normalize_wallet(wallet)
        referrer_wallet = normalize_optional(referrer)

        loaded = await load_transactions(
            normalized,
            cache=self._tx_cache,
            fetcher=self._fetcher,
            force_refresh=force_refresh,
        )
        volume = aggregate_volume(
            normalized,
            loaded.transactions,
            native_to_usd=self._options.native_to_usd,
            lamports_per_native=self._options.lamports_per_native,
        )

        async with self._session_maker() as session:
            if self._options.referrals_enabled:
                await self._register_referral(session, normalized, referrer_wallet)
            already_claimed = await self._already_claimed(session, normalized)
            pending = await self._pending_bonus(session, normalized)

        # Снапшот читаем один раз, чтобы перезагрузка посреди расчёта не смешала списки.
        snapshot = self._allowlists.snapshot
        entitlement = score_wallet(
            normalized,
            volume.volume_usd,
            snapshot,
            already_claimed=already_claimed,
            degen_enabled=self._options.degen_bonus_enabled,
        )
        logger.info(
            "Eligibility {wallet}: ${volume:.2f}, tier={tier}, итог={total}",
            wallet=normalized,
            volume=volume.volume_usd,
            tier=entitlement.tier,
            total=entitlement.final_total,
        )
        return EligibilityResult(
            wallet=normalized,
            volume_usd=volume.volume_usd,
            relevant_tx_count=volume.relevant_tx_count,
            entitlement=entitlement,
            referral_pending_bonus=pending,
            cache_status=loaded.cache_status,
        )

    async def _register_referral(
        self,
        session: AsyncSession,
        wallet: str,
        referrer: str | None,
    ) -> None:
        if referrer is None:
            return
        try:
            await self._referrals.register(session, referred_wallet=wallet, referrer_wallet=referrer)
        except SQLAlchemyError as exc:
            await session.rollback()
            logger.warning("Рефералка {wallet} не сохранена: {error}", wallet=wallet, error=exc)

    async def _already_claimed(self, session: AsyncSession, wallet: str) -> int:
        try:
            return await self._claims.already_claimed(session, wallet)
        except SQLAlchemyError as exc:
            await session.rollback()
            logger.error("Не удалось прочитать выплаты {wallet}: {error}", wallet=wallet, error=exc)
            return 0

    async def _pending_bonus(self, session: AsyncSession, wallet: str) -> int:
        if not self._options.referrals_enabled:
            return 0
        try:
            return await self._referrals.pending_bonus(session, wallet)
        except SQLAlchemyError as exc:
            await session.rollback()
            logger.warning("Не удалось посчитать pending-бонус {wallet}: {error}", wallet=wallet, error=exc)
            return 0


__all__ = ["EligibilityOptions", "EligibilityResult", "EligibilityService"]
