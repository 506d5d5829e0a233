"""Сборка сервисов Decker из настроек."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config.settings import AppSettings, get_settings
from .database import create_engine, create_session_maker, init_db
from .services.core.allowlist import AllowlistStore
from .services.core.claim_tracker import ClaimTracker
from .services.core.eligibility_service import EligibilityOptions, EligibilityService
from .services.core.referral_service import ReferralService
from .services.core.tx_cache import CacheJanitor, TransactionCache
from .services.solana.helius_client import HeliusClient
from .services.solana.history_fetcher import HistoryFetcher, RetryPolicy
from .services.solana.proof_verifier import SolanaProofVerifier


@dataclass(slots=True)
class Services:
    """Всё, что нужно HTTP-слою и скриптам."""

    engine: AsyncEngine
    session_maker: async_sessionmaker[AsyncSession]
    allowlists: AllowlistStore
    eligibility: EligibilityService
    referrals: ReferralService
    claims: ClaimTracker
    janitor: CacheJanitor | None = None
    helius: HeliusClient | None = None
    verifier: SolanaProofVerifier | None = None

    async def start(self) -> None:
        await init_db(self.engine)
        await self.allowlists.reload()
        if self.janitor:
            await self.janitor.start()
        logger.info("Сервисы Decker запущены")

    async def close(self) -> None:
        if self.janitor:
            await self.janitor.stop()
        if self.helius:
            await self.helius.close()
        if self.verifier:
            await self.verifier.close()
        await self.engine.dispose()
        logger.info("Сервисы Decker остановлены")


def build_services(settings: AppSettings) -> Services:
    engine = create_engine(settings.database.dsn, echo=settings.database.echo)
    session_maker = create_session_maker(engine)

    helius = HeliusClient(
        api_key=settings.helius.api_key.get_secret_value(),
        base_url=str(settings.helius.base_url),
        page_limit=settings.helius.page_limit,
        request_timeout=settings.fetcher.request_timeout_sec,
    )
    fetcher = HistoryFetcher(
        helius,
        max_pages=settings.fetcher.max_pages,
        retry_policy=RetryPolicy(
            max_attempts=settings.fetcher.max_attempts,
            backoff_base_sec=settings.fetcher.backoff_base_sec,
        ),
    )
    verifier = SolanaProofVerifier(
        rpc_url=str(settings.solana.rpc_url),
        request_timeout=settings.solana.request_timeout_sec,
    )
    tx_cache = TransactionCache(session_maker, ttl=timedelta(hours=settings.cache.ttl_hours))
    allowlists = AllowlistStore(
        og_source=settings.allowlists.og_source,
        degen_source=settings.allowlists.degen_source,
        role_source=settings.allowlists.role_source,
        timeout=settings.allowlists.request_timeout_sec,
    )
    referrals = ReferralService(verifier, bonus_amount=settings.referral.bonus_amount)
    claims = ClaimTracker()
    eligibility = EligibilityService(
        session_maker=session_maker,
        tx_cache=tx_cache,
        fetcher=fetcher,
        allowlists=allowlists,
        referrals=referrals,
        claims=claims,
        options=EligibilityOptions(
            referrals_enabled=settings.features.referrals_enabled,
            degen_bonus_enabled=settings.features.degen_bonus_enabled,
            native_to_usd=settings.pricing.native_to_usd,
            lamports_per_native=settings.pricing.lamports_per_native,
        ),
    )
    return Services(
        engine=engine,
        session_maker=session_maker,
        allowlists=allowlists,
        eligibility=eligibility,
        referrals=referrals,
        claims=claims,
        janitor=CacheJanitor(tx_cache, interval_sec=settings.cache.purge_interval_sec),
        helius=helius,
        verifier=verifier,
    )


_services: Services | None = None


def get_services() -> Services:
    """Ленивый синглтон контейнера сервисов."""

    global _services
    if _services is None:
        _services = build_services(get_settings())
    return _services


__all__ = ["Services", "build_services", "get_services"]
