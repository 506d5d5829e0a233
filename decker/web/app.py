"""FastAPI backend для проверки eligibility и клейма реферальных бонусов."""

from __future__ import annotations

import hmac
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Header, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from decker.context import Services, get_services
from decker.web.errors import register_error_handlers
from decker.web.schemas import (
    ClaimReferralRequest,
    ClaimReferralResponse,
    EligibilityResponse,
    HealthResponse,
)


def services_dep(request: Request) -> Services:
    return request.app.state.services


def create_app(
    services: Services | None = None,
    *,
    cors_origins: list[str] | None = None,
    admin_token: str | None = None,
) -> FastAPI:
    """Собирает приложение; без services контейнер строится из настроек в lifespan."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if services is not None:
            yield
            return
        owned = get_services()
        app.state.services = owned
        await owned.start()
        try:
            yield
        finally:
            await owned.close()

    app = FastAPI(title="Decker Eligibility API", lifespan=lifespan)
    if services is not None:
        app.state.services = services
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins or ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)

    def require_admin(x_admin_token: str | None = Header(None, alias="X-Admin-Token")) -> None:
        if not admin_token:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")
        if not x_admin_token or not hmac.compare_digest(x_admin_token, admin_token):
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid admin token")

    @app.get("/check-eligibility", response_model=EligibilityResponse)
    async def check_eligibility(
        wallet: str | None = None,
        referrer: str | None = None,
        refresh: bool = False,
        svc: Services = Depends(services_dep),
    ) -> EligibilityResponse:
        result = await svc.eligibility.get_eligibility(wallet, referrer, force_refresh=refresh)
        return EligibilityResponse.from_result(result)

    @app.post("/claim-referral", response_model=ClaimReferralResponse)
    async def claim_referral(
        payload: ClaimReferralRequest | None = None,
        svc: Services = Depends(services_dep),
    ) -> ClaimReferralResponse:
        payload = payload or ClaimReferralRequest()
        async with svc.session_maker() as session:
            claim = await svc.referrals.claim(
                session,
                referrer_wallet=payload.referrer_wallet,
                tx_sig=payload.tx_sig,
            )
        return ClaimReferralResponse.from_claim(claim)

    @app.post("/admin/allowlists/reload", response_model=HealthResponse, dependencies=[Depends(require_admin)])
    async def reload_allowlists(svc: Services = Depends(services_dep)) -> HealthResponse:
        snapshot = await svc.allowlists.reload()
        logger.info("Вайтлисты перезагружены по запросу администратора")
        return HealthResponse(allowlists=snapshot.sizes())

    @app.get("/health", response_model=HealthResponse)
    async def health(svc: Services = Depends(services_dep)) -> HealthResponse:
        return HealthResponse(allowlists=svc.allowlists.snapshot.sizes())

    return app


__all__ = ["create_app", "services_dep"]
