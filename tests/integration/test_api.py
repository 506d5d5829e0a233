"""HTTP contract of the FastAPI app (camelCase payloads, error bodies)."""

import httpx
import pytest
import pytest_asyncio

from decker.context import Services
from decker.services.core.allowlist import AllowlistSnapshot
from decker.web.app import create_app
from tests.factories import OTHER, WALLET, transfer, tx

ADMIN_TOKEN = "admin-secret"


@pytest_asyncio.fixture
async def client(engine, session_maker, allowlists, eligibility_service, referral_service, claim_tracker):
    services = Services(
        engine=engine,
        session_maker=session_maker,
        allowlists=allowlists,
        eligibility=eligibility_service,
        referrals=referral_service,
        claims=claim_tracker,
    )
    app = create_app(services, admin_token=ADMIN_TOKEN)
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.mark.asyncio
@pytest.mark.integration
async def test_missing_wallet_returns_400(client):
    resp = await client.get("/check-eligibility")

    assert resp.status_code == 400
    assert resp.json() == {"error": "Missing wallet address"}


@pytest.mark.asyncio
@pytest.mark.integration
async def test_eligibility_payload_shape(client, page_source):
    page_source.script = [[tx("s1", transfer(WALLET, OTHER, 10)), tx("s2", transfer(OTHER, WALLET, 5))], []]

    resp = await client.get("/check-eligibility", params={"wallet": WALLET})

    assert resp.status_code == 200
    assert resp.json() == {
        "wallet": WALLET.lower(),
        "volumeUSD": "1500.00",
        "tier": 5,
        "reward": 1500,
        "eligible": True,
        "relevantTxCount": 2,
        "isOGHolder": False,
        "totalWithOG": 1500,
        "isDegenBonusHolder": False,
        "degenBonus": 0,
        "isRoleHolder": False,
        "finalTotal": 1500,
        "alreadyClaimed": 0,
        "referralPendingBonus": 0,
    }


@pytest.mark.asyncio
@pytest.mark.integration
async def test_no_tier_is_reported_as_none_string(client, allowlists):
    allowlists.swap(AllowlistSnapshot.build(role=[WALLET]))

    body = (await client.get("/check-eligibility", params={"wallet": WALLET})).json()

    assert body["tier"] == "None"
    assert body["eligible"] is True
    assert body["finalTotal"] == 15_000


@pytest.mark.asyncio
@pytest.mark.integration
async def test_claim_referral_flow(client, verifier):
    verifier.finalized.add("good-sig")
    await client.get("/check-eligibility", params={"wallet": WALLET, "referrer": "ReferrerX"})

    missing = await client.post("/claim-referral", json={"referrerWallet": "referrerx"})
    invalid = await client.post("/claim-referral", json={"referrerWallet": "referrerx", "txSig": "bad-sig"})
    ok = await client.post("/claim-referral", json={"referrerWallet": "referrerx", "txSig": "good-sig"})
    repeat = await client.post("/claim-referral", json={"referrerWallet": "referrerx", "txSig": "good-sig"})

    assert missing.status_code == 400
    assert missing.json() == {"error": "Missing parameters"}
    assert invalid.status_code == 400
    assert ok.status_code == 200
    assert ok.json() == {"claimedAmount": 300}
    assert repeat.status_code == 404


@pytest.mark.asyncio
@pytest.mark.integration
async def test_admin_reload_requires_token(client):
    denied = await client.post("/admin/allowlists/reload")
    allowed = await client.post("/admin/allowlists/reload", headers={"X-Admin-Token": ADMIN_TOKEN})

    assert denied.status_code == 401
    assert allowed.status_code == 200
    assert allowed.json()["allowlists"] == {"og": 0, "degen": 0, "role": 0}


@pytest.mark.asyncio
@pytest.mark.integration
async def test_health(client, allowlists):
    allowlists.swap(AllowlistSnapshot.build(og=["a", "b"]))

    resp = await client.get("/health")

    assert resp.json() == {"status": "ok", "allowlists": {"og": 2, "degen": 0, "role": 0}}
