from datetime import timedelta

import pytest
import pytest_asyncio

from decker.database import create_engine, create_session_maker, init_db
from decker.services.core.allowlist import AllowlistSnapshot, AllowlistStore
from decker.services.core.claim_tracker import ClaimTracker
from decker.services.core.eligibility_service import EligibilityService
from decker.services.core.referral_service import ReferralService
from decker.services.core.tx_cache import TransactionCache
from decker.services.solana.history_fetcher import HistoryFetcher, RetryPolicy
from tests.factories import FakePageSource, FakeVerifier, RecordingSleep


@pytest_asyncio.fixture
async def engine(tmp_path):
    """Fresh SQLite file database per test."""
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'decker_test.db'}")
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return create_session_maker(engine)


@pytest_asyncio.fixture
async def session(session_maker):
    async with session_maker() as session:
        yield session


@pytest.fixture
def page_source():
    return FakePageSource()


@pytest.fixture
def sleeper():
    return RecordingSleep()


@pytest.fixture
def fetcher(page_source, sleeper):
    return HistoryFetcher(
        page_source,
        max_pages=10,
        retry_policy=RetryPolicy(max_attempts=5, backoff_base_sec=0.5),
        sleep=sleeper,
    )


@pytest.fixture
def tx_cache(session_maker):
    return TransactionCache(session_maker, ttl=timedelta(hours=24))


@pytest.fixture
def verifier():
    return FakeVerifier()


@pytest.fixture
def allowlists():
    return AllowlistStore(AllowlistSnapshot())


@pytest.fixture
def referral_service(verifier):
    return ReferralService(verifier, bonus_amount=300)


@pytest.fixture
def claim_tracker():
    return ClaimTracker()


@pytest.fixture
def eligibility_service(session_maker, tx_cache, fetcher, allowlists, referral_service, claim_tracker):
    return EligibilityService(
        session_maker=session_maker,
        tx_cache=tx_cache,
        fetcher=fetcher,
        allowlists=allowlists,
        referrals=referral_service,
        claims=claim_tracker,
    )
