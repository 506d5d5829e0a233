"""Cache-aside semantics over the tx_cache table."""

from datetime import timedelta

import pytest

from decker.models.base import utcnow
from decker.repositories import get_cache_entry
from decker.services.core.tx_cache import (
    CacheJanitor,
    CacheStatus,
    TransactionCache,
    load_transactions,
)
from tests.factories import WALLET, page

KEY = WALLET.lower()


@pytest.mark.asyncio
@pytest.mark.integration
async def test_missing_entry_is_a_miss(tx_cache):
    lookup = await tx_cache.get(KEY)
    assert lookup.status is CacheStatus.MISS
    assert lookup.transactions == []


@pytest.mark.asyncio
@pytest.mark.integration
async def test_put_then_get_is_a_hit(tx_cache):
    txs = page("p1")
    await tx_cache.put(KEY, txs)

    lookup = await tx_cache.get(KEY)

    assert lookup.is_hit
    assert lookup.transactions == txs


@pytest.mark.asyncio
@pytest.mark.integration
async def test_empty_entry_is_treated_as_miss(tx_cache):
    await tx_cache.put(KEY, [])

    lookup = await tx_cache.get(KEY)

    assert lookup.status is CacheStatus.EMPTY
    assert not lookup.is_hit


@pytest.mark.asyncio
@pytest.mark.integration
async def test_entry_older_than_ttl_is_stale(session_maker, tx_cache):
    await tx_cache.put(KEY, page("p1"))
    later = TransactionCache(
        session_maker,
        ttl=timedelta(hours=24),
        clock=lambda: utcnow() + timedelta(hours=25),
    )

    lookup = await later.get(KEY)

    assert lookup.status is CacheStatus.STALE


@pytest.mark.asyncio
@pytest.mark.integration
async def test_put_replaces_instead_of_merging(session, tx_cache):
    await tx_cache.put(KEY, page("old", size=3))
    first = await get_cache_entry(session, KEY)
    first_id, first_updated = first.id, first.updated_at

    await tx_cache.put(KEY, page("new", size=1))

    lookup = await tx_cache.get(KEY)
    assert [t.signature for t in lookup.transactions] == ["new-0"]
    session.expire_all()
    entry = await get_cache_entry(session, KEY)
    assert entry.id == first_id
    assert entry.updated_at >= first_updated


@pytest.mark.asyncio
@pytest.mark.integration
async def test_load_transactions_fetches_on_miss_and_reuses_cache(tx_cache, fetcher, page_source):
    page_source.script = [page("p1"), []]

    first = await load_transactions(KEY, cache=tx_cache, fetcher=fetcher)
    second = await load_transactions(KEY, cache=tx_cache, fetcher=fetcher)

    assert first.fetched and first.cache_status is CacheStatus.MISS
    assert not second.fetched and second.cache_status is CacheStatus.HIT
    assert second.transactions == first.transactions
    assert len(page_source.calls) == 2


@pytest.mark.asyncio
@pytest.mark.integration
async def test_force_refresh_bypasses_cache(tx_cache, fetcher, page_source):
    await tx_cache.put(KEY, page("cached"))
    page_source.script = [page("fresh", size=1), []]

    result = await load_transactions(KEY, cache=tx_cache, fetcher=fetcher, force_refresh=True)

    assert result.cache_status is CacheStatus.BYPASSED
    assert [t.signature for t in (await tx_cache.get(KEY)).transactions] == ["fresh-0"]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_janitor_purges_expired_rows(session_maker, tx_cache):
    await tx_cache.put(KEY, page("p1"))
    await tx_cache.put("fresh-wallet", page("p2"))
    future_cache = TransactionCache(
        session_maker,
        ttl=timedelta(hours=24),
        clock=lambda: utcnow() + timedelta(hours=25),
    )

    removed = await CacheJanitor(future_cache).run_once()

    assert removed == 2
    assert (await tx_cache.get(KEY)).status is CacheStatus.MISS
