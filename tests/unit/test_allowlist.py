import pytest

from decker.services.core.allowlist import (
    AllowlistSnapshot,
    AllowlistStore,
    parse_amount,
    parse_wallet_amounts,
    parse_wallet_set,
)


@pytest.mark.unit
@pytest.mark.parametrize(
    "raw, expected",
    [("1500", 1500), (" 42 ", 42), ("12.7", 12), ("7abc", 7), ("", 0), (None, 0), ("n/a", 0)],
)
def test_parse_amount_behaves_like_parse_int(raw, expected):
    assert parse_amount(raw) == expected


@pytest.mark.unit
def test_wallet_rows_are_normalized_and_blank_rows_skipped():
    text = "wallet,note\n  WalletA ,x\n,empty\nwalletb,y\n"

    assert parse_wallet_set(text) == {"walleta", "walletb"}


@pytest.mark.unit
def test_malformed_amount_defaults_to_zero():
    text = "wallet,amount\nWalletA,2500\nWalletB,oops\nWalletC,\n"

    assert parse_wallet_amounts(text) == {"walleta": 2500, "walletb": 0, "walletc": 0}


@pytest.mark.unit
def test_snapshot_is_read_only():
    snapshot = AllowlistSnapshot.build(degen={"WalletA": 10})

    assert snapshot.degen_bonus("walleta") == 10
    assert snapshot.degen_bonus("missing") == 0
    with pytest.raises(TypeError):
        snapshot.degen_amounts["walletb"] = 1  # type: ignore[index]


@pytest.mark.asyncio
@pytest.mark.unit
async def test_reload_replaces_snapshot_from_files(tmp_path):
    og = tmp_path / "og.csv"
    og.write_text("wallet\nOgWallet\n", encoding="utf-8")
    degen = tmp_path / "degen.csv"
    degen.write_text("wallet,amount\nDegenWallet,500\n", encoding="utf-8")
    store = AllowlistStore(
        AllowlistSnapshot.build(role=["stale"]),
        og_source=str(og),
        degen_source=str(degen),
        role_source=str(tmp_path / "missing.csv"),
    )
    before = store.snapshot

    snapshot = await store.reload()

    assert store.snapshot is snapshot
    assert snapshot is not before
    assert snapshot.is_og("ogwallet")
    assert snapshot.degen_bonus("degenwallet") == 500
    # Full replacement: an unreadable source ends up empty, not merged.
    assert snapshot.role_holders == frozenset()
    assert before.is_role_holder("stale")
