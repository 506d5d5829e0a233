"""Репозитории для работы с БД."""

from .claim_repo import add_claim, get_claim, get_claimed_amount
from .referral_repo import (
    claim_pending_for_referrer,
    create_referral,
    get_referral_by_referred,
    sum_pending_bonus,
)
from .tx_cache_repo import delete_expired, get_cache_entry, upsert_transactions

__all__ = [
    "add_claim",
    "claim_pending_for_referrer",
    "create_referral",
    "delete_expired",
    "get_cache_entry",
    "get_claim",
    "get_claimed_amount",
    "get_referral_by_referred",
    "sum_pending_bonus",
    "upsert_transactions",
]
