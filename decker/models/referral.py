"""Таблица реферальных связей между кошельками."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from sqlmodel import Field

from .base import TimeStampedModel


class ReferralStatus(str, Enum):
    PENDING = "pending"
    CLAIMED = "claimed"


class Referral(TimeStampedModel, table=True):
    __tablename__ = "referrals"

    id: Optional[int] = Field(default=None, primary_key=True)
    referrer_wallet: str = Field(max_length=128, index=True)
    # Кошелёк может быть приглашён только один раз, независимо от статуса.
    referred_wallet: str = Field(max_length=128, unique=True, index=True)
    status: str = Field(default=ReferralStatus.PENDING.value, max_length=16, index=True)
    bonus_amount: int = Field(default=300)
    tx_sig: Optional[str] = Field(default=None, max_length=128)


__all__ = ["Referral", "ReferralStatus"]
