"""Уже выплаченные суммы по кошелькам."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field, SQLModel

from .base import utcnow


class Claim(SQLModel, table=True):
    __tablename__ = "claims"

    id: Optional[int] = Field(default=None, primary_key=True)
    wallet: str = Field(max_length=128, unique=True, index=True)
    claimed_amount: int = Field(default=0)
    claimed_at: datetime = Field(default_factory=utcnow, nullable=False)
    tx_sig: str = Field(max_length=128)


__all__ = ["Claim"]
