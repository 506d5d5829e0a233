"""Кеш агрегированных транзакций кошелька."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import JSON
from sqlmodel import Column, Field

from .base import TimeStampedModel


class TxCache(TimeStampedModel, table=True):
    __tablename__ = "tx_cache"

    id: Optional[int] = Field(default=None, primary_key=True)
    wallet: str = Field(max_length=128, unique=True, index=True)
    transactions: list = Field(default_factory=list, sa_column=Column(JSON, nullable=False))


__all__ = ["TxCache"]
