"""Подсчёт объёма: сумма переводов, касающихся кошелька, в долларах."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from decker.services.solana.types import Transaction

LAMPORTS_PER_SOL = 1_000_000_000
SOL_TO_USD = 100.0


@dataclass(frozen=True, slots=True)
class VolumeSummary:
    volume_usd: float
    relevant_tx_count: int


def aggregate_volume(
    wallet: str,
    transactions: Iterable[Transaction],
    *,
    native_to_usd: float = SOL_TO_USD,
    lamports_per_native: int = LAMPORTS_PER_SOL,
) -> VolumeSummary:
    """Входящие и исходящие считаются одинаково: это оценка активности, а не баланса."""

    total_usd = 0.0
    count = 0
    for tx in transactions:
        for transfer in tx.transfers:
            if not transfer.touches(wallet):
                continue
            total_usd += abs(transfer.amount) / lamports_per_native * native_to_usd
            count += 1
    return VolumeSummary(volume_usd=total_usd, relevant_tx_count=count)


__all__ = ["LAMPORTS_PER_SOL", "SOL_TO_USD", "VolumeSummary", "aggregate_volume"]
