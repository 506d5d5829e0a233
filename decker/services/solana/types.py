"""Неизменяемые записи транзакций и нативных переводов."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable


@dataclass(frozen=True, slots=True)
class NativeTransfer:
    """Перевод нативной валюты внутри транзакции (amount в лампортах)."""

    from_account: str | None
    to_account: str | None
    amount: int

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "NativeTransfer":
        try:
            amount = int(data.get("amount") or 0)
        except (TypeError, ValueError):
            amount = 0
        return cls(
            from_account=_account(data.get("fromUserAccount")),
            to_account=_account(data.get("toUserAccount")),
            amount=amount,
        )

    def as_payload(self) -> dict[str, Any]:
        return {
            "fromUserAccount": self.from_account,
            "toUserAccount": self.to_account,
            "amount": self.amount,
        }

    def touches(self, wallet: str) -> bool:
        """Сравнение без учёта регистра; wallet уже нормализован."""

        return any(
            account is not None and account.lower() == wallet
            for account in (self.from_account, self.to_account)
        )


@dataclass(frozen=True, slots=True)
class Transaction:
    """Транзакция Helius: подпись служит курсором пагинации."""

    signature: str | None
    transfers: tuple[NativeTransfer, ...] = ()

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "Transaction":
        raw_transfers = data.get("nativeTransfers")
        if not isinstance(raw_transfers, list):
            raw_transfers = []
        transfers = tuple(
            NativeTransfer.from_payload(item) for item in raw_transfers if isinstance(item, dict)
        )
        signature = data.get("signature")
        return cls(signature=signature if isinstance(signature, str) else None, transfers=transfers)

    def as_payload(self) -> dict[str, Any]:
        return {
            "signature": self.signature,
            "nativeTransfers": [transfer.as_payload() for transfer in self.transfers],
        }


def _account(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def parse_transactions(items: Iterable[Any]) -> list[Transaction]:
    return [Transaction.from_payload(item) for item in items if isinstance(item, dict)]


def dump_transactions(transactions: Iterable[Transaction]) -> list[dict[str, Any]]:
    return [tx.as_payload() for tx in transactions]


__all__ = ["NativeTransfer", "Transaction", "dump_transactions", "parse_transactions"]
