"""Вайтлисты: OG, degen-бонусы с суммой и держатели роли.

Снапшот неизменяем и читается без блокировок. Перезагрузка строит новый
снапшот целиком и подменяет ссылку в AllowlistStore одной операцией.
"""

from __future__ import annotations

import asyncio
import csv
import io
import re
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Mapping

import aiohttp
from loguru import logger

_LEADING_INT = re.compile(r"\s*([-+]?\d+)")


@dataclass(frozen=True, slots=True)
class AllowlistSnapshot:
    """Read-only снимок трёх вайтлистов (ключи нормализованы)."""

    og_wallets: frozenset[str] = frozenset()
    degen_amounts: Mapping[str, int] = field(default_factory=lambda: MappingProxyType({}))
    role_holders: frozenset[str] = frozenset()

    def is_og(self, wallet: str) -> bool:
        return wallet in self.og_wallets

    def is_degen(self, wallet: str) -> bool:
        return wallet in self.degen_amounts

    def degen_bonus(self, wallet: str) -> int:
        return self.degen_amounts.get(wallet, 0)

    def is_role_holder(self, wallet: str) -> bool:
        return wallet in self.role_holders

    def sizes(self) -> dict[str, int]:
        return {
            "og": len(self.og_wallets),
            "degen": len(self.degen_amounts),
            "role": len(self.role_holders),
        }

    @classmethod
    def build(
        cls,
        *,
        og: Iterable[str] = (),
        degen: Mapping[str, int] | None = None,
        role: Iterable[str] = (),
    ) -> "AllowlistSnapshot":
        return cls(
            og_wallets=frozenset(_normalize(w) for w in og if _normalize(w)),
            degen_amounts=MappingProxyType(
                {_normalize(w): amount for w, amount in (degen or {}).items() if _normalize(w)}
            ),
            role_holders=frozenset(_normalize(w) for w in role if _normalize(w)),
        )


def parse_amount(raw: str | None) -> int:
    """Как parseInt: ведущие цифры, иначе 0."""

    match = _LEADING_INT.match(raw or "")
    return int(match.group(1)) if match else 0


def parse_wallet_set(text: str) -> set[str]:
    wallets: set[str] = set()
    for row in csv.DictReader(io.StringIO(text)):
        wallet = _normalize(row.get("wallet"))
        if wallet:
            wallets.add(wallet)
    return wallets


def parse_wallet_amounts(text: str) -> dict[str, int]:
    amounts: dict[str, int] = {}
    for row in csv.DictReader(io.StringIO(text)):
        wallet = _normalize(row.get("wallet"))
        if wallet:
            amounts[wallet] = parse_amount(row.get("amount"))
    return amounts


async def read_source(source: str, *, timeout: float = 15.0) -> str:
    """Читает CSV из локального файла или по http(s) URL."""

    if source.startswith(("http://", "https://")):
        async with aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=timeout)) as session:
            async with session.get(source) as resp:
                resp.raise_for_status()
                return await resp.text()
    return await asyncio.to_thread(Path(source).read_text, encoding="utf-8")


class AllowlistStore:
    """Держатель текущего снапшота вайтлистов."""

    def __init__(
        self,
        snapshot: AllowlistSnapshot | None = None,
        *,
        og_source: str = "",
        degen_source: str = "",
        role_source: str = "",
        timeout: float = 15.0,
    ) -> None:
        self._snapshot = snapshot or AllowlistSnapshot()
        self._sources = {"og": og_source, "degen": degen_source, "role": role_source}
        self._timeout = timeout

    @property
    def snapshot(self) -> AllowlistSnapshot:
        return self._snapshot

    def swap(self, snapshot: AllowlistSnapshot) -> AllowlistSnapshot:
        previous, self._snapshot = self._snapshot, snapshot
        return previous

    async def reload(self) -> AllowlistSnapshot:
        """Полная (не инкрементальная) перезагрузка всех трёх списков."""

        og_text, degen_text, role_text = await asyncio.gather(
            self._load("og"),
            self._load("degen"),
            self._load("role"),
        )
        snapshot = AllowlistSnapshot(
            og_wallets=frozenset(parse_wallet_set(og_text)),
            degen_amounts=MappingProxyType(parse_wallet_amounts(degen_text)),
            role_holders=frozenset(parse_wallet_set(role_text)),
        )
        self.swap(snapshot)
        logger.info("Вайтлисты загружены: {sizes}", sizes=snapshot.sizes())
        return snapshot

    async def _load(self, name: str) -> str:
        source = self._sources[name]
        if not source:
            logger.debug("Источник вайтлиста {name} не задан", name=name)
            return ""
        try:
            return await read_source(source, timeout=self._timeout)
        except (aiohttp.ClientError, OSError, TimeoutError) as exc:
            logger.error("Не удалось загрузить CSV {source}: {error}", source=source, error=exc)
            return ""


def _normalize(wallet: str | None) -> str:
    return (wallet or "").strip().lower()


__all__ = [
    "AllowlistSnapshot",
    "AllowlistStore",
    "parse_amount",
    "parse_wallet_amounts",
    "parse_wallet_set",
    "read_source",
]
