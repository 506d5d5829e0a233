"""Проверка подписи транзакции через Solana JSON-RPC.

Подпись считается доказательством, только если getSignatureStatuses
возвращает confirmationStatus == "finalized" без ошибки исполнения.
"""

from __future__ import annotations

from typing import Any, Protocol

import aiohttp
from loguru import logger


class ProofVerifier(Protocol):
    async def verify(self, signature: str) -> bool:
        ...


class SolanaRpcError(RuntimeError):
    """RPC вернул ошибку или недоступен."""


class SolanaProofVerifier:
    def __init__(self, *, rpc_url: str, request_timeout: float = 10.0) -> None:
        self._rpc_url = rpc_url
        self._timeout = aiohttp.ClientTimeout(total=request_timeout)
        self._session: aiohttp.ClientSession | None = None

    async def start(self) -> None:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self._timeout)

    async def close(self) -> None:
        if self._session and not self._session.closed:
            await self._session.close()

    async def rpc_call(self, method: str, params: list[Any]) -> Any:
        await self.start()
        assert self._session is not None
        payload = {"jsonrpc": "2.0", "id": 1, "method": method, "params": params}
        async with self._session.post(self._rpc_url, json=payload) as resp:
            if resp.status >= 400:
                text = await resp.text()
                raise SolanaRpcError(f"RPC {method} завершился с HTTP {resp.status}: {text}")
            data = await resp.json(content_type=None)
        if "error" in data:
            raise SolanaRpcError(f"RPC ошибка {method}: {data['error']}")
        return data.get("result")

    async def verify(self, signature: str) -> bool:
        try:
            result = await self.rpc_call(
                "getSignatureStatuses",
                [[signature], {"searchTransactionHistory": True}],
            )
        except (SolanaRpcError, aiohttp.ClientError, TimeoutError) as exc:
            # Неподтверждённое доказательство = невалидное доказательство.
            logger.warning("Не удалось проверить подпись {sig}: {error}", sig=signature, error=exc)
            return False
        statuses = (result or {}).get("value") or []
        status = statuses[0] if statuses else None
        if not isinstance(status, dict):
            return False
        return status.get("confirmationStatus") == "finalized" and status.get("err") is None


__all__ = ["ProofVerifier", "SolanaProofVerifier", "SolanaRpcError"]
