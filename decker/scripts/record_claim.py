"""Фиксирует выплату награды кошельку (вычитается из следующих расчётов).

python -m decker.scripts.record_claim --wallet <addr> --amount 1500 --tx-sig <sig>
"""

from __future__ import annotations

import argparse
import asyncio

from loguru import logger

from config.settings import get_settings
from decker.database import create_engine, create_session_maker, init_db
from decker.exceptions import ClientError
from decker.logging_config import setup_logging
from decker.services.core.claim_tracker import ClaimTracker


async def _run(wallet: str, amount: int, tx_sig: str) -> int:
    settings = get_settings()
    engine = create_engine(settings.database.dsn, echo=settings.database.echo)
    try:
        await init_db(engine)
        async with create_session_maker(engine)() as session:
            claim = await ClaimTracker().record_claim(
                session,
                wallet=wallet,
                amount=amount,
                tx_sig=tx_sig,
            )
    finally:
        await engine.dispose()
    return claim.claimed_amount


def main() -> int:
    ap = argparse.ArgumentParser(description="Record a disbursed reward for a wallet")
    ap.add_argument("--wallet", required=True)
    ap.add_argument("--amount", required=True, type=int)
    ap.add_argument("--tx-sig", required=True)
    args = ap.parse_args()

    setup_logging(level="INFO")
    try:
        total = asyncio.run(_run(args.wallet, args.amount, args.tx_sig))
    except ClientError as exc:
        logger.error("Выплата не записана: {error}", error=exc.message)
        return 1
    logger.info("Всего выплачено кошельку: {total}", total=total)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
