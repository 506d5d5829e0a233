"""Тиры по объёму и сборка итоговой награды с бонусами вайтлистов."""

from __future__ import annotations

from dataclasses import dataclass

from .allowlist import AllowlistSnapshot

OG_BONUS = 15_000
ROLE_BONUS = 15_000


@dataclass(frozen=True, slots=True)
class TierBand:
    threshold_usd: float
    tier: int
    reward: int


# От большего порога к меньшему, побеждает первое совпадение.
TIER_TABLE: tuple[TierBand, ...] = (
    TierBand(3_000_000, 1, 25_000),
    TierBand(500_000, 2, 15_000),
    TierBand(250_000, 3, 7_000),
    TierBand(30_000, 4, 3_000),
    TierBand(1_000, 5, 1_500),
)


@dataclass(frozen=True, slots=True)
class Entitlement:
    tier: int | None
    reward: int
    is_og: bool
    total_with_og: int
    is_degen: bool
    degen_bonus: int
    is_role_holder: bool
    gross_total: int
    already_claimed: int
    final_total: int

    @property
    def eligible(self) -> bool:
        return self.tier is not None or self.is_og or self.is_degen or self.is_role_holder


def assign_tier(volume_usd: float) -> TierBand | None:
    for band in TIER_TABLE:
        if volume_usd >= band.threshold_usd:
            return band
    return None


def remaining_after_claims(gross_total: int, already_claimed: int) -> int:
    return max(0, gross_total - already_claimed)


def score_wallet(
    wallet: str,
    volume_usd: float,
    allowlists: AllowlistSnapshot,
    *,
    already_claimed: int = 0,
    degen_enabled: bool = True,
) -> Entitlement:
    band = assign_tier(volume_usd)
    reward = band.reward if band else 0

    is_og = allowlists.is_og(wallet)
    total_with_og = reward + OG_BONUS if is_og else reward

    is_degen = degen_enabled and allowlists.is_degen(wallet)
    degen_bonus = allowlists.degen_bonus(wallet) if is_degen else 0

    is_role_holder = allowlists.is_role_holder(wallet)
    gross_total = total_with_og + degen_bonus + (ROLE_BONUS if is_role_holder else 0)

    return Entitlement(
        tier=band.tier if band else None,
        reward=reward,
        is_og=is_og,
        total_with_og=total_with_og,
        is_degen=is_degen,
        degen_bonus=degen_bonus,
        is_role_holder=is_role_holder,
        gross_total=gross_total,
        already_claimed=already_claimed,
        final_total=remaining_after_claims(gross_total, already_claimed),
    )


__all__ = [
    "Entitlement",
    "OG_BONUS",
    "ROLE_BONUS",
    "TIER_TABLE",
    "TierBand",
    "assign_tier",
    "remaining_after_claims",
    "score_wallet",
]
