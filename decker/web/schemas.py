"""Модели запросов/ответов HTTP API (camelCase на проводе)."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from decker.services.core.eligibility_service import EligibilityResult
from decker.services.core.referral_service import ReferralClaim


class EligibilityResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    wallet: str
    volume_usd: str = Field(..., alias="volumeUSD")
    tier: int | str = Field(..., description='Номер тира или "None"')
    reward: int
    eligible: bool
    relevant_tx_count: int = Field(..., alias="relevantTxCount")
    is_og_holder: bool = Field(..., alias="isOGHolder")
    total_with_og: int = Field(..., alias="totalWithOG")
    is_degen_bonus_holder: bool = Field(..., alias="isDegenBonusHolder")
    degen_bonus: int = Field(..., alias="degenBonus")
    is_role_holder: bool = Field(..., alias="isRoleHolder")
    final_total: int = Field(..., alias="finalTotal")
    already_claimed: int = Field(..., alias="alreadyClaimed")
    referral_pending_bonus: int = Field(..., alias="referralPendingBonus")

    @classmethod
    def from_result(cls, result: EligibilityResult) -> "EligibilityResponse":
        ent = result.entitlement
        return cls(
            wallet=result.wallet,
            volume_usd=f"{result.volume_usd:.2f}",
            tier=ent.tier if ent.tier is not None else "None",
            reward=ent.reward,
            eligible=result.eligible,
            relevant_tx_count=result.relevant_tx_count,
            is_og_holder=ent.is_og,
            total_with_og=ent.total_with_og,
            is_degen_bonus_holder=ent.is_degen,
            degen_bonus=ent.degen_bonus,
            is_role_holder=ent.is_role_holder,
            final_total=ent.final_total,
            already_claimed=ent.already_claimed,
            referral_pending_bonus=result.referral_pending_bonus,
        )


class ClaimReferralRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    referrer_wallet: str | None = Field(None, alias="referrerWallet")
    tx_sig: str | None = Field(None, alias="txSig")


class ClaimReferralResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    claimed_amount: int = Field(..., alias="claimedAmount")

    @classmethod
    def from_claim(cls, claim: ReferralClaim) -> "ClaimReferralResponse":
        return cls(claimed_amount=claim.claimed_amount)


class HealthResponse(BaseModel):
    status: str = "ok"
    allowlists: dict[str, int]


__all__ = [
    "ClaimReferralRequest",
    "ClaimReferralResponse",
    "EligibilityResponse",
    "HealthResponse",
]
