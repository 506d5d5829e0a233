"""SQLModel сущности Decker Eligibility."""

from .claim import Claim  # noqa: F401
from .referral import Referral, ReferralStatus  # noqa: F401
from .tx_cache import TxCache  # noqa: F401

__all__ = [
    "Claim",
    "Referral",
    "ReferralStatus",
    "TxCache",
]
