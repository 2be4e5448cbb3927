"""Referral system module.

Each user owns one referral code. The first new user who registers with
an unused code completes it and the referrer earns 20 points, exactly once.
"""

from sydai.referral.models import Referral
from sydai.referral.service import ReferralService, ReferralStats, generate_referral_code

__all__ = ["Referral", "ReferralService", "ReferralStats", "generate_referral_code"]
