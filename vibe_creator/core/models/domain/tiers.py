"""Subscription tier rules.

Pricing, monthly export quotas and the capabilities each tier unlocks.
"""

from __future__ import annotations

from typing import Dict

from .enums import ExportResolution, SubscriptionTier

# Quota stored for tiers without an export limit
UNLIMITED_EXPORTS = 999999

TIER_PRICES: Dict[SubscriptionTier, int] = {
    SubscriptionTier.FREE: 0,
    SubscriptionTier.CREATOR: 99000,
    SubscriptionTier.PRO: 199000,
}

TIER_EXPORT_LIMITS: Dict[SubscriptionTier, int] = {
    SubscriptionTier.FREE: 5,
    SubscriptionTier.CREATOR: 50,
    SubscriptionTier.PRO: UNLIMITED_EXPORTS,
}

TIER_MAX_RESOLUTION: Dict[SubscriptionTier, ExportResolution] = {
    SubscriptionTier.FREE: ExportResolution.SD,
    SubscriptionTier.CREATOR: ExportResolution.HD,
    SubscriptionTier.PRO: ExportResolution.UHD,
}

_RESOLUTION_ORDER = [ExportResolution.SD, ExportResolution.HD, ExportResolution.UHD]


def is_unlimited(exports_limit: int) -> bool:
    return exports_limit >= UNLIMITED_EXPORTS


def export_limit_for(tier: SubscriptionTier) -> int:
    return TIER_EXPORT_LIMITS[tier]


def price_for(tier: SubscriptionTier) -> int:
    return TIER_PRICES[tier]


def clamp_resolution(tier: SubscriptionTier, requested: ExportResolution) -> ExportResolution:
    """Lower ``requested`` to the highest resolution ``tier`` may export."""
    ceiling = TIER_MAX_RESOLUTION[tier]
    if _RESOLUTION_ORDER.index(requested) > _RESOLUTION_ORDER.index(ceiling):
        return ceiling
    return requested


def requires_watermark(tier: SubscriptionTier) -> bool:
    return tier == SubscriptionTier.FREE
