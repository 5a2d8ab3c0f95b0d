"""
Tier Matcher - Selects the tiers covering a square footage and classifies them.

Used by the resolver to decide which of the three pricing formats
(flat, legacy bundle, additive bundle) a match should be rendered as.
"""
from typing import Optional

from .models import (
    COMPONENT_PREFIX,
    AdditiveBundle,
    BundleComponent,
    FlatPricing,
    LegacyBundle,
    PricePair,
    PricingTier,
    TierPricing,
    clean_text,
)


def tier_label(tier: PricingTier) -> str:
    """Short label for traces."""
    return tier.service_type or tier.acreage or "Tier"


def find_matching_tiers(sqft: int, tiers: list[PricingTier]) -> tuple[list[PricingTier], list[tuple]]:
    """
    Find every tier whose inclusive range covers sqft.

    Original order is preserved; the first match is the primary tier.
    Returns (matched, trace_steps).
    """
    matched = []
    trace = []

    for tier in tiers:
        hit = tier.covers(sqft)
        trace.append((
            "Tier Check",
            f"{tier_label(tier)}: [{tier.sqft_min}-{tier.sqft_max}]",
            "✓" if hit else "✗",
        ))
        if hit:
            matched.append(tier)

    trace.append(("Match", f"Matched {len(matched)} of {len(tiers)} tiers", None))
    return matched, trace


def _additive_bundle(tier: PricingTier) -> AdditiveBundle:
    return AdditiveBundle(
        components=[
            BundleComponent(
                name=comp.name,
                short_code=comp.short_code,
                first_price=comp.first_price,
                recurring_price=comp.recurring_price,
            )
            for comp in tier.components
        ],
        total=PricePair(first_price=tier.total_first, recurring_price=tier.total_recurring),
    )


def _legacy_component(tier: PricingTier) -> BundleComponent:
    first = clean_text(tier.first_price)
    recurring = clean_text(tier.recurring_price)
    return BundleComponent(
        name=tier.service_type[len(COMPONENT_PREFIX):].strip(),
        first_price=first,
        recurring_price=recurring,
        included=first is None and recurring is None,
    )


def _legacy_bundle(matched: list[PricingTier]) -> Optional[LegacyBundle]:
    bundle_total = next((t for t in matched if t.is_bundle_total), None)
    components = [_legacy_component(t) for t in matched if t.is_legacy_component]

    if bundle_total is None and not components:
        return None

    total = None
    if bundle_total is not None:
        total = PricePair(
            first_price=clean_text(bundle_total.first_price),
            recurring_price=clean_text(bundle_total.recurring_price),
        )
    return LegacyBundle(total=total, components=components)


def classify(matched: list[PricingTier]) -> tuple[TierPricing, str]:
    """
    Classify a non-empty match set into one pricing variant.

    Precedence: additive bundle on the primary tier, then legacy bundle
    rows anywhere in the match set, then flat pricing from the primary tier.
    Returns (pricing, reason).
    """
    if not matched:
        raise ValueError("classify() needs at least one matched tier")

    primary = matched[0]

    if primary.components:
        return _additive_bundle(primary), f"primary tier lists {len(primary.components)} components"

    legacy = _legacy_bundle(matched)
    if legacy is not None:
        return legacy, "Bundle Total / Component: rows in match set"

    return FlatPricing(
        first_price=primary.first_price,
        recurring_price=primary.recurring_price,
        service_type=primary.service_type,
    ), "single price pair"
