"""
Plain-text rendering of resolver output.

Components and tiers are rendered in the order given; nothing is re-sorted.
"""
from .models import (
    AdditiveBundle,
    BundleComponent,
    FlatPricing,
    LegacyBundle,
    NoMatch,
    PriceBreakdown,
    Resolution,
    ValidityRange,
)

INCLUDED_LABEL = "Included"
CONTACT_OFFICE = "Please contact office for custom pricing"


def format_sqft(value: int) -> str:
    return f"{value:,}"


def range_label(valid_range: ValidityRange) -> str:
    label = f"Valid for {format_sqft(valid_range.sqft_min)} - {format_sqft(valid_range.sqft_max)} sq ft"
    if valid_range.acreage:
        label += f" ({valid_range.acreage})"
    return label


def no_match_lines(result: NoMatch) -> list[str]:
    return [
        f"No pricing available for {format_sqft(result.sqft)} sq ft",
        CONTACT_OFFICE,
    ]


def _price_parts(first, recurring) -> list[str]:
    parts = []
    if first:
        parts.append(f"First: {first}")
    if recurring:
        parts.append(f"Recurring: {recurring}")
    return parts


def _component_line(comp: BundleComponent) -> str:
    name = f"{comp.name} ({comp.short_code})" if comp.short_code else comp.name
    if comp.included:
        return f"{name}  {INCLUDED_LABEL}"
    parts = _price_parts(comp.first_price, comp.recurring_price)
    return f"{name}  {'  '.join(parts)}".rstrip()


def breakdown_lines(result: PriceBreakdown) -> list[str]:
    """Render a breakdown to display lines, range label last."""
    pricing = result.pricing
    lines = []

    if isinstance(pricing, AdditiveBundle):
        for index, comp in enumerate(pricing.components):
            if index:
                lines.append("+")
            lines.append(_component_line(comp))
        lines.append("=")
        total = _price_parts(pricing.total.first_price, pricing.total.recurring_price)
        lines.append(f"Total Bundle Price  {'  '.join(total)}".rstrip())

    elif isinstance(pricing, LegacyBundle):
        if pricing.total is not None:
            total = _price_parts(pricing.total.first_price, pricing.total.recurring_price)
            lines.append(f"Total Bundle Price  {'  '.join(total)}".rstrip())
        if pricing.components:
            lines.append("Includes:")
            lines.extend(_component_line(comp) for comp in pricing.components)

    elif isinstance(pricing, FlatPricing):
        lines.append(f"First Service: {pricing.first_price}")
        lines.append(f"Recurring: {pricing.recurring_price}")
        lines.append(f"Service Type: {pricing.service_type}")

    else:
        raise TypeError(f"Unknown pricing variant: {type(pricing).__name__}")

    lines.append(range_label(result.valid_range))
    return lines


def render_lines(result: Resolution) -> list[str]:
    if isinstance(result, NoMatch):
        return no_match_lines(result)
    return breakdown_lines(result)
