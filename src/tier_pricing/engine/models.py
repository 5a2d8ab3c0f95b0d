"""
Data models for the tier pricing engine.

Uses dataclasses for structured, type-safe data representation.
Prices are opaque display strings ("$65.00"); nothing here does arithmetic on them.
"""
import math
from dataclasses import dataclass, field, asdict
from typing import Optional, Union

DisplayPrice = str

BUNDLE_TOTAL_MARKER = "Bundle Total"
COMPONENT_PREFIX = "Component:"


def clean_text(value) -> Optional[str]:
    """Normalize an optional display value: blank or missing becomes None."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def coerce_sqft(value) -> int:
    """
    Coerce a sqft bound the way the profile form does (invalid -> 0).

    Raises ValueError for an infinite bound (JSON ``Infinity`` or ``1e999``).
    """
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if math.isinf(number):
        raise ValueError(f"sqft bound {value!r} is not finite")
    if math.isnan(number):
        return 0
    return int(number)


@dataclass
class TraceStep:
    """A single step in the tier resolution trace."""
    step: str
    description: str
    value: Optional[str] = None


@dataclass
class Component:
    """One line item inside an additive bundle tier."""
    name: str
    short_code: Optional[str] = None
    first_price: Optional[DisplayPrice] = None
    recurring_price: Optional[DisplayPrice] = None

    @classmethod
    def from_record(cls, record: dict) -> 'Component':
        """Create from a camelCase record. A missing name becomes ""."""
        return cls(
            name=str(record.get('name') or '').strip(),
            short_code=clean_text(record.get('shortCode')),
            first_price=clean_text(record.get('firstPrice')),
            recurring_price=clean_text(record.get('recurringPrice')),
        )


@dataclass
class PricingTier:
    """One row of priced service data, bounded by an inclusive sqft range."""
    sqft_min: int
    sqft_max: int
    service_type: str = ""
    first_price: DisplayPrice = ""
    recurring_price: DisplayPrice = ""
    acreage: Optional[str] = None
    components: list[Component] = field(default_factory=list)
    total_first: Optional[DisplayPrice] = None
    total_recurring: Optional[DisplayPrice] = None

    def __post_init__(self):
        if self.sqft_min > self.sqft_max:
            raise ValueError(
                f"sqftMin ({self.sqft_min}) must not exceed sqftMax ({self.sqft_max})"
            )

    def covers(self, sqft: int) -> bool:
        return self.sqft_min <= sqft <= self.sqft_max

    @property
    def is_bundle_total(self) -> bool:
        return self.service_type.strip() == BUNDLE_TOTAL_MARKER

    @property
    def is_legacy_component(self) -> bool:
        return self.service_type.startswith(COMPONENT_PREFIX)

    @classmethod
    def from_record(cls, record: dict) -> 'PricingTier':
        """
        Create a tier from the record shape stored in the Pricing_Data column.

        Raises ValueError if the bounds are inverted.
        """
        components = []
        raw_components = record.get('components')
        if isinstance(raw_components, list):
            # unnamed components still count toward the additive format
            components = [Component.from_record(raw) for raw in raw_components if isinstance(raw, dict)]

        return cls(
            sqft_min=coerce_sqft(record.get('sqftMin')),
            sqft_max=coerce_sqft(record.get('sqftMax')),
            service_type=str(record.get('serviceType') or ''),
            first_price=str(record.get('firstPrice') or ''),
            recurring_price=str(record.get('recurringPrice') or ''),
            acreage=clean_text(record.get('acreage')),
            components=components,
            total_first=clean_text(record.get('totalFirst')),
            total_recurring=clean_text(record.get('totalRecurring')),
        )


@dataclass
class PricePair:
    """First-service and recurring aggregate prices."""
    first_price: Optional[DisplayPrice] = None
    recurring_price: Optional[DisplayPrice] = None


@dataclass
class BundleComponent:
    """A priced line of a bundle breakdown."""
    name: str
    short_code: Optional[str] = None
    first_price: Optional[DisplayPrice] = None
    recurring_price: Optional[DisplayPrice] = None
    included: bool = False  # legacy bundles only: no price of its own


@dataclass
class FlatPricing:
    first_price: DisplayPrice
    recurring_price: DisplayPrice
    service_type: str
    kind: str = field(default="flat", init=False)


@dataclass
class LegacyBundle:
    """Bundle encoded as sibling "Bundle Total" / "Component: X" rows."""
    total: Optional[PricePair]
    components: list[BundleComponent] = field(default_factory=list)
    kind: str = field(default="legacy_bundle", init=False)


@dataclass
class AdditiveBundle:
    """Bundle whose components are listed on the tier itself."""
    components: list[BundleComponent]
    total: PricePair
    kind: str = field(default="additive_bundle", init=False)


TierPricing = Union[FlatPricing, LegacyBundle, AdditiveBundle]


@dataclass
class ValidityRange:
    """Sqft range a breakdown is valid for."""
    sqft_min: int
    sqft_max: int
    acreage: Optional[str] = None


def _trace_text(trace: list[TraceStep]) -> str:
    lines = []
    for t in trace:
        if t.value:
            lines.append(f"→ {t.step}: {t.description} = {t.value}")
        else:
            lines.append(f"→ {t.step}: {t.description}")
    return "\n".join(lines)


@dataclass
class PriceBreakdown:
    """Resolved pricing for a square footage."""
    sqft: int
    pricing: TierPricing
    valid_range: ValidityRange
    trace: list[TraceStep] = field(default_factory=list)
    status: str = field(default="matched", init=False)

    @property
    def kind(self) -> str:
        return self.pricing.kind

    def add_trace(self, step: str, description: str, value: str = None):
        """Add a step to the resolution trace."""
        self.trace.append(TraceStep(step=step, description=description, value=value))

    def get_trace_text(self) -> str:
        """Get human-readable trace as formatted text."""
        return _trace_text(self.trace)

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class NoMatch:
    """No tier covers the requested square footage."""
    sqft: int
    trace: list[TraceStep] = field(default_factory=list)
    status: str = field(default="no_match", init=False)

    def add_trace(self, step: str, description: str, value: str = None):
        """Add a step to the resolution trace."""
        self.trace.append(TraceStep(step=step, description=description, value=value))

    def get_trace_text(self) -> str:
        """Get human-readable trace as formatted text."""
        return _trace_text(self.trace)

    def to_dict(self) -> dict:
        return asdict(self)


Resolution = Union[PriceBreakdown, NoMatch]


@dataclass
class ServiceRecord:
    """A priced service from the Services sheet."""
    service_id: str
    profile_id: str
    name: str
    service_type: str = ""
    frequency: str = ""
    billing_frequency: str = ""
    tiers: list[PricingTier] = field(default_factory=list)
