"""Engine subpackage - tier matching, classification and resolution."""
from .pricing_engine import PricingEngine
from .models import PricingTier, Component, PriceBreakdown, NoMatch
from .resolver import resolve, InvalidInput

__all__ = ['PricingEngine', 'PricingTier', 'Component', 'PriceBreakdown', 'NoMatch', 'resolve', 'InvalidInput']
