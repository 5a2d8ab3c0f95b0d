"""
Shared engine instance for the API.
"""
from typing import Optional

from ..engine import PricingEngine

_engine: Optional[PricingEngine] = None


def get_engine() -> PricingEngine:
    """Get (and lazily create) the catalog engine."""
    global _engine
    if _engine is None:
        _engine = PricingEngine()
    return _engine


def reset_engine():
    global _engine
    _engine = None
