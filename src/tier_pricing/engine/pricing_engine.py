"""
Pricing Engine - Quotes catalog services by square footage.

Loads the Services sheet export once and delegates each quote to the
pure resolver. Holds no per-request state.
"""
from typing import Optional

from ..config.settings import get_settings, Settings
from .models import PricingTier, Resolution, ServiceRecord
from .resolver import resolve


class PricingEngine:
    """
    Quotes services from the catalog.

    Resolution for a quote:
    1. Look up the service by id (KeyError if unknown)
    2. Hand its tiers, in sheet order, to resolve()
    """

    def __init__(self, settings: Optional[Settings] = None):
        """Initialize engine with the service catalog."""
        self.settings = settings or get_settings()

        # load_catalog imports engine.models
        from ..data.load_catalog import load_services

        services_csv = self.settings.services_csv
        if not services_csv.exists():
            raise FileNotFoundError(
                f"Services sheet export not found at {services_csv}. "
                "Export the Services tab to CSV first."
            )

        services, self.load_report = load_services(self.settings, verbose=False)
        if self.load_report["status"] != "success":
            raise ValueError(
                f"Could not load services: {'; '.join(self.load_report['errors'])}"
            )

        self.services: dict[str, ServiceRecord] = {s.service_id: s for s in services}

    def reload_data(self):
        """Reload the service catalog from disk."""
        self.__init__(self.settings)

    def list_services(self, profile_id: Optional[str] = None) -> list[ServiceRecord]:
        """List services in sheet order, optionally for one profile."""
        services = list(self.services.values())
        if profile_id is not None:
            services = [s for s in services if s.profile_id == str(profile_id).strip()]
        return services

    def get_service(self, service_id: str) -> ServiceRecord:
        service_id = str(service_id).strip()
        if service_id not in self.services:
            raise KeyError(f"Service '{service_id}' not found")
        return self.services[service_id]

    def get_tiers(self, service_id: str) -> list[PricingTier]:
        return self.get_service(service_id).tiers

    def quote(self, service_id: str, sqft) -> Resolution:
        """
        Quote a catalog service.

        Raises:
            KeyError: unknown service id
            InvalidInput: sqft is not a positive integer
        """
        return resolve(sqft, self.get_tiers(service_id))
