import os
import sys
from pathlib import Path

import pytest

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from tier_pricing.config.settings import Settings
from tier_pricing.engine import PricingEngine, PricingTier

FIXTURES = Path(__file__).parent / 'fixtures'


def tier(sqft_min, sqft_max, service_type="", first="", recurring="", **extra):
    """Build a tier from the camelCase record shape used in the sheet."""
    record = {
        "sqftMin": sqft_min,
        "sqftMax": sqft_max,
        "serviceType": service_type,
        "firstPrice": first,
        "recurringPrice": recurring,
    }
    record.update(extra)
    return PricingTier.from_record(record)


@pytest.fixture
def settings(tmp_path):
    return Settings(
        project_root=tmp_path,
        services_csv=FIXTURES / 'services.csv',
        load_report=tmp_path / 'outputs' / 'load_report.json',
    )


@pytest.fixture
def engine(settings):
    return PricingEngine(settings)


@pytest.fixture
def legacy_tiers():
    return [
        tier(0, 2500, "Bundle Total", recurring="$139.00"),
        tier(0, 2500, "Component: Barrier360"),
        tier(0, 2500, "Component: Mosquito", recurring="$65.00"),
        tier(0, 2500, "Component: Termite", recurring="$35.00"),
        tier(2501, 100000, "Bundle Total", recurring="$159.00"),
        tier(2501, 100000, "Component: Barrier360"),
        tier(2501, 100000, "Component: Mosquito", recurring="$70.00"),
        tier(2501, 100000, "Component: Termite", recurring="$40.00"),
    ]


@pytest.fixture
def additive_tier():
    return tier(
        0, 3000, "Home Shield",
        acreage="Up to 3,000 sq ft",
        components=[
            {"name": "Mosquito", "recurringPrice": "$65"},
            {"name": "Termite", "recurringPrice": "$35"},
        ],
        totalRecurring="$139",
    )
