"""
Endpoint tests for the quote API.

Uses FastAPI's TestClient; catalog endpoints run against the fixture sheet.
"""
import pytest
from fastapi.testclient import TestClient

from tier_pricing.api import state
from tier_pricing.api.main import app

client = TestClient(app)


@pytest.fixture
def catalog(engine, monkeypatch):
    monkeypatch.setattr(state, "_engine", engine)
    yield engine
    state.reset_engine()


LEGACY = [
    {"sqftMin": 0, "sqftMax": 2500, "serviceType": "Bundle Total", "recurringPrice": "$139.00"},
    {"sqftMin": 0, "sqftMax": 2500, "serviceType": "Component: Barrier360", "recurringPrice": ""},
    {"sqftMin": 0, "sqftMax": 2500, "serviceType": "Component: Mosquito", "recurringPrice": "$65.00"},
]


def test_root():
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["status"] == "online"


def test_quote_legacy_bundle():
    response = client.post("/quote", json={"sqft": 2000, "tiers": LEGACY})

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "matched"
    assert data["kind"] == "legacy_bundle"
    assert data["pricing"]["total"]["recurring_price"] == "$139.00"
    assert data["pricing"]["components"][0] == {
        "name": "Barrier360",
        "short_code": None,
        "first_price": None,
        "recurring_price": None,
        "included": True,
    }
    assert "Barrier360  Included" in data["display"]


def test_quote_flat_with_text_sqft():
    tiers = [{"sqftMin": 0, "sqftMax": 2500, "firstPrice": "$125.00",
              "recurringPrice": "$120.00", "serviceType": "Quarterly GPC"}]
    response = client.post("/quote", json={"sqft": "1000 sq ft", "tiers": tiers})

    assert response.status_code == 200
    data = response.json()
    assert data["kind"] == "flat"
    assert data["valid_range"] == {"sqft_min": 0, "sqft_max": 2500, "acreage": None}
    assert data["display"][-1] == "Valid for 0 - 2,500 sq ft"


def test_quote_additive_components():
    tiers = [{
        "sqftMin": 0, "sqftMax": 3000, "acreage": "Small lot",
        "components": [{"name": "Mosquito", "recurringPrice": "$65"},
                       {"name": "Termite", "shortCode": "TRM", "recurringPrice": "$35"}],
        "totalRecurring": "$139",
    }]
    data = client.post("/quote", json={"sqft": 100, "tiers": tiers}).json()
    assert data["kind"] == "additive_bundle"
    assert [c["name"] for c in data["pricing"]["components"]] == ["Mosquito", "Termite"]
    assert data["pricing"]["total"]["recurring_price"] == "$139"
    assert data["valid_range"]["acreage"] == "Small lot"


def test_quote_no_match():
    response = client.post("/quote", json={"sqft": 9000, "tiers": LEGACY})
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "no_match"
    assert data["sqft"] == 9000
    assert data["display"][0] == "No pricing available for 9,000 sq ft"


@pytest.mark.parametrize("sqft", [0, -10, "abc", None])
def test_quote_invalid_sqft(sqft):
    response = client.post("/quote", json={"sqft": sqft, "tiers": LEGACY})
    assert response.status_code == 422


def test_quote_inverted_tier():
    response = client.post("/quote", json={"sqft": 100, "tiers": [{"sqftMin": 50, "sqftMax": 10}]})
    assert response.status_code == 422


def test_list_services(catalog):
    response = client.get("/services", params={"profile_id": "PRF-1001"})
    assert response.status_code == 200
    data = response.json()
    assert [s["service_id"] for s in data] == ["PRF-1001:0", "PRF-1001:1", "PRF-1001:2"]
    assert data[2]["tier_count"] == 8


def test_quote_service(catalog):
    response = client.get("/services/PRF-1001:1/quote", params={"sqft": "15000"})
    assert response.status_code == 200
    data = response.json()
    assert data["pricing"]["first_price"] == "$120.00"
    # acreage label is only shown for additive bundles
    assert data["valid_range"]["acreage"] is None


def test_quote_service_unknown(catalog):
    response = client.get("/services/NOPE:0/quote", params={"sqft": "1000"})
    assert response.status_code == 404


def test_quote_service_invalid_sqft(catalog):
    response = client.get("/services/PRF-1001:0/quote", params={"sqft": "0"})
    assert response.status_code == 422


def test_system_status(catalog):
    data = client.get("/system/status").json()
    assert data["engine_active"] is True
    assert data["services_count"] == 7
    assert data["load_warnings"] == 3


def test_quote_form_additive_components():
    form = {
        "services[0][pricingTiers][0][sqftMin]": "0",
        "services[0][pricingTiers][0][sqftMax]": "3000",
        "services[0][pricingTiers][0][acreage]": "Small lot",
        "services[0][pricingTiers][0][totalRecurring]": "$139",
        "services[0][pricingTiers][0][components][1][name]": "Termite",
        "services[0][pricingTiers][0][components][1][recurringPrice]": "$35",
        "services[0][pricingTiers][0][components][0][name]": "Mosquito",
        "services[0][pricingTiers][0][components][0][recurringPrice]": "$65",
    }
    response = client.post("/form/quote", json={"sqft": "2000 sq ft", "form": form})

    assert response.status_code == 200
    data = response.json()
    assert data["kind"] == "additive_bundle"
    assert [c["name"] for c in data["pricing"]["components"]] == ["Mosquito", "Termite"]
    assert data["valid_range"]["acreage"] == "Small lot"


def test_quote_form_picks_service_index():
    form = {
        "services[0][pricingTiers][0][sqftMin]": "0",
        "services[0][pricingTiers][0][sqftMax]": "2500",
        "services[0][pricingTiers][0][firstPrice]": "$100.00",
        "services[1][pricingTiers][0][sqftMin]": "0",
        "services[1][pricingTiers][0][sqftMax]": "2500",
        "services[1][pricingTiers][0][firstPrice]": "$200.00",
    }
    data = client.post("/form/quote", json={"sqft": 1000, "form": form, "serviceIndex": 1}).json()
    assert data["pricing"]["first_price"] == "$200.00"

    data = client.post("/form/quote", json={"sqft": 1000, "form": form, "serviceIndex": 5}).json()
    assert data["status"] == "no_match"


def test_quote_form_invalid_sqft():
    response = client.post("/form/quote", json={"sqft": "abc", "form": {}})
    assert response.status_code == 422
