"""
Quote API - FastAPI router for square-footage quotes.
"""
from typing import Optional, Union

from fastapi import APIRouter, Depends, HTTPException
from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel, ConfigDict, Field

from ..engine import PricingEngine, PricingTier, InvalidInput, resolve
from ..data.load_catalog import parse_form_tiers
from ..engine.display import render_lines
from ..engine.models import Resolution
from ..engine.resolver import parse_square_footage
from .state import get_engine

router = APIRouter(tags=["quotes"])


# Pydantic models for API
class ComponentRecord(BaseModel):
    """One component of an additive bundle tier."""
    model_config = ConfigDict(populate_by_name=True)

    name: str = ""
    short_code: Optional[str] = Field(default=None, alias="shortCode")
    first_price: Optional[str] = Field(default=None, alias="firstPrice")
    recurring_price: Optional[str] = Field(default=None, alias="recurringPrice")


class TierRecord(BaseModel):
    """A pricing tier in the same camelCase shape as the sheet's Pricing_Data."""
    model_config = ConfigDict(populate_by_name=True)

    sqft_min: int = Field(alias="sqftMin")
    sqft_max: int = Field(alias="sqftMax")
    service_type: str = Field(default="", alias="serviceType")
    first_price: Optional[str] = Field(default="", alias="firstPrice")
    recurring_price: Optional[str] = Field(default="", alias="recurringPrice")
    acreage: Optional[str] = None
    components: Optional[list[ComponentRecord]] = None
    total_first: Optional[str] = Field(default=None, alias="totalFirst")
    total_recurring: Optional[str] = Field(default=None, alias="totalRecurring")


class QuoteRequest(BaseModel):
    """Request model for an ad-hoc quote."""
    sqft: Optional[Union[int, float, str]] = None
    tiers: list[TierRecord] = []


class FormQuoteRequest(BaseModel):
    """Quote against tiers submitted as flattened profile-form fields."""
    model_config = ConfigDict(populate_by_name=True)

    sqft: Optional[Union[int, float, str]] = None
    form: dict[str, Optional[Union[str, int, float]]] = {}
    service_index: int = Field(default=0, alias="serviceIndex")


class ServiceSummary(BaseModel):
    service_id: str
    profile_id: str
    name: str
    service_type: str
    frequency: str
    billing_frequency: str
    tier_count: int


def coerce_sqft_input(value):
    """Free text goes through the page's integer parsing; numbers pass through."""
    if isinstance(value, str):
        return parse_square_footage(value)
    return value


def quote_response(result: Resolution) -> dict:
    payload = jsonable_encoder(result)
    if hasattr(result, "kind"):
        payload["kind"] = result.kind
    payload["display"] = render_lines(result)
    return payload


def engine_dependency() -> PricingEngine:
    try:
        return get_engine()
    except (FileNotFoundError, ValueError) as e:
        raise HTTPException(status_code=503, detail=str(e))


# Endpoints

@router.post("/quote")
async def quote(req: QuoteRequest):
    """Resolve a quote against tiers supplied in the request."""
    try:
        tiers = [PricingTier.from_record(t.model_dump(by_alias=True)) for t in req.tiers]
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    try:
        result = resolve(coerce_sqft_input(req.sqft), tiers)
    except InvalidInput as e:
        raise HTTPException(status_code=422, detail=str(e))
    return quote_response(result)


@router.get("/services", response_model=list[ServiceSummary])
async def list_services(profile_id: Optional[str] = None, engine: PricingEngine = Depends(engine_dependency)):
    """List catalog services in sheet order."""
    return [
        ServiceSummary(
            service_id=s.service_id,
            profile_id=s.profile_id,
            name=s.name,
            service_type=s.service_type,
            frequency=s.frequency,
            billing_frequency=s.billing_frequency,
            tier_count=len(s.tiers),
        )
        for s in engine.list_services(profile_id)
    ]


@router.get("/services/{service_id}/quote")
async def quote_service(service_id: str, sqft: Optional[str] = None, engine: PricingEngine = Depends(engine_dependency)):
    """Quote a catalog service by square footage."""
    try:
        result = engine.quote(service_id, coerce_sqft_input(sqft))
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Service '{service_id}' not found")
    except InvalidInput as e:
        raise HTTPException(status_code=422, detail=str(e))
    return quote_response(result)


@router.post("/form/quote")
async def quote_form(req: FormQuoteRequest):
    """Resolve a quote against one service of a submitted profile form."""
    tiers = parse_form_tiers(req.form).get(req.service_index, [])
    try:
        result = resolve(coerce_sqft_input(req.sqft), tiers)
    except InvalidInput as e:
        raise HTTPException(status_code=422, detail=str(e))
    return quote_response(result)
