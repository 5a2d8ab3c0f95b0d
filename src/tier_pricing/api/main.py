from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tier_pricing import __version__
from tier_pricing.config.settings import get_settings
from tier_pricing.api.quote_api import router as quote_router
from tier_pricing.api.state import get_engine

app = FastAPI(
    title="Tier Pricing API",
    description="Square-footage pricing for service profiles",
    version=__version__
)

# Enable CORS for the static profile page
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(quote_router)


@app.get("/")
async def root():
    return {"status": "online", "message": "Tier Pricing API Active"}


@app.get("/system/status")
async def get_status():
    settings = get_settings()
    try:
        engine = get_engine()
    except (FileNotFoundError, ValueError) as e:
        return {
            "engine_active": False,
            "error": str(e),
            "services_csv": str(settings.services_csv),
        }
    return {
        "engine_active": True,
        "services_csv": str(settings.services_csv),
        "services_count": len(engine.services),
        "load_warnings": len(engine.load_report["warnings"]),
        "catalog_last_load": engine.load_report["timestamp"],
    }
