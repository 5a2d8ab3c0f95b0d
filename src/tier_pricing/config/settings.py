"""
Centralized settings and path configuration for tier pricing.
"""
import os
from pathlib import Path
from dataclasses import dataclass
from typing import Optional

SERVICES_CSV_ENV = 'TIER_PRICING_SERVICES_CSV'


def get_project_root() -> Path:
    """Get the project root directory (where pyproject.toml lives)."""
    current = Path(__file__).resolve()
    for parent in current.parents:
        if (parent / 'pyproject.toml').exists():
            return parent
    # Fallback to 3 levels up from this file
    return Path(__file__).resolve().parent.parent.parent.parent


@dataclass
class Settings:
    """Application settings with sensible defaults."""

    project_root: Path

    # Services sheet export (one row per service, tiers in Pricing_Data)
    services_csv: Path

    # Output of the catalog loader
    load_report: Path

    api_host: str = '0.0.0.0'
    api_port: int = 8000

    @classmethod
    def load(cls, project_root: Optional[Path] = None) -> 'Settings':
        """Load settings from the project structure and environment."""
        root = project_root or get_project_root()

        services_csv = root / 'data' / 'services.csv'
        if os.environ.get(SERVICES_CSV_ENV):
            services_csv = Path(os.environ[SERVICES_CSV_ENV])

        return cls(
            project_root=root,
            services_csv=services_csv,
            load_report=root / 'data' / 'outputs' / 'load_report.json',
            api_host=os.environ.get('TIER_PRICING_API_HOST', '0.0.0.0'),
            api_port=int(os.environ.get('TIER_PRICING_API_PORT', '8000')),
        )


# Default settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings
