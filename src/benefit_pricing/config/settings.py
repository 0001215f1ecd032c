"""
Centralized settings and path configuration for benefit pricing.
"""
import logging
import os
from pathlib import Path
from dataclasses import dataclass
from typing import Optional


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _env(key: str, default: Optional[str] = None) -> Optional[str]:
    value = os.getenv(key)
    return value if value is not None and value != "" else default


def get_project_root() -> Path:
    """Get the project root directory (where pyproject.toml lives)."""
    current = Path(__file__).resolve()
    for parent in current.parents:
        if (parent / 'pyproject.toml').exists():
            return parent
    # Fallback to 3 levels up from this file
    return Path(__file__).resolve().parent.parent.parent.parent


def get_package_data_dir() -> Path:
    """Directory holding the bundled rate tables and catalog."""
    return Path(__file__).resolve().parent.parent / 'data'


@dataclass
class Settings:
    """Application settings with sensible defaults."""

    # Project paths
    project_root: Path
    data_dir: Path

    # Input files
    products_csv: Path
    rates_csv: Path

    # Output files
    product_catalog: Path
    build_report: Path

    log_level: str = "INFO"

    # API server
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    @classmethod
    def load(cls, project_root: Optional[Path] = None, data_dir: Optional[Path] = None) -> 'Settings':
        """
        Load settings from the project structure.

        Environment overrides:
          BENEFIT_PRICING_DATA_DIR   directory with products.csv / rates.csv
          BENEFIT_PRICING_CATALOG    path of the compiled JSON catalog
          BENEFIT_PRICING_LOG_LEVEL  logging level name (default: INFO)
          BENEFIT_PRICING_API_HOST   host for scripts/run_api.py (default: 0.0.0.0)
          BENEFIT_PRICING_API_PORT   port for scripts/run_api.py (default: 8000)
        """
        root = project_root or get_project_root()
        data = data_dir or Path(_env("BENEFIT_PRICING_DATA_DIR", str(get_package_data_dir())))
        catalog = _env("BENEFIT_PRICING_CATALOG")

        return cls(
            project_root=root,
            data_dir=data,
            products_csv=data / 'products.csv',
            rates_csv=data / 'rates.csv',
            product_catalog=Path(catalog) if catalog else data / 'products_catalog.json',
            build_report=data / 'outputs' / 'build_report.json',
            log_level=(_env("BENEFIT_PRICING_LOG_LEVEL", "INFO") or "INFO").upper(),
            api_host=_env("BENEFIT_PRICING_API_HOST", "0.0.0.0"),
            api_port=int(_env("BENEFIT_PRICING_API_PORT", "8000")),
        )


def configure_logging(level: Optional[str] = None):
    """Configure root logging for scripts and the API process."""
    level = level or get_settings().log_level
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)


# Default settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings


def reset_settings():
    """Drop the cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None
