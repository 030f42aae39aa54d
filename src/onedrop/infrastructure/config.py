"""Runtime settings.

Read from environment variables or a ``.env`` file via pydantic-settings.
Variable names are the upper-case field names (``STRIPE_SECRET_KEY``...).
"""

from __future__ import annotations

from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# When installed in editable mode the project root is the repo root.
_DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"


class Settings(BaseSettings):

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- Payment provider ---
    stripe_secret_key: str = ""
    stripe_webhook_secret: str = ""
    webhook_tolerance_seconds: int = 300
    payment_timeout_seconds: float = 10.0

    # --- Fulfillment provider ---
    printful_api_key: str = ""
    printful_store_id: str | None = None
    printful_base_url: str = "https://api.printful.com"
    printful_auto_confirm: bool = False
    print_placement: str = "front"
    fulfillment_timeout_seconds: float = 15.0

    # --- Checkout pricing (minor units) ---
    currency: str = "usd"
    shipping_fee: int = 0
    free_shipping_threshold: int = 0
    allowed_countries: list[str] = ["US", "CA"]

    # --- Storage ---
    data_dir: Path = _DEFAULT_DATA_DIR
    catalog_path: Path | None = None

    # --- HTTP ---
    # Storefront origins allowed to POST /checkout from the browser.
    cors_origins: list[str] = []

    # --- Logging ---
    log_level: str = "INFO"

    @field_validator("shipping_fee", "free_shipping_threshold")
    @classmethod
    def _non_negative(cls, value: int) -> int:
        if value < 0:
            raise ValueError("must not be negative")
        return value

    @field_validator("allowed_countries")
    @classmethod
    def _upper_countries(cls, value: list[str]) -> list[str]:
        countries = [c.strip().upper() for c in value if c.strip()]
        if not countries:
            raise ValueError("at least one shipping country is required")
        return countries

    @field_validator("cors_origins")
    @classmethod
    def _strip_origins(cls, value: list[str]) -> list[str]:
        return [o.strip().rstrip("/") for o in value if o.strip()]

    @property
    def resolved_catalog_path(self) -> Path:
        return self.catalog_path or self.data_dir / "products.json"
