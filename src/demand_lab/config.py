"""Configuration settings for Demand Lab."""

from pathlib import Path
from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Crawler settings
    max_pages: int = Field(default=12, description="Maximum pages to crawl per run")
    max_discovered_links: int = Field(
        default=8,
        description="Maximum homepage links to follow",
    )
    request_timeout: float = Field(default=10.0, description="Page fetch timeout in seconds")
    concurrent_requests: int = Field(default=4, description="Max concurrent page fetches")
    user_agent: str = Field(
        default="DemandLab/1.0",
        description="User agent string identifying the crawler",
    )
    min_discovered_page_bytes: int = Field(
        default=500,
        description="Discovered pages shorter than this are treated as soft 404s",
    )
    min_probed_page_bytes: int = Field(
        default=1000,
        description="Probed pages shorter than this are treated as soft 404s",
    )

    # GA4 analytics settings
    ga4_property_id: str | None = Field(default=None, description="Default GA4 property ID")
    ga4_access_token: str | None = Field(default=None, description="OAuth access token for GA4")
    ga4_workspace_properties: dict[str, str] = Field(
        default_factory=dict,
        description="Workspace ID to GA4 property ID mapping",
    )
    ga4_lookback_days: int = Field(default=30, description="Analytics lookback window in days")
    ga4_conversion_metric: str = Field(
        default="conversions",
        description="GA4 metric counted as a conversion",
    )
    analytics_timeout: float = Field(default=30.0, description="Analytics request timeout in seconds")

    # Storage settings
    output_dir: Path = Field(default=Path("./reports"), description="Output directory for reports")

    model_config = {"env_prefix": "DEMAND_LAB_", "env_file": ".env"}


settings = Settings()
