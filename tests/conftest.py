"""Shared fixtures for Demand Lab tests."""

import pytest

from demand_lab.config import settings
from demand_lab.crawler import classify_page_type, extract_title, page_has_cta, page_has_form
from demand_lab.models import (
    AdScentSignals,
    ConfidenceLevel,
    CrawledPage,
    CtaSignals,
    DataConfidence,
    DemandSignals,
    LandingPageSignals,
    TrackingSignals,
)

BASE_URL = "https://example.com"


@pytest.fixture(autouse=True)
def no_ga4_config(monkeypatch):
    """Keep tests independent of any GA4 credentials in the environment."""
    monkeypatch.setattr(settings, "ga4_property_id", None)
    monkeypatch.setattr(settings, "ga4_access_token", None)
    monkeypatch.setattr(settings, "ga4_workspace_properties", {})


@pytest.fixture
def make_page():
    """Factory for classified CrawledPage objects."""

    def _make(path: str, html: str, base_url: str = BASE_URL) -> CrawledPage:
        return CrawledPage(
            url=base_url if path == "/" else f"{base_url}{path}",
            path=path,
            html=html,
            title=extract_title(html),
            page_type=classify_page_type(path),
            has_form=page_has_form(html),
            has_cta=page_has_cta(html),
        )

    return _make


@pytest.fixture
def make_signals():
    """Factory for DemandSignals with empty bundles and overridable flags."""

    def _make(
        landing_pages: LandingPageSignals | None = None,
        ctas: CtaSignals | None = None,
        tracking: TrackingSignals | None = None,
        **flags,
    ) -> DemandSignals:
        return DemandSignals(
            landing_pages=landing_pages or LandingPageSignals(),
            ctas=ctas or CtaSignals(),
            tracking=tracking or TrackingSignals(),
            ad_scent=AdScentSignals(),
            **flags,
        )

    return _make


@pytest.fixture
def medium_confidence() -> DataConfidence:
    return DataConfidence(score=55, level=ConfidenceLevel.MEDIUM, reason="test")


@pytest.fixture
def low_confidence() -> DataConfidence:
    return DataConfidence(score=20, level=ConfidenceLevel.LOW, reason="test")
