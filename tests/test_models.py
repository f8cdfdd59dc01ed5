"""Tests for data models."""

from dataclasses import FrozenInstanceError

import pytest

from demand_lab.models import (
    AnalyticsSnapshot,
    CrawledPage,
    CtaSignals,
    Dimension,
    DimensionKey,
    DimensionStatus,
    MaturityStage,
    PageType,
    ScoringOutput,
)


class TestCrawledPage:
    """Test cases for CrawledPage model."""

    def test_default_values(self):
        """Test default values are set correctly."""
        page = CrawledPage(url="https://example.com/about", path="/about", html="<html></html>")

        assert page.title is None
        assert page.page_type == PageType.OTHER
        assert page.has_form is False
        assert page.has_cta is False

    @pytest.mark.parametrize(
        "page_type,expected",
        [
            (PageType.HOMEPAGE, True),
            (PageType.LANDING, True),
            (PageType.PRICING, False),
            (PageType.CONTACT, False),
            (PageType.OTHER, False),
        ],
    )
    def test_is_landing_page(self, page_type, expected):
        """Homepages and landing pages count as landing pages."""
        page = CrawledPage(url="https://example.com/x", path="/x", html="", page_type=page_type)
        assert page.is_landing_page is expected

    def test_pages_are_immutable(self):
        """Crawled pages cannot be modified after creation."""
        page = CrawledPage(url="https://example.com", path="/", html="")
        with pytest.raises(FrozenInstanceError):
            page.html = "<p>changed</p>"


class TestSignalDefaults:
    """Test cases for signal bundle defaults."""

    def test_cta_signals_defaults(self):
        signals = CtaSignals()
        assert signals.cta_count == 0
        assert signals.primary_cta is None
        assert signals.cta_types == []
        assert signals.cta_clarity_score == 50

    def test_snapshot_defaults(self):
        snapshot = AnalyticsSnapshot()
        assert snapshot.conversion_rate is None
        assert snapshot.paid_share is None
        assert snapshot.session_volume is None
        assert snapshot.total_conversions == 0


class TestScoringOutput:
    """Test cases for ScoringOutput model."""

    def _output(self) -> ScoringOutput:
        dims = [
            Dimension(key=key, label=key.value, score=50, status=DimensionStatus.MODERATE, summary="")
            for key in (DimensionKey.CHANNEL_MIX, DimensionKey.FUNNEL)
        ]
        return ScoringOutput(dimensions=dims, overall_score=50, maturity_stage=MaturityStage.EMERGING)

    def test_dimension_lookup(self):
        """Test looking up a dimension by key."""
        assert self._output().dimension(DimensionKey.FUNNEL).key == DimensionKey.FUNNEL

    def test_missing_dimension_raises(self):
        """Test that an absent dimension raises KeyError."""
        with pytest.raises(KeyError):
            self._output().dimension(DimensionKey.CREATIVE)

    def test_dimension_key_values(self):
        """Dimension keys serialize to their camelCase identifiers."""
        assert [k.value for k in DimensionKey] == [
            "channelMix",
            "targeting",
            "creative",
            "funnel",
            "measurement",
        ]
