"""Tests for company type normalization and derived detection flags."""

import pytest

from demand_lab.models import (
    AdScentSignals,
    AnalyticsSnapshot,
    CompanyType,
    CtaSignals,
    LandingPageSignals,
    TrackingSignals,
    UtmUsageLevel,
)
from demand_lab.signals import (
    build_channel_insights,
    build_demand_signals,
    compute_utm_usage_level,
    normalize_company_type,
)


class TestNormalizeCompanyType:
    """Test cases for normalize_company_type."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            (None, CompanyType.UNKNOWN),
            ("", CompanyType.UNKNOWN),
            ("   ", CompanyType.UNKNOWN),
            ("SaaS", CompanyType.SAAS),
            ("B2B software company", CompanyType.SAAS),
            ("ecommerce", CompanyType.ECOMMERCE),
            ("Online shop", CompanyType.ECOMMERCE),
            ("retail", CompanyType.ECOMMERCE),
            ("local plumber", CompanyType.LOCAL_SERVICE),
            ("local_service", CompanyType.LOCAL_SERVICE),
            ("B2B", CompanyType.B2B_SERVICES),
            ("services", CompanyType.B2B_SERVICES),
            ("Marketing agency", CompanyType.B2B_SERVICES),
            ("consulting", CompanyType.B2B_SERVICES),
            ("nonprofit", CompanyType.OTHER),
            (CompanyType.SAAS, CompanyType.SAAS),
        ],
    )
    def test_normalize(self, raw, expected):
        assert normalize_company_type(raw) == expected


class TestUtmUsageLevel:
    """Test cases for UTM usage grading."""

    def test_none_without_utm_tracking(self, make_page):
        pages = [make_page("/", "<p>utm_source</p>")]
        assert compute_utm_usage_level(TrackingSignals(), pages) == UtmUsageLevel.NONE

    def test_some_and_consistent(self, make_page):
        tracking = TrackingSignals(has_utm_tracking=True)
        utm_page = make_page("/", '<a href="/x?utm_source=mail">x</a>')
        plain = [make_page(f"/p{i}", "<p>plain</p>") for i in range(3)]

        assert compute_utm_usage_level(tracking, [utm_page, *plain]) == UtmUsageLevel.SOME
        assert compute_utm_usage_level(tracking, [utm_page, plain[0]]) == UtmUsageLevel.CONSISTENT


class TestBuildDemandSignals:
    """Test cases for build_demand_signals."""

    def _build(self, pages=(), ctas=None, tracking=None, snapshot=None, landing=None, ad_scent=None):
        return build_demand_signals(
            list(pages),
            landing or LandingPageSignals(),
            ctas or CtaSignals(),
            tracking or TrackingSignals(),
            ad_scent or AdScentSignals(),
            snapshot,
        )

    def test_empty_inputs(self):
        signals = self._build()

        assert signals.has_paid_traffic is False
        assert signals.has_retargeting_signals is False
        assert signals.has_dedicated_landing_pages is False
        assert signals.has_clear_primary_cta is False
        assert signals.has_lead_capture is False
        assert signals.utm_usage_level == UtmUsageLevel.NONE
        assert signals.conversion_events_implemented is False
        assert signals.remarketing_infra_likely is False

    @pytest.mark.parametrize("paid_share,expected", [(0.02, True), (0.01, False), (None, False)])
    def test_paid_traffic_from_snapshot(self, paid_share, expected):
        signals = self._build(snapshot=AnalyticsSnapshot(paid_share=paid_share))
        assert signals.has_paid_traffic is expected

    def test_retargeting_implies_paid_traffic(self):
        signals = self._build(tracking=TrackingSignals(has_retargeting_pixels=True))

        assert signals.has_paid_traffic is True
        assert signals.has_retargeting_signals is True
        assert signals.remarketing_infra_likely is True

    def test_clear_primary_cta_needs_clarity(self):
        clear = self._build(ctas=CtaSignals(primary_cta="Request Demo", cta_clarity_score=60))
        unclear = self._build(ctas=CtaSignals(primary_cta="Request Demo", cta_clarity_score=59))

        assert clear.has_clear_primary_cta is True
        assert unclear.has_clear_primary_cta is False

    def test_conversion_events_from_analytics(self):
        signals = self._build(snapshot=AnalyticsSnapshot(conversion_rate=0.02))
        assert signals.conversion_events_implemented is True

    def test_flags_mirror_bundles(self):
        landing = LandingPageSignals(
            landing_page_count=2,
            has_dedicated_landing_pages=True,
            landing_page_urls=["https://example.com/demo"],
            has_lead_capture_form=True,
        )
        signals = self._build(
            landing=landing,
            ad_scent=AdScentSignals(has_ad_landing_patterns=True),
        )

        assert signals.has_dedicated_landing_pages is True
        assert signals.has_lead_capture is True
        assert signals.remarketing_infra_likely is True
        assert signals.landing_pages is landing


class TestChannelInsights:
    """Test cases for build_channel_insights."""

    def test_insights(self):
        snapshot = AnalyticsSnapshot(
            traffic_mix={"Organic Search": 0.6, "Paid Search": 0.25},
            top_channels=["Organic Search", "Paid Search", "Direct"],
            paid_share=0.25,
        )
        insights = build_channel_insights(snapshot)

        assert [c.name for c in insights.top_channels] == ["Organic Search", "Paid Search", "Direct"]
        assert insights.top_channels[0].share == 0.6
        # Direct has no computed share and falls back to its position
        assert insights.top_channels[2].share == pytest.approx(0.5 / 3)
        assert insights.paid_share == 0.25
        assert insights.organic_share == 0.75
        assert insights.has_multi_channel is True
