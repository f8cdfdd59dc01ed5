"""Derived detection flags joined from signal bundles and analytics."""

from .models import (
    AdScentSignals,
    AnalyticsSnapshot,
    ChannelInsights,
    ChannelShare,
    CompanyType,
    CrawledPage,
    CtaSignals,
    DemandSignals,
    LandingPageSignals,
    TrackingSignals,
    UtmUsageLevel,
)

PAID_TRAFFIC_THRESHOLD = 0.01
CLEAR_CTA_MIN_CLARITY = 60
CONSISTENT_UTM_RATIO = 0.5


def normalize_company_type(raw: str | CompanyType | None) -> CompanyType:
    """Map a free-text business model to a CompanyType."""
    if isinstance(raw, CompanyType):
        return raw
    if not raw or not raw.strip():
        return CompanyType.UNKNOWN

    lowered = raw.lower().strip()
    for company_type in CompanyType:
        if lowered == company_type.value:
            return company_type

    if "saas" in lowered or "software" in lowered:
        return CompanyType.SAAS
    if "ecom" in lowered or "shop" in lowered or "retail" in lowered:
        return CompanyType.ECOMMERCE
    if "local" in lowered:
        return CompanyType.LOCAL_SERVICE
    if "b2b" in lowered:
        return CompanyType.B2B_SERVICES
    if lowered == "services" or "agency" in lowered or "consult" in lowered:
        return CompanyType.B2B_SERVICES
    return CompanyType.OTHER


def compute_utm_usage_level(tracking: TrackingSignals, pages: list[CrawledPage]) -> UtmUsageLevel:
    """Grade UTM usage by the share of pages carrying UTM parameters."""
    if not tracking.has_utm_tracking or not pages:
        return UtmUsageLevel.NONE

    pages_with_utm = sum(
        1 for page in pages if "utm_source" in page.html.lower() or "utm_medium" in page.html.lower()
    )
    ratio = pages_with_utm / len(pages)
    if ratio >= CONSISTENT_UTM_RATIO:
        return UtmUsageLevel.CONSISTENT
    if ratio > 0:
        return UtmUsageLevel.SOME
    return UtmUsageLevel.NONE


def build_demand_signals(
    pages: list[CrawledPage],
    landing_pages: LandingPageSignals,
    ctas: CtaSignals,
    tracking: TrackingSignals,
    ad_scent: AdScentSignals,
    snapshot: AnalyticsSnapshot | None,
) -> DemandSignals:
    paid_share = snapshot.paid_share if snapshot else None
    has_paid_traffic = (
        paid_share is not None and paid_share > PAID_TRAFFIC_THRESHOLD
    ) or tracking.has_retargeting_pixels

    return DemandSignals(
        landing_pages=landing_pages,
        ctas=ctas,
        tracking=tracking,
        ad_scent=ad_scent,
        has_paid_traffic=has_paid_traffic,
        has_retargeting_signals=tracking.has_retargeting_pixels,
        has_dedicated_landing_pages=landing_pages.has_dedicated_landing_pages,
        has_clear_primary_cta=(
            ctas.primary_cta is not None and ctas.cta_clarity_score >= CLEAR_CTA_MIN_CLARITY
        ),
        has_lead_capture=landing_pages.has_lead_capture_form,
        utm_usage_level=compute_utm_usage_level(tracking, pages),
        conversion_events_implemented=(
            tracking.has_conversion_tracking
            or (snapshot is not None and snapshot.conversion_rate is not None)
        ),
        remarketing_infra_likely=tracking.has_retargeting_pixels or ad_scent.has_ad_landing_patterns,
    )


def build_channel_insights(snapshot: AnalyticsSnapshot) -> ChannelInsights:
    """Summarize the top channels and paid/organic split."""
    top_channels = [
        ChannelShare(
            name=name,
            # Positional fallback when the channel has no computed share
            share=snapshot.traffic_mix.get(name, (1 / (idx + 1)) * 0.5),
        )
        for idx, name in enumerate(snapshot.top_channels[:5])
    ]
    paid = snapshot.paid_share or 0.0
    return ChannelInsights(
        top_channels=top_channels,
        paid_share=paid,
        organic_share=1 - paid,
        has_multi_channel=len(top_channels) >= 3,
    )
