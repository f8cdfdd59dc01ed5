"""Tracking and measurement analyzer."""

import re
from dataclasses import dataclass

from ..models import CrawledPage, TrackingSignals, TrackingTech
from .base import BaseAnalyzer

# GA4 measurement IDs appear quoted, e.g. gtag('config', 'G-ABC123XYZ')
_GA4_MEASUREMENT_ID_RE = re.compile(r"""["']g-[a-z0-9]{6,12}["']""")


@dataclass(frozen=True)
class TrackingVendor:
    """A tracking vendor and the HTML signatures that reveal it."""

    key: str
    name: str
    tech_type: str
    signatures: tuple[str, ...]
    analytics: bool = False
    retargeting: bool = False
    conversion: bool = False


VENDORS = (
    TrackingVendor(
        key="google_analytics",
        name="Google Analytics / GA4",
        tech_type="analytics",
        signatures=("google-analytics", "gtag", "ga.js", "analytics.js"),
        analytics=True,
    ),
    TrackingVendor(
        key="google_tag_manager",
        name="Google Tag Manager",
        tech_type="tag_manager",
        signatures=("googletagmanager", "gtm.js"),
        analytics=True,
    ),
    TrackingVendor(
        key="facebook_pixel",
        name="Facebook Pixel",
        tech_type="retargeting",
        signatures=("facebook.com/tr", "fbq(", "connect.facebook", "fb-pixel"),
        retargeting=True,
    ),
    TrackingVendor(
        key="linkedin_insight",
        name="LinkedIn Insight Tag",
        tech_type="retargeting",
        signatures=("linkedin.com/px", "snap.licdn.com", "ads.linkedin.com", "_linkedin_partner_id"),
        retargeting=True,
    ),
    TrackingVendor(
        key="google_ads",
        name="Google Ads",
        tech_type="conversion",
        signatures=("googleadservices", "googlesyndication", "gclid"),
        retargeting=True,
    ),
    TrackingVendor(
        key="hubspot",
        name="HubSpot",
        tech_type="analytics",
        signatures=("hubspot", "hs-scripts", "hbspt"),
        conversion=True,
    ),
    TrackingVendor(
        key="hotjar",
        name="Hotjar",
        tech_type="analytics",
        signatures=("hotjar", "hj("),
    ),
    TrackingVendor(
        key="intercom",
        name="Intercom",
        tech_type="analytics",
        signatures=("intercom", "intercomcdn"),
    ),
    TrackingVendor(
        key="segment",
        name="Segment",
        tech_type="analytics",
        signatures=("segment.com", "analytics.js"),
        analytics=True,
    ),
)

UTM_MARKERS = ("utm_source", "utm_medium", "utm_campaign")
CONVERSION_PAGE_MARKERS = ("thank you", "confirmation", "success")


class TrackingAnalyzer(BaseAnalyzer[TrackingSignals]):
    """Detects analytics, retargeting and conversion tracking on the site."""

    def analyze(self, pages: list[CrawledPage]) -> TrackingSignals:
        has_utm = False
        has_conversion = False
        has_analytics = False
        has_retargeting = False

        for page in pages:
            html = page.html.lower()
            vendors = self._vendors_on_page(html)

            if any(marker in html for marker in UTM_MARKERS):
                has_utm = True
            if any(v.analytics for v in vendors) or _GA4_MEASUREMENT_ID_RE.search(html):
                has_analytics = True
            if any(v.retargeting for v in vendors):
                has_retargeting = True
            if any(v.conversion for v in vendors):
                has_conversion = True
            if any(marker in html for marker in CONVERSION_PAGE_MARKERS):
                has_conversion = True
            if "<form" in html and ("submit" in html or "action=" in html):
                has_conversion = True

        return TrackingSignals(
            has_utm_tracking=has_utm,
            has_conversion_tracking=has_conversion,
            has_analytics=has_analytics,
            has_retargeting_pixels=has_retargeting,
        )

    def detect_technologies(self, pages: list[CrawledPage]) -> list[TrackingTech]:
        """Return the full vendor catalog with per-site detection flags."""
        detected: set[str] = set()
        for page in pages:
            html = page.html.lower()
            detected.update(v.key for v in self._vendors_on_page(html))
            if _GA4_MEASUREMENT_ID_RE.search(html):
                detected.add("google_analytics")

        return [
            TrackingTech(name=v.name, tech_type=v.tech_type, detected=v.key in detected)
            for v in VENDORS
        ]

    def _vendors_on_page(self, lower_html: str) -> list[TrackingVendor]:
        return [v for v in VENDORS if any(sig in lower_html for sig in v.signatures)]
