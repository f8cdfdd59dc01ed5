"""Landing page analyzer."""

from ..models import CrawledPage, LandingPageSignals
from .base import BaseAnalyzer

HEADLINE_TAGS = ("<h1", "<h2")
OFFER_WORDS = ("get ", "start ", "try ", "free", "demo", "trial")


class LandingPageAnalyzer(BaseAnalyzer[LandingPageSignals]):
    """Detects dedicated landing pages, offer clarity and lead capture."""

    def analyze(self, pages: list[CrawledPage]) -> LandingPageSignals:
        landing_pages = [p for p in pages if p.is_landing_page]
        dedicated = [p for p in landing_pages if p.path != "/"]

        return LandingPageSignals(
            landing_page_count=len(landing_pages),
            has_dedicated_landing_pages=bool(dedicated),
            landing_page_urls=[p.url for p in dedicated],
            has_offer_clarity=any(self._has_clear_offer(p.html) for p in landing_pages),
            # Any page counts here, not only landing pages
            has_lead_capture_form=any(p.has_form for p in pages),
        )

    def _has_clear_offer(self, html: str) -> bool:
        lower = html.lower()
        has_headline = any(tag in lower for tag in HEADLINE_TAGS)
        return has_headline and any(word in lower for word in OFFER_WORDS)
