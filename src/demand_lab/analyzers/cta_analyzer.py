"""Call-to-action analyzer."""

import re

from ..models import CrawledPage, CtaSignals, CtaType, DiscoveredCta
from .base import BaseAnalyzer

_BUTTON_RE = re.compile(
    r'<button[^>]*>([^<]+)</button>|<a[^>]+class="[^"]*(?:btn|button|cta)[^"]*"[^>]*>([^<]+)<',
    re.IGNORECASE,
)

CANONICAL_CTA_PHRASES = (
    "get started",
    "try free",
    "start free",
    "request demo",
    "book demo",
    "schedule demo",
    "contact us",
    "get quote",
    "sign up",
    "register",
    "download",
    "learn more",
    "buy now",
    "subscribe",
)

# First matching family wins
CTA_TYPE_KEYWORDS: tuple[tuple[CtaType, tuple[str, ...]], ...] = (
    (CtaType.DEMO, ("demo", "schedule", "book")),
    (CtaType.TRIAL, ("trial", "try", "start")),
    (CtaType.CONTACT, ("contact", "quote", "talk")),
    (CtaType.DOWNLOAD, ("download", "get ebook", "get guide")),
    (CtaType.SUBSCRIBE, ("subscribe", "newsletter", "sign up")),
    (CtaType.BUY, ("buy", "purchase", "order")),
    (CtaType.LEARN, ("learn", "more", "explore")),
)

# Lower ranks first when picking the primary CTA
CTA_PRIORITY = {
    CtaType.DEMO: 1,
    CtaType.TRIAL: 2,
    CtaType.CONTACT: 3,
    CtaType.BUY: 4,
    CtaType.DOWNLOAD: 5,
    CtaType.SUBSCRIBE: 6,
    CtaType.LEARN: 7,
    CtaType.OTHER: 8,
}

CONVERSION_CTA_TYPES = frozenset({CtaType.DEMO, CtaType.TRIAL, CtaType.CONTACT, CtaType.BUY})

MIN_CTA_LENGTH = 3
MAX_CTA_LENGTH = 49
MAX_REPORTED_CTAS = 15


def classify_cta_type(text: str) -> CtaType:
    """Classify CTA text into a single family by keyword priority."""
    lower = text.lower()
    for cta_type, keywords in CTA_TYPE_KEYWORDS:
        if any(keyword in lower for keyword in keywords):
            return cta_type
    return CtaType.OTHER


class CtaAnalyzer(BaseAnalyzer[CtaSignals]):
    """Finds CTAs, picks the primary one and scores CTA clarity."""

    def analyze(self, pages: list[CrawledPage]) -> CtaSignals:
        ctas = self._unique_ctas(pages)

        cta_types: list[CtaType] = []
        for cta in ctas:
            if cta.cta_type not in cta_types:
                cta_types.append(cta.cta_type)

        ranked = sorted(ctas, key=lambda c: (CTA_PRIORITY[c.cta_type], not c.is_primary))
        primary_cta = ranked[0].text if ranked else None

        conversion_types = [t for t in cta_types if t in CONVERSION_CTA_TYPES]
        has_competing_ctas = len(conversion_types) > 2

        clarity = 50
        if ctas:
            clarity += 20
        if primary_cta:
            clarity += 15
        if not has_competing_ctas:
            clarity += 15

        return CtaSignals(
            cta_count=len(ctas),
            primary_cta=primary_cta,
            cta_types=cta_types,
            cta_clarity_score=min(100, clarity),
            has_competing_ctas=has_competing_ctas,
        )

    def discover(self, pages: list[CrawledPage]) -> list[DiscoveredCta]:
        """Return the deduplicated CTAs surfaced in findings."""
        return self._unique_ctas(pages)[:MAX_REPORTED_CTAS]

    def _unique_ctas(self, pages: list[CrawledPage]) -> list[DiscoveredCta]:
        unique: dict[str, DiscoveredCta] = {}
        for cta in self._collect_candidates(pages):
            unique.setdefault(cta.text.lower(), cta)
        return list(unique.values())

    def _collect_candidates(self, pages: list[CrawledPage]) -> list[DiscoveredCta]:
        candidates: list[DiscoveredCta] = []

        for page in pages:
            found_on_page = 0

            for match in _BUTTON_RE.finditer(page.html):
                text = (match.group(1) or match.group(2) or "").strip()
                if MIN_CTA_LENGTH <= len(text) <= MAX_CTA_LENGTH:
                    candidates.append(
                        DiscoveredCta(
                            text=text,
                            cta_type=classify_cta_type(text),
                            page_url=page.url,
                            is_primary=found_on_page == 0,
                        )
                    )
                    found_on_page += 1

            lower_html = page.html.lower()
            for phrase in CANONICAL_CTA_PHRASES:
                if phrase not in lower_html:
                    continue
                if any(phrase in c.text.lower() for c in candidates):
                    continue
                candidates.append(
                    DiscoveredCta(
                        text=phrase,
                        cta_type=classify_cta_type(phrase),
                        page_url=page.url,
                        is_primary=found_on_page == 0,
                    )
                )
                found_on_page += 1

        return candidates
