"""Ad scent analyzer: do paid-traffic landing paths and headlines line up?"""

import re

from ..models import AdScentSignals, CrawledPage, MessageConsistency
from .base import BaseAnalyzer

_H1_RE = re.compile(r"<h1[^>]*>([^<]+)</h1>", re.IGNORECASE)

AD_PATH_KEYWORDS = ("lp", "landing", "promo", "offer", "campaign")
AD_CLICK_MARKERS = ("utm_source", "gclid", "fbclid")

# Calibration constants for headline word repetition
STRONG_REPETITION_RATIO = 1.5
MODERATE_REPETITION_RATIO = 1.2
MIN_HEADLINE_WORD_LENGTH = 4


class AdScentAnalyzer(BaseAnalyzer[AdScentSignals]):
    """Flags ad landing patterns and scores headline message consistency."""

    def analyze(self, pages: list[CrawledPage]) -> AdScentSignals:
        has_ad_patterns = any(
            any(keyword in page.path for keyword in AD_PATH_KEYWORDS)
            or any(marker in page.html.lower() for marker in AD_CLICK_MARKERS)
            for page in pages
        )

        headlines = []
        for page in pages:
            match = _H1_RE.search(page.html)
            if match:
                headlines.append(match.group(1).strip().lower())

        return AdScentSignals(
            has_ad_landing_patterns=has_ad_patterns,
            message_consistency=self._message_consistency(headlines),
        )

    def _message_consistency(self, headlines: list[str]) -> MessageConsistency:
        if len(headlines) < 2:
            return MessageConsistency.UNKNOWN

        words = [
            word
            for headline in headlines
            for word in headline.split()
            if len(word) >= MIN_HEADLINE_WORD_LENGTH
        ]
        if not words:
            return MessageConsistency.WEAK

        ratio = len(words) / len(set(words))
        if ratio > STRONG_REPETITION_RATIO:
            return MessageConsistency.STRONG
        if ratio > MODERATE_REPETITION_RATIO:
            return MessageConsistency.MODERATE
        return MessageConsistency.WEAK
