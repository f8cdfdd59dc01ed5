"""Data confidence estimation from analytics availability and crawl coverage."""

from .models import AnalyticsSnapshot, ConfidenceLevel, DataConfidence
from .utils import clamp_score

NO_ANALYTICS_SCORE = 20
BASE_SCORE = 40
MAX_SCORE = 90
EMPTY_CRAWL_PENALTY = 10

HIGH_THRESHOLD = 70
MEDIUM_THRESHOLD = 40


def confidence_level(score: int) -> ConfidenceLevel:
    if score >= HIGH_THRESHOLD:
        return ConfidenceLevel.HIGH
    if score >= MEDIUM_THRESHOLD:
        return ConfidenceLevel.MEDIUM
    return ConfidenceLevel.LOW


def compute_data_confidence(
    snapshot: AnalyticsSnapshot | None,
    page_count: int,
) -> DataConfidence:
    """
    Estimate how far the collected evidence can be trusted.

    Analytics drive most of the score: traffic volume, conversion data and
    a visible paid share each add to it. A crawl that reached no pages at
    all lowers it further.
    """
    reasons: list[str] = []

    if snapshot is None:
        score = NO_ANALYTICS_SCORE
        reasons.append(
            "No analytics snapshot available. Demand insights are based on visible site patterns only."
        )
    else:
        score = BASE_SCORE

        if (snapshot.session_volume or 0) > 1000:
            score += 20
            reasons.append("Sufficient traffic volume for directional insights.")
        else:
            reasons.append("Limited traffic volume; treat trends as directional.")

        if snapshot.conversion_rate is not None:
            score += 15
            reasons.append("Conversion events detected in analytics.")
        else:
            reasons.append("No conversion events detected; funnel performance is inferred.")

        if (snapshot.paid_share or 0) > 0.05:
            score += 15
            reasons.append("Paid traffic share detected in analytics.")
        else:
            reasons.append("Little or no clear paid traffic detected.")

        score = min(score, MAX_SCORE)

    if page_count == 0:
        score -= EMPTY_CRAWL_PENALTY
        reasons.append("No website pages could be crawled.")
    else:
        reasons.append(f"{page_count} website page{'s' if page_count != 1 else ''} analyzed.")

    score = clamp_score(score)
    return DataConfidence(score=score, level=confidence_level(score), reason=" ".join(reasons))
