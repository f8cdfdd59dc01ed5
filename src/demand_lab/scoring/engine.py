"""Company-type-aware demand scoring across five dimensions.

Each dimension starts from a baseline, applies signed adjustments for the
signals it reads, and is clamped to [0, 100]. Every adjustment that flags a
problem also records an Issue, both on the dimension and in the flat list.
"""

from dataclasses import dataclass, field

from ..models import (
    AnalyticsSnapshot,
    CompanyType,
    ConfidenceLevel,
    DataConfidence,
    DemandSignals,
    Dimension,
    DimensionKey,
    DimensionStatus,
    Evidence,
    Issue,
    MaturityStage,
    ScoringOutput,
    Severity,
    UtmUsageLevel,
)
from ..utils import clamp_score

DIMENSION_LABELS = {
    DimensionKey.CHANNEL_MIX: "Channel Mix & Budget",
    DimensionKey.TARGETING: "Campaign Structure & Targeting",
    DimensionKey.CREATIVE: "Creative & Messaging",
    DimensionKey.FUNNEL: "Funnel Architecture",
    DimensionKey.MEASUREMENT: "Measurement & Optimization",
}

ISSUE_CATEGORIES = {
    DimensionKey.CHANNEL_MIX: "Channel Mix",
    DimensionKey.TARGETING: "Targeting",
    DimensionKey.CREATIVE: "Creative",
    DimensionKey.FUNNEL: "Funnel",
    DimensionKey.MEASUREMENT: "Measurement",
}

# (weak, moderate, strong) summaries
DIMENSION_SUMMARIES = {
    DimensionKey.CHANNEL_MIX: (
        "Channel mix is underdeveloped for this business model.",
        "Channel mix is partially aligned but has gaps for this business model.",
        "Channel mix looks generally appropriate for this business model.",
    ),
    DimensionKey.TARGETING: (
        "Campaign structure and targeting appear weak or missing.",
        "Targeting is present but not fully segmented or layered.",
        "Campaigns appear reasonably structured with layered targeting.",
    ),
    DimensionKey.CREATIVE: (
        "Creative and messaging are underpowered for effective demand generation.",
        "Messaging is partially effective but lacks depth or variation.",
        "Creative and messaging appear reasonably strong.",
    ),
    DimensionKey.FUNNEL: (
        "Funnel paths are unclear or missing key steps.",
        "Funnel exists but has friction or missing nurture layers.",
        "Funnel structure is reasonably defined.",
    ),
    DimensionKey.MEASUREMENT: (
        "Measurement foundations are too weak to reliably optimize demand.",
        "Measurement is partially in place but has gaps that limit optimization.",
        "Measurement systems are strong enough to support ongoing testing.",
    ),
}

MIN_RELIABLE_SESSIONS = 50
FUNNEL_LOW_DATA_CAP = 75
MEASUREMENT_LOW_CONFIDENCE_CAP = 65
WEAK_ACQUISITION_OVERALL_CAP = 55
LOW_CONFIDENCE_OVERALL_CAP = 65

B2B_TYPES = (CompanyType.B2B_SERVICES, CompanyType.SAAS)


def status_from_score(score: int) -> DimensionStatus:
    if score < 50:
        return DimensionStatus.WEAK
    if score < 70:
        return DimensionStatus.MODERATE
    return DimensionStatus.STRONG


def maturity_stage_for(score: int) -> MaturityStage:
    if score < 50:
        return MaturityStage.UNPROVEN
    if score < 70:
        return MaturityStage.EMERGING
    if score < 85:
        return MaturityStage.SCALING
    return MaturityStage.ESTABLISHED


def conversion_rate_adjustment(conversion_rate: float) -> tuple[int, str]:
    """
    Map a conversion rate fraction to a funnel score delta.

    Returns:
        Tuple of (score_delta, band_name).
    """
    if conversion_rate < 0.005:
        return -10, "poor"
    if conversion_rate < 0.03:
        return 0, "typical"
    if conversion_rate < 0.08:
        return 5, "good"
    if conversion_rate < 0.20:
        return 10, "very_strong"
    if conversion_rate <= 0.40:
        return 12, "extremely_strong"
    # Anything higher is almost always misconfigured tracking
    return -10, "tracking_noise"


def compute_overall_score(dimensions: list[Dimension], confidence_level: ConfidenceLevel) -> int:
    """Average the dimension scores and apply the two safety caps."""
    if not dimensions:
        return 0

    overall = clamp_score(sum(d.score for d in dimensions) / len(dimensions))
    scores = {d.key: d.score for d in dimensions}

    channel = scores.get(DimensionKey.CHANNEL_MIX)
    targeting = scores.get(DimensionKey.TARGETING)
    if channel is not None and targeting is not None and channel < 50 and targeting < 50:
        overall = min(overall, WEAK_ACQUISITION_OVERALL_CAP)

    if confidence_level == ConfidenceLevel.LOW:
        overall = min(overall, LOW_CONFIDENCE_OVERALL_CAP)

    return overall


def _percent(fraction: float, digits: int = 1) -> str:
    return f"{fraction * 100:.{digits}f}%"


class _IssueLog:
    """Hands out sequential issue IDs and keeps the flat issue list."""

    def __init__(self):
        self.issues: list[Issue] = []

    def create(self, category: str, severity: Severity, title: str, description: str) -> Issue:
        issue = Issue(
            id=f"demand-{len(self.issues)}",
            category=category,
            severity=severity,
            title=title,
            description=description,
        )
        self.issues.append(issue)
        return issue


@dataclass
class _DimensionBuilder:
    key: DimensionKey
    score: int
    log: _IssueLog
    issues: list[Issue] = field(default_factory=list)
    evidence: Evidence = field(default_factory=Evidence)

    def flag(
        self,
        severity: Severity,
        title: str,
        description: str,
        category: DimensionKey | None = None,
    ) -> None:
        issue = self.log.create(ISSUE_CATEGORIES[category or self.key], severity, title, description)
        self.issues.append(issue)

    def found(self, text: str) -> None:
        self.evidence.found.append(text)

    def missing(self, text: str) -> None:
        self.evidence.missing.append(text)

    def build(self) -> Dimension:
        score = clamp_score(self.score)
        status = status_from_score(score)
        weak, moderate, strong = DIMENSION_SUMMARIES[self.key]
        summary = {
            DimensionStatus.WEAK: weak,
            DimensionStatus.MODERATE: moderate,
            DimensionStatus.STRONG: strong,
        }[status]
        return Dimension(
            key=self.key,
            label=DIMENSION_LABELS[self.key],
            score=score,
            status=status,
            summary=summary,
            issues=list(self.issues),
            evidence=self.evidence,
        )


def _score_channel_mix(
    signals: DemandSignals,
    snapshot: AnalyticsSnapshot | None,
    company_type: CompanyType,
    log: _IssueLog,
) -> Dimension:
    session_volume = (snapshot.session_volume if snapshot else None) or 0
    paid_share = (snapshot.paid_share if snapshot else None) or 0.0
    dim = _DimensionBuilder(DimensionKey.CHANNEL_MIX, 65, log)

    dim.evidence.data_points["session_volume"] = session_volume
    dim.evidence.data_points["paid_traffic_share"] = _percent(paid_share) if paid_share else "0%"

    if session_volume <= 0:
        dim.score = 30
        dim.missing("Meaningful traffic volume (needed for channel analysis)")
        dim.flag(
            Severity.HIGH,
            "Limited traffic footprint",
            "Traffic volume is low, making it difficult to validate channel strategy.",
        )
        return dim.build()

    dim.found(f"{session_volume:,} sessions in the analytics window")
    no_paid = not signals.has_paid_traffic

    if company_type in B2B_TYPES:
        if paid_share == 0 and no_paid:
            dim.score -= 25
            dim.missing("Paid search or social demand channels")
            dim.flag(
                Severity.MEDIUM,
                "No paid demand channels detected",
                "For B2B and SaaS, a paid demand layer (search or social) typically accelerates pipeline.",
            )
        elif paid_share < 0.05 and no_paid:
            dim.score -= 15
            dim.missing("Adequate paid demand footprint")
            dim.flag(
                Severity.MEDIUM,
                "Very light paid demand footprint",
                "Paid channels appear underdeveloped relative to typical B2B/SaaS demand engines.",
            )
        elif signals.has_paid_traffic:
            dim.found("Active paid traffic channels detected")

    elif company_type == CompanyType.LOCAL_SERVICE:
        if paid_share == 0 and no_paid:
            dim.score -= 15
            dim.missing("Local paid search or maps advertising")
            dim.flag(
                Severity.MEDIUM,
                "No local paid visibility detected",
                "Local services often benefit from always-on local search or maps ads.",
            )

    elif company_type == CompanyType.ECOMMERCE:
        if paid_share < 0.1 and no_paid:
            dim.score -= 25
            dim.missing("Performance marketing channels (Shopping, Display, Social)")
            dim.flag(
                Severity.HIGH,
                "Weak performance marketing footprint",
                "Ecommerce typically requires strong performance marketing "
                "(Shopping, social, remarketing) to drive sales.",
            )

    if signals.has_retargeting_signals:
        dim.score += 5
        dim.found("Retargeting infrastructure in place")
    else:
        dim.score -= 10
        dim.missing("Retargeting pixels (Facebook, LinkedIn, or Google)")
        dim.flag(
            Severity.MEDIUM,
            "No retargeting layer detected",
            "Adding retargeting can capture visitors who did not convert on the first visit.",
        )

    channels = snapshot.top_channels if snapshot else []
    if len(channels) >= 4:
        dim.score += 10
        dim.found(f"Multi-channel traffic ({len(channels)} channels: {', '.join(channels[:4])})")
    elif len(channels) >= 2:
        dim.score += 5
        dim.found(f"Traffic from {len(channels)} channels: {', '.join(channels)}")
    else:
        dim.missing("Diversified traffic sources")

    return dim.build()


def _score_targeting(signals: DemandSignals, log: _IssueLog) -> Dimension:
    dim = _DimensionBuilder(DimensionKey.TARGETING, 55, log)

    dim.evidence.data_points["has_paid_traffic"] = signals.has_paid_traffic
    dim.evidence.data_points["has_retargeting"] = signals.has_retargeting_signals
    dim.evidence.data_points["landing_page_count"] = signals.landing_pages.landing_page_count

    if not signals.has_paid_traffic:
        dim.score = 35
        dim.missing("Active paid campaign traffic")
        dim.flag(
            Severity.MEDIUM,
            "No active paid campaigns detected",
            "Without paid campaigns, targeting and segmentation are likely minimal or nonexistent.",
        )
    else:
        dim.found("Paid campaign traffic detected")
        if signals.has_retargeting_signals:
            dim.found("Retargeting pixels active")
        else:
            dim.score -= 10
            dim.missing("Retargeting layer for non-converters")
            dim.flag(
                Severity.MEDIUM,
                "No clear retargeting layer detected",
                "Adding retargeting can capture visitors who did not convert on the first visit.",
            )

    if signals.has_dedicated_landing_pages:
        dim.score += 15
        dim.found(f"{len(signals.landing_pages.landing_page_urls)} dedicated landing pages found")
    else:
        dim.missing("Dedicated campaign landing pages")
        dim.flag(
            Severity.MEDIUM,
            "No dedicated campaign landing pages detected",
            "Sending campaign traffic to generic pages can reduce relevance and conversion rates.",
        )

    return dim.build()


def _score_creative(signals: DemandSignals, log: _IssueLog) -> Dimension:
    ctas = signals.ctas
    dim = _DimensionBuilder(DimensionKey.CREATIVE, 55, log)

    dim.evidence.data_points["cta_count"] = ctas.cta_count
    dim.evidence.data_points["cta_clarity_score"] = ctas.cta_clarity_score
    if ctas.primary_cta:
        dim.evidence.data_points["primary_cta"] = ctas.primary_cta

    if signals.has_dedicated_landing_pages:
        dim.found("Dedicated landing pages present")
    else:
        dim.score -= 10
        dim.missing("Dedicated landing pages with focused messaging")

    if signals.has_clear_primary_cta:
        dim.score += 15
        dim.found(f'Primary CTA identified: "{ctas.primary_cta}"')
    else:
        dim.score -= 15
        dim.missing("Clear, prominent primary CTA")
        dim.flag(
            Severity.HIGH,
            "Weak or unclear primary calls-to-action",
            "Demand systems perform better when CTAs are prominent and specific.",
        )

    if ctas.cta_clarity_score >= 80:
        dim.score += 10
        dim.found(f"High CTA clarity score ({ctas.cta_clarity_score}/100)")
    elif ctas.cta_clarity_score < 50:
        dim.missing("Clear, focused CTA strategy")
        dim.flag(
            Severity.MEDIUM,
            "Low CTA clarity",
            "Calls-to-action could be clearer. Use action-oriented, benefit-focused CTA copy.",
        )

    if ctas.cta_types:
        dim.found(f"CTA types found: {', '.join(t.value for t in ctas.cta_types)}")
    if ctas.has_competing_ctas:
        dim.missing("Focused CTA strategy (multiple competing CTAs detected)")

    return dim.build()


def _score_funnel(
    signals: DemandSignals,
    snapshot: AnalyticsSnapshot | None,
    confidence: DataConfidence,
    company_type: CompanyType,
    log: _IssueLog,
) -> Dimension:
    session_volume = (snapshot.session_volume if snapshot else None) or 0
    conversion_rate = snapshot.conversion_rate if snapshot else None
    primary_cta = signals.ctas.primary_cta
    dim = _DimensionBuilder(DimensionKey.FUNNEL, 60, log)

    dim.evidence.data_points["has_lead_capture"] = signals.has_lead_capture
    dim.evidence.data_points["has_primary_cta"] = primary_cta is not None
    if conversion_rate is not None:
        # Values above 1 were reported as percentages upstream
        display = conversion_rate if conversion_rate > 1 else conversion_rate * 100
        dim.evidence.data_points["conversion_rate"] = f"{display:.2f}%"

    if signals.has_lead_capture:
        dim.score += 10
        dim.found("Lead capture forms detected on site")
    else:
        dim.missing("Lead capture forms")
        if company_type in B2B_TYPES:
            dim.score -= 15
            dim.flag(
                Severity.HIGH,
                "No clear lead capture mechanism",
                "B2B and SaaS demand programs need simple, obvious ways for qualified "
                "visitors to raise their hands.",
            )
        elif company_type == CompanyType.ECOMMERCE:
            dim.score -= 5
            dim.flag(
                Severity.MEDIUM,
                "Weak email capture for non-buyers",
                "Building an email list can help recover and nurture non-purchasing visitors.",
            )
        else:
            dim.score -= 10
            dim.flag(
                Severity.HIGH,
                "No lead capture forms detected",
                "Add email capture forms to convert visitors into leads before they leave.",
            )

    if primary_cta:
        dim.score += 10
        dim.found(f'Clear conversion path with primary CTA: "{primary_cta}"')
    else:
        dim.missing("Clear primary conversion action")
        dim.flag(
            Severity.MEDIUM,
            "No clear primary conversion path",
            "Define and highlight a primary conversion action for each landing page.",
        )

    if conversion_rate is None:
        dim.missing("Conversion tracking data")
    elif session_volume < MIN_RELIABLE_SESSIONS:
        dim.evidence.data_points["session_volume_note"] = (
            "Insufficient sessions for reliable conversion rate analysis"
        )
    else:
        delta, band = conversion_rate_adjustment(conversion_rate)
        dim.score += delta
        rate = _percent(conversion_rate)
        if band == "poor":
            dim.missing(f"Higher conversion rate (currently {_percent(conversion_rate, 2)})")
            dim.flag(
                Severity.HIGH,
                "Low conversion rate",
                f"Conversion rate of {rate} indicates funnel friction. "
                "Optimize landing pages and reduce barriers.",
            )
        elif band == "typical":
            dim.found(f"Conversion rate in typical range: {rate}")
        elif band == "good":
            dim.found(f"Good conversion rate: {rate}")
        elif band == "very_strong":
            dim.found(f"Strong conversion rate: {rate}")
        elif band == "extremely_strong":
            dim.found(f"Very strong conversion rate: {rate}")
        else:
            dim.missing("Accurate conversion tracking configuration")
            dim.flag(
                Severity.MEDIUM,
                "Conversion rate appears unrealistically high",
                f"Conversion rate of {_percent(conversion_rate, 0)} is likely caused by "
                "misconfigured tracking. Audit analytics conversion definitions.",
                category=DimensionKey.MEASUREMENT,
            )

    if session_volume < MIN_RELIABLE_SESSIONS or confidence.level == ConfidenceLevel.LOW:
        dim.score = min(dim.score, FUNNEL_LOW_DATA_CAP)

    return dim.build()


def _score_measurement(
    signals: DemandSignals,
    confidence: DataConfidence,
    log: _IssueLog,
) -> Dimension:
    tracking = signals.tracking
    dim = _DimensionBuilder(DimensionKey.MEASUREMENT, 55, log)

    dim.evidence.data_points["has_analytics"] = tracking.has_analytics
    dim.evidence.data_points["has_conversion_tracking"] = signals.conversion_events_implemented
    dim.evidence.data_points["utm_usage_level"] = signals.utm_usage_level.value

    if signals.conversion_events_implemented:
        dim.score += 10
        dim.found("Conversion events implemented")
    else:
        dim.score -= 20
        dim.missing("Conversion event tracking")
        dim.flag(
            Severity.HIGH,
            "No conversion events configured in analytics",
            "Without conversion tracking, it's difficult to optimize demand efficiently.",
        )

    if signals.utm_usage_level == UtmUsageLevel.NONE:
        dim.score -= 20
        dim.missing("UTM parameter tracking")
        dim.flag(
            Severity.MEDIUM,
            "No UTM usage detected",
            "UTM parameters are essential for understanding which campaigns and channels work.",
        )
    elif signals.utm_usage_level == UtmUsageLevel.SOME:
        dim.score -= 5
        dim.found("Some UTM usage detected")
        dim.missing("Consistent UTM naming conventions")
        dim.flag(
            Severity.LOW,
            "Inconsistent UTM usage",
            "Standardizing UTMs will improve reporting clarity and optimization.",
        )
    else:
        dim.score += 10
        dim.found("Consistent UTM tracking in place")

    if tracking.has_analytics:
        dim.score += 5
        dim.found("Analytics platform detected (Google Analytics/GTM)")
    else:
        dim.score -= 15
        dim.missing("Web analytics platform")
        dim.flag(
            Severity.HIGH,
            "No analytics detected",
            "Install Google Analytics or similar to track visitor behavior and conversions.",
        )

    if tracking.has_retargeting_pixels:
        dim.found("Retargeting/conversion pixels installed")

    if confidence.level == ConfidenceLevel.LOW:
        dim.score = min(dim.score, MEASUREMENT_LOW_CONFIDENCE_CAP)

    return dim.build()


def score_demand(
    signals: DemandSignals,
    snapshot: AnalyticsSnapshot | None,
    confidence: DataConfidence,
    company_type: CompanyType,
) -> ScoringOutput:
    """
    Score demand generation maturity.

    Args:
        signals: Signal bundles and detection flags from the crawl.
        snapshot: Normalized analytics, or None when unavailable.
        confidence: Data confidence for this run.
        company_type: Normalized business model.

    Returns:
        Five dimensions, the capped overall score, the maturity stage and
        the flat issue list.
    """
    log = _IssueLog()

    dimensions = [
        _score_channel_mix(signals, snapshot, company_type, log),
        _score_targeting(signals, log),
        _score_creative(signals, log),
        _score_funnel(signals, snapshot, confidence, company_type, log),
        _score_measurement(signals, confidence, log),
    ]

    overall = compute_overall_score(dimensions, confidence.level)
    return ScoringOutput(
        dimensions=dimensions,
        overall_score=overall,
        maturity_stage=maturity_stage_for(overall),
        issues=list(log.issues),
    )
