"""Data models for Demand Lab."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class PageType(Enum):
    """Classified role of a crawled page."""

    HOMEPAGE = "homepage"
    LANDING = "landing"
    PRICING = "pricing"
    CONTACT = "contact"
    OTHER = "other"


class CompanyType(Enum):
    """Business model used to pick scoring expectations."""

    B2B_SERVICES = "b2b_services"
    LOCAL_SERVICE = "local_service"
    ECOMMERCE = "ecommerce"
    SAAS = "saas"
    OTHER = "other"
    UNKNOWN = "unknown"


class CtaType(Enum):
    """Call-to-action families, in classification priority order."""

    DEMO = "demo"
    TRIAL = "trial"
    CONTACT = "contact"
    DOWNLOAD = "download"
    SUBSCRIBE = "subscribe"
    BUY = "buy"
    LEARN = "learn"
    OTHER = "other"


class MessageConsistency(Enum):
    STRONG = "strong"
    MODERATE = "moderate"
    WEAK = "weak"
    UNKNOWN = "unknown"


class UtmUsageLevel(Enum):
    NONE = "none"
    SOME = "some"
    CONSISTENT = "consistent"


class ConfidenceLevel(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Severity(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class DimensionKey(Enum):
    """The five fixed scoring axes."""

    CHANNEL_MIX = "channelMix"
    TARGETING = "targeting"
    CREATIVE = "creative"
    FUNNEL = "funnel"
    MEASUREMENT = "measurement"


class DimensionStatus(Enum):
    WEAK = "weak"
    MODERATE = "moderate"
    STRONG = "strong"


class MaturityStage(Enum):
    UNPROVEN = "unproven"
    EMERGING = "emerging"
    SCALING = "scaling"
    ESTABLISHED = "established"


class Impact(Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Effort(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class CrawledPage:
    """A successfully fetched page, classified at crawl time."""

    url: str
    path: str
    html: str
    title: str | None = None
    page_type: PageType = PageType.OTHER
    has_form: bool = False
    has_cta: bool = False

    @property
    def is_landing_page(self) -> bool:
        return self.page_type in (PageType.LANDING, PageType.HOMEPAGE)


@dataclass(frozen=True)
class InternalLink:
    """A same-origin link discovered in page HTML."""

    url: str
    path: str
    text: str = ""


# ---------------------------------------------------------------------------
# Signal bundles
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LandingPageSignals:
    landing_page_count: int = 0
    has_dedicated_landing_pages: bool = False
    landing_page_urls: list[str] = field(default_factory=list)
    has_offer_clarity: bool = False
    has_lead_capture_form: bool = False


@dataclass(frozen=True)
class DiscoveredCta:
    """A CTA candidate found on a page."""

    text: str
    cta_type: CtaType
    page_url: str
    is_primary: bool = False


@dataclass(frozen=True)
class CtaSignals:
    cta_count: int = 0
    primary_cta: str | None = None
    cta_types: list[CtaType] = field(default_factory=list)
    cta_clarity_score: int = 50
    has_competing_ctas: bool = False


@dataclass(frozen=True)
class TrackingSignals:
    has_utm_tracking: bool = False
    has_conversion_tracking: bool = False
    has_analytics: bool = False
    has_retargeting_pixels: bool = False


@dataclass(frozen=True)
class TrackingTech:
    """Presence of one tracking vendor across the crawled site."""

    name: str
    tech_type: str  # analytics, tag_manager, retargeting, conversion
    detected: bool


@dataclass(frozen=True)
class AdScentSignals:
    has_ad_landing_patterns: bool = False
    message_consistency: MessageConsistency = MessageConsistency.UNKNOWN


# ---------------------------------------------------------------------------
# Analytics and confidence
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AnalyticsSnapshot:
    """Normalized traffic and conversion data for the lookback window.

    ``conversion_rate`` and ``paid_share`` are fractions, not percentages.
    ``traffic_mix`` shares are computed per channel and need not sum to 1.
    """

    traffic_mix: dict[str, float] = field(default_factory=dict)
    top_channels: list[str] = field(default_factory=list)
    conversion_rate: float | None = None
    paid_share: float | None = None
    session_volume: int | None = None
    total_conversions: int = 0


@dataclass(frozen=True)
class DataConfidence:
    score: int
    level: ConfidenceLevel
    reason: str


@dataclass(frozen=True)
class DemandSignals:
    """Everything the scoring engine reads about the site."""

    landing_pages: LandingPageSignals
    ctas: CtaSignals
    tracking: TrackingSignals
    ad_scent: AdScentSignals
    has_paid_traffic: bool = False
    has_retargeting_signals: bool = False
    has_dedicated_landing_pages: bool = False
    has_clear_primary_cta: bool = False
    has_lead_capture: bool = False
    utm_usage_level: UtmUsageLevel = UtmUsageLevel.NONE
    conversion_events_implemented: bool = False
    remarketing_infra_likely: bool = False


# ---------------------------------------------------------------------------
# Scoring output
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Issue:
    """A problem flagged while scoring a dimension."""

    id: str
    category: str
    severity: Severity
    title: str
    description: str


@dataclass
class Evidence:
    found: list[str] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)
    data_points: dict[str, str | int | float | bool] = field(default_factory=dict)


@dataclass(frozen=True)
class Dimension:
    key: DimensionKey
    label: str
    score: int
    status: DimensionStatus
    summary: str
    issues: list[Issue] = field(default_factory=list)
    evidence: Evidence = field(default_factory=Evidence)


@dataclass(frozen=True)
class ScoringOutput:
    dimensions: list[Dimension]
    overall_score: int
    maturity_stage: MaturityStage
    issues: list[Issue] = field(default_factory=list)

    def dimension(self, key: DimensionKey) -> Dimension:
        """Return the dimension with the given key."""
        for dim in self.dimensions:
            if dim.key == key:
                return dim
        raise KeyError(key.value)


@dataclass(frozen=True)
class QuickWin:
    id: str
    category: str
    action: str
    expected_impact: Impact
    effort_level: Effort


@dataclass(frozen=True)
class Project:
    id: str
    category: str
    title: str
    description: str
    impact: Impact
    time_horizon: str


# ---------------------------------------------------------------------------
# Findings and report
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AnalyzedPage:
    """Per-page summary surfaced in the findings."""

    url: str
    title: str | None
    page_type: PageType
    has_form: bool
    has_cta: bool


@dataclass(frozen=True)
class LandingPageInsights:
    total_pages: int
    dedicated_landing_pages: int
    pages_with_forms: int
    pages_with_clear_cta: int
    urls: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class ChannelShare:
    name: str
    share: float


@dataclass(frozen=True)
class ChannelInsights:
    top_channels: list[ChannelShare]
    paid_share: float
    organic_share: float
    has_multi_channel: bool


@dataclass
class DemandLabFindings:
    """Evidence roll-up for report views."""

    pages_analyzed: list[AnalyzedPage] = field(default_factory=list)
    ctas_found: list[DiscoveredCta] = field(default_factory=list)
    tracking_detected: list[TrackingTech] = field(default_factory=list)
    landing_page_insights: LandingPageInsights | None = None
    channel_insights: ChannelInsights | None = None


@dataclass
class DemandLabReport:
    """Complete Demand Lab report for one website."""

    base_url: str
    company_type: CompanyType
    run_started: datetime
    run_completed: datetime | None = None
    signals: DemandSignals | None = None
    analytics_snapshot: AnalyticsSnapshot | None = None
    data_confidence: DataConfidence | None = None
    scoring: ScoringOutput | None = None
    narrative_summary: str = ""
    quick_wins: list[QuickWin] = field(default_factory=list)
    projects: list[Project] = field(default_factory=list)
    findings: DemandLabFindings = field(default_factory=DemandLabFindings)
    errors: list[str] = field(default_factory=list)
