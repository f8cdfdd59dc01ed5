"""Narrative, quick wins and strategic projects derived from scoring output."""

from dataclasses import dataclass

from ..models import (
    CompanyType,
    ConfidenceLevel,
    DataConfidence,
    DimensionKey,
    DimensionStatus,
    Effort,
    Impact,
    MaturityStage,
    Project,
    QuickWin,
    ScoringOutput,
    Severity,
)
from .engine import DIMENSION_LABELS

QUICK_WIN_THRESHOLD = 60
MAX_QUICK_WINS = 5
MAX_PROJECTS = 5
MAX_SECONDARY_PROJECTS = 2

IMPACT_ORDER = {Impact.HIGH: 0, Impact.MEDIUM: 1, Impact.LOW: 2}


@dataclass(frozen=True)
class _QuickWinRule:
    dimension: DimensionKey
    action: str
    impact: Impact
    effort: Effort


QUICK_WIN_RULES = (
    _QuickWinRule(
        DimensionKey.CHANNEL_MIX,
        "Launch a small always-on retargeting campaign for recent site visitors.",
        Impact.MEDIUM,
        Effort.MEDIUM,
    ),
    _QuickWinRule(
        DimensionKey.MEASUREMENT,
        "Configure conversion events for demo, contact and signup form submissions.",
        Impact.HIGH,
        Effort.LOW,
    ),
    _QuickWinRule(
        DimensionKey.MEASUREMENT,
        "Standardize UTM parameters on every campaign and email link.",
        Impact.MEDIUM,
        Effort.LOW,
    ),
    _QuickWinRule(
        DimensionKey.FUNNEL,
        "Add a short lead capture form to the highest-intent pages.",
        Impact.HIGH,
        Effort.MEDIUM,
    ),
    _QuickWinRule(
        DimensionKey.TARGETING,
        "Split campaign audiences into prospecting and retargeting segments.",
        Impact.LOW,
        Effort.MEDIUM,
    ),
    _QuickWinRule(
        DimensionKey.CREATIVE,
        "Make one primary CTA prominent above the fold on key pages.",
        Impact.HIGH,
        Effort.LOW,
    ),
)

# (title, description, impact, time_horizon)
PROJECT_TEMPLATES = {
    DimensionKey.CHANNEL_MIX: (
        "Build a balanced paid and organic channel mix",
        "Stand up paid search or social programs sized to the business model, "
        "with retargeting layered across channels.",
        Impact.HIGH,
        "60-90 days",
    ),
    DimensionKey.TARGETING: (
        "Restructure campaigns around audiences and dedicated landing pages",
        "Segment campaigns by audience and intent, and route each segment to a "
        "dedicated landing page with matching messaging.",
        Impact.HIGH,
        "30-60 days",
    ),
    DimensionKey.CREATIVE: (
        "Develop a focused messaging and CTA system",
        "Define the core offer, one primary CTA per page and a testable set of "
        "headline and creative variants.",
        Impact.MEDIUM,
        "30-60 days",
    ),
    DimensionKey.FUNNEL: (
        "Design an end-to-end conversion funnel",
        "Map the path from first visit to qualified lead, add capture points and "
        "nurture sequences for visitors not ready to convert.",
        Impact.HIGH,
        "60-90 days",
    ),
    DimensionKey.MEASUREMENT: (
        "Implement a demand measurement framework",
        "Define conversion events, enforce UTM conventions and build a channel "
        "performance dashboard to steer budget.",
        Impact.HIGH,
        "30-60 days",
    ),
}

MATURITY_PROJECTS = {
    MaturityStage.UNPROVEN: (
        "Establish demand generation foundations",
        "Put basic tracking, a primary conversion path and one paid acquisition "
        "channel in place before scaling spend.",
        Impact.HIGH,
        "90 days",
    ),
    MaturityStage.EMERGING: (
        "Systematize what is working",
        "Turn the channels and offers that already convert into repeatable, "
        "measured programs with regular testing.",
        Impact.MEDIUM,
        "60-90 days",
    ),
    MaturityStage.SCALING: (
        "Scale proven programs efficiently",
        "Expand budget on the best-performing channels while tightening "
        "attribution and conversion-rate optimization.",
        Impact.MEDIUM,
        "90+ days",
    ),
}

STAGE_DESCRIPTIONS = {
    MaturityStage.UNPROVEN: "demand generation is not yet a reliable growth engine",
    MaturityStage.EMERGING: "demand generation is taking shape but has clear gaps",
    MaturityStage.SCALING: "demand generation is working and ready to scale",
    MaturityStage.ESTABLISHED: "demand generation is a mature, well-instrumented engine",
}

COMPANY_TYPE_LABELS = {
    CompanyType.B2B_SERVICES: "B2B services",
    CompanyType.LOCAL_SERVICE: "local service",
    CompanyType.ECOMMERCE: "ecommerce",
    CompanyType.SAAS: "SaaS",
    CompanyType.OTHER: "general",
    CompanyType.UNKNOWN: "general",
}


def build_quick_wins(scoring: ScoringOutput) -> list[QuickWin]:
    """
    Derive quick wins from dimensions scoring below the threshold.

    Wins are sorted by impact (stable within a level) and truncated after
    sorting, so lower-impact wins drop first. IDs follow the final order.
    """
    scores = {d.key: d.score for d in scoring.dimensions}

    rules = [r for r in QUICK_WIN_RULES if scores.get(r.dimension, 100) < QUICK_WIN_THRESHOLD]
    rules.sort(key=lambda r: IMPACT_ORDER[r.impact])

    return [
        QuickWin(
            id=f"quick-win-{idx}",
            category=DIMENSION_LABELS[rule.dimension],
            action=rule.action,
            expected_impact=rule.impact,
            effort_level=rule.effort,
        )
        for idx, rule in enumerate(rules[:MAX_QUICK_WINS], start=1)
    ]


def build_projects(scoring: ScoringOutput) -> list[Project]:
    """
    Derive strategic projects: weakest dimension, maturity stage, then
    up to two other weak dimensions, in that order.
    """
    projects: list[Project] = []

    def add(category: str, template: tuple[str, str, Impact, str]) -> None:
        title, description, impact, horizon = template
        projects.append(
            Project(
                id=f"project-{len(projects) + 1}",
                category=category,
                title=title,
                description=description,
                impact=impact,
                time_horizon=horizon,
            )
        )

    weakest = min(scoring.dimensions, key=lambda d: d.score, default=None)
    if weakest is not None:
        add(weakest.label, PROJECT_TEMPLATES[weakest.key])

    if scoring.maturity_stage in MATURITY_PROJECTS:
        add("Demand Maturity", MATURITY_PROJECTS[scoring.maturity_stage])

    secondary = [
        d for d in scoring.dimensions
        if d.status == DimensionStatus.WEAK and (weakest is None or d.key != weakest.key)
    ]
    for dim in secondary[:MAX_SECONDARY_PROJECTS]:
        add(dim.label, PROJECT_TEMPLATES[dim.key])

    return projects[:MAX_PROJECTS]


def build_narrative(
    scoring: ScoringOutput,
    confidence: DataConfidence,
    company_type: CompanyType,
) -> str:
    """Write a short prose summary of the scoring output."""
    stage = scoring.maturity_stage
    paragraphs = [
        f"Overall demand score is {scoring.overall_score}/100 ({stage.value}): "
        f"{STAGE_DESCRIPTIONS[stage]} for a {COMPANY_TYPE_LABELS[company_type]} business."
    ]

    if scoring.dimensions:
        strongest = max(scoring.dimensions, key=lambda d: d.score)
        weakest = min(scoring.dimensions, key=lambda d: d.score)
        paragraphs.append(
            f"The strongest area is {strongest.label} ({strongest.score}/100). "
            f"The weakest is {weakest.label} ({weakest.score}/100): {weakest.summary}"
        )

    high_issues = [i for i in scoring.issues if i.severity == Severity.HIGH]
    if high_issues:
        titles = "; ".join(i.title for i in high_issues[:3])
        paragraphs.append(f"{len(high_issues)} high-severity issue(s) need attention, including: {titles}.")
    else:
        paragraphs.append("No high-severity issues were found.")

    if confidence.level == ConfidenceLevel.LOW:
        paragraphs.append(
            f"Data confidence is low ({confidence.score}/100), so scores are capped and "
            "should be read as directional. " + confidence.reason
        )

    return "\n\n".join(paragraphs)
