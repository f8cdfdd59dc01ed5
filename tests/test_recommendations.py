"""Tests for quick wins, strategic projects and the narrative summary."""

from demand_lab.models import (
    CompanyType,
    ConfidenceLevel,
    DataConfidence,
    Dimension,
    DimensionKey,
    Impact,
    Issue,
    MaturityStage,
    ScoringOutput,
    Severity,
)
from demand_lab.scoring import (
    DIMENSION_LABELS,
    build_narrative,
    build_projects,
    build_quick_wins,
    maturity_stage_for,
    status_from_score,
)


def _scoring(channel_mix=80, targeting=80, creative=80, funnel=80, measurement=80, issues=()):
    scores = {
        DimensionKey.CHANNEL_MIX: channel_mix,
        DimensionKey.TARGETING: targeting,
        DimensionKey.CREATIVE: creative,
        DimensionKey.FUNNEL: funnel,
        DimensionKey.MEASUREMENT: measurement,
    }
    dimensions = [
        Dimension(
            key=key,
            label=DIMENSION_LABELS[key],
            score=score,
            status=status_from_score(score),
            summary=f"{key.value} summary",
        )
        for key, score in scores.items()
    ]
    overall = round(sum(scores.values()) / len(scores))
    return ScoringOutput(
        dimensions=dimensions,
        overall_score=overall,
        maturity_stage=maturity_stage_for(overall),
        issues=list(issues),
    )


class TestQuickWins:
    """Test cases for build_quick_wins."""

    def test_no_wins_for_healthy_dimensions(self):
        assert build_quick_wins(_scoring()) == []

    def test_threshold_is_exclusive(self):
        assert build_quick_wins(_scoring(funnel=60)) == []
        assert len(build_quick_wins(_scoring(funnel=59))) == 1

    def test_sorted_by_impact_and_truncated(self):
        """When all rules fire, the low-impact win is the one dropped."""
        wins = build_quick_wins(_scoring(40, 40, 40, 40, 40))

        assert len(wins) == 5
        assert [w.expected_impact for w in wins] == [
            Impact.HIGH,
            Impact.HIGH,
            Impact.HIGH,
            Impact.MEDIUM,
            Impact.MEDIUM,
        ]
        assert [w.category for w in wins] == [
            DIMENSION_LABELS[DimensionKey.MEASUREMENT],
            DIMENSION_LABELS[DimensionKey.FUNNEL],
            DIMENSION_LABELS[DimensionKey.CREATIVE],
            DIMENSION_LABELS[DimensionKey.CHANNEL_MIX],
            DIMENSION_LABELS[DimensionKey.MEASUREMENT],
        ]
        assert wins[0].action.startswith("Configure conversion events")
        assert wins[4].action.startswith("Standardize UTM")
        assert [w.id for w in wins] == [f"quick-win-{i}" for i in range(1, 6)]
        assert DIMENSION_LABELS[DimensionKey.TARGETING] not in [w.category for w in wins]

    def test_measurement_produces_two_wins(self):
        wins = build_quick_wins(_scoring(measurement=30))

        assert [w.category for w in wins] == [DIMENSION_LABELS[DimensionKey.MEASUREMENT]] * 2
        assert [w.expected_impact for w in wins] == [Impact.HIGH, Impact.MEDIUM]

    def test_single_low_impact_win_is_kept(self):
        wins = build_quick_wins(_scoring(targeting=45))

        assert len(wins) == 1
        assert wins[0].expected_impact == Impact.LOW
        assert wins[0].id == "quick-win-1"

    def test_ids_follow_final_order(self):
        """IDs are assigned after sorting, so they run without gaps."""
        wins = build_quick_wins(_scoring(channel_mix=40, creative=40, targeting=40))

        assert [w.id for w in wins] == ["quick-win-1", "quick-win-2", "quick-win-3"]
        assert [w.expected_impact for w in wins] == [Impact.HIGH, Impact.MEDIUM, Impact.LOW]


class TestProjects:
    """Test cases for build_projects."""

    def test_weakest_then_maturity_then_secondary(self):
        scoring = _scoring(channel_mix=20, targeting=45, creative=30, funnel=70, measurement=80)
        projects = build_projects(scoring)

        assert scoring.maturity_stage == MaturityStage.UNPROVEN
        assert [p.category for p in projects] == [
            DIMENSION_LABELS[DimensionKey.CHANNEL_MIX],
            "Demand Maturity",
            DIMENSION_LABELS[DimensionKey.TARGETING],
            DIMENSION_LABELS[DimensionKey.CREATIVE],
        ]
        assert [p.id for p in projects] == ["project-1", "project-2", "project-3", "project-4"]
        assert projects[1].title == "Establish demand generation foundations"

    def test_secondary_projects_are_limited(self):
        projects = build_projects(_scoring(10, 20, 30, 40, 45))

        assert len(projects) == 4
        assert projects[0].category == DIMENSION_LABELS[DimensionKey.CHANNEL_MIX]

    def test_established_has_no_maturity_project(self):
        scoring = _scoring(90, 90, 85, 95, 90)
        projects = build_projects(scoring)

        assert scoring.maturity_stage == MaturityStage.ESTABLISHED
        assert len(projects) == 1
        assert projects[0].category == DIMENSION_LABELS[DimensionKey.CREATIVE]

    def test_ties_pick_first_dimension(self):
        projects = build_projects(_scoring(60, 60, 60, 60, 60))
        assert projects[0].category == DIMENSION_LABELS[DimensionKey.CHANNEL_MIX]
        assert projects[1].title == "Systematize what is working"


class TestNarrative:
    """Test cases for build_narrative."""

    def test_mentions_stage_and_extremes(self):
        scoring = _scoring(channel_mix=20, measurement=95)
        confidence = DataConfidence(score=80, level=ConfidenceLevel.HIGH, reason="ok")
        narrative = build_narrative(scoring, confidence, CompanyType.SAAS)

        assert f"{scoring.overall_score}/100" in narrative
        assert scoring.maturity_stage.value in narrative
        assert "SaaS" in narrative
        assert "Measurement & Optimization (95/100)" in narrative
        assert "Channel Mix & Budget (20/100)" in narrative
        assert "No high-severity issues" in narrative
        assert "Data confidence is low" not in narrative

    def test_lists_high_severity_issues_and_low_confidence(self):
        issue = Issue(
            id="demand-0",
            category="Funnel",
            severity=Severity.HIGH,
            title="No clear lead capture mechanism",
            description="",
        )
        scoring = _scoring(funnel=30, issues=[issue])
        confidence = DataConfidence(score=20, level=ConfidenceLevel.LOW, reason="No analytics snapshot available.")
        narrative = build_narrative(scoring, confidence, CompanyType.UNKNOWN)

        assert "1 high-severity issue(s)" in narrative
        assert "No clear lead capture mechanism" in narrative
        assert "Data confidence is low (20/100)" in narrative
        assert "No analytics snapshot available." in narrative
