"""Main orchestrator that coordinates crawling, analytics, scoring and synthesis."""

import asyncio
from datetime import datetime
from typing import Callable, TypeVar

import structlog

from .analytics import AnalyticsSnapshotAdapter
from .analyzers import AdScentAnalyzer, CtaAnalyzer, LandingPageAnalyzer, TrackingAnalyzer
from .confidence import compute_data_confidence
from .crawler import SiteCrawler
from .models import (
    AdScentSignals,
    AnalyticsSnapshot,
    AnalyzedPage,
    CompanyType,
    CrawledPage,
    CtaSignals,
    DemandLabFindings,
    DemandLabReport,
    LandingPageInsights,
    LandingPageSignals,
    TrackingSignals,
)
from .scoring import build_narrative, build_projects, build_quick_wins, score_demand
from .signals import build_channel_insights, build_demand_signals, normalize_company_type
from .storage import StorageManager

logger = structlog.get_logger()

T = TypeVar("T")


class DemandLabOrchestrator:
    """Runs the Demand Lab pipeline for one website.

    The crawl and the analytics fetch run concurrently. Signal extraction
    starts once the crawl has finished, and scoring once both are done.
    Analyzer contributions to the findings are merged here after extraction
    rather than accumulated in shared state.
    """

    def __init__(
        self,
        url: str,
        company_type: str | CompanyType | None = None,
        workspace_id: str | None = None,
        analytics_snapshot: AnalyticsSnapshot | None = None,
        crawler: SiteCrawler | None = None,
        analytics_adapter: AnalyticsSnapshotAdapter | None = None,
        storage: StorageManager | None = None,
    ):
        self.url = url
        self.company_type = normalize_company_type(company_type)
        self.workspace_id = workspace_id
        self.storage = storage

        self.crawler = crawler or SiteCrawler(url)
        self.analytics_adapter = analytics_adapter or AnalyticsSnapshotAdapter()
        self._provided_snapshot = analytics_snapshot

        self.landing_page_analyzer = LandingPageAnalyzer()
        self.cta_analyzer = CtaAnalyzer()
        self.tracking_analyzer = TrackingAnalyzer()
        self.ad_scent_analyzer = AdScentAnalyzer()

        self.crawled_pages: list[CrawledPage] = []
        self.report: DemandLabReport | None = None

    async def run(self) -> DemandLabReport:
        """Run the complete pipeline and return the report."""
        logger.info("Starting Demand Lab run", url=self.url, company_type=self.company_type.value)

        self.report = DemandLabReport(
            base_url=self.url,
            company_type=self.company_type,
            run_started=datetime.now(),
        )
        report = self.report

        # Phase 1: crawl and analytics, concurrently
        logger.info("Phase 1: Crawling site and fetching analytics")
        self.crawled_pages, snapshot = await asyncio.gather(
            self.crawler.crawl(),
            self._fetch_snapshot(),
        )
        pages = self.crawled_pages
        report.analytics_snapshot = snapshot

        # Phase 2: signal extraction
        logger.info("Phase 2: Extracting signals", pages=len(pages))
        landing_pages = self._run_analyzer(
            "landing page", lambda: self.landing_page_analyzer.analyze(pages), LandingPageSignals
        )
        ctas = self._run_analyzer("CTA", lambda: self.cta_analyzer.analyze(pages), CtaSignals)
        tracking = self._run_analyzer(
            "tracking", lambda: self.tracking_analyzer.analyze(pages), TrackingSignals
        )
        ad_scent = self._run_analyzer(
            "ad scent", lambda: self.ad_scent_analyzer.analyze(pages), AdScentSignals
        )

        signals = build_demand_signals(pages, landing_pages, ctas, tracking, ad_scent, snapshot)
        report.signals = signals
        report.data_confidence = compute_data_confidence(snapshot, len(pages))
        report.findings = self._build_findings(pages, landing_pages, snapshot)

        # Phase 3: scoring
        logger.info("Phase 3: Scoring demand dimensions")
        report.scoring = score_demand(signals, snapshot, report.data_confidence, self.company_type)

        # Phase 4: synthesis
        logger.info("Phase 4: Building narrative and recommendations")
        report.narrative_summary = build_narrative(
            report.scoring, report.data_confidence, self.company_type
        )
        report.quick_wins = build_quick_wins(report.scoring)
        report.projects = build_projects(report.scoring)

        report.run_completed = datetime.now()
        logger.info(
            "Demand Lab run completed",
            overall_score=report.scoring.overall_score,
            maturity_stage=report.scoring.maturity_stage.value,
            confidence=report.data_confidence.level.value,
            issues=len(report.scoring.issues),
        )

        if self.storage:
            await self.storage.save_report(report)

        return report

    async def _fetch_snapshot(self) -> AnalyticsSnapshot | None:
        """Fetch analytics, treating any adapter failure as missing data."""
        if self._provided_snapshot is not None:
            logger.info("Using provided analytics snapshot")
            return self._provided_snapshot
        try:
            return await self.analytics_adapter.get_snapshot(self.workspace_id)
        except Exception as e:
            logger.error("Analytics snapshot failed", workspace_id=self.workspace_id, error=str(e))
            self.report.errors.append(f"Analytics error: {str(e)}")
            return None

    def _run_analyzer(self, name: str, analyze: Callable[[], T], default: Callable[[], T]) -> T:
        """Run one analyzer, falling back to empty signals if it fails."""
        try:
            return analyze()
        except Exception as e:
            logger.error("Analyzer failed", analyzer=name, error=str(e))
            self.report.errors.append(f"{name} analysis error: {str(e)}")
            return default()

    def _build_findings(
        self,
        pages: list[CrawledPage],
        landing_pages: LandingPageSignals,
        snapshot: AnalyticsSnapshot | None,
    ) -> DemandLabFindings:
        """Merge per-page summaries and analyzer contributions."""
        ctas_found = self._run_analyzer("CTA discovery", lambda: self.cta_analyzer.discover(pages), list)
        tracking_detected = self._run_analyzer(
            "tracking discovery", lambda: self.tracking_analyzer.detect_technologies(pages), list
        )

        return DemandLabFindings(
            pages_analyzed=[
                AnalyzedPage(
                    url=p.url,
                    title=p.title,
                    page_type=p.page_type,
                    has_form=p.has_form,
                    has_cta=p.has_cta,
                )
                for p in pages
            ],
            ctas_found=ctas_found,
            tracking_detected=tracking_detected,
            landing_page_insights=LandingPageInsights(
                total_pages=len(pages),
                dedicated_landing_pages=len(landing_pages.landing_page_urls),
                pages_with_forms=sum(1 for p in pages if p.has_form),
                pages_with_clear_cta=sum(1 for p in pages if p.has_cta),
                urls=list(landing_pages.landing_page_urls),
            ),
            channel_insights=build_channel_insights(snapshot) if snapshot else None,
        )
