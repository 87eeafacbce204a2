from __future__ import annotations

import asyncio
import logging
from datetime import datetime

from resume_insights.analytics.repository import AnalyticsRepository
from resume_insights.core.config import settings
from resume_insights.core.scoring import get_scoring_value
from resume_insights.schemas import (
    AnalyticsDashboard,
    AnalyticsSnapshot,
    ATSScoreResult,
    DashboardOverview,
    DashboardRecommendation,
    IndustryBenchmark,
    IndustryPosition,
    JobMatchResult,
    KeywordHealth,
    KeywordSuggestions,
    ResumeSnapshotInput,
    ScoreProgression,
    ViewPeriod,
    ViewStats,
)

from .ats_scorer import ATSScorer
from .benchmark import Benchmarker
from .cache import TTLCache
from .keywords import INDUSTRY_KEYWORDS, KeywordAnalyzer
from .numeric import clamp_score, round_int
from .snapshots import SnapshotTracker
from .view_tracker import ViewTracker

logger = logging.getLogger(__name__)


class InsightError(RuntimeError):
    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.status_code = status_code


class ResumeNotFoundError(InsightError):
    def __init__(self, resume_id: str):
        super().__init__("Resume not found", status_code=404)
        self.resume_id = resume_id


class ResourceOwnershipError(InsightError):
    def __init__(self, resume_id: str):
        super().__init__("Not authorized to access this resume", status_code=403)
        self.resume_id = resume_id


class InsightOrchestrator:
    """Entry point used by the API layer.

    Every user-facing operation checks that the resume exists and belongs to
    the caller before anything is computed. Dashboards are cached per
    (resume, user) for ``dashboard_ttl_seconds``; a cached dashboard is
    returned as-is until it expires, whatever happened to the data since.
    """

    def __init__(
        self,
        repository: AnalyticsRepository,
        *,
        view_tracker: ViewTracker | None = None,
        ats_scorer: ATSScorer | None = None,
        keyword_analyzer: KeywordAnalyzer | None = None,
        benchmarker: Benchmarker | None = None,
        snapshot_tracker: SnapshotTracker | None = None,
        dashboard_cache: TTLCache[AnalyticsDashboard] | None = None,
        default_industry: str | None = None,
    ) -> None:
        self.repository = repository
        self.ats_scorer = ats_scorer or ATSScorer()
        self.keyword_analyzer = keyword_analyzer or KeywordAnalyzer()
        self.view_tracker = view_tracker or ViewTracker(repository)
        self.benchmarker = benchmarker or Benchmarker(repository, self.ats_scorer, self.keyword_analyzer)
        self.snapshot_tracker = snapshot_tracker or SnapshotTracker(
            repository, self.ats_scorer, self.keyword_analyzer
        )
        if dashboard_cache is None:
            dashboard_cache = TTLCache(settings.dashboard_cache_ttl_seconds)
        self.dashboard_cache = dashboard_cache
        self.default_industry = default_industry or settings.default_industry

    async def track_view(
        self,
        resume_id: str,
        client_address: str,
        *,
        user_agent: str | None = None,
        referer: str | None = None,
        country: str | None = None,
        city: str | None = None,
    ) -> None:
        # Public endpoint: the resume must exist, but any visitor may view it.
        if await self.repository.find_resume_by_id(resume_id) is None:
            raise ResumeNotFoundError(resume_id)
        await self.view_tracker.record_view(
            resume_id,
            client_address,
            user_agent=user_agent,
            referer=referer,
            country=country,
            city=city,
        )

    async def get_view_stats(
        self,
        resume_id: str,
        user_id: str,
        period: ViewPeriod = "month",
        *,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
    ) -> ViewStats:
        await self._verify_ownership(resume_id, user_id)
        return await self.view_tracker.get_stats(resume_id, period, start_date=start_date, end_date=end_date)

    async def calculate_ats_score(self, resume_id: str, user_id: str) -> ATSScoreResult:
        resume = await self._verify_ownership(resume_id, user_id)
        return self.ats_scorer.calculate_score(resume)

    async def get_keyword_suggestions(
        self,
        resume_id: str,
        user_id: str,
        industry: str | None = None,
    ) -> KeywordSuggestions:
        resume = await self._verify_ownership(resume_id, user_id)
        return self.keyword_analyzer.get_suggestions(resume, self._resolve_industry(resume, industry))

    async def match_job_description(self, resume_id: str, user_id: str, job_description: str) -> JobMatchResult:
        resume = await self._verify_ownership(resume_id, user_id)
        return self.keyword_analyzer.match_job_description(resume, job_description)

    async def get_benchmark(
        self,
        resume_id: str,
        user_id: str,
        industry: str | None = None,
    ) -> IndustryBenchmark:
        resume = await self._verify_ownership(resume_id, user_id)
        return await self.benchmarker.get_benchmark(resume, self._resolve_industry(resume, industry))

    async def get_dashboard(self, resume_id: str, user_id: str) -> AnalyticsDashboard:
        cache_key = f"{resume_id}:{user_id}"
        cached = self.dashboard_cache.get(cache_key)
        if cached is not None:
            logger.debug("dashboard_cache_hit resume_id=%s", resume_id)
            return cached

        resume = await self._verify_ownership(resume_id, user_id)
        total_views, unique_visitors, month_stats, progression = await asyncio.gather(
            self.view_tracker.get_total_views(resume_id),
            self.view_tracker.get_unique_visitors(resume_id),
            self.view_tracker.get_stats(resume_id, "month"),
            self.snapshot_tracker.get_score_progression(resume_id),
        )

        ats = self.ats_scorer.calculate_score(resume)
        keywords = self.keyword_analyzer.get_suggestions(resume, self._resolve_industry(resume, None))
        percentile = int(get_scoring_value("dashboard.industry_percentile", 50))

        dashboard = AnalyticsDashboard(
            resume_id=resume_id,
            overview=DashboardOverview(
                total_views=total_views,
                unique_visitors=unique_visitors,
                ats_score=ats.score,
                keyword_score=clamp_score(round_int(100 - keywords.keyword_density)),
                industry_percentile=percentile,
            ),
            view_trend=month_stats.views_by_day,
            top_sources=month_stats.top_sources,
            keyword_health=KeywordHealth(
                score=keywords.keyword_density,
                top_keywords=[
                    hit.keyword
                    for hit in keywords.existing_keywords[: int(get_scoring_value("dashboard.top_keywords", 5))]
                ],
                missing_critical=keywords.missing_keywords[: int(get_scoring_value("dashboard.missing_critical", 3))],
            ),
            industry_position=IndustryPosition(percentile=percentile, trend=progression.trend),
            recommendations=self._dashboard_recommendations(resume),
        )

        self.dashboard_cache.set(cache_key, dashboard)
        return dashboard

    async def save_snapshot(self, resume_id: str, user_id: str, industry: str | None = None) -> AnalyticsSnapshot:
        resume = await self._verify_ownership(resume_id, user_id)
        return await self.snapshot_tracker.save_snapshot(resume_id, resume, self._resolve_industry(resume, industry))

    async def get_history(self, resume_id: str, user_id: str, limit: int | None = None) -> list[AnalyticsSnapshot]:
        await self._verify_ownership(resume_id, user_id)
        return await self.snapshot_tracker.get_history(resume_id, limit or settings.history_default_limit)

    async def get_score_progression(self, resume_id: str, user_id: str) -> ScoreProgression:
        await self._verify_ownership(resume_id, user_id)
        return await self.snapshot_tracker.get_score_progression(resume_id)

    async def _verify_ownership(self, resume_id: str, user_id: str) -> ResumeSnapshotInput:
        resume = await self.repository.find_resume_by_id(resume_id)
        if resume is None:
            raise ResumeNotFoundError(resume_id)
        if resume.user_id != user_id:
            logger.warning("resume_access_denied resume_id=%s", resume_id)
            raise ResourceOwnershipError(resume_id)
        return resume

    def _resolve_industry(self, resume: ResumeSnapshotInput, requested: str | None) -> str:
        for candidate in (requested, resume.industry, self.default_industry):
            if candidate and candidate in INDUSTRY_KEYWORDS:
                return candidate
        return "other"

    @staticmethod
    def _dashboard_recommendations(resume: ResumeSnapshotInput) -> list[DashboardRecommendation]:
        recommendations: list[DashboardRecommendation] = []
        if not resume.skills:
            recommendations.append(
                DashboardRecommendation(
                    type="add_skills",
                    priority="high",
                    message="Add relevant skills to improve visibility",
                )
            )
        if not resume.experiences:
            recommendations.append(
                DashboardRecommendation(
                    type="add_experience",
                    priority="high",
                    message="Add work experience to strengthen your profile",
                )
            )
        if len(resume.summary or "") < int(get_scoring_value("dashboard.min_summary_chars", 100)):
            recommendations.append(
                DashboardRecommendation(
                    type="improve_summary",
                    priority="medium",
                    message="Expand your professional summary with key achievements",
                )
            )
        return recommendations
