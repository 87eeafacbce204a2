from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable

from resume_insights.analytics.repository import AnalyticsRepository
from resume_insights.core.scoring import get_scoring_value
from resume_insights.schemas import (
    AnalyticsSnapshot,
    ResumeSnapshotInput,
    ScorePoint,
    ScoreProgression,
    SnapshotDraft,
    Trend,
)

from .ats_scorer import ATSScorer
from .keywords import KeywordAnalyzer
from .numeric import clamp_score, round_half_up, round_int

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def change_percent(first: float, last: float) -> float:
    if first == 0:
        return 0.0
    return round_half_up(((last - first) / first) * 10000) / 100


def classify_trend(change: float) -> Trend:
    threshold = float(get_scoring_value("snapshots.trend_threshold_percent", 5))
    if change > threshold:
        return "improving"
    if change < -threshold:
        return "declining"
    return "stable"


class SnapshotTracker:
    def __init__(
        self,
        repository: AnalyticsRepository,
        ats_scorer: ATSScorer,
        keyword_analyzer: KeywordAnalyzer,
        *,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self.repository = repository
        self.ats_scorer = ats_scorer
        self.keyword_analyzer = keyword_analyzer
        self.clock = clock

    async def save_snapshot(
        self,
        resume_id: str,
        resume: ResumeSnapshotInput,
        industry: str,
    ) -> AnalyticsSnapshot:
        ats = self.ats_scorer.calculate_score(resume)
        keywords = self.keyword_analyzer.get_suggestions(resume, industry)

        top_limit = int(get_scoring_value("snapshots.top_keywords", 10))
        missing_limit = int(get_scoring_value("snapshots.missing_keywords", 10))
        draft = SnapshotDraft(
            resume_id=resume_id,
            ats_score=ats.score,
            keyword_score=clamp_score(round_int(100 - keywords.keyword_density)),
            completeness_score=ats.breakdown.completeness,
            top_keywords=[hit.keyword for hit in keywords.existing_keywords[:top_limit]],
            missing_keywords=keywords.missing_keywords[:missing_limit],
            created_at=self.clock(),
        )
        snapshot = await self.repository.create_analytics_snapshot(draft)
        logger.info(
            "analytics_snapshot_saved resume_id=%s snapshot_id=%s ats_score=%s",
            resume_id,
            snapshot.id,
            snapshot.ats_score,
        )
        return snapshot

    async def get_history(self, resume_id: str, limit: int = 10) -> list[AnalyticsSnapshot]:
        return await self.repository.find_analytics_snapshots(resume_id, limit=limit, order_by="desc")

    async def get_score_progression(self, resume_id: str) -> ScoreProgression:
        snapshots = await self.repository.find_analytics_score_progression(resume_id)
        points = [ScorePoint(date=item.created_at, score=item.ats_score) for item in snapshots]

        if len(snapshots) < 2:
            return ScoreProgression(snapshots=points, trend="stable", change_percent=0.0)

        change = change_percent(snapshots[0].ats_score, snapshots[-1].ats_score)
        return ScoreProgression(snapshots=points, trend=classify_trend(change), change_percent=change)
