from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable

from resume_insights.analytics.repository import AnalyticsRepository
from resume_insights.core.scoring import get_scoring_value
from resume_insights.schemas import (
    BenchmarkRecommendation,
    ExperienceEntry,
    IndustryBenchmark,
    IndustryComparison,
    ResumeSnapshotInput,
    TopPerformersProfile,
)

from .ats_scorer import ATSScorer
from .keywords import KeywordAnalyzer
from .numeric import average, clamp_score, round_int

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def experience_years(experiences: list[ExperienceEntry], now: datetime) -> int:
    """Whole years of experience, counted in calendar months.

    Entries without a start date are ignored; a missing end date means the
    position is still held.
    """
    total_months = 0
    for exp in experiences:
        if exp.start_date is None:
            continue
        start = _as_utc(exp.start_date)
        end = _as_utc(exp.end_date) if exp.end_date is not None else _as_utc(now)
        total_months += (end.year - start.year) * 12 + (end.month - start.month)
    return round_int(total_months / 12)


def percentile_rank(value: float, population: list[float], default: int = 50) -> int:
    if not population:
        return default
    below = sum(1 for item in population if item < value)
    return clamp_score(round_int(below / len(population) * 100))


class Benchmarker:
    """Compares one resume against the public resumes of its industry.

    The sampled resumes are scored with the same ATSScorer as the caller, so
    both the average ATS score and the percentile come from real scores.
    """

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

    async def get_benchmark(self, resume: ResumeSnapshotInput, industry: str) -> IndustryBenchmark:
        sample = await self.repository.find_public_resumes_by_industry(industry)
        population = [item for item in sample if item.id != resume.id]
        now = self.clock()

        your_score = self.ats_scorer.calculate_score(resume).score
        your_years = experience_years(resume.experiences, now)

        scored = [
            (self.ats_scorer.calculate_score(item).score, item)
            for item in population
        ]
        population_scores = [score for score, _ in scored]

        if population:
            avg_ats = average(population_scores)
            avg_views = round_int(average([item.profile_views for item in population]))
            avg_skills = round_int(average([len(item.skills) for item in population]))
            avg_years = round_int(average([experience_years(item.experiences, now) for item in population]))
        else:
            avg_ats = float(get_scoring_value("benchmark.fallbacks.avg_ats_score", 65))
            avg_views = int(get_scoring_value("benchmark.fallbacks.avg_views", 50))
            avg_skills = int(get_scoring_value("benchmark.fallbacks.avg_skills_count", 8))
            avg_years = int(get_scoring_value("benchmark.fallbacks.avg_experience_years", 5))

        percentile = percentile_rank(
            your_score,
            population_scores,
            default=int(get_scoring_value("benchmark.empty_sample_percentile", 50)),
        )
        logger.info(
            "benchmark_computed industry=%s sample=%s percentile=%s",
            industry,
            len(population),
            percentile,
        )

        return IndustryBenchmark(
            percentile=percentile,
            total_in_industry=len(population),
            comparison=IndustryComparison(
                avg_ats_score=clamp_score(round_int(avg_ats)),
                your_ats_score=your_score,
                avg_views=avg_views,
                your_views=resume.profile_views,
                avg_skills_count=avg_skills,
                your_skills_count=len(resume.skills),
                avg_experience_years=avg_years,
                your_experience_years=your_years,
            ),
            top_performers=self._top_performers(scored, industry, now),
            recommendations=self._recommendations(your_score, avg_ats),
        )

    def _top_performers(
        self,
        scored: list[tuple[int, ResumeSnapshotInput]],
        industry: str,
        now: datetime,
    ) -> TopPerformersProfile:
        common_skills = self.keyword_analyzer.get_industry_keywords(industry)[
            : int(get_scoring_value("benchmark.top_performers.common_skills", 5))
        ]
        if not scored:
            return TopPerformersProfile(
                common_skills=common_skills,
                avg_experience_years=int(get_scoring_value("benchmark.top_performers.avg_experience_years", 7)),
                avg_skills_count=int(get_scoring_value("benchmark.top_performers.avg_skills_count", 12)),
                common_certifications=[],
            )

        share = float(get_scoring_value("benchmark.top_performers.top_share", 0.25))
        ranked = sorted(scored, key=lambda pair: pair[0], reverse=True)
        top = [item for _, item in ranked[: max(1, int(len(ranked) * share))]]
        return TopPerformersProfile(
            common_skills=common_skills,
            avg_experience_years=round_int(average([experience_years(item.experiences, now) for item in top])),
            avg_skills_count=round_int(average([len(item.skills) for item in top])),
            common_certifications=[],
        )

    @staticmethod
    def _recommendations(your_score: int, avg_score: float) -> list[BenchmarkRecommendation]:
        recommendations: list[BenchmarkRecommendation] = []
        if your_score < avg_score:
            recommendations.append(
                BenchmarkRecommendation(
                    type="keyword",
                    priority="high",
                    message="Your ATS score is below industry average",
                    action="Optimize keywords and improve resume structure",
                )
            )
        recommendations.append(
            BenchmarkRecommendation(
                type="skill",
                priority="medium",
                message="Add trending skills in your industry",
                action="Research top skills in job postings",
            )
        )
        return recommendations
