from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

Industry = Literal[
    "software_engineering",
    "data_science",
    "devops",
    "product_management",
    "design",
    "marketing",
    "finance",
    "healthcare",
    "education",
    "other",
]
ViewPeriod = Literal["day", "week", "month", "year"]
Severity = Literal["low", "medium", "high"]
Trend = Literal["improving", "stable", "declining"]
ATSIssueType = Literal[
    "missing_contact",
    "short_summary",
    "missing_skills",
    "no_experience",
    "weak_action_verbs",
    "no_quantified_achievements",
]
KeywordWarningType = Literal["keyword_stuffing", "low_density"]
BenchmarkRecommendationType = Literal["skill", "experience", "certification", "keyword"]
DashboardRecommendationType = Literal["add_skills", "improve_summary", "add_experience"]


# View tracking


class ViewEvent(BaseModel):
    resume_id: str
    visitor_id: str
    user_agent: str | None = None
    referer: str | None = None
    country: str | None = None
    city: str | None = None
    source: str
    created_at: datetime


class DailyViewCount(BaseModel):
    date: str
    count: int = Field(ge=0)


class SourceCount(BaseModel):
    source: str | None = None
    count: int = Field(ge=0)


class SourceShare(BaseModel):
    source: str
    count: int = Field(ge=0)
    percentage: int = Field(ge=0, le=100)


class ViewStats(BaseModel):
    total_views: int = Field(ge=0)
    unique_visitors: int = Field(ge=0)
    views_by_day: list[DailyViewCount] = Field(default_factory=list)
    top_sources: list[SourceShare] = Field(default_factory=list)


# ATS scoring


class ATSScoreBreakdown(BaseModel):
    keywords: int = Field(ge=0, le=100)
    format: int = Field(ge=0, le=100)
    completeness: int = Field(ge=0, le=100)
    experience: int = Field(ge=0, le=100)


class ATSIssue(BaseModel):
    type: ATSIssueType
    severity: Severity
    message: str


class ATSScoreResult(BaseModel):
    score: int = Field(ge=0, le=100)
    breakdown: ATSScoreBreakdown
    issues: list[ATSIssue] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)


# Keyword analysis


class KeywordHit(BaseModel):
    keyword: str
    count: int = Field(ge=1)
    relevance: int = Field(ge=0, le=100)


class KeywordWarning(BaseModel):
    type: KeywordWarningType
    message: str
    affected_keywords: list[str] = Field(default_factory=list)


class KeywordSuggestions(BaseModel):
    existing_keywords: list[KeywordHit] = Field(default_factory=list)
    missing_keywords: list[str] = Field(default_factory=list)
    keyword_density: float = Field(ge=0.0)
    warnings: list[KeywordWarning] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)


class JobMatchResult(BaseModel):
    match_score: int = Field(ge=0, le=100)
    matched_keywords: list[str] = Field(default_factory=list)
    missing_keywords: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)


# Benchmarking


class IndustryComparison(BaseModel):
    avg_ats_score: int
    your_ats_score: int
    avg_views: int
    your_views: int
    avg_skills_count: int
    your_skills_count: int
    avg_experience_years: int
    your_experience_years: int


class TopPerformersProfile(BaseModel):
    common_skills: list[str] = Field(default_factory=list)
    avg_experience_years: int
    avg_skills_count: int
    common_certifications: list[str] = Field(default_factory=list)


class BenchmarkRecommendation(BaseModel):
    type: BenchmarkRecommendationType
    priority: Severity
    message: str
    action: str


class IndustryBenchmark(BaseModel):
    percentile: int = Field(ge=0, le=100)
    total_in_industry: int = Field(ge=0)
    comparison: IndustryComparison
    top_performers: TopPerformersProfile
    recommendations: list[BenchmarkRecommendation] = Field(default_factory=list, min_length=1)


# Snapshots


class SnapshotDraft(BaseModel):
    resume_id: str
    ats_score: int = Field(ge=0, le=100)
    keyword_score: int = Field(ge=0, le=100)
    completeness_score: int = Field(ge=0, le=100)
    industry_rank: int | None = None
    total_in_industry: int | None = None
    top_keywords: list[str] = Field(default_factory=list)
    missing_keywords: list[str] = Field(default_factory=list)
    created_at: datetime


class AnalyticsSnapshot(SnapshotDraft):
    id: str


class ScorePoint(BaseModel):
    date: datetime
    score: int


class ScoreProgression(BaseModel):
    snapshots: list[ScorePoint] = Field(default_factory=list)
    trend: Trend
    change_percent: float


# Dashboard


class DashboardOverview(BaseModel):
    total_views: int = Field(ge=0)
    unique_visitors: int = Field(ge=0)
    ats_score: int = Field(ge=0, le=100)
    keyword_score: int = Field(ge=0, le=100)
    industry_percentile: int = Field(ge=0, le=100)


class KeywordHealth(BaseModel):
    score: float
    top_keywords: list[str] = Field(default_factory=list)
    missing_critical: list[str] = Field(default_factory=list)


class IndustryPosition(BaseModel):
    percentile: int = Field(ge=0, le=100)
    trend: Trend


class DashboardRecommendation(BaseModel):
    type: DashboardRecommendationType
    priority: Severity
    message: str


class AnalyticsDashboard(BaseModel):
    resume_id: str
    overview: DashboardOverview
    view_trend: list[DailyViewCount] = Field(default_factory=list)
    top_sources: list[SourceShare] = Field(default_factory=list)
    keyword_health: KeywordHealth
    industry_position: IndustryPosition
    recommendations: list[DashboardRecommendation] = Field(default_factory=list)


# API payloads


class TrackViewRequest(BaseModel):
    country: str | None = Field(default=None, max_length=100)
    city: str | None = Field(default=None, max_length=200)


class TrackViewResponse(BaseModel):
    message: str


class JobMatchRequest(BaseModel):
    job_description: str = Field(min_length=1, max_length=50000)
