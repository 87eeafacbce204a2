from .insights import (
    AnalyticsDashboard,
    AnalyticsSnapshot,
    ATSIssue,
    ATSScoreBreakdown,
    ATSScoreResult,
    BenchmarkRecommendation,
    DailyViewCount,
    DashboardOverview,
    DashboardRecommendation,
    Industry,
    IndustryBenchmark,
    IndustryComparison,
    IndustryPosition,
    JobMatchRequest,
    JobMatchResult,
    KeywordHealth,
    KeywordHit,
    KeywordSuggestions,
    KeywordWarning,
    ScorePoint,
    ScoreProgression,
    SnapshotDraft,
    SourceCount,
    SourceShare,
    TopPerformersProfile,
    TrackViewRequest,
    TrackViewResponse,
    Trend,
    ViewEvent,
    ViewPeriod,
    ViewStats,
)
from .resume import ExperienceEntry, ResumeSnapshotInput, SkillEntry

__all__ = [
    "AnalyticsDashboard",
    "AnalyticsSnapshot",
    "ATSIssue",
    "ATSScoreBreakdown",
    "ATSScoreResult",
    "BenchmarkRecommendation",
    "DailyViewCount",
    "DashboardOverview",
    "DashboardRecommendation",
    "ExperienceEntry",
    "Industry",
    "IndustryBenchmark",
    "IndustryComparison",
    "IndustryPosition",
    "JobMatchRequest",
    "JobMatchResult",
    "KeywordHealth",
    "KeywordHit",
    "KeywordSuggestions",
    "KeywordWarning",
    "ResumeSnapshotInput",
    "ScorePoint",
    "ScoreProgression",
    "SkillEntry",
    "SnapshotDraft",
    "SourceCount",
    "SourceShare",
    "TopPerformersProfile",
    "TrackViewRequest",
    "TrackViewResponse",
    "Trend",
    "ViewEvent",
    "ViewPeriod",
    "ViewStats",
]
