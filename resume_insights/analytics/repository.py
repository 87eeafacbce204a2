from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Literal, Protocol

from resume_insights.schemas import (
    AnalyticsSnapshot,
    ResumeSnapshotInput,
    SnapshotDraft,
    SourceCount,
    ViewEvent,
)

SortOrder = Literal["asc", "desc"]


@dataclass(frozen=True)
class DateRange:
    start: datetime
    end: datetime


class AnalyticsRepository(Protocol):
    """Storage port consumed by the insight engine.

    Resumes are owned by the resume service; view events and snapshots are
    append-only. Implementations decide how the data is stored.
    """

    async def find_resume_by_id(self, resume_id: str) -> ResumeSnapshotInput | None:
        """Return the resume or None when the id does not resolve."""

    async def find_public_resumes_by_industry(self, industry: str) -> list[ResumeSnapshotInput]:
        """Return every public resume tagged with the industry."""

    async def create_view_event(self, event: ViewEvent) -> None:
        """Append a view event."""

    async def count_view_events(self, resume_id: str, date_range: DateRange | None = None) -> int:
        """Count view events, optionally restricted to a window."""

    async def group_view_events_by_visitor(
        self, resume_id: str, date_range: DateRange | None = None
    ) -> list[str]:
        """Return the distinct anonymized visitor ids."""

    async def find_view_events_for_date_range(self, resume_id: str, date_range: DateRange) -> list[ViewEvent]:
        """Return the raw view events inside the window."""

    async def group_view_events_by_source(self, resume_id: str, date_range: DateRange) -> list[SourceCount]:
        """Return per-source counts ranked by count, descending (top 10)."""

    async def create_analytics_snapshot(self, draft: SnapshotDraft) -> AnalyticsSnapshot:
        """Persist a snapshot and return it with its assigned id."""

    async def find_analytics_snapshots(
        self,
        resume_id: str,
        *,
        limit: int | None = None,
        order_by: SortOrder = "desc",
    ) -> list[AnalyticsSnapshot]:
        """Return snapshots ordered by creation time."""

    async def find_analytics_score_progression(self, resume_id: str) -> list[AnalyticsSnapshot]:
        """Return every snapshot, oldest first."""
