from __future__ import annotations

import asyncio
import calendar
import logging
from collections import Counter
from datetime import datetime, timedelta, timezone
from typing import Callable

from resume_insights.analytics.repository import AnalyticsRepository, DateRange
from resume_insights.schemas import (
    DailyViewCount,
    SourceCount,
    SourceShare,
    ViewEvent,
    ViewPeriod,
    ViewStats,
)

from .anonymize import anonymize_client_address
from .numeric import round_int
from .traffic import DIRECT_SOURCE, classify_traffic_source

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _clean_optional(value: object) -> str | None:
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped or None


def _months_before(moment: datetime, months: int) -> datetime:
    total = moment.year * 12 + (moment.month - 1) - months
    year, month_index = divmod(total, 12)
    month = month_index + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def period_window(period: ViewPeriod, now: datetime) -> DateRange:
    if period == "day":
        start = now - timedelta(days=1)
    elif period == "week":
        start = now - timedelta(days=7)
    elif period == "month":
        start = _months_before(now, 1)
    elif period == "year":
        start = _months_before(now, 12)
    else:
        raise ValueError(f"Unsupported view period: {period!r}")
    return DateRange(start=start, end=now)


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def explicit_window(start_date: datetime | None, end_date: datetime | None) -> DateRange | None:
    """Caller-supplied range, or None when neither bound is given.

    Naive datetimes are read as UTC. Raises ValueError for a half-open or
    inverted range.
    """
    if start_date is None and end_date is None:
        return None
    if start_date is None or end_date is None:
        raise ValueError("start_date and end_date must be given together")
    start, end = _as_utc(start_date), _as_utc(end_date)
    if start > end:
        raise ValueError("start_date must not be after end_date")
    return DateRange(start=start, end=end)


def _day_key(moment: datetime) -> str:
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return moment.date().isoformat()


class ViewTracker:
    def __init__(
        self,
        repository: AnalyticsRepository,
        *,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self.repository = repository
        self.clock = clock

    async def record_view(
        self,
        resume_id: str,
        client_address: str,
        user_agent: str | None = None,
        referer: str | None = None,
        country: str | None = None,
        city: str | None = None,
    ) -> None:
        referer = _clean_optional(referer)
        source = classify_traffic_source(referer)
        event = ViewEvent(
            resume_id=resume_id,
            visitor_id=anonymize_client_address(client_address),
            user_agent=_clean_optional(user_agent),
            referer=referer,
            country=_clean_optional(country),
            city=_clean_optional(city),
            source=source,
            created_at=self.clock(),
        )
        await self.repository.create_view_event(event)
        logger.info("resume_view_recorded resume_id=%s source=%s", resume_id, source)

    async def get_stats(
        self,
        resume_id: str,
        period: ViewPeriod = "month",
        *,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
    ) -> ViewStats:
        window = explicit_window(start_date, end_date)
        if window is None:
            window = period_window(period, self.clock())

        total_views, visitors, events, sources = await asyncio.gather(
            self.repository.count_view_events(resume_id, window),
            self.repository.group_view_events_by_visitor(resume_id, window),
            self.repository.find_view_events_for_date_range(resume_id, window),
            self.repository.group_view_events_by_source(resume_id, window),
        )

        return ViewStats(
            total_views=total_views,
            unique_visitors=len(visitors),
            views_by_day=self._views_by_day(events),
            top_sources=self._top_sources(sources),
        )

    async def get_total_views(self, resume_id: str) -> int:
        return await self.repository.count_view_events(resume_id)

    async def get_unique_visitors(self, resume_id: str) -> int:
        visitors = await self.repository.group_view_events_by_visitor(resume_id)
        return len(visitors)

    @staticmethod
    def _views_by_day(events: list[ViewEvent]) -> list[DailyViewCount]:
        counts = Counter(_day_key(event.created_at) for event in events)
        return [DailyViewCount(date=day, count=count) for day, count in sorted(counts.items())]

    @staticmethod
    def _top_sources(sources: list[SourceCount]) -> list[SourceShare]:
        valid = [item for item in sources if item.count > 0]
        total = sum(item.count for item in valid)
        ranked = sorted(valid, key=lambda item: item.count, reverse=True)
        return [
            SourceShare(
                source=item.source or DIRECT_SOURCE,
                count=item.count,
                percentage=round_int(item.count / total * 100) if total > 0 else 0,
            )
            for item in ranked
        ]
