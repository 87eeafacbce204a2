import sys
import tempfile
import unittest
from datetime import datetime, timedelta, timezone
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from factories import make_resume  # noqa: E402
from resume_insights.analytics import DateRange, SQLiteAnalyticsRepository  # noqa: E402
from resume_insights.schemas import SnapshotDraft, ViewEvent  # noqa: E402

BASE = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def _event(visitor, source, offset_days, resume_id="resume-123"):
    return ViewEvent(
        resume_id=resume_id,
        visitor_id=visitor,
        source=source,
        referer=None,
        created_at=BASE + timedelta(days=offset_days),
    )


def _draft(score, offset_days):
    return SnapshotDraft(
        resume_id="resume-123",
        ats_score=score,
        keyword_score=70,
        completeness_score=90,
        top_keywords=["Python", "SQL"],
        missing_keywords=["Go"],
        created_at=BASE + timedelta(days=offset_days),
    )


class SQLiteAnalyticsRepositoryTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.repository = SQLiteAnalyticsRepository(str(Path(self.tmp.name) / "nested" / "insights.db"))
        self.repository.init_db()

    def tearDown(self):
        self.repository.close()
        self.tmp.cleanup()

    async def test_resume_upsert_and_industry_sample(self):
        await self.repository.upsert_resume(make_resume())
        await self.repository.upsert_resume(make_resume(id="resume-private", is_public=False))
        await self.repository.upsert_resume(make_resume(id="resume-data", industry="data_science"))
        await self.repository.upsert_resume(make_resume(profile_views=50))

        stored = await self.repository.find_resume_by_id("resume-123")
        self.assertEqual(stored.profile_views, 50)
        self.assertEqual(stored.skills[0].name, "Python")
        self.assertIsNone(await self.repository.find_resume_by_id("unknown"))

        sample = await self.repository.find_public_resumes_by_industry("software_engineering")
        self.assertEqual([item.id for item in sample], ["resume-123"])

    async def test_view_event_queries(self):
        for event in (
            _event("a", "linkedin", 0),
            _event("a", "linkedin", 1),
            _event("b", "google", 1),
            _event("c", "direct", 10),
            _event("z", "linkedin", 1, resume_id="resume-other"),
        ):
            await self.repository.create_view_event(event)

        window = DateRange(start=BASE - timedelta(hours=1), end=BASE + timedelta(days=2))

        self.assertEqual(await self.repository.count_view_events("resume-123"), 4)
        self.assertEqual(await self.repository.count_view_events("resume-123", window), 3)
        self.assertEqual(sorted(await self.repository.group_view_events_by_visitor("resume-123")), ["a", "b", "c"])
        self.assertEqual(sorted(await self.repository.group_view_events_by_visitor("resume-123", window)), ["a", "b"])

        events = await self.repository.find_view_events_for_date_range("resume-123", window)
        self.assertEqual([event.visitor_id for event in events], ["a", "a", "b"])
        self.assertEqual(events[0].created_at, BASE)

        sources = await self.repository.group_view_events_by_source("resume-123", window)
        self.assertEqual([(item.source, item.count) for item in sources], [("linkedin", 2), ("google", 1)])

    async def test_snapshot_ordering(self):
        first = await self.repository.create_analytics_snapshot(_draft(60, 0))
        await self.repository.create_analytics_snapshot(_draft(70, 1))
        last = await self.repository.create_analytics_snapshot(_draft(80, 2))
        self.assertTrue(first.id)
        self.assertNotEqual(first.id, last.id)

        newest = await self.repository.find_analytics_snapshots("resume-123", limit=2)
        self.assertEqual([item.ats_score for item in newest], [80, 70])
        self.assertEqual(newest[0].top_keywords, ["Python", "SQL"])
        self.assertEqual(newest[0].missing_keywords, ["Go"])

        oldest = await self.repository.find_analytics_snapshots("resume-123", order_by="asc")
        self.assertEqual([item.ats_score for item in oldest], [60, 70, 80])

        progression = await self.repository.find_analytics_score_progression("resume-123")
        self.assertEqual([item.id for item in progression][0], first.id)
        self.assertEqual(progression[-1].created_at, BASE + timedelta(days=2))
        self.assertEqual(await self.repository.find_analytics_snapshots("resume-other"), [])


if __name__ == "__main__":
    unittest.main()
