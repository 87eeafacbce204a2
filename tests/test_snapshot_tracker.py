import sys
import unittest
from datetime import datetime, timedelta, timezone
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from factories import make_repository, make_resume  # noqa: E402
from resume_insights.insights.ats_scorer import ATSScorer  # noqa: E402
from resume_insights.insights.keywords import KeywordAnalyzer  # noqa: E402
from resume_insights.insights.snapshots import SnapshotTracker, change_percent, classify_trend  # noqa: E402
from resume_insights.schemas import AnalyticsSnapshot  # noqa: E402

NOW = datetime(2024, 6, 1, tzinfo=timezone.utc)


def _snapshots(*scores):
    return [
        AnalyticsSnapshot(
            id=f"snap-{index}",
            resume_id="resume-123",
            ats_score=score,
            keyword_score=80,
            completeness_score=100,
            created_at=NOW + timedelta(days=index),
        )
        for index, score in enumerate(scores)
    ]


class TrendMathTests(unittest.TestCase):
    def test_change_percent(self):
        self.assertEqual(change_percent(70, 85), 21.43)
        self.assertEqual(change_percent(80, 60), -25.0)
        self.assertEqual(change_percent(0, 50), 0.0)

    def test_classify_trend(self):
        self.assertEqual(classify_trend(21.43), "improving")
        self.assertEqual(classify_trend(5), "stable")
        self.assertEqual(classify_trend(-5), "stable")
        self.assertEqual(classify_trend(-5.01), "declining")


class SnapshotTrackerTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.repository = make_repository()
        self.repository.create_analytics_snapshot.side_effect = lambda draft: AnalyticsSnapshot(
            id="snap-new", **draft.model_dump()
        )
        self.tracker = SnapshotTracker(self.repository, ATSScorer(), KeywordAnalyzer(), clock=lambda: NOW)

    async def test_save_snapshot_records_current_scores(self):
        resume = make_resume()
        expected_keywords = KeywordAnalyzer().get_suggestions(resume, "software_engineering")

        snapshot = await self.tracker.save_snapshot("resume-123", resume, "software_engineering")

        self.assertEqual(snapshot.id, "snap-new")
        self.assertEqual(snapshot.ats_score, 83)
        self.assertEqual(snapshot.completeness_score, 100)
        self.assertEqual(snapshot.keyword_score, round(100 - expected_keywords.keyword_density))
        self.assertEqual(snapshot.top_keywords[:3], ["Python", "AWS", "SQL"])
        self.assertEqual(len(snapshot.missing_keywords), 10)
        self.assertIsNone(snapshot.industry_rank)
        self.assertIsNone(snapshot.total_in_industry)
        self.assertEqual(snapshot.created_at, NOW)
        self.repository.create_analytics_snapshot.assert_awaited_once()

    async def test_history_is_newest_first_with_limit(self):
        await self.tracker.get_history("resume-123", limit=3)
        self.repository.find_analytics_snapshots.assert_awaited_once_with(
            "resume-123", limit=3, order_by="desc"
        )

    async def test_progression_improving(self):
        self.repository.find_analytics_score_progression.return_value = _snapshots(70, 78, 85)

        progression = await self.tracker.get_score_progression("resume-123")

        self.assertEqual([point.score for point in progression.snapshots], [70, 78, 85])
        self.assertEqual(progression.change_percent, 21.43)
        self.assertEqual(progression.trend, "improving")

    async def test_progression_declining(self):
        self.repository.find_analytics_score_progression.return_value = _snapshots(80, 60)
        progression = await self.tracker.get_score_progression("resume-123")
        self.assertEqual(progression.trend, "declining")
        self.assertEqual(progression.change_percent, -25.0)

    async def test_progression_needs_two_snapshots(self):
        for scores in ((), (72,)):
            self.repository.find_analytics_score_progression.return_value = _snapshots(*scores)
            progression = await self.tracker.get_score_progression("resume-123")
            self.assertEqual(progression.trend, "stable")
            self.assertEqual(progression.change_percent, 0.0)
            self.assertEqual(len(progression.snapshots), len(scores))

    async def test_progression_from_zero_is_stable(self):
        self.repository.find_analytics_score_progression.return_value = _snapshots(0, 50)
        progression = await self.tracker.get_score_progression("resume-123")
        self.assertEqual(progression.trend, "stable")
        self.assertEqual(progression.change_percent, 0.0)


if __name__ == "__main__":
    unittest.main()
