import sys
import unittest
from datetime import datetime, timezone
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from factories import make_repository, make_resume  # noqa: E402
from resume_insights.insights.ats_scorer import ATSScorer  # noqa: E402
from resume_insights.insights.benchmark import Benchmarker, experience_years, percentile_rank  # noqa: E402
from resume_insights.insights.keywords import KeywordAnalyzer  # noqa: E402
from resume_insights.schemas import ExperienceEntry  # noqa: E402

NOW = datetime(2024, 6, 1, tzinfo=timezone.utc)


def _weak_resume(resume_id):
    return make_resume(
        id=resume_id,
        user_id="someone-else",
        summary=None,
        email_contact=None,
        phone=None,
        skills=[],
        experiences=[],
        profile_views=10,
    )


class ExperienceYearsTests(unittest.TestCase):
    def test_sums_month_spans(self):
        self.assertEqual(experience_years(make_resume().experiences, NOW), 7)

    def test_open_ended_position_runs_until_now(self):
        entries = [ExperienceEntry(start_date=datetime(2022, 6, 1, tzinfo=timezone.utc))]
        self.assertEqual(experience_years(entries, NOW), 2)

    def test_entries_without_start_are_ignored(self):
        entries = [ExperienceEntry(title="Intern")]
        self.assertEqual(experience_years(entries, NOW), 0)


class PercentileRankTests(unittest.TestCase):
    def test_counts_strictly_lower_scores(self):
        self.assertEqual(percentile_rank(70, [50, 70, 90, 60]), 50)

    def test_empty_population_uses_default(self):
        self.assertEqual(percentile_rank(70, []), 50)
        self.assertEqual(percentile_rank(70, [], default=40), 40)


class BenchmarkerTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.repository = make_repository()
        self.benchmarker = Benchmarker(
            self.repository,
            ATSScorer(),
            KeywordAnalyzer(),
            clock=lambda: NOW,
        )

    async def test_scores_real_population(self):
        self.repository.find_public_resumes_by_industry.return_value = [
            _weak_resume("r-1"),
            _weak_resume("r-2"),
            make_resume(id="r-3", user_id="someone-else"),
        ]

        result = await self.benchmarker.get_benchmark(make_resume(), "software_engineering")

        self.repository.find_public_resumes_by_industry.assert_awaited_once_with("software_engineering")
        self.assertEqual(result.total_in_industry, 3)
        self.assertEqual(result.percentile, 67)
        self.assertEqual(result.comparison.your_ats_score, 83)
        self.assertEqual(result.comparison.avg_ats_score, 48)
        self.assertEqual(result.comparison.avg_views, 21)
        self.assertEqual(result.comparison.your_views, 42)
        self.assertEqual(result.comparison.avg_skills_count, 1)
        self.assertEqual(result.comparison.your_skills_count, 4)
        self.assertEqual(result.comparison.avg_experience_years, 2)
        self.assertEqual(result.comparison.your_experience_years, 7)
        self.assertEqual(result.top_performers.avg_experience_years, 7)
        self.assertEqual(result.top_performers.avg_skills_count, 4)
        self.assertEqual([item.type for item in result.recommendations], ["skill"])

    async def test_own_resume_excluded_from_sample(self):
        self.repository.find_public_resumes_by_industry.return_value = [
            make_resume(),
            _weak_resume("r-1"),
        ]

        result = await self.benchmarker.get_benchmark(make_resume(), "software_engineering")

        self.assertEqual(result.total_in_industry, 1)
        self.assertEqual(result.percentile, 100)

    async def test_empty_sample_uses_fallbacks(self):
        result = await self.benchmarker.get_benchmark(_weak_resume("resume-123"), "software_engineering")

        self.assertEqual(result.total_in_industry, 0)
        self.assertEqual(result.percentile, 50)
        self.assertEqual(result.comparison.avg_ats_score, 65)
        self.assertEqual(result.comparison.avg_views, 50)
        self.assertEqual(result.comparison.avg_skills_count, 8)
        self.assertEqual(result.comparison.avg_experience_years, 5)
        self.assertEqual(
            result.top_performers.common_skills,
            ["JavaScript", "TypeScript", "React", "Node.js", "Python"],
        )
        self.assertEqual(result.top_performers.avg_experience_years, 7)
        self.assertEqual(result.top_performers.avg_skills_count, 12)
        self.assertEqual(result.top_performers.common_certifications, [])

        self.assertEqual(
            [(item.type, item.priority) for item in result.recommendations],
            [("keyword", "high"), ("skill", "medium")],
        )

    async def test_other_industry_has_no_common_skills(self):
        result = await self.benchmarker.get_benchmark(make_resume(), "other")
        self.assertEqual(result.top_performers.common_skills, [])
        self.assertTrue(0 <= result.percentile <= 100)


if __name__ == "__main__":
    unittest.main()
