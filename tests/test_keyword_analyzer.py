import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from factories import make_resume  # noqa: E402
from resume_insights.insights.keywords import INDUSTRY_KEYWORDS, KeywordAnalyzer  # noqa: E402


def _bare_resume(summary=None):
    return make_resume(summary=summary, job_title=None, skills=[], experiences=[])


class KeywordSuggestionTests(unittest.TestCase):
    def setUp(self):
        self.analyzer = KeywordAnalyzer()

    def test_existing_keywords_sorted_by_count(self):
        result = self.analyzer.get_suggestions(make_resume(), "software_engineering")
        keywords = [hit.keyword for hit in result.existing_keywords]
        counts = [hit.count for hit in result.existing_keywords]

        self.assertEqual(keywords[:3], ["Python", "AWS", "SQL"])
        self.assertEqual(counts, sorted(counts, reverse=True))
        self.assertEqual(result.existing_keywords[0].count, 3)
        self.assertEqual(result.existing_keywords[0].relevance, 60)
        self.assertNotIn("NoSQL", keywords)
        self.assertNotIn("Java", keywords)

    def test_missing_keywords_are_disjoint_and_truncated(self):
        result = self.analyzer.get_suggestions(make_resume(), "software_engineering")
        existing = {hit.keyword.lower() for hit in result.existing_keywords}
        missing = {keyword.lower() for keyword in result.missing_keywords}

        self.assertFalse(existing & missing)
        self.assertEqual(len(result.missing_keywords), 10)
        self.assertEqual(result.missing_keywords[0], "JavaScript")
        self.assertNotIn("TDD", result.missing_keywords)

    def test_empty_text_has_zero_density(self):
        result = self.analyzer.get_suggestions(_bare_resume(), "data_science")
        self.assertEqual(result.keyword_density, 0)
        self.assertEqual(result.existing_keywords, [])
        self.assertEqual(result.warnings, [])
        self.assertEqual(result.missing_keywords, list(INDUSTRY_KEYWORDS["data_science"][:10]))

    def test_keyword_stuffing_by_count(self):
        result = self.analyzer.get_suggestions(_bare_resume("Python " * 6), "software_engineering")
        stuffing = [warning for warning in result.warnings if warning.type == "keyword_stuffing"]
        self.assertEqual(len(stuffing), 1)
        self.assertEqual(stuffing[0].affected_keywords, ["Python"])
        self.assertEqual(result.existing_keywords[0].relevance, 100)

    def test_keyword_stuffing_by_density(self):
        result = self.analyzer.get_suggestions(_bare_resume("python and docker"), "software_engineering")
        self.assertEqual(result.keyword_density, 66.67)
        stuffing = [warning for warning in result.warnings if warning.type == "keyword_stuffing"]
        self.assertEqual(stuffing[0].affected_keywords, [])

    def test_low_density_warning(self):
        summary = "Python " + "word " * 199
        result = self.analyzer.get_suggestions(_bare_resume(summary), "software_engineering")
        self.assertEqual(result.keyword_density, 0.5)
        self.assertEqual([warning.type for warning in result.warnings], ["low_density"])

    def test_recommendations_name_first_missing_keywords(self):
        result = self.analyzer.get_suggestions(make_resume(), "software_engineering")
        self.assertEqual(len(result.recommendations), 3)
        self.assertEqual(
            result.recommendations[0],
            "Consider adding these software_engineering keywords: JavaScript, TypeScript, React, Node.js, Java",
        )

    def test_other_industry_has_no_keywords(self):
        result = self.analyzer.get_suggestions(make_resume(), "other")
        self.assertEqual(result.existing_keywords, [])
        self.assertEqual(result.missing_keywords, [])
        self.assertEqual(result.recommendations, [])
        self.assertEqual(result.keyword_density, 0)

    def test_industry_keywords_lookup(self):
        self.assertEqual(self.analyzer.get_industry_keywords("devops")[:2], ["AWS", "Azure"])
        self.assertEqual(self.analyzer.get_industry_keywords("unknown"), [])


class JobMatchTests(unittest.TestCase):
    def setUp(self):
        self.analyzer = KeywordAnalyzer()

    def test_match_uses_all_industries(self):
        result = self.analyzer.match_job_description(
            make_resume(),
            "We need Python, Docker, Terraform and GraphQL experience.",
        )
        # Plain containment: the single-letter "R" keyword is found in most texts.
        self.assertEqual(result.matched_keywords, ["Python", "Docker", "R"])
        self.assertEqual(result.missing_keywords, ["GraphQL", "Terraform"])
        self.assertEqual(result.match_score, 60)
        self.assertEqual(
            result.recommendations[0],
            "Add these missing skills/keywords: GraphQL, Terraform",
        )
        self.assertEqual(len(result.recommendations), 3)

    def test_shared_keywords_counted_once(self):
        result = self.analyzer.match_job_description(make_resume(), "Python and SQL")
        self.assertEqual(result.matched_keywords, ["Python", "SQL"])
        self.assertEqual(result.match_score, 100)
        self.assertEqual(
            result.recommendations,
            ["Great match! Your resume aligns well with this job description."],
        )

    def test_no_relevant_keywords(self):
        result = self.analyzer.match_job_description(make_resume(), "Happy to help, kind, calm.")
        self.assertEqual(result.match_score, 0)
        self.assertEqual(result.matched_keywords, [])
        self.assertEqual(result.missing_keywords, [])


if __name__ == "__main__":
    unittest.main()
