import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from resume_insights.insights.anonymize import anonymize_client_address  # noqa: E402
from resume_insights.insights.traffic import classify_traffic_source  # noqa: E402


class TrafficSourceTests(unittest.TestCase):
    def test_known_domains(self):
        self.assertEqual(classify_traffic_source("https://linkedin.com/feed"), "linkedin")
        self.assertEqual(classify_traffic_source("https://www.google.com/search?q=dev"), "google")
        self.assertEqual(classify_traffic_source("https://GITHUB.com/someone"), "github")
        self.assertEqual(classify_traffic_source("https://www.glassdoor.com/job"), "glassdoor")

    def test_missing_referer_is_direct(self):
        self.assertEqual(classify_traffic_source(None), "direct")
        self.assertEqual(classify_traffic_source(""), "direct")
        self.assertEqual(classify_traffic_source("   "), "direct")

    def test_unknown_referer_is_other(self):
        self.assertEqual(classify_traffic_source("https://example.org"), "other")

    def test_first_match_wins(self):
        self.assertEqual(
            classify_traffic_source("https://google.com/url?q=https://linkedin.com/in/dev"),
            "linkedin",
        )


class AnonymizerTests(unittest.TestCase):
    def test_deterministic_sha256_hex(self):
        first = anonymize_client_address("192.168.1.1")
        second = anonymize_client_address("192.168.1.1")
        self.assertEqual(first, second)
        self.assertEqual(len(first), 64)
        int(first, 16)

    def test_never_returns_the_address(self):
        for address in ("192.168.1.1", "::1", "10.0.0.7"):
            self.assertNotEqual(anonymize_client_address(address), address)

    def test_different_addresses_differ(self):
        self.assertNotEqual(anonymize_client_address("10.0.0.1"), anonymize_client_address("10.0.0.2"))


if __name__ == "__main__":
    unittest.main()
