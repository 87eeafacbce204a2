from .anonymize import anonymize_client_address
from .ats_scorer import ATSScorer
from .benchmark import Benchmarker
from .cache import TTLCache
from .keywords import INDUSTRY_KEYWORDS, KeywordAnalyzer
from .orchestrator import (
    InsightError,
    InsightOrchestrator,
    ResourceOwnershipError,
    ResumeNotFoundError,
)
from .snapshots import SnapshotTracker
from .traffic import classify_traffic_source
from .view_tracker import ViewTracker

__all__ = [
    "anonymize_client_address",
    "ATSScorer",
    "Benchmarker",
    "classify_traffic_source",
    "INDUSTRY_KEYWORDS",
    "InsightError",
    "InsightOrchestrator",
    "KeywordAnalyzer",
    "ResourceOwnershipError",
    "ResumeNotFoundError",
    "SnapshotTracker",
    "TTLCache",
    "ViewTracker",
]
