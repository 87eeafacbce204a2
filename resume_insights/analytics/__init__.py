from .repository import AnalyticsRepository, DateRange, SortOrder
from .sqlite_store import SQLiteAnalyticsRepository

__all__ = ["AnalyticsRepository", "DateRange", "SortOrder", "SQLiteAnalyticsRepository"]
