import logging
from contextlib import asynccontextmanager

from resume_insights.analytics.sqlite_store import SQLiteAnalyticsRepository
from resume_insights.core.config import settings
from resume_insights.insights.orchestrator import InsightOrchestrator

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app):
    repository = SQLiteAnalyticsRepository(settings.insights_db_path)
    repository.init_db()
    app.state.repository = repository
    app.state.orchestrator = InsightOrchestrator(repository)
    logger.info(
        "insights_startup db_path=%s dashboard_ttl=%ss",
        settings.insights_db_path,
        settings.dashboard_cache_ttl_seconds,
    )
    yield
    repository.close()
