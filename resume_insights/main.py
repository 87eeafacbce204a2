import logging

import sentry_sdk
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from resume_insights.api.v1.health import router as health_router
from resume_insights.api.v1.insights import router as insights_router
from resume_insights.core.config import settings
from resume_insights.core.lifespan import lifespan
from resume_insights.core.rate_limit import limiter
from resume_insights.insights.orchestrator import InsightError

logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s %(message)s")
if settings.sentry_dsn:
    sentry_sdk.init(dsn=settings.sentry_dsn)

logger = logging.getLogger(__name__)

app = FastAPI(title="Resume Insights API", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_allowed_origins),
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)


@app.exception_handler(InsightError)
async def insight_error_handler(request: Request, exc: InsightError):
    logger.info("insight_error path=%s status=%s", request.url.path, exc.status_code)
    return JSONResponse(status_code=exc.status_code, content={"detail": str(exc)})


app.include_router(health_router, prefix="/v1", tags=["Health"])
app.include_router(insights_router, prefix="/v1", tags=["Resume Analytics"])
