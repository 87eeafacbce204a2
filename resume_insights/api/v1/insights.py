from datetime import datetime

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Request

from resume_insights.core.config import settings
from resume_insights.core.rate_limit import client_address, rate_limit
from resume_insights.core.security import require_user_id
from resume_insights.insights.orchestrator import InsightOrchestrator
from resume_insights.insights.view_tracker import explicit_window
from resume_insights.schemas import (
    AnalyticsDashboard,
    AnalyticsSnapshot,
    ATSScoreResult,
    Industry,
    IndustryBenchmark,
    JobMatchRequest,
    JobMatchResult,
    KeywordSuggestions,
    ScoreProgression,
    TrackViewRequest,
    TrackViewResponse,
    ViewPeriod,
    ViewStats,
)

router = APIRouter(prefix="/resume-analytics")


def get_orchestrator(request: Request) -> InsightOrchestrator:
    return request.app.state.orchestrator


@router.post("/{resume_id}/track-view", response_model=TrackViewResponse)
@rate_limit(settings.track_view_rate_limit)
async def track_view(
    request: Request,
    resume_id: str,
    payload: TrackViewRequest | None = Body(default=None),
    orchestrator: InsightOrchestrator = Depends(get_orchestrator),
):
    payload = payload or TrackViewRequest()
    await orchestrator.track_view(
        resume_id,
        client_address(request),
        user_agent=request.headers.get("user-agent"),
        referer=request.headers.get("referer"),
        country=payload.country,
        city=payload.city,
    )
    return TrackViewResponse(message="View tracked successfully")


@router.get("/{resume_id}/views", response_model=ViewStats)
async def view_stats(
    resume_id: str,
    period: ViewPeriod = Query(default="month"),
    start_date: datetime | None = Query(default=None),
    end_date: datetime | None = Query(default=None),
    user_id: str = Depends(require_user_id),
    orchestrator: InsightOrchestrator = Depends(get_orchestrator),
):
    try:
        explicit_window(start_date, end_date)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return await orchestrator.get_view_stats(
        resume_id,
        user_id,
        period,
        start_date=start_date,
        end_date=end_date,
    )


@router.get("/{resume_id}/ats-score", response_model=ATSScoreResult)
async def ats_score(
    resume_id: str,
    user_id: str = Depends(require_user_id),
    orchestrator: InsightOrchestrator = Depends(get_orchestrator),
):
    return await orchestrator.calculate_ats_score(resume_id, user_id)


@router.get("/{resume_id}/keywords", response_model=KeywordSuggestions)
async def keyword_suggestions(
    resume_id: str,
    industry: Industry | None = Query(default=None),
    user_id: str = Depends(require_user_id),
    orchestrator: InsightOrchestrator = Depends(get_orchestrator),
):
    return await orchestrator.get_keyword_suggestions(resume_id, user_id, industry)


@router.post("/{resume_id}/match-job", response_model=JobMatchResult)
async def match_job(
    resume_id: str,
    payload: JobMatchRequest,
    user_id: str = Depends(require_user_id),
    orchestrator: InsightOrchestrator = Depends(get_orchestrator),
):
    return await orchestrator.match_job_description(resume_id, user_id, payload.job_description)


@router.get("/{resume_id}/benchmark", response_model=IndustryBenchmark)
async def benchmark(
    resume_id: str,
    industry: Industry | None = Query(default=None),
    user_id: str = Depends(require_user_id),
    orchestrator: InsightOrchestrator = Depends(get_orchestrator),
):
    return await orchestrator.get_benchmark(resume_id, user_id, industry)


@router.get("/{resume_id}/dashboard", response_model=AnalyticsDashboard)
async def dashboard(
    resume_id: str,
    user_id: str = Depends(require_user_id),
    orchestrator: InsightOrchestrator = Depends(get_orchestrator),
):
    return await orchestrator.get_dashboard(resume_id, user_id)


@router.post("/{resume_id}/snapshot", response_model=AnalyticsSnapshot)
async def save_snapshot(
    resume_id: str,
    industry: Industry | None = Query(default=None),
    user_id: str = Depends(require_user_id),
    orchestrator: InsightOrchestrator = Depends(get_orchestrator),
):
    return await orchestrator.save_snapshot(resume_id, user_id, industry)


@router.get("/{resume_id}/history", response_model=list[AnalyticsSnapshot])
async def history(
    resume_id: str,
    limit: int = Query(default=settings.history_default_limit, ge=1, le=100),
    user_id: str = Depends(require_user_id),
    orchestrator: InsightOrchestrator = Depends(get_orchestrator),
):
    return await orchestrator.get_history(resume_id, user_id, limit)


@router.get("/{resume_id}/progression", response_model=ScoreProgression)
async def score_progression(
    resume_id: str,
    user_id: str = Depends(require_user_id),
    orchestrator: InsightOrchestrator = Depends(get_orchestrator),
):
    return await orchestrator.get_score_progression(resume_id, user_id)
