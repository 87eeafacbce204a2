from __future__ import annotations

from fastapi import Request
from slowapi import Limiter

from resume_insights.core.config import settings


def client_address(request: Request) -> str:
    """Caller address used both for rate limiting and for visitor ids.

    The first X-Forwarded-For hop is trusted only when TRUST_X_FORWARDED_FOR is set.
    """
    if settings.trust_x_forwarded_for:
        forwarded_for = request.headers.get("x-forwarded-for", "").strip()
        if forwarded_for:
            return forwarded_for.split(",")[0].strip()
    if request.client and request.client.host:
        return request.client.host
    return "0.0.0.0"


limiter = Limiter(key_func=client_address)


def rate_limit(limit: str | None = None):
    if settings.rate_limit_enabled:
        return limiter.limit(limit or settings.rate_limit)

    def decorator(func):
        return func

    return decorator
