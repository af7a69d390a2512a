# 📄 File: app/api/middleware/rate_limiting.py
# 🧭 Purpose (Layman Explanation):
# This file prevents users from making too many requests too quickly, like a bouncer at a club
# who limits how often someone can enter so everyone gets fair access.
# 🧪 Purpose (Technical Summary):
# Rate limit guard for authenticated API routers. Resolves the real client address
# (CF-Connecting-IP, X-Forwarded-For, socket peer), counts the request against the per-user
# and per-address windows of the in-memory limiter and rejects with 429 + Retry-After.
# 🔗 Dependencies:
# FastAPI, app.shared.core.rate_limiter, app.shared.core.dependencies (principal)
# 🔄 Connected Modules / Calls From:
# app.api.v1.router (router-level dependency), app.main (RateLimitError handler)

import logging

from fastapi import Depends, Request

from app.shared.core.dependencies import Principal, get_current_principal
from app.shared.core.exceptions import RateLimitError
from app.shared.core.rate_limiter import InMemoryRateLimiter, get_rate_limiter

logger = logging.getLogger(__name__)


def get_client_ip(request: Request) -> str:
    """
    Get client IP address from request.

    Args:
        request: HTTP request

    Returns:
        Client IP address
    """
    # Cloudflare puts the original address here
    cf_ip = request.headers.get("CF-Connecting-IP")
    if cf_ip:
        return cf_ip.strip()

    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    if request.client:
        return request.client.host

    return "unknown"


async def enforce_rate_limit(
    request: Request,
    principal: Principal = Depends(get_current_principal),
    limiter: InMemoryRateLimiter = Depends(get_rate_limiter)
) -> None:
    """
    Count the request and reject it when the caller is over its limits.

    Raises:
        RateLimitError: Rendered as 429; ``Retry-After`` is the user window length
    """
    ip = get_client_ip(request)
    if limiter.is_rate_limited(principal.user_id, ip):
        logger.info(f"Rejected {request.method} {request.url.path} for user {principal.user_id} from {ip}")
        rule = limiter.user_rule
        raise RateLimitError(
            limit=rule.limit,
            window=rule.window_name,
            retry_after=rule.window_seconds,
        )
