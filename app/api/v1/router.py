# 📄 File: app/api/v1/router.py
# 🧭 Purpose (Layman Explanation):
# This file acts like a traffic director for all API version 1 requests, sending plant requests
# to plant handlers, photo uploads to upload handlers and reminder settings to notification handlers.
# 🧪 Purpose (Technical Summary):
# Main API v1 router aggregation. Authenticated module routers share the rate limit
# dependency (which itself resolves the principal); health and stats stay public.
# 🔗 Dependencies:
# FastAPI, app.api.v1.health, app.api.middleware.rate_limiting, module routers
# 🔄 Connected Modules / Calls From:
# app.main (mounted under /api/v1)

import logging

from fastapi import APIRouter, Depends

from app.api.middleware.rate_limiting import enforce_rate_limit
from app.api.v1.health import health_router
from app.modules.notifications.presentation.api.v1.notifications import notifications_router
from app.modules.plants.presentation.api.v1.plants import plants_router
from app.modules.stats.presentation.api.v1.stats import stats_router
from app.modules.uploads.presentation.api.v1.uploads import uploads_router

logger = logging.getLogger(__name__)

# Create main API v1 router
api_v1_router = APIRouter()

# =========================================================================
# PUBLIC ROUTES
# =========================================================================

api_v1_router.include_router(health_router, tags=["Health Check"])
api_v1_router.include_router(stats_router, prefix="/stats", tags=["Stats"])

# =========================================================================
# AUTHENTICATED ROUTES
# =========================================================================

rate_limited = [Depends(enforce_rate_limit)]

api_v1_router.include_router(
    plants_router, prefix="/plants", tags=["Plants"], dependencies=rate_limited
)
api_v1_router.include_router(
    uploads_router, prefix="/uploads", tags=["Uploads"], dependencies=rate_limited
)
api_v1_router.include_router(
    notifications_router, prefix="/notifications", tags=["Notifications"], dependencies=rate_limited
)
