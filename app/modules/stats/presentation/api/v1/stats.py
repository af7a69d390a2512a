# 📄 File: app/modules/stats/presentation/api/v1/stats.py
# 🧭 Purpose (Layman Explanation):
# Public page that shows how many people and plants use the app. No login needed.
# 🧪 Purpose (Technical Summary):
# GET /stats served from the StatsCache.
# 🔗 Dependencies:
# FastAPI, app.modules.stats.presentation.dependencies
# 🔄 Connected Modules / Calls From:
# app.api.v1.router

from fastapi import APIRouter, Depends

from app.modules.stats.domain.models.stats import StatsSnapshot
from app.modules.stats.domain.services.stats_cache import StatsCache
from app.modules.stats.presentation.dependencies import get_stats_cache

stats_router = APIRouter()


@stats_router.get(
    "",
    response_model=StatsSnapshot,
    summary="Public usage stats",
    description="Active users and plant count, cached for a few minutes"
)
async def get_stats(cache: StatsCache = Depends(get_stats_cache)) -> StatsSnapshot:
    return await cache.get()
