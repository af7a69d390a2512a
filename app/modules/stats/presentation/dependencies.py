# 📄 File: app/modules/stats/presentation/dependencies.py
# 🧭 Purpose (Layman Explanation):
# Builds the shared stats cache and tells it how to count users and plants.
# 🧪 Purpose (Technical Summary):
# Process-wide StatsCache whose loader opens its own session, independent of any request.
# 🔗 Dependencies:
# app.modules.plants.infrastructure.database.plant_repository_impl, session manager, settings
# 🔄 Connected Modules / Calls From:
# app.modules.stats.presentation.api.v1.stats

import logging
from typing import Optional

from app.modules.plants.infrastructure.database.plant_repository_impl import PlantRepositoryImpl
from app.modules.stats.domain.models.stats import StatsSnapshot
from app.modules.stats.domain.services.stats_cache import StatsCache
from app.shared.config.settings import get_settings
from app.shared.infrastructure.database.session import session_manager

logger = logging.getLogger(__name__)

_stats_cache: Optional[StatsCache] = None


async def load_stats() -> StatsSnapshot:
    async with session_manager.get_session() as session:
        repository = PlantRepositoryImpl(session)
        users = await repository.count_active_users()
        plants = await repository.count_plants()
    return StatsSnapshot(users=users, plants=plants, reminders=0)


def get_stats_cache() -> StatsCache:
    """
    Get global stats cache instance.

    Returns:
        StatsCache: Cache backed by load_stats
    """
    global _stats_cache
    if _stats_cache is None:
        _stats_cache = StatsCache(load_stats, ttl=get_settings().STATS_CACHE_TTL_SECONDS)
    return _stats_cache
