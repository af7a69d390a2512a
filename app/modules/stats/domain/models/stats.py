# 📄 File: app/modules/stats/domain/models/stats.py
# 🧭 Purpose (Layman Explanation):
# The public numbers shown on the landing page: how many people use the app and how many
# plants they look after.
# 🧪 Purpose (Technical Summary):
# StatsSnapshot value object served by GET /api/v1/stats.
# 🔗 Dependencies:
# app.shared.core.models (CamelModel)
# 🔄 Connected Modules / Calls From:
# app.modules.stats.domain.services.stats_cache, app.modules.stats.presentation.api.v1.stats

from app.shared.core.models import CamelModel


class StatsSnapshot(CamelModel):
    users: int = 0
    plants: int = 0
    # Reminders are not counted yet
    reminders: int = 0
