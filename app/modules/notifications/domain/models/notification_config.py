# 📄 File: app/modules/notifications/domain/models/notification_config.py
# 🧭 Purpose (Layman Explanation):
# A user's reminder preferences: whether reminders are on, what time of day they arrive,
# quiet hours, which plants are muted and which kinds of care to be reminded about.
#
# 🧪 Purpose (Technical Summary):
# NotificationConfig entity (at most one per user), its QuietHours value object, the PUT
# payload and the default returned when nothing is stored.
#
# 🔗 Dependencies:
# - pydantic, app.shared.core.models (CamelModel)
#
# 🔄 Connected Modules / Calls From:
# - app.modules.notifications (validation, repository, service, API)

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import Field

from app.shared.core.models import CamelModel

DEFAULT_PREFERRED_TIME = "08:00"
DEFAULT_BATCHING_DAYS = 1


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class QuietHours(CamelModel):
    """Window (HH:mm, may wrap past midnight) during which no reminder is sent."""
    start: str = ""
    end: str = ""


class NotificationSettings(CamelModel):
    """User-editable reminder preferences, as sent in a PUT."""

    is_enabled: bool = True
    preferred_time: str = ""
    quiet_hours: Optional[QuietHours] = None
    batching_days: int = 0
    group_by_type: bool = False
    muted_plant_ids: List[str] = Field(default_factory=list)
    remind_watering: bool = False
    remind_fertilizing: bool = False
    remind_misting: bool = False
    remind_repotting: bool = False


class NotificationConfig(NotificationSettings):
    """
    Stored reminder preferences of one user.
    """

    id: Optional[str] = None
    user_id: str
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    @classmethod
    def default_for(cls, user_id: str, now: Optional[datetime] = None) -> "NotificationConfig":
        """Configuration reported for a user who never saved one."""
        now = now or _utcnow()
        return cls(
            user_id=user_id,
            is_enabled=True,
            preferred_time=DEFAULT_PREFERRED_TIME,
            quiet_hours=None,
            batching_days=DEFAULT_BATCHING_DAYS,
            group_by_type=True,
            muted_plant_ids=[],
            remind_watering=True,
            remind_fertilizing=True,
            remind_misting=True,
            remind_repotting=True,
            created_at=now,
            updated_at=now,
        )
