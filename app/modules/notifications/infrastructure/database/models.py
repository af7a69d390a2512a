# 📄 File: app/modules/notifications/infrastructure/database/models.py
# 🧭 Purpose (Layman Explanation):
# Describes how reminder preferences are stored in the database, one row per user.
#
# 🧪 Purpose (Technical Summary):
# SQLAlchemy table for NotificationConfig; user_id unique, quiet hours and muted plant ids
# kept as JSON documents.
#
# 🔗 Dependencies:
# - SQLAlchemy, app.shared.config.database (DatabaseBase)
# - app.shared.infrastructure.database.types (UTCDateTime)
#
# 🔄 Connected Modules / Calls From:
# - app.modules.notifications.infrastructure.database.notification_repository_impl

from sqlalchemy import JSON, Boolean, Column, Integer, String
from sqlalchemy.dialects.postgresql import JSONB

from app.shared.config.database import DatabaseBase
from app.shared.infrastructure.database.types import UTCDateTime, utcnow


class NotificationConfigModel(DatabaseBase):
    """
    SQLAlchemy model for per-user reminder preferences.
    """
    __tablename__ = "notification_configs"

    id = Column(String(36), primary_key=True)
    user_id = Column(String(64), nullable=False, unique=True, index=True)

    is_enabled = Column(Boolean, nullable=False, default=True)
    preferred_time = Column(String(5), nullable=False)
    quiet_hours = Column(JSON(none_as_null=True).with_variant(JSONB(none_as_null=True), "postgresql"), nullable=True)
    batching_days = Column(Integer, nullable=False, default=1)
    group_by_type = Column(Boolean, nullable=False, default=True)
    muted_plant_ids = Column(JSON().with_variant(JSONB(), "postgresql"), nullable=False, default=list)

    remind_watering = Column(Boolean, nullable=False, default=True)
    remind_fertilizing = Column(Boolean, nullable=False, default=True)
    remind_misting = Column(Boolean, nullable=False, default=True)
    remind_repotting = Column(Boolean, nullable=False, default=True)

    created_at = Column(UTCDateTime(), nullable=False, default=utcnow)
    updated_at = Column(UTCDateTime(), nullable=False, default=utcnow)

    def __repr__(self) -> str:
        return f"<NotificationConfigModel(id={self.id}, user_id={self.user_id})>"
