# 📄 File: app/modules/notifications/infrastructure/database/notification_repository_impl.py
# 🧭 Purpose (Layman Explanation):
# Saves, loads, replaces and deletes a user's reminder preferences in the database.
#
# 🧪 Purpose (Technical Summary):
# SQLAlchemy async implementation of NotificationConfigRepository. Replace is a single
# UPDATE filtered by user_id; created_at is never touched after insert.
#
# 🔗 Dependencies:
# - app.modules.notifications.domain (NotificationConfig, repository interface)
# - app.modules.notifications.infrastructure.database.models
# - app.shared.infrastructure.database.session (run_with_timeout)
#
# 🔄 Connected Modules / Calls From:
# - app.modules.notifications.presentation.dependencies

import logging
import uuid
from typing import Any, Dict, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.notifications.domain.models.notification_config import NotificationConfig
from app.modules.notifications.domain.repositories.notification_repository import (
    NotificationConfigRepository,
)
from app.modules.notifications.infrastructure.database.models import NotificationConfigModel
from app.shared.core.exceptions import ConflictError
from app.shared.infrastructure.database.session import run_with_timeout

logger = logging.getLogger(__name__)


class NotificationConfigRepositoryImpl(NotificationConfigRepository):
    """
    SQLAlchemy implementation of the NotificationConfigRepository interface.
    """

    def __init__(self, session: AsyncSession):
        self._session = session

    async def get(self, user_id: str) -> Optional[NotificationConfig]:
        stmt = (
            select(NotificationConfigModel)
            .where(NotificationConfigModel.user_id == user_id)
            .execution_options(populate_existing=True)
        )
        result = await run_with_timeout(self._session.execute(stmt), "get_notification_config")
        model = result.scalar_one_or_none()
        return self._model_to_domain(model) if model else None

    async def create(self, config: NotificationConfig) -> NotificationConfig:
        model = NotificationConfigModel(
            id=config.id or str(uuid.uuid4()),
            user_id=config.user_id,
            created_at=config.created_at,
            **self._settings_values(config),
        )

        async def _insert() -> None:
            self._session.add(model)
            try:
                await self._session.flush()
            except IntegrityError as e:
                await self._session.rollback()
                raise ConflictError("Notification config already exists", field="userId") from e

        await run_with_timeout(_insert(), "create_notification_config")
        logger.info(f"Created notification config for user: {config.user_id}")
        return self._model_to_domain(model)

    async def update(self, config: NotificationConfig) -> Optional[NotificationConfig]:
        stmt = (
            update(NotificationConfigModel)
            .where(NotificationConfigModel.user_id == config.user_id)
            .values(**self._settings_values(config))
            .execution_options(synchronize_session=False)
        )
        result = await run_with_timeout(self._session.execute(stmt), "update_notification_config")
        if result.rowcount == 0:
            return None
        logger.info(f"Updated notification config for user: {config.user_id}")
        return await self.get(config.user_id)

    async def delete(self, user_id: str) -> bool:
        stmt = (
            delete(NotificationConfigModel)
            .where(NotificationConfigModel.user_id == user_id)
            .execution_options(synchronize_session=False)
        )
        result = await run_with_timeout(self._session.execute(stmt), "delete_notification_config")
        return result.rowcount > 0

    @staticmethod
    def _settings_values(config: NotificationConfig) -> Dict[str, Any]:
        return {
            "is_enabled": config.is_enabled,
            "preferred_time": config.preferred_time.strip(),
            "quiet_hours": config.quiet_hours.model_dump() if config.quiet_hours else None,
            "batching_days": config.batching_days,
            "group_by_type": config.group_by_type,
            "muted_plant_ids": list(config.muted_plant_ids),
            "remind_watering": config.remind_watering,
            "remind_fertilizing": config.remind_fertilizing,
            "remind_misting": config.remind_misting,
            "remind_repotting": config.remind_repotting,
            "updated_at": config.updated_at,
        }

    @staticmethod
    def _model_to_domain(model: NotificationConfigModel) -> NotificationConfig:
        return NotificationConfig(
            id=model.id,
            user_id=model.user_id,
            is_enabled=model.is_enabled,
            preferred_time=model.preferred_time,
            quiet_hours=model.quiet_hours,
            batching_days=model.batching_days,
            group_by_type=model.group_by_type,
            muted_plant_ids=model.muted_plant_ids or [],
            remind_watering=model.remind_watering,
            remind_fertilizing=model.remind_fertilizing,
            remind_misting=model.remind_misting,
            remind_repotting=model.remind_repotting,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
