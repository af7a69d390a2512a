# 📄 File: app/modules/notifications/domain/services/notification_service.py
# 🧭 Purpose (Layman Explanation):
# Reads, saves and removes a user's reminder preferences, filling in sensible defaults for
# users who never changed them and refusing to mute plants that are not theirs.
#
# 🧪 Purpose (Technical Summary):
# Application service for NotificationConfig: lazy default on read, validated upsert with a
# muted-plant ownership check through the plant repository, delete with 404 semantics.
#
# 🔗 Dependencies:
# - app.modules.notifications.domain (models, validation, repository)
# - app.modules.plants.domain.repositories.plant_repository
# - app.shared.core (Principal, exceptions)
#
# 🔄 Connected Modules / Calls From:
# - app.modules.notifications.presentation.api.v1.notifications

import logging
from datetime import datetime, timezone
from typing import Tuple

from app.modules.notifications.domain.models.notification_config import (
    NotificationConfig,
    NotificationSettings,
)
from app.modules.notifications.domain.repositories.notification_repository import (
    NotificationConfigRepository,
)
from app.modules.notifications.domain.services.notification_validation import (
    validate_notification_config,
)
from app.modules.plants.domain.repositories.plant_repository import PlantRepository
from app.shared.core.dependencies import Principal
from app.shared.core.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

MUTED_PLANTS_ERROR = "One or more plant IDs do not belong to this user or do not exist"


class NotificationService:
    """
    Service for reminder preferences of one authenticated user.
    """

    def __init__(
        self,
        notification_repository: NotificationConfigRepository,
        plant_repository: PlantRepository
    ):
        self.notification_repository = notification_repository
        self.plant_repository = plant_repository

    async def get_config(self, principal: Principal) -> NotificationConfig:
        """Stored preferences, or the defaults when none were saved (nothing is written)."""
        config = await self.notification_repository.get(principal.user_id)
        if config is None:
            logger.debug(f"No notification config for user {principal.user_id}, returning defaults")
            return NotificationConfig.default_for(principal.user_id)
        return config

    async def upsert_config(
        self,
        principal: Principal,
        payload: NotificationSettings
    ) -> Tuple[NotificationConfig, bool]:
        """
        Create or fully replace the caller's preferences.

        Returns:
            Tuple of (stored config, created flag)

        Raises:
            ValidationError: If the payload is invalid or mutes a plant the caller does not own
        """
        errors = validate_notification_config(payload)
        if errors:
            raise ValidationError(errors=errors)

        if payload.muted_plant_ids:
            wanted = set(payload.muted_plant_ids)
            owned = await self.plant_repository.find_owned_ids(principal.user_id, wanted)
            if owned != wanted:
                logger.info(
                    f"User {principal.user_id} tried to mute {len(wanted - owned)} unknown or foreign plants"
                )
                raise ValidationError.for_field("mutedPlantIds", MUTED_PLANTS_ERROR)

        now = datetime.now(timezone.utc)
        config = NotificationConfig(
            **payload.model_dump(),
            user_id=principal.user_id,
            created_at=now,
            updated_at=now,
        )

        existing = await self.notification_repository.get(principal.user_id)
        if existing is not None:
            config.id = existing.id
            updated = await self.notification_repository.update(config)
            if updated is not None:
                return updated, False

        created = await self.notification_repository.create(config)
        return created, True

    async def delete_config(self, principal: Principal) -> None:
        deleted = await self.notification_repository.delete(principal.user_id)
        if not deleted:
            raise NotFoundError("Notification config not found", resource_type="notification_config")
        logger.info(f"Deleted notification config for user {principal.user_id}")
