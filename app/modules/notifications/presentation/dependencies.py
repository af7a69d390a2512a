# 📄 File: app/modules/notifications/presentation/dependencies.py
# 🧭 Purpose (Layman Explanation):
# Hands each reminder-settings web request the database tools it needs.
# 🧪 Purpose (Technical Summary):
# FastAPI dependency providers for NotificationConfigRepositoryImpl and NotificationService.
# 🔗 Dependencies:
# FastAPI, SQLAlchemy AsyncSession, plants presentation dependencies
# 🔄 Connected Modules / Calls From:
# app.modules.notifications.presentation.api.v1.notifications

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.notifications.domain.repositories.notification_repository import (
    NotificationConfigRepository,
)
from app.modules.notifications.domain.services.notification_service import NotificationService
from app.modules.notifications.infrastructure.database.notification_repository_impl import (
    NotificationConfigRepositoryImpl,
)
from app.modules.plants.domain.repositories.plant_repository import PlantRepository
from app.modules.plants.presentation.dependencies import get_plant_repository
from app.shared.infrastructure.database.session import get_db_session


async def get_notification_repository(
    db: AsyncSession = Depends(get_db_session)
) -> NotificationConfigRepository:
    return NotificationConfigRepositoryImpl(db)


async def get_notification_service(
    notification_repository: NotificationConfigRepository = Depends(get_notification_repository),
    plant_repository: PlantRepository = Depends(get_plant_repository)
) -> NotificationService:
    return NotificationService(
        notification_repository=notification_repository,
        plant_repository=plant_repository,
    )
