# 📄 File: app/modules/notifications/presentation/api/v1/notifications.py
# 🧭 Purpose (Layman Explanation):
# The web addresses the app uses to read, save and reset a user's reminder settings.
#
# 🧪 Purpose (Technical Summary):
# FastAPI router for NotificationConfig. PUT answers 201 when the config was created and
# 200 when it replaced an existing one.
#
# 🔗 Dependencies:
# - FastAPI router, Response
# - app.modules.notifications (models, service, dependencies)
# - app.shared.core.dependencies (get_current_principal)
#
# 🔄 Connected Modules / Calls From:
# - app.api.v1.router (mounted at /notifications)

import logging

from fastapi import APIRouter, Depends, Response, status

from app.modules.notifications.domain.models.notification_config import (
    NotificationConfig,
    NotificationSettings,
)
from app.modules.notifications.domain.services.notification_service import NotificationService
from app.modules.notifications.presentation.dependencies import get_notification_service
from app.shared.core.dependencies import Principal, get_current_principal
from app.shared.core.models import SuccessResponse

logger = logging.getLogger(__name__)

notifications_router = APIRouter()


@notifications_router.get(
    "/config",
    response_model=NotificationConfig,
    summary="Get notification config",
    description="Stored reminder preferences, or the defaults when none were saved"
)
async def get_notification_config(
    principal: Principal = Depends(get_current_principal),
    notification_service: NotificationService = Depends(get_notification_service)
) -> NotificationConfig:
    return await notification_service.get_config(principal)


@notifications_router.put(
    "/config",
    response_model=NotificationConfig,
    summary="Create or replace notification config",
    responses={
        200: {"description": "Config replaced"},
        201: {"description": "Config created"},
        422: {"description": "Validation failed"},
    }
)
async def put_notification_config(
    payload: NotificationSettings,
    response: Response,
    principal: Principal = Depends(get_current_principal),
    notification_service: NotificationService = Depends(get_notification_service)
) -> NotificationConfig:
    config, created = await notification_service.upsert_config(principal, payload)
    response.status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
    return config


@notifications_router.delete(
    "/config",
    response_model=SuccessResponse,
    summary="Delete notification config",
    responses={404: {"description": "No config stored"}}
)
async def delete_notification_config(
    principal: Principal = Depends(get_current_principal),
    notification_service: NotificationService = Depends(get_notification_service)
) -> SuccessResponse:
    await notification_service.delete_config(principal)
    return SuccessResponse(success=True)
