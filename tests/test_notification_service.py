"""
Tests for NotificationService: defaults, upsert, validation and deletion.
"""

from datetime import datetime, timezone

import pytest

from app.modules.notifications.domain.models.notification_config import NotificationSettings
from app.modules.notifications.domain.services.notification_service import (
    MUTED_PLANTS_ERROR,
    NotificationService,
)
from app.shared.core.exceptions import NotFoundError, ValidationError
from fakes import OTHER_USER_ID, USER_ID, plant_request


@pytest.fixture()
def notification_service(notification_repository, plant_repository):
    return NotificationService(notification_repository, plant_repository)


def settings_payload(**fields) -> NotificationSettings:
    data = {"preferredTime": "08:30", "batchingDays": 1, "remindWatering": True}
    data.update(fields)
    return NotificationSettings.model_validate(data)


async def add_plant(plant_repository, name, user_id=USER_ID):
    plant = plant_request(name).to_plant(user_id, name.lower(), datetime.now(timezone.utc))
    return await plant_repository.create(plant)


async def test_defaults_are_returned_without_writing(
    notification_service, notification_repository, principal
):
    config = await notification_service.get_config(principal)

    assert config.id is None
    assert config.preferred_time == "08:00"
    assert config.batching_days == 1
    assert config.is_enabled and config.group_by_type
    assert all([
        config.remind_watering, config.remind_fertilizing,
        config.remind_misting, config.remind_repotting,
    ])
    assert await notification_repository.get(USER_ID) is None


async def test_first_put_creates_then_replaces(notification_service, principal):
    created, was_created = await notification_service.upsert_config(principal, settings_payload())
    replaced, was_created_again = await notification_service.upsert_config(
        principal, settings_payload(preferredTime="21:15", quietHours={"start": "22:00", "end": "07:00"})
    )

    assert was_created is True
    assert was_created_again is False
    assert replaced.id == created.id
    assert replaced.preferred_time == "21:15"
    assert replaced.quiet_hours.start == "22:00"
    assert replaced.created_at == created.created_at

    stored = await notification_service.get_config(principal)
    assert stored.preferred_time == "21:15"


@pytest.mark.parametrize("fields, field, message", [
    ({"preferredTime": ""}, "preferredTime",
     "PreferredTime is required and must be in HH:mm format (e.g., 08:30)"),
    ({"preferredTime": "24:00"}, "preferredTime", "PreferredTime must be in HH:mm format (e.g., 08:30)"),
    ({"quietHours": {"start": "9pm", "end": "07:00"}}, "quietHours.start",
     "QuietHours start time must be in HH:mm format (e.g., 22:00)"),
    ({"batchingDays": 31}, "batchingDays", "BatchingDays must be between 0 and 30"),
    ({"mutedPlantIds": ["x"] * 101}, "mutedPlantIds", "MutedPlantIds array must contain 100 items or less"),
    ({"mutedPlantIds": [" "]}, "mutedPlantIds", "All plant IDs must be non-empty strings"),
])
async def test_invalid_settings_are_rejected(
    notification_service, notification_repository, principal, fields, field, message
):
    with pytest.raises(ValidationError) as exc_info:
        await notification_service.upsert_config(principal, settings_payload(**fields))

    assert exc_info.value.details["errors"] == [{"field": field, "message": message}]
    assert await notification_repository.get(USER_ID) is None


async def test_muted_plants_must_belong_to_caller(notification_service, plant_repository, principal):
    mine = await add_plant(plant_repository, "Monstera")
    foreign = await add_plant(plant_repository, "Cactus", user_id=OTHER_USER_ID)

    with pytest.raises(ValidationError) as exc_info:
        await notification_service.upsert_config(
            principal, settings_payload(mutedPlantIds=[mine.id, foreign.id])
        )
    assert exc_info.value.errors[0].message == MUTED_PLANTS_ERROR

    config, _ = await notification_service.upsert_config(principal, settings_payload(mutedPlantIds=[mine.id]))
    assert config.muted_plant_ids == [mine.id]


async def test_delete_then_not_found(notification_service, principal):
    await notification_service.upsert_config(principal, settings_payload())

    await notification_service.delete_config(principal)

    with pytest.raises(NotFoundError) as exc_info:
        await notification_service.delete_config(principal)
    assert exc_info.value.message == "Notification config not found"
    assert (await notification_service.get_config(principal)).id is None
