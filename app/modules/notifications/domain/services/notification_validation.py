# 📄 File: app/modules/notifications/domain/services/notification_validation.py
# 🧭 Purpose (Layman Explanation):
# Checks reminder preferences before saving: times look like "08:30", batching is between
# 0 and 30 days, and the muted plant list is sensible.
#
# 🧪 Purpose (Technical Summary):
# Pure validator for NotificationSettings returning FieldError lists. The same rules apply
# to create and replace, so a PUT must always carry the required fields.
#
# 🔗 Dependencies:
# - re, app.shared.core.validation
#
# 🔄 Connected Modules / Calls From:
# - app.modules.notifications.domain.services.notification_service

import re
from typing import List

from app.modules.notifications.domain.models.notification_config import NotificationSettings
from app.shared.core.validation import FieldError, check_range

HH_MM = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")

BATCHING_DAYS_MIN = 0
BATCHING_DAYS_MAX = 30
MUTED_PLANTS_MAX_ITEMS = 100


def validate_notification_config(config: NotificationSettings) -> List[FieldError]:
    """
    Validate reminder preferences.

    Args:
        config: Payload of a create or replace

    Returns:
        List[FieldError]: Empty when valid
    """
    errors: List[FieldError] = []

    preferred_time = config.preferred_time.strip()
    if not preferred_time:
        errors.append(FieldError(
            "preferredTime",
            "PreferredTime is required and must be in HH:mm format (e.g., 08:30)",
        ))
    elif not HH_MM.match(preferred_time):
        errors.append(FieldError(
            "preferredTime",
            "PreferredTime must be in HH:mm format (e.g., 08:30)",
        ))

    if config.quiet_hours is not None:
        if not HH_MM.match(config.quiet_hours.start.strip()):
            errors.append(FieldError(
                "quietHours.start",
                "QuietHours start time must be in HH:mm format (e.g., 22:00)",
            ))
        if not HH_MM.match(config.quiet_hours.end.strip()):
            errors.append(FieldError(
                "quietHours.end",
                "QuietHours end time must be in HH:mm format (e.g., 07:00)",
            ))

    batching_error = check_range(
        "batchingDays",
        config.batching_days,
        BATCHING_DAYS_MIN,
        BATCHING_DAYS_MAX,
        f"BatchingDays must be between {BATCHING_DAYS_MIN} and {BATCHING_DAYS_MAX}",
    )
    if batching_error:
        errors.append(batching_error)

    if len(config.muted_plant_ids) > MUTED_PLANTS_MAX_ITEMS:
        errors.append(FieldError(
            "mutedPlantIds",
            f"MutedPlantIds array must contain {MUTED_PLANTS_MAX_ITEMS} items or less",
        ))

    for plant_id in config.muted_plant_ids:
        if not plant_id.strip():
            errors.append(FieldError("mutedPlantIds", "All plant IDs must be non-empty strings"))
            break

    return errors
