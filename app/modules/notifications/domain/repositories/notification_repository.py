# 📄 File: app/modules/notifications/domain/repositories/notification_repository.py
# 🧭 Purpose (Layman Explanation):
# Defines how reminder preferences are saved, looked up, replaced and removed.
# 🧪 Purpose (Technical Summary):
# Repository interface for NotificationConfig (one per user, keyed by user id).
# 🔗 Dependencies:
# Domain models (NotificationConfig), typing, abc
# 🔄 Connected Modules / Calls From:
# Notification service, infrastructure implementation

from abc import ABC, abstractmethod
from typing import Optional

from ..models.notification_config import NotificationConfig


class NotificationConfigRepository(ABC):
    """
    Repository interface for NotificationConfig data access operations.
    """

    @abstractmethod
    async def get(self, user_id: str) -> Optional[NotificationConfig]:
        """Stored config of ``user_id``, None when the user never saved one."""
        pass

    @abstractmethod
    async def create(self, config: NotificationConfig) -> NotificationConfig:
        """
        Insert a config.

        Raises:
            ConflictError: If the user already has one
        """
        pass

    @abstractmethod
    async def update(self, config: NotificationConfig) -> Optional[NotificationConfig]:
        """Replace every user-editable field; None when nothing is stored."""
        pass

    @abstractmethod
    async def delete(self, user_id: str) -> bool:
        pass
