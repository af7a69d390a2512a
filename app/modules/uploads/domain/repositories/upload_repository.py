# 📄 File: app/modules/uploads/domain/repositories/upload_repository.py
# 🧭 Purpose (Layman Explanation):
# Defines the contract for keeping track of uploaded photos: counting them, recording a new
# one, forgetting one, and finding old ones.
# 🧪 Purpose (Technical Summary):
# Repository interface for Upload records (owner-scoped writes, age-based listing for the
# orphan sweep).
# 🔗 Dependencies:
# Domain models (Upload), typing, abc
# 🔄 Connected Modules / Calls From:
# Upload service, infrastructure implementation

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from ..models.upload import Upload


class UploadRepository(ABC):
    """
    Repository interface for Upload data access operations.
    """

    @abstractmethod
    async def count_for_user(self, user_id: str) -> int:
        """Number of registered uploads owned by ``user_id``."""
        pass

    @abstractmethod
    async def get(self, user_id: str, key: str) -> Optional[Upload]:
        pass

    @abstractmethod
    async def register(self, upload: Upload) -> Upload:
        """
        Record an upload.

        Idempotent: when ``(user_id, key)`` is already recorded the stored
        record is returned unchanged.
        """
        pass

    @abstractmethod
    async def delete(self, user_id: str, key: str) -> bool:
        """True when a record was removed."""
        pass

    @abstractmethod
    async def list_older_than(
        self,
        cutoff: datetime,
        limit: Optional[int] = None,
        after: Optional[Upload] = None
    ) -> List[Upload]:
        """
        Uploads created strictly before ``cutoff``, ordered by (created_at, key).

        Args:
            cutoff: Creation time threshold
            limit: Optional cap on the number of records returned
            after: Last record of the previous page; only records sorting after it are returned
        """
        pass
