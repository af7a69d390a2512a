"""
Test doubles and payload builders shared by the test modules.
"""

from datetime import datetime
from typing import Dict, List, Optional, Set, Tuple

from app.modules.plants.domain.models.plant import CreatePlantRequest
from app.shared.core.exceptions import ObjectStoreUnavailableError
from app.shared.infrastructure.storage.object_store import ObjectInfo, ObjectStore

USER_ID = "user-alice"
OTHER_USER_ID = "user-bob"
TEST_USER_HEADER = "X-Test-User"


# ========================== Object Store Fake ==============================


class FakeObjectStore(ObjectStore):
    """In-memory bucket that records every call and fails on demand."""

    def __init__(self):
        self.objects: Dict[str, ObjectInfo] = {}
        self.calls: List[Tuple[str, str]] = []
        self.failing_operations: Set[str] = set()
        self.failing_keys: Set[str] = set()

    def put(self, key: str, size_bytes: int = 1024, content_type: str = "image/jpeg") -> None:
        self.objects[key] = ObjectInfo(key=key, size_bytes=size_bytes, content_type=content_type)

    def _record(self, operation: str, key: str) -> None:
        self.calls.append((operation, key))
        if operation in self.failing_operations or key in self.failing_keys:
            raise ObjectStoreUnavailableError(operation=operation)

    async def presign_put(self, key: str, content_type: str, user_id: str):
        self._record("presign_put", key)
        headers = {"Content-Type": content_type, "x-amz-acl": "private", "x-amz-meta-user": user_id}
        return f"https://bucket.test/{key}?signature=put", headers

    async def presign_get(self, key: str) -> str:
        self._record("presign_get", key)
        return f"https://bucket.test/{key}?signature=get"

    async def head(self, key: str) -> Optional[ObjectInfo]:
        self._record("head", key)
        return self.objects.get(key)

    async def delete(self, key: str) -> None:
        self._record("delete", key)
        self.objects.pop(key, None)

    async def list_prefix(self, prefix: str) -> List[ObjectInfo]:
        self._record("list_prefix", prefix)
        return [info for key, info in sorted(self.objects.items()) if key.startswith(prefix)]

    def mutating_calls(self) -> List[Tuple[str, str]]:
        return [call for call in self.calls if call[0] in ("delete", "presign_put")]


# ========================== Helpers ========================================


def plant_request(name: str = "Monstera", **fields) -> CreatePlantRequest:
    """Valid create payload; keyword arguments use the camelCase wire names."""
    return CreatePlantRequest.model_validate({"name": name, **fields})


def watering(interval_days: int = 7, last_watered: Optional[datetime] = None) -> dict:
    data = {"intervalDays": interval_days, "method": "Top", "waterType": "Tap"}
    if last_watered is not None:
        data["lastWatered"] = last_watered.isoformat()
    return data
