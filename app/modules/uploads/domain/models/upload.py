# 📄 File: app/modules/uploads/domain/models/upload.py
# 🧭 Purpose (Layman Explanation):
# The record we keep for every photo a user has uploaded: whose it is, where it lives in
# storage, how big it is and when it arrived.
#
# 🧪 Purpose (Technical Summary):
# Upload entity plus the value objects returned by the upload lifecycle (presigned upload
# ticket, per-user usage).
#
# 🔗 Dependencies:
# - pydantic, app.shared.core.models (CamelModel)
#
# 🔄 Connected Modules / Calls From:
# - app.modules.uploads (repository, service, API)

from datetime import datetime, timezone
from typing import Dict, Optional

from pydantic import Field

from app.shared.core.models import CamelModel


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Upload(CamelModel):
    """
    A registered object in the caller's namespace.

    ``(user_id, key)`` is unique; registering the same key twice is a no-op.
    """

    id: Optional[int] = None
    user_id: str
    key: str
    size_bytes: int
    content_type: str = ""
    created_at: datetime = Field(default_factory=_utcnow)


class PresignedUpload(CamelModel):
    """Everything a client needs to PUT a file straight into the bucket."""

    key: str
    url: str
    headers: Dict[str, str]


class UploadUsage(CamelModel):
    count: int = 0
    total_bytes: int = 0
