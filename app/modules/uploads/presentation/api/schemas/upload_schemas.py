# 📄 File: app/modules/uploads/presentation/api/schemas/upload_schemas.py
# 🧭 Purpose (Layman Explanation):
# The shapes of the messages the app sends when asking for an upload link or confirming an upload.
# 🧪 Purpose (Technical Summary):
# Pydantic request schemas (camelCase on the wire) for the uploads API.
# 🔗 Dependencies:
# pydantic, app.shared.core.models (CamelModel)
# 🔄 Connected Modules / Calls From:
# app.modules.uploads.presentation.api.v1.uploads

from pydantic import Field

from app.shared.core.models import CamelModel


class PresignUploadRequest(CamelModel):
    """Describes the file the client is about to upload."""
    filename: str = Field(default="", description="Original file name")
    content_type: str = Field(default="", description="MIME type, e.g. image/jpeg")
    size_bytes: int = Field(default=0, description="File size in bytes")


class RegisterUploadRequest(CamelModel):
    key: str = Field(default="", description="Object key returned by /presign")
