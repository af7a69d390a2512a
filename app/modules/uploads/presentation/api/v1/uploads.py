# 📄 File: app/modules/uploads/presentation/api/v1/uploads.py
# 🧭 Purpose (Layman Explanation):
# The web addresses the app uses to get a photo upload link, confirm an upload, delete a photo
# and see how much storage a user is using.
#
# 🧪 Purpose (Technical Summary):
# FastAPI router for the upload lifecycle. Passes the authenticated Principal to
# UploadService; ownership of object keys is enforced there before any storage I/O.
#
# 🔗 Dependencies:
# - FastAPI router
# - app.modules.uploads (service, schemas, dependencies)
# - app.shared.core.dependencies (get_current_principal)
#
# 🔄 Connected Modules / Calls From:
# - app.api.v1.router (mounted at /uploads)

"""
Uploads API Endpoints

Endpoints:
- POST /presign: Signed direct-upload URL plus the headers it covers
- POST /register: Verify and record an uploaded object
- GET /usage: Object count and bytes in the caller's namespace
- DELETE /{key}: Delete an object and its record
"""

import logging

from fastapi import APIRouter, Depends

from app.modules.uploads.domain.models.upload import PresignedUpload, UploadUsage
from app.modules.uploads.domain.services.upload_service import UploadService
from app.modules.uploads.presentation.api.schemas.upload_schemas import (
    PresignUploadRequest,
    RegisterUploadRequest,
)
from app.modules.uploads.presentation.dependencies import get_upload_service
from app.shared.core.dependencies import Principal, get_current_principal
from app.shared.core.models import SuccessResponse

logger = logging.getLogger(__name__)

uploads_router = APIRouter()


@uploads_router.post(
    "/presign",
    response_model=PresignedUpload,
    summary="Presign upload",
    responses={
        422: {"description": "Invalid file description or upload limit reached"},
        502: {"description": "Object storage unavailable"},
    }
)
async def presign_upload(
    request: PresignUploadRequest,
    principal: Principal = Depends(get_current_principal),
    upload_service: UploadService = Depends(get_upload_service)
) -> PresignedUpload:
    """
    Issue a presigned PUT URL.

    The client must send every returned header unchanged; they are part of the signature.
    """
    return await upload_service.issue_presigned_upload(
        principal,
        filename=request.filename,
        content_type=request.content_type,
        size_bytes=request.size_bytes,
    )


@uploads_router.post(
    "/register",
    response_model=SuccessResponse,
    summary="Register upload",
    responses={
        403: {"description": "Key outside the caller's namespace"},
        404: {"description": "Uploaded object not found"},
    }
)
async def register_upload(
    request: RegisterUploadRequest,
    principal: Principal = Depends(get_current_principal),
    upload_service: UploadService = Depends(get_upload_service)
) -> SuccessResponse:
    await upload_service.register_upload(principal, request.key)
    return SuccessResponse(success=True)


@uploads_router.get(
    "/usage",
    response_model=UploadUsage,
    summary="Storage usage"
)
async def get_usage(
    principal: Principal = Depends(get_current_principal),
    upload_service: UploadService = Depends(get_upload_service)
) -> UploadUsage:
    return await upload_service.user_usage(principal)


@uploads_router.delete(
    "/{key:path}",
    response_model=SuccessResponse,
    summary="Delete upload",
    responses={
        403: {"description": "Key outside the caller's namespace"},
        502: {"description": "Object storage unavailable, record kept"},
    }
)
async def delete_upload(
    key: str,
    principal: Principal = Depends(get_current_principal),
    upload_service: UploadService = Depends(get_upload_service)
) -> SuccessResponse:
    await upload_service.delete_upload(principal, key)
    return SuccessResponse(success=True)
