# 📄 File: app/modules/uploads/domain/services/upload_service.py
# 🧭 Purpose (Layman Explanation):
# Looks after a photo from start to finish: hands out a one-time upload link, checks the photo
# really arrived and is allowed, deletes it on request, and regularly sweeps away photos that
# no plant uses anymore.
#
# 🧪 Purpose (Technical Summary):
# Upload lifecycle manager over UploadRepository + ObjectStore: presign with quota and type
# checks, server-side registration with HEAD verification, owner-checked deletion, per-user
# usage and a time-budgeted orphan cleanup sweep that logs per-key failures and continues.
#
# 🔗 Dependencies:
# - app.modules.uploads.domain (Upload, UploadRepository)
# - app.modules.plants.domain.repositories.plant_repository (photo id lookups)
# - app.shared.infrastructure.storage.object_store
# - app.shared.core (Principal, exceptions)
#
# 🔄 Connected Modules / Calls From:
# - app.modules.uploads.presentation.api.v1.uploads
# - app.main (orphan sweep periodic task)

import logging
import time
from collections import defaultdict
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Optional

from app.modules.plants.domain.repositories.plant_repository import PlantRepository
from app.modules.uploads.domain.models.upload import PresignedUpload, Upload, UploadUsage
from app.modules.uploads.domain.repositories.upload_repository import UploadRepository
from app.shared.config.settings import Settings, get_settings
from app.shared.core.dependencies import Principal
from app.shared.core.exceptions import (
    AuthorizationError,
    NotFoundError,
    PlantCareException,
    QuotaExceededError,
    ValidationError,
)
from app.shared.core.validation import FieldError
from app.shared.infrastructure.storage.object_store import (
    ObjectStore,
    build_object_key,
    key_belongs_to_user,
    user_prefix,
)

logger = logging.getLogger(__name__)

SWEEP_PAGE_SIZE = 500


def _normalize_content_type(content_type: str) -> str:
    """'image/JPEG; charset=binary' -> 'image/jpeg'"""
    return content_type.split(";")[0].strip().lower()


class UploadService:
    """
    Upload lifecycle manager.
    """

    def __init__(
        self,
        upload_repository: UploadRepository,
        object_store: ObjectStore,
        plant_repository: Optional[PlantRepository] = None,
        settings: Optional[Settings] = None,
        clock: Callable[[], float] = time.monotonic,
        sweep_page_size: int = SWEEP_PAGE_SIZE
    ):
        """
        Initialize upload service.

        Args:
            upload_repository: Upload record storage
            object_store: Bucket access
            plant_repository: Needed by the orphan sweep to find referenced photos
            settings: Limits and quotas
            clock: Monotonic clock used for the sweep's time budget
            sweep_page_size: Upload records loaded per sweep query
        """
        self.upload_repository = upload_repository
        self.object_store = object_store
        self.plant_repository = plant_repository
        self.settings = settings or get_settings()
        self._clock = clock
        self.sweep_page_size = sweep_page_size

    # =========================================================================
    # PRESIGN / REGISTER / DELETE
    # =========================================================================

    async def issue_presigned_upload(
        self,
        principal: Principal,
        filename: str,
        content_type: str,
        size_bytes: int
    ) -> PresignedUpload:
        """
        Sign a direct upload into the caller's namespace.

        Raises:
            ValidationError: Missing filename, bad size or content type
            QuotaExceededError: The caller already has the maximum number of uploads
        """
        content_type = _normalize_content_type(content_type or "")
        errors = self._check_upload(filename, content_type, size_bytes)
        if errors:
            raise ValidationError(errors=errors)

        current = await self.upload_repository.count_for_user(principal.user_id)
        limit = self.settings.MAX_UPLOADS_PER_USER
        if current >= limit:
            logger.info(f"Upload limit reached for user {principal.user_id}: {current}/{limit}")
            raise QuotaExceededError("Upload limit reached", limit=limit, current=current)

        key = build_object_key(principal.user_id, filename.strip())
        url, headers = await self.object_store.presign_put(key, content_type, principal.user_id)
        logger.info(f"Issued presigned upload {key} for user {principal.user_id}")
        return PresignedUpload(key=key, url=url, headers=headers)

    async def register_upload(self, principal: Principal, key: str) -> Upload:
        """
        Verify an uploaded object and record it.

        The ownership check happens before any storage call. An object that
        fails the size or type recheck is deleted from the bucket.

        Raises:
            AuthorizationError: Key outside the caller's namespace
            NotFoundError: Nothing was uploaded under the key
            ValidationError: Object too large or of a disallowed type
        """
        self._ensure_owned(principal, key)

        info = await self.object_store.head(key)
        if info is None:
            raise NotFoundError("Uploaded object not found", resource_type="upload")

        content_type = _normalize_content_type(info.content_type)
        errors: List[FieldError] = []
        if info.size_bytes > self.settings.MAX_UPLOAD_BYTES:
            errors.append(FieldError("sizeBytes", f"Uploaded file exceeds {self._max_size_label()} limit"))
        if content_type not in self.settings.allowed_image_content_types:
            errors.append(FieldError("contentType", "Uploaded file type not allowed"))
        if errors:
            logger.warning(
                f"Rejected upload {key} for user {principal.user_id}: "
                f"{info.size_bytes} bytes, type '{content_type}'"
            )
            await self.object_store.delete(key)
            raise ValidationError(errors=errors)

        upload = Upload(
            user_id=principal.user_id,
            key=key,
            size_bytes=info.size_bytes,
            content_type=content_type,
            created_at=datetime.now(timezone.utc),
        )
        return await self.upload_repository.register(upload)

    async def delete_upload(self, principal: Principal, key: str) -> None:
        """
        Delete an object and its record.

        When the bucket delete fails the record is kept, so the sweep or a
        retry can still find it.
        """
        self._ensure_owned(principal, key)
        await self.object_store.delete(key)
        deleted = await self.upload_repository.delete(principal.user_id, key)
        logger.info(f"Deleted upload {key} for user {principal.user_id} (record removed: {deleted})")

    async def user_usage(self, principal: Principal) -> UploadUsage:
        objects = await self.object_store.list_prefix(user_prefix(principal.user_id))
        return UploadUsage(
            count=len(objects),
            total_bytes=sum(obj.size_bytes for obj in objects),
        )

    # =========================================================================
    # ORPHAN SWEEP
    # =========================================================================

    async def cleanup_orphaned_uploads(
        self,
        older_than: timedelta,
        budget_seconds: Optional[float] = None,
        now: Optional[datetime] = None
    ) -> int:
        """
        Remove uploads that are older than ``older_than`` and referenced by no plant.

        Candidates are read in pages of ``sweep_page_size``. A key counts as referenced
        when any of the owner's plants lists it in ``photoIds`` or in a growth log entry.
        Per-key failures are logged and skipped. The sweep stops early once
        ``budget_seconds`` have elapsed.

        Returns:
            int: Number of uploads removed
        """
        if self.plant_repository is None:
            raise RuntimeError("Orphan cleanup requires a plant repository")

        started = self._clock()
        cutoff = (now or datetime.now(timezone.utc)) - older_than

        scanned = 0
        removed = 0
        failed = 0
        out_of_time = False
        last_seen: Optional[Upload] = None

        while not out_of_time:
            page = await self.upload_repository.list_older_than(
                cutoff, limit=self.sweep_page_size, after=last_seen
            )
            if not page:
                break
            scanned += len(page)
            last_seen = page[-1]

            by_user: Dict[str, List[Upload]] = defaultdict(list)
            for upload in page:
                by_user[upload.user_id].append(upload)

            for user_id, uploads in by_user.items():
                if self._budget_spent(started, budget_seconds):
                    out_of_time = True
                    break

                referenced = await self.plant_repository.photo_ids_for_user(user_id)
                for upload in uploads:
                    if upload.key in referenced:
                        continue
                    if self._budget_spent(started, budget_seconds):
                        out_of_time = True
                        break
                    try:
                        await self.object_store.delete(upload.key)
                        await self.upload_repository.delete(user_id, upload.key)
                    except PlantCareException as e:
                        failed += 1
                        logger.warning(f"Failed to remove orphaned upload {upload.key}: {e.message}")
                        continue
                    removed += 1

                if out_of_time:
                    break

            if len(page) < self.sweep_page_size:
                break

        if out_of_time:
            logger.warning(f"Orphan sweep stopped after {budget_seconds}s budget")
        logger.info(f"Orphan sweep: {scanned} candidates, {removed} removed, {failed} failed")
        return removed

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _budget_spent(self, started: float, budget_seconds: Optional[float]) -> bool:
        return budget_seconds is not None and self._clock() - started >= budget_seconds

    def _ensure_owned(self, principal: Principal, key: str) -> None:
        if not key_belongs_to_user(key, principal.user_id):
            logger.warning(f"User {principal.user_id} attempted to use foreign key: {key}")
            raise AuthorizationError("Invalid or unauthorized key", resource_type="upload")

    def _max_size_label(self) -> str:
        max_bytes = self.settings.MAX_UPLOAD_BYTES
        if max_bytes % (1024 * 1024) == 0:
            return f"{max_bytes // (1024 * 1024)}MB"
        return f"{max_bytes} bytes"

    def _check_upload(self, filename: str, content_type: str, size_bytes: int) -> List[FieldError]:
        errors: List[FieldError] = []
        if not filename or not filename.strip():
            errors.append(FieldError("filename", "Filename is required"))
        if size_bytes is None or size_bytes <= 0:
            errors.append(FieldError("sizeBytes", "File size must be greater than 0"))
        elif size_bytes > self.settings.MAX_UPLOAD_BYTES:
            errors.append(FieldError("sizeBytes", f"File too large (max {self._max_size_label()})"))
        if not content_type:
            errors.append(FieldError("contentType", "Content type is required"))
        elif content_type not in self.settings.allowed_image_content_types:
            allowed = ", ".join(self.settings.allowed_image_content_types)
            errors.append(FieldError("contentType", f"Unsupported content type (allowed: {allowed})"))
        return errors
