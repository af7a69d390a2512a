# 📄 File: app/modules/uploads/infrastructure/database/upload_repository_impl.py
# 🧭 Purpose (Layman Explanation):
# Saves, counts, finds and removes uploaded-photo records in the database.
#
# 🧪 Purpose (Technical Summary):
# SQLAlchemy async implementation of UploadRepository with idempotent registration and
# age-ordered listing for the orphan sweep. Every round trip honours the request timeout.
#
# 🔗 Dependencies:
# - app.modules.uploads.domain (Upload, UploadRepository)
# - app.modules.uploads.infrastructure.database.models (UploadModel)
# - app.shared.infrastructure.database.session (run_with_timeout)
#
# 🔄 Connected Modules / Calls From:
# - app.modules.uploads.presentation.dependencies
# - app.main (orphan sweep job)

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import and_, delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.uploads.domain.models.upload import Upload
from app.modules.uploads.domain.repositories.upload_repository import UploadRepository
from app.modules.uploads.infrastructure.database.models import UploadModel
from app.shared.infrastructure.database.session import run_with_timeout

logger = logging.getLogger(__name__)


class UploadRepositoryImpl(UploadRepository):
    """
    SQLAlchemy implementation of the UploadRepository interface.
    """

    def __init__(self, session: AsyncSession):
        self._session = session

    async def count_for_user(self, user_id: str) -> int:
        stmt = select(func.count()).select_from(UploadModel).where(UploadModel.user_id == user_id)
        result = await run_with_timeout(self._session.execute(stmt), "count_uploads")
        return int(result.scalar_one())

    async def get(self, user_id: str, key: str) -> Optional[Upload]:
        stmt = select(UploadModel).where(UploadModel.user_id == user_id, UploadModel.key == key)
        result = await run_with_timeout(self._session.execute(stmt), "get_upload")
        model = result.scalar_one_or_none()
        return self._model_to_domain(model) if model else None

    async def register(self, upload: Upload) -> Upload:
        existing = await self.get(upload.user_id, upload.key)
        if existing is not None:
            logger.debug(f"Upload {upload.key} already registered for user: {upload.user_id}")
            return existing

        model = UploadModel(
            user_id=upload.user_id,
            key=upload.key,
            size_bytes=upload.size_bytes,
            content_type=upload.content_type,
            created_at=upload.created_at,
        )

        async def _insert() -> None:
            self._session.add(model)
            await self._session.flush()

        await run_with_timeout(_insert(), "register_upload")
        logger.info(f"Registered upload {upload.key} ({upload.size_bytes} bytes) for user: {upload.user_id}")
        return self._model_to_domain(model)

    async def delete(self, user_id: str, key: str) -> bool:
        stmt = (
            delete(UploadModel)
            .where(UploadModel.user_id == user_id, UploadModel.key == key)
            .execution_options(synchronize_session=False)
        )
        result = await run_with_timeout(self._session.execute(stmt), "delete_upload")
        return result.rowcount > 0

    async def list_older_than(
        self,
        cutoff: datetime,
        limit: Optional[int] = None,
        after: Optional[Upload] = None
    ) -> List[Upload]:
        stmt = (
            select(UploadModel)
            .where(UploadModel.created_at < cutoff)
            .order_by(UploadModel.created_at, UploadModel.key)
        )
        if after is not None:
            # Keyset paging stays correct while the sweep deletes rows behind it
            stmt = stmt.where(or_(
                UploadModel.created_at > after.created_at,
                and_(UploadModel.created_at == after.created_at, UploadModel.key > after.key),
            ))
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await run_with_timeout(self._session.execute(stmt), "list_old_uploads")
        return [self._model_to_domain(model) for model in result.scalars().all()]

    @staticmethod
    def _model_to_domain(model: UploadModel) -> Upload:
        return Upload(
            id=model.id,
            user_id=model.user_id,
            key=model.key,
            size_bytes=model.size_bytes,
            content_type=model.content_type or "",
            created_at=model.created_at,
        )
