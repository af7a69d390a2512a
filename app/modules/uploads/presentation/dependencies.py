# 📄 File: app/modules/uploads/presentation/dependencies.py
# 🧭 Purpose (Layman Explanation):
# Hands each upload web request the database and photo storage tools it needs.
# 🧪 Purpose (Technical Summary):
# FastAPI dependency providers for UploadRepositoryImpl and UploadService.
# 🔗 Dependencies:
# FastAPI, SQLAlchemy AsyncSession, app.shared.infrastructure (session, object store)
# 🔄 Connected Modules / Calls From:
# app.modules.uploads.presentation.api.v1.uploads

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.plants.domain.repositories.plant_repository import PlantRepository
from app.modules.plants.presentation.dependencies import get_plant_repository
from app.modules.uploads.domain.repositories.upload_repository import UploadRepository
from app.modules.uploads.domain.services.upload_service import UploadService
from app.modules.uploads.infrastructure.database.upload_repository_impl import UploadRepositoryImpl
from app.shared.infrastructure.database.session import get_db_session
from app.shared.infrastructure.storage.object_store import ObjectStore, get_object_store


async def get_upload_repository(
    db: AsyncSession = Depends(get_db_session)
) -> UploadRepository:
    return UploadRepositoryImpl(db)


async def get_upload_service(
    upload_repository: UploadRepository = Depends(get_upload_repository),
    plant_repository: PlantRepository = Depends(get_plant_repository),
    object_store: ObjectStore = Depends(get_object_store)
) -> UploadService:
    return UploadService(
        upload_repository=upload_repository,
        object_store=object_store,
        plant_repository=plant_repository,
    )
