# 📄 File: app/modules/plants/presentation/dependencies.py
# 🧭 Purpose (Layman Explanation):
# Hands each plant web request the tools it needs: a database connection, the plant storage
# helper and the photo storage, all wired together for that one request.
# 🧪 Purpose (Technical Summary):
# FastAPI dependency providers building the per-request PlantRepositoryImpl and PlantService.
# 🔗 Dependencies:
# FastAPI, SQLAlchemy AsyncSession, app.shared.infrastructure (session, object store)
# 🔄 Connected Modules / Calls From:
# app.modules.plants.presentation.api.v1.plants, notifications and uploads dependencies

import logging

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.plants.domain.repositories.plant_repository import PlantRepository
from app.modules.plants.domain.services.plant_service import PlantService
from app.modules.plants.infrastructure.database.plant_repository_impl import PlantRepositoryImpl
from app.shared.infrastructure.database.session import get_db_session
from app.shared.infrastructure.storage.object_store import ObjectStore, get_object_store

logger = logging.getLogger(__name__)


async def get_plant_repository(
    db: AsyncSession = Depends(get_db_session)
) -> PlantRepository:
    return PlantRepositoryImpl(db)


async def get_plant_service(
    plant_repository: PlantRepository = Depends(get_plant_repository),
    object_store: ObjectStore = Depends(get_object_store)
) -> PlantService:
    """
    Get plant service for the current request.

    Returns:
        PlantService: Service bound to the request's database session
    """
    return PlantService(plant_repository=plant_repository, object_store=object_store)
