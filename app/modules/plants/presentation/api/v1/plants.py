# 📄 File: app/modules/plants/presentation/api/v1/plants.py
# 🧭 Purpose (Layman Explanation):
# The web addresses the app calls to list, add, look up, edit, water and delete a user's plants.
#
# 🧪 Purpose (Technical Summary):
# FastAPI router for the Plant aggregate. Thin handlers: parse the payload, pass the
# authenticated Principal explicitly to PlantService, return camelCase JSON.
#
# 🔗 Dependencies:
# - FastAPI router and status codes
# - app.modules.plants.domain (models, PlantService)
# - app.modules.plants.presentation (dependencies, schemas)
# - app.shared.core.dependencies (get_current_principal)
#
# 🔄 Connected Modules / Calls From:
# - app.api.v1.router (mounted at /plants)

"""
Plants API Endpoints

Endpoints:
- GET /: List the caller's plants
- POST /: Create a plant
- POST /water: Mark several plants as watered
- GET /slug/{slug}: Get plant by slug
- GET /{plant_id}: Get plant by id
- PATCH /{plant_id}: Partial update (omitted = keep, null/empty = clear)
- DELETE /{plant_id}: Delete plant
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, status

from app.modules.plants.domain.models.plant import (
    CreatePlantRequest,
    PlantDetails,
    UpdatePlantRequest,
)
from app.modules.plants.domain.services.plant_service import PlantService
from app.modules.plants.presentation.api.schemas.plant_schemas import (
    WaterPlantsRequest,
    WaterPlantsResponse,
)
from app.modules.plants.presentation.dependencies import get_plant_service
from app.shared.core.dependencies import Principal, get_current_principal
from app.shared.core.models import SuccessResponse

logger = logging.getLogger(__name__)

# Create router
plants_router = APIRouter()


@plants_router.get(
    "",
    response_model=List[PlantDetails],
    summary="List plants",
    description="Every plant owned by the caller, with signed photo URLs"
)
async def list_plants(
    principal: Principal = Depends(get_current_principal),
    plant_service: PlantService = Depends(get_plant_service)
) -> List[PlantDetails]:
    return await plant_service.list_plants(principal)


@plants_router.post(
    "",
    response_model=PlantDetails,
    status_code=status.HTTP_201_CREATED,
    summary="Create plant",
    responses={
        201: {"description": "Plant created"},
        422: {"description": "Validation failed or plant limit exceeded"},
    }
)
async def create_plant(
    request: CreatePlantRequest,
    principal: Principal = Depends(get_current_principal),
    plant_service: PlantService = Depends(get_plant_service)
) -> PlantDetails:
    """
    Create a new plant for the caller.

    The slug is derived from the name (and location when the name is taken).
    """
    return await plant_service.create_plant(principal, request)


@plants_router.post(
    "/water",
    response_model=WaterPlantsResponse,
    summary="Water plants",
    description="Set lastWatered to now on the given plants; unknown or foreign ids are skipped"
)
async def water_plants(
    request: WaterPlantsRequest,
    principal: Principal = Depends(get_current_principal),
    plant_service: PlantService = Depends(get_plant_service)
) -> WaterPlantsResponse:
    modified = await plant_service.water_plants(principal, request.plant_ids)
    return WaterPlantsResponse(success=True, modified=modified)


@plants_router.get(
    "/slug/{slug}",
    response_model=PlantDetails,
    summary="Get plant by slug",
    responses={404: {"description": "Plant not found"}}
)
async def get_plant_by_slug(
    slug: str,
    principal: Principal = Depends(get_current_principal),
    plant_service: PlantService = Depends(get_plant_service)
) -> PlantDetails:
    return await plant_service.get_plant_by_slug(principal, slug)


@plants_router.get(
    "/{plant_id}",
    response_model=PlantDetails,
    summary="Get plant",
    responses={404: {"description": "Plant not found"}}
)
async def get_plant(
    plant_id: str,
    principal: Principal = Depends(get_current_principal),
    plant_service: PlantService = Depends(get_plant_service)
) -> PlantDetails:
    return await plant_service.get_plant(principal, plant_id)


@plants_router.patch(
    "/{plant_id}",
    response_model=PlantDetails,
    summary="Update plant",
    responses={
        404: {"description": "Plant not found"},
        422: {"description": "Validation failed"},
    }
)
async def update_plant(
    plant_id: str,
    request: UpdatePlantRequest,
    principal: Principal = Depends(get_current_principal),
    plant_service: PlantService = Depends(get_plant_service)
) -> PlantDetails:
    """
    Partially update a plant.

    Fields left out of the body are kept. ``null``, ``[]`` or an all-default
    sub-object clears the stored value.
    """
    return await plant_service.update_plant(principal, plant_id, request.to_patch())


@plants_router.delete(
    "/{plant_id}",
    response_model=SuccessResponse,
    summary="Delete plant",
    responses={404: {"description": "Plant not found"}}
)
async def delete_plant(
    plant_id: str,
    principal: Principal = Depends(get_current_principal),
    plant_service: PlantService = Depends(get_plant_service)
) -> SuccessResponse:
    await plant_service.delete_plant(principal, plant_id)
    logger.info(f"Plant {plant_id} deleted by user {principal.user_id}")
    return SuccessResponse(success=True)
