# 📄 File: app/modules/plants/domain/services/plant_service.py
# 🧭 Purpose (Layman Explanation):
# The plant "front desk": it checks a request, makes sure the user has room for another plant,
# gives the plant a unique web label, saves it, and attaches links to the plant's photos.
#
# 🧪 Purpose (Technical Summary):
# Application service for the Plant aggregate. Orchestrates validation, per-user quota,
# slug allocation (retrying on a unique-constraint race), owner-scoped CRUD, bulk watering
# and photo URL resolution through the object store.
#
# 🔗 Dependencies:
# - app.modules.plants.domain.repositories.plant_repository
# - app.modules.plants.domain.services (validation, slug)
# - app.shared.infrastructure.storage.object_store
# - app.shared.core (Principal, exceptions)
#
# 🔄 Connected Modules / Calls From:
# - app.modules.plants.presentation.api.v1.plants

import logging
from datetime import datetime, timezone
from typing import List, Optional

from app.modules.plants.domain.models.plant import (
    CreatePlantRequest,
    Plant,
    PlantDetails,
    PlantPatch,
)
from app.modules.plants.domain.repositories.plant_repository import PlantRepository
from app.modules.plants.domain.services.plant_validation import (
    validate_create_plant,
    validate_update_plant,
)
from app.modules.plants.domain.services.slug import generate_unique_slug
from app.shared.config.settings import Settings, get_settings
from app.shared.core.dependencies import Principal
from app.shared.core.exceptions import (
    ConflictError,
    ObjectStoreUnavailableError,
    PlantNotFoundError,
    QuotaExceededError,
    ValidationError,
)
from app.shared.infrastructure.storage.object_store import ObjectStore, key_belongs_to_user

logger = logging.getLogger(__name__)

SLUG_ATTEMPTS = 3


class PlantService:
    """
    Service for plant operations of one authenticated user.
    """

    def __init__(
        self,
        plant_repository: PlantRepository,
        object_store: Optional[ObjectStore] = None,
        settings: Optional[Settings] = None
    ):
        """
        Initialize plant service.

        Args:
            plant_repository: Plant data access
            object_store: Used to sign photo download URLs; photos are omitted without it
            settings: Quota configuration
        """
        self.plant_repository = plant_repository
        self.object_store = object_store
        self.settings = settings or get_settings()

    async def create_plant(self, principal: Principal, request: CreatePlantRequest) -> PlantDetails:
        """
        Create a plant for the caller.

        Raises:
            ValidationError: If the request is invalid
            QuotaExceededError: If the caller already has the maximum number of plants
        """
        errors = validate_create_plant(request)
        if errors:
            raise ValidationError(errors=errors)

        current = await self.plant_repository.count_for_user(principal.user_id)
        limit = self.settings.MAX_PLANTS_PER_USER
        if current >= limit:
            logger.info(f"Plant limit reached for user {principal.user_id}: {current}/{limit}")
            raise QuotaExceededError("Plant limit exceeded", limit=limit, current=current)

        for attempt in range(1, SLUG_ATTEMPTS + 1):
            taken = await self.plant_repository.slugs_for_user(principal.user_id)
            slug = generate_unique_slug(request.name, request.location, taken)
            plant = request.to_plant(principal.user_id, slug, datetime.now(timezone.utc))
            try:
                created = await self.plant_repository.create(plant)
            except ConflictError:
                if attempt == SLUG_ATTEMPTS:
                    raise
                logger.info(f"Slug '{slug}' was taken concurrently, retrying ({attempt}/{SLUG_ATTEMPTS})")
                continue
            return await self._with_photo_urls(principal, created)

        raise ConflictError("Slug already in use", field="slug")

    async def list_plants(self, principal: Principal) -> List[PlantDetails]:
        plants = await self.plant_repository.get_all(principal.user_id)
        logger.debug(f"Listing {len(plants)} plants for user {principal.user_id}")
        return [await self._with_photo_urls(principal, plant) for plant in plants]

    async def get_plant(self, principal: Principal, plant_id: str) -> PlantDetails:
        plant = await self.plant_repository.get_by_id(principal.user_id, plant_id)
        if plant is None:
            raise PlantNotFoundError()
        return await self._with_photo_urls(principal, plant)

    async def get_plant_by_slug(self, principal: Principal, slug: str) -> PlantDetails:
        plant = await self.plant_repository.get_by_slug(principal.user_id, slug)
        if plant is None:
            raise PlantNotFoundError()
        return await self._with_photo_urls(principal, plant)

    async def update_plant(self, principal: Principal, plant_id: str, patch: PlantPatch) -> PlantDetails:
        """
        Apply a partial update.

        Only fields the caller set are validated; cleared fields are removed as they are.

        Raises:
            ValidationError: If a set field is invalid
            PlantNotFoundError: If the caller owns no plant with this id
        """
        errors = validate_update_plant(patch)
        if errors:
            raise ValidationError(errors=errors)

        plant = await self.plant_repository.update(plant_id, principal.user_id, patch)
        if plant is None:
            raise PlantNotFoundError()
        return await self._with_photo_urls(principal, plant)

    async def delete_plant(self, principal: Principal, plant_id: str) -> None:
        deleted = await self.plant_repository.delete(plant_id, principal.user_id)
        if not deleted:
            raise PlantNotFoundError()

    async def water_plants(self, principal: Principal, plant_ids: List[str]) -> int:
        """
        Mark the caller's plants as watered now.

        Returns:
            int: Number of plants modified; foreign or unknown ids are skipped
        """
        if not plant_ids:
            raise ValidationError.for_field("plantIds", "At least one plant ID is required")
        return await self.plant_repository.water_many(principal.user_id, plant_ids)

    async def _with_photo_urls(self, principal: Principal, plant: Plant) -> PlantDetails:
        """Sign a download URL for each photo in the caller's namespace; drop the rest."""
        urls: List[str] = []
        if self.object_store is not None:
            for key in plant.photo_ids:
                if not key_belongs_to_user(key, principal.user_id):
                    continue
                try:
                    url = await self.object_store.presign_get(key)
                except ObjectStoreUnavailableError:
                    logger.warning(f"Could not sign photo URL for {key}")
                    continue
                if url:
                    urls.append(url)
        return PlantDetails(**plant.model_dump(), photo_urls=urls)
