# 📄 File: app/modules/plants/infrastructure/database/plant_repository_impl.py
# 🧭 Purpose (Layman Explanation):
# This file does the actual saving, loading, editing and deleting of plants in the database,
# and answers questions like "which plants need water right now?".
#
# 🧪 Purpose (Technical Summary):
# SQLAlchemy async implementation of PlantRepository. Maps between the Plant aggregate and
# PlantModel rows, applies PlantPatch as a single owner-filtered UPDATE, keeps the
# next_*_at scheduling columns in step with the care sub-configs, and wraps every round
# trip in the request timeout.
#
# 🔗 Dependencies:
# - app.modules.plants.domain.repositories.plant_repository (interface)
# - app.modules.plants.domain.models (Plant, PlantPatch, care value types)
# - app.modules.plants.infrastructure.database.models (PlantModel)
# - app.shared.infrastructure.database.session (run_with_timeout)
# - SQLAlchemy async session and query operations
#
# 🔄 Connected Modules / Calls From:
# - app.modules.plants.presentation.dependencies (per-request construction)
# - Orphan upload sweep (photo id lookups)

"""
Plant Repository Implementation

Features:
- Owner-scoped reads and writes (foreign ids behave like missing ids)
- PATCH-with-clear applied atomically in one UPDATE statement
- Due-for-care queries over maintained next_*_at columns
- Approximate plant count on PostgreSQL, exact count elsewhere
"""

import logging
import uuid
from datetime import datetime
from typing import Any, Collection, Dict, List, Optional, Set

from sqlalchemy import delete, func, or_, select, text, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.plants.domain.models.care import CareCategory, WateringConfig
from app.modules.plants.domain.models.plant import Plant, PlantPatch
from app.modules.plants.domain.repositories.plant_repository import PlantRepository
from app.modules.plants.infrastructure.database.models import PlantModel
from app.shared.core.exceptions import ConflictError
from app.shared.core.models import CamelModel
from app.shared.infrastructure.database.session import run_with_timeout
from app.shared.infrastructure.database.types import utcnow

logger = logging.getLogger(__name__)

DOCUMENT_FIELDS = ("location", "watering", "fertilizing", "humidity", "soil", "seasonality")
COLLECTION_FIELDS = ("pest_history", "flags", "notes", "photo_ids", "growth_history")

# Sub-config that drives each category, and the column holding its next due instant
SCHEDULE_COLUMNS = {
    CareCategory.WATERING: ("watering", "next_watering_at"),
    CareCategory.FERTILIZING: ("fertilizing", "next_fertilizing_at"),
    CareCategory.MISTING: ("humidity", "next_misting_at"),
    CareCategory.REPOTTING: ("soil", "next_repotting_at"),
}


def is_valid_plant_id(value: str) -> bool:
    """Plant ids are UUID strings; anything else can never match a row."""
    try:
        uuid.UUID(str(value))
    except ValueError:
        return False
    return True


def _to_document(value: Any) -> Any:
    if isinstance(value, CamelModel):
        return value.to_document()
    if isinstance(value, list):
        return [_to_document(item) for item in value]
    return value


class PlantRepositoryImpl(PlantRepository):
    """
    SQLAlchemy implementation of the PlantRepository interface.
    """

    def __init__(self, session: AsyncSession):
        """
        Initialize the plant repository.

        Args:
            session: SQLAlchemy async session for database operations
        """
        self._session = session

    # =========================================================================
    # CRUD
    # =========================================================================

    async def create(self, plant: Plant) -> Plant:
        """
        Insert a new plant and return it with its generated id.

        Raises:
            ConflictError: If the owner already has a plant with this slug
        """
        model = self._domain_to_model(plant)
        model.id = str(uuid.uuid4())

        async def _insert() -> None:
            self._session.add(model)
            try:
                await self._session.flush()
            except IntegrityError as e:
                await self._session.rollback()
                logger.warning(f"Slug '{plant.slug}' already taken for user: {plant.user_id}")
                raise ConflictError("Slug already in use", field="slug") from e

        await run_with_timeout(_insert(), "create_plant")
        logger.info(f"Created plant {model.id} ('{model.slug}') for user: {plant.user_id}")
        return self._model_to_domain(model)

    async def get_all(self, user_id: str) -> List[Plant]:
        stmt = (
            select(PlantModel)
            .where(PlantModel.user_id == user_id)
            .order_by(PlantModel.created_at)
        )
        result = await run_with_timeout(self._session.execute(stmt), "list_plants")
        return [self._model_to_domain(model) for model in result.scalars().all()]

    async def get_by_id(self, user_id: str, plant_id: str) -> Optional[Plant]:
        if not is_valid_plant_id(plant_id):
            return None
        model = await self._fetch_one(
            PlantModel.id == plant_id, PlantModel.user_id == user_id
        )
        return self._model_to_domain(model) if model else None

    async def get_by_slug(self, user_id: str, slug: str) -> Optional[Plant]:
        model = await self._fetch_one(
            PlantModel.slug == slug, PlantModel.user_id == user_id
        )
        return self._model_to_domain(model) if model else None

    async def update(self, plant_id: str, user_id: str, patch: PlantPatch) -> Optional[Plant]:
        """
        Apply ``patch`` in one UPDATE filtered by (id, user_id).

        Returns:
            Optional[Plant]: The stored plant after the update, None when nothing matched
        """
        if not is_valid_plant_id(plant_id):
            return None

        values = self._patch_to_values(patch, utcnow())
        stmt = (
            update(PlantModel)
            .where(PlantModel.id == plant_id, PlantModel.user_id == user_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = await run_with_timeout(self._session.execute(stmt), "update_plant")
        if result.rowcount == 0:
            logger.debug(f"Update matched no plant {plant_id} for user: {user_id}")
            return None

        model = await self._fetch_one(
            PlantModel.id == plant_id, PlantModel.user_id == user_id
        )
        logger.info(f"Updated plant {plant_id} fields={sorted(patch.touched())} for user: {user_id}")
        return self._model_to_domain(model) if model else None

    async def delete(self, plant_id: str, user_id: str) -> bool:
        if not is_valid_plant_id(plant_id):
            return False
        stmt = (
            delete(PlantModel)
            .where(PlantModel.id == plant_id, PlantModel.user_id == user_id)
            .execution_options(synchronize_session=False)
        )
        result = await run_with_timeout(self._session.execute(stmt), "delete_plant")
        deleted = result.rowcount > 0
        if deleted:
            logger.info(f"Deleted plant {plant_id} for user: {user_id}")
        return deleted

    async def water_many(self, user_id: str, plant_ids: Collection[str]) -> int:
        valid_ids = {plant_id for plant_id in plant_ids if is_valid_plant_id(plant_id)}
        if not valid_ids:
            return 0

        now = utcnow()
        stmt = (
            select(PlantModel)
            .where(PlantModel.user_id == user_id, PlantModel.id.in_(valid_ids))
            .with_for_update()
        )

        async def _water() -> int:
            result = await self._session.execute(stmt)
            models = result.scalars().all()
            for model in models:
                watering = WateringConfig.model_validate(model.watering or {})
                watering = watering.model_copy(update={"last_watered": now})
                model.watering = watering.to_document()
                model.next_watering_at = watering.next_due_at()
                model.updated_at = now
            await self._session.flush()
            return len(models)

        modified = await run_with_timeout(_water(), "water_plants")
        logger.info(f"Watered {modified}/{len(plant_ids)} plants for user: {user_id}")
        return modified

    # =========================================================================
    # DUE-FOR-CARE QUERIES
    # =========================================================================

    async def get_plants_needing_watering(self, limit: int, now: Optional[datetime] = None) -> List[Plant]:
        return await self._due(CareCategory.WATERING, limit, now)

    async def get_plants_needing_fertilizing(self, limit: int, now: Optional[datetime] = None) -> List[Plant]:
        return await self._due(CareCategory.FERTILIZING, limit, now)

    async def get_plants_needing_misting(self, limit: int, now: Optional[datetime] = None) -> List[Plant]:
        return await self._due(CareCategory.MISTING, limit, now)

    async def get_plants_needing_repotting(self, limit: int, now: Optional[datetime] = None) -> List[Plant]:
        return await self._due(CareCategory.REPOTTING, limit, now)

    async def _due(self, category: CareCategory, limit: int, now: Optional[datetime]) -> List[Plant]:
        column = getattr(PlantModel, SCHEDULE_COLUMNS[category][1])
        stmt = (
            select(PlantModel)
            .where(column.is_not(None), column <= (now or utcnow()))
            .limit(limit)
        )
        result = await run_with_timeout(self._session.execute(stmt), f"due_{category.value}")
        plants = [self._model_to_domain(model) for model in result.scalars().all()]
        logger.debug(f"{len(plants)} plants due for {category.value}")
        return plants

    # =========================================================================
    # COUNTS AND LOOKUPS
    # =========================================================================

    async def count_active_users(self) -> int:
        stmt = select(func.count(func.distinct(PlantModel.user_id)))
        result = await run_with_timeout(self._session.execute(stmt), "count_active_users")
        return int(result.scalar_one())

    async def count_plants(self) -> int:
        if self._session.bind is not None and self._session.bind.dialect.name == "postgresql":
            # Planner statistics; -1 (or 0) until the table has been analysed
            estimate_stmt = text("SELECT reltuples::bigint FROM pg_class WHERE relname = :table")
            result = await run_with_timeout(
                self._session.execute(estimate_stmt, {"table": PlantModel.__tablename__}),
                "estimate_plants",
            )
            estimate = result.scalar()
            if estimate is not None and estimate > 0:
                return int(estimate)

        result = await run_with_timeout(
            self._session.execute(select(func.count()).select_from(PlantModel)),
            "count_plants",
        )
        return int(result.scalar_one())

    async def count_for_user(self, user_id: str) -> int:
        stmt = select(func.count()).select_from(PlantModel).where(PlantModel.user_id == user_id)
        result = await run_with_timeout(self._session.execute(stmt), "count_user_plants")
        return int(result.scalar_one())

    async def slugs_for_user(self, user_id: str) -> Set[str]:
        stmt = select(PlantModel.slug).where(PlantModel.user_id == user_id)
        result = await run_with_timeout(self._session.execute(stmt), "list_slugs")
        return set(result.scalars().all())

    async def find_owned_ids(self, user_id: str, plant_ids: Collection[str]) -> Set[str]:
        valid_ids = {plant_id for plant_id in plant_ids if is_valid_plant_id(plant_id)}
        if not valid_ids:
            return set()
        stmt = select(PlantModel.id).where(
            PlantModel.user_id == user_id, PlantModel.id.in_(valid_ids)
        )
        result = await run_with_timeout(self._session.execute(stmt), "find_owned_ids")
        return set(result.scalars().all())

    async def photo_ids_for_user(self, user_id: str) -> Set[str]:
        stmt = select(PlantModel.photo_ids, PlantModel.growth_history).where(
            PlantModel.user_id == user_id,
            or_(PlantModel.photo_ids.is_not(None), PlantModel.growth_history.is_not(None)),
        )
        result = await run_with_timeout(self._session.execute(stmt), "list_photo_ids")
        photo_ids: Set[str] = set()
        for ids, growth_history in result.all():
            photo_ids.update(ids or [])
            # Growth diary entries may point at a photo that is not in photoIds
            photo_ids.update(entry["photoId"] for entry in growth_history or [] if entry.get("photoId"))
        return photo_ids

    # =========================================================================
    # HELPERS
    # =========================================================================

    async def _fetch_one(self, *criteria) -> Optional[PlantModel]:
        stmt = select(PlantModel).where(*criteria).execution_options(populate_existing=True)
        result = await run_with_timeout(self._session.execute(stmt), "get_plant")
        return result.scalar_one_or_none()

    @staticmethod
    def _patch_to_values(patch: PlantPatch, now: datetime) -> Dict[str, Any]:
        """Column values for one UPDATE: cleared fields become NULL, set fields replace."""
        values: Dict[str, Any] = {}

        for name, field_patch in patch.touched().items():
            if name == "species":
                values[name] = field_patch.value if field_patch.is_set else ""
            elif name in DOCUMENT_FIELDS or name in COLLECTION_FIELDS:
                values[name] = _to_document(field_patch.value) if field_patch.is_set else None
            else:
                values[name] = field_patch.value

        for category, (source, column) in SCHEDULE_COLUMNS.items():
            field_patch = getattr(patch, source)
            if field_patch.is_unset:
                continue
            values[column] = field_patch.value.next_due_at() if field_patch.is_set else None

        values["updated_at"] = now
        return values

    @staticmethod
    def _domain_to_model(plant: Plant) -> PlantModel:
        model = PlantModel(
            id=plant.id,
            user_id=plant.user_id,
            slug=plant.slug,
            name=plant.name,
            species=plant.species,
            is_toxic=plant.is_toxic,
            sunlight=plant.sunlight,
            preferred_temperature=plant.preferred_temperature,
            created_at=plant.created_at,
            updated_at=plant.updated_at,
        )
        for name in DOCUMENT_FIELDS:
            value = getattr(plant, name)
            setattr(model, name, value.to_document() if value is not None else None)
        for name in COLLECTION_FIELDS:
            items = getattr(plant, name)
            setattr(model, name, _to_document(items) if items else None)
        for category, (_, column) in SCHEDULE_COLUMNS.items():
            setattr(model, column, plant.next_due_at(category))
        return model

    @staticmethod
    def _model_to_domain(model: PlantModel) -> Plant:
        data: Dict[str, Any] = {
            "id": model.id,
            "user_id": model.user_id,
            "slug": model.slug,
            "name": model.name,
            "species": model.species or "",
            "is_toxic": model.is_toxic,
            "sunlight": model.sunlight,
            "preferred_temperature": model.preferred_temperature,
            "created_at": model.created_at,
            "updated_at": model.updated_at,
        }
        for name in DOCUMENT_FIELDS:
            data[name] = getattr(model, name)
        for name in COLLECTION_FIELDS:
            data[name] = getattr(model, name) or []
        return Plant.model_validate(data)
