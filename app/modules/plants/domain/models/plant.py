# 📄 File: app/modules/plants/domain/models/plant.py
# 🧭 Purpose (Layman Explanation):
# The "plant card" for one of a user's plants: its name, care settings, pests, notes,
# photos and growth diary, plus the shapes used when a plant is created or edited.
#
# 🧪 Purpose (Technical Summary):
# Plant aggregate root, the create request, the wire-level PATCH request and its
# translation into a PlantPatch of tagged three-state field patches.
#
# 🔗 Dependencies:
# - pydantic
# - app.modules.plants.domain.models.care (value types)
# - app.shared.core.patch (FieldPatch)
#
# 🔄 Connected Modules / Calls From:
# - app.modules.plants.domain.services (validation, plant service)
# - app.modules.plants.domain.repositories.plant_repository
# - app.modules.plants.presentation.api.v1.plants

from dataclasses import dataclass, field, fields
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import Field

from app.modules.plants.domain.models.care import (
    CareCategory,
    FertilizerConfig,
    GrowthLog,
    HumidityConfig,
    Location,
    PestInfection,
    SeasonalAdjustments,
    SoilConfig,
    WateringConfig,
)
from app.shared.core.models import CamelModel
from app.shared.core.patch import FieldPatch, patch_from_payload


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PlantBase(CamelModel):
    """Fields shared by the stored plant and the create request."""

    species: str = ""
    is_toxic: bool = False

    sunlight: Optional[str] = None
    preferred_temperature: Optional[float] = Field(default=None, alias="preferedTemperature")
    location: Optional[Location] = None

    watering: Optional[WateringConfig] = None
    fertilizing: Optional[FertilizerConfig] = None
    humidity: Optional[HumidityConfig] = None
    soil: Optional[SoilConfig] = None
    seasonality: Optional[SeasonalAdjustments] = None

    pest_history: List[PestInfection] = Field(default_factory=list)
    flags: List[str] = Field(default_factory=list)
    notes: List[str] = Field(default_factory=list)
    photo_ids: List[str] = Field(default_factory=list)
    growth_history: List[GrowthLog] = Field(default_factory=list)


class Plant(PlantBase):
    """
    Plant aggregate root.

    Owned by exactly one user; ``slug`` is unique among that user's plants.
    ``id`` is assigned by the repository on creation.
    """

    id: Optional[str] = None
    user_id: str
    slug: str = ""
    name: str
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    def next_due_at(self, category: CareCategory) -> Optional[datetime]:
        """
        Instant at which the given kind of care becomes due.

        Returns:
            Optional[datetime]: None when the category is not configured or has no
            positive interval; the epoch when the care was never performed.
        """
        if category is CareCategory.WATERING:
            return self.watering.next_due_at() if self.watering else None
        if category is CareCategory.FERTILIZING:
            return self.fertilizing.next_due_at() if self.fertilizing else None
        if category is CareCategory.MISTING:
            return self.humidity.next_due_at() if self.humidity else None
        return self.soil.next_due_at() if self.soil else None


class PlantDetails(Plant):
    """Plant as returned to its owner, with signed download URLs for its photos."""

    photo_urls: List[str] = Field(default_factory=list)


class CreatePlantRequest(PlantBase):
    """Payload for creating a plant. ``name`` is checked by the validation engine."""

    name: str = ""

    def to_plant(self, user_id: str, slug: str, now: datetime) -> Plant:
        data = self.model_dump()
        # Stored trimmed, the same form the length rules were checked against
        data["name"] = self.name.strip()
        data["species"] = self.species.strip()
        return Plant(user_id=user_id, slug=slug, created_at=now, updated_at=now, **data)


class UpdatePlantRequest(CamelModel):
    """
    Wire-level PATCH payload.

    A field left out of the JSON is untouched. An explicit ``null``, an empty list
    or an empty sub-object clears the stored value. Anything else replaces it.
    """

    name: Optional[str] = None
    species: Optional[str] = None
    is_toxic: Optional[bool] = None
    sunlight: Optional[str] = None
    preferred_temperature: Optional[float] = Field(default=None, alias="preferedTemperature")
    location: Optional[Location] = None
    watering: Optional[WateringConfig] = None
    fertilizing: Optional[FertilizerConfig] = None
    humidity: Optional[HumidityConfig] = None
    soil: Optional[SoilConfig] = None
    seasonality: Optional[SeasonalAdjustments] = None
    pest_history: Optional[List[PestInfection]] = None
    flags: Optional[List[str]] = None
    notes: Optional[List[str]] = None
    photo_ids: Optional[List[str]] = None
    growth_history: Optional[List[GrowthLog]] = None

    def to_patch(self) -> "PlantPatch":
        sent = self.model_fields_set

        def patch(name: str, is_empty=None) -> FieldPatch:
            return patch_from_payload(name in sent, getattr(self, name), is_empty)

        def is_empty_list(values: list) -> bool:
            return len(values) == 0

        return PlantPatch(
            name=patch("name").map(str.strip),
            species=patch("species").map(str.strip),
            is_toxic=patch("is_toxic"),
            sunlight=patch("sunlight"),
            preferred_temperature=patch("preferred_temperature"),
            location=patch("location", Location.is_empty),
            watering=patch("watering", WateringConfig.is_empty),
            fertilizing=patch("fertilizing", FertilizerConfig.is_empty),
            humidity=patch("humidity", HumidityConfig.is_empty),
            soil=patch("soil", SoilConfig.is_empty),
            seasonality=patch("seasonality", SeasonalAdjustments.is_empty),
            pest_history=patch("pest_history", is_empty_list),
            flags=patch("flags", is_empty_list),
            notes=patch("notes", is_empty_list),
            photo_ids=patch("photo_ids", is_empty_list),
            growth_history=patch("growth_history", is_empty_list),
        )


@dataclass(frozen=True)
class PlantPatch:
    """Partial update of a Plant, one FieldPatch per mutable field."""

    name: FieldPatch[str] = field(default_factory=FieldPatch.unset)
    species: FieldPatch[str] = field(default_factory=FieldPatch.unset)
    is_toxic: FieldPatch[bool] = field(default_factory=FieldPatch.unset)
    sunlight: FieldPatch[str] = field(default_factory=FieldPatch.unset)
    preferred_temperature: FieldPatch[float] = field(default_factory=FieldPatch.unset)
    location: FieldPatch[Location] = field(default_factory=FieldPatch.unset)
    watering: FieldPatch[WateringConfig] = field(default_factory=FieldPatch.unset)
    fertilizing: FieldPatch[FertilizerConfig] = field(default_factory=FieldPatch.unset)
    humidity: FieldPatch[HumidityConfig] = field(default_factory=FieldPatch.unset)
    soil: FieldPatch[SoilConfig] = field(default_factory=FieldPatch.unset)
    seasonality: FieldPatch[SeasonalAdjustments] = field(default_factory=FieldPatch.unset)
    pest_history: FieldPatch[List[PestInfection]] = field(default_factory=FieldPatch.unset)
    flags: FieldPatch[List[str]] = field(default_factory=FieldPatch.unset)
    notes: FieldPatch[List[str]] = field(default_factory=FieldPatch.unset)
    photo_ids: FieldPatch[List[str]] = field(default_factory=FieldPatch.unset)
    growth_history: FieldPatch[List[GrowthLog]] = field(default_factory=FieldPatch.unset)

    def touched(self) -> Dict[str, FieldPatch[Any]]:
        """Every field the caller asked to clear or set, by attribute name."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if not getattr(self, f.name).is_unset
        }
