# 📄 File: app/modules/plants/domain/models/care.py
# 🧭 Purpose (Layman Explanation):
# Describes each kind of care a plant can have (watering, feeding, misting, soil, winter rest),
# where it lives, its pest problems and growth diary, and works out when care is next due.
#
# 🧪 Purpose (Technical Summary):
# Pydantic value types for the Plant aggregate's optional sub-configs and collections,
# the closed enums they reference, emptiness predicates used by PATCH to decide
# clear-vs-set, and the next-due derivation for the four care categories.
#
# 🔗 Dependencies:
# - pydantic (BaseModel, Field)
# - python-dateutil (relativedelta for month-based repotting cycles)
# - app.shared.core.models (CamelModel)
#
# 🔄 Connected Modules / Calls From:
# - app.modules.plants.domain.models.plant
# - app.modules.plants.domain.services.plant_validation
# - app.modules.plants.infrastructure.database.plant_repository_impl (next-due columns)

from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import List, Optional

from dateutil.relativedelta import relativedelta
from pydantic import Field

from app.shared.core.models import CamelModel

# Stand-in for "never done" in the next-due columns; earlier than any real "now"
NEVER_PERFORMED = datetime(1970, 1, 1, tzinfo=timezone.utc)


# =============================================================================
# ENUMERATIONS
# =============================================================================

class SunlightRequirement(str, Enum):
    """Light level a plant needs"""
    FULL_SUN = "Full Sun"
    INDIRECT_SUN = "Indirect Sun"
    PARTIAL_SHADE = "Partial Shade"
    PARTIAL_TO_FULL_SHADE = "Partial to Full Shade"
    FULL_SHADE = "Full Shade"


class WateringMethod(str, Enum):
    TOP = "Top"
    BOTTOM = "Bottom"
    SOAKING = "Soaking"
    SELF = "Self"
    MISTING_ONLY = "MistingOnly"


class WaterType(str, Enum):
    TAP = "Tap"
    FILTERED = "Filtered"
    RAIN = "Rain"
    DISTILLED = "Distilled"
    STALE_TAP = "StaleTap"
    LOW_LIMESTONE = "LowLimestone"


class FertilizerType(str, Enum):
    LIQUID = "Liquid"
    STICKS = "Sticks"
    GRANULATE = "Granulate"
    LONG_TERM = "LongTerm"
    ORGANIC = "Organic"
    HYDROPONIC = "Hydroponic"


class PestType(str, Enum):
    SPIDER_MITES = "Spider Mites"
    APHIDS = "Aphids"
    THRIPS = "Thrips"
    MEALYBUGS = "Mealybugs"
    SCALE = "Scale"
    FUNGUS_GNATS = "Fungus Gnats"
    ROOT_ROT = "Root Rot"


class PestStatus(str, Enum):
    ACTIVE = "Active"
    TREATED = "Treated"
    RESOLVED = "Resolved"


class PlantFlag(str, Enum):
    """Care hints shown as badges in the client"""
    NO_DRAUGHT = "No Draught"
    REMOVE_BROWN_LEAVES = "Remove Brown Leaves"
    HIGH_HUMIDITY_REQUIRED = "High Humidity Required"
    SENSITIVE_ROOTS = "Sensitive Roots"


class HealthStatus(str, Enum):
    EXCELLENT = "Excellent"
    GOOD = "Good"
    FAIR = "Fair"
    POOR = "Poor"
    DORMANT = "Dormant"


class CareCategory(str, Enum):
    """The four schedulable kinds of care"""
    WATERING = "watering"
    FERTILIZING = "fertilizing"
    MISTING = "misting"
    REPOTTING = "repotting"


# =============================================================================
# SCHEDULING HELPERS
# =============================================================================

def _next_due(last_done: Optional[datetime], interval: timedelta | relativedelta) -> datetime:
    if last_done is None:
        return NEVER_PERFORMED
    return last_done + interval


# =============================================================================
# SINGLE-VALUE SUB-CONFIGS
# =============================================================================

class Location(CamelModel):
    """Where the plant stands"""
    room: str = ""
    position: str = ""
    is_outdoors: bool = False

    def is_empty(self) -> bool:
        return self.room == "" and self.position == "" and not self.is_outdoors


# =============================================================================
# CARE SUB-CONFIGS
# =============================================================================

class WateringConfig(CamelModel):
    """Watering schedule and habits"""
    interval_days: int = 0
    method: str = ""
    water_type: str = ""
    last_watered: Optional[datetime] = None

    def is_empty(self) -> bool:
        return (
            self.interval_days == 0
            and self.method == ""
            and self.water_type == ""
            and self.last_watered is None
        )

    def next_due_at(self) -> Optional[datetime]:
        """None when the schedule cannot fire; NEVER_PERFORMED when never watered."""
        if self.interval_days <= 0:
            return None
        return _next_due(self.last_watered, timedelta(days=self.interval_days))


class FertilizerConfig(CamelModel):
    """Fertilizer product and schedule"""
    fertilizer_type: str = Field(default="", alias="type")
    interval_days: int = 0
    npk_ratio: str = ""
    concentration_percent: float = 0
    last_fertilized: Optional[datetime] = None
    active_in_winter: bool = False

    def is_empty(self) -> bool:
        return (
            self.fertilizer_type == ""
            and self.interval_days == 0
            and self.npk_ratio == ""
            and self.concentration_percent == 0
            and self.last_fertilized is None
            and not self.active_in_winter
        )

    def next_due_at(self) -> Optional[datetime]:
        if self.interval_days <= 0:
            return None
        return _next_due(self.last_fertilized, timedelta(days=self.interval_days))


class HumidityConfig(CamelModel):
    """Misting and humidifier requirements"""
    requires_misting: bool = False
    misting_interval_days: int = 0
    last_misted: Optional[datetime] = None
    requires_humidifier: bool = False
    target_humidity_pct: float = 0

    def is_empty(self) -> bool:
        return (
            not self.requires_misting
            and self.misting_interval_days == 0
            and self.last_misted is None
            and not self.requires_humidifier
            and self.target_humidity_pct == 0
        )

    def next_due_at(self) -> Optional[datetime]:
        if not self.requires_misting or self.misting_interval_days <= 0:
            return None
        return _next_due(self.last_misted, timedelta(days=self.misting_interval_days))


class SoilConfig(CamelModel):
    """Soil mix and repotting cycle (in months)"""
    soil_type: str = Field(default="", alias="type")
    components: List[str] = Field(default_factory=list)
    last_repotted: Optional[datetime] = None
    repotting_cycle: int = 0

    def is_empty(self) -> bool:
        return (
            self.soil_type == ""
            and not self.components
            and self.last_repotted is None
            and self.repotting_cycle == 0
        )

    def next_due_at(self) -> Optional[datetime]:
        if self.repotting_cycle <= 0:
            return None
        return _next_due(self.last_repotted, relativedelta(months=self.repotting_cycle))


class SeasonalAdjustments(CamelModel):
    """Winter rest behaviour"""
    winter_rest_period: bool = False
    winter_water_factor: float = 0
    min_temp_celsius: float = 0

    def is_empty(self) -> bool:
        return (
            not self.winter_rest_period
            and self.winter_water_factor == 0
            and self.min_temp_celsius == 0
        )


# =============================================================================
# COLLECTION ITEMS
# =============================================================================

class PestInfection(CamelModel):
    """One pest episode in the plant's history"""
    id: str = ""
    pest: str = ""
    detected_at: datetime
    resolved_at: Optional[datetime] = None
    status: str = ""
    treatment: str = ""
    notes: str = ""


class GrowthLog(CamelModel):
    """One growth diary entry"""
    id: str = ""
    date: datetime
    height_cm: float = 0
    leaf_count: int = 0
    health: str = ""
    condition: str = ""
    photo_id: Optional[str] = None
