# 📄 File: app/modules/plants/domain/services/plant_validation.py
# 🧭 Purpose (Layman Explanation):
# Checks a new plant, or a change to an existing one, before we save it: names not blank,
# numbers within sensible limits, choices from the allowed lists, lists not too long.
#
# 🧪 Purpose (Technical Summary):
# Pure validation engine for the Plant aggregate. Every function returns a list of
# FieldError (empty means valid); nothing here performs I/O or raises.
#
# 🔗 Dependencies:
# - app.shared.core.validation (FieldError and check helpers)
# - app.modules.plants.domain.models (care value types, enums, Plant requests)
#
# 🔄 Connected Modules / Calls From:
# - app.modules.plants.domain.services.plant_service (create / update)

from dataclasses import dataclass
from typing import List, Optional

from app.modules.plants.domain.models.care import (
    FertilizerConfig,
    FertilizerType,
    GrowthLog,
    HealthStatus,
    HumidityConfig,
    Location,
    PestInfection,
    PestStatus,
    PestType,
    PlantFlag,
    SeasonalAdjustments,
    SoilConfig,
    SunlightRequirement,
    WateringConfig,
    WateringMethod,
    WaterType,
)
from app.modules.plants.domain.models.plant import CreatePlantRequest, PlantPatch
from app.shared.core.validation import (
    FieldError,
    check_enum,
    check_max_length,
    check_range,
    check_required_text,
    collect,
)

DATA_URI_PREFIX = "data:"


@dataclass(frozen=True)
class PlantConstraints:
    """Field limits for plants (ranges are inclusive)."""
    name_max_length: int = 100
    species_max_length: int = 100
    temperature_min: float = -50
    temperature_max: float = 100
    notes_max_items: int = 100
    notes_max_item_length: int = 500
    photo_ids_max_items: int = 100
    photo_id_max_length: int = 255
    location_room_max_length: int = 100
    location_position_max_length: int = 200
    soil_type_max_length: int = 100
    soil_components_max_items: int = 20
    soil_component_max_length: int = 100
    npk_ratio_max_length: int = 20
    pest_treatment_max_length: int = 200
    pest_notes_max_length: int = 500
    interval_min: int = 1
    interval_max: int = 365
    repotting_cycle_min: int = 1
    repotting_cycle_max: int = 60
    percent_min: float = 0
    percent_max: float = 100
    winter_water_factor_min: float = 0.1
    winter_water_factor_max: float = 2.0
    min_temp_min: float = -50
    min_temp_max: float = 50
    growth_history_max_items: int = 1000
    height_cm_min: float = 0.1
    height_cm_max: float = 1000
    leaf_count_min: int = 0
    leaf_count_max: int = 10000
    condition_max_length: int = 200


LIMITS = PlantConstraints()


# =============================================================================
# AGGREGATE VALIDATORS
# =============================================================================

def validate_create_plant(request: CreatePlantRequest) -> List[FieldError]:
    """
    Validate a create payload.

    Args:
        request: Candidate plant

    Returns:
        List[FieldError]: Every problem found; empty when the plant is well-formed
    """
    errors: List[FieldError] = []

    errors.extend(collect(
        check_required_text(
            "name", request.name, LIMITS.name_max_length,
            "Name is required and must be a non-empty string",
            "Name must be 100 characters or less",
        ),
        check_max_length(
            "species", request.species, LIMITS.species_max_length,
            "Species must be 100 characters or less",
        ),
    ))

    errors.extend(_validate_scalars(request.sunlight, request.preferred_temperature))
    errors.extend(_validate_sub_configs(
        location=request.location,
        watering=request.watering,
        fertilizing=request.fertilizing,
        humidity=request.humidity,
        soil=request.soil,
        seasonality=request.seasonality,
    ))

    for index, pest in enumerate(request.pest_history):
        errors.extend(validate_pest_infection(pest, index))

    errors.extend(_validate_flags(request.flags))
    errors.extend(_validate_notes(request.notes))
    errors.extend(_validate_photo_ids(request.photo_ids))
    errors.extend(_validate_growth_history(request.growth_history))

    return errors


def validate_update_plant(patch: PlantPatch) -> List[FieldError]:
    """
    Validate a partial update.

    Only fields the caller sets are checked. Cleared optional fields need no checks,
    but ``name`` and ``isToxic`` cannot be cleared.

    Args:
        patch: Partial update built from the request

    Returns:
        List[FieldError]: Every problem found; empty when the update may be applied
    """
    errors: List[FieldError] = []

    if patch.name.is_clear:
        errors.append(FieldError("name", "Name must be a non-empty string"))
    elif patch.name.is_set:
        error = check_required_text(
            "name", patch.name.value, LIMITS.name_max_length,
            "Name must be a non-empty string",
            "Name must be 100 characters or less",
        )
        if error:
            errors.append(error)

    if patch.species.is_set:
        error = check_required_text(
            "species", patch.species.value, LIMITS.species_max_length,
            "Species must be a non-empty string",
            "Species must be 100 characters or less",
        )
        if error:
            errors.append(error)

    if patch.is_toxic.is_clear:
        errors.append(FieldError("isToxic", "isToxic cannot be cleared"))

    errors.extend(_validate_scalars(patch.sunlight.value, patch.preferred_temperature.value))
    errors.extend(_validate_sub_configs(
        location=patch.location.value,
        watering=patch.watering.value,
        fertilizing=patch.fertilizing.value,
        humidity=patch.humidity.value,
        soil=patch.soil.value,
        seasonality=patch.seasonality.value,
    ))

    if patch.pest_history.is_set:
        for index, pest in enumerate(patch.pest_history.value):
            errors.extend(validate_pest_infection(pest, index))
    if patch.flags.is_set:
        errors.extend(_validate_flags(patch.flags.value))
    if patch.notes.is_set:
        errors.extend(_validate_notes(patch.notes.value))
    if patch.photo_ids.is_set:
        errors.extend(_validate_photo_ids(patch.photo_ids.value))
    if patch.growth_history.is_set:
        errors.extend(_validate_growth_history(patch.growth_history.value))

    return errors


def _validate_scalars(sunlight: Optional[str], temperature: Optional[float]) -> List[FieldError]:
    errors: List[FieldError] = []
    if sunlight is not None:
        error = check_enum("sunlight", sunlight, SunlightRequirement, "Sunlight")
        if error:
            errors.append(error)
    if temperature is not None:
        error = check_range(
            "preferedTemperature", temperature,
            LIMITS.temperature_min, LIMITS.temperature_max,
            "PreferredTemperature must be between -50 and 100",
        )
        if error:
            errors.append(error)
    return errors


def _validate_sub_configs(
    location: Optional[Location],
    watering: Optional[WateringConfig],
    fertilizing: Optional[FertilizerConfig],
    humidity: Optional[HumidityConfig],
    soil: Optional[SoilConfig],
    seasonality: Optional[SeasonalAdjustments],
) -> List[FieldError]:
    errors: List[FieldError] = []
    if location is not None:
        errors.extend(validate_location(location))
    if watering is not None:
        errors.extend(validate_watering(watering))
    if fertilizing is not None:
        errors.extend(validate_fertilizing(fertilizing))
    if humidity is not None:
        errors.extend(validate_humidity(humidity))
    if soil is not None:
        errors.extend(validate_soil(soil))
    if seasonality is not None:
        errors.extend(validate_seasonality(seasonality))
    return errors


# =============================================================================
# SUB-CONFIG VALIDATORS
# =============================================================================

def validate_location(location: Location) -> List[FieldError]:
    return collect(
        check_max_length(
            "location.room", location.room, LIMITS.location_room_max_length,
            "Location room must be 100 characters or less",
        ),
        check_max_length(
            "location.position", location.position, LIMITS.location_position_max_length,
            "Location position must be 200 characters or less",
        ),
    )


def validate_watering(config: WateringConfig) -> List[FieldError]:
    return collect(
        check_range(
            "watering.intervalDays", config.interval_days,
            LIMITS.interval_min, LIMITS.interval_max,
            "Watering interval must be between 1 and 365 days",
        ),
        check_enum("watering.method", config.method, WateringMethod, "Watering method"),
        check_enum("watering.waterType", config.water_type, WaterType, "Water type"),
    )


def validate_fertilizing(config: FertilizerConfig) -> List[FieldError]:
    return collect(
        check_enum("fertilizing.type", config.fertilizer_type, FertilizerType, "Fertilizer type"),
        check_range(
            "fertilizing.intervalDays", config.interval_days,
            LIMITS.interval_min, LIMITS.interval_max,
            "Fertilizing interval must be between 1 and 365 days",
        ),
        check_required_text(
            "fertilizing.npkRatio", config.npk_ratio, LIMITS.npk_ratio_max_length,
            "NPK ratio must be a non-empty string",
            "NPK ratio must be 20 characters or less",
        ),
        check_range(
            "fertilizing.concentrationPercent", config.concentration_percent,
            LIMITS.percent_min, LIMITS.percent_max,
            "Concentration must be between 0 and 100",
        ),
    )


def validate_humidity(config: HumidityConfig) -> List[FieldError]:
    misting_error = None
    if config.requires_misting:
        misting_error = check_range(
            "humidity.mistingIntervalDays", config.misting_interval_days,
            LIMITS.interval_min, LIMITS.interval_max,
            "Misting interval must be between 1 and 365 days",
        )
    return collect(
        misting_error,
        check_range(
            "humidity.targetHumidityPct", config.target_humidity_pct,
            LIMITS.percent_min, LIMITS.percent_max,
            "Target humidity must be between 0 and 100",
        ),
    )


def validate_soil(config: SoilConfig) -> List[FieldError]:
    errors = collect(
        check_required_text(
            "soil.type", config.soil_type, LIMITS.soil_type_max_length,
            "Soil type must be a non-empty string",
            "Soil type must be 100 characters or less",
        ),
    )

    if len(config.components) > LIMITS.soil_components_max_items:
        errors.append(FieldError("soil.components", "Soil components must contain 20 items or less"))

    for component in config.components:
        trimmed = component.strip()
        if not trimmed:
            errors.append(FieldError("soil.components", "All soil components must be non-empty strings"))
            break
        if len(trimmed) > LIMITS.soil_component_max_length:
            errors.append(FieldError("soil.components", "Each soil component must be 100 characters or less"))
            break

    error = check_range(
        "soil.repottingCycle", config.repotting_cycle,
        LIMITS.repotting_cycle_min, LIMITS.repotting_cycle_max,
        "Repotting cycle must be between 1 and 60 months",
    )
    if error:
        errors.append(error)
    return errors


def validate_seasonality(config: SeasonalAdjustments) -> List[FieldError]:
    return collect(
        check_range(
            "seasonality.winterWaterFactor", config.winter_water_factor,
            LIMITS.winter_water_factor_min, LIMITS.winter_water_factor_max,
            "Winter water factor must be between 0.1 and 2.0",
        ),
        check_range(
            "seasonality.minTempCelsius", config.min_temp_celsius,
            LIMITS.min_temp_min, LIMITS.min_temp_max,
            "Minimum temperature must be between -50 and 50",
        ),
    )


# =============================================================================
# COLLECTION VALIDATORS
# =============================================================================

def validate_pest_infection(pest: PestInfection, index: int) -> List[FieldError]:
    prefix = f"pestHistory[{index}]"
    return collect(
        FieldError(f"{prefix}.id", "Pest infection ID must be a non-empty string")
        if not pest.id.strip() else None,
        check_enum(f"{prefix}.pest", pest.pest, PestType, "Pest type"),
        check_enum(f"{prefix}.status", pest.status, PestStatus, "Pest status"),
        check_required_text(
            f"{prefix}.treatment", pest.treatment, LIMITS.pest_treatment_max_length,
            "Treatment must be a non-empty string",
            "Treatment must be 200 characters or less",
        ),
        check_max_length(
            f"{prefix}.notes", pest.notes, LIMITS.pest_notes_max_length,
            "Notes must be 500 characters or less",
        ),
    )


def validate_growth_log(log: GrowthLog, index: int) -> List[FieldError]:
    prefix = f"growthHistory[{index}]"
    photo_error = None
    photo_id = (log.photo_id or "").strip()
    if photo_id and not photo_id.startswith(DATA_URI_PREFIX) and len(photo_id) > LIMITS.photo_id_max_length:
        photo_error = FieldError(f"{prefix}.photoId", "Non-data photo ID must be 255 characters or less")

    return collect(
        FieldError(f"{prefix}.id", "Growth log ID must be a non-empty string")
        if not log.id.strip() else None,
        check_range(
            f"{prefix}.heightCm", log.height_cm,
            LIMITS.height_cm_min, LIMITS.height_cm_max,
            "Height must be between 0.1 and 1000 cm",
        ),
        check_range(
            f"{prefix}.leafCount", log.leaf_count,
            LIMITS.leaf_count_min, LIMITS.leaf_count_max,
            "Leaf count must be between 0 and 10000",
        ),
        check_enum(f"{prefix}.health", log.health, HealthStatus, "Health"),
        check_max_length(
            f"{prefix}.condition", log.condition, LIMITS.condition_max_length,
            "Condition must be 200 characters or less",
        ),
        photo_error,
    )


def _validate_flags(flags: List[str]) -> List[FieldError]:
    for flag in flags:
        error = check_enum("flags", flag, PlantFlag, "Flags")
        if error:
            return [error]
    return []


def _validate_notes(notes: List[str]) -> List[FieldError]:
    errors: List[FieldError] = []
    if len(notes) > LIMITS.notes_max_items:
        errors.append(FieldError("notes", "Notes array must contain 100 items or less"))

    for note in notes:
        trimmed = note.strip()
        if not trimmed:
            errors.append(FieldError("notes", "All notes must be non-empty strings"))
            break
        if len(trimmed) > LIMITS.notes_max_item_length:
            errors.append(FieldError("notes", "Each note must be 500 characters or less"))
            break
    return errors


def _validate_photo_ids(photo_ids: List[str]) -> List[FieldError]:
    errors: List[FieldError] = []
    if len(photo_ids) > LIMITS.photo_ids_max_items:
        errors.append(FieldError("photoIds", "PhotoIds array must contain 100 items or less"))

    for photo_id in photo_ids:
        trimmed = photo_id.strip()
        if not trimmed:
            errors.append(FieldError("photoIds", "Each photo ID must be a non-empty string"))
            break
        if not trimmed.startswith(DATA_URI_PREFIX) and len(trimmed) > LIMITS.photo_id_max_length:
            errors.append(FieldError("photoIds", "Non-data photo IDs must be 255 characters or less"))
            break
    return errors


def _validate_growth_history(logs: List[GrowthLog]) -> List[FieldError]:
    errors: List[FieldError] = []
    if len(logs) > LIMITS.growth_history_max_items:
        errors.append(FieldError("growthHistory", "GrowthHistory array must contain 1000 items or less"))
    for index, log in enumerate(logs):
        errors.extend(validate_growth_log(log, index))
    return errors
