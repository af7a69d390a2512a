"""
Tests for the SQLAlchemy plant repository: persistence, owner scoping,
PATCH-with-clear and the due-for-care queries.
"""

import uuid
from datetime import datetime, timedelta, timezone

import pytest
from dateutil.relativedelta import relativedelta

from app.modules.plants.domain.models.plant import UpdatePlantRequest
from fakes import OTHER_USER_ID, USER_ID, plant_request, watering


async def create(repository, name="Monstera", user_id=USER_ID, slug=None, now=None, **fields):
    plant = plant_request(name, **fields).to_plant(
        user_id, slug or name.lower(), now or datetime.now(timezone.utc)
    )
    return await repository.create(plant)


def patch_of(payload: dict):
    return UpdatePlantRequest.model_validate(payload).to_patch()


# ========================== Create / read ==================================


async def test_create_then_get_returns_stored_plant(plant_repository, now):
    created = await create(
        plant_repository,
        "Monstera",
        now=now,
        species="Monstera deliciosa",
        sunlight="Indirect Sun",
        location={"room": "Office", "position": "Window", "isOutdoors": False},
        watering=watering(7, now - timedelta(days=2)),
        notes=["Likes a moss pole"],
    )

    fetched = await plant_repository.get_by_id(USER_ID, created.id)

    assert uuid.UUID(created.id)
    assert fetched == created
    assert fetched.slug == "monstera"
    assert fetched.created_at == now
    assert fetched.location.room == "Office"
    assert fetched.watering.last_watered == now - timedelta(days=2)
    assert fetched.notes == ["Likes a moss pole"]
    assert fetched.fertilizing is None


async def test_get_by_slug_and_list(plant_repository):
    first = await create(plant_repository, "Monstera")
    second = await create(plant_repository, "Fern")
    await create(plant_repository, "Cactus", user_id=OTHER_USER_ID)

    assert (await plant_repository.get_by_slug(USER_ID, "fern")).id == second.id
    assert [plant.id for plant in await plant_repository.get_all(USER_ID)] == [first.id, second.id]
    assert await plant_repository.count_for_user(USER_ID) == 2
    assert await plant_repository.slugs_for_user(USER_ID) == {"monstera", "fern"}


async def test_malformed_id_behaves_like_missing(plant_repository):
    assert await plant_repository.get_by_id(USER_ID, "not-a-uuid") is None
    assert await plant_repository.delete("not-a-uuid", USER_ID) is False


# ========================== Ownership ======================================


async def test_foreign_plants_are_invisible(plant_repository):
    plant = await create(plant_repository, "Monstera", user_id=OTHER_USER_ID)

    assert await plant_repository.get_by_id(USER_ID, plant.id) is None
    assert await plant_repository.get_by_slug(USER_ID, "monstera") is None
    assert await plant_repository.update(plant.id, USER_ID, patch_of({"name": "Mine now"})) is None
    assert await plant_repository.delete(plant.id, USER_ID) is False

    untouched = await plant_repository.get_by_id(OTHER_USER_ID, plant.id)
    assert untouched.name == "Monstera"


async def test_same_slug_is_allowed_for_different_owners(plant_repository):
    await create(plant_repository, "Monstera", user_id=USER_ID)
    other = await create(plant_repository, "Monstera", user_id=OTHER_USER_ID)
    assert other.slug == "monstera"


# ========================== Update =========================================


async def test_name_only_patch_changes_nothing_else(plant_repository, now):
    plant = await create(
        plant_repository,
        "Monstera",
        now=now,
        watering=watering(7, now),
        flags=["No Draught"],
        photoIds=[f"users/{USER_ID}/a.jpg"],
    )

    updated = await plant_repository.update(plant.id, USER_ID, patch_of({"name": "Big Monstera"}))

    assert updated.name == "Big Monstera"
    assert updated.updated_at > plant.updated_at
    excluded = {"name", "updated_at"}
    assert updated.model_dump(exclude=excluded) == plant.model_dump(exclude=excluded)


async def test_empty_watering_clears_config_and_schedule(plant_repository, now):
    plant = await create(plant_repository, "Monstera", now=now, watering=watering(7, now - timedelta(days=10)))
    assert [p.id for p in await plant_repository.get_plants_needing_watering(10, now=now)] == [plant.id]

    updated = await plant_repository.update(
        plant.id, USER_ID, patch_of({"watering": {"intervalDays": 0, "method": "", "waterType": ""}})
    )

    assert updated.watering is None
    assert await plant_repository.get_plants_needing_watering(10, now=now) == []


async def test_set_and_clear_in_one_patch(plant_repository):
    plant = await create(plant_repository, "Monstera", species="Araceae", notes=["a", "b"])

    updated = await plant_repository.update(
        plant.id, USER_ID, patch_of({"species": None, "notes": [], "sunlight": "Full Sun"})
    )

    assert updated.species == ""
    assert updated.notes == []
    assert updated.sunlight == "Full Sun"


async def test_replacing_watering_reschedules(plant_repository, now):
    plant = await create(plant_repository, "Monstera", watering=watering(30, now))
    assert await plant_repository.get_plants_needing_watering(10, now=now) == []

    await plant_repository.update(plant.id, USER_ID, patch_of({"watering": watering(1, now - timedelta(days=2))}))

    assert [p.id for p in await plant_repository.get_plants_needing_watering(10, now=now)] == [plant.id]


@pytest.mark.parametrize("field, config, due_query", [
    ("fertilizing", {"type": "Liquid", "intervalDays": 14, "npkRatio": "10-10-10"}, "get_plants_needing_fertilizing"),
    ("humidity", {"requiresMisting": True, "mistingIntervalDays": 2}, "get_plants_needing_misting"),
    ("soil", {"type": "Peat", "repottingCycle": 6}, "get_plants_needing_repotting"),
])
async def test_empty_care_config_clears_it_and_its_schedule(plant_repository, now, field, config, due_query):
    plant = await create(plant_repository, "Monstera", **{field: config})
    due = getattr(plant_repository, due_query)
    assert [p.id for p in await due(10, now=now)] == [plant.id]

    updated = await plant_repository.update(plant.id, USER_ID, patch_of({field: {}}))

    assert getattr(updated, field) is None
    assert getattr(await plant_repository.get_by_id(USER_ID, plant.id), field) is None
    assert await due(10, now=now) == []


@pytest.mark.parametrize("field, config", [
    ("location", {"room": "Office", "position": "Window"}),
    ("seasonality", {"winterRestPeriod": True, "winterWaterFactor": 0.5, "minTempCelsius": 12}),
])
async def test_empty_unscheduled_config_is_cleared(plant_repository, field, config):
    plant = await create(plant_repository, "Monstera", **{field: config})
    assert getattr(plant, field) is not None

    updated = await plant_repository.update(plant.id, USER_ID, patch_of({field: {}}))

    assert getattr(updated, field) is None
    assert updated.name == "Monstera"


# ========================== Delete / water =================================


async def test_delete_twice(plant_repository):
    plant = await create(plant_repository, "Monstera")

    assert await plant_repository.delete(plant.id, USER_ID) is True
    assert await plant_repository.delete(plant.id, USER_ID) is False
    assert await plant_repository.get_by_id(USER_ID, plant.id) is None


async def test_water_many_only_touches_owned_plants(plant_repository, now):
    mine = await create(plant_repository, "Monstera", watering=watering(7, now - timedelta(days=30)))
    unscheduled = await create(plant_repository, "Fern")
    foreign = await create(plant_repository, "Cactus", user_id=OTHER_USER_ID, watering=watering(7))

    assert await plant_repository.water_many(USER_ID, [foreign.id, "garbage"]) == 0
    assert await plant_repository.water_many(USER_ID, [mine.id, unscheduled.id, foreign.id]) == 2

    watered = await plant_repository.get_by_id(USER_ID, mine.id)
    assert watered.watering.interval_days == 7
    assert watered.watering.last_watered is not None
    assert watered.watering.last_watered > now

    # A plant without a schedule gets a last-watered date but stays unschedulable
    fern = await plant_repository.get_by_id(USER_ID, unscheduled.id)
    assert fern.watering.interval_days == 0
    assert fern.watering.last_watered is not None

    cactus = await plant_repository.get_by_id(OTHER_USER_ID, foreign.id)
    assert cactus.watering.last_watered is None


# ========================== Due-for-care ===================================


async def test_watering_due_boundary(plant_repository, now):
    exactly = await create(plant_repository, "Exactly", watering=watering(7, now - timedelta(days=7)))
    await create(plant_repository, "Almost", watering=watering(7, now - timedelta(days=6, hours=23)))
    never = await create(plant_repository, "Never", watering=watering(7))
    await create(plant_repository, "Unscheduled")

    due = await plant_repository.get_plants_needing_watering(10, now=now)

    assert {plant.id for plant in due} == {exactly.id, never.id}


async def test_due_queries_span_all_owners_and_respect_limit(plant_repository, now):
    for index in range(3):
        await create(plant_repository, f"Plant {index}", user_id=f"user-{index}", watering=watering(1))

    assert len(await plant_repository.get_plants_needing_watering(10, now=now)) == 3
    assert len(await plant_repository.get_plants_needing_watering(2, now=now)) == 2


async def test_fertilizing_and_misting_due(plant_repository, now):
    fed = await create(plant_repository, "Fed", fertilizing={
        "type": "Liquid", "intervalDays": 14, "npkRatio": "10-10-10",
        "lastFertilized": (now - timedelta(days=14)).isoformat(),
    })
    misted = await create(plant_repository, "Misted", humidity={
        "requiresMisting": True, "mistingIntervalDays": 2,
        "lastMisted": (now - timedelta(days=3)).isoformat(),
    })
    await create(plant_repository, "Dry air", humidity={"requiresMisting": False, "mistingIntervalDays": 2})

    assert [p.id for p in await plant_repository.get_plants_needing_fertilizing(10, now=now)] == [fed.id]
    assert [p.id for p in await plant_repository.get_plants_needing_misting(10, now=now)] == [misted.id]


async def test_repotting_due_uses_months(plant_repository, now):
    due = await create(plant_repository, "Due", soil={
        "type": "Peat", "repottingCycle": 6,
        "lastRepotted": (now - relativedelta(months=6)).isoformat(),
    })
    await create(plant_repository, "Later", soil={
        "type": "Peat", "repottingCycle": 6,
        "lastRepotted": (now - relativedelta(months=5)).isoformat(),
    })

    assert [p.id for p in await plant_repository.get_plants_needing_repotting(10, now=now)] == [due.id]


# ========================== Lookups ========================================


async def test_owned_ids_and_photo_ids(plant_repository):
    first = await create(plant_repository, "Monstera", photoIds=["users/user-alice/a.jpg"])
    await create(plant_repository, "Fern", photoIds=["users/user-alice/b.jpg", "users/user-alice/a.jpg"])
    foreign = await create(plant_repository, "Cactus", user_id=OTHER_USER_ID, photoIds=["users/user-bob/c.jpg"])

    owned = await plant_repository.find_owned_ids(USER_ID, {first.id, foreign.id, "garbage"})

    assert owned == {first.id}
    assert await plant_repository.photo_ids_for_user(USER_ID) == {
        "users/user-alice/a.jpg",
        "users/user-alice/b.jpg",
    }
    assert await plant_repository.count_active_users() == 2
    assert await plant_repository.count_plants() == 3


async def test_growth_log_photos_count_as_referenced(plant_repository, now):
    await create(plant_repository, "Monstera", growthHistory=[
        {"date": now.isoformat(), "heightCm": 40, "photoId": "users/user-alice/week1.jpg"},
        {"date": now.isoformat(), "heightCm": 42},
    ])

    assert await plant_repository.photo_ids_for_user(USER_ID) == {"users/user-alice/week1.jpg"}
