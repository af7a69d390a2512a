"""
End-to-end tests through the ASGI app: routing, status codes, error bodies,
rate limiting and request ids.
"""

import pytest

from app.main import app
from app.modules.stats.domain.services.stats_cache import StatsCache
from app.modules.stats.presentation.dependencies import get_stats_cache, load_stats
from app.shared.core.rate_limiter import InMemoryRateLimiter, RateLimitRule, get_rate_limiter
from fakes import OTHER_USER_ID, TEST_USER_HEADER, USER_ID, watering

PLANTS = "/api/v1/plants"
NOTIFICATION_CONFIG = "/api/v1/notifications/config"


async def create_plant(client, name="Monstera", **fields):
    response = await client.post(PLANTS, json={"name": name, **fields})
    assert response.status_code == 201, response.text
    return response.json()


# ========================== Plants ==========================================


async def test_plant_crud(client):
    created = await create_plant(client, "Monstera", watering=watering(7), preferedTemperature=21)
    assert created["slug"] == "monstera"
    assert created["userId"] == USER_ID
    assert created["preferedTemperature"] == 21
    assert created["watering"]["intervalDays"] == 7

    listed = await client.get(PLANTS)
    assert [plant["id"] for plant in listed.json()] == [created["id"]]

    by_slug = await client.get(f"{PLANTS}/slug/monstera")
    assert by_slug.json()["id"] == created["id"]

    patched = await client.patch(f"{PLANTS}/{created['id']}", json={"name": "Big Monstera", "watering": {}})
    assert patched.status_code == 200
    assert patched.json()["name"] == "Big Monstera"
    assert patched.json()["watering"] is None
    assert patched.json()["slug"] == "monstera"

    deleted = await client.delete(f"{PLANTS}/{created['id']}")
    assert deleted.json() == {"success": True}

    missing = await client.get(f"{PLANTS}/{created['id']}")
    assert missing.status_code == 404


async def test_not_found_error_body(client):
    response = await client.get(f"{PLANTS}/00000000-0000-0000-0000-000000000000")

    assert response.status_code == 404
    error = response.json()["error"]
    assert error["code"] == "NOT_FOUND"
    assert error["message"] == "Plant not found"
    assert error["request_id"] == response.headers["X-Request-ID"]
    assert "timestamp" in error


async def test_foreign_plant_looks_missing(client):
    created = await create_plant(client, "Cactus")

    response = await client.get(f"{PLANTS}/{created['id']}", headers={TEST_USER_HEADER: OTHER_USER_ID})

    assert response.status_code == 404


async def test_validation_errors_list_every_field(client):
    response = await client.post(PLANTS, json={"name": "", "sunlight": "Moonlight"})

    assert response.status_code == 422
    error = response.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert {item["field"] for item in error["details"]["errors"]} == {"name", "sunlight"}


async def test_malformed_body_uses_same_error_shape(client):
    response = await client.post(PLANTS, json={"name": "Fern", "isToxic": "perhaps"})

    assert response.status_code == 422
    error = response.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert [item["field"] for item in error["details"]["errors"]] == ["isToxic"]


async def test_water_endpoint(client):
    mine = await create_plant(client, "Monstera", watering=watering(7))
    foreign = await client.post(PLANTS, json={"name": "Cactus"}, headers={TEST_USER_HEADER: OTHER_USER_ID})

    response = await client.post(f"{PLANTS}/water", json={"plantIds": [mine["id"], foreign.json()["id"]]})

    assert response.json() == {"success": True, "modified": 1}
    watered = await client.get(f"{PLANTS}/{mine['id']}")
    assert watered.json()["watering"]["lastWatered"] is not None


async def test_water_endpoint_requires_ids(client):
    response = await client.post(f"{PLANTS}/water", json={"plantIds": []})

    assert response.status_code == 422
    assert response.json()["error"]["details"]["errors"][0]["field"] == "plantIds"


# ========================== Uploads =========================================


async def test_upload_flow(client, object_store):
    presigned = await client.post(
        "/api/v1/uploads/presign",
        json={"filename": "leaf.jpg", "contentType": "image/jpeg", "sizeBytes": 2048},
    )
    assert presigned.status_code == 200
    key = presigned.json()["key"]
    assert presigned.json()["headers"]["Content-Type"] == "image/jpeg"

    object_store.put(key, size_bytes=2048)
    registered = await client.post("/api/v1/uploads/register", json={"key": key})
    assert registered.json() == {"success": True}

    usage = await client.get("/api/v1/uploads/usage")
    assert usage.json() == {"count": 1, "totalBytes": 2048}

    deleted = await client.delete(f"/api/v1/uploads/{key}")
    assert deleted.status_code == 200
    assert key not in object_store.objects


async def test_foreign_upload_key_is_forbidden(client, object_store):
    response = await client.post("/api/v1/uploads/register", json={"key": "users/user-bob/leaf.jpg"})

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "AUTHORIZATION_ERROR"
    assert object_store.calls == []


# ========================== Notifications ===================================


async def test_notification_config_put_status_codes(client):
    defaults = await client.get(NOTIFICATION_CONFIG)
    assert defaults.json()["preferredTime"] == "08:00"

    payload = {"preferredTime": "07:45", "batchingDays": 2, "remindWatering": True}
    first = await client.put(NOTIFICATION_CONFIG, json=payload)
    second = await client.put(NOTIFICATION_CONFIG, json={**payload, "preferredTime": "09:00"})

    assert first.status_code == 201
    assert second.status_code == 200
    assert second.json()["preferredTime"] == "09:00"

    assert (await client.delete(NOTIFICATION_CONFIG)).status_code == 200
    assert (await client.delete(NOTIFICATION_CONFIG)).status_code == 404


# ========================== Public routes ===================================


async def test_health_endpoints(client):
    health = await client.get("/api/v1/health")
    ready = await client.get("/api/v1/health/ready")
    live = await client.get("/api/v1/health/live")

    assert health.json()["status"] == "healthy"
    assert ready.status_code == 200
    assert ready.json() == {"status": "ready", "database": "healthy"}
    assert live.status_code == 200


async def test_stats_are_public(client):
    app.dependency_overrides[get_stats_cache] = lambda: StatsCache(load_stats)
    await create_plant(client, "Monstera")
    await create_plant(client, "Fern")

    response = await client.get("/api/v1/stats")

    assert response.json() == {"users": 1, "plants": 2, "reminders": 0}


# ========================== Cross-cutting ===================================


async def test_rate_limit_returns_retry_after(client):
    strict = InMemoryRateLimiter(
        user_rule=RateLimitRule(limit=1, window_seconds=60),
        ip_rule=RateLimitRule(limit=1000, window_seconds=60),
    )
    app.dependency_overrides[get_rate_limiter] = lambda: strict

    assert (await client.get(PLANTS)).status_code == 200
    limited = await client.get(PLANTS)

    assert limited.status_code == 429
    assert limited.headers["Retry-After"] == "60"
    assert limited.json()["error"]["code"] == "RATE_LIMIT_EXCEEDED"

    # Other users and public routes are unaffected
    assert (await client.get(PLANTS, headers={TEST_USER_HEADER: OTHER_USER_ID})).status_code == 200
    assert (await client.get("/api/v1/health")).status_code == 200


@pytest.mark.parametrize("incoming, echoed", [
    ("req-123", True),
    ("x" * 200, False),
])
async def test_request_id_header(client, incoming, echoed):
    response = await client.get("/api/v1/health", headers={"X-Request-ID": incoming})

    assert response.headers["X-Request-ID"]
    assert (response.headers["X-Request-ID"] == incoming) is echoed


async def test_retry_after_follows_the_user_window(client):
    hourly = InMemoryRateLimiter(
        user_rule=RateLimitRule(limit=1, window_seconds=3600),
        ip_rule=RateLimitRule(limit=1000, window_seconds=60),
    )
    app.dependency_overrides[get_rate_limiter] = lambda: hourly

    await client.get(PLANTS)
    limited = await client.get(PLANTS)

    assert limited.status_code == 429
    assert limited.headers["Retry-After"] == "3600"
    assert limited.json()["error"]["details"] == {"limit": 1, "window": "hour", "retry_after": 3600}
