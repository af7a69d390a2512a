"""
Tests for UploadService: presign checks, ownership, registration, deletion and the orphan sweep.
"""

import itertools
from datetime import timedelta

import pytest

from app.modules.uploads.domain.models.upload import Upload
from app.modules.uploads.domain.services.upload_service import UploadService
from app.shared.core.exceptions import (
    AuthorizationError,
    NotFoundError,
    ObjectStoreUnavailableError,
    QuotaExceededError,
    ValidationError,
)
from fakes import OTHER_USER_ID, USER_ID, plant_request

MB = 1024 * 1024


def own_key(name: str = "leaf.jpg") -> str:
    return f"users/{USER_ID}/{name}"


async def add_old_upload(upload_repository, key, created_at, user_id=USER_ID):
    return await upload_repository.register(
        Upload(user_id=user_id, key=key, size_bytes=1024, content_type="image/jpeg", created_at=created_at)
    )


# ========================== Presign =========================================


async def test_presign_builds_key_in_callers_namespace(upload_service, object_store, principal):
    presigned = await upload_service.issue_presigned_upload(
        principal, "my leaf.jpg", "image/JPEG; charset=binary", 1000
    )

    assert presigned.key.startswith(f"users/{USER_ID}/")
    assert presigned.key.endswith("_my%20leaf.jpg")
    assert presigned.url.startswith("https://bucket.test/")
    assert presigned.headers["Content-Type"] == "image/jpeg"
    assert object_store.calls == [("presign_put", presigned.key)]


@pytest.mark.parametrize("filename, content_type, size, field, message", [
    ("leaf.jpg", "image/jpeg", 3 * MB, "sizeBytes", "File too large (max 2MB)"),
    ("leaf.jpg", "image/jpeg", 0, "sizeBytes", "File size must be greater than 0"),
    ("leaf.pdf", "application/pdf", 1000, "contentType", None),
    ("  ", "image/png", 1000, "filename", "Filename is required"),
])
async def test_presign_rejects_bad_requests(
    upload_service, object_store, principal, filename, content_type, size, field, message
):
    with pytest.raises(ValidationError) as exc_info:
        await upload_service.issue_presigned_upload(principal, filename, content_type, size)

    error = exc_info.value.errors[0]
    assert error.field == field
    if message:
        assert error.message == message
    assert object_store.calls == []


async def test_presign_quota(upload_repository, plant_repository, object_store, settings, principal, now):
    limited = settings.model_copy(update={"MAX_UPLOADS_PER_USER": 1})
    service = UploadService(upload_repository, object_store, plant_repository, settings=limited)
    await add_old_upload(upload_repository, own_key(), now)

    with pytest.raises(QuotaExceededError) as exc_info:
        await service.issue_presigned_upload(principal, "leaf.jpg", "image/jpeg", 1000)

    assert exc_info.value.message == "Upload limit reached"
    assert object_store.mutating_calls() == []


# ========================== Ownership =======================================


@pytest.mark.parametrize("key", [
    "users/user-bob/leaf.jpg",
    f"users/{USER_ID}/../user-bob/leaf.jpg",
    f"users/{USER_ID}",
    "leaf.jpg",
])
async def test_foreign_keys_never_reach_the_store(upload_service, object_store, principal, key):
    with pytest.raises(AuthorizationError):
        await upload_service.register_upload(principal, key)
    with pytest.raises(AuthorizationError):
        await upload_service.delete_upload(principal, key)

    assert object_store.calls == []


# ========================== Register ========================================


async def test_register_missing_object(upload_service, principal):
    with pytest.raises(NotFoundError) as exc_info:
        await upload_service.register_upload(principal, own_key())

    assert exc_info.value.message == "Uploaded object not found"


async def test_register_records_object(upload_service, upload_repository, object_store, principal):
    object_store.put(own_key(), size_bytes=5000, content_type="image/PNG")

    upload = await upload_service.register_upload(principal, own_key())

    assert upload.id is not None
    assert upload.size_bytes == 5000
    assert upload.content_type == "image/png"
    assert await upload_repository.count_for_user(USER_ID) == 1


async def test_register_is_idempotent(upload_service, upload_repository, object_store, principal):
    object_store.put(own_key())

    first = await upload_service.register_upload(principal, own_key())
    second = await upload_service.register_upload(principal, own_key())

    assert first.id == second.id
    assert await upload_repository.count_for_user(USER_ID) == 1


async def test_oversized_object_is_deleted(upload_service, upload_repository, object_store, principal):
    object_store.put(own_key(), size_bytes=3 * MB)

    with pytest.raises(ValidationError) as exc_info:
        await upload_service.register_upload(principal, own_key())

    assert exc_info.value.errors[0].message == "Uploaded file exceeds 2MB limit"
    assert own_key() not in object_store.objects
    assert await upload_repository.count_for_user(USER_ID) == 0


async def test_disallowed_type_is_deleted(upload_service, object_store, principal):
    object_store.put(own_key("notes.txt"), content_type="text/plain")

    with pytest.raises(ValidationError) as exc_info:
        await upload_service.register_upload(principal, own_key("notes.txt"))

    assert exc_info.value.errors[0].field == "contentType"
    assert own_key("notes.txt") not in object_store.objects


# ========================== Delete / usage ==================================


async def test_delete_removes_object_and_record(upload_service, upload_repository, object_store, principal):
    object_store.put(own_key())
    await upload_service.register_upload(principal, own_key())

    await upload_service.delete_upload(principal, own_key())

    assert own_key() not in object_store.objects
    assert await upload_repository.get(USER_ID, own_key()) is None


async def test_failed_store_delete_keeps_record(upload_service, upload_repository, object_store, principal):
    object_store.put(own_key())
    await upload_service.register_upload(principal, own_key())
    object_store.failing_operations.add("delete")

    with pytest.raises(ObjectStoreUnavailableError):
        await upload_service.delete_upload(principal, own_key())

    assert await upload_repository.get(USER_ID, own_key()) is not None


async def test_usage_counts_only_callers_objects(upload_service, object_store, principal):
    object_store.put(own_key("a.jpg"), size_bytes=100)
    object_store.put(own_key("b.jpg"), size_bytes=250)
    object_store.put("users/user-bob/c.jpg", size_bytes=999)

    usage = await upload_service.user_usage(principal)

    assert (usage.count, usage.total_bytes) == (2, 350)


# ========================== Orphan sweep ====================================


async def test_sweep_removes_old_unreferenced_uploads(
    upload_service, upload_repository, plant_repository, object_store, principal, now
):
    old = now - timedelta(hours=2)
    for name in ("orphan.jpg", "kept.jpg", "recent.jpg"):
        object_store.put(own_key(name))
    await add_old_upload(upload_repository, own_key("orphan.jpg"), old)
    await add_old_upload(upload_repository, own_key("kept.jpg"), old)
    await add_old_upload(upload_repository, own_key("recent.jpg"), now - timedelta(minutes=10))
    await plant_repository.create(
        plant_request("Monstera", photoIds=[own_key("kept.jpg")]).to_plant(USER_ID, "monstera", now)
    )

    removed = await upload_service.cleanup_orphaned_uploads(older_than=timedelta(hours=1), now=now)

    assert removed == 1
    assert set(object_store.objects) == {own_key("kept.jpg"), own_key("recent.jpg")}
    assert await upload_repository.get(USER_ID, own_key("orphan.jpg")) is None
    assert await upload_repository.get(USER_ID, own_key("kept.jpg")) is not None


async def test_sweep_continues_past_failing_keys(upload_service, upload_repository, object_store, now):
    old = now - timedelta(hours=2)
    for name in ("a.jpg", "b.jpg", "c.jpg"):
        object_store.put(own_key(name))
        await add_old_upload(upload_repository, own_key(name), old)
    object_store.failing_keys.add(own_key("b.jpg"))

    removed = await upload_service.cleanup_orphaned_uploads(older_than=timedelta(hours=1), now=now)

    assert removed == 2
    assert await upload_repository.get(USER_ID, own_key("b.jpg")) is not None


async def test_sweep_stops_when_budget_is_spent(
    upload_repository, plant_repository, object_store, settings, now
):
    # Every clock reading advances five seconds
    clock = itertools.count(0, 5)
    service = UploadService(
        upload_repository, object_store, plant_repository, settings=settings, clock=lambda: next(clock)
    )
    old = now - timedelta(hours=2)
    for index, name in enumerate(("a.jpg", "b.jpg", "c.jpg")):
        object_store.put(own_key(name))
        await add_old_upload(upload_repository, own_key(name), old + timedelta(minutes=index))

    removed = await service.cleanup_orphaned_uploads(
        older_than=timedelta(hours=1), budget_seconds=12, now=now
    )

    assert removed == 1
    assert set(object_store.objects) == {own_key("b.jpg"), own_key("c.jpg")}


async def test_sweep_pages_through_every_candidate(
    upload_repository, plant_repository, object_store, settings, now
):
    service = UploadService(upload_repository, object_store, plant_repository, settings=settings, sweep_page_size=2)
    old = now - timedelta(hours=2)
    keys = [own_key(f"{index}.jpg") for index in range(4)] + [f"users/{OTHER_USER_ID}/0.jpg"]
    for index, key in enumerate(keys):
        object_store.put(key)
        owner = OTHER_USER_ID if key.startswith(f"users/{OTHER_USER_ID}/") else USER_ID
        await add_old_upload(upload_repository, key, old + timedelta(minutes=index), user_id=owner)
    # Referenced only from the growth diary
    await plant_repository.create(plant_request("Monstera", growthHistory=[
        {"date": now.isoformat(), "heightCm": 40, "photoId": own_key("1.jpg")},
    ]).to_plant(USER_ID, "monstera", now))

    removed = await service.cleanup_orphaned_uploads(older_than=timedelta(hours=1), now=now)

    assert removed == 4
    assert set(object_store.objects) == {own_key("1.jpg")}
    assert await upload_repository.get(USER_ID, own_key("1.jpg")) is not None


async def test_list_older_than_pages_by_age_then_key(upload_repository, now):
    old = now - timedelta(hours=2)
    for name in ("b.jpg", "a.jpg", "c.jpg"):
        await add_old_upload(upload_repository, own_key(name), old)
    await add_old_upload(upload_repository, own_key("newer.jpg"), old + timedelta(minutes=1))

    first = await upload_repository.list_older_than(now, limit=2)
    rest = await upload_repository.list_older_than(now, limit=2, after=first[-1])

    assert [upload.key for upload in first + rest] == [
        own_key("a.jpg"), own_key("b.jpg"), own_key("c.jpg"), own_key("newer.jpg"),
    ]
