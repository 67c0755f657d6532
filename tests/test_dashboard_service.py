import pytest

from app.application.errors import (
    IdentityError,
    NotFoundError,
    PersistenceError,
    QuotaExceededError,
    TextTooLargeError,
    ValidationError,
)
from app.application.services.dashboard_service import DashboardService


def make_service(repo, storage, **kwargs):
    kwargs.setdefault("millis", lambda: 1700000000000)
    return DashboardService(repo=repo, storage=storage, **kwargs)


@pytest.mark.asyncio
async def test_upload_file_is_keyed_by_identity_and_time(repo, storage, make_upload):
    svc = make_service(repo, storage)

    record = await svc.upload("u1", file=make_upload("notes.final.pdf", "application/pdf"), text="my notes")

    assert "u1/1700000000000.pdf" in storage.objects
    assert record.user_id == "u1"
    assert record.type == "file"
    assert record.text_content == "my notes"
    assert record.code is None
    assert record.expires_at is None


@pytest.mark.asyncio
async def test_upload_image_and_text(repo, storage, make_upload):
    svc = make_service(repo, storage)

    image = await svc.upload("u1", file=make_upload("pic.jpeg", "image/jpeg"))
    text = await svc.upload("u1", text="just text")

    assert image.type == "image"
    assert image.thumbnail_url == image.url
    assert text.type == "text"
    assert text.url is None and text.filename is None and text.thumbnail_url is None


@pytest.mark.asyncio
async def test_upload_requires_content(repo, storage):
    svc = make_service(repo, storage)
    with pytest.raises(ValidationError):
        await svc.upload("u1")


@pytest.mark.asyncio
async def test_quota_rejects_before_any_write(repo, storage, make_upload):
    storage.objects["u1/1.bin"] = b"x" * 90
    svc = make_service(repo, storage, quota_bytes=100)

    with pytest.raises(QuotaExceededError) as exc:
        await svc.upload("u1", file=make_upload("next.bin", data=b"y" * 11))

    assert exc.value.status_code == 413
    assert storage.puts == 0
    assert repo.rows == []


@pytest.mark.asyncio
async def test_quota_accepts_upload_landing_exactly_on_ceiling(repo, storage, make_upload):
    storage.objects["u1/1.bin"] = b"x" * 90
    svc = make_service(repo, storage, quota_bytes=100)

    record = await svc.upload("u1", file=make_upload("next.bin", data=b"y" * 10))

    assert record.type == "file"
    assert storage.total_bytes("u1") == 100


@pytest.mark.asyncio
async def test_quota_is_per_user_by_default(repo, storage, make_upload):
    storage.objects["u2/1.bin"] = b"x" * 100
    svc = make_service(repo, storage, quota_bytes=100)

    await svc.upload("u1", file=make_upload("a.bin", data=b"y" * 50))

    global_svc = make_service(repo, storage, quota_bytes=100, quota_scope="global")
    with pytest.raises(QuotaExceededError):
        await global_svc.upload("u1", file=make_upload("b.bin", data=b"z"))


def test_invalid_quota_scope():
    with pytest.raises(ValueError):
        DashboardService(repo=None, storage=None, quota_scope="team")


@pytest.mark.asyncio
async def test_pagination_fifteen_records(repo, storage):
    svc = make_service(repo, storage, page_size=10)
    for i in range(15):
        await svc.upload("u1", text=f"item {i}")
    await svc.upload("someone-else", text="not mine")

    first = svc.list_page("u1", 0)
    second = svc.list_page("u1", 1)

    assert len(first.items) == 10
    assert first.has_more is True
    assert len(second.items) == 5
    assert second.has_more is False
    assert first.items[0].text_content == "item 14"
    assert second.items[-1].text_content == "item 0"


def test_negative_page_rejected(repo, storage):
    svc = make_service(repo, storage)
    with pytest.raises(ValidationError):
        svc.list_page("u1", -1)


@pytest.mark.asyncio
async def test_delete_removes_record_and_object(repo, storage, make_upload):
    svc = make_service(repo, storage)
    record = await svc.upload("u1", file=make_upload("a.pdf", "application/pdf"))

    svc.delete("u1", record.id)

    assert svc.list_page("u1", 0).items == []
    assert storage.objects == {}


@pytest.mark.asyncio
async def test_delete_survives_object_removal_failure(repo, storage, make_upload):
    svc = make_service(repo, storage)
    record = await svc.upload("u1", file=make_upload("a.pdf", "application/pdf"))
    storage.fail_remove = True

    svc.delete("u1", record.id)

    assert repo.rows == []


@pytest.mark.asyncio
async def test_delete_record_failure_raises(repo, storage):
    svc = make_service(repo, storage)
    record = await svc.upload("u1", text="keep me")
    repo.fail_delete = True

    with pytest.raises(PersistenceError):
        svc.delete("u1", record.id)
    assert len(repo.rows) == 1


@pytest.mark.asyncio
async def test_delete_other_users_upload_not_found(repo, storage):
    svc = make_service(repo, storage)
    record = await svc.upload("u1", text="mine")

    with pytest.raises(NotFoundError):
        svc.delete("u2", record.id)
    assert len(repo.rows) == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("user_id", ["anonymous", ".", "..", "a/b", "a\\b", ""])
async def test_upload_rejects_identities_outside_own_folder(repo, storage, make_upload, user_id):
    svc = make_service(repo, storage)
    storage.objects["anonymous/12345678.bin"] = b"x" * 50

    with pytest.raises(IdentityError) as exc:
        await svc.upload(user_id, file=make_upload("a.bin", data=b"y"))

    assert exc.value.status_code == 403
    assert storage.puts == 0
    assert repo.rows == []


def test_quota_check_rejects_reserved_identity(repo, storage):
    svc = make_service(repo, storage, quota_bytes=10)

    with pytest.raises(IdentityError):
        svc.check_quota("anonymous", 1)


@pytest.mark.asyncio
async def test_upload_rejects_oversized_text(repo, storage):
    svc = make_service(repo, storage, max_text_size=8)

    with pytest.raises(TextTooLargeError) as exc:
        await svc.upload("u1", text="123456789")

    assert exc.value.status_code == 413
    assert repo.rows == []

    # Surrounding whitespace is trimmed before measuring
    record = await svc.upload("u1", text="  12345678  ")
    assert record.text_content == "12345678"
