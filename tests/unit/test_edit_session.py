"""Unit tests for the EditSession state machine."""

import pytest

from medadmin.application.services import (
    Editing,
    EditSession,
    Idle,
    MutationCoordinator,
    RecordCache,
)
from medadmin.domain.entities import AssetFile, Medicine, MedicineField, OrderField
from medadmin.domain.exceptions import EntityNotFoundError, RemoteError
from tests.fakes import ASPIRIN, IBUPROFEN, FakeBlobStore, FakeDocumentStore


@pytest.fixture
def store() -> FakeDocumentStore:
    return FakeDocumentStore({"medicines": {"a": ASPIRIN, "b": IBUPROFEN}})


@pytest.fixture
def blobs() -> FakeBlobStore:
    return FakeBlobStore()


@pytest.fixture
async def cache(store) -> RecordCache[Medicine]:
    cache = RecordCache("medicines", Medicine, store)
    cache.activate()
    await cache.load()
    return cache


@pytest.fixture
def session(cache, store, blobs) -> EditSession[Medicine]:
    return EditSession(cache, MutationCoordinator(cache, store, blobs))


def test_starts_idle(session):
    assert isinstance(session.state, Idle)
    assert session.editing_identifier() is None


async def test_begin_edit_copies_cached_fields(session):
    state = session.begin_edit("a")

    assert isinstance(state, Editing)
    assert state.identifier == "a"
    assert state.draft_fields[MedicineField.MEDICINE_NAME] == "Aspirin"
    assert MedicineField.IMAGE_URL not in state.draft_fields
    assert state.draft_asset is None


async def test_begin_edit_of_unknown_record(session):
    with pytest.raises(EntityNotFoundError):
        session.begin_edit("zzz")
    assert not session.is_editing


async def test_cancel_restores_idle_with_no_store_calls(session, cache, store):
    before = cache.records
    calls = list(store.calls)

    session.begin_edit("a")
    session.set_draft_field(MedicineField.PRICE, "99")
    session.cancel()

    assert isinstance(session.state, Idle)
    assert cache.records == before
    assert store.calls == calls


async def test_draft_edits_do_not_touch_the_cache(session, cache):
    session.begin_edit("a")
    session.set_draft_field(MedicineField.DOSES, "3 tablets")

    assert cache.get("a").doses == "1 tablet"


async def test_begin_on_another_row_discards_previous_draft(session):
    session.begin_edit("a")
    session.set_draft_field(MedicineField.PRICE, "99")

    state = session.begin_edit("b")

    assert state.identifier == "b"
    assert state.draft_fields[MedicineField.PRICE] == 7.5
    assert session.editing_identifier() == "b"


async def test_begin_on_same_row_resets_draft(session):
    session.begin_edit("a")
    session.set_draft_field(MedicineField.PRICE, "99")

    state = session.begin_edit("a")

    assert state.draft_fields[MedicineField.PRICE] == "5.00"


async def test_save_sends_only_changed_fields(session, store, cache):
    session.begin_edit("a")
    session.set_draft_field(MedicineField.DOSES, "2 tablets")

    updated = await session.save()

    assert [c for c in store.calls if c[0] == "update"] == [
        ("update", "medicines", "a", {"doses": "2 tablets"})
    ]
    assert isinstance(session.state, Idle)
    assert updated.doses == "2 tablets"
    assert cache.get("a").image_url == ASPIRIN["imageUrl"]


async def test_save_without_changes_returns_to_idle_silently(session, store):
    session.begin_edit("b")

    await session.save()

    assert store.count("update") == 0
    assert isinstance(session.state, Idle)


async def test_selected_asset_is_uploaded_only_on_save(session, blobs, cache):
    session.begin_edit("b")
    session.select_asset(AssetFile(filename="b.png", content=b"img", content_type="image/png"))
    assert blobs.calls == []

    await session.save()

    assert blobs.count("upload") == 1
    assert cache.get("b").image_url == blobs.resolved_urls[-1]


async def test_failed_save_keeps_editing_with_draft(session, store, cache):
    store.fail_on("update", 403, "PERMISSION_DENIED")
    session.begin_edit("a")
    session.set_draft_field(MedicineField.PRICE, "6")

    with pytest.raises(RemoteError):
        await session.save()

    assert session.editing_identifier() == "a"
    assert session.state.draft_fields[MedicineField.PRICE] == "6"
    assert cache.get("a").price == "5.00"


async def test_failed_upload_keeps_pending_asset(session, blobs, store):
    blobs.fail_upload = True
    asset = AssetFile(filename="a.png", content=b"img")
    session.begin_edit("a")
    session.select_asset(asset)

    with pytest.raises(RemoteError):
        await session.save()

    assert session.state.draft_asset is asset
    assert store.count("update") == 0


async def test_set_draft_field_rules(session):
    with pytest.raises(RuntimeError):
        session.set_draft_field(MedicineField.PRICE, "1")

    session.begin_edit("a")
    with pytest.raises(ValueError):
        session.set_draft_field(MedicineField.IMAGE_URL, "https://elsewhere.test/x.png")
    with pytest.raises(TypeError):
        session.set_draft_field(OrderField.NAME, "x")


async def test_save_when_idle_is_an_error(session):
    with pytest.raises(RuntimeError):
        await session.save()
