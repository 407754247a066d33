"""Unit tests for RecordConsole mount/unmount."""

import asyncio

import pytest

from medadmin.application.services import RecordConsole
from medadmin.domain.entities import Medicine, MedicineField
from tests.fakes import ASPIRIN, IBUPROFEN, FakeBlobStore, FakeDocumentStore


@pytest.fixture
def store() -> FakeDocumentStore:
    return FakeDocumentStore({"medicines": {"a": ASPIRIN, "b": IBUPROFEN}})


@pytest.fixture
def console(store) -> RecordConsole[Medicine]:
    return RecordConsole("medicines", Medicine, MedicineField.MEDICINE_NAME, store, FakeBlobStore())


async def test_mount_loads_once(console, store):
    await console.mount()

    assert store.count("fetch_all") == 1
    assert console.cache.active
    assert len(console.cache) == 2


async def test_unmount_discards_draft_and_search(console):
    await console.mount()
    console.edit_session.begin_edit("a")
    console.search.set_term("asp")

    console.unmount()

    assert not console.edit_session.is_editing
    assert console.search.term == ""
    assert not console.cache.active


async def test_remount_ignores_load_from_previous_mount(console, store):
    release = store.hold("fetch_all")
    first = asyncio.create_task(console.mount())
    await asyncio.sleep(0)
    console.unmount()
    store.collections["medicines"].pop("b")

    second = asyncio.create_task(console.mount())
    await asyncio.sleep(0)
    release.set()
    await asyncio.gather(first, second)

    assert [m.id for m in console.cache.records] == ["a"]
    assert store.count("fetch_all") == 2
