"""Unit tests for the FilterView search derivation."""

import pytest

from medadmin.application.services import FilterView, RecordCache
from medadmin.domain.entities import Medicine, MedicineField, Order, OrderField
from tests.fakes import ASPIRIN, IBUPROFEN, PENDING_ORDER, FakeDocumentStore


@pytest.fixture
async def cache() -> RecordCache[Medicine]:
    cache = RecordCache("medicines", Medicine, FakeDocumentStore({"medicines": {"a": ASPIRIN, "b": IBUPROFEN}}))
    await cache.load()
    return cache


@pytest.mark.parametrize(
    "term, expected",
    [("asp", ["a"]), ("ASP", ["a"]), ("pro", ["b"]), ("i", ["a", "b"]), ("zzz", [])],
)
async def test_case_insensitive_substring_match(cache, term, expected):
    view = FilterView(cache, MedicineField.MEDICINE_NAME, term)
    assert [m.id for m in view] == expected


async def test_empty_term_yields_everything_in_order(cache):
    view = FilterView(cache, MedicineField.MEDICINE_NAME)

    assert view.records() == list(cache.records)
    assert view.records() == view.records()


async def test_iteration_is_restartable_and_follows_cache(cache):
    view = FilterView(cache, MedicineField.MEDICINE_NAME, "a")
    first = [m.id for m in view]
    assert [m.id for m in view] == first

    cache.remove("a")

    assert [m.id for m in view] == []


async def test_set_term_does_not_touch_cache(cache):
    view = FilterView(cache, MedicineField.MEDICINE_NAME)
    view.set_term("ibu")

    assert view.term == "ibu"
    assert [m.id for m in view] == ["b"]
    assert len(cache) == 2


async def test_orders_filter_by_customer_name():
    cache = RecordCache("orders", Order, FakeDocumentStore({"orders": {"o1": PENDING_ORDER}}))
    await cache.load()

    assert [o.id for o in FilterView(cache, OrderField.NAME, "jamie")] == ["o1"]
    assert list(FilterView(cache, OrderField.NAME, "alex")) == []


def test_field_must_belong_to_record_type():
    cache = RecordCache("medicines", Medicine, FakeDocumentStore())
    with pytest.raises(TypeError):
        FilterView(cache, OrderField.NAME)
