"""Read-only search view derived from a record cache."""

from collections.abc import Iterator
from enum import Enum
from typing import Generic, TypeVar

from medadmin.application.services.record_cache import RecordCache
from medadmin.domain.entities import Record

R = TypeVar("R", bound=Record)


class FilterView(Generic[R]):
    """Case-insensitive substring filter over one text field.

    Holds only the search term; every iteration re-derives the
    subsequence from the cache's current records.
    """

    def __init__(self, cache: RecordCache[R], field: Enum, term: str = ""):
        cache.record_type.check_field(field)
        self._cache = cache
        self._field = field
        self._term = term

    @property
    def term(self) -> str:
        return self._term

    def set_term(self, term: str) -> None:
        self._term = term or ""

    def __iter__(self) -> Iterator[R]:
        needle = self._term.lower()
        for record in self._cache.records:
            if not needle:
                yield record
                continue
            value = record.value_of(self._field)
            if value is not None and needle in str(value).lower():
                yield record

    def records(self) -> list[R]:
        return list(self)
