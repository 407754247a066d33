"""In-memory, ordered mirror of one remote collection — the single source of truth for the view."""

import logging
from collections.abc import Mapping
from enum import Enum
from typing import Any, Generic, TypeVar

from medadmin.application.interfaces import DocumentStore
from medadmin.domain.entities import Record
from medadmin.domain.exceptions import DuplicateRecordError, StoreError

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=Record)


class RecordCache(Generic[R]):
    """Holds the records of one collection plus ``loading`` / ``error`` status.

    The cache never writes to the store. It is filled by :meth:`load` and
    otherwise changed only by the mutation coordinator through
    :meth:`apply`, :meth:`remove` and :meth:`insert`.

    Each activation of the owning view bumps :attr:`generation`; results of
    calls started under an older generation are discarded by whoever awaits
    them (see :meth:`is_current`).
    """

    def __init__(self, collection: str, record_type: type[R], store: DocumentStore):
        self._collection = collection
        self._record_type = record_type
        self._store = store
        self._records: list[R] = []
        self._loaded = False
        self.loading = True
        self.error: str | None = None
        self._generation = 0
        self._active = False

    @property
    def collection(self) -> str:
        return self._collection

    @property
    def record_type(self) -> type[R]:
        return self._record_type

    @property
    def records(self) -> tuple[R, ...]:
        return tuple(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, identifier: object) -> bool:
        return self._index_of(identifier) is not None

    def get(self, identifier: str) -> R | None:
        index = self._index_of(identifier)
        return self._records[index] if index is not None else None

    # ── Activation (stale-response guard) ───────────────────────────

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def active(self) -> bool:
        return self._active

    def activate(self) -> int:
        self._generation += 1
        self._active = True
        return self._generation

    def deactivate(self) -> None:
        self._generation += 1
        self._active = False
        self.loading = False

    def is_current(self, generation: int) -> bool:
        return generation == self._generation

    # ── Loading ─────────────────────────────────────────────────────

    async def load(self) -> bool:
        """Replace the whole sequence from a full fetch.

        On failure the error is recorded and the previously loaded sequence
        (or an empty one) is kept. The store error is not re-raised; the
        return value is False when the sequence was not replaced.
        """
        generation = self._generation
        self.loading = True
        try:
            documents = await self._store.fetch_all(self._collection)
        except StoreError as exc:
            if generation != self._generation:
                logger.debug("Discarding failed load of %s from a previous activation", self._collection)
                return False
            logger.error("Error fetching %s: %s", self._collection, exc)
            self.error = f"Error fetching {self._collection}"
            if not self._loaded:
                self._records = []
            self.loading = False
            return False

        if generation != self._generation:
            logger.debug("Discarding load of %s from a previous activation", self._collection)
            return False

        self._records = [
            self._record_type.from_document(identifier, data)
            for identifier, data in documents
        ]
        self._loaded = True
        self.error = None
        self.loading = False
        logger.info("Loaded %d %s records", len(self._records), self._collection)
        return True

    # ── Local mutations ─────────────────────────────────────────────

    def apply(self, identifier: str, changes: Mapping[Enum, Any]) -> R | None:
        """Merge ``changes`` into the matching record; other records are untouched."""
        index = self._index_of(identifier)
        if index is None:
            logger.warning(
                "Cache inconsistency: apply to absent %s record '%s'",
                self._collection,
                identifier,
            )
            return None
        updated = self._records[index].merged(changes)
        self._records[index] = updated
        return updated

    def remove(self, identifier: str) -> bool:
        index = self._index_of(identifier)
        if index is None:
            logger.warning(
                "Cache inconsistency: remove of absent %s record '%s'",
                self._collection,
                identifier,
            )
            return False
        del self._records[index]
        return True

    def insert(self, record: R) -> None:
        """Append ``record``. A duplicate identifier is a programming error."""
        if self._index_of(record.id) is not None:
            raise DuplicateRecordError(self._collection, record.id)
        self._records.append(record)

    def _index_of(self, identifier: object) -> int | None:
        for index, record in enumerate(self._records):
            if record.id == identifier:
                return index
        return None
