"""One view's worth of the sync core: cache, coordinator, edit session and search."""

import logging
from enum import Enum
from typing import Generic, TypeVar

from medadmin.application.interfaces import BlobStore, DocumentStore
from medadmin.application.services.edit_session import EditSession
from medadmin.application.services.filter_view import FilterView
from medadmin.application.services.mutation_coordinator import MutationCoordinator
from medadmin.application.services.record_cache import RecordCache
from medadmin.domain.entities import Record

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=Record)


class RecordConsole(Generic[R]):
    """Wires the sync-core services for one collection.

    ``mount`` is the activation of the view: it starts a new cache
    generation and loads the collection once. ``unmount`` tears the view
    down so late results of in-flight calls are discarded.
    """

    def __init__(
        self,
        collection: str,
        record_type: type[R],
        search_field: Enum,
        store: DocumentStore,
        blob_store: BlobStore | None = None,
    ):
        self.cache: RecordCache[R] = RecordCache(collection, record_type, store)
        self.coordinator: MutationCoordinator[R] = MutationCoordinator(self.cache, store, blob_store)
        self.edit_session: EditSession[R] = EditSession(self.cache, self.coordinator)
        self.search: FilterView[R] = FilterView(self.cache, search_field)

    @property
    def collection(self) -> str:
        return self.cache.collection

    async def mount(self) -> None:
        if self.cache.active:
            self.unmount()
        self.cache.activate()
        await self.cache.load()

    def unmount(self) -> None:
        if self.edit_session.is_editing:
            logger.info("Discarding unsaved %s draft on teardown", self.collection)
        self.edit_session.cancel()
        self.search.set_term("")
        self.cache.deactivate()
