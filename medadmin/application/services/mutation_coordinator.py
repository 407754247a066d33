"""Application service that sequences multi-step writes as one logical operation.

A write may involve an asset upload, a document write and a cache update.
The caller observes either the whole change or none of it: every method
returns on success and raises ``ValidationError`` (nothing was sent) or
``RemoteError`` (a remote step failed) otherwise.
"""

import logging
from collections.abc import Mapping
from enum import Enum
from typing import Any, Generic, TypeVar

from medadmin.application.interfaces import BlobStore, DocumentStore
from medadmin.application.services.record_cache import RecordCache
from medadmin.domain.entities import AssetFile, Record
from medadmin.domain.exceptions import RemoteError, StoreError, ValidationError
from medadmin.infrastructure.logging.colored_logger import MutationLogger, MutationStage

logger = logging.getLogger(__name__)
mlog = MutationLogger("MutationCoordinator")

R = TypeVar("R", bound=Record)


class RefreshPolicy(str, Enum):
    """How the cache catches up after a successful write.

    ``LOCAL`` merges the written fields into the cached record (no round
    trip); ``FULL`` reloads the collection so the view matches the store.
    """

    LOCAL = "local"
    FULL = "full"


class MutationCoordinator(Generic[R]):
    """Orchestrates writes for one collection. Depends on the store ports (DI)."""

    def __init__(
        self,
        cache: RecordCache[R],
        store: DocumentStore,
        blob_store: BlobStore | None = None,
    ):
        self._cache = cache
        self._store = store
        self._blob_store = blob_store

    @property
    def collection(self) -> str:
        return self._cache.collection

    @property
    def record_type(self) -> type[R]:
        return self._cache.record_type

    # ── Operations ──────────────────────────────────────────────────

    async def create(
        self,
        changes: Mapping[Enum, Any],
        asset: AssetFile | None = None,
        *,
        refresh: RefreshPolicy = RefreshPolicy.LOCAL,
    ) -> R:
        """Upload ``asset`` (if any), then create the document with its URL embedded.

        The asset is stored under ``{collection}/{identifier}`` using an
        identifier allocated before the document is written. If the upload
        fails no document is created; if the create fails after a successful
        upload the blob is left orphaned.
        """
        fields = self._validate(changes, creating=True)
        self._check_asset(asset)
        generation = self._cache.generation

        identifier = self._store.new_identifier(self.collection)
        if asset is not None:
            fields[self.record_type.asset_field] = await self._upload(identifier, asset)

        document = self.record_type.encode_fields(fields)
        with mlog.timed_step(MutationStage.WRITE, f"Creating {self.collection} record", id=identifier):
            try:
                identifier = await self._store.create(
                    self.collection, document, identifier=identifier
                )
            except StoreError as exc:
                if asset is not None:
                    logger.warning("Asset %s/%s is orphaned by the failed create", self.collection, identifier)
                raise RemoteError("create", exc.message) from exc

        record = self.record_type(id=identifier).merged(fields)
        if not self._cache.is_current(generation):
            logger.info("View was torn down; not caching created record '%s'", identifier)
            return record

        if refresh is RefreshPolicy.FULL and await self._reload(generation):
            return record
        if self._cache.is_current(generation):
            self._cache.insert(record)
            mlog.step_complete(MutationStage.CACHE, "Inserted into cache", id=identifier)
        return record

    async def update(
        self,
        identifier: str,
        changes: Mapping[Enum, Any],
        asset: AssetFile | None = None,
        *,
        refresh: RefreshPolicy = RefreshPolicy.LOCAL,
    ) -> R | None:
        """Write the edited fields of one record, uploading a new asset first if given.

        Only the keys in ``changes`` are sent. The asset reference is written
        only when a new asset was uploaded and resolved to a URL.
        """
        fields = self._validate(changes)
        self._check_asset(asset)
        if not fields and asset is None:
            return self._cache.get(identifier)
        generation = self._cache.generation

        if asset is not None:
            fields[self.record_type.asset_field] = await self._upload(identifier, asset)

        document = self.record_type.encode_fields(fields)
        with mlog.timed_step(
            MutationStage.WRITE,
            f"Updating {self.collection} record",
            id=identifier,
            fields=",".join(document),
        ):
            try:
                await self._store.update(self.collection, identifier, document)
            except StoreError as exc:
                raise RemoteError("update", exc.message) from exc

        if not self._cache.is_current(generation):
            logger.info("View was torn down; not applying update of '%s'", identifier)
            return None

        if refresh is RefreshPolicy.FULL and await self._reload(generation):
            return self._cache.get(identifier)
        if not self._cache.is_current(generation):
            return None
        updated = self._cache.apply(identifier, fields)
        mlog.step_complete(MutationStage.CACHE, "Applied to cache", id=identifier)
        return updated

    async def delete(self, identifier: str) -> None:
        """Delete remotely, then locally. A failed delete leaves the cache unchanged."""
        generation = self._cache.generation
        with mlog.timed_step(MutationStage.DELETE, f"Deleting {self.collection} record", id=identifier):
            try:
                await self._store.delete(self.collection, identifier)
            except StoreError as exc:
                raise RemoteError("delete", exc.message) from exc

        if self._cache.is_current(generation):
            self._cache.remove(identifier)

    async def update_status(
        self,
        identifier: str,
        status: str,
        *,
        refresh: RefreshPolicy = RefreshPolicy.FULL,
    ) -> R | None:
        """Restricted update that touches only the record's status field."""
        status_field = self.record_type.status_field
        if status_field is None:
            raise TypeError(f"{self.record_type.__name__} has no status field")
        return await self.update(identifier, {status_field: status}, refresh=refresh)

    # ── Helpers ─────────────────────────────────────────────────────

    def _validate(self, changes: Mapping[Enum, Any], *, creating: bool = False) -> dict[Enum, Any]:
        asset_field = self.record_type.asset_field
        if asset_field is not None and asset_field in changes:
            raise ValidationError(asset_field.value, "is set only from an uploaded asset")
        if not creating:
            for field_name in changes:
                self.record_type.check_field(field_name)
                if field_name not in self.record_type.editable_fields:
                    raise ValidationError(field_name.value, "is not editable")
        return self.record_type.validate_changes(changes, creating=creating)

    def _check_asset(self, asset: AssetFile | None) -> None:
        if asset is None:
            return
        if self.record_type.asset_field is None or self._blob_store is None:
            raise ValidationError("asset", f"{self.collection} records do not take assets")
        if not asset.content:
            raise ValidationError("asset", f"'{asset.filename}' is empty")

    async def _upload(self, identifier: str, asset: AssetFile) -> str:
        """Upload and resolve; returns a URL. Raises ``UploadError`` on failure."""
        path = f"{self.collection}/{identifier}"
        with mlog.timed_step(MutationStage.UPLOAD, f"Uploading {asset.filename}", path=path, bytes=asset.size):
            handle = await self._blob_store.upload(path, asset.content, asset.content_type)
            url = await self._blob_store.resolve_url(handle)
            mlog.detail("Resolved download URL", path=handle.path)
        return url

    async def _reload(self, generation: int) -> bool:
        """Reload after a persisted write; False means the caller applies the write locally."""
        with mlog.timed_step(MutationStage.REFRESH, f"Reloading {self.collection}"):
            reloaded = await self._cache.load()
        if not reloaded and self._cache.is_current(generation):
            logger.warning("Reload of %s failed; applying the persisted write locally", self.collection)
        return reloaded
