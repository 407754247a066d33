"""In-memory fakes of the store ports, shared by the unit and integration tests."""

import asyncio
import copy
from typing import Any

from medadmin.application.interfaces import BlobStore, DocumentStore
from medadmin.domain.entities import AssetHandle
from medadmin.domain.exceptions import StoreError, UploadError


class FakeDocumentStore(DocumentStore):
    """In-memory document store that records every call and can be told to fail."""

    def __init__(self, collections: dict[str, dict[str, dict[str, Any]]] | None = None):
        self.collections: dict[str, dict[str, dict[str, Any]]] = copy.deepcopy(collections or {})
        self.calls: list[tuple] = []
        self._failures: dict[str, StoreError] = {}
        self._holds: dict[str, asyncio.Event] = {}
        self._next_id = 1

    def fail_on(self, operation: str, status_code: int = 503, message: str = "unavailable") -> None:
        self._failures[operation] = StoreError(operation, status_code, message)

    def recover(self, operation: str) -> None:
        self._failures.pop(operation, None)

    def count(self, operation: str) -> int:
        return sum(1 for call in self.calls if call[0] == operation)

    def hold(self, operation: str) -> asyncio.Event:
        """Make ``operation`` wait until the returned event is set."""
        event = asyncio.Event()
        self._holds[operation] = event
        return event

    async def _wait(self, operation: str) -> None:
        if operation in self._holds:
            await self._holds[operation].wait()

    def _maybe_fail(self, operation: str) -> None:
        if operation in self._failures:
            raise self._failures[operation]

    async def fetch_all(self, collection: str) -> list[tuple[str, dict[str, Any]]]:
        self.calls.append(("fetch_all", collection))
        await self._wait("fetch_all")
        self._maybe_fail("fetch_all")
        docs = self.collections.get(collection, {})
        return [(identifier, copy.deepcopy(data)) for identifier, data in docs.items()]

    def new_identifier(self, collection: str) -> str:
        identifier = f"doc-{self._next_id}"
        self._next_id += 1
        return identifier

    async def create(
        self,
        collection: str,
        fields: dict[str, Any],
        *,
        identifier: str | None = None,
    ) -> str:
        self.calls.append(("create", collection, identifier, copy.deepcopy(fields)))
        await self._wait("create")
        self._maybe_fail("create")
        identifier = identifier or self.new_identifier(collection)
        self.collections.setdefault(collection, {})[identifier] = copy.deepcopy(fields)
        return identifier

    async def update(self, collection: str, identifier: str, fields: dict[str, Any]) -> None:
        self.calls.append(("update", collection, identifier, copy.deepcopy(fields)))
        await self._wait("update")
        self._maybe_fail("update")
        docs = self.collections.get(collection, {})
        if identifier not in docs:
            raise StoreError("update", 404, f"{collection}/{identifier} not found")
        docs[identifier].update(copy.deepcopy(fields))

    async def delete(self, collection: str, identifier: str) -> None:
        self.calls.append(("delete", collection, identifier))
        await self._wait("delete")
        self._maybe_fail("delete")
        self.collections.get(collection, {}).pop(identifier, None)


class FakeBlobStore(BlobStore):
    """In-memory blob store issuing token-bearing handles."""

    def __init__(self):
        self.blobs: dict[str, bytes] = {}
        self.calls: list[tuple] = []
        self.resolved_urls: list[str] = []
        self.fail_upload = False
        self.fail_resolve = False
        self._next_token = 1

    def count(self, operation: str) -> int:
        return sum(1 for call in self.calls if call[0] == operation)

    async def upload(
        self, path: str, content: bytes, content_type: str = "application/octet-stream"
    ) -> AssetHandle:
        self.calls.append(("upload", path, content_type))
        if self.fail_upload:
            raise UploadError(path, "bucket unavailable")
        self.blobs[path] = content
        token = f"tok-{self._next_token}"
        self._next_token += 1
        return AssetHandle(path=path, token=token)

    async def resolve_url(self, handle: AssetHandle) -> str:
        self.calls.append(("resolve_url", handle.path))
        if self.fail_resolve:
            raise UploadError(handle.path, "no download token")
        url = f"https://blobs.test/{handle.path}?token={handle.token}"
        self.resolved_urls.append(url)
        return url


ASPIRIN = {
    "medicineName": "Aspirin",
    "indications": "Pain relief",
    "doses": "1 tablet",
    "weight": "500mg",
    "price": "5.00",
    "category": "Analgesic",
    "imageUrl": "https://blobs.test/medicines/a?token=old",
}

IBUPROFEN = {
    "medicineName": "Ibuprofen",
    "indications": "Inflammation",
    "doses": "2 tablets",
    "weight": "200mg",
    "price": 7.5,
    "category": "NSAID",
    "imageUrl": None,
}

PENDING_ORDER = {
    "orderId": "ORD-1001",
    "name": "Jamie Doe",
    "address": "1 Main St",
    "city": "Springfield",
    "postalCode": "12345",
    "country": "US",
    "phoneNumber": "555-0100",
    "email": "jamie@example.com",
    "paymentMethod": "Card",
    "totalAmount": "12.5",
    "deliveryStatus": "Pending",
    "items": [
        {"medicineName": "Aspirin", "price": 5},
        {"medicineName": "Ibuprofen", "price": 7.5},
    ],
}
