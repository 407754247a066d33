"""Abstract document store interface (port) — durable CRUD over named collections."""

from abc import ABC, abstractmethod
from typing import Any


class DocumentStore(ABC):
    """Port for the remote document store — implemented in the infrastructure layer.

    Every method may raise ``StoreError``. Implementations perform no
    retries and no local caching.
    """

    @abstractmethod
    async def fetch_all(self, collection: str) -> list[tuple[str, dict[str, Any]]]:
        """Return every document of ``collection`` as ``(identifier, fields)`` pairs."""
        ...

    @abstractmethod
    def new_identifier(self, collection: str) -> str:
        """Allocate an identifier for a document that has not been written yet."""
        ...

    @abstractmethod
    async def create(
        self,
        collection: str,
        fields: dict[str, Any],
        *,
        identifier: str | None = None,
    ) -> str:
        """Persist a new document and return its identifier."""
        ...

    @abstractmethod
    async def update(
        self, collection: str, identifier: str, fields: dict[str, Any]
    ) -> None:
        """Merge ``fields`` into an existing document; other keys are untouched."""
        ...

    @abstractmethod
    async def delete(self, collection: str, identifier: str) -> None:
        """Delete a document."""
        ...
