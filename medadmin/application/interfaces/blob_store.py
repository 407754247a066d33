"""Abstract blob store interface (port) — binary uploads addressable by path."""

from abc import ABC, abstractmethod

from medadmin.domain.entities import AssetHandle


class BlobStore(ABC):
    """Port for the remote blob store. Failures raise ``UploadError``."""

    @abstractmethod
    async def upload(
        self, path: str, content: bytes, content_type: str = "application/octet-stream"
    ) -> AssetHandle:
        """Upload ``content`` to ``path``, replacing any previous blob there."""
        ...

    @abstractmethod
    async def resolve_url(self, handle: AssetHandle) -> str:
        """Return a durable, retrievable URL for an uploaded blob."""
        ...
