"""Firebase Storage REST client — implements the BlobStore interface."""

import logging
from collections.abc import Callable
from typing import Any
from urllib.parse import quote

import httpx

from medadmin.application.interfaces import BlobStore
from medadmin.domain.entities import AssetHandle
from medadmin.domain.exceptions import UploadError

logger = logging.getLogger(__name__)


class FirebaseBlobStore(BlobStore):
    """Infrastructure adapter — uploads blobs to a Firebase Storage bucket.

    Download URLs are built from the object's download token, the same
    URLs the Firebase SDKs hand out.
    """

    def __init__(
        self,
        bucket: str,
        *,
        base_url: str = "https://firebasestorage.googleapis.com/v0",
        token_provider: Callable[[], str | None] | None = None,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ):
        self._bucket = bucket
        self._objects_url = f"{base_url.rstrip('/')}/b/{bucket}/o"
        self._token_provider = token_provider
        self._http_client = http_client
        self._timeout = timeout

    def _get_headers(self, content_type: str | None = None) -> dict[str, str]:
        headers: dict[str, str] = {}
        if content_type:
            headers["Content-Type"] = content_type
        token = self._token_provider() if self._token_provider else None
        if token:
            headers["Authorization"] = f"Firebase {token}"
        return headers

    async def _get_client(self) -> httpx.AsyncClient:
        """Return the injected client or create a new one."""
        if self._http_client is not None:
            return self._http_client
        return httpx.AsyncClient(timeout=self._timeout)

    def _object_url(self, path: str) -> str:
        return f"{self._objects_url}/{quote(path, safe='')}"

    async def _send(self, path: str, method: str, url: str, **kwargs: Any) -> dict[str, Any]:
        client = await self._get_client()
        should_close = self._http_client is None
        try:
            response = await client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            raise UploadError(path, f"{type(exc).__name__}: {exc}") from exc
        finally:
            if should_close:
                await client.aclose()

        if response.status_code >= 400:
            try:
                message = response.json().get("error", {}).get("message", response.text)
            except (ValueError, AttributeError):
                message = response.text or response.reason_phrase
            logger.error("Storage request for %s failed: %d %s", path, response.status_code, message)
            raise UploadError(path, f"{response.status_code}: {message}")
        return response.json()

    async def upload(
        self, path: str, content: bytes, content_type: str = "application/octet-stream"
    ) -> AssetHandle:
        data = await self._send(
            path,
            "POST",
            self._objects_url,
            params={"name": path, "uploadType": "media"},
            content=content,
            headers=self._get_headers(content_type),
        )
        logger.info("Uploaded %s (%d bytes) to bucket %s", path, len(content), self._bucket)
        return AssetHandle(path=data.get("name", path), token=_first_token(data))

    async def resolve_url(self, handle: AssetHandle) -> str:
        """Build the download URL, fetching object metadata when the token is unknown."""
        token = handle.token
        if not token:
            metadata = await self._send(
                handle.path, "GET", self._object_url(handle.path), headers=self._get_headers()
            )
            token = _first_token(metadata)
        if not token:
            raise UploadError(handle.path, "object has no download token")
        return f"{self._object_url(handle.path)}?alt=media&token={token}"


def _first_token(metadata: dict[str, Any]) -> str | None:
    tokens = metadata.get("downloadTokens") or ""
    return tokens.split(",")[0] or None
