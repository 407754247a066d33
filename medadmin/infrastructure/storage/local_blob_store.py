"""Local filesystem blob store — the local development stand-in for Firebase Storage.

Storage layout:
    <upload_dir>/<collection>/<identifier>      — one blob per record
Blobs are served by the app under ``asset_base_url``.
"""

import logging
import mimetypes
import re
from pathlib import Path

from medadmin.application.interfaces import BlobStore
from medadmin.domain.entities import AssetHandle
from medadmin.domain.exceptions import UploadError

logger = logging.getLogger(__name__)


def _sanitise(name: str, max_len: int = 80) -> str:
    """Replace non-word characters with underscores and truncate."""
    return re.sub(r"[^\w\-.]", "_", name)[:max_len].strip("_.") or "unnamed"


class LocalBlobStore(BlobStore):
    """Infrastructure adapter for local blob storage."""

    def __init__(self, upload_dir: str, asset_base_url: str):
        self._upload_dir = Path(upload_dir)
        self._upload_dir.mkdir(parents=True, exist_ok=True)
        self._asset_base_url = asset_base_url.rstrip("/")

    @property
    def root(self) -> Path:
        return self._upload_dir

    def _safe_path(self, path: str) -> str:
        parts = [_sanitise(p) for p in path.split("/") if p and p not in (".", "..")]
        if not parts:
            raise UploadError(path, "empty blob path")
        return "/".join(parts)

    async def upload(
        self, path: str, content: bytes, content_type: str = "application/octet-stream"
    ) -> AssetHandle:
        relative = self._safe_path(path)
        dest_path = self._upload_dir / relative
        try:
            dest_path.parent.mkdir(parents=True, exist_ok=True)
            dest_path.write_bytes(content)
        except OSError as exc:
            raise UploadError(path, str(exc)) from exc

        logger.info(
            "Stored blob: %s (%d bytes, %s)",
            dest_path,
            len(content),
            content_type or mimetypes.guess_type(relative)[0] or "application/octet-stream",
        )
        return AssetHandle(path=relative)

    async def resolve_url(self, handle: AssetHandle) -> str:
        if not (self._upload_dir / handle.path).exists():
            raise UploadError(handle.path, "blob was not stored")
        return f"{self._asset_base_url}/{handle.path}"

