"""Request/response helpers shared by the views: error mapping and file intake."""

from fastapi import HTTPException, UploadFile, status

from medadmin.domain.entities import AssetFile
from medadmin.domain.exceptions import (
    AuthError,
    EntityNotFoundError,
    RemoteError,
    ValidationError,
)


def to_http_exception(exc: Exception) -> HTTPException:
    if isinstance(exc, ValidationError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    if isinstance(exc, AuthError):
        return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=exc.message)
    if isinstance(exc, EntityNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, RemoteError):
        return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc))
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


async def read_asset(file: UploadFile | None) -> AssetFile | None:
    """Turn an uploaded form file into a pending asset (``None`` when no file was sent)."""
    if file is None or not file.filename:
        return None
    return AssetFile(
        filename=file.filename,
        content=await file.read(),
        content_type=file.content_type or "application/octet-stream",
    )
