"""Firestore REST client — implements the DocumentStore interface.

Talks to the Firestore v1 REST API
(``{base}/projects/{project}/databases/(default)/documents``) using httpx.
Requests carry the signed-in user's ID token, so the project's security
rules stay the authority for permissions.
"""

import logging
import secrets
import string
from collections.abc import Callable
from typing import Any

import httpx

from medadmin.application.interfaces import DocumentStore
from medadmin.domain.exceptions import StoreError
from medadmin.infrastructure.firebase.firestore_values import (
    decode_fields,
    document_id,
    encode_fields,
)

logger = logging.getLogger(__name__)

_AUTO_ID_ALPHABET = string.ascii_letters + string.digits
_AUTO_ID_LENGTH = 20
_PAGE_SIZE = 300

TokenProvider = Callable[[], str | None]


class FirestoreDocumentStore(DocumentStore):
    """Infrastructure adapter — connects to Cloud Firestore over REST.

    No retries and no caching: every failure is raised as ``StoreError``.
    """

    def __init__(
        self,
        project_id: str,
        *,
        api_key: str = "",
        base_url: str = "https://firestore.googleapis.com/v1",
        token_provider: TokenProvider | None = None,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ):
        self._documents_url = (
            f"{base_url.rstrip('/')}/projects/{project_id}/databases/(default)/documents"
        )
        self._api_key = api_key
        self._token_provider = token_provider
        self._http_client = http_client
        self._timeout = timeout

    def _get_headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        token = self._token_provider() if self._token_provider else None
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def _params(self, **extra: Any) -> dict[str, Any]:
        params: dict[str, Any] = {k: v for k, v in extra.items() if v is not None}
        if self._api_key:
            params["key"] = self._api_key
        return params

    async def _get_client(self) -> httpx.AsyncClient:
        """Return the injected client or create a new one."""
        if self._http_client is not None:
            return self._http_client
        return httpx.AsyncClient(timeout=self._timeout)

    async def _request(
        self,
        operation: str,
        method: str,
        url: str,
        *,
        params: Any = None,
        json: Any = None,
    ) -> dict[str, Any]:
        client = await self._get_client()
        should_close = self._http_client is None

        try:
            response = await client.request(
                method, url, params=params, json=json, headers=self._get_headers()
            )
        except httpx.HTTPError as exc:
            raise StoreError(operation, 0, f"{type(exc).__name__}: {exc}") from exc
        finally:
            if should_close:
                await client.aclose()

        if response.status_code >= 400:
            self._raise_store_error(operation, response)
        if not response.content:
            return {}
        return response.json()

    @staticmethod
    def _raise_store_error(operation: str, response: httpx.Response) -> None:
        """Parse a Firestore error body and raise StoreError."""
        try:
            error = response.json().get("error", {})
            message = error.get("message") or error.get("status") or response.text
        except (ValueError, AttributeError):
            message = response.text or response.reason_phrase
        logger.error("Firestore %s failed: %d %s", operation, response.status_code, message)
        raise StoreError(operation, response.status_code, message)

    # ── DocumentStore ───────────────────────────────────────────────

    async def fetch_all(self, collection: str) -> list[tuple[str, dict[str, Any]]]:
        """List every document, following page tokens until the collection is exhausted."""
        documents: list[tuple[str, dict[str, Any]]] = []
        page_token: str | None = None
        url = f"{self._documents_url}/{collection}"

        while True:
            data = await self._request(
                "fetch_all",
                "GET",
                url,
                params=self._params(pageSize=_PAGE_SIZE, pageToken=page_token),
            )
            for doc in data.get("documents", []):
                try:
                    documents.append(
                        (document_id(doc["name"]), decode_fields(doc.get("fields", {})))
                    )
                except (KeyError, TypeError, ValueError) as exc:
                    raise StoreError("fetch_all", 0, f"Undecodable document in {collection}: {exc}") from exc
            page_token = data.get("nextPageToken")
            if not page_token:
                break

        logger.debug("Fetched %d documents from %s", len(documents), collection)
        return documents

    def new_identifier(self, collection: str) -> str:
        return "".join(secrets.choice(_AUTO_ID_ALPHABET) for _ in range(_AUTO_ID_LENGTH))

    async def create(
        self,
        collection: str,
        fields: dict[str, Any],
        *,
        identifier: str | None = None,
    ) -> str:
        data = await self._request(
            "create",
            "POST",
            f"{self._documents_url}/{collection}",
            params=self._params(documentId=identifier),
            json={"fields": encode_fields(fields)},
        )
        created = document_id(data["name"]) if "name" in data else identifier
        if not created:
            raise StoreError("create", 0, "Firestore returned no document name")
        return created

    async def update(
        self, collection: str, identifier: str, fields: dict[str, Any]
    ) -> None:
        """PATCH with an update mask so untouched fields keep their values."""
        params: list[tuple[str, str]] = [
            ("updateMask.fieldPaths", _field_path(key)) for key in fields
        ]
        params.append(("currentDocument.exists", "true"))
        params.extend(self._params().items())
        await self._request(
            "update",
            "PATCH",
            f"{self._documents_url}/{collection}/{identifier}",
            params=params,
            json={"fields": encode_fields(fields)},
        )

    async def delete(self, collection: str, identifier: str) -> None:
        await self._request(
            "delete",
            "DELETE",
            f"{self._documents_url}/{collection}/{identifier}",
            params=self._params(),
        )


def _field_path(key: str) -> str:
    """Quote a field name for an update mask when it is not a simple identifier."""
    if key and (key[0].isalpha() or key[0] == "_") and all(c.isalnum() or c == "_" for c in key):
        return key
    escaped = key.replace("\\", "\\\\").replace("`", "\\`")
    return f"`{escaped}`"
