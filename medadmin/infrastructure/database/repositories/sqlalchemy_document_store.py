"""Concrete DocumentStore backed by SQLAlchemy — the local development backend."""

import logging
import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from medadmin.application.interfaces import DocumentStore
from medadmin.domain.exceptions import StoreError
from medadmin.infrastructure.database.models import DocumentModel

logger = logging.getLogger(__name__)


class SQLAlchemyDocumentStore(DocumentStore):
    """Implements the DocumentStore port with one JSON row per document.

    Each call runs in its own session and commits before returning, so a
    write is durable once the call succeeds. Documents list in creation order.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    @asynccontextmanager
    async def _session(self, operation: str) -> AsyncIterator[AsyncSession]:
        async with self._session_factory() as session:
            try:
                yield session
                await session.commit()
            except SQLAlchemyError as exc:
                await session.rollback()
                raise StoreError(operation, 500, str(exc)) from exc

    async def fetch_all(self, collection: str) -> list[tuple[str, dict[str, Any]]]:
        async with self._session("fetch_all") as session:
            stmt = (
                select(DocumentModel)
                .where(DocumentModel.collection == collection)
                .order_by(DocumentModel.position)
            )
            result = await session.execute(stmt)
            return [(row.id, dict(row.data)) for row in result.scalars().all()]

    def new_identifier(self, collection: str) -> str:
        return uuid.uuid4().hex

    async def create(
        self,
        collection: str,
        fields: dict[str, Any],
        *,
        identifier: str | None = None,
    ) -> str:
        identifier = identifier or self.new_identifier(collection)
        async with self._session("create") as session:
            if await session.get(DocumentModel, (collection, identifier)) is not None:
                raise StoreError("create", 409, f"Document {collection}/{identifier} already exists")
            last = await session.scalar(
                select(func.coalesce(func.max(DocumentModel.position), 0)).where(
                    DocumentModel.collection == collection
                )
            )
            session.add(
                DocumentModel(
                    collection=collection,
                    id=identifier,
                    data=dict(fields),
                    position=(last or 0) + 1,
                )
            )
        logger.debug("Created %s/%s", collection, identifier)
        return identifier

    async def update(
        self, collection: str, identifier: str, fields: dict[str, Any]
    ) -> None:
        async with self._session("update") as session:
            model = await session.get(DocumentModel, (collection, identifier))
            if model is None:
                raise StoreError("update", 404, f"No document to update: {collection}/{identifier}")
            # Reassign so the JSON column registers the change
            model.data = {**model.data, **fields}

    async def delete(self, collection: str, identifier: str) -> None:
        async with self._session("delete") as session:
            model = await session.get(DocumentModel, (collection, identifier))
            if model is not None:
                await session.delete(model)
