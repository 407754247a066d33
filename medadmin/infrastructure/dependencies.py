"""Dependency wiring — builds the adapters and the sync core, and exposes them to FastAPI."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

import httpx
from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncEngine

from medadmin.application.interfaces import AuthProvider, BlobStore, DocumentStore
from medadmin.application.services import RecordConsole, SessionGate
from medadmin.config import Settings
from medadmin.domain.entities import Medicine, MedicineField, Order, OrderField
from medadmin.infrastructure.auth.firebase_auth_provider import FirebaseAuthProvider
from medadmin.infrastructure.auth.local_auth_provider import LocalAuthProvider
from medadmin.infrastructure.database import Base, create_engine_and_factory
from medadmin.infrastructure.database.repositories import SQLAlchemyDocumentStore
from medadmin.infrastructure.firebase import FirebaseBlobStore, FirestoreDocumentStore
from medadmin.infrastructure.storage.local_blob_store import LocalBlobStore

logger = logging.getLogger(__name__)


@dataclass
class Adapters:
    """The external collaborators the sync core talks to."""

    document_store: DocumentStore
    blob_store: BlobStore
    auth_provider: AuthProvider
    http_client: httpx.AsyncClient | None = None
    engine: AsyncEngine | None = None
    asset_dir: Path | None = None

    async def prepare(self) -> None:
        """Create the local tables when running on the local backend."""
        if self.engine is not None:
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)

    async def aclose(self) -> None:
        if self.http_client is not None:
            await self.http_client.aclose()
        if self.engine is not None:
            await self.engine.dispose()


@dataclass
class ConsoleState:
    """Process-wide state of the console, stored on ``app.state.console``."""

    settings: Settings
    adapters: Adapters
    gate: SessionGate = field(default_factory=SessionGate)
    inventory: RecordConsole[Medicine] = field(init=False)
    orders: RecordConsole[Order] = field(init=False)

    def __post_init__(self) -> None:
        self.inventory = RecordConsole(
            self.settings.medicines_collection,
            Medicine,
            MedicineField.MEDICINE_NAME,
            self.adapters.document_store,
            self.adapters.blob_store,
        )
        self.orders = RecordConsole(
            self.settings.orders_collection,
            Order,
            OrderField.NAME,
            self.adapters.document_store,
        )


def build_adapters(settings: Settings) -> Adapters:
    """Build the store and auth adapters selected by ``settings.store_backend``."""
    if settings.is_local:
        if settings.database_url.startswith("sqlite:///"):
            Path(settings.database_url.removeprefix("sqlite:///")).parent.mkdir(
                parents=True, exist_ok=True
            )
        engine, session_factory = create_engine_and_factory(
            settings.database_url, echo=False
        )
        blob_store = LocalBlobStore(settings.upload_dir, settings.asset_base_url)
        logger.info("Using local backend (database=%s)", settings.database_url)
        return Adapters(
            document_store=SQLAlchemyDocumentStore(session_factory),
            blob_store=blob_store,
            auth_provider=LocalAuthProvider(
                {settings.local_admin_email: settings.local_admin_password}
            ),
            engine=engine,
            asset_dir=blob_store.root,
        )

    if not (settings.firebase_api_key and settings.firebase_project_id):
        raise RuntimeError(
            "FIREBASE_API_KEY and FIREBASE_PROJECT_ID must be set for the firebase backend"
        )
    http_client = httpx.AsyncClient(timeout=settings.http_timeout)
    auth = FirebaseAuthProvider(
        settings.firebase_api_key,
        base_url=settings.firebase_auth_base_url,
        http_client=http_client,
    )
    logger.info("Using Firebase backend (project=%s)", settings.firebase_project_id)
    return Adapters(
        document_store=FirestoreDocumentStore(
            settings.firebase_project_id,
            api_key=settings.firebase_api_key,
            base_url=settings.firestore_base_url,
            token_provider=lambda: auth.id_token,
            http_client=http_client,
        ),
        blob_store=FirebaseBlobStore(
            settings.firebase_storage_bucket or f"{settings.firebase_project_id}.appspot.com",
            base_url=settings.firebase_storage_base_url,
            token_provider=lambda: auth.id_token,
            http_client=http_client,
        ),
        auth_provider=auth,
        http_client=http_client,
    )


# ── FastAPI dependencies ────────────────────────────────────────────

def get_console_state(request: Request) -> ConsoleState:
    return request.app.state.console


def get_session_gate(state: ConsoleState = Depends(get_console_state)) -> SessionGate:
    return state.gate


def get_auth_provider(state: ConsoleState = Depends(get_console_state)) -> AuthProvider:
    return state.adapters.auth_provider


def require_session(gate: SessionGate = Depends(get_session_gate)) -> SessionGate:
    """Redirect to the login view unless a session is active."""
    if not gate.is_authenticated:
        raise HTTPException(
            status_code=status.HTTP_303_SEE_OTHER,
            detail="Sign in required",
            headers={"Location": "/login"},
        )
    return gate


def get_inventory_console(
    state: ConsoleState = Depends(get_console_state),
    _: SessionGate = Depends(require_session),
) -> RecordConsole[Medicine]:
    return state.inventory


def get_orders_console(
    state: ConsoleState = Depends(get_console_state),
    _: SessionGate = Depends(require_session),
) -> RecordConsole[Order]:
    return state.orders
