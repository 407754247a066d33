"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from medadmin.config import Settings, get_settings
from medadmin.infrastructure.dependencies import Adapters, ConsoleState, build_adapters
from medadmin.infrastructure.logging.log_config import setup_logging
from medadmin.presentation.api.router import router as console_router

logger = logging.getLogger(__name__)


def _make_lifespan(settings: Settings, adapters: Adapters | None):
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Application lifespan — build the stores, subscribe the session gate, tear down."""
        setup_logging(settings)

        owned = adapters is None
        active_adapters = adapters or build_adapters(settings)
        await active_adapters.prepare()

        state = ConsoleState(settings=settings, adapters=active_adapters)
        state.gate.start(active_adapters.auth_provider)
        app.state.console = state
        logger.info("%s started (%s backend)", settings.app_title, settings.store_backend)

        yield

        # Shutdown
        state.inventory.unmount()
        state.orders.unmount()
        state.gate.stop()
        if owned:
            await active_adapters.aclose()

    return lifespan


def create_app(settings: Settings | None = None, adapters: Adapters | None = None) -> FastAPI:
    """Factory function that builds and configures the FastAPI application.

    ``adapters`` replaces the ones built from ``settings``; the caller then
    owns them and closes them itself.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_title,
        version=settings.app_version,
        lifespan=_make_lifespan(settings, adapters),
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(console_router)

    # Local backend serves its uploaded images itself
    if settings.is_local:
        app.mount(
            "/assets",
            StaticFiles(directory=settings.upload_dir, check_dir=False),
            name="assets",
        )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "medadmin.main:app",
        host="0.0.0.0",
        port=8020,
        reload=True,
    )
