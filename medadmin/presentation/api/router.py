"""Top-level router — the console views plus the versioned API."""

from fastapi import APIRouter

from medadmin.presentation.api.v1.router import router as v1_router
from medadmin.presentation.api.views.inventory import router as inventory_router
from medadmin.presentation.api.views.orders import router as orders_router
from medadmin.presentation.api.views.session import router as session_router
from medadmin.presentation.api.views.upload import router as upload_router

api_router = APIRouter(prefix="/api")
api_router.include_router(v1_router)

router = APIRouter()
router.include_router(session_router)
router.include_router(upload_router)
router.include_router(orders_router)
router.include_router(inventory_router)
router.include_router(api_router)
