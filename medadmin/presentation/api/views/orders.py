"""Orders view — all orders with an editable delivery status."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status

from medadmin.application.schemas import OrderResponse, OrdersResponse, StatusUpdate
from medadmin.application.services import RecordConsole, RefreshPolicy
from medadmin.domain.entities import Order
from medadmin.domain.exceptions import RemoteError, ValidationError
from medadmin.infrastructure.dependencies import get_orders_console
from medadmin.presentation.api.errors import to_http_exception

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/orders", tags=["Orders"])


def _table(console: RecordConsole[Order]) -> OrdersResponse:
    return OrdersResponse(
        search=console.search.term,
        total=len(console.cache),
        items=[OrderResponse.from_entity(o) for o in console.search],
        error=console.cache.error,
    )


@router.get("", response_model=OrdersResponse)
async def open_orders(
    search: str = Query("", description="Case-insensitive customer name filter"),
    console: RecordConsole[Order] = Depends(get_orders_console),
) -> OrdersResponse:
    """Open the orders view: load the collection and list it."""
    await console.mount()
    console.search.set_term(search)
    return _table(console)


@router.get("/search", response_model=OrdersResponse)
async def search_orders(
    q: str = Query("", description="Case-insensitive customer name filter"),
    console: RecordConsole[Order] = Depends(get_orders_console),
) -> OrdersResponse:
    if not console.cache.active:
        await console.mount()
    console.search.set_term(q)
    return _table(console)


@router.post("/{record_id}/status", response_model=OrderResponse)
async def update_delivery_status(
    record_id: str,
    data: StatusUpdate,
    console: RecordConsole[Order] = Depends(get_orders_console),
) -> OrderResponse:
    """Update the delivery status, then reload the orders so the table matches the store."""
    try:
        order = await console.coordinator.update_status(
            record_id, data.delivery_status, refresh=RefreshPolicy.FULL
        )
    except (ValidationError, RemoteError) as e:
        logger.error("Error updating delivery status: %s", e)
        raise to_http_exception(e)
    if order is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Order with id '{record_id}' not found after refresh",
        )
    return OrderResponse.from_entity(order)
