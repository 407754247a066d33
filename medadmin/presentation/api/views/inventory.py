"""Inventory view — medicine table with search, row editing and deletion."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, UploadFile, status

from medadmin.application.schemas import (
    DraftUpdate,
    EditStateResponse,
    InventoryResponse,
    MedicineResponse,
)
from medadmin.application.services import Editing, RecordConsole
from medadmin.domain.entities import Medicine
from medadmin.domain.exceptions import EntityNotFoundError, RemoteError, ValidationError
from medadmin.infrastructure.dependencies import get_inventory_console
from medadmin.presentation.api.errors import read_asset, to_http_exception

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/inventory", tags=["Inventory"])


# ── Helpers ──────────────────────────────────────────────────────────

def _table(console: RecordConsole[Medicine]) -> InventoryResponse:
    rows = console.search.records()
    return InventoryResponse(
        search=console.search.term,
        total=len(console.cache),
        items=[MedicineResponse.from_entity(m) for m in rows],
        error=console.cache.error,
    )


def _edit_state(console: RecordConsole[Medicine]) -> EditStateResponse:
    state = console.edit_session.state
    if not isinstance(state, Editing):
        return EditStateResponse(editing=False)
    return EditStateResponse(
        editing=True,
        record_id=state.identifier,
        draft={f.value: v for f, v in state.draft_fields.items()},
        pending_image=state.draft_asset.filename if state.draft_asset else None,
    )


def _not_editing() -> HTTPException:
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail="No record is being edited")


# ── Table ────────────────────────────────────────────────────────────

@router.get("", response_model=InventoryResponse)
async def open_inventory(
    search: str = Query("", description="Case-insensitive medicine name filter"),
    console: RecordConsole[Medicine] = Depends(get_inventory_console),
) -> InventoryResponse:
    """Open the inventory view: load the collection and list it."""
    await console.mount()
    console.search.set_term(search)
    return _table(console)


@router.get("/search", response_model=InventoryResponse)
async def search_inventory(
    q: str = Query("", description="Case-insensitive medicine name filter"),
    console: RecordConsole[Medicine] = Depends(get_inventory_console),
) -> InventoryResponse:
    """Change the search term without reloading."""
    if not console.cache.active:
        await console.mount()
    console.search.set_term(q)
    return _table(console)


# ── Edit session ─────────────────────────────────────────────────────

@router.get("/edit", response_model=EditStateResponse)
async def get_edit_state(
    console: RecordConsole[Medicine] = Depends(get_inventory_console),
) -> EditStateResponse:
    return _edit_state(console)


@router.patch("/edit", response_model=EditStateResponse)
async def set_draft_fields(
    data: DraftUpdate,
    console: RecordConsole[Medicine] = Depends(get_inventory_console),
) -> EditStateResponse:
    """Change fields of the draft; nothing is written until save."""
    if not console.edit_session.is_editing:
        raise _not_editing()
    try:
        for field_name, value in data.fields.items():
            console.edit_session.set_draft_field(field_name, value)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    return _edit_state(console)


@router.put("/edit/image", response_model=EditStateResponse)
async def select_image(
    image: UploadFile,
    console: RecordConsole[Medicine] = Depends(get_inventory_console),
) -> EditStateResponse:
    """Select a replacement image; it is uploaded on save."""
    if not console.edit_session.is_editing:
        raise _not_editing()
    asset = await read_asset(image)
    if asset is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No image provided")
    console.edit_session.select_asset(asset)
    return _edit_state(console)


@router.post("/edit/save", response_model=MedicineResponse)
async def save_edit(
    console: RecordConsole[Medicine] = Depends(get_inventory_console),
) -> MedicineResponse:
    """Save the draft. On failure the draft is kept so it can be corrected."""
    if not console.edit_session.is_editing:
        raise _not_editing()
    try:
        updated = await console.edit_session.save()
    except (ValidationError, RemoteError, EntityNotFoundError) as e:
        logger.error("Error updating product: %s", e)
        raise to_http_exception(e)
    if updated is None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Inventory view was closed")
    return MedicineResponse.from_entity(updated)


@router.post("/edit/cancel", response_model=EditStateResponse)
async def cancel_edit(
    console: RecordConsole[Medicine] = Depends(get_inventory_console),
) -> EditStateResponse:
    console.edit_session.cancel()
    return _edit_state(console)


@router.post("/{record_id}/edit", response_model=EditStateResponse)
async def begin_edit(
    record_id: str,
    console: RecordConsole[Medicine] = Depends(get_inventory_console),
) -> EditStateResponse:
    """Start editing one row; any other row's draft is discarded."""
    try:
        console.edit_session.begin_edit(record_id)
    except EntityNotFoundError as e:
        raise to_http_exception(e)
    return _edit_state(console)


# ── Delete ───────────────────────────────────────────────────────────

@router.delete("/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_medicine(
    record_id: str,
    console: RecordConsole[Medicine] = Depends(get_inventory_console),
) -> None:
    """Delete remotely; the row disappears only once the store confirms."""
    try:
        await console.coordinator.delete(record_id)
    except RemoteError as e:
        logger.error("Error deleting product: %s", e)
        raise to_http_exception(e)
