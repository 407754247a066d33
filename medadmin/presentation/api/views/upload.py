"""Upload view — the form that adds a medicine to the catalog."""

import logging

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from medadmin.application.schemas import MedicineResponse, UploadFormResponse
from medadmin.application.services import RecordConsole
from medadmin.domain.entities import Medicine, MedicineField
from medadmin.domain.exceptions import RemoteError, ValidationError
from medadmin.infrastructure.dependencies import get_inventory_console
from medadmin.presentation.api.errors import read_asset, to_http_exception

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Upload"])


@router.get("/uploadmanual", response_model=UploadFormResponse)
async def upload_form(
    console: RecordConsole[Medicine] = Depends(get_inventory_console),
) -> UploadFormResponse:
    """Describe the upload form; reachable only with a session."""
    form_fields = [f for f in MedicineField if f in Medicine.editable_fields]
    return UploadFormResponse(
        fields=[Medicine.attr_name(f) for f in form_fields],
        required=[Medicine.attr_name(f) for f in form_fields if f in Medicine.required_fields],
    )


@router.post("/uploadmanual", response_model=MedicineResponse, status_code=status.HTTP_201_CREATED)
async def upload_medicine(
    medicine_name: str = Form(...),
    indications: str = Form(...),
    doses: str = Form(...),
    weight: str = Form(...),
    price: str = Form(...),
    category: str = Form(""),
    image: UploadFile | None = File(None),
    console: RecordConsole[Medicine] = Depends(get_inventory_console),
) -> MedicineResponse:
    """Create a medicine; the image (if any) is uploaded before the document is written."""
    changes = {
        MedicineField.MEDICINE_NAME: medicine_name,
        MedicineField.INDICATIONS: indications,
        MedicineField.DOSES: doses,
        MedicineField.WEIGHT: weight,
        MedicineField.PRICE: price,
        MedicineField.CATEGORY: category,
    }
    try:
        created = await console.coordinator.create(changes, await read_asset(image))
    except (ValidationError, RemoteError) as e:
        logger.error("Error uploading data: %s", e)
        raise to_http_exception(e)
    return MedicineResponse.from_entity(created)
