"""Pydantic DTOs (Data Transfer Objects) for the inventory views."""

from typing import Any

from pydantic import BaseModel, Field

from medadmin.domain.entities import Medicine, MedicineField


class MedicineResponse(BaseModel):
    """Schema returned to the client for one catalog item."""

    id: str
    medicine_name: str
    indications: str
    doses: str
    weight: str
    price: float | str
    price_display: str
    category: str
    image_url: str | None

    @classmethod
    def from_entity(cls, medicine: Medicine) -> "MedicineResponse":
        return cls(
            id=medicine.id,
            medicine_name=medicine.medicine_name,
            indications=medicine.indications,
            doses=medicine.doses,
            weight=medicine.weight,
            price=medicine.price,
            price_display=medicine.price_display,
            category=medicine.category,
            image_url=medicine.image_url,
        )


class InventoryResponse(BaseModel):
    """The inventory table: filtered rows plus the current search term."""

    search: str
    total: int
    items: list[MedicineResponse]
    error: str | None = None


class DraftUpdate(BaseModel):
    """Draft field changes keyed by wire name, e.g. ``{"fields": {"price": "4.50"}}``."""

    fields: dict[MedicineField, str | float] = Field(..., min_length=1)


class EditStateResponse(BaseModel):
    """Current state of the inventory edit session."""

    editing: bool
    record_id: str | None = None
    draft: dict[str, Any] = Field(default_factory=dict)
    pending_image: str | None = None


class UploadFormResponse(BaseModel):
    """Fields accepted by the upload form, keyed by form name."""

    fields: list[str]
    required: list[str]
    image_field: str = "image"
