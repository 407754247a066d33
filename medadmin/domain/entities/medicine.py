"""Domain entity — a catalog item of the medicine inventory."""

from dataclasses import dataclass
from enum import Enum

from .record import Record, format_amount


class MedicineField(str, Enum):
    """Fields of a catalog item, valued by their wire keys."""

    MEDICINE_NAME = "medicineName"
    INDICATIONS = "indications"
    DOSES = "doses"
    WEIGHT = "weight"
    PRICE = "price"
    CATEGORY = "category"
    IMAGE_URL = "imageUrl"


@dataclass(frozen=True)
class Medicine(Record):
    """A medicine in the ``medicines`` collection.

    ``price`` is kept exactly as stored (number or text); use
    :attr:`price_display` for rendering.
    """

    medicine_name: str = ""
    indications: str = ""
    doses: str = ""
    weight: str = ""
    price: float | str = ""
    category: str = ""
    image_url: str | None = None

    field_type = MedicineField
    editable_fields = frozenset({
        MedicineField.MEDICINE_NAME,
        MedicineField.INDICATIONS,
        MedicineField.DOSES,
        MedicineField.WEIGHT,
        MedicineField.PRICE,
        MedicineField.CATEGORY,
    })
    numeric_fields = frozenset({MedicineField.PRICE})
    required_fields = frozenset({MedicineField.MEDICINE_NAME})
    asset_field = MedicineField.IMAGE_URL

    @property
    def price_display(self) -> str:
        return format_amount(self.price)
