from .asset import AssetFile, AssetHandle
from .record import Record, coerce_number, format_amount
from .medicine import Medicine, MedicineField
from .order import Order, OrderField, OrderItem
from .session import SessionSnapshot

__all__ = [
    "AssetFile",
    "AssetHandle",
    "Record",
    "coerce_number",
    "format_amount",
    "Medicine",
    "MedicineField",
    "Order",
    "OrderField",
    "OrderItem",
    "SessionSnapshot",
]
