from .medicine import (
    DraftUpdate,
    EditStateResponse,
    InventoryResponse,
    MedicineResponse,
    UploadFormResponse,
)
from .order import OrderItemResponse, OrderResponse, OrdersResponse, StatusUpdate
from .session import Credentials, SessionResponse

__all__ = [
    "DraftUpdate",
    "EditStateResponse",
    "InventoryResponse",
    "MedicineResponse",
    "UploadFormResponse",
    "OrderItemResponse",
    "OrderResponse",
    "OrdersResponse",
    "StatusUpdate",
    "Credentials",
    "SessionResponse",
]
