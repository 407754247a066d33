"""Domain entity — a customer order and its fixed line items."""

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from .record import Record, format_amount


class OrderField(str, Enum):
    """Fields of an order, valued by their wire keys."""

    ORDER_ID = "orderId"
    NAME = "name"
    ADDRESS = "address"
    CITY = "city"
    POSTAL_CODE = "postalCode"
    COUNTRY = "country"
    PHONE_NUMBER = "phoneNumber"
    EMAIL = "email"
    PAYMENT_METHOD = "paymentMethod"
    TOTAL_AMOUNT = "totalAmount"
    DELIVERY_STATUS = "deliveryStatus"
    ITEMS = "items"


@dataclass(frozen=True)
class OrderItem:
    """One line of an order — fixed when the order is placed."""

    medicine_name: str
    price: float | str

    @classmethod
    def from_document(cls, data: Mapping[str, Any]) -> "OrderItem":
        return cls(
            medicine_name=str(data.get("medicineName", "")),
            price=data.get("price", ""),
        )

    def to_document(self) -> dict[str, Any]:
        return {"medicineName": self.medicine_name, "price": self.price}

    @property
    def price_display(self) -> str:
        return format_amount(self.price)


@dataclass(frozen=True)
class Order(Record):
    """An order in the ``orders`` collection; only the delivery status is mutable."""

    order_id: str = ""
    name: str = ""
    address: str = ""
    city: str = ""
    postal_code: str = ""
    country: str = ""
    phone_number: str = ""
    email: str = ""
    payment_method: str = ""
    total_amount: float | str = ""
    delivery_status: str = ""
    items: tuple[OrderItem, ...] = ()

    field_type = OrderField
    editable_fields = frozenset({OrderField.DELIVERY_STATUS})
    required_fields = frozenset({OrderField.DELIVERY_STATUS})
    status_field = OrderField.DELIVERY_STATUS

    @property
    def total_display(self) -> str:
        return format_amount(self.total_amount)

    @classmethod
    def encode_value(cls, field: Enum, value: Any) -> Any:
        if field is OrderField.ITEMS:
            return [item.to_document() for item in value]
        return value

    @classmethod
    def decode_value(cls, field: Enum, raw: Any) -> Any:
        if field is OrderField.ITEMS:
            return tuple(
                OrderItem.from_document(item)
                for item in (raw or [])
                if isinstance(item, Mapping)
            )
        return raw
