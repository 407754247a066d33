"""Pydantic DTOs for the orders view."""

from pydantic import BaseModel, Field

from medadmin.domain.entities import Order


class OrderItemResponse(BaseModel):
    medicine_name: str
    price: float | str
    price_display: str


class OrderResponse(BaseModel):
    """Schema returned to the client for one order."""

    id: str
    order_id: str
    name: str
    address: str
    city: str
    postal_code: str
    country: str
    phone_number: str
    email: str
    payment_method: str
    total_amount: float | str
    total_display: str
    delivery_status: str
    items: list[OrderItemResponse]

    @classmethod
    def from_entity(cls, order: Order) -> "OrderResponse":
        return cls(
            id=order.id,
            order_id=str(order.order_id),
            name=order.name,
            address=order.address,
            city=order.city,
            postal_code=str(order.postal_code),
            country=order.country,
            phone_number=str(order.phone_number),
            email=order.email,
            payment_method=order.payment_method,
            total_amount=order.total_amount,
            total_display=order.total_display,
            delivery_status=order.delivery_status,
            items=[
                OrderItemResponse(
                    medicine_name=item.medicine_name,
                    price=item.price,
                    price_display=item.price_display,
                )
                for item in order.items
            ],
        )


class OrdersResponse(BaseModel):
    search: str
    total: int
    items: list[OrderResponse]
    error: str | None = None


class StatusUpdate(BaseModel):
    """Schema for changing an order's delivery status."""

    delivery_status: str = Field(..., min_length=1, max_length=100, examples=["Shipped"])
