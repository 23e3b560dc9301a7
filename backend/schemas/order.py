from pydantic import Field
from typing import List, Optional

from schemas.base import CamelModel, SuccessResponse


# Line of a checkout request, as read from the cart
class CheckoutItem(CamelModel):
    id: Optional[str] = None
    dress_id: Optional[str] = None
    name: Optional[str] = None
    price: Optional[float] = None
    quantity: Optional[int] = None
    size: Optional[str] = None
    image: Optional[str] = None


# Input schema for checkout, sent after the payment gateway reports success
class CheckoutPayload(CamelModel):
    user_id: Optional[str] = None
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    items: Optional[List[CheckoutItem]] = None
    total: Optional[float] = None

    subtotal: Optional[float] = None
    tax: Optional[float] = None
    shipping: Optional[float] = None
    payment_id: Optional[str] = None
    payment_method: Optional[str] = None
    payment_status: Optional[str] = None

    idempotency_key: Optional[str] = Field(None, description="Repeat to get the same order back")
    clear_cart: bool = False


# Input schema for the lower-level order creation endpoint
class OrderCreatePayload(CamelModel):
    user_id: Optional[str] = None
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    items: List[CheckoutItem] = []
    total: Optional[float] = None
    estimated_delivery: Optional[str] = None


# Output schema for an individual order line item (snapshot)
class OrderItemOut(CamelModel):
    id: Optional[str] = None
    dress_id: Optional[str] = None
    name: Optional[str] = None
    price: Optional[float] = None
    quantity: Optional[int] = None
    size: Optional[str] = None
    image: Optional[str] = None


# Output schema representing the full order details
class OrderOut(CamelModel):
    id: str
    user_id: str
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    date: str
    status: str
    items: List[OrderItemOut]
    item_count: Optional[int] = None
    total: Optional[float] = None
    estimated_delivery: Optional[str] = None

    subtotal: Optional[float] = None
    tax: Optional[float] = None
    shipping: Optional[float] = None
    payment_id: Optional[str] = None
    payment_method: Optional[str] = None
    payment_status: Optional[str] = None
    idempotency_key: Optional[str] = None


class CheckoutResponse(SuccessResponse):
    order_id: str
    order: OrderOut


class OrderResponse(SuccessResponse):
    order: OrderOut


class OrdersResponse(SuccessResponse):
    orders: List[OrderOut]


# Schema for admin order updates; either field may be sent alone
class OrderUpdatePayload(CamelModel):
    status: Optional[str] = None
    estimated_delivery: Optional[str] = None
