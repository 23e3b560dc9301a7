# backend/services/orders.py
import logging
import re
from datetime import date, datetime, timedelta, timezone
from typing import List, Optional, Tuple

from config import settings
from errors import NotFound, ValidationError, require_fields
from services.cart import empty_cart_in
from storage.base import RecordStore

logger = logging.getLogger(__name__)

# Admins may move an order between any of these, in any direction
ORDER_STATUSES = ("pending", "processing", "shipped", "delivered")
ORDER_ITEM_FIELDS = ("id", "dressId", "name", "price", "quantity", "size", "image")
PAYMENT_FIELDS = ("paymentId", "paymentMethod", "paymentStatus", "subtotal", "tax", "shipping")

_ORDER_NUMBER = re.compile(r"^ORD-(\d+)$")


def _today() -> date:
    return datetime.now(timezone.utc).date()


def _max_order_number(orders: List[dict]) -> int:
    numbers = [0]
    for o in orders:
        match = _ORDER_NUMBER.match(str(o.get("id", "")))
        if match:
            numbers.append(int(match.group(1)))
    return max(numbers)


def _next_order_id(store: RecordStore, orders: List[dict]) -> str:
    number = store.next_sequence("orders", floor=_max_order_number(orders))
    return f"ORD-{number:03d}"


def _snapshot_items(items: List[dict]) -> List[dict]:
    # Copies by value, later cart or catalog edits never reach the order
    return [{field: item.get(field) for field in ORDER_ITEM_FIELDS} for item in items]


def _to_total(value) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValidationError("Total must be a number")


def _check_date(value: str) -> str:
    try:
        date.fromisoformat(str(value))
    except ValueError:
        raise ValidationError("estimatedDelivery must be a date (YYYY-MM-DD)")
    return str(value)


def checkout(
    store: RecordStore,
    user_id,
    customer_name,
    customer_email,
    items,
    total,
    *,
    payment: Optional[dict] = None,
    idempotency_key: Optional[str] = None,
    clear_cart: bool = False,
) -> dict:
    """Turn a paid cart snapshot into a pending order.

    The caller reports the payment outcome in ``payment``; it is stored, not
    verified. With ``clear_cart`` the user's cart is emptied in the same write
    as the order; otherwise clearing it stays the caller's follow-up step.
    A repeated ``idempotency_key`` for the same user returns the order it
    created the first time.
    """
    require_fields(
        {"userId": user_id, "customerName": customer_name, "customerEmail": customer_email,
         "items": items, "total": total},
        ("userId", "customerName", "customerEmail", "items", "total"),
    )
    if not isinstance(items, list) or not items:
        raise ValidationError("Cart is empty")
    total = _to_total(total)

    payment = {k: v for k, v in (payment or {}).items() if k in PAYMENT_FIELDS and v is not None}
    if payment.get("paymentStatus") not in (None, "paid"):
        raise ValidationError("Payment has not been completed")

    collections = ("orders", "carts") if clear_cart else ("orders",)
    with store.update(*collections) as loaded:
        orders, carts = loaded if clear_cart else (loaded, None)
        if idempotency_key:
            existing = next(
                (o for o in orders
                 if o.get("userId") == user_id and o.get("idempotencyKey") == idempotency_key),
                None,
            )
            if existing:
                logger.info("Checkout replay for %s with key %s, returning %s", user_id, idempotency_key, existing["id"])
                return existing

        today = _today()
        order = {
            "id": _next_order_id(store, orders),
            "userId": user_id,
            "customerName": customer_name,
            "customerEmail": customer_email,
            "date": today.isoformat(),
            "status": "pending",
            "items": _snapshot_items(items),
            "itemCount": len(items),
            "total": total,
            "estimatedDelivery": (today + timedelta(days=settings.DELIVERY_DAYS)).isoformat(),
            **payment,
        }
        if idempotency_key:
            order["idempotencyKey"] = idempotency_key
        orders.append(order)

        if clear_cart:
            empty_cart_in(carts, user_id)
    return order


def create_order(store: RecordStore, user_id, customer_name, customer_email, items, total,
                 estimated_delivery=None) -> dict:
    """Record an order as given: no cart checks and no itemCount."""
    if not user_id:
        raise ValidationError("userId is required")

    with store.update("orders") as orders:
        order = {
            "id": _next_order_id(store, orders),
            "userId": user_id,
            "customerName": customer_name,
            "customerEmail": customer_email,
            "date": _today().isoformat(),
            "status": "pending",
            "items": _snapshot_items(items or []),
            "total": _to_total(total) if total is not None else None,
            "estimatedDelivery": _check_date(estimated_delivery) if estimated_delivery else None,
        }
        orders.append(order)
    return order


def list_user_orders(store: RecordStore, user_id) -> List[dict]:
    if not user_id:
        raise ValidationError("userId is required")
    return [o for o in store.load("orders") if o.get("userId") == user_id]


def list_all_orders(store: RecordStore) -> List[dict]:
    return store.load("orders")


def update_order(store: RecordStore, order_id, status=None, estimated_delivery=None) -> dict:
    order, _ = change_order(store, order_id, status, estimated_delivery)
    return order


def change_order(store: RecordStore, order_id, status=None,
                 estimated_delivery=None) -> Tuple[dict, Optional[str]]:
    """Apply an admin update and return the order with its status from before the change."""
    if status and status not in ORDER_STATUSES:
        raise ValidationError(f"Status must be one of: {', '.join(ORDER_STATUSES)}")
    if estimated_delivery:
        estimated_delivery = _check_date(estimated_delivery)

    with store.update("orders") as orders:
        order = next((o for o in orders if o.get("id") == order_id), None)
        if not order:
            raise NotFound("Order not found")
        previous = order.get("status")
        if status:
            order["status"] = status
        if estimated_delivery:
            order["estimatedDelivery"] = estimated_delivery
    return order, previous
