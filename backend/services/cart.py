# backend/services/cart.py
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from errors import NotFound, ValidationError, require_fields
from storage.base import RecordStore


def _require_user(user_id) -> None:
    if not user_id:
        raise ValidationError("userId is required")


def _user_cart(carts: List[dict], user_id: str) -> Optional[dict]:
    return next((c for c in carts if c.get("userId") == user_id), None)


def add_item(store: RecordStore, user_id, dress_id, name, price, image, size) -> dict:
    """Add one unit of (dress_id, size) to the user's cart and return that line.

    A line with the same dress and size gains exactly one unit; its stored
    name and price are kept. Otherwise a new line with quantity 1 is appended.
    """
    require_fields(
        {"userId": user_id, "dressId": dress_id, "name": name, "price": price, "size": size},
        ("userId", "dressId", "name", "price", "size"),
    )
    try:
        price = float(price)
    except (TypeError, ValueError):
        raise ValidationError("Price must be a number")

    with store.update("carts") as carts:
        cart = _user_cart(carts, user_id)
        if cart is None:
            cart = {"userId": user_id, "items": []}
            carts.append(cart)

        item = next(
            (i for i in cart["items"] if i.get("dressId") == dress_id and i.get("size") == size),
            None,
        )
        if item:
            item["quantity"] = int(item.get("quantity") or 0) + 1
        else:
            item = {
                "id": f"cart-{uuid.uuid4().hex}",
                "dressId": dress_id,
                "name": name,
                "price": price,
                "image": image,
                "quantity": 1,
                "size": size,
                "addedAt": datetime.now(timezone.utc).isoformat(),
            }
            cart["items"].append(item)
    return item


def get_cart(store: RecordStore, user_id) -> List[dict]:
    _require_user(user_id)
    cart = store.find("carts", userId=user_id)
    return cart["items"] if cart else []


def remove_item(store: RecordStore, user_id, item_id) -> None:
    if not user_id or not item_id:
        raise ValidationError("userId and itemId are required")

    with store.update("carts") as carts:
        cart = _user_cart(carts, user_id)
        if cart is None:
            raise NotFound("Cart not found")
        # Removing an id that is not there is a no-op
        cart["items"] = [i for i in cart["items"] if i.get("id") != item_id]


def update_quantity(store: RecordStore, user_id, item_id, quantity) -> None:
    if not user_id or not item_id or quantity is None:
        raise ValidationError("userId, itemId, and quantity are required")
    try:
        quantity = int(quantity)
    except (TypeError, ValueError):
        raise ValidationError("Quantity must be a whole number")
    if quantity < 0:
        raise ValidationError("Quantity must be non-negative")

    with store.update("carts") as carts:
        cart = _user_cart(carts, user_id)
        if cart is None:
            raise NotFound("Cart not found")

        item = next((i for i in cart["items"] if i.get("id") == item_id), None)
        if item is None:
            raise NotFound("Item not found in cart")

        if quantity == 0:
            cart["items"].remove(item)
        else:
            item["quantity"] = quantity


def clear_cart(store: RecordStore, user_id) -> None:
    _require_user(user_id)

    with store.update("carts") as carts:
        # The cart record itself stays, only its items go
        if not empty_cart_in(carts, user_id):
            raise NotFound("Cart not found")


def empty_cart_in(carts: List[dict], user_id) -> bool:
    """Empty the user's cart inside an open ``update`` block; False if there is none."""
    cart = _user_cart(carts, user_id)
    if cart is None:
        return False
    cart["items"] = []
    return True
