# backend/services/products.py
import re
from typing import List, Optional

from errors import NotFound, ValidationError, require_fields
from storage.base import RecordStore

CATEGORIES = ("men", "women", "children")
REQUIRED_FIELDS = ("name", "category", "price", "description", "color", "size", "image", "stock")

_ID_DIGITS = re.compile(r"\d+")


def _to_price(value) -> float:
    try:
        price = float(value)
    except (TypeError, ValueError):
        raise ValidationError("Price must be a number")
    if price < 0:
        raise ValidationError("Price must be >= 0")
    return price


def _to_stock(value) -> int:
    try:
        # Accepts "12" and 12.0 as well as 12
        stock = int(float(value))
    except (TypeError, ValueError):
        raise ValidationError("Stock must be a whole number")
    if stock < 0:
        raise ValidationError("Stock must be >= 0")
    return stock


def _to_sizes(value) -> List[str]:
    sizes = value if isinstance(value, (list, tuple)) else [value]
    sizes = [str(s) for s in sizes if s not in (None, "")]
    if not sizes:
        raise ValidationError("At least one size is required")
    return sizes


def _check_category(value) -> str:
    if value not in CATEGORIES:
        raise ValidationError(f"Category must be one of: {', '.join(CATEGORIES)}")
    return value


def _max_id_number(products: List[dict]) -> int:
    numbers = [0]
    for p in products:
        match = _ID_DIGITS.search(str(p.get("id", "")))
        if match:
            numbers.append(int(match.group()))
    return max(numbers)


def _find(products: List[dict], product_id: str) -> Optional[dict]:
    return next((p for p in products if p.get("id") == product_id), None)


def list_products(store: RecordStore) -> List[dict]:
    return store.load("products")


def get_product(store: RecordStore, product_id: str) -> dict:
    product = store.find("products", id=product_id)
    if not product:
        raise NotFound("Product not found")
    return product


def create_product(store: RecordStore, fields: dict) -> dict:
    require_fields(fields, REQUIRED_FIELDS)

    product = {
        "name": fields["name"],
        "category": _check_category(fields["category"]),
        "price": _to_price(fields["price"]),
        "description": fields["description"],
        "color": fields["color"],
        "size": _to_sizes(fields["size"]),
        "image": fields["image"],
        "stock": _to_stock(fields["stock"]),
    }

    with store.update("products") as products:
        # The counter never goes backwards, so deleting the newest product does not free its id
        number = store.next_sequence("products", floor=_max_id_number(products))
        product = {"id": f"p{number}", **product}
        products.append(product)
    return product


def update_product(store: RecordStore, product_id: str, fields: dict) -> dict:
    """Apply the provided fields only; None means "leave unchanged"."""
    changes = {}
    for key in ("name", "description", "color", "image"):
        if fields.get(key):
            changes[key] = fields[key]
    if fields.get("category"):
        changes["category"] = _check_category(fields["category"])
    if fields.get("price") is not None:
        changes["price"] = _to_price(fields["price"])
    if fields.get("size") is not None and fields.get("size") != "":
        changes["size"] = _to_sizes(fields["size"])
    if fields.get("stock") is not None:
        changes["stock"] = _to_stock(fields["stock"])

    with store.update("products") as products:
        product = _find(products, product_id)
        if not product:
            raise NotFound("Product not found")
        product.update(changes)
    return product


def delete_product(store: RecordStore, product_id: str) -> dict:
    # Carts and orders keep their own copies, nothing cascades
    with store.update("products") as products:
        product = _find(products, product_id)
        if not product:
            raise NotFound("Product not found")
        products.remove(product)
    return product


def set_stock(store: RecordStore, product_id: str, stock) -> dict:
    if stock is None or stock == "":
        raise ValidationError("Stock value is required")
    stock = _to_stock(stock)

    with store.update("products") as products:
        product = _find(products, product_id)
        if not product:
            raise NotFound("Product not found")
        product["stock"] = stock
    return product
