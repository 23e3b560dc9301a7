# backend/routes/cart.py
from fastapi import APIRouter, Depends, Query, Request

from errors import server_errors
from schemas.base import SuccessResponse
from schemas.cart import CartAddItem, CartClear, CartItemResponse, CartOut, CartRemoveItem, CartUpdateItem
from services import cart as cart_service
from storage import RecordStore, get_store
from utils.audit import write_log

router = APIRouter(prefix="/api/cart", tags=["Cart"])


def _ip(request: Request):
    return request.client.host if request.client else None


@router.get("", response_model=CartOut)
def get_cart(user_id: str = Query(None, alias="userId"), store: RecordStore = Depends(get_store)):
    # A user without a cart record simply has an empty cart
    with server_errors("Server error while fetching cart"):
        items = cart_service.get_cart(store, user_id)
    return {"items": items}


@router.post("/add", response_model=CartItemResponse)
def add_to_cart(payload: CartAddItem, request: Request, store: RecordStore = Depends(get_store)):
    with server_errors("Server error while adding to cart"):
        item = cart_service.add_item(
            store, payload.user_id, payload.dress_id, payload.name,
            payload.price, payload.image, payload.size,
        )

    # Log cart add action
    write_log(
        store,
        user_id=payload.user_id,
        action="CART_ADD",
        resource="cart",
        status="SUCCESS",
        ip=_ip(request),
        meta={"dress_id": payload.dress_id, "size": payload.size, "quantity": item["quantity"]},
    )
    return {"message": "Item added to cart", "cart_item": item}


@router.post("/remove", response_model=SuccessResponse)
def remove_from_cart(payload: CartRemoveItem, request: Request, store: RecordStore = Depends(get_store)):
    with server_errors("Server error while removing from cart"):
        cart_service.remove_item(store, payload.user_id, payload.item_id)

    write_log(
        store,
        user_id=payload.user_id,
        action="CART_DELETE",
        resource="cart",
        status="SUCCESS",
        ip=_ip(request),
        meta={"item_id": payload.item_id},
    )
    return {"message": "Item removed from cart"}


@router.put("/update", response_model=SuccessResponse)
def update_cart_item(payload: CartUpdateItem, request: Request, store: RecordStore = Depends(get_store)):
    with server_errors("Server error while updating cart"):
        cart_service.update_quantity(store, payload.user_id, payload.item_id, payload.quantity)

    write_log(
        store,
        user_id=payload.user_id,
        action="CART_UPDATE",
        resource="cart",
        status="SUCCESS",
        ip=_ip(request),
        meta={"item_id": payload.item_id, "quantity": payload.quantity},
    )
    return {"message": "Cart updated"}


@router.post("/clear", response_model=SuccessResponse)
def clear_cart(payload: CartClear, request: Request, store: RecordStore = Depends(get_store)):
    with server_errors("Server error while clearing cart"):
        cart_service.clear_cart(store, payload.user_id)

    write_log(store, user_id=payload.user_id, action="CART_CLEAR", resource="cart",
              status="SUCCESS", ip=_ip(request))
    return {"message": "Cart cleared"}
