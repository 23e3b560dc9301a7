# backend/routes/orders.py

from fastapi import APIRouter, Depends, Query, Request

from errors import server_errors
from schemas.order import (
    CheckoutPayload, CheckoutResponse, OrderCreatePayload, OrderResponse, OrdersResponse,
)
from services import orders as order_service
from services.orders import PAYMENT_FIELDS
from storage import RecordStore, get_store
from utils.audit import write_log

router = APIRouter(prefix="/api", tags=["Orders"])


def _ip(request: Request):
    return request.client.host if request.client else None


# Persist the order once the payment gateway has reported success to the client
@router.post("/checkout", response_model=CheckoutResponse)
def checkout(payload: CheckoutPayload, request: Request, store: RecordStore = Depends(get_store)):
    data = payload.model_dump(by_alias=True)
    items = [item.model_dump(by_alias=True) for item in payload.items] if payload.items is not None else None

    with server_errors("Server error during checkout"):
        order = order_service.checkout(
            store,
            payload.user_id,
            payload.customer_name,
            payload.customer_email,
            items,
            payload.total,
            payment={field: data.get(field) for field in PAYMENT_FIELDS},
            idempotency_key=payload.idempotency_key,
            clear_cart=payload.clear_cart,
        )

    write_log(
        store, user_id=payload.user_id, action="CHECKOUT", resource="orders", status="SUCCESS",
        ip=_ip(request),
        meta={"order_id": order["id"], "total": order["total"], "payment_id": order.get("paymentId")},
    )
    return {"order_id": order["id"], "order": order}


# Lower-level order creation, no cart checks
@router.post("/orders", response_model=OrderResponse)
def create_order(payload: OrderCreatePayload, request: Request, store: RecordStore = Depends(get_store)):
    with server_errors("Server error while creating order"):
        order = order_service.create_order(
            store,
            payload.user_id,
            payload.customer_name,
            payload.customer_email,
            [item.model_dump(by_alias=True) for item in payload.items],
            payload.total,
            payload.estimated_delivery,
        )

    write_log(store, user_id=payload.user_id, action="ORDER_CREATE", resource="orders",
              status="SUCCESS", ip=_ip(request), meta={"order_id": order["id"]})
    return {"order": order}


# List the orders of one user
@router.get("/orders", response_model=OrdersResponse)
def list_my_orders(user_id: str = Query(None, alias="userId"), store: RecordStore = Depends(get_store)):
    with server_errors("Server error while fetching orders"):
        orders = order_service.list_user_orders(store, user_id)
    return {"orders": orders}
