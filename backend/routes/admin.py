# backend/routes/admin.py
from datetime import datetime
from typing import Any, List, Optional

from fastapi import APIRouter, Depends, Query, Request

from errors import server_errors
from schemas.base import CamelModel, SuccessResponse
from schemas.order import OrderResponse, OrdersResponse, OrderUpdatePayload
from services import orders as order_service
from storage import RecordStore, get_store
from utils.audit import write_log

router = APIRouter(prefix="/api/admin", tags=["Admin"])


# --- SCHEMATY ---
class LogResponse(CamelModel):
    id: str
    user_id: Optional[str] = None
    action: str
    resource: str
    status: str
    ip: Optional[str] = None
    ts: datetime
    meta: Optional[Any] = None


class LogPage(SuccessResponse):
    items: List[LogResponse]
    total: int
    page: int
    page_size: int


# Every order, unscoped
@router.get("/orders", response_model=OrdersResponse)
def get_all_orders(store: RecordStore = Depends(get_store)):
    with server_errors("Server error while fetching orders"):
        orders = order_service.list_all_orders(store)
    return {"orders": orders}


# Set status and/or estimated delivery; any status may follow any other
@router.put("/orders/{order_id}", response_model=OrderResponse)
def update_order_status(order_id: str, payload: OrderUpdatePayload, request: Request,
                        store: RecordStore = Depends(get_store)):
    with server_errors("Server error while updating order"):
        order, previous = order_service.change_order(
            store, order_id, payload.status, payload.estimated_delivery
        )

    write_log(
        store, user_id=None, action="ORDER_STATUS_CHANGE", resource="orders", status="SUCCESS",
        ip=request.client.host if request.client else None,
        meta={
            "order_id": order_id,
            "old": previous,
            "new": order["status"],
            "estimated_delivery": order.get("estimatedDelivery"),
        },
    )
    return {"order": order}


# Audit trail, newest first
@router.get("/logs", response_model=LogPage)
def get_logs(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100, alias="pageSize"),
    action: Optional[str] = Query(None, description="Filter by action"),
    user_id: Optional[str] = Query(None, alias="userId", description="Filter by user id"),
    resource: Optional[str] = Query(None, description="Filter by resource"),
    status: Optional[str] = Query(None, description="Filter by status (SUCCESS/FAIL)"),
    store: RecordStore = Depends(get_store),
):
    with server_errors("Server error while fetching logs"):
        logs = store.load("logs")

    # 1. Action and resource match case-insensitively on substrings
    if action:
        logs = [l for l in logs if action.lower() in (l.get("action") or "").lower()]
    if resource:
        logs = [l for l in logs if resource.lower() in (l.get("resource") or "").lower()]

    # 2. User and status match exactly
    if user_id is not None:
        logs = [l for l in logs if l.get("userId") == user_id]
    if status:
        logs = [l for l in logs if l.get("status") == status]

    logs.sort(key=lambda l: l.get("ts") or "", reverse=True)

    total = len(logs)
    items = logs[(page - 1) * page_size: page * page_size]
    return {"items": items, "total": total, "page": page, "page_size": page_size}
