# backend/routes/products.py
from fastapi import APIRouter, Depends, Request

from errors import server_errors
from services import products as product_service
from storage import RecordStore, get_store
from utils.audit import write_log
import schemas.product as product_schemas

router = APIRouter(prefix="/api/products", tags=["Products"])


def _ip(request: Request):
    return request.client.host if request.client else None


# =========================
# LISTA PRODUKTÓW
# =========================
# Filtering and paging happen in the client, the whole catalog goes out
@router.get("", response_model=product_schemas.ProductListResponse)
def list_products(store: RecordStore = Depends(get_store)):
    with server_errors("Server error while fetching products"):
        products = product_service.list_products(store)
    return {"products": products}


# =========================
# POJEDYNCZY PRODUKT
# =========================
@router.get("/{product_id}", response_model=product_schemas.ProductResponse)
def get_product(product_id: str, store: RecordStore = Depends(get_store)):
    with server_errors("Server error while fetching product"):
        product = product_service.get_product(store, product_id)
    return {"product": product}


# =========================
# DODAWANIE PRODUKTU
# =========================
@router.post("", response_model=product_schemas.ProductResponse)
def add_product(payload: product_schemas.ProductCreate, request: Request,
                store: RecordStore = Depends(get_store)):
    with server_errors("Server error while adding product"):
        product = product_service.create_product(store, payload.model_dump())

    write_log(store, user_id=None, action="PRODUCT_CREATE", resource="products",
              status="SUCCESS", ip=_ip(request), meta={"id": product["id"], "name": product["name"]})
    return {"product": product, "message": "Product added successfully"}


# =========================
# CZĘŚCIOWA EDYCJA PRODUKTU
# =========================
@router.put("/{product_id}", response_model=product_schemas.ProductResponse)
def update_product(product_id: str, payload: product_schemas.ProductUpdate, request: Request,
                   store: RecordStore = Depends(get_store)):
    changes = payload.model_dump(exclude_none=True)
    with server_errors("Server error while updating product"):
        product = product_service.update_product(store, product_id, changes)

    write_log(store, user_id=None, action="PRODUCT_UPDATE", resource="products",
              status="SUCCESS", ip=_ip(request), meta={"id": product_id, "fields": sorted(changes)})
    return {"product": product, "message": "Product updated successfully"}


# =========================
# STAN MAGAZYNOWY
# =========================
@router.put("/{product_id}/stock", response_model=product_schemas.ProductResponse)
def update_product_stock(product_id: str, payload: product_schemas.StockUpdate, request: Request,
                         store: RecordStore = Depends(get_store)):
    with server_errors("Server error while updating stock"):
        product = product_service.set_stock(store, product_id, payload.stock)

    write_log(store, user_id=None, action="PRODUCT_STOCK", resource="products",
              status="SUCCESS", ip=_ip(request), meta={"id": product_id, "stock": product["stock"]})
    return {"product": product, "message": "Stock updated successfully"}


# =========================
# USUWANIE
# =========================
@router.delete("/{product_id}", response_model=product_schemas.ProductResponse)
def delete_product(product_id: str, request: Request, store: RecordStore = Depends(get_store)):
    with server_errors("Server error while deleting product"):
        product = product_service.delete_product(store, product_id)

    write_log(store, user_id=None, action="PRODUCT_DELETE", resource="products",
              status="SUCCESS", ip=_ip(request), meta={"id": product_id})
    return {"product": product, "message": "Product deleted successfully"}
