# backend/schemas/product.py
from pydantic import Field
from typing import Optional, List, Union

from schemas.base import CamelModel, SuccessResponse


# Request schema for adding a product; presence of every field is checked by the catalog service
class ProductCreate(CamelModel):
    name: Optional[str] = None
    category: Optional[str] = None
    price: Optional[float] = None
    description: Optional[str] = None
    color: Optional[str] = None
    size: Optional[Union[List[str], str]] = None
    image: Optional[str] = None
    stock: Optional[int] = None


# Schema for partial product updates - all fields optional
class ProductUpdate(ProductCreate):
    pass


class StockUpdate(CamelModel):
    stock: Optional[int] = Field(None, description="New stock level")


class ProductOut(CamelModel):
    id: str
    category: Optional[str] = None
    name: Optional[str] = None
    price: Optional[float] = None
    image: Optional[str] = None
    description: Optional[str] = None
    color: Optional[str] = None
    size: Optional[List[str]] = None
    stock: Optional[int] = None


class ProductListResponse(SuccessResponse):
    products: List[ProductOut]


class ProductResponse(SuccessResponse):
    product: ProductOut
