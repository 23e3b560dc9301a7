from pydantic import Field
from typing import List, Optional

from schemas.base import CamelModel, SuccessResponse

# Request schema for adding an item to the cart
class CartAddItem(CamelModel):
    user_id: Optional[str] = None
    dress_id: Optional[str] = None
    name: Optional[str] = None
    price: Optional[float] = None
    image: Optional[str] = None
    size: Optional[str] = None

# Request schema for removing a line from the cart
class CartRemoveItem(CamelModel):
    user_id: Optional[str] = None
    item_id: Optional[str] = None

# Request schema for updating cart item quantity (0 removes the line)
class CartUpdateItem(CamelModel):
    user_id: Optional[str] = None
    item_id: Optional[str] = None
    quantity: Optional[int] = None

class CartClear(CamelModel):
    user_id: Optional[str] = None

# Response schema for a single cart line item
class CartItemOut(CamelModel):
    id: str
    dress_id: str
    name: str
    price: float
    image: Optional[str] = None
    quantity: int = Field(ge=1)
    size: str
    added_at: Optional[str] = None

class CartItemResponse(SuccessResponse):
    cart_item: CartItemOut

# Response schema for the entire cart
class CartOut(SuccessResponse):
    items: List[CartItemOut]
