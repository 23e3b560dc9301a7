# backend/schemas/base.py
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


# Wire names are camelCase (userId, dressId, estimatedDelivery); Python names stay snake_case
class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Every success body carries success: true next to its payload
class SuccessResponse(CamelModel):
    success: bool = True
    message: Optional[str] = None
