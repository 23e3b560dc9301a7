# backend/models/collection.py
from sqlalchemy import Column, String, DateTime, JSON, func
from database import Base

# One named collection (users, carts, orders, ...) stored as a single JSON document,
# mirroring the one-file-per-collection layout of the JSON backend.
class CollectionDocument(Base):
    __tablename__ = "collections"

    name = Column(String(50), primary_key=True)
    records = Column(JSON, nullable=False, default=list)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
