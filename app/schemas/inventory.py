from pydantic import BaseModel, Field, ConfigDict
from datetime import datetime
from typing import Optional

from app.schemas.product import ProductSummary


class InventoryUpdate(BaseModel):
    """Schema for setting a product's stock level."""
    quantity: int = Field(..., ge=0, description="Units on hand")
    low_stock_threshold: Optional[int] = Field(None, ge=0, description="Low-stock threshold")


class InventoryResponse(BaseModel):
    """Schema for an inventory record with its product expanded."""
    id: str
    product_id: str
    quantity: int
    low_stock_threshold: int
    last_stocked_date: Optional[datetime] = None
    is_low_stock: bool
    product: Optional[ProductSummary] = None
    
    model_config = ConfigDict(from_attributes=True)
