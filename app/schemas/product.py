from pydantic import BaseModel, Field, ConfigDict
from datetime import datetime
from typing import Optional


class ProductBase(BaseModel):
    """Base schema for Product with common attributes."""
    name: str = Field(..., min_length=1, max_length=255, description="Product name")
    description: Optional[str] = Field(None, description="Product description")
    price: float = Field(..., ge=0, description="Product price (must be non-negative)")
    image_url: Optional[str] = Field(None, max_length=1024, description="Product image URL")
    category: Optional[str] = Field(None, max_length=255, description="Catalog category")


class ProductCreate(ProductBase):
    """Schema for creating a new product together with its inventory record."""
    initial_quantity: Optional[int] = Field(None, ge=0, description="Opening stock (defaults to 0)")
    low_stock_threshold: Optional[int] = Field(None, ge=0, description="Low-stock threshold (defaults to 10)")


class ProductUpdate(BaseModel):
    """Schema for updating an existing product. All fields are optional."""
    name: Optional[str] = Field(None, min_length=1, max_length=255, description="Product name")
    description: Optional[str] = Field(None, description="Product description")
    price: Optional[float] = Field(None, ge=0, description="Product price")
    image_url: Optional[str] = Field(None, max_length=1024, description="Product image URL")
    category: Optional[str] = Field(None, max_length=255, description="Catalog category")


class ProductResponse(ProductBase):
    """Schema for product response including all fields."""
    id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    
    model_config = ConfigDict(from_attributes=True)


class ProductSummary(BaseModel):
    """Product fields expanded onto order line items and inventory records."""
    id: str
    name: str
    price: float
    category: Optional[str] = None
    image_url: Optional[str] = None
    
    model_config = ConfigDict(from_attributes=True)
