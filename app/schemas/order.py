from pydantic import BaseModel, Field, ConfigDict
from datetime import datetime
from typing import Any, Optional

from app.models.order import OrderStatus
from app.schemas.product import ProductSummary


class OrderCreate(BaseModel):
    """
    Schema for placing a new order.
    
    Fields are left loosely typed so the order service can report which
    field or item is malformed (400) instead of a generic schema error.
    """
    customer_id: Any = Field(None, description="Ordering customer, if known")
    items: Any = Field(
        None, description="Requested line items: list of {product_id, quantity}"
    )
    shipping_address: Any = Field(None, description="Delivery address")
    billing_address: Any = Field(
        None, description="Billing address (defaults to the shipping address)"
    )


class OrderStatusUpdate(BaseModel):
    """Schema for changing an order's status."""
    status: Any = Field(None, description="One of Pending, Processing, Shipped, Delivered, Cancelled")


class CustomerSummary(BaseModel):
    """Customer fields expanded onto orders."""
    id: str
    first_name: str
    last_name: str
    email: str
    
    model_config = ConfigDict(from_attributes=True)


class OrderItemResponse(BaseModel):
    """Line item snapshot with product details expanded."""
    product_id: str
    quantity: int
    price_per_unit: float
    product: Optional[ProductSummary] = None
    
    model_config = ConfigDict(from_attributes=True)


class OrderResponse(BaseModel):
    """Schema for order response."""
    id: str
    customer_id: Optional[str] = None
    customer: Optional[CustomerSummary] = None
    items: list[OrderItemResponse]
    total_amount: float
    status: OrderStatus
    shipping_address: str
    billing_address: Optional[str] = None
    order_date: datetime
    
    model_config = ConfigDict(from_attributes=True)
