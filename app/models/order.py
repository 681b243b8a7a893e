from sqlalchemy import Column, Integer, String, Float, Text, DateTime, ForeignKey, Enum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import enum

from app.database import Base, generate_id


class OrderStatus(str, enum.Enum):
    """Enum for order status."""
    PENDING = "Pending"
    PROCESSING = "Processing"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"


class Order(Base):
    """
    Order model representing a placed customer order.
    
    Attributes:
        id: Opaque string identifier
        customer_id: Optional reference to the ordering customer
        items: Line items, in the order they were submitted
        total_amount: Sum of price_per_unit * quantity, fixed at creation
        status: Current status of the order
        shipping_address: Delivery address
        billing_address: Billing address (defaults to the shipping address)
        order_date: Timestamp when the order was placed
    """
    __tablename__ = "orders"
    
    id = Column(String(32), primary_key=True, default=generate_id)
    customer_id = Column(String(32), ForeignKey("customers.id"), nullable=True, index=True)
    total_amount = Column(Float, nullable=False)
    status = Column(Enum(OrderStatus), default=OrderStatus.PENDING, nullable=False)
    shipping_address = Column(Text, nullable=False)
    billing_address = Column(Text, nullable=True)
    order_date = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    
    items = relationship(
        "OrderItem",
        back_populates="order",
        order_by="OrderItem.position",
        cascade="all, delete-orphan",
    )
    customer = relationship("Customer")
    
    def __repr__(self):
        return f"<Order(id={self.id}, total_amount={self.total_amount}, status='{self.status}')>"


class OrderItem(Base):
    """
    Line item snapshot. Rows belong to exactly one order and have no
    identity outside of it.
    """
    __tablename__ = "order_items"
    
    order_id = Column(String(32), ForeignKey("orders.id", ondelete="CASCADE"), primary_key=True)
    position = Column(Integer, primary_key=True)
    product_id = Column(String(32), ForeignKey("products.id"), nullable=False, index=True)
    quantity = Column(Integer, nullable=False)
    price_per_unit = Column(Float, nullable=False)
    
    order = relationship("Order", back_populates="items")
    product = relationship("Product")
    
    def __repr__(self):
        return f"<OrderItem(product_id={self.product_id}, quantity={self.quantity})>"
