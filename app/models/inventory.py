from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.database import Base, generate_id


class Inventory(Base):
    """
    Stock record for a single product.
    
    Attributes:
        id: Opaque string identifier
        product_id: Reference to the stocked product (unique)
        quantity: Units on hand (never negative)
        low_stock_threshold: Quantity at or below which the product needs restocking
        last_stocked_date: Timestamp of the last quantity write
    """
    __tablename__ = "inventory"
    
    id = Column(String(32), primary_key=True, default=generate_id)
    product_id = Column(
        String(32),
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
    )
    quantity = Column(Integer, nullable=False, default=0)
    low_stock_threshold = Column(Integer, nullable=False, default=10)
    last_stocked_date = Column(DateTime(timezone=True), server_default=func.now())
    
    product = relationship("Product", back_populates="inventory")
    
    __table_args__ = (
        CheckConstraint('quantity >= 0', name='check_quantity_non_negative'),
        CheckConstraint('low_stock_threshold >= 0', name='check_threshold_non_negative'),
    )
    
    @property
    def is_low_stock(self) -> bool:
        return self.quantity <= self.low_stock_threshold
    
    def __repr__(self):
        return f"<Inventory(product_id={self.product_id}, quantity={self.quantity})>"
