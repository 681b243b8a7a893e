from sqlalchemy import Column, String, Text, DateTime
from sqlalchemy.sql import func

from app.database import Base, generate_id


class Customer(Base):
    """Customer who may place orders."""
    __tablename__ = "customers"
    
    id = Column(String(32), primary_key=True, default=generate_id)
    first_name = Column(String(255), nullable=False)
    last_name = Column(String(255), nullable=False)
    email = Column(String(320), nullable=False, unique=True, index=True)
    phone = Column(String(64), nullable=True)
    address = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    
    def __repr__(self):
        return f"<Customer(id={self.id}, email='{self.email}')>"
