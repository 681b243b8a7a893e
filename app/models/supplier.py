from sqlalchemy import Column, String, Text, DateTime
from sqlalchemy.sql import func

from app.database import Base, generate_id


class Supplier(Base):
    """Supplier the store restocks from."""
    __tablename__ = "suppliers"
    
    id = Column(String(32), primary_key=True, default=generate_id)
    name = Column(String(255), nullable=False)
    contact_person = Column(String(255), nullable=True)
    email = Column(String(320), nullable=False, unique=True, index=True)
    phone = Column(String(64), nullable=True)
    address = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    
    def __repr__(self):
        return f"<Supplier(id={self.id}, name='{self.name}')>"
