from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from typing import Optional, List
import logging

from pydantic import BaseModel

from app.models.customer import Customer
from app.models.order import Order
from app.models.supplier import Supplier
from app.services.exceptions import ConflictError

logger = logging.getLogger(__name__)


class ContactService:
    """
    CRUD for directory records identified by a unique email address.
    
    Emails are stored trimmed and lower-cased, so uniqueness is
    case-insensitive.
    
    Subclasses set `model` and `label`.
    """
    
    model = None
    label = "Record"
    
    def __init__(self, db: Session):
        self.db = db
    
    def create(self, data: BaseModel):
        """
        Create a record.
        
        Raises:
            ConflictError: If the email is already in use
        """
        fields = data.model_dump()
        fields["email"] = self._normalize_email(fields["email"])
        self._ensure_email_free(fields["email"])
        
        record = self.model(**fields)
        self.db.add(record)
        self._commit()
        self.db.refresh(record)
        
        logger.info(f"{self.label} {record.id} created")
        return record
    
    def get_by_id(self, record_id: str):
        return self.db.query(self.model).filter(self.model.id == record_id).first()
    
    def get_all(self) -> List:
        """Get all records, newest first."""
        return self.db.query(self.model).order_by(self.model.created_at.desc()).all()
    
    def update(self, record_id: str, data: BaseModel):
        """
        Update a record (only provided fields are changed).
        
        Returns:
            Updated record or None if not found
            
        Raises:
            ConflictError: If the new email belongs to another record
        """
        record = self.get_by_id(record_id)
        
        if not record:
            return None
        
        update_data = data.model_dump(exclude_unset=True)
        if update_data.get("email"):
            update_data["email"] = self._normalize_email(update_data["email"])
            self._ensure_email_free(update_data["email"], exclude_id=record_id)
        
        for field, value in update_data.items():
            if value is not None:
                setattr(record, field, value)
        
        self._commit()
        self.db.refresh(record)
        return record
    
    def delete(self, record_id: str) -> bool:
        record = self.get_by_id(record_id)
        
        if not record:
            return False
        
        self._ensure_deletable(record)
        self.db.delete(record)
        self.db.commit()
        
        logger.info(f"{self.label} {record_id} deleted")
        return True
    
    def _ensure_deletable(self, record) -> None:
        pass
    
    def _ensure_email_free(self, email: str, exclude_id: Optional[str] = None) -> None:
        query = self.db.query(self.model).filter(self.model.email == email)
        if exclude_id:
            query = query.filter(self.model.id != exclude_id)
        if query.first():
            raise ConflictError(f"Email already in use by another {self.label.lower()}.")
    
    def _commit(self) -> None:
        # The unique index still catches a concurrent insert of the same email
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(f"Integrity error saving {self.label.lower()}: {e}")
            raise ConflictError("Email already exists.") from e
    
    @staticmethod
    def _normalize_email(email: str) -> str:
        return email.strip().lower()


class CustomerService(ContactService):
    """Customers who may be referenced by orders."""
    model = Customer
    label = "Customer"
    
    def _ensure_deletable(self, record) -> None:
        if self.db.query(Order.id).filter(Order.customer_id == record.id).first():
            raise ConflictError(
                f"Customer {record.id} has placed orders and cannot be deleted"
            )


class SupplierService(ContactService):
    """Suppliers the store restocks from."""
    model = Supplier
    label = "Supplier"
