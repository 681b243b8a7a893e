from pydantic import BaseModel, Field, ConfigDict
from datetime import datetime
from typing import Optional


class CustomerCreate(BaseModel):
    """Schema for creating a customer."""
    model_config = ConfigDict(str_strip_whitespace=True)
    
    first_name: str = Field(..., min_length=1, max_length=255)
    last_name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=3, max_length=320)
    phone: Optional[str] = Field(None, max_length=64)
    address: Optional[str] = None


class CustomerUpdate(BaseModel):
    """Schema for updating a customer. All fields are optional."""
    model_config = ConfigDict(str_strip_whitespace=True)
    
    first_name: Optional[str] = Field(None, min_length=1, max_length=255)
    last_name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[str] = Field(None, min_length=3, max_length=320)
    phone: Optional[str] = Field(None, max_length=64)
    address: Optional[str] = None


class CustomerResponse(CustomerCreate):
    id: str
    created_at: Optional[datetime] = None
    
    model_config = ConfigDict(from_attributes=True)


class SupplierCreate(BaseModel):
    """Schema for creating a supplier."""
    model_config = ConfigDict(str_strip_whitespace=True)
    
    name: str = Field(..., min_length=1, max_length=255)
    contact_person: Optional[str] = Field(None, max_length=255)
    email: str = Field(..., min_length=3, max_length=320)
    phone: Optional[str] = Field(None, max_length=64)
    address: Optional[str] = None


class SupplierUpdate(BaseModel):
    """Schema for updating a supplier. All fields are optional."""
    model_config = ConfigDict(str_strip_whitespace=True)
    
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    contact_person: Optional[str] = Field(None, max_length=255)
    email: Optional[str] = Field(None, min_length=3, max_length=320)
    phone: Optional[str] = Field(None, max_length=64)
    address: Optional[str] = None


class SupplierResponse(SupplierCreate):
    id: str
    created_at: Optional[datetime] = None
    
    model_config = ConfigDict(from_attributes=True)


class MessageResponse(BaseModel):
    """Plain confirmation message."""
    message: str
