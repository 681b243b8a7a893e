from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.services.contact_service import CustomerService
from app.services.exceptions import ConflictError
from app.schemas.contact import (
    CustomerCreate,
    CustomerUpdate,
    CustomerResponse,
    MessageResponse
)

router = APIRouter(prefix="/customers", tags=["Customers"])


@router.post(
    "",
    response_model=CustomerResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new customer"
)
def create_customer(
    customer_data: CustomerCreate,
    db: Session = Depends(get_db)
):
    """Create a customer. Returns 409 if the email is already registered."""
    service = CustomerService(db)
    
    try:
        return service.create(customer_data)
    except ConflictError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e)
        )


@router.get(
    "",
    response_model=list[CustomerResponse],
    summary="List all customers",
    description="Get all customers, newest first."
)
def list_customers(db: Session = Depends(get_db)):
    return CustomerService(db).get_all()


@router.get(
    "/{customer_id}",
    response_model=CustomerResponse,
    summary="Get customer by ID"
)
def get_customer(
    customer_id: str,
    db: Session = Depends(get_db)
):
    customer = CustomerService(db).get_by_id(customer_id)
    
    if not customer:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Customer not found"
        )
    
    return customer


@router.put(
    "/{customer_id}",
    response_model=CustomerResponse,
    summary="Update a customer",
    description="Update customer details. Only provided fields will be updated."
)
def update_customer(
    customer_id: str,
    customer_data: CustomerUpdate,
    db: Session = Depends(get_db)
):
    service = CustomerService(db)
    
    try:
        customer = service.update(customer_id, customer_data)
    except ConflictError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e)
        )
    
    if not customer:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Customer not found"
        )
    
    return customer


@router.delete(
    "/{customer_id}",
    response_model=MessageResponse,
    summary="Delete a customer"
)
def delete_customer(
    customer_id: str,
    db: Session = Depends(get_db)
):
    service = CustomerService(db)
    
    try:
        deleted = service.delete(customer_id)
    except ConflictError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e)
        )
    
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Customer not found"
        )
    
    return {"message": "Customer deleted successfully"}
