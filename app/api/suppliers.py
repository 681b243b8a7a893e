from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.services.contact_service import SupplierService
from app.services.exceptions import ConflictError
from app.schemas.contact import (
    SupplierCreate,
    SupplierUpdate,
    SupplierResponse,
    MessageResponse
)

router = APIRouter(prefix="/suppliers", tags=["Suppliers"])


@router.post(
    "",
    response_model=SupplierResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new supplier"
)
def create_supplier(
    supplier_data: SupplierCreate,
    db: Session = Depends(get_db)
):
    """Create a supplier. Returns 409 if the email is already registered."""
    service = SupplierService(db)
    
    try:
        return service.create(supplier_data)
    except ConflictError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e)
        )


@router.get(
    "",
    response_model=list[SupplierResponse],
    summary="List all suppliers",
    description="Get all suppliers, newest first."
)
def list_suppliers(db: Session = Depends(get_db)):
    return SupplierService(db).get_all()


@router.get(
    "/{supplier_id}",
    response_model=SupplierResponse,
    summary="Get supplier by ID"
)
def get_supplier(
    supplier_id: str,
    db: Session = Depends(get_db)
):
    supplier = SupplierService(db).get_by_id(supplier_id)
    
    if not supplier:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Supplier not found"
        )
    
    return supplier


@router.put(
    "/{supplier_id}",
    response_model=SupplierResponse,
    summary="Update a supplier",
    description="Update supplier details. Only provided fields will be updated."
)
def update_supplier(
    supplier_id: str,
    supplier_data: SupplierUpdate,
    db: Session = Depends(get_db)
):
    service = SupplierService(db)
    
    try:
        supplier = service.update(supplier_id, supplier_data)
    except ConflictError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e)
        )
    
    if not supplier:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Supplier not found"
        )
    
    return supplier


@router.delete(
    "/{supplier_id}",
    response_model=MessageResponse,
    summary="Delete a supplier"
)
def delete_supplier(
    supplier_id: str,
    db: Session = Depends(get_db)
):
    service = SupplierService(db)
    
    try:
        deleted = service.delete(supplier_id)
    except ConflictError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e)
        )
    
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Supplier not found"
        )
    
    return {"message": "Supplier deleted successfully"}
