from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.services.inventory_service import InventoryService
from app.services.product_service import ProductService
from app.schemas.inventory import InventoryUpdate, InventoryResponse

router = APIRouter(prefix="/inventory", tags=["Inventory"])


@router.get(
    "",
    response_model=list[InventoryResponse],
    summary="List inventory",
    description="Get every inventory record with its product expanded."
)
def list_inventory(db: Session = Depends(get_db)):
    """Get all inventory records."""
    return InventoryService(db).get_all()


@router.get(
    "/low-stock",
    response_model=list[InventoryResponse],
    summary="List low-stock inventory",
    description="Get records whose quantity is at or below their low-stock threshold."
)
def list_low_stock(db: Session = Depends(get_db)):
    """Get inventory records that need restocking."""
    return InventoryService(db).get_low_stock()


@router.get(
    "/{product_id}",
    response_model=InventoryResponse,
    summary="Get inventory for a product"
)
def get_inventory(
    product_id: str,
    db: Session = Depends(get_db)
):
    """Get the inventory record of a product."""
    record = InventoryService(db).get_record(product_id)
    
    if not record:
        if not ProductService(db).get_by_id(product_id):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found, so no inventory record exists."
            )
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Inventory record not found for this product."
        )
    
    return record


@router.put(
    "/{product_id}",
    response_model=InventoryResponse,
    responses={201: {"description": "Inventory record created"}},
    summary="Set inventory for a product",
    description="""
    Set the stock level (and optionally the low-stock threshold) of a
    product. Creates the record with status 201 if the product has none,
    otherwise updates it with status 200.
    """
)
def set_inventory(
    product_id: str,
    inventory_data: InventoryUpdate,
    response: Response,
    db: Session = Depends(get_db)
):
    """
    Create or update inventory.
    
    - **quantity**: Units on hand, non-negative (required)
    - **low_stock_threshold**: Non-negative threshold (optional)
    """
    if not ProductService(db).get_by_id(product_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Product not found. Cannot update/create inventory."
        )
    
    service = InventoryService(db)
    _, created = service.set_quantity(
        product_id,
        inventory_data.quantity,
        inventory_data.low_stock_threshold
    )
    
    if created:
        response.status_code = status.HTTP_201_CREATED
    
    return service.get_record(product_id)
