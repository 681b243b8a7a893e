from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from typing import Optional
import logging

from app.database import get_db
from app.services.order_service import OrderService
from app.services.exceptions import (
    ValidationError,
    NotFoundError,
    ConflictError,
    InternalError,
)
from app.schemas.order import (
    OrderCreate,
    OrderResponse,
    OrderStatusUpdate
)
from app.models.order import OrderStatus
from app.tasks.inventory_tasks import flag_low_stock

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/orders", tags=["Orders"])


@router.post(
    "",
    response_model=OrderResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Place a new order",
    description="""
    Place an order for one or more products.
    
    Every item is checked before anything is written. The order and all
    stock decrements are then committed in one transaction, so a rejected
    or failed order never changes inventory. When two orders race for the
    last units, only one succeeds; the other receives a 400 error with an
    'Insufficient stock' message.
    
    After the order commits, a background Celery task flags any ordered
    product that is now low on stock.
    """
)
def create_order(
    order_data: OrderCreate,
    db: Session = Depends(get_db)
):
    """
    Place an order.
    
    - **customer_id**: Ordering customer (optional)
    - **items**: List of `{product_id, quantity}`, at least one (required)
    - **shipping_address**: Delivery address (required)
    - **billing_address**: Defaults to the shipping address (optional)
    """
    service = OrderService(db)
    
    try:
        order = service.place_order(order_data)
    except (ValidationError, ConflictError) as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )
    except InternalError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e)
        )
    
    # Trigger background low-stock check; the order is already committed
    try:
        flag_low_stock.delay(sorted({item.product_id for item in order.items}))
    except Exception as e:
        logger.error(f"Could not dispatch low-stock check for order {order.id}: {e}")
    
    return order


@router.get(
    "",
    response_model=list[OrderResponse],
    summary="List all orders",
    description="Get all orders, newest first, with products and customer expanded."
)
def list_orders(
    status: Optional[OrderStatus] = Query(None, description="Filter by order status"),
    db: Session = Depends(get_db)
):
    """Get all orders."""
    service = OrderService(db)
    return service.get_orders(status)


@router.get(
    "/{order_id}",
    response_model=OrderResponse,
    summary="Get order by ID",
    description="Get detailed information about a specific order."
)
def get_order(
    order_id: str,
    db: Session = Depends(get_db)
):
    """Get an order by ID."""
    service = OrderService(db)
    order = service.get_order(order_id)
    
    if not order:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Order with ID {order_id} not found"
        )
    
    return order


@router.put(
    "/{order_id}/status",
    response_model=OrderResponse,
    summary="Update order status",
    description="""
    Set the status of an order to one of Pending, Processing, Shipped,
    Delivered or Cancelled. Any status may be set from any other.
    
    Cancelling an order does not return its items to stock.
    """
)
def update_order_status(
    order_id: str,
    status_data: OrderStatusUpdate,
    db: Session = Depends(get_db)
):
    """Update the status of an order."""
    service = OrderService(db)
    
    try:
        return service.update_status(order_id, status_data.status)
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )
    except InternalError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e)
        )
