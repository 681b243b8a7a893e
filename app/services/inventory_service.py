from datetime import datetime, timezone
from typing import List, Optional, Tuple
import logging

from sqlalchemy import update
from sqlalchemy.orm import Session, joinedload

from app.config import get_settings
from app.models.inventory import Inventory

logger = logging.getLogger(__name__)

settings = get_settings()


class InventoryService:
    """
    Inventory ledger: one stock record per product.
    
    Quantities passed in here are assumed to be validated by the caller
    (non-negative integers); the ledger does not re-check them.
    """
    
    def __init__(self, db: Session):
        self.db = db
    
    def get_record(self, product_id: str) -> Optional[Inventory]:
        """Get the inventory record for a product, with the product loaded."""
        return (
            self.db.query(Inventory)
            .options(joinedload(Inventory.product))
            .filter(Inventory.product_id == product_id)
            .first()
        )
    
    def get_quantity(self, product_id: str) -> int:
        """Units on hand for a product, 0 when no record exists."""
        record = self.db.query(Inventory).filter(Inventory.product_id == product_id).first()
        return record.quantity if record else 0
    
    def set_quantity(
        self,
        product_id: str,
        quantity: int,
        low_stock_threshold: Optional[int] = None,
        commit: bool = True
    ) -> Tuple[Inventory, bool]:
        """
        Create or update the stock record for a product.
        
        Args:
            product_id: Product whose stock is being set
            quantity: New quantity on hand
            low_stock_threshold: New threshold (keeps the current one, or the
                configured default for new records, when omitted)
            commit: Commit immediately; pass False to join the caller's transaction
            
        Returns:
            Tuple of (inventory record, whether it was created)
        """
        record = self.db.query(Inventory).filter(Inventory.product_id == product_id).first()
        created = record is None
        
        if created:
            record = Inventory(
                product_id=product_id,
                low_stock_threshold=(
                    low_stock_threshold
                    if low_stock_threshold is not None
                    else settings.DEFAULT_LOW_STOCK_THRESHOLD
                ),
            )
            self.db.add(record)
        elif low_stock_threshold is not None:
            record.low_stock_threshold = low_stock_threshold
        
        record.quantity = quantity
        record.last_stocked_date = datetime.now(timezone.utc)
        
        if commit:
            self.db.commit()
            self.db.refresh(record)
            logger.info(f"Stock for product {product_id} set to {quantity}")
        else:
            self.db.flush()
        
        return record, created
    
    def decrement_if_available(self, product_id: str, quantity: int) -> bool:
        """
        Atomically take `quantity` units off a product's stock.
        
        The UPDATE only matches while enough stock remains, so a concurrent
        writer that got there first makes this return False instead of
        driving the quantity negative. Does not commit.
        
        Returns:
            True if the stock was decremented, False otherwise
        """
        result = self.db.execute(
            update(Inventory)
            .where(
                Inventory.product_id == product_id,
                Inventory.quantity >= quantity,
            )
            .values(
                quantity=Inventory.quantity - quantity,
                last_stocked_date=datetime.now(timezone.utc),
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1
    
    def get_all(self) -> List[Inventory]:
        """Get every inventory record with its product."""
        return (
            self.db.query(Inventory)
            .options(joinedload(Inventory.product))
            .order_by(Inventory.quantity.asc())
            .all()
        )
    
    def get_low_stock(self, product_ids: Optional[List[str]] = None) -> List[Inventory]:
        """
        Get records at or below their low-stock threshold.
        
        Args:
            product_ids: Restrict the check to these products
        """
        query = (
            self.db.query(Inventory)
            .options(joinedload(Inventory.product))
            .filter(Inventory.quantity <= Inventory.low_stock_threshold)
        )
        if product_ids is not None:
            query = query.filter(Inventory.product_id.in_(product_ids))
        return query.order_by(Inventory.quantity.asc()).all()
