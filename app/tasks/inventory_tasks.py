import logging

from app.tasks.celery_app import celery_app
from app.database import SessionLocal
from app.services.inventory_service import InventoryService

logger = logging.getLogger(__name__)


@celery_app.task(bind=True, name="flag_low_stock", max_retries=3)
def flag_low_stock(self, product_ids: list) -> dict:
    """
    Background task run after an order commits.
    
    Logs a warning for every ordered product whose stock is now at or
    below its low-stock threshold, so it can be restocked.
    
    Args:
        product_ids: Products touched by the order
        
    Returns:
        Dictionary listing the flagged products
    """
    db = SessionLocal()
    
    try:
        records = InventoryService(db).get_low_stock(product_ids)
        
        flagged = []
        for record in records:
            logger.warning(
                f"Low stock: product {record.product_id} ('{record.product.name}') "
                f"has {record.quantity} left, threshold {record.low_stock_threshold}"
            )
            flagged.append({
                "product_id": record.product_id,
                "quantity": record.quantity,
                "low_stock_threshold": record.low_stock_threshold,
            })
        
        return {"status": "checked", "flagged": flagged}
        
    except Exception as e:
        logger.error(f"Error checking stock levels for {product_ids}: {e}")
        raise self.retry(exc=e, countdown=30)
        
    finally:
        db.close()
