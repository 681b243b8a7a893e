from sqlalchemy.orm import Session
from typing import Optional, List
import logging

from app.models.product import Product
from app.models.order import OrderItem
from app.schemas.product import ProductCreate, ProductUpdate
from app.services.exceptions import ConflictError
from app.services.inventory_service import InventoryService
from app.utils.cache import cache_service

logger = logging.getLogger(__name__)


class ProductService:
    """
    Service class for Product CRUD operations (the catalog store).
    
    This service handles:
    - Creating new products together with their inventory record
    - Reading products (with caching)
    - Updating products
    - Deleting products that no order refers to
    - Cache invalidation
    """
    
    CACHE_PREFIX = "product"
    
    def __init__(self, db: Session):
        self.db = db
    
    def create(self, product_data: ProductCreate) -> Product:
        """
        Create a new product and its inventory record in one transaction.
        
        Args:
            product_data: Product creation data, optionally carrying the
                opening stock and low-stock threshold
            
        Returns:
            Created product instance
        """
        fields = product_data.model_dump(exclude={"initial_quantity", "low_stock_threshold"})
        product = Product(**fields)
        self.db.add(product)
        self.db.flush()
        
        InventoryService(self.db).set_quantity(
            product.id,
            product_data.initial_quantity or 0,
            product_data.low_stock_threshold,
            commit=False,
        )
        
        self.db.commit()
        self.db.refresh(product)
        logger.info(f"Product {product.id} ('{product.name}') created")
        return product
    
    def get_by_id(self, product_id: str) -> Optional[Product]:
        """
        Get a product by ID straight from the database.
        
        Used by order placement, so it never touches Redis; only the
        cached read path writes to the cache.
        
        Args:
            product_id: Product ID to look up
            
        Returns:
            Product instance or None if not found
        """
        return self.db.query(Product).filter(Product.id == product_id).first()
    
    def get_by_id_cached(self, product_id: str) -> Optional[dict]:
        """
        Get product details from cache or database.
        Returns a dictionary (suitable for API response).
        
        Args:
            product_id: Product ID to look up
            
        Returns:
            Product data as dictionary or None
        """
        cached = cache_service.get(self.CACHE_PREFIX, product_id)
        if cached:
            return cached
        
        product = self.db.query(Product).filter(Product.id == product_id).first()
        
        if product:
            return self._cache_product(product)
        
        return None
    
    def get_all(self, search: str = None, category: str = None) -> List[Product]:
        """
        Get all products, newest first.
        
        Args:
            search: Optional search term for product name
            category: Optional exact category filter
            
        Returns:
            List of products
        """
        query = self.db.query(Product)
        
        if search:
            query = query.filter(Product.name.ilike(f"%{search}%"))
        if category:
            query = query.filter(Product.category == category)
        
        return query.order_by(Product.created_at.desc(), Product.name.asc()).all()
    
    def update(self, product_id: str, product_data: ProductUpdate) -> Optional[Product]:
        """
        Update an existing product.
        
        Orders keep their own price snapshot, so changing the price here
        never alters historical totals.
        
        Args:
            product_id: ID of product to update
            product_data: Update data (only non-None fields are updated)
            
        Returns:
            Updated product or None if not found
        """
        product = self.db.query(Product).filter(Product.id == product_id).first()
        
        if not product:
            return None
        
        update_data = product_data.model_dump(exclude_unset=True)
        for field, value in update_data.items():
            if value is not None:
                setattr(product, field, value)
        
        self.db.commit()
        self.db.refresh(product)
        
        self._invalidate_cache(product_id)
        
        return product
    
    def delete(self, product_id: str) -> bool:
        """
        Delete a product and its inventory record.
        
        Args:
            product_id: ID of product to delete
            
        Returns:
            True if deleted, False if not found
            
        Raises:
            ConflictError: If an existing order refers to the product
        """
        product = self.db.query(Product).filter(Product.id == product_id).first()
        
        if not product:
            return False
        
        referenced = (
            self.db.query(OrderItem.order_id)
            .filter(OrderItem.product_id == product_id)
            .first()
        )
        if referenced:
            raise ConflictError(
                f"Product {product_id} is referenced by existing orders and cannot be deleted"
            )
        
        self.db.delete(product)
        self.db.commit()
        
        self._invalidate_cache(product_id)
        logger.info(f"Product {product_id} deleted")
        
        return True
    
    def _cache_product(self, product: Product) -> dict:
        """Cache a product instance."""
        product_dict = {
            "id": product.id,
            "name": product.name,
            "description": product.description,
            "price": product.price,
            "image_url": product.image_url,
            "category": product.category,
            "created_at": str(product.created_at),
            "updated_at": str(product.updated_at),
        }
        cache_service.set(self.CACHE_PREFIX, product.id, product_dict)
        return product_dict
    
    def _invalidate_cache(self, product_id: str) -> None:
        """Invalidate cache for a product."""
        cache_service.delete(self.CACHE_PREFIX, product_id)
