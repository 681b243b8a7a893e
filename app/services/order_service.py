from datetime import datetime, timezone
from sqlalchemy.orm import Session, selectinload
from sqlalchemy.exc import SQLAlchemyError
from typing import Optional, List
import logging

from app.models.customer import Customer
from app.models.order import Order, OrderItem, OrderStatus
from app.schemas.order import OrderCreate
from app.services.exceptions import (
    ValidationError,
    NotFoundError,
    InsufficientStockError,
    InternalError,
)
from app.services.inventory_service import InventoryService
from app.services.product_service import ProductService

logger = logging.getLogger(__name__)


class OrderService:
    """
    Service class for order placement and status changes.

    PLACEMENT STRATEGY:
    ===================
    Placement runs in two phases:

    1. Validate everything: request shape, every product, every stock level.
       Nothing is written until all items pass.
    2. Commit in a single transaction: insert the order, then decrement
       each product's stock with a conditional UPDATE
       (quantity = quantity - n WHERE quantity >= n).

    If another placement consumed the stock between the check in phase 1
    and the UPDATE in phase 2, the UPDATE matches no row, the whole
    transaction is rolled back and the caller gets an insufficient-stock
    error. Two orders for the last unit can therefore never both succeed,
    and a failure at any point of the commit leaves neither the order nor
    any partial decrement behind.

    Cancelling an order does not return its units to stock.
    """

    def __init__(
        self,
        db: Session,
        catalog: ProductService = None,
        inventory: InventoryService = None
    ):
        self.db = db
        self.catalog = catalog or ProductService(db)
        self.inventory = inventory or InventoryService(db)

    def place_order(self, order_data: OrderCreate) -> Order:
        """
        Place a new order and take its items out of stock.

        Args:
            order_data: Customer, requested items and addresses

        Returns:
            Created order with line items and products loaded

        Raises:
            ValidationError: If the request is malformed
            NotFoundError: If a product or the customer doesn't exist
            InsufficientStockError: If any item asks for more than is in stock
            InternalError: If the store fails; nothing is persisted
        """
        items = self._validate_request(order_data)

        try:
            if order_data.customer_id is not None:
                if self.db.get(Customer, order_data.customer_id) is None:
                    raise NotFoundError(f"Customer with ID {order_data.customer_id} not found")

            line_items = []
            total_amount = 0.0
            staged = {}
            names = {}

            for product_id, quantity in items:
                product = self.catalog.get_by_id(product_id)
                if not product:
                    raise NotFoundError(f"Product with ID {product_id} not found")

                # Units already claimed by earlier lines for the same product
                available = self.inventory.get_quantity(product.id) - staged.get(product.id, 0)
                if quantity > available:
                    raise InsufficientStockError(
                        f"Insufficient stock for product: {product.name}. "
                        f"Requested: {quantity}, Available: {max(available, 0)}"
                    )

                line_items.append(
                    OrderItem(
                        position=len(line_items),
                        product_id=product.id,
                        quantity=quantity,
                        price_per_unit=product.price,
                    )
                )
                total_amount += product.price * quantity
                staged[product.id] = staged.get(product.id, 0) + quantity
                names[product.id] = product.name
        except (NotFoundError, InsufficientStockError) as e:
            self.db.rollback()
            logger.info(f"Order rejected: {e}")
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error validating order: {e}")
            raise InternalError(f"Failed to create order: {e}") from e

        order = Order(
            customer_id=order_data.customer_id,
            items=line_items,
            total_amount=total_amount,
            status=OrderStatus.PENDING,
            shipping_address=order_data.shipping_address,
            billing_address=order_data.billing_address or order_data.shipping_address,
            order_date=datetime.now(timezone.utc),
        )

        try:
            self.db.add(order)
            self.db.flush()

            for line in line_items:
                if not self.inventory.decrement_if_available(line.product_id, line.quantity):
                    raise InsufficientStockError(
                        f"Insufficient stock for product: {names[line.product_id]}. "
                        f"Requested: {line.quantity}, stock changed concurrently"
                    )

            self.db.commit()
        except InsufficientStockError as e:
            self.db.rollback()
            logger.warning(f"Order commit rolled back, stock taken by a concurrent order: {e}")
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Order commit rolled back after storage failure, no stock was deducted: {e}")
            raise InternalError(f"Failed to create order: {e}") from e

        logger.info(
            f"Order {order.id} created: {len(line_items)} item(s), total {total_amount:.2f}"
        )

        return self.get_order(order.id)

    def get_order(self, order_id: str) -> Optional[Order]:
        """Get an order by ID with line items, products and customer loaded."""
        return (
            self.db.query(Order)
            .options(
                selectinload(Order.items).selectinload(OrderItem.product),
                selectinload(Order.customer),
            )
            .filter(Order.id == order_id)
            .populate_existing()
            .first()
        )

    def get_orders(self, status: OrderStatus = None) -> List[Order]:
        """
        Get all orders, newest first.

        Args:
            status: Filter by order status

        Returns:
            List of orders with line items, products and customer loaded
        """
        query = self.db.query(Order).options(
            selectinload(Order.items).selectinload(OrderItem.product),
            selectinload(Order.customer),
        )

        if status:
            query = query.filter(Order.status == status)

        return query.order_by(Order.order_date.desc()).all()

    def update_status(self, order_id: str, status: str) -> Order:
        """
        Set an order's status.

        Any status may follow any other, including itself. Only the status
        column is written.

        Raises:
            ValidationError: If status is not one of the OrderStatus values
            NotFoundError: If the order doesn't exist
        """
        try:
            new_status = OrderStatus(status)
        except (ValueError, TypeError):
            valid = ", ".join(s.value for s in OrderStatus)
            raise ValidationError(
                f"Invalid status '{status}'. Valid statuses are: {valid}."
            )

        order = self.db.query(Order).filter(Order.id == order_id).first()

        if not order:
            raise NotFoundError(f"Order with ID {order_id} not found")

        previous = order.status
        order.status = new_status

        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error updating status of order {order_id}: {e}")
            raise InternalError(f"Failed to update order status: {e}") from e

        logger.info(f"Order {order_id} status changed: {previous.value} -> {new_status.value}")

        return self.get_order(order_id)

    def _validate_request(self, order_data: OrderCreate) -> list:
        """
        Check the request shape before any store is touched.

        Returns:
            List of (product_id, quantity) pairs in submission order
        """
        if not isinstance(order_data.items, list) or not order_data.items:
            raise ValidationError("Order items are required and must be a non-empty array.")

        if not isinstance(order_data.shipping_address, str) or not order_data.shipping_address.strip():
            raise ValidationError("Shipping address is required and must be a string.")

        if order_data.billing_address is not None and not isinstance(order_data.billing_address, str):
            raise ValidationError("Billing address must be a string.")

        if order_data.customer_id is not None and not isinstance(order_data.customer_id, str):
            raise ValidationError("customer_id must be a string.")

        items = []
        for index, item in enumerate(order_data.items):
            if not isinstance(item, dict):
                raise ValidationError(
                    f"Item {index} must be an object with product_id and quantity."
                )
            product_id = item.get("product_id")
            if not product_id:
                raise ValidationError(f"Missing product_id for item {index}.")
            if not isinstance(product_id, str):
                raise ValidationError(f"product_id for item {index} must be a string.")
            quantity = item.get("quantity")
            if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
                raise ValidationError(
                    f"Quantity for product {product_id} must be a positive integer."
                )
            items.append((product_id, quantity))

        return items
