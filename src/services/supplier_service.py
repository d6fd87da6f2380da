# src/services/supplier_service.py

"""Purchase order generation for restocking from suppliers."""

import logging
from datetime import datetime

from src.filters.product_validator import ValidationError
from src.models.product import Product
from src.models.supplier import PurchaseOrder, Supplier

logger = logging.getLogger("quickcart.suppliers")


def generate_purchase_order(
    supplier: Supplier,
    product: Product,
    quantity: int,
    order_date: datetime | None = None,
) -> PurchaseOrder:
    """Raise a pending purchase order for *quantity* units of *product*.

    Raises ``ValidationError`` if the supplier does not supply the
    product or the quantity is not positive.
    """
    if quantity < 1:
        raise ValidationError(
            f"Order quantity must be >= 1 (got {quantity})"
        )
    if product.id not in supplier.products_supplied:
        raise ValidationError(
            f"Supplier '{supplier.name}' does not provide "
            f"'{product.name}'"
        )

    order = PurchaseOrder(
        supplier_id=supplier.id,
        product_id=product.id,
        quantity=quantity,
        order_date=order_date or datetime.now(),
    )
    logger.info(
        "Purchase order generated for %s: %d x %s",
        supplier.name,
        quantity,
        product.name,
    )
    return order
