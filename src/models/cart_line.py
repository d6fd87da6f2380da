# src/models/cart_line.py

"""Cart line model: a product snapshot plus the quantity wanted."""

from dataclasses import dataclass

from src.models.product import Product


@dataclass
class CartLine:
    """A product the shopper intends to buy.

    ``product`` is a copy taken when the line was created, so later
    catalog edits do not leak into the cart until it is reconciled.
    """

    product: Product
    quantity: int = 1

    @property
    def line_total(self) -> float:
        """Unrounded price of this line."""
        return self.product.price * self.quantity
