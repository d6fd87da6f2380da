# src/services/cart.py

"""Shopping cart owned by one browsing session.

The cart never raises for a refused change: every mutating call returns
a :class:`CartStatus` and a rejected call leaves the lines untouched.
Quantities are kept within ``1 <= quantity <= stock`` where ``stock``
is taken from the product snapshot stored on the line.
"""

import logging
from collections.abc import Iterable
from dataclasses import replace
from enum import Enum
from typing import Any

from src.models.cart_line import CartLine
from src.models.product import Product, product_from_dict, product_to_dict
from src.services.inventory_stats import round_half_up

logger = logging.getLogger("quickcart.cart")


class CartStatus(Enum):
    """Outcome of a cart operation."""

    ADDED = "added"
    INCREMENTED = "incremented"
    UPDATED = "updated"
    CLAMPED = "clamped"
    REMOVED = "removed"
    CLEARED = "cleared"
    NOT_FOUND = "not_found"
    REJECTED_OUT_OF_STOCK = "rejected_out_of_stock"
    REJECTED_AT_STOCK_LIMIT = "rejected_at_stock_limit"
    REJECTED_BELOW_MINIMUM = "rejected_below_minimum"

    @property
    def rejected(self) -> bool:
        """True for statuses that left the cart unchanged on purpose."""
        return self.name.startswith("REJECTED")


class Cart:
    """Client-local collection of cart lines keyed by product id."""

    def __init__(self) -> None:
        self._lines: dict[str, CartLine] = {}

    @property
    def lines(self) -> list[CartLine]:
        """Lines in the order products were first added."""
        return list(self._lines.values())

    def get_line(self, product_id: str) -> CartLine | None:
        """Return the line for *product_id*, if present."""
        return self._lines.get(product_id)

    def __len__(self) -> int:
        return len(self._lines)

    # ── Mutations ────────────────────────────────────────

    def add_to_cart(self, product: Product) -> CartStatus:
        """Add one unit of *product*, merging into an existing line."""
        line = self._lines.get(product.id)
        if line is not None:
            stock = line.product.stock
            if line.quantity >= stock:
                logger.info(
                    "Add rejected: '%s' already at stock limit (%d)",
                    product.name,
                    stock,
                )
                return CartStatus.REJECTED_AT_STOCK_LIMIT
            line.quantity = max(1, min(line.quantity + 1, stock))
            logger.debug(
                "Incremented '%s' to %d", product.name, line.quantity,
            )
            return CartStatus.INCREMENTED

        if product.stock <= 0:
            logger.info(
                "Add rejected: '%s' is out of stock", product.name,
            )
            return CartStatus.REJECTED_OUT_OF_STOCK

        self._lines[product.id] = CartLine(
            product=replace(product, images=list(product.images)),
            quantity=1,
        )
        logger.debug("Added '%s' to cart", product.name)
        return CartStatus.ADDED

    def update_quantity(
        self, product_id: str, quantity: int,
    ) -> CartStatus:
        """Set a line's quantity, clamped to the line's stock.

        Going below 1 is refused; use :meth:`remove_from_cart` instead.
        """
        line = self._lines.get(product_id)
        if line is None:
            return CartStatus.NOT_FOUND
        if quantity < 1:
            logger.info(
                "Quantity %d rejected for '%s' (minimum is 1)",
                quantity,
                line.product.name,
            )
            return CartStatus.REJECTED_BELOW_MINIMUM

        stock = line.product.stock
        if quantity > stock:
            line.quantity = max(1, stock)
            logger.debug(
                "Clamped '%s' to stock %d (requested %d)",
                line.product.name,
                line.quantity,
                quantity,
            )
            return CartStatus.CLAMPED

        line.quantity = quantity
        return CartStatus.UPDATED

    def remove_from_cart(self, product_id: str) -> CartStatus:
        """Delete a line; unknown ids are a no-op."""
        if self._lines.pop(product_id, None) is None:
            return CartStatus.NOT_FOUND
        return CartStatus.REMOVED

    def clear_cart(self) -> CartStatus:
        """Remove every line."""
        self._lines.clear()
        return CartStatus.CLEARED

    def reconcile(self, products: Iterable[Product]) -> int:
        """Refresh line snapshots from current catalog data.

        Lines whose product disappeared or ran out of stock are
        dropped; the rest are re-clamped to the fresh stock.
        Returns the number of lines removed or changed.
        """
        current = {p.id: p for p in products}
        changed = 0
        for product_id in list(self._lines):
            line = self._lines[product_id]
            fresh = current.get(product_id)
            if fresh is None or fresh.stock <= 0:
                del self._lines[product_id]
                changed += 1
                continue
            quantity = min(line.quantity, fresh.stock)
            if quantity != line.quantity or fresh != line.product:
                changed += 1
            line.product = replace(fresh, images=list(fresh.images))
            line.quantity = quantity
        if changed:
            logger.info("Reconciled cart: %d lines updated", changed)
        return changed

    # ── Totals ───────────────────────────────────────────

    def get_cart_item_count(self) -> int:
        """Total units across all lines (badge count)."""
        return sum(line.quantity for line in self._lines.values())

    def get_cart_total(self) -> float:
        """Unrounded sum of price x quantity."""
        return sum(
            (line.line_total for line in self._lines.values()), 0.0,
        )

    def format_total(self) -> str:
        """Cart total rounded half-up to two decimals for display."""
        return f"{round_half_up(self.get_cart_total()):.2f}"

    # ── Persistence boundary ─────────────────────────────

    def to_dict(self) -> dict[str, Any]:
        """Serialise the cart to a JSON-friendly dict."""
        return {
            "lines": [
                {
                    "product": product_to_dict(line.product),
                    "quantity": line.quantity,
                }
                for line in self._lines.values()
            ],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Cart":
        """Rebuild a cart from :meth:`to_dict` output.

        Unreadable entries and entries without a product id or with a
        quantity below 1 are skipped; quantities above the stored stock
        are clamped.
        """
        cart = cls()
        lines = data.get("lines")
        if not isinstance(lines, list):
            return cart
        for entry in lines:
            if not isinstance(entry, dict):
                continue
            try:
                product = product_from_dict(entry.get("product") or {})
                quantity = int(entry.get("quantity", 0) or 0)
            except (ValueError, TypeError, AttributeError) as exc:
                logger.debug("Skipped unreadable cart entry: %s", exc)
                continue
            if not product.id or quantity < 1 or product.stock < 1:
                logger.debug("Skipped unusable cart entry: %s", entry)
                continue
            cart._lines[product.id] = CartLine(
                product=product,
                quantity=min(quantity, product.stock),
            )
        return cart
