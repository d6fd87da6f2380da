# src/models/inventory_summary.py

"""Aggregate inventory statistics (derived, never stored)."""

from dataclasses import dataclass


@dataclass
class InventorySummary:
    """Summary statistics over the whole product collection."""

    total_products: int
    total_stock: int
    average_price: float
    total_value: float
    category_count: int

    @classmethod
    def empty(cls) -> "InventorySummary":
        """Summary of an empty catalog: every field is zero."""
        return cls(
            total_products=0,
            total_stock=0,
            average_price=0.0,
            total_value=0.0,
            category_count=0,
        )
