# src/services/inventory_stats.py

"""Inventory aggregation shared by the dashboard, CLI and reports."""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from src.config.settings import Settings
from src.filters.product_validator import ValidationError
from src.models.inventory_summary import InventorySummary
from src.models.product import Product

logger = logging.getLogger("quickcart.stats")


def round_half_up(value: float, places: int = 2) -> float:
    """Round half away from zero (0.125 -> 0.13, unlike ``round``)."""
    quantum = Decimal(1).scaleb(-places)
    return float(
        Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    )


class _SummaryAccumulator:
    """Single-pass running totals for :func:`compute_inventory_summary`."""

    def __init__(self) -> None:
        self.count = 0
        self.stock = 0
        self.price_sum = 0.0
        self.value_sum = 0.0
        self.categories: set[str] = set()

    def add(self, product: Product) -> None:
        if product.price < 0:
            raise ValidationError(
                f"Negative price for '{product.name}': {product.price}"
            )
        if product.stock < 0:
            raise ValidationError(
                f"Negative stock for '{product.name}': {product.stock}"
            )
        self.count += 1
        self.stock += product.stock
        self.price_sum += product.price
        self.value_sum += product.price * product.stock
        self.categories.add(product.category_label)

    def finish(self) -> InventorySummary:
        if self.count == 0:
            return InventorySummary.empty()
        return InventorySummary(
            total_products=self.count,
            total_stock=self.stock,
            average_price=round_half_up(self.price_sum / self.count),
            total_value=round_half_up(self.value_sum),
            category_count=len(self.categories),
        )


def compute_inventory_summary(
    products: Iterable[Product],
) -> InventorySummary:
    """Compute the inventory summary in one pass over *products*.

    An empty input yields the all-zero summary. Negative prices or
    stock raise :class:`ValidationError`.
    """
    acc = _SummaryAccumulator()
    for product in products:
        acc.add(product)
    summary = acc.finish()
    logger.debug("Computed inventory summary: %s", summary)
    return summary


def summary_from_aggregate(
    raw: Mapping[str, float | int | None],
) -> InventorySummary:
    """Round a store-side aggregate into an :class:`InventorySummary`.

    *raw* carries the pre-rounding ``totalProducts``, ``totalStock``,
    ``averagePrice``, ``totalValue`` and ``categoryCount`` figures.
    """
    total_products = int(raw.get("totalProducts") or 0)
    if total_products == 0:
        return InventorySummary.empty()
    return InventorySummary(
        total_products=total_products,
        total_stock=int(raw.get("totalStock") or 0),
        average_price=round_half_up(float(raw.get("averagePrice") or 0)),
        total_value=round_half_up(float(raw.get("totalValue") or 0)),
        category_count=int(raw.get("categoryCount") or 0),
    )


def category_histogram(
    products: Iterable[Product],
) -> list[tuple[str, int]]:
    """Count products per category label, largest bucket first.

    Buckets with equal counts keep the order in which their category
    first appeared.
    """
    counts: dict[str, int] = {}
    for product in products:
        label = product.category_label
        counts[label] = counts.get(label, 0) + 1
    return sorted(counts.items(), key=lambda kv: kv[1], reverse=True)


@dataclass
class StockLevels:
    """Products bucketed by how much stock they have left."""

    out_of_stock: int = 0
    low: int = 0
    healthy: int = 0


def stock_level_breakdown(
    products: Iterable[Product],
    threshold: int = Settings.LOW_STOCK_THRESHOLD,
) -> StockLevels:
    """Bucket products into out of stock / low / healthy."""
    levels = StockLevels()
    for product in products:
        if product.stock <= 0:
            levels.out_of_stock += 1
        elif product.stock < threshold:
            levels.low += 1
        else:
            levels.healthy += 1
    return levels


def monthly_stock_trend(
    products: Iterable[Product],
) -> list[tuple[str, int]]:
    """Total stock grouped by ``YYYY-MM`` of creation, oldest first."""
    months: dict[str, int] = {}
    for product in products:
        if product.created_at is None:
            continue
        key = product.created_at.strftime("%Y-%m")
        months[key] = months.get(key, 0) + product.stock
    return sorted(months.items())


def low_stock_products(
    products: Iterable[Product],
    threshold: int = Settings.LOW_STOCK_THRESHOLD,
) -> list[Product]:
    """Products below *threshold*, lowest stock first."""
    return sorted(
        (p for p in products if p.stock < threshold),
        key=lambda p: p.stock,
    )
