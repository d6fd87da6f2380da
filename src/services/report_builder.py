# src/services/report_builder.py

"""Build renderer-independent report models for inventory and suppliers."""

import logging
from collections.abc import Sequence
from datetime import datetime

from src.config.settings import Settings
from src.models.inventory_summary import InventorySummary
from src.models.product import Product
from src.models.report_model import (
    CategoryBucket,
    ReportHeader,
    ReportModel,
    ReportRow,
    SummaryCard,
)
from src.models.supplier import Supplier
from src.services.inventory_stats import category_histogram, round_half_up

logger = logging.getLogger("quickcart.reports")

PRODUCT_COLUMNS = ["Name", "Price", "Stock", "Category", "Supplier"]
SUPPLIER_COLUMNS = ["Name", "Email", "Phone", "Status"]

NO_PRODUCTS_MESSAGE = "No products available to display."
NO_SUPPLIERS_MESSAGE = "No suppliers available to display."


def format_currency(value: float) -> str:
    """Format an amount with the configured label and two decimals.

    Rounds half-up like the inventory summary, so 2.675 shows as 2.68.
    """
    return f"{Settings.CURRENCY_LABEL} {round_half_up(value):,.2f}"


def _summary_cards(summary: InventorySummary) -> list[SummaryCard]:
    return [
        SummaryCard(
            "Total Products",
            summary.total_products,
            str(summary.total_products),
        ),
        SummaryCard(
            "Total Stock",
            summary.total_stock,
            str(summary.total_stock),
        ),
        SummaryCard(
            "Inventory Value",
            summary.total_value,
            format_currency(summary.total_value),
        ),
        SummaryCard(
            "Avg. Price",
            summary.average_price,
            format_currency(summary.average_price),
        ),
        SummaryCard(
            "Categories Tracked",
            summary.category_count,
            str(summary.category_count),
        ),
    ]


def _histogram(products: Sequence[Product]) -> list[CategoryBucket]:
    counts = category_histogram(products)
    if not counts:
        return []
    largest = counts[0][1]
    return [
        CategoryBucket(
            category=label,
            count=count,
            bar_ratio=count / largest if largest else 0.0,
        )
        for label, count in counts
    ]


def _product_row(product: Product) -> ReportRow:
    return ReportRow(cells=[
        product.name or "-",
        format_currency(product.price),
        str(product.stock),
        product.category or "-",
        product.supplier or "-",
    ])


def _footer(generated_at: datetime) -> list[str]:
    return [
        f"© {generated_at.year} {Settings.STORE_NAME}"
        " - Inventory Management System",
        f"Report generated on {generated_at:%Y-%m-%d}",
    ]


def build_inventory_report(
    products: Sequence[Product],
    summary: InventorySummary,
    generated_at: datetime | None = None,
) -> ReportModel:
    """Assemble the inventory report model.

    With no products the summary cards read zero, the histogram is
    empty and the table holds a single placeholder row.
    """
    now = generated_at or datetime.now()
    histogram = _histogram(products)

    rows = [_product_row(p) for p in products]
    if not rows:
        rows = [ReportRow(cells=[NO_PRODUCTS_MESSAGE], placeholder=True)]

    report = ReportModel(
        header=ReportHeader(
            title=Settings.REPORT_TITLE,
            subtitle=Settings.REPORT_SUBTITLE,
            generated_at=now,
        ),
        columns=list(PRODUCT_COLUMNS),
        rows=rows,
        summary_cards=_summary_cards(summary),
        category_histogram=histogram,
        top_category=histogram[0].category if histogram else "N/A",
        footer=_footer(now),
    )
    logger.info(
        "Built inventory report: %d rows, %d categories",
        len(products),
        len(histogram),
    )
    return report


def build_supplier_report(
    suppliers: Sequence[Supplier],
    generated_at: datetime | None = None,
) -> ReportModel:
    """Assemble the supplier list report."""
    now = generated_at or datetime.now()
    rows = [
        ReportRow(cells=[
            s.name or "-",
            s.email or "-",
            s.phone or "-",
            "Active" if s.is_active else "Inactive",
        ])
        for s in suppliers
    ]
    if not rows:
        rows = [ReportRow(cells=[NO_SUPPLIERS_MESSAGE], placeholder=True)]

    return ReportModel(
        header=ReportHeader(
            title="Suppliers List",
            subtitle=Settings.STORE_NAME,
            generated_at=now,
        ),
        columns=list(SUPPLIER_COLUMNS),
        rows=rows,
        footer=[f"Total Suppliers: {len(suppliers)}"],
    )
