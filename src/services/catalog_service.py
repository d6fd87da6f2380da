# src/services/catalog_service.py

"""Read-side orchestration: store fetch, catalog view, stats and reports."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any

from src.filters.catalog_view import (
    CatalogView,
    apply_catalog_view,
    filter_products,
    total_pages_for,
)
from src.filters.product_validator import ValidationError
from src.models.filter_spec import FilterSpec
from src.models.inventory_summary import InventorySummary
from src.models.product import Product
from src.models.report_model import ReportModel
from src.services.inventory_stats import summary_from_aggregate
from src.services.report_builder import build_inventory_report
from src.storage.product_store import ProductStore

logger = logging.getLogger("quickcart.catalog")


@dataclass
class CatalogResult:
    """Catalog view plus any errors met while producing it."""

    view: CatalogView = field(default_factory=CatalogView)
    rejected: bool = False
    errors: list[str] = field(
        default_factory=lambda: list[str]()
    )


class CatalogService:
    """Single entry point between the product store and the views.

    A failing store read is logged and treated as an empty catalog so
    callers always get a renderable (possibly empty) result.
    """

    def __init__(self, store: ProductStore | None = None) -> None:
        self.store = store or ProductStore()

    def fetch_products(self) -> tuple[list[Product], list[str]]:
        """Load all products; failures degrade to an empty list."""
        try:
            return self.store.list_products(), []
        except Exception as exc:
            logger.error("Product fetch failed: %s", exc, exc_info=True)
            return [], [f"Product fetch failed: {exc}"]

    def catalog_view(self, spec: FilterSpec) -> CatalogResult:
        """Render one catalog page for *spec*."""
        products, errors = self.fetch_products()
        result = CatalogResult(errors=errors)
        try:
            result.view = apply_catalog_view(products, spec)
        except ValidationError as exc:
            logger.warning("Rejected filter spec %s: %s", spec, exc)
            result.errors.append(str(exc))
            result.rejected = True
        return result

    def inventory_summary(self) -> tuple[InventorySummary, list[str]]:
        """Aggregate stats from the store; zeroes if it cannot answer."""
        try:
            raw = self.store.aggregate_inventory()
        except Exception as exc:
            logger.error(
                "Inventory aggregation failed: %s", exc, exc_info=True,
            )
            return InventorySummary.empty(), [
                f"Inventory aggregation failed: {exc}"
            ]
        return summary_from_aggregate(raw), []

    def inventory_report(
        self, generated_at: datetime | None = None,
    ) -> tuple[ReportModel, list[str]]:
        """Build the inventory report from one products + stats read."""
        products, errors = self.fetch_products()
        summary, summary_errors = self.inventory_summary()
        errors.extend(summary_errors)
        report = build_inventory_report(
            products, summary, generated_at=generated_at,
        )
        return report, errors


class CatalogBrowser:
    """Holds a product snapshot and the current :class:`FilterSpec`.

    Any change that alters the matching set or the page size sends the
    view back to page 1, so it never points past the last page.
    """

    def __init__(
        self,
        products: Sequence[Product] = (),
        spec: FilterSpec | None = None,
    ) -> None:
        self._products: list[Product] = list(products)
        self.spec: FilterSpec = replace(spec or FilterSpec(), page_number=1)
        self._match_ids = self._matching_ids(self.spec)

    def _matching_ids(self, spec: FilterSpec) -> list[str]:
        return [p.id for p in filter_products(self._products, spec)]

    def load(self, products: Sequence[Product]) -> None:
        """Replace the product snapshot and return to page 1."""
        self._products = list(products)
        self._match_ids = self._matching_ids(self.spec)
        self.spec = replace(self.spec, page_number=1)

    def update_filters(self, **changes: Any) -> FilterSpec:
        """Apply FilterSpec field changes (``page_number`` excluded)."""
        if "page_number" in changes:
            raise ValueError("Use go_to_page() to change pages")
        new_spec = replace(self.spec, **changes)
        new_ids = self._matching_ids(new_spec)

        reset = (
            new_ids != self._match_ids
            or new_spec.page_size != self.spec.page_size
        )
        if reset:
            new_spec = replace(new_spec, page_number=1)
            logger.debug("Catalog matches changed, back to page 1")

        self.spec = new_spec
        self._match_ids = new_ids
        return self.spec

    def go_to_page(self, page_number: int) -> FilterSpec:
        """Move to *page_number*, clamped into the valid range."""
        last = total_pages_for(len(self._match_ids), max(1, self.spec.page_size))
        clamped = min(max(1, page_number), last)
        self.spec = replace(self.spec, page_number=clamped)
        return self.spec

    def view(self) -> CatalogView:
        """Render the current page."""
        return apply_catalog_view(self._products, self.spec)
