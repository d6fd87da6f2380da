# src/filters/catalog_view.py

"""Catalog filtering, sorting and pagination over an in-memory snapshot.

The view is a pure function of ``(products, FilterSpec)``:

1. Filter: name substring (case-insensitive), inclusive price range,
   minimum stock (only when > 0) and exact category label (only when
   a category is selected). Predicates are AND-combined.
2. Sort: stable, so products with equal keys keep their store order.
3. Paginate: ``total_pages`` is at least 1 and out-of-range pages come
   back empty instead of raising.

The category list is taken from the *unfiltered* input so the selector
always offers every known category.
"""

import logging
import math
import unicodedata
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

from src.filters.product_validator import validate_filter_spec
from src.models.filter_spec import FilterSpec, SortKey
from src.models.product import Product

logger = logging.getLogger("quickcart.catalog")


@dataclass
class CatalogView:
    """One rendered catalog page plus the data the controls need."""

    page: list[Product] = field(
        default_factory=lambda: list[Product]()
    )
    total_pages: int = 1
    categories: list[str] = field(
        default_factory=lambda: list[str]()
    )
    total_matches: int = 0
    page_number: int = 1


def _name_key(product: Product) -> str:
    """Collation key for name sorting (accent/case insensitive)."""
    decomposed = unicodedata.normalize("NFKD", product.name)
    stripped = "".join(
        ch for ch in decomposed if not unicodedata.combining(ch)
    )
    return stripped.casefold()


# sort key -> (key function, descending)
_SORTERS: dict[SortKey, tuple[Callable[[Product], Any], bool]] = {
    SortKey.PRICE_ASC: (lambda p: p.price, False),
    SortKey.PRICE_DESC: (lambda p: p.price, True),
    SortKey.NAME_ASC: (_name_key, False),
    SortKey.NAME_DESC: (_name_key, True),
    SortKey.STOCK_DESC: (lambda p: p.stock, True),
}


def matches_filters(product: Product, spec: FilterSpec) -> bool:
    """Return True when *product* passes every predicate of *spec*."""
    if spec.name_substring:
        if spec.name_substring.lower() not in product.name.lower():
            return False
    if product.price < spec.price_min:
        return False
    if spec.price_max is not None and product.price > spec.price_max:
        return False
    if spec.min_stock > 0 and product.stock < spec.min_stock:
        return False
    if spec.category and product.category_label != spec.category:
        return False
    return True


def filter_products(
    products: Sequence[Product], spec: FilterSpec,
) -> list[Product]:
    """Keep the products matching *spec*, preserving input order."""
    return [p for p in products if matches_filters(p, spec)]


def sort_products(
    products: list[Product], sort_key: SortKey,
) -> list[Product]:
    """Return a stably sorted copy of *products*."""
    if sort_key is SortKey.NONE:
        return list(products)
    key_fn, descending = _SORTERS[sort_key]
    # sorted() stays stable with reverse=True
    return sorted(products, key=key_fn, reverse=descending)


def total_pages_for(match_count: int, page_size: int) -> int:
    """Number of pages for *match_count* items; never less than 1."""
    return max(1, math.ceil(match_count / page_size))


def paginate(
    products: list[Product], page_number: int, page_size: int,
) -> list[Product]:
    """Slice one 1-based page; out-of-range pages are empty."""
    start = (page_number - 1) * page_size
    if start < 0 or start >= len(products):
        return []
    return products[start:start + page_size]


def collect_categories(products: Sequence[Product]) -> list[str]:
    """Distinct category labels, sorted for a stable selector order."""
    return sorted({p.category_label for p in products})


def apply_catalog_view(
    products: Sequence[Product], spec: FilterSpec,
) -> CatalogView:
    """Filter, sort and paginate *products* according to *spec*.

    Raises ``ValidationError`` if the filter spec itself is invalid.
    """
    validate_filter_spec(spec)

    filtered = filter_products(products, spec)
    ordered = sort_products(filtered, spec.sort_key)
    total_pages = total_pages_for(len(ordered), spec.page_size)
    page = paginate(ordered, spec.page_number, spec.page_size)

    logger.debug(
        "Catalog view: %d/%d products match, page %d/%d (%d shown)",
        len(ordered),
        len(products),
        spec.page_number,
        total_pages,
        len(page),
    )

    return CatalogView(
        page=page,
        total_pages=total_pages,
        categories=collect_categories(products),
        total_matches=len(ordered),
        page_number=spec.page_number,
    )
