# tests/test_catalog_view.py

"""Tests for catalog filtering, sorting and pagination."""

import unittest
from dataclasses import replace

from src.filters.catalog_view import (
    apply_catalog_view,
    filter_products,
    matches_filters,
    paginate,
    sort_products,
)
from src.filters.product_validator import ValidationError
from src.models.filter_spec import FilterSpec, SortKey
from src.models.product import Product


def _make_product(
    name: str,
    price: float = 10.0,
    stock: int = 5,
    category: str = "Grocery",
) -> Product:
    """Create a Product whose id is derived from its name."""
    return Product(
        name=name,
        price=price,
        stock=stock,
        category=category,
        id=name.lower().replace(" ", "-"),
    )


def _catalog() -> list[Product]:
    """A small mixed catalog in store order."""
    return [
        _make_product("Fresh Milk", 250.0, 20, "Dairy"),
        _make_product("Cheddar Cheese", 900.0, 3, "Dairy"),
        _make_product("Apple", 80.0, 0, "Fruit"),
        _make_product("banana", 40.0, 50, "Fruit"),
        _make_product("Brown Bread", 180.0, 12, "Bakery"),
        _make_product("Milk Powder", 1200.0, 7, ""),
    ]


class TestFilters(unittest.TestCase):
    """Predicate behaviour of matches_filters / filter_products."""

    def test_default_spec_keeps_everything(self) -> None:
        """No filters set means every product matches."""
        products = _catalog()
        self.assertEqual(filter_products(products, FilterSpec()), products)

    def test_name_is_case_insensitive_substring(self) -> None:
        """'MILK' matches both milk products."""
        kept = filter_products(_catalog(), FilterSpec(name_substring="MILK"))
        self.assertEqual(
            [p.name for p in kept], ["Fresh Milk", "Milk Powder"],
        )

    def test_price_bounds_are_inclusive(self) -> None:
        """Products exactly on either bound are kept."""
        spec = FilterSpec(price_min=80.0, price_max=250.0)
        kept = filter_products(_catalog(), spec)
        self.assertEqual(
            [p.name for p in kept], ["Fresh Milk", "Apple", "Brown Bread"],
        )

    def test_unbounded_max_price(self) -> None:
        """price_max=None places no upper limit."""
        kept = filter_products(_catalog(), FilterSpec(price_min=900.0))
        self.assertEqual(
            [p.name for p in kept], ["Cheddar Cheese", "Milk Powder"],
        )

    def test_min_stock_zero_keeps_out_of_stock(self) -> None:
        """min_stock=0 does not filter out zero-stock products."""
        apple = _make_product("Apple", stock=0)
        self.assertTrue(matches_filters(apple, FilterSpec(min_stock=0)))

    def test_min_stock_is_inclusive(self) -> None:
        """stock >= min_stock is kept."""
        kept = filter_products(_catalog(), FilterSpec(min_stock=12))
        self.assertEqual(
            [p.name for p in kept], ["Fresh Milk", "banana", "Brown Bread"],
        )

    def test_category_exact_match(self) -> None:
        """Only the selected category is kept."""
        kept = filter_products(_catalog(), FilterSpec(category="Fruit"))
        self.assertEqual([p.name for p in kept], ["Apple", "banana"])

    def test_category_is_not_substring(self) -> None:
        """A partial category name matches nothing."""
        self.assertEqual(
            filter_products(_catalog(), FilterSpec(category="Dair")), [],
        )

    def test_uncategorized_is_selectable(self) -> None:
        """Blank categories are reachable through their label."""
        kept = filter_products(
            _catalog(), FilterSpec(category="Uncategorized"),
        )
        self.assertEqual([p.name for p in kept], ["Milk Powder"])

    def test_predicates_are_and_combined(self) -> None:
        """Every predicate must hold."""
        spec = FilterSpec(
            name_substring="milk", price_max=500.0, category="Dairy",
        )
        kept = filter_products(_catalog(), spec)
        self.assertEqual([p.name for p in kept], ["Fresh Milk"])


class TestSorting(unittest.TestCase):
    """sort_products behaviour."""

    def test_none_preserves_order(self) -> None:
        """SortKey.NONE returns the input order."""
        products = _catalog()
        self.assertEqual(sort_products(products, SortKey.NONE), products)

    def test_price_ascending_and_descending(self) -> None:
        """Price sorts numerically in both directions."""
        asc = sort_products(_catalog(), SortKey.PRICE_ASC)
        desc = sort_products(_catalog(), SortKey.PRICE_DESC)
        self.assertEqual(
            [p.price for p in asc], [40.0, 80.0, 180.0, 250.0, 900.0, 1200.0],
        )
        self.assertEqual(
            [p.price for p in desc], [1200.0, 900.0, 250.0, 180.0, 80.0, 40.0],
        )

    def test_name_sort_ignores_case(self) -> None:
        """Lowercase 'banana' sorts between 'Apple' and 'Brown Bread'."""
        names = [p.name for p in sort_products(_catalog(), SortKey.NAME_ASC)]
        self.assertEqual(
            names,
            [
                "Apple",
                "banana",
                "Brown Bread",
                "Cheddar Cheese",
                "Fresh Milk",
                "Milk Powder",
            ],
        )

    def test_name_sort_ignores_accents(self) -> None:
        """Accented names collate with their base letters."""
        products = [
            _make_product("Éclair"),
            _make_product("Donut"),
            _make_product("Fudge"),
        ]
        names = [p.name for p in sort_products(products, SortKey.NAME_ASC)]
        self.assertEqual(names, ["Donut", "Éclair", "Fudge"])

    def test_name_descending(self) -> None:
        """NAME_DESC reverses the collation order."""
        names = [p.name for p in sort_products(_catalog(), SortKey.NAME_DESC)]
        self.assertEqual(names[0], "Milk Powder")
        self.assertEqual(names[-1], "Apple")

    def test_stock_descending(self) -> None:
        """STOCK_DESC puts the best-stocked product first."""
        stocks = [p.stock for p in sort_products(_catalog(), SortKey.STOCK_DESC)]
        self.assertEqual(stocks, [50, 20, 12, 7, 3, 0])

    def test_sort_is_stable_for_equal_keys(self) -> None:
        """Equal keys keep their pre-sort relative order, both ways."""
        products = [
            _make_product("First", price=5.0, stock=1),
            _make_product("Second", price=1.0, stock=1),
            _make_product("Third", price=5.0, stock=1),
            _make_product("Fourth", price=1.0, stock=1),
        ]
        asc = [p.name for p in sort_products(products, SortKey.PRICE_ASC)]
        desc = [p.name for p in sort_products(products, SortKey.PRICE_DESC)]
        by_stock = [
            p.name for p in sort_products(products, SortKey.STOCK_DESC)
        ]
        self.assertEqual(asc, ["Second", "Fourth", "First", "Third"])
        self.assertEqual(desc, ["First", "Third", "Second", "Fourth"])
        self.assertEqual(by_stock, ["First", "Second", "Third", "Fourth"])

    def test_sort_does_not_mutate_input(self) -> None:
        """The caller's list keeps its order."""
        products = _catalog()
        before = list(products)
        sort_products(products, SortKey.PRICE_DESC)
        self.assertEqual(products, before)


class TestPagination(unittest.TestCase):
    """paginate and total page behaviour via apply_catalog_view."""

    def _ten(self) -> list[Product]:
        return [_make_product(f"Item {n}", price=float(n)) for n in range(10)]

    def test_ten_items_page_size_four(self) -> None:
        """10 matches at 4 per page: 3 pages, last holds 2."""
        products = self._ten()
        view = apply_catalog_view(
            products, FilterSpec(page_size=4, page_number=3),
        )
        self.assertEqual(view.total_pages, 3)
        self.assertEqual(len(view.page), 2)
        self.assertEqual([p.name for p in view.page], ["Item 8", "Item 9"])

    def test_exact_multiple(self) -> None:
        """8 matches at 4 per page is exactly 2 pages."""
        view = apply_catalog_view(self._ten()[:8], FilterSpec(page_size=4))
        self.assertEqual(view.total_pages, 2)

    def test_no_matches_is_one_empty_page(self) -> None:
        """Zero matches still reports page 1 of 1."""
        view = apply_catalog_view(
            self._ten(), FilterSpec(name_substring="nothing"),
        )
        self.assertEqual(view.total_pages, 1)
        self.assertEqual(view.page, [])
        self.assertEqual(view.total_matches, 0)

    def test_empty_catalog(self) -> None:
        """An empty product list is valid input."""
        view = apply_catalog_view([], FilterSpec())
        self.assertEqual(view.total_pages, 1)
        self.assertEqual(view.page, [])
        self.assertEqual(view.categories, [])

    def test_out_of_range_page_is_empty(self) -> None:
        """Asking past the last page returns no items, no error."""
        view = apply_catalog_view(
            self._ten(), FilterSpec(page_size=4, page_number=9),
        )
        self.assertEqual(view.page, [])
        self.assertEqual(view.total_pages, 3)

    def test_paginate_slices(self) -> None:
        """paginate returns the requested 1-based slice."""
        items = self._ten()
        self.assertEqual(paginate(items, 1, 3), items[0:3])
        self.assertEqual(paginate(items, 4, 3), items[9:10])
        self.assertEqual(paginate(items, 5, 3), [])


class TestApplyCatalogView(unittest.TestCase):
    """End-to-end view properties."""

    def test_page_products_satisfy_filters(self) -> None:
        """Every product on the page passes the filter predicates."""
        spec = FilterSpec(
            price_min=50.0, min_stock=1, sort_key=SortKey.PRICE_ASC,
            page_size=2,
        )
        for page in (1, 2, 3):
            view = apply_catalog_view(
                _catalog(), replace(spec, page_number=page),
            )
            for product in view.page:
                self.assertTrue(matches_filters(product, spec))

    def test_categories_come_from_unfiltered_list(self) -> None:
        """Categories of excluded products are still offered."""
        view = apply_catalog_view(_catalog(), FilterSpec(category="Dairy"))
        self.assertEqual(
            view.categories, ["Bakery", "Dairy", "Fruit", "Uncategorized"],
        )
        self.assertTrue(all(p.category == "Dairy" for p in view.page))

    def test_filter_then_sort_then_page(self) -> None:
        """Sorting applies to the filtered set before slicing."""
        view = apply_catalog_view(
            _catalog(),
            FilterSpec(
                category="Dairy", sort_key=SortKey.PRICE_DESC, page_size=1,
            ),
        )
        self.assertEqual([p.name for p in view.page], ["Cheddar Cheese"])
        self.assertEqual(view.total_pages, 2)
        self.assertEqual(view.total_matches, 2)

    def test_deterministic(self) -> None:
        """Repeated calls give identical results."""
        spec = FilterSpec(sort_key=SortKey.NAME_ASC, page_size=3)
        first = apply_catalog_view(_catalog(), spec)
        second = apply_catalog_view(_catalog(), spec)
        self.assertEqual(first, second)

    def test_invalid_spec_raises_validation_error(self) -> None:
        """A non-positive page size is rejected."""
        with self.assertRaises(ValidationError):
            apply_catalog_view(_catalog(), FilterSpec(page_size=0))


if __name__ == "__main__":
    unittest.main()
