# tests/test_main.py

"""Tests for CLI argument parsing in main.py."""

import unittest
from unittest.mock import patch

import main
from src.models.filter_spec import SortKey


class TestArgumentParsing(unittest.TestCase):
    """_build_parser and _spec_from_args."""

    def setUp(self) -> None:
        """Build a fresh parser."""
        self.parser = main._build_parser()

    def test_catalog_defaults(self) -> None:
        """Without flags the filter spec is the unfiltered first page."""
        args = self.parser.parse_args(["catalog"])
        spec = main._spec_from_args(args)
        self.assertEqual(spec.name_substring, "")
        self.assertIsNone(spec.price_max)
        self.assertIs(spec.sort_key, SortKey.NONE)
        self.assertEqual(spec.page_number, 1)

    def test_catalog_flags(self) -> None:
        """Every filter flag reaches the FilterSpec."""
        args = self.parser.parse_args([
            "catalog", "-n", "milk", "--min-price", "5", "--max-price",
            "50", "--min-stock", "2", "-c", "Dairy", "--sort",
            "price-desc", "--page-size", "4", "-p", "3",
        ])
        spec = main._spec_from_args(args)
        self.assertEqual(spec.name_substring, "milk")
        self.assertEqual(spec.price_min, 5.0)
        self.assertEqual(spec.price_max, 50.0)
        self.assertEqual(spec.min_stock, 2)
        self.assertEqual(spec.category, "Dairy")
        self.assertIs(spec.sort_key, SortKey.PRICE_DESC)
        self.assertEqual(spec.page_size, 4)
        self.assertEqual(spec.page_number, 3)

    def test_unknown_sort_rejected(self) -> None:
        """argparse refuses sort keys outside the enum."""
        with patch("sys.stderr"), self.assertRaises(SystemExit):
            self.parser.parse_args(["catalog", "--sort", "rating"])

    def test_page_size_limited_to_options(self) -> None:
        """--page-size only accepts the configured page sizes."""
        args = self.parser.parse_args(["catalog", "--page-size", "12"])
        self.assertEqual(main._spec_from_args(args).page_size, 12)
        with patch("sys.stderr"), self.assertRaises(SystemExit):
            self.parser.parse_args(["catalog", "--page-size", "7"])

    def test_cart_arguments(self) -> None:
        """Cart takes an action, product id and quantity."""
        args = self.parser.parse_args(["cart", "set", "abc", "3"])
        self.assertEqual(
            (args.action, args.product_id, args.quantity), ("set", "abc", 3),
        )


class TestDispatch(unittest.TestCase):
    """_dispatch routes commands to the runner."""

    def test_routes_catalog(self) -> None:
        """catalog calls run_catalog with the built spec."""
        args = main._build_parser().parse_args(["catalog", "-f", "json"])
        with patch("src.cli.runner.run_catalog", return_value=0) as run:
            self.assertEqual(main._dispatch(args), 0)
        spec, output_format = run.call_args.args
        self.assertEqual(output_format, "json")
        self.assertEqual(spec.page_number, 1)

    def test_routes_purchase_order(self) -> None:
        """purchase-order forwards its three positionals."""
        args = main._build_parser().parse_args(
            ["purchase-order", "s1", "p1", "7"],
        )
        with patch(
            "src.cli.runner.run_purchase_order", return_value=0,
        ) as run:
            main._dispatch(args)
        run.assert_called_once_with("s1", "p1", 7)


if __name__ == "__main__":
    unittest.main()
