# main.py

"""Entry point for the QuickCart inventory command line."""

import argparse
import logging
import sys
from pathlib import Path

from src.config.logging_config import setup_logging
from src.config.settings import Settings
from src.models.filter_spec import FilterSpec, SortKey

logger = logging.getLogger("quickcart.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    sort_keys = ", ".join(k.value for k in SortKey)

    parser = argparse.ArgumentParser(
        prog="quickcart",
        description="QuickCart grocery catalog and inventory tools.",
        epilog=f"Sort keys: {sort_keys}",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    catalog = commands.add_parser("catalog", help="Browse the catalog.")
    catalog.add_argument(
        "-n", "--name", default="", help="Name contains (case-insensitive).",
    )
    catalog.add_argument(
        "--min-price", type=float, default=0.0, help="Lowest price.",
    )
    catalog.add_argument(
        "--max-price", type=float, default=None, help="Highest price.",
    )
    catalog.add_argument(
        "--min-stock", type=int, default=0, help="Minimum units in stock.",
    )
    catalog.add_argument(
        "-c", "--category", default="", help="Exact category.",
    )
    catalog.add_argument(
        "--sort",
        choices=[k.value for k in SortKey],
        default=SortKey.NONE.value,
        help="Sort order (default: store order).",
    )
    catalog.add_argument(
        "--page-size",
        type=int,
        choices=Settings.PAGE_SIZE_OPTIONS,
        default=Settings.DEFAULT_PAGE_SIZE,
        help=f"Products per page (default: {Settings.DEFAULT_PAGE_SIZE}).",
    )
    catalog.add_argument(
        "-p", "--page", type=int, default=1, help="1-based page number.",
    )
    catalog.add_argument(
        "-f",
        "--format",
        choices=["json", "table"],
        default="table",
        dest="output_format",
        help="Output format (default: table).",
    )

    commands.add_parser("stats", help="Show inventory statistics.")

    low = commands.add_parser("low-stock", help="List low stock products.")
    low.add_argument(
        "--threshold",
        type=int,
        default=Settings.LOW_STOCK_THRESHOLD,
        help="Stock level considered low.",
    )

    report = commands.add_parser("report", help="Export the inventory report.")
    report.add_argument(
        "--open",
        action="store_true",
        default=False,
        dest="open_browser",
        help="Open the report in a browser.",
    )

    imp = commands.add_parser("import", help="Import products from JSON.")
    imp.add_argument("file", type=Path, help="JSON array of products.")

    delete = commands.add_parser("delete", help="Delete a product.")
    delete.add_argument("product_id")

    commands.add_parser("export-csv", help="Export the catalog to CSV.")

    cart = commands.add_parser("cart", help="Manage the shopping cart.")
    cart.add_argument(
        "action", choices=["show", "add", "set", "remove", "clear"],
    )
    cart.add_argument("product_id", nargs="?", default=None)
    cart.add_argument("quantity", nargs="?", type=int, default=None)

    suppliers = commands.add_parser(
        "suppliers", help="List suppliers and export their report.",
    )
    suppliers.add_argument(
        "--open",
        action="store_true",
        default=False,
        dest="open_browser",
        help="Open the supplier report in a browser.",
    )

    po = commands.add_parser(
        "purchase-order", help="Generate a purchase order.",
    )
    po.add_argument("supplier_id")
    po.add_argument("product_id")
    po.add_argument("quantity", type=int)

    return parser


def _spec_from_args(args: argparse.Namespace) -> FilterSpec:
    """Translate catalog flags into a FilterSpec."""
    return FilterSpec(
        name_substring=args.name,
        price_min=args.min_price,
        price_max=args.max_price,
        min_stock=args.min_stock,
        category=args.category,
        sort_key=SortKey.parse(args.sort),
        page_size=args.page_size,
        page_number=args.page,
    )


def _dispatch(args: argparse.Namespace) -> int:
    """Run the selected command and return its exit code."""
    from src.cli import runner

    if args.command == "catalog":
        return runner.run_catalog(_spec_from_args(args), args.output_format)
    if args.command == "stats":
        return runner.run_stats()
    if args.command == "low-stock":
        return runner.run_low_stock(args.threshold)
    if args.command == "report":
        return runner.run_report(args.open_browser)
    if args.command == "import":
        return runner.run_import(args.file)
    if args.command == "delete":
        return runner.run_delete(args.product_id)
    if args.command == "export-csv":
        return runner.run_export_csv()
    if args.command == "cart":
        return runner.run_cart(args.action, args.product_id, args.quantity)
    if args.command == "suppliers":
        return runner.run_suppliers(args.open_browser)
    return runner.run_purchase_order(
        args.supplier_id, args.product_id, args.quantity,
    )


def main() -> None:
    """Parse arguments and route to the matching command."""
    log_file = setup_logging()
    logger.info("quickcart starting, log file: %s", log_file)

    parser = _build_parser()
    args = parser.parse_args()

    try:
        exit_code = _dispatch(args)
    except Exception:
        logger.critical("Fatal error in '%s'", args.command, exc_info=True)
        raise
    finally:
        logger.info("quickcart '%s' finished", args.command)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
