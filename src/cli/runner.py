# src/cli/runner.py

"""Headless CLI commands over the catalog, cart, reports and suppliers."""

import json
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table

from src.config.settings import Settings
from src.filters.product_validator import ValidationError
from src.models.filter_spec import FilterSpec
from src.models.product import Product, product_to_dict
from src.services.cart import Cart, CartStatus
from src.services.catalog_service import CatalogService
from src.services.inventory_stats import (
    low_stock_products,
    monthly_stock_trend,
    stock_level_breakdown,
)
from src.services.product_manager import ProductManager
from src.services.report_builder import build_supplier_report, format_currency
from src.services.supplier_service import generate_purchase_order
from src.storage.blob_store import LocalBlobStore
from src.storage.file_manager import FileManager
from src.storage.product_store import ProductStore
from src.storage.report_exporter import export_report
from src.storage.supplier_store import SupplierStore

logger = logging.getLogger("quickcart.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)


def _stock_style(stock: int) -> str:
    """Colour used for a stock figure (mirrors the storefront badges)."""
    if stock >= Settings.LOW_STOCK_THRESHOLD:
        return "green"
    if stock > 0:
        return "yellow"
    return "red"


def _products_table(products: list[Product], title: str) -> Table:
    """Build a Rich table of products."""
    table = Table(
        title=title,
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("ID", style="dim", overflow="fold")
    table.add_column("Name", max_width=40)
    table.add_column("Price", justify="right", style="green")
    table.add_column("Stock", justify="right")
    table.add_column("Category", style="magenta")
    table.add_column("Supplier")

    for p in products:
        stock_text = (
            f"{p.stock} in stock" if p.stock > 0 else "Out of stock"
        )
        table.add_row(
            p.id,
            p.name,
            format_currency(p.price),
            f"[{_stock_style(p.stock)}]{stock_text}[/]",
            p.category_label,
            p.supplier or "—",
        )
    return table


def run_catalog(
    spec: FilterSpec,
    output_format: str = "table",
    store: ProductStore | None = None,
) -> int:
    """Print one catalog page; exit code 1 on a rejected filter."""
    service = CatalogService(store)
    result = service.catalog_view(spec)

    for error_msg in result.errors:
        _err.print(f"[red]Error: {error_msg}[/red]")
    if result.rejected:
        return 1

    view = result.view
    if output_format == "json":
        json.dump(
            {
                "page": [product_to_dict(p) for p in view.page],
                "pageNumber": view.page_number,
                "totalPages": view.total_pages,
                "totalMatches": view.total_matches,
                "categories": view.categories,
            },
            sys.stdout,
            ensure_ascii=False,
            indent=2,
        )
        sys.stdout.write("\n")
        return 0

    if not view.page:
        _err.print(
            "[yellow]No products found. Try adjusting your filters.[/yellow]"
        )
    else:
        Console().print(_products_table(view.page, "Catalog"))
    _err.print(
        f"[dim]Page {view.page_number} of {view.total_pages}"
        f" · {view.total_matches} matching products"
        f" · categories: {', '.join(view.categories) or '—'}[/dim]"
    )
    return 0


def run_stats(store: ProductStore | None = None) -> int:
    """Print inventory statistics and stock-level breakdowns."""
    service = CatalogService(store)
    summary, errors = service.inventory_summary()
    products, fetch_errors = service.fetch_products()
    for error_msg in errors + fetch_errors:
        _err.print(f"[red]Error: {error_msg}[/red]")

    table = Table(title="Inventory Stats", title_style="bold cyan")
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")
    table.add_row("Total Products", str(summary.total_products))
    table.add_row("Total Stock", str(summary.total_stock))
    table.add_row("Avg. Price", format_currency(summary.average_price))
    table.add_row("Inventory Value", format_currency(summary.total_value))
    table.add_row("Categories", str(summary.category_count))

    levels = stock_level_breakdown(products)
    table.add_row("Out of Stock", f"[red]{levels.out_of_stock}[/red]")
    table.add_row(
        f"Low (1-{Settings.LOW_STOCK_THRESHOLD - 1})",
        f"[yellow]{levels.low}[/yellow]",
    )
    table.add_row("Healthy", f"[green]{levels.healthy}[/green]")
    Console().print(table)

    trend = monthly_stock_trend(products)
    if trend:
        trend_table = Table(title="Stock Over Time", title_style="bold cyan")
        trend_table.add_column("Month")
        trend_table.add_column("Total Stock", justify="right")
        for month, total in trend:
            trend_table.add_row(month, str(total))
        Console().print(trend_table)
    return 1 if errors else 0


def run_low_stock(
    threshold: int = Settings.LOW_STOCK_THRESHOLD,
    store: ProductStore | None = None,
) -> int:
    """List products below the stock threshold."""
    products, errors = CatalogService(store).fetch_products()
    for error_msg in errors:
        _err.print(f"[red]Error: {error_msg}[/red]")
    low = low_stock_products(products, threshold)
    if not low:
        _err.print(f"[green]✓ No products below {threshold} units[/green]")
        return 0
    Console().print(_products_table(low, f"Stock below {threshold}"))
    return 0


def run_report(
    open_browser: bool = False,
    store: ProductStore | None = None,
) -> int:
    """Build and export the inventory report."""
    report, errors = CatalogService(store).inventory_report()
    for error_msg in errors:
        _err.print(f"[red]Error: {error_msg}[/red]")
    try:
        path = export_report(report, "inventory", open_browser=open_browser)
    except OSError as exc:
        logger.error("Report export failed: %s", exc, exc_info=True)
        _err.print(f"[red]Report export failed: {exc}[/red]")
        return 1
    _err.print(f"[green]✓ Report saved → {path}[/green]")
    return 0


def run_import(filepath: Path, store: ProductStore | None = None) -> int:
    """Import products from a JSON file."""
    target = store or ProductStore()
    if not filepath.exists():
        _err.print(f"[red]File not found: {filepath}[/red]")
        return 1
    count = target.import_json(filepath)
    _err.print(f"[green]✓ Imported {count} products[/green]")
    return 0


def run_delete(product_id: str, store: ProductStore | None = None) -> int:
    """Delete a product and its images."""
    manager = ProductManager(store or ProductStore(), LocalBlobStore())
    if not manager.delete_product(product_id):
        _err.print(f"[red]Product not found: {product_id}[/red]")
        return 1
    _err.print("[green]✓ Product deleted successfully[/green]")
    return 0


def run_export_csv(store: ProductStore | None = None) -> int:
    """Export the full catalog to CSV."""
    products, errors = CatalogService(store).fetch_products()
    if errors:
        for error_msg in errors:
            _err.print(f"[red]Error: {error_msg}[/red]")
        return 1
    path = FileManager().export_csv(products)
    _err.print(f"[green]✓ Exported {len(products)} products → {path}[/green]")
    return 0


def _print_cart(cart: Cart) -> None:
    """Render the cart lines and totals."""
    if not len(cart):
        _err.print("[yellow]Your cart is empty.[/yellow]")
        return
    table = Table(title="Cart", show_lines=True, title_style="bold cyan")
    table.add_column("ID", style="dim", overflow="fold")
    table.add_column("Product")
    table.add_column("Price", justify="right")
    table.add_column("Qty", justify="right")
    table.add_column("Line Total", justify="right", style="green")
    for line in cart.lines:
        note = (
            f" [yellow](only {line.product.stock} in stock)[/yellow]"
            if line.product.stock < Settings.LOW_STOCK_THRESHOLD
            else ""
        )
        table.add_row(
            line.product.id,
            line.product.name + note,
            format_currency(line.product.price),
            str(line.quantity),
            format_currency(line.line_total),
        )
    Console().print(table)
    _err.print(
        f"[bold]Subtotal ({cart.get_cart_item_count()} items):"
        f" {Settings.CURRENCY_LABEL} {cart.format_total()}[/bold]"
    )


def run_cart(
    action: str,
    product_id: str | None = None,
    quantity: int | None = None,
    store: ProductStore | None = None,
    cart_path: Path | None = None,
) -> int:
    """Apply one cart action and persist the cart."""
    files = FileManager()
    cart = files.load_cart(cart_path)
    service = CatalogService(store)

    products, errors = service.fetch_products()
    if not errors:
        cart.reconcile(products)

    status: CartStatus | None = None
    if action == "show":
        pass
    elif action == "clear":
        status = cart.clear_cart()
    elif product_id is None:
        _err.print(f"[red]'{action}' needs a product id[/red]")
        return 1
    elif action == "add":
        product = next((p for p in products if p.id == product_id), None)
        if product is None:
            _err.print(f"[red]Product not found: {product_id}[/red]")
            return 1
        status = cart.add_to_cart(product)
    elif action == "set":
        status = cart.update_quantity(product_id, quantity or 0)
    elif action == "remove":
        status = cart.remove_from_cart(product_id)
    else:
        _err.print(f"[red]Unknown cart action: {action}[/red]")
        return 1

    if status is not None:
        colour = "red" if status.rejected else "dim"
        _err.print(f"[{colour}]{status.value.replace('_', ' ')}[/{colour}]")

    files.save_cart(cart, cart_path)
    _print_cart(cart)
    return 1 if status is not None and status.rejected else 0


def run_suppliers(
    open_report: bool = False,
    supplier_store: SupplierStore | None = None,
) -> int:
    """List suppliers and export the supplier report."""
    suppliers = (supplier_store or SupplierStore()).list_suppliers()
    table = Table(title="Suppliers", show_lines=True, title_style="bold cyan")
    table.add_column("ID", style="dim", overflow="fold")
    table.add_column("Name")
    table.add_column("Email")
    table.add_column("Phone")
    table.add_column("Status", justify="center")
    for s in suppliers:
        table.add_row(
            s.id,
            s.name,
            s.email,
            s.phone or "—",
            "[green]Active[/green]" if s.is_active else "[red]Inactive[/red]",
        )
    Console().print(table)

    path = export_report(
        build_supplier_report(suppliers), "suppliers", open_browser=open_report,
    )
    _err.print(f"[dim]Supplier report → {path}[/dim]")
    return 0


def run_purchase_order(
    supplier_id: str,
    product_id: str,
    quantity: int,
    store: ProductStore | None = None,
    supplier_store: SupplierStore | None = None,
) -> int:
    """Generate a purchase order and print it as JSON."""
    supplier = (supplier_store or SupplierStore()).get_supplier(supplier_id)
    if supplier is None:
        _err.print(f"[red]Supplier not found: {supplier_id}[/red]")
        return 1
    product = (store or ProductStore()).get_product(product_id)
    if product is None:
        _err.print(f"[red]Product not found: {product_id}[/red]")
        return 1

    try:
        order = generate_purchase_order(supplier, product, quantity)
    except ValidationError as exc:
        _err.print(f"[red]{exc}[/red]")
        return 1

    json.dump(
        {
            "message": "Purchase order generated successfully",
            "purchaseOrder": {
                "supplier": order.supplier_id,
                "product": order.product_id,
                "quantity": order.quantity,
                "orderDate": order.order_date.isoformat(),
                "status": order.status,
            },
            "supplierEmail": supplier.email,
        },
        sys.stdout,
        indent=2,
    )
    sys.stdout.write("\n")
    return 0
