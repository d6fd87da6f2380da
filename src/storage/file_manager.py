# src/storage/file_manager.py

"""Handles cart persistence and product exports on disk."""

import csv
import json
import logging
from datetime import datetime
from pathlib import Path

from src.config.settings import Settings
from src.models.product import Product
from src.services.cart import Cart
from src.services.inventory_stats import round_half_up

logger = logging.getLogger("quickcart.storage")


class FileManager:
    """Handles saving carts and product exports to disk."""

    def __init__(self) -> None:
        self.results_dir: Path = Settings.RESULTS_DIR
        self.results_dir.mkdir(parents=True, exist_ok=True)
        logger.debug("FileManager initialised, results_dir=%s", self.results_dir)

    # ── Cart ─────────────────────────────────────────────

    def save_cart(self, cart: Cart, path: Path | None = None) -> Path:
        """Write *cart* to a JSON file (default ``Settings.CART_PATH``)."""
        filepath = path or Settings.CART_PATH
        filepath.parent.mkdir(parents=True, exist_ok=True)
        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(cart.to_dict(), f, ensure_ascii=False, indent=2)
        logger.debug(
            "Saved cart with %d lines to %s", len(cart), filepath,
        )
        return filepath

    def load_cart(self, path: Path | None = None) -> Cart:
        """Read a cart from disk; a missing or corrupt file is empty."""
        filepath = path or Settings.CART_PATH
        if not filepath.exists():
            return Cart()
        try:
            with open(filepath, encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as exc:
            logger.warning("Failed to read cart %s: %s", filepath, exc)
            return Cart()
        if not isinstance(data, dict):
            logger.warning("Ignoring malformed cart file %s", filepath)
            return Cart()
        return Cart.from_dict(data)

    # ── Product exports ──────────────────────────────────

    def export_csv(self, products: list[Product]) -> Path:
        """Export products to a timestamped CSV file sorted by name."""
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filepath = self.results_dir / f"products_{timestamp}.csv"

        sorted_products = sorted(products, key=lambda p: p.name.lower())

        with open(filepath, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(
                ["ID", "Name", "Price", "Stock", "Category", "Supplier"]
            )
            for p in sorted_products:
                writer.writerow(
                    [
                        p.id,
                        p.name,
                        f"{round_half_up(p.price):.2f}",
                        p.stock,
                        p.category,
                        p.supplier,
                    ]
                )

        logger.info("Exported %d products to %s", len(products), filepath)
        return filepath
