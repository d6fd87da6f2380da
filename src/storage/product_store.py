# src/storage/product_store.py

"""SQLite-backed product store with a server-side inventory aggregate."""

import json
import logging
import sqlite3
import uuid
from dataclasses import replace
from datetime import datetime
from pathlib import Path
from typing import Any, cast

from src.config.settings import Settings
from src.filters.product_validator import ProductValidator, ValidationError
from src.models.product import Product, ProductImage, product_from_dict

logger = logging.getLogger("quickcart.store")

_SCHEMA = """\
CREATE TABLE IF NOT EXISTS products (
    id          TEXT    PRIMARY KEY,
    name        TEXT    NOT NULL,
    description TEXT    NOT NULL DEFAULT '',
    price       REAL    NOT NULL CHECK (price >= 0),
    stock       INTEGER NOT NULL DEFAULT 0 CHECK (stock >= 0),
    category    TEXT    NOT NULL DEFAULT '',
    supplier    TEXT    NOT NULL DEFAULT '',
    images      TEXT    NOT NULL DEFAULT '[]',
    created_at  TEXT    NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_products_category
    ON products(category);
"""

_COLUMNS = (
    "id, name, description, price, stock, "
    "category, supplier, images, created_at"
)

# Fields a partial update may replace
_UPDATABLE: frozenset[str] = frozenset({
    "name", "description", "price", "stock",
    "category", "supplier", "images",
})

# ASCII whitespace, as stripped by str.strip() on stored values
_TRIM_CHARS = "char(32, 9, 10, 11, 12, 13)"

# Blank categories collapse into one bucket, matching Product.category_label
_AGGREGATE_SQL = f"""\
SELECT COUNT(id),
       COALESCE(SUM(stock), 0),
       AVG(price),
       COALESCE(SUM(price * stock), 0),
       COUNT(DISTINCT CASE WHEN TRIM(category, {_TRIM_CHARS}) = ''
                           THEN ? ELSE TRIM(category, {_TRIM_CHARS}) END)
FROM products
"""


def _encode_images(images: list[ProductImage]) -> str:
    return json.dumps([{"id": i.id, "url": i.url} for i in images])


def _decode_images(raw: str) -> list[ProductImage]:
    items = cast(list[dict[str, str]], json.loads(raw or "[]"))
    return [ProductImage(id=i["id"], url=i["url"]) for i in items]


def _strip_text_fields(product: Product) -> Product:
    """Copy of *product* with name, category and supplier trimmed."""
    return replace(
        product,
        name=product.name.strip(),
        category=product.category.strip(),
        supplier=product.supplier.strip(),
    )


def _row_to_product(row: tuple[Any, ...]) -> Product:
    return Product(
        id=row[0],
        name=row[1],
        description=row[2],
        price=row[3],
        stock=row[4],
        category=row[5],
        supplier=row[6],
        images=_decode_images(row[7]),
        created_at=datetime.fromisoformat(row[8]),
    )


class ProductStore:
    """SQLite-backed store for catalog products."""

    def __init__(
        self, db_path: Path | None = None,
    ) -> None:
        path = db_path or Settings.DB_PATH
        path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(
            str(path), check_same_thread=False,
        )
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.executescript(_SCHEMA)
        logger.debug("ProductStore opened at %s", path)

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()

    # ── Reads ────────────────────────────────────────────

    def list_products(self) -> list[Product]:
        """Return every product in insertion order."""
        rows = self._conn.execute(
            f"SELECT {_COLUMNS} FROM products ORDER BY rowid",
        ).fetchall()
        return [_row_to_product(r) for r in rows]

    def get_product(self, product_id: str) -> Product | None:
        """Return one product, or ``None`` if the id is unknown."""
        row = self._conn.execute(
            f"SELECT {_COLUMNS} FROM products WHERE id = ?",
            (product_id,),
        ).fetchone()
        return _row_to_product(row) if row else None

    def aggregate_inventory(self) -> dict[str, float | int | None]:
        """Compute raw (unrounded) inventory figures in SQL."""
        row = self._conn.execute(
            _AGGREGATE_SQL, (Settings.UNCATEGORIZED_LABEL,),
        ).fetchone()
        return {
            "totalProducts": row[0],
            "totalStock": row[1],
            "averagePrice": row[2],
            "totalValue": row[3],
            "categoryCount": row[4],
        }

    # ── Writes ───────────────────────────────────────────

    def insert(self, product: Product) -> Product:
        """Persist a new product; the store assigns id and timestamp.

        Raises ``ValidationError`` when the product is invalid.
        """
        ProductValidator.check(product)
        stored = replace(
            _strip_text_fields(product),
            id=uuid.uuid4().hex,
            images=list(product.images),
            created_at=product.created_at or datetime.now(),
        )
        self._conn.execute(
            f"INSERT INTO products ({_COLUMNS}) "
            "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
            (
                stored.id,
                stored.name,
                stored.description,
                stored.price,
                stored.stock,
                stored.category,
                stored.supplier,
                _encode_images(stored.images),
                cast(datetime, stored.created_at).isoformat(),
            ),
        )
        self._conn.commit()
        logger.info("Inserted product '%s' (%s)", stored.name, stored.id)
        return stored

    def update(
        self, product_id: str, changes: dict[str, Any],
    ) -> Product | None:
        """Replace the given fields of a product.

        Returns the updated product, or ``None`` if it does not exist.
        Raises ``ValidationError`` for unknown fields or when the
        result would break a product invariant.
        """
        unknown = set(changes) - _UPDATABLE
        if unknown:
            raise ValidationError(
                f"Cannot update field(s): {', '.join(sorted(unknown))}"
            )
        current = self.get_product(product_id)
        if current is None:
            logger.warning("Update skipped, product %s not found", product_id)
            return None

        merged = _strip_text_fields(
            Product(**{**current.__dict__, **changes})
        )
        ProductValidator.check(merged)
        self._conn.execute(
            "UPDATE products SET name = ?, description = ?, price = ?, "
            "stock = ?, category = ?, supplier = ?, images = ? "
            "WHERE id = ?",
            (
                merged.name,
                merged.description,
                merged.price,
                merged.stock,
                merged.category,
                merged.supplier,
                _encode_images(merged.images),
                product_id,
            ),
        )
        self._conn.commit()
        logger.info(
            "Updated product %s (fields: %s)",
            product_id,
            ", ".join(sorted(changes)),
        )
        return merged

    def delete(self, product_id: str) -> Product | None:
        """Delete a product and return it, or ``None`` if unknown.

        Releasing the product's image blobs is the caller's job.
        """
        product = self.get_product(product_id)
        if product is None:
            return None
        self._conn.execute(
            "DELETE FROM products WHERE id = ?", (product_id,),
        )
        self._conn.commit()
        logger.info("Deleted product '%s' (%s)", product.name, product_id)
        return product

    # ── Bulk import ──────────────────────────────────────

    def import_json(self, filepath: Path) -> int:
        """Import a JSON array of product objects.

        Invalid entries are dropped by the validator. Returns the
        number of products inserted.
        """
        try:
            with open(filepath, encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as exc:
            logger.warning("Failed to read %s: %s", filepath.name, exc)
            return 0

        if not isinstance(data, list):
            logger.warning("Expected a JSON array in %s", filepath.name)
            return 0

        items: list[object] = cast(list[object], data)
        products: list[Product] = []
        unreadable = 0
        for entry in items:
            if not isinstance(entry, dict):
                unreadable += 1
                continue
            try:
                products.append(
                    product_from_dict(cast(dict[str, Any], entry))
                )
            except (ValueError, TypeError) as exc:
                logger.debug("Dropped unreadable entry %r: %s", entry, exc)
                unreadable += 1
        if unreadable:
            logger.info(
                "Skipped %d unreadable entries in %s",
                unreadable,
                filepath.name,
            )

        valid, _dropped = ProductValidator.validate(products)
        for product in valid:
            self.insert(product)

        logger.info(
            "Imported %d products from %s", len(valid), filepath.name,
        )
        return len(valid)
