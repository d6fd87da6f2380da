# src/storage/supplier_store.py

"""SQLite-backed supplier directory."""

import json
import logging
import re
import sqlite3
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any, cast

from src.config.settings import Settings
from src.filters.product_validator import ValidationError
from src.models.supplier import Supplier, SupplierAddress

logger = logging.getLogger("quickcart.suppliers")

_EMAIL_RE = re.compile(r"\S+@\S+\.\S+")

_SCHEMA = """\
CREATE TABLE IF NOT EXISTS suppliers (
    id                TEXT    PRIMARY KEY,
    name              TEXT    NOT NULL,
    email             TEXT    NOT NULL UNIQUE,
    phone             TEXT    NOT NULL DEFAULT '',
    street            TEXT    NOT NULL DEFAULT '',
    city              TEXT    NOT NULL DEFAULT '',
    state             TEXT    NOT NULL DEFAULT '',
    country           TEXT    NOT NULL DEFAULT '',
    postal_code       TEXT    NOT NULL DEFAULT '',
    products_supplied TEXT    NOT NULL DEFAULT '[]',
    is_active         INTEGER NOT NULL DEFAULT 1,
    created_at        TEXT    NOT NULL
);
"""

_COLUMNS = (
    "id, name, email, phone, street, city, state, country, "
    "postal_code, products_supplied, is_active, created_at"
)


def _normalise(supplier: Supplier) -> Supplier:
    """Trim fields, lowercase the email and check required values."""
    name = supplier.name.strip()
    email = supplier.email.strip().lower()
    if not name:
        raise ValidationError("Supplier name is required")
    if not _EMAIL_RE.fullmatch(email):
        raise ValidationError(f"Supplier email is invalid: {email!r}")
    return Supplier(
        id=supplier.id,
        name=name,
        email=email,
        phone=supplier.phone.strip(),
        address=supplier.address,
        products_supplied=list(supplier.products_supplied),
        is_active=supplier.is_active,
        created_at=supplier.created_at,
    )


def _row_to_supplier(row: tuple[Any, ...]) -> Supplier:
    return Supplier(
        id=row[0],
        name=row[1],
        email=row[2],
        phone=row[3],
        address=SupplierAddress(
            street=row[4],
            city=row[5],
            state=row[6],
            country=row[7],
            postal_code=row[8],
        ),
        products_supplied=cast(list[str], json.loads(row[9])),
        is_active=bool(row[10]),
        created_at=datetime.fromisoformat(row[11]),
    )


def _values(supplier: Supplier) -> tuple[Any, ...]:
    a = supplier.address
    return (
        supplier.id,
        supplier.name,
        supplier.email,
        supplier.phone,
        a.street,
        a.city,
        a.state,
        a.country,
        a.postal_code,
        json.dumps(supplier.products_supplied),
        int(supplier.is_active),
        cast(datetime, supplier.created_at).isoformat(),
    )


class SupplierStore:
    """SQLite-backed CRUD store for suppliers."""

    def __init__(
        self, db_path: Path | None = None,
    ) -> None:
        path = db_path or Settings.DB_PATH
        path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(
            str(path), check_same_thread=False,
        )
        self._conn.executescript(_SCHEMA)
        logger.debug("SupplierStore opened at %s", path)

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()

    def create(self, supplier: Supplier) -> Supplier:
        """Insert a supplier; raises ``ValidationError`` on bad input."""
        clean = _normalise(supplier)
        clean.id = uuid.uuid4().hex
        clean.created_at = clean.created_at or datetime.now()
        try:
            self._conn.execute(
                f"INSERT INTO suppliers ({_COLUMNS}) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                _values(clean),
            )
        except sqlite3.IntegrityError:
            raise ValidationError(
                f"A supplier with email {clean.email} already exists"
            ) from None
        self._conn.commit()
        logger.info("Created supplier '%s' (%s)", clean.name, clean.id)
        return clean

    def list_suppliers(self) -> list[Supplier]:
        """Return all suppliers ordered by name."""
        rows = self._conn.execute(
            f"SELECT {_COLUMNS} FROM suppliers ORDER BY name, rowid",
        ).fetchall()
        return [_row_to_supplier(r) for r in rows]

    def get_supplier(self, supplier_id: str) -> Supplier | None:
        """Return one supplier, or ``None`` if unknown."""
        row = self._conn.execute(
            f"SELECT {_COLUMNS} FROM suppliers WHERE id = ?",
            (supplier_id,),
        ).fetchone()
        return _row_to_supplier(row) if row else None

    def update(
        self, supplier_id: str, changes: dict[str, Any],
    ) -> Supplier | None:
        """Replace fields of a supplier; ``None`` if it does not exist."""
        current = self.get_supplier(supplier_id)
        if current is None:
            return None
        allowed = set(current.__dict__) - {"id", "created_at"}
        unknown = set(changes) - allowed
        if unknown:
            raise ValidationError(
                f"Cannot update field(s): {', '.join(sorted(unknown))}"
            )
        merged = _normalise(Supplier(**{**current.__dict__, **changes}))
        merged.id = supplier_id
        try:
            self._conn.execute(
                "DELETE FROM suppliers WHERE id = ?", (supplier_id,),
            )
            self._conn.execute(
                f"INSERT INTO suppliers ({_COLUMNS}) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                _values(merged),
            )
        except sqlite3.IntegrityError:
            self._conn.rollback()
            raise ValidationError(
                f"A supplier with email {merged.email} already exists"
            ) from None
        self._conn.commit()
        logger.info("Updated supplier %s", supplier_id)
        return merged

    def delete(self, supplier_id: str) -> bool:
        """Delete a supplier; returns False if it did not exist."""
        cur = self._conn.execute(
            "DELETE FROM suppliers WHERE id = ?", (supplier_id,),
        )
        self._conn.commit()
        if cur.rowcount == 0:
            logger.warning("Supplier %s not found for deletion", supplier_id)
            return False
        logger.info("Deleted supplier %s", supplier_id)
        return True
