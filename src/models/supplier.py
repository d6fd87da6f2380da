# src/models/supplier.py

"""Supplier and purchase order models."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class SupplierAddress:
    """Postal address of a supplier; every part is optional."""

    street: str = ""
    city: str = ""
    state: str = ""
    country: str = ""
    postal_code: str = ""


@dataclass
class Supplier:
    """A vendor that supplies one or more catalog products."""

    name: str
    email: str
    phone: str = ""
    address: SupplierAddress = field(default_factory=SupplierAddress)
    products_supplied: list[str] = field(
        default_factory=lambda: list[str]()
    )
    is_active: bool = True
    id: str = ""
    created_at: datetime | None = None


@dataclass
class PurchaseOrder:
    """A restock request raised against a supplier."""

    supplier_id: str
    product_id: str
    quantity: int
    order_date: datetime
    status: str = "pending"
