# src/models/product.py

"""Product data model shared by the store, catalog view, cart and reports."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from src.config.settings import Settings


@dataclass
class ProductImage:
    """A stored product image: blob id plus its public URL."""

    id: str
    url: str


@dataclass
class Product:
    """Represents one sellable item in the grocery catalog."""

    name: str
    price: float
    stock: int = 0
    description: str = ""
    category: str = ""
    supplier: str = ""
    images: list[ProductImage] = field(
        default_factory=lambda: list[ProductImage]()
    )
    id: str = ""
    created_at: datetime | None = None

    @property
    def category_label(self) -> str:
        """Category used for grouping; blank categories share one label."""
        label = self.category.strip()
        return label or Settings.UNCATEGORIZED_LABEL


def product_to_dict(product: Product) -> dict[str, Any]:
    """Serialise a product to a JSON-friendly dict."""
    return {
        "id": product.id,
        "name": product.name,
        "description": product.description,
        "price": product.price,
        "stock": product.stock,
        "category": product.category,
        "supplier": product.supplier,
        "images": [
            {"id": img.id, "url": img.url} for img in product.images
        ],
        "createdAt": (
            product.created_at.isoformat()
            if product.created_at
            else None
        ),
    }


def product_from_dict(data: dict[str, Any]) -> Product:
    """Build a product from a dict produced by :func:`product_to_dict`.

    Also accepts the Mongo-style ``_id`` / ``public_id`` keys found in
    exports of the original storefront database.
    """
    raw_images = data.get("images") or []
    images = [
        ProductImage(
            id=str(img.get("id") or img.get("public_id") or ""),
            url=str(img.get("url", "")),
        )
        for img in raw_images
        if isinstance(img, dict)
    ]
    created_raw = data.get("createdAt") or data.get("created_at")
    created_at = (
        datetime.fromisoformat(str(created_raw).replace("Z", "+00:00"))
        if created_raw
        else None
    )
    return Product(
        id=str(data.get("id") or data.get("_id") or ""),
        name=str(data.get("name", "")),
        description=str(data.get("description", "") or ""),
        price=float(data.get("price", 0) or 0),
        stock=int(data.get("stock", 0) or 0),
        category=str(data.get("category", "") or ""),
        supplier=str(data.get("supplier", "") or ""),
        images=images,
        created_at=created_at,
    )
