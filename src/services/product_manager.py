# src/services/product_manager.py

"""Product write path: create, update and delete with image handling."""

import logging
import sqlite3
from dataclasses import dataclass
from typing import Any

from src.config.settings import Settings
from src.filters.product_validator import ProductValidator, ValidationError
from src.models.product import Product, ProductImage
from src.storage.blob_store import BaseBlobStore
from src.storage.product_store import ProductStore

logger = logging.getLogger("quickcart.products")


@dataclass
class ImageUpload:
    """Raw image bytes submitted with a product form."""

    filename: str
    data: bytes
    mime_type: str


class ProductManager:
    """Coordinates the product store and the image blob store."""

    def __init__(
        self, store: ProductStore, blobs: BaseBlobStore,
    ) -> None:
        self.store = store
        self.blobs = blobs

    def _upload_all(
        self, uploads: list[ImageUpload],
    ) -> list[ProductImage]:
        """Upload each file, skipping the ones that fail.

        Raises ``ValidationError`` when uploads were given and none
        of them succeeded.
        """
        images: list[ProductImage] = []
        for upload in uploads:
            try:
                images.append(
                    self.blobs.upload(upload.data, upload.mime_type)
                )
            except (ValidationError, OSError) as exc:
                logger.error(
                    "Failed to upload %s: %s", upload.filename, exc,
                )
        if uploads and not images:
            raise ValidationError("All image uploads failed")
        return images

    @staticmethod
    def _check_image_count(count: int) -> None:
        if count > Settings.MAX_PRODUCT_IMAGES:
            raise ValidationError(
                f"A product can have at most "
                f"{Settings.MAX_PRODUCT_IMAGES} images (got {count})"
            )

    def _release(self, images: list[ProductImage]) -> None:
        """Delete blobs uploaded for a write that did not go through."""
        for image in images:
            try:
                self.blobs.delete(image.id)
            except (ValidationError, OSError) as exc:
                logger.error(
                    "Error releasing orphaned image %s: %s", image.id, exc,
                )

    def create_product(
        self,
        fields: dict[str, Any],
        uploads: list[ImageUpload] | None = None,
    ) -> Product:
        """Validate, upload images and insert a new product.

        The product fields are checked before any upload; if the insert
        still fails the freshly uploaded blobs are released.
        """
        files = uploads or []
        self._check_image_count(len(files))
        ProductValidator.check(Product(**{**fields, "images": []}))

        images = self._upload_all(files)
        try:
            return self.store.insert(Product(**{**fields, "images": images}))
        except (ValidationError, sqlite3.Error):
            self._release(images)
            raise

    def update_product(
        self,
        product_id: str,
        changes: dict[str, Any],
        uploads: list[ImageUpload] | None = None,
        existing_images: list[ProductImage] | None = None,
    ) -> Product | None:
        """Apply a partial update, optionally replacing the image list.

        New uploads are appended to *existing_images* when it is given
        and replace the image list otherwise. Passing only
        *existing_images* sets the list to exactly those images.
        Nothing is uploaded for an unknown product, and uploads are
        released when the store rejects the change.
        """
        files = uploads or []
        update = dict(changes)
        if not files:
            if existing_images is not None:
                self._check_image_count(len(existing_images))
                update["images"] = list(existing_images)
            return self.store.update(product_id, update)

        kept = existing_images or []
        self._check_image_count(len(kept) + len(files))
        if self.store.get_product(product_id) is None:
            logger.warning("Update skipped, product %s not found", product_id)
            return None

        uploaded = self._upload_all(files)
        update["images"] = kept + uploaded
        try:
            return self.store.update(product_id, update)
        except (ValidationError, sqlite3.Error):
            self._release(uploaded)
            raise

    def delete_product(self, product_id: str) -> bool:
        """Delete a product and release its image blobs.

        A blob that cannot be released is logged; the product is
        still deleted.
        """
        product = self.store.delete(product_id)
        if product is None:
            logger.warning("Delete skipped, product %s not found", product_id)
            return False

        for image in product.images:
            if not image.id:
                continue
            try:
                self.blobs.delete(image.id)
            except (ValidationError, OSError) as exc:
                logger.error(
                    "Error releasing image %s of product %s: %s",
                    image.id,
                    product_id,
                    exc,
                    exc_info=True,
                )
        return True
