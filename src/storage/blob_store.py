# src/storage/blob_store.py

"""Image blob storage used by the product write path."""

import logging
import mimetypes
import uuid
from abc import ABC, abstractmethod
from pathlib import Path

from src.config.settings import Settings
from src.filters.product_validator import ValidationError
from src.models.product import ProductImage

logger = logging.getLogger("quickcart.blobs")


def check_image_upload(data: bytes, mime_type: str) -> None:
    """Reject non-image or oversized uploads before storing them."""
    if not mime_type.startswith("image/"):
        raise ValidationError(
            f"Only image files are allowed (got {mime_type or 'unknown'})"
        )
    if len(data) > Settings.MAX_IMAGE_BYTES:
        raise ValidationError(
            f"Image exceeds {Settings.MAX_IMAGE_BYTES} bytes "
            f"({len(data)} bytes)"
        )


class BaseBlobStore(ABC):
    """Abstract blob store: ``upload`` returns an id + URL pair."""

    @abstractmethod
    def upload(self, data: bytes, mime_type: str) -> ProductImage:
        """Store *data* and return its id and public URL."""

    @abstractmethod
    def delete(self, image_id: str) -> None:
        """Release the blob with *image_id*."""


class LocalBlobStore(BaseBlobStore):
    """Blob store backed by a local directory."""

    def __init__(self, root: Path | None = None) -> None:
        self.root: Path = root or Settings.IMAGES_DIR
        self.root.mkdir(parents=True, exist_ok=True)
        logger.debug("LocalBlobStore initialised at %s", self.root)

    def _path_for(self, image_id: str) -> Path:
        # Ids are plain file names generated here; nothing may escape root
        if (
            image_id in {"", ".", ".."}
            or Path(image_id).name != image_id
            or "\\" in image_id
        ):
            raise ValidationError(f"Invalid image id: {image_id!r}")
        return self.root / image_id

    def upload(self, data: bytes, mime_type: str) -> ProductImage:
        check_image_upload(data, mime_type)
        extension = mimetypes.guess_extension(mime_type) or ".bin"
        image_id = f"{uuid.uuid4().hex}{extension}"
        path = self._path_for(image_id)
        path.write_bytes(data)
        logger.info("Stored image %s (%d bytes)", image_id, len(data))
        return ProductImage(id=image_id, url=path.resolve().as_uri())

    def delete(self, image_id: str) -> None:
        path = self._path_for(image_id)
        if not path.exists():
            logger.warning("Image %s already gone", image_id)
            return
        path.unlink()
        logger.info("Deleted image %s", image_id)
