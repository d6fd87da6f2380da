# src/filters/product_validator.py

"""Product and filter validation at the boundary of the catalog core."""

import logging
import math

from src.config.settings import Settings
from src.models.filter_spec import FilterSpec
from src.models.product import Product

logger = logging.getLogger("quickcart.filters")


class ValidationError(ValueError):
    """A product or filter field violates a catalog invariant."""


def _product_problem(product: Product) -> str | None:
    """Describe the first invariant the product breaks, if any."""
    if not product.name.strip():
        return "name must not be empty"
    if not math.isfinite(product.price) or product.price < 0:
        return f"price must be a number >= 0 (got {product.price})"
    if product.stock < 0:
        return f"stock must be >= 0 (got {product.stock})"
    if len(product.images) > Settings.MAX_PRODUCT_IMAGES:
        return (
            f"at most {Settings.MAX_PRODUCT_IMAGES} images allowed "
            f"(got {len(product.images)})"
        )
    return None


class ProductValidator:
    """Validate products before they enter the store or the core."""

    @staticmethod
    def check(product: Product) -> None:
        """Raise :class:`ValidationError` if *product* is invalid."""
        problem = _product_problem(product)
        if problem is not None:
            raise ValidationError(
                f"Invalid product '{product.name}': {problem}"
            )

    @staticmethod
    def validate(
        products: list[Product],
    ) -> tuple[list[Product], int]:
        """Drop products that break an invariant.

        Returns the valid products and the count of dropped items.
        """
        valid: list[Product] = []
        dropped = 0

        for product in products:
            problem = _product_problem(product)
            if problem is not None:
                logger.debug(
                    "Dropped product (id=%s, name=%s): %s",
                    product.id,
                    product.name,
                    problem,
                )
                dropped += 1
                continue
            valid.append(product)

        if dropped:
            logger.info(
                "Validation dropped %d invalid products",
                dropped,
            )

        return valid, dropped


def validate_filter_spec(spec: FilterSpec) -> None:
    """Raise :class:`ValidationError` for an unusable filter spec."""
    if spec.page_size < 1:
        raise ValidationError(
            f"page_size must be >= 1 (got {spec.page_size})"
        )
    if spec.page_number < 1:
        raise ValidationError(
            f"page_number must be >= 1 (got {spec.page_number})"
        )
    if spec.min_stock < 0:
        raise ValidationError(
            f"min_stock must be >= 0 (got {spec.min_stock})"
        )
    if spec.price_min < 0:
        raise ValidationError(
            f"price_min must be >= 0 (got {spec.price_min})"
        )
    if spec.price_max is not None and spec.price_max < spec.price_min:
        raise ValidationError(
            f"price_max ({spec.price_max}) is below "
            f"price_min ({spec.price_min})"
        )
