# storefront/filters/product_validator.py

"""Field and uniqueness checks applied before any backend call."""

import logging
import math
from urllib.parse import urlparse

from storefront.config.settings import Settings
from storefront.errors import DuplicateError, ValidationError
from storefront.models.product import Product

logger = logging.getLogger("storefront.filters")


def is_well_formed_url(value: str) -> bool:
    """Return True for absolute http(s) URLs with a host."""
    parsed = urlparse(value.strip())
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


class ProductValidator:
    """Validate candidate products against the catalog rules."""

    @staticmethod
    def validate_fields(product: Product) -> None:
        """Raise ``ValidationError`` for blank or out-of-range fields."""
        problems: list[str] = []
        if not product.name.strip():
            problems.append("name is required")
        if not product.category.strip():
            problems.append("category is required")
        elif product.category not in Settings.CATEGORIES:
            problems.append(f"unknown category '{product.category}'")
        if not math.isfinite(product.price) or product.price <= 0:
            problems.append("price must be greater than 0")
        if product.stock < 0:
            problems.append("stock cannot be negative")
        if product.url and not is_well_formed_url(product.url):
            problems.append("url is not a valid http(s) URL")

        if problems:
            logger.debug(
                "Rejected candidate '%s': %s",
                product.name,
                "; ".join(problems),
            )
            raise ValidationError(
                "Please fill all required fields with valid values: "
                + "; ".join(problems)
            )

    @staticmethod
    def ensure_unique_name(
        product: Product,
        existing: list[Product],
        ignore_id: str | None = None,
    ) -> None:
        """Raise ``DuplicateError`` on a case-insensitive name clash.

        Records whose id equals *ignore_id* are skipped so that an
        update may keep its own name.
        """
        wanted = product.name.casefold()
        for other in existing:
            if ignore_id is not None and other.id == ignore_id:
                continue
            if other.name.casefold() == wanted:
                raise DuplicateError(
                    f'Duplicate entry: "{product.name}" already exists!'
                )
