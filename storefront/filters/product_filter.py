# storefront/filters/product_filter.py

"""Read-only catalog projections: search, category filter and sort."""

import logging
from dataclasses import dataclass

from storefront.models.product import Product

logger = logging.getLogger("storefront.filters")


@dataclass(frozen=True)
class ViewFilter:
    """Parameters of a derived product view.

    ``sort`` is one of ``price-asc``, ``price-desc``, ``name-asc``,
    ``name-desc`` or empty for insertion order.
    """

    search: str = ""
    category: str = ""
    sort: str = ""


class ProductFilter:
    """Build derived views without touching the base collection."""

    @staticmethod
    def apply(
        products: list[Product],
        view: ViewFilter,
    ) -> list[Product]:
        """Return the filtered, sorted projection of *products*.

        Sorting is stable, so ties keep their relative order.
        """
        needle = view.search.casefold()
        selected = [
            p for p in products
            if needle in p.name.casefold()
            and (not view.category or p.category == view.category)
        ]

        if view.sort == "price-asc":
            selected.sort(key=lambda p: p.price)
        elif view.sort == "price-desc":
            selected.sort(key=lambda p: p.price, reverse=True)
        elif view.sort == "name-asc":
            selected.sort(key=lambda p: p.name.casefold())
        elif view.sort == "name-desc":
            selected.sort(key=lambda p: p.name.casefold(), reverse=True)
        elif view.sort:
            logger.warning("Unknown sort key '%s', keeping order", view.sort)

        return selected

    @staticmethod
    def below_threshold(
        products: list[Product],
        threshold: int,
    ) -> list[Product]:
        """Products whose stock is strictly below *threshold*."""
        return [p for p in products if p.stock < threshold]
