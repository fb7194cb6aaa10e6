# storefront/services/product_store.py

"""In-memory product collection kept in sync with the backend."""

import asyncio
import logging
from dataclasses import replace
from datetime import datetime, timezone

from storefront.config.settings import Settings
from storefront.errors import (
    DuplicateError,
    RetrievalError,
    TransportError,
    ValidationError,
)
from storefront.filters.product_filter import ProductFilter, ViewFilter
from storefront.filters.product_validator import ProductValidator
from storefront.models.product import Product
from storefront.services.api_client import ProductRepositoryClient
from storefront.services.notifier import Notifier

logger = logging.getLogger("storefront.store")


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def low_stock_key(product: Product) -> str:
    """Notification key used to deduplicate low-stock alerts."""
    return f"low-stock-{product.id}"


class ProductStore:
    """Authoritative client-side product list.

    The collection is only changed by ``load``, ``add``, ``update`` and
    ``remove``.  Each mutation validates first, then calls the backend,
    then reconciles the backend's answer into the local list.  A failed
    call leaves the collection exactly as it was.
    """

    def __init__(
        self,
        client: ProductRepositoryClient,
        notifier: Notifier | None = None,
    ) -> None:
        self.client = client
        self.notifier = notifier or Notifier()
        self.settings = Settings()
        self._products: list[Product] = []

    # ── Read side ────────────────────────────────────────

    @property
    def products(self) -> list[Product]:
        """A copy of the current collection in insertion order."""
        return list(self._products)

    def view(self, filters: ViewFilter | None = None) -> list[Product]:
        """Derived, read-only projection of the collection."""
        return ProductFilter.apply(self._products, filters or ViewFilter())

    def low_stock(self) -> list[Product]:
        """Items currently below the low-stock threshold."""
        return ProductFilter.below_threshold(
            self._products, self.settings.LOW_STOCK_THRESHOLD
        )

    def get(self, product_id: str) -> Product | None:
        """Look up a loaded product by id."""
        for product in self._products:
            if product.id == product_id:
                return product
        return None

    # ── Helpers ──────────────────────────────────────────

    def _alert_low_stock(self, product: Product) -> None:
        if product.stock < self.settings.LOW_STOCK_THRESHOLD:
            self.notifier.error(
                f"Low stock alert: {product.name} has only "
                f"{product.stock} units left!",
                key=low_stock_key(product),
            )
        else:
            self.notifier.dismiss(low_stock_key(product))

    def _reject(self, exc: ValidationError | DuplicateError) -> None:
        logger.info("Rejected before backend call: %s", exc)
        self.notifier.error(str(exc))

    # ── Mutations ────────────────────────────────────────

    async def load(self) -> list[Product]:
        """Replace the collection with a fresh backend snapshot."""
        try:
            fetched = await asyncio.to_thread(self.client.list_products)
        except TransportError as exc:
            logger.error("Failed to fetch products: %s", exc, exc_info=True)
            self.notifier.error("Failed to fetch products!")
            raise RetrievalError(str(exc), status=exc.status) from exc

        self._products = list(fetched)
        logger.info("Loaded %d products", len(self._products))
        # Alerts for items that vanished from the backend go too
        self.notifier.dismiss_prefix(
            "low-stock-", keep={low_stock_key(p) for p in self._products}
        )
        for product in self._products:
            self._alert_low_stock(product)
        return self.products

    async def add(self, candidate: Product) -> Product:
        """Validate, create on the backend and append the result."""
        try:
            ProductValidator.validate_fields(candidate)
            ProductValidator.ensure_unique_name(candidate, self._products)
        except (ValidationError, DuplicateError) as exc:
            self._reject(exc)
            raise

        payload = replace(
            candidate, id="", updated_at=candidate.updated_at or _now_iso(),
        )
        try:
            created = await asyncio.to_thread(
                self.client.create_product, payload
            )
        except TransportError as exc:
            logger.error("Add product failed: %s", exc, exc_info=True)
            self.notifier.error("Failed to add product!")
            raise

        self._products.append(created)
        self.notifier.success(
            f'Product "{created.name}" added successfully!'
        )
        self._alert_low_stock(created)
        return created

    async def update(self, record: Product) -> Product:
        """Validate, replace on the backend and swap the local entry."""
        try:
            if not record.id:
                raise ValidationError("Cannot update a product without an id")
            ProductValidator.validate_fields(record)
            ProductValidator.ensure_unique_name(
                record, self._products, ignore_id=record.id
            )
        except (ValidationError, DuplicateError) as exc:
            self._reject(exc)
            raise

        payload = replace(record, updated_at=_now_iso())
        try:
            updated = await asyncio.to_thread(
                self.client.replace_product, payload
            )
        except TransportError as exc:
            logger.error("Update product failed: %s", exc, exc_info=True)
            self.notifier.error("Failed to update product!")
            raise

        replaced = False
        for idx, existing in enumerate(self._products):
            if existing.id == record.id:
                self._products[idx] = updated
                replaced = True
                break
        if not replaced:
            logger.warning(
                "Updated product %s was not in the local collection",
                record.id,
            )

        self.notifier.success(
            f'Product "{updated.name}" updated successfully!'
        )
        self._alert_low_stock(updated)
        return updated

    async def remove(self, product_id: str) -> None:
        """Delete on the backend, then drop the local entry."""
        existing = self.get(product_id)
        try:
            await asyncio.to_thread(self.client.delete_product, product_id)
        except TransportError as exc:
            logger.error("Delete product failed: %s", exc, exc_info=True)
            self.notifier.error("Failed to delete product!")
            raise

        self._products = [p for p in self._products if p.id != product_id]
        self.notifier.dismiss(f"low-stock-{product_id}")
        name = existing.name if existing else product_id
        self.notifier.success(f'Product "{name}" deleted successfully!')
