# storefront/services/api_client.py

"""Blocking REST client for the product and account endpoints."""

import logging
from typing import Any

from curl_cffi import requests as curl_requests

from storefront.config.settings import Settings
from storefront.errors import NotFoundError, TransportError
from storefront.models.product import Product
from storefront.models.session import Account


class ProductRepositoryClient:
    """Thin CRUD wrapper over the json-server style backend.

    Every call either returns validated records or raises
    ``TransportError`` carrying the HTTP status.  There are no retries;
    retry policy belongs to the caller.
    """

    def __init__(self, base_url: str | None = None) -> None:
        self.logger = logging.getLogger("storefront.api")
        self.settings = Settings()
        self.base_url = (base_url or self.settings.API_BASE_URL).rstrip("/")
        self.session = curl_requests.Session(
            impersonate=self.settings.IMPERSONATE_BROWSER
        )
        self._request_timeout: int = self.settings.REQUEST_TIMEOUT

    def _request(
        self,
        method: str,
        path: str,
        payload: dict[str, Any] | None = None,
    ) -> Any:
        """Send one request and decode the JSON body (``None`` if empty)."""
        url = self.settings.api_url(path, self.base_url)
        try:
            resp = self.session.request(
                method,
                url,
                headers=self.settings.DEFAULT_HEADERS,
                json=payload,
                timeout=self._request_timeout,
            )
        except Exception as exc:
            self.logger.error(
                "%s %s failed: %s", method, url, exc, exc_info=True,
            )
            raise TransportError(f"{method} {path} failed: {exc}") from exc

        if resp.status_code == 404:
            self.logger.warning("%s %s returned 404", method, url)
            raise NotFoundError(f"{path} not found")
        if not 200 <= resp.status_code < 300:
            self.logger.warning(
                "%s %s returned HTTP %d", method, url, resp.status_code,
            )
            raise TransportError(
                f"{method} {path} returned HTTP {resp.status_code}",
                status=resp.status_code,
            )

        self.logger.debug("%s %s -> %d", method, url, resp.status_code)
        if not resp.text.strip():
            return None
        try:
            return resp.json()
        except ValueError as exc:
            raise TransportError(
                f"{method} {path} returned invalid JSON",
                status=resp.status_code,
            ) from exc

    def _to_product(self, data: Any, path: str) -> Product:
        try:
            return Product.from_record(data)
        except ValueError as exc:
            self.logger.error("Malformed product from %s: %s", path, exc)
            raise TransportError(f"Malformed product from {path}") from exc

    def list_products(self) -> list[Product]:
        """GET /products, dropping records that fail the schema."""
        data = self._request("GET", self.settings.PRODUCTS_PATH)
        if not isinstance(data, list):
            raise TransportError("Product list response is not an array")

        products: list[Product] = []
        dropped = 0
        for record in data:
            try:
                products.append(Product.from_record(record))
            except ValueError as exc:
                dropped += 1
                self.logger.debug("Dropped malformed product: %s", exc)
        if dropped:
            self.logger.warning(
                "Dropped %d malformed product records", dropped,
            )
        return products

    def create_product(self, product: Product) -> Product:
        """POST /products; the backend assigns the id."""
        path = self.settings.PRODUCTS_PATH
        data = self._request(
            "POST", path, product.to_payload(include_id=False),
        )
        created = self._to_product(data, path)
        self.logger.info("Created product %s (%s)", created.id, created.name)
        return created

    def replace_product(self, product: Product) -> Product:
        """PUT /products/{id} with the full record."""
        path = f"{self.settings.PRODUCTS_PATH}/{product.id}"
        data = self._request("PUT", path, product.to_payload())
        updated = self._to_product(data, path)
        self.logger.info("Replaced product %s", updated.id)
        return updated

    def delete_product(self, product_id: str) -> None:
        """DELETE /products/{id}."""
        path = f"{self.settings.PRODUCTS_PATH}/{product_id}"
        self._request("DELETE", path)
        self.logger.info("Deleted product %s", product_id)

    def list_accounts(self) -> list[Account]:
        """GET /users; malformed entries are skipped."""
        data = self._request("GET", self.settings.USERS_PATH)
        if not isinstance(data, list):
            raise TransportError("Account list response is not an array")
        accounts: list[Account] = []
        for record in data:
            try:
                accounts.append(Account.from_record(record))
            except ValueError as exc:
                self.logger.debug("Skipped malformed account: %s", exc)
        return accounts
