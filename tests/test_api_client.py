# tests/test_api_client.py

"""Tests for ProductRepositoryClient request handling."""

import unittest
from typing import Any
from unittest.mock import MagicMock, patch

from storefront.config.settings import Settings
from storefront.errors import NotFoundError, TransportError
from storefront.models.product import Product
from storefront.services.api_client import ProductRepositoryClient

SESSION_PATH = "storefront.services.api_client.curl_requests.Session"


def _response(status: int, body: Any = None, text: str | None = None) -> MagicMock:
    """Build a fake curl_cffi response."""
    resp = MagicMock()
    resp.status_code = status
    if text is None:
        text = "" if body is None else "json"
    resp.text = text
    resp.json.return_value = body
    return resp


class TestProductRepositoryClient(unittest.TestCase):
    """Request building and response decoding."""

    def setUp(self) -> None:
        patcher = patch(SESSION_PATH)
        self.session_cls = patcher.start()
        self.addCleanup(patcher.stop)
        self.session = self.session_cls.return_value
        self.client = ProductRepositoryClient(base_url="http://api.test/")

    def test_session_uses_impersonation(self) -> None:
        """The curl session is created with a browser profile."""
        kwargs = self.session_cls.call_args.kwargs
        self.assertIn("impersonate", kwargs)

    def test_list_products(self) -> None:
        """GET /products decodes every well-formed record."""
        self.session.request.return_value = _response(200, [
            {"id": 1, "name": "Widget", "category": "Electronics",
             "price": 9.5, "stock": 3},
            {"id": "2", "name": "Novel", "category": "Books",
             "price": 12, "stock": 40},
        ])
        products = self.client.list_products()
        self.assertEqual([p.id for p in products], ["1", "2"])
        method, url = self.session.request.call_args.args
        self.assertEqual(method, "GET")
        self.assertEqual(url, "http://api.test/products")

    def test_default_base_url_from_settings(self) -> None:
        """Without an explicit base, requests go to the configured API."""
        with patch.object(Settings, "API_BASE_URL", "http://configured.test"):
            client = ProductRepositoryClient()
        self.session.request.return_value = _response(200, [])
        client.list_products()
        _, url = self.session.request.call_args.args
        self.assertEqual(url, "http://configured.test/products")

    def test_list_products_drops_malformed(self) -> None:
        """Records failing the schema are skipped, not fatal."""
        self.session.request.return_value = _response(200, [
            {"id": "1", "name": "Widget", "category": "Electronics",
             "price": 9.5, "stock": 3},
            {"name": "No id", "category": "Books", "price": 1, "stock": 1},
            "garbage",
        ])
        products = self.client.list_products()
        self.assertEqual(len(products), 1)

    def test_list_products_drops_non_finite_numbers(self) -> None:
        """An infinite stock drops that record instead of the whole load."""
        self.session.request.return_value = _response(200, [
            {"id": "1", "name": "Widget", "category": "Electronics",
             "price": 9.5, "stock": float("inf")},
            {"id": "2", "name": "Novel", "category": "Books",
             "price": 12, "stock": 40},
        ])
        products = self.client.list_products()
        self.assertEqual([p.id for p in products], ["2"])

    def test_list_products_non_array(self) -> None:
        """A non-array body is a transport failure."""
        self.session.request.return_value = _response(200, {"oops": True})
        with self.assertRaises(TransportError):
            self.client.list_products()

    def test_create_sends_payload_without_id(self) -> None:
        """POST omits the id and returns the backend record."""
        self.session.request.return_value = _response(201, {
            "id": "abc", "name": "Widget", "category": "Electronics",
            "price": 5.0, "stock": 2,
        })
        created = self.client.create_product(Product(
            id="ignored", name="Widget", category="Electronics",
            price=5.0, stock=2,
        ))
        self.assertEqual(created.id, "abc")
        call = self.session.request.call_args
        self.assertEqual(call.args[0], "POST")
        self.assertNotIn("id", call.kwargs["json"])

    def test_replace_uses_item_path(self) -> None:
        """PUT targets /products/{id}."""
        self.session.request.return_value = _response(200, {
            "id": "7", "name": "Shirt", "category": "Clothing",
            "price": 20, "stock": 11,
        })
        self.client.replace_product(Product(
            id="7", name="Shirt", category="Clothing", price=20, stock=11,
        ))
        method, url = self.session.request.call_args.args
        self.assertEqual(method, "PUT")
        self.assertEqual(url, "http://api.test/products/7")
        self.assertEqual(
            self.session.request.call_args.kwargs["json"]["id"], "7"
        )

    def test_delete_empty_body(self) -> None:
        """DELETE with an empty body succeeds."""
        self.session.request.return_value = _response(200, None, text="")
        self.assertIsNone(self.client.delete_product("7"))
        method, url = self.session.request.call_args.args
        self.assertEqual(method, "DELETE")
        self.assertEqual(url, "http://api.test/products/7")

    def test_404_raises_not_found(self) -> None:
        """A missing record surfaces as NotFoundError."""
        self.session.request.return_value = _response(404, {})
        with self.assertRaises(NotFoundError) as ctx:
            self.client.delete_product("missing")
        self.assertEqual(ctx.exception.status, 404)

    def test_server_error_carries_status(self) -> None:
        """Non-2xx responses keep their status code."""
        self.session.request.return_value = _response(500, {})
        with self.assertRaises(TransportError) as ctx:
            self.client.list_products()
        self.assertEqual(ctx.exception.status, 500)

    def test_network_failure(self) -> None:
        """Exceptions from the session become TransportError."""
        self.session.request.side_effect = ConnectionError("refused")
        with self.assertRaises(TransportError) as ctx:
            self.client.list_products()
        self.assertIsNone(ctx.exception.status)

    def test_invalid_json(self) -> None:
        """A body that cannot be decoded is a transport failure."""
        resp = _response(200, None, text="<html>")
        resp.json.side_effect = ValueError("not json")
        self.session.request.return_value = resp
        with self.assertRaises(TransportError):
            self.client.list_products()

    def test_malformed_create_response(self) -> None:
        """A created record without an id is rejected."""
        self.session.request.return_value = _response(201, {"name": "x"})
        with self.assertRaises(TransportError):
            self.client.create_product(Product(
                name="x", category="Books", price=1.0, stock=1,
            ))

    def test_list_accounts(self) -> None:
        """GET /users yields accounts and skips malformed ones."""
        self.session.request.return_value = _response(200, [
            {"id": 1, "username": "admin", "password": "secret",
             "role": "admin"},
            {"username": 5},
        ])
        accounts = self.client.list_accounts()
        self.assertEqual(len(accounts), 1)
        self.assertEqual(accounts[0].username, "admin")
        self.assertEqual(accounts[0].role, "admin")
        _, url = self.session.request.call_args.args
        self.assertEqual(url, "http://api.test/users")


if __name__ == "__main__":
    unittest.main()
