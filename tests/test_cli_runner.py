# tests/test_cli_runner.py

"""Tests for the headless CLI commands."""

import io
import itertools
import json
import tempfile
import unittest
from dataclasses import replace
from pathlib import Path
from unittest.mock import patch

from storefront.cli import runner
from storefront.config.settings import Settings
from storefront.errors import NotFoundError
from storefront.models.product import Product
from storefront.models.session import Account
from storefront.storage.local_storage import LocalStorage

CLIENT_PATH = "storefront.cli.runner.ProductRepositoryClient"


class _FakeClient:
    """In-memory backend shared across one test."""

    def __init__(self) -> None:
        self.records: list[Product] = [
            Product(id="1", name="Widget", category="Electronics",
                    price=10.0, stock=5),
            Product(id="2", name="Novel", category="Books",
                    price=20.0, stock=40),
        ]
        self._ids = itertools.count(10)

    def list_products(self) -> list[Product]:
        return list(self.records)

    def create_product(self, product: Product) -> Product:
        stored = replace(product, id=str(next(self._ids)))
        self.records.append(stored)
        return stored

    def replace_product(self, product: Product) -> Product:
        for idx, existing in enumerate(self.records):
            if existing.id == product.id:
                self.records[idx] = product
                return product
        raise NotFoundError("missing")

    def delete_product(self, product_id: str) -> None:
        before = len(self.records)
        self.records = [p for p in self.records if p.id != product_id]
        if len(self.records) == before:
            raise NotFoundError("missing")

    def list_accounts(self) -> list[Account]:
        return [Account("admin", "secret", "admin"), Account("bob", "pw")]


class TestCliRunner(unittest.IsolatedAsyncioTestCase):
    """Commands run against a fake backend."""

    def setUp(self) -> None:
        self.client = _FakeClient()
        patcher = patch(CLIENT_PATH, return_value=self.client)
        patcher.start()
        self.addCleanup(patcher.stop)
        self.stdout = io.StringIO()
        out = patch("sys.stdout", self.stdout)
        out.start()
        self.addCleanup(out.stop)

    def _login_as_admin(self) -> None:
        LocalStorage().set_item(
            Settings.SESSION_KEY, {"username": "admin", "role": "admin"}
        )

    async def test_list_json(self) -> None:
        code = await runner.cli_list("", "Books", "", "json")
        self.assertEqual(code, 0)
        data = json.loads(self.stdout.getvalue())
        self.assertEqual([d["name"] for d in data], ["Novel"])

    async def test_list_table(self) -> None:
        code = await runner.cli_list("", "", "name-asc", "table")
        self.assertEqual(code, 0)
        self.assertIn("Widget", self.stdout.getvalue())

    async def test_add_requires_admin(self) -> None:
        code = await runner.cli_add("Gizmo", "Electronics", 5.0, 20, "", "")
        self.assertEqual(code, 1)
        self.assertEqual(len(self.client.records), 2)

    async def test_add_as_admin(self) -> None:
        self._login_as_admin()
        code = await runner.cli_add("Gizmo", "Electronics", 5.0, 20, "", "")
        self.assertEqual(code, 0)
        self.assertEqual(self.stdout.getvalue().strip(), "10")

    async def test_add_duplicate_fails(self) -> None:
        self._login_as_admin()
        code = await runner.cli_add("WIDGET", "Electronics", 5.0, 20, "", "")
        self.assertEqual(code, 1)

    async def test_update_keeps_unset_fields(self) -> None:
        self._login_as_admin()
        code = await runner.cli_update(
            "2", None, None, 25.0, None, None, None,
        )
        self.assertEqual(code, 0)
        updated = self.client.records[1]
        self.assertEqual(updated.price, 25.0)
        self.assertEqual(updated.name, "Novel")

    async def test_update_unknown_id(self) -> None:
        self._login_as_admin()
        code = await runner.cli_update(
            "99", "X", None, None, None, None, None,
        )
        self.assertEqual(code, 1)

    async def test_delete(self) -> None:
        self._login_as_admin()
        self.assertEqual(await runner.cli_delete("1"), 0)
        self.assertEqual([p.id for p in self.client.records], ["2"])
        self.assertEqual(await runner.cli_delete("1"), 1)

    async def test_import(self) -> None:
        self._login_as_admin()
        path = Path(tempfile.mkdtemp()) / "upload.csv"
        path.write_text(
            f"{Settings.CSV_HEADER}\n"
            "1,Gizmo,Electronics,3,30,,,\n"
            "2,Broken,Electronics,,30,,,\n",
            encoding="utf-8",
        )
        code = await runner.cli_import(str(path), naive=False)
        self.assertEqual(code, 0)
        self.assertIn("Gizmo", [p.name for p in self.client.records])

    async def test_import_missing_file(self) -> None:
        self._login_as_admin()
        code = await runner.cli_import("/nonexistent/file.csv", naive=False)
        self.assertEqual(code, 1)

    async def test_export_csv(self) -> None:
        self._login_as_admin()
        code = await runner.cli_export("csv")
        self.assertEqual(code, 0)
        exported = list(Settings.EXPORTS_DIR.glob("products_*.csv"))
        self.assertEqual(len(exported), 1)

    @patch("storefront.services.dashboard.webbrowser")
    async def test_dashboard(self, _mock_wb: object) -> None:
        self._login_as_admin()
        code = await runner.cli_dashboard(chart=False)
        self.assertEqual(code, 0)
        self.assertIn("Total Products", self.stdout.getvalue())

    async def test_describe_without_key(self) -> None:
        code = await runner.cli_describe("Widget", "Electronics")
        self.assertEqual(code, 1)

    async def test_login_whoami_logout(self) -> None:
        self.assertEqual(await runner.cli_login("admin", "secret"), 0)
        self.assertEqual(runner.cli_whoami(), 0)
        self.assertIn("admin (admin)", self.stdout.getvalue())
        self.assertEqual(runner.cli_logout(), 0)
        self.assertEqual(runner.cli_whoami(), 1)

    async def test_login_wrong_password(self) -> None:
        self.assertEqual(await runner.cli_login("admin", "nope"), 1)
        self.assertEqual(runner.cli_whoami(), 1)


if __name__ == "__main__":
    unittest.main()
