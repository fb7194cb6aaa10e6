# tests/test_settings.py

"""Tests for the Settings configuration class."""

import unittest
from pathlib import Path
from unittest.mock import patch

from storefront.config.settings import Settings


class TestSettings(unittest.TestCase):
    """Verify Settings constants and helpers."""

    def test_low_stock_threshold_is_ten(self) -> None:
        """The low-stock threshold is fixed at 10 units."""
        self.assertEqual(Settings.LOW_STOCK_THRESHOLD, 10)

    def test_request_timeout_is_positive_int(self) -> None:
        """REQUEST_TIMEOUT must be a positive integer."""
        self.assertIsInstance(Settings.REQUEST_TIMEOUT, int)
        self.assertGreater(Settings.REQUEST_TIMEOUT, 0)

    def test_categories_are_fixed_set(self) -> None:
        """Only the three catalog categories are allowed."""
        self.assertEqual(
            Settings.CATEGORIES, ["Electronics", "Clothing", "Books"]
        )

    def test_csv_header_has_eight_columns(self) -> None:
        """The export header lists the eight fixed columns."""
        self.assertEqual(
            Settings.CSV_HEADER.split(","),
            [
                "ID", "Name", "Category", "Price",
                "Stock", "Description", "URL", "UpdatedAt",
            ],
        )

    def test_sort_keys_are_unique(self) -> None:
        """No duplicate sort keys."""
        self.assertEqual(
            len(Settings.SORT_KEYS), len(set(Settings.SORT_KEYS))
        )

    def test_api_base_url_has_no_trailing_slash(self) -> None:
        """Paths are appended directly to the base URL."""
        self.assertFalse(Settings.API_BASE_URL.endswith("/"))

    def test_api_url_joins_path(self) -> None:
        """api_url prefixes the configured base URL."""
        with patch.object(Settings, "API_BASE_URL", "http://api.test"):
            self.assertEqual(
                Settings.api_url("/products"),
                "http://api.test/products",
            )

    def test_api_url_explicit_base(self) -> None:
        """An explicit base URL wins and loses its trailing slash."""
        self.assertEqual(
            Settings.api_url("/users", "http://other.test/"),
            "http://other.test/users",
        )

    def test_path_constants_are_paths(self) -> None:
        """Path-typed settings are Path instances."""
        self.assertIsInstance(Settings.BASE_DIR, Path)
        self.assertIsInstance(Settings.LOCAL_STORAGE_PATH, Path)
        self.assertIsInstance(Settings.EXPORTS_DIR, Path)
        self.assertIsInstance(Settings.LOGS_DIR, Path)

    def test_hf_api_key_missing_returns_none(self) -> None:
        """An unset credential reads as None."""
        self.assertIsNone(Settings.hf_api_key())

    def test_hf_api_key_blank_returns_none(self) -> None:
        """A whitespace-only credential counts as missing."""
        with patch.dict("os.environ", {Settings.HF_API_KEY_ENV: "  "}):
            self.assertIsNone(Settings.hf_api_key())

    def test_hf_api_key_read_from_env(self) -> None:
        """The credential is read at call time."""
        with patch.dict("os.environ", {Settings.HF_API_KEY_ENV: "hf_abc"}):
            self.assertEqual(Settings.hf_api_key(), "hf_abc")

    def test_generation_parameters(self) -> None:
        """Sampling parameters match the fixed generation setup."""
        params = Settings.GENERATION_PARAMETERS
        self.assertEqual(params["max_length"], 120)
        self.assertEqual(params["temperature"], 0.7)
        self.assertEqual(params["top_k"], 50)
        self.assertEqual(params["top_p"], 0.95)
        self.assertIs(params["return_full_text"], False)


if __name__ == "__main__":
    unittest.main()
