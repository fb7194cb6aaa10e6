# storefront/config/settings.py

"""Central configuration for the storefront client."""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Central configuration for the storefront client."""

    # --- Backend ---
    API_BASE_URL: str = os.getenv(
        "STOREFRONT_API_URL", "http://localhost:3001"
    ).rstrip("/")
    PRODUCTS_PATH: str = "/products"
    USERS_PATH: str = "/users"
    REQUEST_TIMEOUT: int = 15           # Seconds before a request times out
    IMPERSONATE_BROWSER: str = "chrome120"
    DEFAULT_HEADERS: dict[str, str] = {
        "Accept": "application/json",
        "Content-Type": "application/json",
    }

    # --- Catalog rules ---
    LOW_STOCK_THRESHOLD: int = 10       # Units below which an alert fires
    CATEGORIES: list[str] = ["Electronics", "Clothing", "Books"]
    CURRENCY_SYMBOL: str = "₹"
    SORT_KEYS: list[str] = [
        "price-asc",
        "price-desc",
        "name-asc",
        "name-desc",
    ]

    # --- Export ---
    CSV_HEADER: str = "ID,Name,Category,Price,Stock,Description,URL,UpdatedAt"
    DOCUMENT_TITLE: str = "Product List"
    DOCUMENT_LINES_PER_PAGE: int = 25
    DOCUMENT_WRAP_WIDTH: int = 100

    # --- Notifications ---
    NOTIFICATION_HISTORY: int = 50      # Unkeyed messages kept in memory

    # --- Session ---
    SESSION_KEY: str = "user"           # Local storage entry name
    ADMIN_ROLE: str = "admin"

    # --- Description generation ---
    HF_MODEL_URL: str = (
        "https://api-inference.huggingface.co/models/"
        "mistralai/Mixtral-8x7B-Instruct-v0.1"
    )
    HF_API_KEY_ENV: str = "HF_API_KEY"
    GENERATION_TIMEOUT: int = 60
    GENERATION_PARAMETERS: dict[str, float | int | bool] = {
        "max_length": 120,
        "temperature": 0.7,
        "top_k": 50,
        "top_p": 0.95,
        "return_full_text": False,
    }

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    DATA_DIR: Path = BASE_DIR / "data"
    LOCAL_STORAGE_PATH: Path = DATA_DIR / "local_storage.json"
    EXPORTS_DIR: Path = BASE_DIR / "exports"
    CHARTS_DIR: Path = DATA_DIR / "charts"
    LOGS_DIR: Path = BASE_DIR / "logs"

    @classmethod
    def api_url(cls, path: str, base_url: str | None = None) -> str:
        """Join a backend path onto *base_url* or the configured one."""
        return f"{(base_url or cls.API_BASE_URL).rstrip('/')}{path}"

    @classmethod
    def hf_api_key(cls) -> str | None:
        """Read the text-generation credential at call time."""
        value = os.getenv(cls.HF_API_KEY_ENV, "").strip()
        return value or None
