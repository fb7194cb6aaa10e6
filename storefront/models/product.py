# storefront/models/product.py

"""Product data model and its backend record schema."""

import math
from dataclasses import dataclass
from typing import Any


def _require_str(record: dict[str, Any], key: str) -> str:
    value = record.get(key)
    if not isinstance(value, str):
        raise ValueError(f"Product field '{key}' must be a string")
    return value


def _optional_str(record: dict[str, Any], key: str) -> str:
    value = record.get(key)
    if value is None:
        return ""
    return str(value)


@dataclass
class Product:
    """A single catalog item as held by the client.

    ``id`` is empty until the backend assigns one on creation.
    """

    name: str
    category: str
    price: float
    stock: int
    description: str = ""
    url: str = ""
    updated_at: str = ""
    id: str = ""

    @classmethod
    def from_record(cls, record: Any) -> "Product":
        """Coerce a backend JSON record into a Product.

        Raises ``ValueError`` when a required field is missing or has
        the wrong shape.
        """
        if not isinstance(record, dict):
            raise ValueError("Product record must be an object")

        raw_id = record.get("id")
        if raw_id is None or isinstance(raw_id, bool):
            raise ValueError("Product record has no id")

        price = record.get("price")
        stock = record.get("stock")
        if isinstance(price, bool) or isinstance(stock, bool):
            raise ValueError("Product price/stock must be numeric")
        try:
            price_value = float(price)  # type: ignore[arg-type]
            stock_float = float(stock)  # type: ignore[arg-type]
        except (TypeError, ValueError) as exc:
            raise ValueError("Product price/stock must be numeric") from exc
        if not math.isfinite(price_value) or not math.isfinite(stock_float):
            raise ValueError("Product price/stock must be finite")
        if not stock_float.is_integer():
            raise ValueError("Product stock must be a whole number")
        stock_value = int(stock_float)

        return cls(
            id=str(raw_id),
            name=_require_str(record, "name"),
            category=_require_str(record, "category"),
            price=price_value,
            stock=stock_value,
            description=_optional_str(record, "description"),
            url=_optional_str(record, "url"),
            updated_at=_optional_str(record, "updatedAt"),
        )

    def to_payload(self, include_id: bool = True) -> dict[str, Any]:
        """Serialise to the backend wire shape."""
        payload: dict[str, Any] = {
            "name": self.name,
            "category": self.category,
            "price": self.price,
            "stock": self.stock,
            "description": self.description,
        }
        if self.url:
            payload["url"] = self.url
        if self.updated_at:
            payload["updatedAt"] = self.updated_at
        if include_id and self.id:
            payload = {"id": self.id, **payload}
        return payload
