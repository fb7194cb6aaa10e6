# storefront/storage/csv_importer.py

"""Parse uploaded CSV text into candidate products."""

import csv
import io
import logging
import math
from dataclasses import dataclass, field
from datetime import datetime, timezone

from storefront.models.product import Product

logger = logging.getLogger("storefront.importer")

_COLUMNS = 8
_REQUIRED = (0, 1, 2, 3, 4)  # id, name, category, price, stock


@dataclass
class ImportBatch:
    """Candidates accepted from a CSV upload plus the rejected count."""

    candidates: list[Product] = field(
        default_factory=lambda: list[Product]()
    )
    rejected: int = 0


def _rows_quoted(text: str) -> list[list[str]]:
    return list(csv.reader(io.StringIO(text)))


def _rows_naive(text: str) -> list[list[str]]:
    # Legacy rule: raw comma split, quotes are kept as literal characters
    return [line.rstrip("\r").split(",") for line in text.split("\n")]


def _to_candidate(fields: list[str]) -> Product | None:
    padded = fields + [""] * (_COLUMNS - len(fields))
    if any(not padded[i].strip() for i in _REQUIRED):
        return None

    _id, name, category, price_raw, stock_raw = padded[:5]
    description, url, updated_at = padded[5:8]
    try:
        price = float(price_raw)
        stock_float = float(stock_raw)
    except ValueError:
        return None
    if not math.isfinite(price) or not math.isfinite(stock_float):
        return None
    if not stock_float.is_integer():
        return None

    return Product(
        name=name.strip(),
        category=category.strip(),
        price=price,
        stock=int(stock_float),
        description=description,
        url=url.strip(),
        updated_at=(
            updated_at.strip()
            or datetime.now(timezone.utc).isoformat()
        ),
    )


def parse_delimited(text: str, naive: bool = False) -> ImportBatch:
    """Turn CSV text into candidate products.

    The first line is the header and is discarded.  Blank lines are
    skipped.  A line missing id, name, category, price or stock, or
    whose price/stock is not numeric, is dropped and only counted.

    By default quoted fields are honoured, which matches what
    ``format_delimited`` writes.  ``naive=True`` splits each line on
    the raw comma with no unescaping, for files from older tooling.
    """
    rows = _rows_naive(text) if naive else _rows_quoted(text)
    batch = ImportBatch()

    for row in rows[1:]:
        if not any(cell.strip() for cell in row):
            continue
        candidate = _to_candidate(row)
        if candidate is None:
            batch.rejected += 1
            continue
        batch.candidates.append(candidate)

    if batch.rejected:
        logger.info("CSV import rejected %d malformed lines", batch.rejected)
    logger.debug(
        "Parsed %d candidates (naive=%s)", len(batch.candidates), naive,
    )
    return batch
