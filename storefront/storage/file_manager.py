# storefront/storage/file_manager.py

"""Formats the catalog as CSV or a paginated text document and saves it."""

import csv
import io
import logging
import textwrap
from datetime import datetime
from pathlib import Path

from storefront.config.settings import Settings
from storefront.models.product import Product

logger = logging.getLogger("storefront.storage")

PAGE_BREAK = "\f"


def format_number(value: float) -> str:
    """Render a price the way the backend stores it (``20`` not ``20.0``)."""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def format_delimited(products: list[Product]) -> str:
    """Serialise products to CSV text.

    The header row is written bare; every data field is double-quoted
    with inner quotes doubled, so commas and newlines in descriptions
    survive a quote-aware reader.
    """
    buffer = io.StringIO()
    writer = csv.writer(
        buffer, quoting=csv.QUOTE_ALL, lineterminator="\n"
    )
    for p in products:
        writer.writerow(
            [
                p.id,
                p.name,
                p.category,
                format_number(p.price),
                p.stock,
                p.description,
                p.url,
                p.updated_at,
            ]
        )
    rows = buffer.getvalue().rstrip("\n")
    if not rows:
        return Settings.CSV_HEADER
    return f"{Settings.CSV_HEADER}\n{rows}"


def _document_entry(product: Product) -> str:
    return (
        f"{product.id} | {product.name} | {product.category} | "
        f"{Settings.CURRENCY_SYMBOL}{product.price:.2f} | "
        f"Stock: {product.stock} | {product.description} | "
        f"{product.url or 'No URL'} | "
        f"Updated: {product.updated_at or 'N/A'}"
    )


def format_document(
    products: list[Product],
    lines_per_page: int | None = None,
    wrap_width: int | None = None,
) -> str:
    """Lay products out as a paginated plain-text document.

    Each entry is wrapped at *wrap_width* characters and kept on a
    single page; a new page starts once the next entry would exceed
    *lines_per_page* body lines.  Pages are separated by form feeds.
    """
    per_page = lines_per_page or Settings.DOCUMENT_LINES_PER_PAGE
    width = wrap_width or Settings.DOCUMENT_WRAP_WIDTH

    pages: list[list[str]] = [[]]
    for product in products:
        wrapped = textwrap.wrap(_document_entry(product), width=width) or [""]
        current = pages[-1]
        if current and len(current) + len(wrapped) > per_page:
            pages.append([])
            current = pages[-1]
        current.extend(wrapped)

    rendered: list[str] = []
    for number, body in enumerate(pages, 1):
        header = f"{Settings.DOCUMENT_TITLE} - Page {number}"
        rendered.append("\n".join([header, "", *body]))
    return f"\n{PAGE_BREAK}\n".join(rendered)


class FileManager:
    """Writes catalog exports to timestamped files."""

    def __init__(self, exports_dir: Path | None = None) -> None:
        self.exports_dir: Path = exports_dir or Settings.EXPORTS_DIR
        self.exports_dir.mkdir(parents=True, exist_ok=True)
        logger.debug("FileManager initialised, exports_dir=%s", self.exports_dir)

    def _target(self, stem: str, suffix: str) -> Path:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        return self.exports_dir / f"{stem}_{timestamp}{suffix}"

    def export_csv(self, products: list[Product]) -> Path:
        """Write the CSV export and return its path."""
        filepath = self._target("products", ".csv")
        with open(filepath, "w", newline="", encoding="utf-8") as f:
            f.write(format_delimited(products))
            f.write("\n")

        logger.info("Exported %d products to %s", len(products), filepath)
        return filepath

    def export_document(self, products: list[Product]) -> Path:
        """Write the paginated text document and return its path."""
        filepath = self._target("products", ".txt")
        with open(filepath, "w", encoding="utf-8") as f:
            f.write(format_document(products))
            f.write("\n")

        logger.info(
            "Exported %d products as document to %s",
            len(products),
            filepath,
        )
        return filepath
