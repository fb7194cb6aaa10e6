# storefront/services/transfer_service.py

"""Bulk CSV import and refresh-then-export composites."""

import asyncio
import logging
from dataclasses import dataclass, field
from pathlib import Path

from storefront.errors import StorefrontError
from storefront.storage.csv_importer import parse_delimited
from storefront.storage.file_manager import FileManager
from storefront.services.product_store import ProductStore

logger = logging.getLogger("storefront.transfer")


@dataclass
class ImportReport:
    """Outcome of a bulk import run."""

    accepted: int = 0
    rejected: int = 0
    succeeded: int = 0
    failures: list[tuple[str, str]] = field(
        default_factory=lambda: list[tuple[str, str]]()
    )


class TransferService:
    """Moves the catalog in and out of files."""

    def __init__(
        self,
        store: ProductStore,
        file_manager: FileManager | None = None,
    ) -> None:
        self.store = store
        self._file_manager = file_manager

    @property
    def file_manager(self) -> FileManager:
        # Created lazily so importing never touches the exports dir
        if self._file_manager is None:
            self._file_manager = FileManager()
        return self._file_manager

    async def import_text(self, text: str, naive: bool = False) -> ImportReport:
        """Create every accepted CSV line, one at a time.

        A failing line is reported and skipped; it never stops the
        remaining lines.
        """
        batch = parse_delimited(text, naive=naive)
        report = ImportReport(
            accepted=len(batch.candidates), rejected=batch.rejected,
        )

        for candidate in batch.candidates:
            try:
                await self.store.add(candidate)
            except StorefrontError as exc:
                logger.error(
                    "Failed to upload product '%s': %s",
                    candidate.name,
                    exc,
                )
                report.failures.append((candidate.name, str(exc)))
                self.store.notifier.error(
                    f'Failed to upload "{candidate.name}"'
                )
                continue
            report.succeeded += 1

        if report.succeeded > 0:
            self.store.notifier.success(
                f"{report.succeeded} product(s) uploaded successfully!"
            )
        logger.info(
            "Import finished: %d ok, %d failed, %d rejected",
            report.succeeded,
            len(report.failures),
            report.rejected,
        )
        return report

    async def import_file(self, path: Path, naive: bool = False) -> ImportReport:
        """Read a CSV file from disk and import it."""
        text = await asyncio.to_thread(path.read_text, encoding="utf-8")
        return await self.import_text(text, naive=naive)

    async def refresh_and_export_csv(self) -> Path:
        """Reload from the backend, then write the CSV export."""
        products = await self.store.load()
        path = self.file_manager.export_csv(products)
        self.store.notifier.success("Products exported to CSV!")
        return path

    async def refresh_and_export_document(self) -> Path:
        """Reload from the backend, then write the paginated document."""
        products = await self.store.load()
        path = self.file_manager.export_document(products)
        self.store.notifier.success("Products exported to document!")
        return path
