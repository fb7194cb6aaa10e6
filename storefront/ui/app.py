# storefront/ui/app.py

"""Terminal UI for the storefront catalog and admin tools."""

import logging
from dataclasses import replace
from pathlib import Path
from typing import Any, cast

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal
from textual.widgets import (
    Button,
    DataTable,
    Footer,
    Header,
    Input,
    Select,
    Static,
)

from storefront.config.settings import Settings
from storefront.errors import (
    AuthenticationError,
    StorefrontError,
    ValidationError,
)
from storefront.filters.product_filter import ViewFilter
from storefront.models.product import Product
from storefront.services.api_client import ProductRepositoryClient
from storefront.services.dashboard import export_category_chart, summarize
from storefront.services.description_generator import DescriptionGenerator
from storefront.services.notifier import Notification, Notifier
from storefront.services.product_store import ProductStore
from storefront.services.session_store import SessionStore
from storefront.services.transfer_service import TransferService
from storefront.storage.file_manager import FileManager

logger = logging.getLogger("storefront.ui")

_SORT_LABELS: list[tuple[str, str]] = [
    ("Price: Low to High", "price-asc"),
    ("Price: High to Low", "price-desc"),
    ("Name: A-Z", "name-asc"),
    ("Name: Z-A", "name-desc"),
]

_FORM_INPUTS = (
    "form_name",
    "form_price",
    "form_stock",
    "form_url",
    "form_description",
)


def _select_value(value: Any) -> str:
    """Map a Select value (or its blank sentinel) to a filter string."""
    return value if isinstance(value, str) else ""


class StorefrontApp(App[object]):
    """Terminal UI for the storefront catalog and admin tools."""

    CSS = """
    #filters, #auth_bar, #product_form, #form_actions, #import_bar {
        height: auto;
    }
    #search_input { width: 2fr; }
    #category_select, #sort_select, #form_category { width: 1fr; }
    #username_input, #password_input { width: 1fr; }
    #form_name, #form_description, #import_path { width: 2fr; }
    #form_price, #form_stock, #form_url { width: 1fr; }
    #status, #dashboard { padding: 0 1; }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("r", "refresh", "Refresh"),
        Binding("e", "export_csv", "Export CSV"),
        Binding("p", "export_document", "Export Document"),
        Binding("x", "delete_selected", "Delete"),
        Binding("c", "export_chart", "Category Chart"),
    ]

    def __init__(
        self,
        client: ProductRepositoryClient | None = None,
        session_store: SessionStore | None = None,
        file_manager: FileManager | None = None,
        generator: DescriptionGenerator | None = None,
    ) -> None:
        super().__init__()
        self.settings = Settings()
        self.client = client or ProductRepositoryClient()
        self.notifier = Notifier()
        self.notifier.subscribe(self._forward_notification)
        self.store = ProductStore(self.client, self.notifier)
        self.session_store = session_store or SessionStore(self.client)
        self.transfer = TransferService(self.store, file_manager)
        self._generator = generator
        self.view_filter = ViewFilter()
        self.visible: list[Product] = []
        self.editing_id: str | None = None
        self.dashboard_text = ""

    @property
    def generator(self) -> DescriptionGenerator:
        # Created on first use; it opens its own HTTP session
        if self._generator is None:
            self._generator = DescriptionGenerator()
        return self._generator

    def _forward_notification(self, note: Notification) -> None:
        self.notify(note.message, severity=cast(Any, note.severity))

    def compose(self) -> ComposeResult:
        """Build the widget tree for the TUI."""
        yield Header()
        yield Container(
            Static("🛍 Product Management", id="title"),

            Horizontal(
                Input(placeholder="Username", id="username_input"),
                Input(
                    placeholder="Password",
                    password=True,
                    id="password_input",
                ),
                Button("Login", variant="primary", id="login_btn"),
                Button("Logout", variant="error", id="logout_btn"),
                id="auth_bar",
            ),

            Static("", id="dashboard"),

            # Admin product form: empty = add, row selected = edit
            Horizontal(
                Input(placeholder="Name", id="form_name"),
                Select(
                    [(c, c) for c in self.settings.CATEGORIES],
                    prompt="Category",
                    id="form_category",
                ),
                Input(placeholder="Price", type="number", id="form_price"),
                Input(placeholder="Stock", type="integer", id="form_stock"),
                Input(placeholder="URL (optional)", id="form_url"),
                id="product_form",
            ),
            Horizontal(
                Input(placeholder="Description", id="form_description"),
                Button("Generate", id="generate_btn"),
                Button("Save", variant="success", id="save_btn"),
                Button("Clear", id="clear_btn"),
                id="form_actions",
            ),

            Horizontal(
                Input(placeholder="CSV file to import", id="import_path"),
                Button("Import CSV", id="import_btn"),
                Button("Chart", id="chart_btn"),
                id="import_bar",
            ),

            Horizontal(
                Input(placeholder="Search products...", id="search_input"),
                Select(
                    [(c, c) for c in self.settings.CATEGORIES],
                    prompt="All Categories",
                    id="category_select",
                ),
                Select(_SORT_LABELS, prompt="Default", id="sort_select"),
                id="filters",
            ),

            Static("Ready", id="status"),
            cast(
                DataTable[str | Text],
                DataTable(
                    id="products_table",
                    zebra_stripes=True,
                    cursor_type="row",
                ),
            ),
            id="main_container",
        )
        yield Footer()

    async def on_mount(self) -> None:
        """Configure the table and fetch the catalog on startup."""
        table = cast(
            DataTable[str | Text],
            self.query_one("#products_table", DataTable),
        )
        table.add_columns(
            "ID", "Name", "Category", "Price", "Stock", "Description",
        )
        self._update_status()
        await self.action_refresh()

    # ── Rendering ────────────────────────────────────────

    def _update_status(self, extra: str = "") -> None:
        current = self.session_store.current
        who = (
            f"{current.username} ({current.role or 'no role'})"
            if current
            else "anonymous"
        )
        text = f"👤 {who} | {len(self.visible)} shown"
        if extra:
            text = f"{text} | {extra}"
        self.query_one("#status", Static).update(text)
        self._update_dashboard()

    def _update_dashboard(self) -> None:
        """Summary metrics for admins; a hint for everyone else."""
        panel = self.query_one("#dashboard", Static)
        if not self.session_store.is_admin:
            self.dashboard_text = "📊 Log in as admin for the dashboard"
            panel.update(self.dashboard_text)
            return
        summary = summarize(self.store.products)
        breakdown = ", ".join(
            f"{name}: {count}"
            for name, count in summary.category_breakdown.items()
        )
        self.dashboard_text = (
            f"📊 Total: {summary.total} | "
            f"Low stock: {summary.low_stock} | "
            f"Categories: {summary.category_count}"
            + (f" ({breakdown})" if breakdown else "")
        )
        panel.update(self.dashboard_text)

    def populate_table(self) -> None:
        """Fill the DataTable from the store's derived view."""
        self.visible = self.store.view(self.view_filter)
        table = cast(
            DataTable[str | Text],
            self.query_one("#products_table", DataTable),
        )
        table.clear()
        threshold = self.settings.LOW_STOCK_THRESHOLD
        for p in self.visible:
            stock_style = "bold red" if p.stock < threshold else ""
            table.add_row(
                p.id,
                p.name[:40],
                p.category,
                f"{self.settings.CURRENCY_SYMBOL}{p.price:.2f}",
                Text(str(p.stock), style=stock_style),
                p.description[:60],
            )
        self._update_status()

    # ── Filters ──────────────────────────────────────────

    def on_input_changed(self, event: Input.Changed) -> None:
        """Live-filter by name as the user types."""
        if event.input.id == "search_input":
            self.view_filter = ViewFilter(
                search=event.value,
                category=self.view_filter.category,
                sort=self.view_filter.sort,
            )
            self.populate_table()

    def on_select_changed(self, event: Select.Changed) -> None:
        """Apply category or sort selections."""
        value = _select_value(event.value)
        if event.select.id == "category_select":
            self.view_filter = ViewFilter(
                search=self.view_filter.search,
                category=value,
                sort=self.view_filter.sort,
            )
        elif event.select.id == "sort_select":
            self.view_filter = ViewFilter(
                search=self.view_filter.search,
                category=self.view_filter.category,
                sort=value,
            )
        else:
            return
        self.populate_table()

    # ── Product form ─────────────────────────────────────

    def on_data_table_row_selected(
        self, event: DataTable.RowSelected
    ) -> None:
        """Load the selected product into the form for editing."""
        if 0 <= event.cursor_row < len(self.visible):
            self.fill_form(self.visible[event.cursor_row])

    def fill_form(self, product: Product) -> None:
        """Show *product* in the form; saving will update it."""
        self.editing_id = product.id
        self.query_one("#form_name", Input).value = product.name
        category_select = self.query_one("#form_category", Select)
        if product.category in self.settings.CATEGORIES:
            category_select.value = product.category
        else:
            category_select.clear()
        self.query_one("#form_price", Input).value = f"{product.price:g}"
        self.query_one("#form_stock", Input).value = str(product.stock)
        self.query_one("#form_url", Input).value = product.url
        self.query_one("#form_description", Input).value = product.description
        self.query_one("#save_btn", Button).label = "Update"

    def clear_form(self) -> None:
        """Reset the form to add mode."""
        self.editing_id = None
        for widget_id in _FORM_INPUTS:
            self.query_one(f"#{widget_id}", Input).value = ""
        self.query_one("#form_category", Select).clear()
        self.query_one("#save_btn", Button).label = "Save"

    def _form_product(self) -> Product:
        """Build a candidate from the form; raises ``ValidationError``."""
        price_raw = self.query_one("#form_price", Input).value.strip()
        stock_raw = self.query_one("#form_stock", Input).value.strip()
        try:
            price = float(price_raw)
            stock = int(stock_raw)
        except ValueError as exc:
            raise ValidationError(
                "Please fill all required fields with valid values: "
                "price and stock must be numbers"
            ) from exc
        candidate = Product(
            name=self.query_one("#form_name", Input).value.strip(),
            category=_select_value(
                self.query_one("#form_category", Select).value
            ),
            price=price,
            stock=stock,
            description=self.query_one("#form_description", Input).value,
            url=self.query_one("#form_url", Input).value.strip(),
        )
        if self.editing_id is None:
            return candidate
        existing = self.store.get(self.editing_id)
        base = existing or candidate
        return replace(
            base,
            id=self.editing_id,
            name=candidate.name,
            category=candidate.category,
            price=candidate.price,
            stock=candidate.stock,
            description=candidate.description,
            url=candidate.url,
        )

    async def save_form(self) -> None:
        """Add or update the product described by the form."""
        if not self._require_admin():
            return
        try:
            candidate = self._form_product()
        except ValidationError as e:
            self.notify(str(e), severity="error")
            return
        try:
            if self.editing_id is None:
                await self.store.add(candidate)
            else:
                await self.store.update(candidate)
        except StorefrontError:
            # Store already notified; keep the form for correction
            return
        self.clear_form()
        self.populate_table()

    async def generate_description(self) -> None:
        """Fill the description field from the hosted model."""
        if not self._require_admin():
            return
        name = self.query_one("#form_name", Input).value
        category = _select_value(
            self.query_one("#form_category", Select).value
        )
        self._update_status("✨ generating description…")
        try:
            text = await self.generator.generate(name, category)
        except StorefrontError as e:
            logger.warning("Description generation failed: %s", e)
            self.notify(str(e), severity="error")
            self._update_status()
            return
        self.query_one("#form_description", Input).value = text
        self.notify("Description generated successfully!")
        self._update_status()

    # ── Session ──────────────────────────────────────────

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        """Dispatch auth, form, import and chart buttons."""
        button_id = event.button.id
        if button_id == "login_btn":
            await self.perform_login()
        elif button_id == "logout_btn":
            self.session_store.logout()
            self.notify("Logged out")
            self._update_status()
        elif button_id == "save_btn":
            await self.save_form()
        elif button_id == "clear_btn":
            self.clear_form()
        elif button_id == "generate_btn":
            await self.generate_description()
        elif button_id == "import_btn":
            await self.perform_import()
        elif button_id == "chart_btn":
            self.action_export_chart()

    async def perform_login(self) -> None:
        """Log in with the credentials typed into the auth bar."""
        username = self.query_one("#username_input", Input).value.strip()
        password_input = self.query_one("#password_input", Input)
        if not username or not password_input.value:
            self.notify(
                "Enter a username and password", severity="warning"
            )
            return
        try:
            await self.session_store.login(username, password_input.value)
        except AuthenticationError:
            self.notify("Invalid credentials", severity="error")
            return
        except StorefrontError as e:
            logger.error("Login failed", exc_info=True)
            self.notify(f"Login failed: {e}", severity="error")
            return
        finally:
            password_input.value = ""
        self.notify(f"Logged in as {username}!")
        self._update_status()

    def _require_admin(self) -> bool:
        if self.session_store.is_admin:
            return True
        self.notify("Admin login required", severity="warning")
        return False

    # ── Actions ──────────────────────────────────────────

    async def action_refresh(self) -> None:
        """Reload the catalog from the backend."""
        try:
            await self.store.load()
        except StorefrontError:
            # Store already notified; keep the last good view
            self._update_status("❌ refresh failed")
            return
        self.populate_table()

    async def perform_import(self) -> None:
        """Bulk-create products from the CSV path in the import bar."""
        if not self._require_admin():
            return
        path_input = self.query_one("#import_path", Input)
        csv_path = Path(path_input.value.strip()).expanduser()
        if not path_input.value.strip() or not csv_path.is_file():
            self.notify(f"File not found: {csv_path}", severity="error")
            return
        try:
            report = await self.transfer.import_file(csv_path)
        except OSError as e:
            logger.error("Failed to read %s", csv_path, exc_info=True)
            self.notify(f"Import failed: {e}", severity="error")
            return
        path_input.value = ""
        self.populate_table()
        if report.rejected:
            self._update_status(f"{report.rejected} malformed line(s) skipped")

    async def action_export_csv(self) -> None:
        """Refresh, then export the catalog to CSV."""
        if not self._require_admin():
            return
        try:
            path = await self.transfer.refresh_and_export_csv()
        except StorefrontError:
            return
        except OSError as e:
            logger.error("Failed to export CSV", exc_info=True)
            self.notify(f"Export failed: {e}", severity="error")
            return
        self.populate_table()
        self._update_status(f"saved {path.name}")

    async def action_export_document(self) -> None:
        """Refresh, then export the catalog as a paginated document."""
        if not self._require_admin():
            return
        try:
            path = await self.transfer.refresh_and_export_document()
        except StorefrontError:
            return
        except OSError as e:
            logger.error("Failed to export document", exc_info=True)
            self.notify(f"Export failed: {e}", severity="error")
            return
        self.populate_table()
        self._update_status(f"saved {path.name}")

    def action_export_chart(self) -> None:
        """Write the products-per-category chart and open it."""
        if not self._require_admin():
            return
        try:
            path = export_category_chart(summarize(self.store.products))
        except OSError as e:
            logger.error("Failed to export chart", exc_info=True)
            self.notify(f"Chart export failed: {e}", severity="error")
            return
        if path is None:
            self.notify("No products to chart", severity="warning")
            return
        self._update_status(f"chart {path.name}")

    async def action_delete_selected(self) -> None:
        """Delete the product under the table cursor."""
        if not self._require_admin():
            return
        table = cast(
            DataTable[str | Text],
            self.query_one("#products_table", DataTable),
        )
        row = table.cursor_row
        if not 0 <= row < len(self.visible):
            self.notify("No product selected", severity="warning")
            return
        product_id = self.visible[row].id
        try:
            await self.store.remove(product_id)
        except StorefrontError:
            return
        if self.editing_id == product_id:
            self.clear_form()
        self.populate_table()
