# storefront/cli/runner.py

"""Headless CLI commands that drive the same store the TUI uses."""

import json
import logging
import sys
from dataclasses import asdict, dataclass, replace
from pathlib import Path

from rich.console import Console
from rich.table import Table

from storefront.config.settings import Settings
from storefront.errors import StorefrontError
from storefront.filters.product_filter import ViewFilter
from storefront.models.product import Product
from storefront.services.api_client import ProductRepositoryClient
from storefront.services.dashboard import export_category_chart, summarize
from storefront.services.description_generator import DescriptionGenerator
from storefront.services.notifier import ERROR, WARNING, Notification, Notifier
from storefront.services.product_store import ProductStore
from storefront.services.session_store import SessionStore
from storefront.services.transfer_service import TransferService

logger = logging.getLogger("storefront.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)

_SEVERITY_STYLE = {ERROR: "red", WARNING: "yellow"}


def _print_notification(note: Notification) -> None:
    style = _SEVERITY_STYLE.get(note.severity, "green")
    _err.print(f"[{style}]{note.message}[/{style}]")


@dataclass
class CliContext:
    """Wired-up services for one CLI invocation."""

    client: ProductRepositoryClient
    notifier: Notifier
    store: ProductStore
    session: SessionStore


def build_context() -> CliContext:
    """Create the client, store and session context."""
    client = ProductRepositoryClient()
    notifier = Notifier()
    notifier.subscribe(_print_notification)
    return CliContext(
        client=client,
        notifier=notifier,
        store=ProductStore(client, notifier),
        session=SessionStore(client),
    )


def _require_admin(ctx: CliContext) -> bool:
    if ctx.session.is_admin:
        return True
    _err.print("[red]This command requires an admin login.[/red]")
    return False


def _products_to_dicts(products: list[Product]) -> list[dict[str, object]]:
    """Serialise a product list to plain dicts for JSON output."""
    return [asdict(p) for p in products]


def _print_table(products: list[Product]) -> None:
    """Render a Rich table of products to stdout."""
    table = Table(
        title="Product Inventory",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("ID", style="dim")
    table.add_column("Name", max_width=40)
    table.add_column("Category", style="magenta")
    table.add_column("Price", justify="right", style="green")
    table.add_column("Stock", justify="right")
    table.add_column("Description", max_width=50, overflow="fold")

    threshold = Settings.LOW_STOCK_THRESHOLD
    for p in products:
        stock = (
            f"[bold red]{p.stock}[/bold red]"
            if p.stock < threshold
            else str(p.stock)
        )
        table.add_row(
            p.id,
            p.name,
            p.category,
            f"{Settings.CURRENCY_SYMBOL}{p.price:,.2f}",
            stock,
            p.description or "-",
        )

    Console().print(table)


async def cli_list(
    search: str,
    category: str,
    sort: str,
    output_format: str,
) -> int:
    """Load the catalog and print the filtered view."""
    ctx = build_context()
    try:
        await ctx.store.load()
    except StorefrontError:
        return 1

    products = ctx.store.view(
        ViewFilter(search=search, category=category, sort=sort)
    )
    if not products:
        _err.print("[yellow]No products found.[/yellow]")

    if output_format == "table":
        _print_table(products)
    else:
        json.dump(
            _products_to_dicts(products),
            sys.stdout,
            ensure_ascii=False,
            indent=2,
        )
        sys.stdout.write("\n")
    return 0


async def cli_add(
    name: str,
    category: str,
    price: float,
    stock: int,
    description: str,
    url: str,
) -> int:
    """Create one product."""
    ctx = build_context()
    if not _require_admin(ctx):
        return 1
    candidate = Product(
        name=name,
        category=category,
        price=price,
        stock=stock,
        description=description,
        url=url,
    )
    try:
        await ctx.store.load()
        created = await ctx.store.add(candidate)
    except StorefrontError:
        return 1
    sys.stdout.write(f"{created.id}\n")
    return 0


async def cli_update(
    product_id: str,
    name: str | None,
    category: str | None,
    price: float | None,
    stock: int | None,
    description: str | None,
    url: str | None,
) -> int:
    """Replace one product, keeping fields that were not given."""
    ctx = build_context()
    if not _require_admin(ctx):
        return 1
    try:
        await ctx.store.load()
    except StorefrontError:
        return 1

    existing = ctx.store.get(product_id)
    if existing is None:
        _err.print(f"[red]No product with id {product_id}.[/red]")
        return 1

    changes = {
        "name": name,
        "category": category,
        "price": price,
        "stock": stock,
        "description": description,
        "url": url,
    }
    record = replace(
        existing, **{k: v for k, v in changes.items() if v is not None}
    )
    try:
        await ctx.store.update(record)
    except StorefrontError:
        return 1
    return 0


async def cli_delete(product_id: str) -> int:
    """Delete one product by id."""
    ctx = build_context()
    if not _require_admin(ctx):
        return 1
    try:
        await ctx.store.load()
        await ctx.store.remove(product_id)
    except StorefrontError:
        return 1
    return 0


async def cli_import(path: str, naive: bool) -> int:
    """Bulk-create products from a CSV file."""
    ctx = build_context()
    if not _require_admin(ctx):
        return 1
    csv_path = Path(path)
    if not csv_path.is_file():
        _err.print(f"[red]File not found: {csv_path}[/red]")
        return 1

    try:
        await ctx.store.load()
    except StorefrontError:
        return 1
    report = await TransferService(ctx.store).import_file(csv_path, naive=naive)
    if report.rejected:
        _err.print(
            f"[dim]{report.rejected} malformed line(s) skipped[/dim]"
        )
    return 0 if not report.failures else 1


async def cli_export(kind: str) -> int:
    """Refresh from the backend and write an export file."""
    ctx = build_context()
    if not _require_admin(ctx):
        return 1
    transfer = TransferService(ctx.store)
    try:
        if kind == "document":
            path = await transfer.refresh_and_export_document()
        else:
            path = await transfer.refresh_and_export_csv()
    except StorefrontError:
        return 1
    except OSError as exc:
        logger.error("Export failed: %s", exc, exc_info=True)
        _err.print(f"[red]Export failed: {exc}[/red]")
        return 1
    _err.print(f"[dim]Saved → {path}[/dim]")
    return 0


async def cli_dashboard(chart: bool) -> int:
    """Print admin summary metrics, optionally exporting the chart."""
    ctx = build_context()
    if not _require_admin(ctx):
        return 1
    try:
        products = await ctx.store.load()
    except StorefrontError:
        return 1

    summary = summarize(products)
    table = Table(title="Admin Dashboard", title_style="bold cyan")
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")
    table.add_row("Total Products", str(summary.total))
    table.add_row("Low Stock Alerts", str(summary.low_stock))
    table.add_row("Categories", str(summary.category_count))
    for name, count in summary.category_breakdown.items():
        table.add_row(f"  {name}", str(count))
    Console().print(table)

    if chart:
        path = export_category_chart(summary)
        if path is not None:
            _err.print(f"[dim]Chart saved → {path}[/dim]")
    return 0


async def cli_describe(name: str, category: str) -> int:
    """Generate a product description and print it."""
    generator = DescriptionGenerator()
    try:
        text = await generator.generate(name, category)
    except StorefrontError as exc:
        _err.print(f"[red]{exc}[/red]")
        return 1
    sys.stdout.write(f"{text}\n")
    return 0


async def cli_login(username: str, password: str) -> int:
    """Log in and persist the session."""
    ctx = build_context()
    try:
        session = await ctx.session.login(username, password)
    except StorefrontError as exc:
        _err.print(f"[red]{exc}[/red]")
        return 1
    _err.print(
        f"[green]Logged in as {session.username}! "
        f"(role: {session.role or 'none'})[/green]"
    )
    return 0


def cli_logout() -> int:
    """Clear the persisted session."""
    ctx = build_context()
    ctx.session.logout()
    _err.print("[green]Logged out.[/green]")
    return 0


def cli_whoami() -> int:
    """Print the current session, if any."""
    ctx = build_context()
    current = ctx.session.current
    if current is None:
        _err.print("[yellow]Not logged in.[/yellow]")
        return 1
    sys.stdout.write(f"{current.username} ({current.role or 'none'})\n")
    return 0
