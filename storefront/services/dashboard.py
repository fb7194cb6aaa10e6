# storefront/services/dashboard.py

"""Admin dashboard metrics and the Plotly category chart."""

import importlib
import logging
import webbrowser
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from types import ModuleType
from typing import Any

from storefront.config.settings import Settings
from storefront.models.product import Product

logger = logging.getLogger("storefront.dashboard")


@dataclass
class DashboardSummary:
    """Headline numbers shown on the admin dashboard."""

    total: int = 0
    low_stock: int = 0
    category_count: int = 0
    category_breakdown: dict[str, int] = field(
        default_factory=lambda: dict[str, int]()
    )


def summarize(
    products: list[Product],
    threshold: int | None = None,
) -> DashboardSummary:
    """Count products, low-stock items and products per category."""
    limit = Settings.LOW_STOCK_THRESHOLD if threshold is None else threshold
    breakdown: dict[str, int] = {}
    for p in products:
        breakdown[p.category] = breakdown.get(p.category, 0) + 1

    return DashboardSummary(
        total=len(products),
        low_stock=sum(1 for p in products if p.stock < limit),
        category_count=len(breakdown),
        category_breakdown=breakdown,
    )


def _get_plotly_go() -> ModuleType:
    """Import plotly.graph_objects lazily."""
    return importlib.import_module("plotly.graph_objects")


def _ensure_charts_dir() -> Path:
    charts_dir = Settings.CHARTS_DIR
    charts_dir.mkdir(parents=True, exist_ok=True)
    return charts_dir


def build_category_chart(summary: DashboardSummary) -> Any:
    """Build a Plotly bar chart of products per category."""
    go = _get_plotly_go()
    names = list(summary.category_breakdown)
    counts = [summary.category_breakdown[n] for n in names]

    fig: Any = go.Figure()
    fig.add_trace(go.Bar(
        x=names,
        y=counts,
        marker_color="#8884d8",
        hovertemplate="%{x}: %{y} products<extra></extra>",
    ))
    fig.update_layout(
        title=(
            f"Products per Category ({summary.total} total, "
            f"{summary.low_stock} low stock)"
        ),
        xaxis_title="Category",
        yaxis_title="Products",
        template="plotly_white",
    )
    return fig


def export_category_chart(
    summary: DashboardSummary,
    open_browser: bool = True,
) -> Path | None:
    """Write the category chart as HTML; ``None`` when there is no data."""
    if not summary.category_breakdown:
        logger.warning("No products to chart")
        return None

    fig = build_category_chart(summary)
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    filepath = _ensure_charts_dir() / f"categories_{stamp}.html"
    fig.write_html(str(filepath))
    logger.info("Category chart saved to %s", filepath)

    if open_browser:
        webbrowser.open(filepath.as_uri())

    return filepath
