# src/storage/report_exporter.py

"""Render report models into standalone HTML documents with Plotly."""

import html
import importlib
import logging
import webbrowser
from datetime import datetime
from pathlib import Path
from types import ModuleType
from typing import Any

from src.config.settings import Settings
from src.models.report_model import ReportModel

logger = logging.getLogger("quickcart.reports")

_REPORTS_DIR: Path = Settings.REPORTS_DIR

_BAR_PALETTE = [
    "#3b82f6", "#22c55e", "#f97316", "#a855f7", "#0ea5e9", "#f973a1",
]

_PAGE_TEMPLATE = """\
<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>{title}</title>
<style>
body {{ font-family: Helvetica, Arial, sans-serif; margin: 40px; color: #111827; }}
h1 {{ color: #2563eb; text-align: center; margin-bottom: 4px; }}
.subtitle {{ color: #4b5563; text-align: center; }}
.generated {{ color: #6b7280; text-align: right; font-size: 0.9em; }}
.cards {{ display: flex; flex-wrap: wrap; gap: 15px; margin: 20px 0; }}
.card {{ border: 1px solid #e5e7eb; border-radius: 12px; padding: 12px; min-width: 160px; }}
.card .label {{ color: #6b7280; font-size: 0.9em; }}
.card .value {{ font-size: 1.5em; font-weight: bold; }}
footer {{ color: #6b7280; text-align: center; font-size: 0.85em; margin-top: 30px; }}
</style>
</head>
<body>
<h1>{title}</h1>
<p class="subtitle">{subtitle}</p>
<p class="generated">Generated on: {generated}</p>
{body}
<footer>{footer}</footer>
</body>
</html>
"""


def _get_plotly_go() -> ModuleType:
    """Import plotly.graph_objects lazily."""
    return importlib.import_module("plotly.graph_objects")


def _ensure_reports_dir() -> Path:
    """Create the reports directory if it doesn't exist."""
    _REPORTS_DIR.mkdir(parents=True, exist_ok=True)
    return _REPORTS_DIR


def _cards_html(report: ReportModel) -> str:
    if not report.summary_cards:
        return ""
    cards = "".join(
        '<div class="card">'
        f'<div class="label">{html.escape(c.label)}</div>'
        f'<div class="value">{html.escape(c.display)}</div>'
        "</div>"
        for c in report.summary_cards
    )
    return (
        f'<div class="cards">{cards}</div>'
        f"<p>Top category: {html.escape(report.top_category)}</p>"
    )


def _histogram_figure(report: ReportModel) -> Any:
    """Bar chart of products per category, or ``None`` when empty."""
    if not report.category_histogram:
        return None
    go = _get_plotly_go()
    buckets = report.category_histogram
    fig: Any = go.Figure()
    fig.add_trace(go.Bar(
        x=[b.category for b in buckets],
        y=[b.count for b in buckets],
        text=[str(b.count) for b in buckets],
        textposition="outside",
        marker_color=[
            _BAR_PALETTE[i % len(_BAR_PALETTE)]
            for i in range(len(buckets))
        ],
        hovertemplate="%{x}: %{y} products<extra></extra>",
    ))
    fig.update_layout(
        title="Category Distribution",
        xaxis_title="Category",
        yaxis_title="Products",
        template="plotly_white",
    )
    return fig


def _table_figure(report: ReportModel) -> Any:
    """Table figure holding the report rows."""
    go = _get_plotly_go()
    if report.rows and report.rows[0].placeholder:
        columns = ["Details"]
        cells = [[report.rows[0].cells[0]]]
    else:
        columns = report.columns
        cells = [
            [row.cells[i] for row in report.rows]
            for i in range(len(columns))
        ]
    fig: Any = go.Figure(data=[go.Table(
        header={
            "values": columns,
            "fill_color": "#eff6ff",
            "align": "left",
        },
        cells={
            "values": cells,
            "fill_color": [[
                "#ffffff" if i % 2 == 0 else "#f9fafb"
                for i in range(len(cells[0]))
            ]],
            "align": "left",
        },
    )])
    fig.update_layout(
        title="Details",
        template="plotly_white",
        height=max(300, 40 + 30 * len(cells[0])),
    )
    return fig


def render_report_html(report: ReportModel) -> str:
    """Render *report* to a complete HTML document string."""
    parts: list[str] = [_cards_html(report)]
    plotly_js: str | bool = "cdn"

    bar = _histogram_figure(report)
    if bar is not None:
        parts.append(bar.to_html(full_html=False, include_plotlyjs=plotly_js))
        plotly_js = False
    elif report.summary_cards:
        parts.append("<p>No category data available.</p>")

    table = _table_figure(report)
    parts.append(table.to_html(full_html=False, include_plotlyjs=plotly_js))

    return _PAGE_TEMPLATE.format(
        title=html.escape(report.header.title),
        subtitle=html.escape(report.header.subtitle),
        generated=f"{report.header.generated_at:%Y-%m-%d %H:%M}",
        body="\n".join(parts),
        footer="<br>".join(html.escape(line) for line in report.footer),
    )


def export_report(
    report: ReportModel,
    slug: str = "inventory",
    open_browser: bool = False,
) -> Path:
    """Write *report* as HTML into the reports directory."""
    reports_dir = _ensure_reports_dir()
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    filepath = reports_dir / f"{slug}_{stamp}.html"
    filepath.write_text(render_report_html(report), encoding="utf-8")
    logger.info("Report saved to %s", filepath)

    if open_browser:
        webbrowser.open(filepath.as_uri())

    return filepath
