# src/models/report_model.py

"""Renderer-independent report structures."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class ReportHeader:
    """Title block of a report."""

    title: str
    subtitle: str
    generated_at: datetime


@dataclass
class SummaryCard:
    """One labelled headline figure."""

    label: str
    value: float | int
    display: str


@dataclass
class CategoryBucket:
    """Histogram bar: products in a category, scaled to the largest bar."""

    category: str
    count: int
    bar_ratio: float


@dataclass
class ReportRow:
    """A display-formatted table row."""

    cells: list[str]
    placeholder: bool = False


@dataclass
class ReportModel:
    """Logical content of a report, consumed by a renderer."""

    header: ReportHeader
    columns: list[str]
    rows: list[ReportRow]
    summary_cards: list[SummaryCard] = field(
        default_factory=lambda: list[SummaryCard]()
    )
    category_histogram: list[CategoryBucket] = field(
        default_factory=lambda: list[CategoryBucket]()
    )
    top_category: str = "N/A"
    footer: list[str] = field(
        default_factory=lambda: list[str]()
    )
