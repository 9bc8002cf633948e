"""Table rendering for card and metric listings."""

from __future__ import annotations

from typing import Any

from rich import box
from rich.markup import escape
from rich.table import Table

from ..cards.models import Card
from ..metrics.models import Metric

CARD_COLUMNS = ("name", "repository", "date", "contact", "version", "uid")
METRIC_COLUMNS = ("metric", "value", "step", "timestamp")


def _new_table(columns: tuple[str, ...], title: str | None = None) -> Table:
    table = Table(title=title, box=box.SQUARE)
    for column in columns:
        table.add_column(column, justify="center")
    return table


def _cell(value: Any) -> str:
    return "None" if value is None else escape(str(value))


def card_table(cards: list[Card], title: str | None = None) -> Table:
    """Build a table with one row per card. Missing dates render blank."""
    table = _new_table(CARD_COLUMNS, title)
    for card in cards:
        table.add_row(
            escape(card.name),
            escape(card.repository),
            escape(card.date or ""),
            escape(card.contact),
            escape(card.version),
            escape(card.uid),
        )
    return table


def metric_table(metrics: list[Metric], title: str | None = None) -> Table:
    """Build a table with one row per metric. Missing step/timestamp render as None."""
    table = _new_table(METRIC_COLUMNS, title)
    for metric in metrics:
        table.add_row(
            escape(metric.name),
            _cell(metric.value),
            _cell(metric.step),
            _cell(metric.timestamp),
        )
    return table
