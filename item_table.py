# item_table.py
from __future__ import annotations

from typing import NamedTuple, Sequence

from text_layout import wrap_text

# All lengths in page units (mm)
MIN_ROW_HEIGHT = 15
LINE_HEIGHT = 5
ROW_PADDING = 6
CELL_PADDING = 4
HEADER_ROW_HEIGHT = 10

# Description / Qty / Rate / Amount
COLUMN_FRACTIONS = (0.5, 0.15, 0.175, 0.175)
COLUMN_TITLES = ("Description", "Qty", "Rate", "Amount")

BODY_FONT = "Helvetica"
BODY_SIZE = 9


class TableMetrics(NamedTuple):
    total_height: float
    row_heights: tuple[float, ...]


def column_widths(table_width: float) -> tuple[float, ...]:
    return tuple(table_width * f for f in COLUMN_FRACTIONS)


def description_column_width(table_width: float) -> float:
    return table_width * COLUMN_FRACTIONS[0] - 2 * CELL_PADDING


def row_height(line_count: int) -> float:
    return max(MIN_ROW_HEIGHT, line_count * LINE_HEIGHT + ROW_PADDING)


def description_lines(description: str, table_width: float) -> list[str]:
    return wrap_text(description, description_column_width(table_width), BODY_FONT, BODY_SIZE)


def measure_item_rows(items: Sequence, table_width: float) -> TableMetrics:
    """
    Per-row heights and their sum for the items table.

    Both the table itself and everything placed below it (summary, notes,
    payment card) go through this function, so it must stay pure: no caching,
    same inputs -> same numbers.
    """
    heights = tuple(
        row_height(len(description_lines(item.description, table_width)))
        for item in items
    )
    return TableMetrics(total_height=float(sum(heights)), row_heights=heights)
