# timereport/services/charting.py
from typing import Iterable, List, Optional, Union

from timereport.core.config import settings
from timereport.schemas.chart import BarGeometry, ChartDatum, ChartGeometry, ChartLayout, Point
from timereport.schemas.report import LabeledHours
from timereport.services.formatting import format_hours


def default_layout() -> ChartLayout:
    """Chart layout built from the configured bar dimensions."""
    return ChartLayout(
        chart_height=settings.CHART_HEIGHT,
        bar_width=settings.CHART_BAR_WIDTH,
        bar_margin=settings.CHART_BAR_MARGIN,
    )


def layout_bars(data: Iterable[Union[ChartDatum, dict]], layout: Optional[ChartLayout] = None) -> ChartGeometry:
    """
    Scales each value against the largest one so the tallest bar fills
    chart_height - vertical_margin. Bars are placed left to right in input order.
    """
    layout = layout or ChartLayout()
    items: List[ChartDatum] = [d if isinstance(d, ChartDatum) else ChartDatum(**d) for d in data]

    max_value = max([item.value for item in items] + [0])
    drawable = layout.chart_height - layout.vertical_margin
    step = layout.bar_width + layout.bar_margin

    bars = []
    for index, item in enumerate(items):
        bar_height = (item.value / max_value) * drawable if max_value > 0 else 0
        x = index * step
        y = layout.chart_height - bar_height - layout.bottom_margin
        center = x + layout.bar_width / 2
        bars.append(BarGeometry(
            label=item.label,
            value=item.value,
            value_text=format_hours(item.value),
            x=x,
            y=y,
            width=layout.bar_width,
            height=bar_height,
            value_label=Point(x=center, y=y - layout.value_label_offset),
            category_label=Point(x=center, y=layout.chart_height - layout.category_label_offset),
        ))

    return ChartGeometry(width=len(items) * step, height=layout.chart_height, bars=bars)


def chart_from_hours(rows: Iterable[LabeledHours], layout: Optional[ChartLayout] = None) -> ChartGeometry:
    return layout_bars([ChartDatum(label=row.label, value=row.hours) for row in rows], layout)
