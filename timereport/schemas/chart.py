# timereport/schemas/chart.py
from pydantic import BaseModel, Field
from typing import List

class ChartDatum(BaseModel):
    label: str
    value: float = Field(ge=0)

class ChartLayout(BaseModel):
    chart_height: float = 250
    bar_width: float = 30
    bar_margin: float = 15
    # Headroom kept free above the tallest bar (value label) and below it (category row).
    vertical_margin: float = 40
    bottom_margin: float = 20
    value_label_offset: float = 5
    category_label_offset: float = 5

class Point(BaseModel):
    x: float
    y: float

class BarGeometry(BaseModel):
    label: str
    value: float
    value_text: str
    x: float
    y: float
    width: float
    height: float
    value_label: Point
    category_label: Point

class ChartGeometry(BaseModel):
    width: float
    height: float
    bars: List[BarGeometry]
