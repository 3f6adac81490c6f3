"""Drawing style constants for schematic items."""
from dataclasses import dataclass

from schemview.sch.models import Color, StrokePattern

# Draw categories, in render order (back to front)
PAGE = "page"
SYMBOLS = "symbols"
WIRES = "wires"
JUNCTIONS = "junctions"
TEXTS = "texts"
POLYLINES = "polylines"
NO_CONNECTS = "no_connects"
LABELS = "labels"

DRAW_ORDER = [PAGE, SYMBOLS, WIRES, JUNCTIONS, TEXTS, POLYLINES, NO_CONNECTS, LABELS]

# Colors (KiCad default schematic look)
BACKGROUND_COLOR = "#F5F4EF"
PAGE_COLOR = "#840000"        # Dark red - sheet frame and comb
SYMBOL_COLOR = "#840000"      # Dark red - symbol bodies
SYMBOL_BODY_COLOR = "#FFFFC2"  # Pale yellow - background fill
PIN_COLOR = "#840000"
WIRE_COLOR = "#008400"        # Green - wires
JUNCTION_COLOR = "#008400"
TEXT_COLOR = "#000084"        # Dark blue - free text and graphic lines
PROPERTY_COLOR = "#006464"    # Teal - reference/value fields
LABEL_COLOR = "#840000"
NO_CONNECT_COLOR = "#0000C8"

# Stroke widths (mm)
DEFAULT_STROKE_WIDTH = 0.1524
WIRE_STROKE_WIDTH = 0.1524
PAGE_STROKE_WIDTH = 0.1

# Extra radius added to a junction's diameter when drawn (mm)
JUNCTION_RADIUS_PAD = 0.2

# Half-size of the no-connect "X" and label flag unit (mm)
MARKER_SIZE = 1.0
LABEL_TEXT_OFFSET = 2.5

# Dash patterns in mm, scaled at draw time
DASH_PATTERNS: dict[StrokePattern, tuple[float, ...]] = {
    StrokePattern.DEFAULT: (),
    StrokePattern.SOLID: (),
    StrokePattern.DASH: (2.0, 2.0),
    StrokePattern.DOT: (0.2, 1.0),
    StrokePattern.DASH_DOT: (2.0, 1.0, 0.2, 1.0),
    StrokePattern.DASH_DOT_DOT: (2.0, 1.0, 0.2, 1.0, 0.2, 1.0),
}


@dataclass(frozen=True)
class Paint:
    """Explicit style for one draw call; widths and dashes are in mm."""
    stroke_color: str
    fill_color: str
    stroke_width: float = DEFAULT_STROKE_WIDTH
    dash: tuple[float, ...] = ()


def css_color(color: Color, default: str) -> str:
    """
    CSS color for an RGBA tuple; all-zero means default.

    Files written by KiCad store alpha as 0 or 1, so alpha only counts as a
    0-255 opacity above 1.
    """
    if not any(color):
        return default
    r, g, b, a = color
    if a <= 1:
        return f"rgb({r}, {g}, {b})"
    return f"rgba({r}, {g}, {b}, {a / 255:.3f})"
