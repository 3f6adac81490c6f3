"""Sheet frame: border rectangles and the coordinate comb."""
from schemview.config import COMB_SPACING, FRAME_INSET
from schemview.sch.models import FillPolicy, Page, Placement, Rect, Stroke, Text

from .elements import RenderContext, draw_rect, draw_text
from .styles import PAGE_COLOR, PAGE_STROKE_WIDTH

# Label sits half a cell in; the tick sits at the next cell boundary
LABEL_OFFSET = COMB_SPACING / 2

_FRAME_STROKE = Stroke(width=PAGE_STROKE_WIDTH)


def _rect(x0: float, y0: float, x1: float, y1: float) -> Rect:
    return Rect(
        start=Placement(x0, y0),
        end=Placement(x1, y1),
        stroke=_FRAME_STROKE,
        fill=FillPolicy.NONE,
    )


def frame_rects(page: Page) -> list[Rect]:
    """Full sheet, margin box, and inner margin box."""
    top, left, bottom, right = page.margins
    w, h = page.width, page.height
    return [
        _rect(0.0, 0.0, w, h),
        _rect(left, top, w - right, h - bottom),
        _rect(left + FRAME_INSET, top + FRAME_INSET, w - right - FRAME_INSET, h - bottom - FRAME_INSET),
    ]


def comb_items(page: Page) -> list[Rect | Text]:
    """
    Coordinate comb: numbers along top/bottom, letters along left/right.

    Each cell gets a label at its middle and a tick at its far edge; labels
    and ticks beyond the margin box are skipped.
    """
    top, left, bottom, right = page.margins
    w, h = page.width, page.height
    max_x = w - right
    max_y = h - bottom
    items: list[Rect | Text] = []

    for index in range(int(w / COMB_SPACING) + 1):
        for y in (top, h - bottom - FRAME_INSET):
            x = index * COMB_SPACING + LABEL_OFFSET + left
            if x > max_x:
                continue
            items.append(Text(text=str(index + 1), position=Placement(x, y + 1.7)))
            x += LABEL_OFFSET
            if x > max_x:
                continue
            items.append(_rect(x, y, x, y + FRAME_INSET))

    for index in range(int(h / COMB_SPACING) + 1):
        for x in (left, w - right - FRAME_INSET):
            y = index * COMB_SPACING + LABEL_OFFSET + top
            if y > max_y:
                continue
            items.append(Text(text=chr(ord("a") + index), position=Placement(x + 0.3, y)))
            y += LABEL_OFFSET
            if y > max_y:
                continue
            items.append(_rect(x, y, x + FRAME_INSET, y))

    return items


def draw_page(ctx: RenderContext, page: Page) -> None:
    for rect in frame_rects(page):
        draw_rect(ctx, rect, PAGE_COLOR)
    for item in comb_items(page):
        if isinstance(item, Text):
            draw_text(ctx, item, PAGE_COLOR)
        else:
            draw_rect(ctx, item, PAGE_COLOR)
