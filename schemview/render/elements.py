"""Draw-command generators for schematic items."""
import math
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator

from schemview.config import DEFAULT_FONT_SIZE
from schemview.sch.models import (
    Arc, Circle, Effects, FillPolicy, Junction, Label, LabelKind, NoConnect,
    Pin, Placement, Polyline, Property, Rect, Stroke, Symbol, SymbolInstance,
    Text, Wire
)

from .commands import (
    ArcTo, BeginPath, DrawList, FillPath, FillText, LineTo, MoveTo,
    RectPath, SetFill, SetStroke, StrokePath
)
from .geometry import arc_from_three_points, is_upside_down, normalize_degrees
from .styles import (
    DASH_PATTERNS, DEFAULT_STROKE_WIDTH, JUNCTION_COLOR, JUNCTION_RADIUS_PAD,
    LABEL_COLOR, LABEL_TEXT_OFFSET, MARKER_SIZE, NO_CONNECT_COLOR, PIN_COLOR,
    PROPERTY_COLOR, SYMBOL_BODY_COLOR, SYMBOL_COLOR, TEXT_COLOR, Paint, css_color
)
from .transform import Transform


@dataclass
class RenderContext:
    """Per-render state threaded through the draw functions."""
    out: DrawList
    scale: float
    angle: float = 0.0  # rotation inherited from enclosing instances (degrees)

    @contextmanager
    def rotated(self, angle: float) -> Iterator[None]:
        self.angle += angle
        try:
            yield
        finally:
            self.angle -= angle


def paint_for(stroke: Stroke, fill: FillPolicy, default_color: str) -> Paint:
    """Paint for a stroked shape; an all-zero stroke falls back to the defaults."""
    stroke_color = css_color(stroke.color, default_color)
    if fill == FillPolicy.OUTLINE:
        fill_color = stroke_color
    else:
        fill_color = SYMBOL_BODY_COLOR
    return Paint(
        stroke_color=stroke_color,
        fill_color=fill_color,
        stroke_width=stroke.width if stroke.width > 0 else DEFAULT_STROKE_WIDTH,
        dash=DASH_PATTERNS[stroke.pattern],
    )


@contextmanager
def filled(ctx: RenderContext, fill: FillPolicy, paint: Paint) -> Iterator[None]:
    """
    Bracket one shape in its own path.

    The pending path is stroked before the style changes; afterwards the
    shape is filled and/or stroked according to fill and a new path begun.
    """
    out = ctx.out
    out.emit(StrokePath())
    out.emit(SetStroke(
        width=paint.stroke_width * ctx.scale,
        color=paint.stroke_color,
        dash=tuple(d * ctx.scale for d in paint.dash),
    ))
    out.emit(SetFill(paint.fill_color))
    out.emit(BeginPath())
    yield
    if fill == FillPolicy.BACKGROUND:
        out.emit(FillPath())
    elif fill == FillPolicy.OUTLINE:
        out.emit(FillPath())
        out.emit(StrokePath())
    else:
        out.emit(StrokePath())
    out.emit(BeginPath())


def _move(ctx: RenderContext, x: float, y: float) -> None:
    ctx.out.emit(MoveTo(x * ctx.scale, y * ctx.scale))


def _line(ctx: RenderContext, x: float, y: float) -> None:
    ctx.out.emit(LineTo(x * ctx.scale, y * ctx.scale))


# Primitives

def draw_wire(ctx: RenderContext, wire: Wire) -> None:
    """Add a wire to the current path; the caller strokes it."""
    if not wire.points:
        return
    _move(ctx, wire.points[0].x, wire.points[0].y)
    for point in wire.points:
        _line(ctx, point.x, point.y)


def draw_polyline(ctx: RenderContext, poly: Polyline, default_color: str = SYMBOL_COLOR) -> None:
    if not poly.points:
        return
    with filled(ctx, poly.fill, paint_for(poly.stroke, poly.fill, default_color)):
        _move(ctx, poly.points[0].x, poly.points[0].y)
        for point in poly.points:
            _line(ctx, point.x, point.y)


def draw_rect(ctx: RenderContext, rect: Rect, default_color: str = SYMBOL_COLOR) -> None:
    s = ctx.scale
    x0, y0 = rect.start.x, rect.start.y
    x1, y1 = rect.end.x, rect.end.y
    with filled(ctx, rect.fill, paint_for(rect.stroke, rect.fill, default_color)):
        _move(ctx, x0, y0)
        ctx.out.emit(RectPath(x0 * s, y0 * s, (x1 - x0) * s, (y1 - y0) * s))


def draw_circle(ctx: RenderContext, circle: Circle, default_color: str = SYMBOL_COLOR) -> None:
    s = ctx.scale
    cx, cy = circle.center.x, circle.center.y
    with filled(ctx, circle.fill, paint_for(circle.stroke, circle.fill, default_color)):
        _move(ctx, cx + circle.radius, cy)
        ctx.out.emit(ArcTo(cx * s, cy * s, circle.radius * s, 0.0, 2 * math.pi))


def draw_arc(ctx: RenderContext, arc: Arc, default_color: str = SYMBOL_COLOR) -> None:
    """
    Draw an arc given by three points.

    Raises:
        DegenerateArc: if the control points are colinear
    """
    s = ctx.scale
    geom = arc_from_three_points(
        (arc.start.x, arc.start.y),
        (arc.mid.x, arc.mid.y),
        (arc.end.x, arc.end.y),
    )
    with filled(ctx, arc.fill, paint_for(arc.stroke, arc.fill, default_color)):
        _move(ctx, arc.start.x, arc.start.y)
        ctx.out.emit(ArcTo(
            geom.cx * s, geom.cy * s, geom.radius * s,
            geom.start_angle, geom.end_angle, geom.anticlockwise,
        ))


def draw_pin(ctx: RenderContext, pin: Pin) -> None:
    """Pin stub from its anchor along its own angle; adds to the current path."""
    out = ctx.out
    with out.transformed(Transform.translate(pin.position.x * ctx.scale, pin.position.y * ctx.scale)):
        with out.transformed(Transform.rotate(math.radians(pin.position.angle))):
            out.emit(MoveTo(0.0, 0.0))
            out.emit(LineTo(pin.length * ctx.scale, 0.0))


def draw_junction(ctx: RenderContext, junction: Junction) -> None:
    s = ctx.scale
    color = css_color(junction.color, JUNCTION_COLOR)
    paint = Paint(stroke_color=color, fill_color=color)
    radius = junction.diameter + JUNCTION_RADIUS_PAD
    x, y = junction.position.x, junction.position.y
    with filled(ctx, FillPolicy.BACKGROUND, paint):
        _move(ctx, x + radius, y)
        ctx.out.emit(ArcTo(x * s, y * s, radius * s, 0.0, 2 * math.pi))


def _draw_cross(ctx: RenderContext) -> None:
    """An "X" around the local origin."""
    s = ctx.scale * MARKER_SIZE
    out = ctx.out
    out.emit(MoveTo(-s, -s))
    out.emit(LineTo(s, s))
    out.emit(MoveTo(-s, s))
    out.emit(LineTo(s, -s))


def draw_no_connect(ctx: RenderContext, nc: NoConnect) -> None:
    paint = Paint(stroke_color=NO_CONNECT_COLOR, fill_color=NO_CONNECT_COLOR)
    with filled(ctx, FillPolicy.NONE, paint):
        with ctx.out.transformed(Transform.translate(nc.position.x * ctx.scale, nc.position.y * ctx.scale)):
            _draw_cross(ctx)


# Text

def font_size(effects: Effects) -> float:
    """Text height in mm."""
    return effects.font_size[0] if effects.font_size[0] > 0 else DEFAULT_FONT_SIZE


@contextmanager
def text_frame(ctx: RenderContext, position: Placement, angle: float) -> Iterator[bool]:
    """
    Move the canvas to a text anchor and rotate it to the text angle.

    Upside-down text, judged by the effective angle (angle plus the rotation
    inherited from enclosing instances), gets an extra half turn. Yields True
    in that case so the caller right-aligns.
    """
    local = normalize_degrees(angle)
    flipped = is_upside_down(local + ctx.angle)
    rotation = -math.radians(local)
    if flipped:
        rotation -= math.pi
    out = ctx.out
    with out.transformed(Transform.translate(position.x * ctx.scale, position.y * ctx.scale)):
        with out.transformed(Transform.rotate(rotation)):
            yield flipped


def _emit_fill(ctx: RenderContext, color: str) -> None:
    ctx.out.emit(SetFill(color))


def draw_text(ctx: RenderContext, text: Text, color: str = TEXT_COLOR) -> None:
    """Free text; a literal ``\\n`` starts a new line."""
    if text.effects.hide:
        return
    size = font_size(text.effects) * ctx.scale
    _emit_fill(ctx, color)
    with text_frame(ctx, text.position, text.position.angle) as flipped:
        align = "right" if flipped else "left"
        for index, line in enumerate(text.text.split("\\n")):
            ctx.out.emit(FillText(line, 0.0, size * index, align=align, size=size))


def draw_property(ctx: RenderContext, prop: Property, instance_angle: float) -> None:
    """
    A property value at its absolute position.

    The owning instance's rotation is added to the property's own angle;
    the instance's translation and mirroring do not apply.
    """
    if not prop.visible:
        return
    size = font_size(prop.effects) * ctx.scale
    _emit_fill(ctx, PROPERTY_COLOR)
    with text_frame(ctx, prop.position, prop.position.angle + instance_angle) as flipped:
        align = "right" if flipped else "left"
        ctx.out.emit(FillText(prop.value, 0.0, size, align=align, size=size))


def _draw_flag(ctx: RenderContext) -> None:
    """Label flag outline pointing at the local origin."""
    s = ctx.scale * MARKER_SIZE
    out = ctx.out
    out.emit(MoveTo(0.0, 0.0))
    out.emit(LineTo(s, s))
    out.emit(LineTo(2 * s, s))
    out.emit(LineTo(2 * s, -s))
    out.emit(LineTo(s, -s))
    out.emit(LineTo(0.0, 0.0))


def draw_label(ctx: RenderContext, label: Label) -> None:
    if label.effects.hide:
        return
    size = font_size(label.effects) * ctx.scale
    paint = Paint(stroke_color=LABEL_COLOR, fill_color=LABEL_COLOR)
    out = ctx.out

    if label.kind == LabelKind.NO_CONNECT:
        with filled(ctx, FillPolicy.NONE, paint):
            with out.transformed(Transform.translate(label.position.x * ctx.scale, label.position.y * ctx.scale)):
                _draw_cross(ctx)
        return

    if label.kind == LabelKind.LOCAL:
        _emit_fill(ctx, LABEL_COLOR)
        with text_frame(ctx, label.position, label.position.angle) as flipped:
            align = "right" if flipped else "left"
            out.emit(FillText(label.name, 0.0, -0.3 * ctx.scale, align=align, size=size))
        return

    # Hierarchical and global labels: flag outline plus text beside it
    offset = LABEL_TEXT_OFFSET * MARKER_SIZE * ctx.scale
    with filled(ctx, FillPolicy.NONE, paint):
        with text_frame(ctx, label.position, label.position.angle) as flipped:
            if flipped:
                with out.transformed(Transform.rotate(math.pi)):
                    _draw_flag(ctx)
                out.emit(FillText(label.name, -offset, 0.0, align="right", baseline="middle", size=size))
            else:
                _draw_flag(ctx)
                out.emit(FillText(label.name, offset, 0.0, align="left", baseline="middle", size=size))


# Symbols

def draw_symbol(ctx: RenderContext, symbol: Symbol) -> None:
    """One symbol variant: rects, circles, polylines, arcs, then pins."""
    for rect in symbol.rects:
        draw_rect(ctx, rect)
    for circle in symbol.circles:
        draw_circle(ctx, circle)
    for poly in symbol.polylines:
        draw_polyline(ctx, poly)
    for arc in symbol.arcs:
        draw_arc(ctx, arc)
    if symbol.pins:
        with filled(ctx, FillPolicy.NONE, Paint(stroke_color=PIN_COLOR, fill_color=PIN_COLOR)):
            for pin in symbol.pins:
                draw_pin(ctx, pin)


def draw_instance(ctx: RenderContext, inst: SymbolInstance) -> None:
    """
    Draw a placed symbol.

    translate -> mirror -> rotate -> template variants -> undo in reverse,
    then the instance's properties outside that bracket. Library symbols are
    y-up, so the unmirrored y scale is -1.
    """
    s = ctx.scale
    pos = inst.position
    sx = -1.0 if inst.mirror.flip_x else 1.0
    sy = 1.0 if inst.mirror.flip_y else -1.0
    out = ctx.out

    with out.transformed(Transform.translate(pos.x * s, pos.y * s)):
        with out.transformed(Transform.scale(sx, sy)):
            with out.transformed(Transform.rotate(math.radians(pos.angle))), ctx.rotated(pos.angle):
                for symbol in inst.template.symbols:
                    draw_symbol(ctx, symbol)

    for prop in inst.properties:
        draw_property(ctx, prop, pos.angle)
