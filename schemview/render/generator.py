"""Draw-command generator for schematic display."""
import logging
from collections import Counter

from schemview.config import canvas_size
from schemview.sch.models import Schematic

from .commands import BeginPath, DrawList, Scene, SetStroke, StrokePath
from .elements import (
    RenderContext, draw_instance, draw_junction, draw_label, draw_no_connect,
    draw_polyline, draw_text, draw_wire
)
from .page import draw_page
from .styles import (
    JUNCTIONS, LABELS, NO_CONNECTS, PAGE, POLYLINES, SYMBOLS, TEXT_COLOR,
    TEXTS, WIRE_COLOR, WIRE_STROKE_WIDTH, WIRES
)

logger = logging.getLogger(__name__)


class SchematicRenderer:
    """Turn a parsed schematic into an ordered draw-command stream."""

    def __init__(self, schematic: Schematic):
        """Initialize with a parsed schematic; it is never modified."""
        self.schematic = schematic

    def render(self, scale: float = 1.0) -> Scene:
        """
        Generate the command stream.

        Args:
            scale: Device units per mm

        Returns:
            Scene with the commands and the canvas size for this scale

        Raises:
            DegenerateArc: if a symbol arc has colinear control points
        """
        if scale <= 0:
            raise ValueError(f"scale must be positive, got {scale}")

        out = DrawList()
        ctx = RenderContext(out=out, scale=scale)

        with out.section(PAGE):
            out.emit(BeginPath())
            draw_page(ctx, self.schematic.page)

        with out.section(SYMBOLS):
            for inst in self.schematic.instances:
                draw_instance(ctx, inst)

        with out.section(WIRES):
            self._add_wires(ctx)

        with out.section(JUNCTIONS):
            for junction in self.schematic.junctions:
                draw_junction(ctx, junction)

        with out.section(TEXTS):
            for text in self.schematic.texts:
                draw_text(ctx, text)

        with out.section(POLYLINES):
            for poly in self.schematic.polylines:
                draw_polyline(ctx, poly, TEXT_COLOR)

        with out.section(NO_CONNECTS):
            for nc in self.schematic.no_connects:
                draw_no_connect(ctx, nc)

        with out.section(LABELS):
            for label in self.schematic.labels:
                draw_label(ctx, label)

        width, height = canvas_size(scale)
        scene = out.to_scene(width, height)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"Rendered {len(scene)} commands at scale {scale}: {dict(Counter(scene.categories))}")
        return scene

    def _add_wires(self, ctx: RenderContext) -> None:
        """All wires share one path, stroked once."""
        if not self.schematic.wires:
            return
        out = ctx.out
        out.emit(StrokePath())
        out.emit(SetStroke(width=WIRE_STROKE_WIDTH * ctx.scale, color=WIRE_COLOR))
        out.emit(BeginPath())
        for wire in self.schematic.wires:
            draw_wire(ctx, wire)
        out.emit(StrokePath())
        out.emit(BeginPath())


def render(schematic: Schematic, scale: float = 1.0) -> Scene:
    """Render a schematic at the given scale."""
    return SchematicRenderer(schematic).render(scale)
