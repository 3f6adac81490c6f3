"""SVG document generator that replays a draw-command stream."""
import math
from xml.etree.ElementTree import Element, SubElement, tostring

import numpy as np

from schemview.render.commands import (
    ArcTo, BeginPath, FillPath, FillText, LineTo, MoveTo, PopTransform,
    PushTransform, RectPath, Scene, SetFill, SetStroke, StrokePath
)
from schemview.render.styles import BACKGROUND_COLOR

TWO_PI = 2 * math.pi


class SVGGenerator:
    """
    Generate an SVG representation of a rendered scene.

    Follows canvas semantics: path points are mapped to device space with
    the transform current when they are added, and a path is painted with
    the style current when it is stroked or filled.
    """

    def __init__(self, scene: Scene):
        """Initialize with a rendered scene."""
        self.scene = scene
        self._handlers = {
            MoveTo: self._move_to,
            LineTo: self._line_to,
            ArcTo: self._arc_to,
            RectPath: self._rect,
            FillText: self._fill_text,
            SetStroke: self._set_stroke,
            SetFill: self._set_fill,
            BeginPath: self._begin_path,
            StrokePath: self._stroke_path,
            FillPath: self._fill_path,
            PushTransform: self._push_transform,
            PopTransform: self._pop_transform,
        }

    def generate(self) -> str:
        """
        Generate SVG document.

        Returns:
            SVG document as string
        """
        width, height = self.scene.width, self.scene.height
        self._svg = Element("svg", {
            "xmlns": "http://www.w3.org/2000/svg",
            "viewBox": f"0 0 {width:.4f} {height:.4f}",
            "width": f"{width:.0f}",
            "height": f"{height:.0f}",
        })
        SubElement(self._svg, "rect", {
            "class": "background",
            "x": "0",
            "y": "0",
            "width": f"{width:.4f}",
            "height": f"{height:.4f}",
            "fill": BACKGROUND_COLOR,
        })

        self._matrices = [np.identity(3)]
        self._path: list[str] = []
        self._has_point = False
        self._stroke = {"stroke": "#000000", "stroke-width": "1"}
        self._fill = "#000000"

        for command in self.scene.commands:
            self._handlers[type(command)](command)

        return tostring(self._svg, encoding="unicode")

    # Transform state

    @property
    def _matrix(self) -> np.ndarray:
        return self._matrices[-1]

    def _device(self, x: float, y: float) -> tuple[float, float]:
        px, py, _ = self._matrix @ np.array([x, y, 1.0])
        return float(px), float(py)

    def _push_transform(self, cmd: PushTransform) -> None:
        self._matrices.append(self._matrix @ cmd.transform.matrix())

    def _pop_transform(self, cmd: PopTransform) -> None:
        self._matrices.pop()

    # Path building

    def _move_to(self, cmd: MoveTo) -> None:
        x, y = self._device(cmd.x, cmd.y)
        self._path.append(f"M {x:.4f} {y:.4f}")
        self._has_point = True

    def _line_to(self, cmd: LineTo) -> None:
        x, y = self._device(cmd.x, cmd.y)
        self._path.append(f"{'L' if self._has_point else 'M'} {x:.4f} {y:.4f}")
        self._has_point = True

    def _rect(self, cmd: RectPath) -> None:
        corners = [
            (cmd.x, cmd.y),
            (cmd.x + cmd.width, cmd.y),
            (cmd.x + cmd.width, cmd.y + cmd.height),
            (cmd.x, cmd.y + cmd.height),
        ]
        points = [self._device(x, y) for x, y in corners]
        d = f"M {points[0][0]:.4f} {points[0][1]:.4f} "
        d += " ".join(f"L {x:.4f} {y:.4f}" for x, y in points[1:])
        self._path.append(d + " Z")
        self._move_to(MoveTo(cmd.x, cmd.y))

    def _arc_to(self, cmd: ArcTo) -> None:
        det = float(np.linalg.det(self._matrix[:2, :2]))
        radius = cmd.radius * math.sqrt(abs(det))

        if cmd.anticlockwise:
            sweep = cmd.start_angle - cmd.end_angle
        else:
            sweep = cmd.end_angle - cmd.start_angle
        full_circle = sweep >= TWO_PI
        sweep = math.fmod(sweep, TWO_PI)
        if sweep < 0:
            sweep += TWO_PI
        direction = -1.0 if cmd.anticlockwise else 1.0

        def point_at(angle: float) -> tuple[float, float]:
            return self._device(cmd.cx + cmd.radius * math.cos(angle), cmd.cy + cmd.radius * math.sin(angle))

        sx, sy = point_at(cmd.start_angle)
        self._path.append(f"{'L' if self._has_point else 'M'} {sx:.4f} {sy:.4f}")
        self._has_point = True

        # A mirrored transform reverses the on-screen direction
        sweep_flag = int((direction > 0) == (det > 0))
        if full_circle:
            hx, hy = point_at(cmd.start_angle + direction * math.pi)
            self._path.append(f"A {radius:.4f} {radius:.4f} 0 0 {sweep_flag} {hx:.4f} {hy:.4f}")
            self._path.append(f"A {radius:.4f} {radius:.4f} 0 0 {sweep_flag} {sx:.4f} {sy:.4f}")
            return

        ex, ey = point_at(cmd.start_angle + direction * sweep)
        large_arc = int(sweep > math.pi)
        self._path.append(f"A {radius:.4f} {radius:.4f} 0 {large_arc} {sweep_flag} {ex:.4f} {ey:.4f}")

    def _begin_path(self, cmd: BeginPath) -> None:
        self._path = []
        self._has_point = False

    # Painting

    def _set_stroke(self, cmd: SetStroke) -> None:
        self._stroke = {"stroke": cmd.color, "stroke-width": f"{cmd.width:.4f}"}
        if cmd.dash:
            self._stroke["stroke-dasharray"] = " ".join(f"{d:.4f}" for d in cmd.dash)

    def _set_fill(self, cmd: SetFill) -> None:
        self._fill = cmd.color

    def _stroke_path(self, cmd: StrokePath) -> None:
        if not self._path:
            return
        SubElement(self._svg, "path", {
            "d": " ".join(self._path),
            "fill": "none",
            "stroke-linecap": "round",
            **self._stroke,
        })

    def _fill_path(self, cmd: FillPath) -> None:
        if not self._path:
            return
        SubElement(self._svg, "path", {
            "d": " ".join(self._path),
            "fill": self._fill,
            "stroke": "none",
        })

    def _fill_text(self, cmd: FillText) -> None:
        m = self._matrix
        e, f = self._device(cmd.x, cmd.y)
        attrs = {
            "transform": f"matrix({m[0, 0]:.6f} {m[1, 0]:.6f} {m[0, 1]:.6f} {m[1, 1]:.6f} {e:.4f} {f:.4f})",
            "font-family": "monospace",
            "font-size": f"{cmd.size:.4f}",
            "fill": self._fill,
            "text-anchor": "end" if cmd.align == "right" else "start",
        }
        if cmd.baseline == "middle":
            attrs["dominant-baseline"] = "middle"
        elem = SubElement(self._svg, "text", attrs)
        elem.text = cmd.text
