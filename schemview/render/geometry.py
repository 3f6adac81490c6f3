"""Analytic geometry for drawing: arcs through three points, text angles."""
import math
from dataclasses import dataclass

import numpy as np

from schemview.exceptions import DegenerateArc

# Relative determinant below which the chord bisectors count as parallel
COLINEAR_TOLERANCE = 1e-12

TWO_PI = 2 * math.pi


@dataclass(frozen=True)
class ArcGeometry:
    """Circle through an arc's control points plus its sweep."""
    cx: float
    cy: float
    radius: float
    start_angle: float  # radians, atan2 of start - center
    end_angle: float  # radians, atan2 of end - center
    anticlockwise: bool  # direction of decreasing angle reaches mid


def _normalize_radians(angle: float) -> float:
    angle = math.fmod(angle, TWO_PI)
    if angle < 0:
        angle += TWO_PI
    return angle


def arc_from_three_points(
    start: tuple[float, float],
    mid: tuple[float, float],
    end: tuple[float, float],
) -> ArcGeometry:
    """
    Reconstruct the circle through start, mid and end.

    The center is the intersection of the perpendicular bisectors of the
    chords start-mid and mid-end, written as parametric lines
    ``m1 + t*d1`` and ``m2 + u*d2`` and solved as a 2x2 linear system.

    Raises:
        DegenerateArc: if the points are colinear or coincident
    """
    p0 = np.array(start, dtype=float)
    p1 = np.array(mid, dtype=float)
    p2 = np.array(end, dtype=float)

    chord1 = p1 - p0
    chord2 = p2 - p1
    # Perpendicular directions of the chords
    d1 = np.array([-chord1[1], chord1[0]])
    d2 = np.array([-chord2[1], chord2[0]])
    m1 = (p0 + p1) / 2
    m2 = (p1 + p2) / 2

    system = np.column_stack((d1, -d2))
    det = np.linalg.det(system)
    norm = np.linalg.norm(d1) * np.linalg.norm(d2)
    if norm == 0 or abs(det) <= COLINEAR_TOLERANCE * norm:
        raise DegenerateArc(tuple(start), tuple(mid), tuple(end))

    t, _ = np.linalg.solve(system, m2 - m1)
    center = m1 + t * d1
    radius = float(np.linalg.norm(p1 - center))

    start_angle = math.atan2(p0[1] - center[1], p0[0] - center[0])
    mid_angle = math.atan2(p1[1] - center[1], p1[0] - center[0])
    end_angle = math.atan2(p2[1] - center[1], p2[0] - center[0])

    # Increasing-angle sweep from start reaches mid before end?
    sweep_to_mid = _normalize_radians(mid_angle - start_angle)
    sweep_to_end = _normalize_radians(end_angle - start_angle)

    return ArcGeometry(
        cx=float(center[0]),
        cy=float(center[1]),
        radius=radius,
        start_angle=start_angle,
        end_angle=end_angle,
        anticlockwise=sweep_to_mid > sweep_to_end,
    )


def normalize_degrees(angle: float) -> float:
    """
    Reduce an angle to [0, 360).

    The result is rounded to 1e-9 degrees so that angles a whole number of
    turns apart reduce to the same float.
    """
    angle = math.fmod(angle, 360.0)
    if angle < 0:
        angle += 360.0
    return round(angle, 9) % 360.0


def is_upside_down(angle: float) -> bool:
    """
    True if text at this angle (degrees) would read upside-down.

    Such text is turned a further 180 degrees and right-aligned.
    """
    return 90.0 < normalize_degrees(angle) <= 270.0
