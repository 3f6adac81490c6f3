"""Coordinate transformation utilities."""
import math
from dataclasses import dataclass
from enum import Enum

import numpy as np


def rotate_point(x: float, y: float, angle_rad: float) -> tuple[float, float]:
    """
    Rotate a point around the origin by the given angle.

    Args:
        x: X coordinate
        y: Y coordinate
        angle_rad: Rotation angle in radians (clockwise positive on a y-down canvas)

    Returns:
        Tuple of (rotated_x, rotated_y)
    """
    if angle_rad == 0:
        return x, y

    cos_a = math.cos(angle_rad)
    sin_a = math.sin(angle_rad)

    rotated_x = x * cos_a - y * sin_a
    rotated_y = x * sin_a + y * cos_a

    return rotated_x, rotated_y


class TransformKind(str, Enum):
    TRANSLATE = "translate"
    ROTATE = "rotate"
    SCALE = "scale"


@dataclass(frozen=True)
class Transform:
    """
    One canvas transform step.

    translate uses (x, y) as offsets, scale uses (x, y) as factors,
    rotate uses angle (radians).
    """
    kind: TransformKind
    x: float = 0.0
    y: float = 0.0
    angle: float = 0.0

    @classmethod
    def translate(cls, x: float, y: float) -> "Transform":
        return cls(TransformKind.TRANSLATE, x=x, y=y)

    @classmethod
    def rotate(cls, angle: float) -> "Transform":
        return cls(TransformKind.ROTATE, angle=angle)

    @classmethod
    def scale(cls, sx: float, sy: float) -> "Transform":
        return cls(TransformKind.SCALE, x=sx, y=sy)

    def inverse(self) -> "Transform":
        if self.kind == TransformKind.TRANSLATE:
            return Transform.translate(-self.x, -self.y)
        if self.kind == TransformKind.ROTATE:
            return Transform.rotate(-self.angle)
        return Transform.scale(1.0 / self.x, 1.0 / self.y)

    def matrix(self) -> np.ndarray:
        """3x3 affine matrix acting on column vectors (x, y, 1)."""
        if self.kind == TransformKind.TRANSLATE:
            return np.array([[1.0, 0.0, self.x], [0.0, 1.0, self.y], [0.0, 0.0, 1.0]])
        if self.kind == TransformKind.ROTATE:
            c, s = math.cos(self.angle), math.sin(self.angle)
            return np.array([[c, -s, 0.0], [s, c, 0.0], [0.0, 0.0, 1.0]])
        return np.array([[self.x, 0.0, 0.0], [0.0, self.y, 0.0], [0.0, 0.0, 1.0]])

    def apply(self, x: float, y: float) -> tuple[float, float]:
        if self.kind == TransformKind.TRANSLATE:
            return x + self.x, y + self.y
        if self.kind == TransformKind.ROTATE:
            return rotate_point(x, y, self.angle)
        return x * self.x, y * self.y


class TransformStack:
    """Stack of transforms; later entries apply first to drawn coordinates."""

    def __init__(self):
        self._stack: list[Transform] = []

    def push(self, transform: Transform) -> None:
        self._stack.append(transform)

    def pop(self) -> Transform:
        return self._stack.pop()

    @property
    def depth(self) -> int:
        return len(self._stack)

    def matrix(self) -> np.ndarray:
        """Composed matrix mapping local coordinates to device coordinates."""
        result = np.identity(3)
        for transform in self._stack:
            result = result @ transform.matrix()
        return result

    def apply(self, x: float, y: float) -> tuple[float, float]:
        px, py, _ = self.matrix() @ np.array([x, y, 1.0])
        return float(px), float(py)
