"""Draw commands emitted by the render engine."""
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Union

from .transform import Transform, TransformStack


@dataclass(frozen=True)
class MoveTo:
    x: float
    y: float


@dataclass(frozen=True)
class LineTo:
    x: float
    y: float


@dataclass(frozen=True)
class ArcTo:
    """Circular arc around (cx, cy); angles in radians, canvas convention."""
    cx: float
    cy: float
    radius: float
    start_angle: float
    end_angle: float
    anticlockwise: bool = False


@dataclass(frozen=True)
class RectPath:
    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class FillText:
    text: str
    x: float
    y: float
    align: str = "left"  # left, right
    baseline: str = "alphabetic"  # alphabetic, middle
    size: float = 0.0  # font height in device units


@dataclass(frozen=True)
class SetStroke:
    width: float
    color: str
    dash: tuple[float, ...] = ()


@dataclass(frozen=True)
class SetFill:
    color: str


@dataclass(frozen=True)
class BeginPath:
    pass


@dataclass(frozen=True)
class StrokePath:
    pass


@dataclass(frozen=True)
class FillPath:
    pass


@dataclass(frozen=True)
class PushTransform:
    transform: Transform


@dataclass(frozen=True)
class PopTransform:
    pass


DrawCommand = Union[
    MoveTo, LineTo, ArcTo, RectPath, FillText, SetStroke, SetFill,
    BeginPath, StrokePath, FillPath, PushTransform, PopTransform,
]


@dataclass(frozen=True)
class Scene:
    """A finished render: ordered commands plus canvas size."""
    commands: tuple[DrawCommand, ...]
    categories: tuple[str, ...]  # draw category of each command
    width: float
    height: float

    def __len__(self) -> int:
        return len(self.commands)

    def __iter__(self) -> Iterator[DrawCommand]:
        return iter(self.commands)

    def category_order(self) -> list[str]:
        """Categories in the order they first appear in the stream."""
        order: list[str] = []
        for category in self.categories:
            if not order or order[-1] != category:
                order.append(category)
        return order

    def commands_in(self, category: str) -> list[DrawCommand]:
        return [cmd for cmd, cat in zip(self.commands, self.categories) if cat == category]


class DrawList:
    """Command sink used while rendering."""

    def __init__(self):
        self.commands: list[DrawCommand] = []
        self.categories: list[str] = []
        self.transforms = TransformStack()
        self._category = ""

    def emit(self, command: DrawCommand) -> None:
        self.commands.append(command)
        self.categories.append(self._category)

    @contextmanager
    def section(self, category: str) -> Iterator[None]:
        """Tag every command emitted inside the block with category."""
        previous = self._category
        self._category = category
        try:
            yield
        finally:
            self._category = previous

    @contextmanager
    def transformed(self, transform: Transform) -> Iterator[None]:
        """Push a transform for the duration of the block; always popped."""
        self.transforms.push(transform)
        self.emit(PushTransform(transform))
        try:
            yield
        finally:
            self.transforms.pop()
            self.emit(PopTransform())

    def to_scene(self, width: float, height: float) -> Scene:
        return Scene(
            commands=tuple(self.commands),
            categories=tuple(self.categories),
            width=width,
            height=height,
        )
