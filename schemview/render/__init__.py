from .generator import SchematicRenderer, render
from .commands import Scene, DrawList
from .geometry import arc_from_three_points, ArcGeometry
from .transform import Transform, TransformStack

__all__ = [
    "SchematicRenderer", "render", "Scene", "DrawList",
    "arc_from_three_points", "ArcGeometry", "Transform", "TransformStack",
]
