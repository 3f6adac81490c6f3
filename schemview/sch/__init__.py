from .parser import SchematicParser, parse, parse_text, load_schematic
from .models import (
    Schematic, SchematicInfo, SymbolInstance, SymbolTemplate, Symbol,
    Wire, Junction, Text, Polyline, Arc, Rect, Circle, NoConnect, Label,
    Pin, Property, Placement, Stroke, Mirror, Page,
    FillPolicy, StrokePattern, LabelKind
)

__all__ = [
    "SchematicParser", "parse", "parse_text", "load_schematic",
    "Schematic", "SchematicInfo", "SymbolInstance", "SymbolTemplate", "Symbol",
    "Wire", "Junction", "Text", "Polyline", "Arc", "Rect", "Circle", "NoConnect", "Label",
    "Pin", "Property", "Placement", "Stroke", "Mirror", "Page",
    "FillPolicy", "StrokePattern", "LabelKind",
]
