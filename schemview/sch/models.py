"""Data models for schematic elements."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from schemview.config import PAGE_MARGIN


class StrokePattern(str, Enum):
    """Line pattern keyword of a stroke."""
    SOLID = "solid"
    DASH = "dash"
    DASH_DOT = "dash_dot"
    DASH_DOT_DOT = "dash_dot_dot"
    DOT = "dot"
    DEFAULT = "default"


class FillPolicy(str, Enum):
    """How a closed shape combines stroke and fill."""
    NONE = "none"  # stroke only
    OUTLINE = "outline"  # fill and stroke
    BACKGROUND = "background"  # fill only


class LabelKind(str, Enum):
    HIERARCHICAL = "hierarchical_label"
    GLOBAL = "global_label"
    LOCAL = "label"
    NO_CONNECT = "no_connect"


Color = tuple[int, int, int, int]  # RGBA, 0-255 each


@dataclass
class Placement:
    """Position (mm) plus rotation angle (degrees)."""
    x: float = 0.0
    y: float = 0.0
    angle: float = 0.0


@dataclass
class Stroke:
    width: float = 0.0
    pattern: StrokePattern = StrokePattern.DEFAULT
    color: Color = (0, 0, 0, 0)  # all zero means "use the style default"


@dataclass(frozen=True)
class Mirror:
    """
    Mirroring of a placed symbol.

    flip_x negates template x coordinates (KiCad ``(mirror y)``),
    flip_y negates template y coordinates (KiCad ``(mirror x)``).
    """
    flip_x: bool = False
    flip_y: bool = False


@dataclass
class Effects:
    """Text effects: font size (height, width), justification, visibility."""
    font_size: tuple[float, float] = (0.0, 0.0)
    justify: tuple[str, ...] = ()
    hide: bool = False


@dataclass
class Wire:
    points: list[Placement] = field(default_factory=list)
    stroke: Stroke = field(default_factory=Stroke)
    uuid: str = ""


@dataclass
class Polyline:
    points: list[Placement] = field(default_factory=list)
    stroke: Stroke = field(default_factory=Stroke)
    fill: FillPolicy = FillPolicy.NONE
    uuid: str = ""


@dataclass
class Arc:
    """Arc through three points; center and radius are derived at draw time."""
    start: Placement = field(default_factory=Placement)
    mid: Placement = field(default_factory=Placement)
    end: Placement = field(default_factory=Placement)
    stroke: Stroke = field(default_factory=Stroke)
    fill: FillPolicy = FillPolicy.NONE
    uuid: str = ""


@dataclass
class Rect:
    start: Placement = field(default_factory=Placement)
    end: Placement = field(default_factory=Placement)
    stroke: Stroke = field(default_factory=Stroke)
    fill: FillPolicy = FillPolicy.NONE
    uuid: str = ""


@dataclass
class Circle:
    center: Placement = field(default_factory=Placement)
    radius: float = 0.0
    stroke: Stroke = field(default_factory=Stroke)
    fill: FillPolicy = FillPolicy.NONE
    uuid: str = ""


@dataclass
class Junction:
    position: Placement = field(default_factory=Placement)
    diameter: float = 1.0
    color: Color = (0, 0, 0, 0)
    uuid: str = ""


@dataclass
class NoConnect:
    position: Placement = field(default_factory=Placement)
    uuid: str = ""


@dataclass
class Text:
    text: str = ""
    position: Placement = field(default_factory=Placement)
    effects: Effects = field(default_factory=Effects)
    uuid: str = ""


@dataclass
class Label:
    name: str = ""
    kind: LabelKind = LabelKind.HIERARCHICAL
    position: Placement = field(default_factory=Placement)
    shape: str = ""  # input, output, bidirectional, tri_state, passive
    effects: Effects = field(default_factory=Effects)
    uuid: str = ""


@dataclass
class Pin:
    """A symbol pin; position is relative to the owning symbol."""
    position: Placement = field(default_factory=Placement)
    length: float = 0.0
    electrical_type: str = ""
    graphic_style: str = ""
    name: str = ""
    number: str = ""
    hidden: bool = False


@dataclass
class Property:
    """
    A key/value field of a template or instance.

    The position is absolute: it does not follow the owning instance's
    rotation or mirroring.
    """
    key: str
    value: str
    id: int = 0
    position: Placement = field(default_factory=Placement)
    visible: bool = True
    effects: Effects = field(default_factory=Effects)


@dataclass
class Symbol:
    """One drawing variant (unit / body style) of a library symbol."""
    id: str = ""
    polylines: list[Polyline] = field(default_factory=list)
    arcs: list[Arc] = field(default_factory=list)
    pins: list[Pin] = field(default_factory=list)
    rects: list[Rect] = field(default_factory=list)
    circles: list[Circle] = field(default_factory=list)


@dataclass
class SymbolTemplate:
    """Library symbol, shared by every instance that cites its id."""
    id: str = ""
    properties: list[Property] = field(default_factory=list)
    symbols: list[Symbol] = field(default_factory=list)
    uuid: str = ""

    def get_property(self, key: str) -> Optional[Property]:
        for prop in self.properties:
            if prop.key == key:
                return prop
        return None


@dataclass
class SymbolInstance:
    """A placed occurrence of a library symbol."""
    lib_id: str
    template: SymbolTemplate
    position: Placement = field(default_factory=Placement)
    mirror: Mirror = field(default_factory=Mirror)
    properties: list[Property] = field(default_factory=list)
    unit: int = 1
    uuid: str = ""

    def get_property(self, key: str) -> Optional[Property]:
        for prop in self.properties:
            if prop.key == key:
                return prop
        return None

    @property
    def reference(self) -> str:
        """Reference designator (e.g., "R1"), empty if absent."""
        prop = self.get_property("Reference")
        return prop.value if prop else ""


# Paper sizes in mm, landscape (width, height)
PAPER_SIZES: dict[str, tuple[float, float]] = {
    "A5": (210.0, 148.0),
    "A4": (297.0, 210.0),
    "A3": (420.0, 297.0),
    "A2": (594.0, 420.0),
    "A1": (841.0, 594.0),
    "A0": (1189.0, 841.0),
    "A": (279.4, 215.9),
    "B": (431.8, 279.4),
    "C": (558.8, 431.8),
    "D": (863.6, 558.8),
    "E": (1117.6, 863.6),
    "USLetter": (279.4, 215.9),
    "USLegal": (355.6, 215.9),
    "USLedger": (431.8, 279.4),
}


@dataclass
class Page:
    """Sheet descriptor: paper size and margins (top, left, bottom, right)."""
    paper: str = "A4"
    width: float = 297.0
    height: float = 210.0
    margins: tuple[float, float, float, float] = (PAGE_MARGIN, PAGE_MARGIN, PAGE_MARGIN, PAGE_MARGIN)

    @classmethod
    def from_paper(cls, paper: str, portrait: bool = False) -> "Page":
        """Page for a named paper size; KeyError if the name is unknown."""
        width, height = PAPER_SIZES[paper]
        if portrait:
            width, height = height, width
        return cls(paper=paper, width=width, height=height)


@dataclass
class SchematicInfo:
    """Overall schematic summary."""
    version: int
    paper: str
    symbol_count: int
    library_count: int
    wire_count: int
    junction_count: int
    label_count: int
    text_count: int


@dataclass
class Schematic:
    """Root of a parsed schematic sheet."""
    version: int = 0
    generator: str = ""
    uuid: str = ""
    page: Page = field(default_factory=Page)
    library: dict[str, SymbolTemplate] = field(default_factory=dict)
    instances: list[SymbolInstance] = field(default_factory=list)
    wires: list[Wire] = field(default_factory=list)
    junctions: list[Junction] = field(default_factory=list)
    texts: list[Text] = field(default_factory=list)
    polylines: list[Polyline] = field(default_factory=list)
    no_connects: list[NoConnect] = field(default_factory=list)
    labels: list[Label] = field(default_factory=list)

    def get_instance(self, reference: str) -> Optional[SymbolInstance]:
        """Find a placed symbol by reference designator."""
        for inst in self.instances:
            if inst.reference == reference:
                return inst
        return None

    def info(self) -> SchematicInfo:
        return SchematicInfo(
            version=self.version,
            paper=self.page.paper,
            symbol_count=len(self.instances),
            library_count=len(self.library),
            wire_count=len(self.wires),
            junction_count=len(self.junctions),
            label_count=len(self.labels),
            text_count=len(self.texts),
        )
