"""KiCad schematic parser: generic sexp tree -> Schematic model."""
import logging
from pathlib import Path
from typing import Callable

from schemview.exceptions import MalformedDocument, UnresolvedTemplateReference

from .models import (
    Arc, Circle, Effects, FillPolicy, Junction, Label, LabelKind, Mirror,
    NoConnect, Page, Pin, Placement, Polyline, Property, Rect, Schematic,
    Stroke, StrokePattern, Symbol, SymbolInstance, SymbolTemplate, Text, Wire
)
from .tree import (
    Node, atom_float, atom_int, atom_text, children, find, has_keyword,
    is_list, load_tree, tag_of
)

logger = logging.getLogger(__name__)

# Mirror keyword -> axes whose coordinates get negated.
# "x" mirrors about the X axis (y flips), "y" about the Y axis (x flips).
MIRROR_KEYWORDS = {
    "x": Mirror(flip_x=False, flip_y=True),
    "y": Mirror(flip_x=True, flip_y=False),
    "xy": Mirror(flip_x=True, flip_y=True),
    "yx": Mirror(flip_x=True, flip_y=True),
}

FILL_KEYWORDS = {
    "none": FillPolicy.NONE,
    "outline": FillPolicy.OUTLINE,
    "background": FillPolicy.BACKGROUND,
}


# Generic field parsers

def parse_position(node: Node) -> Placement:
    """Parse ``(at x y [angle])`` or ``(xy x y)``; angle defaults to 0."""
    tag = tag_of(node)
    x = atom_float(node, 1, tag, "x")
    y = atom_float(node, 2, tag, "y")
    angle = 0.0
    if len(node) > 3 and not is_list(node[3]):
        angle = atom_float(node, 3, tag, "angle")
    return Placement(x=x, y=y, angle=angle)


def parse_color(node: Node) -> tuple[int, int, int, int]:
    """Parse ``(color r g b a)`` with 0-255 components."""
    components = []
    for index, name in enumerate("rgba", start=1):
        value = round(atom_float(node, index, "color", name))
        if not 0 <= value <= 255:
            raise MalformedDocument(
                f"Color component {name}={value} outside 0-255",
                tag="color",
                field=name,
            )
        components.append(value)
    return tuple(components)


def parse_stroke(node: Node) -> Stroke:
    """Parse ``(stroke (width w) (type t) (color r g b a))``."""
    stroke = Stroke()
    for child in children(node):
        if not is_list(child):
            continue
        tag = tag_of(child)
        if tag == "width":
            stroke.width = atom_float(child, 1, "stroke", "width")
            if stroke.width < 0:
                raise MalformedDocument("Stroke width is negative", tag="stroke", field="width")
        elif tag == "type":
            keyword = atom_text(child, 1, "stroke", "type")
            try:
                stroke.pattern = StrokePattern(keyword)
            except ValueError:
                stroke.pattern = StrokePattern.DEFAULT
        elif tag == "color":
            stroke.color = parse_color(child)
    return stroke


def parse_fill(node: Node) -> FillPolicy:
    """Parse ``(fill (type keyword))``; anything unexpected is FillPolicy.NONE."""
    if len(node) < 2 or not is_list(node[1]) or len(node[1]) < 2 or is_list(node[1][1]):
        return FillPolicy.NONE
    return FILL_KEYWORDS.get(str(node[1][1]), FillPolicy.NONE)


def parse_points(node: Node) -> list[Placement]:
    """Collect the list-shaped children of a ``pts`` node."""
    return [parse_position(child) for child in children(node) if is_list(child)]


def parse_uuid(node: Node) -> str:
    return atom_text(node, 1, "uuid", "uuid")


def _is_hidden(node: Node, start: int = 1) -> bool:
    """
    ``hide`` keyword, or ``(hide yes)`` as written by newer KiCad versions.

    Only elements from start on are inspected, so leading value fields
    that happen to read "hide" do not count.
    """
    for child in node[start:]:
        if not is_list(child):
            if str(child) == "hide":
                return True
        elif tag_of(child) == "hide":
            return len(child) < 2 or str(child[1]) == "yes"
    return False


def parse_effects(node: Node) -> Effects:
    """Parse ``(effects (font (size h w)) (justify ...) hide)``."""
    effects = Effects(hide=_is_hidden(node))
    font = find(node, "font")
    if font is not None:
        size = find(font, "size")
        if size is not None:
            effects.font_size = (atom_float(size, 1, "size", "height"), atom_float(size, 2, "size", "width"))
    justify = find(node, "justify")
    if justify is not None:
        effects.justify = tuple(str(child) for child in children(justify) if not is_list(child))
    return effects


def parse_mirror(node: Node) -> Mirror:
    """Parse ``(mirror x|y|xy)``; any other keyword means no mirroring."""
    if len(node) < 2 or is_list(node[1]):
        return Mirror()
    return MIRROR_KEYWORDS.get(str(node[1]), Mirror())


def parse_property(node: Node) -> Property:
    """
    Parse a property node.

    Layout: ``(property "key" "value" (id n) (at x y a) (effects ... hide))``.
    Key and value are required; a missing ``(id n)`` leaves id at 0.
    """
    prop = Property(
        key=atom_text(node, 1, "property", "key"),
        value=atom_text(node, 2, "property", "value"),
    )
    for child in node[3:]:
        if not is_list(child):
            continue
        tag = tag_of(child)
        if tag == "id":
            prop.id = atom_int(child, 1, "property", "id")
        elif tag == "at":
            prop.position = parse_position(child)
        elif tag == "effects":
            prop.effects = parse_effects(child)
            if prop.effects.hide:
                prop.visible = False
    if _is_hidden(node, start=3):
        prop.visible = False
    return prop


# Geometry

def parse_polyline(node: Node) -> Polyline:
    poly = Polyline()
    for child in children(node):
        if not is_list(child):
            continue
        tag = tag_of(child)
        if tag == "pts":
            poly.points = parse_points(child)
        elif tag == "stroke":
            poly.stroke = parse_stroke(child)
        elif tag == "fill":
            poly.fill = parse_fill(child)
        elif tag == "uuid":
            poly.uuid = parse_uuid(child)
    return poly


def parse_wire(node: Node) -> Wire:
    wire = Wire()
    for child in children(node):
        if not is_list(child):
            continue
        tag = tag_of(child)
        if tag == "pts":
            wire.points = parse_points(child)
        elif tag == "stroke":
            wire.stroke = parse_stroke(child)
        elif tag == "uuid":
            wire.uuid = parse_uuid(child)
    return wire


def parse_arc(node: Node) -> Arc:
    arc = Arc()
    for child in children(node):
        if not is_list(child):
            continue
        tag = tag_of(child)
        if tag == "start":
            arc.start = parse_position(child)
        elif tag == "mid":
            arc.mid = parse_position(child)
        elif tag == "end":
            arc.end = parse_position(child)
        elif tag == "stroke":
            arc.stroke = parse_stroke(child)
        elif tag == "fill":
            arc.fill = parse_fill(child)
        elif tag == "uuid":
            arc.uuid = parse_uuid(child)
    return arc


def parse_rect(node: Node) -> Rect:
    rect = Rect()
    for child in children(node):
        if not is_list(child):
            continue
        tag = tag_of(child)
        if tag == "start":
            rect.start = parse_position(child)
        elif tag == "end":
            rect.end = parse_position(child)
        elif tag == "stroke":
            rect.stroke = parse_stroke(child)
        elif tag == "fill":
            rect.fill = parse_fill(child)
        elif tag == "uuid":
            rect.uuid = parse_uuid(child)
    return rect


def parse_circle(node: Node) -> Circle:
    circle = Circle()
    for child in children(node):
        if not is_list(child):
            continue
        tag = tag_of(child)
        if tag == "center":
            circle.center = parse_position(child)
        elif tag == "radius":
            circle.radius = atom_float(child, 1, "circle", "radius")
        elif tag == "stroke":
            circle.stroke = parse_stroke(child)
        elif tag == "fill":
            circle.fill = parse_fill(child)
        elif tag == "uuid":
            circle.uuid = parse_uuid(child)
    return circle


def parse_pin(node: Node) -> Pin:
    """Parse ``(pin type style (at ...) (length l) (name "n") (number "1"))``."""
    pin = Pin(hidden=_is_hidden(node))
    if len(node) > 1 and not is_list(node[1]):
        pin.electrical_type = str(node[1])
    if len(node) > 2 and not is_list(node[2]) and str(node[2]) != "hide":
        pin.graphic_style = str(node[2])
    for child in children(node):
        if not is_list(child):
            continue
        tag = tag_of(child)
        if tag == "at":
            pin.position = parse_position(child)
        elif tag == "length":
            pin.length = atom_float(child, 1, "pin", "length")
        elif tag == "name":
            pin.name = atom_text(child, 1, "pin", "name")
        elif tag == "number":
            pin.number = atom_text(child, 1, "pin", "number")
    return pin


# Annotations

def parse_junction(node: Node) -> Junction:
    junction = Junction()
    for child in children(node):
        if not is_list(child):
            continue
        tag = tag_of(child)
        if tag == "at":
            junction.position = parse_position(child)
        elif tag == "diameter":
            junction.diameter = atom_float(child, 1, "junction", "diameter")
        elif tag == "color":
            junction.color = parse_color(child)
        elif tag == "uuid":
            junction.uuid = parse_uuid(child)
    return junction


def parse_no_connect(node: Node) -> NoConnect:
    nc = NoConnect()
    for child in children(node):
        if not is_list(child):
            continue
        tag = tag_of(child)
        if tag == "at":
            nc.position = parse_position(child)
        elif tag == "uuid":
            nc.uuid = parse_uuid(child)
    return nc


def parse_text_item(node: Node) -> Text:
    text = Text(text=atom_text(node, 1, "text", "text"))
    for child in node[2:]:
        if not is_list(child):
            continue
        tag = tag_of(child)
        if tag == "at":
            text.position = parse_position(child)
        elif tag == "effects":
            text.effects = parse_effects(child)
        elif tag == "uuid":
            text.uuid = parse_uuid(child)
    return text


def parse_label(node: Node) -> Label:
    """Parse hierarchical_label, global_label and label nodes."""
    kind = LabelKind(tag_of(node))
    label = Label(name=atom_text(node, 1, kind.value, "name"), kind=kind)
    for child in node[2:]:
        if not is_list(child):
            continue
        tag = tag_of(child)
        if tag == "shape":
            label.shape = atom_text(child, 1, kind.value, "shape")
        elif tag == "at":
            label.position = parse_position(child)
        elif tag == "effects":
            label.effects = parse_effects(child)
        elif tag == "uuid":
            label.uuid = parse_uuid(child)
    return label


def parse_page(node: Node) -> Page:
    """Parse ``(paper "A4" [portrait])`` or ``(paper "User" w h)``."""
    paper = atom_text(node, 1, "paper", "size")
    if paper == "User":
        return Page(
            paper=paper,
            width=atom_float(node, 2, "paper", "width"),
            height=atom_float(node, 3, "paper", "height"),
        )
    try:
        return Page.from_paper(paper, portrait=has_keyword(node, "portrait"))
    except KeyError:
        logger.warning(f"Unknown paper size {paper!r}, using A4")
        return Page()


# Symbols

# Symbol child tag -> (list attribute, builder)
SYMBOL_BUILDERS: dict[str, tuple[str, Callable[[Node], object]]] = {
    "polyline": ("polylines", parse_polyline),
    "arc": ("arcs", parse_arc),
    "pin": ("pins", parse_pin),
    "rectangle": ("rects", parse_rect),
    "circle": ("circles", parse_circle),
}


def parse_symbol(node: Node) -> Symbol:
    """Parse one drawing variant nested in a library symbol."""
    symbol = Symbol(id=atom_text(node, 1, "symbol", "id"))
    for child in node[2:]:
        if not is_list(child):
            continue
        entry = SYMBOL_BUILDERS.get(tag_of(child))
        if entry is None:
            continue
        attr, builder = entry
        getattr(symbol, attr).append(builder(child))
    return symbol


def parse_template(node: Node) -> SymbolTemplate:
    """Parse a library symbol from the lib_symbols block."""
    template = SymbolTemplate(id=atom_text(node, 1, "symbol", "id"))
    for child in node[2:]:
        if not is_list(child):
            continue
        tag = tag_of(child)
        if tag == "property":
            template.properties.append(parse_property(child))
        elif tag == "symbol":
            template.symbols.append(parse_symbol(child))
        elif tag == "uuid":
            template.uuid = parse_uuid(child)
    return template


def parse_instance(node: Node, library: dict[str, SymbolTemplate]) -> SymbolInstance:
    """
    Parse a placed symbol and resolve it against the library.

    The instance receives the library's template object itself, never a copy.
    """
    lib_node = find(node, "lib_id")
    if lib_node is None:
        raise MalformedDocument("Placed symbol has no lib_id", tag="symbol", field="lib_id")
    lib_id = atom_text(lib_node, 1, "symbol", "lib_id")

    template = library.get(lib_id)
    if template is None:
        raise UnresolvedTemplateReference(lib_id, available=list(library))

    inst = SymbolInstance(lib_id=lib_id, template=template)
    for child in children(node):
        if not is_list(child):
            continue
        tag = tag_of(child)
        if tag == "at":
            inst.position = parse_position(child)
        elif tag == "mirror":
            inst.mirror = parse_mirror(child)
        elif tag == "property":
            inst.properties.append(parse_property(child))
        elif tag == "unit":
            inst.unit = atom_int(child, 1, "symbol", "unit")
        elif tag == "uuid":
            inst.uuid = parse_uuid(child)
    return inst


class SchematicParser:
    """Parser for KiCad schematic trees."""

    ROOT_TAG = "kicad_sch"

    def __init__(self):
        self._schematic = Schematic()
        self._skipped: dict[str, int] = {}
        # (is_list, tag) -> handler
        self._dispatch: dict[tuple[bool, str], Callable[[Node], None]] = {
            (True, "version"): self._parse_version,
            (True, "generator"): self._parse_generator,
            (True, "uuid"): self._parse_uuid,
            (True, "paper"): self._parse_paper,
            (True, "lib_symbols"): self._parse_lib_symbols,
            (True, "symbol"): self._parse_instance,
            (True, "wire"): self._append("wires", parse_wire),
            (True, "junction"): self._append("junctions", parse_junction),
            (True, "text"): self._append("texts", parse_text_item),
            (True, "polyline"): self._append("polylines", parse_polyline),
            (True, "no_connect"): self._append("no_connects", parse_no_connect),
            (True, "hierarchical_label"): self._append("labels", parse_label),
            (True, "global_label"): self._append("labels", parse_label),
            (True, "label"): self._append("labels", parse_label),
        }

    def parse(self, tree: Node) -> Schematic:
        """Build a Schematic from a generic tree in a single pass."""
        if not is_list(tree) or not tree:
            raise MalformedDocument("Document root is not a list")
        if tag_of(tree) != self.ROOT_TAG:
            logger.warning(f"Unexpected root tag {tag_of(tree)!r}, expected {self.ROOT_TAG!r}")

        for node in children(tree):
            handler = self._dispatch.get((is_list(node), tag_of(node)))
            if handler is None:
                self._skip(node)
                continue
            handler(node)

        schematic = self._schematic
        logger.info(
            f"Parsed schematic v{schematic.version}: {len(schematic.instances)} symbols, "
            f"{len(schematic.library)} library symbols, {len(schematic.wires)} wires"
        )
        if self._skipped:
            logger.debug(f"Skipped tags: {self._skipped}")
        return schematic

    def _skip(self, node: Node) -> None:
        tag = tag_of(node)
        self._skipped[tag] = self._skipped.get(tag, 0) + 1

    def _append(self, attr: str, builder: Callable[[Node], object]) -> Callable[[Node], None]:
        def handler(node: Node) -> None:
            getattr(self._schematic, attr).append(builder(node))
        return handler

    def _parse_version(self, node: Node) -> None:
        self._schematic.version = atom_int(node, 1, "version", "version")

    def _parse_generator(self, node: Node) -> None:
        self._schematic.generator = atom_text(node, 1, "generator", "generator")

    def _parse_uuid(self, node: Node) -> None:
        self._schematic.uuid = parse_uuid(node)

    def _parse_paper(self, node: Node) -> None:
        self._schematic.page = parse_page(node)

    def _parse_lib_symbols(self, node: Node) -> None:
        for child in children(node):
            if is_list(child) and tag_of(child) == "symbol":
                template = parse_template(child)
                self._schematic.library[template.id] = template

    def _parse_instance(self, node: Node) -> None:
        self._schematic.instances.append(parse_instance(node, self._schematic.library))


def parse(tree: Node) -> Schematic:
    """Parse a generic tree into a new, independent Schematic."""
    return SchematicParser().parse(tree)


def parse_text(text: str) -> Schematic:
    """Tokenize and parse schematic document text."""
    return parse(load_tree(text))


def load_schematic(path: str | Path) -> Schematic:
    """Load and parse a KiCad schematic file."""
    path = Path(path)
    logger.debug(f"Loading {path}")
    return parse_text(path.read_text(encoding="utf-8"))
