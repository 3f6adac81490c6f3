"""Tests for the draw-command generator."""
import copy
import math

import pytest

from schemview.config import CANVAS_ASPECT, CANVAS_BASE_HEIGHT, DEFAULT_FONT_SIZE
from schemview.exceptions import DegenerateArc
from schemview.render import SchematicRenderer, render
from schemview.render.commands import (
    ArcTo, BeginPath, DrawList, FillPath, FillText, LineTo, MoveTo,
    PopTransform, PushTransform, RectPath, SetFill, SetStroke, StrokePath
)
from schemview.render.elements import RenderContext, draw_rect
from schemview.render.styles import (
    DRAW_ORDER, JUNCTIONS, LABELS, PAGE, PROPERTY_COLOR, SYMBOL_BODY_COLOR,
    SYMBOLS, TEXTS, WIRE_COLOR, WIRE_STROKE_WIDTH, WIRES
)
from schemview.render.transform import TransformKind
from schemview.sch import FillPolicy, Placement, Rect, Stroke, parse_text

SCENARIO = (
    '(kicad_sch (version 20211123) (wire (pts (xy 0 0)(xy 10 0)) (uuid "a"))'
    ' (junction (at 0 0)(diameter 1)(uuid "b")))'
)


def _path_commands(commands):
    return [cmd for cmd in commands if isinstance(cmd, (MoveTo, LineTo, ArcTo))]


def _max_depth(commands):
    """Deepest transform nesting; asserts the brackets balance."""
    depth = deepest = 0
    for cmd in commands:
        if isinstance(cmd, PushTransform):
            depth += 1
            deepest = max(deepest, depth)
        elif isinstance(cmd, PopTransform):
            depth -= 1
            assert depth >= 0
    assert depth == 0
    return deepest


def _instance(*extra: str, at: str = "5 5 0") -> str:
    return f'(symbol (lib_id "Device:R") (at {at}) {" ".join(extra)})'


def test_scenario_wire_and_junction():
    schematic = parse_text(SCENARIO)

    assert [(p.x, p.y) for p in schematic.wires[0].points] == [(0, 0), (10, 0)]
    junction = schematic.junctions[0]
    assert (junction.position.x, junction.position.y, junction.position.angle) == (0, 0, 0)
    assert junction.diameter == 1

    scene = render(schematic, 1.0)
    assert _path_commands(scene.commands_in(WIRES)) == [MoveTo(0, 0), LineTo(0, 0), LineTo(10, 0)]

    arcs = _path_commands(scene.commands_in(JUNCTIONS))
    arc = [cmd for cmd in arcs if isinstance(cmd, ArcTo)][0]
    assert (arc.cx, arc.cy) == (0, 0)
    assert arc.radius == pytest.approx(1.2)
    assert arc.end_angle - arc.start_angle == pytest.approx(2 * math.pi)


def test_wire_path_is_stroked_once():
    scene = render(parse_text(SCENARIO), 2.0)
    wires = scene.commands_in(WIRES)

    assert wires[:3] == [StrokePath(), SetStroke(width=WIRE_STROKE_WIDTH * 2.0, color=WIRE_COLOR), BeginPath()]
    assert wires[-2:] == [StrokePath(), BeginPath()]
    assert wires.count(StrokePath()) == 2


@pytest.mark.parametrize("scale", [0.5, 1.0, 3.0])
def test_category_order(sample, scale):
    scene = render(sample, scale)

    assert scene.category_order() == DRAW_ORDER
    assert "" not in scene.categories


def test_category_order_skips_empty_categories():
    scene = render(parse_text(SCENARIO), 1.0)

    assert scene.category_order() == [PAGE, WIRES, JUNCTIONS]


def test_page_section_starts_with_new_path(sample):
    scene = render(sample, 1.0)

    assert scene.commands[0] == BeginPath()
    assert scene.categories[0] == PAGE


@pytest.mark.parametrize("scale", [0.5, 1.0, 4.0])
def test_canvas_size(scale):
    scene = render(parse_text(SCENARIO), scale)

    assert scene.height == pytest.approx(CANVAS_BASE_HEIGHT * scale)
    assert scene.width == pytest.approx(CANVAS_BASE_HEIGHT * CANVAS_ASPECT * scale)


def test_coordinates_scale_linearly(sample):
    one = _path_commands(render(sample, 1.0).commands_in(WIRES))
    two = _path_commands(render(sample, 2.0).commands_in(WIRES))

    assert len(one) == len(two)
    for a, b in zip(one, two):
        assert (b.x, b.y) == pytest.approx((2 * a.x, 2 * a.y))


@pytest.mark.parametrize("scale", [0, -1.0])
def test_scale_must_be_positive(sample, scale):
    with pytest.raises(ValueError):
        SchematicRenderer(sample).render(scale)


def test_render_does_not_modify_schematic(sample):
    before = copy.deepcopy(sample)
    render(sample, 2.5)

    assert sample == before


def test_transforms_balance_for_sample(sample):
    scene = render(sample, 1.0)

    assert _max_depth(scene.commands) >= 3


# Text

@pytest.mark.parametrize("angle", [0, 45, 90, 135, 180, 270, 300, 12.7, 45.3, 200.1, -33.3])
def test_text_angle_is_periodic(make_schematic, angle):
    base = render(make_schematic(f'(text "hello" (at 10 20 {angle}))'), 1.0)
    turned = render(make_schematic(f'(text "hello" (at 10 20 {angle + 360}))'), 1.0)

    assert base.commands_in(TEXTS) == turned.commands_in(TEXTS)


@pytest.mark.parametrize("angle,align", [
    (0, "left"), (90, "left"), (180, "right"), (270, "right"), (-90, "right"),
])
def test_upside_down_text_is_right_aligned(make_schematic, angle, align):
    scene = render(make_schematic(f'(text "hello" (at 10 20 {angle}))'), 1.0)
    text = [cmd for cmd in scene.commands_in(TEXTS) if isinstance(cmd, FillText)][0]

    assert text.align == align


def test_upside_down_text_gets_half_turn(make_schematic):
    scene = render(make_schematic('(text "hello" (at 10 20 180))'), 1.0)
    pushes = [cmd.transform for cmd in scene.commands_in(TEXTS) if isinstance(cmd, PushTransform)]

    assert pushes[0].kind == TransformKind.TRANSLATE
    assert (pushes[0].x, pushes[0].y) == (10, 20)
    assert pushes[1].kind == TransformKind.ROTATE
    assert pushes[1].angle == pytest.approx(-2 * math.pi)


def test_multiline_text(sample):
    scene = render(sample, 2.0)
    texts = [cmd for cmd in scene.commands_in(TEXTS) if isinstance(cmd, FillText)]

    assert [t.text for t in texts] == ["Power", "stage"]
    assert texts[0].y == 0
    assert texts[1].y == pytest.approx(1.27 * 2.0)
    assert texts[0].size == pytest.approx(1.27 * 2.0)


def test_hidden_text_not_drawn(make_schematic):
    scene = render(make_schematic('(text "secret" (at 1 1 0) (effects (font (size 1 1)) hide))'), 1.0)

    assert TEXTS not in scene.category_order()


# Instances

def test_instance_bracket_order(make_schematic):
    scene = render(make_schematic(_instance("(mirror y)", at="5 6 90")), 2.0)
    symbols = scene.commands_in(SYMBOLS)

    translate, mirror, rotate = (cmd.transform for cmd in symbols[:3])
    assert translate.kind == TransformKind.TRANSLATE
    assert (translate.x, translate.y) == (10, 12)
    assert mirror.kind == TransformKind.SCALE
    assert (mirror.x, mirror.y) == (-1, -1)
    assert rotate.kind == TransformKind.ROTATE
    assert rotate.angle == pytest.approx(math.pi / 2)
    _max_depth(symbols)


@pytest.mark.parametrize("keyword,factors", [
    ("", (1, -1)),
    ("(mirror x)", (1, 1)),
    ("(mirror y)", (-1, -1)),
])
def test_instance_mirror_factors(make_schematic, keyword, factors):
    scene = render(make_schematic(_instance(keyword)), 1.0)
    mirror = scene.commands_in(SYMBOLS)[1].transform

    assert (mirror.x, mirror.y) == factors


def test_instance_draws_every_template_variant(make_schematic):
    scene = render(make_schematic(_instance()), 1.0)
    symbols = scene.commands_in(SYMBOLS)

    assert sum(isinstance(cmd, RectPath) for cmd in symbols) == 1
    # pin stub along its own axis
    assert LineTo(1.27, 0.0) in symbols


def test_properties_drawn_after_instance_bracket(make_schematic):
    scene = render(make_schematic(_instance(
        '(property "Reference" "R1" (id 0) (at 7 5 0))',
        '(property "Value" "10k" (id 1) (at 7 7 0))',
    )), 1.0)
    symbols = scene.commands_in(SYMBOLS)
    texts = [i for i, cmd in enumerate(symbols) if isinstance(cmd, FillText)]

    assert [symbols[i].text for i in texts] == ["R1", "10k"]
    # Instance bracket is fully closed before the first property
    assert _max_depth(symbols[:texts[0] - 3]) >= 3
    assert isinstance(symbols[texts[0] - 3], SetFill)
    assert symbols[texts[0] - 3].color == PROPERTY_COLOR

    translate = symbols[texts[0] - 2].transform
    assert (translate.x, translate.y) == (7, 5)
    assert symbols[texts[0]].y == pytest.approx(DEFAULT_FONT_SIZE)


@pytest.mark.parametrize("instance_angle,prop_angle,align", [
    (0, 0, "left"),
    (180, 0, "right"),
    (90, 90, "right"),
    (90, 0, "left"),
    (270, 180, "left"),
])
def test_property_angle_adds_instance_angle(make_schematic, instance_angle, prop_angle, align):
    scene = render(make_schematic(_instance(
        f'(property "Reference" "R1" (id 0) (at 7 5 {prop_angle}))',
        at=f"5 5 {instance_angle}",
    )), 1.0)
    text = [cmd for cmd in scene.commands_in(SYMBOLS) if isinstance(cmd, FillText)][0]

    assert text.align == align


def test_hidden_property_not_drawn(sample):
    scene = render(sample, 1.0)
    texts = [cmd.text for cmd in scene.commands_in(SYMBOLS) if isinstance(cmd, FillText)]

    assert texts == ["R1", "10k", "R2", "4k7"]


def test_sample_arc_sweep(sample):
    scene = render(sample, 1.0)
    arcs = [cmd for cmd in scene.commands_in(SYMBOLS) if isinstance(cmd, ArcTo)]

    assert len(arcs) == 2  # one per instance
    arc = arcs[0]
    assert (arc.cx, arc.cy) == pytest.approx((0.0, 1.27), abs=1e-9)
    assert arc.radius == pytest.approx(1.27)
    assert arc.anticlockwise is True


def test_degenerate_arc_propagates(make_schematic):
    library = """
      (lib_symbols
        (symbol "Device:R"
          (symbol "R_0_1"
            (arc (start 0 0) (mid 1 1) (end 2 2))
          )
        )
      )
    """
    schematic = make_schematic(_instance(), library=library)
    before = copy.deepcopy(schematic)

    with pytest.raises(DegenerateArc):
        render(schematic, 1.0)

    assert schematic == before


# Fill policies

@pytest.mark.parametrize("fill,ending", [
    (FillPolicy.NONE, [StrokePath(), BeginPath()]),
    (FillPolicy.BACKGROUND, [FillPath(), BeginPath()]),
    (FillPolicy.OUTLINE, [FillPath(), StrokePath(), BeginPath()]),
])
def test_fill_policy_sequence(fill, ending):
    out = DrawList()
    rect = Rect(start=Placement(0, 0), end=Placement(2, 1), stroke=Stroke(width=0.5), fill=fill)
    draw_rect(RenderContext(out=out, scale=2.0), rect)

    assert [type(cmd) for cmd in out.commands[:4]] == [StrokePath, SetStroke, SetFill, BeginPath]
    assert out.commands[1].width == pytest.approx(1.0)
    assert out.commands[4:6] == [MoveTo(0, 0), RectPath(0, 0, 4, 2)]
    assert out.commands[6:] == ending


def test_outline_fill_uses_stroke_color():
    out = DrawList()
    rect = Rect(stroke=Stroke(color=(255, 0, 0, 1)), fill=FillPolicy.OUTLINE)
    draw_rect(RenderContext(out=out, scale=1.0), rect)

    assert out.commands[2] == SetFill(out.commands[1].color)


def test_background_fill_uses_body_color():
    out = DrawList()
    draw_rect(RenderContext(out=out, scale=1.0), Rect(fill=FillPolicy.BACKGROUND))

    assert out.commands[2] == SetFill(SYMBOL_BODY_COLOR)


# Annotations

def test_junction_radius_pads_diameter(sample):
    scene = render(sample, 1.0)
    arc = [cmd for cmd in scene.commands_in(JUNCTIONS) if isinstance(cmd, ArcTo)][0]

    assert arc.radius == pytest.approx(0.2)
    assert (arc.cx, arc.cy) == (100, 40)


def test_labels(sample):
    scene = render(sample, 1.0)
    texts = {cmd.text: cmd for cmd in scene.commands_in(LABELS) if isinstance(cmd, FillText)}

    assert set(texts) == {"VIN", "GND", "OUT"}
    assert texts["VIN"].y == pytest.approx(-0.3)
    assert texts["GND"].baseline == "middle"
    assert texts["GND"].align == "left"
    assert texts["GND"].x > 0
    # OUT points left (180 degrees)
    assert texts["OUT"].align == "right"
    assert texts["OUT"].x < 0


def test_no_connect_cross(sample):
    scene = render(sample, 1.0)
    commands = scene.commands_in("no_connects")

    assert sum(isinstance(cmd, LineTo) for cmd in commands) == 2
    _max_depth(commands)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
