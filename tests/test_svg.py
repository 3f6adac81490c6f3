"""Tests for the SVG consumer of the draw-command stream."""
from xml.etree.ElementTree import fromstring

import pytest

from schemview.config import SAMPLE_SCHEMATIC_FILE
from schemview.render import render
from schemview.render.commands import (
    ArcTo, BeginPath, DrawList, MoveTo, PushTransform, SetStroke, StrokePath
)
from schemview.render.transform import Transform
from schemview.sch import parse_text
from schemview.svg import (
    SVGGenerator, render_schematic_to_png, render_svg_to_png, svg_to_png_bytes
)
from schemview.svg.render import PNG_SIGNATURE

SVG_NS = "{http://www.w3.org/2000/svg}"


def _paths(svg_content):
    root = fromstring(svg_content)
    return [elem for elem in root if elem.tag == f"{SVG_NS}path"]


def test_generate_svg(sample):
    svg_content = SVGGenerator(render(sample, 2.0)).generate()
    root = fromstring(svg_content)

    assert root.tag == f"{SVG_NS}svg"
    assert root.get("height") == "2160"
    assert len(_paths(svg_content)) > 10
    texts = [elem.text for elem in root if elem.tag == f"{SVG_NS}text"]
    assert "R1" in texts
    assert "VIN" in texts


def test_wire_path_in_device_coordinates():
    schematic = parse_text('(kicad_sch (wire (pts (xy 1 2) (xy 11 2))))')
    svg_content = SVGGenerator(render(schematic, 3.0)).generate()

    wire_paths = [p for p in _paths(svg_content) if p.get("d") == "M 3.0000 6.0000 L 3.0000 6.0000 L 33.0000 6.0000"]
    assert len(wire_paths) == 1


def _replay(*commands):
    out = DrawList()
    out.emit(BeginPath())
    out.emit(SetStroke(width=1.0, color="#000000"))
    for cmd in commands:
        out.emit(cmd)
    out.emit(StrokePath())
    return _paths(SVGGenerator(out.to_scene(100.0, 100.0)).generate())[-1].get("d")


def test_transform_applies_to_points():
    out = DrawList()
    out.emit(BeginPath())
    with out.transformed(Transform.translate(10.0, 20.0)):
        out.emit(MoveTo(1.0, 1.0))
    out.emit(StrokePath())
    d = _paths(SVGGenerator(out.to_scene(100.0, 100.0)).generate())[-1].get("d")

    assert d == "M 11.0000 21.0000"


def test_full_circle_becomes_two_arcs():
    d = _replay(ArcTo(50.0, 50.0, 10.0, 0.0, 6.283185307179586))

    assert d.startswith("M 60.0000 50.0000")
    assert d.count("A ") == 2


def test_mirrored_arc_reverses_sweep():
    plain = _replay(ArcTo(0.0, 0.0, 5.0, 0.0, 1.0))
    out = DrawList()
    out.emit(BeginPath())
    with out.transformed(Transform.scale(1.0, -1.0)):
        out.emit(ArcTo(0.0, 0.0, 5.0, 0.0, 1.0))
    out.emit(StrokePath())
    mirrored = _paths(SVGGenerator(out.to_scene(100.0, 100.0)).generate())[-1].get("d")

    assert " 0 0 1 " in plain
    assert " 0 0 0 " in mirrored


def test_push_transform_command_is_handled():
    out = DrawList()
    out.emit(PushTransform(Transform.rotate(0.5)))
    svg_content = SVGGenerator(out.to_scene(10.0, 10.0)).generate()

    assert svg_content.startswith("<svg")


def test_render_svg_to_png(sample, output_dir):
    """Test that SVG renders to PNG without errors."""
    svg_content = SVGGenerator(render(sample, 1.0)).generate()

    image = render_svg_to_png(svg_content, output_dir / "sample_render.png")

    assert image is not None
    assert image.width == 1527
    assert image.height == 1080


def test_svg_to_png_bytes_scale():
    svg_content = '<svg xmlns="http://www.w3.org/2000/svg" width="40" height="20"/>'

    png_bytes = svg_to_png_bytes(svg_content, scale=2.0)

    assert png_bytes.startswith(PNG_SIGNATURE)
    image = render_svg_to_png(svg_content, scale=2.0)
    assert image.size == (80, 40)


def test_render_svg_to_png_creates_parent_dirs(tmp_path):
    svg_content = '<svg xmlns="http://www.w3.org/2000/svg" width="10" height="10"/>'
    target = tmp_path / "nested" / "out.png"

    render_svg_to_png(svg_content, target)

    assert target.read_bytes().startswith(PNG_SIGNATURE)


def test_render_schematic_to_png(output_dir):
    """Test the convenience function for rendering a schematic to PNG."""
    image = render_schematic_to_png(SAMPLE_SCHEMATIC_FILE, output_dir / "sample_direct.png", scale=2.0)

    assert image.width > 0
    assert image.height == 2160
    assert (output_dir / "sample_direct.png").exists()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
