from .generator import SVGGenerator
from .render import render_svg_to_png, render_schematic_to_png, svg_to_png_bytes

__all__ = ["SVGGenerator", "render_svg_to_png", "render_schematic_to_png", "svg_to_png_bytes"]
