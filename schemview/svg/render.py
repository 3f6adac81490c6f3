"""Rasterize generated SVG documents with cairosvg and Pillow."""
import logging
from io import BytesIO
from pathlib import Path

import cairosvg
from PIL import Image

logger = logging.getLogger(__name__)

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


def svg_to_png_bytes(svg_content: str, scale: float = 1.0) -> bytes:
    """Encoded PNG for an SVG document, `scale` applied on top of its own size."""
    return cairosvg.svg2png(bytestring=svg_content.encode("utf-8"), scale=scale)


def render_svg_to_png(
    svg_content: str,
    output_path: str | Path | None = None,
    scale: float = 1.0,
) -> Image.Image:
    """
    Rasterize an SVG document.

    The image is fully decoded before returning, so it does not keep the
    intermediate buffer alive. When output_path is given the PNG is also
    written there, creating missing parent directories.
    """
    image = Image.open(BytesIO(svg_to_png_bytes(svg_content, scale)))
    image.load()
    logger.debug(f"Rasterized SVG to {image.width}x{image.height}")

    if output_path is not None:
        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        image.save(path, format="PNG")
        logger.debug(f"Wrote {path}")

    return image


def render_schematic_to_png(
    schematic_path: str | Path,
    output_path: str | Path | None = None,
    scale: float = 1.0,
) -> Image.Image:
    """
    Load, draw and rasterize a .kicad_sch file in one step.

    Args:
        schematic_path: Path to the .kicad_sch file
        output_path: Optional path to save the PNG file
        scale: Device pixels per mm, used for drawing rather than rasterizing

    Returns:
        PIL Image object
    """
    from schemview.render import render
    from schemview.sch import load_schematic
    from schemview.svg.generator import SVGGenerator

    scene = render(load_schematic(schematic_path), scale)
    return render_svg_to_png(SVGGenerator(scene).generate(), output_path)
