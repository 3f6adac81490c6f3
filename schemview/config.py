"""Configuration constants for the schematic viewer."""
import logging
from pathlib import Path

# Project root directory
PROJECT_ROOT = Path(__file__).parent.parent

# Sample schematic used by the tests and previews
SAMPLE_SCHEMATIC_FILE = PROJECT_ROOT / "tests" / "data" / "sample.kicad_sch"

# Canvas sizing: height is CANVAS_BASE_HEIGHT * scale, width keeps the sheet aspect
CANVAS_BASE_HEIGHT = 1080.0
CANVAS_ASPECT = 1.414

# Text height (mm) when a text item carries no font size of its own
DEFAULT_FONT_SIZE = 1.8

# Sheet frame
PAGE_MARGIN = 10.0  # same on all four sides (mm)
FRAME_INSET = 2.0  # inner margin box distance from the margin box (mm)
COMB_SPACING = 50  # distance between coordinate ticks (mm)

# Name of the package logger that enable_verbose() attaches to
LOGGER_NAME = "schemview"


def canvas_size(scale: float) -> tuple[float, float]:
    """
    Canvas dimensions for a given zoom level.

    Returns:
        Tuple of (width, height) in device pixels
    """
    height = CANVAS_BASE_HEIGHT * scale
    return height * CANVAS_ASPECT, height


def enable_verbose(level: str = "INFO", fmt: str | None = None) -> None:
    """Attach a console handler to the package logger."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, level.upper()))

    for handler in logger.handlers[:]:
        if not isinstance(handler, logging.NullHandler):
            logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setLevel(getattr(logging, level.upper()))
    handler.setFormatter(logging.Formatter(fmt or "[%(levelname)s] %(name)s: %(message)s"))
    logger.addHandler(handler)


def disable_verbose() -> None:
    """Remove console handlers added by enable_verbose()."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.WARNING)
    for handler in logger.handlers[:]:
        if not isinstance(handler, logging.NullHandler):
            logger.removeHandler(handler)
