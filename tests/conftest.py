"""Pytest configuration for schemview tests."""
from pathlib import Path

import pytest

from schemview.config import SAMPLE_SCHEMATIC_FILE
from schemview.sch import load_schematic, parse_text
from schemview.sch.tree import load_tree

OUTPUT_DIR = Path(__file__).parent / "output"

# Library with one two-variant symbol, used by several small documents
LIBRARY = """
  (lib_symbols
    (symbol "Device:R"
      (property "Reference" "R" (id 0) (at 2.032 0 90))
      (symbol "R_0_1"
        (rectangle (start -1 -2) (end 1 2) (stroke (width 0.254)) (fill (type none)))
      )
      (symbol "R_1_1"
        (pin passive line (at 0 3.81 270) (length 1.27) (name "~") (number "1"))
      )
    )
  )
"""


def schematic_text(*items: str, library: str = LIBRARY) -> str:
    """Wrap top-level items in a minimal schematic document."""
    return "(kicad_sch (version 20211123) (generator eeschema) (paper \"A4\")\n" + library + "\n".join(items) + ")"


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "slow: marks tests as slow (run with -m slow or skip with -m 'not slow')"
    )


@pytest.fixture(scope="session")
def sample_text():
    """Raw text of the sample schematic."""
    return SAMPLE_SCHEMATIC_FILE.read_text(encoding="utf-8")


@pytest.fixture(scope="session")
def sample_tree(sample_text):
    """Generic tree of the sample schematic."""
    return load_tree(sample_text)


@pytest.fixture
def sample():
    """Freshly parsed sample schematic."""
    return load_schematic(SAMPLE_SCHEMATIC_FILE)


@pytest.fixture
def make_schematic():
    """Parse a minimal document built from top-level items."""
    def _make(*items: str, library: str = LIBRARY):
        return parse_text(schematic_text(*items, library=library))
    return _make


@pytest.fixture
def output_dir():
    """Ensure output directory exists."""
    OUTPUT_DIR.mkdir(exist_ok=True)
    return OUTPUT_DIR
