"""Shared test fixtures."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from iconpack.config import Settings
from iconpack.models.fills import Colour, FillSet


# Source icons on a 16x16 canvas. White = primary, translucent white =
# secondary, dark = overlay.

PRIMARY_ONLY_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" width="16" height="16" viewBox="0 0 16 16">
  <path d="M0 0H16V16H0Z" fill="#FFFFFF"/>
</svg>'''

PRIMARY_SECONDARY_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" width="16" height="16" viewBox="0 0 16 16">
  <path d="M1 1H8V15H1Z" fill="#FFFFFF"/>
  <path d="M8 1H15V15H8Z" fill="#FFFFFF" fill-opacity="0.5"/>
</svg>'''

FULL_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" width="16" height="16" viewBox="0 0 16 16">
  <path d="M1 1H8V15H1Z" fill="#FFFFFF"/>
  <path d="M8 1H15V15H8Z" fill="#FFFFFF" fill-opacity="0.5"/>
  <circle cx="8" cy="8" r="3" fill="#000000"/>
</svg>'''

TWO_SECONDARY_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" width="16" height="16" viewBox="0 0 16 16">
  <path d="M1 1H8V15H1Z" fill="#FFFFFF" fill-opacity="0.4"/>
  <path d="M8 1H15V15H8Z" fill="#FFFFFF" fill-opacity="0.5"/>
</svg>'''

NO_FILL_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" width="16" height="16" viewBox="0 0 16 16">
  <path d="M0 0H16V16H0Z"/>
</svg>'''

GROUPED_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 32 32">
  <g fill="#FFFFFF">
    <path d="M0 0H32V32H0Z"/>
    <g fill-opacity="0.5">
      <rect x="4" y="4" width="8" height="8"/>
    </g>
  </g>
</svg>'''


def make_fills(main: str, overlay: str = "#ffffff") -> FillSet:
    return FillSet.from_colours(Colour.parse(main), Colour.parse(overlay))


PALETTE_DOC = {
    "name": "Vanilla",
    "default_colour": "grey",
    "duo_colour": "white",
    "theme_definitions": {
        "light": {"grey": "#6e6e6e", "orange": "#ff8000", "teal": "#008080", "white": "#ffffff"},
        "dark": {"grey": "#c8c8c8", "orange": "#ffa040", "teal": "#40c0c0", "white": "#ffffff"},
    },
    "tag_colours": {"Parts": "orange", "Parts>Meshes": "teal"},
}

MAPPINGS_DOC = {
    "scaling": {"instance": [{"size": 16, "scale": 1.0}]},
    "icons": {"instance": {"Part": "Cube", "MeshPart": "Mesh"}},
}

TAXONOMY_TEXT = """Parts
\t>Part
\tMeshes
\t\t>MeshPart
"""


def write_icon_pack(
    root: Path,
    *,
    palette: dict | None = None,
    mappings: dict | None = None,
    icons: dict[str, str] | None = None,
    taxonomy: str = TAXONOMY_TEXT,
) -> Path:
    """Lay out a complete input tree under ``root`` and return it."""
    root.mkdir(parents=True, exist_ok=True)
    (root / "palettes").mkdir()
    (root / "palettes" / "vanilla.json").write_text(json.dumps(palette or PALETTE_DOC))
    (root / "mappings.json").write_text(json.dumps(mappings or MAPPINGS_DOC))

    icon_dir = root / "icons"
    icon_dir.mkdir()
    if icons is None:
        icons = {"Cube": PRIMARY_ONLY_SVG, "Mesh": FULL_SVG}
    for name, svg in icons.items():
        (icon_dir / f"Icon={name}.svg").write_text(svg)

    tree_dir = root / "tag_trees"
    tree_dir.mkdir()
    (tree_dir / "orange.txt").write_text(taxonomy)
    (root / "index.theme").write_text("[Icon Theme]\nName=Vanilla\n")
    return root


@pytest.fixture
def settings() -> Settings:
    return Settings(icon_file_pattern="Icon={name}.svg", workers=4)


@pytest.fixture
def pack_dir(tmp_path: Path) -> Path:
    return write_icon_pack(tmp_path / "in")
