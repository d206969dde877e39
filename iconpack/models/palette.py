"""Palette files and their per-theme realisation.

A palette file names colours per theme and refers to them by name:

    {
      "name": "Vanilla",
      "default_colour": "grey",
      "duo_colour": "white",
      "theme_definitions": {"light": {"grey": "#6e6e6e", ...}, "dark": {...}},
      "tag_colours": {"Parts": "orange", "Parts>Meshes": "teal"},
      "icon_colours": {"instance": {"Workspace": "blue"}}
    }

Each theme realises into one Palette with concrete FillSets.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from iconpack.errors import ConfigError
from iconpack.models.fills import ALL_THEMES, Colour, FillSet, Theme
from iconpack.models.tag_path import TagPath, tokenize_tag_path

logger = logging.getLogger(__name__)


class PaletteFile(BaseModel):
    name: str
    default_colour: str
    duo_colour: str
    theme_definitions: dict[str, dict[str, str]]
    tag_colours: dict[str, str] = Field(default_factory=dict)
    icon_colours: dict[str, dict[str, str]] = Field(default_factory=dict)


@dataclass(frozen=True)
class Palette:
    """One palette realised for one theme. Read-only once built."""

    name: str
    theme: Theme
    default_fills: FillSet
    tag_fills: dict[TagPath, FillSet] = field(default_factory=dict)
    item_fills: dict[str, dict[str, FillSet]] = field(default_factory=dict)


def realise_palette(doc: PaletteFile) -> dict[Theme, Palette]:
    """Build one Palette per theme defined in the file, in theme order."""
    realised: dict[Theme, Palette] = {}
    for theme_key, definitions in doc.theme_definitions.items():
        try:
            theme = Theme.from_key(theme_key)
        except ValueError:
            raise ConfigError(f"Invalid theme {theme_key} for palette {doc.name}") from None

        colours: dict[str, Colour] = {}
        for key, value in definitions.items():
            try:
                colours[key] = Colour.parse(value)
            except ValueError as e:
                raise ConfigError(f"Colour {key}={value!r} in palette {doc.name} is not a colour: {e}") from e

        duo = colours.get(doc.duo_colour)
        if duo is None:
            raise ConfigError(f"Duo colour {doc.duo_colour} is not defined for palette {doc.name} ({theme.value})")
        fills = {key: FillSet.from_colours(colour, duo) for key, colour in colours.items()}

        def lookup(colour_name: str, what: str) -> FillSet:
            fill = fills.get(colour_name)
            if fill is None:
                raise ConfigError(
                    f"Colour {colour_name} for {what} is not defined for palette {doc.name} ({theme.value})"
                )
            return fill

        default_fills = lookup(doc.default_colour, "default")
        tag_fills = {
            tokenize_tag_path(tag): lookup(colour_name, f"tag {tag}")
            for tag, colour_name in doc.tag_colours.items()
        }
        item_fills = {
            category: {item: lookup(colour_name, f"{category}/{item}") for item, colour_name in items.items()}
            for category, items in doc.icon_colours.items()
        }

        realised[theme] = Palette(
            name=doc.name,
            theme=theme,
            default_fills=default_fills,
            tag_fills=tag_fills,
            item_fills=item_fills,
        )

    return {theme: realised[theme] for theme in ALL_THEMES if theme in realised}


def load_palette_file(path: Path) -> dict[Theme, Palette]:
    try:
        doc = PaletteFile.model_validate(json.loads(Path(path).read_text(encoding="utf-8")))
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        raise ConfigError(f"Could not load palette {path}: {e}") from e
    return realise_palette(doc)


def load_palettes(palette_dir: Path) -> list[dict[Theme, Palette]]:
    """Load every ``*.json`` palette in the directory, sorted by file name."""
    palette_dir = Path(palette_dir)
    if not palette_dir.is_dir():
        raise ConfigError(f"Palette directory not found: {palette_dir}")
    palettes = [load_palette_file(p) for p in sorted(palette_dir.glob("*.json"))]
    logger.info("Loaded %d palettes from %s", len(palettes), palette_dir)
    return palettes
