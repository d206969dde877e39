"""Registry of everything the render phase reads.

Built once before rendering starts and shared read-only by every worker.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from iconpack.config import Settings
from iconpack.models.fills import Theme
from iconpack.models.mappings import Mappings, load_mappings
from iconpack.models.palette import Palette, load_palettes
from iconpack.svg.layers import IconLayers, load_icon_layers
from iconpack.taxonomy.system import SNAPSHOT_NAME, TagSystem

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IconRegistry:
    palettes: list[dict[Theme, Palette]]
    mappings: Mappings
    tag_system: TagSystem
    icon_layers: dict[str, IconLayers] = field(default_factory=dict)

    def validate(self) -> None:
        """Fail before rendering if any mapped category has no scaling."""
        self.mappings.validate_scaling()

    def layers_for(self, icon_name: str) -> IconLayers | None:
        return self.icon_layers.get(icon_name)

    def themed_palettes(self) -> list[Palette]:
        return [palette for themed in self.palettes for palette in themed.values()]

    @classmethod
    def load(cls, input_dir: Path, settings: Settings, tag_system: TagSystem | None = None) -> IconRegistry:
        """Load tags, mappings, icon layers and palettes from the input tree."""
        input_dir = Path(input_dir)

        if tag_system is None:
            tag_system = TagSystem.load(input_dir / "tag_trees" / SNAPSHOT_NAME)
        mappings = load_mappings(input_dir / "mappings.json")

        unique_icons = mappings.unique_icons()
        logger.info("Found %d unique icons", len(unique_icons))
        icon_layers = load_icon_layers(
            input_dir / "icons",
            unique_icons,
            settings.icon_file_pattern,
            workers=settings.workers,
        )

        palettes = load_palettes(input_dir / "palettes")
        return cls(palettes=palettes, mappings=mappings, tag_system=tag_system, icon_layers=icon_layers)
