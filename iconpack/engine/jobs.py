"""Render jobs: one per (palette, theme, category, scale, item)."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from iconpack.models.mappings import ScaleEntry
from iconpack.models.palette import Palette

if TYPE_CHECKING:
    from iconpack.engine.registry import IconRegistry


@dataclass(frozen=True)
class RenderJob:
    palette: Palette
    category: str
    scale: ScaleEntry
    item: str
    icon_name: str

    def describe(self) -> str:
        return (
            f"{self.palette.name}/{self.palette.theme.value}/{self.category}/"
            f"{self.scale.size}x/{self.scale.scale_percent}/{self.item} (icon {self.icon_name})"
        )

    def output_dir(self, root: Path) -> Path:
        return (
            Path(root)
            / self.palette.name
            / self.palette.theme.value
            / self.category
            / f"{self.scale.size}x"
            / str(self.scale.scale_percent)
        )

    def output_path(self, root: Path) -> Path:
        return self.output_dir(root) / f"{self.item}.png"


def enumerate_jobs(registry: IconRegistry) -> list[RenderJob]:
    """Flatten the full cross-product into a single job list.

    Every job maps to a distinct output path, so jobs never contend.
    """
    mappings = registry.mappings
    jobs: list[RenderJob] = []
    for palette in registry.themed_palettes():
        for category in sorted(mappings.icons):
            items = mappings.icons[category]
            for scale in mappings.scales_for(category):
                for item in sorted(items):
                    jobs.append(
                        RenderJob(
                            palette=palette,
                            category=category,
                            scale=scale,
                            item=item,
                            icon_name=items[item],
                        )
                    )
    return jobs
