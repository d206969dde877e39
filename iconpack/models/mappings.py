"""Icon mappings: which icon each item uses, and the output scales per category."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from iconpack.errors import ConfigError, MissingScalingError

logger = logging.getLogger(__name__)


class ScaleEntry(BaseModel, frozen=True):
    size: int = Field(gt=0)
    scale: float = Field(gt=0.0)

    @property
    def pixel_size(self) -> int:
        return round(self.size * self.scale)

    @property
    def scale_percent(self) -> int:
        return round(self.scale * 100)


class Mappings(BaseModel, frozen=True):
    scaling: dict[str, list[ScaleEntry]] = Field(default_factory=dict)
    icons: dict[str, dict[str, str]] = Field(default_factory=dict)

    def unique_icons(self) -> list[str]:
        """Distinct icon names referenced anywhere, sorted."""
        return sorted({name for items in self.icons.values() for name in items.values()})

    def scales_for(self, category: str) -> list[ScaleEntry]:
        scales = self.scaling.get(category)
        if scales is None:
            raise MissingScalingError(category)
        return scales

    def validate_scaling(self) -> None:
        """Every mapped category needs a scaling list."""
        for category in sorted(self.icons):
            self.scales_for(category)


def load_mappings(path: Path) -> Mappings:
    try:
        mappings = Mappings.model_validate(json.loads(Path(path).read_text(encoding="utf-8")))
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        raise ConfigError(f"Could not load mappings {path}: {e}") from e

    for category, items in sorted(mappings.icons.items()):
        logger.info("-> %d %s icon mappings", len(items), category)
    return mappings
