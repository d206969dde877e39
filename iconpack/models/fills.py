"""Paint models: colours, per-layer fills and themes."""

from __future__ import annotations

import enum

from PIL import ImageColor
from pydantic import BaseModel, Field

# Secondary layers reuse the main colour at reduced opacity.
SECONDARY_OPACITY = 0.6


class Theme(str, enum.Enum):
    LIGHT = "Light"
    DARK = "Dark"

    @classmethod
    def from_key(cls, key: str) -> Theme:
        """Map a palette file key ("light" / "dark") to a Theme."""
        for theme in cls:
            if theme.value.lower() == key.strip().lower():
                return theme
        raise ValueError(f"Invalid theme {key}")


ALL_THEMES: tuple[Theme, ...] = (Theme.LIGHT, Theme.DARK)


class Colour(BaseModel, frozen=True):
    red: int = Field(ge=0, le=255)
    green: int = Field(ge=0, le=255)
    blue: int = Field(ge=0, le=255)
    alpha: int = Field(default=255, ge=0, le=255)

    @classmethod
    def parse(cls, text: str) -> Colour:
        """Parse any CSS colour Pillow understands (#rgb, #rrggbbaa, rgb(), names)."""
        rgba = ImageColor.getrgb(text.strip())
        alpha = rgba[3] if len(rgba) == 4 else 255
        return cls(red=rgba[0], green=rgba[1], blue=rgba[2], alpha=alpha)

    @property
    def opacity(self) -> float:
        return self.alpha / 255

    def to_hex(self) -> str:
        return f"#{self.red:02x}{self.green:02x}{self.blue:02x}"


class Fill(BaseModel, frozen=True):
    colour: Colour
    opacity: float = Field(default=1.0, ge=0.0, le=1.0)
    rule: str = "evenodd"


class FillSet(BaseModel, frozen=True):
    """One fill per layer role."""

    primary: Fill
    secondary: Fill
    overlay: Fill

    @classmethod
    def from_colours(cls, main: Colour, overlay: Colour) -> FillSet:
        return cls(
            primary=Fill(colour=main, opacity=1.0),
            secondary=Fill(colour=main, opacity=SECONDARY_OPACITY),
            overlay=Fill(colour=overlay, opacity=1.0),
        )

    def for_role(self, role: str) -> Fill:
        return getattr(self, role)
