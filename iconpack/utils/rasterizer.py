"""Rasterisation: SVG scene text to PNG bytes via CairoSVG."""

from __future__ import annotations

import cairosvg


def render_svg_to_png(svg: str, pixel_size: int) -> bytes:
    """Render an SVG scene to a square PNG of ``pixel_size`` pixels."""
    if pixel_size <= 0:
        raise ValueError(f"pixel size must be positive, got {pixel_size}")
    return cairosvg.svg2png(
        bytestring=svg.encode("utf-8"),
        output_width=pixel_size,
        output_height=pixel_size,
    )
