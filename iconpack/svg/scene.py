"""Write the minimal 16x16 SVG scene for one icon in one fill set."""

from __future__ import annotations

from iconpack.models.fills import FillSet
from iconpack.svg.layers import CANVAS_SIZE, IconLayers


def _fmt(value: float) -> str:
    return f"{value:g}"


def serialize_scene(layers: IconLayers, fills: FillSet, canvas: float = CANVAS_SIZE) -> str:
    """Generate SVG markup holding only the layers present in the icon."""
    size = _fmt(canvas)
    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{size}" height="{size}"'
        f' viewBox="0 0 {size} {size}">',
    ]

    for role, data in layers.present():
        fill = fills.for_role(role)
        attrs = {
            "d": data,
            "fill": fill.colour.to_hex(),
            "fill-opacity": _fmt(fill.opacity),
            "fill-rule": fill.rule,
        }
        attr_str = " ".join(f'{k}="{v}"' for k, v in attrs.items())
        lines.append(f"  <path {attr_str} />")

    lines.append("</svg>")
    return "\n".join(lines)
