"""Fill resolver: pick the most specific fill for an item's tag path.

A palette may colour a broad category and re-colour a leaf under it without
listing every leaf. Walking the tag path from the root, each prefix found in
the palette's tag table replaces the previous match, so the deepest matching
ancestor wins.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from iconpack.models.fills import FillSet
from iconpack.models.palette import Palette
from iconpack.models.tag_path import TagPath, tokenize_tag_path
from iconpack.taxonomy.system import TagSystem

__all__ = ["fills_for_item", "resolve_tag_fill", "tokenize_tag_path"]


def resolve_tag_fill(tag_path: Sequence[str], tag_fills: Mapping[TagPath, FillSet]) -> FillSet | None:
    """Longest prefix of ``tag_path`` with a fill, or None if no prefix matches."""
    best: FillSet | None = None
    prefix: TagPath = ()
    for segment in tag_path:
        prefix = prefix + (segment,)
        fill = tag_fills.get(prefix)
        if fill is not None:
            best = fill
    return best


def fills_for_item(palette: Palette, category: str, item: str, tag_system: TagSystem) -> FillSet:
    """Explicit item colour, else tag-resolved fill, else the palette default."""
    override = palette.item_fills.get(category, {}).get(item)
    if override is not None:
        return override

    tag_path = tag_system.tags_for(category, item)
    if tag_path:
        resolved = resolve_tag_fill(tag_path, palette.tag_fills)
        if resolved is not None:
            return resolved

    return palette.default_fills
