"""Layer classifier: split a source icon into primary, secondary and overlay paths.

Source icons carry no explicit layer markers. The role of each path is read
from its fill:

    1. blue < 200 and red < 200      -> overlay
    2. fill opacity (8-bit) < 200    -> secondary  (fill-opacity x colour alpha)
    3. otherwise                     -> primary

Each role holds at most one path. Geometry is normalised through svgpathtools
into absolute path data on a 16x16 canvas so the renderer never needs to know
about the source viewBox or element transforms.
"""

from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from collections.abc import Iterable, Iterator
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path

import numpy as np
from svgpathtools import parse_path
from svgpathtools.parser import parse_transform
from svgpathtools.path import transform as transform_path
from svgpathtools.svg_to_paths import (
    ellipse2pathd,
    line2pathd,
    polygon2pathd,
    polyline2pathd,
    rect2pathd,
)

from iconpack.errors import DuplicateLayerError, IconParseError, MissingIconError, NoFillError
from iconpack.models.fills import Colour

logger = logging.getLogger(__name__)

ROLES = ("primary", "secondary", "overlay")

# Logical canvas every icon is normalised to
CANVAS_SIZE = 16.0

OVERLAY_CHANNEL_LIMIT = 200
SECONDARY_OPACITY_LIMIT = 200

_SHAPE_TO_PATHD = {
    "rect": rect2pathd,
    "circle": ellipse2pathd,
    "ellipse": ellipse2pathd,
    "polygon": polygon2pathd,
    "polyline": polyline2pathd,
    "line": line2pathd,
}
_SKIP_SUBTREES = {"defs", "clipPath", "mask", "symbol", "pattern", "marker", "metadata", "title", "desc", "style"}
_INHERITED = ("fill", "fill-opacity", "color")
_URL_PAINT_RE = re.compile(r"^url\(", re.IGNORECASE)
_XLINK_HREF = "{http://www.w3.org/1999/xlink}href"


@dataclass(frozen=True)
class IconLayers:
    """Path data per role. Absent roles are None and are skipped at render time."""

    primary: str | None = None
    secondary: str | None = None
    overlay: str | None = None

    def present(self) -> Iterator[tuple[str, str]]:
        """(role, path data) for each present layer, in paint order."""
        for role in ROLES:
            data = getattr(self, role)
            if data is not None:
                yield role, data


def _strip_ns(tag: str) -> str:
    return tag.split("}")[-1] if "}" in tag else tag


def _style_props(element: ET.Element) -> dict[str, str]:
    """Presentation attributes, with inline style declarations taking precedence."""
    props = {k: v.strip() for k, v in element.attrib.items() if "}" not in k}
    for decl in element.get("style", "").split(";"):
        if ":" in decl:
            key, value = decl.split(":", 1)
            props[key.strip()] = value.strip()
    return props


def _parse_opacity(value: str | None, icon_name: str | None) -> float:
    if value is None or value == "":
        return 1.0
    try:
        number = float(value[:-1]) / 100 if value.endswith("%") else float(value)
    except ValueError:
        raise IconParseError(icon_name, f"invalid opacity {value!r}") from None
    return min(max(number, 0.0), 1.0)


def _root_matrix(root: ET.Element, icon_name: str | None) -> np.ndarray:
    """Map the source viewBox onto the 16x16 logical canvas."""
    view_box = root.get("viewBox")
    try:
        if view_box:
            min_x, min_y, width, height = (float(v) for v in view_box.replace(",", " ").split())
        else:
            min_x = min_y = 0.0
            width = float(re.sub(r"[a-z%]+$", "", root.get("width", str(CANVAS_SIZE))))
            height = float(re.sub(r"[a-z%]+$", "", root.get("height", str(CANVAS_SIZE))))
    except ValueError:
        raise IconParseError(icon_name, f"invalid canvas size (viewBox={view_box!r})") from None
    if width <= 0 or height <= 0:
        raise IconParseError(icon_name, "canvas has zero size")

    sx, sy = CANVAS_SIZE / width, CANVAS_SIZE / height
    return np.array([[sx, 0.0, -min_x * sx], [0.0, sy, -min_y * sy], [0.0, 0.0, 1.0]])


def _path_data(tag: str, element: ET.Element) -> str | None:
    if tag == "path":
        return element.get("d") or None
    attrs = dict(element.attrib)
    return _SHAPE_TO_PATHD[tag](attrs) or None


def _classify(paint: str, fill_opacity: float, icon_name: str | None) -> tuple[str, float]:
    """Role and 0..1 fill opacity for one resolved paint.

    The fill opacity is ``fill-opacity`` times the paint colour's own alpha.
    Element and group ``opacity`` is compositing, not part of the fill.
    """
    opacity = fill_opacity
    if not _URL_PAINT_RE.match(paint):
        if paint == "currentColor":
            paint = "black"
        try:
            colour = Colour.parse(paint)
        except ValueError:
            raise IconParseError(icon_name, f"invalid fill colour {paint!r}") from None
        if colour.blue < OVERLAY_CHANNEL_LIMIT and colour.red < OVERLAY_CHANNEL_LIMIT:
            return "overlay", opacity
        opacity *= colour.opacity

    if round(opacity * 255) < SECONDARY_OPACITY_LIMIT:
        return "secondary", opacity
    return "primary", opacity


def _translate(x: float, y: float) -> np.ndarray:
    return np.array([[1.0, 0.0, x], [0.0, 1.0, y], [0.0, 0.0, 1.0]])


def _use_target(
    element: ET.Element,
    refs: dict[str, ET.Element],
    active: tuple[str, ...],
    icon_name: str | None,
) -> tuple[str, ET.Element]:
    href = element.get("href") or element.get(_XLINK_HREF)
    if not href or not href.startswith("#"):
        raise IconParseError(icon_name, f"<use> has no local reference (href={href!r})")
    ref_id = href[1:]
    if ref_id not in refs:
        raise IconParseError(icon_name, f"<use> references unknown element #{ref_id}")
    if ref_id in active:
        raise IconParseError(icon_name, f"<use> reference cycle through #{ref_id}")
    return ref_id, refs[ref_id]


def _walk(
    element: ET.Element,
    inherited: dict[str, str],
    matrix: np.ndarray,
    refs: dict[str, ET.Element],
    icon_name: str | None,
    active: tuple[str, ...] = (),
) -> Iterator[tuple[str, str, float, str]]:
    """Yield (tag, transformed path data, fill-opacity, paint) for each shape.

    ``<use>`` instances are expanded in place. ``active`` holds the ids being
    expanded so a self-referencing ``<use>`` fails instead of recursing.
    """
    tag = _strip_ns(element.tag)
    if tag in _SKIP_SUBTREES:
        return

    props = _style_props(element)
    style = dict(inherited)
    for key in _INHERITED:
        if key in props:
            style[key] = props[key]
    if style.get("fill") == "currentColor" and "color" in style:
        style["fill"] = style["color"]

    if "transform" in props:
        matrix = matrix @ parse_transform(props["transform"])

    if tag == "use":
        ref_id, target = _use_target(element, refs, active, icon_name)
        try:
            offset = _translate(float(element.get("x", 0)), float(element.get("y", 0)))
        except ValueError:
            raise IconParseError(icon_name, f"invalid <use> offset for #{ref_id}") from None
        matrix = matrix @ offset
        # A referenced symbol contributes its children; anything else is drawn as itself
        targets = list(target) if _strip_ns(target.tag) == "symbol" else [target]
        for child in targets:
            yield from _walk(child, style, matrix, refs, icon_name, active + (ref_id,))
        return

    if tag in _SHAPE_TO_PATHD or tag == "path":
        paint = style.get("fill")
        if paint is None or paint.lower() in ("none", "transparent"):
            raise NoFillError(icon_name, tag)

        try:
            data = _path_data(tag, element)
            path = transform_path(parse_path(data), matrix) if data else None
        except Exception as e:
            raise IconParseError(icon_name, f"invalid geometry in <{tag}>: {e}") from e
        if path is None or len(path) == 0:
            logger.debug("Skipping empty <%s> in %s", tag, icon_name)
            return

        fill_opacity = _parse_opacity(style.get("fill-opacity"), icon_name)
        yield tag, path.d(), fill_opacity, paint
        return

    for child in element:
        yield from _walk(child, style, matrix, refs, icon_name, active)


def classify_svg(svg_data: bytes | str, icon_name: str | None = None) -> IconLayers:
    """Parse one source icon and assign each of its paths a layer role."""
    try:
        root = ET.fromstring(svg_data)
    except ET.ParseError as e:
        raise IconParseError(icon_name, f"invalid SVG: {e}") from e
    if _strip_ns(root.tag) != "svg":
        raise IconParseError(icon_name, f"root element is <{_strip_ns(root.tag)}>, not <svg>")

    refs = {el.get("id"): el for el in root.iter() if el.get("id")}
    layers: dict[str, str] = {}
    for tag, data, fill_opacity, paint in _walk(root, {}, _root_matrix(root, icon_name), refs, icon_name):
        role, opacity = _classify(paint, fill_opacity, icon_name)
        if role in layers:
            raise DuplicateLayerError(icon_name, role)
        layers[role] = data
        logger.debug("%s: <%s> fill=%s opacity=%.2f -> %s", icon_name, tag, paint, opacity, role)

    return IconLayers(**layers)


def icon_path(icon_dir: Path, icon_name: str, file_pattern: str) -> Path:
    return Path(icon_dir) / file_pattern.format(name=icon_name)


def load_icon(icon_dir: Path, icon_name: str, file_pattern: str) -> IconLayers:
    path = icon_path(icon_dir, icon_name, file_pattern)
    try:
        svg_data = path.read_bytes()
    except OSError:
        raise MissingIconError(icon_name, path=str(path)) from None
    return classify_svg(svg_data, icon_name)


def load_icon_layers(
    icon_dir: Path,
    icon_names: Iterable[str],
    file_pattern: str,
    workers: int | None = None,
) -> dict[str, IconLayers]:
    """Classify every unique icon once. The first failure aborts the load."""
    names = sorted(set(icon_names))
    with ThreadPoolExecutor(max_workers=workers) as pool:
        loaded = pool.map(lambda name: load_icon(icon_dir, name, file_pattern), names)
        layers = dict(zip(names, loaded))
    logger.info("Loaded vector data for %d unique icons", len(layers))
    return layers
