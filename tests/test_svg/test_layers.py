"""Tests for the layer classifier."""

import pytest
from svgpathtools import parse_path

from tests.conftest import (
    FULL_SVG,
    GROUPED_SVG,
    NO_FILL_SVG,
    PRIMARY_ONLY_SVG,
    PRIMARY_SECONDARY_SVG,
    TWO_SECONDARY_SVG,
)

from iconpack.errors import DuplicateLayerError, IconParseError, MissingIconError, NoFillError
from iconpack.svg.layers import classify_svg, load_icon_layers


def _single_path_svg(fill_attrs: str) -> str:
    return (
        '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 16 16">'
        f'<path d="M0 0H16V16H0Z" {fill_attrs}/>'
        "</svg>"
    )


def test_single_opaque_path_is_primary():
    layers = classify_svg(PRIMARY_ONLY_SVG, "Cube")
    assert layers.primary is not None
    assert layers.secondary is None
    assert layers.overlay is None


def test_primary_and_secondary():
    layers = classify_svg(PRIMARY_SECONDARY_SVG)
    assert layers.primary is not None
    assert layers.secondary is not None
    assert layers.overlay is None


def test_all_three_roles():
    layers = classify_svg(FULL_SVG)
    assert [role for role, _ in layers.present()] == ["primary", "secondary", "overlay"]


def test_two_secondary_paths_fail():
    with pytest.raises(DuplicateLayerError) as exc:
        classify_svg(TWO_SECONDARY_SVG, "Broken")
    assert exc.value.role == "secondary"
    assert "two secondary layers" in str(exc.value)
    assert "Broken" in str(exc.value)


def test_path_without_fill_fails():
    with pytest.raises(NoFillError, match="no fill"):
        classify_svg(NO_FILL_SVG, "Bare")


def test_fill_none_fails():
    with pytest.raises(NoFillError):
        classify_svg(_single_path_svg('fill="none"'))


@pytest.mark.parametrize(
    "fill, role",
    [
        ("#000000", "overlay"),
        ("#00ff00", "overlay"),
        ("#c7c7c7", "overlay"),
        ("#c8c8c8", "primary"),
        ("#ff0000", "primary"),
        ("#0000ff", "primary"),
    ],
)
def test_overlay_threshold(fill, role):
    layers = classify_svg(_single_path_svg(f'fill="{fill}"'))
    assert [r for r, _ in layers.present()] == [role]


def test_overlay_wins_over_low_opacity():
    layers = classify_svg(_single_path_svg('fill="#000000" fill-opacity="0.2"'))
    assert layers.overlay is not None
    assert layers.secondary is None


@pytest.mark.parametrize(
    "opacity, role",
    [
        ("1", "primary"),
        ("0.79", "primary"),
        ("0.78", "secondary"),
        ("50%", "secondary"),
    ],
)
def test_secondary_opacity_threshold(opacity, role):
    layers = classify_svg(_single_path_svg(f'fill="#ffffff" fill-opacity="{opacity}"'))
    assert [r for r, _ in layers.present()] == [role]


def test_style_attribute_overrides_presentation_attribute():
    layers = classify_svg(_single_path_svg('fill="#ffffff" style="fill:#000000"'))
    assert layers.overlay is not None


def test_paint_server_fill_is_never_overlay():
    layers = classify_svg(_single_path_svg('fill="url(#grad)"'))
    assert layers.primary is not None


def test_inherited_fill_and_fill_opacity():
    layers = classify_svg(GROUPED_SVG)
    assert layers.primary is not None
    assert layers.secondary is not None


def test_element_opacity_keeps_primary():
    layers = classify_svg(_single_path_svg('fill="#ffffff" opacity="0.5"'))
    assert [r for r, _ in layers.present()] == ["primary"]


def test_group_opacity_does_not_change_roles():
    svg = (
        '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 16 16">'
        '<g opacity="0.5">'
        '<path d="M1 1H8V15H1Z" fill="#ffffff"/>'
        '<path d="M8 1H15V15H8Z" fill="#ffffff" fill-opacity="0.5"/>'
        "</g>"
        "</svg>"
    )
    layers = classify_svg(svg)
    assert [r for r, _ in layers.present()] == ["primary", "secondary"]


@pytest.mark.parametrize(
    "fill, role",
    [
        ("#ffffff80", "secondary"),
        ("#ffffffff", "primary"),
        ("rgba(255, 255, 255, 128)", "secondary"),
    ],
)
def test_colour_alpha_counts_as_fill_opacity(fill, role):
    layers = classify_svg(_single_path_svg(f'fill="{fill}"'))
    assert [r for r, _ in layers.present()] == [role]


def test_use_instances_referenced_shape():
    svg = (
        '<svg xmlns="http://www.w3.org/2000/svg" xmlns:xlink="http://www.w3.org/1999/xlink" viewBox="0 0 16 16">'
        '<defs><rect id="box" width="4" height="4"/></defs>'
        '<path d="M0 0H2V2H0Z" fill="#ffffff"/>'
        '<use xlink:href="#box" x="8" y="8" fill="#ffffff" fill-opacity="0.5"/>'
        "</svg>"
    )
    layers = classify_svg(svg)
    assert layers.secondary is not None
    xmin, xmax, ymin, ymax = parse_path(layers.secondary).bbox()
    assert (xmin, xmax, ymin, ymax) == pytest.approx((8.0, 12.0, 8.0, 12.0))


def test_use_of_symbol_draws_its_children():
    svg = (
        '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 16 16">'
        '<symbol id="dot"><circle cx="2" cy="2" r="2" fill="#000000"/></symbol>'
        '<path d="M0 0H16V16H0Z" fill="#ffffff"/>'
        '<use href="#dot"/>'
        "</svg>"
    )
    layers = classify_svg(svg)
    assert [r for r, _ in layers.present()] == ["primary", "overlay"]


@pytest.mark.parametrize(
    "body",
    [
        '<use href="#ghost"/>',
        '<use href="other.svg#box"/>',
        '<g id="loop" fill="#ffffff"><use href="#loop"/></g>',
    ],
)
def test_unresolvable_use_fails(body):
    svg = f'<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 16 16">{body}</svg>'
    with pytest.raises(IconParseError, match="<use>"):
        classify_svg(svg, "Instanced")


def test_geometry_normalised_to_16_units():
    layers = classify_svg(GROUPED_SVG)
    xmin, xmax, ymin, ymax = parse_path(layers.primary).bbox()
    assert (xmin, ymin) == pytest.approx((0.0, 0.0))
    assert (xmax, ymax) == pytest.approx((16.0, 16.0))

    xmin, xmax, ymin, ymax = parse_path(layers.secondary).bbox()
    assert (xmin, xmax) == pytest.approx((2.0, 6.0))


def test_element_transform_applied():
    svg = (
        '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 16 16">'
        '<path d="M0 0H4V4H0Z" fill="#fff" transform="translate(8 8)"/>'
        "</svg>"
    )
    xmin, xmax, ymin, ymax = parse_path(classify_svg(svg).primary).bbox()
    assert (xmin, xmax, ymin, ymax) == pytest.approx((8.0, 12.0, 8.0, 12.0))


def test_defs_are_not_layers():
    svg = (
        '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 16 16">'
        '<defs><path id="unused" d="M0 0H1V1H0Z"/></defs>'
        '<path d="M0 0H16V16H0Z" fill="#fff"/>'
        "</svg>"
    )
    layers = classify_svg(svg)
    assert [r for r, _ in layers.present()] == ["primary"]


def test_invalid_xml():
    with pytest.raises(IconParseError):
        classify_svg("<svg><path></svg>", "Garbled")


def test_load_icon_layers_once_per_name(tmp_path):
    (tmp_path / "Icon=Cube.svg").write_text(PRIMARY_ONLY_SVG)
    (tmp_path / "Icon=Mesh.svg").write_text(FULL_SVG)
    layers = load_icon_layers(tmp_path, ["Cube", "Mesh", "Cube"], "Icon={name}.svg", workers=2)
    assert sorted(layers) == ["Cube", "Mesh"]
    assert layers["Mesh"].overlay is not None


def test_load_icon_layers_missing_file(tmp_path):
    with pytest.raises(MissingIconError) as exc:
        load_icon_layers(tmp_path, ["Ghost"], "Icon={name}.svg")
    assert exc.value.icon_name == "Ghost"
    assert "Icon=Ghost.svg" in str(exc.value)
