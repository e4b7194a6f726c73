from __future__ import annotations

import pytest
from PIL import Image

from letter.models.overlay_geometry import MIN_WIDTH, OverlayGeometry, OverlayImage, OverlayLimits


def test_height_follows_image_aspect(geometry):
    assert geometry.height == pytest.approx(50)
    assert geometry.resized_to(240).height == pytest.approx(80)
    assert geometry.center == pytest.approx((475, 725))


def test_resize_floor_applies_to_every_width_change(geometry):
    assert geometry.resized_to(3).width == MIN_WIDTH
    assert geometry.resized_to(-100).width == MIN_WIDTH
    assert geometry.resized_by_step(-20).width == MIN_WIDTH
    assert geometry.resized_to(60).resized_by_step(-1).width == MIN_WIDTH


def test_stepped_controls(geometry):
    assert geometry.resized_by_step(1).width == 160
    assert geometry.resized_by_step(-2).width == 130
    assert geometry.rotated_by_step(1).rotation == 90
    assert geometry.rotated_by_step(-1).rotation == -90
    assert geometry.rotated_by_step(-1).display_rotation == 270
    assert geometry.rotated_by_step(5).rotation == 450


def test_custom_limits():
    limits = OverlayLimits(min_width=80, default_width=200, size_step=25, rotation_step=45)
    g = OverlayGeometry().with_image(OverlayImage(Image.new("RGBA", (10, 10))), limits)
    assert g.width == 200
    assert g.resized_by_step(1, limits).width == 225
    assert g.rotated_by_step(1, limits).rotation == 45
    assert g.resized_to(10, limits).width == 80


def test_resize_and_rotate_are_independent_and_commute(geometry):
    a = geometry.resized_to(220).rotated_to(33)
    b = geometry.rotated_to(33).resized_to(220)
    assert a == b
    assert geometry.rotated_to(33).width == geometry.width
    assert geometry.resized_to(220).rotation == geometry.rotation


def test_upload_keeps_position_and_resets_size_and_rotation(geometry):
    moved = geometry.moved_to(120, 80).resized_to(400).rotated_to(270)
    replacement = OverlayImage(Image.new("RGBA", (100, 100)), name="stamp.png")
    g = moved.with_image(replacement)
    assert (g.x, g.y) == (120, 80)
    assert g.width == 150
    assert g.rotation == 0
    assert g.image is replacement


def test_removal_clears_image_only(geometry):
    g = geometry.moved_to(10, 20).cleared()
    assert g.image is None
    assert not g.active
    assert (g.x, g.y, g.width) == (10, 20, geometry.width)


def test_updates_return_new_values(geometry):
    moved = geometry.moved_to(1, 2)
    assert moved is not geometry
    assert (geometry.x, geometry.y) == (400, 700)
    with pytest.raises(AttributeError):
        geometry.x = 5  # type: ignore[misc]


def test_local_frame_follows_rotation(geometry):
    g = geometry.rotated_to(90)
    # clockwise quarter turn: local +x points down the page
    assert g.to_canonical(10, 0) == pytest.approx((475, 735))
    assert g.to_local(475, 735) == pytest.approx((10, 0))
