from __future__ import annotations

import pytest

from letter.logic import hit_testing
from letter.logic.hit_testing import contains, corner_points, handle_positions, hit_test
from letter.models.gesture import GestureMode, HandleSpec
from letter.models.overlay_geometry import OverlayGeometry

HANDLES = HandleSpec(radius_px=9, rotate_offset=28)


def test_handle_positions_unrotated(geometry):
    pos = handle_positions(geometry, HANDLES)
    assert pos[GestureMode.RESIZE] == pytest.approx((550, 750))
    assert pos[GestureMode.ROTATE] == pytest.approx((475, 672))


def test_handle_positions_follow_rotation(geometry):
    pos = handle_positions(geometry.rotated_to(90), HANDLES)
    assert pos[GestureMode.RESIZE] == pytest.approx((450, 800))
    assert pos[GestureMode.ROTATE] == pytest.approx((528, 725))


def test_corner_points_unrotated(geometry):
    flat = [c for point in corner_points(geometry) for c in point]
    assert flat == pytest.approx([400, 700, 550, 700, 550, 750, 400, 750])


def test_body_hit_respects_rotation(geometry):
    rotated = geometry.rotated_to(90)
    # inside the unrotated box, outside the rotated one
    assert contains(geometry, (540, 705))
    assert not contains(rotated, (540, 705))
    assert contains(rotated, (475, 790))


def test_handles_win_over_body(geometry):
    assert hit_test(geometry, (550, 750), HANDLES, 1.0) is GestureMode.RESIZE
    assert hit_test(geometry, (545, 745), HANDLES, 1.0) is GestureMode.RESIZE
    assert hit_test(geometry, (475, 725), HANDLES, 1.0) is GestureMode.MOVE
    assert hit_test(geometry, (475, 672), HANDLES, 1.0) is GestureMode.ROTATE
    assert hit_test(geometry, (100, 100), HANDLES, 1.0) is None


def test_handle_radius_is_constant_on_screen(geometry):
    point = (565, 750)  # 15 units right of the resize handle, outside the body
    assert hit_test(geometry, point, HANDLES, 1.0) is None
    assert hit_test(geometry, point, HANDLES, 0.5) is GestureMode.RESIZE


def test_no_hits_without_image():
    assert hit_test(OverlayGeometry(), (475, 725), HANDLES, 1.0) is None


def test_handles_are_located_once_per_press(geometry, monkeypatch):
    calls = []
    real = hit_testing.handle_positions

    def counting(geom, spec):
        calls.append(geom)
        return real(geom, spec)

    monkeypatch.setattr(hit_testing, "handle_positions", counting)
    assert hit_test(geometry, (100, 100), HANDLES, 1.0) is None
    assert len(calls) == 1
