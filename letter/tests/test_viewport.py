from __future__ import annotations

import pytest

from letter.logic.viewport import DisplayTransform, preview_scale_for_viewport, scaled_box
from letter.models.gesture import ScreenRect
from letter.models.page import A4_PAGE


@pytest.mark.parametrize(
    ("width", "scale"),
    [(425, 0.5), (639, 639 / 850), (640, 0.6), (1023, 0.6), (1024, 0.7), (2560, 0.7)],
)
def test_preview_scale_breakpoints(width, scale):
    assert preview_scale_for_viewport(width) == pytest.approx(scale)


def test_scaled_box_gives_back_unused_height():
    box = scaled_box(A4_PAGE, 0.5)
    assert (box.width, box.height) == pytest.approx((397, 561.5))
    assert box.bottom_compensation == pytest.approx(-561.5)
    assert scaled_box(A4_PAGE, 1.0).bottom_compensation == 0


def test_display_transform():
    tr = DisplayTransform.from_rect(ScreenRect(100, 50, 397, 561.5), 0.5)
    assert tr.to_screen(200, 300) == (200, 200)
    assert tr.to_canonical(200, 200) == (200, 300)
    assert tr.length_to_canonical(100) == 200
