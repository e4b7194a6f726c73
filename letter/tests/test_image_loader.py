from __future__ import annotations

import base64

import pytest

from letter.exceptions.errors import ImageDecodeError
from letter.logic.image_loader import load_overlay_image, to_data_url

from .conftest import make_png


def test_decodes_raw_bytes_to_rgba(png_bytes):
    img = load_overlay_image(png_bytes)
    assert img.image.mode == "RGBA"
    assert img.intrinsic_size == (300, 100)
    assert img.aspect == pytest.approx(1 / 3)
    assert img.source == png_bytes


def test_decodes_file_path(tmp_path):
    path = tmp_path / "signature.png"
    path.write_bytes(make_png((40, 20)))
    img = load_overlay_image(str(path))
    assert img.name == "signature.png"
    assert img.intrinsic_size == (40, 20)


def test_decodes_data_url(png_bytes):
    url = "data:image/png;base64," + base64.b64encode(png_bytes).decode("ascii")
    assert load_overlay_image(url).intrinsic_size == (300, 100)


def test_data_url_round_trip(png_bytes):
    url = to_data_url(load_overlay_image(png_bytes))
    assert url.startswith("data:image/png;base64,")
    assert load_overlay_image(url).intrinsic_size == (300, 100)


@pytest.mark.parametrize(
    "source",
    [
        b"",
        b"definitely not an image",
        make_png()[:40],
        "data:image/png,plain-text-payload",
        "data:image/png;base64," + base64.b64encode(b"garbage").decode("ascii"),
    ],
)
def test_bad_input_raises_decode_error(source):
    with pytest.raises(ImageDecodeError):
        load_overlay_image(source)


def test_missing_file_raises_decode_error(tmp_path):
    with pytest.raises(ImageDecodeError):
        load_overlay_image(tmp_path / "missing.png")
