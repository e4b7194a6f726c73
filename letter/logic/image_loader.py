"""Decoding of uploaded signature images (file path, raw bytes or data URL)."""
from __future__ import annotations

import base64
import binascii
import io
import logging
import re
from pathlib import Path
from typing import Union

from PIL import Image, UnidentifiedImageError

from ..exceptions.errors import ImageDecodeError
from ..models.overlay_geometry import OverlayImage

logger = logging.getLogger(__name__)

_DATA_URL = re.compile(r"^data:(?P<mime>[\w/+.-]*)(?P<b64>;base64)?,(?P<data>.*)$", re.DOTALL)

ImageSource = Union[bytes, bytearray, str, Path]


def _read_source(source: ImageSource) -> tuple[bytes, str]:
    if isinstance(source, (bytes, bytearray)):
        return bytes(source), ""
    if isinstance(source, str):
        m = _DATA_URL.match(source)
        if m:
            if not m.group("b64"):
                raise ImageDecodeError("Only base64 data URLs are supported")
            try:
                return base64.b64decode(m.group("data"), validate=False), ""
            except (binascii.Error, ValueError) as ex:
                raise ImageDecodeError(f"Invalid data URL: {ex}") from ex
        source = Path(source)
    try:
        return source.read_bytes(), source.name
    except OSError as ex:
        raise ImageDecodeError(f"Cannot read {source}: {ex}") from ex


def load_overlay_image(source: ImageSource) -> OverlayImage:
    """
    Decode ``source`` completely into an RGBA overlay image.

    Raises ImageDecodeError for unreadable, corrupt or unsupported input; the
    caller keeps its previous overlay state in that case.
    """
    raw, name = _read_source(source)
    if not raw:
        raise ImageDecodeError("Empty image data")
    try:
        with Image.open(io.BytesIO(raw)) as im:
            im.load()
            rgba = im.convert("RGBA")
    except (UnidentifiedImageError, OSError, SyntaxError, EOFError, ValueError, Image.DecompressionBombError) as ex:
        raise ImageDecodeError(f"Unsupported or corrupt image: {ex}") from ex

    if rgba.width <= 0 or rgba.height <= 0:
        raise ImageDecodeError("Image has no pixels")

    logger.debug("Decoded overlay image %s (%dx%d)", name or "<bytes>", rgba.width, rgba.height)
    return OverlayImage(image=rgba, source=raw, name=name)


def to_data_url(overlay: OverlayImage) -> str:
    """PNG data URL of the decoded overlay (for sharing surfaces)."""
    buf = io.BytesIO()
    overlay.image.save(buf, format="PNG")
    return "data:image/png;base64," + base64.b64encode(buf.getvalue()).decode("ascii")
