# letter/logic/page_renderer.py
"""
Scale-invariant renderer.

Draws a canonical ``PageLayout`` plus the overlay at any pixels-per-unit
``factor``: the live preview uses the display scale, export uses the
supersampling factor. Coordinates are multiplied, never re-flowed.
"""
from __future__ import annotations

from typing import Optional, Tuple

from PIL import Image, ImageChops, ImageDraw

from ..models.overlay_geometry import OverlayGeometry
from .fonts import FontBook
from .text_layout import PLACEHOLDER_COLOR, UNDERLINE_COLOR, PageLayout

Sprite = Tuple[Image.Image, Tuple[int, int]]


class PageRenderer:
    def __init__(self, fonts: FontBook, *, placeholder_text: str = "", background: str = "#ffffff") -> None:
        self._fonts = fonts
        self._placeholder = placeholder_text
        self._background = background

    # ------------------------------------------------------------------ text
    def render_text(self, layout: PageLayout, factor: float, *, show_placeholders: bool = False) -> Image.Image:
        """Page without overlay, ``page.width * factor`` pixels wide."""
        img = Image.new("RGB", layout.page.pixel_size(factor), self._background)
        draw = ImageDraw.Draw(img)

        for rule in layout.rules:
            y0 = rule.y0 * factor
            draw.rectangle(
                (rule.x0 * factor, y0, rule.x1 * factor, max(y0, rule.y1 * factor - 1)),
                fill=rule.color,
            )

        for block in layout.blocks:
            style = block.style
            font = self._fonts.font(style.role, style.size * factor)
            if block.placeholder:
                if show_placeholders and self._placeholder:
                    line = block.lines[0]
                    draw.text(
                        (line.x * factor, (line.top + style.line_height / 2.0) * factor),
                        self._placeholder, font=font, fill=PLACEHOLDER_COLOR, anchor="lm",
                    )
                continue
            for line in block.lines:
                if not line.text:
                    continue
                mid = line.top + style.line_height / 2.0
                draw.text((line.x * factor, mid * factor), line.text, font=font, fill=style.color, anchor="lm")
                if style.underline:
                    uy = (mid + style.size * 0.5 + 4) * factor
                    draw.line(
                        (line.x * factor, uy, (line.x + line.width) * factor, uy),
                        fill=UNDERLINE_COLOR, width=max(1, round(factor)),
                    )
        return img

    # ------------------------------------------------------------------ overlay
    def overlay_sprite(self, geom: OverlayGeometry, factor: float) -> Optional[Sprite]:
        """
        Overlay bitmap at ``factor`` plus its paste origin in page pixels.

        Scaling uses the stored width (outer box); rotation is applied to the
        scaled bitmap about its own center (inner wrapper), so the center
        stays at ``geom.center`` whatever the angle.
        """
        if geom.image is None:
            return None
        w = max(1, round(geom.width * factor))
        h = max(1, round(geom.height * factor))
        sprite = geom.image.image.resize((w, h), Image.Resampling.LANCZOS)
        if geom.rotation % 360.0:
            # PIL rotates counter-clockwise; stored rotation is clockwise on screen
            sprite = sprite.rotate(-geom.rotation, resample=Image.Resampling.BICUBIC, expand=True)
        cx, cy = geom.center
        left = round(cx * factor - sprite.width / 2.0)
        top = round(cy * factor - sprite.height / 2.0)
        return sprite, (left, top)

    def composite_overlay(self, page_img: Image.Image, geom: OverlayGeometry, factor: float) -> Image.Image:
        """Multiply-blend the overlay onto ``page_img`` like ink on paper."""
        sprite = self.overlay_sprite(geom, factor)
        if sprite is None:
            return page_img
        bitmap, origin = sprite
        layer = Image.new("RGB", page_img.size, "#ffffff")
        layer.paste(bitmap.convert("RGB"), origin, bitmap)
        return ImageChops.multiply(page_img.convert("RGB"), layer)

    # ------------------------------------------------------------------ page
    def render(
        self,
        layout: PageLayout,
        geom: OverlayGeometry,
        factor: float,
        *,
        show_placeholders: bool = False,
    ) -> Image.Image:
        return self.composite_overlay(self.render_text(layout, factor, show_placeholders=show_placeholders), geom, factor)
