from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class CanonicalPage:
    """
    Fixed page coordinate space every piece of geometry is expressed in.

    Defaults approximate an A4 sheet at 96 dpi (210 mm ≈ 794 px,
    297 mm ≈ 1123 px). ``padding`` is the inner margin the text flows in.
    """
    width: float = 794.0
    height: float = 1123.0
    padding: float = 60.0

    @property
    def content_width(self) -> float:
        return self.width - 2 * self.padding

    @property
    def content_bottom(self) -> float:
        """Lowest y the footer block may reach (bottom inset)."""
        return self.height - self.padding

    @property
    def aspect(self) -> float:
        return self.height / self.width

    def pixel_size(self, factor: float) -> tuple[int, int]:
        """Raster size of the page rendered at ``factor`` pixels per unit."""
        return max(1, round(self.width * factor)), max(1, round(self.height * factor))

    def fitted_to(self, pagesize: tuple[float, float], tolerance: float = 1e-3) -> "CanonicalPage":
        """
        Same width and padding, height adjusted so the page has the aspect of
        the physical ``pagesize`` (points). Pages that already match are kept.
        """
        pw, ph = pagesize
        if abs(self.aspect - ph / pw) <= tolerance:
            return self
        return replace(self, height=self.width * ph / pw)

    @classmethod
    def from_config(cls, cfg) -> "CanonicalPage":
        return cls(width=float(cfg.width), height=float(cfg.height), padding=float(cfg.padding))


A4_PAGE = CanonicalPage()
