"""Font lookup for layout measurement and rasterization."""
from __future__ import annotations

import logging
from enum import Enum
from typing import Dict, Mapping, Optional, Tuple

from PIL import ImageFont

logger = logging.getLogger(__name__)


class FontRole(str, Enum):
    SERIF = "serif"
    SERIF_BOLD = "serif_bold"
    SANS = "sans"


# Faces that carry Traditional Chinese glyphs next to Latin ones (Noto CJK,
# Windows MingLiU / JhengHei, macOS Songti / PingFang, Linux AR PL / WenQuanYi).
CJK_SERIF = (
    "NotoSerifCJK-Regular.ttc", "NotoSerifCJKtc-Regular.otf", "mingliu.ttc", "Songti.ttc", "uming.ttc",
)
CJK_SERIF_BOLD = ("NotoSerifCJK-Bold.ttc", "NotoSerifCJKtc-Bold.otf", "NotoSansCJK-Bold.ttc", "msjhbd.ttc")
CJK_SANS = ("NotoSansCJK-Regular.ttc", "NotoSansCJKtc-Regular.otf", "msjh.ttc", "PingFang.ttc", "wqy-zenhei.ttc")
CJK_FACES = frozenset(CJK_SERIF + CJK_SERIF_BOLD + CJK_SANS)

# Tried in order, CJK-capable faces first; Pillow resolves bare file names
# against the system font dirs.
_CANDIDATES: Dict[FontRole, Tuple[str, ...]] = {
    FontRole.SERIF: CJK_SERIF + CJK_SANS + (
        "DejaVuSerif.ttf", "LiberationSerif-Regular.ttf", "NotoSerif-Regular.ttf",
        "times.ttf", "Times New Roman.ttf",
    ),
    FontRole.SERIF_BOLD: CJK_SERIF_BOLD + CJK_SERIF + CJK_SANS + (
        "DejaVuSerif-Bold.ttf", "LiberationSerif-Bold.ttf", "NotoSerif-Bold.ttf",
        "timesbd.ttf", "Times New Roman Bold.ttf",
    ),
    FontRole.SANS: CJK_SANS + (
        "DejaVuSans.ttf", "LiberationSans-Regular.ttf", "NotoSans-Regular.ttf",
        "arial.ttf", "Arial.ttf",
    ),
}


class FontBook:
    """
    Resolves a font per role and size and caches it.

    Layout measures at canonical size; the renderer asks for ``size * factor``.
    Configured paths win over the candidate list; Pillow's bundled default
    font is the last resort so rendering never fails for lack of fonts.
    """

    def __init__(self, overrides: Optional[Mapping[FontRole | str, str]] = None) -> None:
        self._overrides: Dict[FontRole, str] = {
            FontRole(k): v for k, v in (overrides or {}).items() if v
        }
        self._paths: Dict[FontRole, Optional[str]] = {}
        self._cache: Dict[Tuple[FontRole, float], ImageFont.FreeTypeFont] = {}

    @classmethod
    def from_config(cls, cfg) -> "FontBook":
        return cls({
            FontRole.SERIF: cfg.serif,
            FontRole.SERIF_BOLD: cfg.serif_bold,
            FontRole.SANS: cfg.sans,
        })

    def _resolve(self, role: FontRole) -> Optional[str]:
        if role in self._paths:
            return self._paths[role]
        candidates = ((self._overrides[role],) if role in self._overrides else ()) + _CANDIDATES[role]
        found = None
        for name in candidates:
            try:
                ImageFont.truetype(name, 12)
            except OSError:
                continue
            found = name
            break
        if found is None:
            logger.warning("No font found for %s, using Pillow's default font", role.value)
        self._paths[role] = found
        return found

    def path(self, role: FontRole) -> Optional[str]:
        """Font file used for ``role``, ``None`` for Pillow's default font."""
        return self._resolve(FontRole(role))

    def font(self, role: FontRole, size: float):
        key = (FontRole(role), round(float(size), 3))
        cached = self._cache.get(key)
        if cached is not None:
            return cached
        path = self._resolve(key[0])
        if path is not None:
            font = ImageFont.truetype(path, key[1])
        else:
            font = ImageFont.load_default(size=key[1])
        self._cache[key] = font
        return font

    def measure(self, text: str, role: FontRole, size: float) -> float:
        if not text:
            return 0.0
        return float(self.font(role, size).getlength(text))
