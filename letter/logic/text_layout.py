# letter/logic/text_layout.py
"""
Canonical page layout.

The whole letter is flowed once at canonical page size into an immutable
``PageLayout``. Preview and export both draw that same layout, only multiplied
by their factor, so line breaks, section spacing and the pinned-bottom footer
are identical at every zoom level.
"""
from __future__ import annotations

import logging
import re
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from ..models.document_content import (
    FOOTER_SECTIONS,
    OPTIONAL_SECTIONS,
    DocumentContent,
    FooterMode,
    SectionId,
    TextAlign,
)
from ..models.page import CanonicalPage
from .fonts import FontBook, FontRole

logger = logging.getLogger(__name__)

TEXT_COLOR = "#0f172a"
MUTED_COLOR = "#475569"
RULE_COLOR = "#1e293b"
UNDERLINE_COLOR = "#94a3b8"
PLACEHOLDER_COLOR = "#cbd5e1"


@dataclass(frozen=True)
class TextStyle:
    role: FontRole
    size: float
    line_height: float
    color: str = TEXT_COLOR
    underline: bool = False


@dataclass(frozen=True)
class SectionSpacing:
    after: float
    rule_gap: float = 0.0        # space between text and a bottom rule
    rule_thickness: float = 0.0


SECTION_STYLES = {
    SectionId.HEADER: TextStyle(FontRole.SERIF_BOLD, 24, 30),
    SectionId.SUBJECT: TextStyle(FontRole.SERIF_BOLD, 20, 28, underline=True),
    SectionId.SALUTATION: TextStyle(FontRole.SERIF, 18, 28),
    SectionId.BODY: TextStyle(FontRole.SERIF, 18, 29.25),
    SectionId.CLOSING: TextStyle(FontRole.SERIF, 18, 28),
    SectionId.SIGNER: TextStyle(FontRole.SERIF_BOLD, 18, 28),
    SectionId.DATE: TextStyle(FontRole.SANS, 18, 28, color=MUTED_COLOR),
}

SECTION_SPACING = {
    SectionId.HEADER: SectionSpacing(after=32, rule_gap=16, rule_thickness=2),
    SectionId.SUBJECT: SectionSpacing(after=24),
    SectionId.SALUTATION: SectionSpacing(after=24),
    SectionId.BODY: SectionSpacing(after=32),
    SectionId.CLOSING: SectionSpacing(after=32),
    SectionId.SIGNER: SectionSpacing(after=8),
    SectionId.DATE: SectionSpacing(after=48),
}

Measure = Callable[[str, TextStyle], float]


@dataclass(frozen=True)
class LaidOutLine:
    text: str
    x: float
    top: float
    width: float


@dataclass(frozen=True)
class LaidOutBlock:
    section: SectionId
    style: TextStyle
    top: float
    bottom: float                 # bottom of the text, spacing excluded
    lines: Tuple[LaidOutLine, ...]
    placeholder: bool = False     # empty body: one reserved line


@dataclass(frozen=True)
class Rule:
    x0: float
    y0: float
    x1: float
    y1: float
    color: str


@dataclass(frozen=True)
class PageLayout:
    page: CanonicalPage
    footer_mode: FooterMode
    blocks: Tuple[LaidOutBlock, ...]
    rules: Tuple[Rule, ...]
    footer_top: float
    footer_bottom: float          # including the date's trailing space
    spacer: float                 # elastic gap above the footer (pinned-bottom)
    overflow: bool

    def block(self, sid: SectionId) -> Optional[LaidOutBlock]:
        for b in self.blocks:
            if b.section is sid:
                return b
        return None


# ---------------------------------------------------------------- wrapping
_CJK = "\u2e80-\u9fff\uf900-\ufaff\uff00-\uffef\u3000-\u303f"
_TOKEN = re.compile(rf"[{_CJK}]|\s+|[^\s{_CJK}]+")


def _wrap_paragraph(para: str, max_width: float, measure: Callable[[str], float]) -> List[str]:
    lines: List[str] = []
    current = ""
    for tok in _TOKEN.findall(para):
        if tok.isspace():
            # whitespace survives at the paragraph start, not at wrapped line starts
            if current or not lines:
                current += tok
            continue
        candidate = current + tok
        if measure(candidate.rstrip()) <= max_width:
            current = candidate
            continue
        if current.strip():
            lines.append(current.rstrip())
        current = ""
        if measure(tok) <= max_width:
            current = tok
            continue
        for ch in tok:
            if current and measure(current + ch) > max_width:
                lines.append(current)
                current = ch
            else:
                current += ch
    lines.append(current.rstrip())
    return lines


def wrap_text(text: str, max_width: float, measure: Callable[[str], float]) -> List[str]:
    """
    Pre-wrap semantics: explicit line breaks are kept, long lines break at
    whitespace, CJK text breaks between characters, and words wider than the
    line break anywhere.
    """
    if not text:
        return []
    paragraphs = text.split("\n")
    if text.endswith("\n"):
        paragraphs.pop()
    out: List[str] = []
    for para in paragraphs:
        out.extend(_wrap_paragraph(para, max_width, measure) if para else [""])
    return out


# ---------------------------------------------------------------- layout
def _align_x(align: TextAlign, page: CanonicalPage, width: float) -> float:
    if align is TextAlign.CENTER:
        return page.padding + (page.content_width - width) / 2.0
    if align is TextAlign.END:
        return page.padding + page.content_width - width
    return page.padding


def _lay_out_section(
    sid: SectionId, text: str, align: TextAlign, top: float,
    page: CanonicalPage, measure: Measure,
) -> LaidOutBlock:
    style = SECTION_STYLES[sid]
    wrapped = wrap_text(text, page.content_width, lambda s: measure(s, style))
    placeholder = sid is SectionId.BODY and not wrapped
    if placeholder:
        wrapped = [""]
    lines = []
    y = top
    for line in wrapped:
        w = measure(line, style) if line else 0.0
        lines.append(LaidOutLine(text=line, x=_align_x(align, page, w), top=y, width=w))
        y += style.line_height
    return LaidOutBlock(section=sid, style=style, top=top, bottom=y, lines=tuple(lines), placeholder=placeholder)


def lay_out_page(
    content: DocumentContent,
    footer_mode: FooterMode,
    page: CanonicalPage,
    measure: Measure,
) -> PageLayout:
    """Flow ``content`` onto the fixed canonical page."""
    blocks: List[LaidOutBlock] = []
    rules: List[Rule] = []
    y = page.padding

    for sid, section in content.sections():
        if sid in FOOTER_SECTIONS or (sid in OPTIONAL_SECTIONS and section.is_empty):
            continue
        block = _lay_out_section(sid, section.text, section.align, y, page, measure)
        blocks.append(block)
        spacing = SECTION_SPACING[sid]
        y = block.bottom
        if spacing.rule_thickness:
            y += spacing.rule_gap
            rules.append(Rule(page.padding, y, page.width - page.padding, y + spacing.rule_thickness, RULE_COLOR))
            y += spacing.rule_thickness
        y += spacing.after

    # Footer block height does not depend on where it starts.
    footer: List[Tuple[SectionId, float]] = []
    footer_height = 0.0
    for sid in FOOTER_SECTIONS:
        section = content.section(sid)
        if sid in OPTIONAL_SECTIONS and section.is_empty:
            continue
        sized = _lay_out_section(sid, section.text, section.align, 0.0, page, measure)
        h = sized.bottom + SECTION_SPACING[sid].after
        footer.append((sid, h))
        footer_height += h

    spacer = 0.0
    if footer_mode is FooterMode.PINNED_BOTTOM:
        # fixed canonical height is what gives the spacer room to grow
        spacer = max(0.0, page.content_bottom - (y + footer_height))
    footer_top = y + spacer

    y = footer_top
    for sid, h in footer:
        section = content.section(sid)
        blocks.append(_lay_out_section(sid, section.text, section.align, y, page, measure))
        y += h
    footer_bottom = y

    return PageLayout(
        page=page,
        footer_mode=footer_mode,
        blocks=tuple(blocks),
        rules=tuple(rules),
        footer_top=footer_top,
        footer_bottom=footer_bottom,
        spacer=spacer,
        overflow=footer_bottom > page.content_bottom + 1e-6,
    )


class LayoutEngine:
    """Measures with a FontBook and caches layouts by (content, mode, page)."""

    def __init__(self, fonts: FontBook, *, cache_size: int = 16) -> None:
        self._fonts = fonts
        self._cache: "OrderedDict[tuple, PageLayout]" = OrderedDict()
        self._cache_size = cache_size

    @property
    def fonts(self) -> FontBook:
        return self._fonts

    def measure(self, text: str, style: TextStyle) -> float:
        return self._fonts.measure(text, style.role, style.size)

    def lay_out(self, content: DocumentContent, footer_mode: FooterMode, page: CanonicalPage) -> PageLayout:
        key = (content, footer_mode, page)
        cached = self._cache.get(key)
        if cached is not None:
            self._cache.move_to_end(key)
            return cached
        layout = lay_out_page(content, footer_mode, page, self.measure)
        if layout.overflow:
            logger.info("Letter content overflows the page by %.1f units",
                        layout.footer_bottom - page.content_bottom)
        self._cache[key] = layout
        if len(self._cache) > self._cache_size:
            self._cache.popitem(last=False)
        return layout
