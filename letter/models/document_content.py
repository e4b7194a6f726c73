from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterator, Tuple


class TextAlign(str, Enum):
    """Horizontal alignment of a section's lines."""
    START = "start"
    CENTER = "center"
    END = "end"


class FooterMode(str, Enum):
    """Where the closing/signer/date block sits."""
    FLOW = "flow"                    # directly after the body
    PINNED_BOTTOM = "pinned-bottom"  # pushed to the page's bottom inset


class SectionId(str, Enum):
    HEADER = "header"
    SUBJECT = "subject"
    SALUTATION = "salutation"
    BODY = "body"
    CLOSING = "closing"
    SIGNER = "signer"
    DATE = "date"


# Render order; the last three form the footer block.
SECTION_ORDER: Tuple[SectionId, ...] = tuple(SectionId)
FOOTER_SECTIONS: Tuple[SectionId, ...] = (SectionId.CLOSING, SectionId.SIGNER, SectionId.DATE)
# Sections dropped entirely (including spacing) while their text is empty.
OPTIONAL_SECTIONS: Tuple[SectionId, ...] = (SectionId.HEADER, SectionId.CLOSING, SectionId.SIGNER)


@dataclass(frozen=True)
class DocumentSection:
    text: str = ""
    align: TextAlign = TextAlign.START

    @property
    def is_empty(self) -> bool:
        return not self.text

    def with_text(self, text: str) -> "DocumentSection":
        return replace(self, text=text)

    def with_align(self, align: TextAlign | str) -> "DocumentSection":
        return replace(self, align=TextAlign(align))


@dataclass(frozen=True)
class DocumentContent:
    """Immutable snapshot of all letter sections; replaced whole on every edit."""
    header: DocumentSection = DocumentSection(align=TextAlign.CENTER)
    subject: DocumentSection = DocumentSection(align=TextAlign.CENTER)
    salutation: DocumentSection = DocumentSection()
    body: DocumentSection = DocumentSection()
    closing: DocumentSection = DocumentSection(align=TextAlign.END)
    signer: DocumentSection = DocumentSection(align=TextAlign.END)
    date: DocumentSection = DocumentSection(align=TextAlign.END)

    def section(self, sid: SectionId | str) -> DocumentSection:
        return getattr(self, SectionId(sid).value)

    def with_section(self, sid: SectionId | str, section: DocumentSection) -> "DocumentContent":
        return replace(self, **{SectionId(sid).value: section})

    def sections(self) -> Iterator[Tuple[SectionId, DocumentSection]]:
        for sid in SECTION_ORDER:
            yield sid, self.section(sid)
