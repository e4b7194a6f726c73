# letter/logic/letter_service.py
"""
Facade used by the GUI (and by tests) for everything a composing session
does: default content, edits, signature upload/removal, stepped controls,
viewport scale, preview rendering and PDF export.

All state lives in the ``LetterSession`` cells; the service only wires the
collaborators built from configuration.
"""
from __future__ import annotations

import logging
from datetime import date
from pathlib import Path
from typing import Callable, Optional, Union

from PIL import Image

from core.config.config_service import ConfigService
from core.helpers.date_time_helper import format_letter_date

from ..exceptions.errors import ImageDecodeError
from ..models.document_content import DocumentContent, DocumentSection, FooterMode, SectionId, TextAlign
from ..models.gesture import HandleSpec
from ..models.overlay_geometry import OverlayGeometry, OverlayLimits
from ..models.page import CanonicalPage
from .fonts import FontBook
from .image_loader import ImageSource, load_overlay_image
from .page_renderer import PageRenderer
from .pdf_exporter import OffscreenHost, PdfExporter, RenderSnapshot, page_size, sanitize_filename
from .session_state import LetterSession
from .text_layout import LayoutEngine, PageLayout
from .viewport import preview_scale_for_viewport

logger = logging.getLogger(__name__)

Translate = Callable[[str], str]


class LetterService:
    def __init__(
        self,
        config: ConfigService,
        *,
        translate: Optional[Translate] = None,
        language: Optional[str] = None,
        audit=None,
        notify_failure: Optional[Callable[[str], None]] = None,
        fonts: Optional[FontBook] = None,
        host: Optional[OffscreenHost] = None,
    ) -> None:
        self._config = config
        self._t: Translate = translate or (lambda label: label)
        self._language = language or config.general.language
        self._audit = audit

        # canonical aspect follows the export format so the raster fills the page undistorted
        self.page = CanonicalPage.from_config(config.page).fitted_to(page_size(config.export.page_format))
        self.limits = OverlayLimits.from_config(config.overlay)
        self.handles = HandleSpec.from_config(config.overlay)
        self.fonts = fonts or FontBook.from_config(config.fonts)
        self.layout_engine = LayoutEngine(self.fonts)
        self.renderer = PageRenderer(self.fonts, placeholder_text=self._t("letter.body.placeholder"))
        self.exporter = PdfExporter(
            page=self.page,
            layout_engine=self.layout_engine,
            renderer=self.renderer,
            host=host,
            supersample=config.export.supersample,
            jpeg_quality=config.export.jpeg_quality,
            page_format=config.export.page_format,
            output_dir=config.export.output_dir,
            notify_failure=notify_failure,
            failure_message=self._t("letter.export.failed"),
            audit=audit,
        )

    # ------------------------------------------------------------------ session
    def default_content(self, today: Optional[date] = None) -> DocumentContent:
        """Sample letter in the active language, dated ``today``."""
        t = self._t
        day = today or date.today()
        return DocumentContent(
            header=DocumentSection(t("letter.default.header"), TextAlign.CENTER),
            subject=DocumentSection(t("letter.default.subject"), TextAlign.CENTER),
            salutation=DocumentSection(t("letter.default.salutation")),
            body=DocumentSection(t("letter.default.body")),
            closing=DocumentSection(t("letter.default.closing"), TextAlign.END),
            signer=DocumentSection(t("letter.default.signer"), TextAlign.END),
            date=DocumentSection(format_letter_date(day, self._language), TextAlign.END),
        )

    def new_session(self, content: Optional[DocumentContent] = None, *, viewport_width: Optional[float] = None) -> LetterSession:
        ov = self._config.overlay
        scale = preview_scale_for_viewport(viewport_width) if viewport_width else 1.0
        return LetterSession(
            content=content if content is not None else self.default_content(),
            overlay=OverlayGeometry(x=ov.default_x, y=ov.default_y, width=self.limits.default_width),
            display_scale=scale,
        )

    # ------------------------------------------------------------------ text
    def edit_section(
        self,
        session: LetterSession,
        sid: SectionId | str,
        *,
        text: Optional[str] = None,
        align: Optional[TextAlign | str] = None,
    ) -> DocumentContent:
        def apply(content: DocumentContent) -> DocumentContent:
            section = content.section(sid)
            if text is not None:
                section = section.with_text(text)
            if align is not None:
                section = section.with_align(align)
            return content.with_section(sid, section)

        return session.content.update(apply)

    def set_footer_mode(self, session: LetterSession, mode: FooterMode | str) -> None:
        session.footer_mode.set(FooterMode(mode))

    def set_viewport_width(self, session: LetterSession, width: float) -> float:
        scale = preview_scale_for_viewport(width)
        if scale != session.display_scale.get():
            session.display_scale.set(scale)
        return scale

    # ------------------------------------------------------------------ signature
    def upload_signature(self, session: LetterSession, source: ImageSource) -> OverlayGeometry:
        """Decode ``source`` and show it; raises ImageDecodeError and keeps state on failure."""
        try:
            image = load_overlay_image(source)
        except ImageDecodeError as ex:
            self._log("SignatureRejected", level="WARNING", message=str(ex))
            raise
        geom = session.overlay.update(lambda g: g.with_image(image, self.limits))
        self._log("SignatureUploaded", reference_id=image.name or None,
                  message=f"{image.intrinsic_size[0]}x{image.intrinsic_size[1]}")
        return geom

    def remove_signature(self, session: LetterSession) -> OverlayGeometry:
        geom = session.overlay.update(lambda g: g.cleared())
        self._log("SignatureRemoved")
        return geom

    def step_size(self, session: LetterSession, steps: int) -> OverlayGeometry:
        if not session.overlay.get().active:
            return session.overlay.get()
        return session.overlay.update(lambda g: g.resized_by_step(steps, self.limits))

    def step_rotation(self, session: LetterSession, steps: int) -> OverlayGeometry:
        if not session.overlay.get().active:
            return session.overlay.get()
        return session.overlay.update(lambda g: g.rotated_by_step(steps, self.limits))

    # ------------------------------------------------------------------ render
    def snapshot(self, session: LetterSession) -> RenderSnapshot:
        return RenderSnapshot(
            content=session.content.get(),
            footer_mode=session.footer_mode.get(),
            overlay=session.overlay.get(),
        )

    def layout(self, session: LetterSession) -> PageLayout:
        return self.layout_engine.lay_out(session.content.get(), session.footer_mode.get(), self.page)

    def render_preview_text(self, session: LetterSession) -> Image.Image:
        """Text layer at the current display scale, placeholder visible."""
        return self.renderer.render_text(self.layout(session), session.display_scale.get(), show_placeholders=True)

    # ------------------------------------------------------------------ export
    def suggest_filename(self, session: LetterSession) -> str:
        subject = session.content.get().subject.text.replace("\n", " ")
        return sanitize_filename(subject, default=self._t("letter.export.default_filename"))

    def export_pdf(
        self,
        target: Union[LetterSession, Callable[[], Optional[RenderSnapshot]], None],
        filename: Optional[str] = None,
        *,
        return_bytes: bool = False,
    ) -> Optional[Union[bytes, Path]]:
        """
        Export the page held by ``target``. A callable target is resolved at
        call time and may return None when no page is mounted.
        """
        if isinstance(target, LetterSession):
            name = filename or self.suggest_filename(target)
            source = self.snapshot(target)
        else:
            name = filename or sanitize_filename("", default=self._t("letter.export.default_filename"))
            source = target
        return self.exporter.export_pdf(source, name, return_bytes=return_bytes)

    # ------------------------------------------------------------------ util
    def _log(self, event: str, *, level: str = "INFO", reference_id: Optional[str] = None,
             message: Optional[str] = None) -> None:
        if self._audit is not None:
            self._audit.log("Letter", event, level=level, reference_id=reference_id, message=message)
        else:
            logger.log(logging.getLevelName(level), "%s %s", event, message or "")
