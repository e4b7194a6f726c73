from __future__ import annotations

import io
from datetime import date

import pytest
from pypdf import PdfReader

from letter.exceptions.errors import ImageDecodeError
from letter.logic.letter_service import LetterService
from letter.models.document_content import FooterMode, SectionId, TextAlign
from letter.logic.placement_controller import PlacementController
from letter.logic.viewport import DisplayTransform
from letter.models.gesture import GestureMode

from .conftest import FakeBinder, page_rect

LABELS = {
    "letter.default.header": "ACME Ltd.",
    "letter.default.subject": "Subject: budget",
    "letter.default.salutation": "Dear team,",
    "letter.default.body": "Body text.",
    "letter.default.closing": "Regards,",
    "letter.default.signer": "Jane Doe",
    "letter.export.default_filename": "document",
}


def test_default_content_is_localized(config):
    svc = LetterService(config, translate=lambda k: LABELS.get(k, k), language="en")
    doc = svc.default_content(date(2026, 10, 19))
    assert doc.subject.text == "Subject: budget"
    assert doc.subject.align is TextAlign.CENTER
    assert doc.signer.align is TextAlign.END
    assert doc.date.text == "October 19, 2026"

    zh = LetterService(config, language="zh-TW").default_content(date(2026, 10, 19))
    assert zh.date.text == "2026年10月19日"


def test_new_session_uses_configured_overlay_defaults(service):
    session = service.new_session(viewport_width=800)
    g = session.overlay.get()
    assert (g.x, g.y, g.width, g.rotation) == (400, 700, 150, 0)
    assert not g.active
    assert session.display_scale.get() == 0.6


def test_upload_resets_size_and_rotation_but_keeps_position(service, png_bytes, audit):
    session = service.new_session()
    session.overlay.update(lambda g: g.moved_to(120, 90).resized_to(300).rotated_to(45))
    g = service.upload_signature(session, png_bytes)
    assert (g.x, g.y, g.width, g.rotation) == (120, 90, 150, 0)
    assert g.active
    assert ("Letter", "SignatureUploaded", "INFO") in audit.events


def test_failed_upload_leaves_state_unchanged(service, png_bytes):
    session = service.new_session()
    service.upload_signature(session, png_bytes)
    before = session.overlay.get()
    with pytest.raises(ImageDecodeError):
        service.upload_signature(session, b"not an image")
    assert session.overlay.get() is before


def test_remove_and_stepped_controls(service, png_bytes):
    session = service.new_session()
    assert service.step_size(session, 1).width == 150  # nothing to resize yet

    service.upload_signature(session, png_bytes)
    assert service.step_size(session, 1).width == 160
    assert service.step_size(session, -20).width == 50
    assert service.step_rotation(session, -1).rotation == -90

    g = service.remove_signature(session)
    assert not g.active
    assert service.step_rotation(session, 1).rotation == -90


def test_edit_section_replaces_whole_content(service):
    session = service.new_session()
    before = session.content.get()
    after = service.edit_section(session, SectionId.BODY, text="New body", align="center")
    assert after is not before
    assert after.body.text == "New body"
    assert after.body.align is TextAlign.CENTER
    assert before.body.text != "New body"
    assert after.subject == before.subject


def test_footer_mode_and_viewport(service):
    session = service.new_session()
    service.set_footer_mode(session, "pinned-bottom")
    assert session.footer_mode.get() is FooterMode.PINNED_BOTTOM
    assert service.set_viewport_width(session, 1280) == 0.7
    assert session.display_scale.get() == 0.7


def test_suggested_filename_comes_from_subject(config):
    svc = LetterService(config, translate=lambda k: LABELS.get(k, k))
    session = svc.new_session()
    assert svc.suggest_filename(session) == "Subject_ budget.pdf"
    svc.edit_section(session, SectionId.SUBJECT, text="")
    assert svc.suggest_filename(session) == "document.pdf"


def test_preview_text_layer_follows_display_scale(service):
    session = service.new_session()
    session.display_scale.set(0.5)
    assert service.render_preview_text(session).size == service.page.pixel_size(0.5)


def test_upload_drag_rotate_export(service, png_bytes):
    """Upload → width 150 / rotation 0; drag 100 px at 0.5 → x + 200; 90° sweep; export one page."""
    session = service.new_session()
    g = service.upload_signature(session, png_bytes)
    assert (g.width, g.rotation) == (150, 0)

    session.display_scale.set(0.5)
    binder = FakeBinder()
    rect = page_rect(0.5)
    ctrl = PlacementController(
        overlay=session.overlay, display_scale=session.display_scale, page=service.page,
        binder=binder, rect_provider=lambda: rect, limits=service.limits, handles=service.handles,
    )
    tr = DisplayTransform.from_rect(rect, 0.5)

    sx, sy = tr.to_screen(*g.center)
    assert ctrl.press(sx, sy) is GestureMode.MOVE
    binder.release(sx + 100, sy)
    assert session.overlay.get().x == pytest.approx(g.x + 200)

    cx, cy = session.overlay.get().center
    ctrl.begin(GestureMode.ROTATE, *tr.to_screen(cx, cy - 60))
    binder.move(*tr.to_screen(cx + 60, cy - 60))
    binder.release(*tr.to_screen(cx + 60, cy))
    assert session.overlay.get().rotation == pytest.approx(90)

    data = service.export_pdf(session, return_bytes=True)
    reader = PdfReader(io.BytesIO(data))
    assert len(reader.pages) == 1
    assert len(reader.pages[0].images) == 1
