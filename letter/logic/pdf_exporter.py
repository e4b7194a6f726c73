# letter/logic/pdf_exporter.py
"""
Scale-invariant PDF export.

The live preview may show the page at any zoom; export never samples it.
Instead the current snapshot is copied onto an off-screen surface of exact
canonical size (no display transform), laid out there, rasterized at a fixed
supersampling factor and embedded as one JPEG that fills a single portrait
page. The surface is detached from its host on every exit path.
"""
from __future__ import annotations

import io
import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, List, Optional, Union

from PIL import Image
from pypdf import PdfReader
from reportlab.lib.pagesizes import A4, LETTER, portrait
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from ..exceptions.errors import ExportError, RenderTargetMissingError
from ..models.document_content import DocumentContent, FooterMode
from ..models.overlay_geometry import OverlayGeometry
from ..models.page import CanonicalPage
from .page_renderer import PageRenderer
from .text_layout import LayoutEngine, PageLayout

logger = logging.getLogger(__name__)

PAGE_FORMATS = {
    "A4": portrait(A4),
    "LETTER": portrait(LETTER),
}

# Canonical page and physical page may differ in aspect by at most this much.
ASPECT_TOLERANCE = 1e-3

_UNSAFE_FILENAME = re.compile(r'[\\/:*?"<>|\x00-\x1f]+')


@dataclass(frozen=True)
class RenderSnapshot:
    """Everything the page shows, frozen at the moment export is triggered."""
    content: DocumentContent
    footer_mode: FooterMode
    overlay: OverlayGeometry


class OffscreenSurface:
    """Canonical-size render target used by exactly one export call."""

    def __init__(self, page: CanonicalPage) -> None:
        # height is the fixed canonical height, never the content height,
        # otherwise pinned-bottom has no room to push the footer down
        self.page = page
        self.snapshot: Optional[RenderSnapshot] = None
        self.layout: Optional[PageLayout] = None

    def load(self, snapshot: RenderSnapshot) -> None:
        # snapshot values are immutable; sharing them is a full copy
        self.snapshot = snapshot

    def lay_out(self, engine: LayoutEngine) -> PageLayout:
        if self.snapshot is None:
            raise RenderTargetMissingError("Surface has no content")
        self.layout = engine.lay_out(self.snapshot.content, self.snapshot.footer_mode, self.page)
        return self.layout

    def wait_for_resources(self) -> None:
        """Block until the overlay bitmap is fully decoded."""
        overlay = self.snapshot.overlay if self.snapshot else None
        if overlay is not None and overlay.image is not None:
            overlay.image.image.load()


class OffscreenHost:
    """Keeps track of attached off-screen surfaces."""

    def __init__(self) -> None:
        self._attached: List[OffscreenSurface] = []

    @property
    def attached(self) -> List[OffscreenSurface]:
        return list(self._attached)

    def attach(self, surface: OffscreenSurface) -> None:
        self._attached.append(surface)

    def detach(self, surface: OffscreenSurface) -> None:
        if surface in self._attached:
            self._attached.remove(surface)


def sanitize_filename(name: str, default: str = "document") -> str:
    stem = _UNSAFE_FILENAME.sub("_", (name or "").strip()).strip(" .")
    if stem.lower().endswith(".pdf"):
        stem = stem[:-4].rstrip(" .")
    return f"{stem or default}.pdf"


def page_size(page_format: str) -> tuple[float, float]:
    """Portrait page size in points for a configured format name."""
    fmt = str(page_format).upper()
    if fmt not in PAGE_FORMATS:
        raise ValueError(f"Unknown page format {page_format!r}; expected one of {sorted(PAGE_FORMATS)}")
    return PAGE_FORMATS[fmt]


SnapshotSource = Union[RenderSnapshot, Callable[[], Optional[RenderSnapshot]], None]


class PdfExporter:
    """
    Export pipeline. Failures never propagate: they are logged, the surface is
    released, ``notify_failure`` is called once, and ``None`` is returned.
    """

    def __init__(
        self,
        *,
        page: CanonicalPage,
        layout_engine: LayoutEngine,
        renderer: PageRenderer,
        host: Optional[OffscreenHost] = None,
        supersample: float = 2.0,
        jpeg_quality: int = 95,
        page_format: str = "A4",
        output_dir: Path | str = ".",
        notify_failure: Optional[Callable[[str], None]] = None,
        failure_message: str = "PDF export failed, please try again.",
        audit: Optional[Any] = None,
    ) -> None:
        pagesize = page_size(page_format)
        # the raster is stretched onto the page, so both must share one aspect
        if abs(page.aspect - pagesize[1] / pagesize[0]) > ASPECT_TOLERANCE:
            raise ValueError(
                f"Page {page.width:g}x{page.height:g} does not match {page_format} ({pagesize[0]:g}x{pagesize[1]:g} pt)"
            )
        self._page = page
        self._engine = layout_engine
        self._renderer = renderer
        self.host = host or OffscreenHost()
        self._supersample = float(supersample)
        self._quality = int(jpeg_quality)
        self._pagesize = pagesize
        self._output_dir = Path(output_dir)
        self._notify = notify_failure
        self.failure_message = failure_message
        self._audit = audit
        self._busy = False

    @property
    def pagesize(self) -> tuple[float, float]:
        return self._pagesize

    @property
    def busy(self) -> bool:
        return self._busy

    # ------------------------------------------------------------------ API
    def export_pdf(
        self,
        source: SnapshotSource,
        filename: str = "document.pdf",
        *,
        return_bytes: bool = False,
    ) -> Optional[Union[bytes, Path]]:
        """
        Render ``source`` and write ``filename`` into the output directory,
        or return the PDF bytes when ``return_bytes`` is set.
        """
        if self._busy:
            logger.warning("Export requested while another export is running; ignored")
            return None

        snapshot = source() if callable(source) else source
        if snapshot is None:
            self._fail(RenderTargetMissingError("No page to export"), filename)
            return None

        self._busy = True
        surface = OffscreenSurface(self._page)
        try:
            surface.load(snapshot)
            self.host.attach(surface)
            layout = surface.lay_out(self._engine)
            surface.wait_for_resources()
            raster = self._rasterize(layout, snapshot.overlay)
            jpeg = self._encode_jpeg(raster)
            pdf = self._assemble_pdf(jpeg, title=Path(filename).stem)
            self._verify(pdf)
            if return_bytes:
                result: Union[bytes, Path] = pdf
            else:
                result = self._write(pdf, filename)
        except Exception as ex:
            self._fail(ex, filename)
            return None
        finally:
            self.host.detach(surface)
            self._busy = False

        self._log("ExportSucceeded", "INFO", filename, f"{len(pdf)} bytes")
        return result

    # ------------------------------------------------------------------ steps
    def _rasterize(self, layout: PageLayout, overlay: OverlayGeometry) -> Image.Image:
        return self._renderer.render(layout, overlay, self._supersample, show_placeholders=False)

    def _encode_jpeg(self, raster: Image.Image) -> bytes:
        buf = io.BytesIO()
        raster.convert("RGB").save(buf, format="JPEG", quality=self._quality)
        return buf.getvalue()

    def _assemble_pdf(self, jpeg: bytes, *, title: str = "") -> bytes:
        pw, ph = self._pagesize
        buf = io.BytesIO()
        # invariant: no timestamps or random ids, same input gives same bytes
        c = canvas.Canvas(buf, pagesize=(pw, ph), invariant=1)
        if title:
            c.setTitle(title)
        c.drawImage(ImageReader(io.BytesIO(jpeg)), 0, 0, width=pw, height=ph)
        c.showPage()
        c.save()
        return buf.getvalue()

    def _verify(self, pdf: bytes) -> None:
        reader = PdfReader(io.BytesIO(pdf))
        if len(reader.pages) != 1:
            raise ExportError(f"Expected one page, got {len(reader.pages)}")
        box = reader.pages[0].mediabox
        pw, ph = self._pagesize
        if abs(float(box.width) - pw) > 0.5 or abs(float(box.height) - ph) > 0.5:
            raise ExportError(f"Unexpected page size {float(box.width)}x{float(box.height)}")

    def _write(self, pdf: bytes, filename: str) -> Path:
        # bare names land in the output dir; absolute paths (save dialog) are kept
        path = Path(filename)
        if path.is_absolute():
            directory = path.parent
        else:
            directory = self._output_dir / path.parent
            root, resolved = self._output_dir.resolve(), directory.resolve()
            if resolved != root and root not in resolved.parents:
                raise ExportError(f"{filename!r} points outside the output directory")
        directory.mkdir(parents=True, exist_ok=True)
        target = directory / sanitize_filename(path.name)
        tmp = target.with_name(target.name + ".part")
        try:
            tmp.write_bytes(pdf)
            os.replace(tmp, target)
        finally:
            if tmp.exists():
                tmp.unlink()
        return target

    # ------------------------------------------------------------------ errors
    def _fail(self, ex: Exception, filename: str) -> None:
        logger.error("Error generating PDF %s: %s", filename, ex, exc_info=not isinstance(ex, RenderTargetMissingError))
        self._log("ExportFailed", "ERROR", filename, f"{type(ex).__name__}: {ex}")
        if self._notify is not None:
            self._notify(self.failure_message)

    def _log(self, event: str, level: str, filename: str, message: str) -> None:
        if self._audit is not None:
            self._audit.log("Export", event, level=level, reference_id=filename, message=message)
