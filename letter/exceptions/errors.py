"""Letter feature exceptions."""
from __future__ import annotations


class LetterError(Exception):
    """Base exception for the letter feature."""


class ImageDecodeError(LetterError):
    """Raised when an uploaded signature image cannot be decoded."""


class RenderTargetMissingError(LetterError):
    """Raised when export is invoked without a mounted page to render."""


class ExportError(LetterError):
    """Raised when rasterizing, encoding or assembling the PDF fails."""
