"""
Custom exceptions for pdfrasterx.

Authentication and decode errors stop a load, page render errors are absorbed
by the rasterizer, and export errors abort a single export call.
"""

from __future__ import annotations


class PdfRasterError(Exception):
    """Base exception for all pdfrasterx errors."""

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    @property
    def default_message(self) -> str:
        return "An unknown pdfrasterx error occurred."


class AuthenticationRequiredError(PdfRasterError):
    """Raised when the source is protected and no usable passphrase was supplied."""

    @property
    def default_message(self) -> str:
        return "PDF is encrypted. Supply a password to open it."


class AuthenticationRejectedError(AuthenticationRequiredError):
    """Raised when the supplied passphrase does not open the source."""

    @property
    def default_message(self) -> str:
        return "Incorrect password for encrypted PDF."


class DecodeError(PdfRasterError):
    """Raised when the source bytes are not an openable PDF document."""

    @property
    def default_message(self) -> str:
        return "Invalid or corrupted PDF file."


class PageRenderError(PdfRasterError):
    """Raised when a single page fails to render."""

    def __init__(self, page_id: int, message: str = "") -> None:
        self.page_id = page_id
        super().__init__(message or f"Failed to render page {page_id}.")


class ExportError(PdfRasterError):
    """Raised when an export strategy fails."""

    @property
    def default_message(self) -> str:
        return "Export failed."


class ExportInProgressError(ExportError):
    """Raised when an export is requested while another one is running."""

    @property
    def default_message(self) -> str:
        return "Another export is already in progress."


class ConfigurationError(PdfRasterError, ValueError):
    """Raised when render or export settings are outside their domain."""

    @property
    def default_message(self) -> str:
        return "Invalid configuration."


class SelectionError(PdfRasterError):
    """Raised when a page id outside the source is selected."""

    @property
    def default_message(self) -> str:
        return "Requested page number is out of bounds."


__all__ = [
    "PdfRasterError",
    "AuthenticationRequiredError",
    "AuthenticationRejectedError",
    "DecodeError",
    "PageRenderError",
    "ExportError",
    "ExportInProgressError",
    "ConfigurationError",
    "SelectionError",
]
