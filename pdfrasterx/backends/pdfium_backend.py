"""pypdf/pypdfium2 backend implementation.

pypdf inspects the document structure and resolves encryption, pypdfium2
turns pages into pixels.
"""

from __future__ import annotations

import io
from dataclasses import dataclass, field

import pypdfium2 as pdfium
from PIL import Image
from pypdf import PdfReader
from pypdf.errors import PdfReadError

from ..core.utils import get_logger
from ..exceptions import (
    AuthenticationRejectedError,
    AuthenticationRequiredError,
    DecodeError,
    PageRenderError,
)
from .base import BackendDocument, DocumentBackend

LOGGER = get_logger("pdfrasterx.backends.pdfium")

WHITE = (255, 255, 255, 255)


@dataclass
class PdfiumDocument(BackendDocument):
    document: pdfium.PdfDocument = field(repr=False)

    def render_page(self, index: int, scale: float) -> Image.Image:
        page = self.document[index]
        try:
            bitmap = page.render(scale=scale, fill_color=WHITE)
            try:
                surface = bitmap.to_pil()
                # to_pil() may share the bitmap buffer; copy before the bitmap is closed.
                return surface.convert("RGB") if surface.mode != "RGB" else surface.copy()
            finally:
                bitmap.close()
        except pdfium.PdfiumError as exc:
            raise PageRenderError(index + 1, f"pdfium could not render page {index + 1}: {exc}") from exc
        finally:
            page.close()

    def close(self) -> None:
        self.document.close()


class PdfiumBackend(DocumentBackend):
    """Backend implementation that uses `pypdf` and `pypdfium2` under the hood."""

    def open(self, data: bytes, passphrase: str | None = None) -> PdfiumDocument:
        try:
            reader = PdfReader(io.BytesIO(data))
        except PdfReadError as exc:
            raise DecodeError(f"Corrupted or invalid PDF data. Error: {exc}") from exc
        except Exception as exc:  # pragma: no cover - pypdf exceptions vary
            raise DecodeError(f"Unexpected error reading PDF. Error: {exc}") from exc

        if reader.is_encrypted:
            try:
                status = reader.decrypt(passphrase or "")
            except Exception as exc:  # pragma: no cover - unsupported encryption schemes
                raise DecodeError(f"Unable to decrypt PDF. Error: {exc}") from exc
            if status == 0:
                if passphrase:
                    raise AuthenticationRejectedError()
                raise AuthenticationRequiredError()

        try:
            num_pages = len(reader.pages)
        except Exception as exc:
            raise DecodeError(f"Unable to read the page tree. Error: {exc}") from exc
        if num_pages == 0:
            raise DecodeError("PDF has no pages")

        try:
            document = pdfium.PdfDocument(data, password=passphrase or None)
        except pdfium.PdfiumError as exc:
            raise DecodeError(f"pdfium could not open the PDF. Error: {exc}") from exc

        LOGGER.debug(
            "Opened PDF with %s pages (%s bytes, password %s)",
            num_pages,
            len(data),
            "<provided>" if passphrase else "<none>",
        )
        return PdfiumDocument(
            num_pages=num_pages,
            file_size=len(data),
            document=document,
            encrypted=reader.is_encrypted,
        )
