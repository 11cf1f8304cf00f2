"""Reassemble selected rasters into a PDF, optionally encrypted."""

from __future__ import annotations

import io

import img2pdf
from pypdf import PdfReader, PdfWriter
from pypdf.constants import UserAccessPermissions

from ..core.utils import get_logger
from ..types import ExportKind, ExportResult, RasterPage
from .interfaces import BaseExporter
from .pipeline import register_exporter

LOGGER = get_logger("pdfrasterx.exporters.document")

# One pixel maps to one PDF point.
POINTS_PER_PIXEL_DPI = (72, 72)

# Print, copy and modify. all() keeps the reserved bits set to 1.
OUTPUT_PERMISSIONS = UserAccessPermissions.all() & ~(
    UserAccessPermissions.ADD_OR_MODIFY
    | UserAccessPermissions.FILL_FORM_FIELDS
    | UserAccessPermissions.EXTRACT_TEXT_AND_GRAPHICS
    | UserAccessPermissions.ASSEMBLE_DOC
)


def page_orientation(page: RasterPage) -> str:
    return "landscape" if page.is_landscape else "portrait"


def _copy_reader_contents(reader: PdfReader) -> PdfWriter:
    writer = PdfWriter()
    writer.clone_reader_document_root(reader)
    return writer


@register_exporter(ExportKind.DOCUMENT)
class DocumentReassembler(BaseExporter):
    name = ExportKind.DOCUMENT.value
    suffix = "_Modified.pdf"
    media_type = "application/pdf"

    def run(self) -> ExportResult:
        pages = self.context.sorted_pages()
        for page in pages:
            LOGGER.debug(
                "Page %s: %sx%s pt, %s",
                page.id,
                page.pixel_width,
                page.pixel_height,
                page_orientation(page),
            )

        # img2pdf embeds JPEG streams as-is, without decoding them.
        layout = img2pdf.get_fixed_dpi_layout_fun(POINTS_PER_PIXEL_DPI)
        pdf_bytes = img2pdf.convert([page.encoded_bytes for page in pages], layout_fun=layout)

        writer = _copy_reader_contents(PdfReader(io.BytesIO(pdf_bytes)))
        writer.add_metadata({"/Title": self.context.base_name, "/Producer": "pdfrasterx"})

        password = self.context.config.get("output_password")
        if password:
            writer.encrypt(
                user_password=password,
                owner_password=password,
                permissions_flag=OUTPUT_PERMISSIONS,
            )

        buffer = io.BytesIO()
        writer.write(buffer)
        LOGGER.debug(
            "Reassembled %s pages into %s (password %s)",
            len(pages),
            self.filename(),
            "<provided>" if password else "<none>",
        )
        return ExportResult(buffer.getvalue(), self.filename(), self.media_type)
