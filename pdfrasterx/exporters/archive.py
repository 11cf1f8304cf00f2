"""Page-per-file ZIP archive export."""

from __future__ import annotations

import io
from zipfile import ZIP_DEFLATED, ZipFile

from ..core.utils import get_logger
from ..types import ExportKind, ExportResult, RasterPage
from .interfaces import BaseExporter
from .pipeline import register_exporter

LOGGER = get_logger("pdfrasterx.exporters.archive")


def entry_name(page: RasterPage, folder: str) -> str:
    """Entries live in a folder named after the source, e.g. ``report/Page_3.jpg``."""

    return f"{folder}/Page_{page.id}.{page.extension}"


@register_exporter(ExportKind.ARCHIVE)
class ArchiveExporter(BaseExporter):
    name = ExportKind.ARCHIVE.value
    suffix = "_images.zip"
    media_type = "application/zip"

    def run(self) -> ExportResult:
        pages = self.context.sorted_pages()
        buffer = io.BytesIO()
        with ZipFile(buffer, "w", compression=ZIP_DEFLATED) as archive:
            for page in pages:
                archive.writestr(entry_name(page, self.context.base_name), page.encoded_bytes)
        LOGGER.debug("Packed %s pages into %s", len(pages), self.filename())
        return ExportResult(buffer.getvalue(), self.filename(), self.media_type)
