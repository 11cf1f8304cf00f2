"""Single vertical composite image export."""

from __future__ import annotations

import io

from PIL import Image

from ..config import DEFAULT_STITCH_QUALITY, jpeg_quality
from ..core.utils import get_logger
from ..exceptions import ExportError
from ..types import ExportKind, ExportResult, JPEG_MEDIA_TYPE, RasterPage
from .interfaces import BaseExporter
from .pipeline import register_exporter

LOGGER = get_logger("pdfrasterx.exporters.stitch")

BACKGROUND = (255, 255, 255)

# Largest width or height a baseline JPEG can carry.
MAX_JPEG_DIMENSION = 65500


def canvas_size(pages: list[RasterPage]) -> tuple[int, int]:
    """Return ``(max width, summed height)`` of ``pages``."""

    return max(page.pixel_width for page in pages), sum(page.pixel_height for page in pages)


@register_exporter(ExportKind.STITCH)
class StitchExporter(BaseExporter):
    name = ExportKind.STITCH.value
    suffix = "_Long.jpg"
    media_type = JPEG_MEDIA_TYPE

    def run(self) -> ExportResult:
        pages = self.context.sorted_pages()
        width, height = canvas_size(pages)
        if width > MAX_JPEG_DIMENSION or height > MAX_JPEG_DIMENSION:
            raise ExportError(
                f"Stitched image would be {width}x{height} px, JPEG allows at most "
                f"{MAX_JPEG_DIMENSION} px per side. Select fewer pages or lower the render scale."
            )
        quality = self.context.config.get("stitch_quality") or DEFAULT_STITCH_QUALITY

        canvas = Image.new("RGB", (width, height), BACKGROUND)
        try:
            current_y = 0
            for page in pages:
                with Image.open(io.BytesIO(page.encoded_bytes)) as image:
                    image.load()
                    x_offset = (width - page.pixel_width) // 2
                    canvas.paste(image.convert("RGB"), (x_offset, current_y))
                current_y += page.pixel_height

            buffer = io.BytesIO()
            canvas.save(buffer, format="JPEG", quality=jpeg_quality(quality))
        finally:
            canvas.close()

        LOGGER.debug("Stitched %s pages into a %sx%s image", len(pages), width, height)
        return ExportResult(buffer.getvalue(), self.filename(), self.media_type)
