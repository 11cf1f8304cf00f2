"""Sequential page rasterization.

Pages are rendered one at a time in ascending order. Each page surface is
released before the next page is decoded, so memory stays bounded by a
single page regardless of document length.
"""

from __future__ import annotations

import dataclasses
import io
import threading
from typing import Iterator, Optional

from .config import RenderConfig
from .core.utils import get_logger, progress_percent
from .exceptions import PageRenderError
from .source import SourceDocument
from .types import ProgressCallback, RasterPage

LOGGER = get_logger("pdfrasterx.rasterizer")


@dataclasses.dataclass(frozen=True)
class RasterGeneration:
    """One complete set of pages produced by a single rasterization pass."""

    number: int
    config: RenderConfig
    total_pages: int
    pages: tuple[RasterPage, ...] = ()
    skipped: tuple[int, ...] = ()
    complete: bool = True

    @property
    def ids(self) -> frozenset[int]:
        return frozenset(page.id for page in self.pages)

    def get(self, page_id: int) -> Optional[RasterPage]:
        for page in self.pages:
            if page.id == page_id:
                return page
        return None

    def select(self, page_ids) -> list[RasterPage]:
        """Return pages whose id is in ``page_ids``, ordered by id."""

        wanted = set(page_ids)
        return [page for page in self.pages if page.id in wanted]


def encode_page(surface, page_id: int, config: RenderConfig) -> RasterPage:
    """Encode an RGB surface as JPEG and wrap it in a :class:`RasterPage`."""

    buffer = io.BytesIO()
    surface.save(buffer, format="JPEG", quality=config.jpeg_quality)
    encoded = buffer.getvalue()
    width, height = surface.size
    return RasterPage(
        id=page_id,
        pixel_width=width,
        pixel_height=height,
        encoded_bytes=encoded,
        byte_size=len(encoded),
        scale=config.scale,
        quality=config.quality,
    )


class PageRasterizer:
    """Render every page of an opened source into :class:`RasterPage` values.

    ``render()`` returns a lazy iterator that can be consumed once. Pages
    that fail to render are logged and recorded in :attr:`failures`; the
    pass carries on with the next page.
    """

    def __init__(
        self,
        source: SourceDocument,
        config: RenderConfig | None = None,
        *,
        progress: ProgressCallback | None = None,
        cancel_event: threading.Event | None = None,
    ) -> None:
        self.source = source
        self.config = config or RenderConfig()
        self.progress = progress
        self.cancel_event = cancel_event
        self.failures: list[PageRenderError] = []
        self.cancelled = False
        self.finished = False
        self._started = False

    @property
    def skipped(self) -> tuple[int, ...]:
        return tuple(error.page_id for error in self.failures)

    def render(self) -> Iterator[RasterPage]:
        if self._started:
            raise RuntimeError("A rasterization pass can only be consumed once")
        self._started = True
        return self._iter_pages()

    def _iter_pages(self) -> Iterator[RasterPage]:
        total = self.source.total_pages
        LOGGER.debug(
            "Rasterizing %s pages at scale %s, quality %s",
            total,
            self.config.scale,
            self.config.quality,
        )
        for page_id in range(1, total + 1):
            if self.cancel_event is not None and self.cancel_event.is_set():
                LOGGER.info("Rasterization cancelled before page %s", page_id)
                self.cancelled = True
                return
            page = self._render_one(page_id)
            LOGGER.debug("Rendered %s/%s pages (%s%%)", page_id, total, progress_percent(page_id, total))
            if self.progress is not None:
                self.progress(page_id, total)
            if page is not None:
                yield page
        self.finished = True

    def _render_one(self, page_id: int) -> RasterPage | None:
        surface = None
        try:
            surface = self.source.handle.render_page(page_id - 1, self.config.scale)
            return encode_page(surface, page_id, self.config)
        except Exception as exc:
            error = exc if isinstance(exc, PageRenderError) else PageRenderError(page_id, str(exc))
            LOGGER.warning("Page %s render error: %s", page_id, error.message)
            self.failures.append(error)
            return None
        finally:
            if surface is not None:
                surface.close()

    def collect(self, number: int = 1) -> RasterGeneration:
        """Consume the pass and return it as a generation."""

        pages = tuple(self.render())
        return RasterGeneration(
            number=number,
            config=self.config,
            total_pages=self.source.total_pages,
            pages=pages,
            skipped=self.skipped,
            complete=not self.cancelled,
        )


__all__ = ["PageRasterizer", "RasterGeneration", "encode_page"]
