"""High-level pipeline session: load, rasterize, select, export."""

from __future__ import annotations

import threading
from typing import Optional

from .backends import DocumentBackend
from .config import ExportSettings, RenderConfig
from .core.utils import DEFAULT_SOURCE_NAME, get_logger
from .estimate import estimate_size
from .exceptions import PdfRasterError, SelectionError
from .exporters import ExportEngine
from .rasterizer import PageRasterizer, RasterGeneration
from .selection import SelectionModel, SelectionSet
from .source import OpenResult, SourceDocument, SourceLoader
from .types import ExportJob, ExportKind, ExportResult, ProgressCallback, RasterPage

LOGGER = get_logger("pdfrasterx.session")


class PipelineSession:
    """Owns one source document, its current raster generation and the selection."""

    def __init__(
        self,
        *,
        backend: DocumentBackend | None = None,
        render_config: RenderConfig | None = None,
        export_settings: ExportSettings | None = None,
    ) -> None:
        self.loader = SourceLoader(backend)
        self.render_config = render_config or RenderConfig()
        self.engine = ExportEngine(export_settings)
        self.selection = SelectionModel()
        self.source: Optional[SourceDocument] = None
        self.generation: Optional[RasterGeneration] = None
        self._data: bytes | None = None
        self._name = DEFAULT_SOURCE_NAME
        self._generation_counter = 0

    # ------------------------------------------------------------------
    # Source handling
    # ------------------------------------------------------------------
    def open(self, data: bytes, passphrase: str | None = None, *, name: str = DEFAULT_SOURCE_NAME) -> OpenResult:
        """Open ``data``; see :meth:`SourceLoader.open` for the outcomes."""

        if data != self._data:
            self.reset()
            self._data = data
        self._name = name or DEFAULT_SOURCE_NAME
        result = self.loader.open(data, passphrase, name=self._name)
        if result.document is not self.source:
            # Either a new unlock or a failed retry that locked the bytes again.
            self._replace_source(result.document)
        return result

    def load(self, data: bytes, passphrase: str | None = None, *, name: str = DEFAULT_SOURCE_NAME) -> SourceDocument:
        """Open ``data`` and raise authentication or decode errors."""

        return self.open(data, passphrase, name=name).unwrap()

    def unlock(self, passphrase: str) -> OpenResult:
        """Retry opening the current bytes with ``passphrase``."""

        if self._data is None:
            raise PdfRasterError("No source has been loaded")
        return self.open(self._data, passphrase, name=self._name)

    def _replace_source(self, document: SourceDocument | None) -> None:
        if self.source is not None:
            self.source.close()
        self.source = document
        self.generation = None
        self.selection.reset(document.total_pages if document is not None else 0)

    def reset(self) -> None:
        """Drop the source, its pages and the selection."""

        if self.source is not None:
            self.source.close()
        self.source = None
        self.generation = None
        self._data = None
        self._name = DEFAULT_SOURCE_NAME
        self.loader.reset()
        self.selection.reset()

    def _require_source(self) -> SourceDocument:
        if self.source is None:
            raise PdfRasterError("No unlocked source is available")
        return self.source

    # ------------------------------------------------------------------
    # Rasterization
    # ------------------------------------------------------------------
    def rasterizer(
        self,
        config: RenderConfig | None = None,
        *,
        progress: ProgressCallback | None = None,
        cancel_event: threading.Event | None = None,
    ) -> PageRasterizer:
        if config is not None:
            self.render_config = config
        return PageRasterizer(
            self._require_source(),
            self.render_config,
            progress=progress,
            cancel_event=cancel_event,
        )

    def rasterize(
        self,
        config: RenderConfig | None = None,
        *,
        progress: ProgressCallback | None = None,
        cancel_event: threading.Event | None = None,
    ) -> RasterGeneration:
        """Run a full pass and replace the current generation with its result."""

        rasterizer = self.rasterizer(config, progress=progress, cancel_event=cancel_event)
        self._generation_counter += 1
        generation = rasterizer.collect(self._generation_counter)
        self.commit(generation)
        return generation

    def commit(self, generation: RasterGeneration) -> None:
        """Swap in ``generation`` and prune the selection to its ids."""

        self.generation = generation
        self.selection.prune(generation.ids)
        LOGGER.info(
            "Generation %s: %s pages, skipped %s",
            generation.number,
            len(generation.pages),
            list(generation.skipped) or "none",
        )

    @property
    def pages(self) -> tuple[RasterPage, ...]:
        return self.generation.pages if self.generation is not None else ()

    @property
    def total_pages(self) -> int:
        return self.source.total_pages if self.source is not None else 0

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------
    def toggle(self, page_id: int) -> SelectionSet:
        return self.selection.toggle(page_id)

    def toggle_all(self) -> SelectionSet:
        return self.selection.toggle_all()

    def select_all(self) -> SelectionSet:
        return self.selection.select_all()

    def clear_selection(self) -> SelectionSet:
        return self.selection.clear()

    def apply_range(self, text: str | None) -> SelectionSet:
        return self.selection.apply_range(text, self.total_pages)

    def selected_pages(self) -> list[RasterPage]:
        """Selected pages present in the current generation, ordered by id."""

        if self.generation is None:
            return []
        return self.generation.select(self.selection.selection)

    def estimate(self) -> str:
        return estimate_size(self.selected_pages())

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------
    def export(self, kind: ExportKind | str, *, output_password: str | None = None) -> ExportResult | None:
        """Export the selection; returns ``None`` when nothing is selected."""

        job = ExportJob.build(kind, self.selected_pages(), output_password=output_password)
        return self.engine.run(job, self._name)

    def export_page(self, page_id: int) -> ExportResult:
        """Return a single rendered page as ``<name>_P<id>.jpg``."""

        page = self.generation.get(page_id) if self.generation is not None else None
        if page is None:
            raise SelectionError(f"Page {page_id} has not been rasterized")
        source = self._require_source()
        return ExportResult(
            page.encoded_bytes,
            f"{source.base_name}_P{page.id}.{page.extension}",
            page.media_type,
        )


__all__ = ["PipelineSession"]
