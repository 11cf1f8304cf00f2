"""Run export strategies one at a time over a selection of pages."""

from __future__ import annotations

import threading
from typing import Any

from ..config import ExportSettings
from ..core.utils import DEFAULT_SOURCE_NAME, get_logger
from ..exceptions import ExportError, ExportInProgressError
from ..types import ExportJob, ExportResult
from .interfaces import ExportContext
from .pipeline import ExporterRegistry, registry as default_registry

LOGGER = get_logger("pdfrasterx.exporters")


class ExportEngine:
    """Dispatch :class:`ExportJob` values to registered strategies.

    Only one job runs at a time; a job submitted while another is running is
    rejected with :class:`ExportInProgressError`.
    """

    def __init__(
        self,
        settings: ExportSettings | None = None,
        *,
        registry: ExporterRegistry | None = None,
    ) -> None:
        self.settings = settings or ExportSettings()
        self.registry = registry or default_registry
        self._lock = threading.Lock()

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    def run(self, job: ExportJob, source_name: str = DEFAULT_SOURCE_NAME) -> ExportResult | None:
        if job.is_empty:
            LOGGER.debug("Skipping %s export of an empty selection", job.kind.value)
            return None

        if not self._lock.acquire(blocking=False):
            raise ExportInProgressError()
        try:
            config: dict[str, Any] = self.settings.as_config()
            if job.output_password:
                config["output_password"] = job.output_password
            context = ExportContext(pages=job.pages, source_name=source_name, config=config)
            exporter = self.registry.create(job.kind, context)
            LOGGER.debug("Exporting %s pages as %s", len(job.pages), job.kind.value)
            try:
                result = exporter.run()
            except ExportError:
                raise
            except Exception as exc:
                LOGGER.error("%s export failed: %s", job.kind.value, exc)
                raise ExportError(f"{job.kind.value} export failed: {exc}") from exc
            return result
        finally:
            self._lock.release()


__all__ = ["ExportEngine"]
