"""Registry mapping export kinds to the strategies that produce them."""

from __future__ import annotations

from ..exceptions import ExportError
from ..types import ExportKind
from .interfaces import BaseExporter, ExportContext


class ExporterRegistry:
    """One exporter class per :class:`ExportKind`."""

    def __init__(self) -> None:
        self._exporters: dict[ExportKind, type[BaseExporter]] = {}

    def register(self, kind: ExportKind | str, exporter_class: type[BaseExporter]) -> None:
        kind = ExportKind(kind)
        if kind in self._exporters:
            raise ValueError(f"An exporter for '{kind.value}' is already registered")
        self._exporters[kind] = exporter_class

    def create(self, kind: ExportKind | str, context: ExportContext) -> BaseExporter:
        kind = ExportKind(kind)
        exporter_class = self._exporters.get(kind)
        if exporter_class is None:
            raise ExportError(f"No exporter is registered for '{kind.value}'")
        return exporter_class(context)

    def kinds(self) -> list[ExportKind]:
        return sorted(self._exporters, key=lambda kind: kind.value)

    def __contains__(self, kind: object) -> bool:
        return kind in self._exporters


registry = ExporterRegistry()


def register_exporter(kind: ExportKind):
    """Class decorator adding an exporter to the default registry."""

    def decorator(cls: type[BaseExporter]) -> type[BaseExporter]:
        registry.register(kind, cls)
        return cls

    return decorator


__all__ = ["ExporterRegistry", "registry", "register_exporter"]
