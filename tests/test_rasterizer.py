from __future__ import annotations

import io
import threading

import pytest
from PIL import Image

from pdfrasterx.config import RenderConfig
from pdfrasterx.exceptions import ConfigurationError, PageRenderError
from pdfrasterx.rasterizer import PageRasterizer
from pdfrasterx.source import SourceLoader


def _open(data: bytes, backend=None, passphrase: str | None = None):
    return SourceLoader(backend).load(data, passphrase, name="sample.pdf")


@pytest.mark.parametrize("scale", [1.0, 2.0])
def test_pixel_dimensions_follow_scale(sample_pdf_bytes: bytes, page_sizes, scale: float) -> None:
    source = _open(sample_pdf_bytes)
    try:
        pages = list(PageRasterizer(source, RenderConfig(scale=scale, quality=0.85)).render())
    finally:
        source.close()

    assert [page.id for page in pages] == [1, 2, 3, 4, 5, 6]
    for page, (width, height) in zip(pages, page_sizes):
        assert page.pixel_width == round(width * scale)
        assert page.pixel_height == round(height * scale)
        assert page.byte_size == len(page.encoded_bytes)
        assert page.scale == scale
        assert page.quality == 0.85


def test_pages_are_rendered_on_white(sample_pdf_bytes: bytes) -> None:
    source = _open(sample_pdf_bytes)
    try:
        first = next(PageRasterizer(source, RenderConfig(scale=1.0)).render())
    finally:
        source.close()

    with Image.open(io.BytesIO(first.encoded_bytes)) as image:
        assert image.format == "JPEG"
        assert image.mode == "RGB"
        assert all(channel >= 250 for channel in image.getpixel((10, 10)))


def test_encrypted_source_renders_after_unlock(encrypted_pdf_bytes: bytes) -> None:
    source = _open(encrypted_pdf_bytes, passphrase="secret")
    try:
        pages = list(PageRasterizer(source, RenderConfig(scale=1.0)).render())
    finally:
        source.close()

    assert [page.id for page in pages] == [1, 2, 3]


def test_failed_page_is_skipped(fake_backend) -> None:
    source = _open(b"six pages", fake_backend(failing={4}))
    progress: list[tuple[int, int]] = []
    rasterizer = PageRasterizer(
        source,
        RenderConfig(scale=1.0),
        progress=lambda current, total: progress.append((current, total)),
    )

    generation = rasterizer.collect()

    assert [page.id for page in generation.pages] == [1, 2, 3, 5, 6]
    assert generation.total_pages == 6
    assert generation.skipped == (4,)
    assert generation.complete
    assert isinstance(rasterizer.failures[0], PageRenderError)
    assert rasterizer.failures[0].page_id == 4
    assert progress == [(page_id, 6) for page_id in range(1, 7)]


def test_render_is_lazy_and_single_use(fake_backend) -> None:
    backend = fake_backend()
    source = _open(b"data", backend)
    rasterizer = PageRasterizer(source, RenderConfig(scale=1.0))

    iterator = rasterizer.render()
    assert backend.documents[0].rendered == []

    next(iterator)
    assert backend.documents[0].rendered == [1]

    with pytest.raises(RuntimeError):
        rasterizer.render()


def test_cancellation_stops_between_pages(fake_backend) -> None:
    cancel = threading.Event()
    source = _open(b"data", fake_backend())

    def on_progress(current: int, total: int) -> None:
        if current == 2:
            cancel.set()

    rasterizer = PageRasterizer(source, RenderConfig(scale=1.0), progress=on_progress, cancel_event=cancel)
    generation = rasterizer.collect(3)

    assert [page.id for page in generation.pages] == [1, 2]
    assert generation.number == 3
    assert not generation.complete
    assert rasterizer.cancelled
    assert not rasterizer.finished


def test_generation_lookup(fake_backend, page_sizes) -> None:
    source = _open(b"data", fake_backend(failing={2}))
    generation = PageRasterizer(source, RenderConfig(scale=1.0)).collect()

    assert generation.ids == frozenset({1, 3, 4, 5, 6})
    assert generation.get(2) is None
    assert generation.get(3).pixel_width == page_sizes[2][0]
    assert [page.id for page in generation.select([6, 1, 2])] == [1, 6]


@pytest.mark.parametrize(
    "kwargs",
    [{"scale": 0.4}, {"scale": 3.5}, {"quality": 0.05}, {"quality": 1.2}, {"scale": "big"}],
)
def test_render_config_bounds(kwargs) -> None:
    with pytest.raises(ConfigurationError):
        RenderConfig(**kwargs)


def test_render_config_bounds_are_inclusive() -> None:
    low = RenderConfig(scale=0.5, quality=0.1)
    high = RenderConfig(scale=3.0, quality=1.0)

    assert low.jpeg_quality == 10
    assert high.jpeg_quality == 100
    assert RenderConfig().jpeg_quality == 85
