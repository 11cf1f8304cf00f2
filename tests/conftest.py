from __future__ import annotations

import io
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable

import pytest
from PIL import Image
from pypdf import PdfWriter

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from pdfrasterx.backends import BackendDocument  # noqa: E402
from pdfrasterx.exceptions import (  # noqa: E402
    AuthenticationRejectedError,
    AuthenticationRequiredError,
    DecodeError,
)

# Portrait, landscape and square pages, in points.
PAGE_SIZES = [(200, 300), (300, 200), (200, 300), (250, 250), (200, 300), (300, 200)]


def build_pdf(
    sizes: Iterable[tuple[int, int]],
    *,
    password: str | None = None,
    owner_password: str | None = None,
) -> bytes:
    writer = PdfWriter()
    for width, height in sizes:
        writer.add_blank_page(width=width, height=height)
    writer.add_metadata({"/Producer": "pdfrasterx-tests", "/Title": "Sample"})
    if password is not None:
        writer.encrypt(password, owner_password or password)
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


@pytest.fixture()
def page_sizes() -> list[tuple[int, int]]:
    return list(PAGE_SIZES)


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    return build_pdf(PAGE_SIZES)


@pytest.fixture()
def sample_pdf(tmp_path: Path, sample_pdf_bytes: bytes) -> Path:
    pdf_path = tmp_path / "sample.pdf"
    pdf_path.write_bytes(sample_pdf_bytes)
    return pdf_path


@pytest.fixture()
def encrypted_pdf_bytes() -> bytes:
    return build_pdf(PAGE_SIZES[:3], password="secret")


@pytest.fixture()
def blank_password_pdf(tmp_path: Path) -> Path:
    pdf_path = tmp_path / "blank.pdf"
    pdf_path.write_bytes(build_pdf(PAGE_SIZES[:2], password="", owner_password="owner"))
    return pdf_path


@pytest.fixture()
def encrypted_pdf(tmp_path: Path, encrypted_pdf_bytes: bytes) -> Path:
    pdf_path = tmp_path / "locked.pdf"
    pdf_path.write_bytes(encrypted_pdf_bytes)
    return pdf_path


@dataclass
class FakeDocument(BackendDocument):
    sizes: list[tuple[int, int]] = field(default_factory=list)
    failing: set[int] = field(default_factory=set)
    color: tuple[int, int, int] = (30, 30, 30)
    rendered: list[int] = field(default_factory=list)
    closed: bool = False

    def render_page(self, index: int, scale: float) -> Image.Image:
        page_id = index + 1
        self.rendered.append(page_id)
        if page_id in self.failing:
            raise RuntimeError(f"broken content stream on page {page_id}")
        width, height = self.sizes[index]
        return Image.new("RGB", (round(width * scale), round(height * scale)), self.color)

    def close(self) -> None:
        self.closed = True


class FakeBackend:
    """In-memory backend with configurable page sizes, failures and password."""

    def __init__(
        self,
        sizes: list[tuple[int, int]],
        *,
        failing: Iterable[int] = (),
        password: str | None = None,
        corrupt: bool = False,
    ) -> None:
        self.sizes = list(sizes)
        self.failing = set(failing)
        self.password = password
        self.corrupt = corrupt
        self.documents: list[FakeDocument] = []

    def open(self, data: bytes, passphrase: str | None = None) -> FakeDocument:
        if self.corrupt:
            raise DecodeError("not a PDF")
        if self.password is not None:
            if not passphrase:
                raise AuthenticationRequiredError()
            if passphrase != self.password:
                raise AuthenticationRejectedError()
        document = FakeDocument(
            num_pages=len(self.sizes),
            file_size=len(data),
            sizes=self.sizes,
            failing=self.failing,
            encrypted=self.password is not None,
        )
        self.documents.append(document)
        return document


@pytest.fixture()
def fake_backend() -> Callable[..., FakeBackend]:
    def _create(sizes: list[tuple[int, int]] | None = None, **kwargs) -> FakeBackend:
        return FakeBackend(sizes or PAGE_SIZES, **kwargs)

    return _create
