from __future__ import annotations

import pytest

from pdfrasterx.config import ExportSettings, jpeg_quality
from pdfrasterx.core.utils import base_name, is_pdf_name, progress_percent
from pdfrasterx.exceptions import (
    AuthenticationRejectedError,
    AuthenticationRequiredError,
    ConfigurationError,
    PageRenderError,
)


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("report.pdf", "report"),
        ("report.v2.pdf", "report.v2"),
        ("REPORT.PDF", "REPORT"),
        ("folder/scan.pdf", "scan"),
        ("noextension", "noextension"),
        (None, "document"),
        ("", "document"),
    ],
)
def test_base_name(name, expected) -> None:
    assert base_name(name) == expected


def test_is_pdf_name() -> None:
    assert is_pdf_name("a.pdf")
    assert is_pdf_name("A.PDF")
    assert not is_pdf_name("a.pdf.txt")
    assert not is_pdf_name(None)


def test_progress_percent() -> None:
    assert progress_percent(0, 0) == 0
    assert progress_percent(1, 3) == 33
    assert progress_percent(6, 6) == 100


def test_jpeg_quality_mapping() -> None:
    assert jpeg_quality(0.85) == 85
    assert jpeg_quality(0.8) == 80
    assert jpeg_quality(0.001) == 1


def test_export_settings() -> None:
    assert ExportSettings(output_password="").output_password is None
    assert ExportSettings().as_config() == {"output_password": None, "stitch_quality": 0.8}
    with pytest.raises(ConfigurationError):
        ExportSettings(stitch_quality=0)


def test_exception_messages() -> None:
    assert "password" in AuthenticationRequiredError().message.lower()
    rejected = AuthenticationRejectedError()
    assert isinstance(rejected, AuthenticationRequiredError)
    assert "incorrect" in rejected.message.lower()
    assert PageRenderError(4).message == "Failed to render page 4."
    assert isinstance(ConfigurationError("bad"), ValueError)
