from __future__ import annotations

import io
import zipfile
from pathlib import Path

from fastapi.testclient import TestClient
from pypdf import PdfReader

from apps.backend.app.main import app


client = TestClient(app)


def _files(path: Path, name: str | None = None) -> dict[str, tuple[str, bytes, str]]:
    return {"file": (name or path.name, path.read_bytes(), "application/pdf")}


def test_health() -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_export_archive_endpoint(sample_pdf: Path) -> None:
    response = client.post(
        "/documents/export",
        data={"kind": "archive", "pages": "1, 3-4", "scale": "1.0"},
        files=_files(sample_pdf),
    )

    assert response.status_code == 200
    assert response.headers.get("content-type") == "application/zip"
    assert "sample_images.zip" in response.headers.get("content-disposition", "")
    assert response.headers.get("x-pdfrasterx-page-count") == "6"
    assert response.headers.get("x-pdfrasterx-selected-pages") == "1,3,4"
    assert response.headers.get("x-pdfrasterx-skipped-pages") == ""
    assert response.headers.get("x-pdfrasterx-estimated-size", "").endswith("KB")
    with zipfile.ZipFile(io.BytesIO(response.content)) as archive:
        assert archive.namelist() == ["sample/Page_1.jpg", "sample/Page_3.jpg", "sample/Page_4.jpg"]


def test_export_document_with_output_password(sample_pdf: Path) -> None:
    response = client.post(
        "/documents/export",
        data={"kind": "document", "pages": "2", "scale": "1.0", "output_password": "x"},
        files=_files(sample_pdf),
    )

    assert response.status_code == 200
    assert response.headers.get("content-type") == "application/pdf"
    assert "sample_Modified.pdf" in response.headers.get("content-disposition", "")
    reader = PdfReader(io.BytesIO(response.content))
    assert reader.is_encrypted
    assert reader.decrypt("x")
    assert float(reader.pages[0].mediabox.width) == 300


def test_range_without_valid_pages_keeps_full_selection(sample_pdf: Path) -> None:
    response = client.post(
        "/documents/export",
        data={"kind": "archive", "pages": "9-12", "scale": "1.0"},
        files=_files(sample_pdf),
    )

    assert response.status_code == 200
    assert response.headers.get("x-pdfrasterx-selected-pages") == "1,2,3,4,5,6"


def test_protected_upload_requires_password(encrypted_pdf: Path) -> None:
    response = client.post("/documents/export", files=_files(encrypted_pdf))

    assert response.status_code == 401
    assert response.headers.get("x-pdfrasterx-auth") == "required"

    response = client.post("/documents/export", data={"password": "nope"}, files=_files(encrypted_pdf))

    assert response.status_code == 401
    assert response.headers.get("x-pdfrasterx-auth") == "rejected"


def test_protected_upload_with_password(encrypted_pdf: Path) -> None:
    response = client.post(
        "/documents/page",
        data={"page": "3", "password": "secret", "scale": "1.0"},
        files=_files(encrypted_pdf),
    )

    assert response.status_code == 200
    assert response.headers.get("content-type") == "image/jpeg"
    assert "locked_P3.jpg" in response.headers.get("content-disposition", "")


def test_missing_page_is_a_bad_request(sample_pdf: Path) -> None:
    response = client.post(
        "/documents/page",
        data={"page": "9", "scale": "1.0"},
        files=_files(sample_pdf),
    )

    assert response.status_code == 400


def test_invalid_scale_is_a_bad_request(sample_pdf: Path) -> None:
    response = client.post("/documents/export", data={"scale": "9"}, files=_files(sample_pdf))

    assert response.status_code == 400
    assert "scale" in response.json()["detail"]


def test_corrupt_upload_is_a_bad_request(tmp_path: Path) -> None:
    broken = tmp_path / "broken.pdf"
    broken.write_bytes(b"%PDF-1.7 nothing here")

    response = client.post("/documents/export", files=_files(broken))

    assert response.status_code == 400
    assert "x-pdfrasterx-auth" not in response.headers


def test_non_pdf_upload_is_rejected(tmp_path: Path) -> None:
    response = client.post(
        "/documents/info",
        files={"file": ("notes.txt", b"hello", "text/plain")},
    )

    assert response.status_code == 400


def test_info_reports_auth_outcome(encrypted_pdf: Path, sample_pdf: Path) -> None:
    locked = client.post("/documents/info", files=_files(encrypted_pdf)).json()
    assert locked["outcome"] == "auth_required"
    assert locked["state"] == "locked"
    assert locked["pages"] == 0

    unlocked = client.post("/documents/info", data={"password": "secret"}, files=_files(encrypted_pdf)).json()
    assert unlocked["outcome"] == "opened"
    assert unlocked["pages"] == 3

    plain = client.post("/documents/info", files=_files(sample_pdf)).json()
    assert plain["filename"] == "sample.pdf"
    assert plain["pages"] == 6
    assert plain["encrypted"] is False
    assert unlocked["encrypted"] is True
    assert locked["encrypted"] is None


def test_empty_selection_returns_no_content(sample_pdf: Path, monkeypatch) -> None:
    from pdfrasterx import PipelineSession

    monkeypatch.setattr(PipelineSession, "select_all", PipelineSession.clear_selection)

    response = client.post("/documents/export", data={"scale": "1.0"}, files=_files(sample_pdf))

    assert response.status_code == 204
    assert response.content == b""
    assert response.headers.get("x-pdfrasterx-selected-pages") == ""
