"""FastAPI application exposing the rasterize-and-export pipeline."""

from __future__ import annotations

from pathlib import Path
from urllib.parse import quote

from fastapi import FastAPI, File, Form, HTTPException, Request, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.openapi.docs import get_swagger_ui_html
from fastapi.responses import HTMLResponse, JSONResponse, Response

from pdfrasterx import (
    AuthenticationRejectedError,
    AuthenticationRequiredError,
    ConfigurationError,
    DecodeError,
    ExportError,
    ExportInProgressError,
    ExportKind,
    ExportResult,
    ExportSettings,
    PdfRasterError,
    PipelineSession,
    RenderConfig,
    SelectionError,
)
from pdfrasterx.config import DEFAULT_QUALITY, DEFAULT_SCALE, DEFAULT_STITCH_QUALITY
from pdfrasterx.core.utils import DEFAULT_SOURCE_NAME, get_logger, is_pdf_name

app = FastAPI(title="pdfrasterx API", version="0.1.0")
DOCS_PREFIX = "/api"
HEADER_PREFIX = "x-pdfrasterx"

LOGGER = get_logger("pdfrasterx.api")


def _safe_filename(filename: str | None, default: str) -> str:
    """Return a filesystem-safe filename derived from user input."""

    if not filename:
        return default

    candidate = Path(filename).name
    return candidate or default


async def _read_upload(upload: UploadFile) -> tuple[bytes, str]:
    """Return the uploaded bytes and a safe source name."""

    name = _safe_filename(upload.filename, DEFAULT_SOURCE_NAME)
    if not is_pdf_name(name):
        raise HTTPException(status_code=400, detail=f"File '{name}' is not a PDF.")

    contents = await upload.read()
    if not contents:
        raise HTTPException(status_code=400, detail=f"File '{name}' is empty.")
    return contents, name


def _http_error(exc: PdfRasterError) -> HTTPException:
    """Map pipeline errors onto HTTP status codes."""

    if isinstance(exc, AuthenticationRejectedError):
        return HTTPException(status_code=401, detail=exc.message, headers={f"{HEADER_PREFIX}-auth": "rejected"})
    if isinstance(exc, AuthenticationRequiredError):
        return HTTPException(status_code=401, detail=exc.message, headers={f"{HEADER_PREFIX}-auth": "required"})
    if isinstance(exc, (DecodeError, ConfigurationError, SelectionError)):
        return HTTPException(status_code=400, detail=exc.message)
    if isinstance(exc, ExportInProgressError):
        return HTTPException(status_code=409, detail=exc.message)
    return HTTPException(status_code=500, detail=exc.message)


def _attachment(result: ExportResult, headers: dict[str, str] | None = None) -> Response:
    disposition = f"attachment; filename*=UTF-8''{quote(result.filename)}"
    return Response(
        content=result.data,
        media_type=result.media_type,
        headers={"Content-Disposition": disposition, **(headers or {})},
    )


def _render_session(
    data: bytes,
    name: str,
    password: str | None,
    render_config: RenderConfig,
    export_settings: ExportSettings | None = None,
) -> PipelineSession:
    session = PipelineSession(render_config=render_config, export_settings=export_settings)
    try:
        session.load(data, password or None, name=name)
        session.rasterize()
    except PdfRasterError:
        session.reset()
        raise
    return session


def _run_export(
    data: bytes,
    name: str,
    *,
    kind: ExportKind,
    pages: str | None,
    password: str | None,
    output_password: str | None,
    render_config: RenderConfig,
    export_settings: ExportSettings,
) -> tuple[ExportResult | None, dict[str, str]]:
    session = _render_session(data, name, password, render_config, export_settings)
    try:
        session.select_all()
        if pages:
            session.apply_range(pages)
        headers = {
            f"{HEADER_PREFIX}-page-count": str(session.total_pages),
            f"{HEADER_PREFIX}-selected-pages": ",".join(str(i) for i in session.selection.selection),
            f"{HEADER_PREFIX}-estimated-size": session.estimate(),
            f"{HEADER_PREFIX}-skipped-pages": ",".join(str(i) for i in session.generation.skipped),
        }
        return session.export(kind, output_password=output_password), headers
    finally:
        session.reset()


@app.get("/health", response_class=JSONResponse)
async def health() -> dict[str, str]:
    """Lightweight health endpoint for uptime checks."""
    return {"status": "ok"}


@app.get(
    f"{DOCS_PREFIX}/openapi.json",
    include_in_schema=False,
    name="prefixed_openapi",
)
async def prefixed_openapi() -> JSONResponse:
    """Expose the OpenAPI schema under the gateway's ``/api`` prefix."""

    return JSONResponse(app.openapi())


@app.get(f"{DOCS_PREFIX}/docs", include_in_schema=False)
async def prefixed_swagger_ui(request: Request) -> HTMLResponse:
    """Serve Swagger UI from the same ``/api`` prefix used by the gateway."""

    return get_swagger_ui_html(
        openapi_url=str(request.url_for("prefixed_openapi")),
        title=f"{app.title} - Swagger UI",
    )


@app.post("/documents/info", response_class=JSONResponse)
async def document_info(
    file: UploadFile = File(..., description="Source PDF."),
    password: str | None = Form(None, description="Password of a protected PDF."),
) -> dict[str, object]:
    """Report the page count of an upload, or whether it needs a password."""

    data, name = await _read_upload(file)

    def _open() -> dict[str, object]:
        session = PipelineSession()
        result = session.open(data, password or None, name=name)
        try:
            return {
                "filename": name,
                "outcome": result.outcome.value,
                "state": result.state.value,
                "pages": result.total_pages,
                "encrypted": result.document.encrypted if result.document is not None else None,
                "reason": result.reason,
            }
        finally:
            session.reset()

    return await run_in_threadpool(_open)


@app.post(
    "/documents/export",
    summary="Rasterize a PDF and export the selected pages",
    response_description="ZIP archive, stitched JPEG or rebuilt PDF.",
)
async def export_document(
    file: UploadFile = File(..., description="Source PDF."),
    kind: ExportKind = Form(ExportKind.ARCHIVE, description="archive, stitch or document."),
    pages: str | None = Form(None, description="Pages to export, e.g. '1-3, 5'. Defaults to all."),
    scale: float = Form(DEFAULT_SCALE, description="Render scale between 0.5 and 3.0."),
    quality: float = Form(DEFAULT_QUALITY, description="JPEG quality between 0.1 and 1.0."),
    stitch_quality: float = Form(DEFAULT_STITCH_QUALITY, description="JPEG quality of the stitched image."),
    password: str | None = Form(None, description="Password of a protected PDF."),
    output_password: str | None = Form(None, description="Encrypt the exported PDF with this password."),
) -> Response:
    """Render every page, apply the selection and return the export artifact.

    An empty selection produces ``204 No Content`` rather than an empty file.
    """

    data, name = await _read_upload(file)

    try:
        render_config = RenderConfig(scale=scale, quality=quality)
        export_settings = ExportSettings(stitch_quality=stitch_quality)
        result, headers = await run_in_threadpool(
            _run_export,
            data,
            name,
            kind=kind,
            pages=pages,
            password=password,
            output_password=output_password,
            render_config=render_config,
            export_settings=export_settings,
        )
    except ExportError as exc:
        LOGGER.error("Export of %s failed: %s", name, exc.message)
        raise _http_error(exc) from exc
    except PdfRasterError as exc:
        raise _http_error(exc) from exc

    if result is None:
        return Response(status_code=204, headers=headers)
    return _attachment(result, headers)


@app.post("/documents/page", summary="Render a single page as JPEG")
async def export_single_page(
    file: UploadFile = File(..., description="Source PDF."),
    page: int = Form(..., description="1-based page number."),
    scale: float = Form(DEFAULT_SCALE, description="Render scale between 0.5 and 3.0."),
    quality: float = Form(DEFAULT_QUALITY, description="JPEG quality between 0.1 and 1.0."),
    password: str | None = Form(None, description="Password of a protected PDF."),
) -> Response:
    """Return one rendered page under its ``<name>_P<page>.jpg`` filename."""

    data, name = await _read_upload(file)

    def _render_page() -> ExportResult:
        session = _render_session(data, name, password, RenderConfig(scale=scale, quality=quality))
        try:
            return session.export_page(page)
        finally:
            session.reset()

    try:
        result = await run_in_threadpool(_render_page)
    except PdfRasterError as exc:
        raise _http_error(exc) from exc
    return _attachment(result)
