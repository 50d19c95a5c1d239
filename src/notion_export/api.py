# ABOUTME: HTTP API serving Notion pages as Markdown downloads.
# ABOUTME: Maps export errors to structured JSON responses.

import logging
from typing import Callable

from fastapi import FastAPI, Query, Request
from fastapi.responses import JSONResponse, Response

from .config import Settings, load_settings
from .errors import ExportError, InvalidRequestError, UpstreamError
from .export import export_page
from .notion import NotionClient, parse_page_id

logger = logging.getLogger(__name__)

MARKDOWN_MEDIA_TYPE = "text/markdown; charset=utf-8"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"", "0", "false", "no", "off"}


def parse_flag(value: str | None, name: str) -> bool:
    """Interpret a boolean-like query parameter."""
    if value is None:
        return False
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise InvalidRequestError(f"Invalid value for '{name}': {value!r}")


def create_app(
    settings: Settings | None = None,
    client_factory: Callable[[str], NotionClient] = NotionClient,
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        settings: Exporter settings; loaded from config when omitted.
        client_factory: Builds a Notion client from a token.
    """
    settings = settings or load_settings()
    app = FastAPI(title="Notion Export", description="Export Notion pages as styled Markdown")

    @app.exception_handler(ExportError)
    async def handle_export_error(request: Request, exc: ExportError) -> JSONResponse:
        logger.warning(f"{request.url.path} failed with {exc.code}: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"Unexpected error handling {request.url.path}")
        error = UpstreamError("Failed to convert page", details=str(exc))
        return JSONResponse(status_code=error.status_code, content=error.to_dict())

    @app.get("/healthz")
    def healthz():
        return {"status": "ok"}

    @app.get("/api/parse")
    def parse(
        page_id: str | None = Query(None, description="Notion page ID or URL"),
        download: str | None = Query(None, description="Serve as an attachment"),
    ) -> Response:
        token = settings.get_token()

        if not page_id:
            raise InvalidRequestError("Missing 'page_id' parameter")
        normalized_id = parse_page_id(page_id)
        if normalized_id is None:
            raise InvalidRequestError(f"Invalid 'page_id' parameter: {page_id!r}")
        as_attachment = parse_flag(download, "download")

        client = client_factory(token)
        exported = export_page(client, normalized_id, settings)

        headers = {}
        if as_attachment:
            headers["Content-Disposition"] = exported.content_disposition()
        return Response(
            content=exported.markdown,
            media_type=MARKDOWN_MEDIA_TYPE,
            headers=headers,
        )

    return app
