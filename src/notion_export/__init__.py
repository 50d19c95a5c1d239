# ABOUTME: Export Notion pages as styled Markdown over HTTP.
# ABOUTME: Exposes the page export pipeline and the API factory.

from .export import ExportedPage, export_page
from .errors import (
    ConfigurationError,
    DepthExceededError,
    EmptyContentError,
    ExportError,
    InvalidRequestError,
    UpstreamError,
)

__all__ = [
    "ExportedPage",
    "export_page",
    "ConfigurationError",
    "DepthExceededError",
    "EmptyContentError",
    "ExportError",
    "InvalidRequestError",
    "UpstreamError",
]
