# ABOUTME: Wrapper around the official Notion Python SDK.
# ABOUTME: Provides an authenticated client whose failures surface as UpstreamError.

import functools
import logging

import httpx
from notion_client import Client
from notion_client.errors import APIResponseError, HTTPResponseError, RequestTimeoutError
from notion_client.helpers import collect_paginated_api

from ..errors import UpstreamError

logger = logging.getLogger(__name__)


def raise_as_upstream(func):
    """Decorator translating SDK and transport failures into UpstreamError.

    Errors are never retried; the caller re-issues the request.
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except APIResponseError as e:
            logger.warning(f"Notion API error in {func.__name__}: {e.code} ({e.status})")
            raise UpstreamError("Failed to convert page", details=f"{e.code}: {e}") from e
        except (HTTPResponseError, RequestTimeoutError, httpx.HTTPError) as e:
            logger.warning(f"Notion request failed in {func.__name__}: {e}")
            raise UpstreamError("Failed to convert page", details=str(e)) from e
    return wrapper


class NotionClient:
    """Wrapper around the Notion SDK client."""

    def __init__(self, token: str):
        self._client = Client(auth=token)

    @raise_as_upstream
    def get_page(self, page_id: str) -> dict:
        """Retrieve a page by ID."""
        return self._client.pages.retrieve(page_id=page_id)

    @raise_as_upstream
    def get_blocks(self, block_id: str) -> list[dict]:
        """Retrieve all child blocks of a block/page."""
        return collect_paginated_api(
            self._client.blocks.children.list,
            block_id=block_id,
        )
