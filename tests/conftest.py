"""Shared pytest fixtures."""

import pytest

from notion_export.config import Settings
from notion_export.markdown import MarkdownConverter, register_rules

from helpers import FakeNotionClient


@pytest.fixture
def fake_client():
    """Empty fake Notion client; tests fill in pages and blocks."""
    return FakeNotionClient()


@pytest.fixture
def settings():
    """Default settings."""
    return Settings()


@pytest.fixture
def converter(fake_client, settings):
    """Converter with the color-preserving rules installed."""
    return register_rules(MarkdownConverter(fake_client, settings))


@pytest.fixture
def plain_converter(fake_client, settings):
    """Converter without any render rules."""
    return MarkdownConverter(fake_client, settings)
