"""Shared fixtures: settings and a mocked HTTP session."""
from unittest.mock import MagicMock

import pytest

from core.config import AppSettings
from extraction.gemini import GeminiClient, GeminiConfig
from tests.helpers import TEST_API_KEY, gemini_reply, mock_response


@pytest.fixture
def settings():
    return AppSettings(api_key=TEST_API_KEY)


@pytest.fixture
def http_session():
    session = MagicMock()
    session.post.return_value = mock_response(200, gemini_reply('{"quiz": []}'))
    return session


@pytest.fixture
def client(http_session):
    return GeminiClient(GeminiConfig(api_key=TEST_API_KEY), session=http_session)
