"""Tests for the Gemini REST client (HTTP session mocked)."""
from unittest.mock import MagicMock

import pytest
import requests

from tests.helpers import TEST_API_KEY, gemini_reply, mock_response
from core.config import AppSettings
from core.errors import ConfigurationError, RemoteRequestError
from core.models import FilePayload, TextContent
from extraction.gemini import GeminiClient, GeminiConfig, extract_candidate_text
from extraction.prompts import build_request


def _client_returning(resp):
    session = MagicMock()
    session.post.return_value = resp
    return GeminiClient(GeminiConfig(api_key=TEST_API_KEY), session=session), session


def test_text_request_serializes_one_text_part(client):
    body = client.build_body(build_request(TextContent("The capital of France is Paris."), 5))
    parts = body["contents"][0]["parts"]
    assert len(body["contents"]) == 1
    assert len(parts) == 1
    assert set(parts[0]) == {"text"}
    assert body["generationConfig"] == {
        "temperature": 0.7,
        "topK": 40,
        "topP": 0.95,
        "maxOutputTokens": 8192,
    }


def test_file_request_serializes_text_then_inline_data(client):
    payload = FilePayload(data=b"\x89PNG", mime_type="image/png", file_name="a.png", size_bytes=4, is_image=True)
    parts = client.build_body(build_request(payload, 5))["contents"][0]["parts"]
    assert len(parts) == 2
    assert "text" in parts[0]
    assert parts[1] == {"inline_data": {"mime_type": "image/png", "data": "iVBORw=="}}


def test_generate_posts_to_endpoint_with_key(client, http_session):
    http_session.post.return_value = mock_response(200, gemini_reply('{"quiz": []}'))
    text = client.generate(build_request(TextContent("The capital of France is Paris."), 5))

    assert text == '{"quiz": []}'
    assert http_session.post.call_count == 1
    args, kwargs = http_session.post.call_args
    assert args[0] == "https://generativelanguage.googleapis.com/v1beta/models/gemini-2.5-flash:generateContent"
    assert kwargs["params"] == {"key": TEST_API_KEY}
    assert kwargs["timeout"] == 120.0
    assert "contents" in kwargs["json"]


def test_config_from_settings():
    cfg = GeminiConfig.from_settings(AppSettings(api_key=TEST_API_KEY, model_name="gemini-pro", temperature=0.2))
    assert cfg.model_name == "gemini-pro"
    assert cfg.temperature == 0.2
    assert cfg.top_k == 40


@pytest.mark.parametrize("key", ["", "   ", "your_actual_api_key_here", "sk-not-a-gemini-key"])
def test_bad_keys_rejected_at_construction(key):
    session = MagicMock()
    with pytest.raises(ConfigurationError):
        GeminiClient(GeminiConfig(api_key=key), session=session)
    session.post.assert_not_called()


def _request():
    return build_request(TextContent("The capital of France is Paris."), 5)


def test_invalid_key_response_is_configuration_error():
    payload = {"error": {"code": 400, "message": "API key not valid. Please pass a valid API key.",
                         "details": [{"reason": "API_KEY_INVALID"}]}}
    client, _ = _client_returning(mock_response(400, payload))
    with pytest.raises(ConfigurationError) as exc:
        client.generate(_request())
    assert "Invalid API key" in exc.value.user_message


def test_forbidden_is_configuration_error():
    client, _ = _client_returning(mock_response(403, {"error": {"message": "Caller lacks access"}}))
    with pytest.raises(ConfigurationError):
        client.generate(_request())


@pytest.mark.parametrize("status, message, kind", [
    (429, "Resource has been exhausted", RemoteRequestError.RATE_LIMITED),
    (400, "Request contains an invalid argument.", RemoteRequestError.BAD_REQUEST),
    (400, "The document has no pages.", RemoteRequestError.DOCUMENT_REJECTED),
    (500, "Unable to process input file", RemoteRequestError.DOCUMENT_REJECTED),
    (503, "The model is overloaded.", RemoteRequestError.SERVER),
])
def test_http_errors_mapped_to_kinds(status, message, kind):
    client, _ = _client_returning(mock_response(status, {"error": {"code": status, "message": message}}))
    with pytest.raises(RemoteRequestError) as exc:
        client.generate(_request())
    assert exc.value.kind == kind
    assert exc.value.status_code == status


def test_non_json_error_body():
    client, _ = _client_returning(mock_response(502, text="Bad Gateway"))
    with pytest.raises(RemoteRequestError) as exc:
        client.generate(_request())
    assert exc.value.kind == RemoteRequestError.SERVER


def test_network_failure():
    session = MagicMock()
    session.post.side_effect = requests.ConnectionError("connection refused")
    client = GeminiClient(GeminiConfig(api_key=TEST_API_KEY), session=session)
    with pytest.raises(RemoteRequestError) as exc:
        client.generate(_request())
    assert exc.value.kind == RemoteRequestError.NETWORK
    assert "internet connection" in exc.value.user_message


def test_timeout():
    session = MagicMock()
    session.post.side_effect = requests.Timeout("read timed out")
    client = GeminiClient(GeminiConfig(api_key=TEST_API_KEY, timeout_s=5), session=session)
    with pytest.raises(RemoteRequestError) as exc:
        client.generate(_request())
    assert exc.value.kind == RemoteRequestError.TIMEOUT


def test_success_body_not_json():
    client, _ = _client_returning(mock_response(200, text="<html>"))
    with pytest.raises(RemoteRequestError) as exc:
        client.generate(_request())
    assert exc.value.kind == RemoteRequestError.SERVER


def test_candidate_text_joins_parts():
    payload = {"candidates": [{"content": {"parts": [{"text": '{"quiz": '}, {"text": "[]}"}]}}]}
    assert extract_candidate_text(payload) == '{"quiz": []}'


def test_no_candidates_returns_empty_text():
    assert extract_candidate_text({"candidates": []}) == ""
    assert extract_candidate_text({}) == ""


def test_blocked_prompt():
    with pytest.raises(RemoteRequestError) as exc:
        extract_candidate_text({"promptFeedback": {"blockReason": "SAFETY"}})
    assert exc.value.kind == RemoteRequestError.BLOCKED
