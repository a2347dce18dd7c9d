from __future__ import annotations

"""
Integration tests for the Gemini Network Client.

Utilizes mocking of `requests.post` to verify request assembly, status
code mapping and the non-raising `send_prompt` facade without making
real network calls.
"""

from unittest.mock import MagicMock, patch

import pytest
import requests

from plantocode.domain.gemini_models import (
    GeminiApiError,
    GeminiConfigError,
    GeminiRateLimitError,
    GeminiRequestOptions,
    GeminiResponseError,
    GeminiServerError,
)
from plantocode.infra.network import (
    GeminiClient,
    client_from_env,
    options_from_config,
    send_prompt,
)

OK_BODY = {
    "candidates": [{"content": {"parts": [{"text": "src/main.py"}]}, "finishReason": "STOP"}],
    "usageMetadata": {"promptTokenCount": 10, "candidatesTokenCount": 3, "totalTokenCount": 13},
}


def _response(status: int = 200, body=None, text: str = "") -> MagicMock:
    mock_response = MagicMock()
    mock_response.status_code = status
    mock_response.ok = 200 <= status < 300
    mock_response.text = text
    if body is None:
        mock_response.json.side_effect = ValueError("no json")
    else:
        mock_response.json.return_value = body
    return mock_response

# -----------------------------------------------------------------------------
# REQUEST ASSEMBLY
# -----------------------------------------------------------------------------

def test_send_request_posts_generate_content() -> None:
    client = GeminiClient(api_key="secret", base_url="https://api.test/v1beta/")
    options = GeminiRequestOptions(model="gemini-2.5-pro", system_prompt="sys", timeout=5)

    with patch("requests.post", return_value=_response(body=OK_BODY)) as mock_post:
        result = client.send_request("find files", options)

    assert result.text == "src/main.py"
    assert result.usage.total_tokens == 13

    args, kwargs = mock_post.call_args
    assert args[0] == "https://api.test/v1beta/models/gemini-2.5-pro:generateContent"
    assert kwargs["params"] == {"key": "secret"}
    assert kwargs["timeout"] == 5
    assert kwargs["json"]["systemInstruction"] == {"parts": [{"text": "sys"}]}
    assert kwargs["headers"]["Content-Type"] == "application/json"


def test_session_is_used_when_provided() -> None:
    session = MagicMock()
    session.post.return_value = _response(body=OK_BODY)
    client = GeminiClient(api_key="k", session=session)

    with patch("requests.post") as mock_post:
        client.send_request("hi")

    session.post.assert_called_once()
    mock_post.assert_not_called()


def test_missing_api_key_is_rejected() -> None:
    with pytest.raises(GeminiConfigError):
        GeminiClient(api_key="")


def test_empty_prompt_is_rejected() -> None:
    with patch("requests.post") as mock_post:
        with pytest.raises(GeminiConfigError):
            GeminiClient(api_key="k").send_request("")
    mock_post.assert_not_called()

# -----------------------------------------------------------------------------
# ERROR MAPPING
# -----------------------------------------------------------------------------

@pytest.mark.parametrize(
    "status, error_type",
    [(429, GeminiRateLimitError), (500, GeminiServerError), (503, GeminiServerError), (400, GeminiApiError)],
)
def test_http_status_mapping(status: int, error_type: type) -> None:
    body_text = "x" * 400

    with patch("requests.post", return_value=_response(status, text=body_text)):
        with pytest.raises(error_type) as exc_info:
            GeminiClient(api_key="k").send_request("hi")

    assert exc_info.value.status_code == status
    assert len(exc_info.value.body) == 150


def test_transport_errors_become_api_errors() -> None:
    with patch("requests.post", side_effect=requests.exceptions.ConnectionError("down")):
        with pytest.raises(GeminiApiError) as exc_info:
            GeminiClient(api_key="k").send_request("hi")

    assert exc_info.value.status_code is None


def test_timeout_becomes_api_error() -> None:
    with patch("requests.post", side_effect=requests.exceptions.Timeout()):
        with pytest.raises(GeminiApiError, match="timed out"):
            GeminiClient(api_key="k").send_request("hi")


def test_invalid_json_body() -> None:
    with patch("requests.post", return_value=_response(200, body=None)):
        with pytest.raises(GeminiResponseError):
            GeminiClient(api_key="k").send_request("hi")


def test_wrong_shape_body() -> None:
    with patch("requests.post", return_value=_response(200, body={"candidates": []})):
        with pytest.raises(GeminiResponseError):
            GeminiClient(api_key="k").send_request("hi")

# -----------------------------------------------------------------------------
# FACTORIES & FACADE
# -----------------------------------------------------------------------------

def test_client_from_env_reads_key() -> None:
    with pytest.raises(GeminiConfigError):
        client_from_env({})

    assert isinstance(client_from_env({"GEMINI_API_KEY": "abc"}), GeminiClient)


def test_options_from_config(mock_config_dict) -> None:
    options = options_from_config(mock_config_dict, system_prompt="sys")

    assert options.model == "gemini-2.0-flash"
    assert options.max_output_tokens == 1024
    assert options.temperature == 0.2
    assert options.top_k == 20
    assert options.timeout == 30.0
    assert options.system_prompt == "sys"
    assert options_from_config(mock_config_dict, model="other").model == "other"


def test_send_prompt_success() -> None:
    client = GeminiClient(api_key="k")

    with patch("requests.post", return_value=_response(body=OK_BODY)):
        result = send_prompt("hi", client=client)

    assert result.is_success is True
    assert result.data == "src/main.py"


def test_send_prompt_reports_failures() -> None:
    client = GeminiClient(api_key="k")

    with patch("requests.post", return_value=_response(429, text="quota")):
        result = send_prompt("hi", client=client)

    assert result.is_success is False
    assert result.data is None
    assert "rate limit" in result.message


def test_send_prompt_without_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)

    result = send_prompt("hi")

    assert result.is_success is False
    assert "GEMINI_API_KEY" in result.message
