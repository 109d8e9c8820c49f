import json
from unittest.mock import MagicMock, patch

import pytest
import requests

from kalamitra.errors import TransportError
from kalamitra.llm.client import GeminiClient, response_text


def _client():
    return GeminiClient(api_key="k", base_url="https://example.test/v1beta/", timeout=5)


def _response(status_code=200, payload=None, text=""):
    response = MagicMock()
    response.status_code = status_code
    response.text = text
    response.json.return_value = payload if payload is not None else {}
    return response


def test_posts_generate_content():
    client = _client()
    with patch.object(client.session, "post", return_value=_response(payload={"candidates": []})) as post:
        data = client.generate_content(
            model="gemini-2.5-flash",
            contents=[{"role": "user", "parts": [{"text": "hi"}]}],
            system_instruction="be kind",
            generation_config={"responseMimeType": "application/json"},
        )

    assert data == {"candidates": []}
    args, kwargs = post.call_args
    assert args[0] == "https://example.test/v1beta/models/gemini-2.5-flash:generateContent"
    assert kwargs["headers"]["x-goog-api-key"] == "k"
    assert kwargs["timeout"] == 5
    body = json.loads(kwargs["data"])
    assert body["systemInstruction"] == {"parts": [{"text": "be kind"}]}
    assert body["generationConfig"] == {"responseMimeType": "application/json"}


def test_missing_api_key():
    client = GeminiClient(api_key="", base_url="https://example.test", timeout=5)
    with patch.object(client.session, "post") as post:
        with pytest.raises(TransportError, match="GEMINI_API_KEY"):
            client.generate_content(model="m", contents=[])
    post.assert_not_called()


def test_network_error_wrapped():
    client = _client()
    with patch.object(client.session, "post", side_effect=requests.ConnectionError("refused")):
        with pytest.raises(TransportError, match="refused"):
            client.generate_content(model="m", contents=[])


def test_http_error_wrapped():
    client = _client()
    with patch.object(client.session, "post", return_value=_response(429, text="quota exceeded")):
        with pytest.raises(TransportError, match="429: quota exceeded"):
            client.generate_content(model="m", contents=[])


def test_non_json_body_wrapped():
    client = _client()
    response = _response()
    response.json.side_effect = ValueError("Expecting value")
    with patch.object(client.session, "post", return_value=response):
        with pytest.raises(TransportError, match="Failed to parse"):
            client.generate_content(model="m", contents=[])


def test_response_text_joins_first_candidate_parts():
    raw = {
        "candidates": [
            {"content": {"parts": [{"text": "plan", "thought": True}, {"text": '{"a"'}, {"text": ": 1}"}]}},
            {"content": {"parts": [{"text": "other"}]}},
        ]
    }
    assert response_text(raw) == '{"a": 1}'
    assert response_text({}) == ""
