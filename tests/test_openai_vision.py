import asyncio
import base64
import json

import httpx

from snapcaption.adapters.vision import openai_vision
from snapcaption.adapters.vision.openai_vision import OpenAIVision, extract_text
from snapcaption.orchestrator import errors
from snapcaption.orchestrator.contracts import Failure

from tests.fakes import JPEG_BYTES, counting_transport


def _client(status, handler, api_key="sk-test", **kwargs):
    transport, calls = counting_transport(handler)
    client = OpenAIVision(status, api_key=api_key, transport=transport, **kwargs)
    return client, calls


def _ok(text):
    return lambda request: httpx.Response(200, json={"choices": [{"message": {"role": "assistant", "content": text}}]})


def test_missing_credential_makes_no_network_call(status) -> None:
    client, calls = _client(status, _ok("never"), api_key="")
    result = asyncio.run(client.classify(JPEG_BYTES))
    assert isinstance(result, Failure)
    assert result.kind == errors.MISSING_CREDENTIAL
    assert calls == []


def test_none_credential_is_treated_as_missing(status) -> None:
    client, calls = _client(status, _ok("never"), api_key=None)
    result = asyncio.run(client.classify(JPEG_BYTES))
    assert result.kind == errors.MISSING_CREDENTIAL
    assert not client.ready
    assert calls == []


def test_success_returns_message_content(status) -> None:
    client, calls = _client(status, _ok("A cat."))
    assert asyncio.run(client.classify(JPEG_BYTES)) == "A cat."
    assert len(calls) == 1


def test_request_shape_and_auth_header(status) -> None:
    client, calls = _client(status, _ok("A cat."), model="gpt-4-vision", api_url="https://vision.test/v1/chat/completions")
    asyncio.run(client.classify(JPEG_BYTES))

    request = calls[0]
    assert request.method == "POST"
    assert str(request.url) == "https://vision.test/v1/chat/completions"
    assert request.headers["authorization"] == "Bearer sk-test"

    body = json.loads(request.content)
    assert body["model"] == "gpt-4-vision"
    assert len(body["messages"]) == 1
    message = body["messages"][0]
    assert message["role"] == "user"
    text_part, image_part = message["content"]
    assert text_part == {"type": "text", "text": openai_vision.PROMPT}
    assert image_part["type"] == "image_url"
    expected = "data:image/jpeg;base64," + base64.standard_b64encode(JPEG_BYTES).decode()
    assert image_part["image_url"]["url"] == expected
    assert "stream" not in body


def test_missing_choices_falls_back(status) -> None:
    client, _ = _client(status, lambda r: httpx.Response(200, json={"id": "x"}))
    assert asyncio.run(client.classify(JPEG_BYTES)) == "No description found."


def test_empty_content_falls_back(status) -> None:
    client, _ = _client(status, _ok(""))
    assert asyncio.run(client.classify(JPEG_BYTES)) == errors.NO_DESCRIPTION


def test_server_error_is_remote_error_without_retry(status) -> None:
    client, calls = _client(status, lambda r: httpx.Response(500, text="upstream exploded"))
    result = asyncio.run(client.classify(JPEG_BYTES))
    assert result.kind == errors.REMOTE_ERROR
    assert result.status_code == 500
    assert result.message == "Vision API error: 500"
    assert len(calls) == 1


def test_unauthorized_is_remote_error(status) -> None:
    client, _ = _client(status, lambda r: httpx.Response(401, json={"error": {"message": "bad key"}}))
    result = asyncio.run(client.classify(JPEG_BYTES))
    assert result.kind == errors.REMOTE_ERROR
    assert result.status_code == 401


def test_connect_error_is_transport_error(status) -> None:
    def boom(request):
        raise httpx.ConnectError("name resolution failed", request=request)

    client, calls = _client(status, boom)
    result = asyncio.run(client.classify(JPEG_BYTES))
    assert result.kind == errors.TRANSPORT_ERROR
    assert len(calls) == 1


def test_timeout_is_transport_error(status) -> None:
    def slow(request):
        raise httpx.ReadTimeout("timed out", request=request)

    client, _ = _client(status, slow)
    assert asyncio.run(client.classify(JPEG_BYTES)).kind == errors.TRANSPORT_ERROR


def test_malformed_json_is_transport_error(status) -> None:
    client, _ = _client(status, lambda r: httpx.Response(200, content=b"<html>not json</html>"))
    result = asyncio.run(client.classify(JPEG_BYTES))
    assert result.kind == errors.TRANSPORT_ERROR
    assert result.message == "Failed to classify image."


def test_extract_text_tolerates_odd_envelopes() -> None:
    assert extract_text({"choices": []}) == errors.NO_DESCRIPTION
    assert extract_text({"choices": [{"message": {}}]}) == errors.NO_DESCRIPTION
    assert extract_text({"choices": [{"message": {"content": None}}]}) == errors.NO_DESCRIPTION
    assert extract_text([1, 2]) == errors.NO_DESCRIPTION
    assert extract_text({"choices": [{"message": {"content": "A dog."}}, {"message": {"content": "B"}}]}) == "A dog."


def test_invalid_url_is_transport_error(status) -> None:
    client, calls = _client(status, _ok("never"), api_url="http://[::1")
    result = asyncio.run(client.classify(JPEG_BYTES))
    assert result.kind == errors.TRANSPORT_ERROR
    assert calls == []


def test_timeout_only_passed_when_configured(status) -> None:
    default, _ = _client(status, _ok("A cat."))
    assert "timeout" not in default._client_kwargs()

    explicit, _ = _client(status, _ok("A cat."), timeout=12.5)
    assert explicit._client_kwargs()["timeout"] == 12.5
