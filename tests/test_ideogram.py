import json

import pytest
import requests

from ideo import ideogram
from ideo.errors import ApiError, DecodeError, TransportError
from ideo.models import ImageEntry
from ideo.payload import JsonPayload, MultipartPayload


class _FakeHttpResponse:
    def __init__(self, status_code: int, text: str, reason: str = ""):
        self.status_code = status_code
        self.text = text
        self.reason = reason


@pytest.fixture()
def fake_post(monkeypatch):
    calls = []
    queued = []

    def post(url, **kwargs):
        calls.append((url, kwargs))
        result = queued.pop(0)
        if isinstance(result, Exception):
            raise result
        return result

    monkeypatch.setattr(ideogram.requests, "post", post)
    return calls, queued


def test_submit_json_payload(fake_post):
    calls, queued = fake_post
    queued.append(
        _FakeHttpResponse(
            200,
            json.dumps(
                {
                    "created": "2025-01-01T00:00:00Z",
                    "data": [
                        {
                            "url": "https://cdn.example.com/a.png",
                            "prompt": "expanded prompt",
                            "seed": 5,
                            "resolution": "1024x1024",
                            "is_image_safe": True,
                        }
                    ],
                }
            ),
        )
    )

    payload = JsonPayload(body={"prompt": "p", "num_images": 1})
    entries = ideogram.submit_generation(
        payload, api_key="secret", url="https://example.com/generate"
    )

    assert entries == [
        ImageEntry(
            url="https://cdn.example.com/a.png",
            prompt="expanded prompt",
            seed=5,
            resolution="1024x1024",
        )
    ]
    url, kwargs = calls[0]
    assert url == "https://example.com/generate"
    assert kwargs["headers"] == {"Api-Key": "secret"}
    assert kwargs["json"] == {"prompt": "p", "num_images": 1}
    assert "files" not in kwargs


def test_submit_multipart_payload(fake_post):
    calls, queued = fake_post
    queued.append(_FakeHttpResponse(201, '{"data": []}'))

    payload = MultipartPayload(
        fields={"prompt": "p", "num_images": "2"},
        files={"character_reference_images": ("a.png", b"img", "image/png")},
    )
    assert ideogram.submit_generation(payload, api_key="k") == []

    url, kwargs = calls[0]
    assert url == ideogram.DEFAULT_API_URL
    assert kwargs["data"] == {"prompt": "p", "num_images": "2"}
    assert kwargs["files"] == {
        "character_reference_images": ("a.png", b"img", "image/png")
    }
    assert "json" not in kwargs


def test_submit_transport_failure(fake_post):
    _, queued = fake_post
    queued.append(requests.ConnectionError("name resolution failed"))
    with pytest.raises(TransportError, match="request failed: name resolution failed"):
        ideogram.submit_generation(JsonPayload(body={}), api_key="k")


def test_submit_api_error_with_json_body(fake_post):
    _, queued = fake_post
    queued.append(
        _FakeHttpResponse(
            400, '{"error": "bad aspect", "code": 17}', reason="Bad Request"
        )
    )
    with pytest.raises(ApiError) as excinfo:
        ideogram.submit_generation(JsonPayload(body={}), api_key="k")

    assert str(excinfo.value) == "API returned HTTP 400 Bad Request"
    assert excinfo.value.detail == '{\n  "error": "bad aspect",\n  "code": 17\n}'


def test_submit_api_error_with_text_body(fake_post):
    _, queued = fake_post
    queued.append(_FakeHttpResponse(502, "<html>upstream down</html>"))
    with pytest.raises(ApiError) as excinfo:
        ideogram.submit_generation(JsonPayload(body={}), api_key="k")

    assert excinfo.value.status == "502"
    assert excinfo.value.detail == "<html>upstream down</html>"


@pytest.mark.parametrize(
    "body",
    [
        "not json",
        "[]",
        '{"images": []}',
        '{"data": {"url": "https://x"}}',
        '{"data": [{"link": "https://x"}]}',
        '{"data": [{"url": null}]}',
    ],
)
def test_decode_response_rejects_bad_bodies(body):
    with pytest.raises(DecodeError, match="failed to parse API response"):
        ideogram.decode_response(body)


def test_decode_response_keeps_order_and_ignores_odd_extras():
    entries = ideogram.decode_response(
        json.dumps(
            {
                "data": [
                    {"url": "https://x/1", "seed": "not-a-number"},
                    {"url": "https://x/2", "seed": True},
                    {"url": "https://x/3"},
                ]
            }
        )
    )
    assert [entry.url for entry in entries] == ["https://x/1", "https://x/2", "https://x/3"]
    assert all(entry.seed is None for entry in entries)


def test_format_error_body_passthrough():
    assert ideogram.format_error_body("") == ""
    assert ideogram.format_error_body('"quoted"') == '"quoted"'
