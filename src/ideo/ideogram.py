"""HTTP client for the Ideogram v3 generate endpoint."""

from __future__ import annotations

import json
from typing import Any

import requests

from .env import DEFAULT_API_URL
from .errors import ApiError, DecodeError, TransportError
from .models import ImageEntry
from .payload import JsonPayload, Payload


def submit_generation(
    payload: Payload,
    *,
    api_key: str,
    url: str = DEFAULT_API_URL,
) -> list[ImageEntry]:
    """POST one generation request and decode the returned entries.

    Raises:
        TransportError: the request never produced an HTTP response.
        ApiError: the endpoint answered with a non-2xx status.
        DecodeError: the success body is not the expected JSON shape.
    """
    headers = {"Api-Key": api_key}

    try:
        if isinstance(payload, JsonPayload):
            response = requests.post(url, json=payload.body, headers=headers)
        else:
            response = requests.post(
                url, data=payload.fields, files=payload.files, headers=headers
            )
    except requests.RequestException as exc:
        raise TransportError(f"request failed: {exc}") from exc

    if not 200 <= response.status_code < 300:
        raise ApiError(_format_status(response), format_error_body(response.text))

    return decode_response(response.text)


def _format_status(response: requests.Response) -> str:
    reason = (response.reason or "").strip()
    if reason:
        return f"{response.status_code} {reason}"
    return str(response.status_code)


def format_error_body(text: str) -> str:
    """Pretty-print a JSON error body, or return non-JSON text unchanged."""

    try:
        parsed = json.loads(text)
    except ValueError:
        return text
    return json.dumps(parsed, indent=2, ensure_ascii=False)


def decode_response(text: str) -> list[ImageEntry]:
    """Decode ``{"data": [{"url": ...}, ...]}`` into ImageEntry values, in order."""

    try:
        payload = json.loads(text)
    except ValueError as exc:
        raise DecodeError(f"failed to parse API response: {exc}") from exc

    if not isinstance(payload, dict) or not isinstance(payload.get("data"), list):
        raise DecodeError("failed to parse API response: missing field `data`")

    entries: list[ImageEntry] = []
    for index, item in enumerate(payload["data"]):
        if not isinstance(item, dict) or not isinstance(item.get("url"), str):
            raise DecodeError(
                f"failed to parse API response: data[{index}] has no `url` string"
            )
        entries.append(
            ImageEntry(
                url=item["url"],
                prompt=_optional(item, "prompt", str),
                seed=_optional(item, "seed", int),
                resolution=_optional(item, "resolution", str),
            )
        )
    return entries


def _optional(item: dict[str, Any], key: str, kind: type) -> Any:
    value = item.get(key)
    if isinstance(value, kind) and not isinstance(value, bool):
        return value
    return None
