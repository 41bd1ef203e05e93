"""Build the wire payload for a generation request.

A request without a reference image is sent as a JSON body; a request with
one is sent as multipart/form-data with the image attached under
``character_reference_images``. Optional fields that were not supplied are
left out of either form entirely.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

from .models import GenerationRequest

REFERENCE_FIELD = "character_reference_images"


@dataclass(frozen=True)
class JsonPayload:
    body: dict[str, Any]


@dataclass(frozen=True)
class MultipartPayload:
    """Text fields plus file parts in the shape ``requests`` expects for ``files``."""

    fields: dict[str, str]
    files: dict[str, tuple[str, bytes, str]] = field(default_factory=dict)


Payload = Union[JsonPayload, MultipartPayload]


def _optional_fields(request: GenerationRequest) -> dict[str, Any]:
    candidates = {
        "style_type": request.style,
        "negative_prompt": request.negative_prompt,
        "seed": request.seed,
        "magic_prompt": request.magic_prompt,
    }
    return {key: value for key, value in candidates.items() if value is not None}


def build_json_body(request: GenerationRequest) -> dict[str, Any]:
    body: dict[str, Any] = {
        "prompt": request.prompt,
        "aspect_ratio": request.aspect_ratio,
        "rendering_speed": request.rendering_speed,
        "num_images": request.num_images,
    }
    body.update(_optional_fields(request))
    return body


def build_multipart(request: GenerationRequest) -> MultipartPayload:
    reference = request.reference_image
    if reference is None:
        raise ValueError("multipart payload requires a reference image")

    fields = {key: str(value) for key, value in build_json_body(request).items()}
    files = {
        REFERENCE_FIELD: (reference.filename, reference.data, reference.mime_type)
    }
    return MultipartPayload(fields=fields, files=files)


def build_payload(request: GenerationRequest) -> Payload:
    """Pick the JSON or multipart representation for a request."""

    if request.reference_image is None:
        return JsonPayload(body=build_json_body(request))
    return build_multipart(request)


def describe_payload(payload: Payload) -> dict[str, Any]:
    """Summarize a payload for display, leaving out any binary content."""

    if isinstance(payload, JsonPayload):
        return {"format": "json", "arguments": dict(payload.body)}
    attachments = {
        name: f"{filename} ({mime_type}, {len(data)} bytes)"
        for name, (filename, data, mime_type) in payload.files.items()
    }
    return {
        "format": "multipart",
        "arguments": dict(payload.fields),
        "files": attachments,
    }
