"""Value types shared by the request builder, API client and downloader."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

MAX_REFERENCE_BYTES = 10 * 1024 * 1024
REFERENCE_MIME_TYPES = {
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "webp": "image/webp",
}


@dataclass(frozen=True)
class ReferenceImage:
    """A local character reference image, loaded and validated.

    Attributes:
        path: Path the image was read from.
        data: Raw file content.
        mime_type: Content type derived from the file extension.
    """

    path: Path
    data: bytes
    mime_type: str

    @property
    def filename(self) -> str:
        return self.path.name


@dataclass(frozen=True)
class GenerationRequest:
    """Everything needed to build one generation call.

    Optional fields left as None are omitted from the outgoing payload.
    """

    prompt: str
    output: str | None = None
    aspect_ratio: str = "1x1"
    rendering_speed: str = "TURBO"
    num_images: int = 1
    style: str | None = None
    negative_prompt: str | None = None
    seed: int | None = None
    magic_prompt: str | None = None
    reference_image: ReferenceImage | None = None


@dataclass(frozen=True)
class ImageEntry:
    url: str
    prompt: str | None = None
    seed: int | None = None
    resolution: str | None = None
