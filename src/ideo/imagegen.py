"""Submit a generation request and persist the returned images."""

from __future__ import annotations

import http.client
import sys
import time
import urllib.request
from collections.abc import Iterator, Mapping
from datetime import datetime
from pathlib import Path
from pprint import pprint
from typing import Any

from . import exif
from .env import DEFAULT_API_URL
from .errors import OutputError, TransportError
from .ideogram import submit_generation
from .models import GenerationRequest, ImageEntry
from .payload import build_payload, describe_payload

TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"


def generate_images(
    request: GenerationRequest,
    *,
    api_key: str,
    url: str = DEFAULT_API_URL,
    add_prompt_metadata: bool = False,
    now: datetime | None = None,
) -> Iterator[str]:
    """Call the API, then download and save every returned image.

    Destinations are yielded as the user will see them, one at a time as each
    file is written, so a failure on a later entry leaves earlier files on disk
    and already reported.
    """

    payload = build_payload(request)

    print("Generating image...", file=sys.stderr)
    _emit_request_info(url, describe_payload(payload))
    start_time = time.perf_counter()

    entries = submit_generation(payload, api_key=api_key, url=url)

    _emit_elapsed(time.perf_counter() - start_time)

    timestamp = run_timestamp(now)
    count = len(entries)
    for index, entry in enumerate(entries):
        dest = destination_path(request.output, count, index, timestamp)
        path = Path(dest)
        _prepare_parent(path)
        data = _download(entry.url)
        _write(path, data)
        if add_prompt_metadata:
            _apply_exif_metadata(path, request, entry)
        print(f"Saved: {dest}", file=sys.stderr)
        yield dest


def run_timestamp(now: datetime | None = None) -> str:
    """Format the base timestamp shared by every default filename of one run."""

    return (now or datetime.now()).strftime(TIMESTAMP_FORMAT)


def destination_path(
    output: str | None, count: int, index: int, timestamp: str
) -> str:
    """Resolve where entry ``index`` (0-based) of ``count`` results is saved.

    - output given, single result: the output string unchanged, so ``./x.png``
      is reported back as typed.
    - output given, several results: ``<stem>_<n>.<ext>`` beside the output.
    - no output: ``ideo_<timestamp>.png`` or ``ideo_<timestamp>_<n>.png``.
    """
    if output is not None:
        if count == 1:
            return output
        path = Path(output)
        return str(path.parent / f"{path.stem}_{index + 1}{path.suffix}")

    if count == 1:
        return f"ideo_{timestamp}.png"
    return f"ideo_{timestamp}_{index + 1}.png"


def _prepare_parent(dest: Path) -> None:
    parent = dest.parent
    if parent == Path("."):
        return
    try:
        parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise OutputError(f"could not create directory {parent}: {exc}") from exc


def _download(url: str) -> bytes:
    try:
        with urllib.request.urlopen(url) as response:
            return response.read()
    except (OSError, http.client.HTTPException, ValueError) as exc:
        raise TransportError(f"failed to download image: {exc}") from exc


def _write(dest: Path, data: bytes) -> None:
    try:
        dest.write_bytes(data)
    except OSError as exc:
        raise OutputError(f"failed to write {dest}: {exc}") from exc


def _emit_request_info(url: str, summary: Mapping[str, Any]) -> None:
    print("Request:", file=sys.stderr)
    pprint({"endpoint": url, **summary}, stream=sys.stderr)


def _emit_elapsed(elapsed_seconds: float) -> None:
    formatted = _format_elapsed(elapsed_seconds)
    print(f"Elapsed time: {formatted}", file=sys.stderr)


def _format_elapsed(elapsed_seconds: float) -> str:
    hours, remainder = divmod(elapsed_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    return f"{int(hours)}:{int(minutes):02d}:{seconds:06.3f}"


def _apply_exif_metadata(
    path: Path, request: GenerationRequest, entry: ImageEntry
) -> None:
    prompt = (entry.prompt or request.prompt).strip()
    if not prompt:
        return
    success = exif.set_prompt_metadata(path, prompt=prompt)
    if not success:
        print(f"warning: unable to update EXIF data for {path}", file=sys.stderr)


__all__ = ["destination_path", "generate_images", "run_timestamp"]
