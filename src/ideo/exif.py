from __future__ import annotations

import os
from datetime import datetime
from pathlib import Path
from typing import Any

import piexif  # type: ignore[import-untyped]
from PIL import Image

SOFTWARE = "ideo"
DEFAULT_MODEL = "ideogram-v3"


def set_prompt_metadata(
    image_path: Path | str,
    *,
    prompt: str,
    model: str | None = DEFAULT_MODEL,
    file_time: datetime | None = None,
) -> bool:
    """Write the generation prompt into an image's EXIF metadata.

    Replaces any existing EXIF block with one holding ImageDescription,
    Software and DateTime tags. The description reads
    ``Model: <model> Prompt: <prompt>`` with newlines collapsed to spaces.

    Args:
        image_path: Image file to rewrite in place.
        prompt: Prompt text to store.
        model: Model name recorded ahead of the prompt; omitted when None.
        file_time: Timestamp for the DateTime tag. If None, the file's mtime
            is used.

    Returns:
        bool: True on success, False on failure (including missing file).
    """
    p = Path(image_path)
    if not p.exists():
        return False

    if file_time is None:
        file_time = datetime.fromtimestamp(os.path.getmtime(p))

    description = ""
    if model:
        description += f"Model: {model} "
    description += f"Prompt: {prompt.strip()}"
    description = description.replace("\n", " ")

    zeroth: dict[int, Any] = {
        piexif.ImageIFD.ImageDescription: description.encode("utf-8", errors="ignore"),
        piexif.ImageIFD.Software: SOFTWARE.encode(),
        piexif.ImageIFD.DateTime: file_time.strftime("%Y:%m:%d %H:%M:%S").encode(),
    }
    exif_dict: dict[str, Any] = {
        "0th": zeroth,
        "Exif": {},
        "GPS": {},
        "Interop": {},
        "1st": {},
        "thumbnail": None,
    }

    try:
        with Image.open(p) as img:
            img.load()
            exif_bytes = piexif.dump(exif_dict)
            img.info.pop("exif", None)
            img.save(p, format=img.format, exif=exif_bytes)
        return True
    except Exception:
        return False
