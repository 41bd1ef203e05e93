"""Command-line options parser for ideo.

Usage:
- build_parser() -> argparse.ArgumentParser
- parse_args(argv, parser=None) -> ParsedOptions
- resolve_request(parsed) -> GenerationRequest

Rules enforced:
- The prompt is the single positional argument.
- -n/--num must be a positive integer and --seed a non-negative integer.
- --character-ref must name a .jpg, .jpeg, .png or .webp file (any case) of at
  most 10 MiB. The file is read when the request is resolved, not while
  parsing, so the check happens after the API key lookup and before any
  network call.
- Every other value is passed through untouched; the API decides whether an
  aspect ratio or style is legal.
"""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

from dotenv import load_dotenv

from .env import add_prompt_enabled
from .errors import ValidationError
from .models import (
    MAX_REFERENCE_BYTES,
    REFERENCE_MIME_TYPES,
    GenerationRequest,
    ReferenceImage,
)

_DOTENV_FILE = Path(".env")


def _package_version() -> str:
    try:
        return version("ideo")
    except PackageNotFoundError:  # running from a source checkout
        return "unknown"


@dataclass(frozen=True)
class ParsedOptions:
    """Structured result of parsing command-line arguments.

    Attributes:
        prompt: Text prompt sent to the API.
        output: Destination path requested with -o/--output, if any.
        aspect_ratio: Aspect ratio such as 1x1 or 16x9.
        rendering_speed: FLASH, TURBO, DEFAULT or QUALITY.
        num_images: Number of images to request.
        style: Style type, if given.
        negative_prompt: Negative prompt, if given.
        seed: Seed for reproducible output, if given.
        magic_prompt: Magic prompt mode, if given.
        character_ref: Path of the character reference image, if given.
        add_prompt_metadata: None when the flag was not used, so the
            IDEO_ADD_PROMPT environment default applies.
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
    character_ref: str | None = None
    add_prompt_metadata: bool | None = None


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}") from exc
    if number < 1:
        raise argparse.ArgumentTypeError("must be at least 1")
    return number


def _non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}") from exc
    if number < 0:
        raise argparse.ArgumentTypeError("must not be negative")
    return number


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""

    parser = argparse.ArgumentParser(
        prog="ideo",
        description=(
            "Generate images with the Ideogram v3 API. File paths are printed "
            "to stdout (one per line); status messages go to stderr."
        ),
    )
    parser.add_argument("prompt", help="the prompt to generate an image from")
    parser.add_argument(
        "-o",
        "--output",
        dest="output",
        help="output file path (default: ideo_<timestamp>.png)",
    )
    parser.add_argument(
        "-a",
        "--aspect",
        dest="aspect_ratio",
        default="1x1",
        help="aspect ratio: 1x1, 16x9, 9x16, 4x3, 3x4, etc.",
    )
    parser.add_argument(
        "-s",
        "--speed",
        dest="rendering_speed",
        default="TURBO",
        help="rendering speed: FLASH, TURBO, DEFAULT, QUALITY",
    )
    parser.add_argument(
        "-n",
        "--num",
        dest="num_images",
        type=_positive_int,
        default=1,
        help="number of images to generate",
    )
    parser.add_argument(
        "--style",
        dest="style",
        help="style type: AUTO, GENERAL, REALISTIC, DESIGN, FICTION",
    )
    parser.add_argument(
        "--negative",
        dest="negative_prompt",
        help="negative prompt: what to exclude from the image",
    )
    parser.add_argument(
        "--seed",
        dest="seed",
        type=_non_negative_int,
        help="random seed for reproducible generation",
    )
    parser.add_argument(
        "--magic-prompt",
        dest="magic_prompt",
        help="magic prompt mode: AUTO, ON, OFF",
    )
    parser.add_argument(
        "--character-ref",
        dest="character_ref",
        metavar="PATH",
        help="character reference image (JPEG, PNG, or WebP; max 10MB)",
    )
    parser.add_argument(
        "--add-prompt",
        dest="add_prompt_metadata",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="store the prompt in the saved image's EXIF metadata",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {_package_version()}"
    )
    return parser


def parse_args(
    argv: list[str],
    *,
    parser: argparse.ArgumentParser | None = None,
) -> ParsedOptions:
    """Parse argv into a ParsedOptions object."""

    load_dotenv(_DOTENV_FILE)  # silently ignore if there is none, assume defaults.

    if parser is None:
        parser = build_parser()

    ns = parser.parse_args(argv)

    return ParsedOptions(
        prompt=ns.prompt,
        output=ns.output,
        aspect_ratio=ns.aspect_ratio,
        rendering_speed=ns.rendering_speed,
        num_images=ns.num_images,
        style=ns.style,
        negative_prompt=ns.negative_prompt,
        seed=ns.seed,
        magic_prompt=ns.magic_prompt,
        character_ref=ns.character_ref,
        add_prompt_metadata=ns.add_prompt_metadata,
    )


def wants_prompt_metadata(parsed: ParsedOptions) -> bool:
    if parsed.add_prompt_metadata is not None:
        return parsed.add_prompt_metadata
    return add_prompt_enabled()


def resolve_request(parsed: ParsedOptions) -> GenerationRequest:
    """Turn parsed options into a GenerationRequest, loading any reference image."""

    reference = None
    if parsed.character_ref is not None:
        reference = load_reference_image(Path(parsed.character_ref))

    return GenerationRequest(
        prompt=parsed.prompt,
        output=parsed.output,
        aspect_ratio=parsed.aspect_ratio,
        rendering_speed=parsed.rendering_speed,
        num_images=parsed.num_images,
        style=parsed.style,
        negative_prompt=parsed.negative_prompt,
        seed=parsed.seed,
        magic_prompt=parsed.magic_prompt,
        reference_image=reference,
    )


def load_reference_image(path: Path) -> ReferenceImage:
    """Read and validate a character reference image.

    The extension is checked before reading; the size limit is checked on the
    bytes actually read.

    Raises:
        ValidationError: unsupported extension, unreadable file, or a file
            larger than 10 MiB.
    """
    extension = path.suffix.lower().lstrip(".")
    mime_type = REFERENCE_MIME_TYPES.get(extension)
    if mime_type is None:
        raise ValidationError(
            "character reference image must be JPEG, PNG, or WebP"
        )

    try:
        data = path.read_bytes()
    except OSError as exc:
        raise ValidationError(f"could not read {path}: {exc}") from exc

    if len(data) > MAX_REFERENCE_BYTES:
        raise ValidationError("character reference image exceeds 10MB limit")

    return ReferenceImage(path=path, data=data, mime_type=mime_type)
