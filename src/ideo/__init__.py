"""ideo package entrypoint.

main() parses command-line options using ideo.options, resolves the API key
and reference image, and streams saved image paths to stdout via
ideo.imagegen. All status output goes to stderr.
"""

from __future__ import annotations

import sys

from .errors import ApiError, IdeoError
from .options import parse_args


def main() -> None:
    """CLI entrypoint: parse argv, run generation, and print saved paths."""

    parsed = parse_args(sys.argv[1:])

    try:
        from . import env
        from . import imagegen as imagegen_module
        from .options import resolve_request, wants_prompt_metadata

        api_key = env.api_key()
        add_prompt_metadata = wants_prompt_metadata(parsed)
        request = resolve_request(parsed)

        for path in imagegen_module.generate_images(
            request,
            api_key=api_key,
            url=env.api_url(),
            add_prompt_metadata=add_prompt_metadata,
        ):
            print(path, flush=True)
    except IdeoError as exc:
        print(f"error: {exc}", file=sys.stderr)
        if isinstance(exc, ApiError) and exc.detail:
            print(exc.detail, file=sys.stderr)
        raise SystemExit(1) from exc
