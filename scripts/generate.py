#!/usr/bin/env python
"""Run one generation against the configured provider without the HTTP layer."""
from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from genrelay.config import get_settings
from genrelay.exceptions import RelayError
from genrelay.models import MediaStrategy, ScratchFile, TextPart
from genrelay.services.content import build_contents
from genrelay.services.llm import get_provider
from genrelay.services.storage import resolve_mime_type


async def run(args: argparse.Namespace) -> str:
    settings = get_settings()
    provider = get_provider()

    if args.file is None:
        return await provider.generate(args.model or settings.text_model, [TextPart(text=args.prompt)])

    path = Path(args.file)
    scratch = ScratchFile(
        path=path,
        mime_type=resolve_mime_type(args.mime_type, path.name),
        size=path.stat().st_size,
    )
    contents = await build_contents(
        args.prompt,
        scratch,
        MediaStrategy(args.strategy),
        provider,
        inline_max_bytes=settings.inline_max_bytes,
    )
    return await provider.generate(args.model or settings.document_model, contents)


def main() -> None:
    parser = argparse.ArgumentParser(description="Generate text from a prompt and an optional file")
    parser.add_argument("--prompt", required=True)
    parser.add_argument("--file", default=None, help="Local file to attach")
    parser.add_argument("--mime-type", default=None, help="Declared MIME type of --file")
    parser.add_argument("--strategy", choices=[s.value for s in MediaStrategy], default=MediaStrategy.INLINE.value)
    parser.add_argument("--model", default=None)
    args = parser.parse_args()

    try:
        output = asyncio.run(run(args))
    except RelayError as exc:
        print(f"error: {exc.message}", file=sys.stderr)
        sys.exit(1)
    print(output)


if __name__ == "__main__":
    main()
