"""
clipnote.cli
============

Command-line front end: collect a YouTube URL, an output format and an
optional provider/model/custom prompt, run the pipeline, print the note path.

Examples
--------
    clipnote https://youtu.be/abc123 --format brief
    clipnote https://youtu.be/abc123 --provider Groq
    clipnote https://youtu.be/abc123 --format custom --prompt "Summarize __VIDEO_TITLE__"
    clipnote --list-providers
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from typing import List, Optional

from clipnote import config
from clipnote.llm import LLMError, OutputFormat, build_ai_service
from clipnote.pipeline import process_video
from clipnote.youtube import YouTubeError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="clipnote",
        description="Turn a YouTube video into a markdown note using Gemini or Groq.",
    )
    parser.add_argument("url", nargs="?", help="YouTube video URL")
    parser.add_argument(
        "--format",
        dest="fmt",
        default=OutputFormat.DETAILED_GUIDE.value,
        choices=[f.value for f in OutputFormat],
        help="Output format (default: detailed-guide)",
    )
    parser.add_argument("--provider", help="Use only this provider (no fallback)")
    parser.add_argument("--model", help="One-off model override for --provider")
    parser.add_argument("--prompt", help="Custom prompt body (with --format custom)")
    parser.add_argument("--output", help="Output directory for notes")
    parser.add_argument(
        "--list-providers",
        action="store_true",
        help="List configured providers and their known models",
    )
    return parser


def _list_providers(settings: config.Settings) -> None:
    service = build_ai_service(settings)
    for name in service.get_provider_names():
        models = ", ".join(service.get_provider_models(name)) or "-"
        print(f"{name}: {models}")


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = config.Settings.from_env()
    if args.output:
        settings = config.Settings(
            api_keys=settings.api_keys,
            custom_prompts=settings.custom_prompts,
            output_path=args.output,
        )

    try:
        if args.list_providers:
            _list_providers(settings)
            return 0

        if not args.url:
            parser.error("a YouTube URL is required")

        if args.model and not args.provider:
            parser.error("--model requires --provider")

        path = asyncio.run(
            process_video(
                args.url,
                fmt=args.fmt,
                settings=settings,
                provider_name=args.provider,
                model=args.model,
                custom_prompt=args.prompt,
            )
        )
    except (LLMError, YouTubeError) as e:
        print(f"❌ {type(e).__name__}: {e}", file=sys.stderr)
        return 1

    print(f"✅ Note saved: {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
