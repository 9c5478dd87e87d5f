"""Command-line interface for the Accessible Learning Platform.

WHY: Teachers sometimes have a transcript JSON on disk (exported from
AssemblyAI or another service) and just want a caption file, and
operators need a way to start the API server without writing Python.

HOW: argparse with three subcommands. ``captions`` reads a words JSON file
(a bare list of words, or a transcript object with a "words" array),
runs it through a registered formatter and writes the result next to the
input or to --output ("-" for stdout). ``transcribe`` submits a video URL
to AssemblyAI, polls until the job finishes (asyncio.run) and formats the
words the same way. ``serve`` starts uvicorn.

RULES:
- Status messages go to stderr so captions can be piped from stdout
- Malformed input and transcription failures exit with status 1 and a
  one-line message
- --max-words / --max-duration-ms override the chosen preset's bounds
"""

from __future__ import annotations

import argparse
import asyncio
import dataclasses
import json
import logging
import sys
from pathlib import Path
from typing import Any, List, Optional, Tuple

import httpx

from accessible_learning.api.client import (
    AssemblyAIAPIError,
    AssemblyAIClient,
    TranscriptionError,
    TranscriptionTimeoutError,
)
from accessible_learning.api.models import TranscriptStatus
from accessible_learning.captions import (
    PRESETS,
    InvalidInputError,
    render,
    synthesize,
)
from accessible_learning.config import API_HOST, API_PORT
from accessible_learning.formatters import DEFAULT_FORMAT, FORMATTERS


def _status(msg: str) -> None:
    """Print a status message to stderr."""
    print(msg, file=sys.stderr, flush=True)


def _load_words(path: Path) -> List[Any]:
    """Read the word list from a JSON file.

    Raises:
        InvalidInputError: If the file is not JSON or holds no word list.
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise InvalidInputError("{} is not valid JSON: {}".format(path, exc)) from exc

    if isinstance(data, dict):
        data = data.get("words")
    if not isinstance(data, list):
        raise InvalidInputError("{} does not contain a list of words".format(path))
    return data


def _render_captions(args: argparse.Namespace, words: List[Any]) -> Tuple[str, str]:
    """Return (content, suffix) for the requested format and bounds."""
    formatter = FORMATTERS[args.format]()

    overrides = {}
    if args.max_words is not None:
        overrides["max_words_per_cue"] = args.max_words
    if args.max_duration_ms is not None:
        overrides["max_cue_duration_ms"] = args.max_duration_ms or None

    if overrides:
        if args.format not in PRESETS:
            raise ValueError(
                "--max-words and --max-duration-ms do not apply to {}".format(args.format)
            )
        fmt = dataclasses.replace(PRESETS[args.format], **overrides)
        cues = synthesize(
            words,
            max_words_per_cue=fmt.max_words_per_cue,
            max_cue_duration_ms=fmt.max_cue_duration_ms,
        )
        return render(cues, fmt), formatter.suffix

    output = formatter.format(words)[0]
    return output.content, output.suffix


def _run_captions(args: argparse.Namespace) -> int:
    input_path = Path(args.input_file)
    if not input_path.is_file():
        _status("Error: file not found: {}".format(input_path))
        return 1

    try:
        words = _load_words(input_path)
        content, suffix = _render_captions(args, words)
    except ValueError as exc:
        _status("Error: {}".format(exc))
        return 1

    _write_output(content, args.output, input_path.with_name(input_path.stem + suffix), len(words))
    return 0


def _write_output(content: str, output: Optional[str], default_path: Path, word_count: int) -> None:
    """Write captions to --output, stdout ("-") or the default path."""
    if output == "-":
        sys.stdout.write(content)
        return

    output_path = Path(output) if output else default_path
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(content, encoding="utf-8")
    _status("Wrote {} words to {}".format(word_count, output_path))


async def _transcribe(video_url: str, language: Optional[str]) -> TranscriptStatus:
    async with AssemblyAIClient() as client:
        job = await client.submit_transcript(video_url, language_code=language)
        _status("Submitted transcript {}".format(job.id))
        return await client.poll_until_complete(
            job.id, on_status=lambda s: _status("  Status: {}".format(s))
        )


def _run_transcribe(args: argparse.Namespace) -> int:
    formatter = FORMATTERS[args.format]()
    try:
        job = asyncio.run(_transcribe(args.video_url, args.language))
        words = job.caption_words()
        output = formatter.format(words)[0]
    except (
        ValueError,
        AssemblyAIAPIError,
        TranscriptionError,
        TranscriptionTimeoutError,
        httpx.HTTPError,
    ) as exc:
        _status("Error: {}".format(exc))
        return 1

    _write_output(output.content, args.output, Path(job.id + output.suffix), len(words))
    return 0


def _run_serve(args: argparse.Namespace) -> int:
    from accessible_learning.server.app import run_api

    run_api(host=args.host, port=args.port)
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="accessible_learning",
        description="Caption tools and API server for the Accessible Learning Platform.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    captions = subparsers.add_parser(
        "captions",
        help="Convert a word-timestamp JSON file into captions.",
    )
    captions.add_argument(
        "input_file",
        help="JSON file: a list of {text, start, end} words or a transcript with 'words'.",
    )
    captions.add_argument(
        "--format",
        default=DEFAULT_FORMAT,
        choices=sorted(FORMATTERS.keys()),
        help="Output format (default: %(default)s).",
    )
    captions.add_argument(
        "--output",
        default=None,
        help="Output path, or '-' for stdout (default: next to the input file).",
    )
    captions.add_argument(
        "--max-words",
        type=int,
        default=None,
        help="Maximum words per cue (overrides the format preset).",
    )
    captions.add_argument(
        "--max-duration-ms",
        type=int,
        default=None,
        help="Maximum cue duration in ms; 0 disables the bound (overrides the preset).",
    )
    captions.set_defaults(handler=_run_captions)

    transcribe = subparsers.add_parser(
        "transcribe",
        help="Transcribe a video URL with AssemblyAI and write captions.",
    )
    transcribe.add_argument("video_url", help="Publicly reachable URL of the video or audio.")
    transcribe.add_argument(
        "--format",
        default=DEFAULT_FORMAT,
        choices=sorted(FORMATTERS.keys()),
        help="Output format (default: %(default)s).",
    )
    transcribe.add_argument(
        "--language",
        default=None,
        help="Spoken language code (default: DEFAULT_LANGUAGE_CODE from config).",
    )
    transcribe.add_argument(
        "--output",
        default=None,
        help="Output path, or '-' for stdout (default: <transcript id><suffix>).",
    )
    transcribe.set_defaults(handler=_run_transcribe)

    serve = subparsers.add_parser("serve", help="Run the HTTP API server.")
    serve.add_argument("--host", default=API_HOST, help="Bind address (default: %(default)s).")
    serve.add_argument("--port", type=int, default=API_PORT, help="Port (default: %(default)s).")
    serve.set_defaults(handler=_run_serve)

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    """
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    parser = build_parser()
    args = parser.parse_args(argv)
    sys.exit(args.handler(args))


if __name__ == "__main__":
    main()
