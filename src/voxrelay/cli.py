"""voxrelay command-line interface with subcommands.

Usage:
    voxrelay-cli transcribe <audio> [--content-type audio/mpeg] [--max-wait-ms 180000]
                            [--poll-interval-ms 1000] [--language-detection]
    voxrelay-cli ask <pdf> <question>
"""

import argparse
import asyncio
import mimetypes
import sys
from pathlib import Path

from voxrelay.config import settings
from voxrelay.errors import VoxRelayError
from voxrelay.models.transcription import AUDIO_EXTENSIONS, TranscriptionOptions
from voxrelay.services.completion import CompletionService
from voxrelay.services.pdf import extract_pdf_text
from voxrelay.services.transcription import TranscriptionJobClient, build_backend


def _guess_content_type(path: Path) -> str | None:
    known = AUDIO_EXTENSIONS.get(path.suffix.lower())
    if known is not None:
        return known.value
    return mimetypes.guess_type(path.name)[0]


# --- transcribe subcommand ---


async def cmd_transcribe(args: argparse.Namespace) -> None:
    """Transcribe an audio file with the configured backend."""
    audio_path = Path(args.input).resolve()
    if not audio_path.exists():
        print(f"Error: file not found: {audio_path}", file=sys.stderr)
        sys.exit(1)

    content_type = args.content_type or _guess_content_type(audio_path)
    options = TranscriptionOptions(
        max_wait_ms=(
            args.max_wait_ms if args.max_wait_ms is not None else settings.max_wait_ms
        ),
        poll_interval_ms=(
            args.poll_interval_ms
            if args.poll_interval_ms is not None
            else settings.poll_interval_ms
        ),
        language_detection=args.language_detection or settings.language_detection,
    )

    client = TranscriptionJobClient(
        build_backend(settings), timeout=settings.request_timeout
    )
    print(f"Transcribing {audio_path.name} via {client.backend.name}...", file=sys.stderr)
    result = await client.transcribe(audio_path.read_bytes(), content_type, options)

    print(result.text)
    print(
        f"Done in {result.elapsed_ms}ms ({result.poll_count} status check(s))",
        file=sys.stderr,
    )


# --- ask subcommand ---


async def cmd_ask(args: argparse.Namespace) -> None:
    """Answer a question about a PDF."""
    pdf_path = Path(args.pdf).resolve()
    if not pdf_path.exists():
        print(f"Error: file not found: {pdf_path}", file=sys.stderr)
        sys.exit(1)

    text = extract_pdf_text(pdf_path.read_bytes())
    if not text:
        print("Error: no text could be extracted from the PDF", file=sys.stderr)
        sys.exit(1)

    service = CompletionService.from_settings(settings)
    result = await service.answer(args.question, text)
    print(result.text)
    print(f"Answered by {result.provider.value}/{result.model}", file=sys.stderr)


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="voxrelay-cli",
        description="voxrelay - PDF question answering and audio transcription",
    )
    subparsers = parser.add_subparsers(dest="command", help="available commands")

    # --- transcribe ---
    p_transcribe = subparsers.add_parser("transcribe", help="transcribe an audio file")
    p_transcribe.add_argument("input", type=str, help="audio file (mp3, wav, ogg)")
    p_transcribe.add_argument("--content-type", type=str, help="override the audio MIME type")
    p_transcribe.add_argument("--max-wait-ms", type=int, help="give up after this many ms")
    p_transcribe.add_argument("--poll-interval-ms", type=int, help="delay between status checks")
    p_transcribe.add_argument("--language-detection", action="store_true", help="let the backend detect the language")

    # --- ask ---
    p_ask = subparsers.add_parser("ask", help="ask a question about a PDF")
    p_ask.add_argument("pdf", type=str, help="PDF document")
    p_ask.add_argument("question", type=str, help="question to answer")

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    commands = {
        "transcribe": cmd_transcribe,
        "ask": cmd_ask,
    }
    try:
        asyncio.run(commands[args.command](args))
    except (VoxRelayError, ValueError) as e:
        # ValueError also covers empty audio and pydantic ValidationError
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
