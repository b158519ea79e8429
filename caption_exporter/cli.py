"""Command-line interface for the Caption Exporter.

WHY: Users need a simple way to list a video's caption tracks and save
one as an SRT file from the terminal. The CLI wires together the full
pipeline — video ID parsing, player response fetch, track selection,
track fetch and SRT download — behind a single command.

HOW: Uses argparse to accept a video ID or URL, a language code, an
auto-generated preference and output location. Runs the async pipeline
via asyncio.run(). Status and progress go to stderr; --list prints the
manifest to stdout so it can be piped.

RULES:
- Positional argument: video ID or URL
- --list prints the manifest and exits without downloading
- Track choice: first track in --language; manual tracks are preferred
  unless --auto-generated / --no-auto-generated narrows the choice
- Default output: {video_id}.{language}.srt in --output-dir (or CWD),
  numeric suffix on conflict ({video_id}.{language}-2.srt)
- --output overrides the whole path and truncates an existing file
- First Ctrl-C cancels the write cooperatively, leaving a valid SRT
  prefix; a second Ctrl-C interrupts immediately. Exit code 130 either way
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import signal
import sys
import threading
from pathlib import Path
from typing import List, Optional

import httpx

from caption_exporter.api.client import VideoUnplayableError, YouTubeAPIError, YouTubeClient
from caption_exporter.config import DEFAULT_CAPTION_LANGUAGE
from caption_exporter.core.captions import ClosedCaptionClient
from caption_exporter.core.ir import Manifest, TrackDescriptor
from caption_exporter.core.video_id import parse_video_id
from caption_exporter.exceptions import CaptionExporterError, OperationCancelledError
from caption_exporter.formatters import SRTFormatter


def _status(msg: str) -> None:
    """Print a status message to stderr.

    WHY: Status output must not pollute stdout so --list can be piped.
    """
    print(msg, file=sys.stderr, flush=True)


def _progress(fraction: float) -> None:
    end = "\n" if fraction >= 1.0 else ""
    print("\r  Writing captions... {:3.0f}%".format(fraction * 100), end=end, file=sys.stderr, flush=True)


def _format_manifest(manifest: Manifest) -> str:
    """Render the manifest as one line per track for --list."""
    lines = []
    for index, track in enumerate(manifest):
        lines.append("{:>3}  {:<10} {}{}".format(
            index,
            track.language.code,
            track.language.name,
            "  (auto-generated)" if track.is_auto_generated else "",
        ))
    return "\n".join(lines)


def _select_track(
    manifest: Manifest,
    language: str,
    auto_generated: Optional[bool],
) -> Optional[TrackDescriptor]:
    """Pick the track to download.

    WHY: A video often has both a manual and an auto-generated track in
    the same language. Manual tracks are usually better, so they win
    unless the user asked for one kind explicitly.

    RULES:
    - auto_generated=None: first manual match, else first auto-generated match
    - auto_generated=True/False: first match of that kind only
    - Upstream order decides between tracks of the same kind
    """
    preferences = [False, True] if auto_generated is None else [auto_generated]
    for preference in preferences:
        narrowed = Manifest(manifest.filter(auto_generated=preference))
        track = narrowed.try_get_by_language(language)
        if track is not None:
            return track
    return None


def _resolve_output_path(stem: str, suffix: str, output_dir: Path) -> Path:
    """Resolve the output file path, adding numeric suffix on conflict.

    RULES:
    - First attempt: {stem}{suffix} (e.g. dQw4w9WgXcQ.en.srt)
    - Conflict: insert a counter before the suffix (dQw4w9WgXcQ.en-2.srt)
    - Counter starts at 2 and increments
    """
    base_path = output_dir / "{}{}".format(stem, suffix)
    if not base_path.exists():
        return base_path

    counter = 2
    while True:
        candidate = output_dir / "{}-{}{}".format(stem, counter, suffix)
        if not candidate.exists():
            return candidate
        counter += 1


async def _run_pipeline(args: argparse.Namespace) -> None:
    """Execute the list or download pipeline.

    RULES:
    - Validate the video ID and output directory before any request
    - Status messages to stderr at each step
    - Exit 1 on any pipeline error, 130 on cancellation
    """
    try:
        video_id = parse_video_id(args.video)
    except CaptionExporterError as e:
        print("Error: {}".format(e), file=sys.stderr)
        sys.exit(1)

    if args.output:
        output_path: Optional[Path] = Path(args.output).resolve()
        output_dir = output_path.parent
    else:
        output_path = None
        output_dir = Path(args.output_dir).resolve() if args.output_dir else Path.cwd()
    if not args.list and not output_dir.is_dir():
        print("Error: Output directory does not exist: {}".format(output_dir), file=sys.stderr)
        sys.exit(1)

    cancellation = threading.Event()

    def _on_sigint(signum, frame):  # noqa: ANN001
        if cancellation.is_set():
            raise KeyboardInterrupt
        cancellation.set()

    previous_handler = signal.signal(signal.SIGINT, _on_sigint)
    try:
        async with YouTubeClient() as transport:
            formatter = SRTFormatter()
            captions = ClosedCaptionClient(transport, formatter)

            _status("Fetching caption tracks for {}...".format(video_id))
            manifest = await captions.get_manifest(video_id)

            if args.list:
                if len(manifest):
                    print(_format_manifest(manifest))
                else:
                    _status("No caption tracks available.")
                return

            track_info = _select_track(manifest, args.language, args.auto_generated)
            if track_info is None:
                available = ", ".join(str(t.language) for t in manifest) or "none"
                print(
                    "Error: No matching caption track for language '{}'. Available: {}".format(
                        args.language, available
                    ),
                    file=sys.stderr,
                )
                sys.exit(1)

            if output_path is None:
                output_path = _resolve_output_path(
                    "{}.{}".format(video_id, track_info.language.code), formatter.suffix, output_dir
                )

            _status("Downloading {} ({}{}) as {}...".format(
                track_info,
                track_info.language.name,
                ", auto-generated" if track_info.is_auto_generated else "",
                formatter.name,
            ))
            await captions.download(track_info, output_path, progress=_progress, cancellation=cancellation)

            _status("")
            _status("Done! Saved {}".format(output_path))

    except (KeyboardInterrupt, OperationCancelledError):
        _status("\nCancelled by user.")
        sys.exit(130)
    except (CaptionExporterError, YouTubeAPIError, VideoUnplayableError, httpx.HTTPError, OSError) as e:
        print("Error: {}".format(e), file=sys.stderr)
        sys.exit(1)
    finally:
        signal.signal(signal.SIGINT, previous_handler)


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    WHY: Separating parser construction from main() makes the CLI
    testable — tests can inspect the parser without running the pipeline.
    """
    parser = argparse.ArgumentParser(
        prog="caption_exporter",
        description="List the closed caption tracks of a YouTube video and "
                    "download one as a SubRip (SRT) file.",
    )

    parser.add_argument(
        "video",
        help="YouTube video ID or URL.",
    )

    parser.add_argument(
        "--list",
        action="store_true",
        help="List available caption tracks and exit.",
    )

    parser.add_argument(
        "--language",
        default=DEFAULT_CAPTION_LANGUAGE,
        help="Language code of the track to download (default: %(default)s).",
    )

    parser.add_argument(
        "--auto-generated",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Only use auto-generated (or, with --no-auto-generated, manual) tracks. "
             "Default: prefer manual, fall back to auto-generated.",
    )

    parser.add_argument(
        "--output",
        default=None,
        help="Output file path. Overwrites an existing file.",
    )

    parser.add_argument(
        "--output-dir",
        default=None,
        help="Directory for the default-named output file (default: current directory).",
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(name)s %(levelname)s %(message)s",
        )

    asyncio.run(_run_pipeline(args))


if __name__ == "__main__":
    main()
