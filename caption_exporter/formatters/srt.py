"""SRT formatter — writes a caption Track as SubRip blocks.

WHY: SRT is the one output format every player and editor accepts. The
formatter streams block by block into any text sink so a long track can
report progress and be cancelled between blocks, leaving a valid prefix.

HOW: For each caption (1-based index i) the formatter checks the
cancellation signal, writes one block, then reports i / total:

    1
    00:00:00,000 --> 00:00:01,000
    Hello
    <blank>

RULES:
- The Track must be fully materialized; the total count drives progress
- Blocks are written sequentially in track order; each block is one write()
- Timecodes are HH:MM:SS,mmm with sub-millisecond parts truncated, never rounded
- Cancellation is checked before every block; already written blocks stay
- progress is called exactly once per written block, values in (0.0, 1.0]
- Sink errors propagate unchanged
"""

from __future__ import annotations

import io
from datetime import timedelta
from typing import Callable, Optional, Protocol, TextIO

from caption_exporter.core.ir import Caption, Track
from caption_exporter.exceptions import OperationCancelledError

_ONE_MS = timedelta(milliseconds=1)

ProgressCallback = Callable[[float], None]


class CancellationSignal(Protocol):
    """Anything with ``is_set()``: threading.Event, asyncio.Event, ..."""

    def is_set(self) -> bool:
        ...


def format_timecode(value: timedelta) -> str:
    """Format a track offset as an SRT timecode, e.g. ``01:02:03,004``.

    Hours are zero-padded to two digits and grow past 99 if needed.

    Raises:
        ValueError: If ``value`` is negative.
    """
    if value < timedelta(0):
        raise ValueError("SRT timecodes cannot be negative: {}".format(value))

    total_ms = value // _ONE_MS
    hours, rest = divmod(total_ms, 3_600_000)
    minutes, rest = divmod(rest, 60_000)
    seconds, millis = divmod(rest, 1000)
    return "{:02d}:{:02d}:{:02d},{:03d}".format(hours, minutes, seconds, millis)


def format_block(index: int, caption: Caption) -> str:
    return "{}\n{} --> {}\n{}\n\n".format(
        index,
        format_timecode(caption.offset),
        format_timecode(caption.end),
        caption.text,
    )


class SRTFormatter:
    """Serializes a Track to SubRip text.

    WHY: Keeps the block layout, progress arithmetic and cancellation
    checks in one place, shared by in-memory rendering and file downloads.

    RULES:
    - write() streams into a caller-owned sink and never closes it
    - format() renders the whole track to a string
    """

    @property
    def name(self) -> str:
        return "SubRip (SRT)"

    @property
    def suffix(self) -> str:
        return ".srt"

    def write(
        self,
        track: Track,
        sink: TextIO,
        progress: Optional[ProgressCallback] = None,
        cancellation: Optional[CancellationSignal] = None,
    ) -> None:
        """Write every caption of ``track`` to ``sink`` as SRT blocks.

        Args:
            track: The fully parsed track.
            sink: Writable text stream.
            progress: Optional callback receiving i / total after each block.
            cancellation: Optional signal checked before each block.

        Raises:
            OperationCancelledError: If the signal is set before a block.
        """
        total = len(track)
        for i, caption in enumerate(track, start=1):
            if cancellation is not None and cancellation.is_set():
                raise OperationCancelledError(
                    "SRT write cancelled after {} of {} caption(s).".format(i - 1, total)
                )

            sink.write(format_block(i, caption))

            if progress is not None:
                progress(i / total)

    def format(self, track: Track) -> str:
        buffer = io.StringIO()
        self.write(track, buffer)
        return buffer.getvalue()
