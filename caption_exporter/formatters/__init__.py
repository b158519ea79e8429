"""Output formatting. SRT is the only supported format."""

from caption_exporter.formatters.srt import SRTFormatter, format_timecode

__all__ = ["SRTFormatter", "format_timecode"]
