"""
Defines custom exceptions for the caption exporter so callers can tell
data-shape failures apart from transport and sink errors.

Transport errors (``httpx.HTTPError``) and sink errors (``OSError``) are never
wrapped; they propagate as raised.
"""


class CaptionExporterError(Exception):
    """Base exception for all application-specific errors."""


class ExtractionError(CaptionExporterError):
    """
    Raised when a required field is missing from an upstream record.

    Fatal to the enclosing operation: one malformed track record fails the
    whole catalog, one part without an offset fails the whole track parse.
    """


class InvalidVideoIdError(CaptionExporterError, ValueError):
    """Raised when a string is neither a video ID nor a recognised video URL."""


class TrackNotFoundError(CaptionExporterError, LookupError):
    """Raised when a manifest holds no track for the requested language."""


class CaptionNotFoundError(CaptionExporterError, LookupError):
    """Raised when no caption or caption part covers the requested time."""


class OperationCancelledError(Exception):
    """
    Raised when a cooperative cancellation signal is observed mid-write.

    Not a CaptionExporterError: handlers for failures do not catch it.
    Whatever was written to the sink before the signal stays there.
    """
