"""Unit tests for track content parsing.

WHY: The parser decides which upstream entries are quietly dropped and
which abort the whole track. Getting that line wrong either loses valid
captions or lets corrupt data through to the SRT output.

RULES:
- Empty text is dropped; whitespace-only text is kept (captions and parts)
- A caption without offset or duration is dropped, the rest are unaffected
- A non-empty part without offset fails the whole parse
- Negative timing counts as missing timing
"""

from datetime import timedelta

import pytest

from caption_exporter.api.models import RawCaption, RawCaptionPart, TrackDocument
from caption_exporter.core.ir import Caption, CaptionPart
from caption_exporter.core.parser import parse_track
from caption_exporter.exceptions import ExtractionError

from .conftest import make_document


def _ms(value):
    return timedelta(milliseconds=value)


class TestValidCaptions:

    def test_captions_and_parts_are_converted(self, hello_world_document):
        captions = parse_track(hello_world_document)

        assert captions == [
            Caption("Hello", _ms(0), _ms(1000), ()),
            Caption(
                "World",
                _ms(1000),
                _ms(1500),
                (CaptionPart("Wor", _ms(1000)), CaptionPart("ld", _ms(1500))),
            ),
        ]

    def test_source_order_is_kept(self):
        """Captions out of time order are not re-sorted."""
        document = make_document(
            RawCaption(text="b", offset_ms=5000, duration_ms=10),
            RawCaption(text="a", offset_ms=0, duration_ms=10),
        )
        assert [c.text for c in parse_track(document)] == ["b", "a"]

    def test_part_order_is_kept(self):
        document = make_document(
            RawCaption(
                text="xy",
                offset_ms=0,
                duration_ms=100,
                parts=[RawCaptionPart("y", 50), RawCaptionPart("x", 10)],
            )
        )
        assert [p.text for p in parse_track(document)[0].parts] == ["y", "x"]

    def test_zero_duration_is_kept(self):
        document = make_document(RawCaption(text="blink", offset_ms=10, duration_ms=0))
        assert parse_track(document)[0].duration == timedelta(0)


class TestEmptyText:

    @pytest.mark.parametrize("text", ["", None])
    def test_empty_caption_is_dropped(self, text):
        document = make_document(
            RawCaption(text=text, offset_ms=0, duration_ms=10),
            RawCaption(text="kept", offset_ms=10, duration_ms=10),
        )
        assert [c.text for c in parse_track(document)] == ["kept"]

    @pytest.mark.parametrize("text", [" ", "\n", " \t\n"])
    def test_whitespace_caption_is_kept(self, text):
        document = make_document(RawCaption(text=text, offset_ms=0, duration_ms=10))
        assert [c.text for c in parse_track(document)] == [text]

    def test_empty_part_is_dropped_whitespace_part_is_kept(self):
        document = make_document(
            RawCaption(
                text="a b",
                offset_ms=0,
                duration_ms=100,
                parts=[
                    RawCaptionPart("a", 0),
                    RawCaptionPart("", 20),
                    RawCaptionPart(None, 30),
                    RawCaptionPart(" ", 40),
                    RawCaptionPart("b", 50),
                ],
            )
        )
        assert [p.text for p in parse_track(document)[0].parts] == ["a", " ", "b"]

    def test_empty_part_without_offset_is_dropped_not_fatal(self):
        document = make_document(
            RawCaption(text="a", offset_ms=0, duration_ms=100, parts=[RawCaptionPart("", None)])
        )
        assert parse_track(document)[0].parts == ()


class TestMissingTiming:

    @pytest.mark.parametrize(
        "offset_ms, duration_ms",
        [(None, 100), (100, None), (None, None)],
    )
    def test_untimed_caption_is_dropped_locally(self, offset_ms, duration_ms):
        """The skip does not propagate to the captions around it."""
        document = make_document(
            RawCaption(text="first", offset_ms=0, duration_ms=100),
            RawCaption(text="untimed", offset_ms=offset_ms, duration_ms=duration_ms),
            RawCaption(text="last", offset_ms=200, duration_ms=100),
        )
        assert [c.text for c in parse_track(document)] == ["first", "last"]

    def test_untimed_caption_parts_are_not_validated(self):
        """A dropped caption cannot fail the parse through its parts."""
        document = make_document(
            RawCaption(text="x", offset_ms=None, duration_ms=10, parts=[RawCaptionPart("x", None)])
        )
        assert parse_track(document) == []

    def test_part_without_offset_fails_whole_track(self):
        document = make_document(
            RawCaption(text="fine", offset_ms=0, duration_ms=100),
            RawCaption(
                text="broken",
                offset_ms=100,
                duration_ms=100,
                parts=[RawCaptionPart("broken", None)],
            ),
            RawCaption(text="never reached", offset_ms=200, duration_ms=100),
        )
        with pytest.raises(ExtractionError, match="part offset"):
            parse_track(document)


class TestNegativeTiming:

    @pytest.mark.parametrize(
        "offset_ms, duration_ms",
        [(-5, 10), (0, -1), (-5, -1)],
    )
    def test_negative_caption_timing_is_dropped_locally(self, offset_ms, duration_ms):
        document = make_document(
            RawCaption(text="first", offset_ms=0, duration_ms=100),
            RawCaption(text="negative", offset_ms=offset_ms, duration_ms=duration_ms),
            RawCaption(text="last", offset_ms=200, duration_ms=100),
        )
        assert [c.text for c in parse_track(document)] == ["first", "last"]

    def test_negative_offset_from_xml_never_reaches_output(self):
        document = TrackDocument.from_xml(
            b'<timedtext><body><p t="0" d="10">ok</p><p t="-5" d="10">neg</p></body></timedtext>'
        )
        captions = parse_track(document)

        assert [c.text for c in captions] == ["ok"]
        assert all(c.offset >= timedelta(0) and c.duration >= timedelta(0) for c in captions)

    def test_negative_part_offset_fails_whole_track(self):
        document = make_document(
            RawCaption(text="fine", offset_ms=0, duration_ms=100),
            RawCaption(
                text="broken",
                offset_ms=100,
                duration_ms=100,
                parts=[RawCaptionPart("broken", -1)],
            ),
        )
        with pytest.raises(ExtractionError, match="part offset"):
            parse_track(document)
