"""Shared test fixtures for the caption_exporter test suite.

WHY: Most test modules need the same canned upstream documents — a player
response with a manual and an auto-generated track, and an srv3 track
document — and a fake transport that serves them without any network.

HOW: Module-level constants hold the raw documents; fixtures hand out
fresh copies. FakeTransport implements the CaptionTransport protocol and
records what was requested.

RULES:
- No test touches the real network
- Raw documents mirror the real upstream shapes (innertube JSON, srv3 XML)
"""

import copy
from typing import Any, Dict, List, Optional

import pytest

from caption_exporter.api.models import (
    PlayerResponse,
    RawCaption,
    RawCaptionPart,
    RawTrack,
    TrackDocument,
)

VIDEO_ID = "dQw4w9WgXcQ"

EN_URL = "https://www.youtube.com/api/timedtext?v=dQw4w9WgXcQ&lang=en&fmt=json3"
EN_ASR_URL = "https://www.youtube.com/api/timedtext?v=dQw4w9WgXcQ&lang=en&kind=asr"
DE_URL = "https://www.youtube.com/api/timedtext?v=dQw4w9WgXcQ&lang=de"


PLAYER_RESPONSE: Dict[str, Any] = {
    "playabilityStatus": {"status": "OK"},
    "captions": {
        "playerCaptionsTracklistRenderer": {
            "captionTracks": [
                {
                    "baseUrl": EN_URL,
                    "name": {"simpleText": "English"},
                    "vssId": ".en",
                    "languageCode": "en",
                    "isTranslatable": True,
                },
                {
                    "baseUrl": EN_ASR_URL,
                    "name": {"runs": [{"text": "English "}, {"text": "(auto-generated)"}]},
                    "vssId": "a.en",
                    "languageCode": "en",
                    "kind": "asr",
                },
                {
                    "baseUrl": DE_URL,
                    "name": {"simpleText": "German"},
                    "vssId": ".de",
                    "languageCode": "de",
                },
            ],
        },
    },
}


SRV3_DOCUMENT = (
    '<?xml version="1.0" encoding="utf-8" ?>'
    '<timedtext format="3">'
    "<body>"
    '<p t="0" d="1000">Hello</p>'
    '<p t="1000" d="1500"><s ac="0">Wor</s><s t="500" ac="0">ld</s></p>'
    "</body>"
    "</timedtext>"
).encode("utf-8")


class FakeTransport:
    """In-memory CaptionTransport serving canned documents."""

    def __init__(
        self,
        player_response: Optional[PlayerResponse] = None,
        documents: Optional[Dict[str, TrackDocument]] = None,
    ) -> None:
        self.player_response = player_response or PlayerResponse()
        self.documents = documents or {}
        self.requested_video_ids: List[str] = []
        self.requested_urls: List[str] = []

    async def fetch_player_response(self, video_id: str) -> PlayerResponse:
        self.requested_video_ids.append(video_id)
        return self.player_response

    async def fetch_track_document(self, url: str) -> TrackDocument:
        self.requested_urls.append(url)
        return self.documents[url]


def make_document(*captions: RawCaption) -> TrackDocument:
    return TrackDocument(captions=list(captions))


@pytest.fixture
def player_response_dict():
    """Raw innertube player response with three caption tracks."""
    return copy.deepcopy(PLAYER_RESPONSE)


@pytest.fixture
def player_response(player_response_dict):
    return PlayerResponse.from_dict(player_response_dict)


@pytest.fixture
def hello_world_document():
    """Two captions: 'Hello' at 0ms for 1000ms, 'World' at 1000ms for 1500ms."""
    return make_document(
        RawCaption(text="Hello", offset_ms=0, duration_ms=1000),
        RawCaption(
            text="World",
            offset_ms=1000,
            duration_ms=1500,
            parts=[
                RawCaptionPart(text="Wor", offset_ms=1000),
                RawCaptionPart(text="ld", offset_ms=1500),
            ],
        ),
    )


@pytest.fixture
def fake_transport(player_response, hello_world_document):
    return FakeTransport(
        player_response=player_response,
        documents={
            EN_URL: hello_world_document,
            EN_ASR_URL: make_document(RawCaption(text="hello world", offset_ms=0, duration_ms=2500)),
            DE_URL: make_document(RawCaption(text="Hallo", offset_ms=0, duration_ms=1000)),
        },
    )


@pytest.fixture
def raw_track():
    """A complete raw track record; tests blank out single fields."""
    return RawTrack(url=EN_URL, language_code="en", language_name="English", is_auto_generated=False)
