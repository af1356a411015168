"""Request schema validation — API key, song, channel, correction and recognition bodies.

Invariants:
    - ApiKeyCreate: name stripped and non-blank, permissions deduplicated, at least one
    - SongCreate: title/artist stripped and non-blank, isrc free-form text
    - SongUpdate: unset fields stay unset (partial update)
    - ChannelCreate/ChannelUpdate: http(s) stream URLs only, enums dumped as values
    - CorrectionRequest: blank reason falls back to the default
"""

from uuid import uuid4

import pytest
from pydantic import ValidationError

from sodav.schemas.api_key import ApiKeyCreate
from sodav.schemas.channel import ChannelCreate, ChannelUpdate
from sodav.schemas.detection import DEFAULT_CORRECTION_REASON, CorrectionRequest
from sodav.schemas.recognition import RecognitionIsrcRequest
from sodav.schemas.song import SongCreate, SongUpdate


# --- ApiKeyCreate -------------------------------------------------------------

def test_api_key_name_is_stripped():
    body = ApiKeyCreate(name="  ingest  ", permissions=["songs:read"])
    assert body.name == "ingest"


def test_api_key_blank_name_rejected():
    with pytest.raises(ValidationError):
        ApiKeyCreate(name="   ", permissions=["songs:read"])


def test_api_key_permissions_deduplicated_in_order():
    body = ApiKeyCreate(
        name="x", permissions=["songs:read", " detections:write", "songs:read", ""],
    )
    assert body.permissions == ["songs:read", "detections:write"]


@pytest.mark.parametrize("permissions", [[], ["", "  "]])
def test_api_key_requires_a_permission(permissions):
    with pytest.raises(ValidationError):
        ApiKeyCreate(name="x", permissions=permissions)


# --- Songs --------------------------------------------------------------------

def test_song_title_and_artist_stripped():
    body = SongCreate(title=" Birima ", artist=" Youssou N'Dour ")
    assert body.title == "Birima"
    assert body.artist == "Youssou N'Dour"
    assert body.isrc is None


def test_song_blank_artist_rejected():
    with pytest.raises(ValidationError):
        SongCreate(title="Birima", artist="  ")


def test_song_isrc_kept_as_given():
    body = SongCreate(title="Birima", artist="Youssou N'Dour", isrc="gb-aye-93-00007")
    assert body.isrc == "gb-aye-93-00007"


def test_song_update_tracks_only_set_fields():
    body = SongUpdate(label="Jololi")
    assert body.model_dump(exclude_unset=True) == {"label": "Jololi"}


# --- Channels and corrections -------------------------------------------------

def test_channel_update_keeps_enum_values_for_storage():
    body = ChannelUpdate(type="tv", status="testing")
    assert body.model_dump(mode="json", exclude_unset=True) == {
        "type": "tv", "status": "testing",
    }


@pytest.mark.parametrize("url", ["rtmp://rfm.sn/live", "rfm.sn/live"])
def test_channel_stream_url_must_be_http(url):
    with pytest.raises(ValidationError):
        ChannelCreate(name="RFM", type="radio", stream_url=url)


def test_correction_blank_reason_falls_back_to_default():
    body = CorrectionRequest(song_id=uuid4(), reason="   ")
    assert body.reason == DEFAULT_CORRECTION_REASON


def test_recognition_confidence_bounded():
    with pytest.raises(ValidationError):
        RecognitionIsrcRequest(provider="audd", payload={}, confidence=1.5)
