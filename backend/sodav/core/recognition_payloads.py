"""Recognition Payloads — typed variants of third-party identification responses.

Invariants:
    - Only fields along an ISRC access path are declared; everything else a
      provider sends (scores, titles, artists, status) is ignored, so a surprising
      type there never hides an ISRC
    - Every declared field is optional: a missing one means "not found"
    - parse_* never raise: a value that does not fit the shape returns None

Design Decisions:
    - One pydantic model per provider, tagged by a Literal `provider` field,
      so ISRC extraction walks declared attributes instead of nested dict lookups
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, ValidationError


class _Payload(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)


# ─── Acoustid: results → recordings → isrcs[] ────────────────────

class AcoustidRecording(_Payload):
    # Items are checked by the extractor, a stray non-string is skipped
    isrcs: list[Any] | None = None


class AcoustidResult(_Payload):
    recordings: list[AcoustidRecording] | None = None


class AcoustidResponse(_Payload):
    provider: Literal["acoustid"] = "acoustid"
    results: list[AcoustidResult] | None = None


# ─── Audd: result → isrc | spotify | apple_music ─────────────────

class SpotifyExternalIds(_Payload):
    isrc: str | None = None


class AuddSpotify(_Payload):
    isrc: str | None = None
    external_ids: SpotifyExternalIds | None = None


class AuddAppleMusic(_Payload):
    isrc: str | None = None


class AuddResult(_Payload):
    isrc: str | None = None
    spotify: AuddSpotify | None = None
    apple_music: AuddAppleMusic | None = None


class AuddResponse(_Payload):
    provider: Literal["audd"] = "audd"
    result: AuddResult | None = None


RecognitionPayload = AcoustidResponse | AuddResponse


def parse_acoustid(raw: Any) -> AcoustidResponse | None:
    """Coerce a raw Acoustid response into its typed variant, or None."""
    if isinstance(raw, AcoustidResponse):
        return raw
    if not isinstance(raw, dict):
        return None
    try:
        return AcoustidResponse.model_validate({**raw, "provider": "acoustid"})
    except ValidationError:
        return None


def parse_audd(raw: Any) -> AuddResponse | None:
    """Coerce a raw Audd response into its typed variant, or None."""
    if isinstance(raw, AuddResponse):
        return raw
    if not isinstance(raw, dict):
        return None
    try:
        return AuddResponse.model_validate({**raw, "provider": "audd"})
    except ValidationError:
        return None
