"""Recognition ISRC Resolution — extract, validate and match an ISRC from a provider payload.

Invariants:
    - Malformed payloads resolve to found=False, never to an error
    - found=True only when the extracted ISRC validates
    - The catalog lookup uses the canonical form
    - A detection is recorded only for a found ISRC on a known channel; an
      unknown channel is rejected before the payload is read
"""

import logging
import uuid
from collections.abc import Callable
from typing import Any

from sodav.core.domain_types import RecognitionProvider
from sodav.core.isrc import (
    Isrc, extract_isrc_from_acoustid, extract_isrc_from_audd,
)
from sodav.schemas.recognition import (
    RecognitionIsrcRequest, RecognitionIsrcResponse,
)
from sodav.schemas.song import SongResponse
from sodav.services.channel_service import ChannelService
from sodav.services.detection_service import DetectionService
from sodav.services.song_service import SongService

logger = logging.getLogger(__name__)

_EXTRACTORS: dict[RecognitionProvider, Callable[[Any], str | None]] = {
    RecognitionProvider.ACOUSTID: extract_isrc_from_acoustid,
    RecognitionProvider.AUDD: extract_isrc_from_audd,
}


async def resolve_isrc(
    provider: RecognitionProvider, payload: Any, songs: SongService,
) -> RecognitionIsrcResponse:
    raw = _EXTRACTORS[provider](payload)
    isrc = Isrc.parse(raw)
    if isrc is None:
        logger.info(
            "No usable ISRC in recognition payload",
            extra={"provider": provider.value},
        )
        return RecognitionIsrcResponse(
            provider=provider.value, found=False, raw_isrc=raw,
        )

    song = await songs.find_by_isrc(isrc.canonical)
    return RecognitionIsrcResponse(
        provider=provider.value,
        found=True,
        raw_isrc=raw,
        isrc=isrc.canonical,
        isrc_display=isrc.display,
        country=isrc.country_code,
        year=isrc.year,
        song=SongResponse.from_model(song) if song else None,
    )


async def resolve_and_record(
    body: RecognitionIsrcRequest,
    songs: SongService,
    channels: ChannelService,
    detections: DetectionService,
    api_key_id: uuid.UUID | None = None,
) -> RecognitionIsrcResponse:
    """Resolve the payload; with a channel, record a found ISRC as a detection."""
    if body.channel_id is not None:
        await channels.get_channel(body.channel_id)

    provider = RecognitionProvider(body.provider)
    response = await resolve_isrc(provider, body.payload, songs)
    if body.channel_id is None or not response.found:
        return response

    detection = await detections.record(
        channel_id=body.channel_id,
        provider=provider.value,
        isrc=response.isrc,
        song_id=response.song.id if response.song else None,
        confidence=body.confidence,
        played_at=body.played_at,
        api_key_id=api_key_id,
    )
    return response.model_copy(update={"detection_id": detection.id})
