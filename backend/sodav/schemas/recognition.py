"""Recognition Schemas — ISRC resolution from identification-service payloads.

Invariants:
    - channel_id is optional; with it, a found ISRC is recorded as a detection
    - detection_id is set only when a detection was recorded
"""

from datetime import datetime
from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, Field

from sodav.schemas.song import SongResponse


class RecognitionIsrcRequest(BaseModel):
    provider: Literal["acoustid", "audd"]
    payload: dict[str, Any]
    channel_id: UUID | None = None
    played_at: datetime | None = None
    confidence: float | None = Field(None, ge=0, le=1)


class RecognitionIsrcResponse(BaseModel):
    provider: str
    found: bool
    # Raw extracted value, kept even when it fails validation
    raw_isrc: str | None = None
    isrc: str | None = None
    isrc_display: str | None = None
    country: str | None = None
    year: int | None = None
    song: SongResponse | None = None
    detection_id: UUID | None = None
