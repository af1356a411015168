"""Detection Schemas — airplay listing and manual correction contracts.

Invariants:
    - DetectionResponse carries the display ISRC alongside the canonical one
    - song is null when the detection points to no catalog entry
    - CorrectionRequest.reason is stripped; blank falls back to the default
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from sodav.core.isrc import format_isrc
from sodav.schemas.channel import ChannelResponse
from sodav.schemas.common import Pagination
from sodav.schemas.song import SongResponse

DEFAULT_CORRECTION_REASON = "Manual correction"


class CorrectionRequest(BaseModel):
    song_id: UUID
    reason: str = Field(DEFAULT_CORRECTION_REASON, max_length=500)

    @field_validator("reason")
    @classmethod
    def strip_reason(cls, v: str) -> str:
        return v.strip() or DEFAULT_CORRECTION_REASON


class CorrectionResponse(BaseModel):
    id: UUID
    detection_id: UUID
    previous_song_id: UUID | None = None
    corrected_song_id: UUID | None = None
    reason: str
    corrected_by: UUID | None = None
    created_at: datetime

    @classmethod
    def from_model(cls, correction) -> "CorrectionResponse":
        return cls(
            id=correction.id,
            detection_id=correction.detection_id,
            previous_song_id=correction.previous_song_id,
            corrected_song_id=correction.corrected_song_id,
            reason=correction.reason,
            corrected_by=correction.corrected_by,
            created_at=correction.created_at,
        )


class CorrectionResult(BaseModel):
    success: bool
    correction: CorrectionResponse
    message: str


class DetectionResponse(BaseModel):
    id: UUID
    channel_id: UUID
    song_id: UUID | None = None
    provider: str
    isrc: str
    isrc_display: str
    confidence: float | None = None
    played_at: datetime
    created_at: datetime
    channel: ChannelResponse | None = None
    song: SongResponse | None = None
    corrections: list[CorrectionResponse] = Field(default_factory=list)

    @classmethod
    def from_model(cls, detection, corrections=()) -> "DetectionResponse":
        """Build from a Detection whose channel and song are already loaded."""
        return cls(
            id=detection.id,
            channel_id=detection.channel_id,
            song_id=detection.song_id,
            provider=detection.provider,
            isrc=detection.isrc,
            isrc_display=format_isrc(detection.isrc),
            confidence=detection.confidence,
            played_at=detection.played_at,
            created_at=detection.created_at,
            channel=ChannelResponse.model_validate(detection.channel),
            song=SongResponse.from_model(detection.song) if detection.song else None,
            corrections=[CorrectionResponse.from_model(c) for c in corrections],
        )


class DetectionPage(BaseModel):
    detections: list[DetectionResponse]
    pagination: Pagination
