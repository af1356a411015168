"""Detection Service — airplay history and manual corrections.

Invariants:
    - Listing is newest first (played_at desc) with channel and song loaded
    - played_at is stored and filtered in UTC; naive input is read as UTC
    - A correction never rewrites the detected ISRC, only the song it points to
    - Every correction is recorded with the song it replaced and who made it
    - Unknown detection or song → ResourceNotFoundError, nothing written

Design Decisions:
    - Relationships are lazy="raise", so every read path names its loads
      explicitly with selectinload
"""

import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from sodav.core.errors import ResourceNotFoundError, ValidationError
from sodav.models.detection import Detection, ManualCorrection
from sodav.schemas.common import page_of
from sodav.schemas.detection import (
    CorrectionResponse, DetectionPage, DetectionResponse,
)
from sodav.services.song_service import SongService

logger = logging.getLogger(__name__)


def as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class DetectionService:
    def __init__(self, db: AsyncSession):
        self._db = db

    async def record(
        self,
        *,
        channel_id: uuid.UUID,
        provider: str,
        isrc: str,
        song_id: uuid.UUID | None = None,
        confidence: float | None = None,
        played_at: datetime | None = None,
        api_key_id: uuid.UUID | None = None,
    ) -> Detection:
        detection = Detection(
            channel_id=channel_id,
            song_id=song_id,
            provider=provider,
            isrc=isrc,
            confidence=confidence,
            played_at=as_utc(played_at) if played_at else datetime.now(timezone.utc),
            api_key_id=api_key_id,
        )
        self._db.add(detection)
        await self._db.commit()
        logger.info(
            f"Detection recorded: {detection.id}",
            extra={"channel_id": str(channel_id), "isrc": isrc},
        )
        return detection

    async def list_detections(
        self,
        page: int = 1,
        limit: int = 20,
        channel_id: uuid.UUID | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> DetectionPage:
        if start is not None and end is not None and as_utc(start) > as_utc(end):
            raise ValidationError(
                "start_date must not be after end_date", "start_date",
            )
        conditions = []
        if channel_id is not None:
            conditions.append(Detection.channel_id == channel_id)
        if start is not None:
            conditions.append(Detection.played_at >= as_utc(start))
        if end is not None:
            conditions.append(Detection.played_at <= as_utc(end))

        total = (await self._db.execute(
            select(func.count()).select_from(Detection).where(*conditions),
        )).scalar_one()
        result = await self._db.execute(
            select(Detection)
            .where(*conditions)
            .options(selectinload(Detection.channel), selectinload(Detection.song))
            .order_by(Detection.played_at.desc(), Detection.created_at.desc())
            .limit(limit)
            .offset((page - 1) * limit),
        )
        return DetectionPage(
            detections=[
                DetectionResponse.from_model(d) for d in result.scalars().all()
            ],
            pagination=page_of(total, page, limit),
        )

    async def get_detection(self, detection_id: uuid.UUID) -> DetectionResponse:
        result = await self._db.execute(
            select(Detection)
            .where(Detection.id == detection_id)
            .options(selectinload(Detection.channel), selectinload(Detection.song)),
        )
        detection = result.scalar_one_or_none()
        if detection is None:
            raise ResourceNotFoundError("Detection", str(detection_id))
        corrections = await self._db.execute(
            select(ManualCorrection)
            .where(ManualCorrection.detection_id == detection_id)
            .order_by(ManualCorrection.created_at),
        )
        return DetectionResponse.from_model(detection, corrections.scalars().all())

    async def apply_correction(
        self,
        detection_id: uuid.UUID,
        song_id: uuid.UUID,
        reason: str,
        corrected_by: uuid.UUID | None,
    ) -> CorrectionResponse:
        result = await self._db.execute(
            select(Detection).where(Detection.id == detection_id),
        )
        detection = result.scalar_one_or_none()
        if detection is None:
            raise ResourceNotFoundError("Detection", str(detection_id))
        song = await SongService(self._db).get_song(song_id)

        correction = ManualCorrection(
            detection_id=detection.id,
            previous_song_id=detection.song_id,
            corrected_song_id=song.id,
            reason=reason,
            corrected_by=corrected_by,
        )
        detection.song_id = song.id
        self._db.add(correction)
        await self._db.commit()
        logger.info(
            f"Detection corrected: {detection.id}",
            extra={"song_id": str(song.id), "user_id": str(corrected_by)},
        )
        return CorrectionResponse.from_model(correction)
