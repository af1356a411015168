"""Recognitions — resolve ISRCs from identification-service payloads.

Invariants:
    - Requires an API key holding detections:write
    - A payload without a usable ISRC is a 200 with found=false, not an error
    - With channel_id, a found ISRC is recorded as a detection attributed to the key
"""

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from sodav.api.dependencies import require_api_key
from sodav.core.domain_types import ApiKeyGrant, Permission
from sodav.infrastructure.database import get_db
from sodav.schemas.recognition import (
    RecognitionIsrcRequest, RecognitionIsrcResponse,
)
from sodav.services.channel_service import ChannelService
from sodav.services.detection_service import DetectionService
from sodav.services.recognition_service import resolve_and_record
from sodav.services.song_service import SongService

router = APIRouter(prefix="/api/v1/recognitions", tags=["recognitions"])


@router.post("/isrc", response_model=RecognitionIsrcResponse)
async def resolve_recognition_isrc(
    body: RecognitionIsrcRequest,
    grant: ApiKeyGrant = Depends(require_api_key(Permission.DETECTIONS_WRITE)),
    db: AsyncSession = Depends(get_db),
):
    return await resolve_and_record(
        body,
        SongService(db),
        ChannelService(db),
        DetectionService(db),
        api_key_id=UUID(grant.key.id),
    )
