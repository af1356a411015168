"""Detections — airplay history and manual corrections.

Invariants:
    - Reads require a bearer identity (any role)
    - Corrections require admin or manager and record the correcting user
"""

from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from sodav.api.dependencies import current_user, require_roles
from sodav.core.domain_types import ResolvedUser, UserRole
from sodav.infrastructure.database import get_db
from sodav.schemas.detection import (
    CorrectionRequest, CorrectionResult, DetectionPage, DetectionResponse,
)
from sodav.services.detection_service import DetectionService

router = APIRouter(prefix="/api/v1/detections", tags=["detections"])

_editors = require_roles(UserRole.ADMIN, UserRole.MANAGER)


@router.get("", response_model=DetectionPage, dependencies=[Depends(current_user)])
async def list_detections(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    channel_id: UUID | None = Query(None),
    start_date: datetime | None = Query(None),
    end_date: datetime | None = Query(None),
    db: AsyncSession = Depends(get_db),
):
    """Most recent airplay first, optionally per channel and time window."""
    return await DetectionService(db).list_detections(
        page, limit, channel_id, start_date, end_date,
    )


@router.get(
    "/{detection_id}", response_model=DetectionResponse,
    dependencies=[Depends(current_user)],
)
async def get_detection(detection_id: UUID, db: AsyncSession = Depends(get_db)):
    """One detection with its correction history."""
    return await DetectionService(db).get_detection(detection_id)


@router.post("/{detection_id}/correction", response_model=CorrectionResult)
async def correct_detection(
    detection_id: UUID,
    body: CorrectionRequest,
    user: ResolvedUser = Depends(_editors),
    db: AsyncSession = Depends(get_db),
):
    correction = await DetectionService(db).apply_correction(
        detection_id, body.song_id, body.reason, UUID(user.id),
    )
    return CorrectionResult(
        success=True, correction=correction, message="Correction applied",
    )
