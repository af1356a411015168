"""Channels — monitored radio/TV stream routes.

Invariants:
    - Reads require a bearer identity (any role)
    - Create/update require admin or manager; delete requires admin
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from sodav.api.dependencies import current_user, require_roles
from sodav.core.domain_types import ChannelStatus, ChannelType, UserRole
from sodav.infrastructure.database import get_db
from sodav.schemas.channel import (
    ChannelCreate, ChannelPage, ChannelResponse, ChannelUpdate,
)
from sodav.services.channel_service import ChannelService

router = APIRouter(prefix="/api/v1/channels", tags=["channels"])

_editors = require_roles(UserRole.ADMIN, UserRole.MANAGER)
_admins = require_roles(UserRole.ADMIN)


@router.get("", response_model=ChannelPage, dependencies=[Depends(current_user)])
async def list_channels(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    channel_type: ChannelType | None = Query(None, alias="type"),
    channel_status: ChannelStatus | None = Query(None, alias="status"),
    db: AsyncSession = Depends(get_db),
):
    """List channels ordered by name, optionally filtered by type and status."""
    return await ChannelService(db).list_channels(
        page, limit, channel_type, channel_status,
    )


@router.get(
    "/{channel_id}", response_model=ChannelResponse,
    dependencies=[Depends(current_user)],
)
async def get_channel(channel_id: UUID, db: AsyncSession = Depends(get_db)):
    return await ChannelService(db).get_channel(channel_id)


@router.post(
    "", response_model=ChannelResponse, status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(_editors)],
)
async def create_channel(body: ChannelCreate, db: AsyncSession = Depends(get_db)):
    return await ChannelService(db).create_channel(body)


@router.put(
    "/{channel_id}", response_model=ChannelResponse,
    dependencies=[Depends(_editors)],
)
async def update_channel(
    channel_id: UUID, body: ChannelUpdate, db: AsyncSession = Depends(get_db),
):
    return await ChannelService(db).update_channel(channel_id, body)


@router.delete("/{channel_id}", dependencies=[Depends(_admins)])
async def delete_channel(channel_id: UUID, db: AsyncSession = Depends(get_db)):
    await ChannelService(db).delete_channel(channel_id)
    return {"success": True, "message": "Channel deleted"}
