"""Songs — catalog routes.

Invariants:
    - Reads require a bearer identity (any role)
    - Create/update require admin or manager; delete requires admin
    - Every response exposes canonical and display ISRC
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from sodav.api.dependencies import current_user, require_roles
from sodav.core.domain_types import UserRole
from sodav.infrastructure.database import get_db
from sodav.schemas.song import SongCreate, SongPage, SongResponse, SongUpdate
from sodav.services.song_service import SongService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/songs", tags=["songs"])

_editors = require_roles(UserRole.ADMIN, UserRole.MANAGER)
_admins = require_roles(UserRole.ADMIN)


@router.get("", response_model=SongPage, dependencies=[Depends(current_user)])
async def list_songs(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    search: str | None = Query(None, max_length=200),
    db: AsyncSession = Depends(get_db),
):
    """List songs ordered by title, optionally filtered by title/artist."""
    return await SongService(db).list_songs(page, limit, search)


@router.get(
    "/isrc/{isrc}", response_model=SongResponse,
    dependencies=[Depends(current_user)],
)
async def get_song_by_isrc(isrc: str, db: AsyncSession = Depends(get_db)):
    """Look up a song by ISRC, in any accepted spelling."""
    song = await SongService(db).get_song_by_isrc(isrc)
    return SongResponse.from_model(song)


@router.get(
    "/{song_id}", response_model=SongResponse,
    dependencies=[Depends(current_user)],
)
async def get_song(song_id: UUID, db: AsyncSession = Depends(get_db)):
    song = await SongService(db).get_song(song_id)
    return SongResponse.from_model(song)


@router.post(
    "", response_model=SongResponse, status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(_editors)],
)
async def create_song(body: SongCreate, db: AsyncSession = Depends(get_db)):
    song = await SongService(db).create_song(body)
    return SongResponse.from_model(song)


@router.put(
    "/{song_id}", response_model=SongResponse,
    dependencies=[Depends(_editors)],
)
async def update_song(
    song_id: UUID, body: SongUpdate, db: AsyncSession = Depends(get_db),
):
    song = await SongService(db).update_song(song_id, body)
    return SongResponse.from_model(song)


@router.delete("/{song_id}", dependencies=[Depends(_admins)])
async def delete_song(song_id: UUID, db: AsyncSession = Depends(get_db)):
    await SongService(db).delete_song(song_id)
    return {"success": True, "message": "Song deleted"}
