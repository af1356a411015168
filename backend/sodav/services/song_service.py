"""Song Service — catalog CRUD with ISRC validation at the write boundary.

Invariants:
    - Stored isrc is always canonical (normalize_isrc) and valid (validate_isrc)
    - Invalid ISRC input → ValidationError; the codec itself never raises
    - Duplicate ISRC → ConflictError
    - title and artist can never be set to null or blank

Design Decisions:
    - Duplicate check by query before write, IntegrityError as a backstop for races
    - Search is a case-insensitive literal substring match over title and artist;
      % and _ in the search text are escaped
"""

import logging
import uuid

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from sodav.core.errors import (
    ConflictError, ResourceNotFoundError, ValidationError,
)
from sodav.core.isrc import format_isrc, normalize_isrc, validate_isrc
from sodav.models.song import Song
from sodav.schemas.common import page_of
from sodav.schemas.song import SongCreate, SongPage, SongResponse, SongUpdate

logger = logging.getLogger(__name__)

_REQUIRED_FIELDS = ("title", "artist")


def escape_like(value: str) -> str:
    """Make % and _ match literally in a LIKE pattern (escape char: backslash)."""
    return (
        value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    )


def canonical_isrc_or_raise(value: str | None) -> str | None:
    """Canonical ISRC for storage; None stays None, invalid input raises."""
    if value is None or not value.strip():
        return None
    if not validate_isrc(value):
        raise ValidationError(f"'{value}' is not a valid ISRC", "isrc")
    return normalize_isrc(value)


class SongService:
    def __init__(self, db: AsyncSession):
        self._db = db

    async def list_songs(
        self, page: int = 1, limit: int = 20, search: str | None = None,
    ) -> SongPage:
        query = select(Song)
        count_query = select(func.count()).select_from(Song)
        if search and search.strip():
            pattern = f"%{escape_like(search.strip())}%"
            condition = or_(
                Song.title.ilike(pattern, escape="\\"),
                Song.artist.ilike(pattern, escape="\\"),
            )
            query = query.where(condition)
            count_query = count_query.where(condition)

        total = (await self._db.execute(count_query)).scalar_one()
        result = await self._db.execute(
            query.order_by(Song.title).limit(limit).offset((page - 1) * limit),
        )
        return SongPage(
            songs=[SongResponse.from_model(s) for s in result.scalars().all()],
            pagination=page_of(total, page, limit),
        )

    async def get_song(self, song_id: uuid.UUID) -> Song:
        result = await self._db.execute(select(Song).where(Song.id == song_id))
        song = result.scalar_one_or_none()
        if song is None:
            raise ResourceNotFoundError("Song", str(song_id))
        return song

    async def find_by_isrc(self, canonical: str) -> Song | None:
        result = await self._db.execute(select(Song).where(Song.isrc == canonical))
        return result.scalar_one_or_none()

    async def get_song_by_isrc(self, isrc: str) -> Song:
        if not validate_isrc(isrc):
            raise ValidationError(f"'{isrc}' is not a valid ISRC", "isrc")
        song = await self.find_by_isrc(normalize_isrc(isrc))
        if song is None:
            raise ResourceNotFoundError("Song", format_isrc(isrc))
        return song

    async def create_song(self, body: SongCreate) -> Song:
        data = body.model_dump()
        data["isrc"] = canonical_isrc_or_raise(body.isrc)
        await self._ensure_isrc_free(data["isrc"])
        song = Song(**data)
        self._db.add(song)
        await self._commit_or_conflict(data["isrc"])
        await self._db.refresh(song)
        logger.info(f"Song created: {song.id}")
        return song

    async def update_song(self, song_id: uuid.UUID, body: SongUpdate) -> Song:
        song = await self.get_song(song_id)
        changes = body.model_dump(exclude_unset=True)
        for field in _REQUIRED_FIELDS:
            if field in changes and changes[field] is None:
                raise ValidationError(f"{field} cannot be empty", field)
        if "isrc" in changes:
            changes["isrc"] = canonical_isrc_or_raise(changes["isrc"])
            await self._ensure_isrc_free(changes["isrc"], exclude=song.id)
        for field, value in changes.items():
            setattr(song, field, value)
        await self._commit_or_conflict(changes.get("isrc"))
        await self._db.refresh(song)
        logger.info(f"Song updated: {song.id}")
        return song

    async def delete_song(self, song_id: uuid.UUID) -> None:
        song = await self.get_song(song_id)
        await self._db.delete(song)
        await self._db.commit()
        logger.info(f"Song deleted: {song_id}")

    async def _ensure_isrc_free(
        self, canonical: str | None, exclude: uuid.UUID | None = None,
    ) -> None:
        if canonical is None:
            return
        existing = await self.find_by_isrc(canonical)
        if existing is not None and existing.id != exclude:
            raise ConflictError(
                f"A song with ISRC {format_isrc(canonical)} already exists",
            )

    async def _commit_or_conflict(self, canonical: str | None) -> None:
        try:
            await self._db.commit()
        except IntegrityError:
            await self._db.rollback()
            raise ConflictError(
                f"A song with ISRC {format_isrc(canonical or '')} already exists",
            )
