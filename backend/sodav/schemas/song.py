"""Song Schemas — catalog request/response models.

Invariants:
    - title/artist stripped and non-blank when present
    - isrc accepted as free-form text; the service validates and normalizes it
    - SongResponse exposes canonical and display ISRC plus derived country/year
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from sodav.core.isrc import country_of, format_isrc, year_of
from sodav.schemas.common import Pagination


def _strip_required(v: str | None) -> str | None:
    if v is None:
        return v
    v = v.strip()
    if not v:
        raise ValueError("cannot be empty or whitespace")
    return v


class SongCreate(BaseModel):
    title: str = Field(min_length=1, max_length=300)
    artist: str = Field(min_length=1, max_length=300)
    album: str | None = Field(None, max_length=300)
    label: str | None = Field(None, max_length=200)
    isrc: str | None = Field(None, max_length=32)
    duration_seconds: int | None = Field(None, ge=0)
    release_year: int | None = Field(None, ge=1900, le=2100)

    @field_validator("title", "artist")
    @classmethod
    def strip_required(cls, v: str | None) -> str | None:
        return _strip_required(v)


class SongUpdate(BaseModel):
    """Partial update — only fields present in the body are applied."""
    title: str | None = Field(None, min_length=1, max_length=300)
    artist: str | None = Field(None, min_length=1, max_length=300)
    album: str | None = Field(None, max_length=300)
    label: str | None = Field(None, max_length=200)
    isrc: str | None = Field(None, max_length=32)
    duration_seconds: int | None = Field(None, ge=0)
    release_year: int | None = Field(None, ge=1900, le=2100)

    @field_validator("title", "artist")
    @classmethod
    def strip_required(cls, v: str | None) -> str | None:
        return _strip_required(v)


class SongResponse(BaseModel):
    id: UUID
    title: str
    artist: str
    album: str | None = None
    label: str | None = None
    isrc: str | None = None
    isrc_display: str | None = None
    isrc_country: str | None = None
    isrc_year: int | None = None
    duration_seconds: int | None = None
    release_year: int | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, song) -> "SongResponse":
        return cls(
            id=song.id,
            title=song.title,
            artist=song.artist,
            album=song.album,
            label=song.label,
            isrc=song.isrc,
            isrc_display=format_isrc(song.isrc) if song.isrc else None,
            isrc_country=country_of(song.isrc),
            isrc_year=year_of(song.isrc),
            duration_seconds=song.duration_seconds,
            release_year=song.release_year,
            created_at=song.created_at,
            updated_at=song.updated_at,
        )


class SongPage(BaseModel):
    songs: list[SongResponse]
    pagination: Pagination
