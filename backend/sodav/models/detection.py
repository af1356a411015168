"""Detection ORM — one airplay of a recording on a channel, and its manual corrections.

Invariants:
    - isrc is the canonical ISRC the recognition service reported, never rewritten
    - song_id is the catalog song the detection currently points to; NULL when the
      ISRC matched nothing and no correction has been applied yet
    - Every manual correction is kept: previous_song_id records what it replaced
    - Relationships never lazy-load; services load them explicitly

Design Decisions:
    - Deleting a song nulls the reference instead of deleting airplay history
    - api_key_id has no FK: revoking a key must not touch history
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import String, Float, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from sodav.db.base import Base


class Detection(Base):
    __tablename__ = "detections"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    channel_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("channels.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    song_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("songs.id", ondelete="SET NULL"),
        nullable=True, index=True,
    )
    provider: Mapped[str] = mapped_column(String(20), nullable=False)
    isrc: Mapped[str] = mapped_column(String(12), nullable=False, index=True)
    confidence: Mapped[float | None] = mapped_column(Float, nullable=True)
    played_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True,
    )
    api_key_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    channel: Mapped["Channel"] = relationship("Channel", lazy="raise")
    song: Mapped[Optional["Song"]] = relationship("Song", lazy="raise")


class ManualCorrection(Base):
    __tablename__ = "manual_corrections"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    detection_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("detections.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    previous_song_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("songs.id", ondelete="SET NULL"),
        nullable=True,
    )
    corrected_song_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("songs.id", ondelete="SET NULL"),
        nullable=True,
    )
    reason: Mapped[str] = mapped_column(String(500), nullable=False)
    corrected_by: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
