"""ApiKey ORM — long-lived credentials scoped to a set of permissions.

Invariants:
    - key_hash is the SHA-256 hex digest of the raw key; the raw key is never stored
    - key_prefix (first 8 chars) is the only part of the key shown after creation
    - expires_at NULL means the key never expires
    - last_used_at is best-effort and last-write-wins

Design Decisions:
    - Lookup by hash: a leaked database dump does not leak usable keys
    - permissions as JSON list: small, read whole, no join table needed
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Boolean, DateTime, ForeignKey, JSON
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from sodav.db.base import Base


class ApiKey(Base):
    __tablename__ = "api_keys"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    key_hash: Mapped[str] = mapped_column(
        String(64), nullable=False, unique=True, index=True,
    )
    key_prefix: Mapped[str] = mapped_column(String(8), nullable=False)
    permissions: Mapped[list] = mapped_column(
        JSON, nullable=False, default=list,
    )
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    expires_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    last_used_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    user: Mapped["User"] = relationship("User", back_populates="api_keys")
