"""User ORM — local profile for accounts authenticated by the identity provider.

Invariants:
    - id equals the identity provider's user id (no separate mapping table)
    - role is one of UserRole values
    - rows are created by account provisioning, never by the access chain
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from sodav.db.base import Base


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True)
    full_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    organization: Mapped[str | None] = mapped_column(String(200), nullable=True)
    role: Mapped[str] = mapped_column(
        String(20), nullable=False, default="user",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    # Not loaded with the profile; the access chain never reads it
    api_keys: Mapped[list["ApiKey"]] = relationship(
        "ApiKey", back_populates="user", cascade="all, delete-orphan",
    )

    def to_profile(self) -> dict:
        """Profile fields merged into the request identity."""
        return {
            "id": str(self.id),
            "email": self.email,
            "full_name": self.full_name,
            "organization": self.organization,
            "role": self.role,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
