"""Profile Schemas — the caller's own account as seen by the API."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator


class ProfileResponse(BaseModel):
    id: str
    email: str | None = None
    full_name: str | None = None
    organization: str | None = None
    role: str
    created_at: datetime | None = None

    @classmethod
    def from_user(cls, user) -> "ProfileResponse":
        """From a ResolvedUser; created_at comes from the merged profile."""
        return cls(
            id=user.id,
            email=user.email,
            full_name=user.full_name,
            organization=user.organization,
            role=user.role,
            created_at=user.profile.get("created_at"),
        )


class ProfileUpdate(BaseModel):
    """Self-service fields; role and email are not editable here."""
    full_name: str | None = Field(None, max_length=200)
    organization: str | None = Field(None, max_length=200)

    @field_validator("full_name", "organization")
    @classmethod
    def strip_blank(cls, v: str | None) -> str | None:
        if v is None:
            return v
        return v.strip() or None
