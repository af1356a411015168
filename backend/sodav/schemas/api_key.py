"""API Key Schemas — issuance request and listing/creation responses.

Invariants:
    - ApiKeyCreate.permissions: at least one non-blank permission, deduplicated
    - ApiKeySummary never carries the raw key, only key_prefix + "..."
    - ApiKeyCreated carries the raw key; it is returned once, at creation
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator


class ApiKeyCreate(BaseModel):
    """API key issuance — validates name and permission list."""
    name: str = Field(min_length=1, max_length=100)
    permissions: list[str] = Field(min_length=1, max_length=32)
    expires_at: datetime | None = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty or whitespace")
        return v

    @field_validator("permissions")
    @classmethod
    def clean_permissions(cls, v: list[str]) -> list[str]:
        cleaned = list(dict.fromkeys(p.strip() for p in v if p and p.strip()))
        if not cleaned:
            raise ValueError("permissions must contain at least one value")
        return cleaned


class ApiKeySummary(BaseModel):
    """Listed key — masked."""
    id: UUID
    name: str
    key: str
    key_prefix: str
    permissions: list[str]
    active: bool
    created_at: datetime
    expires_at: datetime | None = None
    last_used_at: datetime | None = None


class ApiKeyCreated(ApiKeySummary):
    """Freshly issued key — `key` is the full raw value."""


class ApiKeyOwner(BaseModel):
    id: str
    email: str | None = None
    full_name: str | None = None
    role: str


class ApiKeyTestResponse(BaseModel):
    """Result of GET /api-keys/test."""
    success: bool = True
    message: str = "API key is valid"
    user: ApiKeyOwner
    permissions: list[str]
