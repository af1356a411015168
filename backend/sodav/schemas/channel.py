"""Channel Schemas — monitored stream request/response models.

Invariants:
    - name stripped and non-blank
    - stream_url and logo_url must be http(s) URLs
    - type and status are ChannelType / ChannelStatus values
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from sodav.core.domain_types import ChannelStatus, ChannelType
from sodav.schemas.common import Pagination


def _http_url(v: str | None) -> str | None:
    if v is None:
        return v
    v = v.strip()
    if not v.lower().startswith(("http://", "https://")):
        raise ValueError("must be an http(s) URL")
    return v


def _strip_name(v: str | None) -> str | None:
    if v is None:
        return v
    v = v.strip()
    if not v:
        raise ValueError("cannot be empty or whitespace")
    return v


class ChannelCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    type: ChannelType
    stream_url: str = Field(max_length=1000)
    logo_url: str | None = Field(None, max_length=1000)
    description: str | None = Field(None, max_length=2000)
    country: str | None = Field(None, max_length=100)
    language: str | None = Field(None, max_length=100)
    status: ChannelStatus = ChannelStatus.ACTIVE

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str | None) -> str | None:
        return _strip_name(v)

    @field_validator("stream_url", "logo_url")
    @classmethod
    def http_url(cls, v: str | None) -> str | None:
        return _http_url(v)


class ChannelUpdate(BaseModel):
    """Partial update — only fields present in the body are applied."""
    name: str | None = Field(None, min_length=1, max_length=200)
    type: ChannelType | None = None
    stream_url: str | None = Field(None, max_length=1000)
    logo_url: str | None = Field(None, max_length=1000)
    description: str | None = Field(None, max_length=2000)
    country: str | None = Field(None, max_length=100)
    language: str | None = Field(None, max_length=100)
    status: ChannelStatus | None = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str | None) -> str | None:
        return _strip_name(v)

    @field_validator("stream_url", "logo_url")
    @classmethod
    def http_url(cls, v: str | None) -> str | None:
        return _http_url(v)


class ChannelResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    type: str
    stream_url: str
    logo_url: str | None = None
    description: str | None = None
    country: str | None = None
    language: str | None = None
    status: str
    created_at: datetime
    updated_at: datetime


class ChannelPage(BaseModel):
    channels: list[ChannelResponse]
    pagination: Pagination
