# app/schemas/voice.py

from pydantic import BaseModel, ConfigDict, Field, HttpUrl, constr, field_serializer, field_validator
from typing import Optional, Literal
from uuid import UUID
from datetime import datetime, timezone


Gender = Literal["male", "female", "neutral"]


class VoiceCreate(BaseModel):
    # Unknown fields are rejected rather than silently dropped
    model_config = ConfigDict(extra="forbid")

    name: constr(min_length=1, max_length=100) = Field(..., description="Display name of the voice.") # pyright: ignore[reportInvalidTypeForm]
    description: Optional[constr(max_length=500)] = Field(None, description="What the voice sounds like.") # pyright: ignore[reportInvalidTypeForm]
    gender: Optional[Gender] = Field(None, description="Perceived gender of the voice.")
    language: Optional[constr(max_length=20)] = Field(None, description="BCP 47 language tag, e.g. en-US.") # pyright: ignore[reportInvalidTypeForm]
    preview_url: Optional[HttpUrl] = Field(None, description="Link to a short audio sample.")
    is_active: bool = Field(True, description="Inactive voices are hidden from default listings.")


class VoiceUpdate(BaseModel):
    """Partial update; only fields present in the request body are changed."""
    model_config = ConfigDict(extra="forbid")

    name: Optional[constr(min_length=1, max_length=100)] = None # pyright: ignore[reportInvalidTypeForm]
    description: Optional[constr(max_length=500)] = None # pyright: ignore[reportInvalidTypeForm]
    gender: Optional[Gender] = None
    language: Optional[constr(max_length=20)] = None # pyright: ignore[reportInvalidTypeForm]
    preview_url: Optional[HttpUrl] = None
    is_active: Optional[bool] = None

    @field_validator("name", "is_active")
    @classmethod
    def _not_null(cls, v):
        # Omit the field to leave it unchanged; null would violate NOT NULL columns
        if v is None:
            raise ValueError("may be omitted but not null")
        return v


class VoiceRead(BaseModel):
    """
    DTO for reading a voice from the API.
    Timestamps are serialized in UTC with a 'Z' suffix so cached and fresh
    responses are byte-identical.
    """
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    description: Optional[str] = None
    gender: Optional[Gender] = None
    language: Optional[str] = None
    preview_url: Optional[str] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    @field_serializer("created_at", "updated_at")
    def _ser_timestamps(self, v: datetime) -> str:
        if v.tzinfo is None:
            v = v.replace(tzinfo=timezone.utc)
        v = v.astimezone(timezone.utc)
        return v.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class VoiceList(BaseModel):
    items: list[VoiceRead]
    total: int
    skip: int
    limit: int
